from __future__ import annotations

import pytest

from conftest import CLEAN, GASSY, VULNERABLE
from solaudit import Category, Severity
from solaudit.matcher import line_of, split_lines
from solaudit.patterns import DEFAULT_CATALOG
from solaudit.scanner import analyze_contract, analyze_gas


def _titles(findings):
    return [f.title for f in findings]


@pytest.mark.parametrize("text", ["", "contract C {}", CLEAN, "// known issue\nuint x = 1;"])
def test_no_signature_means_no_findings(text):
    assert analyze_contract(text, "a.sol", include_best_practices=True, include_gas=True) == []


def test_vulnerable_contract_catalog_order_and_lines():
    findings = analyze_contract(VULNERABLE, "Bank.sol")
    assert [(f.title, f.line) for f in findings] == [
        ("Reentrancy", 8),
        ("tx.origin Authentication", 14),
        ("Unprotected Selfdestruct", 15),
        ("Timestamp Dependence", 19),
        ("Weak Randomness", 19),
    ]
    assert all(f.file == "Bank.sol" for f in findings)
    assert all(f.category is Category.SECURITY for f in findings)


def test_lines_in_range_and_code_matches_pattern():
    findings = analyze_contract(VULNERABLE, "Bank.sol", include_best_practices=True)
    n_lines = len(VULNERABLE.split("\n"))
    by_name = {p.name: p for p in DEFAULT_CATALOG.vulnerabilities}
    assert findings
    for f in findings:
        assert 1 <= f.line <= n_lines
        assert f.code == VULNERABLE.split("\n")[f.line - 1].strip()
        assert by_name[f.title].regex.search(f.code)


def test_floating_pragma_scenario():
    findings = analyze_contract("pragma solidity ^0.8.0;\ncontract C {}", "C.sol", include_best_practices=True)
    assert len(findings) == 1
    f = findings[0]
    assert f.title == "Floating Pragma"
    assert f.severity is Severity.LOW
    assert f.category is Category.BEST_PRACTICE
    assert f.line == 1


def test_reentrancy_scenario():
    findings = analyze_contract('target.call{value: amt}("");', "R.sol")
    hits = [f for f in findings if f.title == "Reentrancy"]
    assert hits
    assert hits[0].severity is Severity.CRITICAL
    assert "call{value" in hits[0].code


def test_legacy_call_value_syntax():
    findings = analyze_contract("msg.sender.call.value(amount)();", "R.sol")
    assert "Reentrancy" in _titles(findings)


def test_selfdestruct_scenario():
    findings = analyze_contract("selfdestruct(owner);", "K.sol")
    assert len(findings) == 1
    assert findings[0].title == "Unprotected Selfdestruct"
    assert findings[0].severity is Severity.CRITICAL


def test_every_occurrence_reported_in_order():
    text = "selfdestruct(a);\nfoo();\nselfdestruct(b);\nsuicide(c);"
    findings = analyze_contract(text, "K.sol")
    assert [f.line for f in findings] == [1, 3, 4]
    assert [f.code for f in findings] == ["selfdestruct(a);", "selfdestruct(b);", "suicide(c);"]


def test_same_line_matches_are_not_deduplicated():
    findings = analyze_contract("x = block.timestamp + block.timestamp;", "T.sol")
    assert _titles(findings) == ["Timestamp Dependence", "Timestamp Dependence"]


def test_repeat_scans_are_independent():
    first = analyze_contract(VULNERABLE, "a.sol")
    analyze_contract(CLEAN, "b.sol")
    again = analyze_contract(VULNERABLE, "a.sol")
    assert first == again


def test_unchecked_send_flagged_but_checked_send_is_not():
    unchecked = "function pay(address to) internal {\n    payable(to).send(1);\n}"
    checked = "function pay(address to) internal {\n    bool ok = payable(to).send(1);\n    require(ok);\n}"
    assert "Unchecked Return Value" in _titles(analyze_contract(unchecked, "p.sol"))
    assert "Unchecked Return Value" not in _titles(analyze_contract(checked, "p.sol"))


def test_old_compiler_pragma_flags_overflow():
    findings = analyze_contract("pragma solidity ^0.6.12;", "o.sol")
    assert _titles(findings) == ["Potential Integer Overflow"]
    assert findings[0].severity is Severity.HIGH


def test_now_alias_counts_as_timestamp():
    findings = analyze_contract("if (now > deadline) { revert(); }", "t.sol")
    assert _titles(findings) == ["Timestamp Dependence"]


def test_assembly_balance_delegatecall_storage():
    text = (
        "assembly { let x := 1 }\n"
        "uint b = address(this).balance;\n"
        "impl.delegatecall(data);\n"
        "struct Info storage info;\n"
    )
    assert _titles(analyze_contract(text, "m.sol")) == [
        "Dangerous Delegatecall",
        "Inline Assembly",
        "Force Send Ether",
        "Uninitialized Storage Pointer",
    ]


def test_zero_address_guard_suppresses_best_practice():
    unguarded = "function setOwner(address newOwner) external {\n    owner = newOwner;\n}"
    guarded = (
        "function setOwner(address newOwner) external {\n"
        '    require(newOwner != address(0), "zero");\n'
        "    owner = newOwner;\n"
        "}"
    )
    titles = _titles(analyze_contract(unguarded, "o.sol", include_best_practices=True))
    assert titles == ["Missing Zero Address Check", "Missing Event Emission"]
    titles = _titles(analyze_contract(guarded, "o.sol", include_best_practices=True))
    assert titles == ["Missing Event Emission"]


def test_best_practice_never_reported_unless_requested():
    text = VULNERABLE + "\nuint256 private constant SECRET = 42;\nfunction setAdmin(address a) public { admin = a; }\n"
    findings = analyze_contract(text, "v.sol", include_gas=True)
    assert all(f.category is not Category.BEST_PRACTICE for f in findings)
    with_bp = analyze_contract(text, "v.sol", include_best_practices=True)
    assert {"Floating Pragma", "Private State Variable"} <= set(_titles(with_bp))


def test_gas_never_reported_unless_requested():
    findings = analyze_contract(GASSY, "g.sol", include_best_practices=True)
    assert all(f.category is not Category.GAS for f in findings)


def test_cache_length_gas_scenario():
    findings = analyze_contract("for (uint i = 0; i < arr.length; i++)", "l.sol", include_gas=True)
    gas = [f for f in findings if f.title == "Cache array length in loops"]
    assert len(gas) == 1
    f = gas[0]
    assert f.category is Category.GAS
    assert f.severity is Severity.LOW
    assert f.line == 0
    assert f.code is None and f.is_file_level
    assert f.recommendation == "Potential savings: ~100 gas per iteration"


def test_gas_findings_follow_vulnerability_findings():
    text = "selfdestruct(a);\n" + GASSY
    findings = analyze_contract(text, "g.sol", include_gas=True)
    categories = [f.category for f in findings]
    assert categories[0] is Category.SECURITY
    first_gas = categories.index(Category.GAS)
    assert all(c is Category.GAS for c in categories[first_gas:])


def test_analyze_gas_presence_checks_in_catalog_order():
    titles = [g.title for g in analyze_gas(GASSY)]
    assert titles == [
        "Cache array length in loops",
        "Use calldata for external function arrays",
        "Pack struct variables",
        "Use custom errors instead of strings",
        "Use unchecked for safe arithmetic",
    ]


def test_analyze_gas_reports_each_idiom_once():
    text = "\n".join(f'require(x{i} > 0, "bad {i}");' for i in range(5))
    hits = analyze_gas(text)
    assert [g.title for g in hits].count("Use custom errors instead of strings") == 1
    assert hits[0].savings == "~50 gas per error"


def test_line_helpers():
    text = "a\nb\r\nc"
    assert line_of(text, 0) == 1
    assert line_of(text, text.index("c")) == 3
    assert split_lines(text) == ["a", "b\r", "c"]


def test_now_inside_identifier_is_not_timestamp():
    text = "uint known = 1;\nbool nowhere = snowfall > 0;"
    assert analyze_contract(text, "t.sol") == []
