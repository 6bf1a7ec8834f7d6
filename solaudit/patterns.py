from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Tuple

from . import Category, GasPattern, Pattern, Severity
from .errors import PatternError

SECURITY = Category.SECURITY
BEST_PRACTICE = Category.BEST_PRACTICE

# (name, category, severity, regex, description, recommendation)
# Order is significant: findings are reported in this order.
VULNERABILITY_SIGNATURES: Tuple[Tuple[str, Category, Severity, str, str, str], ...] = (
    (
        "Reentrancy", SECURITY, Severity.CRITICAL,
        r"\.call\{.*value.*\}\s*\(|\.call\.value\s*\(",
        "External call before state update may allow reentrancy",
        "Use checks-effects-interactions pattern or ReentrancyGuard",
    ),
    (
        # Heuristic: nested parentheses in the argument list and calls split
        # across lines are missed.
        "Unchecked Return Value", SECURITY, Severity.HIGH,
        r"\.(call|send|transfer)\s*\([^)]*\)\s*;(?!\s*require)",
        "Return value of low-level call not checked",
        'Check return value: require(success, "Call failed")',
    ),
    (
        "tx.origin Authentication", SECURITY, Severity.HIGH,
        r"tx\.origin\s*==|require\s*\(\s*tx\.origin",
        "Using tx.origin for authentication is vulnerable to phishing",
        "Use msg.sender instead of tx.origin",
    ),
    (
        "Floating Pragma", BEST_PRACTICE, Severity.LOW,
        r"pragma\s+solidity\s*\^",
        "Using floating pragma allows different compiler versions",
        "Lock pragma to specific version: pragma solidity 0.8.20;",
    ),
    (
        "Unprotected Selfdestruct", SECURITY, Severity.CRITICAL,
        r"selfdestruct\s*\(|suicide\s*\(",
        "selfdestruct can be called, potentially destroying contract",
        "Add access control or remove selfdestruct",
    ),
    (
        # Only the pragma is inspected; SafeMath usage is not.
        "Potential Integer Overflow", SECURITY, Severity.HIGH,
        r"pragma\s+solidity\s*[\^~]?0\.[0-7]\.",
        "Solidity < 0.8 requires SafeMath for overflow protection",
        "Upgrade to Solidity 0.8+ or use SafeMath",
    ),
    (
        "Dangerous Delegatecall", SECURITY, Severity.CRITICAL,
        r"delegatecall\s*\(",
        "Delegatecall can execute arbitrary code in caller context",
        "Validate target address, avoid user-controlled delegatecall",
    ),
    (
        # `now` is matched as a whole word only, unlike a bare substring
        # search, so identifiers such as `known` stay quiet.
        "Timestamp Dependence", SECURITY, Severity.MEDIUM,
        r"block\.timestamp|\bnow\b",
        "block.timestamp can be manipulated by miners",
        "Avoid using for critical logic, use block.number for intervals",
    ),
    (
        "Weak Randomness", SECURITY, Severity.HIGH,
        r"keccak256\s*\([^)]*block\.(timestamp|number|difficulty|prevrandao)",
        "Block variables are predictable, not suitable for randomness",
        "Use Chainlink VRF or commit-reveal scheme",
    ),
    (
        # The guard must appear before the first closing brace of the body.
        "Missing Zero Address Check", BEST_PRACTICE, Severity.MEDIUM,
        r"function\s+\w+\s*\([^)]*address\s+\w+[^)]*\)\s*(?:public|external)[^{]*\{"
        r"(?![^}]*require\s*\([^)]*!=\s*address\(0\))",
        "Address parameters not validated for zero address",
        'Add require(addr != address(0), "Zero address")',
    ),
    (
        "Inline Assembly", SECURITY, Severity.MEDIUM,
        r"assembly\s*\{",
        "Inline assembly bypasses Solidity safety checks",
        "Document thoroughly and review carefully",
    ),
    (
        "Force Send Ether", SECURITY, Severity.MEDIUM,
        r"this\.balance|address\(this\)\.balance",
        "Contract balance can be manipulated via selfdestruct",
        "Track deposits with internal accounting",
    ),
    (
        "Private State Variable", BEST_PRACTICE, Severity.LOW,
        r"private\s+\w+\s+\w+\s*=",
        "Private variables are still readable on-chain",
        "Never store secrets in contract storage",
    ),
    (
        "Missing Event Emission", BEST_PRACTICE, Severity.LOW,
        r"function\s+\w+\s*\([^)]*\)\s*(?:public|external)[^}]*\b(owner|admin)\s*=",
        "State changes should emit events for off-chain tracking",
        "Add event emissions for important state changes",
    ),
    (
        "Uninitialized Storage Pointer", SECURITY, Severity.HIGH,
        r"\bstruct\s+\w+\s+storage\s+\w+\s*;",
        "Uninitialized storage pointers can overwrite storage",
        "Initialize storage pointers or use memory",
    ),
)

# (title, regex, description, savings). Presence checks: one hit per file at most.
GAS_SIGNATURES: Tuple[Tuple[str, str, str, str], ...] = (
    (
        "Use immutable for constants set in constructor",
        r"public\s+(\w+)\s+(\w+)\s*;(?=[^}]*constructor[^}]*\2\s*=)",
        "Variables set once in constructor can be immutable",
        "~2100 gas per read",
    ),
    (
        "Cache array length in loops",
        r"for\s*\([^;]*;\s*\w+\s*<\s*\w+\.length\s*;",
        "Reading array.length in each iteration costs extra gas",
        "~100 gas per iteration",
    ),
    (
        "Use ++i instead of i++",
        r"\w+\+\+(?!\s*\))|(?<!\()\+\+\w+",
        "Pre-increment is cheaper than post-increment",
        "~5 gas per operation",
    ),
    (
        "Use calldata for external function arrays",
        r"function\s+\w+\s*\([^)]*\[\]\s+memory",
        "calldata is cheaper than memory for read-only arrays",
        "~600 gas per call",
    ),
    (
        "Pack struct variables",
        r"struct\s+\w+\s*\{[^}]*uint256[^}]*uint8[^}]*uint256",
        "Group smaller types together to use fewer storage slots",
        "~20000 gas per slot saved",
    ),
    (
        "Use custom errors instead of strings",
        r'require\s*\([^,]+,\s*"[^"]+"\)',
        "Custom errors are cheaper than string messages",
        "~50 gas per error",
    ),
    (
        "Avoid zero to non-zero storage writes",
        r"(\w+)\s*=\s*0\s*;[^}]*\1\s*=",
        "Setting storage from 0 to non-zero is expensive",
        "~20000 gas difference",
    ),
    (
        "Use unchecked for safe arithmetic",
        r"for\s*\([^)]*\)\s*\{(?![^}]*unchecked)",
        "Loop counters rarely overflow, can use unchecked",
        "~30 gas per operation",
    ),
)


@dataclass(frozen=True)
class Catalog:
    vulnerabilities: Tuple[Pattern, ...]
    gas: Tuple[GasPattern, ...]

    def active(self, include_best_practices: bool = False) -> Iterator[Pattern]:
        """Vulnerability patterns to run, in catalog order."""
        for p in self.vulnerabilities:
            if p.category is Category.BEST_PRACTICE and not include_best_practices:
                continue
            yield p


def _compile(name: str, source: str) -> re.Pattern:
    try:
        return re.compile(source)
    except re.error as exc:
        raise PatternError(name, str(exc)) from exc


def build_catalog(
    vulnerabilities: Iterable[Tuple[str, Category, Severity, str, str, str]] = VULNERABILITY_SIGNATURES,
    gas: Iterable[Tuple[str, str, str, str]] = GAS_SIGNATURES,
) -> Catalog:
    vulns = tuple(
        Pattern(
            name=name,
            category=Category(category),
            severity=Severity(severity),
            regex=_compile(name, source),
            description=description,
            recommendation=recommendation,
        )
        for name, category, severity, source, description, recommendation in vulnerabilities
    )
    gas_patterns = tuple(
        GasPattern(title=title, regex=_compile(title, source), description=description, savings=savings)
        for title, source, description, savings in gas
    )
    return Catalog(vulnerabilities=vulns, gas=gas_patterns)


DEFAULT_CATALOG = build_catalog()


def get_patterns(catalog: Catalog = DEFAULT_CATALOG) -> List[Dict[str, str]]:
    """Read-only listing of the vulnerability catalog."""
    return [
        {"name": p.name, "category": p.category.value, "severity": p.severity.value}
        for p in catalog.vulnerabilities
    ]
