from __future__ import annotations
from typing import List

import streamlit as st
try:
    from . import SEVERITY_ORDER, AuditResult, Finding, Severity
    from .auditor import filter_by_severity, summarize
    from .report import to_markdown
    from .scanner import analyze_contract
    from .severity import group_by_severity
except ImportError:
    # `streamlit run solaudit/ui.py` executes this file as a script
    import sys, pathlib
    ROOT = pathlib.Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(ROOT))
    from solaudit import SEVERITY_ORDER, AuditResult, Finding, Severity
    from solaudit.auditor import filter_by_severity, summarize
    from solaudit.report import to_markdown
    from solaudit.scanner import analyze_contract
    from solaudit.severity import group_by_severity

st.set_page_config(page_title="Solidity Auditor", layout="wide", initial_sidebar_state="expanded")


def _init_state() -> None:
    st.session_state.setdefault("contract_text", "")
    st.session_state.setdefault("file_label", "inline.sol")
    st.session_state.setdefault("result", None)


def _audit(text: str, label: str, minimum: str, gas: bool, best: bool) -> AuditResult:
    findings = analyze_contract(text, label, include_best_practices=best, include_gas=gas)
    issues = filter_by_severity(findings, minimum)
    return AuditResult(files=(label,), issues=tuple(issues), summary=summarize(issues))


def _render_summary(result: AuditResult) -> None:
    s = result.summary
    cols = st.columns(5)
    for col, (label, value) in zip(cols, [("Critical", s.critical), ("High", s.high),
                                          ("Medium", s.medium), ("Low", s.low), ("Gas", s.gas)]):
        col.metric(label, value)


def _render_findings(findings: List[Finding]) -> None:
    for level, items in group_by_severity(findings).items():
        st.markdown(f"### {level.value.capitalize()} ({len(items)})")
        for f in items:
            loc = "file-level" if f.is_file_level else f"line {f.line}"
            msg = f"**{f.title}** ({loc}): {f.description}"
            if level is Severity.CRITICAL or level is Severity.HIGH:
                st.error(msg)
            elif level is Severity.MEDIUM:
                st.warning(msg)
            else:
                st.info(msg)
            if f.code:
                st.code(f.code, language="solidity")
            st.caption(f.recommendation)


_init_state()

# ---------------- sidebar ----------------

with st.sidebar:
    st.title("Solidity Auditor")
    source = st.radio("Source", ["Paste text", "Upload file"], index=0)
    if source == "Upload file":
        uploaded = st.file_uploader("Upload contract (.sol)", type=["sol"], key="uploader")
        if uploaded is not None and st.button("Load file", use_container_width=True):
            st.session_state["contract_text"] = uploaded.getvalue().decode("utf-8", errors="replace")
            st.session_state["file_label"] = uploaded.name
    st.markdown("---")
    min_severity = st.selectbox("Minimum severity", [s.value for s in SEVERITY_ORDER], index=0)
    include_gas = st.checkbox("Gas optimizations", value=False)
    include_best = st.checkbox("Best practices", value=False)

# ---------------- main page ----------------

st.header("Smart Contract Pattern Audit")
st.caption("Regex signatures only: expect false positives and misses. Not a substitute for a manual review.")

text = st.text_area(
    "Contract source",
    value=st.session_state["contract_text"],
    height=360,
    placeholder="pragma solidity ^0.8.20;\ncontract Token { ... }",
)

if st.button("Audit", type="primary"):
    st.session_state["contract_text"] = text
    st.session_state["result"] = _audit(
        text, st.session_state["file_label"], min_severity, include_gas, include_best,
    )

result = st.session_state["result"]
if result is not None:
    st.subheader("Summary")
    _render_summary(result)
    st.subheader("Findings")
    if result.issues:
        _render_findings(list(result.issues))
    else:
        st.success("No security issues found!")
    st.download_button(
        "Download markdown report",
        data=to_markdown(result),
        file_name="audit-report.md",
        mime="text/markdown",
    )
else:
    st.info("Paste or load a contract, pick the checks in the sidebar, then click **Audit**.")
