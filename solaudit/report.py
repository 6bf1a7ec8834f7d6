from __future__ import annotations
import json
from pathlib import Path
from typing import List, Sequence, Tuple

from . import AuditResult, Severity
from .errors import OutputError
from .severity import group_by_severity

FORMATS = ("table", "json", "markdown")
CODE_EXCERPT = 60


class _Palette:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"
    BRIGHT_CYAN = "\033[96m"
    GREY = "\033[90m"


SEVERITY_STYLE = {
    Severity.CRITICAL: (_Palette.RED, _Palette.BOLD),
    Severity.HIGH: (_Palette.YELLOW,),
    Severity.MEDIUM: (_Palette.BLUE,),
    Severity.LOW: (_Palette.GREY,),
}


def _clr(enabled: bool, text: str, *styles: str) -> str:
    if not enabled or not styles:
        return text
    return "".join(styles) + text + _Palette.RESET


def _box(color: bool, columns: Sequence[Tuple[str, int, Tuple[str, ...]]]) -> List[str]:
    """Single-row ASCII table: one (header, value, styles) triple per column."""
    widths = [max(len(h), len(str(v))) for h, v, _ in columns]
    sep = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
    head = "|" + "|".join(
        f" {_clr(color, h.ljust(w), *styles)} " for (h, _, styles), w in zip(columns, widths)
    ) + "|"
    row = "|" + "|".join(f" {str(v).rjust(w)} " for (_, v, _), w in zip(columns, widths)) + "|"
    return [sep, head, sep, row, sep]


def to_table(result: AuditResult, color: bool = False) -> str:
    H = _Palette
    s = result.summary
    out: List[str] = [_clr(color, "Audit Summary", H.BRIGHT_CYAN, H.BOLD), ""]
    out += _box(color, [
        ("Critical", s.critical, SEVERITY_STYLE[Severity.CRITICAL]),
        ("High", s.high, SEVERITY_STYLE[Severity.HIGH]),
        ("Medium", s.medium, SEVERITY_STYLE[Severity.MEDIUM]),
        ("Low", s.low, SEVERITY_STYLE[Severity.LOW]),
        ("Gas", s.gas, (H.GREEN,)),
    ])

    if not result.issues:
        out += ["", _clr(color, "No security issues found!", H.GREEN)]
        return "\n".join(out)

    out += ["", _clr(color, "Issues Found", H.BRIGHT_CYAN, H.BOLD)]
    for level, items in group_by_severity(result.issues).items():
        style = SEVERITY_STYLE[level]
        out += ["", _clr(color, f"--- {level.value.upper()} ({len(items)}) ---", *style)]
        for f in items:
            out.append(f"{_clr(color, '*', *style)} {_clr(color, f.title, H.BOLD)}")
            out.append(_clr(color, f"  File: {f.file}:{f.line}", H.GREY))
            out.append(f"  {f.description}")
            if f.code:
                excerpt = f.code if len(f.code) <= CODE_EXCERPT else f.code[:CODE_EXCERPT] + "..."
                out.append(_clr(color, f"  Code: {excerpt}", H.DIM))
            out.append(_clr(color, f"  Fix: {f.recommendation}", H.GREEN))
    return "\n".join(out)


def to_markdown(result: AuditResult) -> str:
    s = result.summary
    lines: List[str] = [
        "# Smart Contract Security Audit Report",
        "",
        f"**Files Analyzed:** {len(result.files)}",
        f"**Issues Found:** {len(result.issues)}",
        "",
        "## Summary",
        "",
        "| Severity | Count |",
        "|----------|-------|",
        f"| Critical | {s.critical} |",
        f"| High | {s.high} |",
        f"| Medium | {s.medium} |",
        f"| Low | {s.low} |",
        f"| Gas | {s.gas} |",
        "",
        "## Files Analyzed",
        "",
    ]
    lines += [f"- `{name}`" for name in result.files]
    lines.append("")

    if result.issues:
        lines += ["## Findings", ""]
        for level, items in group_by_severity(result.issues).items():
            lines += [f"### {level.value.capitalize()} Severity", ""]
            for i, f in enumerate(items, start=1):
                lines += [
                    f"#### {i}. {f.title}",
                    "",
                    f"**Location:** `{f.file}:{f.line}`",
                    "",
                    f"**Description:** {f.description}",
                    "",
                ]
                if f.code:
                    lines += ["```solidity", f.code, "```", ""]
                lines += [f"**Recommendation:** {f.recommendation}", ""]

    return "\n".join(lines)


def to_json(result: AuditResult) -> str:
    return json.dumps(result.to_dict(), indent=2)


def render(result: AuditResult, fmt: str = "table", color: bool = False) -> str:
    if fmt == "json":
        return to_json(result)
    if fmt == "markdown":
        return to_markdown(result)
    if fmt == "table":
        return to_table(result, color=color)
    raise ValueError(f"Unknown report format '{fmt}'. Allowed: {', '.join(FORMATS)}")


def save_report(text: str, path: str | Path) -> Path:
    out = Path(path)
    try:
        out.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise OutputError(out, exc.strerror or str(exc)) from exc
    return out
