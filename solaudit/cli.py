from __future__ import annotations
import argparse
import logging
import os
import sys
from typing import Dict, List

import colorama

from . import AuditConfig, Category, SEVERITY_ORDER, Severity, __version__
from .auditor import audit_files, filter_by_severity, read_source
from .errors import AuditError
from .files import discover_sources
from .patterns import get_patterns
from .report import FORMATS, SEVERITY_STYLE, _clr, _Palette, render, save_report
from .scanner import analyze_contract, analyze_gas

logger = logging.getLogger(__name__)

SEVERITY_CHOICES = [s.value for s in SEVERITY_ORDER]
LISTABLE_CATEGORIES = [Category.SECURITY.value, Category.BEST_PRACTICE.value]


def _should_color(mode: str) -> bool:
    """Decide if we should emit ANSI colors."""
    if mode == "always":
        return True
    if mode == "never":
        return False
    # auto
    if os.environ.get("NO_COLOR"):
        return False
    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _fail(color: bool, message: str) -> int:
    print(_clr(color, message, _Palette.RED), file=sys.stderr)
    return 1


def cmd_audit(args: argparse.Namespace, color: bool) -> int:
    try:
        files = discover_sources(args.path, recursive=args.recursive)
        if not files:
            print(_clr(color, "No .sol files found", _Palette.YELLOW), file=sys.stderr)
            return 0
        config = AuditConfig(
            min_severity=args.severity,
            include_gas=args.gas,
            include_best_practices=args.best_practices,
            jobs=args.jobs,
        )
        logger.info("Auditing %d contract(s)...", len(files))
        result = audit_files(files, config)
    except AuditError as exc:
        return _fail(color, str(exc))

    logger.info("Audit complete: %d issues found", len(result.issues))
    print(render(result, args.output, color=color))

    if args.save:
        # saved reports never carry ANSI codes
        try:
            out = save_report(render(result, args.output), args.save)
        except AuditError as exc:
            return _fail(color, str(exc))
        print(_clr(color, f"Report saved to {out}", _Palette.GREY), file=sys.stderr)

    return 1 if result.has_critical else 0


def cmd_check(args: argparse.Namespace, color: bool) -> int:
    try:
        content = read_source(args.file)
    except AuditError as exc:
        return _fail(color, str(exc))

    issues = filter_by_severity(analyze_contract(content, args.file), Severity.MEDIUM)
    if not issues:
        print(_clr(color, "No major issues found", _Palette.GREEN))
        return 0
    for f in issues:
        print(_clr(color, f"[{f.severity.value.upper()}] {f.title}", *SEVERITY_STYLE[f.severity]))
        print(_clr(color, f"  Line {f.line}: {f.description}", _Palette.GREY))
    return 0


def cmd_patterns(args: argparse.Namespace, color: bool) -> int:
    H = _Palette
    patterns = get_patterns()
    if args.category:
        patterns = [p for p in patterns if p["category"] == args.category]

    by_category: Dict[str, List[Dict[str, str]]] = {}
    for p in patterns:
        by_category.setdefault(p["category"], []).append(p)

    print(_clr(color, "Vulnerability Patterns:", H.BOLD))
    for category, items in by_category.items():
        print()
        print(_clr(color, category.upper(), H.CYAN))
        for p in items:
            bullet = _clr(color, "*", *SEVERITY_STYLE[Severity(p["severity"])])
            print(f"  {bullet} {p['name']} ({p['severity']})")
    return 0


def cmd_gas(args: argparse.Namespace, color: bool) -> int:
    H = _Palette
    try:
        content = read_source(args.file)
    except AuditError as exc:
        return _fail(color, str(exc))

    hits = analyze_gas(content)
    print(_clr(color, "Gas Optimization Opportunities:", H.BOLD))
    if not hits:
        print(_clr(color, "- none", H.GREY))
        return 0
    for g in hits:
        print()
        print(_clr(color, g.title, H.YELLOW))
        print(_clr(color, f"   {g.description}", H.GREY))
        print(_clr(color, f"   Potential savings: {g.savings}", H.GREEN))
    return 0


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--color", choices=["auto", "always", "never"], default="auto",
                        help="Colorize output (default: auto)")
    common.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")

    ap = argparse.ArgumentParser(prog="solaudit", description="Solidity smart contract security auditor")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = ap.add_subparsers(dest="command", required=True)

    audit = sub.add_parser("audit", parents=[common], help="Audit Solidity contracts")
    audit.add_argument("path", help="Contract file or folder of .sol files")
    audit.add_argument("-r", "--recursive", action="store_true", help="Scan folders recursively")
    audit.add_argument("-s", "--severity", choices=SEVERITY_CHOICES, default="low",
                       help="Minimum severity to report (default: low)")
    audit.add_argument("--gas", action="store_true", help="Include gas optimization suggestions")
    audit.add_argument("--best-practices", action="store_true", help="Include best practice checks")
    audit.add_argument("-o", "--output", choices=FORMATS, default="table", help="Report format")
    audit.add_argument("--save", default=None, help="Also write the report to this file")
    audit.add_argument("-j", "--jobs", type=int, default=1, help="Files scanned in parallel (default: 1)")
    audit.set_defaults(func=cmd_audit)

    check = sub.add_parser("check", parents=[common], help="Quick security check on a single file")
    check.add_argument("file")
    check.set_defaults(func=cmd_check)

    pats = sub.add_parser("patterns", parents=[common], help="List vulnerability patterns checked")
    pats.add_argument("--category", choices=LISTABLE_CATEGORIES, default=None, help="Filter by category")
    pats.set_defaults(func=cmd_patterns)

    gas = sub.add_parser("gas", parents=[common], help="Gas optimization analysis")
    gas.add_argument("file")
    gas.set_defaults(func=cmd_gas)

    return ap


def main(argv: List[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose)

    color_enabled = _should_color(args.color) and getattr(args, "output", "table") == "table"
    if color_enabled:
        colorama.just_fix_windows_console()
    return args.func(args, color_enabled)


if __name__ == "__main__":
    raise SystemExit(main())
