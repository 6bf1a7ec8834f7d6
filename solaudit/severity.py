from __future__ import annotations
from collections import defaultdict
from typing import Dict, Iterable, List

from . import SEVERITY_ORDER, Finding, Severity

# Report order: most severe first
DISPLAY_ORDER = tuple(reversed(SEVERITY_ORDER))


def parse(value: Severity | str) -> Severity:
    if isinstance(value, Severity):
        return value
    try:
        return Severity(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(s.value for s in SEVERITY_ORDER)
        raise ValueError(f"Unknown severity '{value}'. Allowed: {allowed}") from None


def rank(value: Severity | str) -> int:
    """Total order over severities: low=0 < medium=1 < high=2 < critical=3."""
    return parse(value).rank


def meets(value: Severity | str, minimum: Severity | str) -> bool:
    return rank(value) >= rank(minimum)


def group_by_severity(findings: Iterable[Finding]) -> Dict[Severity, List[Finding]]:
    """Bucket findings most-severe-first, keeping order inside each bucket. Empty buckets are dropped."""
    buckets: Dict[Severity, List[Finding]] = defaultdict(list)
    for f in findings:
        buckets[f.severity].append(f)
    return {sev: buckets[sev] for sev in DISPLAY_ORDER if buckets.get(sev)}
