from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, List, Sequence

from . import AuditConfig, AuditResult, Category, Finding, Severity, Summary
from . import severity as sev
from .errors import InputError
from .patterns import DEFAULT_CATALOG, Catalog
from .scanner import analyze_contract

logger = logging.getLogger(__name__)


def read_source(path: str | Path) -> str:
    """Full file text as UTF-8. Any OS-level failure becomes InputError."""
    try:
        return Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise InputError(path, exc.strerror or str(exc)) from exc


def filter_by_severity(findings: Iterable[Finding], min_severity: Severity | str) -> List[Finding]:
    minimum = sev.parse(min_severity)
    return [f for f in findings if sev.meets(f.severity, minimum)]


def summarize(findings: Iterable[Finding]) -> Summary:
    counts = {s.value: 0 for s in Severity}
    gas = 0
    for f in findings:
        counts[f.severity.value] += 1
        if f.category is Category.GAS:
            gas += 1
    return Summary(gas=gas, **counts)


def audit_files(
    paths: Sequence[str | Path],
    config: AuditConfig | None = None,
    *,
    catalog: Catalog = DEFAULT_CATALOG,
) -> AuditResult:
    """
    Scan ``paths`` in order, keep findings at or above ``config.min_severity``
    and count them per bucket.

    Raises InputError on the first unreadable path; nothing partial is returned.
    """
    config = config or AuditConfig()
    minimum = sev.parse(config.min_severity)
    files = [str(p) for p in paths]

    def scan(path: str) -> List[Finding]:
        return analyze_contract(
            read_source(path),
            path,
            include_best_practices=config.include_best_practices,
            include_gas=config.include_gas,
            catalog=catalog,
        )

    if config.jobs > 1 and len(files) > 1:
        # map() yields in submission order, so output order stays canonical
        with ThreadPoolExecutor(max_workers=config.jobs) as pool:
            per_file = list(pool.map(scan, files))
    else:
        per_file = [scan(p) for p in files]

    everything = [f for chunk in per_file for f in chunk]
    issues = filter_by_severity(everything, minimum)
    summary = summarize(issues)
    logger.debug(
        "audited %d file(s): %d finding(s), %d at or above %s",
        len(files), len(everything), len(issues), minimum.value,
    )
    return AuditResult(files=tuple(files), issues=tuple(issues), summary=summary)
