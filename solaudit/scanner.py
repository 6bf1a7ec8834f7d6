from __future__ import annotations
import logging
from typing import List

from . import Category, Finding, GasFinding, Severity
from . import matcher
from .patterns import DEFAULT_CATALOG, Catalog

logger = logging.getLogger(__name__)


def analyze_contract(
    content: str,
    file_label: str,
    *,
    include_best_practices: bool = False,
    include_gas: bool = False,
    catalog: Catalog = DEFAULT_CATALOG,
) -> List[Finding]:
    """
    Run the vulnerability catalog over one file's text.

    Findings come back in catalog order, occurrences left to right within a
    pattern, followed by file-level gas findings when ``include_gas`` is set.
    Matches are neither deduplicated nor capped.
    """
    content = content or ""
    lines = matcher.split_lines(content)
    findings: List[Finding] = []

    for p in catalog.active(include_best_practices):
        for lineno, code in matcher.iter_hits(p.regex, content, lines):
            findings.append(
                Finding(
                    file=file_label,
                    line=lineno,
                    severity=p.severity,
                    category=p.category,
                    title=p.name,
                    description=p.description,
                    recommendation=p.recommendation,
                    code=code,
                )
            )

    if include_gas:
        for g in analyze_gas(content, catalog=catalog):
            findings.append(
                Finding(
                    file=file_label,
                    line=0,
                    severity=Severity.LOW,
                    category=Category.GAS,
                    title=g.title,
                    description=g.description,
                    recommendation=f"Potential savings: {g.savings}",
                    code=None,
                )
            )

    logger.debug("%s: %d finding(s)", file_label, len(findings))
    return findings


def analyze_gas(content: str, *, catalog: Catalog = DEFAULT_CATALOG) -> List[GasFinding]:
    """One entry per gas idiom present anywhere in the file, in catalog order."""
    content = content or ""
    return [
        GasFinding(title=g.title, description=g.description, savings=g.savings)
        for g in catalog.gas
        if matcher.has_match(g.regex, content)
    ]
