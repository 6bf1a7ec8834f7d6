from __future__ import annotations
import re
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Tuple

__version__ = "0.1.0"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return SEVERITY_ORDER.index(self)


class Category(str, Enum):
    SECURITY = "security"
    BEST_PRACTICE = "best-practice"
    GAS = "gas"


# Ascending risk: low < medium < high < critical
SEVERITY_ORDER: Tuple[Severity, ...] = (
    Severity.LOW, Severity.MEDIUM, Severity.HIGH, Severity.CRITICAL,
)


@dataclass(frozen=True)
class Pattern:
    name: str
    category: Category
    severity: Severity
    regex: re.Pattern
    description: str
    recommendation: str


@dataclass(frozen=True)
class GasPattern:
    title: str
    regex: re.Pattern
    description: str
    savings: str


@dataclass(frozen=True)
class Finding:
    """One reported match.

    ``code`` holds the stripped source line for line-scoped findings and is
    ``None`` for file-level findings (gas), whose ``line`` is 0.
    """
    file: str
    line: int
    severity: Severity
    category: Category
    title: str
    description: str
    recommendation: str
    code: str | None = None

    @property
    def is_file_level(self) -> bool:
        return self.code is None

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["severity"] = self.severity.value
        d["category"] = self.category.value
        if d["code"] is None:
            del d["code"]
        return d


@dataclass(frozen=True)
class GasFinding:
    title: str
    description: str
    savings: str


@dataclass(frozen=True)
class Summary:
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    gas: int = 0

    @property
    def total(self) -> int:
        # gas is orthogonal to the severity buckets
        return self.critical + self.high + self.medium + self.low


@dataclass(frozen=True)
class AuditResult:
    files: Tuple[str, ...]
    issues: Tuple[Finding, ...]
    summary: Summary

    @property
    def has_critical(self) -> bool:
        return any(f.severity is Severity.CRITICAL for f in self.issues)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "files": list(self.files),
            "issues": [f.to_dict() for f in self.issues],
            "summary": asdict(self.summary),
        }


@dataclass(frozen=True)
class AuditConfig:
    min_severity: Severity | str = Severity.LOW
    include_gas: bool = False
    include_best_practices: bool = False
    jobs: int = 1


from .patterns import DEFAULT_CATALOG, Catalog, build_catalog, get_patterns  # noqa: E402
from .scanner import analyze_contract, analyze_gas  # noqa: E402
from .auditor import audit_files, filter_by_severity, summarize  # noqa: E402

__all__ = [
    "AuditConfig", "AuditResult", "Catalog", "Category", "DEFAULT_CATALOG",
    "Finding", "GasFinding", "GasPattern", "Pattern", "SEVERITY_ORDER",
    "Severity", "Summary", "analyze_contract", "analyze_gas", "audit_files",
    "build_catalog", "filter_by_severity", "get_patterns", "summarize",
]
