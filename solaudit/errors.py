from __future__ import annotations
from pathlib import Path


class AuditError(Exception):
    """Base class for failures that abort an audit invocation."""


class InputError(AuditError):
    """A supplied path could not be read as a source file."""

    def __init__(self, path: str | Path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Cannot read '{self.path}': {reason}")


class PatternError(AuditError):
    """A catalog signature failed to compile. Programming defect, not a runtime condition."""

    def __init__(self, name: str, reason: str):
        self.name = name
        super().__init__(f"Malformed matcher for pattern '{name}': {reason}")


class OutputError(AuditError):
    """A report could not be written to the requested path."""

    def __init__(self, path: str | Path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Cannot write '{self.path}': {reason}")
