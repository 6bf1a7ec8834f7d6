from __future__ import annotations
from pathlib import Path
from typing import List

from .errors import InputError

SOURCE_EXTS = {".sol"}


def discover_sources(target: str | Path, recursive: bool = False) -> List[str]:
    """
    Expand a CLI target into concrete file paths.
    A file is returned as-is (whatever its extension); a folder yields its
    .sol files, sorted, descending into subfolders only when ``recursive``.
    """
    p = Path(target)
    if p.is_file():
        return [str(p)]
    if not p.is_dir():
        raise InputError(p, "no such file or directory")
    candidates = p.rglob("*") if recursive else p.glob("*")
    return sorted(str(c) for c in candidates if c.is_file() and c.suffix.lower() in SOURCE_EXTS)
