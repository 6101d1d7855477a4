from __future__ import annotations

import fnmatch
from pathlib import Path, PurePosixPath
from typing import Iterable

REPORT_FILE_NAME = "checkstyle-result.xml"


def is_excluded(file_path: str, patterns: Iterable[str]) -> bool:
    """Return True if a reported file path matches any exclude pattern.

    Checkstyle writes paths with the separator of the machine that ran it, so
    both the path and the patterns are compared in POSIX form. A pattern is
    tried as a glob on the whole path, as a glob on the file name, and as a
    directory name that any path segment may equal ("generated/", "test").
    """
    path = PurePosixPath(file_path.replace("\\", "/"))
    directories = path.parts[:-1]
    for pattern in patterns:
        pattern = pattern.replace("\\", "/")
        if fnmatch.fnmatch(str(path), pattern) or fnmatch.fnmatch(path.name, pattern):
            return True
        directory = pattern.strip("/")
        if directory and "/" not in directory and directory in directories:
            return True
        if directory and "/" in directory and f"/{directory}/" in f"/{path.parent}/":
            return True
    return False


def relativize(file_path: str, source_root: str | Path | None) -> str:
    """Return file_path relative to source_root in POSIX form, or unchanged if it lies outside."""
    if source_root is None:
        return file_path
    root = Path(source_root).resolve()
    try:
        relative = Path(file_path).resolve().relative_to(root)
    except ValueError:
        return file_path
    return str(PurePosixPath(*relative.parts))


def resolve_report_path(path: str | Path) -> Path:
    """Accept either a report file or a directory holding checkstyle-result.xml."""
    p = Path(path)
    if p.is_dir():
        return p / REPORT_FILE_NAME
    return p
