"""Reading and writing whole files as bytes."""

from __future__ import annotations

import os
from pathlib import Path

MAX_FILE_SIZE = 1024 * 1024 * 1024


class FileReadError(OSError):
    """Raised when a file cannot be read."""


def read_file_bytes(path: str | os.PathLike[str]) -> bytes:
    """Return the whole content of a file; an empty file gives empty bytes.

    Files larger than 1 GiB are refused.
    """
    path = Path(path)
    if not path.exists():
        raise FileReadError(f"File does not exist: {path}")
    try:
        size = path.stat().st_size
    except OSError as exc:
        raise FileReadError(f"Cannot get file size: {exc}") from exc
    if size == 0:
        return b""
    if size > MAX_FILE_SIZE:
        raise FileReadError(f"File too large (>1GB): {path} ({size} bytes)")
    try:
        return path.read_bytes()
    except OSError as exc:
        raise FileReadError(f"Cannot open file: {path}") from exc


def write_file_bytes(path: str | os.PathLike[str], data: bytes) -> None:
    """Write data to a file, replacing any previous content."""
    Path(path).write_bytes(bytes(data))