"""Archiving through the external 7z command."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path

MAGIC_7Z = bytes([0x37, 0x7A, 0xBC, 0xAF, 0x27, 0x1C])
_MIN_7Z_SIZE = 32


class CompressionError(RuntimeError):
    """Raised when compressing or extracting an archive fails."""


def _run(command: list[str], failure: str) -> None:
    try:
        completed = subprocess.run(command, check=False)
    except OSError as exc:
        raise CompressionError(f"{failure}: {exc}") from exc
    if completed.returncode != 0:
        raise CompressionError(f"{failure} (exit code {completed.returncode}).")


class Compressor:
    """Packs a file or directory into an archive next to it."""

    def __init__(
        self,
        input_path: str | os.PathLike[str],
        archive_format: str = "7z",
        level: str = "-mx=1",
    ) -> None:
        self.input_path = Path(input_path)
        self.archive_format = archive_format
        self.level = level

    def output_name(self) -> str:
        """Archive file name: the directory name, or the file stem, plus the format."""
        if self.input_path.is_dir():
            base = self.input_path.name
        else:
            base = self.input_path.stem
        return f"{base}.{self.archive_format}"

    @property
    def output_path(self) -> Path:
        """Where the archive is written: beside the input."""
        return self.input_path.parent / self.output_name()

    def compress_command(self) -> list[str]:
        """The 7z command line that builds the archive."""
        return [
            "7z",
            "a",
            f"-t{self.archive_format}",
            "-mmt=on",
            "-ms=off",
            str(self.output_path),
            str(self.input_path),
            self.level,
        ]

    def compress(self) -> Path:
        """Build the archive and return its path."""
        if not self.input_path.exists():
            raise CompressionError(f"Path does not exist: {self.input_path}")
        _run(self.compress_command(), "Compression failed")
        return self.output_path


def check_format_7z(data: bytes) -> bool:
    """Whether data is long enough and starts with the 7z signature."""
    data = bytes(data)
    return len(data) >= _MIN_7Z_SIZE and data.startswith(MAGIC_7Z)


def decompress(
    data: bytes,
    archive_path: str | os.PathLike[str],
    destination: str | os.PathLike[str],
) -> None:
    """Extract the archive at archive_path, whose content is data, into destination."""
    if not check_format_7z(data):
        raise CompressionError("Invalid format: not a valid 7z archive (signature mismatch).")
    archive_path = Path(archive_path)
    if not archive_path.exists():
        raise CompressionError(f"Archive not found: {archive_path}")
    command = ["7z", "x", str(archive_path), f"-o{Path(destination)}", "-y"]
    _run(command, "Decompression failed")