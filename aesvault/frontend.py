"""Input handling and reporting shared by the user-facing front ends."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from aesvault.fileio import read_file_bytes

_INFO_MIN_SIZE = 64
_INFO_OFFSET = 32
_MIN_PASSWORD_LENGTH = 4
_MODE_NAMES = {0: "ECB", 1: "CBC", 2: "CFB", 3: "OFB"}
_SIZE_UNITS = (("GB", 1024**3), ("MB", 1024**2), ("KB", 1024))


class ValidationError(ValueError):
    """Raised when user input is incomplete or inconsistent."""


def mode_name(code: int) -> str:
    """Name of an on-disk mode code, or "Unknown"."""
    return _MODE_NAMES.get(code, "Unknown")


def read_aes_file_info(path: str | os.PathLike[str]) -> tuple[int, str] | None:
    """Return (key size in bits, mode name) read from an encrypted file's header.

    Returns None when the file cannot be read or is shorter than 64 bytes.
    """
    try:
        data = read_file_bytes(path)
    except OSError:
        return None
    if len(data) < _INFO_MIN_SIZE:
        return None
    mode = mode_name(data[_INFO_OFFSET])
    key_size = data[_INFO_OFFSET + 1] * 8
    return key_size, mode


def format_file_size(num_bytes: int) -> str:
    """Human-readable size; larger units show whole units with two decimals."""
    for unit, size in _SIZE_UNITS:
        if num_bytes >= size:
            return f"{num_bytes // size:.2f} {unit}"
    return f"{num_bytes} bytes"


def default_output_path(input_path: str | os.PathLike[str]) -> Path:
    """Suggested output for an input.

    An ``.aes`` file decrypts into its own directory; a directory encrypts to
    ``<dir>.aes``; a file encrypts to ``<base name>.aes`` beside it.
    """
    path = Path(os.path.abspath(input_path))
    if path.suffix.lower() == ".aes":
        return path.parent
    if path.is_dir():
        return Path(f"{path}.aes")
    base_name = path.name.split(".", 1)[0]
    return path.parent / f"{base_name}.aes"


def validate_encrypt_inputs(
    input_path: str, output_path: str, password: str, verify: str
) -> None:
    """Raise ValidationError unless the encryption inputs are usable."""
    if not input_path:
        raise ValidationError("Please select a file or folder to encrypt.")
    if not output_path:
        raise ValidationError("Please specify an output location.")
    if not password:
        raise ValidationError("Please enter a password.")
    if password != verify:
        raise ValidationError("Passwords do not match.")
    if len(password) < _MIN_PASSWORD_LENGTH:
        raise ValidationError("Password must be at least 4 characters long.")
    if not Path(input_path).exists():
        raise ValidationError("Selected file or folder does not exist:\n" + input_path)


def validate_decrypt_inputs(input_path: str, output_path: str, password: str) -> None:
    """Raise ValidationError unless the decryption inputs are usable."""
    if not input_path:
        raise ValidationError("Please select an encrypted file to decrypt.")
    if not output_path:
        raise ValidationError("Please specify an output location.")
    if not password:
        raise ValidationError("Please enter the password.")
    if not Path(input_path).exists():
        raise ValidationError("Selected file does not exist.")


def _header(action: str, output_path: str | os.PathLike[str] | None) -> str:
    location = str(output_path) if output_path else "Unknown location"
    return f"{action} completed successfully!\nOutput: {location}\n\n===== Time and Speed =====\n"


def encrypt_report(metrics: Any, output_path: str | os.PathLike[str] | None) -> str:
    """Summary of an encryption run's timings."""
    m = metrics
    return _header("Encryption", output_path) + "\n".join(
        [
            f"Compression: {m.compress_ms} ms",
            f"Read file: {m.read_ms} ms ({m.read_mbps:.2f} MB/s)",
            f"Hash key: {m.hash_ms} ms",
            f"AES Encryption: {m.encrypt_ms} ms ({m.encrypt_mbps:.2f} MB/s)",
            f"Build format: {m.format_ms} ms",
            f"Write file: {m.write_ms} ms ({m.write_mbps:.2f} MB/s)",
            f"Total time: {m.total_ms} ms",
        ]
    )


def decrypt_report(metrics: Any, output_path: str | os.PathLike[str] | None) -> str:
    """Summary of a decryption run's timings."""
    m = metrics
    return _header("Decryption", output_path) + "\n".join(
        [
            f"Read encrypted file: {m.read_ms} ms ({m.read_mbps:.2f} MB/s)",
            f"Hash key: {m.hash_ms} ms",
            f"Parse format: {m.format_ms} ms",
            f"AES Decryption: {m.encrypt_ms} ms ({m.encrypt_mbps:.2f} MB/s)",
            f"Write compressed file: {m.write_ms} ms ({m.write_mbps:.2f} MB/s)",
            f"Decompression: {m.decompress_ms} ms",
            f"Total time: {m.total_ms} ms",
        ]
    )