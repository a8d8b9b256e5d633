"""Whole-path encryption and decryption: archive, encrypt, wrap, write, and back."""

from __future__ import annotations

import os
import shutil
import time
from collections.abc import Callable
from contextlib import contextmanager, suppress
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from aesvault.aes import AES, Mode
from aesvault.compressor import CompressionError, Compressor, decompress
from aesvault.fileformat import build_encrypted_format, parse_encrypted_format
from aesvault.fileio import MAX_FILE_SIZE, read_file_bytes, write_file_bytes
from aesvault.sha256 import sha256

ProgressCallback = Callable[[int, str], None]

_MEGABYTE = 1024.0 * 1024.0
_MIN_SECONDS = 1e-6


@dataclass
class ProcessMetrics:
    """Timings, in milliseconds, and throughputs, in MB/s, of one run."""

    compress_ms: int = 0
    read_ms: int = 0
    hash_ms: int = 0
    format_ms: int = 0
    encrypt_ms: int = 0
    write_ms: int = 0
    decompress_ms: int = 0
    total_ms: int = 0
    read_mbps: float = 0.0
    encrypt_mbps: float = 0.0
    write_mbps: float = 0.0


class ProcessError(RuntimeError):
    """Raised when an encryption or decryption run fails."""


class _Timer:
    def __init__(self) -> None:
        self.seconds = 0.0

    @property
    def ms(self) -> int:
        return int(self.seconds * 1000)

    def mbps(self, num_bytes: int) -> float:
        return (num_bytes / _MEGABYTE) / (self.seconds or _MIN_SECONDS)


@contextmanager
def _timed() -> Iterator[_Timer]:
    timer = _Timer()
    start = time.perf_counter()
    try:
        yield timer
    finally:
        timer.seconds = time.perf_counter() - start


def _remove_all(path: Path) -> None:
    with suppress(OSError):
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink(missing_ok=True)


def _password_key(password: str) -> bytes:
    return sha256(password.encode("utf-8"))


def encrypt_path(
    input_path: str | os.PathLike[str],
    output_path: str | os.PathLike[str],
    password: str,
    mode: Mode | int = Mode.CBC,
    progress: ProgressCallback | None = None,
) -> ProcessMetrics:
    """Archive a file or directory, encrypt the archive and write it to output_path.

    The input and the intermediate archive are removed afterwards.
    """
    report = progress or (lambda percentage, status: None)
    try:
        metrics = ProcessMetrics()
        total_start = time.perf_counter()
        source = Path(input_path)
        target = Path(output_path)
        mode = Mode(mode)

        report(10, "Compressing data...")
        with _timed() as timer:
            try:
                archive = Compressor(source).compress()
            except CompressionError as exc:
                raise ProcessError("Compression failed") from exc
        metrics.compress_ms = timer.ms

        report(25, "Reading compressed file...")
        with _timed() as timer:
            try:
                buffer = read_file_bytes(archive)
            except OSError:
                buffer = b""
            if not buffer:
                raise ProcessError("Failed to read compressed file or file is empty")
        metrics.read_ms = timer.ms
        metrics.read_mbps = timer.mbps(len(buffer))

        report(40, "Hashing key...")
        with _timed() as timer:
            key = _password_key(password)
        metrics.hash_ms = timer.ms

        report(60, "Encrypting with AES...")
        with _timed() as timer:
            cipher = AES(key, mode)
            iv = b"" if mode is Mode.ECB else cipher.generate_random_iv()
            ciphertext = cipher.encrypt(buffer, iv)
        metrics.encrypt_ms = timer.ms
        metrics.encrypt_mbps = timer.mbps(len(buffer))

        report(80, "Building encrypted format...")
        with _timed() as timer:
            container = build_encrypted_format(ciphertext, key, iv, mode)
        metrics.format_ms = timer.ms

        report(90, "Writing encrypted file...")
        with _timed() as timer:
            try:
                write_file_bytes(target, container)
            except OSError as exc:
                raise ProcessError("Failed to write encrypted file") from exc
        metrics.write_ms = timer.ms
        metrics.write_mbps = timer.mbps(len(container))

        report(95, "Cleaning up...")
        if source != target:
            _remove_all(source)
        _remove_all(archive)

        metrics.total_ms = int((time.perf_counter() - total_start) * 1000)
        report(100, "Encryption completed successfully!")
        return metrics
    except ProcessError:
        raise
    except Exception as exc:
        raise ProcessError(f"Encryption failed: {exc}") from exc


def decrypt_path(
    input_path: str | os.PathLike[str],
    output_path: str | os.PathLike[str],
    password: str,
    progress: ProgressCallback | None = None,
) -> ProcessMetrics:
    """Verify and decrypt an encrypted file and extract its archive into output_path.

    The encrypted file and the intermediate archive are removed afterwards.
    """
    report = progress or (lambda percentage, status: None)
    try:
        metrics = ProcessMetrics()
        total_start = time.perf_counter()
        source = Path(input_path)
        destination = Path(output_path)

        report(10, "Reading encrypted file...")
        with _timed() as timer:
            if not source.exists():
                raise ProcessError(f"Encrypted file does not exist: {source}")
            try:
                size = source.stat().st_size
            except OSError as exc:
                raise ProcessError(f"Cannot get encrypted file size: {exc}") from exc
            if size == 0:
                raise ProcessError("Encrypted file is empty.")
            if size > MAX_FILE_SIZE:
                raise ProcessError(f"Encrypted file is too large: {size} bytes.")
            try:
                buffer = read_file_bytes(source)
            except OSError:
                buffer = b""
            if not buffer:
                raise ProcessError("Failed to read encrypted file or file is empty.")
        metrics.read_ms = timer.ms
        metrics.read_mbps = timer.mbps(len(buffer))

        report(25, "Hashing key...")
        with _timed() as timer:
            key = _password_key(password)
        metrics.hash_ms = timer.ms

        report(40, "Parsing encrypted format...")
        with _timed() as timer:
            try:
                parsed = parse_encrypted_format(buffer, key)
            except Exception as exc:
                raise ProcessError(
                    f"Invalid file format or wrong password: {exc}"
                ) from exc
        metrics.format_ms = timer.ms

        report(60, "Decrypting AES...")
        with _timed() as timer:
            try:
                plaintext = AES(parsed.key, parsed.mode).decrypt(
                    parsed.ciphertext, parsed.iv
                )
            except Exception as exc:
                raise ProcessError(
                    f"Decryption failed - wrong password or corrupted file: {exc}"
                ) from exc
        metrics.encrypt_ms = timer.ms
        metrics.encrypt_mbps = timer.mbps(len(parsed.ciphertext))

        report(75, "Writing compressed file...")
        archive = source.with_suffix(".7z")
        with _timed() as timer:
            try:
                write_file_bytes(archive, plaintext)
            except OSError as exc:
                raise ProcessError("Failed to write temporary (.7z) file") from exc
        metrics.write_ms = timer.ms
        metrics.write_mbps = timer.mbps(len(plaintext))

        report(85, "Decompressing...")
        with _timed() as timer:
            try:
                decompress(plaintext, archive, destination)
            except CompressionError as exc:
                raise ProcessError("Decompression failed") from exc
        metrics.decompress_ms = timer.ms

        report(95, "Cleaning up...")
        _remove_all(source)
        _remove_all(archive)

        metrics.total_ms = int((time.perf_counter() - total_start) * 1000)
        report(100, "Decryption completed successfully!")
        return metrics
    except ProcessError:
        raise
    except Exception as exc:
        raise ProcessError(f"Decryption failed: {exc}") from exc