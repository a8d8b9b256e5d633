"""Command-line entry points for encrypting and decrypting files and folders."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from aesvault.aes import Mode
from aesvault.compressor import Compressor
from aesvault.frontend import (
    ValidationError,
    decrypt_report,
    default_output_path,
    encrypt_report,
    read_aes_file_info,
    validate_decrypt_inputs,
    validate_encrypt_inputs,
)
from aesvault.pipeline import ProcessError, ProcessMetrics, decrypt_path, encrypt_path

_USAGE = "Usage: program <file_or_folder>"


def _read_line(prompt: str) -> str:
    try:
        return input(prompt)
    except EOFError:
        return ""


def _print_progress(percentage: int, status: str) -> None:
    print(f"[{percentage:3d}%] {status}")


def _print_timings(rows: list[tuple[str, int, float | None]]) -> None:
    print("\n\n===== Time taken and speed =====")
    for label, ms, mbps in rows:
        line = f"{label:<16}: {ms} ms"
        if mbps is not None:
            line += f" ({mbps:.2f} MB/s)"
        print(line)


def _existing_input(argv: list[str] | None) -> Path | None:
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print(_USAGE, file=sys.stderr)
        return None
    path = Path(args[0])
    if not path.exists():
        print(f"Path does not exist: {path}", file=sys.stderr)
        return None
    return path


def encrypt_main(argv: list[str] | None = None) -> int:
    """Archive and encrypt a file or folder with CBC mode; returns the exit status."""
    input_path = _existing_input(argv)
    if input_path is None:
        return 1
    key_text = _read_line("\nEnter key: ")
    output_path = Compressor(input_path).output_path.with_suffix(".aes")
    try:
        metrics = encrypt_path(
            input_path, output_path, key_text, Mode.CBC, _print_progress
        )
    except ProcessError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(f"File written: {output_path}")
    _print_timings(
        [
            ("Compression", metrics.compress_ms, None),
            ("Read file", metrics.read_ms, metrics.read_mbps),
            ("Hash key", metrics.hash_ms, None),
            ("AES Encryption", metrics.encrypt_ms, metrics.encrypt_mbps),
            ("Format building", metrics.format_ms, None),
            ("Write file", metrics.write_ms, metrics.write_mbps),
            ("Total time", metrics.total_ms, None),
        ]
    )
    return 0


def _decrypt_timings(metrics: ProcessMetrics) -> None:
    _print_timings(
        [
            ("Read encrypted", metrics.read_ms, metrics.read_mbps),
            ("Hash key", metrics.hash_ms, None),
            ("Parse format", metrics.format_ms, None),
            ("AES Decryption", metrics.encrypt_ms, metrics.encrypt_mbps),
            ("Write zip", metrics.write_ms, metrics.write_mbps),
            ("Decompress", metrics.decompress_ms, None),
            ("Total time", metrics.total_ms, None),
        ]
    )


def decrypt_main(argv: list[str] | None = None) -> int:
    """Decrypt an encrypted file and extract it beside itself; returns the exit status."""
    input_path = _existing_input(argv)
    if input_path is None:
        return 1
    key_text = _read_line("\nEnter key: ")
    try:
        metrics = decrypt_path(
            input_path, input_path.parent, key_text, _print_progress
        )
    except ProcessError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    _decrypt_timings(metrics)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aesvault",
        description="Encrypt a file or folder, or decrypt an .aes file.",
    )
    parser.add_argument("path", help="file or folder to encrypt, or .aes file to decrypt")
    parser.add_argument(
        "-o", "--output", help="output file (encryption) or directory (decryption)"
    )
    parser.add_argument(
        "-m",
        "--mode",
        choices=[mode.name for mode in Mode],
        default=Mode.CBC.name,
        help="cipher mode used for encryption (default: CBC)",
    )
    return parser


def _strip_quotes(text: str) -> str:
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        return text[1:-1]
    return text


def main(argv: list[str] | None = None) -> int:
    """Encrypt or decrypt the given path, chosen by its extension; returns the exit status."""
    args = _build_parser().parse_args(argv)
    input_text = _strip_quotes(args.path)
    input_path = Path(input_text)
    if not input_path.exists():
        print(
            "Error: The specified file or folder does not exist:\n" + input_text,
            file=sys.stderr,
        )
        return 1

    output_text = args.output or str(default_output_path(input_path))
    decrypting = input_path.suffix.lower() == ".aes"
    try:
        if decrypting:
            info = read_aes_file_info(input_path)
            if info is not None:
                print(f"AES file info - Key Size: {info[0]} bits, Mode: {info[1]}")
            key_text = _read_line("Enter password: ")
            validate_decrypt_inputs(input_text, output_text, key_text)
            metrics = decrypt_path(input_path, output_text, key_text, _print_progress)
            print(decrypt_report(metrics, output_text))
        else:
            key_text = _read_line("Enter password: ")
            verify_text = _read_line("Re-enter password: ")
            validate_encrypt_inputs(input_text, output_text, key_text, verify_text)
            metrics = encrypt_path(
                input_path, output_text, key_text, Mode[args.mode], _print_progress
            )
            print(encrypt_report(metrics, output_text))
    except ValidationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except ProcessError as exc:
        print(f"Error: Operation failed:\n{exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())