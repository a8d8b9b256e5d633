import subprocess
from unittest import mock

import pytest

from aesvault.compressor import (
    MAGIC_7Z,
    CompressionError,
    Compressor,
    check_format_7z,
    decompress,
)

VALID_ARCHIVE = bytes([0x37, 0x7A, 0xBC, 0xAF, 0x27, 0x1C]) + bytes(26)


def _done(code):
    return subprocess.CompletedProcess(args=[], returncode=code)


def test_output_name_for_file_uses_stem(tmp_path):
    source = tmp_path / "report.txt"
    source.write_text("x")
    assert Compressor(source).output_name() == "report.7z"


def test_output_name_for_directory_uses_name(tmp_path):
    folder = tmp_path / "photos.v1"
    folder.mkdir()
    assert Compressor(folder).output_name() == "photos.v1.7z"


def test_output_name_uses_format(tmp_path):
    source = tmp_path / "report.txt"
    source.write_text("x")
    assert Compressor(source, "zip").output_name() == "report.zip"


def test_compress_command(tmp_path):
    source = tmp_path / "report.txt"
    source.write_text("x")
    command = Compressor(source).compress_command()
    assert command == [
        "7z",
        "a",
        "-t7z",
        "-mmt=on",
        "-ms=off",
        str(tmp_path / "report.7z"),
        str(source),
        "-mx=1",
    ]


def test_compress_missing_path(tmp_path):
    with pytest.raises(CompressionError, match="Path does not exist"):
        Compressor(tmp_path / "missing").compress()


def test_compress_runs_command(tmp_path):
    source = tmp_path / "report.txt"
    source.write_text("x")
    compressor = Compressor(source)
    with mock.patch("subprocess.run", return_value=_done(0)) as run:
        result = compressor.compress()
    assert result == tmp_path / "report.7z"
    assert run.call_args.args[0] == compressor.compress_command()


def test_compress_failure_exit_code(tmp_path):
    source = tmp_path / "report.txt"
    source.write_text("x")
    with mock.patch("subprocess.run", return_value=_done(2)):
        with pytest.raises(CompressionError, match="Compression failed"):
            Compressor(source).compress()


def test_compress_missing_tool(tmp_path):
    source = tmp_path / "report.txt"
    source.write_text("x")
    with mock.patch("subprocess.run", side_effect=FileNotFoundError("7z")):
        with pytest.raises(CompressionError):
            Compressor(source).compress()


def test_check_format_accepts_signature():
    assert check_format_7z(VALID_ARCHIVE) is True
    assert VALID_ARCHIVE.startswith(MAGIC_7Z)


def test_check_format_rejects_short_data():
    assert check_format_7z(VALID_ARCHIVE[:31]) is False


def test_check_format_rejects_wrong_signature():
    assert check_format_7z(b"PK\x03\x04" + bytes(40)) is False


def test_decompress_rejects_bad_signature(tmp_path):
    archive = tmp_path / "a.7z"
    archive.write_bytes(bytes(40))
    with mock.patch("subprocess.run") as run:
        with pytest.raises(CompressionError, match="signature mismatch"):
            decompress(bytes(40), archive, tmp_path)
    assert run.call_count == 0


def test_decompress_missing_archive(tmp_path):
    with pytest.raises(CompressionError, match="Archive not found"):
        decompress(VALID_ARCHIVE, tmp_path / "a.7z", tmp_path)


def test_decompress_runs_command(tmp_path):
    archive = tmp_path / "a.7z"
    archive.write_bytes(VALID_ARCHIVE)
    out = tmp_path / "out"
    with mock.patch("subprocess.run", return_value=_done(0)) as run:
        decompress(VALID_ARCHIVE, archive, out)
    assert run.call_args.args[0] == ["7z", "x", str(archive), f"-o{out}", "-y"]


def test_decompress_failure(tmp_path):
    archive = tmp_path / "a.7z"
    archive.write_bytes(VALID_ARCHIVE)
    with mock.patch("subprocess.run", return_value=_done(1)):
        with pytest.raises(CompressionError, match="Decompression failed"):
            decompress(VALID_ARCHIVE, archive, tmp_path)