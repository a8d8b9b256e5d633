import json
import subprocess
from pathlib import Path
from unittest import mock

import pytest

from aesvault.aes import AES, Mode
from aesvault.compressor import MAGIC_7Z
from aesvault.fileformat import build_encrypted_format
from aesvault.pipeline import ProcessError, ProcessMetrics, decrypt_path, encrypt_path
from aesvault.sha256 import sha256

PASSWORD = "password"
_PREFIX = MAGIC_7Z + b"\x00" * 26


def _fake_7z(command, check=False):
    """A tiny stand-in archiver speaking the same command line as 7z."""
    if command[1] == "a":
        output, source = Path(command[5]), Path(command[6])
        entries = {}
        if source.is_dir():
            for item in source.rglob("*"):
                if item.is_file():
                    rel = item.relative_to(source.parent).as_posix()
                    entries[rel] = item.read_bytes().hex()
        else:
            entries[source.name] = source.read_bytes().hex()
        output.write_bytes(_PREFIX + json.dumps(entries).encode())
        return subprocess.CompletedProcess(command, 0)
    if command[1] == "x":
        archive = Path(command[2])
        destination = Path(command[3][2:])
        entries = json.loads(archive.read_bytes()[len(_PREFIX):])
        for rel, content in entries.items():
            target = destination / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(bytes.fromhex(content))
        return subprocess.CompletedProcess(command, 0)
    return subprocess.CompletedProcess(command, 2)


@pytest.fixture
def fake_7z():
    with mock.patch("aesvault.compressor.subprocess.run", side_effect=_fake_7z) as patched:
        yield patched


@pytest.mark.parametrize("mode", list(Mode))
def test_file_round_trip(tmp_path, fake_7z, mode):
    content = b"some content that is worth protecting\n" * 5
    source = tmp_path / "notes.txt"
    source.write_bytes(content)
    encrypted = tmp_path / "notes.aes"

    encrypt_path(source, encrypted, PASSWORD, mode)

    assert not source.exists()
    assert not (tmp_path / "notes.7z").exists()
    data = encrypted.read_bytes()
    assert data[:3] == b"AES"
    assert data[3] == 32
    assert data[4] == int(mode)

    out_dir = tmp_path / "out"
    out_dir.mkdir()
    decrypt_path(encrypted, out_dir, PASSWORD)

    assert (out_dir / "notes.txt").read_bytes() == content
    assert not encrypted.exists()
    assert not (tmp_path / "notes.7z").exists()


def test_directory_round_trip(tmp_path, fake_7z):
    folder = tmp_path / "docs"
    (folder / "sub").mkdir(parents=True)
    (folder / "a.txt").write_bytes(b"alpha")
    (folder / "sub" / "b.bin").write_bytes(bytes(range(50)))
    encrypted = tmp_path / "docs.aes"

    encrypt_path(folder, encrypted, PASSWORD, Mode.CBC)
    assert not folder.exists()

    out_dir = tmp_path / "restored"
    out_dir.mkdir()
    decrypt_path(encrypted, out_dir, PASSWORD)
    assert (out_dir / "docs" / "a.txt").read_bytes() == b"alpha"
    assert (out_dir / "docs" / "sub" / "b.bin").read_bytes() == bytes(range(50))


def test_ecb_container_has_no_iv(tmp_path, fake_7z):
    source = tmp_path / "plain.txt"
    source.write_bytes(b"hello")
    encrypted = tmp_path / "plain.aes"
    encrypt_path(source, encrypted, PASSWORD, Mode.ECB)
    data = encrypted.read_bytes()
    body_length = len(data) - 5 - 32
    assert body_length > 0
    assert body_length % 16 == 0


def test_encrypt_progress_and_metrics(tmp_path, fake_7z):
    source = tmp_path / "report.txt"
    source.write_bytes(b"x" * 1000)
    seen = []
    metrics = encrypt_path(
        source, tmp_path / "report.aes", PASSWORD, Mode.CFB, lambda p, s: seen.append((p, s))
    )
    percentages = [p for p, _ in seen]
    assert percentages == sorted(percentages)
    assert percentages[0] == 10
    assert seen[-1] == (100, "Encryption completed successfully!")
    assert isinstance(metrics, ProcessMetrics)
    assert metrics.total_ms >= metrics.compress_ms >= 0
    assert metrics.read_mbps >= 0.0


def test_decrypt_progress(tmp_path, fake_7z):
    source = tmp_path / "item.txt"
    source.write_bytes(b"data")
    encrypted = tmp_path / "item.aes"
    encrypt_path(source, encrypted, PASSWORD, Mode.OFB)
    seen = []
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    decrypt_path(encrypted, out_dir, PASSWORD, lambda p, s: seen.append((p, s)))
    assert seen[0] == (10, "Reading encrypted file...")
    assert seen[-1] == (100, "Decryption completed successfully!")


def test_wrong_password_is_rejected(tmp_path, fake_7z):
    source = tmp_path / "item.txt"
    source.write_bytes(b"data")
    encrypted = tmp_path / "item.aes"
    encrypt_path(source, encrypted, PASSWORD, Mode.CBC)
    with pytest.raises(ProcessError, match="Invalid file format or wrong password"):
        decrypt_path(encrypted, tmp_path, "secret")
    assert encrypted.exists()


def test_decrypt_missing_file(tmp_path):
    with pytest.raises(ProcessError, match="Encrypted file does not exist"):
        decrypt_path(tmp_path / "absent.aes", tmp_path, PASSWORD)


def test_decrypt_empty_file(tmp_path):
    empty = tmp_path / "empty.aes"
    empty.write_bytes(b"")
    with pytest.raises(ProcessError, match="Encrypted file is empty."):
        decrypt_path(empty, tmp_path, PASSWORD)


def test_compression_failure(tmp_path):
    source = tmp_path / "item.txt"
    source.write_bytes(b"data")
    failing = subprocess.CompletedProcess([], 1)
    with mock.patch("aesvault.compressor.subprocess.run", return_value=failing):
        with pytest.raises(ProcessError, match="Compression failed"):
            encrypt_path(source, tmp_path / "item.aes", PASSWORD, Mode.CBC)
    assert source.read_bytes() == b"data"


def test_non_archive_payload_fails_decompression(tmp_path, fake_7z):
    key = sha256(PASSWORD.encode("utf-8"))
    cipher = AES(key, Mode.CBC)
    iv = cipher.generate_random_iv()
    container = build_encrypted_format(cipher.encrypt(b"not an archive", iv), key, iv, Mode.CBC)
    encrypted = tmp_path / "bogus.aes"
    encrypted.write_bytes(container)
    with pytest.raises(ProcessError, match="Decompression failed"):
        decrypt_path(encrypted, tmp_path, PASSWORD)


def test_corrupted_container_is_rejected(tmp_path, fake_7z):
    source = tmp_path / "item.txt"
    source.write_bytes(b"data")
    encrypted = tmp_path / "item.aes"
    encrypt_path(source, encrypted, PASSWORD, Mode.CBC)
    data = bytearray(encrypted.read_bytes())
    data[25] ^= 0xFF
    encrypted.write_bytes(bytes(data))
    with pytest.raises(ProcessError, match="Invalid file format or wrong password"):
        decrypt_path(encrypted, tmp_path, PASSWORD)