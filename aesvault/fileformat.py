"""Container format for encrypted files.

Layout: ``[magic "AES"][key length][mode][iv][ciphertext][hmac]``. The IV is
present only when the mode is not ECB. The trailing HMAC-SHA256 is computed
with the encryption key over everything that precedes it.
"""

from __future__ import annotations

import hmac
from dataclasses import dataclass

from aesvault.aes import Mode
from aesvault.mac import hmac_sha256

MAGIC = b"AES"
IV_SIZE = 16
HMAC_SIZE = 32
_HEADER_SIZE = len(MAGIC) + 2
_KEY_LENGTHS = (16, 24, 32)


class FormatError(ValueError):
    """Raised when encrypted data is malformed or fails authentication."""


@dataclass(frozen=True)
class DecryptionResult:
    """The parts of a parsed encrypted file.

    ``key`` is the caller's key cut (or zero-extended) to the length the
    file declares; it is the key the HMAC was checked with.
    """

    mode: Mode
    iv: bytes
    ciphertext: bytes
    key: bytes


def build_encrypted_format(
    ciphertext: bytes, key: bytes, iv: bytes, mode: Mode | int
) -> bytes:
    """Wrap ciphertext in the container format and append its HMAC."""
    key = bytes(key)
    mode_code = int(mode)
    body = bytearray(MAGIC)
    body.append(len(key))
    body.append(mode_code)
    if mode_code != Mode.ECB:
        body += bytes(iv)
    body += bytes(ciphertext)
    return bytes(body) + hmac_sha256(key, bytes(body))


def parse_encrypted_format(data: bytes, key: bytes) -> DecryptionResult:
    """Split container data into its parts after verifying the HMAC."""
    data = bytes(data)
    if len(data) < _HEADER_SIZE:
        raise FormatError("Encrypted data is invalid: too short.")
    if data[: len(MAGIC)] != MAGIC:
        raise FormatError("Invalid magic bytes.")

    key_length = data[3]
    if key_length not in _KEY_LENGTHS:
        raise FormatError("Invalid key length. Only 16, 24, or 32 bytes are supported.")
    key = bytes(key)[:key_length].ljust(key_length, b"\x00")

    mode_code = data[4]
    if mode_code > max(Mode):
        raise FormatError("Invalid AES mode.")
    mode = Mode(mode_code)

    offset = _HEADER_SIZE
    iv = b""
    if mode is not Mode.ECB:
        if len(data) < offset + IV_SIZE:
            raise FormatError("Missing IV data.")
        iv = data[offset : offset + IV_SIZE]
        offset += IV_SIZE

    if len(data) < offset + HMAC_SIZE:
        raise FormatError("Missing HMAC data.")
    hmac_offset = len(data) - HMAC_SIZE

    ciphertext = data[offset:hmac_offset]
    if not ciphertext:
        raise FormatError("No ciphertext found in the encrypted data.")

    expected = data[hmac_offset:]
    computed = hmac_sha256(key, data[:hmac_offset])
    if not hmac.compare_digest(computed, expected):
        raise FormatError("Invalid key.")

    return DecryptionResult(mode=mode, iv=iv, ciphertext=ciphertext, key=key)