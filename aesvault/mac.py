"""HMAC built on SHA-256."""

from __future__ import annotations

from aesvault.sha256 import sha256

_BLOCK_SIZE = 64


def hmac_sha256(key: bytes, message: bytes) -> bytes:
    """Return HMAC-SHA256 of message.

    The key is zero-padded to 64 bytes; a longer key is cut to its first 64 bytes.
    """
    padded_key = bytes(key)[:_BLOCK_SIZE].ljust(_BLOCK_SIZE, b"\x00")
    inner_pad = bytes(b ^ 0x36 for b in padded_key)
    outer_pad = bytes(b ^ 0x5C for b in padded_key)
    inner = sha256(inner_pad + bytes(message))
    return sha256(outer_pad + inner)