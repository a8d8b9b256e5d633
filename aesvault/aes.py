"""AES encryption in ECB, CBC, CFB and OFB modes with PKCS#7 padding."""

from __future__ import annotations

import secrets
from collections.abc import Iterator
from enum import IntEnum

from aesvault.blockcipher import BLOCK_SIZE, BlockCipher


class Mode(IntEnum):
    """Block cipher modes of operation; the values are the on-disk mode codes."""

    ECB = 0
    CBC = 1
    CFB = 2
    OFB = 3


def pad(data: bytes) -> bytes:
    """Append PKCS#7 padding so the length is a multiple of the block size."""
    count = BLOCK_SIZE - len(data) % BLOCK_SIZE
    return bytes(data) + bytes([count]) * count


def unpad(data: bytes) -> bytes:
    """Strip PKCS#7 padding, raising ValueError if it is malformed."""
    data = bytes(data)
    if not data:
        raise ValueError("Data is empty.")
    count = data[-1]
    if count == 0 or count > BLOCK_SIZE:
        raise ValueError("Invalid padding value.")
    if data[-count:] != bytes([count]) * count:
        raise ValueError("Invalid padding format.")
    return data[:-count]


def _segments(data: bytes) -> Iterator[bytes]:
    for start in range(0, len(data), BLOCK_SIZE):
        yield data[start : start + BLOCK_SIZE]


def _xor(left: bytes, right: bytes) -> bytes:
    return bytes(a ^ b for a, b in zip(left, right))


class AES:
    """An AES cipher bound to one key and one mode of operation."""

    def __init__(self, key: bytes, mode: Mode | int) -> None:
        try:
            self.mode = Mode(mode)
        except ValueError:
            raise ValueError("Unsupported AES mode.") from None
        self._cipher = BlockCipher(bytes(key))

    def generate_random_iv(self) -> bytes:
        """Return a fresh random 16-byte initialisation vector."""
        return secrets.token_bytes(BLOCK_SIZE)

    def _check_iv(self, iv: bytes | None) -> bytes:
        if self.mode is Mode.ECB:
            return b""
        if iv is None or len(iv) != BLOCK_SIZE:
            raise ValueError("IV must be 16 bytes for CBC, CFB, or OFB modes.")
        return bytes(iv)

    def encrypt(self, plaintext: bytes, iv: bytes | None = None) -> bytes:
        """Encrypt plaintext; ECB and CBC output is padded, CFB and OFB keep the length."""
        iv = self._check_iv(iv)
        data = bytes(plaintext)
        if self.mode is Mode.ECB:
            return b"".join(self._cipher.encrypt_block(b) for b in _segments(pad(data)))
        if self.mode is Mode.CBC:
            out = []
            chain = iv
            for block in _segments(pad(data)):
                chain = self._cipher.encrypt_block(_xor(block, chain))
                out.append(chain)
            return b"".join(out)
        if self.mode is Mode.CFB:
            return self._cfb(data, iv, encrypting=True)
        return self._ofb(data, iv)

    def decrypt(self, ciphertext: bytes, iv: bytes | None = None) -> bytes:
        """Decrypt ciphertext produced by encrypt with the same key, mode and IV."""
        iv = self._check_iv(iv)
        data = bytes(ciphertext)
        if self.mode in (Mode.ECB, Mode.CBC) and len(data) % BLOCK_SIZE:
            raise ValueError(
                "Ciphertext length must be multiple of 16 bytes for ECB/CBC mode."
            )
        if self.mode is Mode.ECB:
            return unpad(b"".join(self._cipher.decrypt_block(b) for b in _segments(data)))
        if self.mode is Mode.CBC:
            out = []
            chain = iv
            for block in _segments(data):
                out.append(_xor(self._cipher.decrypt_block(block), chain))
                chain = block
            return unpad(b"".join(out))
        if self.mode is Mode.CFB:
            return self._cfb(data, iv, encrypting=False)
        return self._ofb(data, iv)

    def _cfb(self, data: bytes, iv: bytes, *, encrypting: bool) -> bytes:
        out = []
        chain = iv
        for segment in _segments(data):
            result = _xor(segment, self._cipher.encrypt_block(chain))
            out.append(result)
            chain = result if encrypting else segment
        return b"".join(out)

    def _ofb(self, data: bytes, iv: bytes) -> bytes:
        out = []
        chain = iv
        for segment in _segments(data):
            chain = self._cipher.encrypt_block(chain)
            out.append(_xor(segment, chain))
        return b"".join(out)