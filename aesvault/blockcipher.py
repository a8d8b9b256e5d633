"""The AES block transform: key schedule and single-block encryption and decryption."""

from __future__ import annotations

from enum import Enum

BLOCK_SIZE = 16


class KeyLength(Enum):
    """Supported AES key sizes, in bytes."""

    AES_128 = 16
    AES_192 = 24
    AES_256 = 32

    @property
    def words(self) -> int:
        """Number of 32-bit words in the key (Nk)."""
        return self.value // 4

    @property
    def rounds(self) -> int:
        """Number of cipher rounds (Nr)."""
        return self.words + 6


def _xtime(value: int) -> int:
    value <<= 1
    if value & 0x100:
        value ^= 0x11B
    return value


def _gf_mul(a: int, b: int) -> int:
    result = 0
    while b:
        if b & 1:
            result ^= a
        a = _xtime(a)
        b >>= 1
    return result


def _gf_inverse(value: int) -> int:
    if value == 0:
        return 0
    # a^254 is the multiplicative inverse in GF(2^8)
    result, base, exponent = 1, value, 254
    while exponent:
        if exponent & 1:
            result = _gf_mul(result, base)
        base = _gf_mul(base, base)
        exponent >>= 1
    return result


def _rotl8(value: int, shift: int) -> int:
    return ((value << shift) | (value >> (8 - shift))) & 0xFF


def _build_sbox() -> bytes:
    table = bytearray(256)
    for value in range(256):
        inv = _gf_inverse(value)
        table[value] = (
            inv
            ^ _rotl8(inv, 1)
            ^ _rotl8(inv, 2)
            ^ _rotl8(inv, 3)
            ^ _rotl8(inv, 4)
            ^ 0x63
        )
    return bytes(table)


_SBOX = _build_sbox()
_INV_SBOX = bytes(_SBOX.index(value) for value in range(256))


def _mul_table(factor: int) -> bytes:
    return bytes(_gf_mul(value, factor) for value in range(256))


_MUL2 = _mul_table(2)
_MUL3 = _mul_table(3)
_MUL9 = _mul_table(9)
_MUL11 = _mul_table(11)
_MUL13 = _mul_table(13)
_MUL14 = _mul_table(14)


def _build_rcon(count: int) -> tuple[int, ...]:
    values = [0x00]
    current = 0x01
    for _ in range(count - 1):
        values.append(current)
        current = _xtime(current) & 0xFF
    return tuple(values)


_RCON = _build_rcon(11)

# State bytes are column-major: index = 4 * column + row.
_SHIFT_ROWS = (0, 5, 10, 15, 4, 9, 14, 3, 8, 13, 2, 7, 12, 1, 6, 11)
_INV_SHIFT_ROWS = (0, 13, 10, 7, 4, 1, 14, 11, 8, 5, 2, 15, 12, 9, 6, 3)


def _key_length(key: bytes) -> KeyLength:
    try:
        return KeyLength(len(key))
    except ValueError:
        raise ValueError("Key length must be 16, 24, or 32 bytes.") from None


def _sub_word(word: int) -> int:
    return (
        (_SBOX[(word >> 24) & 0xFF] << 24)
        | (_SBOX[(word >> 16) & 0xFF] << 16)
        | (_SBOX[(word >> 8) & 0xFF] << 8)
        | _SBOX[word & 0xFF]
    )


def _rot_word(word: int) -> int:
    return ((word << 8) & 0xFFFFFFFF) | (word >> 24)


def expand_key(key: bytes) -> list[int]:
    """Return the expanded key schedule as a list of big-endian 32-bit words."""
    key = bytes(key)
    length = _key_length(key)
    nk = length.words
    total = 4 * (length.rounds + 1)
    words = [int.from_bytes(key[4 * i : 4 * i + 4], "big") for i in range(nk)]
    for i in range(nk, total):
        temp = words[i - 1]
        if i % nk == 0:
            temp = _sub_word(_rot_word(temp)) ^ (_RCON[i // nk] << 24)
        elif nk > 6 and i % nk == 4:
            temp = _sub_word(temp)
        words.append(words[i - nk] ^ temp)
    return words


def _mix_columns(state: list[int]) -> list[int]:
    out = [0] * BLOCK_SIZE
    for col in range(0, BLOCK_SIZE, 4):
        a0, a1, a2, a3 = state[col : col + 4]
        out[col] = _MUL2[a0] ^ _MUL3[a1] ^ a2 ^ a3
        out[col + 1] = a0 ^ _MUL2[a1] ^ _MUL3[a2] ^ a3
        out[col + 2] = a0 ^ a1 ^ _MUL2[a2] ^ _MUL3[a3]
        out[col + 3] = _MUL3[a0] ^ a1 ^ a2 ^ _MUL2[a3]
    return out


def _inv_mix_columns(state: list[int]) -> list[int]:
    out = [0] * BLOCK_SIZE
    for col in range(0, BLOCK_SIZE, 4):
        a0, a1, a2, a3 = state[col : col + 4]
        out[col] = _MUL14[a0] ^ _MUL11[a1] ^ _MUL13[a2] ^ _MUL9[a3]
        out[col + 1] = _MUL9[a0] ^ _MUL14[a1] ^ _MUL11[a2] ^ _MUL13[a3]
        out[col + 2] = _MUL13[a0] ^ _MUL9[a1] ^ _MUL14[a2] ^ _MUL11[a3]
        out[col + 3] = _MUL11[a0] ^ _MUL13[a1] ^ _MUL9[a2] ^ _MUL14[a3]
    return out


def _check_block(block: bytes) -> list[int]:
    data = list(bytes(block))
    if len(data) != BLOCK_SIZE:
        raise ValueError(f"Block must be {BLOCK_SIZE} bytes, got {len(data)}.")
    return data


class BlockCipher:
    """AES applied to single 16-byte blocks with a fixed key."""

    def __init__(self, key: bytes) -> None:
        self.key_length = _key_length(bytes(key))
        self.rounds = self.key_length.rounds
        words = expand_key(key)
        self._round_keys = [
            list(b"".join(w.to_bytes(4, "big") for w in words[4 * r : 4 * r + 4]))
            for r in range(self.rounds + 1)
        ]

    def _add_round_key(self, state: list[int], round_index: int) -> list[int]:
        return [s ^ k for s, k in zip(state, self._round_keys[round_index])]

    def encrypt_block(self, block: bytes) -> bytes:
        """Encrypt one 16-byte block."""
        state = self._add_round_key(_check_block(block), 0)
        for round_index in range(1, self.rounds):
            state = [_SBOX[state[i]] for i in _SHIFT_ROWS]
            state = _mix_columns(state)
            state = self._add_round_key(state, round_index)
        state = [_SBOX[state[i]] for i in _SHIFT_ROWS]
        return bytes(self._add_round_key(state, self.rounds))

    def decrypt_block(self, block: bytes) -> bytes:
        """Decrypt one 16-byte block."""
        state = self._add_round_key(_check_block(block), self.rounds)
        for round_index in range(self.rounds - 1, 0, -1):
            state = [_INV_SBOX[state[i]] for i in _INV_SHIFT_ROWS]
            state = self._add_round_key(state, round_index)
            state = _inv_mix_columns(state)
        state = [_INV_SBOX[state[i]] for i in _INV_SHIFT_ROWS]
        return bytes(self._add_round_key(state, 0))