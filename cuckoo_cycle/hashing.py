from __future__ import annotations
from dataclasses import dataclass
import struct
from typing import Protocol, Sequence, Tuple
import hashlib

MASK64 = 0xFFFFFFFFFFFFFFFF

Key = Tuple[int, int, int, int]


class HashPlugin(Protocol):
    def hash(self, word: int) -> int: ...


def _rotl(x: int, b: int) -> int:
    return ((x << b) | (x >> (64 - b))) & MASK64


def _check_key(key: Sequence[int]) -> Key:
    words = tuple(key)
    if len(words) != 4:
        raise ValueError(f"key must be four 64-bit words, got {len(words)}")
    for w in words:
        if not isinstance(w, int) or isinstance(w, bool) or not 0 <= w <= MASK64:
            raise ValueError(f"key word out of 64-bit range: {w!r}")
    return words  # type: ignore[return-value]


def key_from_header(header: bytes, nonce: int = 0) -> Key:
    """Derive the four siphash key words from a header and a nonce.

    BLAKE2b-256 over ``header || nonce`` (nonce as 8 little-endian bytes),
    read back as four little-endian 64-bit words.
    """
    if isinstance(nonce, bool) or not isinstance(nonce, int):
        raise TypeError(f"nonce must be an int, got {nonce!r}")
    if not 0 <= nonce <= MASK64:
        raise ValueError(f"nonce must fit in 64 bits, got {nonce}")
    h = hashlib.blake2b(digest_size=32)
    h.update(header)
    h.update(nonce.to_bytes(8, "little", signed=False))
    return struct.unpack("<4Q", h.digest())


@dataclass(frozen=True)
class SipHash24:
    """SipHash-2-4 variant used by Cuckoo Cycle.

    The state is seeded straight from a 256-bit key (no constant XOR) and a
    single 64-bit word is compressed without a length block, so the output
    differs from the stock SipHash-2-4 of the same bytes.
    """
    key: Key

    def __post_init__(self):
        object.__setattr__(self, "key", _check_key(self.key))

    def hash(self, word: int) -> int:
        word &= MASK64
        v0, v1, v2, v3 = self.key

        # compression
        v3 ^= word
        v0, v1, v2, v3 = _sip_round(v0, v1, v2, v3)
        v0, v1, v2, v3 = _sip_round(v0, v1, v2, v3)
        v0 ^= word

        # finalisation
        v2 ^= 0xFF
        for _ in range(4):
            v0, v1, v2, v3 = _sip_round(v0, v1, v2, v3)

        return v0 ^ v1 ^ v2 ^ v3


def _sip_round(v0: int, v1: int, v2: int, v3: int) -> Tuple[int, int, int, int]:
    v0 = (v0 + v1) & MASK64
    v2 = (v2 + v3) & MASK64
    v1 = _rotl(v1, 13)
    v3 = _rotl(v3, 16)
    v1 ^= v0
    v3 ^= v2
    v0 = _rotl(v0, 32)
    v2 = (v2 + v1) & MASK64
    v0 = (v0 + v3) & MASK64
    v1 = _rotl(v1, 17)
    v3 = _rotl(v3, 21)
    v1 ^= v2
    v3 ^= v0
    v2 = _rotl(v2, 32)
    return v0, v1, v2, v3


class CuckooHash:
    def __init__(self, key: Sequence[int], impl: str = "siphash24"):
        if impl == "siphash24":
            self.impl: HashPlugin = SipHash24(tuple(key))
        else:
            raise ValueError(f"Unknown hash impl: {impl}")

    def endpoint(self, edge_index: int, side: int, n: int) -> int:
        # side 0 -> U endpoint, side 1 -> V endpoint
        return self.impl.hash(2 * edge_index + (side & 1)) % n
