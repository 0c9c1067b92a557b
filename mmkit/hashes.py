"""Hash functions for string and integer keys, with 32-bit results."""

from __future__ import annotations

from typing import Union

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF


def _signed_char(byte: int) -> int:
    return byte - 256 if byte >= 128 else byte


def x31_hash_string(s: Union[str, bytes]) -> int:
    """X31 hash of a string: ``h = h * 31 + c`` over its bytes.

    A ``str`` is hashed as its UTF-8 bytes.  Hashing stops at the first NUL
    byte.  Bytes are taken as signed characters.
    """
    data = s.encode() if isinstance(s, str) else bytes(s)
    data = data.split(b"\0", 1)[0]
    h = 0
    for byte in data:
        h = ((h << 5) - h + _signed_char(byte)) & _MASK32
    return h


def wang_hash(key: int) -> int:
    """Thomas Wang's 32-bit integer hash; the key is taken modulo 2**32."""
    key &= _MASK32
    key = (key + (~(key << 15) & _MASK32)) & _MASK32
    key ^= key >> 10
    key = (key + (key << 3)) & _MASK32
    key ^= key >> 6
    key = (key + (~(key << 11) & _MASK32)) & _MASK32
    key ^= key >> 16
    return key


def int64_hash(key: int) -> int:
    """Hash of a 64-bit integer key folded to 32 bits."""
    key &= _MASK64
    return ((key >> 33) ^ key ^ (key << 11)) & _MASK32