"""Symmetric (w,k)-minimizers of DNA sequences."""

from __future__ import annotations

from collections import deque
from typing import List, NamedTuple, Union

_U64_MAX = (1 << 64) - 1


def _build_nt4_table() -> bytes:
    table = bytearray([4] * 256)
    for letters, code in (("Aa", 0), ("Cc", 1), ("Gg", 2), ("TtUu", 3)):
        for ch in letters:
            table[ord(ch)] = code
    return bytes(table)


NT4_TABLE = _build_nt4_table()


class Minimizer(NamedTuple):
    """``x = hash << 8 | span``; ``y = rid << 32 | last_pos << 1 | strand``."""

    x: int
    y: int


def hash64(key: int, mask: int) -> int:
    """Invertible integer hash restricted to the bits of ``mask``."""
    key = (~key + (key << 21)) & mask
    key = key ^ key >> 24
    key = ((key + (key << 3)) + (key << 8)) & mask
    key = key ^ key >> 14
    key = ((key + (key << 2)) + (key << 4)) & mask
    key = key ^ key >> 28
    key = (key + (key << 31)) & mask
    return key


def sketch(seq: Union[str, bytes], w: int, k: int, rid: int = 0,
           is_hpc: bool = False) -> List[Minimizer]:
    """Find a minimizer for every ``w`` consecutive k-mers of ``seq``.

    With ``is_hpc`` true, k-mers are taken over the homopolymer-compressed
    sequence.  Symmetric k-mers are skipped.
    """
    data = seq.encode("latin-1", "replace") if isinstance(seq, str) else bytes(seq)
    n = len(data)
    if n <= 0 or not 0 < w < 256 or not 0 < k <= 28:
        raise ValueError("need a non-empty sequence, 0 < w < 256 and 0 < k <= 28")
    codes = [NT4_TABLE[b] for b in data]
    shift1 = 2 * (k - 1)
    mask = (1 << 2 * k) - 1
    fwd = rev = 0
    empty = Minimizer(_U64_MAX, _U64_MAX)
    buf = [empty] * w
    cur_min = empty
    min_pos = buf_pos = 0
    l = kmer_span = 0
    runs: deque = deque()
    out: List[Minimizer] = []

    def push_equal(lo: int, hi: int) -> None:
        for j in range(lo, hi):
            if buf[j].x == cur_min.x and buf[j].y != cur_min.y:
                out.append(buf[j])

    i = 0
    while i < n:
        c = codes[i]
        info = empty
        if c < 4:
            if is_hpc:
                skip_len = 1
                if i + 1 < n and codes[i + 1] == c:
                    skip_len = 2
                    while i + skip_len < n and codes[i + skip_len] == c:
                        skip_len += 1
                    i += skip_len - 1
                runs.append(skip_len)
                kmer_span += skip_len
                if len(runs) > k:
                    kmer_span -= runs.popleft()
            else:
                kmer_span = min(l + 1, k)
            fwd = (fwd << 2 | c) & mask
            rev = (rev >> 2) | (3 ^ c) << shift1
            if fwd == rev:
                i += 1
                continue
            z = 0 if fwd < rev else 1
            l += 1
            if l >= k and kmer_span < 256:
                info = Minimizer(hash64(rev if z else fwd, mask) << 8 | kmer_span,
                                 rid << 32 | ((i << 1) & 0xFFFFFFFF) | z)
        else:
            l = kmer_span = 0
            runs.clear()
        buf[buf_pos] = info
        if l == w + k - 1 and cur_min.x != _U64_MAX:
            push_equal(buf_pos + 1, w)
            push_equal(0, buf_pos)
        if info.x <= cur_min.x:
            if l >= w + k and cur_min.x != _U64_MAX:
                out.append(cur_min)
            cur_min, min_pos = info, buf_pos
        elif buf_pos == min_pos:
            if l >= w + k - 1 and cur_min.x != _U64_MAX:
                out.append(cur_min)
            cur_min = Minimizer(_U64_MAX, cur_min.y)
            for j in (*range(buf_pos + 1, w), *range(0, buf_pos + 1)):
                if cur_min.x >= buf[j].x:
                    cur_min, min_pos = buf[j], j
            if l >= w + k - 1 and cur_min.x != _U64_MAX:
                push_equal(buf_pos + 1, w)
                push_equal(0, buf_pos + 1)
        buf_pos += 1
        if buf_pos == w:
            buf_pos = 0
        i += 1
    if cur_min.x != _U64_MAX:
        out.append(cur_min)
    return out