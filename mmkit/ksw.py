"""Striped local alignment with 16-bit saturating scores.

The query is laid out in stripes: vector ``i`` holds query positions
``i, i + slen, i + 2*slen, ...``, one per lane.  Positions past the end of
the query are padded with a score of 0.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, NamedTuple, Sequence, Tuple

_LANES16 = 8
_Vec = Tuple[int, ...]


def _s8(value: int) -> int:
    value &= 0xFF
    return value - 0x100 if value >= 0x80 else value


def _s16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value >= 0x8000 else value


@dataclass(frozen=True)
class QueryProfile:
    """Striped score profile of a query.

    ``profile[a][i]`` is the vector of scores of target letter ``a`` against
    the query positions in stripe ``i``.  With ``size == 1`` the scores are
    bytes biased by ``shift``; with ``size == 2`` they are signed 16-bit.
    """

    qlen: int
    slen: int
    size: int
    shift: int
    mdiff: int
    max_score: int
    profile: Tuple[Tuple[_Vec, ...], ...]

    @property
    def lanes(self) -> int:
        """Number of scores per vector."""
        return 8 * (3 - self.size)


class LocalHit(NamedTuple):
    """Best local score and the query and target end positions reaching it."""

    score: int
    qe: int
    te: int


def ll_qinit(size: int, query: Sequence[int], m: int, mat: Sequence[int]) -> QueryProfile:
    """Build the striped profile of ``query`` for an ``m``-letter alphabet.

    ``mat`` is the ``m * m`` scoring matrix in row-major order; ``size`` is
    the number of bytes per score (values above 1 mean 2).
    """
    size = 2 if size > 1 else 1
    lanes = 8 * (3 - size)
    query = list(query)
    mat = list(mat)
    qlen = len(query)
    if qlen == 0:
        raise ValueError("the query must not be empty")
    if len(mat) < m * m:
        raise ValueError("the scoring matrix needs m*m entries")
    if any(not 0 <= c < m for c in query):
        raise ValueError("query letters must lie in [0, m)")
    slen = (qlen + lanes - 1) // lanes

    shift = 127
    mdiff = 0
    for v in mat[:m * m]:
        if v < _s8(shift):
            shift = v & 0xFF
        if v > _s8(mdiff):
            mdiff = v & 0xFF
    max_score = mdiff
    shift = (256 - shift) & 0xFF
    mdiff = (mdiff + shift) & 0xFF

    rows = []
    padding = [0] * (slen * lanes - qlen)
    for a in range(m):
        row = mat[a * m:(a + 1) * m]
        padded = [row[c] for c in query] + padding
        if size == 1:
            padded = [(v + shift) & 0xFF for v in padded]
        else:
            padded = [_s16(v) for v in padded]
        rows.append(tuple(tuple(padded[i::slen]) for i in range(slen)))
    return QueryProfile(qlen=qlen, slen=slen, size=size, shift=shift, mdiff=mdiff,
                        max_score=max_score, profile=tuple(rows))


def _shift_lanes(v: _Vec) -> _Vec:
    return (0,) + v[:-1]


def _vadds(a: _Vec, b: _Vec) -> _Vec:
    return tuple(max(-32768, min(32767, x + y)) for x, y in zip(a, b))


def _vsubs(a: _Vec, b: int) -> _Vec:
    ub = b & 0xFFFF
    return tuple(_s16(max((x & 0xFFFF) - ub, 0)) for x in a)


def _vmax(a: _Vec, b: _Vec) -> _Vec:
    return tuple(map(max, a, b))


def _lazy_f(h1: List[_Vec], f: _Vec, gapoe: int, gape: int) -> None:
    for _ in range(_LANES16):
        f = _shift_lanes(f)
        for j, hj in enumerate(h1):
            h = _vmax(hj, f)
            h1[j] = h
            h = _vsubs(h, gapoe)
            f = _vsubs(f, gape)
            if not any(x > y for x, y in zip(f, h)):
                return


def ll_i16(profile: QueryProfile, target: Sequence[int], gapo: int, gape: int) -> LocalHit:
    """Local alignment of ``target`` against a 16-bit query profile.

    Returns the best score, the last target row reaching it (``te``) and the
    query position holding it in that row (``qe``); both are -1 when unset.
    """
    if profile.size != 2:
        raise ValueError("ll_i16 needs a profile built with size 2")
    slen = profile.slen
    gapoe = _s16(gapo + gape)
    gape = _s16(gape)
    zero: _Vec = (0,) * _LANES16
    h0: List[_Vec] = [zero] * slen
    h1: List[_Vec] = [zero] * slen
    e_vecs: List[_Vec] = [zero] * slen
    hmax: List[_Vec] = [zero] * slen
    gmax, te = 0, -1

    for i, c in enumerate(target):
        scores = profile.profile[c]
        h = _shift_lanes(h0[-1])
        f = zero
        best = zero
        for j, (s, e, prev) in enumerate(zip(scores, list(e_vecs), list(h0))):
            h = _vmax(_vmax(_vadds(h, s), e), f)
            best = _vmax(best, h)
            h1[j] = h
            h = _vsubs(h, gapoe)
            e_vecs[j] = _vmax(_vsubs(e, gape), h)
            f = _vmax(_vsubs(f, gape), h)
            h = prev
        _lazy_f(h1, f, gapoe, gape)
        imax = max(best) & 0xFFFF
        if imax >= gmax:
            gmax, te = imax, i
            hmax = list(h1)
        h0, h1 = h1, h0

    ends = [j + lane * slen
            for j, vec in enumerate(hmax)
            for lane, v in enumerate(vec)
            if v & 0xFFFF == gmax]
    return LocalHit(score=gmax, qe=ends[-1] if ends else -1, te=te)