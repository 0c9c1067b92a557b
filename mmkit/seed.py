"""Seed collection and filtering of highly repetitive minimizers.

Minimizers are pairs ``(x, y)`` of packed integers:
``x = hash << 8 | span`` and ``y = seg_id << 32 | pos << 1 | strand``.
"""

from __future__ import annotations

import heapq
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Sequence, Tuple

MAX_MAX_HIGH_OCC = 128


@dataclass
class Seed:
    """A query minimizer together with its hits in the index."""

    q_pos: int
    q_span: int
    seg_id: int
    hits: Tuple[int, ...]
    is_tandem: bool = False
    flt: bool = False

    @property
    def n(self) -> int:
        return len(self.hits)


@dataclass
class MatchSummary:
    """Seeds kept after filtering and statistics about them."""

    seeds: List[Seed]
    n_a: int
    rep_len: int
    mini_pos: List[int] = field(default_factory=list)


def filter_query_minimizers(minimizers: Sequence, q_occ_max: int, q_occ_frac: float) -> list:
    """Drop minimizers that occur too often within the query itself."""
    items = list(minimizers)
    n = len(items)
    if n <= q_occ_max or q_occ_frac <= 0.0 or q_occ_max <= 0:
        return items
    counts = Counter(x for x, _ in items)
    dropped = {x for x, cnt in counts.items() if cnt > q_occ_max and cnt > n * q_occ_frac}
    return [m for m in items if m[0] != 0 and m[0] not in dropped]


def collect_all(minimizers: Sequence, lookup: Callable[[int], Iterable[int]]) -> List[Seed]:
    """Look every minimizer up; keep those with at least one hit."""
    items = list(minimizers)
    seeds = []
    for i, (x, y) in enumerate(items):
        hits = tuple(lookup(x >> 8))
        if not hits:
            continue
        key = x >> 8
        tandem = (i > 0 and items[i - 1][0] >> 8 == key) or \
                 (i < len(items) - 1 and items[i + 1][0] >> 8 == key)
        seeds.append(Seed(q_pos=y & 0xFFFFFFFF, q_span=x & 0xFF, seg_id=y >> 32,
                          hits=hits, is_tandem=tandem))
    return seeds


def select_seeds(seeds: List[Seed], qlen: int, max_occ: int, max_max_occ: int, dist: int) -> None:
    """Flag high-occurrence seeds, keeping a few of the rarest in each streak."""
    n = len(seeds)
    if n <= 1 or not any(s.n > max_occ for s in seeds):
        return
    last0 = -1
    for i in range(n + 1):
        if i < n and seeds[i].n > max_occ:
            continue
        if i - last0 > 1:
            ps = 0 if last0 < 0 else seeds[last0].q_pos >> 1
            pe = qlen if i == n else seeds[i].q_pos >> 1
            st, en = last0 + 1, i
            max_high_occ = int((pe - ps) / dist + .499)
            if max_high_occ > 0:
                max_high_occ = min(max_high_occ, MAX_MAX_HIGH_OCC)
                heap = [-(seeds[j].n << 32 | j) for j in range(st, min(en, st + max_high_occ))]
                heapq.heapify(heap)
                for j in range(st + len(heap), en):
                    if seeds[j].n < (-heap[0]) >> 32:
                        heapq.heapreplace(heap, -(seeds[j].n << 32 | j))
                for key in heap:
                    seeds[(-key) & 0xFFFFFFFF].flt = True
            for j in range(st, en):
                seeds[j].flt = not seeds[j].flt
                if seeds[j].n > max_max_occ:
                    seeds[j].flt = True
        last0 = i


def collect_matches(seeds: List[Seed], qlen: int, max_occ: int, max_max_occ: int,
                    dist: int) -> MatchSummary:
    """Filter seeds and measure the query length covered by repetitive ones."""
    if dist > 0 and max_max_occ > max_occ:
        select_seeds(seeds, qlen, max_occ, max_max_occ, dist)
    else:
        for s in seeds:
            if s.n > max_occ:
                s.flt = True
    rep_st = rep_en = rep_len = n_a = 0
    kept: List[Seed] = []
    mini_pos: List[int] = []
    for q in seeds:
        if q.flt:
            en = (q.q_pos >> 1) + 1
            st = en - q.q_span
            if st > rep_en:
                rep_len += rep_en - rep_st
                rep_st, rep_en = st, en
            else:
                rep_en = en
        else:
            n_a += q.n
            mini_pos.append(q.q_span << 32 | q.q_pos >> 1)
            kept.append(q)
    rep_len += rep_en - rep_st
    return MatchSummary(seeds=kept, n_a=n_a, rep_len=rep_len, mini_pos=mini_pos)