"""Pairing of the alignments of the two ends of a paired-end read."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, NamedTuple, Sequence

_MASK32 = 0xFFFFFFFF
_MASK64 = (1 << 64) - 1


@dataclass
class Region:
    """One alignment of a read segment, with the fields pairing reads and sets."""

    id: int = 0
    parent: int = 0
    rid: int = 0
    rev: bool = False
    rs: int = 0
    re: int = 0
    qs: int = 0
    qe: int = 0
    mapq: int = 0
    hash: int = 0
    dp_max: int = 0
    sam_pri: bool = False
    proper_frag: bool = False
    pe_thru: bool = False


class _Entry(NamedTuple):
    key: int
    s: int
    rev: int
    r: Region


def set_pe_thru(qlens: Sequence[int], regs: Sequence[Sequence[Region]]) -> None:
    """Flag the two primaries when the ends read through each other."""
    n_pri = [0, 0]
    pri = [-1, -1]
    for s in range(2):
        for i, r in enumerate(regs[s]):
            if r.id == r.parent:
                n_pri[s] += 1
                pri[s] = i
    if n_pri[0] == 1 and n_pri[1] == 1:
        p = regs[0][pri[0]]
        q = regs[1][pri[1]]
        if (p.rid == q.rid and p.rev == q.rev and abs(p.rs - q.rs) < 3
                and abs(p.re - q.re) < 3
                and ((p.qs == 0 and qlens[1] - q.qe == 0)
                     or (q.qs == 0 and qlens[0] - p.qe == 0))):
            p.pe_thru = q.pe_thru = True


def pair(max_gap_ref: int, pe_bonus: int, sub_diff: int, match_sc: int,
         qlens: Sequence[int], regs: Sequence[List[Region]]) -> None:
    """Choose the best pair of hits of the two ends and adjust their flags and mapq."""
    entries: List[_Entry] = []
    dp_thres = 0
    segs = 0
    for s in range(2):
        best = 0
        for r in regs[s]:
            rev = int(r.rev)
            entries.append(_Entry(r.rid << 32 | r.rs << 1 | (s ^ rev), s, rev, r))
            best = max(best, r.dp_max)
            segs |= 1 << s
        dp_thres += best
    if segs != 3:
        return
    dp_thres = max(0, dp_thres - pe_bonus)
    entries.sort(key=lambda e: e.key & _MASK64)

    best_score = -1
    max_idx = [-1, -1]
    last = [-1, -1]
    scores: List[int] = []
    for i, ei in enumerate(entries):
        if ei.key & 1:
            if last[ei.rev] < 0:
                continue
            r = ei.r
            q = entries[last[ei.rev]].r
            if r.rid != q.rid or r.rs - q.re > max_gap_ref:
                continue
            for j in range(last[ei.rev], -1, -1):
                ej = entries[j]
                if ej.rev != ei.rev or ej.s == ei.s:
                    continue
                q = ej.r
                if r.rid != q.rid or r.rs - q.re > max_gap_ref:
                    break
                if r.dp_max + q.dp_max < dp_thres:
                    continue
                score = (r.dp_max + q.dp_max) << 32 | ((r.hash + q.hash) & _MASK32)
                if score > best_score:
                    best_score = score
                    max_idx[ej.s] = j
                    max_idx[ei.s] = i
                scores.append(score)
        else:
            last[ei.rev] = i
    scores.sort(key=lambda v: v & _MASK64)

    if scores and best_score > 0:
        chosen = [entries[max_idx[0]].r, entries[max_idx[1]].r]
        for r in chosen:
            r.proper_frag = True
        for s, r in enumerate(chosen):
            if r.id != r.parent:
                p = regs[s][r.parent]
                for other in regs[s]:
                    if other.parent == p.id:
                        other.parent = r.id
                p.mapq = 0
            if not r.sam_pri:
                for other in regs[s]:
                    other.sam_pri = False
                r.sam_pri = True
        r0, r1 = chosen
        mapq_pe = max(r0.mapq, r1.mapq)
        top = best_score >> 32
        n_sub = sum(1 for v in scores if (v >> 32) + sub_diff >= top)
        if len(scores) > 1:
            second = scores[-2] >> 32
            mapq_pe_alt = int(6.02 * (top - second) / match_sc - 4.343 * math.log(n_sub))
            mapq_pe = min(mapq_pe, mapq_pe_alt)
        for r in chosen:
            if r.mapq < mapq_pe:
                r.mapq = int(.2 * r.mapq + .8 * mapq_pe + .499)
        if len(scores) == 1:
            for r in chosen:
                r.mapq = max(r.mapq, 2)
        elif top > scores[-2] >> 32:
            for r in chosen:
                r.mapq = max(r.mapq, 1)

    set_pe_thru(qlens, regs)