"""Indexing and mapping options, presets and consistency checks."""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass, fields
from typing import Optional

log = logging.getLogger(__name__)

_INT_MAX = 2**31 - 1


class IdxFlag(enum.IntFlag):
    """Flags controlling how an index is built."""

    HPC = 0x1
    NO_SEQ = 0x2
    NO_NAME = 0x4


class MapFlag(enum.IntFlag):
    """Flags controlling mapping and output."""

    NO_DIAG = 0x001
    NO_DUAL = 0x002
    CIGAR = 0x004
    OUT_SAM = 0x008
    NO_QUAL = 0x010
    OUT_CG = 0x020
    OUT_CS = 0x040
    SPLICE = 0x080
    SPLICE_FOR = 0x100
    SPLICE_REV = 0x200
    NO_LJOIN = 0x400
    OUT_CS_LONG = 0x800
    SR = 0x1000
    FRAG_MODE = 0x2000
    NO_PRINT_2ND = 0x4000
    TWO_IO_THREADS = 0x8000
    LONG_CIGAR = 0x10000
    INDEPEND_SEG = 0x20000
    SPLICE_FLANK = 0x40000
    SOFTCLIP = 0x80000
    FOR_ONLY = 0x100000
    REV_ONLY = 0x200000
    HEAP_SORT = 0x400000
    ALL_CHAINS = 0x800000
    OUT_MD = 0x1000000
    COPY_COMMENT = 0x2000000
    EQX = 0x4000000
    PAF_NO_HIT = 0x8000000
    NO_END_FLT = 0x10000000
    HARD_MLEVEL = 0x20000000
    SAM_HIT_ONLY = 0x40000000
    RMQ = 0x80000000
    QSTRAND = 0x100000000
    NO_INV = 0x200000000
    NO_HASH_NAME = 0x400000000
    SPLICE_OLD = 0x800000000
    SECONDARY_SEQ = 0x1000000000


class OptionError(ValueError):
    """An invalid preset or an inconsistent combination of options."""

    def __init__(self, message: str, code: int = -1) -> None:
        super().__init__(message)
        self.code = code


@dataclass
class IndexOptions:
    """Options for building an index."""

    k: int = 15
    w: int = 10
    flag: IdxFlag = IdxFlag(0)
    bucket_bits: int = 14
    mini_batch_size: int = 50000000
    batch_size: int = 8000000000


@dataclass
class MapOptions:
    """Options for mapping queries against an index."""

    flag: MapFlag = MapFlag(0)
    seed: int = 11
    sdust_thres: int = 0
    max_qlen: int = 0

    bw: int = 500
    bw_long: int = 20000
    max_gap: int = 5000
    max_gap_ref: int = -1
    max_frag_len: int = 0
    max_chain_skip: int = 25
    max_chain_iter: int = 5000
    min_cnt: int = 3
    min_chain_score: int = 40
    chain_gap_scale: float = 0.8
    chain_skip_scale: float = 0.0
    rmq_size_cap: int = 100000
    rmq_inner_dist: int = 1000
    rmq_rescue_size: int = 1000
    rmq_rescue_ratio: float = 0.1

    mask_level: float = 0.5
    mask_len: int = _INT_MAX
    pri_ratio: float = 0.8
    best_n: int = 5
    alt_drop: float = 0.15

    a: int = 2
    b: int = 4
    q: int = 4
    e: int = 2
    q2: int = 24
    e2: int = 1
    transition: int = 4
    sc_ambi: int = 1
    noncan: int = 0
    junc_bonus: int = 0
    zdrop: int = 400
    zdrop_inv: int = 200
    end_bonus: int = -1
    min_dp_max: int = 80
    min_ksw_len: int = 200
    anchor_ext_len: int = 20
    anchor_ext_shift: int = 6
    max_clip_ratio: float = 1.0

    rank_min_len: int = 500
    rank_frac: float = 0.9

    pe_ori: int = 0
    pe_bonus: int = 33

    mid_occ_frac: float = 2e-4
    q_occ_frac: float = 0.01
    min_mid_occ: int = 10
    max_mid_occ: int = 1000000
    mid_occ: int = 0
    max_occ: int = 0
    max_max_occ: int = 4095
    occ_dist: int = 500
    mini_batch_size: int = 500000000
    max_sw_mat: int = 100000000
    cap_kalloc: int = 1000000000

    split_prefix: Optional[str] = None

    def set_max_intron_len(self, max_intron_len: int) -> None:
        """In splice mode, cap the reference gap and both bandwidths."""
        if (self.flag & MapFlag.SPLICE) and max_intron_len > 0:
            self.max_gap_ref = self.bw = self.bw_long = max_intron_len

    def update(self, estimated_mid_occ: int) -> None:
        """Finish the options once the index is known.

        ``estimated_mid_occ`` is the occurrence threshold the index gives for
        ``mid_occ_frac``; it is used only when ``mid_occ`` is not set.
        """
        if self.flag & (MapFlag.SPLICE_FOR | MapFlag.SPLICE_REV):
            self.flag |= MapFlag.SPLICE
        if self.mid_occ <= 0:
            self.mid_occ = estimated_mid_occ
            if self.mid_occ < self.min_mid_occ:
                self.mid_occ = self.min_mid_occ
            if self.max_mid_occ > self.min_mid_occ and self.mid_occ > self.max_mid_occ:
                self.mid_occ = self.max_mid_occ
        if self.bw_long < self.bw:
            self.bw_long = self.bw
        log.info("mid_occ = %d", self.mid_occ)


def _reset(target, fresh) -> None:
    for f in fields(fresh):
        setattr(target, f.name, getattr(fresh, f.name))


def set_preset(preset: Optional[str], io: IndexOptions, mo: MapOptions) -> None:
    """Apply a named preset to ``io`` and ``mo``; ``None`` restores the defaults."""
    if preset is None:
        _reset(io, IndexOptions())
        _reset(mo, MapOptions())
    elif preset == "map-ont":
        pass
    elif preset == "ava-ont":
        io.flag, io.k, io.w = IdxFlag(0), 15, 5
        mo.flag |= MapFlag.ALL_CHAINS | MapFlag.NO_DIAG | MapFlag.NO_DUAL | MapFlag.NO_LJOIN
        mo.min_chain_score, mo.pri_ratio, mo.max_chain_skip = 100, 0.0, 25
        mo.bw = mo.bw_long = 2000
        mo.occ_dist = 0
    elif preset in ("map10k", "map-pb"):
        io.flag |= IdxFlag.HPC
        io.k = 19
    elif preset == "ava-pb":
        io.flag |= IdxFlag.HPC
        io.k, io.w = 19, 5
        mo.flag |= MapFlag.ALL_CHAINS | MapFlag.NO_DIAG | MapFlag.NO_DUAL | MapFlag.NO_LJOIN
        mo.min_chain_score, mo.pri_ratio, mo.max_chain_skip = 100, 0.0, 25
        mo.bw_long = mo.bw
        mo.occ_dist = 0
    elif preset in ("map-hifi", "map-ccs"):
        io.flag, io.k, io.w = IdxFlag(0), 19, 19
        mo.max_gap = 10000
        mo.a, mo.b, mo.q, mo.q2, mo.e, mo.e2 = 1, 4, 6, 26, 2, 1
        mo.occ_dist = 500
        mo.min_mid_occ, mo.max_mid_occ = 50, 500
        mo.min_dp_max = 200
    elif preset == "map-iclr-prerender":
        io.flag, io.k = IdxFlag(0), 15
        mo.b, mo.transition = 6, 1
        mo.q, mo.q2 = 10, 50
    elif preset == "map-iclr":
        io.flag, io.k = IdxFlag(0), 19
        mo.b, mo.transition = 6, 4
        mo.q, mo.q2 = 10, 50
    elif preset.startswith("asm"):
        io.flag, io.k, io.w = IdxFlag(0), 19, 19
        mo.bw, mo.bw_long = 1000, 100000
        mo.max_gap = 10000
        mo.flag |= MapFlag.RMQ
        mo.min_mid_occ, mo.max_mid_occ = 50, 500
        mo.min_dp_max = 200
        mo.best_n = 50
        if preset == "asm5":
            mo.a, mo.b, mo.q, mo.q2, mo.e, mo.e2 = 1, 19, 39, 81, 3, 1
        elif preset == "asm10":
            mo.a, mo.b, mo.q, mo.q2, mo.e, mo.e2 = 1, 9, 16, 41, 2, 1
        elif preset == "asm20":
            mo.a, mo.b, mo.q, mo.q2, mo.e, mo.e2 = 1, 4, 6, 26, 2, 1
            io.w = 10
        else:
            raise OptionError(f"unknown preset '{preset}'")
        mo.zdrop = mo.zdrop_inv = 200
    elif preset in ("short", "sr"):
        io.flag, io.k, io.w = IdxFlag(0), 21, 11
        mo.flag |= (MapFlag.SR | MapFlag.FRAG_MODE | MapFlag.NO_PRINT_2ND
                    | MapFlag.TWO_IO_THREADS | MapFlag.HEAP_SORT)
        mo.pe_ori = 0 << 1 | 1
        mo.a, mo.b, mo.q, mo.e, mo.q2, mo.e2 = 2, 8, 12, 2, 24, 1
        mo.zdrop = mo.zdrop_inv = 100
        mo.end_bonus = 10
        mo.max_frag_len = 800
        mo.max_gap = 100
        mo.bw = mo.bw_long = 100
        mo.pri_ratio = 0.5
        mo.min_cnt = 2
        mo.min_chain_score = 25
        mo.min_dp_max = 40
        mo.best_n = 20
        mo.mid_occ = 1000
        mo.max_occ = 5000
        mo.mini_batch_size = 50000000
    elif preset.startswith("splice") or preset == "cdna":
        io.flag, io.k, io.w = IdxFlag(0), 15, 5
        mo.flag |= MapFlag.SPLICE | MapFlag.SPLICE_FOR | MapFlag.SPLICE_REV | MapFlag.SPLICE_FLANK
        mo.max_sw_mat = 0
        mo.max_gap = 2000
        mo.max_gap_ref = mo.bw = mo.bw_long = 200000
        mo.a, mo.b, mo.q, mo.e, mo.q2, mo.e2 = 1, 2, 2, 1, 32, 0
        mo.noncan = 9
        mo.junc_bonus = 9
        mo.zdrop, mo.zdrop_inv = 200, 100
        if preset == "splice:hq":
            mo.junc_bonus, mo.b, mo.q, mo.q2 = 5, 4, 6, 24
    else:
        raise OptionError(f"unknown preset '{preset}'")


def check_options(io: IndexOptions, mo: MapOptions) -> None:
    """Raise :class:`OptionError` if the options contradict each other."""
    if mo.bw > mo.bw_long:
        raise OptionError(f"with '-rNUM1,NUM2', NUM1 ({mo.bw}) can't be larger than "
                          f"NUM2 ({mo.bw_long})", -8)
    if (mo.flag & MapFlag.RMQ) and (mo.flag & (MapFlag.SR | MapFlag.SPLICE)):
        raise OptionError("--rmq doesn't work with --sr or --splice", -7)
    if mo.split_prefix and (mo.flag & (MapFlag.OUT_CS | MapFlag.OUT_MD)):
        raise OptionError("--cs or --MD doesn't work with --split-prefix", -6)
    if io.k <= 0 or io.w <= 0:
        raise OptionError("-k and -w must be positive", -5)
    if mo.best_n < 0:
        raise OptionError("-N must be no less than 0", -4)
    if mo.best_n == 0:
        log.warning("'-N 0' reduces mapping accuracy. Please use '--secondary=no' instead.")
    if mo.pri_ratio < 0.0 or mo.pri_ratio > 1.0:
        raise OptionError("-p must be within 0 and 1 (including 0 and 1)", -4)
    if (mo.flag & MapFlag.FOR_ONLY) and (mo.flag & MapFlag.REV_ONLY):
        raise OptionError("--for-only and --rev-only can't be applied at the same time", -3)
    if mo.e <= 0 or mo.q <= 0:
        raise OptionError("-O and -E must be positive", -1)
    if (mo.q != mo.q2 or mo.e != mo.e2) and not (mo.e > mo.e2 and mo.q + mo.e < mo.q2 + mo.e2):
        raise OptionError("dual gap penalties violating E1>E2 and O1+E1<O2+E2", -2)
    if (mo.q + mo.e) + (mo.q2 + mo.e2) > 127:
        raise OptionError("scoring system violating ({-O}+{-E})+({-O2}+{-E2}) <= 127", -1)
    if mo.zdrop < mo.zdrop_inv:
        raise OptionError("Z-drop should not be less than inversion-Z-drop", -5)
    if (mo.flag & MapFlag.NO_PRINT_2ND) and (mo.flag & MapFlag.ALL_CHAINS):
        raise OptionError("-X/-P and --secondary=no can't be applied at the same time", -5)
    if (mo.flag & MapFlag.QSTRAND) and (
            (mo.flag & (MapFlag.OUT_SAM | MapFlag.SPLICE | MapFlag.FRAG_MODE))
            or (io.flag & IdxFlag.HPC)):
        raise OptionError("--qstrand doesn't work with -a, -H, --frag or --splice", -5)


_FLOAT_PREFIX = re.compile(
    r"\s*[+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE)

_SUFFIX = {"g": 1e9, "m": 1e6, "k": 1e3}


def parse_num(text: str) -> int:
    """Parse a number with an optional K/M/G suffix, rounding to an integer."""
    match = _FLOAT_PREFIX.match(text)
    if match:
        x = float(match.group(0))
        rest = text[match.end():]
    else:
        x, rest = 0.0, text
    factor = _SUFFIX.get(rest[:1].lower())
    if factor is not None:
        x *= factor
    return int(x + .499)