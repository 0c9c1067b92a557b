"""Symmetric DUST: find low-complexity regions in DNA sequences."""

from __future__ import annotations

import gzip
import re
import sys
from collections import deque
from contextlib import nullcontext
from dataclasses import dataclass
from typing import IO, Deque, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from mmkit.ketopt import OptionScanner
from mmkit.sketch import NT4_TABLE

_WLEN = 3
_WTOT = 1 << (_WLEN << 1)
_WMSK = _WTOT - 1


@dataclass(slots=True)
class _PerfectInterval:
    start: int
    finish: int
    r: int
    l: int


class _Window:
    """Triplets of the current window with their running repeat scores."""

    def __init__(self) -> None:
        self.words: Deque[int] = deque()
        self.cw = [0] * _WTOT
        self.cv = [0] * _WTOT
        self.L = 0
        self.rw = 0
        self.rv = 0

    def shift(self, t: int, threshold: int, window: int) -> None:
        w, cw, cv = self.words, self.cw, self.cv
        if len(w) >= window - _WLEN + 1:
            s = w.popleft()
            cw[s] -= 1
            self.rw -= cw[s]
            if self.L > len(w):
                self.L -= 1
                cv[s] -= 1
                self.rv -= cv[s]
        w.append(t)
        self.L += 1
        self.rw += cw[t]
        cw[t] += 1
        self.rv += cv[t]
        cv[t] += 1
        if cv[t] * 10 > threshold << 1:
            while True:
                s = w[len(w) - self.L]
                cv[s] -= 1
                self.rv -= cv[s]
                self.L -= 1
                if s == t:
                    break


def _save_masked_regions(res: List[Tuple[int, int]], perfect: List[_PerfectInterval],
                         start: int) -> None:
    if not perfect or perfect[-1].start >= start:
        return
    p = perfect[-1]
    if res and p.start <= res[-1][1]:
        s, f = res[-1]
        res[-1] = (s, max(f, p.finish))
    else:
        res.append((p.start, p.finish))
    i = len(perfect) - 1
    while i >= 0 and perfect[i].start < start:
        i -= 1
    del perfect[i + 1:]


def _find_perfect(perfect: List[_PerfectInterval], win: _Window, threshold: int,
                  start: int) -> None:
    w = win.words
    c = list(win.cv)
    r = win.rv
    max_r = max_l = 0
    for i in range(len(w) - win.L - 1, -1, -1):
        t = w[i]
        r += c[t]
        c[t] += 1
        new_r, new_l = r, len(w) - i - 1
        if new_r * 10 > threshold * new_l:
            j = 0
            while j < len(perfect) and perfect[j].start >= i + start:
                p = perfect[j]
                if max_r == 0 or p.r * max_l > max_r * p.l:
                    max_r, max_l = p.r, p.l
                j += 1
            if max_r == 0 or new_r * max_l >= max_r * new_l:
                max_r, max_l = new_r, new_l
                perfect.insert(j, _PerfectInterval(i + start, len(w) + (_WLEN - 1) + start,
                                                   new_r, new_l))


def sdust(seq: Union[str, bytes], threshold: int = 20, window: int = 64) -> List[Tuple[int, int]]:
    """Return the low-complexity regions of ``seq`` as half-open ``(start, end)`` pairs."""
    data = seq.encode("latin-1", "replace") if isinstance(seq, str) else bytes(seq)
    win = _Window()
    perfect: List[_PerfectInterval] = []
    res: List[Tuple[int, int]] = []
    n = len(data)
    l = t = 0
    for i in range(n + 1):
        b = NT4_TABLE[data[i]] if i < n else 4
        if b < 4:
            l += 1
            t = (t << 2 | b) & _WMSK
            if l >= _WLEN:
                start = max(l - window, 0) + (i + 1 - l)
                _save_masked_regions(res, perfect, start)
                win.shift(t, threshold, window)
                if win.rw * 10 > win.L * threshold:
                    _find_perfect(perfect, win, threshold, start)
        else:
            start = max(l - window + 1, 0) + (i + 1 - l)
            while perfect:
                _save_masked_regions(res, perfect, start)
                start += 1
            l = t = 0
    return res


def _record_name(header: str) -> str:
    fields = header[1:].split(maxsplit=1)
    return fields[0] if fields else ""


def read_fasta(handle: Iterable[str]) -> Iterator[Tuple[str, str]]:
    """Yield ``(name, sequence)`` for each FASTA or FASTQ record in ``handle``."""
    lines = (line.rstrip("\r\n") for line in handle)
    header: Optional[str] = None
    for line in lines:
        if line[:1] in (">", "@"):
            header = line
            break
    while header is not None:
        name = _record_name(header)
        header = None
        has_quality = False
        chunks = []
        for line in lines:
            if line[:1] in (">", "@"):
                header = line
                break
            if line[:1] == "+":
                has_quality = True
                break
            chunks.append(line.strip())
        sequence = "".join(chunks)
        if has_quality:
            qlen = 0
            if sequence:
                for line in lines:
                    qlen += len(line)
                    if qlen >= len(sequence):
                        break
            for line in lines:
                if line[:1] in (">", "@"):
                    header = line
                    break
        yield name, sequence


def _atoi(text: Optional[str]) -> int:
    match = re.match(r"\s*([+-]?\d+)", text or "")
    return int(match.group(1)) if match else 0


def _open_input(path: str) -> IO[str]:
    if path == "-":
        return nullcontext(sys.stdin)
    with open(path, "rb") as probe:
        magic = probe.read(2)
    if magic == b"\x1f\x8b":
        return gzip.open(path, "rt", encoding="latin-1")
    return open(path, "r", encoding="latin-1")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Print the low-complexity regions of every sequence in a FASTA/FASTQ file."""
    args = sys.argv[1:] if argv is None else list(argv)
    window, threshold = 64, 20
    scanner = OptionScanner(["sdust", *args], "w:t:", None, True)
    for parsed in scanner:
        if parsed.opt == "w":
            window = _atoi(parsed.arg)
        elif parsed.opt == "t":
            threshold = _atoi(parsed.arg)
    rest = scanner.argv[scanner.ind:]
    if not rest:
        print(f"Usage: sdust [-w {window}] [-t {threshold}] <in.fa>", file=sys.stderr)
        return 1
    with _open_input(rest[0]) as handle:
        for name, sequence in read_fasta(handle):
            for start, end in sdust(sequence, threshold, window):
                print(f"{name}\t{start}\t{end}")
    return 0