# mmkit

Building blocks for mapping DNA reads against a reference, in plain Python
with no dependencies outside the standard library.

## What is inside

- `mmkit.sketch` – `sketch(seq, w, k, rid, is_hpc)` returns the symmetric
  (w,k)-minimizers of a DNA sequence as `Minimizer(x, y)` pairs, where
  `x = hash << 8 | span` and `y = rid << 32 | last_pos << 1 | strand`.
  With `is_hpc` true the k-mers are taken over the homopolymer-compressed
  sequence. `hash64(key, mask)` is the invertible integer hash used to
  order k-mers; `NT4_TABLE` maps bytes to nucleotide codes.
- `mmkit.sdust` – `sdust(seq, threshold, window)` finds low-complexity
  regions with the symmetric DUST algorithm and returns half-open
  `(start, end)` pairs; `read_fasta(handle)` yields `(name, sequence)` for
  FASTA or FASTQ records; `main(argv)` is the `mmkit-sdust` command.
- `mmkit.seed` – `filter_query_minimizers` drops minimizers that are too
  frequent within the query, `collect_all` looks minimizers up through a
  callable you supply and returns `Seed` records, `select_seeds` flags
  high-occurrence seeds while keeping the rarest few in each repetitive
  stretch, and `collect_matches` returns a `MatchSummary` with the kept
  seeds, the hit count and the repetitive query length.
- `mmkit.pe` – `pair(max_gap_ref, pe_bonus, sub_diff, match_sc, qlens, regs)`
  picks the best pair of hits for the two ends of a read and updates the
  `Region` records (proper-pair flag, primary, mapping quality);
  `set_pe_thru` marks ends that read through each other.
- `mmkit.ksw` – a 16-bit striped local alignment scorer: `ll_qinit` builds
  a `QueryProfile`, and `ll_i16` scores a target against it and returns a
  `LocalHit(score, qe, te)`.
- `mmkit.options` – `IndexOptions` and `MapOptions` with their defaults,
  the `IdxFlag` and `MapFlag` flag sets, `set_preset` for named presets
  (`map-ont`, `map-pb`, `map-hifi`, `ava-ont`, `ava-pb`, `asm5`, `asm10`,
  `asm20`, `sr`, `splice`, `splice:hq` and others), `check_options`, which
  raises `OptionError`, and `parse_num` for numbers with K/M/G suffixes.
- `mmkit.ketopt` – `OptionScanner`, a getopt-style iterator over
  command-line arguments with `LongOption` support and argument
  permutation.
- `mmkit.hashes` – `x31_hash_string`, `wang_hash` and `int64_hash`, all with
  32-bit results.
- `mmkit.misc` – `realtime()`, `cputime()` and `peakrss()`.

## Installing

```
pip install .
```

## Masking low-complexity sequence

```
mmkit-sdust [-w 64] [-t 20] reads.fa
```

Each masked interval is written as a line holding the sequence name, the
start and the end, separated by tabs. Gzip-compressed input is read too;
use `-` to read from standard input.

From Python:

```python
from mmkit.sdust import sdust

regions = sdust("ACGT" * 4 + "A" * 40 + "GATTACA", 20, 64)
```

## Minimizers

```python
from mmkit.sketch import sketch

minimizers = sketch("ACGTTGCATGCCATGACTGATCGTAGCTAGCTAGTCGAT", 5, 11, 0, False)
for m in minimizers:
    print(m.x >> 8, m.x & 0xFF, (m.y & 0xFFFFFFFF) >> 1, m.y & 1)
```

## Local alignment scores

```python
from mmkit.ksw import ll_qinit, ll_i16

mat = [1 if a == b else -1 for a in range(4) for b in range(4)]
profile = ll_qinit(2, [0, 1, 2, 3, 0, 1], 4, mat)
hit = ll_i16(profile, [2, 3, 0, 1], 2, 1)
print(hit.score, hit.qe, hit.te)
```

## Options and presets

```python
from mmkit.options import IndexOptions, MapOptions, set_preset, check_options

io, mo = IndexOptions(), MapOptions()
set_preset("map-hifi", io, mo)
check_options(io, mo)
```

## What it does not do

mmkit is a set of pieces, not a complete mapper. It does not build or
load a reference index, chain anchors into colinear chains, produce base-level
alignments, or write SAM or PAF output, and it has no mapping command.
Processing is single-threaded. The only command is `mmkit-sdust`.

## Running the tests

```
pip install .[test]
pytest
```