import gzip
import io
import random

from mmkit.sdust import main, read_fasta, sdust


def _random_seq(n, seed):
    rng = random.Random(seed)
    return "".join(rng.choice("ACGT") for _ in range(n))


def test_homopolymer_is_fully_masked():
    assert sdust("A" * 100) == [(0, 100)]


def test_short_distinct_sequence_not_masked():
    assert sdust("ACGT") == []


def test_high_threshold_masks_nothing():
    assert sdust("A" * 100, 1000, 64) == []


def test_str_bytes_and_case_agree():
    seq = _random_seq(50, 1) + "CA" * 40 + _random_seq(50, 2)
    assert sdust(seq) == sdust(seq.encode()) == sdust(seq.lower())


def test_intervals_sorted_disjoint_and_in_range():
    seq = _random_seq(80, 3) + "AT" * 50 + _random_seq(80, 4) + "GGC" * 30 + _random_seq(40, 5)
    regions = sdust(seq)
    assert regions
    for start, end in regions:
        assert 0 <= start < end <= len(seq)
    for (_, e1), (s2, _) in zip(regions, regions[1:]):
        assert e1 < s2


def test_repeat_region_is_covered():
    left = _random_seq(80, 6)
    seq = left + "AT" * 50 + _random_seq(80, 7)
    regions = sdust(seq)
    covered = set()
    for start, end in regions:
        covered.update(range(start, end))
    assert set(range(len(left) + 10, len(left) + 90)) <= covered


def test_read_fasta_multiline_records():
    text = ">seq1 description\nACGT\nTTGG\n>seq2\nAAA\n"
    assert list(read_fasta(io.StringIO(text))) == [("seq1", "ACGTTTGG"), ("seq2", "AAA")]


def test_read_fasta_fastq_records():
    text = "@r1\nACGT\n+\n@@@@\n@r2 x\nGG\n+r2\nII\n"
    assert list(read_fasta(io.StringIO(text))) == [("r1", "ACGT"), ("r2", "GG")]


def test_main_without_input_returns_one(capsys):
    assert main([]) == 1
    assert "Usage" in capsys.readouterr().err


def test_main_prints_regions(tmp_path, capsys):
    path = tmp_path / "in.fa"
    path.write_text(">seq1\n" + "A" * 100 + "\n")
    assert main([str(path)]) == 0
    assert capsys.readouterr().out == "seq1\t0\t100\n"


def test_main_reads_gzip_and_honours_threshold(tmp_path, capsys):
    path = tmp_path / "in.fa.gz"
    with gzip.open(path, "wt") as fh:
        fh.write(">seq1\n" + "A" * 100 + "\n")
    assert main([str(path)]) == 0
    assert capsys.readouterr().out == "seq1\t0\t100\n"
    assert main(["-t", "1000", str(path)]) == 0
    assert capsys.readouterr().out == ""