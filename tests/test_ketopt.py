import pytest

from mmkit.ketopt import ArgKind, LongOption, OptionScanner

LONGOPTS = [
    LongOption("bucket-bits", ArgKind.REQUIRED, 300),
    LongOption("sam", ArgKind.NONE, "a"),
    LongOption("cs", ArgKind.OPTIONAL, 316),
    LongOption("secondary", ArgKind.REQUIRED, 315),
    LongOption("seed", ArgKind.REQUIRED, 302),
]


def scan(argv, optstring="ab", longopts=None, permute=True):
    scanner = OptionScanner(argv, optstring, longopts, permute)
    return [(p.opt, p.arg) for p in scanner], scanner


def test_combined_short_flags():
    opts, scanner = scan(["prog", "-ab"])
    assert opts == [("a", None), ("b", None)]
    assert scanner.ind == 2


def test_attached_and_separate_arguments():
    opts, _ = scan(["prog", "-w5", "-k", "7"], "w:k:")
    assert opts == [("w", "5"), ("k", "7")]


def test_missing_short_argument():
    opts, _ = scan(["prog", "-w"], "w:")
    assert opts == [(":", None)]


def test_unknown_short_option():
    opts, _ = scan(["prog", "-z"], "ab")
    assert opts == [("?", None)]


def test_permutation_moves_non_options_back():
    opts, scanner = scan(["prog", "a", "-w", "5", "b", "-x"], "w:x")
    assert opts == [("w", "5"), ("x", None)]
    assert scanner.argv == ["prog", "-w", "5", "-x", "a", "b"]
    assert scanner.argv[scanner.ind:] == ["a", "b"]


def test_no_permute_stops_at_first_non_option():
    opts, scanner = scan(["prog", "x", "-a"], "a", permute=False)
    assert opts == []
    assert scanner.ind == 1


def test_double_dash_ends_options():
    opts, scanner = scan(["prog", "-a", "--", "-b"])
    assert opts == [("a", None)]
    assert scanner.argv[scanner.ind:] == ["-b"]


def test_single_dash_is_an_argument():
    opts, scanner = scan(["prog", "-", "-a"], "a")
    assert opts == [("a", None)]
    assert scanner.argv[scanner.ind:] == ["-"]


def test_long_option_with_separate_argument():
    scanner = OptionScanner(["prog", "--bucket-bits", "12"], "", LONGOPTS, True)
    parsed = next(scanner)
    assert (parsed.opt, parsed.arg, parsed.longidx) == (300, "12", 0)


def test_long_option_with_equals():
    opts, _ = scan(["prog", "--seed=5"], "", LONGOPTS)
    assert opts == [(302, "5")]


def test_optional_long_argument():
    opts, _ = scan(["prog", "--cs", "--cs=long"], "", LONGOPTS)
    assert opts == [(316, None), (316, "long")]


def test_unique_prefix_and_exact_match():
    opts, _ = scan(["prog", "--buck", "3", "--sam"], "", LONGOPTS)
    assert opts == [(300, "3"), ("a", None)]


def test_ambiguous_prefix():
    scanner = OptionScanner(["prog", "--se"], "", LONGOPTS, True)
    assert next(scanner).opt == "?"


def test_missing_long_argument_and_unknown_long():
    opts, _ = scan(["prog", "--nope", "--bucket-bits"], "", LONGOPTS)
    assert opts == [("?", None), (":", None)]


@pytest.mark.parametrize("argv", [["prog"], ["prog", "file"]])
def test_no_options(argv):
    opts, scanner = scan(argv)
    assert opts == []
    assert scanner.argv[scanner.ind:] == argv[1:]