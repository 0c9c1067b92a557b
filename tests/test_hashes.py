import pytest

from mmkit.hashes import int64_hash, wang_hash, x31_hash_string


def test_x31_empty_is_zero():
    assert x31_hash_string("") == 0


def test_x31_single_char_is_its_code():
    assert x31_hash_string("a") == ord("a")
    assert x31_hash_string("Z") == ord("Z")


def test_x31_str_and_bytes_agree():
    assert x31_hash_string("chr1") == x31_hash_string(b"chr1")


def test_x31_stops_at_nul():
    assert x31_hash_string(b"read\0ignored") == x31_hash_string(b"read")


def test_x31_prefix_recurrence():
    h = x31_hash_string("ab")
    assert h == 31 * x31_hash_string("a") + x31_hash_string("b")


@pytest.mark.parametrize("name", ["read/1", "a" * 1000, "chrUn_KI270302v1", "\u00e9"])
def test_x31_is_32_bit(name):
    h = x31_hash_string(name)
    assert 0 <= h <= 0xFFFFFFFF


def test_x31_distinguishes_order():
    assert x31_hash_string("ab") != x31_hash_string("ba")


def test_wang_in_range_and_deterministic():
    for key in (0, 1, 11, 0xFFFFFFFF, 123456789):
        value = wang_hash(key)
        assert 0 <= value <= 0xFFFFFFFF
        assert value == wang_hash(key)


def test_wang_reduces_modulo_2_32():
    assert wang_hash(5 + (1 << 32)) == wang_hash(5)
    assert wang_hash(-1) == wang_hash(0xFFFFFFFF)


def test_wang_has_no_collisions_on_small_keys():
    values = {wang_hash(k) for k in range(5000)}
    assert len(values) == 5000


def test_int64_zero():
    assert int64_hash(0) == 0


def test_int64_high_bits_fold_down():
    assert int64_hash(1 << 33) == 1


def test_int64_reduces_modulo_2_64():
    key = 0x123456789ABCDEF
    assert int64_hash(key + (1 << 64)) == int64_hash(key)


def test_int64_in_range():
    for key in (1, 1 << 40, (1 << 64) - 1, 987654321987):
        assert 0 <= int64_hash(key) <= 0xFFFFFFFF