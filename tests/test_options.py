import pytest

from mmkit.options import (
    IdxFlag,
    IndexOptions,
    MapFlag,
    MapOptions,
    OptionError,
    check_options,
    parse_num,
    set_preset,
)


@pytest.fixture
def opts():
    io, mo = IndexOptions(), MapOptions()
    set_preset(None, io, mo)
    return io, mo


def test_index_defaults():
    io = IndexOptions()
    assert (io.k, io.w, io.bucket_bits) == (15, 10, 14)
    assert io.batch_size == 8000000000
    assert io.flag == IdxFlag(0)


def test_map_defaults():
    mo = MapOptions()
    assert mo.bw == 500 and mo.bw_long == 20000
    assert mo.max_gap == 5000
    assert mo.min_dp_max == mo.min_chain_score * mo.a
    assert mo.transition == mo.b
    assert mo.mini_batch_size == 500000000


@pytest.mark.parametrize("text,expected", [
    ("8G", 8000000000),
    ("500M", 500000000),
    ("200k", 200000),
    ("800", 800),
    ("100000", 100000),
])
def test_parse_num(text, expected):
    assert parse_num(text) == expected


def test_parse_num_suffix_case_insensitive():
    assert parse_num("3g") == parse_num("3G")
    assert parse_num("2m") == parse_num("2M")


def test_default_options_pass(opts):
    io, mo = opts
    assert check_options(io, mo) is None
    assert mo == MapOptions()


def test_preset_none_resets():
    io, mo = IndexOptions(k=99), MapOptions(bw=7)
    set_preset(None, io, mo)
    assert io == IndexOptions()
    assert mo == MapOptions()


def test_preset_sr(opts):
    io, mo = opts
    set_preset("sr", io, mo)
    assert (io.k, io.w) == (21, 11)
    assert mo.flag & MapFlag.SR
    assert mo.flag & MapFlag.FRAG_MODE
    assert mo.max_frag_len == 800
    assert check_options(io, mo) is None


def test_preset_map_pb_sets_hpc(opts):
    io, mo = opts
    set_preset("map-pb", io, mo)
    assert io.flag & IdxFlag.HPC
    assert io.k == 19


def test_preset_map_ont_keeps_defaults(opts):
    io, mo = opts
    set_preset("map-ont", io, mo)
    assert io == IndexOptions()
    assert mo == MapOptions()


def test_preset_asm5(opts):
    io, mo = opts
    set_preset("asm5", io, mo)
    assert mo.flag & MapFlag.RMQ
    assert (mo.b, mo.q, mo.q2) == (19, 39, 81)
    assert mo.zdrop == mo.zdrop_inv == 200
    assert check_options(io, mo) is None


def test_preset_unknown_asm_raises(opts):
    io, mo = opts
    with pytest.raises(OptionError):
        set_preset("asm99", io, mo)


def test_preset_unknown_raises(opts):
    io, mo = opts
    with pytest.raises(OptionError):
        set_preset("no-such-preset", io, mo)


def test_preset_splice_hq(opts):
    io, mo = opts
    set_preset("splice:hq", io, mo)
    assert mo.flag & MapFlag.SPLICE
    assert mo.junc_bonus == 5
    assert mo.bw == mo.bw_long == mo.max_gap_ref == 200000
    assert check_options(io, mo) is None


def test_bw_larger_than_bw_long(opts):
    io, mo = opts
    mo.bw = mo.bw_long + 1
    with pytest.raises(OptionError) as info:
        check_options(io, mo)
    assert info.value.code == -8


def test_for_and_rev_only_conflict(opts):
    io, mo = opts
    mo.flag |= MapFlag.FOR_ONLY | MapFlag.REV_ONLY
    with pytest.raises(OptionError) as info:
        check_options(io, mo)
    assert info.value.code == -3


def test_rmq_with_sr_conflict(opts):
    io, mo = opts
    mo.flag |= MapFlag.RMQ | MapFlag.SR
    with pytest.raises(OptionError) as info:
        check_options(io, mo)
    assert info.value.code == -7


def test_negative_best_n(opts):
    io, mo = opts
    mo.best_n = -1
    with pytest.raises(OptionError) as info:
        check_options(io, mo)
    assert info.value.code == -4


def test_zdrop_less_than_inversion(opts):
    io, mo = opts
    mo.zdrop, mo.zdrop_inv = 100, 200
    with pytest.raises(OptionError):
        check_options(io, mo)


def test_qstrand_with_hpc(opts):
    io, mo = opts
    io.flag |= IdxFlag.HPC
    mo.flag |= MapFlag.QSTRAND
    with pytest.raises(OptionError):
        check_options(io, mo)


def test_update_clamps_low_and_high():
    mo = MapOptions()
    mo.update(3)
    assert mo.mid_occ == mo.min_mid_occ
    mo = MapOptions()
    mo.update(mo.max_mid_occ * 5)
    assert mo.mid_occ == mo.max_mid_occ


def test_update_keeps_preset_mid_occ():
    mo = MapOptions(mid_occ=1000)
    mo.update(3)
    assert mo.mid_occ == 1000


def test_update_sets_splice_and_bw_long():
    mo = MapOptions(flag=MapFlag.SPLICE_FOR, bw=600, bw_long=100)
    mo.update(50)
    assert mo.flag & MapFlag.SPLICE
    assert mo.bw_long == 600
    assert mo.mid_occ == 50


def test_max_intron_len_only_in_splice_mode():
    mo = MapOptions()
    mo.set_max_intron_len(200000)
    assert (mo.bw, mo.bw_long, mo.max_gap_ref) == (500, 20000, -1)
    mo.flag |= MapFlag.SPLICE
    mo.set_max_intron_len(200000)
    assert mo.bw == mo.bw_long == mo.max_gap_ref == 200000