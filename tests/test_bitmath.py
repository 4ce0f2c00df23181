import pytest

from hatter.bitmath import log2_ceil


def test_one_needs_no_bits():
    assert log2_ceil(1) == 0


def test_zero_wraps_around_like_unsigned():
    assert log2_ceil(0) == 32


@pytest.mark.parametrize("k", range(0, 32))
def test_powers_of_two(k):
    assert log2_ceil(1 << k) == k


@pytest.mark.parametrize("x", range(2, 2000, 7))
def test_bounds_invariant(x):
    r = log2_ceil(x)
    assert (1 << (r - 1)) < x <= (1 << r)


def test_maximum_value():
    assert log2_ceil(0xFFFFFFFF) == 32


@pytest.mark.parametrize("x", [-1, 1 << 32])
def test_out_of_range_rejected(x):
    with pytest.raises(ValueError):
        log2_ceil(x)