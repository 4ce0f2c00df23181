import pytest

from hatter.symmetry import Symmetries, cofactor0, cofactor1, sort_symmetric


def nth_var(num_vars, var):
    return sum(1 << m for m in range(1 << num_vars) if (m >> var) & 1)


def full(num_vars):
    return (1 << (1 << num_vars)) - 1


@pytest.mark.parametrize("num_vars", [1, 2, 3, 4])
def test_cofactors_of_projection(num_vars):
    for var in range(num_vars):
        x = nth_var(num_vars, var)
        assert cofactor0(x, num_vars, var) == 0
        assert cofactor1(x, num_vars, var) == full(num_vars)


def test_cofactor_is_independent_of_variable():
    bits = 0xE8  # majority of three
    for var in range(3):
        c0 = cofactor0(bits, 3, var)
        c1 = cofactor1(bits, 3, var)
        assert cofactor0(c0, 3, var) == cofactor1(c0, 3, var) == c0
        assert cofactor0(c1, 3, var) == cofactor1(c1, 3, var) == c1


def test_cofactor_bad_variable():
    with pytest.raises(ValueError):
        cofactor0(0x8, 2, 2)


def test_and_is_symmetric():
    s = Symmetries.from_truth_table(0x8, 2)
    assert s.symmetric(0, 1)
    assert s.symmetric(1, 0)
    assert s.has_symmetries(0) and s.has_symmetries(1)


def test_majority_fully_symmetric():
    s = Symmetries.from_truth_table(0xE8, 3)
    for i in range(3):
        for j in range(3):
            if i != j:
                assert s.symmetric(i, j)


def test_asymmetric_function():
    s = Symmetries.from_truth_table(0x2, 2)  # x0 & ~x1
    assert not s.symmetric(0, 1)
    assert not s.has_symmetries(0)


def test_independent_variable_is_skipped():
    s = Symmetries.from_truth_table(0xA, 2)
    assert s.data == 0


def test_too_many_variables():
    with pytest.raises(ValueError):
        Symmetries.from_truth_table(0, 9)


def test_set_layout():
    s = Symmetries()
    assert not s.has_symmetries(0)
    s.set(0, 1)
    assert s.data == 0x303
    assert s.symmetric(0, 1)
    assert not s.symmetric(0, 2)
    assert not s.has_symmetries(2)


def test_sort_symmetric_sorts_with_companion():
    s = Symmetries.from_truth_table(0xE8, 3)
    driver = [3, 1, 2]
    names = ["c", "a", "b"]
    sort_symmetric(s, lambda a, b: a < b, driver, names)
    assert driver == sorted([3, 1, 2])
    assert dict(zip(driver, names)) == {3: "c", 1: "a", 2: "b"}


def test_sort_symmetric_without_symmetries_keeps_order():
    driver = [3, 1, 2]
    sort_symmetric(Symmetries(), lambda a, b: a < b, driver)
    assert driver == [3, 1, 2]


def test_sort_symmetric_size_mismatch():
    with pytest.raises(ValueError):
        sort_symmetric(Symmetries(), lambda a, b: a < b, [1, 2], [1])