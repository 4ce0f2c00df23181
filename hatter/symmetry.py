"""Detection of pairwise variable symmetries in Boolean functions.

Truth tables are plain integers: bit ``m`` holds the value of the function
on the minterm whose binary encoding is ``m``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List

_MAX_VARS = 8
_UINT64_MASK = (1 << 64) - 1


def _half_mask(num_vars: int, var: int, value: int) -> int:
    """Mask of the minterms in which ``var`` takes ``value``."""
    mask = 0
    for minterm in range(1 << num_vars):
        if (minterm >> var) & 1 == value:
            mask |= 1 << minterm
    return mask


def _check(num_vars: int, var: int) -> None:
    if num_vars < 0:
        raise ValueError(f"negative number of variables: {num_vars}")
    if not 0 <= var < num_vars:
        raise ValueError(f"variable {var} out of range for {num_vars} variables")


def cofactor0(bits: int, num_vars: int, var: int) -> int:
    """Negative cofactor of ``bits`` in ``var``, kept over ``num_vars`` variables."""
    _check(num_vars, var)
    low = bits & _half_mask(num_vars, var, 0)
    return low | (low << (1 << var))


def cofactor1(bits: int, num_vars: int, var: int) -> int:
    """Positive cofactor of ``bits`` in ``var``, kept over ``num_vars`` variables."""
    _check(num_vars, var)
    high = bits & _half_mask(num_vars, var, 1)
    return high | (high >> (1 << var))


@dataclass
class Symmetries:
    """Pairwise symmetry relation over at most eight variables, packed in 64 bits.

    Byte ``i`` of ``data`` holds the variables symmetric with variable ``i``.
    """

    data: int = 0

    @classmethod
    def from_truth_table(cls, bits: int, num_vars: int) -> "Symmetries":
        """Compute the symmetries of the function ``bits`` over ``num_vars`` variables."""
        if num_vars > _MAX_VARS:
            raise ValueError(f"at most {_MAX_VARS} variables are supported, got {num_vars}")
        symm = cls()
        for i in range(num_vars):
            if cofactor0(bits, num_vars, i) == cofactor1(bits, num_vars, i):
                continue
            for j in range(i + 1, num_vars):
                tt1 = cofactor1(bits, num_vars, j)
                tt0 = cofactor0(bits, num_vars, j)
                if tt0 == tt1:
                    continue
                if cofactor0(tt1, num_vars, i) == cofactor1(tt0, num_vars, i):
                    symm.set(i, j)
        return symm

    def set(self, i: int, j: int) -> None:
        """Record that variables ``i`` and ``j`` are symmetric."""
        mask = (1 << j) | (1 << i)
        self.data = (self.data | (mask << (8 * i)) | (mask << (8 * j))) & _UINT64_MASK

    def symmetric(self, i: int, j: int) -> bool:
        """Whether variables ``i`` and ``j`` are recorded as symmetric."""
        return (((self.data >> (8 * i)) >> j) & ((self.data >> (8 * j)) >> i) & 1) > 0

    def has_symmetries(self, i: int) -> bool:
        """Whether variable ``i`` is symmetric with any variable."""
        return ((self.data >> (8 * i)) & 0xFF) > 0


def sort_symmetric(symm: Symmetries, fn: Callable[[Any, Any], bool], *args: List[Any]) -> None:
    """Insertion-sort positions that are symmetric, in place.

    The first list drives the ordering through ``fn(value, other)``; every
    swap is applied to all the lists alike.
    """
    if not args:
        raise ValueError("at least one list is required")
    n = len(args[0])
    if any(len(vec) != n for vec in args):
        raise ValueError("all lists must have the same size")

    driver = args[0]
    inputs = list(range(n))

    for i in range(n):
        if not symm.has_symmetries(i):
            continue
        k = i
        j = i - 1
        value = driver[inputs[i]]
        swapped = True
        while swapped and j >= 0:
            if symm.symmetric(inputs[k], inputs[j]):
                if fn(value, driver[j]):
                    for vec in args:
                        vec[k], vec[j] = vec[j], vec[k]
                    inputs[k], inputs[j] = inputs[j], inputs[k]
                    k = j
                else:
                    swapped = False
            j -= 1