"""Simulation of the signals of a window, with observability care sets.

Simulation patterns are integers of ``2 ** cube_size`` bits; leaf ``i`` of
a window is simulated with the projection on variable ``i``.

The window must provide:

- ``inputs()``: the leaf signals, at most ``cube_size`` of them;
- ``divisors()``: signals available as divisors;
- ``mffc()``: the nodes of the pivot's maximum fanout-free cone;
- ``tfo()``: the nodes of the pivot's transitive fanout, in topological order;
- ``outputs()``: the output signals of the window;
- ``is_leaf(n)``: whether node ``n`` is a leaf;
- ``pivot``: the node being analysed.

The network must offer ``iter_fanins``, ``iter_outputs`` and
``num_outputs``. Node functions come from ``ntk.compute(n, fanin_sims)``
when it exists, and otherwise from ``ntk.get_functions(n)`` as
``(num_vars, bits)`` truth tables.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence, Tuple

from .storage_core import Signal


class WindowSimulator:
    """Bit-parallel simulator of the nodes of a window."""

    def __init__(self, ntk: Any, cube_size: int = 12) -> None:
        if cube_size < 0:
            raise ValueError(f"negative cube size: {cube_size}")
        self._ntk = ntk
        self.cube_size = cube_size
        self.num_bits = 1 << cube_size
        self._mask = (1 << self.num_bits) - 1
        self._projections = [self._nth_var(i) for i in range(cube_size)]
        self._sims: List[int] = list(self._projections)
        self._sig_to_sim: Dict[Signal, int] = {}
        self._care = 0

    def _nth_var(self, var: int) -> int:
        bits = 0
        for minterm in range(self.num_bits):
            if (minterm >> var) & 1:
                bits |= 1 << minterm
        return bits

    def run(self, window: Any) -> None:
        """Simulate every node of ``window`` and compute the pivot's care set."""
        self._sims = list(self._projections)
        self._sig_to_sim = {}
        self._assign_inputs(window)

        for f in window.divisors():
            if f.output == 0 and not window.is_leaf(f.index):
                self.compute(window, f.index)
        for n in window.mffc():
            self.compute(window, n)
        for n in window.tfo():
            self.compute(window, n)
        for f in window.outputs():
            if f.output == 0:
                self.compute(window, f.index)

        self._care = self.compute_observability_careset(window)

    def get(self, f: Signal) -> int:
        """Simulation pattern of signal ``f``; raises ``KeyError`` if not simulated."""
        return self._sims[self._sig_to_sim[f]]

    def get_careset(self) -> int:
        """Observability care set of the pivot computed by the last run."""
        return self._care

    def compute_observability_careset(self, window: Any) -> int:
        """Patterns under which a change of the pivot reaches a window output."""
        ntk = self._ntk
        n = window.pivot
        outputs = list(window.outputs())
        num_out = ntk.num_outputs(n)
        if num_out == len(outputs) and all(f.index == n for f in outputs):
            return self._mask

        pivot_signals = list(ntk.iter_outputs(n))
        care = 0
        for m in range(1, 1 << num_out):
            flipped = [f for i, f in enumerate(pivot_signals) if (m >> i) & 1]
            self._flip(flipped)
            for no in window.tfo():
                self.re_compute(window, no)

            for fo in outputs:
                if fo.output != 0:
                    continue
                no = fo.index
                old = [self.get(foo) for foo in ntk.iter_outputs(no)]
                self.re_compute(window, no)
                new = [self.get(foo) for foo in ntk.iter_outputs(no)]
                for before, after in zip(old, new):
                    care |= before ^ after

            self._flip(flipped)
            for no in window.tfo():
                self.re_compute(window, no)
            for fo in outputs:
                if fo.output == 0:
                    self.re_compute(window, fo.index)

        return care

    def compute(self, window: Any, n: int) -> None:
        """Simulate node ``n``, keeping patterns already assigned to its outputs."""
        if window.is_leaf(n):
            return
        tts = self._simulate(n)
        for fo, tt in zip(self._ntk.iter_outputs(n), tts):
            if fo not in self._sig_to_sim:
                self._sig_to_sim[fo] = len(self._sims)
                self._sims.append(tt)

    def re_compute(self, window: Any, n: int) -> None:
        """Simulate node ``n`` again, overwriting the patterns of its outputs."""
        if window.is_leaf(n):
            return
        tts = self._simulate(n)
        for fo, tt in zip(self._ntk.iter_outputs(n), tts):
            self._sims[self._sig_to_sim[fo]] = tt

    # implementation

    def _assign_inputs(self, window: Any) -> None:
        leaves = list(window.inputs())
        if len(leaves) > self.cube_size:
            raise ValueError(
                f"window has {len(leaves)} inputs, at most {self.cube_size} are supported"
            )
        for i, f in enumerate(leaves):
            self._sig_to_sim[f] = i

    def _flip(self, signals: Sequence[Signal]) -> None:
        for f in signals:
            index = self._sig_to_sim[f]
            self._sims[index] ^= self._mask

    def _simulate(self, n: int) -> List[int]:
        ntk = self._ntk
        fanin_sims = [self.get(fi) for fi in ntk.iter_fanins(n)]
        compute = getattr(ntk, "compute", None)
        if callable(compute):
            return [tt & self._mask for tt in compute(n, fanin_sims)]
        return [self._evaluate(fn, fanin_sims) for fn in ntk.get_functions(n)]

    def _evaluate(self, function: Tuple[int, int], sims: Sequence[int]) -> int:
        num_vars, bits = function
        if num_vars > len(sims):
            raise ValueError(f"function of {num_vars} variables fed with {len(sims)} patterns")
        mask = self._mask
        result = 0
        for minterm in range(1 << num_vars):
            if not (bits >> minterm) & 1:
                continue
            term = mask
            for var in range(num_vars):
                term &= sims[var] if (minterm >> var) & 1 else ~sims[var]
            result |= term
        return result & mask