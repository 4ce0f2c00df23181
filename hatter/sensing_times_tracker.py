"""Sensing times of every signal in a network, kept up to date on change.

The sensing time of a signal is the earliest time at which it can switch:
the minimum over its fanins of the fanin's sensing time plus the minimum
pin delay. The network is expected to offer the interface of
``StorageNetwork``; updates are driven by an event source with
``register_add_event``/``release_add_event`` and
``register_modified_event``/``release_modified_event``, passed as
``events`` or found as the network's ``events`` attribute.
"""

from __future__ import annotations

import sys
from typing import Any, Callable, Dict, List, Optional, Sequence, Set, Tuple

from .storage_core import Signal

_EPSILON = sys.float_info.epsilon
_MAX_TIME = sys.float_info.max


class SensingTimesTracker:
    """Earliest switching time of each signal of a network.

    Primary inputs take their times from ``input_sensings``; when fewer
    times than inputs are given, all inputs start at 0.0.
    """

    def __init__(
        self,
        ntk: Any,
        input_sensings: Optional[Sequence[float]] = None,
        *,
        events: Any = None,
    ) -> None:
        self._ntk = ntk
        self._times: Dict[Signal, float] = {}
        self._input: List[float] = list(input_sensings) if input_sensings is not None else []
        self._events = events if events is not None else getattr(ntk, "events", None)
        self._registrations: List[Tuple[Callable[[Any], None], Any]] = []

        self._compute_sensing_times()

        if self._events is not None:
            ev = self._events
            self._registrations = [
                (ev.release_add_event, ev.register_add_event(self._on_add)),
                (ev.release_modified_event, ev.register_modified_event(self._on_modified)),
            ]

    def __enter__(self) -> "SensingTimesTracker":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def get_time(self, f: Signal) -> float:
        """Sensing time of signal ``f``; raises ``KeyError`` if never computed."""
        return self._times[f]

    def close(self) -> None:
        """Stop following changes of the network."""
        for release, handle in self._registrations:
            release(handle)
        self._registrations = []

    # event handlers

    def _on_add(self, n: int) -> None:
        self._compute_sensing_time(n)

    def _on_modified(self, n: int, old_children: Sequence[Signal]) -> None:
        self._update_tfo(n)
        for f in old_children:
            self._update_tfo(f.index)

    # computation

    def _is_ready(self, n: int) -> bool:
        return self._ntk.value(n) == self._ntk.trav_id

    def _make_ready(self, n: int) -> None:
        self._ntk.set_value(n, self._ntk.trav_id)

    def _compute_sensing_times(self) -> None:
        ntk = self._ntk
        self._times = {}
        if len(self._input) < ntk.num_pis():
            self._input = [0.0] * ntk.num_pis()

        ntk.incr_trav_id()
        for index, n in enumerate(ntk.iter_pis()):
            self._times[Signal(n, 0)] = self._input[index]
            self._make_ready(n)

        for f in ntk.iter_pos():
            self._compute_tfi(f)

    def _compute_tfi(self, f: Signal) -> None:
        ntk = self._ntk
        n = f.index
        if self._is_ready(n) or ntk.is_pi(n):
            return
        for fi in ntk.iter_fanins(n):
            self._compute_tfi(fi)
        self._compute_sensing_time(n)
        self._make_ready(n)

    def _transitive_fanout(self, n: int) -> Set[int]:
        ntk = self._ntk
        tfo = {n}
        stack = [n]
        while stack:
            u = stack.pop()
            for o in ntk.iter_fanouts(u):
                if o not in tfo:
                    tfo.add(o)
                    stack.append(o)
        return tfo

    def _update_tfo(self, n: int) -> None:
        """Recompute the sensing times in the transitive fanout of ``n``."""
        ntk = self._ntk
        tfo = self._transitive_fanout(n)
        seen: Set[int] = {n}
        ready: Set[int] = set()

        old_worklist = [n]
        progress = True
        while progress and old_worklist:
            progress = False
            new_worklist: List[int] = []
            for u in old_worklist:
                is_ready = all(
                    ntk.is_pi(fi.index) or fi.index not in tfo or fi.index in ready
                    for fi in ntk.iter_fanins(u)
                )
                seen.add(u)
                if not is_ready:
                    new_worklist.append(u)
                    continue
                progress = True
                ready.add(u)
                for fu in ntk.iter_outputs(u):
                    old_time = self._times.get(fu, 0.0)
                    self._compute_sensing_time_at_pin(fu)
                    if abs(self._times[fu] - old_time) > _EPSILON:
                        for o in ntk.iter_signal_fanouts(fu):
                            if o not in seen:
                                new_worklist.append(o)
                                seen.add(o)
            old_worklist = new_worklist

        if not progress:
            raise RuntimeError("sensing times update did not converge")

    def _compute_sensing_time_at_pin(self, f: Signal) -> None:
        ntk = self._ntk
        n = f.index
        if ntk.is_pi(n):
            self._times[f] = self._input[ntk.pi_index(n)]
            return
        time = _MAX_TIME
        for ii, fi in enumerate(ntk.iter_fanins(n)):
            time = min(time, self._times.get(fi, 0.0) + ntk.get_min_pin_delay(f, ii))
        self._times[f] = time

    def _compute_sensing_time(self, n: int) -> None:
        for f in self._ntk.iter_outputs(n):
            self._compute_sensing_time_at_pin(f)