"""Gate load of every signal in a network, kept up to date on change.

The network is expected to offer the interface of ``StorageNetwork``:
``iter_pos``, ``iter_fanins``, ``iter_outputs``, ``is_pi``,
``get_input_load``, ``incr_trav_id``, ``trav_id``, ``value`` and
``set_value``. Updates are driven by an event source with
``register_add_event``, ``register_delete_event`` and
``register_modified_event`` (each returning a handle), and the matching
``release_*_event`` methods. It is passed as ``events``, or found as the
network's ``events`` attribute. Without one, loads are computed once.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .storage_core import Signal


class GateLoadTracker:
    """Sum of the input loads driven by each signal of a network.

    Primary outputs carry a load of at least 1.0.
    """

    def __init__(self, ntk: Any, *, events: Any = None) -> None:
        self._ntk = ntk
        self._loads: Dict[Signal, float] = {}
        self._events = events if events is not None else getattr(ntk, "events", None)
        self._registrations: List[Tuple[Callable[[Any], None], Any]] = []

        self._compute_gate_load()

        if self._events is not None:
            ev = self._events
            self._registrations = [
                (ev.release_add_event, ev.register_add_event(self._on_add)),
                (ev.release_delete_event, ev.register_delete_event(self._on_delete)),
                (ev.release_modified_event, ev.register_modified_event(self._on_modified)),
            ]

    def __enter__(self) -> "GateLoadTracker":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def get_load(self, f: Signal) -> float:
        """Load driven by signal ``f``; 0.0 for signals that drive nothing."""
        return self._loads.get(f, 0.0)

    def close(self) -> None:
        """Stop following changes of the network."""
        for release, handle in self._registrations:
            release(handle)
        self._registrations = []

    # event handlers

    def _add(self, f: Signal, amount: float) -> None:
        self._loads[f] = self._loads.get(f, 0.0) + amount

    def _on_add(self, n: int) -> None:
        ntk = self._ntk
        for f in ntk.iter_outputs(n):
            self._loads[f] = 0.0
            for ii, fi in enumerate(ntk.iter_fanins(n)):
                self._add(fi, ntk.get_input_load(f, ii))

    def _on_delete(self, n: int) -> None:
        ntk = self._ntk
        for f in ntk.iter_outputs(n):
            self._loads[f] = 0.0
            for ii, fi in enumerate(ntk.iter_fanins(n)):
                self._add(fi, -ntk.get_input_load(f, ii))

    def _on_modified(self, n: int, old_children: Sequence[Signal]) -> None:
        ntk = self._ntk
        for f in ntk.iter_outputs(n):
            for ii, fi in enumerate(ntk.iter_fanins(n)):
                if fi != old_children[ii]:
                    load = ntk.get_input_load(f, ii)
                    self._add(fi, load)
                    self._add(old_children[ii], -load)

    # computation

    def _is_ready(self, n: int) -> bool:
        return self._ntk.value(n) == self._ntk.trav_id

    def _make_ready(self, n: int) -> None:
        self._ntk.set_value(n, self._ntk.trav_id)

    def _compute_gate_load(self) -> None:
        ntk = self._ntk
        ntk.incr_trav_id()
        self._loads = {}
        for f in ntk.iter_pos():
            self._compute_tfi(f)
        for f in ntk.iter_pos():
            self._loads[f] = max(self._loads.get(f, 0.0), 1.0)

    def _compute_tfi(self, f: Signal) -> None:
        ntk = self._ntk
        n = f.index
        if self._is_ready(n) or ntk.is_pi(n):
            return
        for ii, fi in enumerate(ntk.iter_fanins(n)):
            self._compute_tfi(fi)
            self._add(fi, ntk.get_input_load(f, ii))
        self._make_ready(n)