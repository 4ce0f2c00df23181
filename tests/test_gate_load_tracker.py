from dataclasses import dataclass, field
from typing import List

import pytest

from hatter.gate_load_tracker import GateLoadTracker
from hatter.storage_core import Signal
from hatter.storage_network import StorageNetwork


@dataclass
class FakeGate:
    loads: List[float] = field(default_factory=list)
    delays: List[float] = field(default_factory=list)


class FakeLibrary:
    def __init__(self, gates):
        self.gates = gates

    def get_input_load(self, gate_id, pin):
        return self.gates[gate_id].loads[pin]

    def get_min_pin_delay(self, gate_id, pin):
        return self.gates[gate_id].delays[pin]

    def get_name(self, gate_id):
        return "cell"


class EventHub:
    def __init__(self):
        self.add = []
        self.delete = []
        self.modified = []

    def register_add_event(self, fn):
        self.add.append(fn)
        return fn

    def release_add_event(self, handle):
        self.add.remove(handle)

    def register_delete_event(self, fn):
        self.delete.append(fn)
        return fn

    def release_delete_event(self, handle):
        self.delete.remove(handle)

    def register_modified_event(self, fn):
        self.modified.append(fn)
        return fn

    def release_modified_event(self, handle):
        self.modified.remove(handle)

    def fire_add(self, n):
        for fn in list(self.add):
            fn(n)

    def fire_delete(self, n):
        for fn in list(self.delete):
            fn(n)

    def fire_modified(self, n, old):
        for fn in list(self.modified):
            fn(n, old)


def make_gate(ntk, children, gate_id):
    return ntk.add_node(children, ntk.create_storage_node(children, [gate_id]))


@pytest.fixture
def lib():
    return FakeLibrary([FakeGate(loads=[1.0, 2.0]), FakeGate(loads=[0.5])])


def test_loads_of_simple_gate(lib):
    ntk = StorageNetwork(lib)
    a = ntk.create_pi()
    b = ntk.create_pi()
    g = make_gate(ntk, [a, b], 0)
    ntk.create_po(g)
    tracker = GateLoadTracker(ntk)
    assert tracker.get_load(a) == pytest.approx(1.0)
    assert tracker.get_load(b) == pytest.approx(2.0)
    assert tracker.get_load(g) == pytest.approx(1.0)


def test_fanout_loads_accumulate(lib):
    ntk = StorageNetwork(lib)
    a = ntk.create_pi()
    b = ntk.create_pi()
    g1 = make_gate(ntk, [a, b], 0)
    g2 = make_gate(ntk, [b, a], 0)
    ntk.create_po(g1)
    ntk.create_po(g2)
    tracker = GateLoadTracker(ntk)
    assert tracker.get_load(a) == pytest.approx(tracker.get_load(b))
    assert tracker.get_load(a) == pytest.approx(lib.get_input_load(0, 0) + lib.get_input_load(0, 1))


def test_internal_signal_load_and_unknown_signal(lib):
    ntk = StorageNetwork(lib)
    a = ntk.create_pi()
    b = ntk.create_pi()
    g = make_gate(ntk, [a, b], 0)
    h = make_gate(ntk, [g], 1)
    ntk.create_po(h)
    tracker = GateLoadTracker(ntk)
    assert tracker.get_load(g) == pytest.approx(lib.get_input_load(1, 0))
    assert tracker.get_load(Signal(h.index, 1)) == 0.0


def test_add_then_delete_restores_loads(lib):
    ntk = StorageNetwork(lib)
    hub = EventHub()
    a = ntk.create_pi()
    b = ntk.create_pi()
    g = make_gate(ntk, [a, b], 0)
    ntk.create_po(g)
    tracker = GateLoadTracker(ntk, events=hub)
    before = tracker.get_load(a)

    h = make_gate(ntk, [a], 1)
    hub.fire_add(h.index)
    assert tracker.get_load(a) == pytest.approx(before + lib.get_input_load(1, 0))
    assert tracker.get_load(h) == 0.0

    hub.fire_delete(h.index)
    assert tracker.get_load(a) == pytest.approx(before)


def test_modified_matches_fresh_tracker(lib):
    ntk = StorageNetwork(lib)
    hub = EventHub()
    a = ntk.create_pi()
    b = ntk.create_pi()
    c = ntk.create_pi()
    g = make_gate(ntk, [a, b], 0)
    ntk.create_po(g)
    tracker = GateLoadTracker(ntk, events=hub)

    old = ntk.get_children(g.index)
    ntk.update_nets(g.index, a, c)
    hub.fire_modified(g.index, old)

    fresh = GateLoadTracker(ntk)
    for f in (a, b, c):
        assert tracker.get_load(f) == pytest.approx(fresh.get_load(f))
    assert tracker.get_load(a) == pytest.approx(0.0)


def test_close_releases_events(lib):
    ntk = StorageNetwork(lib)
    hub = EventHub()
    a = ntk.create_pi()
    ntk.create_po(make_gate(ntk, [a], 1))
    with GateLoadTracker(ntk, events=hub):
        assert len(hub.add) == 1 and len(hub.delete) == 1 and len(hub.modified) == 1
    assert hub.add == [] and hub.delete == [] and hub.modified == []