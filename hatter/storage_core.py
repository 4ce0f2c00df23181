"""Node storage for bound networks with multiple-output gates.

The storage keeps the nodes, the primary inputs and outputs, and a
structural hash of the internal nodes. Nodes 0 and 1 are the constants.

Gate functions are handed to the library as ``(num_vars, bits)`` pairs,
where bit ``m`` of ``bits`` is the value on minterm ``m``. The library must
provide ``get_id(function)``, returning a binding id or ``None``. When
multiple-output nodes are checked it must also provide ``get_name(id)``.
Array-based storages additionally use ``add_gate(function)`` and
``add_gates(functions)``.
"""

from __future__ import annotations

import enum
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, Hashable, List, Optional, Sequence, Tuple, Union

TruthTable = Tuple[int, int]

_NOT: TruthTable = (1, 0x1)
_AND: TruthTable = (2, 0x8)
_NAND: TruthTable = (2, 0xE)
_OR: TruthTable = (2, 0xE)
_XOR: TruthTable = (2, 0x6)
_MAJ: TruthTable = (3, 0xE8)
_ITE: TruthTable = (3, 0xD8)
_XOR3: TruthTable = (3, 0x96)


class PinType(enum.Flag):
    """Role of an output pin; roles combine as flags."""

    NONE = 0
    CONSTANT = enum.auto()
    PI = enum.auto()
    PO = enum.auto()
    CI = enum.auto()
    INTERNAL = enum.auto()
    DEAD = enum.auto()


@dataclass(frozen=True, order=True)
class Signal:
    """An output pin of a node: the node index and the pin number."""

    index: int
    output: int = 0


@dataclass
class OutputPin:
    """Output pin of a node with its binding id and fanout nodes."""

    gate_id: int = 0
    pin_type: PinType = PinType.NONE
    fanout: List[int] = field(default_factory=list)
    fanout_count: int = 0


class StorageNode:
    """A stored node: its fanin signals, output pins and bookkeeping values."""

    def __init__(
        self,
        pin_type: Optional[PinType] = None,
        children: Optional[List[Signal]] = None,
        outputs: Optional[List[OutputPin]] = None,
    ) -> None:
        self.children: List[Signal] = list(children) if children else []
        if outputs is not None:
            self.outputs: List[OutputPin] = list(outputs)
        elif pin_type is not None:
            self.outputs = [OutputPin(pin_type=pin_type)]
        else:
            self.outputs = []
        self.fanout_count = 0
        self.user_data = 0
        self.traversal_id = 0

    @property
    def structural_key(self) -> Hashable:
        """Key identifying nodes with equal fanins and bindings."""
        return tuple(self.children), tuple(pin.gate_id for pin in self.outputs)

    def __repr__(self) -> str:
        return (
            f"StorageNode(children={self.children!r}, outputs={self.outputs!r}, "
            f"fanout_count={self.fanout_count})"
        )


class StorageCore:
    """Storage of nodes, inputs, outputs and structural hash of a network."""

    def __init__(self, library: Any = None, *, cell_based: bool = True) -> None:
        self.library = library
        self.cell_based = cell_based
        self.trav_id = 0
        self.nodes: List[StorageNode] = [
            StorageNode(PinType.CONSTANT),
            StorageNode(PinType.CONSTANT),
        ]
        self.dead_nodes: Deque[int] = deque()
        self.inputs: List[int] = []
        self.outputs: List[Signal] = []
        self.strash: Dict[Hashable, List[int]] = {}

    # primary I/O and constants

    def get_constant(self, value: bool) -> Signal:
        """Signal of the constant ``value``."""
        return Signal(1, 0) if value else Signal(0, 0)

    def create_pi(self) -> Signal:
        """Add a primary input; its only fanin records its input position."""
        index = self.get_new_index()
        node = StorageNode(PinType.PI, children=[Signal(len(self.inputs), 0)])
        self.nodes[index] = node
        self.inputs.append(index)
        return Signal(index, 0)

    def create_po(self, f: Signal) -> int:
        """Use ``f`` as a primary output and return the output's position."""
        node = self.nodes[f.index]
        node.fanout_count += 1
        node.outputs[f.output].pin_type |= PinType.PO
        self.outputs.append(f)
        return len(self.outputs) - 1

    def is_constant(self, n: int) -> bool:
        """Whether node ``n`` is a constant."""
        return bool(self.nodes[n].outputs[0].pin_type & PinType.CONSTANT)

    def is_constant_signal(self, f: Signal) -> bool:
        """Whether signal ``f`` is a constant pin."""
        pins = self.nodes[f.index].outputs
        return bool(pins) and bool(pins[f.output].pin_type & PinType.CONSTANT)

    def is_ci(self, n: int) -> bool:
        """Whether node ``n`` is a combinational input."""
        pin_type = self.nodes[n].outputs[0].pin_type
        return bool(pin_type & (PinType.PI | PinType.CI))

    def is_pi(self, n: int) -> bool:
        """Whether node ``n`` is a primary input."""
        return self.is_ci(n)

    def is_po(self, n: Union[int, Signal], output: int = 0) -> bool:
        """Whether pin ``output`` of node ``n`` (or signal ``n``) is a primary output."""
        if isinstance(n, Signal):
            n, output = n.index, n.output
        return bool(self.nodes[n].outputs[output].pin_type & PinType.PO)

    def constant_value(self, n: int) -> bool:
        """Value of constant node ``n``."""
        return n != 0

    # special functions

    def create_not(self, a: Signal) -> Signal:
        return self.create_node([a], _NOT)

    def create_and(self, a: Signal, b: Signal) -> Signal:
        return self.create_node([a, b], _AND)

    def create_nand(self, a: Signal, b: Signal) -> Signal:
        return self.create_node([a, b], _NAND)

    def create_or(self, a: Signal, b: Signal) -> Signal:
        return self.create_node([a, b], _OR)

    def create_xor(self, a: Signal, b: Signal) -> Signal:
        return self.create_node([a, b], _XOR)

    def create_maj(self, a: Signal, b: Signal, c: Signal) -> Signal:
        return self.create_node([a, b, c], _MAJ)

    def create_ite(self, a: Signal, b: Signal, c: Signal) -> Signal:
        return self.create_node([a, b, c], _ITE)

    def create_xor3(self, a: Signal, b: Signal, c: Signal) -> Signal:
        return self.create_node([a, b, c], _XOR3)

    def create_node(self, children: Sequence[Signal], function: TruthTable) -> Signal:
        """Add a node computing ``function`` bound to its library gate."""
        if self.library is None:
            raise LookupError("no library to bind the node")
        gate_id = self.library.get_id(function)
        if gate_id is None:
            raise LookupError(f"no binding found in the library for {function}")
        node = self.create_storage_node(children, [gate_id])
        return self.add_node(children, node)

    # arbitrary functions

    def create_storage_node(self, children: Sequence[Signal], ids: Sequence[int]) -> StorageNode:
        """Build an unattached node with one output pin per binding id."""
        if self.cell_based and len(ids) > 1:
            first = self.library.get_name(ids[0])
            if any(self.library.get_name(i) != first for i in ids[1:]):
                raise ValueError("multiple-output nodes are expected to have the same name")
        outputs = [OutputPin(gate_id=i, pin_type=PinType.INTERNAL) for i in ids]
        return StorageNode(children=list(children), outputs=outputs)

    def add_node(self, children: Sequence[Signal], node: StorageNode) -> Signal:
        """Store ``node``, register it as fanout of ``children`` and hash it."""
        index = self.get_new_index()
        self.nodes[index] = node
        for c in children:
            child = self.nodes[c.index]
            child.fanout_count += 1
            pin = child.outputs[c.output]
            pin.fanout_count += 1
            pin.fanout.append(index)
        self.strash.setdefault(node.structural_key, []).append(index)
        return Signal(index, 0)

    def insert(self, functions: Union[TruthTable, List[TruthTable]]) -> Union[int, List[int]]:
        """Add gates for ``functions`` to an array-based library, returning their ids."""
        if self.cell_based:
            raise TypeError("gates can only be inserted in array-based storages")
        if isinstance(functions, list):
            return self.library.add_gates(functions)
        return self.library.add_gate(functions)

    # restructuring

    def replace_in_outputs(self, old_node: int, new_signals: Sequence[Signal]) -> None:
        """Replace every primary output driven by ``old_node`` with ``new_signals``."""
        for i in range(len(self.nodes[old_node].outputs)):
            old_signal = Signal(old_node, i)
            if self.is_po(old_signal):
                self.replace_output(old_signal, new_signals[i])

    def replace_output(self, old_signal: Signal, new_signal: Signal) -> None:
        """Replace ``old_signal`` with ``new_signal`` in the primary outputs."""
        found = False
        for k, output in enumerate(self.outputs):
            if output != old_signal:
                continue
            found = True
            self.outputs[k] = new_signal
            new_node = self.nodes[new_signal.index]
            old_node = self.nodes[old_signal.index]
            new_node.fanout_count += 1
            old_node.fanout_count -= 1
            old_node.outputs[old_signal.output].pin_type &= ~PinType.PO
            new_node.outputs[new_signal.output].pin_type |= PinType.PO
        if not found:
            raise ValueError(f"output signal {old_signal} not found in the outputs")

    def insert_fanout(self, f: Signal, n: int) -> None:
        """Record node ``n`` as a fanout of ``f`` unless it already is one."""
        pin = self.nodes[f.index].outputs[f.output]
        if n in pin.fanout:
            return
        self.nodes[f.index].fanout_count += 1
        pin.fanout_count += 1
        pin.fanout.append(n)

    def delete_fanout(self, f: Signal, n: int) -> None:
        """Remove every occurrence of node ``n`` from the fanout of ``f``."""
        pin = self.nodes[f.index].outputs[f.output]
        occurrences = pin.fanout.count(n)
        self.nodes[f.index].fanout_count -= occurrences
        pin.fanout_count -= occurrences
        pin.fanout = [x for x in pin.fanout if x != n]

    def update_nets(self, root: int, old_signal: Signal, new_signal: Signal) -> None:
        """Replace fanin ``old_signal`` of ``root`` with ``new_signal``."""
        children = self.nodes[root].children
        for k, child in enumerate(children):
            if child == old_signal:
                self.insert_fanout(new_signal, root)
                self.delete_fanout(child, root)
                children[k] = new_signal

    def delete_node(self, n: int) -> None:
        """Mark node ``n`` as dead and detach it from its fanins."""
        node = self.nodes[n]
        key = node.structural_key
        indices = self.strash.get(key)
        if indices is not None:
            indices[:] = [x for x in indices if x != n]
            if not indices:
                del self.strash[key]
        for pin in node.outputs:
            pin.pin_type |= PinType.DEAD
            pin.fanout.clear()
            pin.fanout_count = 0
        node.fanout_count = 0
        node.children.clear()
        self.dead_nodes.append(n)

    def get_new_index(self) -> int:
        """Append an empty node and return its index."""
        self.nodes.append(StorageNode(PinType.NONE))
        return len(self.nodes) - 1