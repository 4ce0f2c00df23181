"""Structural queries, traversal and library access over node storage.

Besides what ``StorageCore`` requires, the library must provide
``get_gate(id)``, which returns an object with ``function`` and ``area``
attributes. It must also provide ``get_max_pin_delay(id, pin)``,
``get_min_pin_delay(id, pin)``, ``get_input_load(id, pin)``,
``get_aug_gates()``, ``get_chain(id)``, ``get_binding_ids(name)``,
``get_fanin_number(id, pin_name)``, ``has_gate(name)``,
``is_input_pin(gate, pin)``, ``is_output_pin(gate, pin)`` and
``is_multioutput(name)``. Each is needed only by the query that forwards
to it.
"""

from __future__ import annotations

import warnings
from typing import Any, Iterator, List, Optional, Union

from .storage_core import OutputPin, PinType, Signal, StorageCore, StorageNode

_TRAV_ID_LIMIT = 0xFFFFFFFF - 10


class StorageNetwork(StorageCore):
    """Node storage with structural, functional and traversal queries."""

    # structural properties

    def is_combinational(self) -> bool:
        """Always true: sequential elements are not supported."""
        return True

    def is_multioutput(self, n: Union[int, str]) -> bool:
        """Whether node ``n``, or the library gate named ``n``, has several outputs."""
        if isinstance(n, str):
            return bool(self.library.is_multioutput(n))
        return self.num_outputs(n) > 1

    def is_dead(self, n: int) -> bool:
        """Whether node ``n`` has been deleted."""
        flags = [bool(pin.pin_type & PinType.DEAD) for pin in self.nodes[n].outputs]
        if any(flags) != all(flags):
            raise RuntimeError(f"node {n} is only partly dead")
        return all(flags)

    def num_cis(self) -> int:
        return len(self.inputs)

    def num_cos(self) -> int:
        return len(self.outputs)

    def num_pis(self) -> int:
        return len(self.inputs)

    def num_pos(self) -> int:
        return len(self.outputs)

    def num_gates(self) -> int:
        """Number of stored nodes that are neither constants nor inputs."""
        return len(self.nodes) - len(self.inputs) - 2

    def num_outputs(self, n: int) -> int:
        return len(self.nodes[n].outputs)

    def fanin_size(self, n: int) -> int:
        return len(self.nodes[n].children)

    def fanout_size(self, n: int) -> int:
        return self.nodes[n].fanout_count

    def incr_fanout_size(self, n: int) -> int:
        """Increment the fanout count of ``n`` and return its previous value."""
        node = self.nodes[n]
        old = node.fanout_count
        node.fanout_count += 1
        return old

    def decr_fanout_size(self, n: int) -> int:
        """Decrement the fanout count of ``n`` and return its new value."""
        node = self.nodes[n]
        node.fanout_count -= 1
        return node.fanout_count

    def incr_fanout_size_pin(self, n: int, pin_index: int) -> int:
        """Increment the fanout count of a pin and return its new value."""
        pin = self.nodes[n].outputs[pin_index]
        pin.fanout_count += 1
        return pin.fanout_count

    def decr_fanout_size_pin(self, n: int, pin_index: int) -> int:
        """Decrement the fanout count of a pin and return its new value."""
        pin = self.nodes[n].outputs[pin_index]
        pin.fanout_count -= 1
        return pin.fanout_count

    def fanout_size_pin(self, n: int, pin_index: int) -> int:
        return self.nodes[n].outputs[pin_index].fanout_count

    def is_function(self, n: int) -> bool:
        """Whether node ``n`` computes a function (internal or output node)."""
        pins = self.nodes[n].outputs
        return bool(pins) and bool(pins[0].pin_type & (PinType.INTERNAL | PinType.PO))

    def find(self, node: StorageNode) -> Optional[int]:
        """Index of a stored node structurally equal to ``node``, if any."""
        indices = self.strash.get(node.structural_key)
        if not indices:
            return None
        if self.is_dead(indices[0]):
            raise RuntimeError(f"hashed node {indices[0]} is dead")
        return indices[0]

    def in_fanin(self, parent: int, other: int) -> bool:
        """Whether node ``other`` is an immediate fanin of ``parent``."""
        return any(child.index == other for child in self.nodes[parent].children)

    # functional properties

    def signal_function(self, f: Signal) -> Any:
        """Function of the gate bound to signal ``f``."""
        gate_id = self.nodes[f.index].outputs[f.output].gate_id
        return self.library.get_gate(gate_id).function

    # nodes and signals

    def ci_at(self, index: int) -> int:
        return self.inputs[index]

    def co_at(self, index: int) -> Signal:
        return self.outputs[index]

    def pi_at(self, index: int) -> int:
        return self.inputs[index]

    def po_at(self, index: int) -> Signal:
        return self.outputs[index]

    def pi_index(self, n: int) -> int:
        """Position of input node ``n`` among the primary inputs."""
        if not self.nodes[n].outputs[0].pin_type & PinType.PI:
            raise ValueError(f"node {n} is not a primary input")
        return self.nodes[n].children[0].index

    def po_index(self, f: Signal) -> int:
        """Position of the first primary output driven by ``f``."""
        try:
            return self.outputs.index(f)
        except ValueError:
            raise ValueError(f"signal {f} is not a primary output") from None

    # iterators

    def iter_nodes(self) -> Iterator[int]:
        """Live non-constant nodes in index order."""
        for n in range(2, len(self.nodes)):
            if not self.is_dead(n):
                yield n

    def iter_cis(self) -> Iterator[int]:
        return iter(list(self.inputs))

    def iter_cos(self) -> Iterator[Signal]:
        return iter(list(self.outputs))

    def iter_pis(self) -> Iterator[int]:
        return iter(list(self.inputs))

    def iter_pos(self) -> Iterator[Signal]:
        return iter(list(self.outputs))

    def iter_gates(self) -> Iterator[int]:
        """Live nodes that are neither constants nor inputs."""
        for n in range(2, len(self.nodes)):
            if not self.is_ci(n) and not self.is_dead(n):
                yield n

    def iter_fanins(self, n: int) -> Iterator[Signal]:
        """Fanin signals of ``n``; none for constants and inputs."""
        if n <= 1 or self.is_ci(n):
            return iter(())
        return iter(list(self.nodes[n].children))

    def iter_output_pins(self, n: int) -> Iterator[OutputPin]:
        return iter(list(self.nodes[n].outputs))

    def iter_outputs(self, n: int) -> Iterator[Signal]:
        """Signals of the output pins of ``n``."""
        return (Signal(n, i) for i in range(len(self.nodes[n].outputs)))

    def iter_signal_fanouts(self, f: Signal) -> Iterator[int]:
        """Nodes fed by signal ``f``."""
        return iter(list(self.nodes[f.index].outputs[f.output].fanout))

    def iter_fanouts(self, n: int) -> Iterator[int]:
        """Nodes fed by any output pin of ``n``."""
        for pin in list(self.nodes[n].outputs):
            yield from list(pin.fanout)

    # custom node values

    def clear_values(self) -> None:
        for node in self.nodes:
            node.user_data = 0

    def value(self, n: int) -> int:
        return self.nodes[n].user_data

    def set_value(self, n: int, v: int) -> None:
        self.nodes[n].user_data = v

    def incr_value(self, n: int) -> int:
        """Increment the value of ``n`` and return its previous value."""
        node = self.nodes[n]
        old = node.user_data
        node.user_data += 1
        return old

    def decr_value(self, n: int) -> int:
        """Decrement the value of ``n`` and return its new value."""
        node = self.nodes[n]
        node.user_data -= 1
        return node.user_data

    # visited flags

    def clear_visited(self) -> None:
        for node in self.nodes:
            node.traversal_id = 0

    def visited(self, n: int) -> int:
        return self.nodes[n].traversal_id

    def set_visited(self, n: int, v: int) -> None:
        self.nodes[n].traversal_id = v

    def incr_trav_id(self) -> None:
        """Advance the traversal id, resetting all marks near the 32-bit limit."""
        if self.trav_id > _TRAV_ID_LIMIT:
            warnings.warn(
                "traversal identifier exceeded safe threshold; forced reset",
                RuntimeWarning,
                stacklevel=2,
            )
            self.clear_values()
            self.clear_visited()
            self.trav_id = 0
        self.trav_id += 1

    # getters

    def get_children(self, n: int) -> List[Signal]:
        return list(self.nodes[n].children)

    def get_fanins(self, n: int) -> List[int]:
        """Indices of the nodes in the immediate fanin of ``n``."""
        return [child.index for child in self.nodes[n].children]

    def get_chain(self, gate_id: int) -> Any:
        return self.library.get_chain(gate_id)

    def get_area(self, n: int) -> float:
        """Area of the gate bound to the first output of ``n``."""
        return self.get_binding(Signal(n, 0)).area

    def get_functions(self, n: int) -> List[Any]:
        """Functions of the gates bound to each output pin of ``n``."""
        return [self.get_binding(f).function for f in self.iter_outputs(n)]

    def get_binding_ids(self, n: Union[int, str]) -> List[int]:
        """Binding ids of the pins of node ``n``, or of the library gate named ``n``."""
        if isinstance(n, str):
            return list(self.library.get_binding_ids(n))
        return [pin.gate_id for pin in self.nodes[n].outputs]

    def get_binding(self, f: Signal) -> Any:
        return self.library.get_gate(self.nodes[f.index].outputs[f.output].gate_id)

    def get_max_pin_delay(self, f: Signal, i: int) -> float:
        gate_id = self.nodes[f.index].outputs[f.output].gate_id
        return self.library.get_max_pin_delay(gate_id, i)

    def get_min_pin_delay(self, f: Signal, i: int) -> float:
        gate_id = self.nodes[f.index].outputs[f.output].gate_id
        return self.library.get_min_pin_delay(gate_id, i)

    def get_input_load(self, f: Signal, i: int) -> float:
        gate_id = self.nodes[f.index].outputs[f.output].gate_id
        return self.library.get_input_load(gate_id, i)

    def get_library(self) -> Any:
        return self.library.get_aug_gates()

    def get_fanin_number(self, gate_id: int, pin_name: str) -> int:
        return self.library.get_fanin_number(gate_id, pin_name)

    # bindings

    def has_binding(self, n: Union[int, Signal]) -> bool:
        """Whether node ``n`` (or the node of signal ``n``) is bound to a gate."""
        if isinstance(n, Signal):
            n = n.index
        return not self.is_constant(n) and not self.is_ci(n)

    def has_gate(self, name: str) -> bool:
        return bool(self.library.has_gate(name))

    def is_input_pin(self, gate_name: str, pin_name: str) -> bool:
        return bool(self.library.is_input_pin(gate_name, pin_name))

    def is_output_pin(self, gate_name: str, pin_name: str) -> bool:
        return bool(self.library.is_output_pin(gate_name, pin_name))