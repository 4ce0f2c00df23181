"""Boolean chains of library gates addressed by literals.

The inputs of a chain are the literals ``0 .. num_pis - 1``; every gate
added afterwards receives the next literal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Sequence, Tuple

from .symmetry import Symmetries


@dataclass
class ChainNode:
    """A gate of a chain: the literals of its fanins and its binding id."""

    fanins: List[int] = field(default_factory=list)
    gate_id: int = 0


class BoundChain:
    """Chain of gates taken from a technology library."""

    def __init__(self, num_inputs: int = 0) -> None:
        if num_inputs < 0:
            raise ValueError(f"negative number of inputs: {num_inputs}")
        self._num_inputs = num_inputs
        self._nodes: List[ChainNode] = []
        self._outputs: List[int] = []

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoundChain):
            return NotImplemented
        return (
            self._num_inputs == other._num_inputs
            and self._outputs == other._outputs
            and self._nodes == other._nodes
        )

    def __repr__(self) -> str:
        return (
            f"BoundChain(num_inputs={self._num_inputs}, "
            f"nodes={self._nodes!r}, outputs={self._outputs!r})"
        )

    def clear(self) -> None:
        """Remove all gates and outputs, keeping the inputs."""
        self._nodes.clear()
        self._outputs.clear()

    def add_inputs(self, n: int = 1) -> None:
        """Append ``n`` inputs to the chain."""
        if n < 0:
            raise ValueError(f"negative number of inputs: {n}")
        self._num_inputs += n

    def add_output(self, v: int) -> None:
        """Mark literal ``v`` as an output."""
        self._outputs.append(v)

    def pi_at(self, index: int) -> int:
        """Literal of the input at position ``index``."""
        if not 0 <= index < self._num_inputs:
            raise IndexError(f"input index {index} out of range")
        return index

    def po_at(self, index: int) -> int:
        """Literal driving the output at position ``index``."""
        if not 0 <= index < len(self._outputs):
            raise IndexError(f"output index {index} out of range")
        return self._outputs[index]

    def is_pi(self, f: int) -> bool:
        """Whether literal ``f`` is an input."""
        return f < self._num_inputs

    def add_gate(self, fanins: Sequence[int], gate_id: int) -> int:
        """Append a gate and return the literal identifying it."""
        lit = len(self._nodes) + self._num_inputs
        self._nodes.append(ChainNode(list(fanins), gate_id))
        return lit

    def replace_in_node(self, node: int, fanin: int, other: int) -> None:
        """Set fanin ``fanin`` of gate number ``node`` to literal ``other``."""
        self._nodes[node].fanins[fanin] = other

    def replace_output(self, index: int, other: int) -> None:
        """Set the output at position ``index`` to literal ``other``."""
        self._outputs[index] = other

    def pis(self) -> Iterator[int]:
        """Literals of the inputs."""
        return iter(range(self._num_inputs))

    def gates(self) -> Iterator[Tuple[int, ChainNode]]:
        """Pairs of gate number and gate, in creation order."""
        return iter(list(enumerate(self._nodes)))

    def gates_reversed(self) -> Iterator[Tuple[int, ChainNode]]:
        """Pairs of gate number and gate, last gate first."""
        return reversed(list(enumerate(self._nodes)))

    def pos(self) -> Iterator[Tuple[int, int]]:
        """Pairs of output position and driving literal."""
        return iter(list(enumerate(self._outputs)))

    def num_gates(self) -> int:
        return len(self._nodes)

    def num_pis(self) -> int:
        return self._num_inputs

    def num_pos(self) -> int:
        return len(self._outputs)

    def size(self) -> int:
        """Number of literals: inputs plus gates."""
        return self._num_inputs + len(self._nodes)

    @property
    def nodes(self) -> List[ChainNode]:
        """Copy of the gates."""
        return [ChainNode(list(n.fanins), n.gate_id) for n in self._nodes]

    @property
    def outputs(self) -> List[int]:
        """Copy of the output literals."""
        return list(self._outputs)

    def area(self, lib: Any) -> float:
        """Total area of the gates, as reported by ``lib.get_area(id)``."""
        return sum((lib.get_area(node.gate_id) for node in self._nodes), 0.0)

    def get_node_index(self, lit: int) -> int:
        """Gate number of the gate literal ``lit``."""
        return lit - self._num_inputs


def get_longest_paths(chain: BoundChain, library: Any) -> List[float]:
    """Longest delay from each input to any output of the chain.

    Pin delays come from ``library.get_max_pin_delay(gate_id, pin)``.
    """
    num_pis = chain.num_pis()
    input_delays = [0.0] * num_pis
    node_delays = [0.0] * (num_pis + chain.num_gates())
    for i, node in chain.gates_reversed():
        own = node_delays[num_pis + i]
        for j, lit in enumerate(node.fanins):
            node_delays[lit] = min(node_delays[lit], own - library.get_max_pin_delay(node.gate_id, j))
            if chain.is_pi(lit):
                input_delays[lit] = node_delays[lit]
    return [-d for d in input_delays]


def perm_canonize(chain: BoundChain, perm: Sequence[int]) -> None:
    """Rename the inputs of ``chain`` in place.

    ``perm[k]`` is the input placed at position ``k``; every input literal
    ``v`` becomes the position of ``v`` in ``perm``.
    """
    positions = {v: k for k, v in enumerate(perm)}
    for i, node in chain.gates():
        for j, lit in enumerate(node.fanins):
            if chain.is_pi(lit):
                chain.replace_in_node(i, j, positions[lit])
    for i, lit in chain.pos():
        if chain.is_pi(lit):
            chain.replace_output(i, positions[lit])


def time_canonize(chain: BoundChain, library: Any, symm: Symmetries) -> None:
    """Reorder symmetric inputs in place so that slower inputs come first."""
    num_pis = chain.num_pis()
    inputs = list(range(num_pis))
    delays = get_longest_paths(chain, library)

    for i in range(num_pis):
        if not symm.has_symmetries(i):
            continue
        k = i
        j = i - 1
        delay = delays[inputs[i]]
        swapped = True
        while swapped and j >= 0:
            if symm.symmetric(inputs[k], inputs[j]):
                if delay > delays[j]:
                    inputs[k], inputs[j] = inputs[j], inputs[k]
                    delays[k], delays[j] = delays[j], delays[k]
                    k = j
                else:
                    swapped = False
            j -= 1

    perm_canonize(chain, inputs)


def insert(ntk: Any, inputs: Sequence[Any], chain: BoundChain) -> Any:
    """Build the gates of ``chain`` in ``ntk`` and return its first output.

    ``inputs`` are the network signals feeding the chain inputs; gates are
    created with ``ntk.create_node(children, gate_id)``.
    """
    num_pis = chain.num_pis()
    if len(inputs) < num_pis:
        raise ValueError(f"chain needs {num_pis} inputs, got {len(inputs)}")
    fs = list(inputs[:num_pis])
    for _, node in chain.gates():
        children = [fs[lit] for lit in node.fanins]
        fs.append(ntk.create_node(children, node.gate_id))
    return fs[chain.po_at(0)]


def _key(ntk: Any, f: Any) -> Tuple[Any, int]:
    return ntk.get_node(f), getattr(f, "output", 0)


def extract(chain: BoundChain, ntk: Any, inputs: Sequence[Any], output: Any) -> None:
    """Append to ``chain`` the logic cone of ``output`` bounded by ``inputs``.

    Input ``i`` becomes chain literal ``i``; ``None`` entries are skipped.
    The cone's gates are added in topological order and the literal of
    ``output`` is added as a chain output.
    """
    if chain.num_pis() < len(inputs):
        raise ValueError("not enough inputs in the chain")

    sig_to_lit: Dict[Tuple[Any, int], int] = {}

    ntk.incr_trav_id()
    for i, f in enumerate(inputs):
        if f is None:
            continue
        ntk.set_visited(ntk.get_node(f), ntk.trav_id)
        sig_to_lit[_key(ntk, f)] = i

    def construct(f: Any) -> None:
        n = ntk.get_node(f)
        if ntk.visited(n) == ntk.trav_id:
            return
        if ntk.is_pi(n):
            raise ValueError(f"unexpected unmarked input {n} in logic cone")
        children = []
        for fi in ntk.iter_fanins(n):
            construct(fi)
            children.append(sig_to_lit[_key(ntk, fi)])
        for pin, gate_id in enumerate(ntk.get_binding_ids(n)):
            sig_to_lit[(n, pin)] = chain.add_gate(children, gate_id)
        ntk.set_visited(n, ntk.trav_id)

    construct(output)
    chain.add_output(sig_to_lit[_key(ntk, output)])