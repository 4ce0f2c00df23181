# hatter

Data structures and analyses for small, technology-mapped logic networks.
Everything is written against the standard library only.

## Modules

- **`hatter.bitmath`**: `log2_ceil`, the number of bits needed to index `x`
  items, computed with 32-bit unsigned arithmetic.
- **`hatter.symmetry`**: `cofactor0` and `cofactor1` of integer truth tables,
  the `Symmetries` relation over at most eight variables
  (`Symmetries.from_truth_table`, `set`, `symmetric`, `has_symmetries`), and
  `sort_symmetric`, which insertion-sorts lists in place, swapping only
  positions that are symmetric.
- **`hatter.bound_chain`**: `BoundChain`, a chain of library gates addressed by
  literals, with `ChainNode` for its gates. It comes with `get_longest_paths`,
  `time_canonize`, `perm_canonize`, `insert` (build a chain in a network) and
  `extract` (turn a network cone into a chain).
- **`hatter.storage_core`**: `Signal`, `PinType`, `OutputPin`, `StorageNode`
  and `StorageCore`. Together they store nodes with multiple output pins,
  primary inputs and outputs, fanout bookkeeping and a structural hash.
- **`hatter.storage_network`**: `StorageNetwork` extends `StorageCore` with
  structural queries, iterators (`iter_nodes`, `iter_gates`, `iter_fanins`,
  `iter_fanouts`, ...), traversal ids, per-node values, and access to the gate
  library.
- **`hatter.gate_load_tracker`**: `GateLoadTracker`, the sum of the input loads
  driven by each signal. Primary outputs carry a load of at least 1.0.
- **`hatter.sensing_times_tracker`**: `SensingTimesTracker`, the earliest
  switching time of each signal, from the input times and the minimum pin
  delays.
- **`hatter.window_simulator`**: `WindowSimulator`, bit-parallel simulation of
  a window and the observability care set of its pivot.
- **`hatter.write_verilog`**: `write_verilog` (to a stream) and
  `write_verilog_file` write a bound network as a structural Verilog module.
  `VerilogParams` sets bus names, the module name and verbosity.
- **`hatter.stats`**: the `Stats` record, with `format_stats` and `print_stats`
  for the `"table"`, `"grep"` and `"json"` formats. Any other format raises
  `ValueError`.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

### Symmetric variables

A truth table is an integer in which bit `m` holds the function's value on
minterm `m`:

```python
from hatter.symmetry import Symmetries

symm = Symmetries.from_truth_table(0x8, 2)  # two-input AND
assert symm.symmetric(0, 1)
assert symm.has_symmetries(0)
```

### Bound chains

Inputs take the literals `0 .. num_pis() - 1`. Each added gate gets the next
literal.

```python
from hatter.bound_chain import BoundChain

chain = BoundChain()
chain.add_inputs(4)
a, b, c, d = (chain.pi_at(i) for i in range(4))
maj = chain.add_gate([a, b, c], 6)
nand = chain.add_gate([maj, d], 5)
chain.add_output(nand)

assert chain.num_pis() == 4
assert chain.num_gates() == 2
assert chain.po_at(0) == 5
```

### A storage network

The library is any object you supply. To create nodes from functions it
needs `get_id(function)`, which maps a `(num_vars, bits)` truth table to a
binding id, or to `None` when there is no binding.

```python
from hatter.storage_network import StorageNetwork


class Library:
    def get_id(self, function):
        return {(2, 0x8): 0}.get(function)


ntk = StorageNetwork(Library())
a = ntk.create_pi()
b = ntk.create_pi()
f = ntk.create_and(a, b)
ntk.create_po(f)

assert ntk.num_gates() == 1
assert ntk.get_binding_ids(f.index) == [0]
```

### Integer helpers

```python
from hatter.bitmath import log2_ceil

assert log2_ceil(1) == 0
assert log2_ceil(5) == 3
assert log2_ceil(8) == 3
```

### Network statistics

```python
from hatter.stats import Stats, format_stats

stats = Stats(inputs=4, outputs=2, nodes=3, area=3.0, delay=2.0)
assert format_stats(stats, "grep") == (
    "Inputs=4 Outputs=2 Nodes=3 Edges=0 Area=3.00 Delay=2.00 Levels=0\n"
)
```

`print_stats` writes the same text to standard output.

## What the package does not do

- It has no command-line program or interactive shell. `print_stats` and the
  other functions are called from Python.
- It reads no files. There is no Verilog reader and no gate-library parser.
  Gate libraries are objects that you supply. Each part lists, in its module
  docstring, the library methods it calls.
- It does not optimise or resynthesise networks, and it builds no windows.
  `WindowSimulator` simulates a window object that you provide.
- `StorageNetwork` raises no change events. The trackers follow changes only
  through an event source passed as `events` (or found as the network's
  `events` attribute). Without one, they compute their values once, at
  construction.