"""Writing bound networks as structural Verilog.

The network must offer the interface of ``StorageNetwork``. Its library
gates, as returned by ``get_library()``, need a ``name``, a list of
``pins`` each with a ``name``, and an ``output_name``. Networks may also
provide ``has_name``/``get_name`` for input names,
``has_output_name``/``get_output_name`` for output names, and
``get_network_name`` for the module name.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, TextIO, Tuple

from .storage_core import Signal


@dataclass
class VerilogParams:
    """Naming options; names are ``(name, width)`` buses when given."""

    input_names: List[Tuple[str, int]] = field(default_factory=list)
    output_names: List[Tuple[str, int]] = field(default_factory=list)
    module_name: Optional[str] = None
    verbose: bool = False


def _bus_names(buses: Sequence[Tuple[str, int]], expected: int, kind: str) -> Tuple[List[str], List[str]]:
    ports: List[str] = []
    bits: List[str] = []
    for name, width in buses:
        ports.append(name)
        bits.extend(f"{name}[{i}]" for i in range(width))
    if len(bits) != expected:
        raise ValueError(f"{kind} names do not partition all {kind}s")
    return ports, bits


def _default_input_names(ntk: Any) -> List[str]:
    has_name = getattr(ntk, "has_name", None)
    get_name = getattr(ntk, "get_name", None)
    names = []
    for i, n in enumerate(ntk.iter_pis()):
        f = Signal(n, 0)
        if callable(has_name) and callable(get_name) and has_name(f):
            names.append(get_name(f))
        else:
            names.append(f"x{i}")
    return names


def _default_output_names(ntk: Any) -> List[str]:
    has_name = getattr(ntk, "has_output_name", None)
    get_name = getattr(ntk, "get_output_name", None)
    names = []
    for i in range(ntk.num_pos()):
        if callable(has_name) and callable(get_name) and has_name(i):
            names.append(get_name(i))
        else:
            names.append(f"y{i}")
    return names


def _topological_order(ntk: Any) -> Iterator[int]:
    """Constants, then inputs, then the nodes reachable from the outputs."""
    seen = set()
    for n in (ntk.get_constant(False).index, ntk.get_constant(True).index):
        if n not in seen:
            seen.add(n)
            yield n
    for n in ntk.iter_pis():
        if n not in seen:
            seen.add(n)
            yield n
    for f in ntk.iter_pos():
        if f.index in seen:
            continue
        seen.add(f.index)
        stack = [(f.index, iter(list(ntk.iter_fanins(f.index))))]
        while stack:
            node, fanins = stack[-1]
            for fi in fanins:
                if fi.index not in seen:
                    seen.add(fi.index)
                    stack.append((fi.index, iter(list(ntk.iter_fanins(fi.index)))))
                    break
            else:
                stack.pop()
                yield node


def _wire_name(ntk: Any, f: Signal) -> str:
    if ntk.is_multioutput(f.index):
        return f"n{f.index}_{f.output}"
    return f"n{f.index}"


def _instance(module: str, inst: str, args: Sequence[Tuple[str, str]]) -> str:
    connections = ", ".join(f".{pin}({net})" for pin, net in args)
    return f"  {module} {inst}( {connections} );\n"


def write_verilog(ntk: Any, out: TextIO, params: Optional[VerilogParams] = None) -> None:
    """Write ``ntk`` as a structural Verilog module to the stream ``out``."""
    ps = params if params is not None else VerilogParams()
    if not ntk.is_combinational():
        raise ValueError("network has to be combinational")

    if ps.input_names:
        inputs, xs = _bus_names(ps.input_names, ntk.num_pis(), "input")
    else:
        xs = _default_input_names(ntk)
        inputs = list(xs)

    if ps.output_names:
        outputs, ys = _bus_names(ps.output_names, ntk.num_pos(), "output")
    else:
        ys = _default_output_names(ntk)
        outputs = list(ys)

    po_signals: Dict[Signal, List[int]] = {}
    for i, f in enumerate(ntk.iter_pos()):
        po_signals.setdefault(f, []).append(i)

    ws: List[str] = []
    signal_names: Dict[Signal, str] = {}

    for value, literal in ((False, "1'b0"), (True, "1'b1")):
        const = ntk.get_constant(value)
        if ntk.has_binding(const):
            signal_names[const] = f"n{const.index}"
            if const not in po_signals:
                ws.append(signal_names[const])
        else:
            signal_names[const] = literal

    for n in ntk.iter_gates():
        for f in ntk.iter_outputs(n):
            if f not in po_signals:
                ws.append(_wire_name(ntk, f))

    module_name = "top"
    if ps.module_name:
        module_name = ps.module_name
    else:
        get_network_name = getattr(ntk, "get_network_name", None)
        if callable(get_network_name) and get_network_name():
            module_name = get_network_name()

    out.write(f"module {module_name}( {' , '.join(inputs + outputs)} );\n")
    if ps.input_names:
        for name, width in ps.input_names:
            out.write(f"  input [{width - 1}:0] {name} ;\n")
    elif xs:
        out.write(f"  input {' , '.join(xs)} ;\n")
    if ps.output_names:
        for name, width in ps.output_names:
            out.write(f"  output [{width - 1}:0] {name} ;\n")
    elif ys:
        out.write(f"  output {' , '.join(ys)} ;\n")
    if ws:
        out.write(f"  wire {' , '.join(ws)} ;\n")

    for i, n in enumerate(ntk.iter_pis()):
        signal_names[Signal(n, 0)] = xs[i]

    gates = ntk.get_library()
    length = max((len(g.name) for g in gates), default=0)
    num_gates = ntk.num_gates()
    n_digits = len(str(num_gates)) - 1 if num_gates > 0 else 0
    counter = 0

    def instance_name(count: int) -> str:
        digits = len(str(count)) - 1
        return "g" + "0" * (n_digits - digits) + str(count)

    def gate_of(f: Signal) -> Any:
        return gates[ntk.get_binding_ids(f.index)[f.output]]

    for n in _topological_order(ntk):
        node_outputs = list(ntk.iter_outputs(n))
        for f in node_outputs:
            if f in po_signals:
                signal_names[f] = ys[po_signals[f][0]]
            elif not ntk.is_constant(n) and not ntk.is_pi(n):
                signal_names[f] = _wire_name(ntk, f)

        if not ntk.has_binding(n):
            continue

        gate = gate_of(Signal(n, 0))
        name = gate.name.ljust(length)
        args = [
            (gate.pins[i].name, signal_names[fi])
            for i, fi in enumerate(ntk.iter_fanins(n))
        ]
        args.extend((gate_of(f).output_name, signal_names[f]) for f in node_outputs)

        out.write(_instance(name, instance_name(counter), args))
        counter += 1

        for f in node_outputs:
            po_list = po_signals.get(f, [])
            if len(po_list) <= 1:
                continue
            if ps.verbose:
                sys.stderr.write(
                    f"[i] signal {{{f.index}, {f.output}}} driving multiple POs has been duplicated.\n"
                )
            for po in po_list[1:]:
                args[-1] = (gate_of(f).output_name, ys[po])
                out.write(_instance(name, instance_name(counter), args))
                counter += 1

    out.write("endmodule\n")


def write_verilog_file(ntk: Any, filename: str, params: Optional[VerilogParams] = None) -> None:
    """Write ``ntk`` as a structural Verilog module to the file ``filename``."""
    with open(filename, "w", encoding="utf-8") as out:
        write_verilog(ntk, out, params)