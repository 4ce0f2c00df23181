import io
from types import SimpleNamespace

import pytest

from hatter.storage_network import StorageNetwork
from hatter.write_verilog import VerilogParams, write_verilog, write_verilog_file


class _Library:
    def __init__(self, gates):
        self.gates = gates

    def get_id(self, function):
        for i, g in enumerate(self.gates):
            if g.function == function:
                return i
        return None

    def get_gate(self, i):
        return self.gates[i]

    def get_name(self, i):
        return self.gates[i].name

    def get_aug_gates(self):
        return self.gates


def _gate(name, function, pins):
    return SimpleNamespace(
        name=name,
        function=function,
        area=1.0,
        pins=[SimpleNamespace(name=p) for p in pins],
        output_name="O",
    )


def _network():
    return StorageNetwork(
        _Library([_gate("and2", (2, 0x8), "ab"), _gate("inv1", (1, 0x1), "a")])
    )


def _text(ntk, params=None):
    buffer = io.StringIO()
    write_verilog(ntk, buffer, params)
    return buffer.getvalue()


def test_single_gate_module():
    ntk = _network()
    a, b = ntk.create_pi(), ntk.create_pi()
    ntk.create_po(ntk.create_and(a, b))
    assert _text(ntk) == (
        "module top( x0 , x1 , y0 );\n"
        "  input x0 , x1 ;\n"
        "  output y0 ;\n"
        "  and2 g0( .a(x0), .b(x1), .O(y0) );\n"
        "endmodule\n"
    )


def test_internal_signals_become_wires():
    ntk = _network()
    a, b, c = ntk.create_pi(), ntk.create_pi(), ntk.create_pi()
    g1 = ntk.create_and(a, b)
    ntk.create_po(ntk.create_and(g1, c))
    text = _text(ntk)
    wire = f"n{g1.index}"
    assert f"  wire {wire} ;\n" in text
    assert f".a({wire})" in text


def test_multiple_pos_duplicate_instances():
    ntk = _network()
    a, b = ntk.create_pi(), ntk.create_pi()
    g = ntk.create_and(a, b)
    ntk.create_po(g)
    ntk.create_po(g)
    text = _text(ntk)
    assert text.count("  and2 ") == 2
    assert ".O(y0)" in text and ".O(y1)" in text


def test_module_name_and_buses():
    ntk = _network()
    a, b = ntk.create_pi(), ntk.create_pi()
    ntk.create_po(ntk.create_and(a, b))
    params = VerilogParams(input_names=[("a", 2)], output_names=[("s", 1)], module_name="adder")
    text = _text(ntk, params)
    assert text.startswith("module adder( a , s );\n")
    assert "  input [1:0] a ;\n" in text
    assert ".a(a[0]), .b(a[1]), .O(s[0])" in text


def test_bad_partition_raises():
    ntk = _network()
    a, b = ntk.create_pi(), ntk.create_pi()
    ntk.create_po(ntk.create_and(a, b))
    with pytest.raises(ValueError):
        _text(ntk, VerilogParams(input_names=[("a", 1)]))


def test_file_matches_stream(tmp_path):
    ntk = _network()
    a = ntk.create_pi()
    ntk.create_po(ntk.create_not(a))
    path = tmp_path / "out.v"
    write_verilog_file(ntk, str(path))
    assert path.read_text(encoding="utf-8") == _text(ntk)