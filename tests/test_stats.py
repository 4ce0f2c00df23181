import json

import pytest

from hatter.stats import Stats, format_stats, print_stats


@pytest.fixture
def stats():
    return Stats(inputs=4, outputs=2, nodes=7, edges=0, area=3.5, delay=2.25, levels=0)


def test_json_round_trip(stats):
    data = json.loads(format_stats(stats, "json"))
    assert data == {
        "inputs": 4,
        "outputs": 2,
        "nodes": 7,
        "edges": 0,
        "area": 3.5,
        "delay": 2.25,
        "levels": 0,
    }


def test_grep_format(stats):
    text = format_stats(stats, "grep")
    assert text.endswith("\n")
    fields = dict(item.split("=") for item in text.split())
    assert fields["Inputs"] == "4"
    assert fields["Area"] == "3.50"
    assert fields["Delay"] == "2.25"
    assert list(fields) == ["Inputs", "Outputs", "Nodes", "Edges", "Area", "Delay", "Levels"]


def test_table_format(stats):
    lines = format_stats(stats, "table").splitlines()
    assert len(lines) == 7
    assert lines[0] == "Inputs    : 4"
    assert all(line[10:12] == ": " for line in lines)
    assert lines[4].endswith("3.50")


def test_default_is_table(stats):
    assert format_stats(stats) == format_stats(stats, "table")


def test_print_stats_writes_stdout(stats, capsys):
    print_stats(stats, "grep")
    assert capsys.readouterr().out == format_stats(stats, "grep")


def test_unknown_format(stats):
    with pytest.raises(ValueError, match="Unknown format: xml"):
        format_stats(stats, "xml")


def test_print_unknown_format(stats, capsys):
    with pytest.raises(ValueError):
        print_stats(stats, "yaml")
    assert capsys.readouterr().out == ""