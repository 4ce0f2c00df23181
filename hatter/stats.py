"""Network statistics and their textual formats."""

from __future__ import annotations

import sys
from dataclasses import dataclass

FORMATS = ("table", "grep", "json")


@dataclass
class Stats:
    """Summary figures of a network."""

    inputs: int = 0
    outputs: int = 0
    nodes: int = 0
    edges: int = 0
    area: float = 0.0
    delay: float = 0.0
    levels: int = 0


def format_stats(stats: Stats, fmt: str = "table") -> str:
    """Render ``stats`` as ``table``, ``grep`` or ``json`` text."""
    if fmt == "table":
        rows = [
            ("Inputs", str(stats.inputs)),
            ("Outputs", str(stats.outputs)),
            ("Nodes", str(stats.nodes)),
            ("Edges", str(stats.edges)),
            ("Area", f"{stats.area:.2f}"),
            ("Delay", f"{stats.delay:.2f}"),
            ("Levels", str(stats.levels)),
        ]
        return "".join(f"{label:<10}: {value}\n" for label, value in rows)
    if fmt == "grep":
        return (
            f"Inputs={stats.inputs} Outputs={stats.outputs} Nodes={stats.nodes}"
            f" Edges={stats.edges} Area={stats.area:.2f} Delay={stats.delay:.2f}"
            f" Levels={stats.levels}\n"
        )
    if fmt == "json":
        return (
            f'{{"inputs":{stats.inputs},"outputs":{stats.outputs},'
            f'"nodes":{stats.nodes},"edges":{stats.edges},'
            f'"area":{stats.area:.2f},"delay":{stats.delay:.2f},'
            f'"levels":{stats.levels}}}\n'
        )
    raise ValueError(f"Unknown format: {fmt}")


def print_stats(stats: Stats, fmt: str = "table") -> None:
    """Write ``stats`` to standard output in the given format."""
    sys.stdout.write(format_stats(stats, fmt))