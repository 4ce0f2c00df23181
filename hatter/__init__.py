"""Bound chains, node storage, load and sensing-time trackers, window simulation and Verilog output for mapped logic networks."""

__version__ = "0.1.0"