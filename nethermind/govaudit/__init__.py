"""Audits simulated governance proposals, explaining every call and ETH balance change in a proposal trace"""

__version__ = "0.1.0"
