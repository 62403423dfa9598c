"""Aptos copy-trading engine: watches master accounts and mirrors their swaps."""

__version__ = "2.0.0"
