"""Linus's Law cellular automaton: crowd-sourced map accuracy simulation."""

__version__ = "0.1.0"
