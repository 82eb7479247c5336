"""Backport merged pull requests to the branches named in their ``backport`` labels."""

__version__ = "1.0.0"
