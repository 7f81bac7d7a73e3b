"""Screenplay-style dialogue scripts: element sequencing, grouping and export."""

__version__ = "0.1.0"
