"""Hirevo hiring marketplace backend: report aggregation engine."""

__version__ = "0.1.0"
