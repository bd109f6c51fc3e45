"""Data generation, build and validation tasks for the formulae site."""

__version__ = "0.1.0"
