"""Tennisplan: scheduling and billing backend for a small tennis school."""

__version__ = "1.0.0"
