"""Connectivity Generator -- scaffolds connectivity applications from service stubs."""

__version__ = "0.1.0"
