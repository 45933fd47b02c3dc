"""Tagrelease - grouped changelog releases between two tags."""

__version__ = "0.3.0"
