"""Hyvmind core: legal-annotation graph, membership, votes and BUZZ reputation."""

__version__ = "0.1.0"
