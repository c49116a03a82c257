"""Hyvmind HTTP API."""
