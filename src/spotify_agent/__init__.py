"""Spotify account exposed as schema-described agent tools over HTTP."""

__version__ = "1.0.0"
