"""Voting banner generation for osu! Loved rounds."""

__version__ = "0.1.0"
