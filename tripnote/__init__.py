"""Tripnote: turns free-text travel notes into structured itineraries."""

__version__ = "0.1.0"
