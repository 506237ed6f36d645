"""Falling-block puzzle game engine with pygame front end."""

__version__ = "0.1.0"
