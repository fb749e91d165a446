"""Reactor -- interactive scaffolding for React component packages."""

__version__ = "1.0.0"
