"""Command line and library for running work in host or Docker container sessions."""

__version__ = "0.1.0"