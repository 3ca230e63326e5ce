"""Command-line front end for the serial/lot sheet builder."""

from .commands import main

__all__ = ["main"]
