"""
CLI module for unchanged.

Provides the command-line interface using Click.
"""

from unchanged.cli.main import cli, main

__all__ = ["main", "cli"]
