"""
CLI module for Skillkeeper.

Provides the command-line interface using Click.
"""

from skillkeeper.cli.main import cli, main

__all__ = ["main", "cli"]
