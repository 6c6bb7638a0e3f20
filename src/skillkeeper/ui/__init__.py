"""
UI module for Skillkeeper.

Provides console output helpers built on Rich.
"""

from skillkeeper.ui.reporter import Reporter

__all__ = ["Reporter"]
