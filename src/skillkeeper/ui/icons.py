"""
Icon utilities for consistent terminal display.

Unicode icons render at different widths across terminals and fonts.
The padding helpers here measure terminal cells with Rich's cell_len
so columns line up in listings.
"""

import rich.cells as _rich_cells

# =============================================================================
# Icon Constants
# =============================================================================

ICON_SUCCESS = "✓"       # Passed check, installed skill
ICON_FAILURE = "✗"       # Failed check
ICON_WARNING = "⚠"       # Check passed with warnings
ICON_BULLET = "•"        # Skill entry in listings

# Default target width for icon + padding (in terminal cells)
DEFAULT_ICON_WIDTH = 2


# =============================================================================
# Cell-Width-Aware String Padding
# =============================================================================


def cell_ljust(text: str, width: int) -> str:
    """Left-justify text to a cell width (pad on right).

    Like str.ljust() but uses terminal cell width instead of character count.
    """
    current = _rich_cells.cell_len(text)
    return text + " " * max(0, width - current)


def cell_rjust(text: str, width: int) -> str:
    """Right-justify text to a cell width (pad on left).

    Like str.rjust() but uses terminal cell width instead of character count.
    """
    current = _rich_cells.cell_len(text)
    return " " * max(0, width - current) + text


# =============================================================================
# Convenience Functions
# =============================================================================


def icon_success() -> str:
    """Padded success icon (✓)."""
    return cell_ljust(ICON_SUCCESS, DEFAULT_ICON_WIDTH)


def icon_failure() -> str:
    """Padded failure icon (✗)."""
    return cell_ljust(ICON_FAILURE, DEFAULT_ICON_WIDTH)


def icon_warning() -> str:
    """Padded warning icon (⚠)."""
    return cell_ljust(ICON_WARNING, DEFAULT_ICON_WIDTH)


def icon_bullet() -> str:
    """Padded bullet (•) for list entries."""
    return cell_ljust(ICON_BULLET, DEFAULT_ICON_WIDTH)
