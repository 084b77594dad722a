"""
Cells of the minefield grid.

A cell knows its coordinate, whether it hides a mine, how many mines
surround it, and what the player has done to it so far.
"""
from enum import Enum, auto
from dataclasses import dataclass
from typing import Tuple


# ============================================================================
# Constants
# ============================================================================

class CellState(Enum):
    """What the player has done to a cell: nothing, dug it, or marked it."""

    HIDDEN = auto()
    REVEALED = auto()
    FLAGGED = auto()


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass
class Cell:
    """
    One square of ground at (x, z).

    Dug and flagged are two values of the same ``state`` field, so a
    flagged cell can never also be revealed.

    Attributes:
        x: Column, 0 <= x < width.
        z: Row, 0 <= z < height.
        is_mine: True if stepping here detonates.
        neighbor_mines: Mines among the up to 8 surrounding cells. Only
            meaningful for safe cells; mines keep 0.
        state: HIDDEN, REVEALED or FLAGGED.
    """

    x: int = 0
    z: int = 0
    is_mine: bool = False
    neighbor_mines: int = 0
    state: CellState = CellState.HIDDEN

    @property
    def position(self) -> Tuple[int, int]:
        return self.x, self.z

    def reveal(self) -> bool:
        """
        Dig the cell.

        Returns:
            False when there is nothing to dig: the cell is already open
            or a flag protects it.
        """
        if self.state != CellState.HIDDEN:
            return False
        self.state = CellState.REVEALED
        return True

    def toggle_flag(self) -> bool:
        """
        Place a flag on a hidden cell, or lift an existing one.

        Returns:
            False for an open cell, which cannot carry a flag.
        """
        if self.state == CellState.REVEALED:
            return False
        if self.state == CellState.HIDDEN:
            self.state = CellState.FLAGGED
        else:
            self.state = CellState.HIDDEN
        return True

    @property
    def is_hidden(self) -> bool:
        """Still covered and unflagged."""
        return self.state == CellState.HIDDEN

    @property
    def is_revealed(self) -> bool:
        return self.state == CellState.REVEALED

    @property
    def is_flagged(self) -> bool:
        return self.state == CellState.FLAGGED

    def to_observation(self) -> int:
        """
        Encode the cell as seen by a player, for the numpy board view.

        Returns:
            -1 while covered, -2 under a flag, 9 for an open mine,
            otherwise the open cell's neighbor count (0-8).
        """
        if self.state == CellState.HIDDEN:
            return -1
        if self.state == CellState.FLAGGED:
            return -2
        if self.is_mine:
            return 9
        return self.neighbor_mines
