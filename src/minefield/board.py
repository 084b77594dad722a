"""
Board module for the minefield core.

Holds the authoritative grid of cells for one game, the game status,
and the read-only views handed to presentation layers.
"""
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable, Iterator, List, Optional, Tuple

import numpy as np

from .cell import Cell
from .errors import InvalidConfigurationError, OutOfBoundsError


Position = Tuple[int, int]

# Moore neighborhood, and the orthogonal subset used for movement
NEIGHBOR_OFFSETS: Tuple[Position, ...] = tuple(
    (dx, dz)
    for dz in (-1, 0, 1)
    for dx in (-1, 0, 1)
    if (dx, dz) != (0, 0)
)
ORTHOGONAL_OFFSETS: Tuple[Position, ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))


# ============================================================================
# Constants
# ============================================================================

class GameStatus(Enum):
    """Possible states of a game. WON and LOST are terminal."""

    PLAYING = auto()
    WON = auto()
    LOST = auto()

    @property
    def is_terminal(self) -> bool:
        return self is not GameStatus.PLAYING


@dataclass(frozen=True)
class BoardConfig:
    """
    Configuration for a minefield board.

    Attributes:
        width: Number of columns (x axis).
        height: Number of rows (z axis).
        mine_count: Total mines to place.
    """

    width: int = 20
    height: int = 20
    mine_count: int = 40

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.width < 1 or self.height < 1:
            raise InvalidConfigurationError("Board dimensions must be positive")
        if self.mine_count < 0:
            raise InvalidConfigurationError("Number of mines cannot be negative")
        max_mines = self.width * self.height - 1
        if self.mine_count > max_mines:
            raise InvalidConfigurationError(f"Too many mines (max {max_mines})")

    @property
    def total_cells(self) -> int:
        return self.width * self.height

    @property
    def total_safe(self) -> int:
        """Number of cells without a mine."""
        return self.total_cells - self.mine_count


# Preset difficulty levels
BEGINNER = BoardConfig(9, 9, 10)
INTERMEDIATE = BoardConfig(16, 16, 40)
EXPERT = BoardConfig(30, 16, 99)
FIELD = BoardConfig(20, 20, 40)

PRESETS = {
    "beginner": BEGINNER,
    "intermediate": INTERMEDIATE,
    "expert": EXPERT,
    "field": FIELD,
}


# ============================================================================
# Read-only Views
# ============================================================================

@dataclass(frozen=True)
class CellView:
    """Immutable copy of one cell for presentation layers."""

    x: int
    z: int
    is_mine: bool
    is_revealed: bool
    is_flagged: bool
    neighbor_mines: int


@dataclass(frozen=True)
class BoardSnapshot:
    """Immutable copy of a board, safe to hand to a renderer."""

    width: int
    height: int
    mine_count: int
    cells: Tuple[CellView, ...]
    status: GameStatus
    start_cell: Optional[Position]
    detonated_mine: Optional[Position]
    flag_count: int

    @property
    def remaining_mines(self) -> int:
        return self.mine_count - self.flag_count

    def cell(self, x: int, z: int) -> CellView:
        return self.cells[x + z * self.width]


# ============================================================================
# Board Class
# ============================================================================

@dataclass
class Board:
    """
    Minesweeper board for one game session.

    Cells are stored row-major (index = x + z * width). The board only
    knows geometry and state; the rules that mutate it live in
    ``RevealEngine`` and ``BoardGenerator``.
    """

    config: BoardConfig
    cells: List[Cell] = field(default_factory=list, repr=False)
    status: GameStatus = GameStatus.PLAYING
    start_cell: Optional[Position] = None
    detonated_mine: Optional[Position] = None
    flag_count: int = 0

    def __post_init__(self) -> None:
        """Create the empty grid unless cells were supplied."""
        if not self.cells:
            self._init_grid()

    @classmethod
    def from_mines(
        cls,
        width: int,
        height: int,
        mines: Iterable[Position],
        start_cell: Optional[Position] = None,
    ) -> "Board":
        """
        Build a board from an explicit mine layout.

        Neighbor counts are computed; nothing is revealed.

        Args:
            width: Number of columns.
            height: Number of rows.
            mines: (x, z) positions of the mines. Duplicates are merged.
            start_cell: Optional opening cell; must not be a mine.

        Raises:
            InvalidConfigurationError: If a mine or the start cell lies
                outside the board, or the start cell is a mine.
        """
        mine_set = set(mines)
        config = BoardConfig(width, height, len(mine_set))
        board = cls(config)
        for x, z in mine_set:
            if not board.in_bounds(x, z):
                raise InvalidConfigurationError(
                    f"Mine ({x}, {z}) is outside the {width}x{height} board"
                )
            board.cell(x, z).is_mine = True
        board._calculate_neighbor_mines()

        if start_cell is not None:
            if not board.in_bounds(*start_cell):
                raise InvalidConfigurationError(
                    f"Start cell {start_cell} is outside the board"
                )
            if start_cell in mine_set:
                raise InvalidConfigurationError(
                    f"Start cell {start_cell} is a mine"
                )
            board.start_cell = start_cell
        return board

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def _init_grid(self) -> None:
        """Create empty grid of cells."""
        self.cells = [
            Cell(x=x, z=z)
            for z in range(self.height)
            for x in range(self.width)
        ]

    def _calculate_neighbor_mines(self) -> None:
        """Calculate neighbor mine counts for all safe cells."""
        for cell in self.cells:
            if cell.is_mine:
                cell.neighbor_mines = 0
            else:
                cell.neighbor_mines = self.count_neighbor_mines(cell.x, cell.z)

    def count_neighbor_mines(self, x: int, z: int) -> int:
        """Count mines among the Moore neighbors of a cell."""
        return sum(
            1 for nx, nz in self.neighbors(x, z) if self.cell(nx, nz).is_mine
        )

    def count_neighbor_flags(self, x: int, z: int) -> int:
        """Count flagged cells among the Moore neighbors of a cell."""
        return sum(
            1 for nx, nz in self.neighbors(x, z) if self.cell(nx, nz).is_flagged
        )

    # ========================================================================
    # Geometry (Low-level)
    # ========================================================================

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    @property
    def mine_count(self) -> int:
        return self.config.mine_count

    def in_bounds(self, x: int, z: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= x < self.width and 0 <= z < self.height

    def require_in_bounds(self, x: int, z: int) -> None:
        """Raise OutOfBoundsError unless (x, z) is on the board."""
        if not self.in_bounds(x, z):
            raise OutOfBoundsError(x, z, self.width, self.height)

    def index(self, x: int, z: int) -> int:
        return x + z * self.width

    def position(self, index: int) -> Position:
        return index % self.width, index // self.width

    def cell(self, x: int, z: int) -> Cell:
        """Get cell at position; raises OutOfBoundsError if invalid."""
        self.require_in_bounds(x, z)
        return self.cells[self.index(x, z)]

    def neighbors(self, x: int, z: int) -> List[Position]:
        """
        Get the Moore neighbors of a cell.

        Edge cells simply have fewer neighbors; the grid does not wrap.
        """
        return self._offset_positions(x, z, NEIGHBOR_OFFSETS)

    def orthogonal_neighbors(self, x: int, z: int) -> List[Position]:
        """Get the up to 4 orthogonally adjacent cells."""
        return self._offset_positions(x, z, ORTHOGONAL_OFFSETS)

    def _offset_positions(
        self, x: int, z: int, offsets: Iterable[Position]
    ) -> List[Position]:
        positions = []
        for dx, dz in offsets:
            nx, nz = x + dx, z + dz
            if self.in_bounds(nx, nz):
                positions.append((nx, nz))
        return positions

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def is_playing(self) -> bool:
        return self.status == GameStatus.PLAYING

    @property
    def is_won(self) -> bool:
        return self.status == GameStatus.WON

    @property
    def is_lost(self) -> bool:
        return self.status == GameStatus.LOST

    @property
    def remaining_mines(self) -> int:
        """Mines minus flags, as shown on a mine counter."""
        return self.mine_count - self.flag_count

    def mine_positions(self) -> List[Position]:
        return [cell.position for cell in self.cells if cell.is_mine]

    def flagged_positions(self) -> List[Position]:
        return [cell.position for cell in self.cells if cell.is_flagged]

    def unrevealed_safe_count(self) -> int:
        """Number of safe cells the player still has to reveal."""
        return sum(
            1 for cell in self.cells
            if not cell.is_mine and not cell.is_revealed
        )

    def revealed_count(self) -> int:
        return sum(1 for cell in self.cells if cell.is_revealed)

    def missed_mines(self) -> List[Position]:
        """Mines the player did not flag."""
        return [
            cell.position for cell in self.cells
            if cell.is_mine and not cell.is_flagged
        ]

    def incorrect_flags(self) -> List[Position]:
        """Flags placed on cells that are not mines."""
        return [
            cell.position for cell in self.cells
            if cell.is_flagged and not cell.is_mine
        ]

    def get_observation(self) -> np.ndarray:
        """
        Get board state as a numpy array.

        Returns:
            2D int8 array shaped (height, width), indexed [z, x], where:
                -1 = hidden
                -2 = flagged
                0-8 = revealed with neighbor count
                9 = revealed mine
        """
        obs = np.zeros((self.height, self.width), dtype=np.int8)
        for cell in self.cells:
            obs[cell.z, cell.x] = cell.to_observation()
        return obs

    def snapshot(self) -> BoardSnapshot:
        """Copy the board into an immutable snapshot."""
        cells = tuple(
            CellView(
                x=cell.x,
                z=cell.z,
                is_mine=cell.is_mine,
                is_revealed=cell.is_revealed,
                is_flagged=cell.is_flagged,
                neighbor_mines=cell.neighbor_mines,
            )
            for cell in self.cells
        )
        return BoardSnapshot(
            width=self.width,
            height=self.height,
            mine_count=self.mine_count,
            cells=cells,
            status=self.status,
            start_cell=self.start_cell,
            detonated_mine=self.detonated_mine,
            flag_count=self.flag_count,
        )

    def render(self, show_mines: bool = False) -> str:
        """
        Render board as ASCII text, one row per z.

        Args:
            show_mines: Also draw hidden mines (``*``), the detonated mine
                (``#``) and wrong flags (``X``), as on a game-over screen.
        """
        lines = []
        for z in range(self.height):
            lines.append(" ".join(
                self._render_cell(self.cells[self.index(x, z)], show_mines)
                for x in range(self.width)
            ))
        return "\n".join(lines)

    def _render_cell(self, cell: Cell, show_mines: bool) -> str:
        if show_mines:
            if cell.position == self.detonated_mine:
                return "#"
            if cell.is_flagged and not cell.is_mine:
                return "X"
            if cell.is_mine and not cell.is_flagged:
                return "*"
        if cell.is_flagged:
            return "F"
        if not cell.is_revealed:
            return "."
        if cell.is_mine:
            return "*"
        if cell.neighbor_mines == 0:
            return " "
        return str(cell.neighbor_mines)
