"""
Pytest configuration and shared fixtures.
"""
import pytest
import random
import sys
from collections import deque
from pathlib import Path
from typing import List, Set, Tuple

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minefield import Board, BoardConfig, BoardGenerator, RevealEngine
from minefield.generator import open_board


# ============================================================================
# Helpers
# ============================================================================

class FixedGenerator(BoardGenerator):
    """
    Generator that always returns the same 3x3 board.

    Mine at (0, 0); the opening cell (1, 1) touches it, so only the
    opening cell itself is revealed.
    """

    def generate(self, config: BoardConfig) -> Board:
        board = Board.from_mines(3, 3, [(0, 0)])
        open_board(board, (1, 1))
        return board


class MiddleOnlyRandom(random.Random):
    """Always draws index 1, so a 3x1 board gets its mine in the middle."""

    def randrange(self, *args, **kwargs) -> int:
        return 1


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def reachable_orthogonally(board: Board, start: Tuple[int, int]) -> Set[Tuple[int, int]]:
    """Safe cells reachable from start by 4-connected steps."""
    seen = {start}
    queue = deque([start])
    while queue:
        x, z = queue.popleft()
        for dx, dz in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            nx, nz = x + dx, z + dz
            if (
                0 <= nx < board.width
                and 0 <= nz < board.height
                and (nx, nz) not in seen
                and not board.cell(nx, nz).is_mine
            ):
                seen.add((nx, nz))
                queue.append((nx, nz))
    return seen


def literal_neighbor_count(board: Board, x: int, z: int) -> int:
    """Count mines around (x, z) without using Board.neighbors."""
    count = 0
    for dz in (-1, 0, 1):
        for dx in (-1, 0, 1):
            if dx == 0 and dz == 0:
                continue
            nx, nz = x + dx, z + dz
            if 0 <= nx < board.width and 0 <= nz < board.height:
                if board.cells[nx + nz * board.width].is_mine:
                    count += 1
    return count


def revealed_positions(board: Board) -> List[Tuple[int, int]]:
    return [cell.position for cell in board if cell.is_revealed]


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def corner_mine_board() -> Board:
    """5x5 board with a single mine at (4, 4), start at (0, 0), unopened."""
    return Board.from_mines(5, 5, [(4, 4)], start_cell=(0, 0))


@pytest.fixture
def walled_board() -> Board:
    """
    7x3 board with a column of mines at x = 3.

    The left and right halves are separate zero regions bordered by
    numbered cells at x = 2 and x = 4.
    """
    return Board.from_mines(7, 3, [(3, 0), (3, 1), (3, 2)])


@pytest.fixture
def chord_board() -> Board:
    """3x3 board with a mine at (0, 0) and the centre cell revealed."""
    board = Board.from_mines(3, 3, [(0, 0)])
    board.cell(1, 1).reveal()
    return board


@pytest.fixture
def single_safe_board() -> Board:
    """2x2 board where only (0, 0) is safe."""
    return Board.from_mines(2, 2, [(1, 0), (0, 1), (1, 1)])


@pytest.fixture
def corner_engine(corner_mine_board: Board) -> RevealEngine:
    return RevealEngine(corner_mine_board)


@pytest.fixture
def walled_engine(walled_board: Board) -> RevealEngine:
    return RevealEngine(walled_board)


@pytest.fixture
def chord_engine(chord_board: Board) -> RevealEngine:
    return RevealEngine(chord_board)


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def valid_config() -> BoardConfig:
    """Create a valid board configuration."""
    return BoardConfig(9, 9, 10)


@pytest.fixture
def small_config() -> BoardConfig:
    """Small configuration used with FixedGenerator."""
    return BoardConfig(3, 3, 1)


@pytest.fixture
def seeded_generator() -> BoardGenerator:
    return BoardGenerator(seed=1234)


@pytest.fixture
def fixed_generator() -> FixedGenerator:
    return FixedGenerator()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
