"""
Board generator for the minefield core.

Produces boards on which every safe cell can be reached from the
opening cell by orthogonal steps over safe ground, and opens that
cell before handing the board over.
"""
import logging
import random
from collections import deque
from typing import Deque, List, Optional, Set

from .board import Board, BoardConfig, GameStatus, Position
from .engine import flood_fill
from .errors import GenerationExhaustedError, InvalidConfigurationError

logger = logging.getLogger(__name__)


DEFAULT_MAX_ATTEMPTS = 50


# ============================================================================
# Board Generator
# ============================================================================

class BoardGenerator:
    """
    Generates solvable boards.

    Each attempt places mines uniformly at random, picks an opening cell
    and checks with a 4-connected breadth-first search that all safe
    cells are reachable from it. The opening cascade itself uses the
    8-connected flood fill of normal play; the two rules differ on
    purpose.

    Attributes:
        rng: Random source for mine placement and start selection.
        max_attempts: How many candidate boards to try before giving up.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        """
        Initialize the generator.

        Args:
            rng: Random source to use. Takes precedence over ``seed``.
            seed: Seed for a private random source, for reproducible boards.
            max_attempts: Retry cap for the connectivity check.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.rng = rng if rng is not None else random.Random(seed)
        self.max_attempts = max_attempts

    def generate(self, config: BoardConfig) -> Board:
        """
        Generate an opened, solvable board.

        Args:
            config: Validated board configuration.

        Returns:
            Board with its start cell cascade revealed. It is PLAYING,
            or already WON when that cascade uncovered every safe cell
            (for example a board without mines).

        Raises:
            GenerationExhaustedError: If no candidate passed the
                connectivity check within ``max_attempts``.
        """
        for attempt in range(1, self.max_attempts + 1):
            board = Board.from_mines(
                config.width, config.height, self._place_mines(config)
            )
            start = self.choose_start_cell(board)
            reachable = count_reachable(board, start)
            if reachable == config.total_safe:
                logger.debug(
                    "Accepted %dx%d board with %d mines on attempt %d",
                    config.width, config.height, config.mine_count, attempt,
                )
                open_board(board, start)
                return board
            logger.debug(
                "Attempt %d rejected: %d of %d safe cells reachable from %s",
                attempt, reachable, config.total_safe, start,
            )

        logger.warning(
            "Gave up generating %dx%d board with %d mines after %d attempts",
            config.width, config.height, config.mine_count, self.max_attempts,
        )
        raise GenerationExhaustedError(self.max_attempts, config)

    # ========================================================================
    # Generation Steps
    # ========================================================================

    def _place_mines(self, config: BoardConfig) -> Set[Position]:
        """Draw distinct mine positions by rejection sampling."""
        mines: Set[Position] = set()
        while len(mines) < config.mine_count:
            index = self.rng.randrange(config.total_cells)
            mines.add((index % config.width, index // config.width))
        return mines

    def choose_start_cell(self, board: Board) -> Position:
        """
        Pick the opening cell.

        Prefers a safe cell with no neighboring mines, chosen uniformly;
        otherwise any safe cell.
        """
        safe: List[Position] = [
            cell.position for cell in board if not cell.is_mine
        ]
        if not safe:
            raise InvalidConfigurationError("Board has no safe cell to start on")
        clearings = [
            position for position in safe
            if board.cell(*position).neighbor_mines == 0
        ]
        return self.rng.choice(clearings or safe)


# ============================================================================
# Connectivity
# ============================================================================

def count_reachable(board: Board, start: Position) -> int:
    """
    Count safe cells reachable from ``start`` by orthogonal steps.

    Models walking across safe ground; diagonal steps are not allowed.
    """
    if board.cell(*start).is_mine:
        return 0
    visited = {start}
    queue: Deque[Position] = deque([start])
    while queue:
        x, z = queue.popleft()
        for neighbor in board.orthogonal_neighbors(x, z):
            if neighbor not in visited and not board.cell(*neighbor).is_mine:
                visited.add(neighbor)
                queue.append(neighbor)
    return len(visited)


def is_solvable(board: Board, start: Position) -> bool:
    """Check that every safe cell is orthogonally reachable from ``start``."""
    return count_reachable(board, start) == board.config.total_safe


def open_board(board: Board, start: Position) -> List[List[Position]]:
    """
    Record the start cell and reveal its cascade.

    A board whose opening cascade already uncovers every safe cell is
    returned as WON; otherwise it is PLAYING.
    """
    board.start_cell = start
    layers = flood_fill(board, *start)
    if board.unrevealed_safe_count() == 0:
        board.status = GameStatus.WON
    else:
        board.status = GameStatus.PLAYING
    return layers


def generate_board(
    width: int,
    height: int,
    mine_count: int,
    seed: Optional[int] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> Board:
    """
    Generate a board in one call.

    Raises:
        InvalidConfigurationError: For non-positive dimensions or too
            many mines; raised before any attempt is made.
        GenerationExhaustedError: If the retry cap is reached.
    """
    config = BoardConfig(width, height, mine_count)
    return BoardGenerator(seed=seed, max_attempts=max_attempts).generate(config)
