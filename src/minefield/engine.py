"""
Reveal engine: applies player commands to a board.

All rule logic for play lives here: the 8-connected flood fill, flag
toggling, chording, and the PLAYING -> WON/LOST transitions.
"""
import logging
from collections import deque
from typing import Deque, List, Tuple

from .board import Board, GameStatus, Position
from .commands import Chord, Command, CommandResult, Reveal, ToggleFlag

logger = logging.getLogger(__name__)


# ============================================================================
# Flood Fill
# ============================================================================

def flood_fill(board: Board, x: int, z: int) -> List[List[Position]]:
    """
    Reveal (x, z) and cascade through zero-count cells.

    Breadth-first over Moore neighbors with an explicit queue, so large
    open areas cannot exhaust the call stack. Flagged, revealed and mine
    cells are never entered; each cell is processed at most once.

    Args:
        board: Board to mutate.
        x: Column of the first cell.
        z: Row of the first cell.

    Returns:
        Revealed positions grouped by distance from (x, z).
    """
    layers: List[List[Position]] = []
    queue: Deque[Tuple[Position, int]] = deque([((x, z), 0)])
    seen = {(x, z)}

    while queue:
        position, depth = queue.popleft()
        cell = board.cells[board.index(*position)]
        if cell.is_mine or not cell.reveal():
            continue

        if depth == len(layers):
            layers.append([])
        layers[depth].append(position)

        if cell.neighbor_mines != 0:
            continue
        for neighbor in board.neighbors(*position):
            if neighbor in seen:
                continue
            neighbor_cell = board.cells[board.index(*neighbor)]
            if neighbor_cell.is_hidden and not neighbor_cell.is_mine:
                seen.add(neighbor)
                queue.append((neighbor, depth + 1))

    return layers


def _merge_layers(
    target: List[List[Position]], layers: List[List[Position]]
) -> None:
    """Merge cascade layers of the same depth into ``target``."""
    for depth, layer in enumerate(layers):
        if depth == len(target):
            target.append([])
        target[depth].extend(layer)


# ============================================================================
# Reveal Engine
# ============================================================================

class RevealEngine:
    """
    Applies Reveal, ToggleFlag and Chord commands to one board.

    Every command runs to completion before returning. Commands issued
    once the game is over, or whose preconditions do not hold, leave the
    board untouched and report ``changed=False``. Targets outside the
    board raise ``OutOfBoundsError`` before anything is modified.
    """

    def __init__(self, board: Board) -> None:
        self.board = board

    def apply(self, command: Command) -> CommandResult:
        """Dispatch a command to the matching action."""
        if isinstance(command, Reveal):
            return self.reveal(command.x, command.z)
        if isinstance(command, ToggleFlag):
            return self.toggle_flag(command.x, command.z)
        if isinstance(command, Chord):
            return self.chord(command.x, command.z)
        raise TypeError(f"Unsupported command: {command!r}")

    # ========================================================================
    # Game Actions
    # ========================================================================

    def reveal(self, x: int, z: int) -> CommandResult:
        """
        Reveal a cell.

        A mine ends the game; any other cell is flood filled, and the game
        is won once no safe cell remains hidden.
        """
        self.board.require_in_bounds(x, z)
        result = self._new_result(Reveal(x, z))
        if self.board.is_playing:
            _merge_layers(result.layers, self._reveal_cell(x, z))
        return self._finish(result)

    def toggle_flag(self, x: int, z: int) -> CommandResult:
        """Flag or unflag a cell that is not revealed."""
        self.board.require_in_bounds(x, z)
        result = self._new_result(ToggleFlag(x, z))
        if not self.board.is_playing:
            return self._finish(result)

        cell = self.board.cell(x, z)
        if cell.toggle_flag():
            self.board.flag_count += 1 if cell.is_flagged else -1
            result.changed = True
        return self._finish(result)

    def chord(self, x: int, z: int) -> CommandResult:
        """
        Reveal all hidden, unflagged neighbors of a revealed cell.

        Only acts when the number of flagged neighbors equals the cell's
        mine count. A misplaced flag can therefore still lose the game.
        """
        self.board.require_in_bounds(x, z)
        result = self._new_result(Chord(x, z))
        if not self.can_chord(x, z):
            return self._finish(result)

        for nx, nz in self.board.neighbors(x, z):
            if not self.board.is_playing:
                break
            if self.board.cell(nx, nz).is_hidden:
                _merge_layers(result.layers, self._reveal_cell(nx, nz))
        return self._finish(result)

    def can_chord(self, x: int, z: int) -> bool:
        """Check if a chord on (x, z) would act."""
        if not self.board.is_playing:
            return False
        cell = self.board.cell(x, z)
        if not cell.is_revealed or cell.is_mine:
            return False
        return self.board.count_neighbor_flags(x, z) == cell.neighbor_mines

    # ========================================================================
    # Internals
    # ========================================================================

    def _reveal_cell(self, x: int, z: int) -> List[List[Position]]:
        """Reveal one cell during play and update the status."""
        cell = self.board.cell(x, z)
        if not cell.is_hidden:
            return []

        if cell.is_mine:
            cell.reveal()
            self.board.detonated_mine = (x, z)
            self.board.status = GameStatus.LOST
            return [[(x, z)]]

        layers = flood_fill(self.board, x, z)
        if self.board.unrevealed_safe_count() == 0:
            self.board.status = GameStatus.WON
        return layers

    def _new_result(self, command: Command) -> CommandResult:
        status = self.board.status
        return CommandResult(
            command=command, previous_status=status, status=status
        )

    def _finish(self, result: CommandResult) -> CommandResult:
        result.status = self.board.status
        if result.layers or result.status_changed:
            result.changed = True
        if result.status == GameStatus.LOST and result.status_changed:
            result.detonated_mine = self.board.detonated_mine

        if result.status_changed:
            logger.info(
                "%s at %s: %s -> %s",
                type(result.command).__name__,
                result.position,
                result.previous_status.name,
                result.status.name,
            )
        elif result.changed:
            logger.debug(
                "%s at %s revealed %d cells",
                type(result.command).__name__,
                result.position,
                len(result.revealed),
            )
        return result
