"""
Minefield game core.

Provides solvable board generation, the reveal engine for player
commands, and the game session that ties them together.
"""
from .cell import Cell, CellState
from .board import (
    Board,
    BoardConfig,
    BoardSnapshot,
    CellView,
    GameStatus,
    BEGINNER,
    INTERMEDIATE,
    EXPERT,
    FIELD,
    PRESETS,
)
from .commands import Chord, CommandResult, NewGame, Restart, Reveal, ToggleFlag
from .engine import RevealEngine, flood_fill
from .errors import (
    GenerationExhaustedError,
    InvalidConfigurationError,
    MinefieldError,
    OutOfBoundsError,
)
from .generator import (
    BoardGenerator,
    count_reachable,
    generate_board,
    is_solvable,
)
from .session import EventKind, GameEvent, GameSession
from .environment import MinefieldEnv

__all__ = [
    "Cell",
    "CellState",
    "Board",
    "BoardConfig",
    "BoardSnapshot",
    "CellView",
    "GameStatus",
    "BEGINNER",
    "INTERMEDIATE",
    "EXPERT",
    "FIELD",
    "PRESETS",
    "Reveal",
    "ToggleFlag",
    "Chord",
    "NewGame",
    "Restart",
    "CommandResult",
    "RevealEngine",
    "flood_fill",
    "MinefieldError",
    "InvalidConfigurationError",
    "GenerationExhaustedError",
    "OutOfBoundsError",
    "BoardGenerator",
    "count_reachable",
    "generate_board",
    "is_solvable",
    "EventKind",
    "GameEvent",
    "GameSession",
    "MinefieldEnv",
]
