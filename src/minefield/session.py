"""
Game session: one board plus everything that outlives a single command.

A session owns the current board, the generator used to replace it, the
started/finished time markers, and the listeners that want to hear
about new games, commands and game endings.
"""
import logging
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, List, Optional, Union

from .board import Board, BoardConfig, BoardSnapshot, FIELD, GameStatus
from .commands import Command, CommandResult, NewGame, Restart, SessionRequest
from .engine import RevealEngine
from .generator import BoardGenerator

logger = logging.getLogger(__name__)


class EventKind(Enum):
    """What happened in a session."""

    NEW_GAME = auto()
    COMMAND = auto()
    WON = auto()
    LOST = auto()


@dataclass(frozen=True)
class GameEvent:
    """Notification delivered to session listeners."""

    kind: EventKind
    board: Board
    result: Optional[CommandResult] = None


Listener = Callable[[GameEvent], None]


class GameSession:
    """
    Owns exactly one board at a time and routes input to it.

    Attributes:
        config: Configuration of the current board.
        generator: Generator used for new games and restarts.
        board: The current board.
        engine: Reveal engine bound to the current board.
        started_at: Monotonic clock reading when the board was generated.
        finished_at: Clock reading when the game was won or lost.
    """

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        generator: Optional[BoardGenerator] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the session and generate the first board.

        Args:
            config: Board configuration (default: 20x20 with 40 mines).
            generator: Board generator (default: unseeded).
            clock: Monotonic time source for the elapsed-time markers.
        """
        self.generator = generator or BoardGenerator()
        self._clock = clock
        self._listeners: List[Listener] = []
        self._start(config or FIELD)

    # ========================================================================
    # Session Requests
    # ========================================================================

    def new_game(self, config: Optional[BoardConfig] = None) -> Board:
        """
        Discard the current board and generate a new one.

        Args:
            config: New configuration; the current one is reused if omitted.

        Returns:
            The freshly generated board.

        Raises:
            GenerationExhaustedError: If no board was found; the current
                board and configuration are kept.
        """
        self._start(config or self.config)
        self._notify(GameEvent(EventKind.NEW_GAME, self.board))
        return self.board

    def restart(self) -> Board:
        """Start a new game with the current configuration."""
        return self.new_game()

    def _start(self, config: BoardConfig) -> None:
        """Generate a board for ``config`` and switch to it once it exists."""
        board = self.generator.generate(config)
        self.config = config
        self.board = board
        self.engine = RevealEngine(board)
        self.started_at = self._clock()
        self.finished_at = self.started_at if board.status.is_terminal else None
        logger.info(
            "New %dx%d game with %d mines, starting at %s",
            config.width, config.height, config.mine_count, board.start_cell,
        )

    # ========================================================================
    # Commands
    # ========================================================================

    def apply(self, command: Command) -> CommandResult:
        """Apply a player command to the current board."""
        result = self.engine.apply(command)
        if result.status_changed and result.status.is_terminal:
            self.finished_at = self._clock()
        if result.changed:
            self._notify(GameEvent(EventKind.COMMAND, self.board, result))
        if result.status_changed:
            kind = EventKind.WON if result.status == GameStatus.WON else EventKind.LOST
            self._notify(GameEvent(kind, self.board, result))
        return result

    def handle(
        self, request: Union[Command, SessionRequest]
    ) -> Union[CommandResult, Board]:
        """
        Route any input: commands go to the engine, session requests
        replace the board.
        """
        if isinstance(request, NewGame):
            return self.new_game(
                BoardConfig(request.width, request.height, request.mine_count)
            )
        if isinstance(request, Restart):
            return self.restart()
        return self.apply(request)

    # ========================================================================
    # Listeners
    # ========================================================================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener for session events.

        Returns:
            A function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: GameEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Listener %r failed on %s", listener, event.kind.name)

    # ========================================================================
    # State Accessors
    # ========================================================================

    @property
    def status(self) -> GameStatus:
        return self.board.status

    @property
    def remaining_mines(self) -> int:
        return self.board.remaining_mines

    @property
    def elapsed(self) -> float:
        """Seconds since the board was generated, frozen once it ends."""
        end = self.finished_at if self.finished_at is not None else self._clock()
        return end - self.started_at

    def snapshot(self) -> BoardSnapshot:
        return self.board.snapshot()
