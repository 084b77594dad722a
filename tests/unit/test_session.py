"""
Unit tests for GameSession.

Tests session requests, event delivery, and the elapsed-time markers.
"""
from typing import List

import pytest
from minefield import (
    BoardConfig,
    BoardGenerator,
    Chord,
    EventKind,
    FIELD,
    GameEvent,
    GameSession,
    GameStatus,
    GenerationExhaustedError,
    InvalidConfigurationError,
    NewGame,
    Restart,
    Reveal,
    ToggleFlag,
)
from conftest import FakeClock, FixedGenerator, MiddleOnlyRandom


# ============================================================================
# Session Fixtures
# ============================================================================

@pytest.fixture
def session(
    small_config: BoardConfig, fixed_generator: FixedGenerator, clock: FakeClock
) -> GameSession:
    """3x3 session with a mine at (0, 0), opened at (1, 1)."""
    return GameSession(small_config, generator=fixed_generator, clock=clock)


@pytest.fixture
def events(session: GameSession) -> List[GameEvent]:
    received: List[GameEvent] = []
    session.subscribe(received.append)
    return received


# ============================================================================
# Lifecycle Tests
# ============================================================================

class TestSessionLifecycle:
    """Test creation, restart and new games."""

    def test_new_session_is_playing(self, session: GameSession) -> None:
        assert session.status == GameStatus.PLAYING
        assert session.board.start_cell == (1, 1)
        assert session.started_at == 100.0
        assert session.finished_at is None

    def test_default_config_is_field(self) -> None:
        session = GameSession(generator=BoardGenerator(seed=8))
        assert session.config == FIELD
        assert session.board.width == 20

    def test_restart_replaces_board(
        self, session: GameSession, events: List[GameEvent], clock: FakeClock
    ) -> None:
        session.apply(Reveal(0, 0))
        old_board = session.board
        clock.now = 150.0

        board = session.handle(Restart())

        assert board is session.board
        assert board is not old_board
        assert session.status == GameStatus.PLAYING
        assert session.started_at == 150.0
        assert session.finished_at is None
        assert events[-1].kind == EventKind.NEW_GAME

    def test_new_game_changes_config(self) -> None:
        session = GameSession(BoardConfig(9, 9, 10), generator=BoardGenerator(seed=4))
        board = session.handle(NewGame(6, 5, 3))

        assert (board.width, board.height, board.mine_count) == (6, 5, 3)
        assert session.config == BoardConfig(6, 5, 3)

    def test_invalid_new_game_keeps_board(self, session: GameSession) -> None:
        board = session.board
        with pytest.raises(InvalidConfigurationError):
            session.handle(NewGame(2, 2, 4))
        assert session.board is board

    def test_exhausted_new_game_keeps_config_and_board(
        self, clock: FakeClock
    ) -> None:
        generator = BoardGenerator(rng=MiddleOnlyRandom(0), max_attempts=3)
        session = GameSession(BoardConfig(3, 3, 1), generator=generator, clock=clock)
        received: List[GameEvent] = []
        session.subscribe(received.append)
        board = session.board
        clock.now = 140.0

        with pytest.raises(GenerationExhaustedError):
            session.new_game(BoardConfig(3, 1, 1))

        assert session.config == BoardConfig(3, 3, 1)
        assert session.board is board
        assert session.engine.board is board
        assert session.started_at == 100.0
        assert received == []

    def test_engine_follows_new_board(self, session: GameSession) -> None:
        session.restart()
        assert session.engine.board is session.board


# ============================================================================
# Command Tests
# ============================================================================

class TestSessionCommands:
    """Commands routed through the session."""

    def test_loss_emits_command_then_lost(
        self, session: GameSession, events: List[GameEvent]
    ) -> None:
        result = session.handle(Reveal(0, 0))

        assert result.status == GameStatus.LOST
        assert [event.kind for event in events] == [EventKind.COMMAND, EventKind.LOST]
        assert events[-1].result is result

    def test_win_emits_command_then_won(
        self, session: GameSession, events: List[GameEvent]
    ) -> None:
        session.apply(Reveal(2, 2))

        assert session.status == GameStatus.WON
        assert [event.kind for event in events] == [EventKind.COMMAND, EventKind.WON]

    def test_noop_commands_emit_nothing(
        self, session: GameSession, events: List[GameEvent]
    ) -> None:
        session.apply(Reveal(1, 1))
        session.apply(Chord(1, 1))
        assert events == []

    def test_flag_emits_command_event(
        self, session: GameSession, events: List[GameEvent]
    ) -> None:
        session.apply(ToggleFlag(0, 0))

        assert [event.kind for event in events] == [EventKind.COMMAND]
        assert session.remaining_mines == 0
        assert session.snapshot().cell(0, 0).is_flagged is True


# ============================================================================
# Timing Tests
# ============================================================================

class TestSessionTiming:
    """Started and finished markers."""

    def test_elapsed_runs_while_playing(
        self, session: GameSession, clock: FakeClock
    ) -> None:
        clock.now = 130.0
        assert session.elapsed == 30.0

    def test_elapsed_freezes_on_loss(
        self, session: GameSession, clock: FakeClock
    ) -> None:
        clock.now = 107.5
        session.apply(Reveal(0, 0))
        clock.now = 200.0

        assert session.finished_at == 107.5
        assert session.elapsed == 7.5

    def test_board_won_at_generation_is_finished(self, clock: FakeClock) -> None:
        session = GameSession(
            BoardConfig(2, 2, 3), generator=BoardGenerator(seed=0), clock=clock
        )
        clock.now = 500.0

        assert session.status == GameStatus.WON
        assert session.elapsed == 0.0


# ============================================================================
# Listener Tests
# ============================================================================

class TestListeners:
    """Listener registration and isolation."""

    def test_failing_listener_does_not_block_others(
        self, session: GameSession
    ) -> None:
        received: List[GameEvent] = []

        def broken(event: GameEvent) -> None:
            raise RuntimeError("speaker unplugged")

        session.subscribe(broken)
        session.subscribe(received.append)
        result = session.apply(Reveal(0, 0))

        assert result.status == GameStatus.LOST
        assert len(received) == 2

    def test_unsubscribe_stops_delivery(self, session: GameSession) -> None:
        received: List[GameEvent] = []
        unsubscribe = session.subscribe(received.append)
        unsubscribe()

        session.apply(ToggleFlag(0, 0))
        assert received == []
