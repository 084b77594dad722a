"""
Player commands and session requests.

Commands are plain input values; they carry no state of their own.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from .board import GameStatus, Position


@dataclass(frozen=True)
class Reveal:
    """Dig the cell at (x, z)."""

    x: int
    z: int


@dataclass(frozen=True)
class ToggleFlag:
    """Place or remove a flag at (x, z)."""

    x: int
    z: int


@dataclass(frozen=True)
class Chord:
    """Reveal the unflagged neighbors of the revealed cell at (x, z)."""

    x: int
    z: int


@dataclass(frozen=True)
class NewGame:
    """Start over with a new board size and mine count."""

    width: int
    height: int
    mine_count: int


@dataclass(frozen=True)
class Restart:
    """Start over with the current configuration."""


Command = Union[Reveal, ToggleFlag, Chord]
SessionRequest = Union[NewGame, Restart]


@dataclass
class CommandResult:
    """
    Outcome of one command.

    Attributes:
        command: The command that was applied.
        changed: Whether any cell or the status changed.
        layers: Newly revealed cells grouped by breadth-first distance
            from the cell(s) that triggered the cascade. Callers may use
            these to stage a reveal animation; the board is already fully
            updated when the result is returned.
        previous_status: Status before the command.
        status: Status after the command.
        detonated_mine: The mine that ended the game, if this command did.
    """

    command: Command
    previous_status: GameStatus
    status: GameStatus
    changed: bool = False
    layers: List[List[Position]] = field(default_factory=list)
    detonated_mine: Optional[Position] = None

    @property
    def revealed(self) -> List[Position]:
        """All cells revealed by this command, in cascade order."""
        return [position for layer in self.layers for position in layer]

    @property
    def status_changed(self) -> bool:
        return self.previous_status != self.status

    @property
    def position(self) -> Tuple[int, int]:
        return self.command.x, self.command.z
