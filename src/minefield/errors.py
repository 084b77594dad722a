"""
Exceptions raised by the minefield core.

Illegal-for-status commands are not errors; they come back as
unchanged command results instead.
"""
from typing import Optional, Tuple


class MinefieldError(Exception):
    """Base class for all minefield errors."""


class InvalidConfigurationError(MinefieldError, ValueError):
    """Board parameters or an explicit mine layout are not playable."""


class GenerationExhaustedError(MinefieldError, RuntimeError):
    """No solvable board was found within the attempt cap."""

    def __init__(self, attempts: int, config: Optional[object] = None) -> None:
        self.attempts = attempts
        self.config = config
        super().__init__(
            f"No connected board found after {attempts} attempts ({config})"
        )


class OutOfBoundsError(MinefieldError, IndexError):
    """A command targeted a coordinate outside the board."""

    def __init__(self, x: int, z: int, width: int, height: int) -> None:
        self.position: Tuple[int, int] = (x, z)
        super().__init__(
            f"Cell ({x}, {z}) is outside the {width}x{height} board"
        )
