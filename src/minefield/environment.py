"""
Gymnasium environment wrapper for the minefield core.

Lets scripted players and simulations drive a ``GameSession`` through
the standard reset/step interface.
"""
from typing import Any, Dict, Optional, Tuple, SupportsFloat

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import BoardConfig, FIELD, GameStatus
from .commands import Chord, Command, CommandResult, Reveal, ToggleFlag
from .generator import BoardGenerator
from .session import GameSession


# Action kinds, in the order they occupy the action space
ACTION_KINDS = (Reveal, ToggleFlag, Chord)


# ============================================================================
# Minefield Environment
# ============================================================================

class MinefieldEnv(gym.Env):
    """
    Gymnasium environment for the minefield game.

    Observation:
        2D array shaped (height, width) where:
        - -1 = hidden cell
        - -2 = flagged cell
        - 0-8 = revealed cell with neighbor mine count
        - 9 = revealed mine

    Actions:
        Discrete action space of size 3 * width * height.
        Action a decodes to kind = a // cells and cell index = a % cells,
        with kind 0 = reveal, 1 = toggle flag, 2 = chord, and cell index
        i at (i % width, i // width).

    Rewards:
        - +1 for a command that reveals safe cells
        - 0 for placing or removing a flag
        - +10 for winning the game
        - -10 for hitting a mine
        - -0.1 for a command that changes nothing
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        render_mode: Optional[str] = None,
        max_attempts: Optional[int] = None,
        max_steps: Optional[int] = None,
    ) -> None:
        """
        Initialize the environment.

        Args:
            config: Board configuration (default: 20x20 with 40 mines).
            render_mode: How to render the environment.
            max_attempts: Optional retry cap for board generation.
            max_steps: Truncate episodes after this many steps.
        """
        super().__init__()

        self.config = config or FIELD
        generator = (
            BoardGenerator(max_attempts=max_attempts)
            if max_attempts is not None
            else BoardGenerator()
        )
        self.session = GameSession(self.config, generator=generator)
        self.render_mode = render_mode

        self._cells = self.config.width * self.config.height

        self.observation_space = spaces.Box(
            low=-2,
            high=9,
            shape=(self.config.height, self.config.width),
            dtype=np.int8,
        )
        self.action_space = spaces.Discrete(len(ACTION_KINDS) * self._cells)

        self.max_steps = max_steps
        self._steps = 0

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Start a new game.

        Args:
            seed: Seed for board generation, for reproducible episodes.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        if seed is not None:
            self.session.generator.rng.seed(seed)
        self.session.restart()
        self._steps = 0

        return self.session.board.get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one command.

        Args:
            action: Encoded command (see class docstring).

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        self._steps += 1
        result = self.session.apply(self.action_to_command(action))
        reward = self._calculate_reward(result)

        observation = self.session.board.get_observation()
        terminated = not self.session.board.is_playing
        truncated = (
            not terminated
            and self.max_steps is not None
            and self._steps >= self.max_steps
        )

        return observation, reward, terminated, truncated, self._get_info()

    def action_to_command(self, action: int) -> Command:
        """Decode a flat action index into a command."""
        kind, index = divmod(int(action), self._cells)
        x, z = index % self.config.width, index // self.config.width
        return ACTION_KINDS[kind](x, z)

    def command_to_action(self, command: Command) -> int:
        """Encode a command as a flat action index."""
        kind = ACTION_KINDS.index(type(command))
        return kind * self._cells + command.x + command.z * self.config.width

    def _calculate_reward(self, result: CommandResult) -> float:
        """Reward for the outcome of one command."""
        if result.status_changed:
            return 10.0 if result.status == GameStatus.WON else -10.0
        if not result.changed:
            return -0.1
        if result.revealed:
            return 1.0
        return 0.0

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        board = self.session.board
        return {
            "steps": self._steps,
            "revealed": board.revealed_count(),
            "total_safe": self.config.total_safe,
            "remaining_mines": board.remaining_mines,
            "start_cell": board.start_cell,
            "game_state": board.status.name,
        }

    def render(self) -> Optional[str]:
        """Render the current board state."""
        text = self.session.board.render(
            show_mines=not self.session.board.is_playing
        )
        if self.render_mode == "ansi":
            return text
        if self.render_mode == "human":
            print(text)
        return None

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of actions that would change the board.

        Returns:
            Boolean array where True = valid action.
        """
        mask = np.zeros(self.action_space.n, dtype=bool)
        board = self.session.board
        if not board.is_playing:
            return mask

        engine = self.session.engine
        for index, cell in enumerate(board.cells):
            if cell.is_hidden:
                mask[index] = True
            if not cell.is_revealed:
                mask[self._cells + index] = True
            elif engine.can_chord(cell.x, cell.z) and any(
                board.cell(*n).is_hidden for n in board.neighbors(cell.x, cell.z)
            ):
                mask[2 * self._cells + index] = True
        return mask

