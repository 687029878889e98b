"""
Bot Policy - Interface for bot decision-making.

A BotPolicy takes a room snapshot and the current roll and
returns a decision: which token to move, or none when the
roll leaves no legal move (the caller then ends the turn).
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import random
from typing import TYPE_CHECKING

from ..engine_core.moves import RuleOptions, DEFAULT_RULES, get_valid_moves

if TYPE_CHECKING:
    from ..engine_core.state import Room, Player


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    token_id is None when no legal move exists.
    """
    token_id: int | None
    explanation: str = ""
    confidence: float = 1.0

    # Evaluation details (for debugging)
    evaluated_moves: int = 0
    best_score: float = 0.0
    scores: dict[int, float] = field(default_factory=dict)

    @property
    def has_move(self) -> bool:
        return self.token_id is not None


class BotPolicy(ABC):
    """
    Abstract base class for bot policies.

    Implementations choose among the engine's valid moves only.
    """

    options: RuleOptions = DEFAULT_RULES

    @abstractmethod
    def select_move(self, room: Room, player: Player, dice_value: int) -> BotDecision:
        """
        Select a token to move.

        Args:
            room: Current room snapshot
            player: The bot's player
            dice_value: The roll to play

        Returns:
            BotDecision with the selected token (or none)
        """
        pass

    def valid_moves(self, room: Room, player: Player, dice_value: int) -> list[int]:
        return get_valid_moves(room.players, player, dice_value, self.options)

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__


class RandomPolicy(BotPolicy):
    """
    Random policy - selects a valid move uniformly at random.

    Used for:
    - Testing
    - Baseline comparison
    """

    def __init__(self, seed: int | None = None, options: RuleOptions = DEFAULT_RULES):
        self.rng = random.Random(seed)
        self.options = options

    def select_move(self, room: Room, player: Player, dice_value: int) -> BotDecision:
        moves = self.valid_moves(room, player, dice_value)
        if not moves:
            return BotDecision(token_id=None, explanation="No legal move")

        return BotDecision(
            token_id=self.rng.choice(moves),
            explanation="Selected randomly",
            confidence=1.0 / len(moves),
            evaluated_moves=len(moves),
        )


class FirstLegalPolicy(BotPolicy):
    """
    First-legal policy - always moves the lowest valid token id.

    Used for:
    - Deterministic testing
    - Baseline comparison
    """

    def __init__(self, options: RuleOptions = DEFAULT_RULES):
        self.options = options

    def select_move(self, room: Room, player: Player, dice_value: int) -> BotDecision:
        moves = self.valid_moves(room, player, dice_value)
        if not moves:
            return BotDecision(token_id=None, explanation="No legal move")

        return BotDecision(
            token_id=moves[0],
            explanation="Selected first legal move",
            evaluated_moves=1,
        )
