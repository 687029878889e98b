"""
Ludo Bot - Greedy move selection for computer players.

The bot:
- Considers only the engine's valid moves
- Plays a forced move without scoring
- Otherwise scores each candidate and keeps the best

Ties go to the first candidate in token order, so the choice is
deterministic for a given snapshot and roll.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..engine_core.moves import RuleOptions, DEFAULT_RULES
from .policy import BotPolicy, BotDecision
from .evaluator import MoveEvaluator
from .personality import Personality, BALANCED

if TYPE_CHECKING:
    from ..engine_core.state import Room, Player


@dataclass
class LudoBot(BotPolicy):
    """
    Ludo bot with single-ply heuristic scoring.

    Usage:
        bot = LudoBot(personality=AGGRESSIVE)
        decision = bot.select_move(room, player, dice_value)
        if decision.has_move:
            ...
    """
    personality: Personality = None  # type: ignore
    options: RuleOptions = DEFAULT_RULES
    evaluator: MoveEvaluator = None  # type: ignore

    def __post_init__(self):
        if self.personality is None:
            self.personality = BALANCED
        if self.evaluator is None:
            self.evaluator = MoveEvaluator(weights=self.personality.weights, options=self.options)

    def select_move(self, room: Room, player: Player, dice_value: int) -> BotDecision:
        """
        Select the best move for this roll.

        Process:
        1. No valid move: report none
        2. One valid move: take it
        3. Otherwise score every candidate and pick the highest
        """
        moves = self.valid_moves(room, player, dice_value)

        if not moves:
            return BotDecision(token_id=None, explanation="No legal move")

        if len(moves) == 1:
            return BotDecision(
                token_id=moves[0],
                explanation="Only legal move",
                evaluated_moves=1,
            )

        best_id = moves[0]
        best_score = float("-inf")
        scores: dict[int, float] = {}
        best_breakdown: dict[str, float] = {}

        for token_id in moves:
            score = self.evaluator.score_move(room, player, token_id, dice_value)
            scores[token_id] = score.total
            # Strict comparison keeps the first of equal scores
            if score.total > best_score:
                best_id = token_id
                best_score = score.total
                best_breakdown = score.breakdown

        return BotDecision(
            token_id=best_id,
            explanation=self._generate_explanation(best_id, best_breakdown),
            evaluated_moves=len(moves),
            best_score=best_score,
            scores=scores,
        )

    def _generate_explanation(self, token_id: int, breakdown: dict[str, float]) -> str:
        reasons = [k for k in ("finish", "capture", "release", "safe_zone") if k in breakdown]
        if not reasons:
            return f"Advance token {token_id} ({self.personality.name})"
        return f"Token {token_id}: {', '.join(reasons)} ({self.personality.name})"

    def get_name(self) -> str:
        return f"LudoBot[{self.personality.name}]"
