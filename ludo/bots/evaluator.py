"""
Move Evaluator - Scores candidate moves for bot decision-making.

The evaluator assigns a numeric score to a single move based on:
- Release (bringing a token out of base)
- Capture (sending a lone opponent token home)
- Finish (reaching the end of the home column)
- Progress (how far along the moving token already is)
- Safety (landing on a safe zone)

Weights can be adjusted to create different personalities.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..engine_core.board import (
    FINISH_POSITION,
    HOME_COLUMN_START,
    distance_from_start,
    is_on_track,
    is_safe_zone,
)
from ..engine_core.moves import RuleOptions, DEFAULT_RULES, compute_destination, capture_targets

if TYPE_CHECKING:
    from ..engine_core.state import Room, Player


@dataclass
class MoveWeights:
    """
    Weights for the move evaluator.

    Higher values = more importance. Finishing dominates by default.
    """
    release: float = 50.0
    capture: float = 100.0
    finish: float = 200.0

    # Progress bonus: home_column_base + offset * home_column_step in the
    # column, distance_from_start * track_progress on the track
    home_column_base: float = 30.0
    home_column_step: float = 5.0
    track_progress: float = 0.5

    safe_zone: float = 10.0


@dataclass
class MoveScore:
    """
    Result of evaluating one move.
    """
    token_id: int
    destination: int | None
    total: float
    breakdown: dict[str, float] = field(default_factory=dict)


class MoveEvaluator:
    """
    Scores moves with weighted single-ply heuristics.

    Not a search: each candidate is scored on its own from the
    current snapshot.
    """

    def __init__(self, weights: MoveWeights | None = None, options: RuleOptions = DEFAULT_RULES):
        self.weights = weights or MoveWeights()
        self.options = options

    def score_move(
        self,
        room: Room,
        player: Player,
        token_id: int,
        dice_value: int,
    ) -> MoveScore:
        """Score moving `token_id` by `dice_value`."""
        token = player.get_token(token_id)
        features: dict[str, float] = {}

        if token is None:
            return MoveScore(token_id=token_id, destination=None, total=float("-inf"))

        destination = compute_destination(player.color, token.position, dice_value)
        if destination is None:
            return MoveScore(token_id=token_id, destination=None, total=float("-inf"))

        if token.is_home:
            features["release"] = self.weights.release

        if capture_targets(room.players, player, destination, self.options):
            features["capture"] = self.weights.capture

        if destination == FINISH_POSITION:
            features["finish"] = self.weights.finish

        if token.in_home_column:
            offset = token.position - HOME_COLUMN_START
            features["progress"] = (
                self.weights.home_column_base + offset * self.weights.home_column_step
            )
        elif token.on_track:
            features["progress"] = (
                distance_from_start(player.color, token.position) * self.weights.track_progress
            )

        if is_on_track(destination) and is_safe_zone(destination):
            features["safe_zone"] = self.weights.safe_zone

        return MoveScore(
            token_id=token_id,
            destination=destination,
            total=sum(features.values()),
            breakdown=features,
        )
