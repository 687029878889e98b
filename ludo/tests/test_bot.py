"""
Tests for bots.

Tests:
- Move scoring
- Greedy selection and tie-breaking
- Baseline policies
- Personalities
"""

import pytest

from ..engine_core.board import PlayerColor
from ..engine_core.moves import get_valid_moves
from ..bots import (
    LudoBot,
    MoveEvaluator,
    RandomPolicy,
    FirstLegalPolicy,
    PERSONALITIES,
    get_personality,
)
from ..bots.personality import BALANCED, AGGRESSIVE
from .conftest import make_player, make_room


class TestMoveEvaluator:
    """Tests for MoveEvaluator."""

    def test_capture_score(self):
        """A capture scores its bonus plus track progress."""
        red = make_player("red", PlayerColor.RED, (10, -1, -1, -1))
        green = make_player("green", PlayerColor.GREEN, (14, -1, -1, -1))
        room = make_room(red, green)

        score = MoveEvaluator().score_move(room, red, 0, 4)

        assert score.destination == 14
        assert score.breakdown == {"capture": 100.0, "progress": 5.0}
        assert score.total == 105.0

    def test_release_onto_safe_zone(self):
        """Releasing scores the release bonus and the safe start square."""
        red = make_player("red", PlayerColor.RED)
        room = make_room(red, make_player("green", PlayerColor.GREEN))

        score = MoveEvaluator().score_move(room, red, 0, 6)

        assert score.total == 60.0
        assert set(score.breakdown) == {"release", "safe_zone"}

    def test_finish_in_home_column(self):
        """Finishing from the column scores finish plus column progress."""
        red = make_player("red", PlayerColor.RED, (55, -1, -1, -1))
        room = make_room(red, make_player("green", PlayerColor.GREEN))

        score = MoveEvaluator().score_move(room, red, 0, 2)

        assert score.breakdown == {"finish": 200.0, "progress": 45.0}

    def test_impossible_move_scores_lowest(self):
        """Moves with no destination score minus infinity."""
        red = make_player("red", PlayerColor.RED)
        room = make_room(red, make_player("green", PlayerColor.GREEN))
        assert MoveEvaluator().score_move(room, red, 0, 3).total == float("-inf")


class TestLudoBot:
    """Tests for LudoBot selection."""

    def test_no_moves(self, two_player_room, red):
        """No legal move means no token."""
        decision = LudoBot().select_move(two_player_room, red, 3)
        assert not decision.has_move
        assert decision.token_id is None

    def test_single_move_not_scored(self, green):
        """A forced move is taken without scoring."""
        red = make_player("red", PlayerColor.RED, (10, -1, -1, -1))
        room = make_room(red, green)

        decision = LudoBot().select_move(room, red, 3)

        assert decision.token_id == 0
        assert decision.evaluated_moves == 1
        assert decision.scores == {}

    def test_prefers_capture(self):
        """Capturing beats plain progress."""
        red = make_player("red", PlayerColor.RED, (10, 30, -1, -1))
        green = make_player("green", PlayerColor.GREEN, (14, -1, -1, -1))
        room = make_room(red, green)

        decision = LudoBot().select_move(room, red, 4)

        assert decision.token_id == 0
        assert decision.scores[0] > decision.scores[1]
        assert "capture" in decision.explanation

    def test_prefers_finish_over_capture(self):
        """Finishing beats capturing."""
        red = make_player("red", PlayerColor.RED, (55, 10, -1, -1))
        green = make_player("green", PlayerColor.GREEN, (12, -1, -1, -1))
        room = make_room(red, green)

        decision = LudoBot().select_move(room, red, 2)

        assert decision.token_id == 0
        assert decision.best_score == 245.0

    def test_ties_go_to_first(self):
        """Equal scores keep the lowest token id."""
        red = make_player("red", PlayerColor.RED, (-1, 5, -1, -1))
        room = make_room(red, make_player("green", PlayerColor.GREEN))

        decision = LudoBot().select_move(room, red, 6)

        assert decision.token_id == 0
        assert decision.scores[0] == decision.scores[2] == decision.scores[3]

    def test_only_valid_moves_chosen(self):
        """The bot never picks a blocked token."""
        red = make_player("red", PlayerColor.RED, (8, 30, -1, -1))
        green = make_player("green", PlayerColor.GREEN, (10, 10, -1, -1))
        room = make_room(red, green)

        decision = LudoBot(personality=AGGRESSIVE).select_move(room, red, 4)

        assert decision.token_id == 1
        assert decision.token_id in get_valid_moves(room.players, red, 4)

    def test_name(self):
        """Name includes the personality."""
        assert LudoBot().get_name() == "LudoBot[Balanced]"


class TestBaselinePolicies:
    """Tests for RandomPolicy and FirstLegalPolicy."""

    def test_random_policy_picks_valid(self):
        """Random choices are always valid moves."""
        red = make_player("red", PlayerColor.RED, (-1, 5, 20, -1))
        room = make_room(red, make_player("green", PlayerColor.GREEN))
        policy = RandomPolicy(seed=1)

        valid = get_valid_moves(room.players, red, 6)
        for _ in range(10):
            assert policy.select_move(room, red, 6).token_id in valid

    def test_random_policy_seeded(self):
        """Same seed, same choices."""
        red = make_player("red", PlayerColor.RED, (-1, 5, 20, -1))
        room = make_room(red, make_player("green", PlayerColor.GREEN))

        first = [RandomPolicy(seed=9).select_move(room, red, 6).token_id for _ in range(3)]
        second = [RandomPolicy(seed=9).select_move(room, red, 6).token_id for _ in range(3)]
        assert first == second

    def test_first_legal(self):
        """FirstLegalPolicy takes the lowest valid token."""
        red = make_player("red", PlayerColor.RED, (-1, 5, 20, -1))
        room = make_room(red, make_player("green", PlayerColor.GREEN))
        assert FirstLegalPolicy().select_move(room, red, 3).token_id == 1
        assert FirstLegalPolicy().get_name() == "FirstLegalPolicy"


class TestPersonality:
    """Tests for personalities."""

    def test_lookup(self):
        """Names are case-insensitive and default to balanced."""
        assert get_personality(None) is BALANCED
        assert get_personality("AGGRESSIVE") is AGGRESSIVE
        assert set(PERSONALITIES) == {"balanced", "aggressive", "runner"}

    def test_unknown_personality(self):
        """Unknown names raise ValueError."""
        with pytest.raises(ValueError):
            get_personality("reckless")

    def test_balanced_uses_standard_weights(self):
        """Balanced carries the standard weights."""
        weights = BALANCED.weights
        assert (weights.release, weights.capture, weights.finish, weights.safe_zone) == (
            50.0, 100.0, 200.0, 10.0
        )
