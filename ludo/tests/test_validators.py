"""
Tests for validators.

Tests:
- Rejection codes for each precondition
- Rejection order
- Idempotence (no mutation, same answer twice)
"""

from ..engine_core.action import RejectionCode
from ..engine_core.board import PlayerColor
from ..engine_core.state import GamePhase
from ..engine_core.validators import (
    can_roll_dice,
    can_move_token,
    can_end_turn,
    can_start_game,
    can_join_room,
)
from .conftest import make_player, make_room


class TestCanRollDice:
    """Tests for can_roll_dice."""

    def test_current_player_may_roll(self, two_player_room):
        """The current player may roll before rolling."""
        assert can_roll_dice(two_player_room, "red").valid

    def test_not_your_turn(self, two_player_room):
        """Other players are rejected."""
        result = can_roll_dice(two_player_room, "green")
        assert not result.valid
        assert result.error_code == RejectionCode.NOT_YOUR_TURN

    def test_already_rolled(self, red, green):
        """A second roll before moving is rejected."""
        room = make_room(red, green, dice_value=3, rolled=True)
        assert can_roll_dice(room, "red").error_code == RejectionCode.ALREADY_ROLLED

    def test_game_not_in_progress(self, red, green):
        """Waiting and finished rooms reject rolls."""
        for phase in (GamePhase.WAITING, GamePhase.FINISHED):
            room = make_room(red, green, phase=phase)
            assert can_roll_dice(room, "red").error_code == RejectionCode.GAME_NOT_IN_PROGRESS

    def test_malformed_snapshot_fails_closed(self, red, green):
        """An out-of-range turn index is an invalid state."""
        room = make_room(red, green, current=5)
        assert can_roll_dice(room, "red").error_code == RejectionCode.INVALID_STATE

    def test_idempotent(self, two_player_room):
        """Same input, same answer, input unchanged."""
        before = two_player_room
        first = can_roll_dice(two_player_room, "green")
        second = can_roll_dice(two_player_room, "green")
        assert first == second
        assert two_player_room == before


class TestCanMoveToken:
    """Tests for can_move_token."""

    def test_must_roll_first(self, two_player_room):
        """Moving before rolling is rejected."""
        result = can_move_token(two_player_room, "red", 0, 6)
        assert result.error_code == RejectionCode.MUST_ROLL_FIRST

    def test_stale_dice_value(self, red, green):
        """A dice value other than the recorded roll is stale."""
        room = make_room(red, green, dice_value=6, rolled=True)
        assert can_move_token(room, "red", 0, 4).error_code == RejectionCode.STALE_DICE_VALUE

    def test_invalid_token(self, red, green):
        """Unknown token ids are rejected before legality."""
        room = make_room(red, green, dice_value=6, rolled=True)
        assert can_move_token(room, "red", 7, 6).error_code == RejectionCode.INVALID_TOKEN
        assert can_move_token(room, "red", "0", 6).error_code == RejectionCode.INVALID_TOKEN
        assert can_move_token(room, "red", True, 6).error_code == RejectionCode.INVALID_TOKEN

    def test_illegal_move(self, red, green):
        """A base token cannot move on a non-6."""
        room = make_room(red, green, dice_value=4, rolled=True)
        assert can_move_token(room, "red", 0, 4).error_code == RejectionCode.ILLEGAL_MOVE

    def test_valid_move(self, red, green):
        """A valid move passes."""
        room = make_room(red, green, dice_value=6, rolled=True)
        assert can_move_token(room, "red", 2, 6).valid

    def test_turn_checked_before_dice(self, red, green):
        """Turn ownership is reported before dice problems."""
        room = make_room(red, green, dice_value=6, rolled=True)
        assert can_move_token(room, "green", 0, 2).error_code == RejectionCode.NOT_YOUR_TURN

    def test_idempotent(self, red, green):
        """Rejections do not mutate the room."""
        room = make_room(red, green, dice_value=6, rolled=True)
        first = can_move_token(room, "red", 0, 3)
        second = can_move_token(room, "red", 0, 3)
        assert first == second
        assert room.players[0].get_token(0).is_home


class TestCanEndTurn:
    """Tests for can_end_turn."""

    def test_must_roll_first(self, two_player_room):
        """Ending the turn before rolling is rejected."""
        assert can_end_turn(two_player_room, "red").error_code == RejectionCode.MUST_ROLL_FIRST

    def test_must_move_on_six(self, red, green):
        """A 6 with a legal move must be played."""
        room = make_room(red, green, dice_value=6, rolled=True)
        assert can_end_turn(room, "red").error_code == RejectionCode.MUST_MOVE_ON_SIX

    def test_six_without_moves(self, green):
        """A 6 with nothing movable may end the turn."""
        red = make_player("red", PlayerColor.RED, (57, 57, 57, 54))
        room = make_room(red, green, dice_value=6, rolled=True)
        assert can_end_turn(room, "red").valid

    def test_no_legal_moves(self, red, green):
        """A non-6 with all tokens in base ends the turn."""
        room = make_room(red, green, dice_value=3, rolled=True)
        assert can_end_turn(room, "red").valid

    def test_optional_move_on_non_six(self, green):
        """A non-6 roll may be passed even with a legal move."""
        red = make_player("red", PlayerColor.RED, (10, -1, -1, -1))
        room = make_room(red, green, dice_value=3, rolled=True)
        assert can_end_turn(room, "red").valid


class TestLobbyValidators:
    """Tests for start and join validation."""

    def test_start_needs_two_players(self, red):
        """One player cannot start."""
        room = make_room(red, phase=GamePhase.WAITING)
        assert can_start_game(room).error_code == RejectionCode.NOT_ENOUGH_PLAYERS

    def test_start_twice(self, two_player_room):
        """A playing room cannot start again."""
        assert can_start_game(two_player_room).error_code == RejectionCode.GAME_ALREADY_STARTED

    def test_too_many_players(self):
        """More than four seats cannot start."""
        players = [make_player(f"p{i}", PlayerColor.RED) for i in range(5)]
        room = make_room(*players, phase=GamePhase.WAITING)
        assert can_start_game(room).error_code == RejectionCode.TOO_MANY_PLAYERS

    def test_join_full_room(self):
        """A full room rejects joins."""
        players = [make_player(f"p{i}", PlayerColor.RED) for i in range(4)]
        room = make_room(*players, phase=GamePhase.WAITING)
        assert can_join_room(room).error_code == RejectionCode.ROOM_FULL

    def test_join_playing_room(self, two_player_room):
        """Games in progress reject joins."""
        assert can_join_room(two_player_room).error_code == RejectionCode.GAME_ALREADY_STARTED
