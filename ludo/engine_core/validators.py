"""
Validators - Stateless guards for player-initiated actions.

Each check reads a Room snapshot and returns a ValidationResult.
They never mutate their input, so calling one twice with the same
snapshot yields the same answer. A malformed snapshot fails closed.
"""

from __future__ import annotations
from dataclasses import dataclass

from .board import MIN_PLAYERS, MAX_PLAYERS
from .state import Room, GamePhase, Player
from .action import RejectionCode
from .moves import get_valid_moves, RuleOptions, DEFAULT_RULES


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: str | None = None
    error_code: RejectionCode | None = None

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(valid=True)

    @classmethod
    def reject(cls, code: RejectionCode, error: str) -> ValidationResult:
        return cls(valid=False, error=error, error_code=code)


_NOT_PLAYING = ValidationResult.reject(
    RejectionCode.GAME_NOT_IN_PROGRESS, "Game is not in progress"
)
_NOT_YOUR_TURN = ValidationResult.reject(RejectionCode.NOT_YOUR_TURN, "Not your turn")
_MUST_ROLL = ValidationResult.reject(
    RejectionCode.MUST_ROLL_FIRST, "You must roll the dice first"
)


def _current_player_check(room: Room, player_id: str) -> ValidationResult | Player:
    """Common phase and turn-ownership checks. Returns the acting player."""
    if room.phase != GamePhase.PLAYING:
        return _NOT_PLAYING

    current = room.current_player
    if current is None or not 0 <= room.dice_value <= 6:
        return ValidationResult.reject(RejectionCode.INVALID_STATE, "Room state is invalid")

    if current.player_id != player_id:
        return _NOT_YOUR_TURN

    return current


def can_roll_dice(room: Room, player_id: str) -> ValidationResult:
    """Validate if a player can roll the dice."""
    checked = _current_player_check(room, player_id)
    if isinstance(checked, ValidationResult):
        return checked

    if room.has_rolled_dice:
        return ValidationResult.reject(
            RejectionCode.ALREADY_ROLLED, "You have already rolled the dice"
        )

    return ValidationResult.ok()


def can_move_token(
    room: Room,
    player_id: str,
    token_id: int,
    dice_value: int,
    options: RuleOptions = DEFAULT_RULES,
) -> ValidationResult:
    """Validate if a player can move a token with the submitted dice value."""
    checked = _current_player_check(room, player_id)
    if isinstance(checked, ValidationResult):
        return checked
    player = checked

    if not room.has_rolled_dice:
        return _MUST_ROLL

    if room.dice_value != dice_value:
        return ValidationResult.reject(
            RejectionCode.STALE_DICE_VALUE, "Dice value does not match the current roll"
        )

    if isinstance(token_id, bool) or not isinstance(token_id, int) \
            or player.get_token(token_id) is None:
        return ValidationResult.reject(RejectionCode.INVALID_TOKEN, "Invalid token")

    if token_id not in get_valid_moves(room.players, player, dice_value, options):
        return ValidationResult.reject(RejectionCode.ILLEGAL_MOVE, "Invalid move")

    return ValidationResult.ok()


def can_end_turn(
    room: Room,
    player_id: str,
    options: RuleOptions = DEFAULT_RULES,
) -> ValidationResult:
    """Validate if a player can end their turn."""
    checked = _current_player_check(room, player_id)
    if isinstance(checked, ValidationResult):
        return checked
    player = checked

    if not room.has_rolled_dice:
        return _MUST_ROLL

    # A 6 with any legal move is a forced move
    if room.dice_value == 6 and get_valid_moves(room.players, player, 6, options):
        return ValidationResult.reject(
            RejectionCode.MUST_MOVE_ON_SIX, "You must move a token when you roll 6"
        )

    return ValidationResult.ok()


def can_start_game(room: Room) -> ValidationResult:
    """Validate if the game can be started."""
    if room.phase != GamePhase.WAITING:
        return ValidationResult.reject(
            RejectionCode.GAME_ALREADY_STARTED, "Game has already started"
        )

    if room.num_players < MIN_PLAYERS:
        return ValidationResult.reject(
            RejectionCode.NOT_ENOUGH_PLAYERS, f"Need at least {MIN_PLAYERS} players to start"
        )

    if room.num_players > MAX_PLAYERS:
        return ValidationResult.reject(
            RejectionCode.TOO_MANY_PLAYERS, f"Maximum {MAX_PLAYERS} players allowed"
        )

    return ValidationResult.ok()


def can_join_room(room: Room) -> ValidationResult:
    """Validate a room join."""
    if room.phase == GamePhase.PLAYING:
        return ValidationResult.reject(
            RejectionCode.GAME_ALREADY_STARTED, "Game is already in progress"
        )

    if room.num_players >= room.max_players:
        return ValidationResult.reject(RejectionCode.ROOM_FULL, "Room is full")

    return ValidationResult.ok()
