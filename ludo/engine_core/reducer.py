"""
Reducer - Applies actions to a room (the turn controller).

The reducer is the single point of state transition.
All state changes must go through apply_action().

Design principles:
- Pure with respect to the room: (room, action) -> new room
- Validates before applying, so rejections leave state untouched
- Returns ActionResult with success/failure
- Owns the turn cycle: extra turn on 6, bust on three 6s
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import random
import time
from typing import Callable

from .board import FINISH_POSITION
from .state import Room, GamePhase, MoveDescriptor, MoveRecord, initialize_tokens
from .action import Action, ActionType, ActionResult, RejectionCode
from .moves import RuleOptions, DEFAULT_RULES, get_valid_moves, move_token, check_win
from .validators import (
    ValidationResult,
    can_roll_dice,
    can_move_token,
    can_end_turn,
    can_start_game,
)

logger = logging.getLogger(__name__)

MAX_CONSECUTIVE_SIXES = 3


def _rejected(validation: ValidationResult) -> ActionResult:
    return ActionResult.failure(validation.error or "Action rejected", validation.error_code)


@dataclass
class Reducer:
    """
    Reducer applies actions to room snapshots.

    Stateless apart from the dice source; all match state is in Room.
    """
    options: RuleOptions = DEFAULT_RULES
    rng: random.Random = field(default_factory=random.Random)
    clock: Callable[[], float] = time.time

    def apply(self, room: Room, action: Action) -> ActionResult:
        """
        Apply an action to the room.

        Returns ActionResult with new room or rejection.
        """
        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code=RejectionCode.INVALID_ACTION,
            )

        try:
            result = handler(room, action)
        except Exception as e:
            logger.exception("Failed to apply %s in room %s", action.action_type.value, room.room_id)
            return ActionResult.failure(str(e), error_code=RejectionCode.HANDLER_ERROR)

        if result.success and result.new_state is not None:
            result.pending_bot_action = result.new_state.bot_to_act
            logger.debug(
                "Room %s: %s by %s",
                room.room_id,
                action.action_type.value,
                action.payload.player_id,
            )
        return result

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.START_GAME: self._handle_start_game,
            ActionType.ROLL_DICE: self._handle_roll,
            ActionType.MOVE_TOKEN: self._handle_move,
            ActionType.END_TURN: self._handle_end_turn,
        }
        return handlers.get(action_type)

    def roll_die(self) -> int:
        return self.rng.randint(1, 6)

    def _handle_start_game(self, room: Room, action: Action) -> ActionResult:
        """Initialize tokens and enter the playing phase."""
        validation = can_start_game(room)
        if not validation.valid:
            return _rejected(validation)

        players = tuple(p.with_tokens(initialize_tokens()) for p in room.players)
        new_room = room._copy_with(
            players=players,
            phase=GamePhase.PLAYING,
            current_player_index=0,
            dice_value=0,
            has_rolled_dice=False,
            consecutive_sixes=0,
            winner_id=None,
            last_move=None,
            move_history=(),
        )
        return ActionResult.success_with_state(
            new_room,
            changes=[f"Game started with {len(players)} players"],
        )

    def _handle_roll(self, room: Room, action: Action) -> ActionResult:
        """Roll the die and apply the three-sixes rule."""
        player_id = action.payload.player_id
        validation = can_roll_dice(room, player_id)
        if not validation.valid:
            return _rejected(validation)

        value = action.payload.dice_value
        if value is None:
            value = self.roll_die()
        elif isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 6:
            return ActionResult.failure(
                f"Invalid dice value: {value}", error_code=RejectionCode.INVALID_ACTION
            )

        player = room.current_player
        sixes = room.consecutive_sixes + 1 if value == 6 else 0

        if sixes >= MAX_CONSECUTIVE_SIXES:
            new_room = self._advance_turn(room)
            return ActionResult.success_with_state(
                new_room,
                changes=[f"{player.nickname} rolled a third 6 and loses the turn"],
                dice_value=value,
                busted=True,
            )

        new_room = room._copy_with(
            dice_value=value,
            has_rolled_dice=True,
            consecutive_sixes=sixes,
        )
        valid_moves = get_valid_moves(new_room.players, player, value, self.options)
        changes = [f"{player.nickname} rolled {value}"]
        if not valid_moves:
            changes.append(f"{player.nickname} has no legal move")

        return ActionResult.success_with_state(
            new_room,
            changes=changes,
            dice_value=value,
            valid_moves=valid_moves,
        )

    def _handle_move(self, room: Room, action: Action) -> ActionResult:
        """Move a token, record it, and resolve the turn."""
        payload = action.payload
        dice_value = payload.dice_value if payload.dice_value is not None else room.dice_value

        validation = can_move_token(room, payload.player_id, payload.token_id, dice_value, self.options)
        if not validation.valid:
            return _rejected(validation)

        player = room.current_player
        outcome = move_token(room.players, player, payload.token_id, dice_value, self.options)
        if outcome is None:
            return ActionResult.failure("Invalid move", error_code=RejectionCode.ILLEGAL_MOVE)

        descriptor = MoveDescriptor(
            player_id=player.player_id,
            token_id=payload.token_id,
            from_position=outcome.from_position,
            to_position=outcome.to_position,
            captured=outcome.captured,
        )
        record = MoveRecord(
            player_id=player.player_id,
            player_nickname=player.nickname,
            player_color=player.color,
            token_id=payload.token_id,
            from_position=outcome.from_position,
            to_position=outcome.to_position,
            captured=outcome.captured,
            timestamp=action.timestamp if action.timestamp is not None else self.clock(),
        )

        new_room = room._copy_with(
            players=outcome.updated_players,
            last_move=descriptor,
            move_history=room.move_history + (record,),
        )

        changes = [
            f"{player.nickname} moved token {payload.token_id} "
            f"from {outcome.from_position} to {outcome.to_position}"
        ]
        if outcome.captured:
            changes.append(f"{player.nickname} captured a token of {outcome.captured_player_id}")
        if outcome.to_position == FINISH_POSITION:
            changes.append(f"{player.nickname} finished token {payload.token_id}")

        winner_id = None
        if check_win(outcome.updated_player):
            winner_id = player.player_id
            new_room = new_room._copy_with(
                phase=GamePhase.FINISHED,
                winner_id=winner_id,
                dice_value=0,
                has_rolled_dice=False,
                consecutive_sixes=0,
            )
            changes.append(f"{player.nickname} wins")
            logger.info("Room %s won by %s", room.room_id, player.player_id)
        elif dice_value == 6:
            # Extra turn: clear the die to force an explicit re-roll
            new_room = new_room._copy_with(dice_value=0, has_rolled_dice=False)
        else:
            new_room = self._advance_turn(new_room)

        return ActionResult.success_with_state(
            new_room,
            changes=changes,
            move=descriptor,
            captured=outcome.captured,
            winner_id=winner_id,
        )

    def _handle_end_turn(self, room: Room, action: Action) -> ActionResult:
        """End the turn when no move is taken."""
        player_id = action.payload.player_id
        validation = can_end_turn(room, player_id, self.options)
        if not validation.valid:
            return _rejected(validation)

        player = room.current_player
        return ActionResult.success_with_state(
            self._advance_turn(room),
            changes=[f"{player.nickname} ended the turn"],
        )

    def _advance_turn(self, room: Room) -> Room:
        """Pass the turn to the next seat and reset the dice state."""
        return room._copy_with(
            current_player_index=(room.current_player_index + 1) % room.num_players,
            dice_value=0,
            has_rolled_dice=False,
            consecutive_sixes=0,
        )


def apply_action(
    room: Room,
    action: Action,
    options: RuleOptions = DEFAULT_RULES,
    rng: random.Random | None = None,
) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer(options=options, rng=rng or random.Random())
    return reducer.apply(room, action)
