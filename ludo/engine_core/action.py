"""
Action System - Actions, rejection codes and results.

Actions represent the player-initiated steps of a match:
start, roll, move and end turn. All state changes flow through
actions, and every rejection carries a machine-readable code
so callers can branch without exception handling.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .state import MoveDescriptor


class ActionType(Enum):
    """Types of actions in the system."""
    START_GAME = "start_game"
    ROLL_DICE = "roll_dice"
    MOVE_TOKEN = "move_token"
    END_TURN = "end_turn"


class RejectionCode(str, Enum):
    """Reasons an action can be rejected."""
    # Turn and dice preconditions
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    GAME_NOT_IN_PROGRESS = "GAME_NOT_IN_PROGRESS"
    ALREADY_ROLLED = "ALREADY_ROLLED"
    MUST_ROLL_FIRST = "MUST_ROLL_FIRST"
    STALE_DICE_VALUE = "STALE_DICE_VALUE"
    INVALID_TOKEN = "INVALID_TOKEN"
    ILLEGAL_MOVE = "ILLEGAL_MOVE"
    MUST_MOVE_ON_SIX = "MUST_MOVE_ON_SIX"

    # Lobby preconditions
    ROOM_FULL = "ROOM_FULL"
    GAME_ALREADY_STARTED = "GAME_ALREADY_STARTED"
    NOT_ENOUGH_PLAYERS = "NOT_ENOUGH_PLAYERS"
    TOO_MANY_PLAYERS = "TOO_MANY_PLAYERS"
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    INVALID_PASSWORD = "INVALID_PASSWORD"
    ALREADY_IN_ROOM = "ALREADY_IN_ROOM"
    NOT_HOST = "NOT_HOST"
    PLAYER_NOT_FOUND = "PLAYER_NOT_FOUND"
    COLOR_TAKEN = "COLOR_TAKEN"

    # Generic
    INVALID_STATE = "INVALID_STATE"
    INVALID_ACTION = "INVALID_ACTION"
    HANDLER_ERROR = "HANDLER_ERROR"


@dataclass
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Validation happens in the validators, not here.
    """
    player_id: str | None = None
    token_id: int | None = None

    # Dice value the client believes is current (move), or a scripted roll
    dice_value: int | None = None

    params: dict[str, Any] = field(default_factory=dict)


@dataclass
class Action:
    """
    A complete action to be applied to a room.

    Actions are:
    - Validated before application
    - Applied atomically by the reducer
    """
    action_type: ActionType
    payload: ActionPayload
    timestamp: float | None = None

    @classmethod
    def start_game(cls, player_id: str | None = None) -> Action:
        """Factory for start action."""
        return cls(
            action_type=ActionType.START_GAME,
            payload=ActionPayload(player_id=player_id),
        )

    @classmethod
    def roll(cls, player_id: str, value: int | None = None) -> Action:
        """Factory for roll action. A fixed value replays a scripted roll."""
        return cls(
            action_type=ActionType.ROLL_DICE,
            payload=ActionPayload(player_id=player_id, dice_value=value),
        )

    @classmethod
    def move(cls, player_id: str, token_id: int, dice_value: int | None = None) -> Action:
        """Factory for move action."""
        return cls(
            action_type=ActionType.MOVE_TOKEN,
            payload=ActionPayload(
                player_id=player_id,
                token_id=token_id,
                dice_value=dice_value,
            ),
        )

    @classmethod
    def end_turn(cls, player_id: str) -> Action:
        """Factory for end turn action."""
        return cls(
            action_type=ActionType.END_TURN,
            payload=ActionPayload(player_id=player_id),
        )


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action succeeded
    - New room snapshot (if succeeded)
    - Rejection reason (if failed)
    - Move and dice details for broadcast
    - Whether a bot should act next
    """
    success: bool
    new_state: Any | None = None  # Room
    error: str | None = None
    error_code: RejectionCode | None = None

    # Roll details
    dice_value: int | None = None
    busted: bool = False
    valid_moves: list[int] = field(default_factory=list)

    # Move details
    move: MoveDescriptor | None = None
    captured: bool = False
    winner_id: str | None = None

    # For UI/presentation
    state_changes: list[str] = field(default_factory=list)

    # Signal for the scheduling layer; the engine never schedules itself
    pending_bot_action: bool = False

    @property
    def no_legal_moves(self) -> bool:
        """A completed roll that leaves nothing to move."""
        return (
            self.success
            and self.dice_value is not None
            and not self.busted
            and not self.valid_moves
        )

    @classmethod
    def failure(cls, error: str, error_code: RejectionCode | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
        **details: Any,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            state_changes=changes or [],
            **details,
        )
