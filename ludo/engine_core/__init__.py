"""
Engine Core - Deterministic Ludo rules and turn control.

The engine is the runtime that:
1. Describes the board (geometry constants)
2. Holds immutable room snapshots
3. Computes legal moves, blocks and captures
4. Validates player actions
5. Applies actions via the reducer
"""

from .board import (
    PlayerColor,
    BOARD_SIZE,
    HOME_COLUMN_SIZE,
    HOME_COLUMN_START,
    FINISH_POSITION,
    BASE_POSITION,
    SAFE_ZONES,
    START_POSITIONS,
    HOME_ENTRY,
    COLOR_ROTATION,
)
from .state import GamePhase, Token, Player, Room, MoveDescriptor, MoveRecord, initialize_tokens
from .action import Action, ActionType, ActionPayload, ActionResult, RejectionCode
from .moves import (
    RuleOptions,
    BlockInfo,
    MoveOutcome,
    compute_destination,
    has_block,
    is_path_blocked,
    would_jump_own_token,
    get_valid_moves,
    capture_targets,
    move_token,
    check_win,
    assign_colors,
)
from .validators import (
    ValidationResult,
    can_roll_dice,
    can_move_token,
    can_end_turn,
    can_start_game,
    can_join_room,
)
from .reducer import Reducer, apply_action
from .action_generator import ActionGenerator, legal_actions

__all__ = [
    "PlayerColor",
    "BOARD_SIZE",
    "HOME_COLUMN_SIZE",
    "HOME_COLUMN_START",
    "FINISH_POSITION",
    "BASE_POSITION",
    "SAFE_ZONES",
    "START_POSITIONS",
    "HOME_ENTRY",
    "COLOR_ROTATION",
    "GamePhase",
    "Token",
    "Player",
    "Room",
    "MoveDescriptor",
    "MoveRecord",
    "initialize_tokens",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "RejectionCode",
    "RuleOptions",
    "BlockInfo",
    "MoveOutcome",
    "compute_destination",
    "has_block",
    "is_path_blocked",
    "would_jump_own_token",
    "get_valid_moves",
    "capture_targets",
    "move_token",
    "check_win",
    "assign_colors",
    "ValidationResult",
    "can_roll_dice",
    "can_move_token",
    "can_end_turn",
    "can_start_game",
    "can_join_room",
    "Reducer",
    "apply_action",
    "ActionGenerator",
    "legal_actions",
]
