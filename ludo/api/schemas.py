"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between game clients and the engine.
Room snapshots are always rendered through RoomResponse; password
hashes never appear in any response.

Error codes are the engine's RejectionCode values, for example:
- ROOM_NOT_FOUND: Room does not exist or was cleaned up
- NOT_YOUR_TURN: Another player is to act
- MUST_ROLL_FIRST: Move or end turn before rolling
- ILLEGAL_MOVE: Token cannot move with the current roll
"""

from typing import Optional
from pydantic import BaseModel, Field

from ..engine_core.action import RejectionCode
from ..engine_core.board import PlayerColor
from ..engine_core.state import GamePhase


# =============================================================================
# Shared Models
# =============================================================================

class TokenInfo(BaseModel):
    """A token and its derived status."""
    id: int
    position: int = Field(description="-1 base, 0-51 track, 52-56 home column, 57 finished")
    is_home: bool
    is_finished: bool


class PlayerInfo(BaseModel):
    """A seat in a room."""
    player_id: str
    nickname: str
    color: PlayerColor
    is_bot: bool = False
    is_ready: bool = False
    is_host: bool = False
    is_current_turn: bool = False
    finished_count: int = 0
    tokens: list[TokenInfo] = Field(default_factory=list)


class MoveInfo(BaseModel):
    """The most recent move in a room."""
    player_id: str
    token_id: int
    from_position: int
    to_position: int
    captured: bool = False


class MoveRecordInfo(MoveInfo):
    """A move history entry."""
    player_nickname: str
    player_color: PlayerColor
    timestamp: float


# =============================================================================
# Request Models
# =============================================================================

class CreateRoomRequest(BaseModel):
    """Request to create a room; the caller becomes host."""
    nickname: str = Field("Player1", min_length=1, max_length=32)
    player_id: Optional[str] = Field(None, description="Generated when omitted")
    password: Optional[str] = Field(None, description="Protect the room with a password")


class JoinRoomRequest(BaseModel):
    """Request to join a waiting room."""
    player_id: Optional[str] = Field(None, description="Generated when omitted")
    nickname: str = Field("Player", min_length=1, max_length=32)
    password: Optional[str] = None


class PlayerActionRequest(BaseModel):
    """Request carrying only the acting player (start, roll, end turn, leave)."""
    player_id: str


class UpdatePlayerRequest(BaseModel):
    """Change nickname or color before the game starts."""
    nickname: Optional[str] = Field(None, max_length=32)
    color: Optional[PlayerColor] = None


class AddBotRequest(BaseModel):
    """Request to add a bot (host only)."""
    host_id: str
    personality: Optional[str] = Field(
        None, description="balanced, aggressive or runner"
    )


class MoveRequest(BaseModel):
    """Request to move a token with the current roll."""
    player_id: str
    token_id: int = Field(..., ge=0, le=3)
    dice_value: Optional[int] = Field(
        None, ge=1, le=6, description="Roll the client saw; rejected when stale"
    )


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: RejectionCode = Field(..., description="Machine-readable error code")
    api_version: str = Field("v1", description="API version")


class RoomResponse(BaseModel):
    """Complete room snapshot for display."""
    room_id: str
    phase: GamePhase
    players: list[PlayerInfo] = Field(default_factory=list)
    current_player_index: int = 0
    current_player_id: Optional[str] = None
    dice_value: int = 0
    has_rolled_dice: bool = False
    consecutive_sixes: int = 0
    winner_id: Optional[str] = None
    max_players: int = 4
    has_password: bool = False
    last_move: Optional[MoveInfo] = None
    move_history: list[MoveRecordInfo] = Field(default_factory=list)
    created_at: float = 0.0
    api_version: str = "v1"


class CreateRoomResponse(BaseModel):
    """Response after creating a room."""
    room_id: str
    player_id: str
    room: RoomResponse


class JoinRoomResponse(BaseModel):
    """Response after joining a room."""
    room_id: str
    player_id: str
    room: RoomResponse


class ActionResponse(BaseModel):
    """Result of a lobby or game action."""
    success: bool = True
    room: Optional[RoomResponse] = Field(None, description="Absent when the room was closed")

    # Roll details
    dice_value: Optional[int] = None
    busted: bool = False
    valid_moves: list[int] = Field(default_factory=list)
    no_legal_moves: bool = False

    # Move details
    move: Optional[MoveInfo] = None
    captured: bool = False
    winner_id: Optional[str] = None

    state_changes: list[str] = Field(default_factory=list)
    pending_bot_action: bool = False
    api_version: str = "v1"


class RoomSummary(BaseModel):
    """Short room listing entry."""
    room_id: str
    phase: GamePhase
    player_count: int
    max_players: int
    has_password: bool = False
    host_nickname: Optional[str] = None


class RoomListResponse(BaseModel):
    """Response listing rooms."""
    rooms: list[RoomSummary]
    count: int


class ValidMovesResponse(BaseModel):
    """Tokens the player may move with the current roll."""
    room_id: str
    player_id: str
    dice_value: int = 0
    valid_moves: list[int] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
