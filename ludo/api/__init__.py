"""
API Module - HTTP interface for game clients.

Exposes rooms and the engine via REST.
A client:
1. Creates or joins a room
2. Adds bots and starts the game (host)
3. Rolls, moves and ends turns
4. Polls the room snapshot for other players' moves

All state is room-scoped and in memory. No user accounts.
"""

from .schemas import (
    # Requests
    CreateRoomRequest,
    JoinRoomRequest,
    PlayerActionRequest,
    UpdatePlayerRequest,
    AddBotRequest,
    MoveRequest,
    # Responses
    ActionResponse,
    CreateRoomResponse,
    JoinRoomResponse,
    ErrorResponse,
    RoomResponse,
    RoomListResponse,
    ValidMovesResponse,
    # Shared
    PlayerInfo,
    TokenInfo,
    MoveInfo,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateRoomRequest",
    "JoinRoomRequest",
    "PlayerActionRequest",
    "UpdatePlayerRequest",
    "AddBotRequest",
    "MoveRequest",
    # Responses
    "ActionResponse",
    "CreateRoomResponse",
    "JoinRoomResponse",
    "ErrorResponse",
    "RoomResponse",
    "RoomListResponse",
    "ValidMovesResponse",
    # Shared
    "PlayerInfo",
    "TokenInfo",
    "MoveInfo",
    # Service
    "APIService",
    "create_app",
]
