"""
Session Module - Rooms, lobby operations and bot scheduling.

A room represents one match:
- Created by a host, joined by players and bots
- Holds the current snapshot in a RoomStore
- Routes every game action through the reducer under a per-room lock
- Deleted when the last player leaves or it goes stale

Rooms are in-memory only; nothing survives a restart.
"""

from .store import RoomStore, InMemoryRoomStore
from .manager import RoomManager, hash_password, verify_password
from .game_loop import GameLoop, LoopState, TurnResult

__all__ = [
    "RoomStore",
    "InMemoryRoomStore",
    "RoomManager",
    "hash_password",
    "verify_password",
    "GameLoop",
    "LoopState",
    "TurnResult",
]
