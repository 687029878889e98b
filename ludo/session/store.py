"""
Room Store - Where room snapshots live between actions.

The engine never touches the store; only the session layer does.
Implementations must replace whole snapshots, never patch them.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
import threading

from ..engine_core.state import Room


class RoomStore(ABC):
    """Keyed storage for room snapshots."""

    @abstractmethod
    def get(self, room_id: str) -> Room | None:
        pass

    @abstractmethod
    def put(self, room: Room) -> None:
        pass

    @abstractmethod
    def delete(self, room_id: str) -> bool:
        pass

    @abstractmethod
    def list_ids(self) -> list[str]:
        pass

    def __contains__(self, room_id: str) -> bool:
        return self.get(room_id) is not None


class InMemoryRoomStore(RoomStore):
    """
    Process-local store.

    No persistence - rooms are lost on restart.
    """

    def __init__(self):
        self._rooms: dict[str, Room] = {}
        self._lock = threading.Lock()

    def get(self, room_id: str) -> Room | None:
        with self._lock:
            return self._rooms.get(room_id)

    def put(self, room: Room) -> None:
        with self._lock:
            self._rooms[room.room_id] = room

    def delete(self, room_id: str) -> bool:
        with self._lock:
            return self._rooms.pop(room_id, None) is not None

    def list_ids(self) -> list[str]:
        with self._lock:
            return list(self._rooms)
