"""
Pytest fixtures for Ludo tests.
"""

import random

import pytest

from ..engine_core.board import PlayerColor, BASE_POSITION
from ..engine_core.state import Room, Player, Token, GamePhase
from ..engine_core.reducer import Reducer
from ..session import RoomManager, GameLoop


def make_player(
    player_id: str,
    color: PlayerColor,
    positions=(BASE_POSITION,) * 4,
    is_bot: bool = False,
    nickname: str | None = None,
) -> Player:
    """Player with tokens at the given positions (token i at positions[i])."""
    return Player(
        player_id=player_id,
        nickname=nickname or player_id,
        color=color,
        tokens=tuple(Token(id=i, position=p) for i, p in enumerate(positions)),
        is_bot=is_bot,
    )


def make_room(
    *players: Player,
    current: int = 0,
    dice_value: int = 0,
    rolled: bool = False,
    sixes: int = 0,
    phase: GamePhase = GamePhase.PLAYING,
) -> Room:
    """Playing room with an explicit turn and dice state."""
    return Room(
        room_id="TEST01",
        players=tuple(players),
        phase=phase,
        current_player_index=current,
        dice_value=dice_value,
        has_rolled_dice=rolled,
        consecutive_sixes=sixes,
    )


@pytest.fixture
def red() -> Player:
    """Red player with all tokens in base."""
    return make_player("red", PlayerColor.RED)


@pytest.fixture
def green() -> Player:
    """Green player with all tokens in base."""
    return make_player("green", PlayerColor.GREEN)


@pytest.fixture
def two_player_room(red, green) -> Room:
    """Fresh 2-player game, red to roll."""
    return make_room(red, green)


@pytest.fixture
def reducer() -> Reducer:
    """Reducer with a seeded die and a fixed clock."""
    return Reducer(rng=random.Random(42), clock=lambda: 1000.0)


@pytest.fixture
def manager(reducer) -> RoomManager:
    """Room manager with in-memory storage."""
    return RoomManager(reducer=reducer)


@pytest.fixture
def game_loop(manager) -> GameLoop:
    return GameLoop(manager)


@pytest.fixture
def lobby(manager):
    """Waiting room with a host and one joined human. Returns (manager, room_id)."""
    room = manager.create_room("Host", "host")
    manager.join_room(room.room_id, "guest", "Guest")
    return manager, room.room_id
