"""
Game State - Immutable snapshots of tokens, players and rooms.

Design principles:
- Immutable: every mutation returns a new snapshot
- Derivable: a token's status follows from its position alone
- Serializable: snapshots convert to plain dicts for transport
"""

from __future__ import annotations
from dataclasses import dataclass, replace, asdict
from enum import Enum
from typing import Any

from .board import (
    BASE_POSITION,
    FINISH_POSITION,
    TOKENS_PER_PLAYER,
    MAX_PLAYERS,
    PlayerColor,
    is_on_track,
    is_in_home_column,
)


class GamePhase(str, Enum):
    """High-level room phases."""
    WAITING = "waiting"
    PLAYING = "playing"
    FINISHED = "finished"


@dataclass(frozen=True)
class Token:
    """
    A single token.

    Status flags are derived from the position, so a token can never
    be both in base and finished.
    """
    id: int
    position: int = BASE_POSITION

    @property
    def is_home(self) -> bool:
        return self.position == BASE_POSITION

    @property
    def is_finished(self) -> bool:
        return self.position == FINISH_POSITION

    @property
    def on_track(self) -> bool:
        return is_on_track(self.position)

    @property
    def in_home_column(self) -> bool:
        return is_in_home_column(self.position)

    def moved_to(self, position: int) -> Token:
        return Token(id=self.id, position=position)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "position": self.position,
            "is_home": self.is_home,
            "is_finished": self.is_finished,
        }


def initialize_tokens() -> tuple[Token, ...]:
    """Fresh set of tokens, all in base."""
    return tuple(Token(id=i) for i in range(TOKENS_PER_PLAYER))


@dataclass(frozen=True)
class Player:
    """
    A seat in a room.

    Tokens stay empty until the game starts.
    """
    player_id: str
    nickname: str
    color: PlayerColor = PlayerColor.RED
    tokens: tuple[Token, ...] = ()
    is_bot: bool = False
    is_ready: bool = False

    def get_token(self, token_id: int) -> Token | None:
        for token in self.tokens:
            if token.id == token_id:
                return token
        return None

    def with_token(self, token: Token) -> Player:
        """Return new player with one token replaced."""
        new_tokens = tuple(token if t.id == token.id else t for t in self.tokens)
        return replace(self, tokens=new_tokens)

    def with_tokens(self, tokens: tuple[Token, ...]) -> Player:
        return replace(self, tokens=tuple(tokens))

    def _copy_with(self, **kwargs) -> Player:
        return replace(self, **kwargs)

    @property
    def finished_count(self) -> int:
        return sum(1 for t in self.tokens if t.is_finished)

    def to_dict(self) -> dict[str, Any]:
        return {
            "player_id": self.player_id,
            "nickname": self.nickname,
            "color": self.color.value,
            "tokens": [t.to_dict() for t in self.tokens],
            "is_bot": self.is_bot,
            "is_ready": self.is_ready,
        }


@dataclass(frozen=True)
class MoveDescriptor:
    """The last move applied in a room, for broadcast."""
    player_id: str
    token_id: int
    from_position: int
    to_position: int
    captured: bool = False


@dataclass(frozen=True)
class MoveRecord:
    """
    Append-only move history entry.

    Purely observational; the engine never reads history back.
    """
    player_id: str
    player_nickname: str
    player_color: PlayerColor
    token_id: int
    from_position: int
    to_position: int
    captured: bool
    timestamp: float


@dataclass(frozen=True)
class Room:
    """
    Complete match state at a point in time.

    This is the aggregate every engine operation reads and returns.
    Turn order is the order of `players`.
    """
    room_id: str
    players: tuple[Player, ...] = ()
    phase: GamePhase = GamePhase.WAITING
    current_player_index: int = 0
    dice_value: int = 0
    has_rolled_dice: bool = False
    consecutive_sixes: int = 0
    winner_id: str | None = None
    max_players: int = MAX_PLAYERS

    last_move: MoveDescriptor | None = None
    move_history: tuple[MoveRecord, ...] = ()

    # Lobby metadata, never read by the engine
    password_hash: str | None = None
    created_at: float = 0.0

    @property
    def current_player(self) -> Player | None:
        """Player whose turn it is, or None for a malformed snapshot."""
        if 0 <= self.current_player_index < len(self.players):
            return self.players[self.current_player_index]
        return None

    @property
    def bot_to_act(self) -> bool:
        """True while playing and the current player is a bot."""
        current = self.current_player
        return self.phase == GamePhase.PLAYING and current is not None and current.is_bot

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def host(self) -> Player | None:
        return self.players[0] if self.players else None

    def get_player(self, player_id: str) -> Player | None:
        """Get player by ID."""
        for p in self.players:
            if p.player_id == player_id:
                return p
        return None

    def with_player(self, player: Player) -> Room:
        """Return new room with updated player."""
        new_players = tuple(
            player if p.player_id == player.player_id else p
            for p in self.players
        )
        return self._copy_with(players=new_players)

    def with_players(self, players) -> Room:
        return self._copy_with(players=tuple(players))

    def _copy_with(self, **kwargs) -> Room:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        current = self.current_player
        return {
            "room_id": self.room_id,
            "phase": self.phase.value,
            "players": [p.to_dict() for p in self.players],
            "current_player_index": self.current_player_index,
            "current_player_id": current.player_id if current else None,
            "dice_value": self.dice_value,
            "has_rolled_dice": self.has_rolled_dice,
            "consecutive_sixes": self.consecutive_sixes,
            "winner_id": self.winner_id,
            "max_players": self.max_players,
            "last_move": asdict(self.last_move) if self.last_move else None,
            "move_history": [
                {**asdict(r), "player_color": r.player_color.value}
                for r in self.move_history
            ],
            "created_at": self.created_at,
        }
