"""
Room Manager - Creates rooms and serializes every action on them.

LIFECYCLE:
1. Host creates a room (optionally password protected)
2. Players join, bots are added by the host, colors are assigned
3. Host starts the game; tokens are initialized
4. Players roll, move and end turns through the engine
5. The room finishes when a player brings all tokens home
6. Empty rooms are deleted; stale rooms are cleaned up periodically

CONCURRENCY:
- Each room has its own lock
- Every action reads, validates and writes the room under that lock,
  so two simultaneous requests can never double-apply a move
"""

from __future__ import annotations
from contextlib import contextmanager
import hashlib
import hmac
import logging
import secrets
import string
import threading
import time
import uuid

from ..engine_core.board import COLOR_ROTATION, PlayerColor
from ..engine_core.state import Room, Player, GamePhase
from ..engine_core.action import Action, ActionResult, RejectionCode
from ..engine_core.moves import RuleOptions, DEFAULT_RULES, assign_colors
from ..engine_core.reducer import Reducer
from ..engine_core.validators import can_join_room
from ..bots import BotPolicy, LudoBot, get_personality
from .store import RoomStore, InMemoryRoomStore

logger = logging.getLogger(__name__)

ROOM_ID_LENGTH = 6
ROOM_ID_ALPHABET = string.ascii_uppercase + string.digits
PASSWORD_ITERATIONS = 100_000


def hash_password(password: str) -> str:
    """Salted PBKDF2 hash, encoded as salt$digest."""
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("ascii"), PASSWORD_ITERATIONS
    ).hex()
    return f"{salt}${digest}"


def verify_password(password: str, password_hash: str) -> bool:
    salt, _, expected = password_hash.partition("$")
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("ascii"), PASSWORD_ITERATIONS
    ).hex()
    return hmac.compare_digest(digest, expected)


def _lobby_failure(code: RejectionCode, error: str) -> ActionResult:
    return ActionResult.failure(error, error_code=code)


class RoomManager:
    """
    Manages rooms on top of a RoomStore.

    Responsibilities:
    - Lobby operations (create, join, leave, bots, colors)
    - Routing game actions through the reducer
    - Per-room serialization of mutations
    """

    def __init__(
        self,
        store: RoomStore | None = None,
        options: RuleOptions = DEFAULT_RULES,
        reducer: Reducer | None = None,
    ):
        self.store = store or InMemoryRoomStore()
        self.options = options
        self.reducer = reducer or Reducer(options=options)
        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()
        self._bot_personalities: dict[str, str] = {}

    # =========================================================================
    # Locking
    # =========================================================================

    @contextmanager
    def locked(self, room_id: str):
        """
        Hold the room's lock for a read-validate-write sequence.

        Only existing rooms are tracked; unknown ids get a throwaway lock.
        """
        with self._locks_guard:
            lock = self._locks.get(room_id)
            if lock is None:
                lock = threading.RLock()
                if room_id in self.store:
                    self._locks[room_id] = lock
        with lock:
            yield

    def _drop_lock(self, room_id: str) -> None:
        with self._locks_guard:
            self._locks.pop(room_id, None)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_room(self, room_id: str) -> Room | None:
        """Get a room by ID."""
        return self.store.get(room_id)

    def list_rooms(self) -> list[Room]:
        rooms = (self.store.get(rid) for rid in self.store.list_ids())
        return [r for r in rooms if r is not None]

    def bot_policy(self, player_id: str) -> BotPolicy:
        """Policy for a bot seat."""
        personality = get_personality(self._bot_personalities.get(player_id))
        return LudoBot(personality=personality, options=self.options)

    # =========================================================================
    # Lobby
    # =========================================================================

    def _generate_room_id(self) -> str:
        while True:
            room_id = "".join(secrets.choice(ROOM_ID_ALPHABET) for _ in range(ROOM_ID_LENGTH))
            if room_id not in self.store:
                return room_id

    def create_room(
        self,
        nickname: str,
        player_id: str,
        password: str | None = None,
        is_bot: bool = False,
        personality: str | None = None,
    ) -> Room:
        """
        Create a room with the caller as host (first seat).

        A bot host plays with `personality` (balanced by default); unknown
        names raise ValueError.
        """
        personality_obj = get_personality(personality) if is_bot else None
        room_id = self._generate_room_id()
        host = Player(
            player_id=player_id,
            nickname=nickname or "Player1",
            color=COLOR_ROTATION[0],
            is_bot=is_bot,
            is_ready=is_bot,
        )
        room = Room(
            room_id=room_id,
            players=(host,),
            password_hash=hash_password(password) if password else None,
            created_at=time.time(),
        )
        self.store.put(room)
        if personality_obj is not None:
            self._bot_personalities[player_id] = personality_obj.name.lower()
        logger.info("Room %s created by %s", room_id, player_id)
        return room

    def join_room(
        self,
        room_id: str,
        player_id: str,
        nickname: str,
        password: str | None = None,
    ) -> ActionResult:
        """Add a player to a waiting room."""
        with self.locked(room_id):
            room = self.store.get(room_id)
            if room is None:
                return _lobby_failure(RejectionCode.ROOM_NOT_FOUND, "Room not found")

            if room.password_hash:
                if not password or not verify_password(password, room.password_hash):
                    return _lobby_failure(RejectionCode.INVALID_PASSWORD, "Invalid password")

            if room.get_player(player_id):
                return _lobby_failure(
                    RejectionCode.ALREADY_IN_ROOM, "You are already in this room"
                )

            validation = can_join_room(room)
            if not validation.valid:
                return ActionResult.failure(validation.error, validation.error_code)

            player = Player(
                player_id=player_id,
                nickname=nickname or f"Player{room.num_players + 1}",
                color=self._free_color(room),
            )
            new_room = room.with_players(room.players + (player,))
            self.store.put(new_room)
            logger.info("Player %s joined room %s", player_id, room_id)
            return ActionResult.success_with_state(
                new_room, changes=[f"{player.nickname} joined"]
            )

    def leave_room(self, room_id: str, player_id: str) -> ActionResult:
        """
        Remove a player. Empty rooms are deleted.

        Leaving mid-game hands the turn on; a lone survivor wins.
        """
        with self.locked(room_id):
            room = self.store.get(room_id)
            if room is None:
                return _lobby_failure(RejectionCode.ROOM_NOT_FOUND, "Room not found")

            seat = next(
                (i for i, p in enumerate(room.players) if p.player_id == player_id), None
            )
            if seat is None:
                return _lobby_failure(RejectionCode.PLAYER_NOT_FOUND, "Player not found")

            remaining = room.players[:seat] + room.players[seat + 1:]
            self._bot_personalities.pop(player_id, None)

            if not remaining:
                self.store.delete(room_id)
                self._drop_lock(room_id)
                logger.info("Room %s deleted (empty)", room_id)
                return ActionResult.success_with_state(None, changes=["Room closed"])

            new_room = self._without_seat(room, seat, remaining)
            self.store.put(new_room)
            logger.info("Player %s left room %s", player_id, room_id)
            return ActionResult.success_with_state(
                new_room,
                changes=[f"{room.players[seat].nickname} left"],
                pending_bot_action=new_room.bot_to_act,
            )

    def _without_seat(self, room: Room, seat: int, remaining: tuple[Player, ...]) -> Room:
        if room.phase == GamePhase.WAITING:
            return room.with_players(assign_colors(remaining))

        if room.phase == GamePhase.FINISHED:
            return room.with_players(remaining)

        if len(remaining) == 1:
            return room._copy_with(
                players=remaining,
                phase=GamePhase.FINISHED,
                winner_id=remaining[0].player_id,
                current_player_index=0,
                dice_value=0,
                has_rolled_dice=False,
                consecutive_sixes=0,
            )

        index = room.current_player_index
        if seat < index:
            index -= 1
        elif seat == index:
            # The leaver's turn passes to whoever took their seat
            index = index % len(remaining)
            return room._copy_with(
                players=remaining,
                current_player_index=index,
                dice_value=0,
                has_rolled_dice=False,
                consecutive_sixes=0,
            )
        return room._copy_with(players=remaining, current_player_index=index)

    def update_player(
        self,
        room_id: str,
        player_id: str,
        nickname: str | None = None,
        color: PlayerColor | None = None,
    ) -> ActionResult:
        """Change nickname and/or color before the game starts."""
        with self.locked(room_id):
            room = self.store.get(room_id)
            if room is None:
                return _lobby_failure(RejectionCode.ROOM_NOT_FOUND, "Room not found")

            if room.phase != GamePhase.WAITING:
                return _lobby_failure(
                    RejectionCode.GAME_ALREADY_STARTED,
                    "Cannot change settings after game has started",
                )

            player = room.get_player(player_id)
            if player is None:
                return _lobby_failure(RejectionCode.PLAYER_NOT_FOUND, "Player not found")

            updates = {}
            if nickname is not None and nickname.strip():
                updates["nickname"] = nickname.strip()

            if color is not None:
                color = PlayerColor(color)
                if any(p.player_id != player_id and p.color == color for p in room.players):
                    return _lobby_failure(RejectionCode.COLOR_TAKEN, "This color is already taken")
                updates["color"] = color

            new_room = room.with_player(player._copy_with(**updates)) if updates else room
            self.store.put(new_room)
            return ActionResult.success_with_state(new_room)

    def add_bot(
        self,
        room_id: str,
        host_id: str,
        personality: str | None = None,
    ) -> ActionResult:
        """Add a computer player (host only, waiting rooms only)."""
        personality_obj = get_personality(personality)

        with self.locked(room_id):
            room = self.store.get(room_id)
            if room is None:
                return _lobby_failure(RejectionCode.ROOM_NOT_FOUND, "Room not found")

            if room.phase != GamePhase.WAITING:
                return _lobby_failure(
                    RejectionCode.GAME_ALREADY_STARTED, "Cannot add bots after game has started"
                )

            if room.host is None or room.host.player_id != host_id:
                return _lobby_failure(RejectionCode.NOT_HOST, "Only the host can add bots")

            if room.num_players >= room.max_players:
                return _lobby_failure(RejectionCode.ROOM_FULL, "Room is full")

            bot_number = sum(1 for p in room.players if p.is_bot) + 1
            bot = Player(
                player_id=f"bot_{uuid.uuid4().hex}",
                nickname=f"Bot {bot_number}",
                color=self._free_color(room),
                is_bot=True,
                is_ready=True,
            )
            self._bot_personalities[bot.player_id] = personality_obj.name.lower()

            new_room = room.with_players(room.players + (bot,))
            self.store.put(new_room)
            logger.info("Bot %s added to room %s", bot.player_id, room_id)
            return ActionResult.success_with_state(
                new_room, changes=[f"{bot.nickname} ({personality_obj.name}) joined"]
            )

    def remove_bot(self, room_id: str, host_id: str, bot_id: str) -> ActionResult:
        """Remove a computer player and reseat the rest."""
        with self.locked(room_id):
            room = self.store.get(room_id)
            if room is None:
                return _lobby_failure(RejectionCode.ROOM_NOT_FOUND, "Room not found")

            if room.phase != GamePhase.WAITING:
                return _lobby_failure(
                    RejectionCode.GAME_ALREADY_STARTED,
                    "Cannot remove bots after game has started",
                )

            if room.host is None or room.host.player_id != host_id:
                return _lobby_failure(RejectionCode.NOT_HOST, "Only the host can remove bots")

            bot = room.get_player(bot_id)
            if bot is None or not bot.is_bot:
                return _lobby_failure(RejectionCode.PLAYER_NOT_FOUND, "Bot not found")

            remaining = tuple(p for p in room.players if p.player_id != bot_id)
            self._bot_personalities.pop(bot_id, None)
            new_room = room.with_players(assign_colors(remaining))
            self.store.put(new_room)
            return ActionResult.success_with_state(new_room, changes=[f"{bot.nickname} removed"])

    def _free_color(self, room: Room) -> PlayerColor:
        taken = {p.color for p in room.players}
        for color in COLOR_ROTATION:
            if color not in taken:
                return color
        return COLOR_ROTATION[room.num_players % len(COLOR_ROTATION)]

    # =========================================================================
    # Game actions
    # =========================================================================

    def start_game(self, room_id: str, player_id: str) -> ActionResult:
        """Start the game (host only)."""
        with self.locked(room_id):
            room = self.store.get(room_id)
            if room is None:
                return _lobby_failure(RejectionCode.ROOM_NOT_FOUND, "Room not found")

            if room.host is None or room.host.player_id != player_id:
                return _lobby_failure(
                    RejectionCode.NOT_HOST, "Only room creator can start the game"
                )

            result = self._apply_locked(room, Action.start_game(player_id))
            if result.success:
                logger.info("Game started in room %s", room_id)
            return result

    def roll_dice(self, room_id: str, player_id: str, value: int | None = None) -> ActionResult:
        return self.apply(room_id, Action.roll(player_id, value))

    def move_token(
        self,
        room_id: str,
        player_id: str,
        token_id: int,
        dice_value: int | None = None,
    ) -> ActionResult:
        return self.apply(room_id, Action.move(player_id, token_id, dice_value))

    def end_turn(self, room_id: str, player_id: str) -> ActionResult:
        return self.apply(room_id, Action.end_turn(player_id))

    def apply(self, room_id: str, action: Action) -> ActionResult:
        """Apply an action atomically to the stored room."""
        with self.locked(room_id):
            room = self.store.get(room_id)
            if room is None:
                return _lobby_failure(RejectionCode.ROOM_NOT_FOUND, "Room not found")
            return self._apply_locked(room, action)

    def _apply_locked(self, room: Room, action: Action) -> ActionResult:
        result = self.reducer.apply(room, action)
        if result.success and result.new_state is not None:
            self.store.put(result.new_state)
            if result.winner_id:
                logger.info("Room %s finished, winner %s", room.room_id, result.winner_id)
        return result

    # =========================================================================
    # Cleanup
    # =========================================================================

    def delete_room(self, room_id: str) -> bool:
        with self.locked(room_id):
            room = self.store.get(room_id)
            deleted = self.store.delete(room_id)
        if room is not None:
            for p in room.players:
                self._bot_personalities.pop(p.player_id, None)
        self._drop_lock(room_id)
        if deleted:
            logger.info("Room %s deleted", room_id)
        return deleted

    def cleanup_stale_rooms(self, max_age_seconds: int = 1800, now: float | None = None) -> list[str]:
        """
        Delete rooms older than max_age that are finished or have no humans.

        Called periodically to free memory.
        """
        current_time = now if now is not None else time.time()
        to_remove = []

        for room in self.list_rooms():
            age = current_time - room.created_at
            has_humans = any(not p.is_bot for p in room.players)
            if age > max_age_seconds and (room.phase == GamePhase.FINISHED or not has_humans):
                to_remove.append(room.room_id)

        for room_id in to_remove:
            self.delete_room(room_id)
        return to_remove
