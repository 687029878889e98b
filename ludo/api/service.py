"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to room manager calls
2. Converts room snapshots to response models
3. Runs bot steps when the app schedules them

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
Methods return either a response model or an ErrorResponse.
"""

from __future__ import annotations
from dataclasses import asdict, dataclass, field
import uuid

from .schemas import (
    # Requests
    CreateRoomRequest,
    JoinRoomRequest,
    UpdatePlayerRequest,
    AddBotRequest,
    MoveRequest,
    # Responses
    ActionResponse,
    CreateRoomResponse,
    JoinRoomResponse,
    ErrorResponse,
    RoomListResponse,
    RoomResponse,
    RoomSummary,
    ValidMovesResponse,
    # Shared
    MoveInfo,
    MoveRecordInfo,
    PlayerInfo,
    TokenInfo,
)
from ..engine_core.action import ActionResult, RejectionCode
from ..engine_core.moves import get_valid_moves
from ..engine_core.state import Room, GamePhase
from ..session import RoomManager, GameLoop, TurnResult


def _room_not_found() -> ErrorResponse:
    return ErrorResponse(error="Room not found", error_code=RejectionCode.ROOM_NOT_FOUND)


@dataclass
class APIService:
    """
    Main API service for game clients.

    Usage:
        service = APIService()

        created = service.create_room(CreateRoomRequest(nickname="Ana"))
        service.add_bot(created.room_id, AddBotRequest(host_id=created.player_id))
        service.start_game(created.room_id, created.player_id)
        result = service.roll_dice(created.room_id, created.player_id)
    """
    manager: RoomManager = field(default_factory=RoomManager)
    game_loop: GameLoop | None = None

    def __post_init__(self):
        if self.game_loop is None:
            self.game_loop = GameLoop(self.manager)

    # =========================================================================
    # Rooms
    # =========================================================================

    def create_room(self, request: CreateRoomRequest) -> CreateRoomResponse:
        player_id = request.player_id or uuid.uuid4().hex
        room = self.manager.create_room(
            nickname=request.nickname,
            player_id=player_id,
            password=request.password,
        )
        return CreateRoomResponse(
            room_id=room.room_id,
            player_id=player_id,
            room=self.room_to_response(room),
        )

    def list_rooms(self) -> RoomListResponse:
        rooms = [
            RoomSummary(
                room_id=room.room_id,
                phase=room.phase,
                player_count=room.num_players,
                max_players=room.max_players,
                has_password=room.password_hash is not None,
                host_nickname=room.host.nickname if room.host else None,
            )
            for room in sorted(self.manager.list_rooms(), key=lambda r: r.created_at)
        ]
        return RoomListResponse(rooms=rooms, count=len(rooms))

    def get_room(self, room_id: str) -> RoomResponse | ErrorResponse:
        room = self.manager.get_room(room_id)
        if room is None:
            return _room_not_found()
        return self.room_to_response(room)

    def join_room(
        self, room_id: str, request: JoinRoomRequest
    ) -> JoinRoomResponse | ErrorResponse:
        player_id = request.player_id or uuid.uuid4().hex
        result = self.manager.join_room(
            room_id,
            player_id=player_id,
            nickname=request.nickname,
            password=request.password,
        )
        if not result.success:
            return self._error(result)
        return JoinRoomResponse(
            room_id=room_id,
            player_id=player_id,
            room=self.room_to_response(result.new_state),
        )

    def leave_room(self, room_id: str, player_id: str) -> ActionResponse | ErrorResponse:
        return self._to_response(self.manager.leave_room(room_id, player_id))

    def update_player(
        self, room_id: str, player_id: str, request: UpdatePlayerRequest
    ) -> ActionResponse | ErrorResponse:
        return self._to_response(
            self.manager.update_player(
                room_id, player_id, nickname=request.nickname, color=request.color
            )
        )

    def add_bot(self, room_id: str, request: AddBotRequest) -> ActionResponse | ErrorResponse:
        try:
            result = self.manager.add_bot(room_id, request.host_id, request.personality)
        except ValueError as e:
            return ErrorResponse(error=str(e), error_code=RejectionCode.INVALID_ACTION)
        return self._to_response(result)

    def remove_bot(
        self, room_id: str, host_id: str, bot_id: str
    ) -> ActionResponse | ErrorResponse:
        return self._to_response(self.manager.remove_bot(room_id, host_id, bot_id))

    # =========================================================================
    # Game actions
    # =========================================================================

    def start_game(self, room_id: str, player_id: str) -> ActionResponse | ErrorResponse:
        return self._to_response(self.manager.start_game(room_id, player_id))

    def roll_dice(self, room_id: str, player_id: str) -> ActionResponse | ErrorResponse:
        return self._to_response(self.manager.roll_dice(room_id, player_id))

    def move_token(self, room_id: str, request: MoveRequest) -> ActionResponse | ErrorResponse:
        return self._to_response(
            self.manager.move_token(
                room_id, request.player_id, request.token_id, request.dice_value
            )
        )

    def end_turn(self, room_id: str, player_id: str) -> ActionResponse | ErrorResponse:
        return self._to_response(self.manager.end_turn(room_id, player_id))

    def valid_moves(self, room_id: str, player_id: str) -> ValidMovesResponse | ErrorResponse:
        """
        Tokens the player may move right now.

        Empty unless it is the player's turn and they have rolled.
        """
        room = self.manager.get_room(room_id)
        if room is None:
            return _room_not_found()

        player = room.get_player(player_id)
        if player is None:
            return ErrorResponse(
                error="Player not found", error_code=RejectionCode.PLAYER_NOT_FOUND
            )

        moves: list[int] = []
        current = room.current_player
        if (
            room.phase == GamePhase.PLAYING
            and room.has_rolled_dice
            and current is not None
            and current.player_id == player_id
        ):
            moves = get_valid_moves(room.players, player, room.dice_value, self.manager.options)

        return ValidMovesResponse(
            room_id=room_id,
            player_id=player_id,
            dice_value=room.dice_value,
            valid_moves=moves,
        )

    def run_bot_turn(self, room_id: str) -> TurnResult:
        """One scheduled bot step."""
        return self.game_loop.run_bot_turn(room_id)

    def cleanup_stale_rooms(self, max_age_seconds: int = 1800) -> list[str]:
        return self.manager.cleanup_stale_rooms(max_age_seconds)

    # =========================================================================
    # Conversion helpers
    # =========================================================================

    def _error(self, result: ActionResult) -> ErrorResponse:
        return ErrorResponse(
            error=result.error or "Action rejected",
            error_code=result.error_code or RejectionCode.INVALID_ACTION,
        )

    def _to_response(self, result: ActionResult) -> ActionResponse | ErrorResponse:
        if not result.success:
            return self._error(result)

        return ActionResponse(
            success=True,
            room=self.room_to_response(result.new_state) if result.new_state else None,
            dice_value=result.dice_value,
            busted=result.busted,
            valid_moves=result.valid_moves,
            no_legal_moves=result.no_legal_moves,
            move=MoveInfo(**asdict(result.move)) if result.move else None,
            captured=result.captured,
            winner_id=result.winner_id,
            state_changes=result.state_changes,
            pending_bot_action=result.pending_bot_action,
        )

    def room_to_response(self, room: Room) -> RoomResponse:
        current = room.current_player if room.phase == GamePhase.PLAYING else None
        host_id = room.host.player_id if room.host else None

        return RoomResponse(
            room_id=room.room_id,
            phase=room.phase,
            players=[
                PlayerInfo(
                    player_id=p.player_id,
                    nickname=p.nickname,
                    color=p.color,
                    is_bot=p.is_bot,
                    is_ready=p.is_ready,
                    is_host=p.player_id == host_id,
                    is_current_turn=current is not None and current.player_id == p.player_id,
                    finished_count=p.finished_count,
                    tokens=[
                        TokenInfo(
                            id=t.id,
                            position=t.position,
                            is_home=t.is_home,
                            is_finished=t.is_finished,
                        )
                        for t in p.tokens
                    ],
                )
                for p in room.players
            ],
            current_player_index=room.current_player_index,
            current_player_id=current.player_id if current else None,
            dice_value=room.dice_value,
            has_rolled_dice=room.has_rolled_dice,
            consecutive_sixes=room.consecutive_sixes,
            winner_id=room.winner_id,
            max_players=room.max_players,
            has_password=room.password_hash is not None,
            last_move=MoveInfo(**asdict(room.last_move)) if room.last_move else None,
            move_history=[MoveRecordInfo(**asdict(r)) for r in room.move_history],
            created_at=room.created_at,
        )
