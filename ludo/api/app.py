"""
FastAPI Application - REST API for Ludo clients.

Endpoints:
    POST   /api/v1/rooms                          Create a room
    GET    /api/v1/rooms                          List rooms
    GET    /api/v1/rooms/{id}                     Get room snapshot
    POST   /api/v1/rooms/{id}/join                Join a waiting room
    POST   /api/v1/rooms/{id}/leave               Leave a room
    PATCH  /api/v1/rooms/{id}/players/{pid}       Change nickname or color
    POST   /api/v1/rooms/{id}/bots                Add a bot (host)
    DELETE /api/v1/rooms/{id}/bots/{bot_id}       Remove a bot (host)
    POST   /api/v1/rooms/{id}/start               Start the game (host)
    POST   /api/v1/rooms/{id}/roll                Roll the die
    POST   /api/v1/rooms/{id}/move                Move a token
    POST   /api/v1/rooms/{id}/end-turn            End the turn without moving
    GET    /api/v1/rooms/{id}/valid-moves         Movable tokens for a player

Bot Flow:
    Every action response carries `pending_bot_action`. When it is true
    the app schedules a background task that waits LUDO_BOT_DELAY seconds
    and runs bot steps until a human is to act or the game ends.

    Room endpoints are plain functions run in the threadpool, as are bot
    steps. The event loop never hashes passwords or waits on room locks.

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Optional, Union
import asyncio
import logging
import os

from fastapi import BackgroundTasks, FastAPI, Query
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..engine_core.action import RejectionCode
from ..engine_core.moves import RuleOptions
from ..session import RoomManager
from .service import APIService
from .schemas import (
    # Request models
    CreateRoomRequest,
    JoinRoomRequest,
    PlayerActionRequest,
    UpdatePlayerRequest,
    AddBotRequest,
    MoveRequest,
    # Response models
    ActionResponse,
    CreateRoomResponse,
    JoinRoomResponse,
    ErrorResponse,
    HealthResponse,
    RoomListResponse,
    RoomResponse,
    ValidMovesResponse,
)

logger = logging.getLogger(__name__)

# Environment configuration
LUDO_ENV = os.getenv("LUDO_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
LUDO_BOT_DELAY = float(os.getenv("LUDO_BOT_DELAY", "1.0"))
LUDO_LOG_LEVEL = os.getenv("LUDO_LOG_LEVEL", "INFO")
LUDO_BLOCKING_RULES = os.getenv("LUDO_BLOCKING_RULES", "1") not in ("0", "false", "no")


def configure_logging(level: str = LUDO_LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(service: Optional[APIService] = None, bot_delay: Optional[float] = None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)
        bot_delay: Seconds before each scheduled bot step (LUDO_BOT_DELAY by default)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Ludo Engine API",
        description="""
Multiplayer Ludo with computer opponents.

## Turn Flow

1. `POST /roll` - the response lists `valid_moves`
2. `POST /move` with one of them, or `POST /end-turn` when `no_legal_moves`
3. A 6 grants another roll; a third 6 in a row loses the turn

## Error Codes

| Code | Description |
|------|-------------|
| `ROOM_NOT_FOUND` | Room does not exist |
| `NOT_YOUR_TURN` | Another player is to act |
| `MUST_ROLL_FIRST` | Roll before moving or ending the turn |
| `ALREADY_ROLLED` | Move before rolling again |
| `STALE_DICE_VALUE` | Client dice value does not match the room |
| `ILLEGAL_MOVE` | Token cannot move with this roll |
| `MUST_MOVE_ON_SIX` | A 6 with a legal move must be played |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService(
        manager=RoomManager(options=RuleOptions(blocking=LUDO_BLOCKING_RULES))
    )
    delay = LUDO_BOT_DELAY if bot_delay is None else bot_delay

    # =========================================================================
    # Helpers
    # =========================================================================

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Create a standardized error response."""
        status_code = 404 if error.error_code == RejectionCode.ROOM_NOT_FOUND else 400
        return JSONResponse(status_code=status_code, content=error.model_dump(mode="json"))

    async def drive_bots(room_id: str) -> None:
        """Run bot steps until a human is to act."""
        while True:
            if delay > 0:
                await asyncio.sleep(delay)
            result = await run_in_threadpool(api_service.run_bot_turn, room_id)
            if not result.success:
                logger.warning("Bot driver stopped in room %s: %s", room_id, result.errors)
                return
            if not result.pending_bot_action:
                return

    def respond(response, room_id: str, background_tasks: Optional[BackgroundTasks] = None):
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        if background_tasks is not None and getattr(response, "pending_bot_action", False):
            background_tasks.add_task(drive_bots, room_id)
        return response

    # =========================================================================
    # Room Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/rooms",
        response_model=CreateRoomResponse,
        status_code=201,
        tags=["Rooms"],
        summary="Create a room",
    )
    def create_room(request: CreateRoomRequest) -> CreateRoomResponse:
        """Create a room. The caller becomes host and takes the first seat."""
        return api_service.create_room(request)

    @app.get(
        "/api/v1/rooms",
        response_model=RoomListResponse,
        tags=["Rooms"],
        summary="List rooms",
    )
    def list_rooms() -> RoomListResponse:
        return api_service.list_rooms()

    @app.get(
        "/api/v1/rooms/{room_id}",
        response_model=RoomResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Rooms"],
        summary="Get room snapshot",
    )
    def get_room(room_id: str) -> Union[RoomResponse, JSONResponse]:
        return respond(api_service.get_room(room_id), room_id)

    @app.post(
        "/api/v1/rooms/{room_id}/join",
        response_model=JoinRoomResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Rooms"],
        summary="Join a waiting room",
    )
    def join_room(
        room_id: str, request: JoinRoomRequest
    ) -> Union[JoinRoomResponse, JSONResponse]:
        return respond(api_service.join_room(room_id, request), room_id)

    @app.post(
        "/api/v1/rooms/{room_id}/leave",
        response_model=ActionResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Rooms"],
        summary="Leave a room",
    )
    def leave_room(
        room_id: str, request: PlayerActionRequest, background_tasks: BackgroundTasks
    ) -> Union[ActionResponse, JSONResponse]:
        """Leave a room. The last player out closes it."""
        return respond(
            api_service.leave_room(room_id, request.player_id), room_id, background_tasks
        )

    @app.patch(
        "/api/v1/rooms/{room_id}/players/{player_id}",
        response_model=ActionResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Rooms"],
        summary="Change nickname or color",
    )
    def update_player(
        room_id: str, player_id: str, request: UpdatePlayerRequest
    ) -> Union[ActionResponse, JSONResponse]:
        return respond(api_service.update_player(room_id, player_id, request), room_id)

    @app.post(
        "/api/v1/rooms/{room_id}/bots",
        response_model=ActionResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Bots"],
        summary="Add a bot",
    )
    def add_bot(
        room_id: str, request: AddBotRequest
    ) -> Union[ActionResponse, JSONResponse]:
        return respond(api_service.add_bot(room_id, request), room_id)

    @app.delete(
        "/api/v1/rooms/{room_id}/bots/{bot_id}",
        response_model=ActionResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Bots"],
        summary="Remove a bot",
    )
    def remove_bot(
        room_id: str,
        bot_id: str,
        host_id: str = Query(..., description="Room host"),
    ) -> Union[ActionResponse, JSONResponse]:
        return respond(api_service.remove_bot(room_id, host_id, bot_id), room_id)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/rooms/{room_id}/start",
        response_model=ActionResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Start the game",
    )
    def start_game(
        room_id: str, request: PlayerActionRequest, background_tasks: BackgroundTasks
    ) -> Union[ActionResponse, JSONResponse]:
        return respond(
            api_service.start_game(room_id, request.player_id), room_id, background_tasks
        )

    @app.post(
        "/api/v1/rooms/{room_id}/roll",
        response_model=ActionResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Roll the die",
    )
    def roll_dice(
        room_id: str, request: PlayerActionRequest, background_tasks: BackgroundTasks
    ) -> Union[ActionResponse, JSONResponse]:
        """
        Roll the die.

        A third consecutive 6 busts: the response has `busted=true`
        and the turn has already passed.
        """
        return respond(
            api_service.roll_dice(room_id, request.player_id), room_id, background_tasks
        )

    @app.post(
        "/api/v1/rooms/{room_id}/move",
        response_model=ActionResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Move a token",
    )
    def move_token(
        room_id: str, request: MoveRequest, background_tasks: BackgroundTasks
    ) -> Union[ActionResponse, JSONResponse]:
        return respond(api_service.move_token(room_id, request), room_id, background_tasks)

    @app.post(
        "/api/v1/rooms/{room_id}/end-turn",
        response_model=ActionResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="End the turn without moving",
    )
    def end_turn(
        room_id: str, request: PlayerActionRequest, background_tasks: BackgroundTasks
    ) -> Union[ActionResponse, JSONResponse]:
        return respond(
            api_service.end_turn(room_id, request.player_id), room_id, background_tasks
        )

    @app.get(
        "/api/v1/rooms/{room_id}/valid-moves",
        response_model=ValidMovesResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Movable tokens for a player",
    )
    def valid_moves(
        room_id: str,
        player_id: str = Query(..., description="Player to check"),
    ) -> Union[ValidMovesResponse, JSONResponse]:
        return respond(api_service.valid_moves(room_id, player_id), room_id)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="ludo-engine",
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Ludo Engine API",
            "version": __version__,
            "environment": LUDO_ENV,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn ludo.api.app:app
app = create_app()
