"""
Game Loop - Drives computer players one step at a time.

A bot step:
1. Confirm it is still a bot's turn in a playing room
2. Roll, unless the bot already rolled
3. Ask the bot policy for a token among the engine's valid moves
4. Move it, or end the turn when nothing can move

Each step runs under the room lock, so a late or duplicate trigger
finds the turn already taken and does nothing.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import TYPE_CHECKING

from ..engine_core.state import GamePhase, Room

if TYPE_CHECKING:
    from .manager import RoomManager

logger = logging.getLogger(__name__)


class LoopState(Enum):
    """State of the room after a step."""
    BOT_TURN = "bot_turn"
    WAITING_HUMAN_ACTION = "waiting_human_action"
    NOT_PLAYING = "not_playing"
    GAME_OVER = "game_over"


@dataclass
class TurnResult:
    """
    Result of one or more bot steps.
    """
    success: bool
    loop_state: LoopState

    # Human-readable log of what the bots did
    actions: list[str] = field(default_factory=list)

    errors: list[str] = field(default_factory=list)

    # Another bot step should be scheduled
    pending_bot_action: bool = False

    winner: str | None = None
    room: Room | None = None


def _loop_state(room: Room) -> LoopState:
    if room.phase == GamePhase.FINISHED:
        return LoopState.GAME_OVER
    if room.phase != GamePhase.PLAYING:
        return LoopState.NOT_PLAYING
    current = room.current_player
    if current is not None and current.is_bot:
        return LoopState.BOT_TURN
    return LoopState.WAITING_HUMAN_ACTION


class GameLoop:
    """
    Runs bot turns on rooms held by a RoomManager.

    Usage:
        loop = GameLoop(manager)
        result = loop.run_bot_turn(room_id)
        if result.pending_bot_action:
            # schedule another step
            ...
    """

    def __init__(self, manager: RoomManager):
        self.manager = manager

    def run_bot_turn(self, room_id: str) -> TurnResult:
        """
        Take one bot step: a roll followed by a move or end of turn.

        A bust ends the step right after the roll.
        """
        with self.manager.locked(room_id):
            room = self.manager.get_room(room_id)
            if room is None:
                return TurnResult(
                    success=False,
                    loop_state=LoopState.NOT_PLAYING,
                    errors=["Room not found"],
                )

            state = _loop_state(room)
            if state != LoopState.BOT_TURN:
                return TurnResult(
                    success=True,
                    loop_state=state,
                    winner=room.winner_id,
                    room=room,
                )

            bot = room.current_player
            actions: list[str] = []

            if not room.has_rolled_dice:
                roll = self.manager.roll_dice(room_id, bot.player_id)
                if not roll.success:
                    return self._failed(room, roll.error, actions)
                actions.extend(roll.state_changes)
                room = roll.new_state
                if roll.busted:
                    return self._finished_step(room, actions)

            decision = self.manager.bot_policy(bot.player_id).select_move(
                room, bot, room.dice_value
            )

            if decision.has_move:
                result = self.manager.move_token(
                    room_id, bot.player_id, decision.token_id, room.dice_value
                )
            else:
                result = self.manager.end_turn(room_id, bot.player_id)

            if not result.success:
                return self._failed(room, result.error, actions)

            actions.extend(result.state_changes)
            logger.debug("Bot %s in room %s: %s", bot.player_id, room_id, decision.explanation)
            return self._finished_step(result.new_state, actions)

    def run_until_human(self, room_id: str, max_steps: int = 10_000) -> TurnResult:
        """
        Run bot steps until a human must act or the game ends.

        max_steps is a safety limit for bots-only rooms.
        """
        all_actions: list[str] = []
        result = self.run_bot_turn(room_id)
        all_actions.extend(result.actions)
        steps = 1

        while result.success and result.pending_bot_action and steps < max_steps:
            result = self.run_bot_turn(room_id)
            all_actions.extend(result.actions)
            steps += 1

        result.actions = all_actions
        return result

    def _finished_step(self, room: Room, actions: list[str]) -> TurnResult:
        state = _loop_state(room)
        return TurnResult(
            success=True,
            loop_state=state,
            actions=actions,
            pending_bot_action=state == LoopState.BOT_TURN,
            winner=room.winner_id,
            room=room,
        )

    def _failed(self, room: Room, error: str | None, actions: list[str]) -> TurnResult:
        # Valid moves come from the engine, so this means a broken snapshot
        logger.error("Bot step failed in room %s: %s", room.room_id, error)
        return TurnResult(
            success=False,
            loop_state=_loop_state(room),
            actions=actions,
            errors=[error or "Bot action rejected"],
            room=room,
        )
