"""
Action Generator - Lists the legal actions for the player to act.

The action generator is used by:
1. Bots and the game loop to drive computer turns
2. UIs to show available actions
3. Tests (every generated action must be accepted by the reducer)
"""

from __future__ import annotations
from dataclasses import dataclass

from .state import Room, GamePhase
from .action import Action
from .moves import RuleOptions, DEFAULT_RULES, get_valid_moves
from .validators import can_end_turn, can_start_game


@dataclass
class ActionGenerator:
    """
    Generates legal actions for the current room state.
    """
    options: RuleOptions = DEFAULT_RULES

    def generate(self, room: Room) -> list[Action]:
        """
        Generate all legal actions for the current player.

        Returns a list of fully-specified Action objects.
        """
        if room.phase == GamePhase.FINISHED:
            return []

        if room.phase == GamePhase.WAITING:
            if can_start_game(room).valid and room.host:
                return [Action.start_game(room.host.player_id)]
            return []

        player = room.current_player
        if player is None:
            return []

        if not room.has_rolled_dice:
            return [Action.roll(player.player_id)]

        actions = [
            Action.move(player.player_id, token_id, room.dice_value)
            for token_id in get_valid_moves(room.players, player, room.dice_value, self.options)
        ]

        if can_end_turn(room, player.player_id, self.options).valid:
            actions.append(Action.end_turn(player.player_id))

        return actions


def legal_actions(room: Room, options: RuleOptions = DEFAULT_RULES) -> list[Action]:
    """Convenience function to get legal actions."""
    return ActionGenerator(options=options).generate(room)
