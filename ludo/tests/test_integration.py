"""
Integration tests - Full games from start to finish.

Tests:
- Seeded bot games under both rule sets, checking invariants every step
- CLI simulation
"""

import random

import pytest

from ..engine_core.action import Action, ActionType
from ..engine_core.board import PlayerColor, FINISH_POSITION, BASE_POSITION, COLOR_ROTATION
from ..engine_core.moves import RuleOptions, get_valid_moves
from ..engine_core.reducer import Reducer
from ..engine_core.state import Room, Player, GamePhase
from ..bots import LudoBot
from ..cli import main


def _lobby(num_players: int) -> Room:
    players = tuple(
        Player(
            player_id=f"bot{i}",
            nickname=f"Bot {i}",
            color=COLOR_ROTATION[i],
            is_bot=True,
        )
        for i in range(num_players)
    )
    return Room(room_id="SIM001", players=players)


def _check_invariants(room: Room, options: RuleOptions) -> None:
    for player in room.players:
        for token in player.tokens:
            assert not (token.is_home and token.is_finished)
            assert BASE_POSITION <= token.position <= FINISH_POSITION
            if token.is_finished:
                assert token.position == FINISH_POSITION
        for dice_value in range(1, 7):
            moves = get_valid_moves(room.players, player, dice_value, options)
            assert moves == sorted(set(moves))
            assert all(not player.get_token(t).is_finished for t in moves)
    assert room.consecutive_sixes < 3


def play_game(num_players: int, seed: int, options: RuleOptions, max_steps: int = 20_000):
    """Drive a bots-only game with the reducer directly."""
    reducer = Reducer(options=options, rng=random.Random(seed), clock=lambda: 0.0)
    bot = LudoBot(options=options)

    result = reducer.apply(_lobby(num_players), Action.start_game("bot0"))
    assert result.success
    room = result.new_state
    moves_applied = 0

    for _ in range(max_steps):
        if room.phase == GamePhase.FINISHED:
            break
        player = room.current_player

        roll = reducer.apply(room, Action.roll(player.player_id))
        assert roll.success
        room = roll.new_state
        if roll.busted:
            continue

        decision = bot.select_move(room, player, room.dice_value)
        if decision.has_move:
            assert decision.token_id in roll.valid_moves
            action = Action.move(player.player_id, decision.token_id, room.dice_value)
        else:
            assert roll.no_legal_moves
            action = Action.end_turn(player.player_id)

        result = reducer.apply(room, action)
        assert result.success, result.error
        if action.action_type == ActionType.MOVE_TOKEN:
            moves_applied += 1
            assert len(result.new_state.move_history) == moves_applied
        room = result.new_state
        _check_invariants(room, options)

    return room


class TestFullGame:
    """Seeded bots-only games."""

    @pytest.mark.parametrize("num_players,seed", [(2, 1), (3, 5), (4, 11)])
    def test_game_finishes(self, num_players, seed):
        """Games end with exactly one winner holding four finished tokens."""
        room = play_game(num_players, seed, RuleOptions())

        assert room.phase == GamePhase.FINISHED
        winner = room.get_player(room.winner_id)
        assert winner is not None
        assert winner.finished_count == 4
        others = [p for p in room.players if p.player_id != winner.player_id]
        assert all(p.finished_count < 4 for p in others)

    def test_game_without_blocking(self):
        """The simpler ruleset also plays to completion."""
        room = play_game(4, 3, RuleOptions(blocking=False))
        assert room.phase == GamePhase.FINISHED

    def test_same_seed_same_game(self):
        """Seeded games are reproducible."""
        first = play_game(2, 21, RuleOptions())
        second = play_game(2, 21, RuleOptions())
        assert first.winner_id == second.winner_id
        assert first.move_history == second.move_history

    def test_colors_follow_rotation(self):
        """Seats keep the rotation colors through the game."""
        room = play_game(4, 2, RuleOptions())
        assert [p.color for p in room.players] == [
            PlayerColor.RED, PlayerColor.GREEN, PlayerColor.YELLOW, PlayerColor.BLUE
        ]


class TestCLI:
    """Tests for the command-line interface."""

    def test_simulate(self, capsys):
        """simulate plays to a winner."""
        exit_code = main(["simulate", "--players", "2", "--seed", "4", "--quiet"])

        assert exit_code == 0
        assert "Winner:" in capsys.readouterr().out

    def test_simulate_bad_player_count(self, capsys):
        """Player counts outside 2-4 are refused."""
        assert main(["simulate", "--players", "5"]) == 1
        assert "between" in capsys.readouterr().out

    def test_simulate_unknown_personality(self, capsys):
        """Unknown personalities are refused before any seat is set up."""
        assert main(["simulate", "--personality", "reckless"]) == 1
        assert "Unknown personality" in capsys.readouterr().out

    def test_no_command(self, capsys):
        """No command prints help."""
        assert main([]) == 1
