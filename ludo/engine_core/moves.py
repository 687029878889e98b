"""
Move Engine - Movement, blocking, capture and win rules.

All functions are pure: they read a roster snapshot and return new
values. Nothing here mutates a Player or Room in place.

Rules implemented:
- A token leaves base only on a 6, onto its colour's start square
- Tokens divert into their private home column after a full lap
- The finish must be reached exactly; overshooting is illegal
- Two or more tokens of one player on a track square form a block,
  which opponents can neither land on nor pass, and cannot capture
- Own tokens cannot be jumped inside the home column
- Landing on a lone opponent token off a safe zone sends it to base
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Sequence

from .board import (
    BOARD_SIZE,
    HOME_COLUMN_SIZE,
    HOME_COLUMN_START,
    FINISH_POSITION,
    BASE_POSITION,
    COLOR_ROTATION,
    START_POSITIONS,
    HOME_ENTRY,
    PlayerColor,
    is_on_track,
    is_safe_zone,
    distance_from_start,
)
from .state import Player, Token


@dataclass(frozen=True)
class RuleOptions:
    """
    Optional rule features.

    With blocking disabled, stacked tokens neither obstruct nor protect,
    and own tokens may be jumped in the home column.
    """
    blocking: bool = True


DEFAULT_RULES = RuleOptions()


@dataclass(frozen=True)
class BlockInfo:
    blocked: bool
    blocking_player_id: str | None = None


@dataclass(frozen=True)
class MoveOutcome:
    """Result of a successful move_token call."""
    updated_player: Player
    updated_players: tuple[Player, ...]
    captured: bool
    from_position: int
    to_position: int
    captured_player_id: str | None = None

    @property
    def finished(self) -> bool:
        return self.to_position == FINISH_POSITION


def _landing_in_home_column(home_offset: int) -> int | None:
    # Exact landing on the last square is the finish; past it is illegal
    if home_offset <= HOME_COLUMN_SIZE - 1:
        return HOME_COLUMN_START + home_offset
    return None


def compute_destination(
    color: PlayerColor,
    current_position: int,
    steps: int,
) -> int | None:
    """
    Position a token reaches after `steps`, or None if the move is illegal.
    """
    if current_position == BASE_POSITION:
        return START_POSITIONS[color] if steps == 6 else None

    if current_position >= FINISH_POSITION:
        return None

    if current_position >= HOME_COLUMN_START:
        return _landing_in_home_column(current_position - HOME_COLUMN_START + steps)

    travelled = distance_from_start(color, current_position)
    home_entry_distance = (HOME_ENTRY[color] - START_POSITIONS[color]) % BOARD_SIZE

    if travelled + steps > home_entry_distance:
        steps_into_home = travelled + steps - home_entry_distance - 1
        return _landing_in_home_column(steps_into_home)

    return (current_position + steps) % BOARD_SIZE


def has_block(
    players: Sequence[Player],
    position: int,
    exclude_player_id: str | None = None,
) -> BlockInfo:
    """Check whether any player holds 2+ tokens on a track square."""
    if not is_on_track(position):
        return BlockInfo(blocked=False)

    for player in players:
        if exclude_player_id is not None and player.player_id == exclude_player_id:
            continue
        count = sum(1 for t in player.tokens if t.position == position)
        if count >= 2:
            return BlockInfo(blocked=True, blocking_player_id=player.player_id)

    return BlockInfo(blocked=False)


def _opponent_block_at(players: Sequence[Player], player: Player, position: int) -> bool:
    return has_block(players, position, exclude_player_id=player.player_id).blocked


def _track_squares(color: PlayerColor, from_pos: int, to_pos: int) -> Iterable[int]:
    """Track squares stepped on after `from_pos`, up to `to_pos` or the home column."""
    if to_pos >= HOME_COLUMN_START:
        steps = (HOME_ENTRY[color] - from_pos) % BOARD_SIZE
    else:
        steps = (to_pos - from_pos) % BOARD_SIZE
    for i in range(1, steps + 1):
        yield (from_pos + i) % BOARD_SIZE


def is_path_blocked(
    players: Sequence[Player],
    player: Player,
    from_pos: int,
    to_pos: int,
) -> bool:
    """
    True if an opponent block sits on any square the move passes or lands on.

    Own blocks never obstruct. Only track squares are checked; the walk
    stops where the token turns into its home column.
    """
    if not is_on_track(from_pos):
        return False

    for square in _track_squares(player.color, from_pos, to_pos):
        if _opponent_block_at(players, player, square):
            return True
    return False


def would_jump_own_token(
    player: Player,
    token_id: int,
    from_pos: int,
    to_pos: int,
) -> bool:
    """
    True if another own token sits in the home column strictly between
    `from_pos` and `to_pos`.

    `from_pos` may be HOME_COLUMN_START - 1 for a token entering the
    column from the track.
    """
    if to_pos < HOME_COLUMN_START:
        return False

    for token in player.tokens:
        if token.id == token_id or token.is_finished:
            continue
        if from_pos < token.position < to_pos and token.position >= HOME_COLUMN_START:
            return True
    return False


def _is_valid_board_move(
    players: Sequence[Player],
    player: Player,
    token: Token,
    destination: int,
    options: RuleOptions,
) -> bool:
    if not options.blocking:
        return True

    if token.on_track:
        if is_path_blocked(players, player, token.position, destination):
            return False
        if destination >= HOME_COLUMN_START:
            return not would_jump_own_token(
                player, token.id, HOME_COLUMN_START - 1, destination
            )
        return True

    return not would_jump_own_token(player, token.id, token.position, destination)


def get_valid_moves(
    players: Sequence[Player],
    player: Player,
    dice_value: int,
    options: RuleOptions = DEFAULT_RULES,
) -> list[int]:
    """
    Token ids the player may move with this roll, in token order.

    An empty list means no legal action this roll.
    """
    valid: list[int] = []

    base_released = False
    if dice_value == 6:
        start = START_POSITIONS[player.color]
        base_released = not (options.blocking and _opponent_block_at(players, player, start))

    for token in player.tokens:
        if token.is_finished:
            continue

        if token.is_home:
            if base_released:
                valid.append(token.id)
            continue

        destination = compute_destination(player.color, token.position, dice_value)
        if destination is None:
            continue

        if _is_valid_board_move(players, player, token, destination, options):
            valid.append(token.id)

    return valid


def capture_targets(
    players: Sequence[Player],
    player: Player,
    position: int,
    options: RuleOptions = DEFAULT_RULES,
) -> list[tuple[str, int]]:
    """
    Opponent tokens that landing on `position` would send back to base.

    Returns (player_id, token_id) pairs. Empty in the home column, on safe
    zones, and against a block.
    """
    if not is_on_track(position) or is_safe_zone(position):
        return []

    if options.blocking and _opponent_block_at(players, player, position):
        return []

    targets = []
    for other in players:
        if other.player_id == player.player_id:
            continue
        for token in other.tokens:
            if token.position == position:
                targets.append((other.player_id, token.id))
    return targets


def move_token(
    players: Sequence[Player],
    player: Player,
    token_id: int,
    dice_value: int,
    options: RuleOptions = DEFAULT_RULES,
) -> MoveOutcome | None:
    """
    Apply a move and any capture it causes.

    Returns None if `token_id` is not among the valid moves.
    """
    token = player.get_token(token_id)
    if token is None:
        return None

    if token_id not in get_valid_moves(players, player, dice_value, options):
        return None

    destination = compute_destination(player.color, token.position, dice_value)
    if destination is None:
        return None

    targets = capture_targets(players, player, destination, options)
    captured_ids: dict[str, set[int]] = {}
    for pid, tid in targets:
        captured_ids.setdefault(pid, set()).add(tid)

    updated_player = player.with_token(token.moved_to(destination))

    updated_players = []
    for p in players:
        if p.player_id == player.player_id:
            updated_players.append(updated_player)
        elif p.player_id in captured_ids:
            hit = captured_ids[p.player_id]
            updated_players.append(p.with_tokens(tuple(
                t.moved_to(BASE_POSITION) if t.id in hit else t
                for t in p.tokens
            )))
        else:
            updated_players.append(p)

    return MoveOutcome(
        updated_player=updated_player,
        updated_players=tuple(updated_players),
        captured=bool(targets),
        from_position=token.position,
        to_position=destination,
        captured_player_id=targets[0][0] if targets else None,
    )


def check_win(player: Player) -> bool:
    """True once all of a player's tokens are finished."""
    return bool(player.tokens) and all(t.is_finished for t in player.tokens)


def assign_colors(players: Sequence[Player]) -> tuple[Player, ...]:
    """Recolor players by seat order using the canonical rotation."""
    return tuple(
        p._copy_with(color=COLOR_ROTATION[i % len(COLOR_ROTATION)])
        for i, p in enumerate(players)
    )
