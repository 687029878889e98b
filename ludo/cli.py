"""
Ludo CLI - Command-line interface for the engine.

Usage:
    ludo simulate --players 4 --seed 7     Play a bots-only game
    ludo serve --port 8000                 Run the HTTP API
"""

import argparse
import random
import sys


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Ludo - Multiplayer Ludo engine with bots",
        prog="ludo",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Play a bots-only game")
    simulate_parser.add_argument("--players", type=int, default=4, help="Number of bots (2-4)")
    simulate_parser.add_argument("--seed", type=int, default=None, help="Dice seed")
    simulate_parser.add_argument(
        "--personality", default=None, help="balanced, aggressive or runner"
    )
    simulate_parser.add_argument(
        "--no-blocking", action="store_true", help="Play without blocks"
    )
    simulate_parser.add_argument(
        "--quiet", "-q", action="store_true", help="Only print the winner"
    )

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")

    args = parser.parse_args(argv)

    if args.command == "simulate":
        return cmd_simulate(args)
    elif args.command == "serve":
        return cmd_serve(args)
    else:
        parser.print_help()
        return 1


def cmd_simulate(args):
    """Play a bots-only game to completion."""
    from .engine_core import Reducer, RuleOptions
    from .engine_core.board import MIN_PLAYERS, MAX_PLAYERS
    from .session import RoomManager, GameLoop

    if not MIN_PLAYERS <= args.players <= MAX_PLAYERS:
        print(f"Error: --players must be between {MIN_PLAYERS} and {MAX_PLAYERS}")
        return 1

    options = RuleOptions(blocking=not args.no_blocking)
    manager = RoomManager(
        options=options,
        reducer=Reducer(options=options, rng=random.Random(args.seed)),
    )

    host_id = "bot_host"
    try:
        room = manager.create_room("Bot 1", host_id, is_bot=True, personality=args.personality)
        for _ in range(args.players - 1):
            manager.add_bot(room.room_id, host_id, args.personality)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    started = manager.start_game(room.room_id, host_id)
    if not started.success:
        print(f"Error: {started.error}")
        return 1

    result = GameLoop(manager).run_until_human(room.room_id)
    final = manager.get_room(room.room_id)

    if not args.quiet:
        for line in result.actions:
            print(line)
        print()

    if result.winner is None:
        print(f"No winner after {len(final.move_history)} moves")
        return 1

    winner = final.get_player(result.winner)
    print(f"Winner: {winner.nickname} ({winner.color.value}) after {len(final.move_history)} moves")
    return 0


def cmd_serve(args):
    """Run the API with uvicorn."""
    import uvicorn
    from .api.app import configure_logging

    configure_logging()
    uvicorn.run("ludo.api.app:app", host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
