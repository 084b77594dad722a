#!/usr/bin/env python3
"""
Minefield - Main entry point.

Usage:
    python main.py play [--preset NAME | --width W --height H --mines N]
    python main.py generate [--seed S]
    python main.py simulate [--games N] [--seed S]
"""
import argparse
import logging
import time

import numpy as np

from src.minefield import (
    PRESETS,
    BoardConfig,
    BoardGenerator,
    Chord,
    GameSession,
    GameStatus,
    MinefieldEnv,
    MinefieldError,
    Reveal,
    ToggleFlag,
    count_reachable,
)


COMMANDS = {"r": Reveal, "f": ToggleFlag, "c": Chord}


def build_config(args: argparse.Namespace) -> BoardConfig:
    """Board configuration from --preset or explicit dimensions."""
    if args.preset:
        return PRESETS[args.preset]
    return BoardConfig(args.width, args.height, args.mines)


def print_status(session: GameSession) -> None:
    board = session.board
    print(board.render(show_mines=not board.is_playing))
    print(
        f"\nStatus: {board.status.name} | "
        f"Mines left: {session.remaining_mines} | "
        f"Time: {session.elapsed:.0f}s"
    )


def play(args: argparse.Namespace) -> None:
    """Play a game in the terminal."""
    session = GameSession(
        build_config(args), generator=BoardGenerator(seed=args.seed)
    )
    print("Commands: r X Z (reveal), f X Z (flag), c X Z (chord), n (new), q (quit)")
    print(f"Start cell: {session.board.start_cell}\n")
    print_status(session)

    while True:
        try:
            line = input("> ").strip().lower()
        except EOFError:
            break
        if not line:
            continue
        if line == "q":
            break
        if line == "n":
            session.restart()
            print(f"Start cell: {session.board.start_cell}\n")
            print_status(session)
            continue

        parts = line.split()
        if len(parts) != 3 or parts[0] not in COMMANDS:
            print("Unknown command")
            continue
        try:
            command = COMMANDS[parts[0]](int(parts[1]), int(parts[2]))
            result = session.apply(command)
        except ValueError:
            print("Coordinates must be integers")
            continue
        except MinefieldError as error:
            print(error)
            continue

        print_status(session)
        if result.status_changed:
            if result.status == GameStatus.WON:
                print(f"\n*** CLEARED in {session.elapsed:.1f}s ***")
            else:
                print(f"\n*** BOOM at {result.detonated_mine} ***")
                print(f"Missed mines: {len(session.board.missed_mines())}")
                print(f"Incorrect flags: {len(session.board.incorrect_flags())}")
            print("Type n for a new game or q to quit")


def generate(args: argparse.Namespace) -> None:
    """Generate one board and print it with its mines."""
    config = build_config(args)
    generator = BoardGenerator(seed=args.seed, max_attempts=args.attempts)
    board = generator.generate(config)

    print(board.render(show_mines=True))
    print(f"\nSize: {config.width}x{config.height} | Mines: {config.mine_count}")
    print(f"Start cell: {board.start_cell}")
    print(
        f"Reachable safe cells: {count_reachable(board, board.start_cell)}"
        f"/{config.total_safe}"
    )
    print(f"Opened: {board.revealed_count()} cells")


def simulate(args: argparse.Namespace) -> None:
    """Play random games through the environment and report outcomes."""
    config = build_config(args)
    env = MinefieldEnv(
        config=config, max_attempts=args.attempts, max_steps=args.max_steps
    )
    rng = np.random.default_rng(args.seed)

    wins = 0
    total_steps = 0
    total_revealed = 0
    start_time = time.time()

    for game in range(args.games):
        seed = None if args.seed is None else args.seed + game
        _, info = env.reset(seed=seed)
        done = info["game_state"] != "PLAYING"

        while not done:
            valid_indices = np.where(env.get_action_mask())[0]
            action = rng.choice(valid_indices)
            _, _, terminated, truncated, info = env.step(action)
            done = terminated or truncated

        total_steps += info["steps"]
        total_revealed += info["revealed"]
        if info["game_state"] == "WON":
            wins += 1

    elapsed = time.time() - start_time
    print(f"Games: {args.games} on {config.width}x{config.height} with {config.mine_count} mines")
    print(f"  Win rate: {wins / args.games:.1%}")
    print(f"  Avg steps: {total_steps / args.games:.1f}")
    print(f"  Avg revealed: {total_revealed / args.games:.1f} cells")
    print(f"  Speed: {args.games / elapsed:.1f} games/s")


def add_board_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--preset", choices=sorted(PRESETS), help="Use a preset board size"
    )
    parser.add_argument("--width", type=int, default=20, help="Board width")
    parser.add_argument("--height", type=int, default=20, help="Board height")
    parser.add_argument("--mines", type=int, default=40, help="Number of mines")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--attempts", type=int, default=50, help="Board generation retry cap"
    )


def main() -> None:
    """Parse arguments and run the appropriate command."""
    parser = argparse.ArgumentParser(
        description="Minefield - solvable mine-clearing boards"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Log generation and commands"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    add_board_arguments(play_parser)

    generate_parser = subparsers.add_parser(
        "generate", help="Generate and print a board"
    )
    add_board_arguments(generate_parser)

    simulate_parser = subparsers.add_parser(
        "simulate", help="Play random games and report outcomes"
    )
    add_board_arguments(simulate_parser)
    simulate_parser.add_argument(
        "--games", type=int, default=100, help="Number of games to play"
    )
    simulate_parser.add_argument(
        "--max-steps", type=int, default=500, help="Step limit per game"
    )

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "play":
            play(args)
        elif args.command == "generate":
            generate(args)
        elif args.command == "simulate":
            simulate(args)
        else:
            parser.print_help()
    except MinefieldError as error:
        parser.exit(1, f"error: {error}\n")


if __name__ == "__main__":
    main()
