"""
CLI play mode for the rice paddy territory game.

Human (p1) vs scripted opponent (p2). ASCII renderer, one action per day,
opponent and end-of-day reports, save/load, final resource summary.

Usage: python play_cli.py [--size N] [--seed S] [--load PATH]
"""

import argparse
import random

from actions import ActionType
from engine import TurnEngine
from models import RESOURCE_NAMES, Ownership, TileState
from state import GameState, GameStateError, initialize_game, load_game, resource_series, save_game

RULES_TEXT = """\
Goal: control 50% or more of the board before the AI does.

Your tiles are marked in upper case and you start in the bottom-right
corner. Claiming a tile costs the number of peasants shown on it; those
peasants are spent.

Rice is planted on every claimed tile. It grows by one per day, or by two
if the tile is watered. At the end of each day you harvest every tile.

Each peasant eats rice every day (the rules say two, the harvest takes
three). Peasants survive without rice, but no rice means no new peasants.

Houses produce one new peasant per day. A house costs 25 rice, 10 water
and 1 peasant. Collecting water yields 15 water at a time.

One action per day: collect water, claim a tile, water a tile or build a
house. The AI's move is reported after yours.
"""

TILE_CHAR = {
    TileState.RICE: "r",
    TileState.RICE_WATERED: "w",
    TileState.HOUSE: "h",
    TileState.HOUSE_WATERED: "m",
}

COMMANDS = {
    "collect": ActionType.COLLECT_WATER,
    "claim": ActionType.CLAIM,
    "water": ActionType.WATER,
    "build": ActionType.BUILD,
}


# ---------------------------------------------------------------------------
# ASCII Renderer
# ---------------------------------------------------------------------------


def render_board(game: GameState):
    """Render the board from p1's perspective. Empty tiles show their cost."""
    board = game.board
    viewer = game.human
    print()
    print("  y: " + "".join(f"{y:>4}" for y in range(board.height)))
    print("  x  " + "-" * (board.height * 4))
    for x in range(board.width):
        cells = []
        for y in range(board.height):
            state, ownership = board.state_label(x, y, viewer)
            if state == TileState.EMPTY:
                cells.append(f"{board.tile_at(x, y).required_units:>4}")
            else:
                char = TILE_CHAR[state]
                cells.append(f"{char.upper() if ownership == Ownership.SELF else char:>4}")
        print(f"  {x:>2} " + "".join(cells))
    print()
    print("  Upper case = yours, lower case = AI.  r rice, w watered, h house, m watered house")
    print()


def show_status(game: GameState):
    half = game.board.total_tiles // 2
    print(f"=== Day {game.day + 1} === (tiles to win: {half})")
    for side in game.sides:
        name = "You" if side is game.human else "AI "
        print(f"  {name}  tiles {side.controlled_tiles:3d}  water {side.water:6.1f}  "
              f"rice {side.rice:6.1f}  peasants {side.units:3d}  houses {side.houses:2d}")


def show_history(game: GameState):
    """Print the last recorded resources and their change over the game."""
    print("\n=== RESOURCE HISTORY ===")
    for side in game.sides:
        series = resource_series(side)
        if not len(series['rice']):
            continue
        print(f"  {side.id}:")
        for name in RESOURCE_NAMES:
            values = series[name]
            print(f"    {name:7} start {values[0]:7.1f}  end {values[-1]:7.1f}  "
                  f"peak {values.max():7.1f}")


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------


def get_human_command(game: GameState):
    """Prompt until a playable command is entered. Returns (action, x, y) or None to quit."""
    while True:
        print("Commands: collect | claim X Y | water X Y | build X Y | save PATH | rules | quit")
        raw = input("> ").strip().split()
        if not raw:
            continue
        cmd = raw[0].lower()

        if cmd == "quit":
            return None
        if cmd == "rules":
            print(RULES_TEXT)
            continue
        if cmd == "save":
            if len(raw) != 2:
                print("Usage: save PATH")
                continue
            try:
                save_game(game, raw[1])
                print(f"Game saved to {raw[1]}")
            except OSError as e:
                print(f"Save failed: {e}")
            continue
        if cmd not in COMMANDS:
            print(f"Unknown command: {cmd}")
            continue

        action = COMMANDS[cmd]
        if action == ActionType.COLLECT_WATER:
            return action, None, None
        if len(raw) != 3:
            print(f"Usage: {cmd} X Y")
            continue
        try:
            return action, int(raw[1]), int(raw[2])
        except ValueError:
            print("Coordinates must be integers")


# ---------------------------------------------------------------------------
# Main Loop
# ---------------------------------------------------------------------------


def main():
    parser = argparse.ArgumentParser(description="Play the rice paddy territory game against the AI.")
    parser.add_argument("--size", type=int, default=None, help="Board edge length")
    parser.add_argument("--seed", type=int, default=None, help="Board generation seed")
    parser.add_argument("--load", default=None, help="Resume a saved game")
    args = parser.parse_args()

    print("=" * 50)
    print("  RICE PADDIES")
    print("=" * 50)

    if args.load:
        try:
            game = load_game(args.load)
        except (OSError, GameStateError) as e:
            print(f"Could not load {args.load}: {e}")
            return
        print(f"Loaded game at day {game.day}")
    else:
        seed = args.seed if args.seed is not None else random.randint(0, 99999)
        print(f"Map seed: {seed}")
        game = initialize_game(seed, args.size)
        print(RULES_TEXT)

    engine = TurnEngine(game)

    while not engine.is_over:
        show_status(game)
        render_board(game)

        command = get_human_command(game)
        if command is None:
            print("Game abandoned.")
            return

        result = engine.play_day(*command)
        print(f"\n  You: {result['action']['description']}")
        print(f"  AI : {result['opponent']['description']}")
        upkeep = result['upkeep']
        print(f"  Harvest: you {upkeep['harvested']['p1']:g}, AI {upkeep['harvested']['p2']:g}  |  "
              f"new peasants: you {upkeep['new_units']['p1']}, AI {upkeep['new_units']['p2']}")
        print()

    show_status(game)
    render_board(game)
    print("\n" + "=" * 50)
    if game.winner == game.human.id:
        print("  VICTORY! You won!")
    else:
        print("  DEFEAT. The AI won.")
    print(f"  Days played: {game.day}")
    print("=" * 50)
    show_history(game)


if __name__ == "__main__":
    main()
