"""
Map generation module for the rice paddy territory game.
Builds a square board whose claim costs grow with distance from the two
home corners, so the start tiles are cheap and the far corners expensive.
"""

import random
from typing import Dict, List, Optional

import numpy as np

from board import Board
from models import Tile

JITTER_MAX = 2  # Each claim cost gets a uniform offset in {0, 1, 2}


def generate_required_units(size: int, rng: random.Random) -> List[List[int]]:
    """
    Compute claim costs using diagonal banding.

    Row i is split in two bands. The first size - i columns ascend from i,
    the remaining i columns descend back towards zero. The result is
    non-decreasing in expectation with distance from the (0, 0) and
    (size - 1, size - 1) corners.

    Args:
        size: Board edge length
        rng: Random source for the jitter

    Returns:
        size x size nested list of non-negative costs
    """
    costs = [[0] * size for _ in range(size)]
    for i in range(size):
        band = i - 1
        for j in range(size - i):
            costs[i][j] = i + j + rng.randint(0, JITTER_MAX)
            band += 1
        for k in range(size - i, size):
            band -= 1
            costs[i][k] = band + rng.randint(0, JITTER_MAX)
    return costs


def generate_board(size: int, seed: Optional[int] = None) -> Board:
    """
    Generate a fresh board.

    Args:
        size: Board edge length (must be at least 2)
        seed: Random seed for reproducible generation

    Returns:
        Board with unoccupied tiles and every rice level at 1
    """
    if size < 2:
        raise ValueError(f"Board size must be at least 2, got {size}")

    rng = random.Random(seed)
    costs = generate_required_units(size, rng)
    tiles = [[Tile(required_units=costs[x][y]) for y in range(size)] for x in range(size)]
    return Board(tiles, np.ones((size, size), dtype=float))


def map_stats(board: Board) -> Dict:
    """Summary statistics of claim costs on a board."""
    costs = np.array([[tile.required_units for tile in row] for row in board.tiles])
    return {
        'size': board.size,
        'total_tiles': board.total_tiles,
        'min_cost': int(costs.min()),
        'max_cost': int(costs.max()),
        'mean_cost': float(costs.mean()),
        'home_costs': (int(costs[0, 0]), int(costs[-1, -1])),
    }


def print_map_stats(board: Board) -> None:
    """Print claim cost statistics and the cost grid."""
    stats = map_stats(board)
    print("\n" + "=" * 50)
    print("MAP STATISTICS")
    print("=" * 50)
    print(f"Map size: {stats['size']}x{stats['size']} ({stats['total_tiles']} tiles)")
    print(f"Claim cost: min {stats['min_cost']}, max {stats['max_cost']}, mean {stats['mean_cost']:.1f}")
    print("-" * 30)
    for row in board.tiles:
        print(" ".join(f"{tile.required_units:3d}" for tile in row))
    print("=" * 50)


if __name__ == "__main__":
    print_map_stats(generate_board(10, seed=42))
