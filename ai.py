"""
Scripted opponent for the rice paddy territory game.

The opponent takes exactly one action per day, chosen by a fixed priority:

1. Expand: if it has at least as many units as tiles (or it is starving but
   has houses), claim the first claimable tile found by a breadth-first
   search from (0, 0).
2. Farm: with enough water, water its first unwatered tile while rice is
   short, otherwise build a house on its first unhoused tile.
3. Otherwise collect water.

The decision is deterministic; randomness only exists at board generation.
"""

from collections import deque
from typing import Any, Dict, Optional, Tuple

from actions import (
    build_house,
    can_afford_house,
    claim_territory,
    collect_water,
    describe_outcome,
    water_tile,
)
from board import Board
from models import BuildOutcome, ClaimOutcome, OpponentOutcome, Side, WaterOutcome
from state import load_config

SEARCH_START = (0, 0)

# Neighbour order: down, up, right, left along the y/x axes
NEIGHBOR_OFFSETS = [(0, 1), (0, -1), (1, 0), (-1, 0)]


def manhattan_distance(x1: int, y1: int, x2: int, y2: int) -> int:
    return abs(x1 - x2) + abs(y1 - y2)


def search_radius(board: Board) -> int:
    """Half the board's tile count."""
    return board.total_tiles // 2


def bfs_claim(side: Side, board: Board, radius: int,
              start: Tuple[int, int] = SEARCH_START) -> Optional[Tuple[int, int]]:
    """
    Breadth-first search for a tile the side can claim, and claim it.

    Cells further than radius (Manhattan) from start are never enqueued.
    The first cell whose claim succeeds wins; the search does not look for
    the cheapest tile.

    Returns:
        Coordinates of the claimed tile, or None if nothing could be claimed
    """
    queue = deque([start])
    visited = {start}

    while queue:
        x, y = queue.popleft()
        if board.within_bounds(x, y) and claim_territory(side, x, y, board) == ClaimOutcome.CLAIMED:
            return x, y

        for dx, dy in NEIGHBOR_OFFSETS:
            nx, ny = x + dx, y + dy
            if (board.within_bounds(nx, ny) and (nx, ny) not in visited
                    and manhattan_distance(nx, ny, start[0], start[1]) <= radius):
                visited.add((nx, ny))
                queue.append((nx, ny))

    return None


def wants_to_expand(side: Side) -> bool:
    return side.units >= side.controlled_tiles or (side.rice == 0 and side.houses != 0)


def needs_rice(side: Side, config: Dict[str, Any]) -> bool:
    return side.rice < side.units * config['rice_per_unit'] or side.rice < config['house_rice_cost']


def farm_or_build(side: Side, board: Board,
                  config: Dict[str, Any]) -> Optional[Tuple[OpponentOutcome, Tuple[int, int]]]:
    """
    Water or build on the first eligible own tile, scanning in (x, y) order.

    Returns:
        (outcome, position) of the action taken, or None if no tile qualified
    """
    hungry = needs_rice(side, config)
    for x, y in list(board.tiles_controlled_by(side)):
        if hungry:
            if not board.is_watered(x, y) and water_tile(side, x, y, board, config) == WaterOutcome.WATERED:
                return OpponentOutcome.WATERED, (x, y)
        elif not board.is_housed(x, y) and can_afford_house(side, config):
            if build_house(side, x, y, board, config) == BuildOutcome.BUILT:
                return OpponentOutcome.BUILT, (x, y)
    return None


def decide(ai_side: Side, opponent_side: Side, board: Board,
           config: Optional[Dict[str, Any]] = None) -> Tuple[OpponentOutcome, str]:
    """
    Choose and apply the opponent's action for the day.

    Args:
        ai_side: The scripted side
        opponent_side: The other side (not consulted by the current policy)
        board: Current board
        config: Rule constants (defaults to load_config())

    Returns:
        (outcome, description) for the event log
    """
    config = config or load_config()

    if wants_to_expand(ai_side):
        claimed = bfs_claim(ai_side, board, search_radius(board))
        if claimed is None:
            return OpponentOutcome.CLAIM_FAILED, describe_outcome(OpponentOutcome.CLAIM_FAILED)
        return OpponentOutcome.CLAIMED, describe_outcome(OpponentOutcome.CLAIMED, x=claimed[0], y=claimed[1])

    if ai_side.water >= config['ai_water_threshold']:
        action = farm_or_build(ai_side, board, config)
        if action is not None:
            outcome, (x, y) = action
            return outcome, describe_outcome(outcome, x=x, y=y)

    collect_water(ai_side, config['water_per_collect'])
    return OpponentOutcome.COLLECTED_WATER, describe_outcome(OpponentOutcome.COLLECTED_WATER)
