"""
Side actions for the rice paddy territory game.

A side may take one of four actions per day: collect water, claim a tile,
water a tile or build a house. Rule violations come back as outcome enums;
nothing here raises for a failed action.
"""

from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from board import Board
from models import BuildOutcome, ClaimOutcome, CollectOutcome, OpponentOutcome, Side, WaterOutcome
from state import GameState, load_config, log_event

Outcome = Union[ClaimOutcome, WaterOutcome, BuildOutcome, CollectOutcome, OpponentOutcome]


class ActionType(Enum):
    COLLECT_WATER = "collect_water"
    CLAIM = "claim"
    WATER = "water"
    BUILD = "build"


class ActionError(ValueError):
    """Raised when an action request is malformed (not when a rule fails)."""
    pass


OUTCOME_MESSAGES = {
    CollectOutcome.COLLECTED: "Collected {amount:g} units of water",
    ClaimOutcome.CLAIMED: "Claimed territory at ({x}, {y})",
    ClaimOutcome.OUT_OF_BOUNDS: "Cannot claim ({x}, {y}): outside the map",
    ClaimOutcome.UNAVAILABLE: "Failed to claim territory at ({x}, {y})",
    WaterOutcome.WATERED: "Watered the rice at ({x}, {y}), it now grows faster",
    WaterOutcome.INSUFFICIENT_WATER: "Not enough water",
    WaterOutcome.NOT_ELIGIBLE: "Cannot water rice at ({x}, {y})",
    BuildOutcome.BUILT: "Built a house at ({x}, {y}), more peasants will come",
    BuildOutcome.INSUFFICIENT_RESOURCES: "Not enough resources to build a house",
    BuildOutcome.NOT_ELIGIBLE: "Cannot build a house at ({x}, {y})",
    OpponentOutcome.CLAIMED: "AI claimed the nearest territory ({x}, {y})",
    OpponentOutcome.CLAIM_FAILED: "AI could not claim anything",
    OpponentOutcome.WATERED: "AI watered the rice at ({x}, {y})",
    OpponentOutcome.BUILT: "AI built a house at ({x}, {y})",
    OpponentOutcome.COLLECTED_WATER: "AI collected water, nothing else to do",
}


def describe_outcome(outcome: Outcome, **details) -> str:
    """Format an outcome as a human-readable message."""
    template = OUTCOME_MESSAGES[outcome]
    try:
        return template.format(**details)
    except (KeyError, ValueError):
        return outcome.value


def collect_water(side: Side, amount: float) -> CollectOutcome:
    side.water += amount
    return CollectOutcome.COLLECTED


def claim_territory(side: Side, x: int, y: int, board: Board) -> ClaimOutcome:
    """Claim a tile through the board; counts it on success."""
    if not board.within_bounds(x, y):
        return ClaimOutcome.OUT_OF_BOUNDS
    if not board.claim(x, y, side):
        return ClaimOutcome.UNAVAILABLE
    side.controlled_tiles += 1
    return ClaimOutcome.CLAIMED


def water_tile(side: Side, x: int, y: int, board: Board,
               config: Optional[Dict[str, Any]] = None) -> WaterOutcome:
    """Water one of the side's own tiles, paying the water cost."""
    config = config or load_config()
    if not (board.within_bounds(x, y) and board.is_controlled_by(x, y, side)):
        return WaterOutcome.NOT_ELIGIBLE
    if side.water < config['water_cost']:
        return WaterOutcome.INSUFFICIENT_WATER
    side.water -= config['water_cost']
    board.water(x, y)
    return WaterOutcome.WATERED


def can_afford_house(side: Side, config: Dict[str, Any]) -> bool:
    return (side.rice >= config['house_rice_cost']
            and side.water >= config['house_water_cost']
            and side.units >= config['house_unit_cost'])


def build_house(side: Side, x: int, y: int, board: Board,
                config: Optional[Dict[str, Any]] = None) -> BuildOutcome:
    """Build a house on an own, unhoused tile, paying rice, water and one unit."""
    config = config or load_config()
    if not (board.within_bounds(x, y) and board.is_controlled_by(x, y, side)
            and not board.is_housed(x, y)):
        return BuildOutcome.NOT_ELIGIBLE
    if not can_afford_house(side, config):
        return BuildOutcome.INSUFFICIENT_RESOURCES
    side.rice -= config['house_rice_cost']
    side.water -= config['house_water_cost']
    side.units -= config['house_unit_cost']
    side.houses += 1
    board.build_house(x, y)
    return BuildOutcome.BUILT


def collect_rice(side: Side, board: Board) -> float:
    """
    Harvest every tile the side owns.

    Each tile's rice level is added to the side's stock and the level drops
    by one. The level has no floor and can go negative.

    Returns:
        Amount of rice harvested
    """
    harvested = 0.0
    for x, y in board.tiles_controlled_by(side):
        level = board.rice_at(x, y)
        harvested += level
        board.set_rice_at(x, y, level - 1)
    side.rice += harvested
    return harvested


def eat_rice(side: Side, population: int, config: Optional[Dict[str, Any]] = None) -> float:
    """
    Feed the population. Each unit eats rice_per_unit rice (3 by default,
    the rules text says 2). Rice never drops below zero.

    Returns:
        Amount of rice actually eaten
    """
    config = config or load_config()
    before = side.rice
    side.rice = max(side.rice - population * config['rice_per_unit'], 0.0)
    return before - side.rice


def save_resource_snapshot(side: Side) -> None:
    side.history.append(side.snapshot())


def apply_action(game_state: GameState, side: Side, action_type: ActionType,
                 x: Optional[int] = None, y: Optional[int] = None,
                 config: Optional[Dict[str, Any]] = None) -> Tuple[Outcome, str]:
    """
    Apply one action for a side and log the result.

    Args:
        game_state: Current game state
        side: Acting side
        action_type: Which of the four actions to take
        x, y: Target tile, required for everything but collecting water
        config: Rule constants (defaults to load_config())

    Returns:
        (outcome, description) tuple

    Raises:
        ActionError: If a tile action has no coordinates
    """
    config = config or load_config()
    board = game_state.board

    if action_type == ActionType.COLLECT_WATER:
        amount = config['water_per_collect']
        outcome = collect_water(side, amount)
        description = describe_outcome(outcome, amount=amount)
    else:
        if x is None or y is None:
            raise ActionError(f"Action {action_type.value} requires x and y coordinates")
        if action_type == ActionType.CLAIM:
            outcome = claim_territory(side, x, y, board)
        elif action_type == ActionType.WATER:
            outcome = water_tile(side, x, y, board, config)
        elif action_type == ActionType.BUILD:
            outcome = build_house(side, x, y, board, config)
        else:
            raise ActionError(f"Unknown action type: {action_type}")
        description = describe_outcome(outcome, x=x, y=y)

    log_event(game_state, description, side_id=side.id, action=action_type.value,
              outcome=outcome.value, target=None if x is None else (x, y))
    return outcome, description
