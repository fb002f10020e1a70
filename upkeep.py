"""
End-of-day resolution for the rice paddy territory game.
Handles growth, harvest, feeding, new peasants, history and victory.

Order of resolution, always p1 before p2 within each step:
- Grow rice on each side's tiles
- Harvest rice from each side's tiles
- Each side's units eat rice (never below zero)
- Each house produces one unit, unless the side has no rice left
- Record each side's resources for the day
- Advance the day counter and check victory conditions
"""

from typing import Any, Dict, Optional

from actions import collect_rice, eat_rice, save_resource_snapshot
from models import Side
from state import GameState, load_config, log_event


def reproduce(side: Side) -> int:
    """
    Add one unit per house if the side has any rice left.

    Reproduction costs no rice; rice only gates it.

    Returns:
        Number of units added
    """
    if side.rice != 0:
        side.units += side.houses
        return side.houses
    return 0


def is_game_over(game_state: GameState) -> bool:
    """
    Check whether either victory condition holds.

    The game ends when a side has neither units nor houses, or when a side
    controls at least half of the board.
    """
    p1, p2 = game_state.sides
    if (p1.units == 0 and p1.houses == 0) or (p2.units == 0 and p2.houses == 0):
        return True
    half = game_state.board.total_tiles // 2
    return p1.controlled_tiles >= half or p2.controlled_tiles >= half


def determine_winner(game_state: GameState) -> str:
    """
    Pick the winner of a finished game.

    If either side is out of units, the side with more units wins; otherwise
    the side with more tiles wins. Ties always go to p2.

    Returns:
        Winner side ID
    """
    p1, p2 = game_state.sides
    if p1.units == 0 or p2.units == 0:
        p1_won = p1.units > p2.units
    else:
        p1_won = p1.controlled_tiles > p2.controlled_tiles
    return p1.id if p1_won else p2.id


def perform_upkeep(game_state: GameState, config: Optional[Dict[str, Any]] = None) -> Dict:
    """
    Resolve the end of the current day.

    Args:
        game_state: Current game state to process
        config: Rule constants (defaults to load_config())

    Returns:
        Dictionary with results: {'day', 'harvested', 'eaten', 'new_units', 'winner'}

    Raises:
        ValueError: If the game has already ended
    """
    if game_state.phase == 'ended':
        raise ValueError(f"Game {game_state.game_id} has ended, no further days can be played")

    config = config or load_config()
    board = game_state.board
    sides = game_state.sides

    results = {
        'day': game_state.day,
        'harvested': {},
        'eaten': {},
        'new_units': {},
        'winner': None,
    }

    for side in sides:
        board.grow_rice(side)

    for side in sides:
        results['harvested'][side.id] = collect_rice(side, board)

    for side in sides:
        results['eaten'][side.id] = eat_rice(side, side.units, config)

    for side in sides:
        results['new_units'][side.id] = reproduce(side)

    for side in sides:
        save_resource_snapshot(side)

    game_state.day += 1

    log_event(game_state, f"Day {game_state.day} resolved",
              harvested=results['harvested'], eaten=results['eaten'], new_units=results['new_units'])

    if is_game_over(game_state):
        winner = determine_winner(game_state)
        game_state.winner = winner
        game_state.phase = 'ended'
        results['winner'] = winner
        log_event(game_state, f"Game Over: {winner} is victorious!", winner_id=winner,
                  game_end_day=game_state.day)

    return results


def get_upkeep_summary(game_state: GameState, config: Optional[Dict[str, Any]] = None) -> Dict:
    """Resource and territory summary for each side."""
    config = config or load_config()
    half = game_state.board.total_tiles // 2
    rice_per_unit = config['rice_per_unit']
    return {
        'day': game_state.day,
        'phase': game_state.phase,
        'tiles_to_win': half,
        'sides': {
            side.id: {
                'rice': side.rice,
                'water': side.water,
                'units': side.units,
                'houses': side.houses,
                'controlled_tiles': side.controlled_tiles,
                'daily_consumption': side.units * rice_per_unit,
            }
            for side in game_state.sides
        },
    }
