"""
Game state management for the rice paddy territory game.
Implements the game aggregate, configuration, initialisation and the
save/load boundary.

Sides: p1 (human, starts in the far corner) and p2 (scripted, starts at 0,0)
Resources: rice, water, units (peasants), houses, controlled tiles
Map: square grid, 10x10 by default
"""

from __future__ import annotations
import json
import os
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np

from board import Board
from map_gen import generate_board
from models import RESOURCE_NAMES, ResourceSnapshot, Side, Tile

CONFIG_PATH = os.path.join(os.path.dirname(__file__), 'config.json')

DEFAULT_CONFIG = {
    'map_size': 10,
    'starting_rice': 20,
    'starting_water': 10,
    'starting_units': 15,
    'water_per_collect': 15,
    'water_cost': 5,
    'house_rice_cost': 25,
    'house_water_cost': 10,
    'house_unit_cost': 1,
    'rice_per_unit': 3,
    'ai_water_threshold': 15,
}

SAVE_FORMAT_VERSION = 1


class GameStateError(ValueError):
    """Raised when a saved game document cannot be turned into a GameState."""
    pass


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load game configuration, falling back to defaults.

    Missing keys keep their default value; a missing or unreadable file
    yields the defaults unchanged.
    """
    config = dict(DEFAULT_CONFIG)
    try:
        with open(path or CONFIG_PATH, 'r') as f:
            config.update(json.load(f))
    except (FileNotFoundError, json.JSONDecodeError):
        pass
    return config


@dataclass
class GameState:
    """
    Complete game state: both sides, the board and the day counter.

    sides[0] is p1 (human), sides[1] is p2 (scripted opponent). Tiles refer
    to their owner by this index.
    """
    game_id: str
    board: Board
    sides: List[Side] = field(default_factory=list)
    day: int = 0  # Completed days
    phase: str = 'day'  # 'day' while running, 'ended' once a winner is known
    winner: Optional[str] = None
    log: List[Dict] = field(default_factory=list)

    def get_side_by_id(self, side_id: str) -> Optional[Side]:
        for side in self.sides:
            if side.id == side_id:
                return side
        return None

    def get_opponent(self, side_id: str) -> Optional[Side]:
        for side in self.sides:
            if side.id != side_id:
                return side
        return None

    @property
    def human(self) -> Side:
        return self.sides[0]

    @property
    def ai(self) -> Side:
        return self.sides[1]


def log_event(game_state: GameState, event: str, **kwargs) -> None:
    """
    Add an event to the game state log.

    Args:
        game_state: Current game state
        event: Description of the event
        **kwargs: Additional event data to include
    """
    log_entry = {
        'day': game_state.day,
        'phase': game_state.phase,
        'event': event,
        **kwargs
    }
    game_state.log.append(log_entry)


def create_side(index: int, side_id: str, home: tuple, board: Board, config: Dict[str, Any]) -> Side:
    """Create a side and hand it its home tile."""
    side = Side(
        index=index,
        id=side_id,
        home=home,
        rice=float(config['starting_rice']),
        water=float(config['starting_water']),
        units=int(config['starting_units']),
    )
    board.set_start_tile(home[0], home[1], side)
    return side


def initialize_game(seed: Optional[int] = None, size: Optional[int] = None,
                    config: Optional[Dict[str, Any]] = None) -> GameState:
    """
    Initialize a new game with a generated board and two sides.

    p1 starts at (size-1, size-1), p2 at (0, 0); both corners are the
    cheapest tiles on the board.

    Args:
        seed: Random seed for board generation
        size: Board edge length (defaults to config 'map_size')
        config: Configuration overrides (defaults to load_config())

    Returns:
        New GameState on day 0
    """
    config = config or load_config()
    size = size or int(config['map_size'])

    board = generate_board(size, seed)
    p1 = create_side(0, 'p1', (size - 1, size - 1), board, config)
    p2 = create_side(1, 'p2', (0, 0), board, config)

    game_state = GameState(game_id=str(uuid.uuid4()), board=board, sides=[p1, p2])
    log_event(game_state, f"Game created on a {size}x{size} board", seed=seed, size=size)
    return game_state


def resource_series(side: Side) -> Dict[str, np.ndarray]:
    """
    Per-resource history of a side for charting.

    Returns:
        Mapping of 'water', 'rice', 'units', 'houses' to arrays indexed by
        completed day
    """
    return {
        name: np.array([getattr(snapshot, name) for snapshot in side.history], dtype=float)
        for name in RESOURCE_NAMES
    }


# ---------------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------------


def side_to_dict(side: Side) -> Dict:
    return {
        'index': side.index,
        'id': side.id,
        'home': list(side.home),
        'rice': side.rice,
        'water': side.water,
        'units': side.units,
        'houses': side.houses,
        'controlled_tiles': side.controlled_tiles,
        'history': [snapshot.as_dict() for snapshot in side.history],
    }


def side_from_dict(data: Dict) -> Side:
    return Side(
        index=int(data['index']),
        id=data['id'],
        home=tuple(data['home']),
        rice=float(data['rice']),
        water=float(data['water']),
        units=int(data['units']),
        houses=int(data['houses']),
        controlled_tiles=int(data['controlled_tiles']),
        history=[
            ResourceSnapshot(water=float(h['water']), rice=float(h['rice']),
                             units=int(h['units']), houses=int(h['houses']))
            for h in data['history']
        ],
    )


def board_to_dict(board: Board) -> Dict:
    return {
        'size': board.size,
        'tiles': [
            [
                {
                    'required_units': tile.required_units,
                    'owner': tile.owner,
                    'watered': tile.watered,
                    'housed': tile.housed,
                }
                for tile in row
            ]
            for row in board.tiles
        ],
        'rice_levels': board.rice_levels.tolist(),
    }


def _tile_owner(value) -> Optional[int]:
    if value is None or (type(value) is int and value in (0, 1)):
        return value
    raise GameStateError(f"Invalid tile owner: {value!r}")


def board_from_dict(data: Dict) -> Board:
    tiles = [
        [
            Tile(
                required_units=int(t['required_units']),
                occupied=t['owner'] is not None,
                owner=_tile_owner(t['owner']),
                watered=bool(t['watered']),
                housed=bool(t['housed']),
            )
            for t in row
        ]
        for row in data['tiles']
    ]
    return Board(tiles, np.array(data['rice_levels'], dtype=float))


def game_to_dict(game_state: GameState) -> Dict:
    return {
        'version': SAVE_FORMAT_VERSION,
        'game_id': game_state.game_id,
        'day': game_state.day,
        'phase': game_state.phase,
        'winner': game_state.winner,
        'sides': [side_to_dict(side) for side in game_state.sides],
        'board': board_to_dict(game_state.board),
        'log': game_state.log,
    }


def game_from_dict(data: Dict) -> GameState:
    """Rebuild a GameState from its dict form, validating the aggregate."""
    try:
        if data.get('version') != SAVE_FORMAT_VERSION:
            raise GameStateError(f"Unsupported save format version: {data.get('version')}")
        sides = [side_from_dict(s) for s in data['sides']]
        board = board_from_dict(data['board'])
        game_state = GameState(
            game_id=data['game_id'],
            board=board,
            sides=sides,
            day=int(data['day']),
            phase=data['phase'],
            winner=data.get('winner'),
            log=list(data.get('log', [])),
        )
    except GameStateError:
        raise
    except (KeyError, TypeError, AttributeError, ValueError) as e:
        raise GameStateError(f"Malformed saved game: {e}") from e

    if len(sides) != 2 or [s.index for s in sides] != [0, 1]:
        raise GameStateError("Saved game must contain exactly two sides indexed 0 and 1")
    for side in sides:
        if len(side.history) != game_state.day:
            raise GameStateError(
                f"Side {side.id} has {len(side.history)} history entries for day {game_state.day}")
        if side.controlled_tiles != board.count_controlled(side):
            raise GameStateError(
                f"Side {side.id} claims {side.controlled_tiles} tiles but owns {board.count_controlled(side)}")
    return game_state


def save_game(game_state: GameState, path: str) -> None:
    """
    Write the whole game aggregate to a JSON file.

    The file is written to a temporary sibling and moved into place, so a
    failed write never leaves a half-written save behind. OSError propagates.
    """
    tmp_path = f"{path}.tmp"
    with open(tmp_path, 'w') as f:
        json.dump(game_to_dict(game_state), f)
    os.replace(tmp_path, path)


def load_game(path: str) -> GameState:
    """
    Read a game aggregate from a JSON file.

    Raises:
        OSError: If the file cannot be read
        GameStateError: If the document is not a valid saved game
    """
    with open(path, 'r') as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise GameStateError(f"Saved game is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise GameStateError("Saved game must be a JSON object")
    return game_from_dict(data)


def get_game_summary(game_state: GameState) -> Dict:
    """
    Get a summary of the current game state for API responses.

    Tile labels are rendered from p1's perspective.
    """
    board = game_state.board
    viewer = game_state.human
    return {
        'game_id': game_state.game_id,
        'day': game_state.day,
        'phase': game_state.phase,
        'winner': game_state.winner,
        'size': board.size,
        'sides': [
            {
                'id': side.id,
                'rice': side.rice,
                'water': side.water,
                'units': side.units,
                'houses': side.houses,
                'controlled_tiles': side.controlled_tiles,
            }
            for side in game_state.sides
        ],
        'map': [
            {
                'x': x,
                'y': y,
                'required_units': board.tile_at(x, y).required_units,
                'rice': board.rice_at(x, y),
                'state': board.state_key(x, y, viewer),
            }
            for x in range(board.width)
            for y in range(board.height)
        ],
    }
