"""Shared test fixtures and helpers."""

import pytest

from board import Board
from models import Tile
from state import GameState, create_side, initialize_game, load_config


# --- Fixtures ---


@pytest.fixture
def config():
    """Default rule constants."""
    return load_config()


@pytest.fixture
def game():
    """Fresh 10x10 game on day 0 (seed=42)."""
    return initialize_game(seed=42, size=10)


@pytest.fixture
def small_game():
    """4x4 game where every tile costs one unit."""
    return make_game(size=4, cost=1)


@pytest.fixture
def api_client():
    """Flask test client."""
    from app import app

    app.config["TESTING"] = True
    yield app.test_client()


# --- Helper functions ---


def make_board(size=4, cost=1):
    """Board with a uniform claim cost and rice level 1 everywhere."""
    tiles = [[Tile(required_units=cost) for _ in range(size)] for _ in range(size)]
    return Board(tiles)


def make_game(size=4, cost=1):
    """Game state on a uniform board with both sides on their home tiles."""
    board = make_board(size, cost)
    cfg = load_config()
    p1 = create_side(0, "p1", (size - 1, size - 1), board, cfg)
    p2 = create_side(1, "p2", (0, 0), board, cfg)
    return GameState(game_id="test", board=board, sides=[p1, p2])


def fill_board(game_state, owner_index):
    """Mark every unoccupied tile as owned by the given side index."""
    for row in game_state.board.tiles:
        for tile in row:
            if not tile.occupied:
                tile.set_occupied(owner_index)


def create_api_game(client, seed=42, size=None):
    """Create a new game via API, return game_id."""
    payload = {"seed": seed}
    if size is not None:
        payload["size"] = size
    resp = client.post("/api/game/new", json=payload)
    assert resp.status_code == 200
    return resp.json["game_id"]
