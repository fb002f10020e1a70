import json

import numpy as np
import pytest

from actions import ActionType
from engine import TurnEngine
from state import (
    DEFAULT_CONFIG,
    GameState,
    GameStateError,
    get_game_summary,
    initialize_game,
    load_config,
    load_game,
    resource_series,
    save_game,
)


def test_initialize_game_basic():
    """Test that initialize_game sets up the game state correctly."""
    game_state = initialize_game(seed=42)

    assert isinstance(game_state, GameState), "GameState object not created"
    assert game_state.day == 0, "Initial day should be 0"
    assert game_state.phase == "day"
    assert game_state.winner is None

    p1, p2 = game_state.sides
    assert (p1.id, p1.index, p1.home) == ("p1", 0, (9, 9))
    assert (p2.id, p2.index, p2.home) == ("p2", 1, (0, 0))
    for side in (p1, p2):
        assert (side.rice, side.water, side.units) == (20, 10, 15)
        assert side.houses == 0
        assert side.controlled_tiles == 1

    assert game_state.board.is_controlled_by(9, 9, p1)
    assert game_state.board.is_controlled_by(0, 0, p2)


def test_initialize_game_map():
    game_state = initialize_game(seed=42, size=6)
    assert game_state.board.size == 6
    assert game_state.human.home == (5, 5)


def test_get_side_and_opponent(game):
    assert game.get_side_by_id("p2") is game.ai
    assert game.get_opponent("p1") is game.ai
    assert game.get_side_by_id("p3") is None


def test_load_config_defaults_when_missing(tmp_path):
    assert load_config(str(tmp_path / "missing.json")) == DEFAULT_CONFIG


def test_load_config_overrides(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"map_size": 6}))
    config = load_config(str(path))
    assert config["map_size"] == 6
    assert config["rice_per_unit"] == 3


def test_resource_series(game):
    engine = TurnEngine(game)
    for _ in range(3):
        engine.play_day(ActionType.COLLECT_WATER)
    series = resource_series(game.human)
    assert set(series) == {"water", "rice", "units", "houses"}
    assert all(len(values) == game.day for values in series.values())
    assert series["water"].tolist() == [25.0, 40.0, 55.0]


class TestPersistence:
    def test_save_and_load_replaces_aggregate(self, game, tmp_path):
        engine = TurnEngine(game)
        engine.play_day(ActionType.WATER, 9, 9)
        engine.play_day(ActionType.CLAIM, 9, 8)
        path = str(tmp_path / "save.json")
        save_game(game, path)

        loaded = load_game(path)
        assert loaded is not game
        assert loaded.game_id == game.game_id
        assert loaded.day == 2
        assert [s.history for s in loaded.sides] == [s.history for s in game.sides]
        assert np.array_equal(loaded.board.rice_levels, game.board.rice_levels)
        assert loaded.board.is_watered(9, 9)
        assert loaded.board.tile_at(9, 8).owner == 0
        assert loaded.human.controlled_tiles == game.human.controlled_tiles
        assert get_game_summary(loaded) == get_game_summary(game)

        # The loaded game keeps playing
        TurnEngine(loaded).play_day(ActionType.COLLECT_WATER)
        assert loaded.day == 3
        assert game.day == 2

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_game(str(tmp_path / "nope.json"))

    def test_load_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(GameStateError):
            load_game(str(path))

    def test_load_wrong_shape(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"version": 1, "sides": []}))
        with pytest.raises(GameStateError):
            load_game(str(path))

    def test_load_rejects_history_mismatch(self, game, tmp_path):
        path = tmp_path / "save.json"
        save_game(game, str(path))
        data = json.loads(path.read_text())
        data["day"] = 4
        path.write_text(json.dumps(data))
        with pytest.raises(GameStateError):
            load_game(str(path))

    def test_save_to_missing_directory(self, game, tmp_path):
        with pytest.raises(OSError):
            save_game(game, str(tmp_path / "no" / "such" / "save.json"))

    def _saved(self, game, tmp_path):
        path = tmp_path / "save.json"
        save_game(game, str(path))
        return path, json.loads(path.read_text())

    def test_load_rejects_bad_number(self, game, tmp_path):
        path, data = self._saved(game, tmp_path)
        data["sides"][0]["units"] = "lots"
        path.write_text(json.dumps(data))
        with pytest.raises(GameStateError):
            load_game(str(path))

    def test_load_rejects_non_square_board(self, game, tmp_path):
        path, data = self._saved(game, tmp_path)
        data["board"]["tiles"].pop()
        path.write_text(json.dumps(data))
        with pytest.raises(GameStateError):
            load_game(str(path))

    def test_load_rejects_invalid_utf8(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_bytes(b"\xff\xfe{")
        with pytest.raises(GameStateError):
            load_game(str(path))

    @pytest.mark.parametrize("owner", [2, -1, "p1", True])
    def test_load_rejects_unknown_tile_owner(self, game, tmp_path, owner):
        path, data = self._saved(game, tmp_path)
        data["board"]["tiles"][3][3]["owner"] = owner
        path.write_text(json.dumps(data))
        with pytest.raises(GameStateError):
            load_game(str(path))

    def test_load_rejects_tile_count_mismatch(self, game, tmp_path):
        path, data = self._saved(game, tmp_path)
        data["sides"][1]["controlled_tiles"] = 5
        path.write_text(json.dumps(data))
        with pytest.raises(GameStateError):
            load_game(str(path))
