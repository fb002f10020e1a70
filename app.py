from flask import Flask, request, jsonify
from flask_cors import CORS
from actions import ActionType, ActionError
from engine import TurnEngine
from state import GameState, GameStateError, get_game_summary, initialize_game, load_game, resource_series, save_game
from typing import Dict
import threading

app = Flask(__name__)
CORS(app)  # Enable CORS for all routes
games: Dict[str, GameState] = {}  # In-memory storage for game states
turn_lock = threading.Lock()  # Serialises every access to stored games


def _parse_coordinate(data: Dict, key: str):
    value = data.get(key)
    if value is None:
        return None
    return int(value)


@app.route('/api/game/new', methods=['POST'])
def new_game():
    """Create a new game with the provided seed and board size."""
    try:
        data = request.get_json()
        if data is None:
            return jsonify({'error': 'Invalid JSON data'}), 400

        seed = data.get('seed', 42)
        size = data.get('size')

        try:
            seed = int(seed)
            size = int(size) if size is not None else None
        except (ValueError, TypeError):
            return jsonify({'error': 'Seed and size must be integers'}), 400

        if size is not None and size < 2:
            return jsonify({'error': 'Size must be at least 2'}), 400

        game_state = initialize_game(seed, size)
        with turn_lock:
            games[game_state.game_id] = game_state

        return jsonify({'game_id': game_state.game_id})

    except Exception as e:
        return jsonify({'error': f'Failed to create game: {str(e)}'}), 500


@app.route('/api/game/<game_id>/state', methods=['GET'])
def get_game_state(game_id: str):
    """Retrieve the current game state for the given game ID."""
    with turn_lock:
        if game_id not in games:
            return jsonify({'error': 'Game not found'}), 404
        return jsonify(get_game_summary(games[game_id]))


@app.route('/api/game/<game_id>/action', methods=['POST'])
def submit_action(game_id: str):
    """Apply p1's action, run the opponent's turn and resolve the day."""
    try:
        if game_id not in games:
            return jsonify({'error': 'Game not found'}), 404

        data = request.get_json()
        if data is None:
            return jsonify({'error': 'Invalid JSON data'}), 400

        if 'action' not in data:
            return jsonify({'error': 'Request must have an action field'}), 400

        try:
            action_type = ActionType(data['action'])
        except ValueError:
            return jsonify({'error': f"Invalid action type: {data['action']}"}), 400

        try:
            x = _parse_coordinate(data, 'x')
            y = _parse_coordinate(data, 'y')
        except (ValueError, TypeError):
            return jsonify({'error': 'Coordinates must be integers'}), 400

        with turn_lock:
            game_state = games[game_id]
            if game_state.phase == 'ended':
                return jsonify({'error': f'Game has ended, winner: {game_state.winner}'}), 400
            try:
                result = TurnEngine(game_state).play_day(action_type, x, y)
            except ActionError as e:
                return jsonify({'error': str(e)}), 400

            response_data = {
                'game_id': game_id,
                'day': game_state.day,
                'phase': game_state.phase,
                'action': result['action'],
                'opponent': result['opponent'],
                'winner': result['upkeep']['winner'],
                'state': get_game_summary(game_state),
            }
        return jsonify(response_data)

    except Exception as e:
        return jsonify({'error': f'Failed to process action: {str(e)}'}), 500


@app.route('/api/game/<game_id>/log', methods=['GET'])
def get_game_log(game_id: str):
    """Retrieve the full game log for analysis."""
    with turn_lock:
        if game_id not in games:
            return jsonify({'error': 'Game not found'}), 404

        game_state = games[game_id]
        return jsonify({
            'game_id': game_id,
            'day': game_state.day,
            'phase': game_state.phase,
            'log': list(game_state.log)
        })


@app.route('/api/game/<game_id>/history', methods=['GET'])
def get_game_history(game_id: str):
    """Per-day resource series of both sides, for charting."""
    with turn_lock:
        if game_id not in games:
            return jsonify({'error': 'Game not found'}), 404

        game_state = games[game_id]
        return jsonify({
            'game_id': game_id,
            'day': game_state.day,
            'sides': {
                side.id: {name: series.tolist() for name, series in resource_series(side).items()}
                for side in game_state.sides
            }
        })


@app.route('/api/game/<game_id>/save', methods=['POST'])
def save_game_route(game_id: str):
    """Save a game to a file on the server."""
    if game_id not in games:
        return jsonify({'error': 'Game not found'}), 404

    data = request.get_json()
    if not data or 'path' not in data:
        return jsonify({'error': 'Request must have a path field'}), 400

    try:
        with turn_lock:
            save_game(games[game_id], data['path'])
    except OSError as e:
        return jsonify({'error': f'Failed to save game: {str(e)}'}), 500

    return jsonify({'game_id': game_id, 'path': data['path']})


@app.route('/api/game/load', methods=['POST'])
def load_game_route():
    """Load a saved game, replacing any stored game with the same ID."""
    data = request.get_json()
    if not data or 'path' not in data:
        return jsonify({'error': 'Request must have a path field'}), 400

    try:
        game_state = load_game(data['path'])
    except GameStateError as e:
        return jsonify({'error': f'Invalid saved game: {str(e)}'}), 400
    except OSError as e:
        return jsonify({'error': f'Failed to load game: {str(e)}'}), 500

    with turn_lock:
        games[game_state.game_id] = game_state

    return jsonify({'game_id': game_state.game_id, 'day': game_state.day})


if __name__ == '__main__':
    app.run(debug=True, port=5000)
