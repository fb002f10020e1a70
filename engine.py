"""
Turn engine for the rice paddy territory game.

Drives one day at a time: the human side's single action, the scripted
opponent's turn, then end-of-day resolution. The engine does no I/O of its
own; callers observe it through the game log and an optional callback.
"""

from typing import Any, Callable, Dict, Optional, Tuple

import ai
from actions import ActionType, Outcome, apply_action
from models import OpponentOutcome
from state import GameState, load_config, log_event
from upkeep import perform_upkeep

EventHook = Callable[[str, Dict[str, Any]], None]

# Event kinds passed to the hook
ACTION_APPLIED = 'action_applied'
OPPONENT_ACTED = 'opponent_acted'
DAY_RESOLVED = 'day_resolved'
GAME_OVER = 'game_over'


class TurnEngine:
    """
    Day-cycle driver over a GameState.

    p1 gets at most one action per day; p2 is played by ai.decide exactly
    once per day, before the day can be resolved.
    Once a winner is known every further step raises ValueError.
    """

    def __init__(self, game_state: GameState, on_event: Optional[EventHook] = None,
                 config: Optional[Dict[str, Any]] = None):
        self.game_state = game_state
        self.on_event = on_event
        self.config = config or load_config()
        self._human_acted = False
        self._opponent_acted = False

    @property
    def is_over(self) -> bool:
        return self.game_state.phase == 'ended'

    def _emit(self, kind: str, payload: Dict[str, Any]) -> None:
        if self.on_event is not None:
            self.on_event(kind, payload)

    def _ensure_running(self) -> None:
        if self.is_over:
            raise ValueError(f"Game {self.game_state.game_id} has ended (winner: {self.game_state.winner})")

    def apply_human_action(self, action_type: ActionType, x: Optional[int] = None,
                           y: Optional[int] = None) -> Tuple[Outcome, str]:
        """Apply p1's action for the day."""
        self._ensure_running()
        if self._human_acted:
            raise ValueError(f"p1 has already acted on day {self.game_state.day}")

        outcome, description = apply_action(self.game_state, self.game_state.human,
                                            action_type, x, y, self.config)
        self._human_acted = True
        self._emit(ACTION_APPLIED, {
            'side_id': self.game_state.human.id,
            'action': action_type.value,
            'outcome': outcome,
            'description': description,
        })
        return outcome, description

    def run_opponent_turn(self) -> Tuple[OpponentOutcome, str]:
        """Let the scripted side take its action for the day."""
        self._ensure_running()
        if self._opponent_acted:
            raise ValueError(f"p2 has already acted on day {self.game_state.day}")
        ai_side = self.game_state.ai
        outcome, description = ai.decide(ai_side, self.game_state.human,
                                         self.game_state.board, self.config)
        self._opponent_acted = True
        log_event(self.game_state, description, side_id=ai_side.id, outcome=outcome.value)
        self._emit(OPPONENT_ACTED, {
            'side_id': ai_side.id,
            'outcome': outcome,
            'description': description,
        })
        return outcome, description

    def end_of_day(self) -> Dict:
        """Resolve the day and report the winner if the game just ended."""
        self._ensure_running()
        if not self._opponent_acted:
            raise ValueError(f"p2 has not acted yet on day {self.game_state.day}")
        results = perform_upkeep(self.game_state, self.config)
        self._human_acted = False
        self._opponent_acted = False
        self._emit(DAY_RESOLVED, results)
        if results['winner']:
            self._emit(GAME_OVER, {'winner': results['winner'], 'day': self.game_state.day})
        return results

    def play_day(self, action_type: ActionType, x: Optional[int] = None,
                 y: Optional[int] = None) -> Dict:
        """
        Play one full day: p1's action, p2's turn, end-of-day resolution.

        Returns:
            Dictionary with 'action', 'opponent' and 'upkeep' results
        """
        outcome, description = self.apply_human_action(action_type, x, y)
        ai_outcome, ai_description = self.run_opponent_turn()
        upkeep = self.end_of_day()
        return {
            'action': {'outcome': outcome.value, 'description': description},
            'opponent': {'outcome': ai_outcome.value, 'description': ai_description},
            'upkeep': upkeep,
        }
