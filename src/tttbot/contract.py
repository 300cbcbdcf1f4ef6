"""
Contract-style entry points around the engine.

`get_move` is the request/response method exposed to callers: it takes a
board string, plays the engine's reply and reports whether that reply ended
the game. `take_turn` additionally applies the user's own move first and
refuses to continue a finished game.
"""

import json
from dataclasses import dataclass
from typing import Dict, Optional

from .engine import GameOver, evaluate_position, get_move as engine_move
from .game import BOARD_SIZE, GameState, ParseError, side_to_move


class ContractError(Exception):
    """Base class for errors surfaced to contract callers."""


class InvalidStateError(ContractError):
    def __init__(self, state: str):
        super().__init__("Invalid state string")
        self.state = state


class GameOverError(ContractError):
    def __init__(self, winner: str):
        super().__init__("Game Over")
        self.winner = winner


class IllegalMoveError(ContractError):
    pass


@dataclass
class GetMoveResponse:
    updated_state: str
    winner: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        """Serializable form; `winner` is omitted while the game continues."""
        out = {"updated_state": self.updated_state}
        if self.winner is not None:
            out["winner"] = self.winner
        return out

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


def _parse_state(state: str) -> GameState:
    try:
        return GameState.from_text(state)
    except ParseError as e:
        raise InvalidStateError(state) from e


def get_move(state: str) -> GetMoveResponse:
    """
    Play the engine's move on `state`.

    If `state` is already terminal it is echoed back with its winner.
    Otherwise the engine is asked a second time about the new state so the
    response can say whether the engine's move ended the game.
    """
    parsed = _parse_state(state)
    result = engine_move(parsed)
    if isinstance(result, GameOver):
        return GetMoveResponse(updated_state=state, winner=result.winner.label)

    updated = result.updated_state
    follow_up = engine_move(updated)
    winner = follow_up.winner.label if isinstance(follow_up, GameOver) else None
    return GetMoveResponse(updated_state=updated.to_text(), winner=winner)


def take_turn(state: str, index: int) -> GetMoveResponse:
    """
    Apply the user's move at `index` for the side to move, then the engine's reply.

    Raises:
        InvalidStateError: `state` does not parse
        GameOverError: `state` is already terminal
        IllegalMoveError: `index` is out of range or occupied
    """
    parsed = _parse_state(state)
    before = evaluate_position(parsed)
    if isinstance(before, GameOver):
        raise GameOverError(before.winner.label)

    if not 0 <= index < BOARD_SIZE:
        raise IllegalMoveError(f"Invalid position {index}. Must be 0-{BOARD_SIZE - 1}.")
    if index not in parsed.empty_cells():
        raise IllegalMoveError(f"Cell {index} is already occupied")

    played = parsed.place(index, side_to_move(parsed))
    after = evaluate_position(played)
    if isinstance(after, GameOver):
        return GetMoveResponse(updated_state=played.to_text(), winner=after.winner.label)

    return get_move(played.to_text())
