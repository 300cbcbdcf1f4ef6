"""
Exact minimax solver for TicTacToe with caching.

Used only to measure the heuristic engine against optimal play.
"""

from typing import Dict, List, Tuple

from .game import CellState, GameState, is_terminal, legal_moves, side_to_move


# Cache: board tuple -> (value, best_moves_tuple), value for the side to move
_MINIMAX_CACHE: Dict[Tuple[CellState, ...], Tuple[int, Tuple[int, ...]]] = {}


def minimax_value_and_moves(state: GameState) -> Tuple[int, List[int]]:
    """
    Compute minimax value and best moves from current state.

    Args:
        state: Current board state; the side to move is inferred from it

    Returns:
        (value, best_moves) where:
        - value: +1 (win), 0 (draw), -1 (loss) from the side to move's perspective
        - best_moves: list of indices achieving optimal value
    """
    key = state.board
    if key in _MINIMAX_CACHE:
        v, best = _MINIMAX_CACHE[key]
        return v, list(best)

    player = side_to_move(state)
    done, winner = is_terminal(state)
    if done:
        if winner == CellState.EMPTY:
            v = 0
        elif winner == player:
            v = +1
        else:
            v = -1
        _MINIMAX_CACHE[key] = (v, tuple())
        return v, []

    best_v = -2
    best_moves: List[int] = []

    for action in legal_moves(state):
        child_v, _ = minimax_value_and_moves(state.place(action, player))
        v_here = -child_v  # Negate for opponent's perspective

        if v_here > best_v:
            best_v = v_here
            best_moves = [action]
        elif v_here == best_v:
            best_moves.append(action)

    _MINIMAX_CACHE[key] = (best_v, tuple(best_moves))
    return best_v, best_moves


def clear_cache():
    """Clear minimax cache (useful for memory management)."""
    _MINIMAX_CACHE.clear()


def cache_size() -> int:
    """Return current cache size."""
    return len(_MINIMAX_CACHE)
