"""
tttbot - a deterministic TicTacToe engine behind a contract-style move method.

The engine picks moves from per-line signed sums (win, block, fork, center,
corner) without searching the game tree. A minimax solver and evaluation
harness are included to measure it.
"""

from .game import (
    BOARD_SIZE,
    ROW_SIZE,
    WIN_LINES,
    CellState,
    GameState,
    InvalidCharacter,
    InvalidLength,
    ParseError,
    is_terminal,
    iter_all_legal_states,
    legal_moves,
    side_to_move,
)
from .engine import GameOver, Move, Sums, evaluate_position, get_move
from .contract import (
    ContractError,
    GameOverError,
    GetMoveResponse,
    IllegalMoveError,
    InvalidStateError,
    take_turn,
)
from .minimax import minimax_value_and_moves
from .eval import (
    EvalConfig,
    eval_self_play,
    eval_vs_random,
    eval_vs_minimax,
    eval_optimal_agreement_all_states,
    eval_evaluation_consistency_all_states,
)

__version__ = "0.1.0"
__all__ = [
    "BOARD_SIZE",
    "ROW_SIZE",
    "WIN_LINES",
    "CellState",
    "GameState",
    "ParseError",
    "InvalidLength",
    "InvalidCharacter",
    "is_terminal",
    "iter_all_legal_states",
    "legal_moves",
    "side_to_move",
    "GameOver",
    "Move",
    "Sums",
    "evaluate_position",
    "get_move",
    "ContractError",
    "GameOverError",
    "GetMoveResponse",
    "IllegalMoveError",
    "InvalidStateError",
    "take_turn",
    "minimax_value_and_moves",
    "EvalConfig",
    "eval_self_play",
    "eval_vs_random",
    "eval_vs_minimax",
    "eval_optimal_agreement_all_states",
    "eval_evaluation_consistency_all_states",
]
