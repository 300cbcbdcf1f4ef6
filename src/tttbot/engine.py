"""
Heuristic move selection for TicTacToe.

The engine does not search the game tree. Each cell value is added into the
sum of every line it lies on, so a line summing to +3/-3 is a win and a line
summing to +2/-2 is a threat (two marks and an empty cell). One ply of
lookahead over these sums is enough to win, block, and create forks.
"""

from dataclasses import dataclass
from typing import List, Tuple, Union

from .game import (
    BOARD_SIZE,
    CENTER,
    CORNERS,
    NUM_LINES,
    O_WINS_SUM,
    ROW_SIZE,
    X_WINS_SUM,
    CellState,
    GameState,
)


@dataclass(frozen=True)
class Move:
    """The engine played; `updated_state` is the board after its move."""
    updated_state: GameState


@dataclass(frozen=True)
class GameOver:
    """The game has ended; EMPTY as winner means a draw."""
    winner: CellState


@dataclass(frozen=True)
class Sums:
    """Evaluation of a position that is still in play."""
    sums: Tuple[int, ...]
    total: int


MoveResult = Union[Move, GameOver]
Evaluation = Union[Sums, GameOver]


def evaluate_position(state: GameState) -> Evaluation:
    """
    Compute line sums and classify the position.

    Sums are indexed rows 0..2, columns 0..2, main diagonal, anti-diagonal.
    An X win is reported before an O win.
    """
    sums = [0] * NUM_LINES
    total = 0
    for x, cell in enumerate(state.board):
        i, j = divmod(x, ROW_SIZE)
        n = int(cell)
        total += n
        sums[i] += n
        sums[ROW_SIZE + j] += n
        if i == j:
            sums[ROW_SIZE + ROW_SIZE] += n
        if i + j == ROW_SIZE - 1:
            sums[ROW_SIZE + ROW_SIZE + 1] += n

    if X_WINS_SUM in sums:
        return GameOver(CellState.X)
    if O_WINS_SUM in sums:
        return GameOver(CellState.O)
    if CellState.EMPTY not in state.board:
        return GameOver(CellState.EMPTY)

    return Sums(sums=tuple(sums), total=total)


def get_move(state: GameState) -> MoveResult:
    """
    Pick the next move for the side to move, or report that the game is over.

    Priority: forced move, immediate win, block, create a threat (most
    threats wins, ties go to the highest index), center, corner, first
    empty cell.
    """
    # The first move by each side is fixed.
    empty_count = state.count(CellState.EMPTY)
    if empty_count == BOARD_SIZE:
        return Move(state.place(0, CellState.X))
    if empty_count == BOARD_SIZE - 1:
        if state.board[CENTER] == CellState.EMPTY:
            return Move(state.place(CENTER, CellState.O))
        return Move(state.place(0, CellState.O))

    evaluation = evaluate_position(state)
    if isinstance(evaluation, GameOver):
        return evaluation

    # X adds 1 and O subtracts 1, X first: total is 0 iff X is to play.
    player = CellState.X if evaluation.total == 0 else CellState.O

    candidates: List[Tuple[GameState, Evaluation]] = []
    for i in state.empty_cells():
        new_state = state.place(i, player)
        candidates.append((new_state, evaluate_position(new_state)))

    if len(candidates) == 1:
        return Move(candidates[0][0])

    for new_state, result in candidates:
        if isinstance(result, GameOver) and result.winner == player:
            return Move(new_state)

    opponent_threat = int(player.opponent()) * (X_WINS_SUM - 1)
    threat_line = next(
        (i for i, s in enumerate(evaluation.sums) if s == opponent_threat), None
    )
    if threat_line is not None:
        for new_state, result in candidates:
            if isinstance(result, Sums) and result.sums[threat_line] == opponent_threat + int(player):
                return Move(new_state)
        raise RuntimeError(f"A blocking move must be possible on {state.to_text()}")

    player_threat = -opponent_threat
    best_state = None
    best_count = 0
    for new_state, result in candidates:
        if isinstance(result, GameOver):
            continue
        threats_count = result.sums.count(player_threat)
        # >= keeps the last of equally good forks
        if threats_count > 0 and threats_count >= best_count:
            best_state, best_count = new_state, threats_count
    if best_state is not None:
        return Move(best_state)

    # Otherwise: center, then corners, then sides.
    if state.board[CENTER] == CellState.EMPTY:
        return Move(state.place(CENTER, player))
    for i in CORNERS:
        if state.board[i] == CellState.EMPTY:
            return Move(state.place(i, player))

    return Move(candidates[0][0])
