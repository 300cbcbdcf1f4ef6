"""
Evaluation functions.

Measures the heuristic engine in self-play, against random and minimax
opponents, and checks it exhaustively over every legal board.
"""

import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence, Tuple

import torch
from tqdm.auto import tqdm, trange

from .engine import GameOver, Sums, evaluate_position, get_move
from .game import (
    BOARD_SIZE,
    NUM_LINES,
    O_WINS_SUM,
    WIN_LINES,
    X_WINS_SUM,
    CellState,
    GameState,
    is_terminal,
    iter_all_legal_states,
    legal_moves,
    side_to_move,
)
from .minimax import minimax_value_and_moves

# A player maps the current state to the state after its move
Player = Callable[[GameState], GameState]

# Outcome code for a board that is still in play (wins are +1/-1, draw 0)
IN_PLAY = 2


@dataclass
class EvalConfig:
    """Evaluation configuration."""

    # Games per match
    games: int = 500

    # Random seed
    seed: int = 0

    # Minimax opponent samples among optimal moves instead of taking the first
    opponent_plays_optimal_random: bool = True

    # States per tensor batch in exhaustive checks
    batch_size: int = 4096

    # Logging
    show_progress: bool = True


def engine_player(state: GameState) -> GameState:
    result = get_move(state)
    if isinstance(result, GameOver):
        raise RuntimeError(f"Engine asked to move on finished game {state.to_text()}")
    return result.updated_state


def random_player(rng: random.Random) -> Player:
    def play(state: GameState) -> GameState:
        return state.place(rng.choice(legal_moves(state)), side_to_move(state))
    return play


def minimax_player(rng: random.Random, optimal_random: bool = True) -> Player:
    def play(state: GameState) -> GameState:
        _, best_moves = minimax_value_and_moves(state)
        action = rng.choice(best_moves) if optimal_random else best_moves[0]
        return state.place(action, side_to_move(state))
    return play


def play_game(x_player: Player, o_player: Player, state: GameState = None) -> CellState:
    """Play to the end and return the winner (EMPTY for a draw)."""
    state = state if state is not None else GameState()
    while True:
        done, winner = is_terminal(state)
        if done:
            return winner
        mover = x_player if side_to_move(state) == CellState.X else o_player
        state = mover(state)


def eval_self_play() -> CellState:
    """Engine against itself from the empty board."""
    return play_game(engine_player, engine_player)


def _match(opponent: Player, config: EvalConfig, desc: str) -> Tuple[int, int, int]:
    wins = draws = losses = 0
    for g in trange(config.games, desc=desc, disable=not config.show_progress):
        engine_side = CellState.X if g % 2 == 0 else CellState.O
        if engine_side == CellState.X:
            winner = play_game(engine_player, opponent)
        else:
            winner = play_game(opponent, engine_player)

        if winner == CellState.EMPTY:
            draws += 1
        elif winner == engine_side:
            wins += 1
        else:
            losses += 1
    return wins, draws, losses


def eval_vs_random(config: EvalConfig) -> Tuple[float, float, float]:
    """
    Evaluate engine vs random opponent, alternating sides.

    Returns:
        (win_rate, draw_rate, loss_rate)
    """
    rng = random.Random(config.seed)
    wins, draws, losses = _match(random_player(rng), config, "vs Random")
    total = wins + draws + losses
    return wins / total, draws / total, losses / total


def eval_vs_minimax(config: EvalConfig) -> Dict[str, float]:
    """
    Evaluate engine vs minimax, alternating sides.

    Returns:
        Dict with 'games', 'engine_w', 'engine_d', 'engine_l'
    """
    rng = random.Random(config.seed)
    opponent = minimax_player(rng, config.opponent_plays_optimal_random)
    wins, draws, losses = _match(opponent, config, "vs Minimax")
    total = wins + draws + losses
    return {
        "games": total,
        "engine_w": wins / total,
        "engine_d": draws / total,
        "engine_l": losses / total,
    }


def _played_index(before: GameState, after: GameState) -> int:
    return next(i for i in range(BOARD_SIZE) if before.board[i] != after.board[i])


def eval_optimal_agreement_all_states(config: EvalConfig) -> Dict[str, object]:
    """
    Compare the engine's move with minimax on all legal non-terminal states.

    A blunder is a move whose minimax value is worse than the best available.

    Returns:
        Dict with metrics and raw data (prefixed with '_')
    """
    states = list(iter_all_legal_states(include_terminal=False))
    optimal = 0
    blunders: List[str] = []
    disagreements: List[str] = []

    for state in tqdm(states, desc="Agreement", disable=not config.show_progress):
        best_v, best_moves = minimax_value_and_moves(state)
        after = engine_player(state)
        action = _played_index(state, after)
        if action in best_moves:
            optimal += 1
            continue
        disagreements.append(state.to_text())
        child_v, _ = minimax_value_and_moves(after)
        if -child_v < best_v:
            blunders.append(state.to_text())

    n = len(states)
    return {
        "n_states": n,
        "optimal_top1_acc": optimal / n,
        "blunder_rate": len(blunders) / n,
        "_disagreements": disagreements,
        "_blunders": blunders,
    }


def _build_line_matrix() -> torch.Tensor:
    """[8, 9] incidence matrix, rows in canonical line order."""
    m = torch.zeros(NUM_LINES, BOARD_SIZE, dtype=torch.float32)
    for k, line in enumerate(WIN_LINES):
        m[k, list(line)] = 1.0
    return m


LINE_MATRIX = _build_line_matrix()


def boards_to_tensor(states: Sequence[GameState]) -> torch.Tensor:
    """Stack boards into a [N, 9] float tensor of cell values."""
    return torch.tensor([[int(v) for v in s.board] for s in states], dtype=torch.float32)


def tensor_line_sums(boards: torch.Tensor) -> torch.Tensor:
    """
    Line sums for a batch of boards.

    Args:
        boards: [N, 9] cell values

    Returns:
        [N, 8] int64 sums in canonical line order
    """
    return (boards.float() @ LINE_MATRIX.t()).round().to(torch.int64)


def classify_boards(boards: torch.Tensor) -> torch.Tensor:
    """
    Outcome code per board: +1 X wins, -1 O wins, 0 draw, IN_PLAY otherwise.

    X wins take precedence over O wins, as in evaluate_position.
    """
    sums = tensor_line_sums(boards)
    x_win = (sums == X_WINS_SUM).any(dim=1)
    o_win = (sums == O_WINS_SUM).any(dim=1)
    full = (boards != 0).all(dim=1)

    codes = torch.full((boards.shape[0],), IN_PLAY, dtype=torch.int64)
    codes[full] = 0
    codes[o_win] = -1
    codes[x_win] = 1
    return codes


@torch.inference_mode()
def eval_evaluation_consistency_all_states(config: EvalConfig) -> Dict[str, int]:
    """
    Check evaluate_position against batched tensor classification on every legal board.

    Returns:
        Dict with outcome counts and the number of mismatching boards
    """
    states = list(iter_all_legal_states(include_terminal=True))
    n = len(states)
    counts = {"x_wins": 0, "o_wins": 0, "draws": 0, "in_play": 0}
    mismatches = 0
    sums_mismatches = 0

    for i in trange(0, n, config.batch_size, desc="Consistency", disable=not config.show_progress):
        chunk = states[i:i + config.batch_size]
        boards = boards_to_tensor(chunk)
        codes = classify_boards(boards).tolist()
        sums = tensor_line_sums(boards).tolist()

        for state, code, batch_sums in zip(chunk, codes, sums):
            result = evaluate_position(state)
            if isinstance(result, Sums):
                expected = IN_PLAY
                if list(result.sums) != batch_sums:
                    sums_mismatches += 1
            else:
                expected = int(result.winner)
            if expected != code:
                mismatches += 1
                tqdm.write(f"  Mismatch on {state.to_text()}: engine={expected} tensor={code}")

            if code == 1:
                counts["x_wins"] += 1
            elif code == -1:
                counts["o_wins"] += 1
            elif code == 0:
                counts["draws"] += 1
            else:
                counts["in_play"] += 1

    return {
        "n_states": n,
        **counts,
        "mismatches": mismatches,
        "sums_mismatches": sums_mismatches,
    }
