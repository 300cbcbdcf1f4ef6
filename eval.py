#!/usr/bin/env python3
"""
Evaluate the TicTacToe engine, or play against it.

Usage:
    python eval.py
    python eval.py --games 200 --seed 1
    python eval.py --play --human o
"""

import sys
import argparse
from pathlib import Path

# Add src to path
sys.path = [str(Path(__file__).parent / "src")] + sys.path

from tttbot import (
    EvalConfig,
    eval_self_play,
    eval_vs_random,
    eval_vs_minimax,
    eval_optimal_agreement_all_states,
    eval_evaluation_consistency_all_states,
)
from tttbot.contract import ContractError, get_move, take_turn


def print_board(state_text):
    """Pretty print board."""
    symbols = {'.': ' ', 'X': 'X', 'O': 'O'}
    for i in range(3):
        row = "|".join(symbols[state_text[i*3 + j]] for j in range(3))
        print(row)
        if i < 2:
            print("-+-+-")


def play_interactive(human_is_x):
    """Play a game against the engine through the contract methods."""
    state = "........."
    winner = None

    print("\n=== Interactive Game ===")
    print(f"You are {'X (play first)' if human_is_x else 'O'}")
    print("Enter moves as numbers 0-8:")
    print(" 0 | 1 | 2 ")
    print("---+---+---")
    print(" 3 | 4 | 5 ")
    print("---+---+---")
    print(" 6 | 7 | 8 ")
    print()

    if not human_is_x:
        state = get_move(state).updated_state
        print("Engine plays first")

    while winner is None:
        print_board(state)
        print()
        moves = [i for i, c in enumerate(state) if c == '.']
        try:
            action = int(input(f"Your move ({moves}): "))
        except (ValueError, KeyboardInterrupt, EOFError):
            print("\nGame aborted")
            return

        try:
            response = take_turn(state, action)
        except ContractError as e:
            print(f"Invalid move: {e}")
            continue

        state = response.updated_state
        winner = response.winner
        print()

    print_board(state)
    if winner == "Empty":
        print("\nDraw!")
    elif (winner == "X") == human_is_x:
        print("\nYou win!")
    else:
        print("\nEngine wins!")


def main():
    parser = argparse.ArgumentParser(description="Evaluate TicTacToe engine")
    parser.add_argument("--play", action="store_true", help="Play interactive game")
    parser.add_argument("--human", choices=["x", "o"], default="x", help="Side for --play")
    parser.add_argument("--games", type=int, default=100, help="Number of eval games")
    parser.add_argument("--seed", type=int, default=0, help="Random seed")
    parser.add_argument("--no-progress", action="store_true", help="Hide progress bars")

    args = parser.parse_args()

    # Interactive play
    if args.play:
        play_interactive(args.human == "x")
        return

    config = EvalConfig(games=args.games, seed=args.seed, show_progress=not args.no_progress)

    print("\n=== Evaluation ===")

    # Self-play
    winner = eval_self_play()
    print(f"\nSelf-play winner: {winner.label}")

    # vs Random
    print(f"\nvs Random ({config.games} games)...")
    w, d, l = eval_vs_random(config)
    print(f"  Wins:   {w:.2%}")
    print(f"  Draws:  {d:.2%}")
    print(f"  Losses: {l:.2%}")

    # vs Minimax
    print(f"\nvs Minimax ({config.games} games)...")
    results = eval_vs_minimax(config)
    print(f"  Wins:   {results['engine_w']:.2%}")
    print(f"  Draws:  {results['engine_d']:.2%}")
    print(f"  Losses: {results['engine_l']:.2%}")

    # Minimax agreement
    print("\nMinimax Agreement (all states)...")
    ag = eval_optimal_agreement_all_states(config)
    print(f"  States:      {ag['n_states']}")
    print(f"  Top-1 Opt:   {ag['optimal_top1_acc']:.2%}")
    print(f"  Blunders:    {ag['blunder_rate']:.2%}")
    for state in ag["_blunders"][:10]:
        print(f"    {state}")

    # Evaluation consistency
    print("\nEvaluation Consistency (all states)...")
    cons = eval_evaluation_consistency_all_states(config)
    print(f"  States:      {cons['n_states']}")
    print(f"  X wins:      {cons['x_wins']}")
    print(f"  O wins:      {cons['o_wins']}")
    print(f"  Draws:       {cons['draws']}")
    print(f"  In play:     {cons['in_play']}")
    print(f"  Mismatches:  {cons['mismatches']} (sums: {cons['sums_mismatches']})")

    if cons["mismatches"] or cons["sums_mismatches"]:
        sys.exit(1)


if __name__ == "__main__":
    main()
