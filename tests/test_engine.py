import unittest

from tttbot.engine import GameOver, Move, Sums, evaluate_position, get_move
from tttbot.game import (
    CellState,
    GameState,
    is_terminal,
    iter_all_legal_states,
    side_to_move,
)


def parse(text):
    return GameState.from_text(text)


def unwrap_move(result):
    if not isinstance(result, Move):
        raise AssertionError(f"Unexpected game over: {result}")
    return result.updated_state


def unwrap_winner(result):
    if not isinstance(result, GameOver):
        raise AssertionError(f"Unexpected move: {result}")
    return result.winner


class TestEvaluatePosition(unittest.TestCase):
    def test_sums_and_total(self):
        result = evaluate_position(parse("X...O...X"))
        self.assertIsInstance(result, Sums)
        self.assertEqual(result.total, 1)
        # rows, columns, main diagonal, anti-diagonal
        self.assertEqual(result.sums, (1, -1, 1, 1, -1, 1, 1, -1))

    def test_wins_and_draw(self):
        self.assertEqual(evaluate_position(parse("XXXOO....")), GameOver(CellState.X))
        self.assertEqual(evaluate_position(parse("OX.OX.O.X")), GameOver(CellState.O))
        self.assertEqual(evaluate_position(parse("XOXXOOOXX")), GameOver(CellState.EMPTY))

    def test_x_win_reported_before_o_win(self):
        self.assertEqual(evaluate_position(parse("XXXOOO...")), GameOver(CellState.X))

    def test_matches_line_scan_on_all_legal_states(self):
        for state in iter_all_legal_states():
            done, winner = is_terminal(state)
            result = evaluate_position(state)
            if done:
                self.assertEqual(result, GameOver(winner), state.to_text())
            else:
                self.assertIsInstance(result, Sums, state.to_text())


class TestGetMove(unittest.TestCase):
    def test_opening_move(self):
        self.assertEqual(unwrap_move(get_move(GameState())), parse("X........"))

    def test_reply_in_center(self):
        self.assertEqual(unwrap_move(get_move(parse("X........"))), parse("X...O...."))

    def test_reply_in_corner_when_center_taken(self):
        self.assertEqual(unwrap_move(get_move(parse("....X...."))), parse("O...X...."))

    def test_self_game(self):
        # The engine should always draw when playing itself.
        state = GameState()
        while True:
            result = get_move(state)
            if isinstance(result, GameOver):
                winner = result.winner
                break
            state = result.updated_state
        self.assertEqual(winner, CellState.EMPTY)

    def test_x_win(self):
        # The engine should win as X against a bad player.
        state = unwrap_move(get_move(GameState()))
        self.assertEqual(state, parse("X........"))

        # O in opposite corner; X creates a threat
        state = unwrap_move(get_move(parse("X.......O")))
        self.assertEqual(state, parse("X.....X.O"))

        # O blocks; X creates a fork
        state = unwrap_move(get_move(parse("X..O..X.O")))
        self.assertEqual(state, parse("X.XO..X.O"))

        # O blocks one branch; X plays the win
        state = unwrap_move(get_move(parse("X.XOO.X.O")))
        self.assertEqual(state, parse("XXXOO.X.O"))

        self.assertEqual(unwrap_winner(get_move(state)), CellState.X)

    def test_o_win(self):
        # The engine should win as O against a bad player.
        state = unwrap_move(get_move(parse("X........")))
        self.assertEqual(state, parse("X...O...."))

        # X in the lower corner; O creates a threat
        state = unwrap_move(get_move(parse("X...O...X")))
        self.assertEqual(state, parse("X...O..OX"))

        # X creates a fork but misses that O is about to win
        state = unwrap_move(get_move(parse("X.X.O..OX")))
        self.assertEqual(state, parse("XOX.O..OX"))

        self.assertEqual(unwrap_winner(get_move(state)), CellState.O)

    def test_block(self):
        # X threatens the middle column; O must take 7
        state = unwrap_move(get_move(parse("OX..X....")))
        self.assertEqual(state, parse("OX..X..O."))

    def test_win_preferred_over_block(self):
        # Both sides threaten; O wins on the middle column instead of blocking row 0
        state = unwrap_move(get_move(parse("X.X.O..OX")))
        self.assertEqual(evaluate_position(state), GameOver(CellState.O))

    def test_forced_move(self):
        state = unwrap_move(get_move(parse("XOXXOOOX.")))
        self.assertEqual(state, parse("XOXXOOOXX"))
        self.assertEqual(unwrap_winner(get_move(state)), CellState.EMPTY)

    def test_threat_tie_goes_to_last_candidate(self):
        # Candidates 1, 2, 3 and 6 each create one threat; 6 is the last.
        state = unwrap_move(get_move(parse("X.......O")))
        self.assertEqual(state, parse("X.....X.O"))

    def test_fork_tie_goes_to_last_candidate(self):
        # Both 3 and 6 create two threats for X; the later index is played.
        state = unwrap_move(get_move(parse("XO..X...O")))
        self.assertEqual(state, parse("XO..X.X.O"))
        self.assertNotEqual(state, parse("XO.XX...O"))

    def test_terminal_state_is_idempotent(self):
        for text, winner in [
            ("XXXOO.X.O", CellState.X),
            ("XOX.O..OX", CellState.O),
            ("XOXXOOOXX", CellState.EMPTY),
        ]:
            state = parse(text)
            first = get_move(state)
            second = get_move(state)
            self.assertEqual(first, GameOver(winner), text)
            self.assertEqual(first, second)

    def test_deterministic(self):
        state = parse("X..O..X.O")
        self.assertEqual(get_move(state), get_move(state))

    def test_input_not_mutated(self):
        state = parse("X..O..X.O")
        get_move(state)
        self.assertEqual(state.to_text(), "X..O..X.O")

    def test_every_legal_state_gets_a_legal_move(self):
        for state in iter_all_legal_states(include_terminal=False):
            after = unwrap_move(get_move(state))
            changed = [i for i in range(9) if state.board[i] != after.board[i]]
            self.assertEqual(len(changed), 1, state.to_text())
            i = changed[0]
            self.assertEqual(state.board[i], CellState.EMPTY, state.to_text())
            self.assertEqual(after.board[i], side_to_move(state), state.to_text())


if __name__ == "__main__":
    unittest.main()
