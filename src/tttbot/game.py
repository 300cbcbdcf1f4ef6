"""
TicTacToe board model, text serialization and rule helpers.

Board representation: tuple of 9 CellState values, row-major
  - EMPTY:  0  ('.')
  - X:     +1  ('X')
  - O:     -1  ('O')

X always moves first, so the signed sum of a legal board is 0 iff X is to move.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterator, List, Set, Tuple, Union

ROW_SIZE = 3
BOARD_SIZE = ROW_SIZE * ROW_SIZE
NUM_LINES = ROW_SIZE + ROW_SIZE + 2

X_WINS_SUM = ROW_SIZE
O_WINS_SUM = -X_WINS_SUM

CENTER = (ROW_SIZE // 2) * ROW_SIZE + ROW_SIZE // 2
CORNERS = (0, ROW_SIZE - 1, BOARD_SIZE - ROW_SIZE, BOARD_SIZE - 1)


def _build_win_lines() -> List[Tuple[int, ...]]:
    """Rows, then columns, then main diagonal, then anti-diagonal."""
    lines = [tuple(r * ROW_SIZE + c for c in range(ROW_SIZE)) for r in range(ROW_SIZE)]
    lines += [tuple(r * ROW_SIZE + c for r in range(ROW_SIZE)) for c in range(ROW_SIZE)]
    lines.append(tuple(i * ROW_SIZE + i for i in range(ROW_SIZE)))
    lines.append(tuple(i * ROW_SIZE + (ROW_SIZE - 1 - i) for i in range(ROW_SIZE)))
    return lines


WIN_LINES = _build_win_lines()


class CellState(IntEnum):
    """Contents of a single cell; the integer value is used for line sums."""

    EMPTY = 0
    X = 1
    O = -1

    def opponent(self) -> "CellState":
        if self == CellState.X:
            return CellState.O
        if self == CellState.O:
            return CellState.X
        return CellState.EMPTY

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]

    @property
    def label(self) -> str:
        """Human readable name, 'Empty' standing for a draw when used as a winner."""
        return "Empty" if self == CellState.EMPTY else self.name


_SYMBOLS = {CellState.EMPTY: ".", CellState.X: "X", CellState.O: "O"}
_CELLS_BY_BYTE = {ord(symbol): cell for cell, symbol in _SYMBOLS.items()}


class ParseError(ValueError):
    """Raised when a board string cannot be parsed."""

    def __eq__(self, other):
        return type(self) is type(other) and vars(self) == vars(other)

    def __hash__(self):
        return hash((type(self), tuple(sorted(vars(self).items()))))


class InvalidLength(ParseError):
    def __init__(self, expected: int, actual: int):
        super().__init__(f"Invalid input length. Expected={expected} Actual={actual}")
        self.expected = expected
        self.actual = actual


class InvalidCharacter(ParseError):
    def __init__(self, position: int, value: str):
        super().__init__(f"Invalid character {value} at position {position}")
        self.position = position
        self.value = value


def _empty_board() -> Tuple[CellState, ...]:
    return (CellState.EMPTY,) * BOARD_SIZE


@dataclass(frozen=True)
class GameState:
    """Immutable board state."""
    board: Tuple[CellState, ...] = field(default_factory=_empty_board)

    def __post_init__(self):
        if len(self.board) != BOARD_SIZE:
            raise ValueError(f"Board must have {BOARD_SIZE} cells, got {len(self.board)}")
        # Accept plain ints (e.g. from list boards) but store CellState values
        object.__setattr__(self, "board", tuple(CellState(v) for v in self.board))

    @classmethod
    def from_text(cls, text: Union[str, bytes]) -> "GameState":
        """
        Parse a 9-character row-major board string.

        Raises:
            InvalidLength: input is not exactly 9 bytes long
            InvalidCharacter: first byte that is not '.', 'X' or 'O'
        """
        data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
        if len(data) != BOARD_SIZE:
            raise InvalidLength(expected=BOARD_SIZE, actual=len(data))

        cells = []
        for i, byte in enumerate(data):
            cell = _CELLS_BY_BYTE.get(byte)
            if cell is None:
                raise InvalidCharacter(position=i, value=chr(byte))
            cells.append(cell)
        return cls(tuple(cells))

    def to_text(self) -> str:
        return "".join(cell.symbol for cell in self.board)

    def __str__(self) -> str:
        return self.to_text()

    def count(self, cell: CellState) -> int:
        return self.board.count(cell)

    def empty_cells(self) -> List[int]:
        """Indices of empty cells in board order."""
        return [i for i, v in enumerate(self.board) if v == CellState.EMPTY]

    def total(self) -> int:
        return sum(self.board)

    def place(self, index: int, cell: CellState) -> "GameState":
        """Return a new state with `cell` placed at `index`."""
        if not 0 <= index < BOARD_SIZE:
            raise ValueError(f"Invalid position {index}. Must be 0-{BOARD_SIZE - 1}.")
        if self.board[index] != CellState.EMPTY:
            raise ValueError(f"Cell {index} is already occupied by {self.board[index].label}")
        board = list(self.board)
        board[index] = cell
        return GameState(tuple(board))

    def pretty(self) -> str:
        """Multi-line rendering for terminals."""
        rows = []
        for r in range(ROW_SIZE):
            row = self.board[r * ROW_SIZE:(r + 1) * ROW_SIZE]
            rows.append("|".join(" " if v == CellState.EMPTY else v.symbol for v in row))
        return "\n-+-+-\n".join(rows)


def winners_set(state: GameState) -> Set[CellState]:
    """Return set of players owning a full line (both if the board is illegal)."""
    wins = set()
    for line in WIN_LINES:
        first = state.board[line[0]]
        if first != CellState.EMPTY and all(state.board[i] == first for i in line):
            wins.add(first)
    return wins


def is_terminal(state: GameState) -> Tuple[bool, CellState]:
    """
    Check if board is terminal by scanning lines.

    Returns:
        (is_terminal, winner) where winner is X/O, or EMPTY for a draw or
        an ongoing game
    """
    wset = winners_set(state)
    if len(wset) >= 2:
        # Illegal board state (both win) - treat as draw
        return True, CellState.EMPTY
    if len(wset) == 1:
        return True, next(iter(wset))
    if CellState.EMPTY not in state.board:
        return True, CellState.EMPTY
    return False, CellState.EMPTY


def legal_moves(state: GameState) -> List[int]:
    """Return list of legal move indices (empty squares)."""
    return state.empty_cells()


def side_to_move(state: GameState) -> CellState:
    """Infer side to move from board state (X plays first)."""
    return CellState.X if state.count(CellState.X) == state.count(CellState.O) else CellState.O


def is_legal_board(state: GameState) -> bool:
    """Check if board respects game rules."""
    x_cnt = state.count(CellState.X)
    o_cnt = state.count(CellState.O)

    # X goes first, so x_cnt == o_cnt or x_cnt == o_cnt + 1
    if not (x_cnt == o_cnt or x_cnt == o_cnt + 1):
        return False

    # Can't have both winners
    if len(winners_set(state)) >= 2:
        return False

    return True


def iter_all_legal_states(include_terminal: bool = True) -> Iterator[GameState]:
    """
    Iterate over all legal board states.

    Yields:
        GameState for every board with a legal mark count and at most one
        winner, optionally skipping terminal boards.
    """
    digit_cells = (CellState.EMPTY, CellState.X, CellState.O)
    for n in range(3 ** BOARD_SIZE):
        # Decode base-3 representation
        x = n
        cells = []
        for _ in range(BOARD_SIZE):
            cells.append(digit_cells[x % 3])
            x //= 3

        state = GameState(tuple(cells))
        if not is_legal_board(state):
            continue
        if not include_terminal and is_terminal(state)[0]:
            continue
        yield state
