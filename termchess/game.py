"""Interactive terminal front end: key handling, drawing and the main loop."""

from __future__ import annotations

import argparse
import curses
import os
from enum import Enum, auto
from typing import Any

from termchess.board import Board
from termchess.pieces import Color, PieceType

SPACE_WIDTH = 5
SPACE_HEIGHT = 3
BOARD_SIZE = 8
STATUS_ROW = SPACE_HEIGHT * BOARD_SIZE + 1
STATUS_WIDTH = 27
CAPTURED_COLUMN = SPACE_WIDTH * BOARD_SIZE + SPACE_WIDTH // 2
CAPTURED_TOP_ROW = 1
CAPTURED_BOTTOM_ROW = SPACE_HEIGHT * BOARD_SIZE - 1
CAPTURED_BLOCK_ROWS = 6
CAPTURED_BLOCK_WIDTH = 16

_TOP_ORDER = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.PAWN,
)
_BOTTOM_ORDER = tuple(reversed(_TOP_ORDER))


class Key(Enum):
    """Keys the game responds to."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    ESCAPE = "escape"
    SPACE = " "
    B = "b"
    R = "r"
    Q = "q"
    N = "n"
    Y = "y"
    U = "u"
    Z = "z"

    @classmethod
    def from_char(cls, char: str) -> Key | None:
        """Return the key for a typed character, or None if it has no meaning."""
        return _CHAR_KEYS.get(char)


_CHAR_KEYS = {key.value: key for key in Key if len(key.value) == 1}
_CHAR_KEYS["\x1b"] = Key.ESCAPE

_ARROWS = {
    Key.UP: (0, 1),
    Key.DOWN: (0, -1),
    Key.LEFT: (-1, 0),
    Key.RIGHT: (1, 0),
}


class Game:
    """State of an interactive game: board, cursor, selection and prompts."""

    def __init__(self, board: Board | None = None) -> None:
        self.board = board if board is not None else Board()
        self.selected: tuple[int, int] | None = None
        self.promoting: tuple[int, int] | None = None
        self.victor: Color | None = None
        self.undoing = False
        self.quitting = False
        self._cursor = (0, 0)

    def cursor_square(self) -> tuple[int, int]:
        """Return the (x, y) square under the cursor."""
        return self._cursor

    def status(self) -> str:
        """Return the status line text."""
        if self.quitting:
            return "QUIT? (y/n)"
        if self.undoing:
            return "UNDO? (y/n)"
        if self.victor is not None:
            return f"{self.victor.name} WINS!"
        if self.promoting is not None:
            return "SELECT PROMOTION: (q/r/b/n)"
        return self.board.turn_color.name

    def captured_rows(self) -> tuple[list[str], list[str]]:
        """Return the captured-piece rows.

        The first list holds pieces taken by black, queens first, drawn downward
        from the top; the second holds pieces taken by white, pawns first, drawn
        upward from the bottom.
        """
        by_black = self.board.captured_by_black
        by_white = self.board.captured_by_white
        top = [f"{kind.symbol()} " * by_black[kind] for kind in _TOP_ORDER if kind in by_black]
        bottom = [
            f"{kind.symbol()} " * by_white[kind] for kind in _BOTTOM_ORDER if kind in by_white
        ]
        return top, bottom

    def handle_key(self, key: Key) -> bool:
        """Act on one key press; return False once quitting is confirmed."""
        can_move = self.promoting is None and self.victor is None
        if key in _ARROWS:
            if can_move:
                dx, dy = _ARROWS[key]
                x, y = self._cursor
                nx, ny = x + dx, y + dy
                if 0 <= nx < BOARD_SIZE and 0 <= ny < BOARD_SIZE:
                    self._cursor = (nx, ny)
        elif key is Key.B:
            self._promote(PieceType.BISHOP)
        elif key is Key.R:
            self._promote(PieceType.ROOK)
        elif key in (Key.Z, Key.U):
            self.undoing = True
            self.quitting = False
        elif key is Key.Q:
            if self.promoting is not None:
                self._promote(PieceType.QUEEN)
            else:
                self.quitting = True
                self.undoing = False
        elif key is Key.Y:
            if self.undoing:
                self.selected = None
                self.promoting = None
                self.victor = None
                self.board.undo_last_move()
                self.undoing = False
            if self.quitting:
                return False
        elif key is Key.N:
            if self.undoing:
                self.undoing = False
            elif self.quitting:
                self.quitting = False
            else:
                self._promote(PieceType.KNIGHT)
        elif key is Key.ESCAPE:
            self.selected = None
            self.quitting = False
            self.undoing = False
        elif key is Key.SPACE and can_move:
            self.quitting = False
            self.undoing = False
            self._select_or_move()
        return True

    def _promote(self, piece_type: PieceType) -> None:
        if self.promoting is None:
            return
        x, y = self.promoting
        self.board.promote_pawn(x, y, piece_type)
        self.promoting = None
        self._check_victor()

    def _select_or_move(self) -> None:
        x, y = self._cursor
        if self.selected is None:
            if self.board.space(x, y).piece_color() is self.board.turn_color:
                self.selected = (x, y)
            return
        if self.selected == (x, y):
            self.selected = None
            return
        sx, sy = self.selected
        if not self.board.move_piece(sx, sy, x, y):
            return
        self.selected = None
        piece = self.board.space(x, y).piece
        last_rank = BOARD_SIZE - 1 if piece is not None and piece.color is Color.WHITE else 0
        if piece is not None and piece.piece_type is PieceType.PAWN and y == last_rank:
            self.promoting = (x, y)
        else:
            self.promoting = None
        self._check_victor()

    def _check_victor(self) -> None:
        turn = self.board.turn_color
        if self.board.is_in_checkmate(turn):
            self.victor = turn.opposite()


class _Tone(Enum):
    LIGHT_SQUARE = auto()
    DARK_SQUARE = auto()
    WHITE_PIECE = auto()
    BLACK_PIECE = auto()
    HIGHLIGHT = auto()
    PROMPT = auto()


_PAIRS = {
    _Tone.LIGHT_SQUARE: (curses.COLOR_BLACK, curses.COLOR_WHITE),
    _Tone.DARK_SQUARE: (curses.COLOR_WHITE, curses.COLOR_BLACK),
    _Tone.WHITE_PIECE: (curses.COLOR_GREEN, curses.COLOR_BLACK),
    _Tone.BLACK_PIECE: (curses.COLOR_RED, curses.COLOR_BLACK),
    _Tone.HIGHLIGHT: (curses.COLOR_BLACK, curses.COLOR_GREEN),
    _Tone.PROMPT: (curses.COLOR_MAGENTA, curses.COLOR_BLACK),
}


class _Palette:
    """Curses attributes for each tone; plain until colours are loaded."""

    def __init__(self) -> None:
        self._attrs = dict.fromkeys(_Tone, 0)

    def load(self) -> None:
        try:
            if not curses.has_colors():
                return
            curses.start_color()
            for number, (tone, (fg, bg)) in enumerate(_PAIRS.items(), start=1):
                curses.init_pair(number, fg, bg)
                self._attrs[tone] = curses.color_pair(number)
        except curses.error:
            return

    def __getitem__(self, tone: _Tone) -> int:
        return self._attrs[tone]


_palette = _Palette()


def _put(screen: Any, row: int, col: int, text: str, attr: int = 0) -> None:
    try:
        screen.addstr(row, col, text, attr)
    except curses.error:
        pass


def _screen_origin(x: int, y: int) -> tuple[int, int]:
    return (BOARD_SIZE - 1 - y) * SPACE_HEIGHT, x * SPACE_WIDTH


def _draw_space(screen: Any, game: Game, x: int, y: int) -> None:
    space = game.board.space(x, y)
    row, col = _screen_origin(x, y)
    square = _palette[_Tone.LIGHT_SQUARE if space.color is Color.WHITE else _Tone.DARK_SQUARE]
    blank = " " * SPACE_WIDTH
    side = " " * (SPACE_WIDTH // 2)
    _put(screen, row, col, blank, square)
    _put(screen, row + 1, col, side, square)
    if game.selected == (x, y):
        middle = _palette[_Tone.HIGHLIGHT]
    elif space.piece is not None:
        middle = _palette[
            _Tone.WHITE_PIECE if space.piece.color is Color.WHITE else _Tone.BLACK_PIECE
        ]
    else:
        middle = square
    _put(screen, row + 1, col + len(side), space.draw(), middle)
    _put(screen, row + 1, col + len(side) + 1, side, square)
    _put(screen, row + 2, col, blank, square)


def _status_tone(game: Game) -> _Tone:
    if game.quitting or game.undoing or game.victor is not None or game.promoting is not None:
        return _Tone.PROMPT
    return _Tone.WHITE_PIECE if game.board.turn_color is Color.WHITE else _Tone.BLACK_PIECE


def _draw_captured(screen: Any, game: Game) -> None:
    top, bottom = game.captured_rows()
    blank = " " * CAPTURED_BLOCK_WIDTH
    white_attr = _palette[_Tone.WHITE_PIECE]
    black_attr = _palette[_Tone.BLACK_PIECE]
    for offset in range(CAPTURED_BLOCK_ROWS):
        _put(screen, CAPTURED_TOP_ROW + offset, CAPTURED_COLUMN, blank, white_attr)
        _put(screen, CAPTURED_BOTTOM_ROW - offset, CAPTURED_COLUMN, blank, black_attr)
    for offset, text in enumerate(top):
        _put(screen, CAPTURED_TOP_ROW + offset, CAPTURED_COLUMN, text, white_attr)
    for offset, text in enumerate(bottom):
        _put(screen, CAPTURED_BOTTOM_ROW - offset, CAPTURED_COLUMN, text, black_attr)


def render(screen: Any, game: Game) -> None:
    """Draw the board, captured pieces and status line, then place the cursor."""
    for y in range(BOARD_SIZE):
        for x in range(BOARD_SIZE):
            _draw_space(screen, game, x, y)
    _draw_captured(screen, game)
    _put(
        screen,
        STATUS_ROW,
        1,
        game.status().ljust(STATUS_WIDTH),
        _palette[_status_tone(game)],
    )
    x, y = game.cursor_square()
    row, col = _screen_origin(x, y)
    try:
        screen.move(row + SPACE_HEIGHT // 2, col + SPACE_WIDTH // 2)
    except curses.error:
        pass
    screen.refresh()


_SPECIAL_KEYS = {
    curses.KEY_UP: Key.UP,
    curses.KEY_DOWN: Key.DOWN,
    curses.KEY_LEFT: Key.LEFT,
    curses.KEY_RIGHT: Key.RIGHT,
    27: Key.ESCAPE,
}


def _translate(value: int | str) -> Key | None:
    if isinstance(value, str):
        return Key.from_char(value)
    return _SPECIAL_KEYS.get(value)


def run(screen: Any, game: Game) -> None:
    """Read keys from ``screen`` and play ``game`` until the player quits."""
    _palette.load()
    try:
        curses.curs_set(1)
    except curses.error:
        pass
    screen.keypad(True)
    while True:
        render(screen, game)
        key = _translate(screen.get_wch())
        if key is None:
            continue
        if not game.handle_key(key):
            break


def main(argv: list[str] | None = None) -> int:
    """Start an interactive game in the terminal."""
    parser = argparse.ArgumentParser(
        prog="termchess",
        description=(
            "Play chess in the terminal. Arrows move, space selects and moves, "
            "u/z undoes, q quits, escape cancels."
        ),
    )
    parser.parse_args(argv)
    os.environ.setdefault("ESCDELAY", "25")
    curses.wrapper(run, Game())
    return 0