"""The chess board: piece placement, turns, move history and captures."""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType

from termchess.pieces import Color, MoveRecord, Piece, PieceType, Space
from termchess.rules import (
    BOARD_SIZE,
    Grid,
    empty_grid,
    is_in_check,
    is_space_attacked,
    piece_can_move,
)

_BACK_RANK = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

_LETTERS = {piece_type.symbol(): piece_type for piece_type in PieceType}


def _piece_from_letter(letter: str) -> Piece | None:
    if letter == "_":
        return None
    piece_type = _LETTERS.get(letter.upper())
    if piece_type is None:
        raise ValueError(f"unrecognized character {letter!r} in board state")
    return Piece(piece_type, Color.WHITE if letter.isupper() else Color.BLACK)


def _check_square(x: int, y: int) -> None:
    if not (0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE):
        raise IndexError(f"square ({x}, {y}) is off the board")


class Board:
    """A game position together with the moves that led to it."""

    def __init__(self) -> None:
        self._spaces: Grid = empty_grid()
        for x, piece_type in enumerate(_BACK_RANK):
            self._spaces[0][x].piece = Piece(piece_type, Color.WHITE)
            self._spaces[1][x].piece = Piece(PieceType.PAWN, Color.WHITE)
            self._spaces[6][x].piece = Piece(PieceType.PAWN, Color.BLACK)
            self._spaces[7][x].piece = Piece(piece_type, Color.BLACK)
        self._turn = Color.WHITE
        self._moves: list[MoveRecord] = []
        self._captured: dict[Color, dict[PieceType, int]] = {
            Color.WHITE: {},
            Color.BLACK: {},
        }

    @classmethod
    def make_custom(
        cls, placements: Iterable[tuple[Piece, int, int]], starting_color: Color
    ) -> Board:
        """Build a board holding only the given ``(piece, x, y)`` placements."""
        board = cls()
        board._spaces = empty_grid()
        for piece, x, y in placements:
            _check_square(x, y)
            board._spaces[y][x].piece = Piece(piece.piece_type, piece.color, piece.has_moved)
        board._turn = starting_color
        return board

    @classmethod
    def from_strs(cls, state: Sequence[str]) -> Board:
        """Build a board from eight rank strings (top rank first) and a turn letter.

        Only placement and turn are set; no piece is marked as having moved.
        """
        if len(state) != 9:
            raise ValueError(f"expected 9 strings in board state, got {len(state)}")
        board = cls()
        board._spaces = empty_grid()
        for row in range(BOARD_SIZE):
            rank = state[BOARD_SIZE - 1 - row]
            if len(rank) != BOARD_SIZE:
                raise ValueError(
                    f"expected each row to be 8 characters, found row with {len(rank)}"
                )
            for col, letter in enumerate(rank):
                board._spaces[row][col].piece = _piece_from_letter(letter)
        turn_letter = state[8][:1]
        if turn_letter == "W":
            board._turn = Color.WHITE
        elif turn_letter == "B":
            board._turn = Color.BLACK
        else:
            raise ValueError(f"unrecognized board state colour {state[8]!r}")
        return board

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (
            self._spaces == other._spaces
            and self._turn is other._turn
            and self._moves == other._moves
            and self._captured == other._captured
        )

    def __repr__(self) -> str:
        return f"Board(turn={self._turn.name}, moves={len(self._moves)})"

    def space(self, x: int, y: int) -> Space:
        """Return the square at file ``x`` and rank ``y``."""
        _check_square(x, y)
        return self._spaces[y][x]

    @property
    def spaces(self) -> Grid:
        """The grid of squares, indexed ``spaces[y][x]``."""
        return self._spaces

    @property
    def turn_color(self) -> Color:
        """The side to move."""
        return self._turn

    def copy(self) -> Board:
        """Return an independent copy of this board."""
        return copy.deepcopy(self)

    def _toggle_turn(self) -> None:
        self._turn = self._turn.opposite()

    def _record_capture_by(self, color: Color, captured_type: PieceType) -> None:
        counts = self._captured[color]
        counts[captured_type] = counts.get(captured_type, 0) + 1

    def _place_moving(
        self,
        moving: Piece,
        x1: int,
        y1: int,
        x2: int,
        y2: int,
        captured: Piece | None,
        is_promotion: bool,
    ) -> None:
        self._moves.append(
            MoveRecord(
                origin=(x1, y1),
                dest=(x2, y2),
                capture=captured,
                piece_type=moving.piece_type,
                first_move=not moving.has_moved,
                promotion=is_promotion,
            )
        )
        moving.mark_moved()
        self._spaces[y2][x2].piece = moving

    def _settle(self, color: Color) -> bool:
        """Finish a move: take it back if it leaves ``color`` in check."""
        self._toggle_turn()
        if self.is_in_check(color):
            self.undo_last_move()
            return False
        return True

    def _try_en_passant(self, piece: Piece, x1: int, y1: int, x2: int, y2: int) -> bool | None:
        color = piece.color
        if not (
            (color is Color.WHITE and y1 == 4 and y2 == 5)
            or (color is Color.BLACK and y1 == 3 and y2 == 2)
        ):
            return None
        if not self._moves:
            return None
        last = self._moves[-1]
        (lx1, ly1), (lx2, ly2) = last.origin, last.dest
        if not (
            last.piece_type is PieceType.PAWN
            and abs(x1 - x2) == 1
            and lx1 == lx2
            and abs(ly1 - ly2) == 2
            and x2 == lx2
        ):
            return None
        moving = self._spaces[y1][x1].remove_piece()
        captured = self._spaces[ly2][lx2].remove_piece()
        assert moving is not None and captured is not None
        self._record_capture_by(moving.color, captured.piece_type)
        self._place_moving(moving, x1, y1, x2, y2, captured, False)
        return self._settle(color)

    def _try_castle(self, piece: Piece, x1: int, y1: int, x2: int, y2: int) -> bool | None:
        color = piece.color
        rank = 0 if color is Color.WHITE else BOARD_SIZE - 1
        if y1 != rank or y2 != rank:
            return None
        kingside = x2 > x1
        rook = self._spaces[rank][BOARD_SIZE - 1 if kingside else 0].piece
        if rook is None or rook.has_moved or rook.color is not color:
            return None
        step = 1 if kingside else -1
        spaces = self._spaces
        if (
            is_space_attacked(spaces, x1, y1, color)
            or is_space_attacked(spaces, x1 + step, y1, color)
            or is_space_attacked(spaces, x2, y1, color)
            or spaces[y1][x1 + step].piece is not None
        ):
            return False
        moving = spaces[y1][x1].remove_piece()
        assert moving is not None
        self._place_moving(moving, x1, y1, x2, y2, None, False)
        rook_from, rook_to = (BOARD_SIZE - 1, 5) if kingside else (0, 3)
        castled_rook = spaces[y1][rook_from].remove_piece()
        assert castled_rook is not None
        castled_rook.mark_moved()
        spaces[y1][rook_to].piece = castled_rook
        return self._settle(color)

    def move_piece(self, x1: int, y1: int, x2: int, y2: int) -> bool:
        """Play a move for the side to move; return whether it was legal and made."""
        _check_square(x1, y1)
        _check_square(x2, y2)
        if (x1, y1) == (x2, y2):
            return False
        piece = self._spaces[y1][x1].piece
        if piece is None or piece.color is not self._turn:
            return False
        color = piece.color
        target = self._spaces[y2][x2].piece
        last_rank = BOARD_SIZE - 1 if color is Color.WHITE else 0
        is_promotion = piece.piece_type is PieceType.PAWN and y2 == last_rank

        if piece.piece_type is PieceType.PAWN and target is None:
            result = self._try_en_passant(piece, x1, y1, x2, y2)
            if result is not None:
                return result

        if (
            piece.piece_type is PieceType.KING
            and not piece.has_moved
            and abs(x1 - x2) == 2
            and target is None
        ):
            result = self._try_castle(piece, x1, y1, x2, y2)
            if result is not None:
                return result

        if not piece_can_move(self._spaces, x1, y1, x2, y2):
            return False

        moving = self._spaces[y1][x1].remove_piece()
        assert moving is not None
        captured = self._spaces[y2][x2].remove_piece()
        if captured is not None:
            self._record_capture_by(moving.color, captured.piece_type)
        self._place_moving(moving, x1, y1, x2, y2, captured, is_promotion)
        return self._settle(color)

    def promote_pawn(self, x: int, y: int, piece_type: PieceType) -> None:
        """Replace the pawn on its last rank at (x, y) with a piece of ``piece_type``."""
        _check_square(x, y)
        space = self._spaces[y][x]
        piece = space.piece
        if piece is None:
            raise ValueError("promote called on space without piece")
        if piece.piece_type is not PieceType.PAWN:
            raise ValueError("promote called on non-pawn")
        last_rank = BOARD_SIZE - 1 if piece.color is Color.WHITE else 0
        if y != last_rank:
            raise ValueError("promote called on ineligible pawn")
        space.piece = Piece(piece_type, piece.color, has_moved=True)

    def undo_last_move(self) -> None:
        """Take back the most recent move; does nothing when no move was made."""
        if not self._moves:
            return
        last = self._moves.pop()
        (x1, y1), (x2, y2) = last.origin, last.dest
        piece = self._spaces[y2][x2].remove_piece()
        if piece is None:
            raise ValueError("no piece on the destination of the last move")
        is_castle = piece.piece_type is PieceType.KING and y1 == y2 and abs(x1 - x2) == 2
        if last.first_move:
            piece.unmark_moved()
        if last.is_capture():
            captured = last.take_captured_piece()
            assert captured is not None
            counts = self._captured[piece.color]
            if captured.piece_type in counts:
                counts[captured.piece_type] -= 1
                if counts[captured.piece_type] == 0:
                    del counts[captured.piece_type]
            self._spaces[y2][x2].piece = captured
        elif is_castle:
            rook_home, rook_now = (BOARD_SIZE - 1, x2 - 1) if x1 < x2 else (0, x2 + 1)
            rook = self._spaces[y2][rook_now].remove_piece()
            if rook is None:
                raise ValueError("castled rook is missing")
            rook.unmark_moved()
            self._spaces[y1][rook_home].piece = rook
        if last.promotion:
            self._spaces[y1][x1].piece = Piece(PieceType.PAWN, piece.color, has_moved=True)
        else:
            self._spaces[y1][x1].piece = piece
        self._toggle_turn()

    @property
    def captured_by_white(self) -> Mapping[PieceType, int]:
        """Counts of black pieces taken by white."""
        return MappingProxyType(self._captured[Color.WHITE])

    @property
    def captured_by_black(self) -> Mapping[PieceType, int]:
        """Counts of white pieces taken by black."""
        return MappingProxyType(self._captured[Color.BLACK])

    def is_in_check(self, color: Color) -> bool:
        """Whether the king of ``color`` is attacked."""
        return is_in_check(self._spaces, color)

    def is_in_checkmate(self, color: Color) -> bool:
        """Whether ``color`` is in check and no move of theirs escapes it."""
        if not self.is_in_check(color):
            return False
        for y0, row in enumerate(self._spaces):
            for x0, space in enumerate(row):
                piece = space.piece
                if piece is None or piece.color is not color:
                    continue
                trial = self.copy()
                for x1 in range(BOARD_SIZE):
                    for y1 in range(BOARD_SIZE):
                        if trial.move_piece(x0, y0, x1, y1) and not trial.is_in_check(color):
                            return False
        return True