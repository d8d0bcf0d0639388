"""Colours, pieces, board squares and move records."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Color(Enum):
    """Side of a piece, or shade of a square."""

    BLACK = "black"
    WHITE = "white"

    def opposite(self) -> Color:
        """Return the other colour."""
        return Color.WHITE if self is Color.BLACK else Color.BLACK


class PieceType(Enum):
    """Kind of chess piece; the value is the letter it is drawn with."""

    KING = "K"
    QUEEN = "Q"
    ROOK = "R"
    BISHOP = "B"
    KNIGHT = "N"
    PAWN = "P"

    def symbol(self) -> str:
        """Return the single letter used to draw this kind of piece."""
        return self.value


@dataclass
class Piece:
    """A piece on the board, remembering whether it has moved."""

    piece_type: PieceType
    color: Color
    has_moved: bool = False

    def draw(self) -> str:
        """Return the letter this piece is drawn with."""
        return self.piece_type.symbol()

    def mark_moved(self) -> None:
        self.has_moved = True

    def unmark_moved(self) -> None:
        self.has_moved = False


@dataclass
class Space:
    """A square of the board with its shade and the piece on it, if any."""

    color: Color
    piece: Piece | None = None

    def draw(self) -> str:
        """Return the letter of the piece here, or a blank."""
        return self.piece.draw() if self.piece is not None else " "

    def piece_color(self) -> Color | None:
        """Return the colour of the piece here, or None when empty."""
        return self.piece.color if self.piece is not None else None

    def remove_piece(self) -> Piece | None:
        """Take the piece off this square and return it."""
        piece, self.piece = self.piece, None
        return piece


@dataclass
class MoveRecord:
    """One move as played, holding what is needed to take it back."""

    origin: tuple[int, int]
    dest: tuple[int, int]
    capture: Piece | None
    piece_type: PieceType
    first_move: bool
    promotion: bool

    def is_capture(self) -> bool:
        return self.capture is not None

    def take_captured_piece(self) -> Piece | None:
        """Return the captured piece and forget it."""
        captured, self.capture = self.capture, None
        return captured