"""Movement rules for pieces on an 8x8 grid of spaces indexed ``spaces[y][x]``."""

from __future__ import annotations

from termchess.pieces import Color, Piece, PieceType, Space

BOARD_SIZE = 8

Grid = list[list[Space]]


def empty_grid() -> Grid:
    """Return an 8x8 grid of empty, correctly shaded spaces."""
    return [
        [
            Space(Color.BLACK if (row + col) % 2 == 0 else Color.WHITE)
            for col in range(BOARD_SIZE)
        ]
        for row in range(BOARD_SIZE)
    ]


def _piece_at(spaces: Grid, x: int, y: int) -> Piece:
    piece = spaces[y][x].piece
    if piece is None:
        raise ValueError(f"no piece at ({x}, {y})")
    return piece


def _require(piece: Piece, rule: str, *allowed: PieceType) -> None:
    if piece.piece_type not in allowed:
        raise ValueError(f"{rule} called on {piece.piece_type.name.lower()}")


def _blocked_by_own(spaces: Grid, piece: Piece, x2: int, y2: int) -> bool:
    return spaces[y2][x2].piece_color() is piece.color


def pawn_can_move(spaces: Grid, x1: int, y1: int, x2: int, y2: int) -> bool:
    """Whether the pawn at (x1, y1) may step, double-step or capture to (x2, y2)."""
    piece = _piece_at(spaces, x1, y1)
    _require(piece, "pawn_can_move", PieceType.PAWN)
    target = spaces[y2][x2].piece
    forward = 1 if piece.color is Color.WHITE else -1

    double_step = (
        not piece.has_moved
        and y2 == y1 + 2 * forward
        and x1 == x2
        and target is None
        and spaces[y1 + forward][x1].piece is None
    )
    if double_step:
        return True
    if y2 != y1 + forward:
        return False
    if x1 == x2:
        return target is None
    return (
        abs(x1 - x2) == 1
        and target is not None
        and target.color is piece.color.opposite()
    )


def rook_can_move(spaces: Grid, x1: int, y1: int, x2: int, y2: int) -> bool:
    """Whether the rook (or queen) at (x1, y1) may slide along a line to (x2, y2)."""
    piece = _piece_at(spaces, x1, y1)
    _require(piece, "rook_can_move", PieceType.ROOK, PieceType.QUEEN)
    if _blocked_by_own(spaces, piece, x2, y2):
        return False
    if x1 != x2 and y1 != y2:
        return False
    if x1 == x2:
        between = (spaces[y][x1] for y in range(min(y1, y2) + 1, max(y1, y2)))
    else:
        between = (spaces[y1][x] for x in range(min(x1, x2) + 1, max(x1, x2)))
    return all(space.piece is None for space in between)


def bishop_can_move(spaces: Grid, x1: int, y1: int, x2: int, y2: int) -> bool:
    """Whether the bishop (or queen) at (x1, y1) may slide diagonally to (x2, y2)."""
    piece = _piece_at(spaces, x1, y1)
    _require(piece, "bishop_can_move", PieceType.BISHOP, PieceType.QUEEN)
    if _blocked_by_own(spaces, piece, x2, y2):
        return False
    distance = abs(x1 - x2)
    if distance != abs(y1 - y2):
        return False
    step_x = 1 if x1 < x2 else -1
    step_y = 1 if y1 < y2 else -1
    return all(
        spaces[y1 + i * step_y][x1 + i * step_x].piece is None
        for i in range(1, distance)
    )


def queen_can_move(spaces: Grid, x1: int, y1: int, x2: int, y2: int) -> bool:
    """Whether the queen at (x1, y1) may move to (x2, y2)."""
    return rook_can_move(spaces, x1, y1, x2, y2) or bishop_can_move(
        spaces, x1, y1, x2, y2
    )


def _king_reaches(spaces: Grid, piece: Piece, x1: int, y1: int, x2: int, y2: int) -> bool:
    if _blocked_by_own(spaces, piece, x2, y2):
        return False
    return abs(x1 - x2) <= 1 and abs(y1 - y2) <= 1


def king_can_move(spaces: Grid, x1: int, y1: int, x2: int, y2: int) -> bool:
    """Whether the king at (x1, y1) may step to (x2, y2) without stepping into attack."""
    piece = _piece_at(spaces, x1, y1)
    _require(piece, "king_can_move", PieceType.KING)
    if not _king_reaches(spaces, piece, x1, y1, x2, y2):
        return False
    return not is_space_attacked(spaces, x2, y2, piece.color)


def knight_can_move(spaces: Grid, x1: int, y1: int, x2: int, y2: int) -> bool:
    """Whether the knight at (x1, y1) may jump to (x2, y2)."""
    piece = _piece_at(spaces, x1, y1)
    _require(piece, "knight_can_move", PieceType.KNIGHT)
    if _blocked_by_own(spaces, piece, x2, y2):
        return False
    return {abs(x1 - x2), abs(y1 - y2)} == {1, 2}


_RULES = {
    PieceType.PAWN: pawn_can_move,
    PieceType.ROOK: rook_can_move,
    PieceType.BISHOP: bishop_can_move,
    PieceType.QUEEN: queen_can_move,
    PieceType.KING: king_can_move,
    PieceType.KNIGHT: knight_can_move,
}


def piece_can_move(spaces: Grid, x1: int, y1: int, x2: int, y2: int) -> bool:
    """Whether the piece at (x1, y1) may move to (x2, y2) by its own rule."""
    piece = _piece_at(spaces, x1, y1)
    return _RULES[piece.piece_type](spaces, x1, y1, x2, y2)


def is_space_attacked(spaces: Grid, x: int, y: int, color: Color) -> bool:
    """Whether any piece not of ``color`` could move to (x, y)."""
    for y0, row in enumerate(spaces):
        for x0, space in enumerate(row):
            if (x0, y0) == (x, y):
                continue
            piece = space.piece
            if piece is None or piece.color is color:
                continue
            if piece.piece_type is PieceType.KING:
                # A king covers its neighbours whether or not it could safely step there.
                if _king_reaches(spaces, piece, x0, y0, x, y):
                    return True
            elif piece_can_move(spaces, x0, y0, x, y):
                return True
    return False


def find_king(spaces: Grid, color: Color) -> tuple[int, int]:
    """Return the (x, y) position of the king of ``color``."""
    for y, row in enumerate(spaces):
        for x, space in enumerate(row):
            piece = space.piece
            if piece is not None and piece.piece_type is PieceType.KING and piece.color is color:
                return x, y
    raise ValueError(f"unable to find {color.name.lower()} king on board")


def is_in_check(spaces: Grid, color: Color) -> bool:
    """Whether the king of ``color`` is attacked."""
    x, y = find_king(spaces, color)
    return is_space_attacked(spaces, x, y, color)