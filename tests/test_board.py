import pytest

from termchess.board import Board
from termchess.pieces import Color, Piece, PieceType


def piece(kind, color, moved=False):
    return Piece(kind, color, has_moved=moved)


def wp():
    return piece(PieceType.PAWN, Color.WHITE)


def bp():
    return piece(PieceType.PAWN, Color.BLACK)


def wk():
    return piece(PieceType.KING, Color.WHITE)


def bk():
    return piece(PieceType.KING, Color.BLACK)


def wr():
    return piece(PieceType.ROOK, Color.WHITE)


def br():
    return piece(PieceType.ROOK, Color.BLACK)


def type_at(board, x, y):
    return board.space(x, y).piece.piece_type


def test_initial_layout():
    b = Board()
    assert type_at(b, 4, 0) is PieceType.KING
    assert b.space(4, 0).piece.color is Color.WHITE
    assert type_at(b, 3, 7) is PieceType.QUEEN
    assert b.space(3, 7).piece.color is Color.BLACK
    assert b.space(0, 0).color is Color.BLACK
    assert b.space(1, 0).color is Color.WHITE
    assert b.space(3, 4).piece is None
    assert b.turn_color is Color.WHITE


def test_pawn_can_en_passant():
    b = Board.make_custom(
        [(wp(), 0, 1), (bp(), 1, 3), (wk(), 0, 4), (bk(), 7, 4)], Color.WHITE
    )
    assert b.move_piece(0, 1, 0, 3)
    assert b.move_piece(1, 3, 0, 2)
    assert b.space(0, 3).piece is None
    assert type_at(b, 0, 2) is PieceType.PAWN
    assert b.captured_by_black[PieceType.PAWN] == 1


def test_king_can_capture_queen():
    b = Board.make_custom(
        [(wk(), 4, 0), (piece(PieceType.QUEEN, Color.BLACK), 5, 0)], Color.WHITE
    )
    assert b.move_piece(4, 0, 5, 0)
    assert type_at(b, 5, 0) is PieceType.KING


def test_queenside_castle():
    b = Board.make_custom([(wk(), 4, 0), (wr(), 0, 0)], Color.WHITE)
    assert b.move_piece(4, 0, 2, 0)
    assert type_at(b, 2, 0) is PieceType.KING
    assert type_at(b, 3, 0) is PieceType.ROOK
    b = Board.make_custom([(bk(), 4, 7), (br(), 0, 7)], Color.BLACK)
    assert b.move_piece(4, 7, 2, 7)
    assert type_at(b, 2, 7) is PieceType.KING
    assert type_at(b, 3, 7) is PieceType.ROOK


def test_kingside_castle():
    b = Board.make_custom([(wk(), 4, 0), (wr(), 7, 0)], Color.WHITE)
    assert b.move_piece(4, 0, 6, 0)
    assert type_at(b, 6, 0) is PieceType.KING
    assert type_at(b, 5, 0) is PieceType.ROOK
    b = Board.make_custom([(bk(), 4, 7), (br(), 7, 7)], Color.BLACK)
    assert b.move_piece(4, 7, 6, 7)
    assert type_at(b, 6, 7) is PieceType.KING
    assert type_at(b, 5, 7) is PieceType.ROOK


def test_cant_castle_through_check():
    b = Board.make_custom([(wk(), 4, 0), (wr(), 7, 0), (br(), 5, 2)], Color.WHITE)
    assert not b.move_piece(4, 0, 6, 0)
    b = Board.make_custom([(bk(), 4, 7), (br(), 7, 7), (wr(), 5, 5)], Color.WHITE)
    assert not b.move_piece(4, 7, 6, 7)


def test_cant_castle_with_moved_rook():
    b = Board.make_custom(
        [(wk(), 4, 0), (piece(PieceType.ROOK, Color.WHITE, moved=True), 7, 0)],
        Color.WHITE,
    )
    assert not b.move_piece(4, 0, 6, 0)
    assert type_at(b, 4, 0) is PieceType.KING


def test_board_from_strs_default():
    strs = [
        "rnbqkbnr",
        "pppppppp",
        "________",
        "________",
        "________",
        "________",
        "PPPPPPPP",
        "RNBQKBNR",
        "W",
    ]
    assert Board.from_strs(strs) == Board()


def test_from_strs_black_to_move():
    strs = ["____k___"] + ["________"] * 6 + ["____K___", "B"]
    b = Board.from_strs(strs)
    assert b.turn_color is Color.BLACK
    assert b.space(4, 7).piece == bk()
    assert b.space(4, 0).piece == wk()


@pytest.mark.parametrize(
    "state",
    [
        ["________"] * 8,
        ["________"] * 7 + ["_______", "W"],
        ["x_______"] + ["________"] * 7 + ["W"],
        ["________"] * 8 + ["X"],
    ],
)
def test_from_strs_rejects_bad_state(state):
    with pytest.raises(ValueError):
        Board.from_strs(state)


def test_undo_first_move():
    b = Board()
    b2 = Board()
    assert b.move_piece(1, 1, 1, 3)
    assert b != b2
    assert b.turn_color is Color.BLACK
    b.undo_last_move()
    assert b == b2
    assert b.turn_color is Color.WHITE


def test_undo_capture():
    b = Board()
    b2 = Board()
    assert b.move_piece(1, 1, 1, 3)
    assert b2.move_piece(1, 1, 1, 3)
    assert b.move_piece(2, 6, 2, 4)
    assert b2.move_piece(2, 6, 2, 4)
    assert b.move_piece(1, 3, 2, 4)
    assert b != b2
    assert b.turn_color is Color.BLACK
    b.undo_last_move()
    assert b == b2
    assert b.turn_color is Color.WHITE


def test_undo_castle():
    b = Board.make_custom([(wk(), 4, 0), (wr(), 7, 0)], Color.WHITE)
    b2 = b.copy()
    assert b.move_piece(4, 0, 6, 0)
    assert b.turn_color is Color.BLACK
    b.undo_last_move()
    assert b == b2
    assert b.turn_color is Color.WHITE

    b = Board.make_custom([(bk(), 4, 7), (br(), 0, 7)], Color.BLACK)
    b2 = b.copy()
    assert b.move_piece(4, 7, 2, 7)
    assert b.turn_color is Color.WHITE
    b.undo_last_move()
    assert b == b2
    assert b.turn_color is Color.BLACK


def test_undo_without_moves_is_noop():
    b = Board()
    b.undo_last_move()
    assert b == Board()


def test_prevent_move_exposing_check():
    b = Board()
    assert b.move_piece(4, 1, 4, 2)
    assert b.move_piece(2, 6, 2, 5)
    assert b.move_piece(4, 2, 4, 3)
    assert b.move_piece(3, 7, 0, 4)
    b2 = b.copy()
    assert not b.move_piece(3, 1, 3, 2)
    assert b == b2


def test_move_out_of_turn_rejected():
    b = Board()
    assert not b.move_piece(1, 6, 1, 5)
    assert b == Board()


def test_move_to_same_square_rejected():
    b = Board()
    assert not b.move_piece(1, 1, 1, 1)
    assert b.turn_color is Color.WHITE


def test_off_board_square_raises():
    b = Board()
    with pytest.raises(IndexError):
        b.move_piece(0, 1, 0, 8)
    with pytest.raises(IndexError):
        b.space(-1, 0)


def test_promote():
    b = Board.make_custom([(wp(), 0, 7), (bp(), 0, 0)], Color.WHITE)
    expected = Board.make_custom(
        [
            (piece(PieceType.BISHOP, Color.WHITE, moved=True), 0, 7),
            (piece(PieceType.ROOK, Color.BLACK, moved=True), 0, 0),
        ],
        Color.WHITE,
    )
    b.promote_pawn(0, 7, PieceType.BISHOP)
    b.promote_pawn(0, 0, PieceType.ROOK)
    assert b == expected


def test_promote_errors():
    b = Board.make_custom([(wp(), 0, 6), (wr(), 1, 7)], Color.WHITE)
    with pytest.raises(ValueError):
        b.promote_pawn(2, 7, PieceType.QUEEN)
    with pytest.raises(ValueError):
        b.promote_pawn(1, 7, PieceType.QUEEN)
    with pytest.raises(ValueError):
        b.promote_pawn(0, 6, PieceType.QUEEN)


def test_undo_promotion_restores_pawn():
    b = Board.make_custom(
        [(piece(PieceType.PAWN, Color.WHITE, moved=True), 0, 6), (wk(), 7, 0), (bk(), 7, 7)],
        Color.WHITE,
    )
    assert b.move_piece(0, 6, 0, 7)
    b.promote_pawn(0, 7, PieceType.QUEEN)
    assert type_at(b, 0, 7) is PieceType.QUEEN
    b.undo_last_move()
    assert b.space(0, 7).piece is None
    assert b.space(0, 6).piece == piece(PieceType.PAWN, Color.WHITE, moved=True)
    assert b.turn_color is Color.WHITE


def test_record_capture():
    b = Board.make_custom(
        [
            (wr(), 0, 0),
            (br(), 2, 1),
            (wp(), 1, 1),
            (bp(), 0, 1),
            (bp(), 1, 4),
            (wk(), 7, 7),
            (bk(), 5, 7),
        ],
        Color.WHITE,
    )
    assert dict(b.captured_by_white) == {}
    assert dict(b.captured_by_black) == {}
    assert b.move_piece(0, 0, 0, 1)
    assert b.captured_by_white[PieceType.PAWN] == 1
    assert dict(b.captured_by_black) == {}
    assert b.move_piece(2, 1, 1, 1)
    assert b.captured_by_black[PieceType.PAWN] == 1
    assert b.move_piece(0, 1, 1, 1)
    assert b.captured_by_white[PieceType.ROOK] == 1
    assert b.move_piece(1, 4, 1, 3)
    assert b.move_piece(1, 1, 1, 3)
    assert b.captured_by_white[PieceType.PAWN] == 2
    b.undo_last_move()
    assert b.captured_by_white[PieceType.PAWN] == 1
    b.undo_last_move()
    b.undo_last_move()
    assert PieceType.ROOK not in b.captured_by_white


def test_four_move_checkmate():
    b = Board()
    assert b.move_piece(4, 1, 4, 3)
    assert b.move_piece(0, 6, 0, 5)
    assert b.move_piece(5, 0, 2, 3)
    assert b.move_piece(0, 5, 0, 4)
    assert b.move_piece(3, 0, 7, 4)
    assert b.move_piece(0, 4, 0, 3)
    assert not b.is_in_checkmate(Color.BLACK)
    assert b.move_piece(7, 4, 5, 6)
    assert b.is_in_check(Color.BLACK)
    assert b.is_in_checkmate(Color.BLACK)


def test_cornered_king_isnt_checkmate():
    b = Board()
    assert b.move_piece(4, 1, 4, 2)
    assert b.move_piece(0, 6, 0, 5)
    assert b.move_piece(3, 0, 6, 3)
    assert b.move_piece(0, 5, 0, 4)
    assert b.move_piece(6, 3, 6, 6)
    assert b.move_piece(0, 4, 0, 3)
    assert not b.is_in_checkmate(b.turn_color)
    assert b.move_piece(6, 6, 5, 7)
    assert not b.is_in_checkmate(b.turn_color)


def test_copy_is_independent():
    b = Board()
    c = b.copy()
    assert c.move_piece(4, 1, 4, 3)
    assert b == Board()
    assert c.space(4, 3).piece is not None and b.space(4, 3).piece is None


def test_is_in_check_without_king_raises():
    b = Board.make_custom([(wr(), 0, 0)], Color.WHITE)
    with pytest.raises(ValueError):
        b.is_in_check(Color.WHITE)


def test_make_custom_copies_pieces():
    rook = wr()
    b = Board.make_custom([(rook, 0, 0), (rook, 7, 0), (wk(), 4, 0)], Color.WHITE)
    assert b.move_piece(0, 0, 0, 5)
    assert rook.has_moved is False
    assert b.space(7, 0).piece.has_moved is False