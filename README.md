# termchess

Two-player chess in the terminal. Both players share one keyboard. Move the
cursor around the board, select a piece, and then select the square to move it to.

The rules are enforced. A move that would leave your own king in check is
refused. Castling, en passant and pawn promotion are supported, and checkmate
is detected. The pieces each side has captured are listed to the right of the board.

The terminal interface uses the standard library's `curses` module, so it needs
a platform where `curses` is available, such as Linux or macOS.

## Installing

```
pip install .
```

## Playing

```
termchess
```

| Key            | Action                                                       |
|----------------|--------------------------------------------------------------|
| Arrow keys     | Move the cursor one square                                   |
| Space          | Select a piece of the side to move, or move the selected one |
| Space (again)  | On the selected square, deselect it                          |
| Esc            | Deselect the piece and cancel a pending quit/undo prompt     |
| `u` or `z`     | Ask to undo the last move                                    |
| `q`            | Ask to quit                                                  |
| `y` / `n`      | Confirm or cancel the undo/quit prompt                       |

When a pawn reaches the last rank, choose its promotion with `q` (queen),
`r` (rook), `b` (bishop) or `n` (knight). The cursor cannot move and no piece
can be selected until a promotion is chosen, or once the game is won. An undo
is still possible in either case.

The status line under the board shows whose turn it is, the pending prompt,
or the winner once checkmate is reached.

## Using the board in code

The rules live in `termchess.board.Board` and `termchess.rules`, with the
piece types in `termchess.pieces`. Squares are `(x, y)` pairs counted from 0:
`x` is the file (a–h), and `y` is the rank, with White's back rank at 0.

```python
from termchess.board import Board
from termchess.pieces import Color

board = Board()
board.move_piece(4, 1, 4, 3)   # e2-e4; returns False for an illegal move
print(board.turn_color)        # Color.BLACK
board.undo_last_move()
print(board.is_in_checkmate(Color.WHITE))
```

- `Board.move_piece` returns whether the move was legal and made.
- `Board.promote_pawn` replaces a pawn that stands on its last rank.
- `Board.captured_by_white` and `Board.captured_by_black` map piece types to
  the number of pieces taken.
- `Board.make_custom` builds a position from `(piece, x, y)` placements.
- `Board.from_strs` builds a position from eight rows of text, top rank
  first, and a ninth entry of `"W"` or `"B"` for the side to move. Upper case
  letters are White's pieces, lower case are Black's, and `_` is an empty
  square. Only placement and turn are set. No piece counts as having moved,
  and there is no move history.

`termchess.game.Game` holds the interactive state (cursor, selection and
prompts) and takes keys through `Game.handle_key`, independently of the screen.

## What it does not do

There is no computer opponent. Both sides are played by people at the same
keyboard. Games cannot be saved or loaded. Stalemate and other draws
(repetition, the fifty-move rule, insufficient material) are not detected.
Only checkmate ends a game.

## Running the tests

```
pip install ".[test]"
pytest
```