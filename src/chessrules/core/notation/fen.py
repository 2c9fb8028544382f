"""FEN setup strings: reading custom positions and writing the current one."""

from __future__ import annotations

from itertools import groupby

from chessrules.core.board import Board
from chessrules.core.enums import CastlingRights, Color, PieceType
from chessrules.core.errors import MalformedSquare
from chessrules.core.move_generator import is_in_check
from chessrules.core.piece import Piece
from chessrules.core.state import GameState
from chessrules.core.types import Square, make_square, parse_square, rank_of, square_name

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_SIDES = {"w": Color.WHITE, "b": Color.BLACK}

# FEN order: K, Q, k, q
_RIGHT_LETTERS: tuple[tuple[str, CastlingRights], ...] = (
    ("K", CastlingRights.WHITE_KINGSIDE),
    ("Q", CastlingRights.WHITE_QUEENSIDE),
    ("k", CastlingRights.BLACK_KINGSIDE),
    ("q", CastlingRights.BLACK_QUEENSIDE),
)


def position_from_fen(fen: str) -> tuple[Board, GameState]:
    """Build a board and its game state from *fen*.

    The two clock fields may be omitted. Raises ``ValueError`` on any
    malformed field, when a side does not have exactly one king, and when the
    side that just moved is left in check.
    """
    fields = fen.split()
    if len(fields) not in (4, 5, 6):
        raise ValueError(f"FEN needs 4 to 6 fields, got {len(fields)}: {fen!r}")

    board = _read_placement(fields[0])
    side = _SIDES.get(fields[1])
    if side is None:
        raise ValueError(f"Bad FEN side to move: {fields[1]!r}")
    if is_in_check(board, side.opposite):
        raise ValueError(f"{side.opposite} is in check but it is {side} to move")

    state = GameState(
        side_to_move=side,
        castling=_read_castling(fields[2]),
        en_passant=_read_en_passant(fields[3], side),
        halfmove_clock=_read_counter(fields, 4, default=0, minimum=0),
        fullmove_number=_read_counter(fields, 5, default=1, minimum=1),
    )
    state.record_position(board)
    return board, state


def _read_placement(text: str) -> Board:
    rows = text.split("/")
    if len(rows) != 8:
        raise ValueError(f"FEN placement needs 8 ranks, got {len(rows)}: {text!r}")

    board = Board()
    for rank, row in zip(range(7, -1, -1), rows):
        file = 0
        for ch in row:
            if ch in "12345678":
                file += int(ch)
            elif file < 8:
                board[make_square(file, rank)] = Piece.from_char(ch)
                file += 1
            else:
                file = 9
            if file > 8:
                raise ValueError(f"FEN rank {rank + 1} is too long: {row!r}")
        if file != 8:
            raise ValueError(f"FEN rank {rank + 1} is too short: {row!r}")

    for color in Color:
        kings = board.count(color, PieceType.KING)
        if kings != 1:
            raise ValueError(f"Setup must have one {color} king, found {kings}")
    return board


def _read_castling(text: str) -> CastlingRights:
    if text == "-":
        return CastlingRights.NONE
    letters = dict(_RIGHT_LETTERS)
    if len(set(text)) != len(text) or any(ch not in letters for ch in text):
        raise ValueError(f"Bad FEN castling field: {text!r}")
    rights = CastlingRights.NONE
    for ch in text:
        rights |= letters[ch]
    return rights


def _read_en_passant(text: str, side: Color) -> Square | None:
    if text == "-":
        return None
    try:
        sq = parse_square(text)
    except MalformedSquare:
        raise ValueError(f"Bad FEN en-passant square: {text!r}") from None
    # the target lies behind a pawn the opponent just advanced
    if rank_of(sq) != (5 if side == Color.WHITE else 2):
        raise ValueError(f"En-passant square {text!r} does not fit {side} to move")
    return sq


def _read_counter(fields: list[str], index: int, *, default: int, minimum: int) -> int:
    if len(fields) <= index:
        return default
    text = fields[index]
    if not text.isdigit() or int(text) < minimum:
        raise ValueError(f"Bad FEN move counter: {text!r}")
    return int(text)


def position_to_fen(board: Board, state: GameState) -> str:
    """FEN of *board* with the metadata held in *state*."""
    rows = []
    for rank in range(7, -1, -1):
        cells = [board[make_square(file, rank)] for file in range(8)]
        row = ""
        for is_empty, run in groupby(cells, key=lambda piece: piece is None):
            run = list(run)
            row += str(len(run)) if is_empty else "".join(map(str, run))
        rows.append(row)

    rights = "".join(ch for ch, right in _RIGHT_LETTERS if state.castling & right) or "-"
    ep = "-" if state.en_passant is None else square_name(state.en_passant)
    side = "w" if state.side_to_move == Color.WHITE else "b"
    return " ".join(
        (
            "/".join(rows),
            side,
            rights,
            ep,
            str(state.halfmove_clock),
            str(state.fullmove_number),
        )
    )
