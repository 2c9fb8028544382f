"""SAN (Standard Algebraic Notation) parsing and formatting."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from chessrules.core.enums import MoveKind, PieceType
from chessrules.core.errors import AmbiguousMove, InvalidPromotion, UnknownMove
from chessrules.core.move import Move
from chessrules.core.move_generator import (
    PROMOTION_TYPES,
    MoveGenerator,
    build_move,
    is_in_check,
    pawn_last_rank,
    reaches,
)
from chessrules.core.piece import Piece, piece_letter, piece_type_from_letter
from chessrules.core.types import FILES, RANKS, file_of, make_square, parse_square, rank_of, square_name

if TYPE_CHECKING:
    from chessrules.core.board import Board
    from chessrules.core.state import GameState

_SAN_RE = re.compile(
    r"^(?P<piece>[KQRBN])?"
    r"(?P<file>[a-h])?"
    r"(?P<rank>[1-8])?"
    r"(?P<capture>x)?"
    r"(?P<dest>[a-z][0-9]+)"
    r"(?:=?(?P<promo>[A-Za-z]))?$"
)
_CASTLING: dict[str, MoveKind] = {
    "O-O": MoveKind.CASTLE_KINGSIDE,
    "0-0": MoveKind.CASTLE_KINGSIDE,
    "O-O-O": MoveKind.CASTLE_QUEENSIDE,
    "0-0-0": MoveKind.CASTLE_QUEENSIDE,
}
_SUFFIXES = "+#!?"


def strip_annotations(san: str) -> str:
    """Drop check/mate markers, move-quality glyphs and an ``e.p.`` tag."""
    clean = san.strip()
    if clean.endswith("e.p."):
        clean = clean[:-4].rstrip()
    return clean.rstrip(_SUFFIXES)


def castling_kind(token: str) -> MoveKind | None:
    """Castling side named by *token*, or ``None`` for any other text."""
    return _CASTLING.get(token.upper())


def parse_castling(board: Board, state: GameState, kind: MoveKind) -> Move:
    """Castling move of the side to move; legality is left to the rules."""
    color = state.side_to_move
    king_sq = board.king_square(color)
    if king_sq is None:
        raise UnknownMove(f"{color} has no king to castle with")
    to_file = file_of(king_sq) + (2 if kind == MoveKind.CASTLE_KINGSIDE else -2)
    if not 0 <= to_file < 8:
        raise UnknownMove(f"{color} king cannot castle from {square_name(king_sq)}")
    return Move(king_sq, make_square(to_file, rank_of(king_sq)), kind, board[king_sq])


def parse_san(san: str, board: Board, state: GameState) -> Move:
    """Resolve *san* into exactly one :class:`Move` for the side to move.

    Only reads *board* and *state*. Raises a :class:`ParseError` subclass
    when the text names no move, several moves, a bad square or a bad
    promotion.
    """
    clean = strip_annotations(san)
    if not clean:
        raise UnknownMove(f"Empty move text: {san!r}")

    castle = castling_kind(clean)
    if castle is not None:
        return parse_castling(board, state, castle)

    match = _SAN_RE.match(clean)
    if match is None:
        raise UnknownMove(f"Unrecognised move: {san!r}")

    to_sq = parse_square(match["dest"])
    piece_type = piece_type_from_letter(match["piece"]) if match["piece"] else PieceType.PAWN
    from_file = FILES.index(match["file"]) if match["file"] else None
    from_rank = RANKS.index(match["rank"]) if match["rank"] else None

    promotion: PieceType | None = None
    if match["promo"]:
        letter = match["promo"].upper()
        try:
            promotion = piece_type_from_letter(letter)
        except ValueError:
            raise InvalidPromotion(f"Unknown promotion piece in {san!r}", missing=False) from None
        if promotion not in PROMOTION_TYPES:
            raise InvalidPromotion(f"Cannot promote to {promotion.name.lower()}", missing=False)

    color = state.side_to_move
    piece = Piece(color, piece_type)

    # Disambiguation precedence: file, then rank; the kind is fixed above.
    candidates = board.pieces(color, piece_type)
    if from_file is not None:
        candidates = [sq for sq in candidates if file_of(sq) == from_file]
    if from_rank is not None:
        candidates = [sq for sq in candidates if rank_of(sq) == from_rank]
    candidates = [
        sq for sq in candidates if reaches(board, piece, sq, to_sq, state.en_passant)
    ]
    if piece_type == PieceType.PAWN and from_file is None:
        # a pawn capture always names its source file (``exd5``)
        candidates = [sq for sq in candidates if file_of(sq) == file_of(to_sq)]

    if not candidates:
        raise UnknownMove(f"No {color} {piece_type.name.lower()} can play {san!r}")

    if len(candidates) > 1:
        gen = MoveGenerator(board, state)
        safe = [
            sq for sq in candidates if gen.is_safe(build_move(board, state, sq, to_sq))
        ]
        if safe:
            candidates = safe
        if len(candidates) > 1:
            origins = ", ".join(square_name(sq) for sq in candidates)
            raise AmbiguousMove(f"Ambiguous move: {san!r} could start on {origins}")

    from_sq = candidates[0]
    reaches_last_rank = (
        piece_type == PieceType.PAWN and rank_of(to_sq) == pawn_last_rank(color)
    )
    if reaches_last_rank and promotion is None:
        raise InvalidPromotion(f"{san!r} must name a promotion piece", missing=True)
    if promotion is not None and not reaches_last_rank:
        raise InvalidPromotion(f"{san!r} cannot promote", missing=False)

    move = build_move(board, state, from_sq, to_sq, promotion)
    takes = board[to_sq] is not None or move.kind == MoveKind.EN_PASSANT
    if takes and not match["capture"]:
        raise UnknownMove(f"{san!r} captures on {square_name(to_sq)}; write it with x")
    if match["capture"] and not takes:
        raise UnknownMove(f"{san!r} has nothing to capture on {square_name(to_sq)}")
    return move


def move_to_san(board: Board, state: GameState, move: Move) -> str:
    """Convert a legal *move* to SAN given the position before the move."""
    piece = move.piece

    if move.kind == MoveKind.CASTLE_KINGSIDE:
        san = "O-O"
    elif move.kind == MoveKind.CASTLE_QUEENSIDE:
        san = "O-O-O"
    else:
        san = ""
        is_capture = board[move.to_sq] is not None or move.kind == MoveKind.EN_PASSANT

        if piece.piece_type == PieceType.PAWN:
            if is_capture:
                san += FILES[file_of(move.from_sq)]
        else:
            san += piece_letter(piece.piece_type)

            # Disambiguation
            legal = MoveGenerator(board, state).generate_legal_moves()
            ambiguous = [
                m
                for m in legal
                if m.to_sq == move.to_sq
                and m.from_sq != move.from_sq
                and m.piece == piece
            ]
            if ambiguous:
                same_file = any(
                    file_of(m.from_sq) == file_of(move.from_sq) for m in ambiguous
                )
                same_rank = any(
                    rank_of(m.from_sq) == rank_of(move.from_sq) for m in ambiguous
                )
                if not same_file:
                    san += FILES[file_of(move.from_sq)]
                elif not same_rank:
                    san += RANKS[rank_of(move.from_sq)]
                else:
                    san += square_name(move.from_sq)

        if is_capture:
            san += "x"

        san += square_name(move.to_sq)

        if move.kind == MoveKind.PROMOTION and move.promotion is not None:
            san += "=" + piece_letter(move.promotion)

    # Check / checkmate suffix
    scratch_board = board.copy()
    scratch_state = state.copy()
    scratch_state.commit(scratch_board, move)
    if is_in_check(scratch_board, scratch_state.side_to_move):
        mated = not MoveGenerator(scratch_board, scratch_state).has_legal_move()
        san += "#" if mated else "+"

    return san
