"""Coordinate notation (``e2-e4``, ``e7e8q``) as produced by drag-and-drop input."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from chessrules.core.enums import PieceType
from chessrules.core.errors import EmptySource, InvalidPromotion, UnknownMove
from chessrules.core.move import Move
from chessrules.core.move_generator import PROMOTION_TYPES, build_move, pawn_last_rank
from chessrules.core.notation.san import castling_kind, parse_castling, strip_annotations
from chessrules.core.piece import piece_type_from_letter
from chessrules.core.types import Square, parse_square, rank_of, square_name

if TYPE_CHECKING:
    from chessrules.core.board import Board
    from chessrules.core.state import GameState

_COORD_RE = re.compile(
    r"^(?P<src>[a-z][0-9]+)\s*[-x:]?\s*(?P<dest>[a-z][0-9]+)(?:=?(?P<promo>[a-z]))?$"
)


def parse_coordinate(text: str, board: Board, state: GameState) -> Move:
    """Parse ``<from><to>[promotion]`` text into a :class:`Move`.

    Castling may be written as the king's two-square move or with the SAN
    castling keywords.
    """
    clean = strip_annotations(text)
    castle = castling_kind(clean)
    if castle is not None:
        return parse_castling(board, state, castle)

    match = _COORD_RE.match(clean.lower())
    if match is None:
        raise UnknownMove(f"Unrecognised coordinate move: {text!r}")

    promotion: PieceType | None = None
    if match["promo"]:
        try:
            promotion = piece_type_from_letter(match["promo"].upper())
        except ValueError:
            raise InvalidPromotion(f"Unknown promotion piece in {text!r}", missing=False) from None

    return move_from_squares(
        board,
        state,
        parse_square(match["src"]),
        parse_square(match["dest"]),
        promotion,
    )


def move_from_squares(
    board: Board,
    state: GameState,
    from_sq: Square,
    to_sq: Square,
    promotion: PieceType | None = None,
) -> Move:
    """Build the move a front end means by dragging *from_sq* onto *to_sq*."""
    piece = board.occupant(from_sq)
    if piece is None:
        raise EmptySource(f"No piece on {square_name(from_sq)}")
    board.occupant(to_sq)

    reaches_last_rank = (
        piece.piece_type == PieceType.PAWN
        and rank_of(to_sq) == pawn_last_rank(piece.color)
    )
    if reaches_last_rank and promotion is None:
        raise InvalidPromotion(
            f"{square_name(from_sq)}{square_name(to_sq)} must name a promotion piece",
            missing=True,
        )
    if promotion is not None:
        if not reaches_last_rank:
            raise InvalidPromotion(
                f"{square_name(from_sq)}{square_name(to_sq)} cannot promote", missing=False
            )
        if promotion not in PROMOTION_TYPES:
            raise InvalidPromotion(f"Cannot promote to {promotion.name.lower()}", missing=False)

    return build_move(board, state, from_sq, to_sq, promotion)
