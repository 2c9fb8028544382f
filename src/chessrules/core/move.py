"""Move value object."""

from __future__ import annotations

from dataclasses import dataclass

from chessrules.core.enums import MoveKind, PieceType
from chessrules.core.piece import Piece
from chessrules.core.types import Square, square_name

_PROMO_CHARS: dict[PieceType, str] = {
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
}


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable description of a single board transition.

    ``piece`` is the piece that moves (the pawn, for a promotion).
    ``promotion`` is set only when ``kind`` is :attr:`MoveKind.PROMOTION`.
    """

    from_sq: Square
    to_sq: Square
    kind: MoveKind
    piece: Piece
    promotion: PieceType | None = None

    def __post_init__(self) -> None:
        if (self.kind == MoveKind.PROMOTION) != (self.promotion is not None):
            raise ValueError("promotion piece must be given exactly for PROMOTION moves")

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        base = f"{square_name(self.from_sq)}{square_name(self.to_sq)}"
        if self.promotion is not None:
            base += _PROMO_CHARS.get(self.promotion, "")
        return base

    @property
    def uci(self) -> str:
        """UCI long-algebraic notation."""
        return str(self)

    @property
    def is_castle(self) -> bool:
        return self.kind.is_castle
