"""Board - piece placement on an 8x8 board."""

from __future__ import annotations

from collections.abc import Iterator

from chessrules.core.enums import Color, Glyphs, PieceType
from chessrules.core.errors import EmptySource, FriendlyBlock
from chessrules.core.piece import Piece
from chessrules.core.types import FILES, Square, check_square, make_square, square_name

EMPTY_GLYPH = "·"

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


class Board:
    """Mutable 64-square store of optional pieces.

    The board knows occupancy only: no turn order, history or legality.
    Cell index is ``rank * 8 + file``; a piece never records its own square.
    """

    __slots__ = ("_squares", "_king_squares")

    def __init__(self) -> None:
        self._squares: list[Piece | None] = [None] * 64
        # [color] -> king square cache (None if king missing).
        self._king_squares: list[Square | None] = [None, None]

    # -- Element access -----------------------------------------------------

    def occupant(self, sq: Square) -> Piece | None:
        """Piece on *sq*, or ``None``. Raises :class:`OutOfRange` on a bad index."""
        return self._squares[check_square(sq)]

    def place(self, sq: Square, piece: Piece | None) -> None:
        """Raw write of *piece* (or ``None``) to *sq*; no legality check."""
        check_square(sq)
        old_piece = self._squares[sq]
        if old_piece is not None and old_piece.piece_type == PieceType.KING:
            if self._king_squares[int(old_piece.color)] == sq:
                self._king_squares[int(old_piece.color)] = None

        self._squares[sq] = piece
        if piece is not None and piece.piece_type == PieceType.KING:
            self._king_squares[int(piece.color)] = sq

    def relocate(self, from_sq: Square, to_sq: Square) -> Piece | None:
        """Move the occupant of *from_sq* to *to_sq*.

        Returns the displaced occupant of *to_sq* (``None`` when nothing was
        captured).
        """
        mover = self.occupant(from_sq)
        if mover is None:
            raise EmptySource(f"No piece on {square_name(from_sq)}")
        displaced = self.occupant(to_sq)
        if displaced is not None and displaced.color == mover.color:
            raise FriendlyBlock(
                f"{square_name(to_sq)} is occupied by a {mover.color} piece"
            )
        self.place(from_sq, None)
        self.place(to_sq, mover)
        return displaced

    def __getitem__(self, sq: Square) -> Piece | None:
        return self.occupant(sq)

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        self.place(sq, piece)

    def is_empty(self, sq: Square) -> bool:
        return self.occupant(sq) is None

    # -- Query helpers ------------------------------------------------------

    def occupied(self) -> Iterator[tuple[Square, Piece]]:
        """Yield ``(square, piece)`` for every occupied cell, a1 first."""
        for sq, piece in enumerate(self._squares):
            if piece is not None:
                yield sq, piece

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        """Squares occupied by *color*'s *piece_type*."""
        target = Piece(color, piece_type)
        return [sq for sq, piece in enumerate(self._squares) if piece == target]

    def all_pieces(self, color: Color) -> list[Square]:
        """All squares occupied by *color*."""
        return [sq for sq, piece in self.occupied() if piece.color == color]

    def king_square(self, color: Color) -> Square | None:
        """Square of *color*'s king, ``None`` when it is not on the board."""
        return self._king_squares[int(color)]

    def count(self, color: Color, piece_type: PieceType) -> int:
        return len(self.pieces(color, piece_type))

    def snapshot(self) -> tuple[Piece | None, ...]:
        """Immutable copy of the 64 cells, usable as a dictionary key."""
        return tuple(self._squares)

    # -- Mutation / copying -------------------------------------------------

    def copy(self) -> Board:
        b = Board()
        b._squares = self._squares.copy()
        b._king_squares = self._king_squares.copy()
        return b

    def clear(self) -> None:
        self._squares = [None] * 64
        self._king_squares = [None, None]

    # -- Factory ------------------------------------------------------------

    @classmethod
    def standard(cls) -> Board:
        """Standard starting position."""
        b = cls()
        for file, pt in enumerate(_BACK_RANK):
            for color in Color:
                b[make_square(file, color.home_rank)] = Piece(color, pt)
                pawn_rank = color.home_rank + color.pawn_direction
                b[make_square(file, pawn_rank)] = Piece(color, PieceType.PAWN)
        return b

    # -- Rendering ----------------------------------------------------------

    def render(
        self,
        orientation: Color = Color.WHITE,
        glyphs: Glyphs = Glyphs.ASCII,
    ) -> str:
        """Text grid with rank labels on the left and file labels below.

        *orientation* is the side shown at the bottom of the grid.
        """
        if orientation == Color.WHITE:
            ranks = range(7, -1, -1)
            files = range(8)
        else:
            ranks = range(8)
            files = range(7, -1, -1)

        rows: list[str] = []
        for rank in ranks:
            cells = []
            for file in files:
                piece = self._squares[make_square(file, rank)]
                cells.append(piece.glyph(glyphs) if piece else EMPTY_GLYPH)
            rows.append(f"{rank + 1} |" + "".join(f" {c} " for c in cells))
        rows.append("  +" + "-" * 24)
        rows.append("   " + "".join(f" {FILES[f]} " for f in files))
        return "\n".join(rows)

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._squares == other._squares

    def __repr__(self) -> str:
        return self.render()
