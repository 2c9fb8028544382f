"""GameState: turn, castling, en passant, clocks and history beside the board."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypeAlias

from chessrules.core.board import Board
from chessrules.core.enums import CastlingRights, Color, MoveKind, PieceType
from chessrules.core.move import Move
from chessrules.core.piece import Piece
from chessrules.core.types import Square, file_of, make_square, rank_of

PositionKey: TypeAlias = tuple[
    tuple[Piece | None, ...], Color, CastlingRights, Square | None
]

# rook home corner -> castling right lost when it moves or is captured
_ROOK_CORNERS: dict[Square, CastlingRights] = {
    make_square(0, 0): CastlingRights.WHITE_QUEENSIDE,
    make_square(7, 0): CastlingRights.WHITE_KINGSIDE,
    make_square(0, 7): CastlingRights.BLACK_QUEENSIDE,
    make_square(7, 7): CastlingRights.BLACK_KINGSIDE,
}


def castling_rook_squares(kind: MoveKind, color: Color) -> tuple[Square, Square]:
    """``(rook_from, rook_to)`` for a castling move of *color*."""
    r = color.home_rank
    if kind == MoveKind.CASTLE_KINGSIDE:
        return make_square(7, r), make_square(5, r)
    return make_square(0, r), make_square(3, r)


def en_passant_victim(move: Move) -> Square:
    """Square of the pawn removed by an en-passant capture."""
    return make_square(file_of(move.to_sq), rank_of(move.from_sq))


def play_on_board(board: Board, move: Move) -> Piece | None:
    """Carry out *move* on *board* and return the captured piece, if any.

    Only the board changes; callers validate the move beforehand.
    """
    captured: Piece | None = None
    if move.kind == MoveKind.EN_PASSANT:
        victim_sq = en_passant_victim(move)
        captured = board[victim_sq]
        board[victim_sq] = None

    displaced = board.relocate(move.from_sq, move.to_sq)
    if displaced is not None:
        captured = displaced

    if move.kind == MoveKind.PROMOTION and move.promotion is not None:
        board[move.to_sq] = Piece(move.piece.color, move.promotion)
    elif move.kind.is_castle:
        rook_from, rook_to = castling_rook_squares(move.kind, move.piece.color)
        board.relocate(rook_from, rook_to)
    return captured


@dataclass
class GameState:
    """Metadata that accompanies a :class:`Board` during a game.

    The history is append-only; :meth:`commit` is the only writer.
    """

    side_to_move: Color = Color.WHITE
    castling: CastlingRights = CastlingRights.ALL
    en_passant: Square | None = None
    halfmove_clock: int = 0
    fullmove_number: int = 1
    history: list[Move] = field(default_factory=list)
    repetitions: dict[PositionKey, int] = field(default_factory=dict)

    # ── Move application ─────────────────────────────────────────────────

    def commit(self, board: Board, move: Move) -> Piece | None:
        """Apply an already validated *move* to *board* and to this state."""
        captured = play_on_board(board, move)

        self.castling = self._castling_after(move)

        next_en_passant: Square | None = None
        if move.piece.piece_type == PieceType.PAWN and abs(
            rank_of(move.to_sq) - rank_of(move.from_sq)
        ) == 2:
            next_en_passant = make_square(
                file_of(move.from_sq),
                (rank_of(move.from_sq) + rank_of(move.to_sq)) // 2,
            )
        self.en_passant = next_en_passant

        if move.piece.piece_type == PieceType.PAWN or captured is not None:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1

        if self.side_to_move == Color.BLACK:
            self.fullmove_number += 1

        self.history.append(move)
        self.side_to_move = self.side_to_move.opposite
        self.record_position(board)
        return captured

    def _castling_after(self, move: Move) -> CastlingRights:
        rights = self.castling
        if move.piece.piece_type == PieceType.KING:
            rights &= ~CastlingRights.both(move.piece.color)
        for sq in (move.from_sq, move.to_sq):
            if sq in _ROOK_CORNERS:
                rights &= ~_ROOK_CORNERS[sq]
        return rights

    # ── Repetition tracking ──────────────────────────────────────────────

    def position_key(self, board: Board) -> PositionKey:
        """Key identifying the position for repetition purposes.

        The en-passant square only counts when a pawn could capture onto it.
        """
        ep = self.en_passant
        if ep is not None and not self._en_passant_capturable(board, ep):
            ep = None
        return (board.snapshot(), self.side_to_move, self.castling, ep)

    def _en_passant_capturable(self, board: Board, ep: Square) -> bool:
        color = self.side_to_move
        from_rank = rank_of(ep) - color.pawn_direction
        if not 0 <= from_rank < 8:
            return False
        pawn = Piece(color, PieceType.PAWN)
        for df in (-1, 1):
            f = file_of(ep) + df
            if 0 <= f < 8 and board[make_square(f, from_rank)] == pawn:
                return True
        return False

    def record_position(self, board: Board) -> int:
        """Count the current position once more and return its total."""
        key = self.position_key(board)
        count = self.repetitions.get(key, 0) + 1
        self.repetitions[key] = count
        return count

    def repetition_count(self, board: Board) -> int:
        """How many times the current position occurred in this game."""
        return self.repetitions.get(self.position_key(board), 0)

    # ── Utilities ────────────────────────────────────────────────────────

    @property
    def ply_count(self) -> int:
        return len(self.history)

    def copy(self) -> GameState:
        return GameState(
            side_to_move=self.side_to_move,
            castling=self.castling,
            en_passant=self.en_passant,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
            history=self.history.copy(),
            repetitions=self.repetitions.copy(),
        )
