"""Movement geometry, attack detection and legal move generation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessrules.core.enums import CastlingRights, Color, MoveKind, PieceType
from chessrules.core.errors import EmptySource
from chessrules.core.move import Move
from chessrules.core.piece import Piece
from chessrules.core.state import castling_rook_squares, play_on_board
from chessrules.core.types import Square, file_of, make_square, rank_of, square_name

if TYPE_CHECKING:
    from chessrules.core.board import Board
    from chessrules.core.state import GameState


KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)

_SLIDER_DIRS: dict[PieceType, tuple[tuple[int, int], ...]] = {
    PieceType.BISHOP: BISHOP_DIRS,
    PieceType.ROOK: ROOK_DIRS,
    PieceType.QUEEN: QUEEN_DIRS,
}


# -- Precomputed lookup tables ---------------------------------------------


def _walk(sq: Square, df: int, dr: int, limit: int) -> tuple[Square, ...]:
    """Squares from *sq* along ``(df, dr)``, at most *limit* steps, on-board only."""
    file, rank = file_of(sq), rank_of(sq)
    path: list[Square] = []
    for _ in range(limit):
        file, rank = file + df, rank + dr
        if not (0 <= file < 8 and 0 <= rank < 8):
            break
        path.append(make_square(file, rank))
    return tuple(path)


def _step_table(offsets: tuple[tuple[int, int], ...]) -> tuple[tuple[Square, ...], ...]:
    # one-step jumpers: knight and king
    return tuple(
        tuple(t for df, dr in offsets for t in _walk(sq, df, dr, 1)) for sq in range(64)
    )


def _ray_table(
    directions: tuple[tuple[int, int], ...],
) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    return tuple(tuple(_walk(sq, df, dr, 7) for df, dr in directions) for sq in range(64))


_KNIGHT_TARGETS = _step_table(KNIGHT_OFFSETS)
_KING_TARGETS = _step_table(KING_OFFSETS)

_BISHOP_RAYS = _ray_table(BISHOP_DIRS)
_ROOK_RAYS = _ray_table(ROOK_DIRS)
_QUEEN_RAYS = _ray_table(QUEEN_DIRS)


# -- Geometry helpers ------------------------------------------------------


def direction_between(from_sq: Square, to_sq: Square) -> tuple[int, int] | None:
    """Unit step from *from_sq* toward *to_sq* along a line, else ``None``."""
    df = file_of(to_sq) - file_of(from_sq)
    dr = rank_of(to_sq) - rank_of(from_sq)
    if df == 0 and dr == 0:
        return None
    if df != 0 and dr != 0 and abs(df) != abs(dr):
        return None
    return ((df > 0) - (df < 0), (dr > 0) - (dr < 0))


def squares_between(from_sq: Square, to_sq: Square) -> tuple[Square, ...]:
    """Squares strictly between two aligned squares (empty if not aligned)."""
    step = direction_between(from_sq, to_sq)
    if step is None:
        return ()
    df, dr = step
    f, r = file_of(from_sq) + df, rank_of(from_sq) + dr
    between: list[Square] = []
    while make_square(f, r) != to_sq:
        between.append(make_square(f, r))
        f += df
        r += dr
    return tuple(between)


def is_knight_jump(from_sq: Square, to_sq: Square) -> bool:
    return to_sq in _KNIGHT_TARGETS[from_sq]


def is_king_step(from_sq: Square, to_sq: Square) -> bool:
    return to_sq in _KING_TARGETS[from_sq]


def slides_along(piece_type: PieceType, from_sq: Square, to_sq: Square) -> bool:
    """Whether *to_sq* lies on one of *piece_type*'s lines, ignoring blockers."""
    step = direction_between(from_sq, to_sq)
    return step is not None and step in _SLIDER_DIRS.get(piece_type, ())


def pawn_start_rank(color: Color) -> int:
    return 1 if color == Color.WHITE else 6


def pawn_last_rank(color: Color) -> int:
    return 7 if color == Color.WHITE else 0


def reaches(
    board: Board,
    piece: Piece,
    from_sq: Square,
    to_sq: Square,
    en_passant: Square | None = None,
) -> bool:
    """Pseudo-legal reach test: does *piece* on *from_sq* move to *to_sq*?

    Obstruction is honoured for sliders and pawn advances; knights and kings
    ignore it. Castling is not covered. Check safety is not considered.
    """
    target = board[to_sq]
    if target is not None and target.color == piece.color:
        return False

    pt = piece.piece_type
    if pt == PieceType.KNIGHT:
        return is_knight_jump(from_sq, to_sq)
    if pt == PieceType.KING:
        return is_king_step(from_sq, to_sq)
    if pt in _SLIDER_DIRS:
        if not slides_along(pt, from_sq, to_sq):
            return False
        return all(board.is_empty(sq) for sq in squares_between(from_sq, to_sq))

    # Pawn
    direction = piece.color.pawn_direction
    df = file_of(to_sq) - file_of(from_sq)
    dr = rank_of(to_sq) - rank_of(from_sq)
    if df == 0:
        if target is not None:
            return False
        if dr == direction:
            return True
        return (
            dr == 2 * direction
            and rank_of(from_sq) == pawn_start_rank(piece.color)
            and board.is_empty(from_sq + 8 * direction)
        )
    if abs(df) == 1 and dr == direction:
        return target is not None or to_sq == en_passant
    return False


# -- Generator -------------------------------------------------------------


class MoveGenerator:
    """Generates moves for a board plus its game metadata.

    Legality is decided by playing each candidate on a scratch copy of the
    board, so the inputs are never modified.
    """

    __slots__ = ("_board", "_state")

    def __init__(self, board: Board, state: GameState) -> None:
        self._board = board
        self._state = state

    # -- Public API ---------------------------------------------------------

    def generate_legal_moves(self) -> list[Move]:
        """All strictly legal moves for the side to move."""
        return [m for m in self.generate_pseudo_legal_moves() if self.is_safe(m)]

    def has_legal_move(self) -> bool:
        return any(self.is_safe(m) for m in self.generate_pseudo_legal_moves())

    def generate_pseudo_legal_moves(self) -> list[Move]:
        """All pseudo-legal moves (may leave own king in check)."""
        moves: list[Move] = []
        color = self._state.side_to_move
        for sq, piece in list(self._board.occupied()):
            if piece.color != color:
                continue
            pt = piece.piece_type
            if pt == PieceType.PAWN:
                self._gen_pawn(sq, piece, moves)
            elif pt == PieceType.KNIGHT:
                self._gen_steps(sq, piece, _KNIGHT_TARGETS[sq], moves)
            elif pt == PieceType.BISHOP:
                self._gen_sliding(sq, piece, _BISHOP_RAYS[sq], moves)
            elif pt == PieceType.ROOK:
                self._gen_sliding(sq, piece, _ROOK_RAYS[sq], moves)
            elif pt == PieceType.QUEEN:
                self._gen_sliding(sq, piece, _QUEEN_RAYS[sq], moves)
            else:
                self._gen_steps(sq, piece, _KING_TARGETS[sq], moves)
                self._gen_castling(sq, piece, moves)
        return moves

    def is_safe(self, move: Move) -> bool:
        """Would the mover's king be out of check after *move*?"""
        scratch = self._board.copy()
        play_on_board(scratch, move)
        king_sq = scratch.king_square(move.piece.color)
        if king_sq is None:
            return True
        return not is_square_attacked(scratch, king_sq, move.piece.color.opposite)

    # -- Attack detection (public) -----------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        return is_in_check(self._board, color)

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        return is_square_attacked(self._board, sq, by_color)

    # -- Piece-specific generators (private) -------------------------------

    def _add(self, moves: list[Move], piece: Piece, from_sq: Square, to_sq: Square) -> None:
        kind = MoveKind.CAPTURE if self._board[to_sq] is not None else MoveKind.NORMAL
        moves.append(Move(from_sq, to_sq, kind, piece))

    def _gen_pawn(self, sq: Square, piece: Piece, moves: list[Move]) -> None:
        board = self._board
        color = piece.color
        direction = color.pawn_direction
        last_rank = pawn_last_rank(color)
        ep = self._state.en_passant
        if not 0 <= rank_of(sq) + direction < 8:
            return

        targets: list[Square] = []
        one_step = sq + 8 * direction
        if board.is_empty(one_step):
            targets.append(one_step)
            two_step = sq + 16 * direction
            if rank_of(sq) == pawn_start_rank(color) and board.is_empty(two_step):
                targets.append(two_step)

        for df in (-1, 1):
            f = file_of(sq) + df
            if not 0 <= f < 8:
                continue
            cap_sq = make_square(f, rank_of(one_step))
            target = board[cap_sq]
            if target is not None and target.color != color:
                targets.append(cap_sq)
            elif target is None and cap_sq == ep:
                moves.append(Move(sq, cap_sq, MoveKind.EN_PASSANT, piece))

        for to_sq in targets:
            if rank_of(to_sq) == last_rank:
                for pt in PROMOTION_TYPES:
                    moves.append(Move(sq, to_sq, MoveKind.PROMOTION, piece, pt))
            else:
                self._add(moves, piece, sq, to_sq)

    def _gen_steps(
        self,
        sq: Square,
        piece: Piece,
        targets: tuple[Square, ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for to_sq in targets:
            target = board[to_sq]
            if target is None or target.color != piece.color:
                self._add(moves, piece, sq, to_sq)

    def _gen_sliding(
        self,
        sq: Square,
        piece: Piece,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    self._add(moves, piece, sq, to_sq)
                    continue
                if target.color != piece.color:
                    self._add(moves, piece, sq, to_sq)
                break

    def _gen_castling(self, king_sq: Square, piece: Piece, moves: list[Move]) -> None:
        for kind in (MoveKind.CASTLE_KINGSIDE, MoveKind.CASTLE_QUEENSIDE):
            if castling_obstacle(self._board, self._state, piece.color, kind) is None:
                to_sq = castle_king_target(piece.color, kind)
                moves.append(Move(king_sq, to_sq, kind, piece))


# -- Module-level attack helpers -------------------------------------------


def is_square_attacked(board: Board, sq: Square, by_color: Color) -> bool:
    """Is *sq* attacked by any piece of *by_color*?"""
    # Pawns attack diagonally forward, so look one rank behind *sq*.
    pawn_rank = rank_of(sq) - by_color.pawn_direction
    if 0 <= pawn_rank < 8:
        pawn = Piece(by_color, PieceType.PAWN)
        for df in (-1, 1):
            f = file_of(sq) + df
            if 0 <= f < 8 and board[make_square(f, pawn_rank)] == pawn:
                return True

    knight = Piece(by_color, PieceType.KNIGHT)
    if any(board[t] == knight for t in _KNIGHT_TARGETS[sq]):
        return True

    king = Piece(by_color, PieceType.KING)
    if any(board[t] == king for t in _KING_TARGETS[sq]):
        return True

    for rays, attackers in (
        (_BISHOP_RAYS[sq], (PieceType.BISHOP, PieceType.QUEEN)),
        (_ROOK_RAYS[sq], (PieceType.ROOK, PieceType.QUEEN)),
    ):
        for ray in rays:
            for to_sq in ray:
                piece = board[to_sq]
                if piece is None:
                    continue
                if piece.color == by_color and piece.piece_type in attackers:
                    return True
                break

    return False


def is_in_check(board: Board, color: Color) -> bool:
    king_sq = board.king_square(color)
    if king_sq is None:
        return False
    return is_square_attacked(board, king_sq, color.opposite)


def castle_king_target(color: Color, kind: MoveKind) -> Square:
    file_idx = 6 if kind == MoveKind.CASTLE_KINGSIDE else 2
    return make_square(file_idx, color.home_rank)


def castling_obstacle(
    board: Board,
    state: GameState,
    color: Color,
    kind: MoveKind,
) -> str | None:
    """Why *color* may not castle on *kind*'s side, or ``None`` if it may."""
    right = (
        CastlingRights.kingside(color)
        if kind == MoveKind.CASTLE_KINGSIDE
        else CastlingRights.queenside(color)
    )
    if not state.castling & right:
        return "castling right has been lost"

    king_sq = make_square(4, color.home_rank)
    if board[king_sq] != Piece(color, PieceType.KING):
        return "king is not on its home square"
    rook_from, _ = castling_rook_squares(kind, color)
    if board[rook_from] != Piece(color, PieceType.ROOK):
        return "rook is not on its home square"
    if any(not board.is_empty(sq) for sq in squares_between(king_sq, rook_from)):
        return "pieces stand between king and rook"

    opponent = color.opposite
    if is_square_attacked(board, king_sq, opponent):
        return "king is in check"
    king_to = castle_king_target(color, kind)
    for sq in (*squares_between(king_sq, king_to), king_to):
        if is_square_attacked(board, sq, opponent):
            return "king would cross or land on an attacked square"
    return None


def build_move(
    board: Board,
    state: GameState,
    from_sq: Square,
    to_sq: Square,
    promotion: PieceType | None = None,
) -> Move:
    """Describe the transition *from_sq* → *to_sq* as a :class:`Move`.

    The kind is read off the board (castling for a two-file king move from
    its home square, en passant, capture). Legality is not checked.
    """
    piece = board[from_sq]
    if piece is None:
        raise EmptySource(f"No piece on {square_name(from_sq)}")
    board.occupant(to_sq)

    df = file_of(to_sq) - file_of(from_sq)
    if promotion is not None:
        kind = MoveKind.PROMOTION
    elif (
        piece.piece_type == PieceType.KING
        and from_sq == make_square(4, piece.color.home_rank)
        and rank_of(to_sq) == rank_of(from_sq)
        and abs(df) == 2
    ):
        kind = MoveKind.CASTLE_KINGSIDE if df > 0 else MoveKind.CASTLE_QUEENSIDE
    elif (
        piece.piece_type == PieceType.PAWN
        and df != 0
        and board[to_sq] is None
        and to_sq == state.en_passant
    ):
        kind = MoveKind.EN_PASSANT
    elif board[to_sq] is not None:
        kind = MoveKind.CAPTURE
    else:
        kind = MoveKind.NORMAL
    return Move(from_sq, to_sq, kind, piece, promotion)
