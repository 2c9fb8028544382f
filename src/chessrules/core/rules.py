"""High-level chess rules: move validation, checkmate, stalemate, draws."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessrules.core.enums import Color, DrawReason, MoveKind, PieceType
from chessrules.core.errors import (
    BlockedPath,
    EmptySource,
    FriendlyBlock,
    IllegalPattern,
    InvalidCastle,
    InvalidEnPassant,
    InvalidPromotion,
    WouldExposeOwnKing,
    WrongTurn,
)
from chessrules.core.move_generator import (
    PROMOTION_TYPES,
    MoveGenerator,
    castle_king_target,
    castling_obstacle,
    is_in_check,
    is_king_step,
    is_knight_jump,
    pawn_last_rank,
    pawn_start_rank,
    slides_along,
    squares_between,
)
from chessrules.core.state import en_passant_victim
from chessrules.core.types import file_of, is_light_square, make_square, rank_of, square_name

if TYPE_CHECKING:
    from chessrules.core.board import Board
    from chessrules.core.move import Move
    from chessrules.core.state import GameState


class Rules:
    """Static rule-checker operating on a :class:`Board` and its :class:`GameState`."""

    # ── Move validation ──────────────────────────────────────────────────

    @staticmethod
    def validate(board: Board, state: GameState, move: Move) -> None:
        """Raise the matching :class:`RuleViolation` unless *move* is legal.

        Neither *board* nor *state* is modified; check safety is decided on a
        scratch copy.
        """
        piece = board[move.from_sq]
        if piece is None:
            raise EmptySource(f"No piece on {square_name(move.from_sq)}")
        if piece.color != state.side_to_move:
            raise WrongTurn(f"It is {state.side_to_move}'s turn, not {piece.color}'s")
        if piece != move.piece:
            raise IllegalPattern(
                f"{square_name(move.from_sq)} holds {piece}, not {move.piece}"
            )
        target = board[move.to_sq]
        if target is not None and target.color == piece.color:
            raise FriendlyBlock(
                f"{square_name(move.to_sq)} is occupied by a {piece.color} piece"
            )

        if move.kind.is_castle:
            Rules._validate_castle(board, state, move)
        elif piece.piece_type == PieceType.PAWN:
            Rules._validate_pawn(board, state, move)
        else:
            Rules._validate_piece(board, move)

        if not MoveGenerator(board, state).is_safe(move):
            raise WouldExposeOwnKing(f"{move} would leave the {piece.color} king in check")

    @staticmethod
    def _validate_castle(board: Board, state: GameState, move: Move) -> None:
        color = move.piece.color
        if (
            move.piece.piece_type != PieceType.KING
            or move.from_sq != make_square(4, color.home_rank)
            or move.to_sq != castle_king_target(color, move.kind)
        ):
            raise InvalidCastle(f"{move} is not a castling move for {color}")
        obstacle = castling_obstacle(board, state, color, move.kind)
        if obstacle is not None:
            raise InvalidCastle(f"Cannot castle: {obstacle}")

    @staticmethod
    def _validate_piece(board: Board, move: Move) -> None:
        pt = move.piece.piece_type
        if move.kind not in (MoveKind.NORMAL, MoveKind.CAPTURE):
            raise IllegalPattern(f"A {pt.name.lower()} cannot make a {move.kind.name} move")

        if pt == PieceType.KNIGHT:
            if not is_knight_jump(move.from_sq, move.to_sq):
                raise IllegalPattern(f"{move} is not a knight move")
        elif pt == PieceType.KING:
            if not is_king_step(move.from_sq, move.to_sq):
                home = make_square(4, move.piece.color.home_rank)
                if (
                    move.from_sq == home
                    and rank_of(move.to_sq) == rank_of(home)
                    and abs(file_of(move.to_sq) - file_of(home)) == 2
                ):
                    raise InvalidCastle(f"{move} must be played as a castling move")
                raise IllegalPattern(f"{move} is not a king move")
        else:
            if not slides_along(pt, move.from_sq, move.to_sq):
                raise IllegalPattern(f"{move} is not a {pt.name.lower()} move")
            blockers = [
                sq for sq in squares_between(move.from_sq, move.to_sq) if not board.is_empty(sq)
            ]
            if blockers:
                raise BlockedPath(f"{move} is blocked on {square_name(blockers[0])}")

        Rules._check_capture_kind(board, move)

    @staticmethod
    def _validate_pawn(board: Board, state: GameState, move: Move) -> None:
        color = move.piece.color
        direction = color.pawn_direction
        df = file_of(move.to_sq) - file_of(move.from_sq)
        dr = rank_of(move.to_sq) - rank_of(move.from_sq)
        target = board[move.to_sq]

        if move.kind == MoveKind.EN_PASSANT:
            if abs(df) != 1 or dr != direction:
                raise IllegalPattern(f"{move} is not a pawn capture")
            if state.en_passant is None or move.to_sq != state.en_passant:
                raise InvalidEnPassant(f"{square_name(move.to_sq)} is not the en-passant square")
            victim = board[en_passant_victim(move)]
            if (
                target is not None
                or victim is None
                or victim.color == color
                or victim.piece_type != PieceType.PAWN
            ):
                raise InvalidEnPassant(f"No pawn to capture en passant with {move}")
            return

        if df == 0:
            if dr == direction:
                if target is not None:
                    raise BlockedPath(f"Pawn advance blocked on {square_name(move.to_sq)}")
            elif dr == 2 * direction and rank_of(move.from_sq) == pawn_start_rank(color):
                middle = move.from_sq + 8 * direction
                for sq in (middle, move.to_sq):
                    if not board.is_empty(sq):
                        raise BlockedPath(f"Pawn advance blocked on {square_name(sq)}")
            else:
                raise IllegalPattern(f"{move} is not a pawn move")
        elif abs(df) == 1 and dr == direction:
            if target is None:
                raise IllegalPattern(f"Pawn on {square_name(move.from_sq)} has nothing to capture")
        else:
            raise IllegalPattern(f"{move} is not a pawn move")

        on_last_rank = rank_of(move.to_sq) == pawn_last_rank(color)
        if on_last_rank and move.kind != MoveKind.PROMOTION:
            raise InvalidPromotion(f"{move} must name a promotion piece", missing=True)
        if move.kind == MoveKind.PROMOTION:
            if not on_last_rank:
                raise InvalidPromotion(f"{move} does not reach the last rank", missing=False)
            if move.promotion not in PROMOTION_TYPES:
                raise InvalidPromotion(f"Cannot promote to {move.promotion}", missing=False)
            return

        Rules._check_capture_kind(board, move)

    @staticmethod
    def _check_capture_kind(board: Board, move: Move) -> None:
        is_capture = board[move.to_sq] is not None
        if is_capture and move.kind != MoveKind.CAPTURE:
            raise IllegalPattern(f"{move} captures but is not marked as a capture")
        if not is_capture and move.kind == MoveKind.CAPTURE:
            raise IllegalPattern(f"{move} is marked as a capture onto an empty square")

    # ── Position predicates ──────────────────────────────────────────────

    @staticmethod
    def is_in_check(board: Board, state: GameState) -> bool:
        return is_in_check(board, state.side_to_move)

    @staticmethod
    def is_checkmate(board: Board, state: GameState) -> bool:
        if not Rules.is_in_check(board, state):
            return False
        return not MoveGenerator(board, state).has_legal_move()

    @staticmethod
    def is_stalemate(board: Board, state: GameState) -> bool:
        if Rules.is_in_check(board, state):
            return False
        return not MoveGenerator(board, state).has_legal_move()

    @staticmethod
    def is_insufficient_material(board: Board) -> bool:
        """K vs K, K+B vs K, K+N vs K, K+B vs K+B (same-color bishops)."""
        others = [
            (sq, piece) for sq, piece in board.occupied() if piece.piece_type != PieceType.KING
        ]

        # K vs K
        if not others:
            return True

        # K+minor vs K
        if len(others) == 1:
            return others[0][1].piece_type in (PieceType.KNIGHT, PieceType.BISHOP)

        # K+B vs K+B with same-colour bishops
        if len(others) == 2:
            (sq_a, a), (sq_b, b) = others
            if (
                a.piece_type == PieceType.BISHOP
                and b.piece_type == PieceType.BISHOP
                and a.color != b.color
            ):
                return is_light_square(sq_a) == is_light_square(sq_b)

        return False

    @staticmethod
    def is_fifty_move_rule(state: GameState, halfmoves: int = 100) -> bool:
        return state.halfmove_clock >= halfmoves  # 100 half-moves = 50 full moves

    @staticmethod
    def is_repetition(board: Board, state: GameState, count: int = 3) -> bool:
        return state.repetition_count(board) >= count

    @staticmethod
    def draw_reason(
        board: Board,
        state: GameState,
        *,
        fifty_move_halfmoves: int = 100,
        repetition_count: int = 3,
        insufficient_material: bool = True,
    ) -> DrawReason | None:
        """First automatic draw condition met by the position, if any."""
        if insufficient_material and Rules.is_insufficient_material(board):
            return DrawReason.INSUFFICIENT_MATERIAL
        if Rules.is_fifty_move_rule(state, fifty_move_halfmoves):
            return DrawReason.FIFTY_MOVE_RULE
        if Rules.is_repetition(board, state, repetition_count):
            return DrawReason.THREEFOLD_REPETITION
        return None

    @staticmethod
    def winner_if_mated(board: Board, state: GameState) -> Color | None:
        """The winning side when the side to move is checkmated."""
        if Rules.is_checkmate(board, state):
            return state.side_to_move.opposite
        return None
