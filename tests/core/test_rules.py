"""Tests for move validation and game-end predicates."""

from __future__ import annotations

import pytest

from chessrules.core.board import Board
from chessrules.core.enums import Color, DrawReason, MoveKind, PieceType
from chessrules.core.errors import (
    BlockedPath,
    EmptySource,
    FriendlyBlock,
    IllegalPattern,
    InvalidCastle,
    InvalidEnPassant,
    InvalidPromotion,
    RuleViolation,
    WouldExposeOwnKing,
    WrongTurn,
)
from chessrules.core.move import Move
from chessrules.core.notation import position_from_fen
from chessrules.core.piece import Piece
from chessrules.core.rules import Rules
from chessrules.core.state import GameState
from chessrules.core.types import parse_square


def _move(
    board: Board,
    from_name: str,
    to_name: str,
    kind: MoveKind = MoveKind.NORMAL,
    promotion: PieceType | None = None,
) -> Move:
    from_sq = parse_square(from_name)
    piece = board[from_sq]
    assert piece is not None
    return Move(from_sq, parse_square(to_name), kind, piece, promotion)


# ── Validation ───────────────────────────────────────────────────────────────


class TestValidate:
    def test_legal_opening_move(self, start: tuple[Board, GameState]) -> None:
        board, state = start
        Rules.validate(board, state, _move(board, "e2", "e4"))

    def test_wrong_turn(self, start: tuple[Board, GameState]) -> None:
        board, state = start
        with pytest.raises(WrongTurn):
            Rules.validate(board, state, _move(board, "e7", "e5"))

    def test_empty_source(self, start: tuple[Board, GameState]) -> None:
        board, state = start
        pawn = Piece(Color.WHITE, PieceType.PAWN)
        move = Move(parse_square("e4"), parse_square("e5"), MoveKind.NORMAL, pawn)
        with pytest.raises(EmptySource):
            Rules.validate(board, state, move)

    def test_friendly_block(self, start: tuple[Board, GameState]) -> None:
        board, state = start
        with pytest.raises(FriendlyBlock):
            Rules.validate(board, state, _move(board, "d1", "d2", MoveKind.CAPTURE))

    def test_blocked_slider(self, start: tuple[Board, GameState]) -> None:
        board, state = start
        with pytest.raises(BlockedPath):
            Rules.validate(board, state, _move(board, "a1", "a4"))

    def test_blocked_pawn(self) -> None:
        board, state = position_from_fen("4k3/8/8/8/8/4n3/4P3/4K3 w - - 0 1")
        with pytest.raises(BlockedPath):
            Rules.validate(board, state, _move(board, "e2", "e4"))

    def test_knight_pattern(self, start: tuple[Board, GameState]) -> None:
        board, state = start
        with pytest.raises(IllegalPattern):
            Rules.validate(board, state, _move(board, "g1", "g3"))

    def test_pawn_diagonal_onto_empty(self, start: tuple[Board, GameState]) -> None:
        board, state = start
        with pytest.raises(IllegalPattern):
            Rules.validate(board, state, _move(board, "e2", "d3"))

    def test_pinned_piece(self) -> None:
        board, state = position_from_fen("4k3/4r3/8/8/8/8/4B3/4K3 w - - 0 1")
        with pytest.raises(WouldExposeOwnKing):
            Rules.validate(board, state, _move(board, "e2", "d3"))

    def test_failures_share_base(self, start: tuple[Board, GameState]) -> None:
        board, state = start
        with pytest.raises(RuleViolation):
            Rules.validate(board, state, _move(board, "b1", "b3"))

    def test_validate_does_not_mutate(self, start: tuple[Board, GameState]) -> None:
        board, state = start
        before = board.snapshot()
        Rules.validate(board, state, _move(board, "e2", "e4"))
        assert board.snapshot() == before
        assert state.side_to_move == Color.WHITE
        assert state.history == []


class TestCastlingValidation:
    def test_castle_allowed(self) -> None:
        board, state = position_from_fen("4k3/8/8/8/8/8/8/4K2R w K - 0 1")
        Rules.validate(board, state, _move(board, "e1", "g1", MoveKind.CASTLE_KINGSIDE))

    def test_castle_without_right(self) -> None:
        board, state = position_from_fen("4k3/8/8/8/8/8/8/4K2R w - - 0 1")
        with pytest.raises(InvalidCastle):
            Rules.validate(board, state, _move(board, "e1", "g1", MoveKind.CASTLE_KINGSIDE))

    def test_castle_out_of_check(self) -> None:
        board, state = position_from_fen("4k3/4r3/8/8/8/8/8/4K2R w K - 0 1")
        with pytest.raises(InvalidCastle):
            Rules.validate(board, state, _move(board, "e1", "g1", MoveKind.CASTLE_KINGSIDE))

    def test_castle_through_piece(self) -> None:
        board, state = position_from_fen("4k3/8/8/8/8/8/8/R2QK3 w Q - 0 1")
        with pytest.raises(InvalidCastle):
            Rules.validate(board, state, _move(board, "e1", "c1", MoveKind.CASTLE_QUEENSIDE))

    def test_king_two_squares_off_home_square(self) -> None:
        board, state = position_from_fen("4k3/8/8/8/8/8/8/3K4 w - - 0 1")
        with pytest.raises(IllegalPattern):
            Rules.validate(board, state, _move(board, "d1", "f1"))

    def test_king_two_squares_as_plain_move(self) -> None:
        board, state = position_from_fen("4k3/8/8/8/8/8/8/4K2R w K - 0 1")
        with pytest.raises(InvalidCastle):
            Rules.validate(board, state, _move(board, "e1", "g1"))


class TestPawnSpecials:
    def test_en_passant(self) -> None:
        board, state = position_from_fen("4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1")
        Rules.validate(board, state, _move(board, "e5", "d6", MoveKind.EN_PASSANT))

    def test_en_passant_expired(self) -> None:
        board, state = position_from_fen("4k3/8/8/3pP3/8/8/8/4K3 w - - 0 1")
        with pytest.raises(InvalidEnPassant):
            Rules.validate(board, state, _move(board, "e5", "d6", MoveKind.EN_PASSANT))

    def test_promotion_required(self) -> None:
        board, state = position_from_fen("4k3/P7/8/8/8/8/8/4K3 w - - 0 1")
        with pytest.raises(InvalidPromotion) as info:
            Rules.validate(board, state, _move(board, "a7", "a8"))
        assert info.value.missing

    def test_promotion_accepted(self) -> None:
        board, state = position_from_fen("4k3/P7/8/8/8/8/8/4K3 w - - 0 1")
        move = _move(board, "a7", "a8", MoveKind.PROMOTION, PieceType.QUEEN)
        Rules.validate(board, state, move)

    def test_promotion_to_king_rejected(self) -> None:
        board, state = position_from_fen("4k3/P7/8/8/8/8/8/4K3 w - - 0 1")
        move = _move(board, "a7", "a8", MoveKind.PROMOTION, PieceType.KING)
        with pytest.raises(InvalidPromotion):
            Rules.validate(board, state, move)


# ── Game-end predicates ──────────────────────────────────────────────────────


class TestGameEnd:
    def test_fools_mate(self) -> None:
        board, state = position_from_fen(
            "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
        )
        assert Rules.is_checkmate(board, state)
        assert Rules.winner_if_mated(board, state) == Color.BLACK

    def test_stalemate(self) -> None:
        board, state = position_from_fen("7k/5Q2/6K1/8/8/8/8/8 b - - 0 1")
        assert Rules.is_stalemate(board, state)
        assert not Rules.is_checkmate(board, state)

    def test_check_is_not_mate(self) -> None:
        board, state = position_from_fen("4k3/8/8/8/8/8/8/4K2R b - - 0 1")
        board2, state2 = position_from_fen("4k3/8/8/8/8/8/8/4R1K1 b - - 0 1")
        assert not Rules.is_in_check(board, state)
        assert Rules.is_in_check(board2, state2)
        assert not Rules.is_checkmate(board2, state2)

    @pytest.mark.parametrize(
        "fen",
        [
            "4k3/8/8/8/8/8/8/4K3 w - - 0 1",
            "4k3/8/8/8/8/8/8/4KB2 w - - 0 1",
            "4k3/8/8/8/8/8/8/4KN2 w - - 0 1",
            "4kb2/8/8/8/8/8/8/2B1K3 w - - 0 1",
        ],
    )
    def test_insufficient_material(self, fen: str) -> None:
        board, _ = position_from_fen(fen)
        assert Rules.is_insufficient_material(board)

    @pytest.mark.parametrize(
        "fen",
        [
            "4k3/8/8/8/8/8/4P3/4K3 w - - 0 1",
            "4k3/8/8/8/8/8/8/3NKN2 w - - 0 1",
            "4k1b1/8/8/8/8/8/8/2B1K3 w - - 0 1",
        ],
    )
    def test_sufficient_material(self, fen: str) -> None:
        board, _ = position_from_fen(fen)
        assert not Rules.is_insufficient_material(board)

    def test_fifty_move_rule(self) -> None:
        board, state = position_from_fen("4k3/8/8/8/8/8/8/R3K3 w - - 100 80")
        assert Rules.is_fifty_move_rule(state)
        assert Rules.draw_reason(board, state) == DrawReason.FIFTY_MOVE_RULE

    def test_fifty_move_threshold_is_configurable(self) -> None:
        board, state = position_from_fen("4k3/8/8/8/8/8/8/R3K3 w - - 100 80")
        assert Rules.draw_reason(board, state, fifty_move_halfmoves=150) is None

    def test_no_draw_at_start(self, start: tuple[Board, GameState]) -> None:
        board, state = start
        assert Rules.draw_reason(board, state) is None
