"""Perft tests: the gold standard for move-generator correctness.

Reference values: https://www.chessprogramming.org/Perft_Results
"""

from __future__ import annotations

import pytest

from chessrules.core.board import Board
from chessrules.core.enums import Color, MoveKind, PieceType
from chessrules.core.move_generator import (
    MoveGenerator,
    build_move,
    castling_obstacle,
    is_square_attacked,
    reaches,
    squares_between,
)
from chessrules.core.notation import STARTING_FEN, position_from_fen
from chessrules.core.piece import Piece
from chessrules.core.state import GameState
from chessrules.core.types import parse_square


def perft(board: Board, state: GameState, depth: int) -> int:
    """Count leaf nodes at *depth*, committing each move on copies."""
    moves = MoveGenerator(board, state).generate_legal_moves()
    if depth == 1:
        return len(moves)
    nodes = 0
    for move in moves:
        child_board, child_state = board.copy(), state.copy()
        child_state.commit(child_board, move)
        nodes += perft(child_board, child_state, depth - 1)
    return nodes


# ── Starting position ────────────────────────────────────────────────────────


class TestPerftStarting:
    def test_depth_1(self) -> None:
        assert perft(*position_from_fen(STARTING_FEN), 1) == 20

    def test_depth_2(self) -> None:
        assert perft(*position_from_fen(STARTING_FEN), 2) == 400

    @pytest.mark.slow
    def test_depth_3(self) -> None:
        assert perft(*position_from_fen(STARTING_FEN), 3) == 8_902


# ── Kiwipete (rich in tactics: castling, ep, promotions) ─────────────────────

KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"


class TestPerftKiwipete:
    def test_depth_1(self) -> None:
        assert perft(*position_from_fen(KIWIPETE), 1) == 48

    @pytest.mark.slow
    def test_depth_2(self) -> None:
        assert perft(*position_from_fen(KIWIPETE), 2) == 2_039


# ── Position 3: en-passant + promotion edge cases ───────────────────────────

POS3 = "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1"


class TestPerftPosition3:
    def test_depth_1(self) -> None:
        assert perft(*position_from_fen(POS3), 1) == 14

    def test_depth_2(self) -> None:
        assert perft(*position_from_fen(POS3), 2) == 191


# ── Position 4: promotions, checks, castling rights ─────────────────────────

POS4 = "r3k2r/Pppp1ppp/1b3nbN/nP6/BBP1P3/q4N2/Pp1P2PP/R2Q1RK1 w kq - 0 1"


class TestPerftPosition4:
    def test_depth_1(self) -> None:
        assert perft(*position_from_fen(POS4), 1) == 6

    @pytest.mark.slow
    def test_depth_2(self) -> None:
        assert perft(*position_from_fen(POS4), 2) == 264


# ── Geometry and attacks ─────────────────────────────────────────────────────


class TestGeometry:
    def test_squares_between_file(self) -> None:
        between = squares_between(parse_square("a1"), parse_square("a4"))
        assert between == (parse_square("a2"), parse_square("a3"))

    def test_squares_between_unaligned(self) -> None:
        assert squares_between(parse_square("a1"), parse_square("b3")) == ()

    def test_reaches_blocked_slider(self) -> None:
        board = Board.standard()
        rook = Piece(Color.WHITE, PieceType.ROOK)
        assert not reaches(board, rook, parse_square("a1"), parse_square("a3"))

    def test_knight_jumps_over_pieces(self) -> None:
        board = Board.standard()
        knight = Piece(Color.WHITE, PieceType.KNIGHT)
        assert reaches(board, knight, parse_square("g1"), parse_square("f3"))

    def test_pawn_needs_target_to_capture(self) -> None:
        board = Board.standard()
        pawn = Piece(Color.WHITE, PieceType.PAWN)
        assert not reaches(board, pawn, parse_square("e2"), parse_square("d3"))

    def test_square_attacked_by_pawn(self) -> None:
        board = Board.standard()
        assert is_square_attacked(board, parse_square("d3"), Color.WHITE)
        assert not is_square_attacked(board, parse_square("d4"), Color.WHITE)


class TestLegality:
    def test_pinned_piece_cannot_move(self) -> None:
        board, state = position_from_fen("4k3/4r3/8/8/8/8/4B3/4K3 w - - 0 1")
        moves = MoveGenerator(board, state).generate_legal_moves()
        assert all(m.from_sq != parse_square("e2") for m in moves)

    def test_generator_leaves_inputs_untouched(self) -> None:
        board, state = position_from_fen(KIWIPETE)
        before = (board.snapshot(), state.castling, state.en_passant)
        MoveGenerator(board, state).generate_legal_moves()
        assert (board.snapshot(), state.castling, state.en_passant) == before

    def test_en_passant_generated(self) -> None:
        board, state = position_from_fen("4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1")
        kinds = {m.kind for m in MoveGenerator(board, state).generate_legal_moves()}
        assert MoveKind.EN_PASSANT in kinds

    def test_castling_obstacle_through_check(self) -> None:
        board, state = position_from_fen("4k3/8/8/8/8/8/5r2/4K2R w K - 0 1")
        assert castling_obstacle(board, state, Color.WHITE, MoveKind.CASTLE_KINGSIDE)

    def test_castling_available(self) -> None:
        board, state = position_from_fen("4k3/8/8/8/8/8/8/4K2R w K - 0 1")
        assert castling_obstacle(board, state, Color.WHITE, MoveKind.CASTLE_KINGSIDE) is None


class TestBuildMove:
    def test_classifies_castle(self) -> None:
        board, state = position_from_fen("4k3/8/8/8/8/8/8/R3K3 w Q - 0 1")
        move = build_move(board, state, parse_square("e1"), parse_square("c1"))
        assert move.kind == MoveKind.CASTLE_QUEENSIDE

    def test_classifies_capture(self) -> None:
        board, state = position_from_fen("4k3/8/8/3p4/4P3/8/8/4K3 w - - 0 1")
        move = build_move(board, state, parse_square("e4"), parse_square("d5"))
        assert move.kind == MoveKind.CAPTURE

    def test_classifies_promotion(self) -> None:
        board, state = position_from_fen("4k3/P7/8/8/8/8/8/4K3 w - - 0 1")
        move = build_move(board, state, parse_square("a7"), parse_square("a8"), PieceType.ROOK)
        assert move.kind == MoveKind.PROMOTION
        assert move.uci == "a7a8r"
