"""Tests for the Qt engine session adapter."""

from __future__ import annotations

import pytest

pytest.importorskip("PyQt6")

from PyQt6.QtTest import QSignalSpy  # noqa: E402

from chessrules.core.enums import Color, PieceType  # noqa: E402
from chessrules.core.types import parse_square  # noqa: E402
from chessrules.game.engine import Engine  # noqa: E402
from chessrules.game.interfaces import GameStatus  # noqa: E402
from chessrules.game.qt_bridge import EngineSession  # noqa: E402


@pytest.fixture
def session(qapp: object) -> EngineSession:
    del qapp
    return EngineSession(Engine())


class TestEngineSession:
    def test_accepted_move_emits(self, session: EngineSession) -> None:
        accepted = QSignalSpy(session.move_accepted)
        changed = QSignalSpy(session.board_changed)

        session.submit_move("e4")

        assert len(accepted) == 1
        assert accepted[0][0].san == "e4"
        assert len(changed) == 1
        assert changed[0][0] == session.engine.render()

    def test_rejected_move_emits_reason(self, session: EngineSession) -> None:
        rejected = QSignalSpy(session.move_rejected)
        accepted = QSignalSpy(session.move_accepted)

        session.submit_move("Nf5")

        assert len(accepted) == 0
        assert len(rejected) == 1
        assert rejected[0][0] == "UNKNOWN_MOVE"

    def test_squares_and_coordinate_text(self, session: EngineSession) -> None:
        accepted = QSignalSpy(session.move_accepted)

        session.submit_squares(parse_square("e2"), parse_square("e4"))
        session.submit_coordinate_text("e7e5")

        assert len(accepted) == 2
        assert session.engine.sans() == ("e4", "e5")

    def test_out_of_range_square_rejected(self, session: EngineSession) -> None:
        rejected = QSignalSpy(session.move_rejected)
        session.submit_squares(99, parse_square("e4"))
        assert rejected[0][0] == "OUT_OF_RANGE"

    def test_invalid_piece_type_rejected(self, session: EngineSession) -> None:
        rejected = QSignalSpy(session.move_rejected)
        session.submit_promotion(parse_square("e2"), parse_square("e4"), 42)
        assert rejected[0][0] == "INVALID_REQUEST"

    def test_promotion(self, qapp: object) -> None:
        del qapp
        session = EngineSession(Engine.from_fen("4k3/P7/8/8/8/8/8/4K3 w - - 0 1"))
        accepted = QSignalSpy(session.move_accepted)
        session.submit_promotion(parse_square("a7"), parse_square("a8"), int(PieceType.ROOK))
        assert accepted[0][0].san == "a8=R+"

    def test_game_over_emitted(self, session: EngineSession) -> None:
        over = QSignalSpy(session.game_over)
        for san in ("f3", "e5", "g4", "Qh4#"):
            session.submit_move(san)
        assert len(over) == 1
        assert over[0][0] == GameStatus.checkmate(Color.BLACK)

    def test_set_orientation(self, session: EngineSession) -> None:
        changed = QSignalSpy(session.board_changed)
        session.set_orientation(int(Color.BLACK))
        assert changed[0][0] == session.engine.render(Color.BLACK)

    def test_resign_emits_game_over(self, session: EngineSession) -> None:
        over = QSignalSpy(session.game_over)
        session.resign(int(Color.BLACK))
        session.resign(int(Color.WHITE))
        assert len(over) == 1
        assert over[0][0] == GameStatus.resignation(Color.WHITE)
