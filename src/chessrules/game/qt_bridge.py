"""Qt adapter exposing one engine session through signals and slots."""

from __future__ import annotations

import logging
from collections.abc import Callable

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from chessrules.core.enums import Color, PieceType
from chessrules.core.errors import ChessError
from chessrules.game.engine import Engine
from chessrules.game.interfaces import MoveOutcome, Notation

_LOGGER = logging.getLogger(__name__)


class EngineSession(QObject):
    """Thread-affine wrapper around a single :class:`Engine`.

    The engine is handed in by the owner of the session; the adapter never
    creates or shares one itself. Failures are reported through
    :attr:`move_rejected` instead of propagating into the event loop.
    """

    move_accepted = pyqtSignal(object)
    move_rejected = pyqtSignal(str, str)
    board_changed = pyqtSignal(str)
    game_over = pyqtSignal(object)

    __slots__ = ("_engine", "_orientation")

    def __init__(self, engine: Engine, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._engine = engine
        self._orientation = Color.WHITE

    @property
    def engine(self) -> Engine:
        return self._engine

    @pyqtSlot(str)
    def submit_move(self, text: str) -> None:
        """Submit SAN text typed or generated by the front end."""
        self._run(lambda: self._engine.submit_move(text))

    @pyqtSlot(str)
    def submit_coordinate_text(self, text: str) -> None:
        self._run(lambda: self._engine.submit_move(text, Notation.COORDINATE))

    @pyqtSlot(int, int)
    def submit_squares(self, from_sq: int, to_sq: int) -> None:
        """Submit a drag-and-drop gesture from *from_sq* to *to_sq*."""
        self._run(lambda: self._engine.submit_coordinates(from_sq, to_sq))

    @pyqtSlot(int, int, int)
    def submit_promotion(self, from_sq: int, to_sq: int, piece_type: int) -> None:
        self._run(
            lambda: self._engine.submit_coordinates(from_sq, to_sq, PieceType(piece_type))
        )

    @pyqtSlot(int)
    def resign(self, color: int) -> None:
        if self._engine.resign(Color(color)):
            self.game_over.emit(self._engine.status())

    @pyqtSlot(int)
    def set_orientation(self, color: int) -> None:
        self._orientation = Color(color)
        self.board_changed.emit(self._engine.render(self._orientation))

    def _run(self, submit: Callable[[], MoveOutcome]) -> None:
        try:
            outcome = submit()
        except ChessError as exc:
            self.move_rejected.emit(exc.reason.name, str(exc))
            return
        except ValueError as exc:
            _LOGGER.warning("Invalid request from front end: %s", exc)
            self.move_rejected.emit("INVALID_REQUEST", str(exc))
            return

        self.move_accepted.emit(outcome)
        self.board_changed.emit(self._engine.render(self._orientation))
        if outcome.status.is_terminal:
            self.game_over.emit(outcome.status)
