"""Value types exchanged between the engine and its front ends."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum, auto
from typing import TYPE_CHECKING

from chessrules.core.enums import Color, DrawReason, GameResult

if TYPE_CHECKING:
    from chessrules.core.move import Move
    from chessrules.core.piece import Piece


# ── Game phase FSM states ────────────────────────────────────────────────────


class GamePhase(IntEnum):
    """Finite-state-machine states for a chess game."""

    AWAITING_MOVE = auto()
    CHECKMATE = auto()
    STALEMATE = auto()
    DRAW = auto()
    RESIGNATION = auto()


class DrawOffer(IntEnum):
    """Draw offer status between players."""

    NONE = 0
    OFFERED = auto()
    ACCEPTED = auto()
    DECLINED = auto()


class Notation(Enum):
    """Text formats accepted by :meth:`Engine.submit_move`."""

    SAN = "san"
    COORDINATE = "coordinate"


@dataclass(frozen=True, slots=True)
class GameStatus:
    """Snapshot of the engine state machine.

    ``color`` is the side to move while awaiting a move and the winner after
    checkmate or resignation; it is ``None`` for stalemate and draws.
    """

    phase: GamePhase
    color: Color | None = None
    draw_reason: DrawReason | None = None

    @classmethod
    def awaiting(cls, color: Color) -> GameStatus:
        return cls(GamePhase.AWAITING_MOVE, color)

    @classmethod
    def checkmate(cls, winner: Color) -> GameStatus:
        return cls(GamePhase.CHECKMATE, winner)

    @classmethod
    def resignation(cls, winner: Color) -> GameStatus:
        return cls(GamePhase.RESIGNATION, winner)

    @classmethod
    def stalemate(cls) -> GameStatus:
        return cls(GamePhase.STALEMATE)

    @classmethod
    def draw(cls, reason: DrawReason) -> GameStatus:
        return cls(GamePhase.DRAW, draw_reason=reason)

    @property
    def is_terminal(self) -> bool:
        return self.phase != GamePhase.AWAITING_MOVE

    @property
    def result(self) -> GameResult:
        if self.phase in (GamePhase.CHECKMATE, GamePhase.RESIGNATION):
            return GameResult.WHITE_WINS if self.color == Color.WHITE else GameResult.BLACK_WINS
        if self.phase in (GamePhase.STALEMATE, GamePhase.DRAW):
            return GameResult.DRAW
        return GameResult.IN_PROGRESS

    def __str__(self) -> str:
        if self.phase == GamePhase.AWAITING_MOVE:
            return f"{str(self.color).capitalize()} to move"
        if self.phase == GamePhase.CHECKMATE:
            return f"Checkmate, {self.color} wins"
        if self.phase == GamePhase.RESIGNATION:
            assert self.color is not None
            return f"{str(self.color.opposite).capitalize()} resigns, {self.color} wins"
        if self.phase == GamePhase.STALEMATE:
            return "Stalemate"
        assert self.draw_reason is not None
        return f"Draw by {self.draw_reason.name.lower().replace('_', ' ')}"


@dataclass(frozen=True, slots=True)
class MoveOutcome:
    """What an accepted move did and where the game stands afterwards."""

    move: Move
    san: str
    captured: Piece | None
    is_check: bool
    status: GameStatus


# ── Configuration ────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class DrawPolicy:
    """Thresholds for automatic draw detection.

    Args:
        fifty_move_halfmoves: Halfmove clock value that ends the game.
        repetition_count: Occurrences of one position that end the game.
        insufficient_material: Whether dead positions end the game.
    """

    fifty_move_halfmoves: int = 100
    repetition_count: int = 3
    insufficient_material: bool = True

    def __post_init__(self) -> None:
        if self.fifty_move_halfmoves < 1:
            raise ValueError("fifty_move_halfmoves must be positive")
        if self.repetition_count < 2:
            raise ValueError("repetition_count must be at least 2")

    @classmethod
    def standard(cls) -> DrawPolicy:
        """Fifty-move rule and threefold repetition end the game at once."""
        return cls()

    @classmethod
    def fide_automatic(cls) -> DrawPolicy:
        """Only the draws FIDE applies without a claim: 75 moves, fivefold."""
        return cls(fifty_move_halfmoves=150, repetition_count=5)
