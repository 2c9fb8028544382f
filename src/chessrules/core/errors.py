"""Exception taxonomy for rejected moves and invalid engine access.

Every failure raised by the core derives from :class:`ChessError` and carries a
:class:`RejectionReason` so front ends can either catch a whole family
(``except RuleViolation``) or switch on ``exc.reason``.
"""

from __future__ import annotations

from enum import Enum, auto


class RejectionReason(Enum):
    """Leaf kind of a rejected request."""

    # Parse errors
    UNKNOWN_MOVE = auto()
    AMBIGUOUS_MOVE = auto()
    MALFORMED_SQUARE = auto()
    INVALID_PROMOTION = auto()
    # Rule violations
    WRONG_TURN = auto()
    BLOCKED_PATH = auto()
    ILLEGAL_PATTERN = auto()
    WOULD_EXPOSE_OWN_KING = auto()
    INVALID_CASTLE = auto()
    INVALID_EN_PASSANT = auto()
    # State errors
    OUT_OF_RANGE = auto()
    GAME_ALREADY_OVER = auto()
    EMPTY_SOURCE = auto()
    FRIENDLY_BLOCK = auto()


class ChessError(Exception):
    """Base class of every error raised by the rules engine."""

    reason: RejectionReason


# ── Parse errors ─────────────────────────────────────────────────────────────


class ParseError(ChessError):
    """Notation could not be resolved into exactly one move."""


class UnknownMove(ParseError):
    reason = RejectionReason.UNKNOWN_MOVE


class AmbiguousMove(ParseError):
    reason = RejectionReason.AMBIGUOUS_MOVE


class MalformedSquare(ParseError):
    reason = RejectionReason.MALFORMED_SQUARE


class InvalidPromotion(ParseError):
    """Promotion suffix missing on a last-rank pawn move, or given elsewhere."""

    reason = RejectionReason.INVALID_PROMOTION

    def __init__(self, message: str, *, missing: bool) -> None:
        super().__init__(message)
        self.missing = missing


# ── Rule violations ──────────────────────────────────────────────────────────


class RuleViolation(ChessError):
    """A resolved move breaks the laws of chess."""


class WrongTurn(RuleViolation):
    reason = RejectionReason.WRONG_TURN


class BlockedPath(RuleViolation):
    reason = RejectionReason.BLOCKED_PATH


class IllegalPattern(RuleViolation):
    reason = RejectionReason.ILLEGAL_PATTERN


class WouldExposeOwnKing(RuleViolation):
    reason = RejectionReason.WOULD_EXPOSE_OWN_KING


class InvalidCastle(RuleViolation):
    reason = RejectionReason.INVALID_CASTLE


class InvalidEnPassant(RuleViolation):
    reason = RejectionReason.INVALID_EN_PASSANT


# ── State errors ─────────────────────────────────────────────────────────────


class StateError(ChessError):
    """The request does not fit the current board or game state."""


class OutOfRange(StateError):
    reason = RejectionReason.OUT_OF_RANGE


class GameAlreadyOver(StateError):
    reason = RejectionReason.GAME_ALREADY_OVER


class EmptySource(StateError):
    reason = RejectionReason.EMPTY_SOURCE


class FriendlyBlock(StateError):
    reason = RejectionReason.FRIENDLY_BLOCK
