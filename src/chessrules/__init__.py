"""Chess rules engine: authoritative game state, notation parsing, legality."""

from chessrules.core import Board, Color, GameState, Move, MoveKind, Piece, PieceType
from chessrules.core.errors import (
    AmbiguousMove,
    BlockedPath,
    ChessError,
    EmptySource,
    FriendlyBlock,
    GameAlreadyOver,
    IllegalPattern,
    InvalidCastle,
    InvalidEnPassant,
    InvalidPromotion,
    MalformedSquare,
    OutOfRange,
    ParseError,
    RejectionReason,
    RuleViolation,
    StateError,
    UnknownMove,
    WouldExposeOwnKing,
    WrongTurn,
)
from chessrules.game import DrawPolicy, Engine, GamePhase, GameStatus, MoveOutcome, Player

__all__ = [
    "Board",
    "Color",
    "DrawPolicy",
    "Engine",
    "GamePhase",
    "GameState",
    "GameStatus",
    "Move",
    "MoveKind",
    "MoveOutcome",
    "Piece",
    "PieceType",
    "Player",
    # Errors
    "ChessError",
    "RejectionReason",
    "ParseError",
    "UnknownMove",
    "AmbiguousMove",
    "MalformedSquare",
    "InvalidPromotion",
    "RuleViolation",
    "WrongTurn",
    "BlockedPath",
    "IllegalPattern",
    "WouldExposeOwnKing",
    "InvalidCastle",
    "InvalidEnPassant",
    "StateError",
    "OutOfRange",
    "GameAlreadyOver",
    "EmptySource",
    "FriendlyBlock",
]
