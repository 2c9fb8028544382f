"""Core domain layer: pure chess rules with zero external dependencies.

Quick start::

    from chessrules.core import Board, GameState, Rules, parse_san

    board, state = Board.standard(), GameState()
    move = parse_san("e4", board, state)
    Rules.validate(board, state, move)
    state.commit(board, move)
"""

from chessrules.core.board import Board
from chessrules.core.enums import (
    CastlingRights,
    Color,
    DrawReason,
    GameResult,
    Glyphs,
    MoveKind,
    PieceType,
)
from chessrules.core.move import Move
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.notation import (
    STARTING_FEN,
    move_to_san,
    parse_coordinate,
    parse_san,
    position_from_fen,
    position_to_fen,
)
from chessrules.core.piece import Piece
from chessrules.core.rules import Rules
from chessrules.core.state import GameState
from chessrules.core.types import (
    Square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "DrawReason",
    "GameResult",
    "Glyphs",
    "MoveKind",
    "PieceType",
    # Types / helpers
    "Square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    # Domain objects
    "Board",
    "GameState",
    "Move",
    "MoveGenerator",
    "Piece",
    "Rules",
    # Notation
    "STARTING_FEN",
    "move_to_san",
    "parse_coordinate",
    "parse_san",
    "position_from_fen",
    "position_to_fen",
]
