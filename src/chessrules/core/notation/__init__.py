"""Notation package: SAN, coordinate, FEN and movetext."""

from chessrules.core.notation.coordinate import move_from_squares, parse_coordinate
from chessrules.core.notation.fen import STARTING_FEN, position_from_fen, position_to_fen
from chessrules.core.notation.pgn import movetext_from_sans, pgn_result_token
from chessrules.core.notation.san import move_to_san, parse_san

__all__ = [
    "STARTING_FEN",
    "position_from_fen",
    "position_to_fen",
    "move_to_san",
    "parse_san",
    "parse_coordinate",
    "move_from_squares",
    "pgn_result_token",
    "movetext_from_sans",
]
