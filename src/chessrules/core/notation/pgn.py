"""Single-line movetext export in PGN style."""

from __future__ import annotations

from collections.abc import Sequence

from chessrules.core.enums import Color, GameResult

_PGN_RESULT_TOKENS: dict[GameResult, str] = {
    GameResult.WHITE_WINS: "1-0",
    GameResult.BLACK_WINS: "0-1",
    GameResult.DRAW: "1/2-1/2",
    GameResult.IN_PROGRESS: "*",
}


def pgn_result_token(result: GameResult) -> str:
    """Convert :class:`GameResult` to a PGN result token."""
    return _PGN_RESULT_TOKENS[result]


def movetext_from_sans(
    sans: Sequence[str],
    result_token: str = "*",
    *,
    first_color: Color = Color.WHITE,
    first_number: int = 1,
) -> str:
    """Build numbered movetext, e.g. ``"1. e4 e5 2. Nf3 *"``.

    A game that starts with Black to move opens with ``"1... e5"``.
    """
    parts: list[str] = []
    number = first_number
    color = first_color
    for ply, san in enumerate(sans):
        if color == Color.WHITE:
            parts.append(f"{number}.")
        elif ply == 0:
            parts.append(f"{number}...")
        parts.append(san)
        if color == Color.BLACK:
            number += 1
        color = color.opposite
    parts.append(result_token)
    return " ".join(parts)
