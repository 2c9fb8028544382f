"""Game management layer: engine state machine, players, status values.

Quick start::

    from chessrules.game import Engine

    engine = Engine()
    engine.submit_move("e4")
    print(engine.render())
"""

from chessrules.game.engine import Engine
from chessrules.game.interfaces import (
    DrawOffer,
    DrawPolicy,
    GamePhase,
    GameStatus,
    MoveOutcome,
    Notation,
)
from chessrules.game.player import Player

__all__ = [
    # Values
    "DrawOffer",
    "DrawPolicy",
    "GamePhase",
    "GameStatus",
    "MoveOutcome",
    "Notation",
    # Concrete
    "Engine",
    "Player",
]
