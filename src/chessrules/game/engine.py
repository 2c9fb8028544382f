"""Engine, the per-session chess state machine.

Owns one :class:`Board` and its :class:`GameState`, turns notation into
validated moves, applies them and reports the resulting :class:`GameStatus`.
"""

from __future__ import annotations

import logging

from chessrules.core.board import Board
from chessrules.core.enums import Color, DrawReason, Glyphs, PieceType
from chessrules.core.errors import ChessError, GameAlreadyOver
from chessrules.core.move import Move
from chessrules.core.move_generator import MoveGenerator, is_in_check
from chessrules.core.notation import (
    move_from_squares,
    move_to_san,
    movetext_from_sans,
    parse_coordinate,
    parse_san,
    pgn_result_token,
    position_from_fen,
    position_to_fen,
)
from chessrules.core.rules import Rules
from chessrules.core.state import GameState
from chessrules.core.types import Square
from chessrules.game.interfaces import (
    DrawOffer,
    DrawPolicy,
    GameStatus,
    MoveOutcome,
    Notation,
)
from chessrules.game.player import Player

_LOGGER = logging.getLogger(__name__)


class Engine:
    """Orchestrates one game: parses, validates and applies moves.

    Every session owns its own instance; nothing is shared between engines.
    Methods run to completion on the caller's thread, so an instance must not
    be used from several threads at once.
    """

    __slots__ = (
        "_board",
        "_state",
        "_status",
        "_sans",
        "_start_color",
        "_start_number",
        "_players",
        "_draw_policy",
        "_glyphs",
        "_draw_offer",
        "_draw_offer_by",
    )

    def __init__(
        self,
        white: Player | None = None,
        black: Player | None = None,
        *,
        board: Board | None = None,
        state: GameState | None = None,
        draw_policy: DrawPolicy | None = None,
        glyphs: Glyphs = Glyphs.ASCII,
    ) -> None:
        self._board = board if board is not None else Board.standard()
        self._state = state if state is not None else GameState()
        if is_in_check(self._board, self._state.side_to_move.opposite):
            raise ValueError(
                f"{self._state.side_to_move.opposite} is in check but it is "
                f"{self._state.side_to_move} to move"
            )
        if not self._state.repetitions:
            self._state.record_position(self._board)
        self._sans: list[str] = []
        self._start_color = self._state.side_to_move
        self._start_number = self._state.fullmove_number
        self._players: dict[Color, Player] = {}
        for color, player in ((Color.WHITE, white), (Color.BLACK, black)):
            if player is None:
                continue
            if player.color != color:
                raise ValueError(f"{player.label} plays {player.color}, not {color}")
            self._players[color] = player
        self._draw_policy = draw_policy or DrawPolicy.standard()
        self._glyphs = glyphs
        self._draw_offer = DrawOffer.NONE
        self._draw_offer_by: Color | None = None
        self._status = self._evaluate()

    @classmethod
    def from_fen(
        cls,
        fen: str,
        white: Player | None = None,
        black: Player | None = None,
        **kwargs: object,
    ) -> Engine:
        """Engine for a custom setup given as FEN."""
        board, state = position_from_fen(fen)
        return cls(white, black, board=board, state=state, **kwargs)  # type: ignore[arg-type]

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def board(self) -> Board:
        """The live board. Treat as read-only; mutate only via the engine."""
        return self._board

    @property
    def side_to_move(self) -> Color:
        return self._state.side_to_move

    @property
    def draw_offer(self) -> DrawOffer:
        return self._draw_offer

    @property
    def draw_policy(self) -> DrawPolicy:
        return self._draw_policy

    def player(self, color: Color) -> Player | None:
        return self._players.get(color)

    # ── Move submission ──────────────────────────────────────────────────

    def submit_move(self, text: str, notation: Notation = Notation.SAN) -> MoveOutcome:
        """Parse, validate and apply *text* for the side to move.

        Raises a :class:`ChessError` subclass on any failure; a failed call
        leaves board, state and history exactly as they were.
        """
        self._ensure_in_progress(text)
        try:
            if notation == Notation.COORDINATE:
                move = parse_coordinate(text, self._board, self._state)
            else:
                move = parse_san(text, self._board, self._state)
        except ChessError as exc:
            _LOGGER.debug("Rejected %r: %s (%s)", text, exc.reason.name, exc)
            raise
        return self._submit(move, text)

    def submit_coordinates(
        self,
        from_sq: Square,
        to_sq: Square,
        promotion: PieceType | None = None,
    ) -> MoveOutcome:
        """Submit a move given as squares, e.g. from a drag-and-drop gesture."""
        label = f"{from_sq}->{to_sq}"
        self._ensure_in_progress(label)
        try:
            move = move_from_squares(self._board, self._state, from_sq, to_sq, promotion)
        except ChessError as exc:
            _LOGGER.debug("Rejected %s: %s (%s)", label, exc.reason.name, exc)
            raise
        return self._submit(move, label)

    def _ensure_in_progress(self, label: str) -> None:
        if self._status.is_terminal:
            _LOGGER.debug("Rejected %r: game is over (%s)", label, self._status)
            raise GameAlreadyOver(f"The game is over: {self._status}")

    def _submit(self, move: Move, label: str) -> MoveOutcome:
        try:
            Rules.validate(self._board, self._state, move)
        except ChessError as exc:
            _LOGGER.debug("Rejected %r: %s (%s)", label, exc.reason.name, exc)
            raise

        san = move_to_san(self._board, self._state, move)
        captured = self._state.commit(self._board, move)
        self._sans.append(san)
        self._draw_offer = DrawOffer.NONE  # any move cancels a pending offer
        self._draw_offer_by = None

        self._status = self._evaluate()
        _LOGGER.debug("Accepted %s (%s)", san, move)
        if self._status.is_terminal:
            _LOGGER.info("Game over after %s: %s", san, self._status)

        return MoveOutcome(
            move=move,
            san=san,
            captured=captured,
            is_check=self.is_in_check(),
            status=self._status,
        )

    # ── Resignation ──────────────────────────────────────────────────────

    def resign(self, color: Color) -> bool:
        """*color* gives up the game. Returns True if the game ended."""
        if self._status.is_terminal:
            return False
        self._draw_offer = DrawOffer.NONE
        self._draw_offer_by = None
        self._status = GameStatus.resignation(color.opposite)
        _LOGGER.info("Game over: %s", self._status)
        return True

    # ── Draw by agreement ────────────────────────────────────────────────

    def offer_draw(self, color: Color) -> None:
        if self._status.is_terminal or self._draw_offer == DrawOffer.OFFERED:
            return
        self._draw_offer = DrawOffer.OFFERED
        self._draw_offer_by = color

    def accept_draw(self, color: Color) -> bool:
        """Accept the opponent's pending offer. Returns True if the game ended."""
        if self._status.is_terminal or self._draw_offer != DrawOffer.OFFERED:
            return False
        if self._draw_offer_by in (None, color):
            return False
        self._draw_offer = DrawOffer.ACCEPTED
        self._draw_offer_by = None
        self._status = GameStatus.draw(DrawReason.AGREEMENT)
        _LOGGER.info("Game over: %s", self._status)
        return True

    def decline_draw(self) -> None:
        if self._draw_offer != DrawOffer.OFFERED:
            return
        self._draw_offer = DrawOffer.DECLINED
        self._draw_offer_by = None

    # ── Queries ──────────────────────────────────────────────────────────

    def status(self) -> GameStatus:
        return self._status

    def history(self) -> tuple[Move, ...]:
        return tuple(self._state.history)

    def sans(self) -> tuple[str, ...]:
        return tuple(self._sans)

    def render(self, orientation: Color = Color.WHITE, glyphs: Glyphs | None = None) -> str:
        return self._board.render(orientation, glyphs or self._glyphs)

    def headers(self, orientation: Color = Color.WHITE) -> str:
        """Player lines, the viewing side first; unknown players are left out."""
        lines = [
            self._players[color].display()
            for color in (orientation, orientation.opposite)
            if color in self._players
        ]
        return "\n".join(lines)

    def legal_moves(self) -> list[Move]:
        if self._status.is_terminal:
            return []
        return MoveGenerator(self._board, self._state).generate_legal_moves()

    def is_in_check(self) -> bool:
        return is_in_check(self._board, self._state.side_to_move)

    def fen(self) -> str:
        return position_to_fen(self._board, self._state)

    def result_token(self) -> str:
        return pgn_result_token(self._status.result)

    def export_history(self) -> str:
        """One line of numbered SAN moves followed by the result token."""
        return movetext_from_sans(
            self._sans,
            self.result_token(),
            first_color=self._start_color,
            first_number=self._start_number,
        )

    # ── Internal ─────────────────────────────────────────────────────────

    def _evaluate(self) -> GameStatus:
        board, state = self._board, self._state
        side = state.side_to_move
        if not MoveGenerator(board, state).has_legal_move():
            if is_in_check(board, side):
                return GameStatus.checkmate(side.opposite)
            return GameStatus.stalemate()

        policy = self._draw_policy
        reason = Rules.draw_reason(
            board,
            state,
            fifty_move_halfmoves=policy.fifty_move_halfmoves,
            repetition_count=policy.repetition_count,
            insufficient_material=policy.insufficient_material,
        )
        if reason is not None:
            return GameStatus.draw(reason)
        return GameStatus.awaiting(side)

    def __repr__(self) -> str:
        return f"Engine({self.fen()!r}, status={self._status})"
