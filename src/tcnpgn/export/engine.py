"""Replays decoded coordinate moves and renders them as SAN."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import timedelta

from tcnpgn.codec.tcn import CoordinateMove
from tcnpgn.core.enums import Color, GameResult, MoveFlag, PieceType
from tcnpgn.core.move import Move
from tcnpgn.core.move_generator import MoveGenerator
from tcnpgn.core.notation import (
    STARTING_FEN,
    is_capture,
    position_from_fen,
    position_to_fen,
    push_san,
)
from tcnpgn.core.piece import Piece
from tcnpgn.core.position import Position
from tcnpgn.core.rules import Rules
from tcnpgn.core.types import file_of, make_square, rank_of, square_name
from tcnpgn.errors import IllegalMove, MalformedInput

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GeneratedMove:
    """One rendered ply."""

    san: str
    uci: str
    is_capture: bool = False
    is_check: bool = False
    is_checkmate: bool = False
    elapsed: timedelta | None = None


@dataclass(slots=True)
class ReplayResult:
    """Outcome of replaying a whole move list."""

    moves: list[GeneratedMove] = field(default_factory=list)
    start_fen: str = STARTING_FEN
    final_fen: str = STARTING_FEN
    first_color: Color = Color.WHITE
    first_fullmove: int = 1
    result: GameResult = GameResult.IN_PROGRESS

    @property
    def sans(self) -> list[str]:
        return [move.san for move in self.moves]


class NotationEngine:
    """Board-rule state machine driven by one game's coordinate moves.

    An engine owns its :class:`Position` and is meant for a single replay.
    """

    __slots__ = ("_position", "_start_fen", "_finished")

    def __init__(self, start_fen: str | None = None) -> None:
        self._start_fen = start_fen or STARTING_FEN
        try:
            self._position = position_from_fen(self._start_fen)
        except ValueError as exc:
            raise MalformedInput(f"Invalid start position: {exc}") from exc
        self._finished = False

    @property
    def position(self) -> Position:
        return self._position

    def replay(self, moves: Iterable[CoordinateMove]) -> ReplayResult:
        """Play every move in order and collect the rendered plies."""
        result = ReplayResult(
            start_fen=self._start_fen,
            first_color=self._position.side_to_move,
            first_fullmove=self._position.fullmove_number,
        )
        for move in moves:
            result.moves.append(self.play(move))

        result.final_fen = position_to_fen(self._position)
        result.result = self.inferred_result()
        _LOGGER.debug(
            "Replayed %d plies, final position %s (%s)",
            len(result.moves),
            result.final_fen,
            result.result.name,
        )
        return result

    def play(self, coordinate: CoordinateMove) -> GeneratedMove:
        """Apply one move and return its notation."""
        ply = self._position.ply_count + 1
        if self._finished:
            raise IllegalMove(
                f"{coordinate.uci} played after the game ended", ply=ply
            )

        move = self._classify(coordinate, ply)
        position = self._position
        capture = is_capture(position, move)
        san = push_san(position, move)

        self._finished = Rules.is_game_over(position)

        return GeneratedMove(
            san=san,
            uci=move.uci,
            is_capture=capture,
            is_check=san.endswith(("+", "#")),
            is_checkmate=san.endswith("#"),
        )

    def inferred_result(self) -> GameResult:
        """Result implied by the current position, ``IN_PROGRESS`` if none."""
        return Rules.game_result(self._position)

    # -- Classification --------------------------------------------------

    def _classify(self, coordinate: CoordinateMove, ply: int) -> Move:
        """Match a coordinate move against the legal moves of its piece."""
        position = self._position
        from_sq, to_sq = coordinate.from_sq, coordinate.to_sq
        piece = position.board[from_sq]

        if piece is None:
            raise IllegalMove(f"no piece on {square_name(from_sq)}", ply=ply)
        if piece.color != position.side_to_move:
            raise IllegalMove(
                f"{square_name(from_sq)} holds a {piece.color} piece "
                f"but {position.side_to_move} is to move",
                ply=ply,
            )

        reaches_last_rank = (
            piece.piece_type == PieceType.PAWN
            and rank_of(to_sq) == piece.color.last_rank
        )
        if reaches_last_rank and coordinate.promotion is None:
            raise IllegalMove(
                f"{coordinate.uci} reaches the last rank without a promotion",
                ply=ply,
            )
        if coordinate.promotion is not None and not reaches_last_rank:
            raise IllegalMove(
                f"{coordinate.uci} carries a promotion off the last rank", ply=ply
            )

        castle_flag, to_sq = self._castle_target(piece, from_sq, to_sq)

        for move in MoveGenerator(position).generate_legal_moves(piece.piece_type):
            if move.from_sq != from_sq or move.to_sq != to_sq:
                continue
            if move.promotion != coordinate.promotion:
                continue
            if castle_flag is not None and move.flag != castle_flag:
                continue
            return move

        raise IllegalMove(
            f"{coordinate.uci} is not legal in {position_to_fen(position)}", ply=ply
        )

    def _castle_target(
        self, piece: Piece, from_sq: int, to_sq: int
    ) -> tuple[MoveFlag | None, int]:
        """Castling flag and king destination, accepting king-takes-rook form."""
        if piece.piece_type != PieceType.KING:
            return None, to_sq
        home_rank = piece.color.home_rank
        if from_sq != make_square(4, home_rank) or rank_of(to_sq) != home_rank:
            return None, to_sq

        target = self._position.board[to_sq]
        if target == Piece(piece.color, PieceType.ROOK) and file_of(to_sq) in (0, 7):
            to_sq = make_square(6 if file_of(to_sq) == 7 else 2, home_rank)

        if file_of(to_sq) == 6:
            return MoveFlag.CASTLE_KINGSIDE, to_sq
        if file_of(to_sq) == 2:
            return MoveFlag.CASTLE_QUEENSIDE, to_sq
        return None, to_sq
