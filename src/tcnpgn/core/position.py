"""Position - complete game state (board + metadata) with make/unmake."""

from __future__ import annotations

from dataclasses import dataclass

from tcnpgn.core.board import Board
from tcnpgn.core.enums import CastlingRights, Color, MoveFlag, PieceType
from tcnpgn.core.move import Move
from tcnpgn.core.move_generator import MoveGenerator
from tcnpgn.core.piece import Piece
from tcnpgn.core.types import (
    A1,
    A8,
    H1,
    H8,
    Square,
    file_of,
    make_square,
    rank_of,
)

# Rook home squares and the right each one guards.
_ROOK_CORNERS: dict[Square, CastlingRights] = {
    A1: CastlingRights.WHITE_QUEENSIDE,
    H1: CastlingRights.WHITE_KINGSIDE,
    A8: CastlingRights.BLACK_QUEENSIDE,
    H8: CastlingRights.BLACK_KINGSIDE,
}

RepetitionKey = tuple[object, ...]


@dataclass(slots=True)
class _PositionState:
    """Snapshot saved before each move so we can undo it."""

    castling: CastlingRights
    en_passant: Square | None
    halfmove_clock: int
    captured_piece: Piece | None


def rook_castle_squares(move: Move) -> tuple[Square, Square]:
    """Rook origin/destination for a castling *move*."""
    rank = rank_of(move.from_sq)
    if move.flag == MoveFlag.CASTLE_KINGSIDE:
        return make_square(7, rank), make_square(5, rank)
    return make_square(0, rank), make_square(3, rank)


class Position:
    """Full chess position: board + side to move + castling + en passant + clocks.

    One instance belongs to one replay. :meth:`make_move` pushes an undo
    record so the move generator can probe moves and roll them back.
    """

    __slots__ = (
        "board",
        "side_to_move",
        "castling",
        "en_passant",
        "halfmove_clock",
        "fullmove_number",
        "_history",
        "_key_stack",
    )

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Square | None = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.side_to_move = side_to_move
        self.castling = castling
        self.en_passant = en_passant
        self.halfmove_clock = halfmove_clock
        self.fullmove_number = fullmove_number
        self._history: list[_PositionState] = []
        self._key_stack: list[RepetitionKey] = [self.repetition_key()]

    # ── Core move operations ─────────────────────────────────────────────

    def make_move(self, move: Move) -> None:
        """Apply *move*, pushing undo state onto the history stack."""
        piece = self.board[move.from_sq]
        if piece is None:
            raise ValueError(f"No piece on {move.from_sq}")

        capture_sq = move.to_sq
        if move.flag == MoveFlag.EN_PASSANT:
            # The captured pawn sits beside the origin, not on the target.
            capture_sq = make_square(file_of(move.to_sq), rank_of(move.from_sq))
        captured = self.board[capture_sq]

        self._history.append(
            _PositionState(
                castling=self.castling,
                en_passant=self.en_passant,
                halfmove_clock=self.halfmove_clock,
                captured_piece=captured,
            )
        )

        self.board[move.from_sq] = None
        if captured is not None:
            self.board[capture_sq] = None

        if move.flag == MoveFlag.PROMOTION and move.promotion is not None:
            self.board[move.to_sq] = Piece(piece.color, move.promotion)
        else:
            self.board[move.to_sq] = piece

        if move.is_castle:
            rook_from, rook_to = rook_castle_squares(move)
            self.board[rook_to] = self.board[rook_from]
            self.board[rook_from] = None

        if move.flag == MoveFlag.DOUBLE_PAWN:
            self.en_passant = (move.from_sq + move.to_sq) // 2
        else:
            self.en_passant = None

        self._update_castling(move, piece)

        if piece.piece_type == PieceType.PAWN or captured is not None:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1

        if self.side_to_move == Color.BLACK:
            self.fullmove_number += 1
        self.side_to_move = self.side_to_move.opposite

        self._key_stack.append(self.repetition_key())

    def unmake_move(self, move: Move) -> None:
        """Undo the last :meth:`make_move`."""
        state = self._history.pop()
        self._key_stack.pop()

        self.side_to_move = self.side_to_move.opposite
        if self.side_to_move == Color.BLACK:
            self.fullmove_number -= 1

        piece = self.board[move.to_sq]
        assert piece is not None
        if move.flag == MoveFlag.PROMOTION:
            piece = Piece(piece.color, PieceType.PAWN)

        self.board[move.from_sq] = piece
        if move.flag == MoveFlag.EN_PASSANT:
            self.board[move.to_sq] = None
            ep_capture_sq = make_square(file_of(move.to_sq), rank_of(move.from_sq))
            self.board[ep_capture_sq] = state.captured_piece
        else:
            self.board[move.to_sq] = state.captured_piece

        if move.is_castle:
            rook_from, rook_to = rook_castle_squares(move)
            self.board[rook_from] = self.board[rook_to]
            self.board[rook_to] = None

        self.castling = state.castling
        self.en_passant = state.en_passant
        self.halfmove_clock = state.halfmove_clock

    # ── Castling bookkeeping ─────────────────────────────────────────────

    def _update_castling(self, move: Move, piece: Piece) -> None:
        if piece.piece_type == PieceType.KING:
            self.castling &= ~CastlingRights.both(piece.color)

        # Moving from, or capturing on, a rook corner revokes that right.
        for sq in (move.from_sq, move.to_sq):
            right = _ROOK_CORNERS.get(sq)
            if right is not None:
                self.castling &= ~right

    # ── Utilities ────────────────────────────────────────────────────────

    def repetition_key(self) -> RepetitionKey:
        """Identity of the position for repetition counting.

        The en passant square only counts while a capture on it is legal.
        """
        en_passant = (
            self.en_passant if MoveGenerator(self).has_legal_en_passant() else None
        )
        return (
            self.board.snapshot(),
            self.side_to_move,
            self.castling,
            en_passant,
        )

    def repetition_count(self) -> int:
        """How many times the current position occurred in this game."""
        current = self._key_stack[-1]
        return sum(1 for key in self._key_stack if key == current)

    @property
    def ply_count(self) -> int:
        """Moves applied since this instance was created."""
        return len(self._history)
