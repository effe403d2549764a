"""High-level chess rules: check, checkmate, stalemate, automatic draws."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tcnpgn.core.enums import GameResult, PieceType
from tcnpgn.core.move_generator import MoveGenerator
from tcnpgn.core.types import file_of, rank_of

if TYPE_CHECKING:
    from tcnpgn.core.position import Position

_MINOR_PIECES = (PieceType.KNIGHT, PieceType.BISHOP)


class Rules:
    """Static rule-checker that operates on a :class:`Position`.

    Only draws that end the game without a claim count here (insufficient
    material, 75-move rule, fivefold repetition); claimable draws are agreed
    by the players and arrive through the record's own result.
    """

    @staticmethod
    def is_in_check(position: Position) -> bool:
        return MoveGenerator(position).is_in_check(position.side_to_move)

    @staticmethod
    def is_game_over(position: Position) -> bool:
        """Checkmate or stalemate: the side to move has no legal reply."""
        return not MoveGenerator(position).has_legal_moves()

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        return Rules.is_in_check(position) and Rules.is_game_over(position)

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        return not Rules.is_in_check(position) and Rules.is_game_over(position)

    @staticmethod
    def is_insufficient_material(position: Position) -> bool:
        """K vs K, K+minor vs K, K+B vs K+B with same-colour bishops."""
        board = position.board
        others = [
            (sq, piece)
            for sq, piece in board
            if piece.piece_type != PieceType.KING
        ]

        if not others:
            return True

        if len(others) == 1:
            return others[0][1].piece_type in _MINOR_PIECES

        if len(others) == 2:
            (sq_a, a), (sq_b, b) = others
            if (
                a.piece_type == PieceType.BISHOP
                and b.piece_type == PieceType.BISHOP
                and a.color != b.color
            ):
                return (file_of(sq_a) + rank_of(sq_a)) % 2 == (
                    file_of(sq_b) + rank_of(sq_b)
                ) % 2

        return False

    @staticmethod
    def is_seventy_five_move_rule(position: Position) -> bool:
        return position.halfmove_clock >= 150  # 150 half-moves = 75 full moves

    @staticmethod
    def is_fivefold_repetition(position: Position) -> bool:
        return position.repetition_count() >= 5

    @staticmethod
    def is_automatic_draw(position: Position) -> bool:
        """Whether the position is drawn without either player claiming."""
        return (
            Rules.is_insufficient_material(position)
            or Rules.is_seventy_five_move_rule(position)
            or Rules.is_fivefold_repetition(position)
        )

    @staticmethod
    def game_result(position: Position) -> GameResult:
        """Result implied by the position alone."""
        if Rules.is_checkmate(position):
            return GameResult.win_for(position.side_to_move.opposite)
        if Rules.is_stalemate(position) or Rules.is_automatic_draw(position):
            return GameResult.DRAW
        return GameResult.IN_PROGRESS
