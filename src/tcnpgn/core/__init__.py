"""Rule engine - board state, legal moves and notation, no external dependencies.

Quick start::

    from tcnpgn.core import MoveGenerator, position_from_fen, STARTING_FEN

    pos = position_from_fen(STARTING_FEN)
    for move in MoveGenerator(pos).generate_legal_moves():
        print(move.uci)
"""

from tcnpgn.core.board import Board
from tcnpgn.core.enums import CastlingRights, Color, GameResult, MoveFlag, PieceType
from tcnpgn.core.move import Move
from tcnpgn.core.move_generator import MoveGenerator
from tcnpgn.core.notation import (
    STARTING_FEN,
    parse_san,
    position_from_fen,
    position_to_fen,
    push_san,
)
from tcnpgn.core.piece import Piece
from tcnpgn.core.position import Position
from tcnpgn.core.rules import Rules
from tcnpgn.core.types import (
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
    "GameResult",
    "MoveFlag",
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
    "Move",
    "MoveGenerator",
    "Piece",
    "Position",
    "Rules",
    # Notation
    "STARTING_FEN",
    "parse_san",
    "push_san",
    "position_from_fen",
    "position_to_fen",
]
