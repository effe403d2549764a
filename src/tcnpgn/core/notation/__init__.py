"""Notation package: FEN / SAN / PGN text for the rule engine."""

from tcnpgn.core.notation.fen import STARTING_FEN, position_from_fen, position_to_fen
from tcnpgn.core.notation.models import ParsedPgn, PgnMove
from tcnpgn.core.notation.pgn import (
    DEFAULT_LINE_WIDTH,
    RESULT_TOKENS,
    build_pgn,
    game_result_from_pgn,
    header_lines,
    movetext_tokens,
    parse_pgn_game,
    pgn_result_token,
    wrap_tokens,
)
from tcnpgn.core.notation.san import (
    check_suffix,
    disambiguation,
    is_capture,
    parse_san,
    push_san,
    san_body,
)

__all__ = [
    "DEFAULT_LINE_WIDTH",
    "RESULT_TOKENS",
    "STARTING_FEN",
    "PgnMove",
    "ParsedPgn",
    "position_from_fen",
    "position_to_fen",
    "check_suffix",
    "disambiguation",
    "is_capture",
    "parse_san",
    "push_san",
    "san_body",
    "pgn_result_token",
    "game_result_from_pgn",
    "header_lines",
    "movetext_tokens",
    "wrap_tokens",
    "build_pgn",
    "parse_pgn_game",
]
