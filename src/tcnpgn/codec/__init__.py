"""Decoders for the packed fields of a game record."""

from tcnpgn.codec.chunker import chunk_string
from tcnpgn.codec.clock import (
    ClockParameters,
    TimeControl,
    TimestampMode,
    decode_move_times,
    encode_move_times,
    format_elapsed,
)
from tcnpgn.codec.tcn import (
    CoordinateMove,
    PlainDestination,
    PromotionDestination,
    decode_move_list,
    decode_token,
    encode_move,
    encode_moves,
    encode_san_game,
)

__all__ = [
    "chunk_string",
    "ClockParameters",
    "TimeControl",
    "TimestampMode",
    "decode_move_times",
    "encode_move_times",
    "format_elapsed",
    "CoordinateMove",
    "PlainDestination",
    "PromotionDestination",
    "decode_move_list",
    "decode_token",
    "encode_move",
    "encode_moves",
    "encode_san_game",
]
