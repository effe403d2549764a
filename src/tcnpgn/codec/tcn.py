"""TCN move codec.

TCN packs every ply into two characters. The first character names the
origin square, the second the destination, both through the same alphabet
in which the symbol's position is the square index (a1=0 ... h8=63).

Destination symbols past the 64 squares flag a promotion. For such an
index ``c`` the value ``v = c - 64`` selects the promoted kind
(``v // 3`` into queen, knight, rook, bishop) and the file step of the pawn
(``v % 3 - 1``: toward the a-file, straight, toward the h-file). The rank is
always one step forward from the origin.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from tcnpgn.codec.chunker import chunk_string
from tcnpgn.core.enums import PieceType
from tcnpgn.core.move import Move
from tcnpgn.core.notation import STARTING_FEN, parse_san, position_from_fen
from tcnpgn.core.types import Square, file_of, square_name
from tcnpgn.errors import MalformedInput, UnknownSymbol

TOKEN_WIDTH = 2
BOARD_SIZE = 64

SQUARE_ALPHABET = (
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789!?"
)
PROMOTION_ALPHABET = "{~}(^)[_]@#$"
ALPHABET = SQUARE_ALPHABET + PROMOTION_ALPHABET

PROMOTION_ORDER: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.KNIGHT,
    PieceType.ROOK,
    PieceType.BISHOP,
)

_INDEX: dict[str, int] = {symbol: idx for idx, symbol in enumerate(ALPHABET)}


@dataclass(frozen=True, slots=True)
class PlainDestination:
    square: Square


@dataclass(frozen=True, slots=True)
class PromotionDestination:
    square: Square
    piece_type: PieceType


Destination = PlainDestination | PromotionDestination


@dataclass(frozen=True, slots=True)
class CoordinateMove:
    """Origin and destination of one ply, as carried by the encoding."""

    from_sq: Square
    destination: Destination

    @property
    def to_sq(self) -> Square:
        return self.destination.square

    @property
    def promotion(self) -> PieceType | None:
        if isinstance(self.destination, PromotionDestination):
            return self.destination.piece_type
        return None

    @property
    def uci(self) -> str:
        base = square_name(self.from_sq) + square_name(self.to_sq)
        promotion = self.promotion
        if promotion is not None:
            base += "qnrb"[PROMOTION_ORDER.index(promotion)]
        return base

    @classmethod
    def of(
        cls, from_sq: Square, to_sq: Square, promotion: PieceType | None = None
    ) -> CoordinateMove:
        if promotion is None:
            return cls(from_sq, PlainDestination(to_sq))
        return cls(from_sq, PromotionDestination(to_sq, promotion))


def _promotion_rank_step(from_sq: Square) -> int:
    # Origins on the second rank belong to black pawns heading for rank 1.
    return -8 if from_sq < 16 else 8


def _index_of(symbol: str, token: str) -> int:
    try:
        return _INDEX[symbol]
    except KeyError:
        raise UnknownSymbol(symbol, token) from None


def decode_token(token: str) -> CoordinateMove:
    """Decode one two-character TCN token."""
    if len(token) != TOKEN_WIDTH:
        raise MalformedInput(f"TCN token must be 2 characters, got {token!r}")

    from_sq = _index_of(token[0], token)
    if from_sq >= BOARD_SIZE:
        raise MalformedInput(f"Origin symbol {token[0]!r} is not a square in {token!r}")

    code = _index_of(token[1], token)
    if code < BOARD_SIZE:
        return CoordinateMove(from_sq, PlainDestination(code))

    value = code - BOARD_SIZE
    piece_type = PROMOTION_ORDER[value // 3]
    to_file = file_of(from_sq) + value % 3 - 1
    to_sq = from_sq + _promotion_rank_step(from_sq) + value % 3 - 1
    if not 0 <= to_file < 8 or not 0 <= to_sq < BOARD_SIZE:
        raise MalformedInput(f"Promotion token {token!r} leaves the board")
    return CoordinateMove(from_sq, PromotionDestination(to_sq, piece_type))


def decode_move_list(move_list: str) -> list[CoordinateMove]:
    """Split a TCN move list into tokens and decode each of them."""
    return [decode_token(token) for token in chunk_string(move_list, TOKEN_WIDTH)]


def encode_move(move: CoordinateMove | Move) -> str:
    """Inverse of :func:`decode_token`."""
    from_sq, to_sq, promotion = move.from_sq, move.to_sq, move.promotion
    if promotion is None:
        return SQUARE_ALPHABET[from_sq] + SQUARE_ALPHABET[to_sq]

    if promotion not in PROMOTION_ORDER:
        raise ValueError(f"Cannot promote to {promotion.name}")
    step = file_of(to_sq) - file_of(from_sq)
    if abs(step) > 1 or to_sq != from_sq + _promotion_rank_step(from_sq) + step:
        raise ValueError(
            f"{square_name(from_sq)}{square_name(to_sq)} is not a pawn promotion step"
        )
    code = BOARD_SIZE + PROMOTION_ORDER.index(promotion) * 3 + step + 1
    return SQUARE_ALPHABET[from_sq] + ALPHABET[code]


def encode_moves(moves: Iterable[CoordinateMove | Move]) -> str:
    return "".join(encode_move(move) for move in moves)


def encode_san_game(sans: Sequence[str], start_fen: str = STARTING_FEN) -> str:
    """Encode a SAN mainline played from *start_fen* as a TCN move list.

    Castling is written as the king's two-file step.
    """
    position = position_from_fen(start_fen)
    tokens: list[str] = []
    for san in sans:
        move = parse_san(position, san)
        tokens.append(encode_move(move))
        position.make_move(move)
    return "".join(tokens)
