"""Piece value object."""

from __future__ import annotations

from dataclasses import dataclass

from tcnpgn.core.enums import Color, PieceType

_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "P",
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}
_LETTER_TYPES: dict[str, PieceType] = {v: k for k, v in _LETTERS.items()}


def piece_letter(piece_type: PieceType) -> str:
    """Upper-case SAN/FEN letter, e.g. KNIGHT → 'N'."""
    return _LETTERS[piece_type]


def piece_type_from_letter(letter: str) -> PieceType:
    try:
        return _LETTER_TYPES[letter.upper()]
    except KeyError:
        raise ValueError(f"Invalid piece letter: {letter!r}") from None


@dataclass(frozen=True, slots=True)
class Piece:
    """Immutable (color, kind) pair occupying a square."""

    color: Color
    piece_type: PieceType

    def __str__(self) -> str:
        """FEN character (uppercase = white, lowercase = black)."""
        letter = _LETTERS[self.piece_type]
        return letter if self.color is Color.WHITE else letter.lower()

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """Create piece from FEN character, e.g. 'N' → white knight."""
        if len(char) != 1 or char.upper() not in _LETTER_TYPES:
            raise ValueError(f"Invalid piece character: {char!r}")
        color = Color.WHITE if char.isupper() else Color.BLACK
        return cls(color, _LETTER_TYPES[char.upper()])
