"""Move value object (UCI-style representation)."""

from __future__ import annotations

from dataclasses import dataclass

from tcnpgn.core.enums import MoveFlag, PieceType
from tcnpgn.core.piece import piece_letter
from tcnpgn.core.types import Square, square_name


@dataclass(frozen=True, slots=True)
class Move:
    """A fully classified move as understood by the rule engine."""

    from_sq: Square
    to_sq: Square
    flag: MoveFlag = MoveFlag.NORMAL
    promotion: PieceType | None = None

    def __str__(self) -> str:
        return self.uci

    @property
    def uci(self) -> str:
        """UCI long-algebraic notation, e.g. ``e7e8q``."""
        base = f"{square_name(self.from_sq)}{square_name(self.to_sq)}"
        if self.promotion is not None:
            base += piece_letter(self.promotion).lower()
        return base

    @property
    def is_castle(self) -> bool:
        return self.flag in (MoveFlag.CASTLE_KINGSIDE, MoveFlag.CASTLE_QUEENSIDE)
