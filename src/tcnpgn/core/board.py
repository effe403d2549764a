"""Board - piece placement on an 8x8 grid."""

from __future__ import annotations

from collections.abc import Iterator

from tcnpgn.core.enums import Color, PieceType
from tcnpgn.core.piece import Piece
from tcnpgn.core.types import Square, make_square

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


class Board:
    """Mutable 64-square board with a per-color occupancy index."""

    __slots__ = ("_squares", "_occupied", "_king_squares")

    def __init__(self) -> None:
        self._squares: list[Piece | None] = [None] * 64
        # [color] -> squares holding that color's pieces.
        self._occupied: tuple[set[Square], set[Square]] = (set(), set())
        # [color] -> king square cache (None if king missing).
        self._king_squares: list[Square | None] = [None, None]

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._squares[sq]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        old_piece = self._squares[sq]
        if old_piece is not None:
            old_idx = int(old_piece.color)
            self._occupied[old_idx].discard(sq)
            if (
                old_piece.piece_type == PieceType.KING
                and self._king_squares[old_idx] == sq
            ):
                self._king_squares[old_idx] = None

        self._squares[sq] = piece
        if piece is None:
            return

        idx = int(piece.color)
        self._occupied[idx].add(sq)
        if piece.piece_type == PieceType.KING:
            self._king_squares[idx] = sq

    def is_empty(self, sq: Square) -> bool:
        return self._squares[sq] is None

    def snapshot(self) -> tuple[Piece | None, ...]:
        """Immutable copy of the 64 squares."""
        return tuple(self._squares)

    def __iter__(self) -> Iterator[tuple[Square, Piece]]:
        """Occupied squares in ascending square order."""
        for sq, piece in enumerate(self._squares):
            if piece is not None:
                yield sq, piece

    # -- Query helpers ------------------------------------------------------

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        """Squares occupied by *color*'s *piece_type*, ascending."""
        squares = self._squares
        return sorted(
            sq
            for sq in self._occupied[int(color)]
            if squares[sq].piece_type == piece_type  # type: ignore[union-attr]
        )

    def all_pieces(self, color: Color) -> list[Square]:
        return sorted(self._occupied[int(color)])

    def count(self, color: Color | None = None) -> int:
        if color is None:
            return len(self._occupied[0]) + len(self._occupied[1])
        return len(self._occupied[int(color)])

    def king_square(self, color: Color) -> Square:
        """Return the single king square for *color*."""
        sq = self._king_squares[int(color)]
        if sq is None:
            raise ValueError(f"No {color.name} king on board")
        return sq

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        b = cls()
        for f, pt in enumerate(_BACK_RANK):
            b[make_square(f, 0)] = Piece(Color.WHITE, pt)
            b[make_square(f, 1)] = Piece(Color.WHITE, PieceType.PAWN)
            b[make_square(f, 6)] = Piece(Color.BLACK, PieceType.PAWN)
            b[make_square(f, 7)] = Piece(Color.BLACK, pt)
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __repr__(self) -> str:
        rows: list[str] = []
        for rank in range(7, -1, -1):
            row = []
            for file in range(8):
                p = self[make_square(file, rank)]
                row.append(str(p) if p else ".")
            rows.append(f"{rank + 1} {' '.join(row)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
