"""Legal and pseudo-legal move generation + attack detection."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from tcnpgn.core.enums import CastlingRights, Color, MoveFlag, PieceType
from tcnpgn.core.move import Move
from tcnpgn.core.piece import Piece
from tcnpgn.core.types import Square, file_of, make_square, rank_of

if TYPE_CHECKING:
    from tcnpgn.core.position import Position


KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)


# -- Precomputed lookup tables ---------------------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> tuple[tuple[Square, ...], ...]:
    targets: list[tuple[Square, ...]] = []
    for sq in range(64):
        moves: list[Square] = []
        for df, dr in offsets:
            af = file_of(sq) + df
            ar = rank_of(sq) + dr
            if 0 <= af < 8 and 0 <= ar < 8:
                moves.append(make_square(af, ar))
        targets.append(tuple(moves))
    return tuple(targets)


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    rays_per_square: list[tuple[tuple[Square, ...], ...]] = []
    for sq in range(64):
        square_rays: list[tuple[Square, ...]] = []
        for df, dr in directions:
            af = file_of(sq) + df
            ar = rank_of(sq) + dr
            ray: list[Square] = []
            while 0 <= af < 8 and 0 <= ar < 8:
                ray.append(make_square(af, ar))
                af += df
                ar += dr
            square_rays.append(tuple(ray))
        rays_per_square.append(tuple(square_rays))
    return tuple(rays_per_square)


_KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
_KING_TARGETS = _build_targets(KING_OFFSETS)
_BISHOP_RAYS = _build_rays(BISHOP_DIRS)
_ROOK_RAYS = _build_rays(ROOK_DIRS)

_SLIDER_RAYS: dict[PieceType, tuple[tuple[tuple[Square, ...], ...], ...]] = {
    PieceType.BISHOP: _BISHOP_RAYS,
    PieceType.ROOK: _ROOK_RAYS,
    PieceType.QUEEN: _build_rays(QUEEN_DIRS),
}

_DIAGONAL_ATTACKERS = (PieceType.BISHOP, PieceType.QUEEN)
_STRAIGHT_ATTACKERS = (PieceType.ROOK, PieceType.QUEEN)


class MoveGenerator:
    """Answers "where can the side to move go" for a :class:`Position`.

    Legality is checked by playing each pseudo-legal move on the position
    and rolling it back, so the position is unchanged when a call returns.
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board

    # -- Public API ---------------------------------------------------------

    def generate_legal_moves(self, piece_type: PieceType | None = None) -> list[Move]:
        """Strictly legal moves for the side to move.

        When *piece_type* is given only moves of that kind of piece are
        generated, which is what SAN disambiguation needs.
        """
        return list(self._iter_legal(piece_type))

    def has_legal_moves(self) -> bool:
        """Whether the side to move has any legal move at all."""
        for _move in self._iter_legal(None):
            return True
        return False

    def has_legal_en_passant(self) -> bool:
        """Whether the side to move can legally capture en passant."""
        if self._pos.en_passant is None:
            return False
        return any(
            move.flag == MoveFlag.EN_PASSANT and self._is_legal(move)
            for move in self.generate_pseudo_legal_moves(PieceType.PAWN)
        )

    def generate_pseudo_legal_moves(
        self, piece_type: PieceType | None = None
    ) -> list[Move]:
        """Pseudo-legal moves (may leave own king in check)."""
        moves: list[Move] = []
        color = self._pos.side_to_move
        kinds = tuple(PieceType) if piece_type is None else (piece_type,)

        for kind in kinds:
            for sq in self._board.pieces(color, kind):
                if kind == PieceType.PAWN:
                    self._gen_pawn(sq, color, moves)
                elif kind == PieceType.KNIGHT:
                    self._gen_steps(sq, color, _KNIGHT_TARGETS[sq], moves)
                elif kind == PieceType.KING:
                    self._gen_steps(sq, color, _KING_TARGETS[sq], moves)
                    self._gen_castling(sq, color, moves)
                else:
                    self._gen_sliding(sq, color, _SLIDER_RAYS[kind][sq], moves)
        return moves

    # -- Attack detection (public) -----------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        king_sq = self._board.king_square(color)
        return self.is_square_attacked(king_sq, color.opposite)

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* attacked by any piece of *by_color*?"""
        board = self._board

        # A pawn attacks sq from one rank behind it (from by_color's view).
        pawn_rank = rank_of(sq) - (1 if by_color == Color.WHITE else -1)
        if 0 <= pawn_rank < 8:
            for df in (-1, 1):
                pf = file_of(sq) + df
                if 0 <= pf < 8:
                    piece = board[make_square(pf, pawn_rank)]
                    if (
                        piece is not None
                        and piece.color == by_color
                        and piece.piece_type == PieceType.PAWN
                    ):
                        return True

        for kind, targets in (
            (PieceType.KNIGHT, _KNIGHT_TARGETS),
            (PieceType.KING, _KING_TARGETS),
        ):
            for from_sq in targets[sq]:
                piece = board[from_sq]
                if (
                    piece is not None
                    and piece.color == by_color
                    and piece.piece_type == kind
                ):
                    return True

        for rays, attackers in (
            (_BISHOP_RAYS, _DIAGONAL_ATTACKERS),
            (_ROOK_RAYS, _STRAIGHT_ATTACKERS),
        ):
            for ray in rays[sq]:
                for to_sq in ray:
                    piece = board[to_sq]
                    if piece is None:
                        continue
                    if piece.color == by_color and piece.piece_type in attackers:
                        return True
                    break

        return False

    # -- Internals -----------------------------------------------------------

    def _is_legal(self, move: Move) -> bool:
        pos = self._pos
        moving_color = pos.side_to_move
        pos.make_move(move)
        try:
            return not self.is_in_check(moving_color)
        finally:
            pos.unmake_move(move)

    def _iter_legal(self, piece_type: PieceType | None) -> Iterator[Move]:
        for move in self.generate_pseudo_legal_moves(piece_type):
            if self._is_legal(move):
                yield move

    def _gen_pawn(self, sq: Square, color: Color, moves: list[Move]) -> None:
        board = self._board
        step = color.forward
        rank_idx = rank_of(sq)
        promotes = rank_idx + (1 if color == Color.WHITE else -1) == color.last_rank
        start_rank = 1 if color == Color.WHITE else 6

        def add(to_sq: Square, flag: MoveFlag = MoveFlag.NORMAL) -> None:
            if promotes:
                for pt in PROMOTION_TYPES:
                    moves.append(Move(sq, to_sq, MoveFlag.PROMOTION, pt))
            else:
                moves.append(Move(sq, to_sq, flag))

        one_step = sq + step
        if 0 <= one_step < 64 and board.is_empty(one_step):
            add(one_step)
            two_step = one_step + step
            if rank_idx == start_rank and board.is_empty(two_step):
                moves.append(Move(sq, two_step, MoveFlag.DOUBLE_PAWN))

        for df in (-1, 1):
            cap_file = file_of(sq) + df
            if not 0 <= cap_file < 8 or not 0 <= one_step < 64:
                continue
            cap_sq = make_square(cap_file, rank_of(one_step))
            target = board[cap_sq]
            if target is not None and target.color != color:
                add(cap_sq)
            elif target is None and cap_sq == self._pos.en_passant:
                moves.append(Move(sq, cap_sq, MoveFlag.EN_PASSANT))

    def _gen_steps(
        self,
        sq: Square,
        color: Color,
        targets: tuple[Square, ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for to_sq in targets:
            target = board[to_sq]
            if target is None or target.color != color:
                moves.append(Move(sq, to_sq))

    def _gen_sliding(
        self,
        sq: Square,
        color: Color,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.append(Move(sq, to_sq))
                    continue
                if target.color != color:
                    moves.append(Move(sq, to_sq))
                break

    def _gen_castling(self, king_sq: Square, color: Color, moves: list[Move]) -> None:
        home = make_square(4, color.home_rank)
        if king_sq != home or self.is_in_check(color):
            return

        board = self._board
        opponent = color.opposite
        rights = self._pos.castling
        rook = Piece(color, PieceType.ROOK)

        if rights & CastlingRights.kingside(color) and board[home + 3] == rook:
            f_sq, g_sq = home + 1, home + 2
            if (
                board.is_empty(f_sq)
                and board.is_empty(g_sq)
                and not self.is_square_attacked(f_sq, opponent)
                and not self.is_square_attacked(g_sq, opponent)
            ):
                moves.append(Move(king_sq, g_sq, MoveFlag.CASTLE_KINGSIDE))

        if rights & CastlingRights.queenside(color) and board[home - 4] == rook:
            d_sq, c_sq, b_sq = home - 1, home - 2, home - 3
            if (
                board.is_empty(d_sq)
                and board.is_empty(c_sq)
                and board.is_empty(b_sq)
                and not self.is_square_attacked(d_sq, opponent)
                and not self.is_square_attacked(c_sq, opponent)
            ):
                moves.append(Move(king_sq, c_sq, MoveFlag.CASTLE_QUEENSIDE))
