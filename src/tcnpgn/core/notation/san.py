"""SAN (Standard Algebraic Notation) rendering and parsing."""

from __future__ import annotations

from tcnpgn.core.enums import MoveFlag, PieceType
from tcnpgn.core.move import Move
from tcnpgn.core.move_generator import MoveGenerator
from tcnpgn.core.piece import piece_letter, piece_type_from_letter
from tcnpgn.core.position import Position
from tcnpgn.core.rules import Rules
from tcnpgn.core.types import FILE_NAMES, file_of, parse_square, rank_of, square_name
from tcnpgn.errors import AmbiguousNotation

CASTLE_KINGSIDE_SAN = "O-O"
CASTLE_QUEENSIDE_SAN = "O-O-O"


def is_capture(position: Position, move: Move) -> bool:
    """Whether *move* takes a piece in *position* (en passant included)."""
    if move.is_castle:
        return False
    return move.flag == MoveFlag.EN_PASSANT or position.board[move.to_sq] is not None


def disambiguation(position: Position, move: Move) -> str:
    """Origin prefix needed to tell *move* apart from same-kind rivals.

    Empty when no other piece of the same kind can legally reach the target,
    the origin file when that alone is unique, otherwise file and rank.
    """
    piece = position.board[move.from_sq]
    assert piece is not None
    movers = {
        m.from_sq
        for m in MoveGenerator(position).generate_legal_moves(piece.piece_type)
        if m.to_sq == move.to_sq
    }
    rivals = movers - {move.from_sq}
    if not rivals:
        prefix = ""
    elif all(file_of(sq) != file_of(move.from_sq) for sq in rivals):
        prefix = FILE_NAMES[file_of(move.from_sq)]
    else:
        prefix = square_name(move.from_sq)

    # The rendered prefix must pick out exactly this mover.
    matches = [sq for sq in movers if square_name(sq).startswith(prefix)]
    if matches != [move.from_sq]:
        raise AmbiguousNotation(
            f"{piece_letter(piece.piece_type)}{prefix}{square_name(move.to_sq)} "
            f"resolves to {[square_name(sq) for sq in matches]}"
        )
    return prefix


def san_body(position: Position, move: Move) -> str:
    """SAN for *move* in *position*, without the check/mate suffix."""
    if move.flag == MoveFlag.CASTLE_KINGSIDE:
        return CASTLE_KINGSIDE_SAN
    if move.flag == MoveFlag.CASTLE_QUEENSIDE:
        return CASTLE_QUEENSIDE_SAN

    piece = position.board[move.from_sq]
    assert piece is not None
    capture = is_capture(position, move)

    if piece.piece_type == PieceType.PAWN:
        san = FILE_NAMES[file_of(move.from_sq)] if capture else ""
    else:
        san = piece_letter(piece.piece_type) + disambiguation(position, move)

    if capture:
        san += "x"
    san += square_name(move.to_sq)

    if move.flag == MoveFlag.PROMOTION and move.promotion is not None:
        san += "=" + piece_letter(move.promotion)
    return san


def check_suffix(position: Position) -> str:
    """``+``/``#`` for the side to move in *position*, or empty."""
    if not Rules.is_in_check(position):
        return ""
    return "#" if Rules.is_game_over(position) else "+"


def push_san(position: Position, move: Move) -> str:
    """Play a legal *move* on *position* and return its full SAN."""
    san = san_body(position, move)
    position.make_move(move)
    return san + check_suffix(position)


def parse_san(position: Position, san: str) -> Move:
    """Parse a SAN string into a :class:`Move` given the current *position*."""
    legal = MoveGenerator(position).generate_legal_moves()

    clean = san.rstrip("+#!?")

    if clean in (CASTLE_KINGSIDE_SAN, "0-0"):
        flag = MoveFlag.CASTLE_KINGSIDE
    elif clean in (CASTLE_QUEENSIDE_SAN, "0-0-0"):
        flag = MoveFlag.CASTLE_QUEENSIDE
    else:
        flag = None
    if flag is not None:
        for m in legal:
            if m.flag == flag:
                return m
        raise ValueError(f"Illegal move: {san}")

    promotion: PieceType | None = None
    if "=" in clean:
        clean, _, promo_letter = clean.partition("=")
        promotion = piece_type_from_letter(promo_letter)

    to_sq = parse_square(clean[-2:])
    clean = clean[:-2].removesuffix("x")

    if clean and clean[0].isupper():
        piece_type = piece_type_from_letter(clean[0])
        clean = clean[1:]
    else:
        piece_type = PieceType.PAWN

    from_file: int | None = None
    from_rank: int | None = None
    for ch in clean:
        if ch in FILE_NAMES:
            from_file = FILE_NAMES.index(ch)
        elif ch.isdigit():
            from_rank = int(ch) - 1
        else:
            raise ValueError(f"Invalid SAN: {san}")

    candidates: list[Move] = []
    for m in legal:
        p = position.board[m.from_sq]
        if p is None or p.piece_type != piece_type or m.to_sq != to_sq:
            continue
        if m.promotion != promotion:
            continue
        if from_file is not None and file_of(m.from_sq) != from_file:
            continue
        if from_rank is not None and rank_of(m.from_sq) != from_rank:
            continue
        candidates.append(m)

    if len(candidates) == 1:
        return candidates[0]
    if not candidates:
        raise ValueError(f"Illegal move: {san}")
    raise ValueError(f"Ambiguous move: {san} -> {[m.uci for m in candidates]}")
