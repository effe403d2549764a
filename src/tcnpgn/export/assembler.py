"""Turns headers and rendered plies into the final PGN text."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import timedelta

from tcnpgn.codec.clock import format_elapsed
from tcnpgn.core.enums import Color
from tcnpgn.core.notation import DEFAULT_LINE_WIDTH, RESULT_TOKENS, build_pgn
from tcnpgn.export.engine import GeneratedMove


def elapsed_comment(value: timedelta) -> str:
    """Comment body carrying a ply's elapsed move time."""
    return f"[%emt {format_elapsed(value)}]"


def result_token(headers: Mapping[str, str]) -> str:
    token = headers.get("Result", "*").strip()
    return token if token in RESULT_TOKENS else "*"


def assemble_document(
    headers: Mapping[str, str],
    moves: Sequence[GeneratedMove],
    elapsed: Sequence[timedelta] | None = None,
    *,
    first_fullmove: int = 1,
    first_color: Color = Color.WHITE,
    line_width: int = DEFAULT_LINE_WIDTH,
) -> str:
    """Render a PGN document.

    Per-ply times come from *elapsed* when given, otherwise from each
    move's own ``elapsed`` field; plies without a time get no comment.
    """
    if elapsed is not None and len(elapsed) != len(moves):
        raise ValueError(
            f"Got {len(elapsed)} elapsed times for {len(moves)} moves"
        )
    times = elapsed if elapsed is not None else [move.elapsed for move in moves]
    token = result_token(headers)
    if "Result" in headers:
        # The tag and the movetext terminator must agree.
        headers = {**headers, "Result": token}

    comments: list[str | None] = [
        elapsed_comment(value) if value is not None else None for value in times
    ]
    return build_pgn(
        headers,
        [move.san for move in moves],
        token,
        comments,
        first_fullmove=first_fullmove,
        first_color=first_color,
        line_width=line_width,
    )
