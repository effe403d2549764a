"""PGN serialization and a mainline reader."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence

from tcnpgn.core.enums import Color, GameResult
from tcnpgn.core.notation.models import ParsedPgn, PgnMove

_PGN_HEADER_RE = re.compile(r'^\[(\w+)\s+"((?:[^"\\]|\\.)*)"\]\s*$')
_MOVE_NUMBER_RE = re.compile(r"^\d+\.(?:\.\.)?$")

RESULT_TOKENS = ("1-0", "0-1", "1/2-1/2", "*")
DEFAULT_LINE_WIDTH = 80


def pgn_result_token(result: GameResult) -> str:
    """Convert :class:`GameResult` to a PGN result token."""
    if result == GameResult.WHITE_WINS:
        return "1-0"
    if result == GameResult.BLACK_WINS:
        return "0-1"
    if result == GameResult.DRAW:
        return "1/2-1/2"
    return "*"


def game_result_from_pgn(token: str) -> GameResult:
    """Convert PGN result token to :class:`GameResult`."""
    if token == "1-0":
        return GameResult.WHITE_WINS
    if token == "0-1":
        return GameResult.BLACK_WINS
    if token == "1/2-1/2":
        return GameResult.DRAW
    return GameResult.IN_PROGRESS


def movetext_tokens(
    moves: Sequence[PgnMove],
    result_token: str,
    *,
    first_fullmove: int = 1,
    first_color: Color = Color.WHITE,
) -> list[str]:
    """Move numbers, SAN, brace comments and the result as separate tokens.

    A comment is a single token even though it may contain spaces, so line
    wrapping never splits one.
    """
    tokens: list[str] = []
    fullmove = first_fullmove
    color = first_color
    for ply, move in enumerate(moves):
        if color == Color.WHITE:
            tokens.append(f"{fullmove}.")
        elif ply == 0:
            tokens.append(f"{fullmove}...")
        tokens.append(move.san)
        if move.comment:
            # PGN comments cannot contain a closing brace.
            tokens.append("{" + move.comment.replace("}", "]") + "}")
        if color == Color.BLACK:
            fullmove += 1
        color = color.opposite
    tokens.append(result_token)
    return tokens


def wrap_tokens(tokens: Sequence[str], line_width: int = DEFAULT_LINE_WIDTH) -> str:
    """Join *tokens* with spaces, breaking lines at *line_width* columns.

    ``line_width <= 0`` keeps everything on one line. A token longer than the
    width gets a line of its own.
    """
    if line_width <= 0:
        return " ".join(tokens)

    lines: list[str] = []
    current = ""
    for token in tokens:
        if not current:
            current = token
        elif len(current) + 1 + len(token) <= line_width:
            current = f"{current} {token}"
        else:
            lines.append(current)
            current = token
    if current:
        lines.append(current)
    return "\n".join(lines)


def header_lines(headers: Mapping[str, str]) -> list[str]:
    """``[Key "Value"]`` lines in the mapping's own order."""
    lines: list[str] = []
    for key, value in headers.items():
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        lines.append(f'[{key} "{escaped}"]')
    return lines


def build_pgn(
    headers: Mapping[str, str],
    sans: Sequence[str],
    result_token: str,
    comments: Sequence[str | None] | None = None,
    *,
    first_fullmove: int = 1,
    first_color: Color = Color.WHITE,
    line_width: int = DEFAULT_LINE_WIDTH,
) -> str:
    """Build a single-game PGN document."""
    if comments is not None and len(comments) != len(sans):
        raise ValueError("PGN comments length must match SAN move length")

    moves = [
        PgnMove(san=san, comment=(comments[idx] or "") if comments is not None else "")
        for idx, san in enumerate(sans)
    ]
    tokens = movetext_tokens(
        moves,
        result_token,
        first_fullmove=first_fullmove,
        first_color=first_color,
    )
    lines = header_lines(headers)
    lines.append("")
    lines.append(wrap_tokens(tokens, line_width))
    lines.append("")
    return "\n".join(lines)


def _append_comment(move: PgnMove, comment: str) -> None:
    clean = " ".join(comment.split())
    if not clean:
        return
    move.comment = f"{move.comment} {clean}" if move.comment else clean


def _parse_movetext(movetext: str) -> tuple[list[PgnMove], str]:
    """Mainline moves with their comments, plus the result token."""
    moves: list[PgnMove] = []
    result_token = "*"
    variation_depth = 0
    idx = 0
    total = len(movetext)

    while idx < total:
        ch = movetext[idx]

        if ch.isspace():
            idx += 1
            continue

        if ch == "{":
            end = movetext.find("}", idx + 1)
            end = total if end < 0 else end
            if variation_depth == 0 and moves:
                _append_comment(moves[-1], movetext[idx + 1 : end])
            idx = end + 1
            continue

        if ch == ";":
            end = movetext.find("\n", idx + 1)
            end = total if end < 0 else end
            if variation_depth == 0 and moves:
                _append_comment(moves[-1], movetext[idx + 1 : end])
            idx = end
            continue

        if ch in "()":
            variation_depth = max(0, variation_depth + (1 if ch == "(" else -1))
            idx += 1
            continue

        token_end = idx
        while (
            token_end < total
            and not movetext[token_end].isspace()
            and movetext[token_end] not in "{};()"
        ):
            token_end += 1
        token = movetext[idx:token_end]
        idx = token_end

        if variation_depth > 0 or _MOVE_NUMBER_RE.match(token):
            continue
        if token in RESULT_TOKENS:
            result_token = token
            continue
        if token.startswith("$") and token[1:].isdigit():
            continue

        token = token.lstrip(".")
        if token[:1].isdigit() and "." in token:
            # "12.Nf3" written without a space.
            token = token.split(".")[-1]
        if token:
            moves.append(PgnMove(san=token))

    return moves, result_token


def parse_pgn_game(pgn_text: str) -> ParsedPgn:
    """Parse a single PGN game into headers, mainline moves and result."""
    headers: dict[str, str] = {}
    move_lines: list[str] = []
    in_headers = True

    for raw_line in pgn_text.splitlines():
        line = raw_line.strip()
        if not line:
            if headers:
                in_headers = False
            continue

        if in_headers and line.startswith("["):
            match = _PGN_HEADER_RE.match(line)
            if match is None:
                raise ValueError(f"Invalid PGN header line: {line}")
            key, raw_value = match.groups()
            headers[key] = raw_value.replace('\\"', '"').replace("\\\\", "\\")
            continue

        in_headers = False
        if not line.startswith("%"):
            move_lines.append(line)

    moves, result_token = _parse_movetext("\n".join(move_lines))
    if result_token == "*" and headers.get("Result") in RESULT_TOKENS:
        result_token = headers["Result"]
    return ParsedPgn(headers=headers, moves=moves, result_token=result_token)
