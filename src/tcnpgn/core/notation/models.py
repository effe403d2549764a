"""Shared notation-layer data models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class PgnMove:
    """A single mainline move with its optional brace comment."""

    san: str
    comment: str = ""


@dataclass(slots=True)
class ParsedPgn:
    """Headers, mainline and result read back from a PGN document."""

    headers: dict[str, str]
    moves: list[PgnMove]
    result_token: str
