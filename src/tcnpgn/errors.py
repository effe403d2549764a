"""Exception hierarchy shared by every layer of the exporter."""

from __future__ import annotations


class TcnPgnError(Exception):
    """Base class for all errors raised while producing a PGN document."""


class MalformedInput(TcnPgnError):
    """The record is structurally invalid (chunking, symbols, clock data)."""


class UnknownSymbol(MalformedInput):
    """A move token contains a character outside the TCN alphabet."""

    def __init__(self, symbol: str, token: str) -> None:
        super().__init__(f"Unknown TCN symbol {symbol!r} in token {token!r}")
        self.symbol = symbol
        self.token = token


class IllegalMove(TcnPgnError):
    """A decoded move cannot be played in the current position."""

    def __init__(self, message: str, *, ply: int | None = None) -> None:
        if ply is not None:
            message = f"ply {ply}: {message}"
        super().__init__(message)
        self.ply = ply


class AmbiguousNotation(TcnPgnError):
    """Rendered SAN matches more than one legal move (internal defect)."""


class NotFound(TcnPgnError):
    """No game record exists for the requested identifier."""

    def __init__(self, game_id: str) -> None:
        super().__init__(f"Game {game_id!r} not found")
        self.game_id = game_id


class SourceUnavailable(TcnPgnError):
    """The record source exists but could not deliver a record."""
