"""Input record: headers, packed moves and clock data of one game."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from tcnpgn.codec.clock import ClockParameters, TimeControl
from tcnpgn.errors import MalformedInput

CANONICAL_HEADER_ORDER: tuple[str, ...] = (
    "Event",
    "Site",
    "Date",
    "Round",
    "White",
    "Black",
    "Result",
    "CurrentPosition",
    "Timezone",
    "ECO",
    "ECOUrl",
    "UTCDate",
    "UTCTime",
    "WhiteElo",
    "BlackElo",
    "TimeControl",
    "Termination",
    "StartTime",
    "EndDate",
    "EndTime",
    "Link",
    "SetUp",
    "FEN",
)
_CANONICAL_RANK = {key: idx for idx, key in enumerate(CANONICAL_HEADER_ORDER)}


def canonical_headers(raw: Mapping[str, Any]) -> dict[str, str]:
    """Order *raw* tags canonically; unknown tags keep their order at the end.

    Values are stringified (ratings usually arrive as numbers) and ``None``
    values are dropped.
    """
    present = [key for key, value in raw.items() if value is not None]
    unknown = len(_CANONICAL_RANK)
    # sorted() is stable, so unknown tags keep their relative order.
    ordered = sorted(present, key=lambda key: _CANONICAL_RANK.get(key, unknown))
    return {key: str(raw[key]) for key in ordered}


def _ticks(game: Mapping[str, Any], key: str, default: int | None = None) -> int:
    value = game.get(key, default)
    if value is None:
        raise MalformedInput(f"Record is missing {key!r}")
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise MalformedInput(f"Record field {key!r} must be a non-negative integer")
    return value


@dataclass(frozen=True, slots=True)
class GameRecord:
    """Everything needed to write one game's PGN, already fetched."""

    game_id: str
    headers: dict[str, str]
    move_list: str
    clock: ClockParameters
    move_timestamps: str | None = None

    @property
    def start_fen(self) -> str | None:
        """FEN of a set-up start position, or ``None`` for the standard one."""
        if self.headers.get("SetUp") == "1":
            return self.headers.get("FEN") or None
        return None

    @classmethod
    def from_payload(
        cls, payload: Mapping[str, Any], game_id: str | None = None
    ) -> GameRecord:
        """Build a record from a chess.com style callback payload.

        Accepts either ``{"game": {...}}`` or the inner game object.
        """
        game = payload.get("game", payload)
        if not isinstance(game, Mapping):
            raise MalformedInput("Record payload has no game object")

        move_list = game.get("moveList")
        if not isinstance(move_list, str):
            raise MalformedInput("Record is missing a 'moveList' string")

        headers = game.get("pgnHeaders") or {}
        if not isinstance(headers, Mapping):
            raise MalformedInput("'pgnHeaders' must be an object")

        timestamps = game.get("moveTimestamps")
        if timestamps is not None and not isinstance(timestamps, str):
            timestamps = ",".join(str(v) for v in timestamps)

        base = _ticks(game, "baseTime1", 0)
        increment = _ticks(game, "timeIncrement1", 0)
        clock = ClockParameters(
            white=TimeControl(base, increment),
            black=TimeControl(
                _ticks(game, "baseTime2", base),
                _ticks(game, "timeIncrement2", increment),
            ),
        )

        resolved_id = game_id if game_id is not None else game.get("id")
        return cls(
            game_id=str(resolved_id) if resolved_id is not None else "",
            headers=canonical_headers(headers),
            move_list=move_list,
            clock=clock,
            move_timestamps=timestamps,
        )
