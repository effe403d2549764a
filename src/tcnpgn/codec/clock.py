"""Per-move clock data: parsing, elapsed-time decoding and formatting.

Clock values are integer *ticks*; chess.com records count tenths of a
second, so the default is ten ticks per second. A record carries one value
per ply, read in one of two ways:

``REMAINING``
    the mover's clock right after the move. The time spent is the clock
    before the move minus that value; the increment is then credited.
``ELAPSED``
    the time spent on the move itself.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum

from tcnpgn.core.enums import Color
from tcnpgn.errors import MalformedInput

DEFAULT_TICKS_PER_SECOND = 10


class TimestampMode(str, Enum):
    """How the per-ply clock values of a record are interpreted."""

    REMAINING = "remaining"
    ELAPSED = "elapsed"


@dataclass(frozen=True, slots=True)
class TimeControl:
    """Base time and per-move increment for one side, in ticks."""

    base: int
    increment: int = 0

    def __post_init__(self) -> None:
        if self.base < 0 or self.increment < 0:
            raise ValueError(f"Negative time control: {self.base}+{self.increment}")


@dataclass(frozen=True, slots=True)
class ClockParameters:
    """Time controls of both sides for one game."""

    white: TimeControl
    black: TimeControl

    @classmethod
    def symmetric(cls, base: int, increment: int = 0) -> ClockParameters:
        control = TimeControl(base, increment)
        return cls(control, control)

    def for_color(self, color: Color) -> TimeControl:
        return self.white if color == Color.WHITE else self.black


def parse_timestamps(raw: str | Sequence[int]) -> list[int]:
    """Comma-separated integer ticks (or an already-split sequence)."""
    if not isinstance(raw, str):
        values = list(raw)
        if not all(isinstance(v, int) and not isinstance(v, bool) for v in values):
            raise MalformedInput(f"Clock values must be integers: {values!r}")
        return values

    if not raw.strip():
        return []
    values = []
    for part in raw.split(","):
        try:
            values.append(int(part.strip()))
        except ValueError:
            raise MalformedInput(f"Invalid clock value {part!r}") from None
    return values


def decode_elapsed_ticks(
    values: Sequence[int],
    clock: ClockParameters,
    *,
    first_mover: Color = Color.WHITE,
    mode: TimestampMode = TimestampMode.REMAINING,
) -> list[int]:
    """Time spent on each ply, in ticks."""
    remaining = {color: clock.for_color(color).base for color in Color}
    elapsed: list[int] = []
    mover = first_mover

    for ply, value in enumerate(values, start=1):
        if value < 0:
            raise MalformedInput(f"ply {ply}: negative clock value {value}")
        increment = clock.for_color(mover).increment
        if mode == TimestampMode.REMAINING:
            spent = remaining[mover] - value
            if spent < 0:
                raise MalformedInput(
                    f"ply {ply}: clock rose from {remaining[mover]} to {value}"
                )
            remaining[mover] = value + increment
        else:
            spent = value
            remaining[mover] += increment - value
        elapsed.append(spent)
        mover = mover.opposite

    return elapsed


def decode_move_times(
    raw: str | Sequence[int],
    move_count: int,
    clock: ClockParameters,
    *,
    first_mover: Color = Color.WHITE,
    mode: TimestampMode = TimestampMode.REMAINING,
    ticks_per_second: int = DEFAULT_TICKS_PER_SECOND,
) -> list[timedelta]:
    """One elapsed duration per ply of a game with *move_count* plies."""
    values = parse_timestamps(raw)
    if len(values) != move_count:
        raise MalformedInput(
            f"Clock data has {len(values)} entries for {move_count} moves"
        )
    ticks = decode_elapsed_ticks(values, clock, first_mover=first_mover, mode=mode)
    return [ticks_to_timedelta(t, ticks_per_second) for t in ticks]


def encode_move_times(
    elapsed_ticks: Sequence[int],
    clock: ClockParameters,
    *,
    first_mover: Color = Color.WHITE,
) -> list[int]:
    """Remaining-clock values that decode back to *elapsed_ticks*."""
    remaining = {color: clock.for_color(color).base for color in Color}
    values: list[int] = []
    mover = first_mover
    for spent in elapsed_ticks:
        after = remaining[mover] - spent
        if after < 0:
            raise ValueError(f"{mover} flagged: {spent} ticks exceed the clock")
        values.append(after)
        remaining[mover] = after + clock.for_color(mover).increment
        mover = mover.opposite
    return values


def ticks_to_timedelta(ticks: int, ticks_per_second: int) -> timedelta:
    if ticks_per_second <= 0:
        raise ValueError(f"ticks_per_second must be positive, got {ticks_per_second}")
    return timedelta(microseconds=ticks * 1_000_000 // ticks_per_second)


def format_elapsed(value: timedelta) -> str:
    """``H:MM:SS`` with a tenths digit when needed, e.g. ``0:00:03.2``."""
    tenths = round(value.total_seconds() * 10)
    seconds, tenth = divmod(tenths, 10)
    minutes, sec = divmod(seconds, 60)
    hours, minute = divmod(minutes, 60)
    text = f"{hours}:{minute:02d}:{sec:02d}"
    if tenth:
        text += f".{tenth}"
    return text
