"""Runtime settings, read from the environment (and an optional ``.env``)."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from tcnpgn.codec.clock import DEFAULT_TICKS_PER_SECOND, TimestampMode
from tcnpgn.core.notation import DEFAULT_LINE_WIDTH

ENV_PREFIX = "TCNPGN_"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _int_setting(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True, slots=True)
class ExportSettings:
    """Knobs of the export pipeline."""

    line_width: int = DEFAULT_LINE_WIDTH
    timestamp_mode: TimestampMode = TimestampMode.REMAINING
    ticks_per_second: int = DEFAULT_TICKS_PER_SECOND
    log_level: str = "WARNING"
    source_dir: Path | None = None

    def __post_init__(self) -> None:
        if self.ticks_per_second <= 0:
            raise ValueError(
                f"ticks_per_second must be positive, got {self.ticks_per_second}"
            )
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log level {self.log_level!r}")

    @classmethod
    def from_env(
        cls, env: Mapping[str, str] | None = None, *, dotenv: bool = True
    ) -> ExportSettings:
        """Build settings from ``TCNPGN_*`` variables.

        With *env* omitted the process environment is used, after loading a
        ``.env`` file from the working directory when *dotenv* is true.
        """
        if env is None:
            if dotenv:
                load_dotenv(find_dotenv(usecwd=True))
            env = os.environ

        mode_raw = env.get(ENV_PREFIX + "TIMESTAMP_MODE", TimestampMode.REMAINING.value)
        try:
            mode = TimestampMode(mode_raw.strip().lower())
        except ValueError:
            raise ValueError(
                f"{ENV_PREFIX}TIMESTAMP_MODE must be one of "
                f"{[m.value for m in TimestampMode]}, got {mode_raw!r}"
            ) from None

        source_dir = env.get(ENV_PREFIX + "SOURCE_DIR")
        return cls(
            line_width=_int_setting(env, "LINE_WIDTH", DEFAULT_LINE_WIDTH),
            timestamp_mode=mode,
            ticks_per_second=_int_setting(
                env, "TICKS_PER_SECOND", DEFAULT_TICKS_PER_SECOND
            ),
            log_level=env.get(ENV_PREFIX + "LOG_LEVEL", "WARNING").strip() or "WARNING",
            source_dir=Path(source_dir) if source_dir else None,
        )


def configure_logging(level: str) -> None:
    """Install the root handler used by the command line."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
