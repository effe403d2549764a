"""Where game records come from.

The exporter only sees the :class:`GameSource` interface; fetching records
from a remote service is the job of whoever implements it.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from tcnpgn.errors import NotFound, SourceUnavailable
from tcnpgn.export.record import GameRecord

_LOGGER = logging.getLogger(__name__)


class GameSource(ABC):
    """Looks up a game record by identifier."""

    @abstractmethod
    def get(self, game_id: str) -> GameRecord:
        """Return the record for *game_id*.

        Raises:
            NotFound: no record exists for *game_id*.
            SourceUnavailable: the backing store could not be read.
        """


class InMemoryGameSource(GameSource):
    """Records (or raw payloads) held in a dictionary."""

    __slots__ = ("_records",)

    def __init__(
        self, records: Mapping[str, GameRecord | Mapping[str, Any]] | None = None
    ) -> None:
        self._records: dict[str, GameRecord | Mapping[str, Any]] = dict(records or {})

    def add(self, record: GameRecord) -> None:
        self._records[record.game_id] = record

    def get(self, game_id: str) -> GameRecord:
        try:
            entry = self._records[game_id]
        except KeyError:
            raise NotFound(game_id) from None
        if isinstance(entry, GameRecord):
            return entry
        return GameRecord.from_payload(entry, game_id=game_id)


class JsonFileGameSource(GameSource):
    """Reads ``<game_id>.json`` callback payloads from a directory."""

    __slots__ = ("_directory",)

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def get(self, game_id: str) -> GameRecord:
        if not game_id or Path(game_id).name != game_id:
            raise NotFound(game_id)
        path = self._directory / f"{game_id}.json"
        if not path.is_file():
            raise NotFound(game_id)

        _LOGGER.debug("Loading game %s from %s", game_id, path)
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise SourceUnavailable(f"Cannot read {path}: {exc}") from exc
        if not isinstance(payload, Mapping):
            raise SourceUnavailable(f"{path} does not hold a JSON object")
        return GameRecord.from_payload(payload, game_id=game_id)
