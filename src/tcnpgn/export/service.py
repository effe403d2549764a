"""Record-to-PGN export service."""

from __future__ import annotations

import logging
from dataclasses import replace

from tcnpgn.codec.clock import decode_move_times
from tcnpgn.codec.tcn import decode_move_list
from tcnpgn.config import ExportSettings
from tcnpgn.core.enums import GameResult
from tcnpgn.core.notation import pgn_result_token
from tcnpgn.export.assembler import assemble_document, result_token
from tcnpgn.export.engine import NotationEngine, ReplayResult
from tcnpgn.export.record import GameRecord, canonical_headers
from tcnpgn.export.source import GameSource

_LOGGER = logging.getLogger(__name__)


class PgnExporter:
    """Fetches a record from a :class:`GameSource` and renders its PGN.

    Stateless between calls: every export builds its own engine, so one
    exporter may serve concurrent requests.
    """

    __slots__ = ("_source", "_settings")

    def __init__(
        self, source: GameSource, settings: ExportSettings | None = None
    ) -> None:
        self._source = source
        self._settings = settings or ExportSettings()

    @property
    def settings(self) -> ExportSettings:
        return self._settings

    def export(self, game_id: str, *, include_timestamps: bool = False) -> str:
        """PGN text for *game_id*; errors from the source propagate as-is."""
        record = self._source.get(game_id)
        return self.render(record, include_timestamps=include_timestamps)

    def render(self, record: GameRecord, *, include_timestamps: bool = False) -> str:
        """PGN text for an already fetched *record*."""
        coordinates = decode_move_list(record.move_list)
        replay = NotationEngine(record.start_fen).replay(coordinates)

        if include_timestamps:
            self._attach_times(record, replay)

        headers = self._resolve_result(record, replay.result)
        return assemble_document(
            headers,
            replay.moves,
            first_fullmove=replay.first_fullmove,
            first_color=replay.first_color,
            line_width=self._settings.line_width,
        )

    def _attach_times(self, record: GameRecord, replay: ReplayResult) -> None:
        if record.move_timestamps is None:
            _LOGGER.warning(
                "Game %s has no clock data; exporting without times", record.game_id
            )
            return

        times = decode_move_times(
            record.move_timestamps,
            len(replay.moves),
            record.clock,
            first_mover=replay.first_color,
            mode=self._settings.timestamp_mode,
            ticks_per_second=self._settings.ticks_per_second,
        )
        replay.moves = [
            replace(move, elapsed=elapsed)
            for move, elapsed in zip(replay.moves, times)
        ]

    def _resolve_result(
        self, record: GameRecord, inferred: GameResult
    ) -> dict[str, str]:
        """Headers with the position's result written in, when it has one."""
        headers = dict(record.headers)
        if inferred == GameResult.IN_PROGRESS:
            return headers

        token = pgn_result_token(inferred)
        supplied = headers.get("Result")
        if supplied is not None and result_token(headers) != token:
            _LOGGER.warning(
                "Game %s: header result %s contradicts final position (%s)",
                record.game_id,
                supplied,
                token,
            )
        headers["Result"] = token
        return canonical_headers(headers)
