"""Export layer: replay a game record and assemble its PGN document."""

from tcnpgn.export.assembler import assemble_document
from tcnpgn.export.engine import GeneratedMove, NotationEngine, ReplayResult
from tcnpgn.export.record import CANONICAL_HEADER_ORDER, GameRecord, canonical_headers
from tcnpgn.export.service import PgnExporter
from tcnpgn.export.source import GameSource, InMemoryGameSource, JsonFileGameSource

__all__ = [
    "assemble_document",
    "GeneratedMove",
    "NotationEngine",
    "ReplayResult",
    "CANONICAL_HEADER_ORDER",
    "GameRecord",
    "canonical_headers",
    "PgnExporter",
    "GameSource",
    "InMemoryGameSource",
    "JsonFileGameSource",
]
