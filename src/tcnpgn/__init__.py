"""Turn compact TCN game records into PGN documents.

Quick start::

    from tcnpgn import GameRecord, InMemoryGameSource, PgnExporter

    source = InMemoryGameSource({"1": {"moveList": "mC0Kgv"}})
    print(PgnExporter(source).export("1"))
"""

from tcnpgn.errors import (
    AmbiguousNotation,
    IllegalMove,
    MalformedInput,
    NotFound,
    SourceUnavailable,
    TcnPgnError,
    UnknownSymbol,
)
from tcnpgn.config import ExportSettings
from tcnpgn.export import (
    GameRecord,
    GameSource,
    InMemoryGameSource,
    JsonFileGameSource,
    NotationEngine,
    PgnExporter,
    assemble_document,
)

__version__ = "0.1.0"

__all__ = [
    "AmbiguousNotation",
    "IllegalMove",
    "MalformedInput",
    "NotFound",
    "SourceUnavailable",
    "TcnPgnError",
    "UnknownSymbol",
    "ExportSettings",
    "GameRecord",
    "GameSource",
    "InMemoryGameSource",
    "JsonFileGameSource",
    "NotationEngine",
    "PgnExporter",
    "assemble_document",
]
