"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import os
from collections.abc import Iterator
from typing import Any

import pytest

from tcnpgn.codec.clock import ClockParameters, encode_move_times
from tcnpgn.codec.tcn import encode_san_game
from tcnpgn.core.notation import STARTING_FEN

# Carlsen - artooon, chess.com Live Chess, 2024.07.08.
SAMPLE_SANS: tuple[str, ...] = tuple(
    "e4 e5 Nf3 Nc6 Bc4 Nf6 d3 Bc5 Nc3 h6 Be3 Bxe3 fxe3 d6 O-O Be6 Nd5 Bxd5 "
    "exd5 Ne7 e4 O-O Nh4 Ng6 Nf5 Ne7 Nxh6+ Kh7 Rxf6 gxf6 Qh5 Kg7 Rf1 Qe8 "
    "Nf5+ Nxf5 Qg4+ Kh7 Rxf5".split()
)
SAMPLE_MOVETEXT = (
    "1. e4 e5 2. Nf3 Nc6 3. Bc4 Nf6 4. d3 Bc5 5. Nc3 h6 6. Be3 Bxe3 "
    "7. fxe3 d6 8. O-O Be6 9. Nd5 Bxd5 10. exd5 Ne7 11. e4 O-O 12. Nh4 Ng6 "
    "13. Nf5 Ne7 14. Nxh6+ Kh7 15. Rxf6 gxf6 16. Qh5 Kg7 17. Rf1 Qe8 "
    "18. Nf5+ Nxf5 19. Qg4+ Kh7 20. Rxf5 1-0"
)
SAMPLE_HEADERS: dict[str, Any] = {
    "Event": "Live Chess",
    "Site": "Chess.com",
    "Date": "2024.07.08",
    "White": "MagnusCarlsen",
    "Black": "artooon",
    "Result": "1-0",
    "ECO": "C50",
    "WhiteElo": 3156,
    "BlackElo": 3113,
    "TimeControl": "180",
    "EndTime": "8:31:13 PDT",
    "Termination": "MagnusCarlsen won by resignation",
    "SetUp": "1",
    "FEN": STARTING_FEN,
}
SAMPLE_BASE_TICKS = 1800
# Ticks spent on each ply.
SAMPLE_ELAPSED: tuple[int, ...] = tuple(10 + (ply % 5) * 3 for ply in range(len(SAMPLE_SANS)))


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep ``TCNPGN_*`` variables of the developer's shell out of tests."""
    for key in list(os.environ):
        if key.startswith("TCNPGN_"):
            monkeypatch.delenv(key)
    yield


@pytest.fixture
def sample_payload() -> dict[str, Any]:
    """A chess.com style callback payload for a decisive 39-ply game."""
    timestamps = encode_move_times(
        SAMPLE_ELAPSED, ClockParameters.symmetric(SAMPLE_BASE_TICKS)
    )
    return {
        "game": {
            "id": 11432789305,
            "moveList": encode_san_game(SAMPLE_SANS),
            "pgnHeaders": dict(SAMPLE_HEADERS),
            "moveTimestamps": ",".join(str(v) for v in timestamps),
            "baseTime1": SAMPLE_BASE_TICKS,
            "timeIncrement1": 0,
        }
    }


@pytest.fixture
def sample_sans() -> list[str]:
    return list(SAMPLE_SANS)


@pytest.fixture
def sample_movetext() -> str:
    """Single-line movetext the sample payload must render to."""
    return SAMPLE_MOVETEXT


@pytest.fixture
def sample_elapsed() -> list[int]:
    return list(SAMPLE_ELAPSED)
