"""Fixed-width splitting of packed move strings."""

from __future__ import annotations

from tcnpgn.errors import MalformedInput


def chunk_string(text: str, width: int) -> list[str]:
    """Split *text* into consecutive *width*-sized pieces covering it exactly."""
    if width <= 0:
        raise ValueError(f"Chunk width must be positive, got {width}")
    if len(text) % width:
        raise MalformedInput(
            f"Length {len(text)} is not a multiple of chunk width {width}"
        )
    return [text[i : i + width] for i in range(0, len(text), width)]
