"""
Boundary detection and splitting of over-length units.
"""

import re
from typing import List, Optional, Sequence

from ..core.config import SegmenterConfig
from ..core.logging import log

# Punctuation that closes a sentence or clause, followed by a space.
# Patterns are tried in order; the first one with a usable match wins.
SENTENCE_END = re.compile(r"[.!?](?= )")
CLAUSE_END = re.compile(r",(?= )")


def _last_match_end(pattern: re.Pattern, window: str) -> Optional[int]:
    last = None
    for match in pattern.finditer(window):
        last = match.end()
    return last


def find_cut(text: str, max_length: int, floor_ratio: float = 0.6) -> int:
    """Return the index to cut ``text`` at so that ``text[:cut]`` fits ``max_length``.

    Sentence ends are preferred, then commas, then any space. A boundary is
    only used if it sits at or after ``floor_ratio * max_length``; otherwise
    the cut falls exactly at ``max_length``.
    """
    floor = max_length * floor_ratio
    # One extra character so a boundary space sitting right at the cap is seen
    window = text[: max_length + 1]

    for pattern in (SENTENCE_END, CLAUSE_END):
        end = _last_match_end(pattern, window)
        # end is one past the punctuation mark, so the piece keeps it
        if end is not None and end - 1 >= floor:
            return end

    space = window.rfind(" ")
    if space >= floor:
        return space

    return max_length


def split_unit(text: str, max_length: int, floor_ratio: float = 0.6) -> List[str]:
    """Split one unit into pieces of at most ``max_length`` characters.

    Whitespace at each cut is dropped, so joining the pieces with single
    spaces gives back the original text.
    """
    if len(text) <= max_length:
        return [text]

    pieces: List[str] = []
    remaining = text.strip()

    while len(remaining) > max_length:
        cut = find_cut(remaining, max_length, floor_ratio)
        pieces.append(remaining[:cut].rstrip())
        remaining = remaining[cut:].lstrip()

    if remaining:
        pieces.append(remaining)

    return pieces


def split_long_units(units: Sequence[str], config: SegmenterConfig) -> List[str]:
    """Split every unit over the cap, keeping sequence order."""
    result: List[str] = []

    for index, unit in enumerate(units):
        if len(unit) <= config.max_unit_length:
            result.append(unit)
            continue

        parts = split_unit(unit, config.max_unit_length, config.boundary_floor_ratio)
        log.debug(
            "segment.split",
            index=index,
            length=len(unit),
            pieces=len(parts),
        )
        result.extend(parts)

    return result
