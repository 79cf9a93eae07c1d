"""
Single-pass merging of short units into their successors.
"""

from typing import List, Sequence

from ..core.config import SegmenterConfig
from ..core.logging import log


def merge_short_units(units: Sequence[str], config: SegmenterConfig) -> List[str]:
    """Merge each short, non-final unit with the unit that follows it.

    One left-to-right pass: a merged pair is emitted and scanning resumes
    after it, so a short unit left behind by a previous merge is not
    revisited. A merge that would exceed ``max_unit_length`` is skipped.
    """
    if len(units) < 2:
        return list(units)

    merged: List[str] = []
    i = 0

    while i < len(units):
        current = units[i]

        if len(current) < config.min_unit_length and i < len(units) - 1:
            combined = f"{current} {units[i + 1]}"
            if len(combined) <= config.max_unit_length:
                log.debug("segment.merge", index=i, length=len(combined))
                merged.append(combined)
                i += 2
                continue

        merged.append(current)
        i += 1

    return merged
