"""
Decide whether a nominal multi-unit sequence should be delivered as one unit.

Generators often emit an array even for thin content. Fragmenting text that
fits comfortably in a single unit wastes sequential delivery, which is kept
for content that benefits from paced, multi-part reading.
"""

from typing import NamedTuple, Optional, Sequence

from ..core.config import SegmenterConfig


class CollapseDecision(NamedTuple):
    collapse: bool
    reason: str
    total_length: int
    combined: Optional[str] = None


def decide_collapse(units: Sequence[str], config: SegmenterConfig) -> CollapseDecision:
    """Return whether ``units`` should be joined into a single unit.

    Both thresholds are capped at ``max_unit_length`` so a collapsed unit
    always fits the cap.
    """
    combined = " ".join(units)
    total = len(combined)
    count = len(units)

    if count < 2:
        return CollapseDecision(False, "Already a single unit", total)

    low_density = min(config.collapse_threshold, config.max_unit_length)
    pair_limit = min(config.pair_collapse_threshold, config.max_unit_length)

    if total <= low_density:
        return CollapseDecision(
            True,
            f"Total content is {total} chars - fits in a single unit",
            total,
            combined,
        )

    if count == 2 and total <= pair_limit:
        return CollapseDecision(
            True,
            f"2 units with low density ({total} chars) - better as a single unit",
            total,
            combined,
        )

    return CollapseDecision(
        False,
        f"{count} units, {total} total chars - sequence is appropriate",
        total,
    )
