"""
Length validation of a unit sequence against a segmenter config.
"""

from typing import List, Sequence

from ..core.config import SegmenterConfig
from ..core.models import UnitAnalysis, ValidationReport


def analyze_lengths(units: Sequence[str], config: SegmenterConfig) -> List[UnitAnalysis]:
    """Classify each unit as too long and/or too short.

    A short final unit is acceptable (it usually closes the sequence), so
    ``too_short`` is never set on the last unit.
    """
    last = len(units) - 1
    return [
        UnitAnalysis(
            index=i,
            length=len(unit),
            too_long=len(unit) > config.max_unit_length,
            too_short=len(unit) < config.min_unit_length and i < last,
        )
        for i, unit in enumerate(units)
    ]


def validate_lengths(units: Sequence[str], config: SegmenterConfig) -> ValidationReport:
    """Build a report with the per-unit analysis and one issue line per violation."""
    analysis = analyze_lengths(units, config)
    issues: List[str] = []

    for a in analysis:
        if a.too_long:
            issues.append(
                f"Unit {a.index + 1} is {a.length} chars (>{config.max_unit_length})"
            )
        if a.too_short:
            issues.append(
                f"Unit {a.index + 1} is {a.length} chars (<{config.min_unit_length})"
            )

    return ValidationReport(analysis=analysis, issues=issues)


def has_long_units(units: Sequence[str], config: SegmenterConfig) -> bool:
    return any(a.too_long for a in analyze_lengths(units, config))


def has_short_units(units: Sequence[str], config: SegmenterConfig) -> bool:
    return any(a.too_short for a in analyze_lengths(units, config))
