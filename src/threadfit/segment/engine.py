"""
Orchestration of recovery, collapse, splitting and merging into one call.
"""

from __future__ import annotations

from typing import List, Optional

from ..core.config import SegmenterConfig
from ..core.logging import log
from ..core.models import (
    OptimizationMetadata,
    OptimizationResult,
    SequenceResult,
    SingleResult,
)
from .boundaries import split_long_units, split_unit
from .collapse import decide_collapse
from .merge import merge_short_units
from .recovery import parse_units
from .validate import has_short_units, validate_lengths

# Transformation tags recorded in result metadata, in the order applied
SPLIT_LONG_UNIT = "split_long_unit"
SPLIT_LONG_UNITS = "split_long_units"
MERGED_SHORT_UNITS = "merged_short_units"
COMPRESSED_TO_SINGLE = "compressed_to_single"


def _single_path(
    text: str, config: SegmenterConfig, original_format: str, strategy: str
) -> OptimizationResult:
    """Length check and split for text that arrived as one unit.

    Text within the cap is returned verbatim. Text over the cap is trimmed
    first and split only if it is still too long.
    """
    content = text
    if len(content) > config.max_unit_length:
        content = text.strip()

    if len(content) <= config.max_unit_length:
        return SingleResult(
            content=content,
            metadata=OptimizationMetadata(
                original_format=original_format,
                parse_strategy=strategy,
            ),
        )

    pieces = split_unit(content, config.max_unit_length, config.boundary_floor_ratio)
    log.debug("segment.split", index=0, length=len(content), pieces=len(pieces))
    return SequenceResult(
        units=pieces,
        metadata=OptimizationMetadata(
            original_format=original_format,
            transformations=[SPLIT_LONG_UNIT],
            original_unit_count=1,
            unit_count=len(pieces),
            parse_strategy=strategy,
            validation=validate_lengths(pieces, config),
        ),
    )


def optimize(raw_text: str, config: Optional[SegmenterConfig] = None) -> OptimizationResult:
    """Turn generator output into a single unit or an ordered sequence of units.

    Stages: config check, recovery parse, collapse decision, length
    validation, split, merge, final validation. Each stage runs once; the
    final validation is recorded in the metadata but not acted on.

    Args:
        raw_text: Text as returned by the generator, in any shape.
        config: Length policy; defaults to a 100/280 character policy.

    Returns:
        ``SingleResult`` or ``SequenceResult``. Every unit fits
        ``config.max_unit_length``.

    Raises:
        ConfigurationError: If ``config`` bounds are inconsistent.
        TypeError: If ``raw_text`` is not a string or ``config`` has the
            wrong type.
    """
    if config is None:
        config = SegmenterConfig()
    elif not isinstance(config, SegmenterConfig):
        raise TypeError(f"config must be SegmenterConfig, got {type(config).__name__}")
    config.ensure_valid()

    if not isinstance(raw_text, str):
        raise TypeError(f"raw_text must be str, got {type(raw_text).__name__}")

    outcome = parse_units(raw_text)

    if not outcome.ok:
        return _finish(_single_path(outcome.units[0], config, "single", outcome.strategy))
    if len(outcome.units) == 1:
        return _finish(_single_path(outcome.units[0], config, "sequence", outcome.strategy))

    units: List[str] = outcome.units
    original_count = len(units)

    if config.auto_collapse:
        decision = decide_collapse(units, config)
        log.debug("segment.collapse", collapse=decision.collapse, total=decision.total_length)
        if decision.collapse and decision.combined is not None:
            return _finish(
                SingleResult(
                    content=decision.combined,
                    metadata=OptimizationMetadata(
                        original_format="sequence",
                        transformations=[COMPRESSED_TO_SINGLE],
                        original_unit_count=original_count,
                        unit_count=1,
                        parse_strategy=outcome.strategy,
                        reason=decision.reason,
                    ),
                )
            )

    transformations: List[str] = []
    report = validate_lengths(units, config)

    if report.has_long_units:
        units = split_long_units(units, config)
        transformations.append(SPLIT_LONG_UNITS)

    if has_short_units(units, config):
        merged = merge_short_units(units, config)
        # Short units the cap would not let merge are left as they are
        if merged != units:
            units = merged
            transformations.append(MERGED_SHORT_UNITS)

    return _finish(
        SequenceResult(
            units=units,
            metadata=OptimizationMetadata(
                original_format="sequence",
                transformations=transformations,
                original_unit_count=original_count,
                unit_count=len(units),
                parse_strategy=outcome.strategy,
                validation=validate_lengths(units, config),
            ),
        )
    )


def _finish(result: OptimizationResult) -> OptimizationResult:
    meta = result.metadata
    log.info(
        "segment.optimize.complete",
        kind=result.kind,
        original_format=meta.original_format,
        strategy=meta.parse_strategy,
        units=meta.unit_count,
        transformations=meta.transformations,
    )
    return result
