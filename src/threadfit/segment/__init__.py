"""
Segmentation and repair of generated text.

This package turns raw generator output into deliverable units with:
- Layered recovery parsing (strict JSON, fenced/embedded, heuristic, fallback)
- Boundary-aware splitting under a hard per-unit cap
- Single-pass merging of short units
- Collapse of thin sequences into one unit
"""

from ..core.errors import ConfigurationError
from ..core.config import SegmenterConfig
from ..core.models import (
    OptimizationMetadata,
    OptimizationResult,
    SequenceResult,
    SingleResult,
    UnitAnalysis,
    ValidationReport,
)
from .boundaries import find_cut, split_long_units, split_unit
from .collapse import CollapseDecision, decide_collapse
from .engine import (
    COMPRESSED_TO_SINGLE,
    MERGED_SHORT_UNITS,
    SPLIT_LONG_UNIT,
    SPLIT_LONG_UNITS,
    optimize,
)
from .interfaces import TextGenerator, UnitPublisher, deliver, generate_and_optimize
from .merge import merge_short_units
from .recovery import RECOVERY_STRATEGIES, ParseOutcome, parse_units
from .validate import analyze_lengths, has_long_units, has_short_units, validate_lengths

__all__ = [
    "COMPRESSED_TO_SINGLE",
    "MERGED_SHORT_UNITS",
    "RECOVERY_STRATEGIES",
    "SPLIT_LONG_UNIT",
    "SPLIT_LONG_UNITS",
    "CollapseDecision",
    "ConfigurationError",
    "OptimizationMetadata",
    "OptimizationResult",
    "ParseOutcome",
    "SegmenterConfig",
    "SequenceResult",
    "SingleResult",
    "TextGenerator",
    "UnitAnalysis",
    "UnitPublisher",
    "ValidationReport",
    "analyze_lengths",
    "decide_collapse",
    "deliver",
    "find_cut",
    "generate_and_optimize",
    "has_long_units",
    "has_short_units",
    "merge_short_units",
    "optimize",
    "parse_units",
    "split_long_units",
    "split_unit",
    "validate_lengths",
]
