"""
Contracts for the collaborators around the segmenter.

Generation and publishing live outside this package. The protocols below
describe what the segmenter expects from them; ``deliver`` routes a result
to a publisher by matching on its variant.
"""

from typing import Any, List, Optional, Protocol

from ..core.config import SegmenterConfig
from ..core.models import OptimizationResult, SequenceResult, SingleResult
from .engine import optimize


class TextGenerator(Protocol):
    """Produces raw text from a prompt (a language model client, usually)."""

    def generate(self, prompt: str) -> str: ...


class UnitPublisher(Protocol):
    """
    Accepts deliverable units.

    ``publish_chain`` must post units in order, each one following the
    previous as a dependent reply. Its per-unit cap is assumed to equal the
    ``max_unit_length`` the result was produced with.
    """

    def publish_single(self, content: str) -> Any: ...

    def publish_chain(self, units: List[str]) -> Any: ...


def deliver(result: OptimizationResult, publisher: UnitPublisher) -> Any:
    """Hand ``result`` to ``publisher`` according to its variant."""
    if isinstance(result, SingleResult):
        return publisher.publish_single(result.content)
    if isinstance(result, SequenceResult):
        return publisher.publish_chain(list(result.units))
    raise TypeError(f"Unknown result type: {type(result).__name__}")


def generate_and_optimize(
    generator: TextGenerator,
    prompt: str,
    config: Optional[SegmenterConfig] = None,
) -> OptimizationResult:
    """Generate text for ``prompt`` and segment it in one step."""
    return optimize(generator.generate(prompt), config)
