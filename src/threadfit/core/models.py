from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

OriginalFormat = Literal["single", "sequence"]


class UnitAnalysis(BaseModel):
    index: int
    length: int
    too_long: bool = False
    too_short: bool = False


class ValidationReport(BaseModel):
    """Per-unit length analysis plus readable issue lines."""

    analysis: list[UnitAnalysis] = []
    issues: list[str] = []

    @property
    def valid(self) -> bool:
        return not self.issues

    @property
    def has_long_units(self) -> bool:
        return any(a.too_long for a in self.analysis)

    @property
    def has_short_units(self) -> bool:
        return any(a.too_short for a in self.analysis)

    def to_payload(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "issues": list(self.issues),
            "analysis": [
                {
                    "index": a.index,
                    "length": a.length,
                    "tooLong": a.too_long,
                    "tooShort": a.too_short,
                }
                for a in self.analysis
            ],
        }


class OptimizationMetadata(BaseModel):
    original_format: OriginalFormat
    transformations: list[str] = []  # applied in order
    original_unit_count: int = 1
    unit_count: int = 1
    parse_strategy: str = "fallback"
    reason: str | None = None  # set when a sequence was collapsed
    validation: ValidationReport | None = None


class SingleResult(BaseModel):
    kind: Literal["single"] = "single"
    content: str
    metadata: OptimizationMetadata

    @property
    def is_multi_unit(self) -> bool:
        return False

    @property
    def units(self) -> list[str]:
        return [self.content]

    def to_payload(self) -> dict[str, Any]:
        return _payload(self.content, False, self.metadata)


class SequenceResult(BaseModel):
    kind: Literal["sequence"] = "sequence"
    units: list[str]
    metadata: OptimizationMetadata

    @property
    def is_multi_unit(self) -> bool:
        return True

    @property
    def content(self) -> list[str]:
        return list(self.units)

    def to_payload(self) -> dict[str, Any]:
        return _payload(list(self.units), True, self.metadata)


OptimizationResult = Annotated[
    Union[SingleResult, SequenceResult], Field(discriminator="kind")
]


def _payload(
    content: str | list[str], is_multi_unit: bool, metadata: OptimizationMetadata
) -> dict[str, Any]:
    """Render the wire shape handed to publishing collaborators (camelCase keys)."""
    meta: dict[str, Any] = {
        "originalFormat": metadata.original_format,
        "transformations": list(metadata.transformations),
        "unitCount": metadata.unit_count,
        "originalUnitCount": metadata.original_unit_count,
        "parseStrategy": metadata.parse_strategy,
    }
    if metadata.reason is not None:
        meta["reason"] = metadata.reason
    if metadata.validation is not None:
        meta["validation"] = metadata.validation.to_payload()
    return {"content": content, "isMultiUnit": is_multi_unit, "metadata": meta}
