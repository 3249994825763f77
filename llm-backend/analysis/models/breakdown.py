"""
Raw Breakdown Schema

Expected shape of the JSON object the model is asked to emit. Keys are
camelCase on the wire. Strings are strict so that a number or null where
text is expected is reported instead of coerced.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator
from pydantic_core import PydanticCustomError

HINT_COUNT = 3


class _RawModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class RawComplexityAnalysis(_RawModel):
    time: StrictStr
    space: StrictStr
    graph: StrictStr


class RawSolution(_RawModel):
    title: StrictStr
    approach: StrictStr
    intuition: StrictStr
    complexity_analysis: RawComplexityAnalysis = Field(alias="complexityAnalysis")
    code: StrictStr


class RawSolutions(_RawModel):
    brute_force: RawSolution = Field(alias="bruteForce")
    better: RawSolution
    optimal: RawSolution


class RawModelResponse(_RawModel):
    problem_breakdown: StrictStr = Field(alias="problemBreakdown")
    pattern: StrictStr
    # Not constrained to Difficulty: unknown ratings are shown verbatim.
    difficulty: StrictStr
    hints: list[StrictStr]
    solutions: RawSolutions

    @field_validator("hints", mode="before")
    @classmethod
    def _exactly_hint_count(cls, value: Any) -> Any:
        """Count is checked before item types, so a short list is always reported as short."""
        if isinstance(value, (list, tuple)):
            if len(value) < HINT_COUNT:
                raise PydanticCustomError(
                    "too_short",
                    "expected {expected} hints, got {actual}",
                    {"expected": HINT_COUNT, "actual": len(value)},
                )
            if len(value) > HINT_COUNT:
                raise PydanticCustomError(
                    "too_long",
                    "expected {expected} hints, got {actual}",
                    {"expected": HINT_COUNT, "actual": len(value)},
                )
        return value
