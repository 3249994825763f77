"""
Breakdown Normalizer

Validates a raw model payload and flattens it into the fixed display order:
breakdown, pattern, hint x3, solution x3 (bruteForce, better, optimal).

Normalization is all-or-nothing. Either every step is produced or a single
NormalizeErr describes the first problem found.
"""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from analysis.models.breakdown import RawModelResponse, RawSolution
from analysis.models.results import NormalizeErr, NormalizeOk, NormalizeResult, ValidationErrorKind
from analysis.models.steps import SOLUTION_TIERS, BreakdownStep, HintStep, PatternStep, SolutionStep

logger = logging.getLogger(__name__)

# pydantic error type -> our kind; anything unlisted is a type mismatch
_KIND_BY_ERROR_TYPE = {
    "missing": ValidationErrorKind.missing_field,
    "too_short": ValidationErrorKind.insufficient_hints,
    "too_long": ValidationErrorKind.excess_hints,
}


def normalize(payload: Any) -> NormalizeResult:
    """Validate `payload` and return the ordered, immutable step tuple."""
    if not isinstance(payload, Mapping):
        logger.warning(f"Breakdown payload is not an object: {type(payload).__name__}")
        return NormalizeErr(
            kind=ValidationErrorKind.not_an_object,
            detail=f"expected an object, got {type(payload).__name__}",
        )

    try:
        raw = RawModelResponse.model_validate(payload)
    except ValidationError as e:
        return _to_error(e)

    return NormalizeOk(steps=build_steps(raw))


def build_steps(raw: RawModelResponse) -> tuple:
    steps = [
        BreakdownStep(text=raw.problem_breakdown),
        PatternStep(pattern_name=raw.pattern, difficulty=raw.difficulty),
    ]
    steps.extend(
        HintStep(number=i, text=hint) for i, hint in enumerate(raw.hints, start=1)
    )
    tiers = {
        "bruteForce": raw.solutions.brute_force,
        "better": raw.solutions.better,
        "optimal": raw.solutions.optimal,
    }
    steps.extend(_solution_step(tier, tiers[tier]) for tier in SOLUTION_TIERS)
    return tuple(steps)


def _solution_step(tier: str, solution: RawSolution) -> SolutionStep:
    return SolutionStep(
        tier=tier,
        title=solution.title,
        approach=solution.approach,
        intuition=solution.intuition,
        time=solution.complexity_analysis.time,
        space=solution.complexity_analysis.space,
        graph_note=solution.complexity_analysis.graph,
        code=solution.code,
    )


def _to_error(error: ValidationError) -> NormalizeErr:
    first = error.errors()[0]
    kind = _KIND_BY_ERROR_TYPE.get(first["type"], ValidationErrorKind.wrong_type)
    location = ".".join(str(part) for part in first["loc"])

    logger.warning(
        f"Breakdown payload rejected ({kind.value}) at '{location}': "
        f"{error.error_count()} error(s), first: {first['msg']}"
    )
    return NormalizeErr(kind=kind, location=location, detail=first["msg"])
