"""Analysis models."""
from analysis.models.steps import (
    Step, BreakdownStep, PatternStep, HintStep, SolutionStep, Difficulty, SOLUTION_TIERS,
)
from analysis.models.breakdown import RawModelResponse, RawSolution, RawSolutions, RawComplexityAnalysis, HINT_COUNT
from analysis.models.results import (
    GatewayErrorKind, ValidationErrorKind,
    GatewayOk, GatewayErr, GatewayResult,
    NormalizeOk, NormalizeErr, NormalizeResult,
)
