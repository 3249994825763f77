"""
Step Models

A Step is one unit of the progressively revealed breakdown. The union is
discriminated on `type` so a serialized step list round-trips through the
API without losing which variant each entry is.
"""

from enum import Enum
from typing import Annotated, Literal, Union
from pydantic import BaseModel, ConfigDict, Field


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


SolutionTier = Literal["bruteForce", "better", "optimal"]

# Display order of the solution tiers.
SOLUTION_TIERS: tuple[SolutionTier, ...] = ("bruteForce", "better", "optimal")


class _FrozenStep(BaseModel):
    model_config = ConfigDict(frozen=True)


class BreakdownStep(_FrozenStep):
    """Restatement of the problem."""

    type: Literal["breakdown"] = "breakdown"
    text: str = Field(description="Problem understanding in the model's words")

    def render_markdown(self) -> str:
        return (
            "Hey! Let's break this down together\n\n"
            f"**Problem Understanding:** {self.text}"
        )


class PatternStep(_FrozenStep):
    """Pattern classification and difficulty rating."""

    type: Literal["pattern"] = "pattern"
    pattern_name: str
    difficulty: str = Field(description="Easy/Medium/Hard, or the model's value verbatim")

    @property
    def is_known_difficulty(self) -> bool:
        return self.difficulty in {d.value for d in Difficulty}

    def render_markdown(self) -> str:
        return (
            f"**Pattern Recognition:** This looks like a classic **{self.pattern_name}** problem.\n"
            f"**Difficulty Analysis:** I'd rate this as **{self.difficulty}**."
        )


class HintStep(_FrozenStep):
    """One hint, numbered from 1."""

    type: Literal["hint"] = "hint"
    number: int = Field(ge=1)
    text: str

    def render_markdown(self) -> str:
        if self.number == 1:
            return f"**Step-by-Step Hints:**\n\n{self.text}"
        return self.text


class SolutionStep(_FrozenStep):
    """One solution tier with its complexity analysis."""

    type: Literal["solution"] = "solution"
    tier: SolutionTier
    title: str
    approach: str
    intuition: str
    time: str
    space: str
    graph_note: str
    code: str

    def render_markdown(self) -> str:
        return "\n".join([
            f"### {self.title}",
            "",
            f"**Approach:** {self.approach}",
            "",
            f"**Intuition:** {self.intuition}",
            "",
            "**Complexity Analysis**",
            f"- **Time Complexity:** {self.time}",
            f"- **Space Complexity:** {self.space}",
            "",
            f"_{self.graph_note}_",
            "",
            "```",
            self.code.rstrip("\n"),
            "```",
        ])


Step = Annotated[
    Union[BreakdownStep, PatternStep, HintStep, SolutionStep],
    Field(discriminator="type"),
]
