"""Reveal state: the step list of one submission and how far it has been shown."""

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, model_validator

from analysis.models.steps import Step


class RevealPhase(str, Enum):
    empty = "empty"
    revealing = "revealing"
    fully_revealed = "fully_revealed"


class RevealState(BaseModel):
    """Immutable snapshot. A new submission replaces it; it is never patched in place."""

    model_config = ConfigDict(frozen=True)

    steps: tuple[Step, ...] = ()
    revealed_index: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _index_within_steps(self) -> "RevealState":
        if self.steps and self.revealed_index > len(self.steps) - 1:
            raise ValueError(
                f"revealed_index {self.revealed_index} exceeds last step index {len(self.steps) - 1}"
            )
        if not self.steps and self.revealed_index != 0:
            raise ValueError("revealed_index must be 0 when there are no steps")
        return self

    @property
    def last_index(self) -> int:
        return max(len(self.steps) - 1, 0)

    @property
    def is_fully_revealed(self) -> bool:
        return self.revealed_index >= self.last_index

    def visible_steps(self) -> tuple:
        if not self.steps:
            return ()
        return self.steps[: self.revealed_index + 1]
