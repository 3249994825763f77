"""
Step Sequencer

Reveal state machine for one analysis session:

    empty --reset(steps)--> revealing --advance()...--> fully_revealed

`reset(steps)` is valid from any state and always returns to index 0; an
empty step list lands directly in fully_revealed. Every transition is caller-triggered; there are no timers. `advance()`
moves exactly one step and is a no-op once everything is shown.
"""

import logging
from typing import Iterable, Optional

from analysis.models.reveal import RevealPhase, RevealState

logger = logging.getLogger(__name__)


class StepSequencer:
    """Owns the RevealState of a session and replaces it on each transition."""

    def __init__(self):
        self._state: Optional[RevealState] = None

    @property
    def state(self) -> RevealState:
        return self._state if self._state is not None else RevealState()

    @property
    def phase(self) -> RevealPhase:
        if self._state is None:
            return RevealPhase.empty
        if self._state.is_fully_revealed:
            return RevealPhase.fully_revealed
        return RevealPhase.revealing

    @property
    def revealed_index(self) -> int:
        return self.state.revealed_index

    @property
    def total_steps(self) -> int:
        return len(self.state.steps)

    @property
    def has_next_step(self) -> bool:
        return self.phase == RevealPhase.revealing

    def reset(self, steps: Iterable) -> None:
        """Replace the state with `steps`, showing only the first one."""
        self._state = RevealState(steps=tuple(steps), revealed_index=0)
        logger.debug(f"Sequencer reset with {len(self._state.steps)} steps")

    def advance(self) -> bool:
        """Reveal one more step. Returns False (state unchanged) when nothing is left."""
        if not self.has_next_step:
            return False
        self._state = self._state.model_copy(
            update={"revealed_index": self._state.revealed_index + 1}
        )
        return True

    def visible_steps(self) -> tuple:
        return self.state.visible_steps()
