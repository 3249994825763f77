"""
Submission Controller

Orchestrates one problem submission end-to-end:
validate input -> gateway -> normalizer -> sequencer reset.

Single-flight: while a submission is loading, further submissions are
ignored (not queued, not cancelling the one in flight). The check and the
`loading = True` assignment happen without an await in between, so on one
event loop two coroutines cannot both pass the guard.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional, Protocol

from analysis.models.results import GatewayResult, NormalizeResult
from analysis.prompts.breakdown_prompts import build_breakdown_prompt
from analysis.services.normalizer import normalize
from analysis.services.step_sequencer import StepSequencer
from shared.utils.exceptions import GENERIC_ANALYSIS_FAILURE

logger = logging.getLogger(__name__)


class BreakdownGateway(Protocol):
    async def fetch_breakdown(self, prompt_spec: str, problem_text: str) -> GatewayResult: ...


class SubmissionOutcome(str, Enum):
    completed = "completed"
    failed = "failed"
    rejected_blank = "rejected_blank"
    rejected_in_flight = "rejected_in_flight"

    @property
    def accepted(self) -> bool:
        return self in (SubmissionOutcome.completed, SubmissionOutcome.failed)


@dataclass(frozen=True)
class Submission:
    """The active problem. Superseded by the next accepted submission, never edited."""
    problem_text: str
    submitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class SubmissionController:
    """Owns loading state, the active Submission and the session's StepSequencer."""

    def __init__(
        self,
        gateway: BreakdownGateway,
        *,
        sequencer: Optional[StepSequencer] = None,
        normalizer: Callable[[object], NormalizeResult] = normalize,
        prompt_builder: Callable[[str], str] = build_breakdown_prompt,
        on_error: Optional[Callable[[str], None]] = None,
    ):
        self.gateway = gateway
        self.sequencer = sequencer or StepSequencer()
        self.loading = False
        self.submission: Optional[Submission] = None
        self.notification: Optional[str] = None
        self._normalizer = normalizer
        self._prompt_builder = prompt_builder
        self._on_error = on_error

    async def submit(self, problem_text: str) -> SubmissionOutcome:
        text = (problem_text or "").strip()
        if not text:
            return SubmissionOutcome.rejected_blank
        if self.loading:
            logger.info("Submission ignored: another submission is in flight")
            return SubmissionOutcome.rejected_in_flight

        self.loading = True
        try:
            self.submission = Submission(problem_text=text)
            self.notification = None
            return await self._run(text)
        finally:
            self.loading = False

    async def _run(self, text: str) -> SubmissionOutcome:
        try:
            result = await self.gateway.fetch_breakdown(self._prompt_builder(text), text)
            if not result.ok:
                self._report_failure(f"gateway {result.kind.value}: {result.detail}")
                return SubmissionOutcome.failed

            normalized = self._normalizer(result.payload)
            if not normalized.ok:
                self._report_failure(
                    f"normalizer {normalized.kind.value} at '{normalized.location}': {normalized.detail}"
                )
                return SubmissionOutcome.failed
        except Exception as e:
            logger.exception(f"Unexpected error while analyzing problem: {e}")
            self._report_failure(f"unexpected {type(e).__name__}")
            return SubmissionOutcome.failed

        self.sequencer.reset(normalized.steps)
        logger.info(f"Submission analyzed into {self.sequencer.total_steps} steps")
        return SubmissionOutcome.completed

    def _report_failure(self, reason: str) -> None:
        # Prior steps stay on screen; only the notification changes.
        logger.error(f"Problem analysis failed: {reason}")
        self.notification = GENERIC_ANALYSIS_FAILURE
        if self._on_error is not None:
            self._on_error(GENERIC_ANALYSIS_FAILURE)

    def advance(self) -> bool:
        return self.sequencer.advance()

    def visible_steps(self) -> tuple:
        return self.sequencer.visible_steps()
