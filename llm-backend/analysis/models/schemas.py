"""Pydantic API request/response schemas for the analysis endpoints."""
from pydantic import BaseModel, Field
from typing import Optional

from analysis.models.reveal import RevealPhase
from analysis.models.steps import Step
from analysis.services.session_registry import AnalysisSession
from analysis.services.submission_controller import SubmissionOutcome


class AnalyzeProblemRequest(BaseModel):
    """Proxy request. Both fields are checked by the handler so that a gap is a 400."""
    prompt: Optional[str] = None
    problem: Optional[str] = None


class SubmitProblemRequest(BaseModel):
    problem: str = ""


class StepView(BaseModel):
    """One revealed step plus the chat text shown for it."""
    index: int
    step: Step
    markdown: str


class SessionView(BaseModel):
    """
    What the presentation layer needs to render a session.

    `problem` is the last accepted submission. After a failed submission the
    steps still belong to the previous successful one, so the two can differ.
    """
    session_id: str
    problem: Optional[str] = None
    loading: bool
    steps: list[StepView] = Field(default_factory=list)
    revealed_index: int
    total_steps: int
    fully_revealed: bool
    has_next_step: bool
    notification: Optional[str] = None

    @classmethod
    def from_session(cls, session: AnalysisSession) -> "SessionView":
        controller = session.controller
        sequencer = controller.sequencer
        return cls(
            session_id=session.session_id,
            problem=controller.submission.problem_text if controller.submission else None,
            loading=controller.loading,
            steps=[
                StepView(index=i, step=step, markdown=step.render_markdown())
                for i, step in enumerate(controller.visible_steps())
            ],
            revealed_index=sequencer.revealed_index,
            total_steps=sequencer.total_steps,
            fully_revealed=sequencer.phase == RevealPhase.fully_revealed,
            has_next_step=sequencer.has_next_step,
            notification=controller.notification,
        )


class SubmitProblemResponse(SessionView):
    accepted: bool
    outcome: SubmissionOutcome
