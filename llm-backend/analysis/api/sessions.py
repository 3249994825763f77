"""Analysis session endpoints: submit a problem and reveal its breakdown step by step."""
import logging
import traceback

from fastapi import APIRouter, Depends, HTTPException, Response, status

from analysis.models.schemas import SessionView, SubmitProblemRequest, SubmitProblemResponse
from analysis.services.session_registry import SessionRegistry, get_session_registry
from auth.middleware.auth_middleware import get_current_user
from auth.models.schemas import AuthenticatedUser
from shared.utils.exceptions import IntelliHintException

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


@router.post("", response_model=SessionView, status_code=status.HTTP_201_CREATED)
def create_session(
    current_user: AuthenticatedUser = Depends(get_current_user),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Open an empty analysis session for the caller."""
    try:
        session = registry.create(current_user.id)
    except IntelliHintException as e:
        raise e.to_http_exception()
    except Exception as e:
        logger.error(f"Error creating session: {str(e)}\n{traceback.format_exc()}")
        raise HTTPException(status_code=500, detail=f"Error creating session: {str(e)}")
    return SessionView.from_session(session)


@router.get("/{session_id}", response_model=SessionView)
def get_session(
    session_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Current problem, loading flag and revealed steps."""
    try:
        return SessionView.from_session(registry.get(session_id, current_user.id))
    except IntelliHintException as e:
        raise e.to_http_exception()


@router.post("/{session_id}/submit", response_model=SubmitProblemResponse)
async def submit_problem(
    session_id: str,
    request: SubmitProblemRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """
    Analyze a new problem in this session.

    Blank problems and submissions made while one is loading are ignored:
    the response has accepted=false and the session is unchanged. A failed
    analysis keeps the previous steps and sets `notification`.
    """
    try:
        session = registry.get(session_id, current_user.id)
    except IntelliHintException as e:
        raise e.to_http_exception()

    outcome = await session.controller.submit(request.problem)
    view = SessionView.from_session(session)
    return SubmitProblemResponse(**view.model_dump(), accepted=outcome.accepted, outcome=outcome)


@router.post("/{session_id}/advance", response_model=SessionView)
def advance_session(
    session_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Reveal the next step. No-op once every step is shown."""
    try:
        session = registry.get(session_id, current_user.id)
    except IntelliHintException as e:
        raise e.to_http_exception()

    session.controller.advance()
    return SessionView.from_session(session)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(
    session_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    registry: SessionRegistry = Depends(get_session_registry),
):
    try:
        registry.delete(session_id, current_user.id)
    except IntelliHintException as e:
        raise e.to_http_exception()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
