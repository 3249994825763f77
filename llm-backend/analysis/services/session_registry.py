"""
In-memory registry of analysis sessions.

Each session wraps one SubmissionController and belongs to one user. Nothing
is persisted; a restart forgets every session.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional

from analysis.services.gateway_client import build_gateway_client
from analysis.services.submission_controller import SubmissionController
from shared.utils.exceptions import AnalysisSessionNotFoundException

logger = logging.getLogger(__name__)


@dataclass
class AnalysisSession:
    owner_id: str
    controller: SubmissionController
    session_id: str = field(default_factory=lambda: f"sess_{uuid.uuid4().hex[:12]}")
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def _default_controller_factory() -> SubmissionController:
    return SubmissionController(build_gateway_client())


class SessionRegistry:
    """Maps session ids to sessions; lookups are scoped to the owning user."""

    def __init__(self, controller_factory: Callable[[], SubmissionController] = _default_controller_factory):
        self._controller_factory = controller_factory
        self._sessions: dict[str, AnalysisSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, owner_id: str) -> AnalysisSession:
        session = AnalysisSession(owner_id=owner_id, controller=self._controller_factory())
        self._sessions[session.session_id] = session
        logger.info(f"Created analysis session {session.session_id} for user {owner_id}")
        return session

    def get(self, session_id: str, owner_id: str) -> AnalysisSession:
        session = self._sessions.get(session_id)
        if session is None or session.owner_id != owner_id:
            raise AnalysisSessionNotFoundException(session_id)
        return session

    def delete(self, session_id: str, owner_id: str) -> None:
        self.get(session_id, owner_id)
        del self._sessions[session_id]
        logger.info(f"Deleted analysis session {session_id}")


_registry: Optional[SessionRegistry] = None


def get_session_registry() -> SessionRegistry:
    """Get or create the process-wide registry."""
    global _registry
    if _registry is None:
        _registry = SessionRegistry()
    return _registry


def reset_session_registry():
    """Drop all sessions (useful for testing)."""
    global _registry
    _registry = None
