"""Custom exception hierarchy for better error handling."""
from fastapi import HTTPException, status


GENERIC_ANALYSIS_FAILURE = "Failed to analyze problem"


class IntelliHintException(Exception):
    """Base exception for all application errors."""
    pass


class ConfigurationException(IntelliHintException):
    """Raised when a required setting is missing at request time."""

    def __init__(self, setting_name: str):
        self.setting_name = setting_name
        super().__init__(f"{setting_name} is not configured in environment variables.")

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(self)
        )


class AnalysisFailedException(IntelliHintException):
    """Raised when the AI provider could not produce a usable breakdown.

    The reason is kept for logs only; clients receive the generic message.
    """

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Problem analysis failed: {reason}")

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=GENERIC_ANALYSIS_FAILURE
        )


class AnalysisSessionNotFoundException(IntelliHintException):
    """Raised when an analysis session is not found for the current user."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session {session_id} not found")

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session {self.session_id} not found"
        )
