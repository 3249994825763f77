"""Pydantic models for the authenticated caller."""

from pydantic import BaseModel


class AuthenticatedUser(BaseModel):
    """Identity carried by a verified bearer token."""
    id: str
