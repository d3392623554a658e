"""
Auth schemas.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class IdentityClaim(BaseModel):
    """
    The verified caller, derived from a bearer token. Lives for one request.
    """

    id: str = Field(..., min_length=1)
    email: str | None = None
