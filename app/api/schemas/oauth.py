from __future__ import annotations

from pydantic import BaseModel


class OAuthErrorResponse(BaseModel):
    error: str
    kind: str
    details: str | None = None
