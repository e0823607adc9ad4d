from __future__ import annotations

from datetime import datetime
from typing import Protocol


class TokenPort(Protocol):
    def create_app_token(
        self,
        *,
        user_id: str,
        email: str | None,
        name: str | None,
        now: datetime,
    ) -> tuple[str, datetime]:
        ...
