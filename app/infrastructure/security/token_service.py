from __future__ import annotations

from datetime import datetime, timedelta

import jwt

from app.application.ports.token_port import TokenPort


class JwtTokenService(TokenPort):
    def __init__(self, *, jwt_secret: str, ttl_days: int = 7):
        if not jwt_secret:
            raise ValueError("jwt_secret is required.")
        self._jwt_secret = jwt_secret
        self._ttl_days = ttl_days

    def create_app_token(
        self,
        *,
        user_id: str,
        email: str | None,
        name: str | None,
        now: datetime,
    ) -> tuple[str, datetime]:
        exp = now + timedelta(days=self._ttl_days)
        payload = {
            "userId": user_id,
            "email": email,
            "name": name,
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
        }
        token = jwt.encode(payload, self._jwt_secret, algorithm="HS256")
        return token, exp

    def decode_app_token(self, *, token: str) -> dict:
        try:
            payload = jwt.decode(token, self._jwt_secret, algorithms=["HS256"])
        except jwt.PyJWTError as exc:
            raise ValueError("Invalid app token.") from exc

        user_id = payload.get("userId")
        if not user_id or not isinstance(user_id, str):
            raise ValueError("Invalid token subject.")
        return payload
