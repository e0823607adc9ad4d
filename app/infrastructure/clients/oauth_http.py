from __future__ import annotations

import httpx


def json_object(response: httpx.Response) -> dict | None:
    try:
        payload = response.json()
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else None


def provider_error_detail(response: httpx.Response) -> str:
    """Texto de erro do provider sem repassar o corpo bruto da resposta."""
    payload = json_object(response) or {}
    for key in ("error_description", "error", "message"):
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value
        if isinstance(value, dict):
            nested = value.get("message")
            if isinstance(nested, str) and nested:
                return nested
    return f"HTTP {response.status_code}"


def bearer_headers(access_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {access_token}", "Accept": "application/json"}


FORM_HEADERS = {
    "Content-Type": "application/x-www-form-urlencoded",
    "Accept": "application/json",
}


def optional_int(value) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


def optional_str(value) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None
