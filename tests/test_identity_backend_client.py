from __future__ import annotations

import json

import httpx
import pytest

from app.domain.entities.oauth import ProviderIdentity, ProviderTokenSet
from app.domain.exceptions import BackendRejectedError, OAuthConfigurationError
from app.infrastructure.clients.identity_backend_client import (
    GENERIC_BACKEND_ERROR,
    IdentityBackendClient,
    IdentityBackendClientSettings,
    parse_signup_response,
)


BASE_URL = "https://backend.example.com/"


def _make_client(handler) -> IdentityBackendClient:
    return IdentityBackendClient(
        IdentityBackendClientSettings(base_url=BASE_URL, timeout_seconds=5),
        transport=httpx.MockTransport(handler),
    )


def _tokens(id_token: str | None = "IT1") -> ProviderTokenSet:
    return ProviderTokenSet(access_token="AT1", id_token=id_token, token_type="Bearer", expires_in=None)


def _identity() -> ProviderIdentity:
    return ProviderIdentity(
        subject="U1",
        email="a@x.com",
        name="A",
        picture=None,
        given_name="A",
        family_name=None,
    )


def _ok_body(**extra) -> dict:
    body = {
        "user": {"_id": "B1", "userId": "U1", "email": "a@x.com", "name": "A"},
        "isNewUser": True,
    }
    body.update(extra)
    return body


def test_google_signup_posts_id_token_only():
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_ok_body())

    result = _make_client(handler).signup(provider="google", tokens=_tokens(), identity=_identity())

    assert seen["url"] == "https://backend.example.com/auth/google-signup"
    assert seen["body"] == {"idToken": "IT1"}
    assert result.user.id == "B1"
    assert result.user.user_id == "U1"
    assert result.is_new_user is True
    assert result.token is None


def test_linkedin_signup_posts_identity_and_raw_id_token():
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_ok_body(isNewUser=False, token="BT"))

    result = _make_client(handler).signup(
        provider="linkedin",
        tokens=_tokens("LIT"),
        identity=_identity(),
    )

    assert seen["url"] == "https://backend.example.com/auth/linkedIn-signup"
    assert seen["body"]["id_token"] == "LIT"
    assert seen["body"]["sub"] == "U1"
    assert seen["body"]["email"] == "a@x.com"
    assert "AT1" not in json.dumps(seen["body"])
    assert result.is_new_user is False
    assert result.token == "BT"


def test_signup_surfaces_backend_error_field():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "duplicate email"})

    with pytest.raises(BackendRejectedError) as exc_info:
        _make_client(handler).signup(provider="google", tokens=_tokens(), identity=_identity())

    assert exc_info.value.details == "duplicate email"


def test_signup_uses_generic_message_without_error_field():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad gateway")

    with pytest.raises(BackendRejectedError) as exc_info:
        _make_client(handler).signup(provider="google", tokens=_tokens(), identity=_identity())

    assert exc_info.value.details == GENERIC_BACKEND_ERROR


def test_signup_wraps_transport_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(BackendRejectedError) as exc_info:
        _make_client(handler).signup(provider="google", tokens=_tokens(), identity=_identity())

    assert exc_info.value.details == "ReadTimeout"


def test_parse_signup_response_requires_user():
    with pytest.raises(BackendRejectedError):
        parse_signup_response({"isNewUser": True})


def test_parse_signup_response_falls_back_to_user_id():
    result = parse_signup_response({"user": {"userId": "U1"}, "isNewUser": "yes"})

    assert result.user.id == "U1"
    assert result.is_new_user is False


def test_signup_without_base_url_fails_before_calling_backend():
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=_ok_body())

    client = IdentityBackendClient(
        IdentityBackendClientSettings(base_url="", timeout_seconds=5),
        transport=httpx.MockTransport(handler),
    )

    with pytest.raises(OAuthConfigurationError):
        client.signup(provider="google", tokens=_tokens(), identity=_identity())

    assert calls == []


def test_parse_signup_response_ignores_non_string_user_fields():
    result = parse_signup_response({"user": {"_id": "B1", "email": 3, "name": {"first": "A"}}, "isNewUser": True})

    assert result.user.email is None
    assert result.user.name is None
