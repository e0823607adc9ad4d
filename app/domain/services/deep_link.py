from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote


NEW_USER_PATH = "callback/auth/signIn"
RETURNING_USER_PATH = "callback/auth/login"


def _encode(value: str) -> str:
    return quote(value, safe="")


@dataclass(frozen=True)
class DeepLinkRedirect:
    scheme: str
    path: str
    params: tuple[tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        if not self.scheme or not self.scheme.isalnum():
            raise ValueError("Deep link scheme must be a non-empty alphanumeric string.")
        if not self.path or self.path.startswith("/"):
            raise ValueError("Deep link path must be relative and non-empty.")

    def with_param(self, name: str, value: str | None) -> DeepLinkRedirect:
        if value is None:
            return self
        return DeepLinkRedirect(
            scheme=self.scheme,
            path=self.path,
            params=self.params + ((name, str(value)),),
        )

    @property
    def url(self) -> str:
        base = f"{self.scheme}://{self.path}"
        if not self.params:
            return base
        query = "&".join(f"{_encode(name)}={_encode(value)}" for name, value in self.params)
        return f"{base}?{query}"

    def __str__(self) -> str:
        return self.url


def path_for_user(*, is_new_user: bool) -> str:
    return NEW_USER_PATH if is_new_user else RETURNING_USER_PATH


def build_auth_redirect(
    *,
    scheme: str,
    is_new_user: bool,
    user_id: str,
    token: str | None,
) -> DeepLinkRedirect:
    redirect = DeepLinkRedirect(scheme=scheme, path=path_for_user(is_new_user=is_new_user))
    return redirect.with_param("userId", user_id).with_param("token", token)
