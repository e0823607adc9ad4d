from __future__ import annotations

import unittest
from urllib.parse import parse_qs, urlsplit

from app.domain.services.deep_link import (
    NEW_USER_PATH,
    RETURNING_USER_PATH,
    DeepLinkRedirect,
    build_auth_redirect,
    path_for_user,
)


class DeepLinkRedirectTests(unittest.TestCase):
    def test_new_user_routes_to_sign_in(self):
        redirect = build_auth_redirect(scheme="venturloop", is_new_user=True, user_id="B1", token=None)

        self.assertEqual(redirect.url, "venturloop://callback/auth/signIn?userId=B1")

    def test_returning_user_routes_to_login(self):
        redirect = build_auth_redirect(scheme="venturloop", is_new_user=False, user_id="B1", token=None)

        self.assertEqual(redirect.url, "venturloop://callback/auth/login?userId=B1")

    def test_paths_differ_by_new_user_flag(self):
        self.assertNotEqual(path_for_user(is_new_user=True), path_for_user(is_new_user=False))
        self.assertEqual(path_for_user(is_new_user=True), NEW_USER_PATH)
        self.assertEqual(path_for_user(is_new_user=False), RETURNING_USER_PATH)

    def test_every_value_is_percent_encoded(self):
        user_id = "a b&c=d/é"
        token = "x.y+z/=="
        redirect = build_auth_redirect(scheme="venturloop", is_new_user=True, user_id=user_id, token=token)

        query = urlsplit(redirect.url).query
        self.assertNotIn(" ", query)
        self.assertEqual(query.count("&"), 1)
        self.assertEqual(query.count("="), 2)
        decoded = parse_qs(query)
        self.assertEqual(decoded["userId"], [user_id])
        self.assertEqual(decoded["token"], [token])

    def test_none_token_is_omitted(self):
        redirect = build_auth_redirect(scheme="venturloop", is_new_user=False, user_id="B1", token=None)

        self.assertNotIn("token", redirect.url)

    def test_builder_is_immutable(self):
        base = DeepLinkRedirect(scheme="venturloop", path=NEW_USER_PATH)
        extended = base.with_param("userId", "B1")

        self.assertEqual(base.params, ())
        self.assertEqual(extended.params, (("userId", "B1"),))

    def test_rejects_invalid_scheme(self):
        with self.assertRaises(ValueError):
            DeepLinkRedirect(scheme="venturloop://evil", path=NEW_USER_PATH)

    def test_rejects_absolute_path(self):
        with self.assertRaises(ValueError):
            DeepLinkRedirect(scheme="venturloop", path="/callback")


if __name__ == "__main__":
    unittest.main()
