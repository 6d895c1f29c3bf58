"""
Identity Resolution Tests
"""

from datetime import timedelta

import pytest
from starlette.requests import Request

from rentpay.config import Settings
from rentpay.identity import (
    BearerTokenIdentityResolver,
    StaticIdentityResolver,
    build_identity_resolver,
    create_access_token,
)

SECRET = "identity-test-secret-0123456789abcdef"


def make_request(headers=None) -> Request:
    raw_headers = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw_headers})


class TestIdentityResolvers:

    @pytest.mark.unit
    def test_static_resolver(self):
        assert StaticIdentityResolver("user_123").resolve(make_request()) == "user_123"

    @pytest.mark.unit
    def test_bearer_token_subject(self):
        token = create_access_token("user_42", SECRET)
        resolver = BearerTokenIdentityResolver(SECRET)

        assert resolver.resolve(make_request({"Authorization": f"Bearer {token}"})) == "user_42"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "header",
        [None, "", "Basic abc", "Bearer not-a-jwt", "Bearer"],
    )
    def test_bearer_resolver_rejects(self, header):
        headers = {"Authorization": header} if header is not None else {}
        resolver = BearerTokenIdentityResolver(SECRET)

        assert resolver.resolve(make_request(headers)) is None

    @pytest.mark.unit
    def test_wrong_secret_and_expired_tokens(self):
        resolver = BearerTokenIdentityResolver(SECRET)
        wrong = create_access_token("user_42", "other-identity-secret-0123456789abcdef")
        expired = create_access_token("user_42", SECRET, expires_delta=timedelta(seconds=-10))

        assert resolver.resolve(make_request({"Authorization": f"Bearer {wrong}"})) is None
        assert resolver.resolve(make_request({"Authorization": f"Bearer {expired}"})) is None

    @pytest.mark.unit
    def test_build_from_settings(self):
        assert isinstance(
            build_identity_resolver(Settings(_env_file=None, auth_mode="jwt")), BearerTokenIdentityResolver
        )
        assert isinstance(
            build_identity_resolver(Settings(_env_file=None, auth_mode="static")), StaticIdentityResolver
        )
