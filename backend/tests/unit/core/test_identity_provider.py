"""JWT identity provider and bearer-token dependency."""

from datetime import timedelta

from fastapi.security import HTTPAuthorizationCredentials
import pytest

from app.api.dependencies.auth import get_current_user_id
from app.auth import JWTIdentityProvider
from app.core.exceptions import UnauthorizedException


@pytest.mark.unit
class TestJWTIdentityProvider:
    def test_resolves_subject(self, identity_provider, token_factory) -> None:
        assert identity_provider.resolve(token_factory("user-42")) == "user-42"

    def test_rejects_expired_token(self, identity_provider, token_factory) -> None:
        token = token_factory("user-42", expires_in=timedelta(minutes=-5))
        assert identity_provider.resolve(token) is None

    def test_rejects_wrong_secret(self, identity_provider, token_factory) -> None:
        assert identity_provider.resolve(token_factory("user-42", secret="not-the-secret")) is None

    def test_rejects_wrong_audience(self, identity_provider, token_factory) -> None:
        assert identity_provider.resolve(token_factory("user-42", audience="other-app")) is None

    def test_rejects_garbage(self, identity_provider) -> None:
        assert identity_provider.resolve("not-a-jwt") is None

    def test_audience_check_can_be_disabled(self, token_factory) -> None:
        provider = JWTIdentityProvider("test-identity-secret", audience=None)
        assert provider.resolve(token_factory("user-42", audience="anything")) == "user-42"


@pytest.mark.unit
class TestCurrentUserDependency:
    def test_missing_credentials(self, identity_provider) -> None:
        with pytest.raises(UnauthorizedException) as exc_info:
            get_current_user_id(None, identity_provider)
        http_exc = exc_info.value.to_http_exception()
        assert http_exc.status_code == 401
        assert http_exc.headers == {"WWW-Authenticate": "Bearer"}

    def test_invalid_token(self, identity_provider) -> None:
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials="bad")
        with pytest.raises(UnauthorizedException, match="Invalid or expired"):
            get_current_user_id(credentials, identity_provider)

    def test_valid_token(self, identity_provider, token_factory) -> None:
        credentials = HTTPAuthorizationCredentials(
            scheme="Bearer", credentials=token_factory("user-7")
        )
        assert get_current_user_id(credentials, identity_provider) == "user-7"
