from datetime import datetime, timedelta, timezone

import jwt
import pytest
from pydantic import SecretStr

from src.platform.config.core_setting import Settings
from src.service.reservation.driving_adapter.http_controller.auth.cookie_session_identity import (
    CookieSessionIdentity,
)


@pytest.fixture
def settings() -> Settings:
    return Settings(SECRET_KEY=SecretStr('unit-test-secret'), SESSION_COOKIE_MAX_AGE=3600)


@pytest.fixture
def identity(settings: Settings) -> CookieSessionIdentity:
    return CookieSessionIdentity(settings=settings)


@pytest.mark.unit
class TestCookieSessionIdentity:
    def test_issued_cookie_verifies_to_its_session(self, identity: CookieSessionIdentity) -> None:
        session_id, cookie = identity.issue()

        assert len(session_id) == 64
        assert identity.verify(cookie) == session_id

    def test_each_issue_is_a_new_session(self, identity: CookieSessionIdentity) -> None:
        first, _ = identity.issue()
        second, _ = identity.issue()
        assert first != second

    @pytest.mark.parametrize('credential', [None, '', 'not-a-jwt'])
    def test_missing_or_garbage_credential(
        self, identity: CookieSessionIdentity, credential
    ) -> None:
        assert identity.verify(credential) is None

    def test_cookie_signed_with_other_key_is_rejected(
        self, identity: CookieSessionIdentity
    ) -> None:
        forged = jwt.encode({'sid': 'someone-else'}, 'other-secret', algorithm='HS256')
        assert identity.verify(forged) is None

    def test_expired_cookie_is_rejected(self, identity: CookieSessionIdentity) -> None:
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        stale = jwt.encode(
            {'sid': 'abc', 'iat': past, 'exp': past + timedelta(minutes=5)},
            'unit-test-secret',
            algorithm='HS256',
        )
        assert identity.verify(stale) is None

    def test_cookie_without_session_claim_is_rejected(
        self, identity: CookieSessionIdentity
    ) -> None:
        token = jwt.encode({'user': 1}, 'unit-test-secret', algorithm='HS256')
        assert identity.verify(token) is None
