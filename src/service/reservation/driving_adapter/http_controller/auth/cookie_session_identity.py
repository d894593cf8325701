"""
Shopper session identity carried in a signed cookie
"""

from datetime import datetime, timedelta, timezone
import secrets
from typing import Optional

import jwt

from src.platform.config.core_setting import Settings
from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.interface.i_session_identity import ISessionIdentity


class CookieSessionIdentity(ISessionIdentity):
    def __init__(self, *, settings: Settings) -> None:
        self.secret = settings.SECRET_KEY.get_secret_value()
        self.algorithm = settings.ALGORITHM
        self.max_age_seconds = settings.SESSION_COOKIE_MAX_AGE

    def issue(self) -> tuple[str, str]:
        session_id = secrets.token_hex(32)
        now = datetime.now(timezone.utc)
        payload = {
            'sid': session_id,
            'iat': now,
            'exp': now + timedelta(seconds=self.max_age_seconds),
        }
        return session_id, jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, credential: Optional[str]) -> Optional[str]:
        if not credential:
            return None
        try:
            payload = jwt.decode(credential, self.secret, algorithms=[self.algorithm])
        except jwt.PyJWTError as e:
            Logger.base.warning(f'[SESSION] Ignoring invalid session cookie: {type(e).__name__}')
            return None

        session_id = payload.get('sid')
        if not isinstance(session_id, str) or not session_id:
            return None
        return session_id
