from datetime import datetime, timedelta
import secrets
from typing import List, Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.platform.logging.loguru_io import Logger
from src.service.reservation.domain.enum.reservation_error_code import ReservationErrorCode
from src.service.reservation.domain.reservation_error import ReservationError


def generate_reservation_token() -> str:
    """64 hex chars from 32 random bytes; possession of it identifies the hold."""
    return secrets.token_hex(32)


@attrs.define
class Reservation:
    id: UUID
    event_id: UUID
    session_id: str
    token: str = attrs.field(repr=False)
    created_at: datetime
    expires_at: datetime
    email: Optional[str] = attrs.field(default=None, repr=False)
    phone: Optional[str] = attrs.field(default=None, repr=False)
    extension_count: int = 0
    is_active: bool = True
    updated_at: Optional[datetime] = None
    show_seat_ids: List[UUID] = attrs.field(factory=list)

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        event_id: UUID,
        session_id: str,
        show_seat_ids: List[UUID],
        now: datetime,
        hold_seconds: int,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> 'Reservation':
        return cls(
            id=uuid7(),
            event_id=event_id,
            session_id=session_id,
            token=generate_reservation_token(),
            created_at=now,
            expires_at=now + timedelta(seconds=hold_seconds),
            email=email,
            phone=phone,
            extension_count=0,
            is_active=True,
            updated_at=now,
            show_seat_ids=list(show_seat_ids),
        )

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def is_live(self, now: datetime) -> bool:
        return self.is_active and not self.is_expired(now)

    def time_remaining_seconds(self, now: datetime) -> int:
        if self.is_expired(now):
            return 0
        return int((self.expires_at - now).total_seconds())

    def extensions_remaining(self, max_extensions: int) -> int:
        return max(0, max_extensions - self.extension_count)

    def validate_owner(self, session_id: str) -> None:
        if not session_id or not secrets.compare_digest(self.session_id, session_id):
            raise ReservationError(
                ReservationErrorCode.PERMISSION_DENIED,
                'You do not have permission to modify this reservation',
            )

    def validate_live(self, now: datetime) -> None:
        if not self.is_active:
            raise ReservationError(
                ReservationErrorCode.RESERVATION_INACTIVE, 'Reservation is no longer active'
            )
        if self.is_expired(now):
            raise ReservationError(
                ReservationErrorCode.RESERVATION_EXPIRED, 'Reservation has expired'
            )

    def extend(
        self, *, now: datetime, increment_seconds: int, max_extensions: int
    ) -> 'Reservation':
        """New deadline counts from `now`, not from the previous deadline."""
        self.validate_live(now)
        if self.extension_count >= max_extensions:
            raise ReservationError(
                ReservationErrorCode.MAX_EXTENSIONS_REACHED,
                f'Maximum number of extensions ({max_extensions}) reached',
            )
        return attrs.evolve(
            self,
            extension_count=self.extension_count + 1,
            expires_at=now + timedelta(seconds=increment_seconds),
            updated_at=now,
        )

    def deactivate(self, *, now: datetime) -> 'Reservation':
        if not self.is_active:
            raise ReservationError(
                ReservationErrorCode.ALREADY_INACTIVE, 'Reservation is already inactive'
            )
        return attrs.evolve(self, is_active=False, updated_at=now)
