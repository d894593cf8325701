from datetime import datetime
from typing import List, Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.service.reservation.domain.enum.reservation_event_type import ReservationEventType


@attrs.define(frozen=True)
class ReservationAuditEntry:
    id: UUID
    reservation_id: UUID
    event_id: UUID
    event_type: ReservationEventType
    session_id: Optional[str]
    show_seat_ids: List[UUID]
    created_at: datetime
    detail: Optional[str] = None

    @classmethod
    def record(
        cls,
        *,
        reservation_id: UUID,
        event_id: UUID,
        event_type: ReservationEventType,
        session_id: Optional[str],
        show_seat_ids: List[UUID],
        now: datetime,
        detail: Optional[str] = None,
    ) -> 'ReservationAuditEntry':
        return cls(
            id=uuid7(),
            reservation_id=reservation_id,
            event_id=event_id,
            event_type=event_type,
            session_id=session_id,
            show_seat_ids=list(show_seat_ids),
            created_at=now,
            detail=detail,
        )
