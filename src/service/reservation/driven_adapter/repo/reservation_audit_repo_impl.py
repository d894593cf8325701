from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.interface.i_reservation_audit_repo import IReservationAuditRepo
from src.service.reservation.domain.entity.reservation_audit_entity import ReservationAuditEntry
from src.service.reservation.domain.enum.reservation_event_type import ReservationEventType
from src.service.reservation.driven_adapter.model.reservation_model import (
    ReservationAuditLogModel,
)


class ReservationAuditRepoImpl(IReservationAuditRepo):
    """Append-only history of reservation lifecycle events"""

    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _model_to_entity(db_entry: ReservationAuditLogModel) -> ReservationAuditEntry:
        return ReservationAuditEntry(
            id=db_entry.id,
            reservation_id=db_entry.reservation_id,
            event_id=db_entry.event_id,
            event_type=ReservationEventType(db_entry.event_type),
            session_id=db_entry.session_id,
            show_seat_ids=[UUID(seat_id) for seat_id in db_entry.show_seat_ids or []],
            created_at=db_entry.created_at,
            detail=db_entry.detail,
        )

    @Logger.io
    async def record(self, *, entry: ReservationAuditEntry) -> None:
        self.session.add(
            ReservationAuditLogModel(
                id=entry.id,
                reservation_id=entry.reservation_id,
                event_id=entry.event_id,
                event_type=entry.event_type.value,
                session_id=entry.session_id,
                show_seat_ids=[str(seat_id) for seat_id in entry.show_seat_ids],
                detail=entry.detail,
                created_at=entry.created_at,
            )
        )
        await self.session.flush()

    @Logger.io
    async def list_for_reservation(self, *, reservation_id: UUID) -> List[ReservationAuditEntry]:
        stmt = (
            select(ReservationAuditLogModel)
            .where(ReservationAuditLogModel.reservation_id == reservation_id)
            .order_by(ReservationAuditLogModel.created_at, ReservationAuditLogModel.id)
        )
        result = await self.session.execute(stmt)
        return [self._model_to_entity(row) for row in result.scalars().all()]
