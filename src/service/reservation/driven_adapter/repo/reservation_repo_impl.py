from datetime import datetime
from typing import List, Optional
from uuid import UUID

from opentelemetry import trace
from sqlalchemy import Select, select, update as sql_update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.interface.i_reservation_repo import IReservationRepo
from src.service.reservation.domain.entity.reservation_entity import Reservation
from src.service.reservation.driven_adapter.model.reservation_model import (
    ReservationModel,
    ReservationSeatModel,
)


class ReservationRepoImpl(IReservationRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session
        self.tracer = trace.get_tracer(__name__)

    @staticmethod
    def _model_to_entity(db_reservation: ReservationModel) -> Reservation:
        return Reservation(
            id=db_reservation.id,
            event_id=db_reservation.event_id,
            session_id=db_reservation.session_id,
            token=db_reservation.token,
            created_at=db_reservation.created_at,
            expires_at=db_reservation.expires_at,
            email=db_reservation.email,
            phone=db_reservation.phone,
            extension_count=db_reservation.extension_count,
            is_active=db_reservation.is_active,
            updated_at=db_reservation.updated_at,
            show_seat_ids=[member.show_seat_id for member in db_reservation.seats],
        )

    async def _fetch_one(
        self, stmt: Select[tuple[ReservationModel]], *, for_update: bool
    ) -> Optional[Reservation]:
        if for_update:
            stmt = stmt.with_for_update(of=ReservationModel).execution_options(
                populate_existing=True
            )
        result = await self.session.execute(stmt)
        db_reservation = result.scalar_one_or_none()
        return self._model_to_entity(db_reservation) if db_reservation else None

    @Logger.io
    async def create(self, *, reservation: Reservation) -> Reservation:
        with self.tracer.start_as_current_span(
            'db.reservation.create',
            attributes={
                'reservation.id': str(reservation.id),
                'seat.count': len(reservation.show_seat_ids),
            },
        ):
            db_reservation = ReservationModel(
                id=reservation.id,
                event_id=reservation.event_id,
                session_id=reservation.session_id,
                token=reservation.token,
                email=reservation.email,
                phone=reservation.phone,
                extension_count=reservation.extension_count,
                is_active=reservation.is_active,
                created_at=reservation.created_at,
                expires_at=reservation.expires_at,
                updated_at=reservation.updated_at or reservation.created_at,
                seats=[
                    ReservationSeatModel(
                        show_seat_id=show_seat_id,
                        position=position,
                        created_at=reservation.created_at,
                    )
                    for position, show_seat_id in enumerate(reservation.show_seat_ids)
                ],
            )
            self.session.add(db_reservation)
            try:
                await self.session.flush()
            except IntegrityError as e:
                # uq_reservation_active_session: another worker won the race for this session
                raise ConflictError(
                    f'Session already holds an active reservation for event {reservation.event_id}'
                ) from e
            return reservation

    @Logger.io
    async def get_by_token(self, *, token: str, for_update: bool = False) -> Optional[Reservation]:
        if not token:
            return None
        stmt = select(ReservationModel).where(ReservationModel.token == token)
        return await self._fetch_one(stmt, for_update=for_update)

    @Logger.io
    async def get_by_id(
        self, *, reservation_id: UUID, for_update: bool = False
    ) -> Optional[Reservation]:
        stmt = select(ReservationModel).where(ReservationModel.id == reservation_id)
        return await self._fetch_one(stmt, for_update=for_update)

    @Logger.io
    async def list_active_for_session(
        self, *, event_id: UUID, session_id: str, for_update: bool = False
    ) -> List[Reservation]:
        stmt = (
            select(ReservationModel)
            .where(
                ReservationModel.event_id == event_id,
                ReservationModel.session_id == session_id,
                ReservationModel.is_active.is_(True),
            )
            .order_by(ReservationModel.created_at)
        )
        if for_update:
            stmt = stmt.with_for_update(of=ReservationModel).execution_options(
                populate_existing=True
            )
        result = await self.session.execute(stmt)
        return [self._model_to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def update(self, *, reservation: Reservation) -> Reservation:
        stmt = (
            sql_update(ReservationModel)
            .where(ReservationModel.id == reservation.id)
            .values(
                expires_at=reservation.expires_at,
                extension_count=reservation.extension_count,
                is_active=reservation.is_active,
                updated_at=reservation.updated_at,
            )
            .execution_options(synchronize_session='fetch')
        )
        result = await self.session.execute(stmt)
        if not result.rowcount:
            raise NotFoundError(f'Reservation {reservation.id} not found')
        return reservation

    @Logger.io(truncate_content=True)
    async def list_expired_active(
        self, *, now: datetime, limit: Optional[int] = None
    ) -> List[Reservation]:
        with self.tracer.start_as_current_span('db.reservation.list_expired_active'):
            stmt = (
                select(ReservationModel)
                .where(ReservationModel.is_active.is_(True), ReservationModel.expires_at <= now)
                .order_by(ReservationModel.expires_at, ReservationModel.id)
            )
            if limit is not None:
                stmt = stmt.limit(limit)
            result = await self.session.execute(stmt)
            return [self._model_to_entity(row) for row in result.scalars().all()]
