from datetime import datetime
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from opentelemetry import trace
from sqlalchemy import select, tuple_, update as sql_update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.interface.i_show_seat_repo import IShowSeatRepo
from src.service.reservation.domain.entity.seat_entity import Seat, ShowSeat
from src.service.reservation.domain.enum.seat_status import SeatStatus
from src.service.reservation.driven_adapter.model.reservation_model import ReservationSeatModel
from src.service.reservation.driven_adapter.model.seat_model import SeatModel, ShowSeatModel


def _seat_order_key(show_seat: ShowSeat) -> Tuple:
    # Numeric rows and seat numbers sort by value ('2' before '10'); unparseable ones go last
    seat = show_seat.seat
    rank = seat.row_rank
    number = seat.seat_number_value
    return (
        seat.section,
        rank is None,
        rank or 0,
        seat.row_name,
        number is None,
        number or 0,
        seat.seat_number,
    )


class ShowSeatRepoImpl(IShowSeatRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session
        self.tracer = trace.get_tracer(__name__)

    @staticmethod
    def _seat_to_entity(db_seat: SeatModel) -> Seat:
        return Seat(
            id=db_seat.id,
            section=db_seat.section,
            row_name=db_seat.row_name,
            seat_number=db_seat.seat_number,
            seat_type=db_seat.seat_type,
            handicap_access=db_seat.handicap_access,
        )

    @staticmethod
    def _model_to_entity(db_show_seat: ShowSeatModel) -> ShowSeat:
        return ShowSeat(
            id=db_show_seat.id,
            event_id=db_show_seat.event_id,
            seat=ShowSeatRepoImpl._seat_to_entity(db_show_seat.seat),
            price_in_cents=db_show_seat.price_in_cents,
            status=SeatStatus(db_show_seat.status),
            reserved_until=db_show_seat.reserved_until,
            reservation_id=db_show_seat.reservation_id,
        )

    @Logger.io(truncate_content=True)
    async def get_seats(
        self,
        *,
        event_id: UUID,
        section: Optional[str] = None,
        handicap_access: Optional[bool] = None,
    ) -> List[ShowSeat]:
        with self.tracer.start_as_current_span(
            'db.show_seat.get_seats', attributes={'event.id': str(event_id)}
        ):
            stmt = (
                select(ShowSeatModel)
                .join(SeatModel, SeatModel.id == ShowSeatModel.seat_id)
                .where(ShowSeatModel.event_id == event_id)
            )
            if section is not None:
                stmt = stmt.where(SeatModel.section == section)
            if handicap_access is not None:
                stmt = stmt.where(SeatModel.handicap_access == handicap_access)

            result = await self.session.execute(stmt)
            seats = [self._model_to_entity(row) for row in result.scalars().all()]
            return sorted(seats, key=_seat_order_key)

    async def _select_for_update(
        self, *, event_id: UUID, show_seat_ids: List[UUID]
    ) -> Dict[UUID, ShowSeatModel]:
        stmt = (
            select(ShowSeatModel)
            .where(ShowSeatModel.event_id == event_id, ShowSeatModel.id.in_(show_seat_ids))
            .with_for_update(of=ShowSeatModel)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return {row.id: row for row in result.scalars().all()}

    @Logger.io(truncate_content=True)
    async def get_for_update(self, *, event_id: UUID, show_seat_ids: List[UUID]) -> List[ShowSeat]:
        if not show_seat_ids:
            return []
        with self.tracer.start_as_current_span(
            'db.show_seat.get_for_update',
            attributes={'event.id': str(event_id), 'seat.count': len(show_seat_ids)},
        ):
            rows = await self._select_for_update(event_id=event_id, show_seat_ids=show_seat_ids)
            # Keep the caller's order
            return [
                self._model_to_entity(rows[seat_id]) for seat_id in show_seat_ids if seat_id in rows
            ]

    @Logger.io(truncate_content=True)
    async def list_by_reservation(
        self, *, reservation_id: UUID, for_update: bool = False
    ) -> List[ShowSeat]:
        stmt = (
            select(ShowSeatModel)
            .join(ReservationSeatModel, ReservationSeatModel.show_seat_id == ShowSeatModel.id)
            .where(ReservationSeatModel.reservation_id == reservation_id)
            .order_by(ReservationSeatModel.position)
        )
        if for_update:
            stmt = stmt.with_for_update(of=ShowSeatModel).execution_options(
                populate_existing=True
            )
        result = await self.session.execute(stmt)
        return [self._model_to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def transition_seats(
        self,
        *,
        event_id: UUID,
        show_seat_ids: List[UUID],
        from_status: SeatStatus,
        to_status: SeatStatus,
        reservation_id: UUID,
        reserved_until: Optional[datetime] = None,
    ) -> List[ShowSeat]:
        if not show_seat_ids:
            return []

        with self.tracer.start_as_current_span(
            'db.show_seat.transition',
            attributes={
                'event.id': str(event_id),
                'seat.count': len(show_seat_ids),
                'seat.from_status': from_status.value,
                'seat.to_status': to_status.value,
            },
        ):
            rows = await self._select_for_update(event_id=event_id, show_seat_ids=show_seat_ids)

            missing = [str(seat_id) for seat_id in show_seat_ids if seat_id not in rows]
            if missing:
                raise NotFoundError(f'Seats not found: {", ".join(missing)}')

            # Validate every seat before touching any of them
            conflicting = [
                str(seat_id)
                for seat_id in show_seat_ids
                if rows[seat_id].status != from_status.value
                or (
                    from_status == SeatStatus.RESERVED
                    and rows[seat_id].reservation_id != reservation_id
                )
            ]
            if conflicting:
                raise ConflictError(
                    f'Seats not in {from_status.value} state: {", ".join(conflicting)}'
                )

            transitioned: List[ShowSeat] = []
            for seat_id in show_seat_ids:
                db_show_seat = rows[seat_id]
                moved = self._model_to_entity(db_show_seat).transition(
                    to_status=to_status,
                    reservation_id=reservation_id,
                    reserved_until=reserved_until,
                )
                db_show_seat.status = moved.status.value
                db_show_seat.reservation_id = moved.reservation_id
                db_show_seat.reserved_until = moved.reserved_until
                transitioned.append(moved)

            await self.session.flush()
            return transitioned

    @Logger.io
    async def extend_hold(self, *, reservation_id: UUID, reserved_until: datetime) -> int:
        stmt = (
            sql_update(ShowSeatModel)
            .where(
                ShowSeatModel.reservation_id == reservation_id,
                ShowSeatModel.status == SeatStatus.RESERVED.value,
            )
            .values(reserved_until=reserved_until)
            .execution_options(synchronize_session='fetch')
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0

    @Logger.io
    async def event_has_seats(self, *, event_id: UUID) -> bool:
        stmt = select(ShowSeatModel.id).where(ShowSeatModel.event_id == event_id).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    @Logger.io(truncate_content=True)
    async def get_or_create_seats(self, *, seats: List[Seat]) -> List[Seat]:
        if not seats:
            return []

        keys = [(seat.section, seat.row_name, seat.seat_number) for seat in seats]
        stmt = select(SeatModel).where(
            tuple_(SeatModel.section, SeatModel.row_name, SeatModel.seat_number).in_(keys)
        )
        result = await self.session.execute(stmt)
        existing = {
            (row.section, row.row_name, row.seat_number): row for row in result.scalars().all()
        }

        resolved: List[Seat] = []
        reused = 0
        for seat, key in zip(seats, keys, strict=True):
            db_seat = existing.get(key)
            if db_seat is not None:
                # Reference seats are shared by every event; a map may not redefine one
                if (db_seat.seat_type, db_seat.handicap_access) != (
                    seat.seat_type,
                    seat.handicap_access,
                ):
                    raise ConflictError(
                        f'Seat {seat.section} {seat.row_name}-{seat.seat_number} is already '
                        f'registered as {db_seat.seat_type} '
                        f'(handicap_access={db_seat.handicap_access})'
                    )
                reused += 1
            else:
                db_seat = SeatModel(
                    id=seat.id,
                    section=seat.section,
                    row_name=seat.row_name,
                    seat_number=seat.seat_number,
                    seat_type=seat.seat_type,
                    handicap_access=seat.handicap_access,
                )
                self.session.add(db_seat)
                existing[key] = db_seat
            resolved.append(self._seat_to_entity(db_seat))

        await self.session.flush()
        if reused:
            Logger.base.info(f'[SEAT] Reused {reused} reference seat(s)')
        return resolved

    @Logger.io(truncate_content=True)
    async def create_show_seats(self, *, show_seats: List[ShowSeat]) -> List[ShowSeat]:
        self.session.add_all(
            [
                ShowSeatModel(
                    id=show_seat.id,
                    event_id=show_seat.event_id,
                    seat_id=show_seat.seat.id,
                    status=show_seat.status.value,
                    price_in_cents=show_seat.price_in_cents,
                    reserved_until=show_seat.reserved_until,
                    reservation_id=show_seat.reservation_id,
                )
                for show_seat in show_seats
            ]
        )
        await self.session.flush()
        return show_seats
