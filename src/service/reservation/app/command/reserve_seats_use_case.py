"""
Reserve Seats Use Case - grant an exclusive, time-boxed hold on a set of seats
"""

from typing import Callable, List, Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.clock.clock import IClock
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.state.event_lock import EventLockRegistry
from src.service.reservation.app.command.hold_release import reclaim_lapsed_holds, release_hold
from src.service.reservation.app.dto import ReserveSeatsResult
from src.service.reservation.app.storage_fault import translate_storage_errors
from src.service.reservation.domain.entity.reservation_audit_entity import ReservationAuditEntry
from src.service.reservation.domain.entity.reservation_entity import Reservation
from src.service.reservation.domain.enum.reservation_error_code import ReservationErrorCode
from src.service.reservation.domain.enum.reservation_event_type import ReservationEventType
from src.service.reservation.domain.enum.seat_status import SeatStatus
from src.service.reservation.domain.hold_policy import HoldPolicy
from src.service.reservation.domain.reservation_error import ReservationError


class ReserveSeatsUseCase:
    """
    Reserve Seats Use Case

    Flow (single transaction under the event lock):
    1. Validate input before touching storage (non-empty, within max seats, no duplicates)
    2. Reject a second live hold for the same session and event; close its lapsed ones
    3. Lock the requested seat rows; missing ids -> SEATS_NOT_FOUND
    4. Reclaim lapsed holds on those seats (lazy expiration)
    5. Every seat must be available, otherwise SEATS_UNAVAILABLE and nothing changes
    6. Create the reservation, move seats available -> reserved, write the audit entry

    Dependencies:
    - uow_factory: fresh unit of work per call
    - event_locks: single writer per event
    - clock: deadline arithmetic
    - hold_policy: max seats and hold duration
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        event_locks: EventLockRegistry,
        clock: IClock,
        hold_policy: HoldPolicy,
    ) -> None:
        self.uow_factory = uow_factory
        self.event_locks = event_locks
        self.clock = clock
        self.hold_policy = hold_policy
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
        event_locks: EventLockRegistry = Depends(Provide[Container.event_lock_registry]),
        clock: IClock = Depends(Provide[Container.clock]),
        hold_policy: HoldPolicy = Depends(Provide[Container.hold_policy]),
    ) -> Self:
        return cls(
            uow_factory=uow_factory,
            event_locks=event_locks,
            clock=clock,
            hold_policy=hold_policy,
        )

    @Logger.io
    async def execute(
        self,
        *,
        event_id: UUID,
        show_seat_ids: List[UUID],
        session_id: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> ReserveSeatsResult:
        self._validate_request(show_seat_ids=show_seat_ids, session_id=session_id)

        with self.tracer.start_as_current_span(
            'use_case.reserve_seats',
            attributes={
                'event.id': str(event_id),
                'seat.count': len(show_seat_ids),
            },
        ):
            with translate_storage_errors(
                'reserve',
                event_id=event_id,
                seat_ids=[str(seat_id) for seat_id in show_seat_ids],
                session_id=session_id,
            ):
                async with self.event_locks.hold(event_id=event_id):
                    async with self.uow_factory() as uow:
                        result = await self._reserve_in_transaction(
                            uow,
                            event_id=event_id,
                            show_seat_ids=show_seat_ids,
                            session_id=session_id,
                            email=email,
                            phone=phone,
                        )
                        await uow.commit()

        Logger.base.info(
            f'[RESERVE] Reservation {result.reservation_id} holds {result.seat_count} seat(s) '
            f'on event {event_id} until {result.expires_at.isoformat()}'
        )
        return result

    async def _reserve_in_transaction(
        self,
        uow: AbstractUnitOfWork,
        *,
        event_id: UUID,
        show_seat_ids: List[UUID],
        session_id: str,
        email: Optional[str],
        phone: Optional[str],
    ) -> ReserveSeatsResult:
        now = self.clock.now()

        active = await uow.reservation_repo.list_active_for_session(
            event_id=event_id, session_id=session_id, for_update=True
        )
        if any(reservation.is_live(now) for reservation in active):
            raise ReservationError(
                ReservationErrorCode.DUPLICATE_RESERVATION,
                'You already have an active reservation for this event',
            )
        # A lapsed hold the sweep has not closed yet still occupies the session's active slot
        for lapsed in active:
            await release_hold(
                uow, reservation=lapsed, now=now, event_type=ReservationEventType.EXPIRED
            )

        seats = await uow.show_seat_repo.get_for_update(
            event_id=event_id, show_seat_ids=show_seat_ids
        )
        if len(seats) != len(show_seat_ids):
            found = {seat.id for seat in seats}
            missing = [str(seat_id) for seat_id in show_seat_ids if seat_id not in found]
            raise ReservationError(
                ReservationErrorCode.SEATS_NOT_FOUND, f'Seats not found: {", ".join(missing)}'
            )

        if any(seat.is_hold_expired(now) for seat in seats):
            expired_ids = await reclaim_lapsed_holds(uow, seats=seats, now=now)
            if expired_ids:
                Logger.base.info(f'[RESERVE] Reclaimed lapsed holds: {expired_ids}')
            # Re-read after reclaim; stored status is authoritative from here on
            seats = await uow.show_seat_repo.get_for_update(
                event_id=event_id, show_seat_ids=show_seat_ids
            )

        unavailable = [seat for seat in seats if seat.status != SeatStatus.AVAILABLE]
        if unavailable:
            raise ReservationError(
                ReservationErrorCode.SEATS_UNAVAILABLE,
                f'{len(unavailable)} of the selected seats are no longer available',
            )

        reservation = Reservation.create(
            event_id=event_id,
            session_id=session_id,
            show_seat_ids=show_seat_ids,
            now=now,
            hold_seconds=self.hold_policy.initial_hold_seconds,
            email=email,
            phone=phone,
        )
        try:
            await uow.reservation_repo.create(reservation=reservation)
        except ConflictError as e:
            raise ReservationError(
                ReservationErrorCode.DUPLICATE_RESERVATION,
                'You already have an active reservation for this event',
            ) from e

        try:
            held = await uow.show_seat_repo.transition_seats(
                event_id=event_id,
                show_seat_ids=show_seat_ids,
                from_status=SeatStatus.AVAILABLE,
                to_status=SeatStatus.RESERVED,
                reservation_id=reservation.id,
                reserved_until=reservation.expires_at,
            )
        except NotFoundError as e:
            raise ReservationError(ReservationErrorCode.SEATS_NOT_FOUND, e.message) from e
        except ConflictError as e:
            raise ReservationError(ReservationErrorCode.SEATS_UNAVAILABLE, e.message) from e

        await uow.audit_repo.record(
            entry=ReservationAuditEntry.record(
                reservation_id=reservation.id,
                event_id=event_id,
                event_type=ReservationEventType.RESERVED,
                session_id=session_id,
                show_seat_ids=show_seat_ids,
                now=now,
            )
        )

        return ReserveSeatsResult(
            reservation_id=reservation.id,
            event_id=event_id,
            token=reservation.token,
            expires_at=reservation.expires_at,
            seat_count=len(held),
            total_amount_in_cents=sum(seat.price_in_cents for seat in held),
            show_seat_ids=[seat.id for seat in held],
        )

    def _validate_request(self, *, show_seat_ids: List[UUID], session_id: str) -> None:
        if not session_id:
            raise ReservationError(ReservationErrorCode.INVALID_INPUT, 'Session is required')
        if not show_seat_ids:
            raise ReservationError(
                ReservationErrorCode.INVALID_INPUT, 'At least one seat must be selected'
            )
        if len(show_seat_ids) > self.hold_policy.max_seats:
            raise ReservationError(
                ReservationErrorCode.TOO_MANY_SEATS,
                f'Cannot reserve more than {self.hold_policy.max_seats} seats at once',
            )
        if len(set(show_seat_ids)) != len(show_seat_ids):
            raise ReservationError(
                ReservationErrorCode.INVALID_INPUT, 'Seat ids must not repeat'
            )
