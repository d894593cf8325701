from typing import Callable, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.clock.clock import IClock
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.state.event_lock import EventLockRegistry
from src.service.reservation.app.dto import CommitReservationResult
from src.service.reservation.app.storage_fault import translate_storage_errors
from src.service.reservation.domain.entity.reservation_audit_entity import ReservationAuditEntry
from src.service.reservation.domain.enum.reservation_error_code import ReservationErrorCode
from src.service.reservation.domain.enum.reservation_event_type import ReservationEventType
from src.service.reservation.domain.enum.seat_status import SeatStatus
from src.service.reservation.domain.reservation_error import ReservationError


class CommitReservationUseCase:
    """
    Commit a paid reservation: its seats go reserved -> sold and the reservation closes.

    Invoked by the payment/order collaborator once funds are captured. This is the only path
    to `sold`; seats never jump from available. An inactive or expired reservation is refused,
    so a lapsed hold can never be sold after its seats were offered to someone else.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        event_locks: EventLockRegistry,
        clock: IClock,
    ) -> None:
        self.uow_factory = uow_factory
        self.event_locks = event_locks
        self.clock = clock
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
    ) -> Self:
        return cls(uow_factory=uow_factory, event_locks=event_locks, clock=clock)

    @Logger.io
    async def execute(
        self, *, token: str, session_id: Optional[str] = None
    ) -> CommitReservationResult:
        if not token:
            raise ReservationError(ReservationErrorCode.INVALID_INPUT, 'Token is required')

        with self.tracer.start_as_current_span('use_case.commit_reservation'):
            with translate_storage_errors('commit', session_id=session_id):
                async with self.uow_factory() as uow:
                    located = await uow.reservation_repo.get_by_token(token=token)
                if located is None:
                    raise ReservationError(
                        ReservationErrorCode.NOT_FOUND, 'Reservation not found'
                    )

                async with self.event_locks.hold(event_id=located.event_id):
                    async with self.uow_factory() as uow:
                        result = await self._commit_in_transaction(
                            uow, token=token, session_id=session_id
                        )
                        await uow.commit()

        Logger.base.info(
            f'[COMMIT] Reservation {result.reservation_id} sold {result.seats_sold} seat(s)'
        )
        return result

    async def _commit_in_transaction(
        self, uow: AbstractUnitOfWork, *, token: str, session_id: Optional[str]
    ) -> CommitReservationResult:
        now = self.clock.now()
        reservation = await uow.reservation_repo.get_by_token(token=token, for_update=True)
        if reservation is None:
            raise ReservationError(ReservationErrorCode.NOT_FOUND, 'Reservation not found')
        if session_id is not None:
            reservation.validate_owner(session_id)
        reservation.validate_live(now)

        seats = await uow.show_seat_repo.list_by_reservation(
            reservation_id=reservation.id, for_update=True
        )
        seat_ids = [seat.id for seat in seats]
        try:
            sold = await uow.show_seat_repo.transition_seats(
                event_id=reservation.event_id,
                show_seat_ids=seat_ids,
                from_status=SeatStatus.RESERVED,
                to_status=SeatStatus.SOLD,
                reservation_id=reservation.id,
            )
        except (NotFoundError, ConflictError) as e:
            raise ReservationError(ReservationErrorCode.SEATS_UNAVAILABLE, e.message) from e

        await uow.reservation_repo.update(reservation=reservation.deactivate(now=now))
        await uow.audit_repo.record(
            entry=ReservationAuditEntry.record(
                reservation_id=reservation.id,
                event_id=reservation.event_id,
                event_type=ReservationEventType.COMMITTED,
                session_id=reservation.session_id,
                show_seat_ids=seat_ids,
                now=now,
            )
        )
        return CommitReservationResult(
            reservation_id=reservation.id,
            event_id=reservation.event_id,
            seats_sold=len(sold),
            total_amount_in_cents=sum(seat.price_in_cents for seat in sold),
            show_seat_ids=seat_ids,
        )
