"""
Expire Reservations Use Case - periodic consistency sweep of the expiration reaper
"""

from typing import Callable, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.clock.clock import IClock
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io import Logger
from src.platform.state.event_lock import EventLockRegistry
from src.service.reservation.app.command.hold_release import release_hold
from src.service.reservation.app.dto import ExpireReservationsResult
from src.service.reservation.app.storage_fault import translate_storage_errors
from src.service.reservation.domain.entity.reservation_entity import Reservation
from src.service.reservation.domain.enum.reservation_event_type import ReservationEventType


class ExpireReservationsUseCase:
    """
    Sweep active reservations whose deadline has passed.

    Each one goes through the same release transaction as an explicit Release, in its own
    transaction under its event lock, so one failing reservation does not hold back the rest.
    Correctness never depends on this sweep: reads and Reserve already treat lapsed holds as
    available. The sweep brings stored status in line with that logical state.
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

    @Logger.io(truncate_content=True)
    async def execute(self, *, limit: Optional[int] = None) -> ExpireReservationsResult:
        result = ExpireReservationsResult()

        with self.tracer.start_as_current_span('use_case.expire_reservations') as span:
            with translate_storage_errors('reaper'):
                async with self.uow_factory() as uow:
                    candidates = await uow.reservation_repo.list_expired_active(
                        now=self.clock.now(), limit=limit
                    )

            for candidate in candidates:
                try:
                    released = await self._expire_one(candidate)
                except CustomBaseError as e:
                    # Storage faults were already logged with context; move on to the next one
                    Logger.base.warning(
                        f'[REAPER] Skipped reservation {candidate.id}: {e.message}'
                    )
                    continue
                if released is None:
                    continue
                result.total_reservations_expired += 1
                result.total_seats_released += released
                result.reservation_ids.append(candidate.id)

            span.set_attribute('reservation.expired', result.total_reservations_expired)
            span.set_attribute('seat.released', result.total_seats_released)

        if result.total_reservations_expired:
            Logger.base.info(
                f'[REAPER] Expired {result.total_reservations_expired} reservation(s), '
                f'released {result.total_seats_released} seat(s)'
            )
        return result

    async def _expire_one(self, candidate: Reservation) -> Optional[int]:
        """Returns seats released, or None when the reservation no longer needs expiring."""
        with translate_storage_errors(
            'reaper', reservation_id=candidate.id, event_id=candidate.event_id
        ):
            async with self.event_locks.hold(event_id=candidate.event_id):
                async with self.uow_factory() as uow:
                    now = self.clock.now()
                    reservation = await uow.reservation_repo.get_by_id(
                        reservation_id=candidate.id, for_update=True
                    )
                    # Released, committed or extended since the candidate list was read
                    if reservation is None or reservation.is_live(now) or not reservation.is_active:
                        return None
                    released = await release_hold(
                        uow,
                        reservation=reservation,
                        now=now,
                        event_type=ReservationEventType.EXPIRED,
                    )
                    await uow.commit()
                    return released
