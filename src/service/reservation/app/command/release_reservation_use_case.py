"""
Release Reservation Use Case - shopper gives the hold back before checkout
"""

from typing import Callable, Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.clock.clock import IClock
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.platform.state.event_lock import EventLockRegistry
from src.service.reservation.app.command.hold_release import release_hold
from src.service.reservation.app.dto import ReleaseReservationResult
from src.service.reservation.app.storage_fault import translate_storage_errors
from src.service.reservation.domain.entity.reservation_entity import Reservation
from src.service.reservation.domain.enum.reservation_error_code import ReservationErrorCode
from src.service.reservation.domain.enum.reservation_event_type import ReservationEventType
from src.service.reservation.domain.reservation_error import ReservationError


class ReleaseReservationUseCase:
    """
    Release by token or reservation id.

    Idempotent: the first call frees the seats still reserved under the reservation and
    deactivates it, any later call gets ALREADY_INACTIVE and frees nothing.
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
        self,
        *,
        session_id: str,
        token: Optional[str] = None,
        reservation_id: Optional[UUID] = None,
    ) -> ReleaseReservationResult:
        if not token and reservation_id is None:
            raise ReservationError(
                ReservationErrorCode.INVALID_INPUT, 'Either token or reservation_id is required'
            )

        with self.tracer.start_as_current_span(
            'use_case.release_reservation',
            attributes={'reservation.by_token': bool(token)},
        ):
            with translate_storage_errors(
                'release', reservation_id=reservation_id, session_id=session_id
            ):
                async with self.uow_factory() as uow:
                    located = await self._load(uow, token=token, reservation_id=reservation_id)

                async with self.event_locks.hold(event_id=located.event_id):
                    async with self.uow_factory() as uow:
                        reservation = await self._load(
                            uow, reservation_id=located.id, for_update=True
                        )
                        reservation.validate_owner(session_id)
                        if not reservation.is_active:
                            raise ReservationError(
                                ReservationErrorCode.ALREADY_INACTIVE,
                                'Reservation is already inactive',
                            )
                        seats_released = await release_hold(
                            uow,
                            reservation=reservation,
                            now=self.clock.now(),
                            event_type=ReservationEventType.RELEASED,
                            session_id=session_id,
                        )
                        await uow.commit()

        Logger.base.info(f'[RELEASE] Reservation {located.id} released {seats_released} seat(s)')
        return ReleaseReservationResult(reservation_id=located.id, seats_released=seats_released)

    @staticmethod
    async def _load(
        uow: AbstractUnitOfWork,
        *,
        token: Optional[str] = None,
        reservation_id: Optional[UUID] = None,
        for_update: bool = False,
    ) -> Reservation:
        if reservation_id is not None:
            reservation = await uow.reservation_repo.get_by_id(
                reservation_id=reservation_id, for_update=for_update
            )
        else:
            reservation = await uow.reservation_repo.get_by_token(
                token=token or '', for_update=for_update
            )
        if reservation is None:
            raise ReservationError(ReservationErrorCode.NOT_FOUND, 'Reservation not found')
        return reservation
