from typing import Callable, Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.clock.clock import IClock
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.dto import CheckReservationResult, ReservationSeatView
from src.service.reservation.app.storage_fault import translate_storage_errors
from src.service.reservation.domain.enum.reservation_error_code import ReservationErrorCode
from src.service.reservation.domain.hold_policy import HoldPolicy
from src.service.reservation.domain.reservation_error import ReservationError


class CheckReservationUseCase:
    """Read a reservation by token or id; the token alone proves possession, so no session check."""

    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        clock: IClock,
        hold_policy: HoldPolicy,
    ) -> None:
        self.uow_factory = uow_factory
        self.clock = clock
        self.hold_policy = hold_policy

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
        clock: IClock = Depends(Provide[Container.clock]),
        hold_policy: HoldPolicy = Depends(Provide[Container.hold_policy]),
    ) -> Self:
        return cls(uow_factory=uow_factory, clock=clock, hold_policy=hold_policy)

    @Logger.io
    async def execute(
        self, *, token: Optional[str] = None, reservation_id: Optional[UUID] = None
    ) -> CheckReservationResult:
        if not token and reservation_id is None:
            raise ReservationError(
                ReservationErrorCode.INVALID_INPUT, 'Either token or reservation_id is required'
            )

        with translate_storage_errors('check', reservation_id=reservation_id):
            async with self.uow_factory() as uow:
                if reservation_id is not None:
                    reservation = await uow.reservation_repo.get_by_id(
                        reservation_id=reservation_id
                    )
                else:
                    reservation = await uow.reservation_repo.get_by_token(token=token or '')
                if reservation is None:
                    raise ReservationError(
                        ReservationErrorCode.NOT_FOUND, 'Reservation not found'
                    )
                seats = await uow.show_seat_repo.list_by_reservation(
                    reservation_id=reservation.id
                )

        now = self.clock.now()
        return CheckReservationResult(
            reservation_id=reservation.id,
            event_id=reservation.event_id,
            token=reservation.token,
            email=reservation.email,
            phone=reservation.phone,
            created_at=reservation.created_at,
            expires_at=reservation.expires_at,
            is_active=reservation.is_active,
            is_expired=reservation.is_expired(now),
            time_remaining_seconds=reservation.time_remaining_seconds(now),
            extension_count=reservation.extension_count,
            extensions_remaining=reservation.extensions_remaining(
                self.hold_policy.max_extensions
            ),
            seats=[ReservationSeatView.from_show_seat(seat, now=now) for seat in seats],
        )
