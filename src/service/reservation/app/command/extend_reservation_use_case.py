from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.clock.clock import IClock
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.platform.state.event_lock import EventLockRegistry
from src.service.reservation.app.dto import ExtendReservationResult
from src.service.reservation.app.storage_fault import translate_storage_errors
from src.service.reservation.domain.entity.reservation_audit_entity import ReservationAuditEntry
from src.service.reservation.domain.entity.reservation_entity import Reservation
from src.service.reservation.domain.enum.reservation_error_code import ReservationErrorCode
from src.service.reservation.domain.enum.reservation_event_type import ReservationEventType
from src.service.reservation.domain.hold_policy import HoldPolicy
from src.service.reservation.domain.reservation_error import ReservationError


class ExtendReservationUseCase:
    """
    Extend a live reservation.

    The new deadline is `now + extension increment`, counted from the call time rather than
    added to the previous deadline. The seats' reserved_until follows the reservation.

    Checks, in order: NOT_FOUND, PERMISSION_DENIED, RESERVATION_INACTIVE,
    RESERVATION_EXPIRED, MAX_EXTENSIONS_REACHED.
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
    async def execute(self, *, token: str, session_id: str) -> ExtendReservationResult:
        if not token:
            raise ReservationError(ReservationErrorCode.INVALID_INPUT, 'Token is required')

        with self.tracer.start_as_current_span('use_case.extend_reservation'):
            with translate_storage_errors('extend', session_id=session_id):
                async with self.uow_factory() as uow:
                    located = await uow.reservation_repo.get_by_token(token=token)
                if located is None:
                    raise ReservationError(
                        ReservationErrorCode.NOT_FOUND, 'Reservation not found'
                    )

                async with self.event_locks.hold(event_id=located.event_id):
                    async with self.uow_factory() as uow:
                        reservation = await uow.reservation_repo.get_by_token(
                            token=token, for_update=True
                        )
                        if reservation is None:
                            raise ReservationError(
                                ReservationErrorCode.NOT_FOUND, 'Reservation not found'
                            )
                        extended = await self._extend_in_transaction(
                            uow, reservation=reservation, session_id=session_id
                        )
                        await uow.commit()

        remaining = extended.extensions_remaining(self.hold_policy.max_extensions)
        Logger.base.info(
            f'[EXTEND] Reservation {extended.id} extended to {extended.expires_at.isoformat()}, '
            f'{remaining} extension(s) remaining'
        )
        return ExtendReservationResult(
            reservation_id=extended.id,
            expires_at=extended.expires_at,
            extension_count=extended.extension_count,
            extensions_remaining=remaining,
            message=self._build_message(remaining),
        )

    async def _extend_in_transaction(
        self, uow: AbstractUnitOfWork, *, reservation: Reservation, session_id: str
    ) -> Reservation:
        now = self.clock.now()
        reservation.validate_owner(session_id)
        extended = reservation.extend(
            now=now,
            increment_seconds=self.hold_policy.extension_seconds,
            max_extensions=self.hold_policy.max_extensions,
        )
        await uow.reservation_repo.update(reservation=extended)
        await uow.show_seat_repo.extend_hold(
            reservation_id=extended.id, reserved_until=extended.expires_at
        )
        await uow.audit_repo.record(
            entry=ReservationAuditEntry.record(
                reservation_id=extended.id,
                event_id=extended.event_id,
                event_type=ReservationEventType.EXTENDED,
                session_id=session_id,
                show_seat_ids=extended.show_seat_ids,
                now=now,
                detail=f'extension {extended.extension_count}',
            )
        )
        return extended

    def _build_message(self, remaining: int) -> str:
        base = f'Reservation extended by {self.hold_policy.extension_minutes} minutes.'
        if remaining == 0:
            return f'{base} This was your last extension.'
        return f'{base} {remaining} extension(s) remaining.'
