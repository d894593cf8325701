from typing import Callable, List, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils.compat import uuid7

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.platform.state.event_lock import EventLockRegistry
from src.service.reservation.app.dto import InitializeShowSeatsResult, SeatSpec
from src.service.reservation.app.storage_fault import translate_storage_errors
from src.service.reservation.domain.entity.seat_entity import Seat, ShowSeat
from src.service.reservation.domain.enum.reservation_error_code import ReservationErrorCode
from src.service.reservation.domain.enum.seat_status import SeatStatus
from src.service.reservation.domain.reservation_error import ReservationError


class InitializeShowSeatsUseCase:
    """
    Create the per-event seat inventory from a seat map.

    Reference seats are shared across events and reused by (section, row, seat number);
    every seat of the map gets a fresh ShowSeat in `available`.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        event_locks: EventLockRegistry,
    ) -> None:
        self.uow_factory = uow_factory
        self.event_locks = event_locks
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
        event_locks: EventLockRegistry = Depends(Provide[Container.event_lock_registry]),
    ) -> Self:
        return cls(uow_factory=uow_factory, event_locks=event_locks)

    @Logger.io(truncate_content=True)
    async def execute(self, *, event_id: UUID, seats: List[SeatSpec]) -> InitializeShowSeatsResult:
        self._validate_seat_map(seats)

        with self.tracer.start_as_current_span(
            'use_case.initialize_show_seats',
            attributes={'event.id': str(event_id), 'seat.count': len(seats)},
        ):
            with translate_storage_errors('init_seats', event_id=event_id):
                async with self.event_locks.hold(event_id=event_id):
                    async with self.uow_factory() as uow:
                        if await uow.show_seat_repo.event_has_seats(event_id=event_id):
                            raise ConflictError(f'Event {event_id} already has seats')

                        reference_seats = await uow.show_seat_repo.get_or_create_seats(
                            seats=[
                                Seat(
                                    id=uuid7(),
                                    section=spec.section,
                                    row_name=spec.row_name,
                                    seat_number=spec.seat_number,
                                    seat_type=spec.seat_type,
                                    handicap_access=spec.handicap_access,
                                )
                                for spec in seats
                            ]
                        )
                        show_seats = await uow.show_seat_repo.create_show_seats(
                            show_seats=[
                                ShowSeat(
                                    id=uuid7(),
                                    event_id=event_id,
                                    seat=seat,
                                    price_in_cents=spec.price_in_cents,
                                    status=SeatStatus.AVAILABLE,
                                )
                                for seat, spec in zip(reference_seats, seats, strict=True)
                            ]
                        )
                        await uow.commit()

        Logger.base.info(f'[INIT] Event {event_id} initialized with {len(show_seats)} seats')
        return InitializeShowSeatsResult(
            event_id=event_id,
            seats_created=len(show_seats),
            show_seat_ids=[show_seat.id for show_seat in show_seats],
        )

    @staticmethod
    def _validate_seat_map(seats: List[SeatSpec]) -> None:
        if not seats:
            raise ReservationError(
                ReservationErrorCode.INVALID_INPUT, 'Seat map must contain at least one seat'
            )
        seen: set[tuple[str, str, str]] = set()
        for spec in seats:
            if not spec.section or not spec.row_name or not spec.seat_number:
                raise ReservationError(
                    ReservationErrorCode.INVALID_INPUT,
                    'Every seat needs a section, row and seat number',
                )
            if spec.price_in_cents < 0:
                raise ReservationError(
                    ReservationErrorCode.INVALID_INPUT, 'Seat price cannot be negative'
                )
            key = (spec.section, spec.row_name, spec.seat_number)
            if key in seen:
                raise ReservationError(
                    ReservationErrorCode.INVALID_INPUT,
                    f'Duplicate seat {spec.section} {spec.row_name}-{spec.seat_number}',
                )
            seen.add(key)
