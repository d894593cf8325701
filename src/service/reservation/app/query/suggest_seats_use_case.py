from typing import Callable, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.clock.clock import IClock
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.dto import ReservationSeatView, SuggestSeatsResult
from src.service.reservation.app.storage_fault import translate_storage_errors
from src.service.reservation.domain.enum.reservation_error_code import ReservationErrorCode
from src.service.reservation.domain.hold_policy import HoldPolicy
from src.service.reservation.domain.reservation_error import ReservationError
from src.service.reservation.domain.seat_suggestion_domain import (
    SeatSuggestionEngine,
    SeatSuggestionRequest,
)


class SuggestSeatsUseCase:
    """
    Suggest a block of seats without holding them.

    Only logically available seats are considered, so a lapsed but unswept hold is offered
    while a live hold never is. Nothing is locked or written.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        clock: IClock,
        hold_policy: HoldPolicy,
        suggestion_engine: SeatSuggestionEngine,
    ) -> None:
        self.uow_factory = uow_factory
        self.clock = clock
        self.hold_policy = hold_policy
        self.suggestion_engine = suggestion_engine
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
        clock: IClock = Depends(Provide[Container.clock]),
        hold_policy: HoldPolicy = Depends(Provide[Container.hold_policy]),
        suggestion_engine: SeatSuggestionEngine = Depends(Provide[Container.suggestion_engine]),
    ) -> Self:
        return cls(
            uow_factory=uow_factory,
            clock=clock,
            hold_policy=hold_policy,
            suggestion_engine=suggestion_engine,
        )

    @Logger.io(truncate_content=True)
    async def execute(
        self,
        *,
        event_id: UUID,
        count: int,
        prefer_center: bool = True,
        keep_together: bool = True,
        handicap_access: bool = False,
    ) -> SuggestSeatsResult:
        if count < 1:
            raise ReservationError(
                ReservationErrorCode.INVALID_INPUT, 'Seat count must be at least 1'
            )
        if count > self.hold_policy.max_seats:
            raise ReservationError(
                ReservationErrorCode.TOO_MANY_SEATS,
                f'Cannot suggest more than {self.hold_policy.max_seats} seats',
            )

        with self.tracer.start_as_current_span(
            'use_case.suggest_seats',
            attributes={'event.id': str(event_id), 'seat.count': count},
        ):
            with translate_storage_errors('suggest', event_id=event_id):
                async with self.uow_factory() as uow:
                    seats = await uow.show_seat_repo.get_seats(event_id=event_id)

            now = self.clock.now()
            available = [seat for seat in seats if seat.is_logically_available(now)]
            suggestion = self.suggestion_engine.suggest(
                SeatSuggestionRequest(
                    event_id=event_id,
                    count=count,
                    prefer_center=prefer_center,
                    keep_together=keep_together,
                    require_handicap_access=handicap_access,
                ),
                available,
            )

        first = suggestion.seats[0] if suggestion.seats else None
        return SuggestSeatsResult(
            success=suggestion.success,
            ideal_match=suggestion.ideal_match,
            available_count=suggestion.available_count,
            message=suggestion.message,
            seats=[ReservationSeatView.from_show_seat(seat, now=now) for seat in suggestion.seats],
            section=first.seat.section if first and suggestion.ideal_match else None,
            row_name=first.seat.row_name if first and suggestion.ideal_match else None,
        )
