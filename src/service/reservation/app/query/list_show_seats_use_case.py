"""
List Show Seats Use Case

Seat map of an event with the lazy expiration rule applied: a hold whose deadline has passed
is reported as available even before the reaper sweeps it.
"""

from typing import Callable, Dict, Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.clock.clock import IClock
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.dto import ReservationSeatView, SectionStats, ShowSeatListing
from src.service.reservation.app.storage_fault import translate_storage_errors
from src.service.reservation.domain.enum.seat_status import SeatStatus
from src.service.reservation.domain.enum.section_type import SectionType


class ListShowSeatsUseCase:
    def __init__(self, *, uow_factory: Callable[[], AbstractUnitOfWork], clock: IClock) -> None:
        self.uow_factory = uow_factory
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
        clock: IClock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(uow_factory=uow_factory, clock=clock)

    @Logger.io(truncate_content=True)
    async def execute(
        self,
        *,
        event_id: UUID,
        section: Optional[str] = None,
        status: Optional[SeatStatus] = None,
        handicap_access: Optional[bool] = None,
    ) -> ShowSeatListing:
        """
        Args:
            event_id: Event to list
            section: Only this section
            status: Only seats whose logical status matches
            handicap_access: Only seats with (True) or without (False) handicap access

        Returns:
            Matching seats plus per-section totals over the whole event
        """
        with translate_storage_errors('list_seats', event_id=event_id):
            async with self.uow_factory() as uow:
                all_seats = await uow.show_seat_repo.get_seats(event_id=event_id)

        now = self.clock.now()
        stats: Dict[str, SectionStats] = {}
        for show_seat in all_seats:
            name = show_seat.seat.section
            section_stats = stats.setdefault(
                name,
                SectionStats(
                    section=name,
                    section_type=SectionType.from_section_name(name).value,
                    total=0,
                    available=0,
                ),
            )
            section_stats.total += 1
            if show_seat.is_logically_available(now):
                section_stats.available += 1

        views = [
            ReservationSeatView.from_show_seat(show_seat, now=now)
            for show_seat in all_seats
            if (section is None or show_seat.seat.section == section)
            and (handicap_access is None or show_seat.seat.handicap_access == handicap_access)
        ]
        if status is not None:
            views = [view for view in views if view.status == status]

        return ShowSeatListing(event_id=event_id, seats=views, sections=list(stats.values()))
