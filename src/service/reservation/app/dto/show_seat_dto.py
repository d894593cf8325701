"""
Show seat DTOs

Inputs and results for seat map listing and initialization.
"""

from typing import List, Optional
from uuid import UUID

import attrs

from src.service.reservation.app.dto.reservation_dto import ReservationSeatView


@attrs.define
class SectionStats:
    section: str
    section_type: str
    total: int
    available: int


@attrs.define
class ShowSeatListing:
    event_id: UUID
    seats: List[ReservationSeatView] = attrs.field(factory=list)
    sections: List[SectionStats] = attrs.field(factory=list)

    @property
    def total_available(self) -> int:
        return sum(section.available for section in self.sections)


@attrs.define(frozen=True)
class SeatSpec:
    """One seat of a seat map to initialize for an event"""

    section: str
    row_name: str
    seat_number: str
    price_in_cents: int
    seat_type: str = 'standard'
    handicap_access: bool = False


@attrs.define
class InitializeShowSeatsResult:
    event_id: UUID
    seats_created: int
    show_seat_ids: List[UUID] = attrs.field(factory=list)


@attrs.define
class SuggestSeatsResult:
    success: bool
    ideal_match: bool
    available_count: int
    message: str
    seats: List[ReservationSeatView] = attrs.field(factory=list)
    section: Optional[str] = None
    row_name: Optional[str] = None

    @property
    def total_amount_in_cents(self) -> int:
        return sum(seat.price_in_cents for seat in self.seats)
