"""
Reservation DTOs

Results returned by the reservation command/query use cases.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

import attrs

from src.service.reservation.domain.entity.seat_entity import ShowSeat
from src.service.reservation.domain.enum.seat_status import SeatStatus


@attrs.define
class ReserveSeatsResult:
    reservation_id: UUID
    event_id: UUID
    token: str = attrs.field(repr=False)
    expires_at: datetime
    seat_count: int
    total_amount_in_cents: int
    show_seat_ids: List[UUID] = attrs.field(factory=list)


@attrs.define
class ExtendReservationResult:
    reservation_id: UUID
    expires_at: datetime
    extension_count: int
    extensions_remaining: int
    message: str


@attrs.define
class ReleaseReservationResult:
    reservation_id: UUID
    seats_released: int


@attrs.define
class CommitReservationResult:
    reservation_id: UUID
    event_id: UUID
    seats_sold: int
    total_amount_in_cents: int
    show_seat_ids: List[UUID] = attrs.field(factory=list)


@attrs.define
class ReservationSeatView:
    show_seat_id: UUID
    section: str
    row_name: str
    seat_number: str
    seat_type: str
    handicap_access: bool
    price_in_cents: int
    status: SeatStatus

    @classmethod
    def from_show_seat(cls, show_seat: ShowSeat, *, now: datetime) -> 'ReservationSeatView':
        return cls(
            show_seat_id=show_seat.id,
            section=show_seat.seat.section,
            row_name=show_seat.seat.row_name,
            seat_number=show_seat.seat.seat_number,
            seat_type=show_seat.seat.seat_type,
            handicap_access=show_seat.seat.handicap_access,
            price_in_cents=show_seat.price_in_cents,
            status=show_seat.logical_status(now),
        )


@attrs.define
class CheckReservationResult:
    reservation_id: UUID
    event_id: UUID
    token: str = attrs.field(repr=False)
    email: Optional[str] = attrs.field(repr=False)
    phone: Optional[str] = attrs.field(repr=False)
    created_at: datetime
    expires_at: datetime
    is_active: bool
    is_expired: bool
    time_remaining_seconds: int
    extension_count: int
    extensions_remaining: int
    seats: List[ReservationSeatView] = attrs.field(factory=list)

    @property
    def seat_count(self) -> int:
        return len(self.seats)

    @property
    def total_amount_in_cents(self) -> int:
        return sum(seat.price_in_cents for seat in self.seats)


@attrs.define
class ExpireReservationsResult:
    total_reservations_expired: int = 0
    total_seats_released: int = 0
    reservation_ids: List[UUID] = attrs.field(factory=list)
