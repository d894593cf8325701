from datetime import datetime
import re
from typing import Optional
from uuid import UUID

import attrs

from src.platform.exception.exceptions import DomainError
from src.service.reservation.domain.enum.seat_status import ALLOWED_SEAT_TRANSITIONS, SeatStatus
from src.service.reservation.domain.enum.section_type import SectionType


_NUMERIC = re.compile(r'^\d+$')
_LETTERS = re.compile(r'^[A-Za-z]+$')


def parse_seat_number(seat_number: str) -> Optional[int]:
    """'12' -> 12; anything non-numeric cannot take part in a consecutive run."""
    value = (seat_number or '').strip()
    return int(value) if _NUMERIC.match(value) else None


def row_rank(row_name: str) -> Optional[int]:
    """
    Distance of a row from the stage, smaller is closer.

    Numeric rows use their value, letter rows a base-26 ordinal (A=1, Z=26, AA=27).
    Returns None when the row cannot be ranked.
    """
    value = (row_name or '').strip()
    if _NUMERIC.match(value):
        return int(value)
    if _LETTERS.match(value):
        rank = 0
        for char in value.upper():
            rank = rank * 26 + (ord(char) - ord('A') + 1)
        return rank
    return None


@attrs.define(frozen=True)
class Seat:
    """Physical seat, immutable reference data"""

    id: UUID
    section: str
    row_name: str
    seat_number: str
    seat_type: str = 'standard'
    handicap_access: bool = False

    @property
    def section_type(self) -> SectionType:
        return SectionType.from_section_name(self.section)

    @property
    def seat_number_value(self) -> Optional[int]:
        return parse_seat_number(self.seat_number)

    @property
    def row_rank(self) -> Optional[int]:
        return row_rank(self.row_name)


@attrs.define
class ShowSeat:
    """Per-event availability record of a Seat"""

    id: UUID
    event_id: UUID
    seat: Seat
    price_in_cents: int
    status: SeatStatus = SeatStatus.AVAILABLE
    reserved_until: Optional[datetime] = None
    reservation_id: Optional[UUID] = None

    def is_hold_expired(self, now: datetime) -> bool:
        return (
            self.status == SeatStatus.RESERVED
            and self.reserved_until is not None
            and self.reserved_until <= now
        )

    def logical_status(self, now: datetime) -> SeatStatus:
        """Stored status with lapsed holds read as available."""
        if self.is_hold_expired(now):
            return SeatStatus.AVAILABLE
        return self.status

    def is_logically_available(self, now: datetime) -> bool:
        return self.logical_status(now) == SeatStatus.AVAILABLE

    def transition(
        self,
        *,
        to_status: SeatStatus,
        reservation_id: Optional[UUID] = None,
        reserved_until: Optional[datetime] = None,
    ) -> 'ShowSeat':
        if (self.status, to_status) not in ALLOWED_SEAT_TRANSITIONS:
            raise DomainError(
                f'Seat {self.id} cannot move from {self.status} to {to_status}', 400
            )
        if to_status == SeatStatus.RESERVED:
            if reservation_id is None or reserved_until is None:
                raise DomainError('Reserved seats need an owner and a deadline', 400)
            return attrs.evolve(
                self,
                status=to_status,
                reservation_id=reservation_id,
                reserved_until=reserved_until,
            )
        if to_status == SeatStatus.AVAILABLE:
            return attrs.evolve(self, status=to_status, reservation_id=None, reserved_until=None)
        # Sold seats keep the reservation that bought them
        return attrs.evolve(self, status=to_status, reserved_until=None)
