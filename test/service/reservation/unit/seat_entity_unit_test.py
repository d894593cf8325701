from datetime import timedelta
from typing import Callable
from uuid import UUID

import pytest
from uuid_utils.compat import uuid7

from src.platform.clock.clock import FrozenClock
from src.platform.exception.exceptions import DomainError
from src.service.reservation.domain.entity.seat_entity import (
    ShowSeat,
    parse_seat_number,
    row_rank,
)
from src.service.reservation.domain.enum.seat_status import SeatStatus
from src.service.reservation.domain.enum.section_type import SectionType


@pytest.mark.unit
class TestSeatOrdering:
    @pytest.mark.parametrize(
        ('row_name', 'expected'),
        [('1', 1), ('12', 12), ('A', 1), ('z', 26), ('AA', 27), ('AB', 28), ('', None), ('B-2', None)],
    )
    def test_row_rank(self, row_name: str, expected: int | None) -> None:
        assert row_rank(row_name) == expected

    @pytest.mark.parametrize(('value', 'expected'), [('7', 7), (' 10 ', 10), ('7A', None), ('', None)])
    def test_parse_seat_number(self, value: str, expected: int | None) -> None:
        assert parse_seat_number(value) == expected

    @pytest.mark.parametrize(
        ('name', 'expected'),
        [
            ('Orchestra Center', SectionType.CENTER),
            ('CENTER BALCONY', SectionType.CENTER),
            ('Left Wing', SectionType.LEFT),
            ('mezzanine right', SectionType.RIGHT),
            ('Balcony', SectionType.UNKNOWN),
        ],
    )
    def test_section_type_detection(self, name: str, expected: SectionType) -> None:
        assert SectionType.from_section_name(name) == expected


@pytest.mark.unit
class TestShowSeatLogicalStatus:
    def test_lapsed_hold_reads_as_available(
        self,
        show_seat_factory: Callable[..., ShowSeat],
        event_id: UUID,
        clock: FrozenClock,
    ) -> None:
        # Given: a seat held until now + 1 minute
        seat = show_seat_factory(
            event_id,
            status=SeatStatus.RESERVED,
            reservation_id=uuid7(),
            reserved_until=clock.now() + timedelta(minutes=1),
        )
        assert seat.logical_status(clock.now()) == SeatStatus.RESERVED

        # When: the deadline passes without any sweep
        clock.advance(minutes=1)

        # Then
        assert seat.is_hold_expired(clock.now()) is True
        assert seat.logical_status(clock.now()) == SeatStatus.AVAILABLE
        assert seat.status == SeatStatus.RESERVED

    def test_sold_seat_never_reads_as_available(
        self, show_seat_factory: Callable[..., ShowSeat], event_id: UUID, clock: FrozenClock
    ) -> None:
        seat = show_seat_factory(event_id, status=SeatStatus.SOLD, reservation_id=uuid7())
        clock.advance(minutes=60)
        assert seat.logical_status(clock.now()) == SeatStatus.SOLD


@pytest.mark.unit
class TestShowSeatTransition:
    def test_reserve_then_sell_keeps_owner(
        self, show_seat_factory: Callable[..., ShowSeat], event_id: UUID, clock: FrozenClock
    ) -> None:
        owner = uuid7()
        seat = show_seat_factory(event_id)

        held = seat.transition(
            to_status=SeatStatus.RESERVED,
            reservation_id=owner,
            reserved_until=clock.now() + timedelta(minutes=10),
        )
        sold = held.transition(to_status=SeatStatus.SOLD, reservation_id=owner)

        assert sold.status == SeatStatus.SOLD
        assert sold.reservation_id == owner
        assert sold.reserved_until is None

    def test_release_clears_owner_and_deadline(
        self, show_seat_factory: Callable[..., ShowSeat], event_id: UUID, clock: FrozenClock
    ) -> None:
        seat = show_seat_factory(
            event_id,
            status=SeatStatus.RESERVED,
            reservation_id=uuid7(),
            reserved_until=clock.now(),
        )
        freed = seat.transition(to_status=SeatStatus.AVAILABLE)
        assert freed.reservation_id is None
        assert freed.reserved_until is None

    @pytest.mark.parametrize(
        ('from_status', 'to_status'),
        [
            (SeatStatus.AVAILABLE, SeatStatus.SOLD),
            (SeatStatus.SOLD, SeatStatus.AVAILABLE),
            (SeatStatus.SOLD, SeatStatus.RESERVED),
            (SeatStatus.AVAILABLE, SeatStatus.AVAILABLE),
        ],
    )
    def test_illegal_transitions_raise(
        self,
        show_seat_factory: Callable[..., ShowSeat],
        event_id: UUID,
        from_status: SeatStatus,
        to_status: SeatStatus,
    ) -> None:
        seat = show_seat_factory(event_id, status=from_status)
        with pytest.raises(DomainError):
            seat.transition(to_status=to_status, reservation_id=uuid7())
