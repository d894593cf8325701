"""
Conftest for pure unit tests - no database.

Provides an in-memory unit of work whose repositories are AsyncMock doubles.
"""

from typing import Any, Callable, List
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID

import pytest
from uuid_utils.compat import uuid7

from src.platform.state.event_lock import EventLockRegistry
from src.service.reservation.domain.entity.seat_entity import Seat, ShowSeat
from src.service.reservation.domain.enum.seat_status import SeatStatus
from src.service.reservation.domain.hold_policy import HoldPolicy


class FakeUnitOfWork:
    """Stands in for SqlAlchemyUnitOfWork; counts commits and rollbacks."""

    def __init__(self) -> None:
        self.show_seat_repo = AsyncMock()
        self.reservation_repo = AsyncMock()
        self.audit_repo = AsyncMock()
        self.commits = 0
        self.rollbacks = 0

    async def __aenter__(self) -> 'FakeUnitOfWork':
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.rollback()

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1


@pytest.fixture
def uow() -> FakeUnitOfWork:
    return FakeUnitOfWork()


@pytest.fixture
def uow_factory(uow: FakeUnitOfWork) -> Callable[[], FakeUnitOfWork]:
    # Every `async with uow_factory()` shares the same doubles so tests can assert across them
    return MagicMock(side_effect=lambda: uow)


@pytest.fixture
def event_locks() -> EventLockRegistry:
    return EventLockRegistry()


@pytest.fixture
def hold_policy() -> HoldPolicy:
    return HoldPolicy()


def make_show_seat(
    event_id: UUID,
    *,
    section: str = 'Center Orchestra',
    row_name: str = 'A',
    seat_number: str = '1',
    price_in_cents: int = 4500,
    status: SeatStatus = SeatStatus.AVAILABLE,
    handicap_access: bool = False,
    **kwargs: Any,
) -> ShowSeat:
    return ShowSeat(
        id=uuid7(),
        event_id=event_id,
        seat=Seat(
            id=uuid7(),
            section=section,
            row_name=row_name,
            seat_number=seat_number,
            handicap_access=handicap_access,
        ),
        price_in_cents=price_in_cents,
        status=status,
        **kwargs,
    )


def make_row(
    event_id: UUID, *, section: str, row_name: str, numbers: List[int], price_in_cents: int = 4500
) -> List[ShowSeat]:
    return [
        make_show_seat(
            event_id,
            section=section,
            row_name=row_name,
            seat_number=str(number),
            price_in_cents=price_in_cents,
        )
        for number in numbers
    ]


@pytest.fixture
def show_seat_factory() -> Callable[..., ShowSeat]:
    return make_show_seat


@pytest.fixture
def row_factory() -> Callable[..., List[ShowSeat]]:
    return make_row
