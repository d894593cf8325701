"""
Conftest for integration tests - real repositories on a per-test SQLite file.

Use cases are built by hand against the test database; the per-event lock registry is shared
so concurrent calls inside one test serialize the way they do in the service.
"""

from pathlib import Path
from typing import Awaitable, Callable, Dict, List, Optional
from uuid import UUID

import pytest
import pytest_asyncio

from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.platform.state.event_lock import EventLockRegistry
from src.service.reservation.app.command.commit_reservation_use_case import (
    CommitReservationUseCase,
)
from src.service.reservation.app.command.expire_reservations_use_case import (
    ExpireReservationsUseCase,
)
from src.service.reservation.app.command.extend_reservation_use_case import (
    ExtendReservationUseCase,
)
from src.service.reservation.app.command.initialize_show_seats_use_case import (
    InitializeShowSeatsUseCase,
)
from src.service.reservation.app.command.release_reservation_use_case import (
    ReleaseReservationUseCase,
)
from src.service.reservation.app.command.reserve_seats_use_case import ReserveSeatsUseCase
from src.service.reservation.app.dto import SeatSpec
from src.service.reservation.app.query.check_reservation_use_case import CheckReservationUseCase
from src.service.reservation.app.query.list_show_seats_use_case import ListShowSeatsUseCase
from src.service.reservation.app.query.suggest_seats_use_case import SuggestSeatsUseCase
from src.service.reservation.domain.hold_policy import HoldPolicy
from src.service.reservation.domain.seat_suggestion_domain import SeatSuggestionEngine


# Small venue: a 10-seat center row, a 4-seat left row and two accessible seats at the back
VENUE_MAP: List[SeatSpec] = (
    [SeatSpec('Center Orchestra', 'A', str(n), 6500) for n in range(1, 11)]
    + [SeatSpec('Left Orchestra', 'B', str(n), 4500) for n in range(1, 5)]
    + [
        SeatSpec('Right Balcony', 'C', str(n), 3000, seat_type='wheelchair', handicap_access=True)
        for n in range(1, 3)
    ]
)


@pytest_asyncio.fixture
async def database(tmp_path: Path):
    db = Database(url=f'sqlite+aiosqlite:///{tmp_path / "reservation.db"}')
    await db.create_tables()
    yield db
    await db.dispose()


@pytest.fixture
def uow_factory(database: Database) -> Callable[[], SqlAlchemyUnitOfWork]:
    return lambda: SqlAlchemyUnitOfWork(session_factory=database.session)


@pytest.fixture
def event_locks() -> EventLockRegistry:
    return EventLockRegistry()


@pytest.fixture
def hold_policy() -> HoldPolicy:
    return HoldPolicy()


@pytest.fixture
def initialize_use_case(uow_factory, event_locks) -> InitializeShowSeatsUseCase:
    return InitializeShowSeatsUseCase(uow_factory=uow_factory, event_locks=event_locks)


@pytest.fixture
def reserve_use_case(uow_factory, event_locks, clock, hold_policy) -> ReserveSeatsUseCase:
    return ReserveSeatsUseCase(
        uow_factory=uow_factory, event_locks=event_locks, clock=clock, hold_policy=hold_policy
    )


@pytest.fixture
def extend_use_case(uow_factory, event_locks, clock, hold_policy) -> ExtendReservationUseCase:
    return ExtendReservationUseCase(
        uow_factory=uow_factory, event_locks=event_locks, clock=clock, hold_policy=hold_policy
    )


@pytest.fixture
def release_use_case(uow_factory, event_locks, clock) -> ReleaseReservationUseCase:
    return ReleaseReservationUseCase(uow_factory=uow_factory, event_locks=event_locks, clock=clock)


@pytest.fixture
def commit_use_case(uow_factory, event_locks, clock) -> CommitReservationUseCase:
    return CommitReservationUseCase(uow_factory=uow_factory, event_locks=event_locks, clock=clock)


@pytest.fixture
def expire_use_case(uow_factory, event_locks, clock) -> ExpireReservationsUseCase:
    return ExpireReservationsUseCase(uow_factory=uow_factory, event_locks=event_locks, clock=clock)


@pytest.fixture
def check_use_case(uow_factory, clock, hold_policy) -> CheckReservationUseCase:
    return CheckReservationUseCase(uow_factory=uow_factory, clock=clock, hold_policy=hold_policy)


@pytest.fixture
def list_seats_use_case(uow_factory, clock) -> ListShowSeatsUseCase:
    return ListShowSeatsUseCase(uow_factory=uow_factory, clock=clock)


@pytest.fixture
def suggest_use_case(uow_factory, clock, hold_policy) -> SuggestSeatsUseCase:
    return SuggestSeatsUseCase(
        uow_factory=uow_factory,
        clock=clock,
        hold_policy=hold_policy,
        suggestion_engine=SeatSuggestionEngine(),
    )


@pytest.fixture
def seed_event(
    initialize_use_case: InitializeShowSeatsUseCase,
) -> Callable[..., Awaitable[Dict[str, UUID]]]:
    """Initialize an event and return its show seat ids keyed by 'row-seat', e.g. 'A-5'."""

    async def _seed(event_id: UUID, seats: Optional[List[SeatSpec]] = None) -> Dict[str, UUID]:
        seat_map = seats or VENUE_MAP
        result = await initialize_use_case.execute(event_id=event_id, seats=seat_map)
        return {
            f'{spec.row_name}-{spec.seat_number}': show_seat_id
            for spec, show_seat_id in zip(seat_map, result.show_seat_ids, strict=True)
        }

    return _seed


@pytest_asyncio.fixture
async def seat_ids(seed_event, event_id: UUID) -> Dict[str, UUID]:
    return await seed_event(event_id)

