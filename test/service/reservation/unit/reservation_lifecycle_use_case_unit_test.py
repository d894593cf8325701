"""
Unit tests for Extend / Release / Commit / ExpireReservations use cases

Tests:
- Error precedence (NOT_FOUND, PERMISSION_DENIED, then state checks)
- Extend message wording and seat deadline following the reservation
- Release idempotency and the sweep skipping reservations that failed
"""

from datetime import timedelta
from typing import Callable, List
from uuid import UUID

import pytest
from uuid_utils.compat import uuid7

from src.platform.clock.clock import FrozenClock
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
from src.service.reservation.app.command.release_reservation_use_case import (
    ReleaseReservationUseCase,
)
from src.service.reservation.domain.entity.reservation_entity import Reservation
from src.service.reservation.domain.entity.seat_entity import ShowSeat
from src.service.reservation.domain.enum.reservation_error_code import ReservationErrorCode
from src.service.reservation.domain.enum.reservation_event_type import ReservationEventType
from src.service.reservation.domain.enum.seat_status import SeatStatus
from src.service.reservation.domain.hold_policy import HoldPolicy
from src.service.reservation.domain.reservation_error import ReservationError


@pytest.fixture
def reservation(clock: FrozenClock, event_id: UUID, session_id: str) -> Reservation:
    return Reservation.create(
        event_id=event_id,
        session_id=session_id,
        show_seat_ids=[uuid7(), uuid7()],
        now=clock.now(),
        hold_seconds=600,
    )


@pytest.fixture
def held_seats(
    reservation: Reservation, show_seat_factory: Callable[..., ShowSeat]
) -> List[ShowSeat]:
    return [
        show_seat_factory(
            reservation.event_id,
            seat_number=str(index + 1),
            status=SeatStatus.RESERVED,
            reservation_id=reservation.id,
            reserved_until=reservation.expires_at,
        )
        for index in range(2)
    ]


@pytest.mark.unit
class TestExtendReservation:
    @pytest.fixture
    def use_case(
        self,
        uow_factory: Callable,
        event_locks: EventLockRegistry,
        clock: FrozenClock,
        hold_policy: HoldPolicy,
    ) -> ExtendReservationUseCase:
        return ExtendReservationUseCase(
            uow_factory=uow_factory, event_locks=event_locks, clock=clock, hold_policy=hold_policy
        )

    @pytest.mark.asyncio
    async def test_extend_moves_reservation_and_seat_deadlines(
        self,
        use_case: ExtendReservationUseCase,
        uow,
        reservation: Reservation,
        clock: FrozenClock,
        session_id: str,
    ) -> None:
        # Given
        uow.reservation_repo.get_by_token.return_value = reservation
        clock.advance(minutes=7)

        # When
        result = await use_case.execute(token=reservation.token, session_id=session_id)

        # Then
        assert result.expires_at == clock.now() + timedelta(minutes=5)
        assert result.extensions_remaining == 2
        assert result.message == 'Reservation extended by 5 minutes. 2 extension(s) remaining.'
        uow.show_seat_repo.extend_hold.assert_awaited_once_with(
            reservation_id=reservation.id, reserved_until=result.expires_at
        )
        assert uow.audit_repo.record.await_args.kwargs['entry'].event_type == (
            ReservationEventType.EXTENDED
        )
        assert uow.commits == 1

    @pytest.mark.asyncio
    async def test_last_extension_message(
        self, use_case: ExtendReservationUseCase, uow, reservation: Reservation, session_id: str
    ) -> None:
        reservation.extension_count = 2
        uow.reservation_repo.get_by_token.return_value = reservation

        result = await use_case.execute(token=reservation.token, session_id=session_id)

        assert result.extensions_remaining == 0
        assert result.message.endswith('This was your last extension.')

    @pytest.mark.asyncio
    async def test_permission_checked_before_expiry(
        self,
        use_case: ExtendReservationUseCase,
        uow,
        reservation: Reservation,
        clock: FrozenClock,
        other_session_id: str,
    ) -> None:
        uow.reservation_repo.get_by_token.return_value = reservation
        clock.advance(minutes=30)

        with pytest.raises(ReservationError) as exc_info:
            await use_case.execute(token=reservation.token, session_id=other_session_id)

        assert exc_info.value.code == ReservationErrorCode.PERMISSION_DENIED
        uow.reservation_repo.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_token_is_not_found(
        self, use_case: ExtendReservationUseCase, uow, session_id: str
    ) -> None:
        uow.reservation_repo.get_by_token.return_value = None
        with pytest.raises(ReservationError) as exc_info:
            await use_case.execute(token='f' * 64, session_id=session_id)
        assert exc_info.value.code == ReservationErrorCode.NOT_FOUND


@pytest.mark.unit
class TestReleaseReservation:
    @pytest.fixture
    def use_case(
        self, uow_factory: Callable, event_locks: EventLockRegistry, clock: FrozenClock
    ) -> ReleaseReservationUseCase:
        return ReleaseReservationUseCase(
            uow_factory=uow_factory, event_locks=event_locks, clock=clock
        )

    @pytest.mark.asyncio
    async def test_release_frees_held_seats(
        self,
        use_case: ReleaseReservationUseCase,
        uow,
        reservation: Reservation,
        held_seats: List[ShowSeat],
        session_id: str,
    ) -> None:
        uow.reservation_repo.get_by_token.return_value = reservation
        uow.reservation_repo.get_by_id.return_value = reservation
        uow.show_seat_repo.list_by_reservation.return_value = held_seats

        result = await use_case.execute(session_id=session_id, token=reservation.token)

        assert result.seats_released == 2
        transition_kwargs = uow.show_seat_repo.transition_seats.await_args.kwargs
        assert transition_kwargs['to_status'] == SeatStatus.AVAILABLE
        assert transition_kwargs['show_seat_ids'] == [seat.id for seat in held_seats]
        updated = uow.reservation_repo.update.await_args.kwargs['reservation']
        assert updated.is_active is False
        assert uow.commits == 1

    @pytest.mark.asyncio
    async def test_second_release_is_already_inactive(
        self,
        use_case: ReleaseReservationUseCase,
        uow,
        reservation: Reservation,
        clock: FrozenClock,
        session_id: str,
    ) -> None:
        closed = reservation.deactivate(now=clock.now())
        uow.reservation_repo.get_by_id.return_value = closed

        with pytest.raises(ReservationError) as exc_info:
            await use_case.execute(session_id=session_id, reservation_id=closed.id)

        assert exc_info.value.code == ReservationErrorCode.ALREADY_INACTIVE
        uow.show_seat_repo.transition_seats.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_reservation_id_wins_over_token(
        self, use_case: ReleaseReservationUseCase, uow, reservation: Reservation, session_id: str
    ) -> None:
        uow.reservation_repo.get_by_id.return_value = reservation
        uow.show_seat_repo.list_by_reservation.return_value = []

        await use_case.execute(
            session_id=session_id, token='not-this-one', reservation_id=reservation.id
        )

        uow.reservation_repo.get_by_token.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_neither_token_nor_id_is_invalid(
        self, use_case: ReleaseReservationUseCase, session_id: str
    ) -> None:
        with pytest.raises(ReservationError) as exc_info:
            await use_case.execute(session_id=session_id)
        assert exc_info.value.code == ReservationErrorCode.INVALID_INPUT


@pytest.mark.unit
class TestCommitReservation:
    @pytest.fixture
    def use_case(
        self, uow_factory: Callable, event_locks: EventLockRegistry, clock: FrozenClock
    ) -> CommitReservationUseCase:
        return CommitReservationUseCase(
            uow_factory=uow_factory, event_locks=event_locks, clock=clock
        )

    @pytest.mark.asyncio
    async def test_commit_sells_reserved_seats(
        self,
        use_case: CommitReservationUseCase,
        uow,
        reservation: Reservation,
        held_seats: List[ShowSeat],
    ) -> None:
        uow.reservation_repo.get_by_token.return_value = reservation
        uow.show_seat_repo.list_by_reservation.return_value = held_seats
        uow.show_seat_repo.transition_seats.return_value = held_seats

        result = await use_case.execute(token=reservation.token)

        assert result.seats_sold == 2
        assert result.total_amount_in_cents == 9000
        transition_kwargs = uow.show_seat_repo.transition_seats.await_args.kwargs
        assert transition_kwargs['from_status'] == SeatStatus.RESERVED
        assert transition_kwargs['to_status'] == SeatStatus.SOLD
        assert uow.audit_repo.record.await_args.kwargs['entry'].event_type == (
            ReservationEventType.COMMITTED
        )

    @pytest.mark.asyncio
    async def test_expired_reservation_cannot_be_committed(
        self,
        use_case: CommitReservationUseCase,
        uow,
        reservation: Reservation,
        clock: FrozenClock,
    ) -> None:
        uow.reservation_repo.get_by_token.return_value = reservation
        clock.advance(minutes=10)

        with pytest.raises(ReservationError) as exc_info:
            await use_case.execute(token=reservation.token)

        assert exc_info.value.code == ReservationErrorCode.RESERVATION_EXPIRED
        uow.show_seat_repo.transition_seats.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_commit_with_foreign_session_is_denied(
        self,
        use_case: CommitReservationUseCase,
        uow,
        reservation: Reservation,
        other_session_id: str,
    ) -> None:
        uow.reservation_repo.get_by_token.return_value = reservation

        with pytest.raises(ReservationError) as exc_info:
            await use_case.execute(token=reservation.token, session_id=other_session_id)

        assert exc_info.value.code == ReservationErrorCode.PERMISSION_DENIED


@pytest.mark.unit
class TestExpireReservations:
    @pytest.fixture
    def use_case(
        self, uow_factory: Callable, event_locks: EventLockRegistry, clock: FrozenClock
    ) -> ExpireReservationsUseCase:
        return ExpireReservationsUseCase(
            uow_factory=uow_factory, event_locks=event_locks, clock=clock
        )

    @pytest.mark.asyncio
    async def test_sweep_expires_lapsed_reservation(
        self,
        use_case: ExpireReservationsUseCase,
        uow,
        reservation: Reservation,
        held_seats: List[ShowSeat],
        clock: FrozenClock,
    ) -> None:
        clock.advance(minutes=10)
        uow.reservation_repo.list_expired_active.return_value = [reservation]
        uow.reservation_repo.get_by_id.return_value = reservation
        uow.show_seat_repo.list_by_reservation.return_value = held_seats

        result = await use_case.execute()

        assert result.total_reservations_expired == 1
        assert result.total_seats_released == 2
        assert result.reservation_ids == [reservation.id]
        assert uow.audit_repo.record.await_args.kwargs['entry'].event_type == (
            ReservationEventType.EXPIRED
        )

    @pytest.mark.asyncio
    async def test_sweep_skips_reservation_extended_meanwhile(
        self,
        use_case: ExpireReservationsUseCase,
        uow,
        reservation: Reservation,
        clock: FrozenClock,
    ) -> None:
        # Given: listed as expired, but extended before its turn in the sweep
        uow.reservation_repo.list_expired_active.return_value = [reservation]
        uow.reservation_repo.get_by_id.return_value = reservation

        result = await use_case.execute()

        assert result.total_reservations_expired == 0
        uow.show_seat_repo.transition_seats.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_one_failing_reservation_does_not_stop_the_sweep(
        self,
        use_case: ExpireReservationsUseCase,
        uow,
        reservation: Reservation,
        held_seats: List[ShowSeat],
        clock: FrozenClock,
        session_id: str,
    ) -> None:
        broken = Reservation.create(
            event_id=uuid7(),
            session_id=session_id,
            show_seat_ids=[],
            now=clock.now(),
            hold_seconds=600,
        )
        clock.advance(minutes=10)
        uow.reservation_repo.list_expired_active.return_value = [broken, reservation]
        uow.reservation_repo.get_by_id.side_effect = [
            ReservationError(ReservationErrorCode.INTERNAL_ERROR, 'Internal server error'),
            reservation,
        ]
        uow.show_seat_repo.list_by_reservation.return_value = held_seats

        result = await use_case.execute()

        assert result.reservation_ids == [reservation.id]
        assert result.total_seats_released == 2


@pytest.mark.unit
class TestEventLockRegistry:
    @pytest.mark.asyncio
    async def test_idle_locks_are_dropped(self, event_locks: EventLockRegistry, event_id: UUID) -> None:
        async with event_locks.hold(event_id=event_id):
            assert str(event_id) in event_locks._locks
        assert str(event_id) not in event_locks._locks

    @pytest.mark.asyncio
    async def test_distinct_events_hold_independent_locks(self, event_locks: EventLockRegistry) -> None:
        first, second = uuid7(), uuid7()
        async with event_locks.hold(event_id=first):
            async with event_locks.hold(event_id=second):
                assert len(event_locks._locks) == 2


    @pytest.mark.asyncio
    async def test_lock_is_dropped_when_the_body_raises(
        self, event_locks: EventLockRegistry, event_id: UUID
    ) -> None:
        with pytest.raises(ReservationError):
            async with event_locks.hold(event_id=event_id):
                raise ReservationError(ReservationErrorCode.SEATS_UNAVAILABLE, 'taken')

        assert str(event_id) not in event_locks._locks
