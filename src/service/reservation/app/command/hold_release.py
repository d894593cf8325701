"""
Release transaction shared by explicit Release, the expiration sweep and the lazy reclaim in
Reserve. Runs inside the caller's unit of work and event lock; the caller commits.
"""

from datetime import datetime
from typing import Iterable, List, Optional
from uuid import UUID

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.reservation.domain.entity.reservation_audit_entity import ReservationAuditEntry
from src.service.reservation.domain.entity.reservation_entity import Reservation
from src.service.reservation.domain.entity.seat_entity import ShowSeat
from src.service.reservation.domain.enum.reservation_event_type import ReservationEventType
from src.service.reservation.domain.enum.seat_status import SeatStatus


async def release_hold(
    uow: AbstractUnitOfWork,
    *,
    reservation: Reservation,
    now: datetime,
    event_type: ReservationEventType,
    session_id: Optional[str] = None,
) -> int:
    """
    Free every seat still reserved under the reservation and deactivate it.

    Seats already sold or reclaimed are left alone, so a hold is never freed twice.

    Returns:
        Number of seats returned to available
    """
    seats = await uow.show_seat_repo.list_by_reservation(
        reservation_id=reservation.id, for_update=True
    )
    still_reserved = [
        seat.id
        for seat in seats
        if seat.status == SeatStatus.RESERVED and seat.reservation_id == reservation.id
    ]
    if still_reserved:
        await uow.show_seat_repo.transition_seats(
            event_id=reservation.event_id,
            show_seat_ids=still_reserved,
            from_status=SeatStatus.RESERVED,
            to_status=SeatStatus.AVAILABLE,
            reservation_id=reservation.id,
        )

    await uow.reservation_repo.update(reservation=reservation.deactivate(now=now))
    await uow.audit_repo.record(
        entry=ReservationAuditEntry.record(
            reservation_id=reservation.id,
            event_id=reservation.event_id,
            event_type=event_type,
            session_id=session_id or reservation.session_id,
            show_seat_ids=still_reserved,
            now=now,
        )
    )
    Logger.base.info(
        f'[{event_type.upper()}] Reservation {reservation.id} closed, '
        f'{len(still_reserved)} seat(s) back to available'
    )
    return len(still_reserved)


async def reclaim_lapsed_holds(
    uow: AbstractUnitOfWork, *, seats: Iterable[ShowSeat], now: datetime
) -> List[UUID]:
    """
    Lazy expiration: seats whose hold deadline has passed are freed before anyone relies on
    their stored status. The owning reservation goes through the normal release routine.

    Returns:
        Ids of reservations closed as expired
    """
    lapsed = [seat for seat in seats if seat.is_hold_expired(now)]
    owner_ids = {seat.reservation_id for seat in lapsed if seat.reservation_id is not None}

    expired: List[UUID] = []
    for owner_id in sorted(owner_ids, key=str):
        owner = await uow.reservation_repo.get_by_id(reservation_id=owner_id, for_update=True)
        if owner is not None and owner.is_live(now):
            # The reservation deadline is authoritative; the seat keeps its hold
            continue
        if owner is not None and owner.is_active:
            await release_hold(
                uow, reservation=owner, now=now, event_type=ReservationEventType.EXPIRED
            )
            expired.append(owner_id)
            continue

        orphaned = [seat.id for seat in lapsed if seat.reservation_id == owner_id]
        Logger.base.warning(
            f'[RESERVE] Freeing {len(orphaned)} seat(s) held by closed reservation {owner_id}'
        )
        await uow.show_seat_repo.transition_seats(
            event_id=lapsed[0].event_id,
            show_seat_ids=orphaned,
            from_status=SeatStatus.RESERVED,
            to_status=SeatStatus.AVAILABLE,
            reservation_id=owner_id,
        )
    return expired
