from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.service.reservation.domain.entity.seat_entity import Seat, ShowSeat
from src.service.reservation.domain.enum.seat_status import SeatStatus


class IShowSeatRepo(ABC):
    """Per-event seat inventory (SeatInventory)"""

    @abstractmethod
    async def get_seats(
        self,
        *,
        event_id: UUID,
        section: Optional[str] = None,
        handicap_access: Optional[bool] = None,
    ) -> List[ShowSeat]:
        """
        Read the seat map of an event, ordered by section, row and seat number.

        Args:
            event_id: Event the seats belong to
            section: Only seats of this section
            handicap_access: Only seats with (True) or without (False) handicap access

        Returns:
            Stored seat state; callers apply the lazy expiration rule
        """
        pass

    @abstractmethod
    async def get_for_update(self, *, event_id: UUID, show_seat_ids: List[UUID]) -> List[ShowSeat]:
        """
        Read the given seats with row locks held until the transaction ends.

        Returns:
            Seats found for the event; ids that do not exist are simply absent
        """
        pass

    @abstractmethod
    async def list_by_reservation(
        self, *, reservation_id: UUID, for_update: bool = False
    ) -> List[ShowSeat]:
        """Seats recorded as members of a reservation, whatever their current status"""
        pass

    @abstractmethod
    async def transition_seats(
        self,
        *,
        event_id: UUID,
        show_seat_ids: List[UUID],
        from_status: SeatStatus,
        to_status: SeatStatus,
        reservation_id: UUID,
        reserved_until: Optional[datetime] = None,
    ) -> List[ShowSeat]:
        """
        Move every seat from `from_status` to `to_status`, all or nothing.

        Current status is re-read under row lock inside the caller's transaction. When
        `from_status` is RESERVED the seats must also belong to `reservation_id`.

        Raises:
            NotFoundError: any seat id does not exist for the event
            ConflictError: any seat is not currently in `from_status`; nothing is mutated
        """
        pass

    @abstractmethod
    async def extend_hold(self, *, reservation_id: UUID, reserved_until: datetime) -> int:
        """Move the deadline of seats still reserved under a reservation; returns rows touched"""
        pass

    @abstractmethod
    async def event_has_seats(self, *, event_id: UUID) -> bool:
        pass

    @abstractmethod
    async def get_or_create_seats(self, *, seats: List[Seat]) -> List[Seat]:
        """Reuse reference seats with the same (section, row, number), insert the rest"""
        pass

    @abstractmethod
    async def create_show_seats(self, *, show_seats: List[ShowSeat]) -> List[ShowSeat]:
        pass
