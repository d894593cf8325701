from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.service.reservation.domain.entity.reservation_entity import Reservation


class IReservationRepo(ABC):
    @abstractmethod
    async def create(self, *, reservation: Reservation) -> Reservation:
        """
        Insert the reservation and its reservation_seat membership rows.

        Args:
            reservation: New reservation, `show_seat_ids` lists its seats

        Raises:
            ConflictError: The session already holds an active reservation for the event
        """
        pass

    @abstractmethod
    async def get_by_token(self, *, token: str, for_update: bool = False) -> Optional[Reservation]:
        pass

    @abstractmethod
    async def get_by_id(
        self, *, reservation_id: UUID, for_update: bool = False
    ) -> Optional[Reservation]:
        pass

    @abstractmethod
    async def list_active_for_session(
        self, *, event_id: UUID, session_id: str, for_update: bool = False
    ) -> List[Reservation]:
        """Reservations still flagged active for a session and event, lapsed ones included"""
        pass

    @abstractmethod
    async def update(self, *, reservation: Reservation) -> Reservation:
        """Persist expires_at, extension_count, is_active and updated_at"""
        pass

    @abstractmethod
    async def list_expired_active(
        self, *, now: datetime, limit: Optional[int] = None
    ) -> List[Reservation]:
        """Active reservations whose deadline is at or before `now`, oldest deadline first"""
        pass
