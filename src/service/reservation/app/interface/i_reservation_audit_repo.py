from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from src.service.reservation.domain.entity.reservation_audit_entity import ReservationAuditEntry


class IReservationAuditRepo(ABC):
    @abstractmethod
    async def record(self, *, entry: ReservationAuditEntry) -> None:
        pass

    @abstractmethod
    async def list_for_reservation(self, *, reservation_id: UUID) -> List[ReservationAuditEntry]:
        """Entries in the order they were written"""
        pass
