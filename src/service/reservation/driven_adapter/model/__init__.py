"""ORM models of the reservation service; importing this package registers every table."""

from src.service.reservation.driven_adapter.model.reservation_model import (
    ReservationAuditLogModel,
    ReservationModel,
    ReservationSeatModel,
)
from src.service.reservation.driven_adapter.model.seat_model import SeatModel, ShowSeatModel

__all__ = [
    'ReservationAuditLogModel',
    'ReservationModel',
    'ReservationSeatModel',
    'SeatModel',
    'ShowSeatModel',
]
