"""Reservation Service Interfaces"""

from src.service.reservation.app.interface.i_reservation_audit_repo import IReservationAuditRepo
from src.service.reservation.app.interface.i_reservation_repo import IReservationRepo
from src.service.reservation.app.interface.i_session_identity import ISessionIdentity
from src.service.reservation.app.interface.i_show_seat_repo import IShowSeatRepo

__all__ = [
    'IReservationAuditRepo',
    'IReservationRepo',
    'ISessionIdentity',
    'IShowSeatRepo',
]
