"""Reservation Application DTOs"""

from src.service.reservation.app.dto.reservation_dto import (
    CheckReservationResult,
    CommitReservationResult,
    ExpireReservationsResult,
    ExtendReservationResult,
    ReleaseReservationResult,
    ReservationSeatView,
    ReserveSeatsResult,
)
from src.service.reservation.app.dto.show_seat_dto import (
    InitializeShowSeatsResult,
    SeatSpec,
    SectionStats,
    ShowSeatListing,
    SuggestSeatsResult,
)


__all__ = [
    'CheckReservationResult',
    'CommitReservationResult',
    'ExpireReservationsResult',
    'ExtendReservationResult',
    'InitializeShowSeatsResult',
    'ReleaseReservationResult',
    'ReservationSeatView',
    'ReserveSeatsResult',
    'SeatSpec',
    'SectionStats',
    'ShowSeatListing',
    'SuggestSeatsResult',
]
