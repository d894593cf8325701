from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from src.service.reservation.app.dto import (
    CheckReservationResult,
    CommitReservationResult,
    ExpireReservationsResult,
    ExtendReservationResult,
    ReleaseReservationResult,
    ReservationSeatView,
    ReserveSeatsResult,
)


class ReserveSeatsRequest(BaseModel):
    event_id: UUID
    seat_ids: List[UUID]
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)

    model_config = {
        'json_schema_extra': {
            'example': {
                'event_id': '01936d8f-5e73-7c4e-a9c5-123456789abc',  # UUID7
                'seat_ids': [
                    '01936d8f-6000-7c4e-a9c5-000000000001',
                    '01936d8f-6000-7c4e-a9c5-000000000002',
                ],
                'email': 'shopper@example.com',
            }
        }
    }


class ReleaseReservationRequest(BaseModel):
    token: Optional[str] = None
    reservation_id: Optional[UUID] = None

    model_config = {'json_schema_extra': {'example': {'token': '9f2c...'}}}


class ReserveSeatsResponse(BaseModel):
    reservation_id: UUID
    event_id: UUID
    token: str
    expires_at: datetime
    seat_count: int
    total_amount_in_cents: int
    seat_ids: List[UUID]

    @classmethod
    def from_result(cls, result: ReserveSeatsResult) -> 'ReserveSeatsResponse':
        return cls(
            reservation_id=result.reservation_id,
            event_id=result.event_id,
            token=result.token,
            expires_at=result.expires_at,
            seat_count=result.seat_count,
            total_amount_in_cents=result.total_amount_in_cents,
            seat_ids=result.show_seat_ids,
        )


class ExtendReservationResponse(BaseModel):
    reservation_id: UUID
    expires_at: datetime
    extension_count: int
    extensions_remaining: int
    message: str

    @classmethod
    def from_result(cls, result: ExtendReservationResult) -> 'ExtendReservationResponse':
        return cls(
            reservation_id=result.reservation_id,
            expires_at=result.expires_at,
            extension_count=result.extension_count,
            extensions_remaining=result.extensions_remaining,
            message=result.message,
        )


class ReleaseReservationResponse(BaseModel):
    reservation_id: UUID
    seats_released: int

    @classmethod
    def from_result(cls, result: ReleaseReservationResult) -> 'ReleaseReservationResponse':
        return cls(reservation_id=result.reservation_id, seats_released=result.seats_released)


class CommitReservationResponse(BaseModel):
    reservation_id: UUID
    event_id: UUID
    seats_sold: int
    total_amount_in_cents: int
    seat_ids: List[UUID]

    @classmethod
    def from_result(cls, result: CommitReservationResult) -> 'CommitReservationResponse':
        return cls(
            reservation_id=result.reservation_id,
            event_id=result.event_id,
            seats_sold=result.seats_sold,
            total_amount_in_cents=result.total_amount_in_cents,
            seat_ids=result.show_seat_ids,
        )


class SeatResponse(BaseModel):
    id: UUID
    section: str
    row: str
    seat_number: str
    seat_type: str
    handicap_access: bool
    price_in_cents: int
    status: str

    @classmethod
    def from_view(cls, view: ReservationSeatView) -> 'SeatResponse':
        return cls(
            id=view.show_seat_id,
            section=view.section,
            row=view.row_name,
            seat_number=view.seat_number,
            seat_type=view.seat_type,
            handicap_access=view.handicap_access,
            price_in_cents=view.price_in_cents,
            status=view.status.value,
        )


class CheckReservationResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'id': '01936d8f-5e73-7c4e-a9c5-123456789abc',
                'is_active': True,
                'is_expired': False,
                'time_remaining_seconds': 412,
                'seat_count': 2,
                'total_amount_in_cents': 9000,
            }
        },
    }

    id: UUID
    token: str
    event_id: UUID
    email: Optional[str] = None
    phone: Optional[str] = None
    created_at: datetime
    expires_at: datetime
    is_active: bool
    is_expired: bool
    time_remaining_seconds: int
    extension_count: int
    extensions_remaining: int
    seats: List[SeatResponse]
    seat_count: int
    total_amount_in_cents: int

    @classmethod
    def from_result(cls, result: CheckReservationResult) -> 'CheckReservationResponse':
        return cls(
            id=result.reservation_id,
            token=result.token,
            event_id=result.event_id,
            email=result.email,
            phone=result.phone,
            created_at=result.created_at,
            expires_at=result.expires_at,
            is_active=result.is_active,
            is_expired=result.is_expired,
            time_remaining_seconds=result.time_remaining_seconds,
            extension_count=result.extension_count,
            extensions_remaining=result.extensions_remaining,
            seats=[SeatResponse.from_view(seat) for seat in result.seats],
            seat_count=result.seat_count,
            total_amount_in_cents=result.total_amount_in_cents,
        )


class ExpireReservationsResponse(BaseModel):
    total_reservations_expired: int
    total_seats_released: int
    reservation_ids: List[UUID]

    @classmethod
    def from_result(cls, result: ExpireReservationsResult) -> 'ExpireReservationsResponse':
        return cls(
            total_reservations_expired=result.total_reservations_expired,
            total_seats_released=result.total_seats_released,
            reservation_ids=result.reservation_ids,
        )
