from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from src.service.reservation.app.dto import (
    InitializeShowSeatsResult,
    SeatSpec,
    ShowSeatListing,
    SuggestSeatsResult,
)
from src.service.reservation.driving_adapter.http_controller.schema.reservation_schema import (
    SeatResponse,
)


class SeatMapRow(BaseModel):
    """One row of a seat map: every listed seat number shares section, row and price"""

    section: str = Field(min_length=1, max_length=100)
    row: str = Field(min_length=1, max_length=20)
    seat_numbers: List[str] = Field(min_length=1)
    price_in_cents: int = Field(ge=0)
    seat_type: str = 'standard'
    handicap_access: bool = False


class InitializeShowSeatsRequest(BaseModel):
    rows: List[SeatMapRow] = Field(min_length=1)

    model_config = {
        'json_schema_extra': {
            'example': {
                'rows': [
                    {
                        'section': 'Center Orchestra',
                        'row': 'A',
                        'seat_numbers': ['1', '2', '3', '4'],
                        'price_in_cents': 4500,
                    }
                ]
            }
        }
    }

    def to_seat_specs(self) -> List[SeatSpec]:
        return [
            SeatSpec(
                section=row.section,
                row_name=row.row,
                seat_number=seat_number,
                price_in_cents=row.price_in_cents,
                seat_type=row.seat_type,
                handicap_access=row.handicap_access,
            )
            for row in self.rows
            for seat_number in row.seat_numbers
        ]


class InitializeShowSeatsResponse(BaseModel):
    event_id: UUID
    seats_created: int
    seat_ids: List[UUID]

    @classmethod
    def from_result(cls, result: InitializeShowSeatsResult) -> 'InitializeShowSeatsResponse':
        return cls(
            event_id=result.event_id,
            seats_created=result.seats_created,
            seat_ids=result.show_seat_ids,
        )


class SectionStatsResponse(BaseModel):
    section: str
    section_type: str
    total: int
    available: int


class ShowSeatListResponse(BaseModel):
    event_id: UUID
    seats: List[SeatResponse]
    sections: List[SectionStatsResponse]
    total_available: int

    @classmethod
    def from_listing(cls, listing: ShowSeatListing) -> 'ShowSeatListResponse':
        return cls(
            event_id=listing.event_id,
            seats=[SeatResponse.from_view(seat) for seat in listing.seats],
            sections=[
                SectionStatsResponse(
                    section=stats.section,
                    section_type=stats.section_type,
                    total=stats.total,
                    available=stats.available,
                )
                for stats in listing.sections
            ],
            total_available=listing.total_available,
        )


class SuggestSeatsRequest(BaseModel):
    count: int
    prefer_center: bool = True
    keep_together: bool = True
    handicap_access: bool = False

    model_config = {
        'json_schema_extra': {
            'example': {'count': 3, 'prefer_center': True, 'keep_together': True}
        }
    }


class SuggestSeatsResponse(BaseModel):
    success: bool
    ideal_match: bool = Field(serialization_alias='idealMatch')
    available_count: int
    message: str
    seats: List[SeatResponse]
    section: Optional[str] = None
    row: Optional[str] = None
    total_amount_in_cents: int

    @classmethod
    def from_result(cls, result: SuggestSeatsResult) -> 'SuggestSeatsResponse':
        return cls(
            success=result.success,
            ideal_match=result.ideal_match,
            available_count=result.available_count,
            message=result.message,
            seats=[SeatResponse.from_view(seat) for seat in result.seats],
            section=result.section,
            row=result.row_name,
            total_amount_in_cents=result.total_amount_in_cents,
        )
