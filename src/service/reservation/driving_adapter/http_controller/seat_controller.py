from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.command.initialize_show_seats_use_case import (
    InitializeShowSeatsUseCase,
)
from src.service.reservation.app.query.list_show_seats_use_case import ListShowSeatsUseCase
from src.service.reservation.app.query.suggest_seats_use_case import SuggestSeatsUseCase
from src.service.reservation.domain.enum.seat_status import SeatStatus
from src.service.reservation.driving_adapter.http_controller.auth.service_dependency import (
    require_service_caller,
)
from src.service.reservation.driving_adapter.http_controller.schema.seat_schema import (
    InitializeShowSeatsRequest,
    InitializeShowSeatsResponse,
    ShowSeatListResponse,
    SuggestSeatsRequest,
    SuggestSeatsResponse,
)


router = APIRouter()


@router.get('/{event_id}/seats')
@Logger.io(truncate_content=True)
async def list_show_seats(
    event_id: UUID,
    section: Optional[str] = None,
    seat_status: Optional[SeatStatus] = Query(default=None, alias='status'),
    handicap_access: Optional[bool] = None,
    use_case: ListShowSeatsUseCase = Depends(ListShowSeatsUseCase.depends),
) -> ShowSeatListResponse:
    listing = await use_case.execute(
        event_id=event_id,
        section=section,
        status=seat_status,
        handicap_access=handicap_access,
    )
    return ShowSeatListResponse.from_listing(listing)


@router.post(
    '/{event_id}/seats',
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_service_caller)],
)
@Logger.io(truncate_content=True)
async def initialize_show_seats(
    event_id: UUID,
    request: InitializeShowSeatsRequest,
    use_case: InitializeShowSeatsUseCase = Depends(InitializeShowSeatsUseCase.depends),
) -> InitializeShowSeatsResponse:
    result = await use_case.execute(event_id=event_id, seats=request.to_seat_specs())
    return InitializeShowSeatsResponse.from_result(result)


@router.post('/{event_id}/seats/suggest')
@Logger.io
async def suggest_seats(
    event_id: UUID,
    request: SuggestSeatsRequest,
    use_case: SuggestSeatsUseCase = Depends(SuggestSeatsUseCase.depends),
) -> SuggestSeatsResponse:
    result = await use_case.execute(
        event_id=event_id,
        count=request.count,
        prefer_center=request.prefer_center,
        keep_together=request.keep_together,
        handicap_access=request.handicap_access,
    )
    return SuggestSeatsResponse.from_result(result)
