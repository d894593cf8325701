from uuid import UUID

from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.command.commit_reservation_use_case import (
    CommitReservationUseCase,
)
from src.service.reservation.app.command.expire_reservations_use_case import (
    ExpireReservationsUseCase,
)
from src.service.reservation.app.command.extend_reservation_use_case import (
    ExtendReservationUseCase,
)
from src.service.reservation.app.command.release_reservation_use_case import (
    ReleaseReservationUseCase,
)
from src.service.reservation.app.command.reserve_seats_use_case import ReserveSeatsUseCase
from src.service.reservation.app.query.check_reservation_use_case import (
    CheckReservationUseCase,
)
from src.service.reservation.driving_adapter.http_controller.auth.service_dependency import (
    require_service_caller,
)
from src.service.reservation.driving_adapter.http_controller.auth.session_dependency import (
    get_session_id,
)
from src.service.reservation.driving_adapter.http_controller.schema.reservation_schema import (
    CheckReservationResponse,
    CommitReservationResponse,
    ExpireReservationsResponse,
    ExtendReservationResponse,
    ReleaseReservationRequest,
    ReleaseReservationResponse,
    ReserveSeatsRequest,
    ReserveSeatsResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def reserve_seats(
    request: ReserveSeatsRequest,
    session_id: str = Depends(get_session_id),
    use_case: ReserveSeatsUseCase = Depends(ReserveSeatsUseCase.depends),
) -> ReserveSeatsResponse:
    with tracer.start_as_current_span('controller.reserve_seats') as span:
        span.set_attribute('event.id', str(request.event_id))
        span.set_attribute('seat.count', len(request.seat_ids))

        result = await use_case.execute(
            event_id=request.event_id,
            show_seat_ids=request.seat_ids,
            session_id=session_id,
            email=request.email,
            phone=request.phone,
        )
        return ReserveSeatsResponse.from_result(result)


@router.post('/release')
@Logger.io
async def release_reservation(
    request: ReleaseReservationRequest,
    session_id: str = Depends(get_session_id),
    use_case: ReleaseReservationUseCase = Depends(ReleaseReservationUseCase.depends),
) -> ReleaseReservationResponse:
    result = await use_case.execute(
        session_id=session_id,
        token=request.token,
        reservation_id=request.reservation_id,
    )
    return ReleaseReservationResponse.from_result(result)


@router.post('/expire', dependencies=[Depends(require_service_caller)])
@Logger.io
async def expire_reservations(
    use_case: ExpireReservationsUseCase = Depends(ExpireReservationsUseCase.depends),
) -> ExpireReservationsResponse:
    """Run the expiration sweep now instead of waiting for the reaper."""
    result = await use_case.execute()
    return ExpireReservationsResponse.from_result(result)


@router.get('/id/{reservation_id}')
@Logger.io
async def check_reservation_by_id(
    reservation_id: UUID,
    use_case: CheckReservationUseCase = Depends(CheckReservationUseCase.depends),
) -> CheckReservationResponse:
    result = await use_case.execute(reservation_id=reservation_id)
    return CheckReservationResponse.from_result(result)


@router.get('/{token}')
@Logger.io
async def check_reservation(
    token: str,
    use_case: CheckReservationUseCase = Depends(CheckReservationUseCase.depends),
) -> CheckReservationResponse:
    result = await use_case.execute(token=token)
    return CheckReservationResponse.from_result(result)


@router.post('/{token}/extend')
@Logger.io
async def extend_reservation(
    token: str,
    session_id: str = Depends(get_session_id),
    use_case: ExtendReservationUseCase = Depends(ExtendReservationUseCase.depends),
) -> ExtendReservationResponse:
    result = await use_case.execute(token=token, session_id=session_id)
    return ExtendReservationResponse.from_result(result)


@router.post('/{token}/commit', dependencies=[Depends(require_service_caller)])
@Logger.io
async def commit_reservation(
    token: str,
    use_case: CommitReservationUseCase = Depends(CommitReservationUseCase.depends),
) -> CommitReservationResponse:
    """Called by checkout once payment is captured, authenticated with the service key."""
    result = await use_case.execute(token=token)
    return CommitReservationResponse.from_result(result)
