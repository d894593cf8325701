import pytest

from src.platform.exception.exceptions import ConflictError
from src.service.reservation.domain.enum.reservation_error_code import ReservationErrorCode
from src.service.reservation.domain.reservation_error import ReservationError


@pytest.mark.unit
@pytest.mark.parametrize(
    'code,status_code',
    [
        (ReservationErrorCode.INVALID_INPUT, 400),
        (ReservationErrorCode.TOO_MANY_SEATS, 400),
        (ReservationErrorCode.RESERVATION_EXPIRED, 400),
        (ReservationErrorCode.ALREADY_INACTIVE, 400),
        (ReservationErrorCode.PERMISSION_DENIED, 403),
        (ReservationErrorCode.SEATS_NOT_FOUND, 404),
        (ReservationErrorCode.NOT_FOUND, 404),
        (ReservationErrorCode.DUPLICATE_RESERVATION, 409),
        (ReservationErrorCode.SEATS_UNAVAILABLE, 409),
        (ReservationErrorCode.MAX_EXTENSIONS_REACHED, 429),
        (ReservationErrorCode.INTERNAL_ERROR, 500),
    ],
)
def test_error_code_maps_to_http_status(code: ReservationErrorCode, status_code: int) -> None:
    assert ReservationError(code, 'boom').status_code == status_code


@pytest.mark.unit
def test_every_code_has_a_status() -> None:
    for code in ReservationErrorCode:
        assert ReservationError(code, code.value).code == code


@pytest.mark.unit
def test_error_body_carries_detail_and_code() -> None:
    error = ReservationError(ReservationErrorCode.SEATS_UNAVAILABLE, 'Seat A-1 is not available')
    assert error.to_content() == {'detail': 'Seat A-1 is not available', 'code': 'SEATS_UNAVAILABLE'}


@pytest.mark.unit
def test_internal_error_hides_backend_detail() -> None:
    error = ReservationError.internal()
    assert error.to_content() == {'detail': 'Internal server error', 'code': 'INTERNAL_ERROR'}


@pytest.mark.unit
def test_platform_errors_use_their_default_code() -> None:
    assert ConflictError('taken').to_content() == {'detail': 'taken', 'code': 'CONFLICT'}
