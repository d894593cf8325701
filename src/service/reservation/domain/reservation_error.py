from src.platform.exception.exceptions import CustomBaseError
from src.service.reservation.domain.enum.reservation_error_code import ReservationErrorCode


_STATUS_BY_CODE: dict[ReservationErrorCode, int] = {
    ReservationErrorCode.INVALID_INPUT: 400,
    ReservationErrorCode.TOO_MANY_SEATS: 400,
    ReservationErrorCode.RESERVATION_INACTIVE: 400,
    ReservationErrorCode.RESERVATION_EXPIRED: 400,
    ReservationErrorCode.ALREADY_INACTIVE: 400,
    ReservationErrorCode.PERMISSION_DENIED: 403,
    ReservationErrorCode.SEATS_NOT_FOUND: 404,
    ReservationErrorCode.NOT_FOUND: 404,
    ReservationErrorCode.DUPLICATE_RESERVATION: 409,
    ReservationErrorCode.SEATS_UNAVAILABLE: 409,
    ReservationErrorCode.MAX_EXTENSIONS_REACHED: 429,
    ReservationErrorCode.INTERNAL_ERROR: 500,
}


class ReservationError(CustomBaseError):
    """Reservation protocol failure carrying a stable `ReservationErrorCode`."""

    def __init__(self, code: ReservationErrorCode, message: str) -> None:
        super().__init__(message, _STATUS_BY_CODE[code], code=code)
        self.code: ReservationErrorCode = code

    @classmethod
    def internal(cls) -> 'ReservationError':
        return cls(ReservationErrorCode.INTERNAL_ERROR, 'Internal server error')
