from enum import StrEnum


class ReservationErrorCode(StrEnum):
    """Stable error codes returned to callers"""

    INVALID_INPUT = 'INVALID_INPUT'
    TOO_MANY_SEATS = 'TOO_MANY_SEATS'
    DUPLICATE_RESERVATION = 'DUPLICATE_RESERVATION'
    SEATS_NOT_FOUND = 'SEATS_NOT_FOUND'
    SEATS_UNAVAILABLE = 'SEATS_UNAVAILABLE'
    NOT_FOUND = 'NOT_FOUND'
    PERMISSION_DENIED = 'PERMISSION_DENIED'
    RESERVATION_INACTIVE = 'RESERVATION_INACTIVE'
    RESERVATION_EXPIRED = 'RESERVATION_EXPIRED'
    MAX_EXTENSIONS_REACHED = 'MAX_EXTENSIONS_REACHED'
    ALREADY_INACTIVE = 'ALREADY_INACTIVE'
    INTERNAL_ERROR = 'INTERNAL_ERROR'
