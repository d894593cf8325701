from enum import StrEnum


class SeatStatus(StrEnum):
    AVAILABLE = 'available'
    RESERVED = 'reserved'
    SOLD = 'sold'


# available -> reserved -> {available | sold}; sold is terminal
ALLOWED_SEAT_TRANSITIONS: frozenset[tuple[SeatStatus, SeatStatus]] = frozenset(
    {
        (SeatStatus.AVAILABLE, SeatStatus.RESERVED),
        (SeatStatus.RESERVED, SeatStatus.AVAILABLE),
        (SeatStatus.RESERVED, SeatStatus.SOLD),
    }
)
