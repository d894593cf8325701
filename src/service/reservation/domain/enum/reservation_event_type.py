from enum import StrEnum


class ReservationEventType(StrEnum):
    """Audit log event types"""

    RESERVED = 'reserved'
    EXTENDED = 'extended'
    RELEASED = 'released'
    EXPIRED = 'expired'
    COMMITTED = 'committed'
