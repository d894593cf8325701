"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.reservation.app.command import (
    commit_reservation_use_case,
    expire_reservations_use_case,
    extend_reservation_use_case,
    initialize_show_seats_use_case,
    release_reservation_use_case,
    reserve_seats_use_case,
)
from src.service.reservation.app.query import (
    check_reservation_use_case,
    list_show_seats_use_case,
    suggest_seats_use_case,
)
from src.service.reservation.driving_adapter.http_controller.auth import (
    service_dependency,
    session_dependency,
)


WIRE_MODULES: list[ModuleType] = [
    reserve_seats_use_case,
    extend_reservation_use_case,
    release_reservation_use_case,
    commit_reservation_use_case,
    expire_reservations_use_case,
    initialize_show_seats_use_case,
    check_reservation_use_case,
    list_show_seats_use_case,
    suggest_seats_use_case,
    session_dependency,
    service_dependency,
]
