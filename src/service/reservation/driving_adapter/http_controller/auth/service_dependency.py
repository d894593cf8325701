import secrets

from dependency_injector.wiring import Provide, inject
from fastapi import Depends, Request
from opentelemetry import trace

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.reservation.domain.enum.reservation_error_code import ReservationErrorCode
from src.service.reservation.domain.reservation_error import ReservationError


@inject
def require_service_caller(
    request: Request,
    config: Settings = Depends(Provide[Container.config_service]),
) -> None:
    """
    Guard for routes only the checkout collaborator or operators may call (commit, sweep,
    seat initialization). A shopper session never satisfies it.
    """
    tracer = trace.get_tracer(__name__)
    with tracer.start_as_current_span('auth.require_service_caller'):
        expected = config.SERVICE_API_KEY.get_secret_value()
        presented = request.headers.get(config.SERVICE_API_KEY_HEADER, '')
        if not expected or not presented or not secrets.compare_digest(
            presented.encode(), expected.encode()
        ):
            Logger.base.warning(
                f'[AUTH] Rejected service call to {request.method} {request.url.path}'
            )
            raise ReservationError(
                ReservationErrorCode.PERMISSION_DENIED, 'Service credential required'
            )
