"""
Storage fault translation for reservation use cases.

Transaction or driver failures are logged with event/seat/session context and surfaced to the
caller as INTERNAL_ERROR without any backend detail.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from opentelemetry import trace
from sqlalchemy.exc import SQLAlchemyError

from src.platform.logging.loguru_io import Logger
from src.service.reservation.domain.reservation_error import ReservationError


def _mask_session(session_id: Any) -> str:
    value = str(session_id or '')
    return f'{value[:6]}…' if value else '-'


@contextmanager
def translate_storage_errors(operation: str, **context: Any) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as e:
        if 'session_id' in context:
            context['session_id'] = _mask_session(context['session_id'])
        details = ', '.join(f'{key}={value}' for key, value in context.items())
        Logger.base.opt(exception=e).error(
            f'[{operation.upper()}] Storage failure {type(e).__name__}: {details}'
        )

        span = trace.get_current_span()
        span.record_exception(e)
        span.set_status(trace.Status(trace.StatusCode.ERROR, 'storage failure'))
        span.set_attribute('error.type', 'storage_error')

        raise ReservationError.internal() from e
