"""
Seat Reservation Service - Main Application
Handles seat holds, extensions, releases, commits and seat suggestions.
"""

from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI

from src.platform.app_factory import create_app
from src.platform.config.di import cleanup, container, setup
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig
from src.service.reservation.app.command.expire_reservations_use_case import (
    ExpireReservationsUseCase,
)
from src.service.reservation.driving_adapter.reaper.expiration_reaper import ExpirationReaper


def build_expiration_reaper() -> ExpirationReaper:
    config = container.config_service()
    return ExpirationReaper(
        use_case_factory=lambda: ExpireReservationsUseCase(
            uow_factory=container.unit_of_work,
            event_locks=container.event_lock_registry(),
            clock=container.clock(),
        ),
        interval_seconds=config.REAPER_INTERVAL_SECONDS,
        batch_size=config.REAPER_BATCH_SIZE,
    )


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Manage application lifespan: startup and shutdown"""
    Logger.base.info('[Reservation Service] Starting up...')
    config = container.config_service()

    tracing = TracingConfig.from_settings(config)
    tracing.setup()

    setup()
    container.wire(modules=WIRE_MODULES)
    Logger.base.info('[Reservation Service] Dependency injection wired')

    database = container.database()
    tracing.instrument_sqlalchemy(engine=database.engine)
    if config.CREATE_TABLES_ON_STARTUP:
        await database.create_tables()

    async with anyio.create_task_group() as task_group:
        if config.ENABLE_REAPER:
            task_group.start_soon(build_expiration_reaper().run_forever)
        else:
            Logger.base.info('[Reservation Service] Reaper disabled (ENABLE_REAPER=false)')

        Logger.base.info('[Reservation Service] Startup complete')
        yield

        Logger.base.info('[Reservation Service] Shutting down...')
        task_group.cancel_scope.cancel()

    await cleanup()
    tracing.shutdown()
    container.unwire()
    Logger.base.info('[Reservation Service] Shutdown complete')


app = create_app(lifespan=lifespan)
