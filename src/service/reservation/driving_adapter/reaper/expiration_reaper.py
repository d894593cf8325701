"""
Expiration reaper - background sweep that closes lapsed reservations

Reads and Reserve already treat lapsed holds as available, so the reaper only has to keep
stored state converging; a slow or failed sweep never lets a seat be double-booked.
"""

from typing import Callable

import anyio

from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.command.expire_reservations_use_case import (
    ExpireReservationsUseCase,
)


class ExpirationReaper:
    def __init__(
        self,
        *,
        use_case_factory: Callable[[], ExpireReservationsUseCase],
        interval_seconds: float,
        batch_size: int | None = None,
    ) -> None:
        self.use_case_factory = use_case_factory
        self.interval_seconds = interval_seconds
        self.batch_size = batch_size

    async def run_once(self) -> int:
        result = await self.use_case_factory().execute(limit=self.batch_size)
        return result.total_reservations_expired

    async def run_forever(self) -> None:
        Logger.base.info(f'[REAPER] Started, sweeping every {self.interval_seconds}s')
        try:
            while True:
                try:
                    await self.run_once()
                except Exception as e:
                    # Keep sweeping; the next pass retries whatever this one missed
                    Logger.base.exception(f'[REAPER] Sweep failed: {e}')
                await anyio.sleep(self.interval_seconds)
        finally:
            Logger.base.info('[REAPER] Stopped')
