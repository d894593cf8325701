"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.clock.clock import SystemClock
from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.platform.state.event_lock import EventLockRegistry
from src.service.reservation.domain.hold_policy import HoldPolicy
from src.service.reservation.domain.seat_suggestion_domain import SeatSuggestionEngine
from src.service.reservation.driving_adapter.http_controller.auth.cookie_session_identity import (
    CookieSessionIdentity,
)


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (engine bound to the running event loop, see AsyncEngineManager)
    database = providers.Singleton(Database, url=config_service.provided.DATABASE_URL_ASYNC)

    # Time source for every deadline; tests override with FrozenClock
    clock = providers.Singleton(SystemClock)

    # Single writer per event
    event_lock_registry = providers.Singleton(EventLockRegistry)

    # Fresh unit of work per operation (repositories share its session)
    unit_of_work = providers.Factory(SqlAlchemyUnitOfWork, session_factory=database.provided.session)

    # Domain services
    hold_policy = providers.Singleton(HoldPolicy.from_settings, settings=config_service)
    suggestion_engine = providers.Singleton(SeatSuggestionEngine)

    # Shopper session cookie
    session_identity = providers.Singleton(CookieSessionIdentity, settings=config_service)


container = Container()


def setup() -> None:
    container.config_service()
    container.database()


async def cleanup() -> None:
    database = container.database()
    await database.dispose()
    container.reset_singletons()
