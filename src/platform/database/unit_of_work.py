"""
Unit of Work Pattern - one database transaction shared by the reservation repositories

Architecture:
- UoW owns the session lifecycle (opened on enter, closed on exit)
- UoW owns commit/rollback; leaving the block without commit() rolls back
- Repositories receive the shared session from the UoW
- Use cases coordinate several repositories inside one UoW
"""

from __future__ import annotations

import abc
from contextlib import AbstractAsyncContextManager
from typing import TYPE_CHECKING, Any, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession


if TYPE_CHECKING:
    from src.service.reservation.app.interface.i_reservation_audit_repo import (
        IReservationAuditRepo,
    )
    from src.service.reservation.app.interface.i_reservation_repo import IReservationRepo
    from src.service.reservation.app.interface.i_show_seat_repo import IShowSeatRepo


class AbstractUnitOfWork(abc.ABC):
    """
    Abstract Unit of Work for the Reservation Service

    Usage:
        async with uow_factory() as uow:
            seats = await uow.show_seat_repo.get_for_update(...)
            await uow.commit()
    """

    show_seat_repo: IShowSeatRepo
    reservation_repo: IReservationRepo
    audit_repo: IReservationAuditRepo

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.rollback()

    async def commit(self) -> None:
        """Commit the transaction"""
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """
    SQLAlchemy implementation of Unit of Work

    Each instance is single-use: the DI container hands out a fresh one per operation.
    """

    def __init__(
        self, session_factory: Callable[[], AbstractAsyncContextManager[AsyncSession]]
    ) -> None:
        self.session_factory = session_factory
        self._session_context: Optional[AbstractAsyncContextManager[AsyncSession]] = None
        self.session: Optional[AsyncSession] = None

    async def __aenter__(self) -> AbstractUnitOfWork:
        from src.service.reservation.driven_adapter.repo.reservation_audit_repo_impl import (
            ReservationAuditRepoImpl,
        )
        from src.service.reservation.driven_adapter.repo.reservation_repo_impl import (
            ReservationRepoImpl,
        )
        from src.service.reservation.driven_adapter.repo.show_seat_repo_impl import (
            ShowSeatRepoImpl,
        )

        self._session_context = self.session_factory()
        self.session = await self._session_context.__aenter__()

        # Create repositories with shared session
        self.show_seat_repo = ShowSeatRepoImpl(session=self.session)
        self.reservation_repo = ReservationRepoImpl(session=self.session)
        self.audit_repo = ReservationAuditRepoImpl(session=self.session)

        return await super().__aenter__()

    async def __aexit__(self, *args: Any) -> None:
        try:
            await super().__aexit__(*args)
        finally:
            if self._session_context is not None:
                await self._session_context.__aexit__(*args)
            self._session_context = None
            self.session = None

    async def _commit(self) -> None:
        assert self.session is not None, 'UnitOfWork used outside its context'
        await self.session.commit()

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()
