from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy import JSON, Boolean, ForeignKey, Index, Integer, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.platform.database.orm_db_setting import Base
from src.platform.types.utc_datetime_types import UTCDateTime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReservationModel(Base):
    __tablename__ = 'reservation'
    __table_args__ = (
        Index('ix_reservation_event_session', 'event_id', 'session_id'),
        Index('ix_reservation_active_expires', 'is_active', 'expires_at'),
        # At most one active reservation per session and event, across every worker
        Index(
            'uq_reservation_active_session',
            'event_id',
            'session_id',
            unique=True,
            postgresql_where=text('is_active'),
            sqlite_where=text('is_active'),
        ),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)  # UUID7
    event_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    session_id: Mapped[str] = mapped_column(String(128), nullable=False)
    token: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    extension_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=_utcnow)
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=_utcnow)

    seats: Mapped[List['ReservationSeatModel']] = relationship(
        back_populates='reservation',
        lazy='selectin',
        cascade='all, delete-orphan',
        order_by='ReservationSeatModel.position',
    )


class ReservationSeatModel(Base):
    """Membership of a show seat in a reservation"""

    __tablename__ = 'reservation_seat'

    reservation_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey('reservation.id', ondelete='CASCADE'), primary_key=True
    )
    show_seat_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey('show_seat.id', ondelete='CASCADE'), primary_key=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=_utcnow)

    reservation: Mapped[ReservationModel] = relationship(back_populates='seats')


class ReservationAuditLogModel(Base):
    __tablename__ = 'reservation_audit_log'

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)  # UUID7
    reservation_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)
    event_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)
    event_type: Mapped[str] = mapped_column(String(20), nullable=False)
    session_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    show_seat_ids: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    detail: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=_utcnow)
