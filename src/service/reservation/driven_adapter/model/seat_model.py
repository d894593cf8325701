from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.platform.database.orm_db_setting import Base
from src.platform.types.utc_datetime_types import UTCDateTime

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

class SeatModel(Base):
    __tablename__ = 'seat'
    __table_args__ = (
        UniqueConstraint('section', 'row_name', 'seat_number', name='uq_seat_position'),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)  # UUID7
    section: Mapped[str] = mapped_column(String(100), nullable=False)
    row_name: Mapped[str] = mapped_column(String(20), nullable=False)
    seat_number: Mapped[str] = mapped_column(String(20), nullable=False)
    seat_type: Mapped[str] = mapped_column(String(30), nullable=False, default='standard')
    handicap_access: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=_utcnow)

class ShowSeatModel(Base):
    __tablename__ = 'show_seat'
    __table_args__ = (
        UniqueConstraint('event_id', 'seat_id', name='uq_show_seat_event_seat'),
        Index('ix_show_seat_event_status', 'event_id', 'status'),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)  # UUID7
    event_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)
    seat_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey('seat.id'), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default='available')
    price_in_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    reserved_until: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    reservation_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid, ForeignKey('reservation.id', ondelete='SET NULL'), nullable=True, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=_utcnow, onupdate=_utcnow
    )

    seat: Mapped[SeatModel] = relationship(lazy='selectin')
