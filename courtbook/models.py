import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .db import Base


def utc_now_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    return str(uuid.uuid4())


class Venue(Base):
    __tablename__ = "venues"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(160))
    hourly_rate: Mapped[float] = mapped_column(Numeric(10, 2), default=0)
    instant_booking: Mapped[bool] = mapped_column(Boolean, default=False)
    insurance_required: Mapped[bool] = mapped_column(Boolean, default=False)
    amenities: Mapped[list] = mapped_column(JSON, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now_naive)


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (Index("ix_bookings_venue_date", "venue_id", "date"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    venue_id: Mapped[str] = mapped_column(ForeignKey("venues.id"))
    renter_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    date: Mapped[str] = mapped_column(String(10))
    start_time: Mapped[str] = mapped_column(String(8))
    end_time: Mapped[str] = mapped_column(String(8))
    status: Mapped[str] = mapped_column(String(16), default="pending", index=True)
    total_amount: Mapped[float] = mapped_column(Numeric(10, 2), default=0)
    insurance_required: Mapped[bool] = mapped_column(Boolean, default=False)
    insurance_approved: Mapped[bool] = mapped_column(Boolean, default=True)
    recurring_type: Mapped[str] = mapped_column(String(16), default="none")
    recurring_end_date: Mapped[str | None] = mapped_column(String(10), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now_naive)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now_naive, onupdate=utc_now_naive
    )


class RecurringBooking(Base):
    __tablename__ = "recurring_bookings"
    __table_args__ = (Index("ix_recurring_bookings_venue_date", "venue_id", "date"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    parent_booking_id: Mapped[str] = mapped_column(ForeignKey("bookings.id"), index=True)
    venue_id: Mapped[str] = mapped_column(ForeignKey("venues.id"))
    renter_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    date: Mapped[str] = mapped_column(String(10))
    start_time: Mapped[str] = mapped_column(String(8))
    end_time: Mapped[str] = mapped_column(String(8))
    status: Mapped[str] = mapped_column(String(16), default="pending", index=True)
    total_amount: Mapped[float] = mapped_column(Numeric(10, 2), default=0)
    insurance_approved: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now_naive)


class Availability(Base):
    __tablename__ = "availability"
    __table_args__ = (Index("ix_availability_venue_date", "venue_id", "date"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    venue_id: Mapped[str] = mapped_column(ForeignKey("venues.id"))
    date: Mapped[str] = mapped_column(String(10))
    start_time: Mapped[str] = mapped_column(String(8))
    end_time: Mapped[str] = mapped_column(String(8))
    is_available: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now_naive)


class VenueAdminConfigRow(Base):
    __tablename__ = "venue_admin_configs"

    venue_id: Mapped[str] = mapped_column(ForeignKey("venues.id"), primary_key=True)
    drop_in_enabled: Mapped[bool] = mapped_column(Boolean, default=False)
    drop_in_price: Mapped[float | None] = mapped_column(Numeric(10, 2), nullable=True)
    min_advance_booking_days: Mapped[int] = mapped_column(Integer, default=0)
    min_advance_lead_time_hours: Mapped[int] = mapped_column(Integer, default=0)
    same_day_cutoff_time: Mapped[str | None] = mapped_column(String(8), nullable=True)
    operating_hours: Mapped[list] = mapped_column(JSON, default=list)
    blackout_dates: Mapped[list] = mapped_column(JSON, default=list)
    holiday_dates: Mapped[list] = mapped_column(JSON, default=list)
    insurance_requires_manual_approval: Mapped[bool] = mapped_column(Boolean, default=True)
    insurance_document_types: Mapped[list] = mapped_column(JSON, default=list)
    policy_cancel: Mapped[str | None] = mapped_column(Text, nullable=True)
    policy_refund: Mapped[str | None] = mapped_column(Text, nullable=True)
    policy_reschedule: Mapped[str | None] = mapped_column(Text, nullable=True)
    policy_no_show: Mapped[str | None] = mapped_column(Text, nullable=True)
    policy_operating_hours_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    review_cadence_days: Mapped[int] = mapped_column(Integer, default=30)
    last_reviewed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(120), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now_naive)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now_naive, onupdate=utc_now_naive
    )
