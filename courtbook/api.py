from typing import List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from .core.venue_config import venue_admin_config_to_dict
from .db import get_db
from .models import Availability, Booking, Venue
from .schemas import (
    DATE_PATTERN,
    AvailabilityCreate,
    AvailabilityOut,
    BookingCancelOut,
    BookingCreate,
    BookingOut,
    ConflictCheckRequest,
    HolidayPrefillRequest,
    VenueAdminConfigOut,
    VenueAdminConfigUpdate,
    VenueCompletenessOut,
    VenueCreate,
    VenueOut,
)
from .services import (
    VENUE_UPDATE_FIELDS,
    BookingConflict,
    PolicyViolationError,
    add_availability_block,
    approve_booking_insurance,
    cancel_booking,
    check_conflicts,
    count_recurring_instances,
    create_booking,
    create_venue,
    get_booking,
    get_venue,
    get_venue_completeness,
    list_availability,
    load_venue_admin_config,
    mark_venue_config_reviewed,
    prefill_holiday_dates,
    update_booking_status,
    update_venue,
    upsert_venue_admin_config,
)

router = APIRouter(prefix="/api")
admin_router = APIRouter(prefix="/api/admin")


def _to_venue_out(v: Venue) -> VenueOut:
    return VenueOut(
        id=v.id,
        name=v.name,
        hourly_rate=float(v.hourly_rate),
        instant_booking=bool(v.instant_booking),
        insurance_required=bool(v.insurance_required),
        amenities=list(v.amenities or []),
        is_active=bool(v.is_active),
    )


def _to_availability_out(a: Availability) -> AvailabilityOut:
    return AvailabilityOut(
        id=a.id,
        venue_id=a.venue_id,
        date=a.date,
        start_time=a.start_time,
        end_time=a.end_time,
        is_available=bool(a.is_available),
    )


def _to_booking_out(b: Booking, recurring_instances: int = 0, venue: Venue | None = None) -> BookingOut:
    insurance_pending = bool(b.insurance_required) and not bool(b.insurance_approved)
    instant = bool(venue.instant_booking) if venue else False
    return BookingOut(
        id=b.id,
        venue_id=b.venue_id,
        renter_id=b.renter_id,
        date=b.date,
        start_time=b.start_time,
        end_time=b.end_time,
        status=b.status,
        total_amount=float(b.total_amount or 0),
        insurance_required=bool(b.insurance_required),
        insurance_approved=bool(b.insurance_approved),
        recurring_type=b.recurring_type,
        recurring_end_date=b.recurring_end_date,
        notes=b.notes,
        recurring_instances=recurring_instances,
        requires_immediate_payment=instant and not bool(b.insurance_required),
        awaiting_owner_approval=not instant and not insurance_pending,
        awaiting_insurance_approval=insurance_pending,
    )


def _require_venue(db: Session, venue_id: str) -> Venue:
    venue = get_venue(db, venue_id)
    if not venue:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Venue not found")
    return venue


@router.post("/venues", response_model=VenueOut)
def add_venue(payload: VenueCreate, db: Session = Depends(get_db)):
    venue = create_venue(
        db,
        name=payload.name,
        hourly_rate=payload.hourly_rate,
        instant_booking=payload.instant_booking,
        insurance_required=payload.insurance_required,
        amenities=payload.amenities,
    )
    return _to_venue_out(venue)


@router.post("/venues/{venue_id}/availability", response_model=AvailabilityOut)
def add_venue_availability(
    venue_id: str, payload: AvailabilityCreate, db: Session = Depends(get_db)
):
    _require_venue(db, venue_id)
    block = add_availability_block(
        db,
        venue_id=venue_id,
        day=payload.date,
        start_time=payload.start_time,
        end_time=payload.end_time,
        is_available=payload.is_available,
    )
    return _to_availability_out(block)


@router.get("/venues/{venue_id}/availability", response_model=List[AvailabilityOut])
def list_venue_availability(
    venue_id: str,
    day: str = Query(..., alias="date", pattern=DATE_PATTERN),
    db: Session = Depends(get_db),
):
    _require_venue(db, venue_id)
    return [_to_availability_out(a) for a in list_availability(db, venue_id, day)]


@router.post("/bookings/conflicts")
def check_booking_conflicts(payload: ConflictCheckRequest, db: Session = Depends(get_db)):
    result = check_conflicts(
        db,
        venue_id=payload.venue_id,
        day=payload.date,
        start_time=payload.start_time,
        end_time=payload.end_time,
        exclude_booking_id=payload.exclude_booking_id,
    )
    return {"success": True, "data": result.to_payload()}


@router.post("/bookings", response_model=BookingOut)
def add_booking(payload: BookingCreate, db: Session = Depends(get_db)):
    venue = _require_venue(db, payload.venue_id)
    try:
        booking, instances = create_booking(
            db,
            venue_id=payload.venue_id,
            day=payload.date,
            start_time=payload.start_time,
            end_time=payload.end_time,
            renter_id=payload.renter_id,
            recurring_type=payload.recurring_type,
            recurring_end_date=payload.recurring_end_date,
            notes=payload.notes,
        )
    except BookingConflict as exc:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": str(exc), "conflict": exc.result.to_payload()},
        )
    except PolicyViolationError as exc:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": str(exc), "code": exc.violation.code},
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return _to_booking_out(booking, instances, venue)


@router.get("/bookings/{booking_id}", response_model=BookingOut)
def read_booking(booking_id: str, db: Session = Depends(get_db)):
    booking = get_booking(db, booking_id)
    if not booking:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    return _to_booking_out(
        booking, count_recurring_instances(db, booking.id), get_venue(db, booking.venue_id)
    )


@router.post("/bookings/{booking_id}/cancel", response_model=BookingCancelOut)
def cancel(booking_id: str, db: Session = Depends(get_db)):
    try:
        booking, info = cancel_booking(db, booking_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return BookingCancelOut(
        booking=_to_booking_out(booking, venue=get_venue(db, booking.venue_id)),
        refund_eligible=info.eligible_for_refund,
        hours_until_start=info.hours_until_start,
    )


def _change_status(db: Session, booking_id: str, to_status: str) -> BookingOut:
    try:
        booking = update_booking_status(db, booking_id, to_status)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return _to_booking_out(booking, venue=get_venue(db, booking.venue_id))


@router.post("/bookings/{booking_id}/confirm", response_model=BookingOut)
def confirm(booking_id: str, db: Session = Depends(get_db)):
    return _change_status(db, booking_id, "confirmed")


@router.post("/bookings/{booking_id}/complete", response_model=BookingOut)
def complete(booking_id: str, db: Session = Depends(get_db)):
    return _change_status(db, booking_id, "completed")


@admin_router.get("/venues/{venue_id}/config", response_model=VenueAdminConfigOut)
def read_venue_config(venue_id: str, db: Session = Depends(get_db)):
    _require_venue(db, venue_id)
    return venue_admin_config_to_dict(load_venue_admin_config(db, venue_id))


@admin_router.put("/venues/{venue_id}/config", response_model=VenueAdminConfigOut)
def update_venue_config(
    venue_id: str,
    payload: VenueAdminConfigUpdate,
    db: Session = Depends(get_db),
    x_actor_email: Optional[str] = Header(default=None),
):
    _require_venue(db, venue_id)
    updates = payload.dict(exclude_unset=True, exclude={"mark_reviewed_now", "updated_by"})
    venue_updates = {name: updates.pop(name) for name in VENUE_UPDATE_FIELDS if name in updates}
    try:
        config = upsert_venue_admin_config(
            db,
            venue_id,
            updates,
            mark_reviewed_now=payload.mark_reviewed_now,
            actor=payload.updated_by or x_actor_email,
        )
        if venue_updates:
            update_venue(db, venue_id, venue_updates)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return venue_admin_config_to_dict(config)


@admin_router.post("/venues/{venue_id}/config/review", response_model=VenueAdminConfigOut)
def review_venue_config(
    venue_id: str,
    db: Session = Depends(get_db),
    x_actor_email: Optional[str] = Header(default=None),
):
    _require_venue(db, venue_id)
    return venue_admin_config_to_dict(mark_venue_config_reviewed(db, venue_id, actor=x_actor_email))


@admin_router.post("/venues/{venue_id}/config/holidays", response_model=VenueAdminConfigOut)
def prefill_venue_holidays(
    venue_id: str, payload: HolidayPrefillRequest, db: Session = Depends(get_db)
):
    _require_venue(db, venue_id)
    try:
        config = prefill_holiday_dates(
            db, venue_id, payload.years, country=payload.country, subdiv=payload.subdiv
        )
    except NotImplementedError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return venue_admin_config_to_dict(config)


@admin_router.get("/venues/{venue_id}/completeness", response_model=VenueCompletenessOut)
def read_venue_completeness(venue_id: str, db: Session = Depends(get_db)):
    _require_venue(db, venue_id)
    result = get_venue_completeness(db, venue_id)
    return VenueCompletenessOut(
        venue_id=venue_id,
        score=result.score,
        missing_fields=result.missing_fields,
        review_due=result.review_due,
        next_review_at=result.next_review_at,
    )


@admin_router.post("/bookings/{booking_id}/insurance-approve", response_model=BookingOut)
def approve_insurance(booking_id: str, db: Session = Depends(get_db)):
    try:
        booking = approve_booking_insurance(db, booking_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return _to_booking_out(
        booking, count_recurring_instances(db, booking.id), get_venue(db, booking.venue_id)
    )
