"""
Availability engine: block and booking commands over the store.

Reads go straight to the tables. Commands that must not race (booking
creation, block deletion) run inside ``locked_day`` so that the
check-then-write pair for a date is serialized across requests.
"""
import logging
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import List, Optional

import pytz
from flask import current_app
from sqlalchemy import update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError

from fitcoach import db
from fitcoach.errors import BlockInUse, Forbidden, NotFound, SlotConflict, ValidationError
from fitcoach.models import AvailabilityBlock, Booking, CalendarDay, Location, User
from .slots import generate_slots, has_collision, sessions_overlap
from .timeutils import minutes_of_day, parse_date, parse_time, session_end

log = logging.getLogger(__name__)


def _session_duration() -> int:
    return current_app.config["SESSION_DURATION_MINUTES"]


def local_today() -> str:
    """Today's date in the coach's timezone, as YYYY-MM-DD."""
    tz = pytz.timezone(current_app.config["COACH_TIMEZONE"])
    return datetime.now(tz).date().isoformat()


# --- Locking ---

def _bump_day(day: str) -> None:
    dialect = db.session.get_bind().dialect.name
    if dialect in ("postgresql", "sqlite"):
        insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
        stmt = insert(CalendarDay).values(date=day, revision=1)
        stmt = stmt.on_conflict_do_update(
            index_elements=[CalendarDay.date],
            set_={"revision": CalendarDay.revision + 1},
        )
        db.session.execute(stmt)
        return

    updated = db.session.execute(
        update(CalendarDay)
        .where(CalendarDay.date == day)
        .values(revision=CalendarDay.revision + 1)
    ).rowcount
    if not updated:
        db.session.add(CalendarDay(date=day, revision=1))
        db.session.flush()


@contextmanager
def locked_day(day: str):
    """
    Run the body as one transaction holding the write lock for ``day``.

    The day row is written before anything is read, so a second writer for
    the same date blocks until this transaction commits or rolls back and
    then sees its result.
    """
    try:
        _bump_day(day)
        yield
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


# --- Blocks ---

def get_blocks(date: Optional[str] = None, branch_id: Optional[str] = None) -> List[AvailabilityBlock]:
    query = AvailabilityBlock.query
    if date:
        query = query.filter_by(date=parse_date(date))
    if branch_id:
        query = query.filter_by(branch_id=branch_id)
    if date:
        return query.order_by(AvailabilityBlock.start_time.asc()).all()
    return query.order_by(AvailabilityBlock.date.asc(), AvailabilityBlock.start_time.asc()).all()


def _active_branch(branch_id) -> Location:
    if not branch_id:
        raise ValidationError("Branch is required")
    location = db.session.get(Location, branch_id)
    if not location:
        raise NotFound("Branch not found")
    if not location.is_active:
        raise ValidationError(f"Branch {location.name} is inactive")
    return location


def _block_times(start_time, end_time):
    start = parse_time(start_time)
    end = parse_time(end_time)
    if minutes_of_day(end) <= minutes_of_day(start):
        raise ValidationError("End time must be after start time")
    return start, end


def create_block(date, start_time, end_time, branch_id) -> AvailabilityBlock:
    return create_blocks([date], [branch_id], start_time, end_time)[0]


def create_blocks(dates, branch_ids, start_time, end_time) -> List[AvailabilityBlock]:
    """Create one block per (date, branch) pair, all or none."""
    if not dates or not branch_ids:
        raise ValidationError("At least one date and one branch are required")
    start, end = _block_times(start_time, end_time)
    days = [parse_date(d) for d in dates]
    branches = [_active_branch(b) for b in branch_ids]

    blocks = []
    try:
        for day in days:
            _bump_day(day)
            for branch in branches:
                block = AvailabilityBlock(date=day, start_time=start, end_time=end, branch_id=branch.id)
                db.session.add(block)
                blocks.append(block)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    log.info("Created %d availability block(s) %s-%s", len(blocks), start, end)
    return blocks


def block_has_bookings(block: AvailabilityBlock) -> bool:
    block_start = minutes_of_day(block.start_time)
    block_end = minutes_of_day(block.end_time)
    # Any branch counts: the coach cannot be in two places at once
    return any(
        sessions_overlap(block_start, block_end, minutes_of_day(b.start_time), minutes_of_day(b.end_time))
        for b in bookings_for_date(block.date)
    )


def delete_block(block_id: str) -> None:
    block = db.session.get(AvailabilityBlock, block_id)
    if not block:
        raise NotFound("Block not found")
    day = block.date
    with locked_day(day):
        if block_has_bookings(block):
            log.info("Refused to delete block %s on %s: bookings inside", block_id, day)
            raise BlockInUse()
        db.session.delete(block)
    log.info("Deleted availability block %s on %s", block_id, day)


# --- Slots ---

def _branch_names() -> dict:
    return {loc.id: loc.name for loc in Location.query.all()}


def available_slots(date, branch_id: Optional[str] = None) -> List[dict]:
    day = parse_date(date)
    return generate_slots(
        get_blocks(day, branch_id),
        bookings_for_date(day),
        _branch_names(),
        _session_duration(),
        current_app.config["SLOT_STEP_MINUTES"],
    )


def available_dates(branch_id: Optional[str] = None, today: Optional[str] = None) -> List[str]:
    """Dates from today onward with at least one open slot, ascending."""
    today = today or local_today()
    query = db.session.query(AvailabilityBlock.date).filter(AvailabilityBlock.date >= today)
    if branch_id:
        query = query.filter(AvailabilityBlock.branch_id == branch_id)
    dates = sorted({row.date for row in query.distinct()})
    return [d for d in dates if available_slots(d, branch_id)]


def count_open_slots_from(today: str) -> int:
    dates = {
        row.date
        for row in db.session.query(AvailabilityBlock.date).filter(AvailabilityBlock.date >= today).distinct()
    }
    return sum(len(available_slots(d)) for d in dates)


# --- Bookings ---

def bookings_for_date(date: str) -> List[Booking]:
    return Booking.query.filter_by(date=date).order_by(Booking.start_time.asc()).all()


def check_booking_collision(date, start_time, end_time, exclude_booking_id: Optional[str] = None) -> bool:
    """True when [start_time, end_time) overlaps any other booking that day."""
    return has_collision(
        minutes_of_day(start_time),
        minutes_of_day(end_time),
        bookings_for_date(date),
        exclude_id=exclude_booking_id,
    )


def list_bookings(caller: User, date: Optional[str] = None, user_id: Optional[str] = None) -> List[Booking]:
    # Clients only ever see their own bookings, whatever they ask for
    if not caller.is_admin:
        user_id = caller.id
        date = None
    if date:
        return bookings_for_date(parse_date(date))
    query = Booking.query
    if user_id:
        query = query.filter_by(user_id=user_id)
    return query.order_by(Booking.date.desc(), Booking.start_time.asc()).all()


def create_booking(
    caller: User,
    date,
    start_time,
    branch_id,
    branch_name: Optional[str] = None,
    manual_client_name: Optional[str] = None,
) -> Booking:
    if not date or not start_time or not branch_id:
        raise ValidationError("Date, time and branch are required")
    day = parse_date(date)
    start = parse_time(start_time)
    duration = _session_duration()
    end = session_end(start, duration)

    for field, value in (("manualClientName", manual_client_name), ("branchName", branch_name)):
        if value is not None and not isinstance(value, str):
            raise ValidationError(f"{field} must be text")
    manual_client_name = (manual_client_name or "").strip() or None
    if manual_client_name and not caller.is_admin:
        raise Forbidden("Only an admin can enter walk-in bookings")

    location = db.session.get(Location, branch_id)
    if not location:
        raise NotFound("Branch not found")

    with locked_day(day):
        if check_booking_collision(day, start, end):
            log.info("Slot conflict on %s %s-%s", day, start, end)
            raise SlotConflict()
        booking = Booking(
            date=day,
            start_time=start,
            end_time=end,
            duration=duration,
            booking_type="manual" if manual_client_name else "app",
            branch_id=location.id,
            branch_name=branch_name or location.name,
            user_id=None if manual_client_name else caller.id,
            user_name=None if manual_client_name else caller.name,
            manual_client_name=manual_client_name,
        )
        db.session.add(booking)
        try:
            db.session.flush()
        except IntegrityError:
            raise SlotConflict()
    log.info("Booking %s created: %s %s-%s at %s (%s)", booking.id, day, start, end, location.name, booking.booking_type)
    return booking


def delete_booking(caller: User, booking_id: str) -> None:
    booking = db.session.get(Booking, booking_id)
    if not booking:
        raise NotFound("Booking not found")
    if not caller.is_admin and booking.user_id != caller.id:
        raise Forbidden()
    with locked_day(booking.date):
        db.session.delete(booking)
    log.info("Booking %s cancelled by %s", booking_id, caller.id)


def week_dates(today: str) -> List[str]:
    start = datetime.strptime(today, '%Y-%m-%d').date()
    return [(start + timedelta(days=i)).isoformat() for i in range(7)]
