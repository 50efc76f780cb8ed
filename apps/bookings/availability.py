"""
Worker calendar: single-slot checks and the seven day slot listing.

Times of day are handled as minutes since midnight. A slot is offered
when it lies inside one of the worker's timetable periods for that
weekday, misses every non-availability period and does not overlap a
booking that still holds the worker's time.
"""
from collections import defaultdict
from datetime import datetime, timedelta
import logging

from django.utils import timezone

from core.constants import ACTIVE_BOOKING_STATUSES, SLOT_BLOCKING_STATUSES, WEEKDAYS
from .models import Booking

logger = logging.getLogger(__name__)

DAY_START = 9 * 60
DAY_END = 20 * 60
DAYS_AHEAD = 7


def time_to_minutes(value):
    hours, minutes = value.split(':')
    return int(hours) * 60 + int(minutes)


def minutes_to_time(total):
    return f"{total // 60:02d}:{total % 60:02d}"


def display_time(total):
    hours, minutes = divmod(total, 60)
    suffix = 'PM' if 12 <= hours % 24 else 'AM'
    return f"{hours % 12 or 12}:{minutes:02d} {suffix}"


def slot_interval(duration):
    return min(duration, 60)


def candidate_starts(duration):
    return range(DAY_START, DAY_END, slot_interval(duration))


def overlaps(start, end, other_start, other_end):
    return start < other_end and end > other_start


def working_periods(worker, day_name):
    periods = []
    for period in worker.periods_for(day_name):
        try:
            periods.append((time_to_minutes(period['start']), time_to_minutes(period['end'])))
        except (KeyError, TypeError, ValueError):
            logger.warning(f"Skipping malformed timetable period for worker {worker.id} on {day_name}: {period}")
    return periods


def fits_working_hours(periods, start, end):
    return any(period_start <= start and end <= period_end for period_start, period_end in periods)


def slot_payload(start, duration):
    end = start + duration
    return {
        'time': minutes_to_time(start),
        'display_time': display_time(start),
        'end_time': minutes_to_time(end),
        'value': minutes_to_time(start),
        'duration': duration,
    }


def find_conflicting_booking(worker, booking_date, booking_time, exclude_id=None):
    """A PENDING/ACCEPTED booking already holding this exact date and time, if any."""
    bookings = Booking.objects.filter(
        worker=worker,
        booking_date=booking_date,
        booking_time=booking_time,
        status__in=ACTIVE_BOOKING_STATUSES,
    )
    if exclude_id:
        bookings = bookings.exclude(id=exclude_id)
    return bookings.first()


def weekly_slots(worker, duration, now=None):
    """
    Free slots of `duration` minutes for today and the following six days.

    Returns (days, bookings_in_window) where days is a list of
    {date, day, available_slots}.
    """
    now = timezone.localtime(now or timezone.now())
    today = now.date()
    last_day = today + timedelta(days=DAYS_AHEAD - 1)
    tz = timezone.get_current_timezone()

    bookings = list(
        Booking.objects.filter(
            worker=worker,
            status__in=SLOT_BLOCKING_STATUSES,
            booking_date__range=(today, last_day),
        ).select_related('worker_service')
    )
    booked = defaultdict(list)
    for booking in bookings:
        try:
            start = time_to_minutes(booking.booking_time)
        except ValueError:
            continue
        booked[booking.booking_date].append((start, start + (booking.service_duration or duration)))

    window_start = timezone.make_aware(datetime.combine(today, datetime.min.time()), tz)
    window_end = window_start + timedelta(days=DAYS_AHEAD)
    off_periods = list(worker.non_availability.filter(
        start_datetime__lt=window_end, end_datetime__gt=window_start
    ))

    days = []
    for offset in range(DAYS_AHEAD):
        day = today + timedelta(days=offset)
        day_name = WEEKDAYS[day.weekday()]
        periods = working_periods(worker, day_name)
        midnight = timezone.make_aware(datetime.combine(day, datetime.min.time()), tz)

        slots = []
        for start in candidate_starts(duration):
            end = start + duration
            if not fits_working_hours(periods, start, end):
                continue
            if day == today and start <= now.hour * 60 + now.minute:
                continue
            if any(overlaps(start, end, b_start, b_end) for b_start, b_end in booked[day]):
                continue
            slot_start = midnight + timedelta(minutes=start)
            slot_end = midnight + timedelta(minutes=end)
            if any(period.overlaps(slot_start, slot_end) for period in off_periods):
                continue
            slots.append(slot_payload(start, duration))

        days.append({'date': day.isoformat(), 'day': day_name, 'available_slots': slots})

    return days, len(bookings)
