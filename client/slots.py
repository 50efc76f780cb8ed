"""
Matching a picked calendar date against the weekly slot listing.

The slot listing and the date picker do not always serialise dates the
same way ("2024-06-01" versus "2024-06-01T00:00:00.000Z"), so a direct
string comparison is tried first and a comparison of UTC calendar dates
second.
"""
from datetime import date, datetime, timezone


def to_utc_date(value):
    """Return the UTC calendar date of a date, datetime or ISO string as YYYY-MM-DD, or None."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    if text.endswith(('Z', 'z')):
        text = text[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        try:
            return date.fromisoformat(text[:10]).isoformat()
        except ValueError:
            return None
    return to_utc_date(parsed)


def slots_for_date(days, selected_date):
    """Slots of the day in `days` matching `selected_date`, or an empty list."""
    for day in days:
        if day.get('date') == selected_date:
            return day.get('available_slots', [])

    target = to_utc_date(selected_date)
    if target is None:
        return []
    for day in days:
        if to_utc_date(day.get('date')) == target:
            return day.get('available_slots', [])
    return []
