"""
Schedule service.

Registration rules for day events and the rules for an event's photo
list (order kept, exact duplicates skipped, capped per event).
"""
from datetime import date as date_cls, datetime
from typing import List, Optional, Sequence

from domain.errors import InvalidEvent
from domain.models import Event
from settings import settings


def _parse_date(value: str) -> str:
    try:
        return date_cls.fromisoformat(value.strip()).isoformat()
    except (AttributeError, ValueError):
        raise InvalidEvent(f"Invalid date (expected YYYY-MM-DD): {value!r}") from None


def _parse_time(value: Optional[str], label: str) -> Optional[str]:
    if value is None or not value.strip():
        return None
    try:
        return datetime.strptime(value.strip(), "%H:%M").strftime("%H:%M")
    except ValueError:
        raise InvalidEvent(f"Invalid {label} (expected HH:MM): {value!r}") from None


def build_event(
    title: str,
    date: str,
    start_time: Optional[str] = None,
    end_time: Optional[str] = None,
    memo: Optional[str] = None,
) -> Event:
    """
    Validate user input and build a new Event.

    Raises:
        InvalidEvent: blank title, bad date/time, or end before start
    """
    clean_title = (title or "").strip()
    if not clean_title:
        raise InvalidEvent("Title is required")
    iso_date = _parse_date(date)
    start = _parse_time(start_time, "start time")
    end = _parse_time(end_time, "end time")
    # HH:MM strings compare chronologically
    if start and end and end < start:
        raise InvalidEvent("End time must not be before start time")
    return Event(
        id=Event.generate_id(),
        title=clean_title,
        date=iso_date,
        start_time=start,
        end_time=end,
        memo=(memo or "").strip() or None,
    )


def attach_photos(existing: Sequence[str], new: Sequence[str], limit: Optional[int] = None) -> List[str]:
    """Append new photo references after the existing ones, up to `limit` in total."""
    cap = settings.MAX_PHOTOS_PER_EVENT if limit is None else limit
    photos = list(existing)
    for ref in new:
        if not ref or ref in photos:
            continue
        photos.append(ref)
    return photos[:cap]


def remove_photo(photos: Sequence[str], index: int) -> List[str]:
    if index < 0 or index >= len(photos):
        raise IndexError(f"photo index out of range: {index}")
    return [p for i, p in enumerate(photos) if i != index]
