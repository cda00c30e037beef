"""
Events API routes.

Registration and deletion of day events and management of their photo
lists.
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from db import SessionLocal
from domain.errors import InvalidEvent
from domain.models import Event
from repositories import DumpsRepository, EventsRepository
from services.schedule import attach_photos, build_event, remove_photo
from settings import settings

router = APIRouter()
events_repo = EventsRepository()
dumps_repo = DumpsRepository()
logger = logging.getLogger(__name__)


class EventCreate(BaseModel):
    title: str
    date: str
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    memo: Optional[str] = None


class EventResponse(BaseModel):
    id: str
    title: str
    date: str
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    memo: Optional[str] = None
    photo_count: int
    has_dump: bool = False
    created_at: str


class PhotosUpdate(BaseModel):
    photos: List[str]


class PhotosResponse(BaseModel):
    event_id: str
    photos: List[str]
    count: int
    limit: int


def event_to_response(event: Event, has_dump: bool = False) -> EventResponse:
    """Convert domain Event to API response."""
    return EventResponse(
        id=event.id,
        title=event.title,
        date=event.date,
        start_time=event.start_time,
        end_time=event.end_time,
        memo=event.memo,
        photo_count=len(event.photos),
        has_dump=has_dump,
        created_at=event.created_at.isoformat(),
    )


def photos_to_response(event: Event) -> PhotosResponse:
    return PhotosResponse(
        event_id=event.id,
        photos=event.photos,
        count=len(event.photos),
        limit=settings.MAX_PHOTOS_PER_EVENT,
    )


@router.get("", response_model=List[EventResponse])
async def list_events(date: Optional[str] = None):
    """List events, newest day first, optionally for one day."""
    with SessionLocal() as session:
        dumped = dumps_repo.dumped_event_ids(session)
        return [event_to_response(e, e.id in dumped) for e in events_repo.list_events(session, date)]


@router.post("", response_model=EventResponse)
async def create_event(data: EventCreate):
    """Register a new event."""
    try:
        event = build_event(
            title=data.title,
            date=data.date,
            start_time=data.start_time,
            end_time=data.end_time,
            memo=data.memo,
        )
    except InvalidEvent as e:
        raise HTTPException(status_code=400, detail=str(e))
    with SessionLocal() as session:
        saved = events_repo.create_event(session, event)
        logger.info("Registered event %s on %s", saved.id, saved.date)
        return event_to_response(saved)


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: str):
    """Get an event by ID."""
    with SessionLocal() as session:
        event = events_repo.get_event(session, event_id)
        if not event:
            raise HTTPException(status_code=404, detail="Event not found")
        return event_to_response(event, dumps_repo.get_dump(session, event_id) is not None)


@router.delete("/{event_id}")
async def delete_event(event_id: str):
    """Delete an event, and its dump when cascade delete is enabled."""
    with SessionLocal() as session:
        deleted = events_repo.delete_event(session, event_id, cascade=settings.CASCADE_DELETE)
        if not deleted:
            raise HTTPException(status_code=404, detail="Event not found")
    logger.info("Deleted event %s (cascade=%s)", event_id, settings.CASCADE_DELETE)
    return {"status": "deleted"}


@router.get("/{event_id}/photos", response_model=PhotosResponse)
async def get_photos(event_id: str):
    with SessionLocal() as session:
        event = events_repo.get_event(session, event_id)
        if not event:
            raise HTTPException(status_code=404, detail="Event not found")
        return photos_to_response(event)


@router.post("/{event_id}/photos", response_model=PhotosResponse)
async def add_photos(event_id: str, data: PhotosUpdate):
    """Append photos after the existing ones; extras beyond the cap are dropped."""
    with SessionLocal() as session:
        event = events_repo.get_event(session, event_id)
        if not event:
            raise HTTPException(status_code=404, detail="Event not found")
        photos = attach_photos(event.photos, data.photos)
        dropped = len(event.photos) + len(data.photos) - len(photos)
        if dropped:
            logger.info("Event %s: %d photo(s) not attached (duplicate or over limit)", event_id, dropped)
        updated = events_repo.save_photos(session, event_id, photos)
        return photos_to_response(updated)


@router.put("/{event_id}/photos", response_model=PhotosResponse)
async def replace_photos(event_id: str, data: PhotosUpdate):
    """Replace the photo list of an event."""
    with SessionLocal() as session:
        event = events_repo.get_event(session, event_id)
        if not event:
            raise HTTPException(status_code=404, detail="Event not found")
        updated = events_repo.save_photos(session, event_id, attach_photos([], data.photos))
        return photos_to_response(updated)


@router.delete("/{event_id}/photos/{index}", response_model=PhotosResponse)
async def delete_photo(event_id: str, index: int):
    """Remove one photo by its position."""
    with SessionLocal() as session:
        event = events_repo.get_event(session, event_id)
        if not event:
            raise HTTPException(status_code=404, detail="Event not found")
        try:
            photos = remove_photo(event.photos, index)
        except IndexError:
            raise HTTPException(status_code=404, detail="Photo not found")
        updated = events_repo.save_photos(session, event_id, photos)
        return photos_to_response(updated)
