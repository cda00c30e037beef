"""
Event repository backed by SQLAlchemy/SQLite.
"""
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from domain.models import Event
from repositories.models import EventORM


def _event_from_orm(orm: EventORM) -> Event:
    return Event(
        id=orm.id,
        title=orm.title,
        date=orm.date,
        start_time=orm.start_time,
        end_time=orm.end_time,
        memo=orm.memo,
        photos=list(orm.photos or []),
        created_at=orm.created_at,
    )


class EventsRepository:
    """CRUD operations for events and their photo lists."""

    def list_events(self, session: Session, date: Optional[str] = None) -> List[Event]:
        query = session.query(EventORM)
        if date:
            query = query.filter(EventORM.date == date)
        # Newest day first; within a day, events without a start time come first
        events = query.order_by(EventORM.date.desc(), EventORM.start_time, EventORM.created_at).all()
        return [_event_from_orm(e) for e in events]

    def get_event(self, session: Session, event_id: str) -> Optional[Event]:
        orm = session.get(EventORM, event_id)
        if not orm:
            return None
        return _event_from_orm(orm)

    def create_event(self, session: Session, event: Event) -> Event:
        orm = EventORM(
            id=event.id,
            title=event.title,
            date=event.date,
            start_time=event.start_time,
            end_time=event.end_time,
            memo=event.memo,
            photos=list(event.photos),
            created_at=event.created_at or datetime.utcnow(),
        )
        session.add(orm)
        session.commit()
        session.refresh(orm)
        return _event_from_orm(orm)

    def get_photos(self, session: Session, event_id: str) -> List[str]:
        orm = session.get(EventORM, event_id)
        if not orm:
            return []
        return list(orm.photos or [])

    def save_photos(self, session: Session, event_id: str, photos: List[str]) -> Optional[Event]:
        orm = session.get(EventORM, event_id)
        if not orm:
            return None
        # Assign a new list so the JSON column is flagged dirty
        orm.photos = list(photos)
        session.add(orm)
        session.commit()
        session.refresh(orm)
        return _event_from_orm(orm)

    def delete_event(self, session: Session, event_id: str, cascade: bool = True) -> bool:
        """
        Delete an event. With `cascade` its dump goes with it; without,
        the dump row is left behind.
        """
        orm = session.get(EventORM, event_id)
        if not orm:
            return False
        if cascade:
            session.delete(orm)
        else:
            session.query(EventORM).filter(EventORM.id == event_id).delete(
                synchronize_session=False
            )
        session.commit()
        return True
