"""
Dump store contract and its implementations.

The composer only needs four operations from its environment; they are
described by `DumpStore`. `SqlDumpStore` backs them with the SQLite
repositories, `InMemoryDumpStore` with plain dicts.
"""
import logging
from typing import Callable, Dict, List, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from domain.errors import PersistenceError
from domain.models import Dump, Event
from repositories.dumps import DumpsRepository
from repositories.events import EventsRepository

logger = logging.getLogger(__name__)


class DumpStore(Protocol):
    """Keyed storage for events, their photos and their single dump."""

    def get_photos(self, event_id: str) -> List[str]:
        """Ordered photo references of an event; empty list if none."""
        ...

    def get_dump(self, event_id: str) -> Optional[Dump]:
        ...

    def save_dump(self, dump: Dump) -> None:
        """Persist keyed by `dump.event_id`, replacing any existing dump."""
        ...

    def get_event_by_id(self, event_id: str) -> Optional[Event]:
        ...


class InMemoryDumpStore:
    """Dict-backed store for tests and embedding callers."""

    def __init__(self) -> None:
        self.events: Dict[str, Event] = {}
        self.dumps: Dict[str, Dump] = {}

    def add_event(self, event: Event) -> Event:
        self.events[event.id] = event
        return event

    def get_photos(self, event_id: str) -> List[str]:
        event = self.events.get(event_id)
        return list(event.photos) if event else []

    def get_dump(self, event_id: str) -> Optional[Dump]:
        return self.dumps.get(event_id)

    def save_dump(self, dump: Dump) -> None:
        self.dumps[dump.event_id] = dump

    def get_event_by_id(self, event_id: str) -> Optional[Event]:
        return self.events.get(event_id)


class SqlDumpStore:
    """
    Store backed by SQLAlchemy repositories.

    Each call opens its own session from `session_factory`; database
    errors surface as PersistenceError.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        events_repo: Optional[EventsRepository] = None,
        dumps_repo: Optional[DumpsRepository] = None,
    ):
        self.session_factory = session_factory
        self.events_repo = events_repo or EventsRepository()
        self.dumps_repo = dumps_repo or DumpsRepository()

    def get_photos(self, event_id: str) -> List[str]:
        try:
            with self.session_factory() as session:
                return self.events_repo.get_photos(session, event_id)
        except SQLAlchemyError as exc:
            logger.exception("Failed to load photos for event %s", event_id)
            raise PersistenceError(f"could not load photos: {exc}") from exc

    def get_dump(self, event_id: str) -> Optional[Dump]:
        try:
            with self.session_factory() as session:
                return self.dumps_repo.get_dump(session, event_id)
        except SQLAlchemyError as exc:
            logger.exception("Failed to load dump for event %s", event_id)
            raise PersistenceError(f"could not load dump: {exc}") from exc

    def save_dump(self, dump: Dump) -> None:
        try:
            with self.session_factory() as session:
                self.dumps_repo.save_dump(session, dump)
        except SQLAlchemyError as exc:
            logger.exception("Failed to save dump for event %s", dump.event_id)
            raise PersistenceError(f"could not save dump: {exc}") from exc

    def get_event_by_id(self, event_id: str) -> Optional[Event]:
        try:
            with self.session_factory() as session:
                return self.events_repo.get_event(session, event_id)
        except SQLAlchemyError as exc:
            logger.exception("Failed to load event %s", event_id)
            raise PersistenceError(f"could not load event: {exc}") from exc
