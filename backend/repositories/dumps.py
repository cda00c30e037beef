"""
Dump repository backed by SQLAlchemy/SQLite.

One row per event; saving a dump for an event that already has one
replaces it.
"""
from typing import List, Optional, Set, Tuple
from sqlalchemy.orm import Session

from domain.models import Dump, DumpStyle, Event
from repositories.events import _event_from_orm
from repositories.models import DumpORM, EventORM


def _dump_from_orm(orm: DumpORM) -> Dump:
    return Dump(
        id=orm.id,
        event_id=orm.event_id,
        title=orm.title or "",
        memo=orm.memo or "",
        show_title=bool(orm.show_title),
        show_memo=bool(orm.show_memo),
        show_frame=bool(orm.show_frame),
        style=DumpStyle.from_dict(orm.style or {}),
        photos=tuple(orm.photos or ()),
        created_at=orm.created_at,
    )


def _update_orm_from_dump(orm: DumpORM, dump: Dump) -> None:
    orm.id = dump.id
    orm.layout = dump.layout.value
    orm.title = dump.title
    orm.memo = dump.memo
    orm.show_title = dump.show_title
    orm.show_memo = dump.show_memo
    orm.show_frame = dump.show_frame
    orm.style = dump.style.to_dict()
    orm.photos = list(dump.photos)
    orm.created_at = dump.created_at


class DumpsRepository:
    """Read/replace operations for dumps."""

    def get_dump(self, session: Session, event_id: str) -> Optional[Dump]:
        orm = session.get(DumpORM, event_id)
        if not orm:
            return None
        return _dump_from_orm(orm)

    def save_dump(self, session: Session, dump: Dump) -> Dump:
        orm = session.get(DumpORM, dump.event_id)
        if orm is None:
            orm = DumpORM(event_id=dump.event_id)
        _update_orm_from_dump(orm, dump)
        session.add(orm)
        session.commit()
        session.refresh(orm)
        return _dump_from_orm(orm)

    def delete_dump(self, session: Session, event_id: str) -> bool:
        orm = session.get(DumpORM, event_id)
        if not orm:
            return False
        session.delete(orm)
        session.commit()
        return True

    def dumped_event_ids(self, session: Session) -> Set[str]:
        return {event_id for (event_id,) in session.query(DumpORM.event_id).all()}

    def list_with_events(self, session: Session) -> List[Tuple[Dump, Event]]:
        """Dumps joined with their events, newest first. Orphaned dumps are skipped."""
        rows = (
            session.query(DumpORM, EventORM)
            .join(EventORM, EventORM.id == DumpORM.event_id)
            .order_by(DumpORM.created_at.desc())
            .all()
        )
        return [(_dump_from_orm(d), _event_from_orm(e)) for d, e in rows]
