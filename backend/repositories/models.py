"""
SQLAlchemy ORM models for persistence.
"""
from datetime import datetime
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, JSON, String, Text
from sqlalchemy.orm import relationship

from db import Base


class EventORM(Base):
    __tablename__ = "events"

    id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False)
    date = Column(String, nullable=False, index=True)
    start_time = Column(String, nullable=True)
    end_time = Column(String, nullable=True)
    memo = Column(Text, nullable=True)
    photos = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    dump = relationship(
        "DumpORM",
        back_populates="event",
        uselist=False,
        cascade="all, delete-orphan",
    )


class DumpORM(Base):
    __tablename__ = "dumps"

    # One dump per event: the event id is the key
    event_id = Column(String, ForeignKey("events.id", ondelete="CASCADE"), primary_key=True)
    id = Column(String, nullable=False, unique=True)
    layout = Column(String, nullable=False)
    title = Column(Text, nullable=False, default="")
    memo = Column(Text, nullable=False, default="")
    show_title = Column(Boolean, nullable=False, default=False)
    show_memo = Column(Boolean, nullable=False, default=False)
    show_frame = Column(Boolean, nullable=False, default=True)
    style = Column(JSON, nullable=False)
    photos = Column(JSON, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    event = relationship("EventORM", back_populates="dump")
