from .events import EventsRepository
from .dumps import DumpsRepository
from .store import DumpStore, InMemoryDumpStore, SqlDumpStore
from . import models

__all__ = [
    "EventsRepository",
    "DumpsRepository",
    "DumpStore",
    "InMemoryDumpStore",
    "SqlDumpStore",
    "models",
]
