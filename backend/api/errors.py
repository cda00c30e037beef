"""
Mapping of domain errors to HTTP responses.
"""
from fastapi import HTTPException

from domain.errors import (
    DumpError,
    IncompleteSelection,
    InsufficientPhotos,
    MissingEvent,
    PersistenceError,
    SelectionFull,
)


def to_http_exception(err: DumpError) -> HTTPException:
    if isinstance(err, MissingEvent):
        return HTTPException(status_code=404, detail="Event not found")
    if isinstance(err, PersistenceError):
        return HTTPException(status_code=503, detail=str(err))
    if isinstance(err, (InsufficientPhotos, SelectionFull, IncompleteSelection)):
        # Recoverable by the user: pick or upload more photos
        return HTTPException(status_code=400, detail=str(err))
    return HTTPException(status_code=422, detail=str(err))
