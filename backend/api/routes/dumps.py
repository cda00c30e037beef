"""
Photo dump API routes.

Layout catalog, default selections, composing a dump and reading it
back as a record, as layout geometry or as a PNG.
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, HTTPException, Query, Response
from pydantic import BaseModel

from api.errors import to_http_exception
from db import SessionLocal
from domain.errors import DumpError, IncompleteSelection, InvalidSelection, MissingEvent
from domain.models import (
    BACKGROUND_PRESETS,
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_FONT_FAMILY,
    DEFAULT_IMAGE_GAP,
    DEFAULT_IMAGE_RADIUS,
    ComposeRequest,
    Dump,
    DumpStyle,
    RenderContext,
)
from repositories import DumpsRepository, DumpStore, SqlDumpStore
from services import layout_catalog
from services.dump_composer import DumpComposer
from services.layout_engine import compute_layout
from services.photo_selector import PhotoSelector
from services.render_image import render_dump_png
from settings import settings

router = APIRouter()
catalog_router = APIRouter()
dumps_repo = DumpsRepository()
logger = logging.getLogger(__name__)


def get_store() -> DumpStore:
    return SqlDumpStore(SessionLocal)


class LayoutResponse(BaseModel):
    layout: str
    required_count: int
    columns: int
    rows: int


class BackgroundPresetResponse(BaseModel):
    name: str
    color: str


class SelectionResponse(BaseModel):
    event_id: str
    layout: str
    required_count: int
    available_layouts: List[str]
    selected_indices: List[int]
    composable: bool


class DumpCreate(BaseModel):
    layout: str = layout_catalog.DEFAULT_LAYOUT.value
    # Positions in the event's photo list, in the order the user picked them
    selected_indices: Optional[List[int]] = None
    background_color: str = DEFAULT_BACKGROUND_COLOR
    font_family: str = DEFAULT_FONT_FAMILY
    image_gap: int = DEFAULT_IMAGE_GAP
    image_radius: int = DEFAULT_IMAGE_RADIUS
    title: str = ""
    memo: str = ""
    show_title: bool = False
    show_memo: bool = False
    show_frame: bool = True


class DumpStyleResponse(BaseModel):
    layout: str
    background_color: str
    font_family: str
    image_gap: int
    image_radius: int


class DumpResponse(BaseModel):
    id: str
    event_id: str
    title: str
    memo: str
    show_title: bool
    show_memo: bool
    show_frame: bool
    style: DumpStyleResponse
    photos: List[str]
    created_at: str


class GalleryItemResponse(BaseModel):
    event_id: str
    event_title: str
    event_date: str
    dump_id: str
    title: str
    layout: str
    cover_photo: Optional[str] = None
    photo_count: int
    created_at: str


def dump_to_response(dump: Dump) -> DumpResponse:
    """Convert domain Dump to API response."""
    return DumpResponse(**dump.to_dict())


def _replay_selection(selector: PhotoSelector, indices: List[int]) -> None:
    """Rebuild the user's picks on a fresh selector, in pick order."""
    if len(set(indices)) != len(indices):
        raise InvalidSelection("selection contains the same photo twice")
    for photo in selector.selected:
        selector.toggle(photo)
    for index in indices:
        selector.toggle_index(index)


@catalog_router.get("/layouts", response_model=List[LayoutResponse])
async def list_layouts(count: Optional[int] = None):
    """All layouts, or only those usable with `count` photos."""
    if count is None:
        specs = layout_catalog.all_layouts()
    else:
        specs = [layout_catalog.get_spec(layout_id) for layout_id in layout_catalog.available_layouts(count)]
    return [LayoutResponse(**spec.to_dict()) for spec in specs]


@catalog_router.get("/styles/backgrounds", response_model=List[BackgroundPresetResponse])
async def list_background_presets():
    return [BackgroundPresetResponse(name=name, color=color) for name, color in BACKGROUND_PRESETS]


@catalog_router.get("/gallery", response_model=List[GalleryItemResponse])
async def gallery():
    """Every composed dump with its event, newest first."""
    with SessionLocal() as session:
        rows = dumps_repo.list_with_events(session)
    return [
        GalleryItemResponse(
            event_id=event.id,
            event_title=event.title,
            event_date=event.date,
            dump_id=dump.id,
            title=dump.title,
            layout=dump.layout.value,
            cover_photo=dump.photos[0] if dump.photos else None,
            photo_count=len(dump.photos),
            created_at=dump.created_at.isoformat(),
        )
        for dump, event in rows
    ]


@router.get("/selection", response_model=SelectionResponse)
async def default_selection(event_id: str, layout: str = layout_catalog.DEFAULT_LAYOUT.value):
    """The selection a fresh session starts with for `layout`."""
    store = get_store()
    try:
        event = store.get_event_by_id(event_id)
        if event is None:
            raise MissingEvent(event_id)
        selector = PhotoSelector.initialize(event.photos)
        selector.change_layout(layout)
    except DumpError as e:
        raise to_http_exception(e)
    photo_set = selector.photo_set
    return SelectionResponse(
        event_id=event_id,
        layout=selector.layout.value,
        required_count=selector.required_count,
        available_layouts=[layout_id.value for layout_id in selector.available_layouts()],
        selected_indices=[photo_set.index(p) for p in selector.selected],
        composable=selector.is_composable(),
    )


@router.post("/dump", response_model=DumpResponse)
async def create_dump(event_id: str, data: DumpCreate):
    """
    Compose the event's dump, replacing any previous one.

    Without `selected_indices` the default selection (first N photos)
    is used.
    """
    store = get_store()
    try:
        event = store.get_event_by_id(event_id)
        if event is None:
            raise MissingEvent(event_id)
        selector = PhotoSelector.initialize(event.photos, data.layout)
        if data.selected_indices is not None:
            _replay_selection(selector, data.selected_indices)
        if not selector.is_composable():
            raise IncompleteSelection(required=selector.required_count, actual=len(selector.selected))
        request = ComposeRequest(
            event_id=event_id,
            selected=selector.selected,
            style=DumpStyle(
                layout=selector.layout,
                background_color=data.background_color,
                font_family=data.font_family,
                image_gap=data.image_gap,
                image_radius=data.image_radius,
            ),
            title=data.title,
            memo=data.memo,
            show_title=data.show_title,
            show_memo=data.show_memo,
            show_frame=data.show_frame,
        )
        dump = DumpComposer(store).compose_request(request)
    except DumpError as e:
        raise to_http_exception(e)
    return dump_to_response(dump)


def _load_dump(event_id: str) -> Dump:
    try:
        dump = get_store().get_dump(event_id)
    except DumpError as e:
        raise to_http_exception(e)
    if dump is None:
        raise HTTPException(status_code=404, detail="Dump not found")
    return dump


@router.get("/dump", response_model=DumpResponse)
async def get_dump(event_id: str):
    return dump_to_response(_load_dump(event_id))


@router.get("/dump/layout")
async def get_dump_layout(event_id: str, width: Optional[int] = Query(None, ge=64, le=4096)):
    """Positioned elements of the dump for client-side rendering."""
    dump = _load_dump(event_id)
    context = RenderContext(canvas_width_px=width or settings.RENDER_WIDTH)
    return compute_layout(dump, context).to_dict()


@router.get("/dump.png")
async def get_dump_png(event_id: str, width: Optional[int] = Query(None, ge=64, le=4096)):
    """Render the dump to a PNG image."""
    dump = _load_dump(event_id)
    context = RenderContext(canvas_width_px=width or settings.RENDER_WIDTH)
    png = render_dump_png(dump, context)
    return Response(
        content=png,
        media_type="image/png",
        headers={"Content-Disposition": f'inline; filename="dump_{event_id}.png"'},
    )
