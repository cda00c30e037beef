"""
Core domain models for the photo dump composer.
These are framework-agnostic and can be used across all services.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
import uuid

from domain.errors import UnsupportedLayout


class LayoutId(str, Enum):
    """
    Fixed-count grid layouts a dump can use.

    Earlier iterations of the product had free-form styles
    (timeline/gallery/polaroid, grid/masonry/collage/minimal); only the
    fixed-count grid family is supported.
    """
    GRID4 = "grid4"
    GRID6 = "grid6"
    GRID8 = "grid8"
    GRID9 = "grid9"


@dataclass(frozen=True)
class LayoutSpec:
    """Geometry of a layout: how many photos it takes and how they are gridded."""
    layout: LayoutId
    required_count: int
    columns: int

    @property
    def rows(self) -> int:
        return self.required_count // self.columns

    def to_dict(self) -> Dict[str, Any]:
        return {
            "layout": self.layout.value,
            "required_count": self.required_count,
            "columns": self.columns,
            "rows": self.rows,
        }


# Style defaults
DEFAULT_BACKGROUND_COLOR = "#fefefe"
DEFAULT_FONT_FAMILY = "Inter"
DEFAULT_IMAGE_GAP = 12
DEFAULT_IMAGE_RADIUS = 16
MIN_STYLE_PX = 0
MAX_STYLE_PX = 32

# Background swatches offered by the style picker (any color string is accepted)
BACKGROUND_PRESETS: List[Tuple[str, str]] = [
    ("white", "#fefefe"),
    ("cream", "#fef7ed"),
    ("beige", "#f5f5dc"),
    ("light_gray", "#f8f9fa"),
    ("warm_white", "#fffcf7"),
    ("soft_pink", "#fef2f2"),
]


def clamp_px(value: Any, default: int) -> int:
    """Clamp a pixel value into [MIN_STYLE_PX, MAX_STYLE_PX]; non-numbers fall back to default."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return max(MIN_STYLE_PX, min(MAX_STYLE_PX, number))


@dataclass(frozen=True)
class DumpStyle:
    """Visual styling of a dump. Gap and radius are clamped to 0..32 px."""
    layout: LayoutId = LayoutId.GRID4
    background_color: str = DEFAULT_BACKGROUND_COLOR
    font_family: str = DEFAULT_FONT_FAMILY
    image_gap: int = DEFAULT_IMAGE_GAP
    image_radius: int = DEFAULT_IMAGE_RADIUS

    def __post_init__(self) -> None:
        # frozen dataclass: normalize through object.__setattr__
        try:
            object.__setattr__(self, "layout", LayoutId(self.layout))
        except ValueError:
            raise UnsupportedLayout(self.layout) from None
        object.__setattr__(self, "image_gap", clamp_px(self.image_gap, DEFAULT_IMAGE_GAP))
        object.__setattr__(self, "image_radius", clamp_px(self.image_radius, DEFAULT_IMAGE_RADIUS))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "layout": self.layout.value,
            "background_color": self.background_color,
            "font_family": self.font_family,
            "image_gap": self.image_gap,
            "image_radius": self.image_radius,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DumpStyle":
        return cls(
            layout=data.get("layout", LayoutId.GRID4.value),
            background_color=data.get("background_color") or DEFAULT_BACKGROUND_COLOR,
            font_family=data.get("font_family") or DEFAULT_FONT_FAMILY,
            image_gap=data.get("image_gap", DEFAULT_IMAGE_GAP),
            image_radius=data.get("image_radius", DEFAULT_IMAGE_RADIUS),
        )


@dataclass
class Event:
    """
    A day event registered by the user.

    Photos are opaque image references (usually data URLs) in upload
    order; the order drives default selection and numbering.
    """
    id: str
    title: str
    date: str  # YYYY-MM-DD
    start_time: Optional[str] = None  # HH:MM
    end_time: Optional[str] = None  # HH:MM
    memo: Optional[str] = None
    photos: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.utcnow)

    @staticmethod
    def generate_id() -> str:
        return str(uuid.uuid4())


@dataclass(frozen=True)
class Dump:
    """
    A composed photo dump.

    Immutable once created; composing again for the same event replaces
    it in the store. `photos` is the frozen selection in display order.
    """
    id: str
    event_id: str
    title: str
    memo: str
    show_title: bool
    show_memo: bool
    show_frame: bool
    style: DumpStyle
    photos: Tuple[str, ...]
    created_at: datetime

    @staticmethod
    def generate_id() -> str:
        return str(uuid.uuid4())

    @property
    def layout(self) -> LayoutId:
        return self.style.layout

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "event_id": self.event_id,
            "title": self.title,
            "memo": self.memo,
            "show_title": self.show_title,
            "show_memo": self.show_memo,
            "show_frame": self.show_frame,
            "style": self.style.to_dict(),
            "photos": list(self.photos),
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Dump":
        created_at = data.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        return cls(
            id=data["id"],
            event_id=data["event_id"],
            title=data.get("title") or "",
            memo=data.get("memo") or "",
            show_title=bool(data.get("show_title")),
            show_memo=bool(data.get("show_memo")),
            show_frame=bool(data.get("show_frame")),
            style=DumpStyle.from_dict(data.get("style") or {}),
            photos=tuple(data.get("photos") or ()),
            created_at=created_at or datetime.utcnow(),
        )


@dataclass
class ComposeRequest:
    """
    Everything the composer needs, handed over from the selection step.

    Title/memo and their visibility flags travel here explicitly instead
    of through page-to-page side storage.
    """
    event_id: str
    selected: List[str]
    style: DumpStyle = field(default_factory=DumpStyle)
    title: str = ""
    memo: str = ""
    show_title: bool = False
    show_memo: bool = False
    show_frame: bool = True


# Theme / Render context

@dataclass
class RenderContext:
    """
    Context passed to layout and render functions.
    Sizes are in pixels of the output canvas.
    """
    canvas_width_px: int = 1080
    frame_padding_px: int = 48
    title_height_px: int = 72
    title_font_size: int = 40
    memo_height_px: int = 96
    memo_font_size: int = 24
    text_gap_px: int = 24
    text_color: str = "#1f2937"
    memo_color: str = "#4b5563"
    shadow_offset_px: int = 6
    shadow_blur_px: int = 8


# Layout output models

@dataclass
class LayoutRect:
    """A positioned rectangle in the dump layout."""
    x_px: float
    y_px: float
    width_px: float
    height_px: float
    kind: str = "photo"  # "photo" | "title" | "memo"
    photo: Optional[str] = None
    number: Optional[int] = None  # 1-based position in the selection
    text: Optional[str] = None
    font_size: Optional[float] = None
    color: Optional[str] = None
    radius_px: int = 0
    shadow: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "x_px": self.x_px,
            "y_px": self.y_px,
            "width_px": self.width_px,
            "height_px": self.height_px,
            "number": self.number,
            "text": self.text,
            "font_size": self.font_size,
            "color": self.color,
            "radius_px": self.radius_px,
            "shadow": self.shadow,
        }


@dataclass
class DumpLayout:
    """The computed geometry of a dump, ready for any renderer."""
    dump_id: str
    layout: LayoutId
    width_px: float
    height_px: float
    background_color: str
    font_family: str
    columns: int
    rows: int
    padding_px: float = 0
    elements: List[LayoutRect] = field(default_factory=list)

    @property
    def photo_cells(self) -> List[LayoutRect]:
        return [e for e in self.elements if e.kind == "photo"]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dump_id": self.dump_id,
            "layout": self.layout.value,
            "width_px": self.width_px,
            "height_px": self.height_px,
            "background_color": self.background_color,
            "font_family": self.font_family,
            "columns": self.columns,
            "rows": self.rows,
            "padding_px": self.padding_px,
            "elements": [e.to_dict() for e in self.elements],
        }
