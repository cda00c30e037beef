"""
Layout engine service.

Computes the geometry of a composed dump: the frame, the optional title
and memo bands, and one square cell per photo in selection order.
Any renderer (Pillow here, a browser canvas elsewhere) draws from this.
Uses a registry pattern so new layout families can be added by id.
"""
from typing import Callable, Dict, List
from domain.errors import UnsupportedLayout
from domain.models import (
    Dump, DumpLayout, LayoutId, LayoutRect, RenderContext
)
from services import layout_catalog


# Type alias for layout functions
LayoutFunction = Callable[[Dump, RenderContext], DumpLayout]


# Registry of layout functions by layout id
_layout_registry: Dict[LayoutId, LayoutFunction] = {}


def register_layout(*layout_ids: LayoutId):
    """Decorator to register a layout function for one or more layout ids."""
    def decorator(func: LayoutFunction) -> LayoutFunction:
        for layout_id in layout_ids:
            _layout_registry[layout_id] = func
        return func
    return decorator


def compute_layout(dump: Dump, context: RenderContext) -> DumpLayout:
    """
    Compute the layout for a dump.

    Args:
        dump: The composed dump
        context: Render context with canvas size and text metrics

    Returns:
        DumpLayout with positioned elements

    Raises:
        UnsupportedLayout: If no layout is registered for the dump's layout id
    """
    layout_func = _layout_registry.get(dump.layout)
    if not layout_func:
        raise UnsupportedLayout(dump.layout)
    return layout_func(dump, context)


def shows_title(dump: Dump) -> bool:
    return dump.show_frame and dump.show_title and bool(dump.title)


def shows_memo(dump: Dump) -> bool:
    return dump.show_frame and dump.show_memo and bool(dump.memo)


# ============================================
# Layout implementations
# ============================================

@register_layout(LayoutId.GRID4, LayoutId.GRID6, LayoutId.GRID8, LayoutId.GRID9)
def layout_grid(dump: Dump, context: RenderContext) -> DumpLayout:
    """
    Layout for the fixed-count grids.

    Structure, top to bottom:
    - Frame padding (only with show_frame)
    - Title band (frame + show_title + non-empty title)
    - Grid of square cells, `columns(layout)` wide, `image_gap` apart
    - Memo band (frame + show_memo + non-empty memo)
    """
    style = dump.style
    spec = layout_catalog.get_spec(dump.layout)
    width = context.canvas_width_px
    padding = context.frame_padding_px if dump.show_frame else 0
    gap = style.image_gap
    content_width = width - 2 * padding

    elements: List[LayoutRect] = []
    y = padding

    if shows_title(dump):
        elements.append(LayoutRect(
            kind="title",
            x_px=padding,
            y_px=y,
            width_px=content_width,
            height_px=context.title_height_px,
            text=dump.title,
            font_size=context.title_font_size,
            color=context.text_color,
        ))
        y += context.title_height_px + context.text_gap_px

    cell = (content_width - (spec.columns - 1) * gap) / spec.columns
    rows = max(spec.rows, -(-len(dump.photos) // spec.columns))
    grid_top = y
    for i, photo in enumerate(dump.photos):
        row = i // spec.columns
        col = i % spec.columns
        elements.append(LayoutRect(
            kind="photo",
            x_px=padding + col * (cell + gap),
            y_px=grid_top + row * (cell + gap),
            width_px=cell,
            height_px=cell,
            photo=photo,
            number=i + 1,
            radius_px=style.image_radius,
            shadow=dump.show_frame,
        ))
    y = grid_top + rows * cell + max(rows - 1, 0) * gap

    if shows_memo(dump):
        y += context.text_gap_px
        elements.append(LayoutRect(
            kind="memo",
            x_px=padding,
            y_px=y,
            width_px=content_width,
            height_px=context.memo_height_px,
            text=dump.memo,
            font_size=context.memo_font_size,
            color=context.memo_color,
        ))
        y += context.memo_height_px

    return DumpLayout(
        dump_id=dump.id,
        layout=dump.layout,
        width_px=width,
        height_px=y + padding,
        background_color=style.background_color,
        font_family=style.font_family,
        columns=spec.columns,
        rows=rows,
        padding_px=padding,
        elements=elements,
    )
