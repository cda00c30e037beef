"""
PNG rendering service.

Draws a computed DumpLayout onto a Pillow canvas. The geometry comes
entirely from the layout engine; this module only paints it.
"""
import io
import logging
from typing import Dict, Optional, Tuple

from PIL import Image, ImageColor, ImageDraw, ImageFilter, ImageFont, ImageOps

from domain.models import (
    DEFAULT_BACKGROUND_COLOR, Dump, DumpLayout, LayoutRect, RenderContext
)
from services.image_refs import decode_image_ref
from services.layout_engine import compute_layout

logger = logging.getLogger(__name__)

PLACEHOLDER_COLOR = (229, 231, 235)
SHADOW_COLOR = (0, 0, 0, 60)


def parse_color(value: Optional[str], fallback: str = DEFAULT_BACKGROUND_COLOR) -> Tuple[int, int, int]:
    """Parse a CSS-like color, falling back when Pillow does not understand it."""
    try:
        return ImageColor.getrgb(value or fallback)[:3]
    except ValueError:
        logger.warning("Unrecognized color %r, using %s", value, fallback)
        return ImageColor.getrgb(fallback)[:3]


def _load_font(size: Optional[float]) -> ImageFont.ImageFont:
    try:
        return ImageFont.load_default(size=int(size or 16))
    except TypeError:
        # Pillow < 10.1 has no sized default font
        return ImageFont.load_default()


def _rounded_mask(size: Tuple[int, int], radius: int) -> Image.Image:
    mask = Image.new("L", size, 0)
    ImageDraw.Draw(mask).rounded_rectangle(
        (0, 0, size[0] - 1, size[1] - 1), radius=radius, fill=255
    )
    return mask


def _photo_tile(elem: LayoutRect, size: Tuple[int, int], cache: Dict[str, Image.Image]) -> Image.Image:
    ref = elem.photo or ""
    if ref not in cache:
        try:
            cache[ref] = decode_image_ref(ref)
        except ValueError as exc:
            logger.warning("Photo %s could not be decoded, drawing placeholder: %s", elem.number, exc)
            cache[ref] = Image.new("RGB", (8, 8), PLACEHOLDER_COLOR)
    # Cells are square: center-crop the photo to fill
    return ImageOps.fit(cache[ref], size, method=Image.Resampling.LANCZOS)


def _draw_shadow(canvas: Image.Image, box: Tuple[int, int, int, int], radius: int, context: RenderContext) -> None:
    x, y, w, h = box
    blur = context.shadow_blur_px
    off = context.shadow_offset_px
    layer = Image.new("RGBA", (w + 4 * blur, h + 4 * blur), (0, 0, 0, 0))
    ImageDraw.Draw(layer).rounded_rectangle(
        (2 * blur, 2 * blur, 2 * blur + w - 1, 2 * blur + h - 1), radius=radius, fill=SHADOW_COLOR
    )
    layer = layer.filter(ImageFilter.GaussianBlur(blur))
    dx, dy = x - 2 * blur + off // 2, y - 2 * blur + off
    # alpha_composite refuses negative destinations
    if dx < 0 or dy < 0:
        layer = layer.crop((max(-dx, 0), max(-dy, 0), layer.width, layer.height))
        dx, dy = max(dx, 0), max(dy, 0)
    canvas.alpha_composite(layer, (dx, dy))


def _draw_text(draw: ImageDraw.ImageDraw, elem: LayoutRect) -> None:
    font = _load_font(elem.font_size)
    text = elem.text or ""
    left, top, right, bottom = draw.multiline_textbbox((0, 0), text, font=font, align="center")
    tx = elem.x_px + (elem.width_px - (right - left)) / 2
    ty = elem.y_px + (elem.height_px - (bottom - top)) / 2
    draw.multiline_text((tx, ty), text, font=font, fill=parse_color(elem.color, "#000000"), align="center")


def render_layout(layout: DumpLayout, context: RenderContext) -> Image.Image:
    """Paint a DumpLayout; returns an RGB image of the layout's size."""
    size = (int(round(layout.width_px)), int(round(layout.height_px)))
    canvas = Image.new("RGBA", size, parse_color(layout.background_color) + (255,))
    cache: Dict[str, Image.Image] = {}

    for elem in layout.elements:
        if elem.kind != "photo":
            continue
        x, y = int(round(elem.x_px)), int(round(elem.y_px))
        w, h = max(int(round(elem.width_px)), 1), max(int(round(elem.height_px)), 1)
        if elem.shadow:
            _draw_shadow(canvas, (x, y, w, h), elem.radius_px, context)
        tile = _photo_tile(elem, (w, h), cache)
        mask = _rounded_mask((w, h), elem.radius_px) if elem.radius_px else None
        canvas.paste(tile, (x, y), mask)

    draw = ImageDraw.Draw(canvas)
    for elem in layout.elements:
        if elem.kind in ("title", "memo"):
            _draw_text(draw, elem)

    return canvas.convert("RGB")


def render_dump(dump: Dump, context: Optional[RenderContext] = None) -> Image.Image:
    context = context or RenderContext()
    return render_layout(compute_layout(dump, context), context)


def render_dump_png(dump: Dump, context: Optional[RenderContext] = None) -> bytes:
    """Render a dump and return PNG bytes."""
    img = render_dump(dump, context)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
