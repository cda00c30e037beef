"""
Layout catalog.

Maps a number of available photos to the grid layouts that can be
filled, and a layout id to its geometry. Pure functions, no I/O.
"""
from typing import Dict, List, Union

from domain.errors import UnsupportedLayout
from domain.models import LayoutId, LayoutSpec


_CATALOG: Dict[LayoutId, LayoutSpec] = {
    LayoutId.GRID4: LayoutSpec(LayoutId.GRID4, required_count=4, columns=2),
    LayoutId.GRID6: LayoutSpec(LayoutId.GRID6, required_count=6, columns=2),
    LayoutId.GRID8: LayoutSpec(LayoutId.GRID8, required_count=8, columns=2),
    LayoutId.GRID9: LayoutSpec(LayoutId.GRID9, required_count=9, columns=3),
}

DEFAULT_LAYOUT = LayoutId.GRID4


def resolve_layout(layout: Union[LayoutId, str]) -> LayoutId:
    """Coerce a layout id (enum or its string value), failing on anything else."""
    if isinstance(layout, LayoutId):
        return layout
    try:
        return LayoutId(layout)
    except ValueError:
        raise UnsupportedLayout(layout) from None


def get_spec(layout: Union[LayoutId, str]) -> LayoutSpec:
    return _CATALOG[resolve_layout(layout)]


def required_count(layout: Union[LayoutId, str]) -> int:
    return get_spec(layout).required_count


def columns(layout: Union[LayoutId, str]) -> int:
    return get_spec(layout).columns


def rows(layout: Union[LayoutId, str]) -> int:
    return get_spec(layout).rows


def minimum_photo_count() -> int:
    """Photos needed for the smallest layout."""
    return min(spec.required_count for spec in _CATALOG.values())


def available_layouts(photo_count: int) -> List[LayoutId]:
    """
    Layouts usable with `photo_count` photos, smallest first.

    The minimum layout is always listed, even when fewer photos exist;
    the selector is what refuses to start in that case.
    """
    result = []
    for layout_id, spec in _CATALOG.items():
        if layout_id == DEFAULT_LAYOUT or photo_count >= spec.required_count:
            result.append(layout_id)
    return result


def all_layouts() -> List[LayoutSpec]:
    return list(_CATALOG.values())
