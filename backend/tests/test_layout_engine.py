from datetime import datetime

import pytest

from domain.models import Dump, DumpStyle, LayoutId, RenderContext
from services.layout_engine import compute_layout, layout_grid


def _dump(
    layout: LayoutId = LayoutId.GRID4,
    n: int = 4,
    show_frame: bool = True,
    show_title: bool = False,
    show_memo: bool = False,
    title: str = "",
    memo: str = "",
    gap: int = 12,
    radius: int = 16,
) -> Dump:
    return Dump(
        id="d1",
        event_id="e1",
        title=title,
        memo=memo,
        show_title=show_title,
        show_memo=show_memo,
        show_frame=show_frame,
        style=DumpStyle(layout=layout, image_gap=gap, image_radius=radius, background_color="#fef7ed"),
        photos=tuple(f"p{i}" for i in range(n)),
        created_at=datetime(2025, 1, 1),
    )


def _kinds(layout):
    return [e.kind for e in layout.elements]


@pytest.mark.parametrize(
    "layout_id, n, cols, rows",
    [
        (LayoutId.GRID4, 4, 2, 2),
        (LayoutId.GRID6, 6, 2, 3),
        (LayoutId.GRID8, 8, 2, 4),
        (LayoutId.GRID9, 9, 3, 3),
    ],
)
def test_grid_shape(layout_id, n, cols, rows):
    layout = compute_layout(_dump(layout_id, n), RenderContext())
    cells = layout.photo_cells
    assert layout.columns == cols
    assert layout.rows == rows
    assert len(cells) == n
    assert len({round(c.x_px, 2) for c in cells}) == cols
    assert len({round(c.y_px, 2) for c in cells}) == rows


def test_cells_are_square_and_in_selection_order():
    layout = compute_layout(_dump(LayoutId.GRID6, 6), RenderContext())
    cells = layout.photo_cells
    assert [c.photo for c in cells] == [f"p{i}" for i in range(6)]
    assert [c.number for c in cells] == [1, 2, 3, 4, 5, 6]
    for c in cells:
        assert c.width_px == pytest.approx(c.height_px)
    # Row-major: second photo sits to the right of the first
    assert cells[1].x_px > cells[0].x_px
    assert cells[1].y_px == cells[0].y_px
    assert cells[2].y_px > cells[0].y_px


def test_gap_and_radius_come_from_style():
    layout = compute_layout(_dump(gap=20, radius=8), RenderContext())
    a, b = layout.photo_cells[:2]
    assert b.x_px - (a.x_px + a.width_px) == pytest.approx(20)
    assert all(c.radius_px == 8 for c in layout.photo_cells)


def test_frame_adds_padding_and_shadow():
    ctx = RenderContext(canvas_width_px=1000, frame_padding_px=40)
    framed = compute_layout(_dump(show_frame=True), ctx)
    bare = compute_layout(_dump(show_frame=False), ctx)

    assert framed.padding_px == 40
    assert framed.photo_cells[0].x_px == 40
    assert all(c.shadow for c in framed.photo_cells)

    assert bare.padding_px == 0
    assert bare.photo_cells[0].x_px == 0
    assert bare.photo_cells[0].y_px == 0
    assert not any(c.shadow for c in bare.photo_cells)
    # 2 columns, one 12px gap, no padding
    assert bare.photo_cells[0].width_px == pytest.approx((1000 - 12) / 2)
    assert bare.height_px == pytest.approx(bare.photo_cells[-1].y_px + bare.photo_cells[-1].height_px)


def test_title_above_and_memo_below_grid():
    dump = _dump(show_title=True, show_memo=True, title="Trip", memo="Sunny")
    layout = compute_layout(dump, RenderContext())
    assert _kinds(layout)[0] == "title"
    assert _kinds(layout)[-1] == "memo"
    title = layout.elements[0]
    memo = layout.elements[-1]
    cells = layout.photo_cells
    assert title.text == "Trip"
    assert title.y_px + title.height_px <= min(c.y_px for c in cells)
    assert memo.text == "Sunny"
    assert memo.y_px >= max(c.y_px + c.height_px for c in cells)
    assert layout.height_px == pytest.approx(memo.y_px + memo.height_px + layout.padding_px)


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(show_title=True, title=""),
        dict(show_title=False, title="Trip"),
        dict(show_frame=False, show_title=True, title="Trip"),
    ],
)
def test_title_omitted_unless_frame_flag_and_text(kwargs):
    layout = compute_layout(_dump(**kwargs), RenderContext())
    assert "title" not in _kinds(layout)


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(show_memo=True, memo=""),
        dict(show_memo=False, memo="Sunny"),
        dict(show_frame=False, show_memo=True, memo="Sunny"),
    ],
)
def test_memo_omitted_unless_frame_flag_and_text(kwargs):
    layout = compute_layout(_dump(**kwargs), RenderContext())
    assert "memo" not in _kinds(layout)


def test_layout_carries_background_and_font():
    layout = layout_grid(_dump(), RenderContext())
    assert layout.background_color == "#fef7ed"
    assert layout.font_family == "Inter"
    data = layout.to_dict()
    assert data["layout"] == "grid4"
    assert len(data["elements"]) == 4
