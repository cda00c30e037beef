from datetime import datetime

import pytest

from domain.errors import (
    IncompleteSelection,
    InvalidSelection,
    MissingEvent,
    PersistenceError,
)
from domain.models import ComposeRequest, DumpStyle, Event, LayoutId
from repositories.store import InMemoryDumpStore
from services.dump_composer import DumpComposer, normalize_visibility
from services.photo_selector import PhotoSelector


def _photos(n: int) -> list[str]:
    return [f"data:image/jpeg;base64,p{i}" for i in range(n)]


def _event(n_photos: int = 5, event_id: str = "e1") -> Event:
    return Event(id=event_id, title="Picnic", date="2025-05-05", photos=_photos(n_photos))


def _composer(store=None) -> DumpComposer:
    ids = iter(f"dump-{i}" for i in range(100))
    return DumpComposer(
        store or InMemoryDumpStore(),
        clock=lambda: datetime(2025, 5, 5, 18, 0, 0),
        id_factory=lambda: next(ids),
    )


def test_compose_five_photos_grid4():
    event = _event(5)
    store = InMemoryDumpStore()
    store.add_event(event)
    selector = PhotoSelector.initialize(event.photos)

    dump = _composer(store).compose(event, selector.selected, DumpStyle())

    assert len(dump.photos) == 4
    assert list(dump.photos) == event.photos[:4]
    assert dump.layout == LayoutId.GRID4
    assert dump.id == "dump-0"
    assert dump.created_at == datetime(2025, 5, 5, 18, 0, 0)
    assert store.get_dump("e1") == dump


def test_compose_keeps_selection_order():
    event = _event(9)
    selected = [event.photos[i] for i in (8, 0, 4, 2, 6, 1)]
    dump = _composer().compose(event, selected, DumpStyle(layout=LayoutId.GRID6))
    assert list(dump.photos) == selected


@pytest.mark.parametrize("count", [0, 3, 5])
def test_compose_incomplete_selection(count):
    event = _event(9)
    store = InMemoryDumpStore()
    with pytest.raises(IncompleteSelection) as exc:
        _composer(store).compose(event, event.photos[:count], DumpStyle())
    assert exc.value.required == 4
    assert exc.value.actual == count
    assert store.get_dump(event.id) is None


def test_compose_matches_is_composable():
    event = _event(8)
    selector = PhotoSelector.initialize(event.photos)
    selector.change_layout(LayoutId.GRID8)
    selector.toggle(event.photos[3])
    assert not selector.is_composable()
    with pytest.raises(IncompleteSelection):
        _composer().compose(event, selector.selected, DumpStyle(layout=selector.layout))

    selector.toggle(event.photos[3])
    assert selector.is_composable()
    dump = _composer().compose(event, selector.selected, DumpStyle(layout=selector.layout))
    assert len(dump.photos) == 8


def test_compose_missing_event():
    with pytest.raises(MissingEvent):
        _composer().compose(None, _photos(4), DumpStyle())


def test_compose_rejects_duplicates():
    event = _event(5)
    selected = [event.photos[0]] * 2 + event.photos[1:3]
    with pytest.raises(InvalidSelection):
        _composer().compose(event, selected, DumpStyle())


def test_compose_rejects_foreign_photos():
    event = _event(5)
    selected = event.photos[:3] + ["data:image/png;base64,other"]
    with pytest.raises(InvalidSelection):
        _composer().compose(event, selected, DumpStyle())


def test_compose_reads_photo_set_from_store_when_event_has_none():
    store = InMemoryDumpStore()
    store.add_event(_event(5))
    bare = Event(id="e1", title="Picnic", date="2025-05-05")
    with pytest.raises(InvalidSelection):
        _composer(store).compose(bare, _photos(3) + ["x"], DumpStyle())
    dump = _composer(store).compose(bare, _photos(4), DumpStyle())
    assert len(dump.photos) == 4


def test_compose_rejects_any_photo_for_event_without_photos():
    store = InMemoryDumpStore()
    event = store.add_event(Event(id="e1", title="Picnic", date="2025-05-05", photos=[]))
    foreign = ["data:a", "data:b", "data:c", "data:d"]
    with pytest.raises(InvalidSelection):
        _composer(store).compose(event, foreign, DumpStyle())
    assert store.get_dump(event.id) is None


def test_frame_off_forces_title_and_memo_hidden():
    event = _event(4)
    dump = _composer().compose(
        event,
        event.photos,
        DumpStyle(),
        title="Trip",
        memo="Best day",
        show_title=True,
        show_memo=True,
        show_frame=False,
    )
    assert dump.show_frame is False
    assert dump.show_title is False
    assert dump.show_memo is False
    # Hidden text is dropped rather than stored
    assert dump.title == ""
    assert dump.memo == ""


def test_frame_on_keeps_visible_text_and_drops_hidden_text():
    event = _event(4)
    dump = _composer().compose(
        event,
        event.photos,
        DumpStyle(),
        title="Trip",
        memo="Best day",
        show_title=True,
        show_memo=False,
        show_frame=True,
    )
    assert dump.show_title is True
    assert dump.title == "Trip"
    assert dump.show_memo is False
    assert dump.memo == ""


@pytest.mark.parametrize("show_title", [True, False])
@pytest.mark.parametrize("show_memo", [True, False])
def test_normalize_visibility_without_frame(show_title, show_memo):
    assert normalize_visibility(show_title, show_memo, False) == (False, False)
    assert normalize_visibility(show_title, show_memo, True) == (show_title, show_memo)


def test_second_compose_replaces_first():
    event = _event(6)
    store = InMemoryDumpStore()
    composer = _composer(store)
    first = composer.compose(event, event.photos[:4], DumpStyle(), title="One", show_title=True)
    second = composer.compose(
        event, event.photos[2:6], DumpStyle(background_color="#fef2f2"), title="Two", show_title=True
    )

    assert first.id != second.id
    assert list(store.dumps) == ["e1"]
    assert store.get_dump("e1") == second
    assert store.get_dump("e1").title == "Two"


def test_compose_request_looks_up_event():
    store = InMemoryDumpStore()
    event = store.add_event(_event(4))
    request = ComposeRequest(
        event_id=event.id,
        selected=list(event.photos),
        title="Trip",
        show_title=True,
    )
    dump = _composer(store).compose_request(request)
    assert dump.event_id == event.id
    assert dump.title == "Trip"


def test_compose_request_unknown_event():
    request = ComposeRequest(event_id="nope", selected=_photos(4))
    with pytest.raises(MissingEvent) as exc:
        _composer().compose_request(request)
    assert exc.value.event_id == "nope"


class FailingStore(InMemoryDumpStore):
    def save_dump(self, dump):
        raise PersistenceError("disk full")


def test_persistence_failure_propagates():
    event = _event(4)
    store = FailingStore()
    with pytest.raises(PersistenceError):
        _composer(store).compose(event, event.photos, DumpStyle())
    assert store.get_dump(event.id) is None


class UnreadableDumpStore(InMemoryDumpStore):
    def get_dump(self, event_id):
        raise PersistenceError("dump table locked")


def test_failed_previous_dump_read_does_not_block_save():
    event = _event(4)
    store = UnreadableDumpStore()
    dump = _composer(store).compose(event, event.photos, DumpStyle())
    assert store.dumps[event.id] == dump


def test_style_clamps_gap_and_radius():
    style = DumpStyle(image_gap=100, image_radius=-5)
    assert style.image_gap == 32
    assert style.image_radius == 0
    assert DumpStyle(image_gap="abc").image_gap == 12


def test_dump_round_trips_through_dict():
    event = _event(4)
    dump = _composer().compose(event, event.photos, DumpStyle(layout="grid4"), title="T", show_title=True)
    from domain.models import Dump

    assert Dump.from_dict(dump.to_dict()) == dump
