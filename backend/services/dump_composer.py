"""
Dump composer.

Freezes a complete selection plus style and text choices into a Dump
and persists it. This is the only durable step of the flow: everything
is validated in memory first, then the store is written once.
"""
import logging
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from domain.errors import IncompleteSelection, InvalidSelection, MissingEvent, PersistenceError
from domain.models import ComposeRequest, Dump, DumpStyle, Event
from repositories.store import DumpStore
from services import layout_catalog

logger = logging.getLogger(__name__)


def normalize_visibility(show_title: bool, show_memo: bool, show_frame: bool) -> tuple[bool, bool]:
    """The frame gates all decorative text: no frame, no title or memo."""
    if not show_frame:
        return False, False
    return bool(show_title), bool(show_memo)


def validate_selection(selected: Sequence[str], photo_set: Sequence[str], required: int) -> None:
    if len(selected) != required:
        raise IncompleteSelection(required=required, actual=len(selected))
    if len(set(selected)) != len(selected):
        raise InvalidSelection("selection contains the same photo twice")
    known = set(photo_set)
    if any(photo not in known for photo in selected):
        raise InvalidSelection("selection contains photos that do not belong to this event")


class DumpComposer:
    """Builds and stores dumps through a DumpStore."""

    def __init__(
        self,
        store: DumpStore,
        clock: Callable[[], datetime] = datetime.utcnow,
        id_factory: Callable[[], str] = Dump.generate_id,
    ):
        self.store = store
        self.clock = clock
        self.id_factory = id_factory

    def compose(
        self,
        event: Optional[Event],
        selected: Sequence[str],
        style: DumpStyle,
        title: str = "",
        memo: str = "",
        show_title: bool = False,
        show_memo: bool = False,
        show_frame: bool = True,
    ) -> Dump:
        """
        Compose and persist a dump for `event`, replacing any previous one.

        Raises:
            MissingEvent: event is None
            IncompleteSelection: selection size differs from the layout's count
            InvalidSelection: duplicates or photos outside the event's photo set
            PersistenceError: the store failed; nothing was written
        """
        if event is None:
            raise MissingEvent()
        required = layout_catalog.required_count(style.layout)
        photo_set: List[str] = list(event.photos) or self.store.get_photos(event.id)
        validate_selection(selected, photo_set, required)

        show_title, show_memo = normalize_visibility(show_title, show_memo, show_frame)
        # Hidden text is discarded, not kept for a later "frame back on"
        dump = Dump(
            id=self.id_factory(),
            event_id=event.id,
            title=(title or "") if show_title else "",
            memo=(memo or "") if show_memo else "",
            show_title=show_title,
            show_memo=show_memo,
            show_frame=bool(show_frame),
            style=style,
            photos=tuple(selected),
            created_at=self.clock(),
        )

        previous = self._previous_dump(event.id)
        self.store.save_dump(dump)
        if previous is not None:
            logger.info("Replaced dump %s for event %s with %s", previous.id, event.id, dump.id)
        logger.info(
            "Composed dump %s for event %s (%s, %d photos)",
            dump.id, event.id, dump.layout.value, len(dump.photos),
        )
        return dump

    def _previous_dump(self, event_id: str) -> Optional[Dump]:
        # Only used for the replacement log line; must not block the save
        try:
            return self.store.get_dump(event_id)
        except PersistenceError as e:
            logger.warning("Could not read previous dump for event %s: %s", event_id, e)
            return None

    def compose_request(self, request: ComposeRequest) -> Dump:
        """Compose from a request handed over by the selection step."""
        event = self.store.get_event_by_id(request.event_id)
        if event is None:
            raise MissingEvent(request.event_id)
        return self.compose(
            event,
            request.selected,
            request.style,
            title=request.title,
            memo=request.memo,
            show_title=request.show_title,
            show_memo=request.show_memo,
            show_frame=request.show_frame,
        )
