"""
Photo selection for a dump.

Keeps the ordered subset of an event's photos chosen for the active
layout. Selection order is display order and the numbering shown to
the user.
"""
import logging
from typing import List, Optional, Sequence, Union

from domain.errors import InsufficientPhotos, InvalidSelection, SelectionFull
from domain.models import LayoutId
from services import layout_catalog

logger = logging.getLogger(__name__)


class PhotoSelector:
    """
    Stateful selection session over a fixed photo set.

    Photo sets smaller than the smallest layout are refused. Without an
    explicit `selected` the session starts on the first N photos.
    """

    def __init__(
        self,
        photo_set: Sequence[str],
        layout: Union[LayoutId, str] = layout_catalog.DEFAULT_LAYOUT,
        selected: Optional[Sequence[str]] = None,
    ):
        minimum = layout_catalog.minimum_photo_count()
        if len(photo_set) < minimum:
            raise InsufficientPhotos(available=len(photo_set), required=minimum)
        self._photo_set: List[str] = list(photo_set)
        self._layout = layout_catalog.resolve_layout(layout)
        if selected is None:
            self._reset_selection()
            return
        self._selected: List[str] = []
        for photo in selected:
            if photo in self._selected:
                raise InvalidSelection("selection contains the same photo twice")
            self.toggle(photo)

    @classmethod
    def initialize(
        cls,
        photo_set: Sequence[str],
        default_layout: Union[LayoutId, str] = layout_catalog.DEFAULT_LAYOUT,
    ) -> "PhotoSelector":
        return cls(photo_set, default_layout)

    @property
    def photo_set(self) -> List[str]:
        return list(self._photo_set)

    @property
    def layout(self) -> LayoutId:
        return self._layout

    @property
    def selected(self) -> List[str]:
        return list(self._selected)

    @property
    def required_count(self) -> int:
        return layout_catalog.required_count(self._layout)

    def available_layouts(self) -> List[LayoutId]:
        return layout_catalog.available_layouts(len(self._photo_set))

    def change_layout(self, new_layout: Union[LayoutId, str]) -> None:
        """Switch layout and reset the selection to the first N photos, even if unchanged."""
        self._layout = layout_catalog.resolve_layout(new_layout)
        self._reset_selection()

    def toggle(self, photo: str) -> None:
        """
        Add or remove a photo.

        Removing is always allowed. Adding fails with SelectionFull once
        the layout's count is reached and leaves the selection untouched.
        """
        if photo in self._selected:
            self._selected.remove(photo)
            return
        if photo not in self._photo_set:
            raise InvalidSelection("photo does not belong to this event")
        if len(self._selected) >= self.required_count:
            raise SelectionFull(self.required_count)
        self._selected.append(photo)

    def toggle_index(self, index: int) -> None:
        """Toggle the photo at `index` in the photo set."""
        if index < 0 or index >= len(self._photo_set):
            raise InvalidSelection(f"photo index out of range: {index}")
        self.toggle(self._photo_set[index])

    def is_composable(self) -> bool:
        return len(self._selected) == self.required_count

    def number_of(self, photo: str) -> Optional[int]:
        """1-based position of `photo` in the selection, None when unselected."""
        try:
            return self._selected.index(photo) + 1
        except ValueError:
            return None

    def _reset_selection(self) -> None:
        count = min(self.required_count, len(self._photo_set))
        if count < self.required_count:
            logger.warning(
                "Layout %s needs %d photos, only %d available; selection truncated",
                self._layout.value, self.required_count, len(self._photo_set),
            )
        self._selected = self._photo_set[:count]
