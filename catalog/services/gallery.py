import logging
from typing import Callable, Iterable, Optional

from catalog.schemas.product import GalleryState, Image

logger = logging.getLogger(__name__)


def normalize_images(items: Optional[Iterable]) -> list[Image]:
    """Accept bare URL strings, dicts and Image records alike."""
    return [item if isinstance(item, Image) else Image.model_validate(item) for item in items or []]


class GallerySync:
    """
    Keeps the displayed image and the selected index in agreement.

    Selection arrives either as an index (thumbnail click, arrow keys) or as a
    URL supplied from outside, e.g. the product's designated main image.
    Index-driven selections report the resolved URL through on_select so the
    caller can keep its own main image in step.
    """

    def __init__(
        self,
        items: Optional[Iterable] = None,
        on_select: Optional[Callable[[str], None]] = None,
        displayed_url: Optional[str] = None,
    ):
        self.items: list[Image] = []
        self.selected_index = 0
        self.displayed_url: Optional[str] = None
        self.on_select = on_select
        self._load(normalize_images(items), displayed_url)

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def state(self) -> GalleryState:
        return GalleryState(
            items=list(self.items),
            selectedIndex=self.selected_index,
            displayedUrl=self.displayed_url,
        )

    def _load(self, items: list[Image], displayed_url: Optional[str]) -> None:
        self.items = items
        if not items:
            self.selected_index = 0
            self.displayed_url = None
            return

        index = self._find(displayed_url)
        if index is None:
            self.selected_index = 0
            self.displayed_url = items[0].url
        else:
            self.selected_index = index
            self.displayed_url = displayed_url

    def _find(self, url: Optional[str]) -> Optional[int]:
        if url is None:
            return None
        for index, image in enumerate(self.items):
            if image.url == url:
                return index
        return None

    def _emit(self) -> None:
        if self.on_select is not None:
            self.on_select(self.displayed_url)

    def select_by_index(self, index: int) -> None:
        if self.is_empty:
            return
        if not 0 <= index < len(self.items):
            raise IndexError(f"Gallery index {index} out of range for {len(self.items)} images")
        self.selected_index = index
        self.displayed_url = self.items[index].url
        self._emit()

    def select_by_url(self, url: str) -> None:
        index = self._find(url)
        if index is not None:
            self.select_by_index(index)
            return
        # Out-of-list image, e.g. a main image uploaded but not yet in the gallery
        logger.debug(f"Displaying out-of-gallery image {url}, keeping index {self.selected_index}")
        self.displayed_url = url

    def next(self) -> None:
        if len(self.items) <= 1:
            return
        self.select_by_index((self.selected_index + 1) % len(self.items))

    def previous(self) -> None:
        if len(self.items) <= 1:
            return
        self.select_by_index((self.selected_index - 1) % len(self.items))

    def replace_items(self, new_items: Optional[Iterable]) -> None:
        self._load(normalize_images(new_items), self.displayed_url)

    def restore(self, selected_index: int, displayed_url: Optional[str]) -> None:
        """Reapply a previously settled selection without emitting."""
        if self.is_empty:
            self.displayed_url = displayed_url
            return
        if 0 <= selected_index < len(self.items):
            self.selected_index = selected_index
            self.displayed_url = self.items[selected_index].url
        if displayed_url is not None:
            index = self._find(displayed_url)
            if index is not None:
                self.selected_index = index
            self.displayed_url = displayed_url
