import math
from typing import NamedTuple


class ViewportWindow(NamedTuple):
    start_index: int
    end_index: int
    overscan: int
    leading_padding: float
    trailing_padding: float

    @property
    def row_count(self) -> int:
        return max(0, self.end_index - self.start_index + 1)

    def rows(self) -> range:
        return range(self.start_index, self.end_index + 1)


def compute_window(
    total_rows: int,
    estimated_row_height: float,
    scroll_offset: float,
    viewport_height: float,
    overscan_count: int,
) -> ViewportWindow:
    """Rows to render for a scroll position, plus spacer sizes around them.

    An empty dataset yields start 0, end -1 and no padding.
    """
    total_rows = max(0, int(total_rows))
    overscan = max(0, int(overscan_count))
    if total_rows == 0:
        return ViewportWindow(0, -1, overscan, 0, 0)

    height = estimated_row_height if estimated_row_height > 0 else 1
    scroll_offset = max(0, scroll_offset)
    viewport_height = max(0, viewport_height)

    end_index = min(
        total_rows - 1,
        math.ceil((scroll_offset + viewport_height) / height) + overscan,
    )
    start_index = max(0, math.floor(scroll_offset / height) - overscan)
    # scrolled past the end: keep the window anchored on the last rows
    start_index = min(start_index, end_index)

    return ViewportWindow(
        start_index=start_index,
        end_index=end_index,
        overscan=overscan,
        leading_padding=start_index * height,
        trailing_padding=(total_rows - 1 - end_index) * height,
    )


class Viewport:
    """Scroll state for the grid; every read recomputes the window."""

    def __init__(
        self,
        total_rows: int = 0,
        viewport_height: float = 700,
        row_height: float = 35,
        overscan: int = 10,
    ):
        self.row_height = row_height if row_height > 0 else 1
        self.overscan = max(0, overscan)
        self.viewport_height = max(0, viewport_height)
        self.scroll_offset = 0.0
        self.total_rows = max(0, total_rows)
        self._clamp()

    @property
    def content_height(self) -> float:
        return self.total_rows * self.row_height

    @property
    def max_scroll(self) -> float:
        return max(0, self.content_height - self.viewport_height)

    def _clamp(self):
        self.scroll_offset = max(0, min(self.scroll_offset, self.max_scroll))

    def update_total_rows(self, total_rows: int):
        self.total_rows = max(0, total_rows)
        self._clamp()

    def resize(self, viewport_height: float):
        self.viewport_height = max(0, viewport_height)
        self._clamp()

    def scroll_to(self, offset: float):
        self.scroll_offset = offset
        self._clamp()

    def ensure_row_visible(self, row: int):
        if self.total_rows == 0:
            self.scroll_offset = 0
            return
        row = max(0, min(row, self.total_rows - 1))
        top = row * self.row_height
        bottom = top + self.row_height
        if top < self.scroll_offset:
            self.scroll_to(top)
        elif bottom > self.scroll_offset + self.viewport_height:
            self.scroll_to(bottom - self.viewport_height)

    def window(self) -> ViewportWindow:
        return compute_window(
            self.total_rows,
            self.row_height,
            self.scroll_offset,
            self.viewport_height,
            self.overscan,
        )
