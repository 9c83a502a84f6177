from dataclasses import dataclass

import pandas as pd

from cell_coercion import cell_text

CHAR_WIDTH = 10
PADDING = 60
MIN_WIDTH = 100
MAX_WIDTH = 500
SAMPLE_ROWS = 10


@dataclass(frozen=True)
class ColumnDescriptor:
    id: str
    header: str
    width: int = MIN_WIDTH
    min_width: int = MIN_WIDTH
    max_width: int = MAX_WIDTH


def estimate_width(header: str, sample=()) -> int:
    header_width = len(header) * CHAR_WIDTH + PADDING
    longest = max((len(cell_text(v)) for v in sample), default=None)
    if longest is None:
        width = header_width
    else:
        content_width = int(longest * CHAR_WIDTH * 0.85) + PADDING
        width = max(header_width, content_width)
    return max(MIN_WIDTH, min(MAX_WIDTH, width))


def describe_columns(frame: pd.DataFrame) -> list[ColumnDescriptor]:
    head = frame.head(SAMPLE_ROWS)
    return [
        ColumnDescriptor(
            id=str(col),
            header=str(col),
            width=estimate_width(str(col), head[col].tolist()),
        )
        for col in frame.columns
    ]


class ColumnLayout:
    """Display order of columns, kept apart from the row data."""

    def __init__(self, descriptors=()):
        self.set_columns(descriptors)

    def set_columns(self, descriptors):
        self._descriptors = {d.id: d for d in descriptors}
        self._default_order = [d.id for d in descriptors]
        self.order: list[str] = list(self._default_order)

    @property
    def descriptors(self) -> list[ColumnDescriptor]:
        return [self._descriptors[c] for c in self.order]

    def descriptor(self, column_id: str):
        return self._descriptors.get(column_id)

    def position(self, column_id: str):
        try:
            return self.order.index(column_id)
        except ValueError:
            return None

    def move(self, column_id: str, target_id: str) -> bool:
        """Drop column_id onto target_id's slot, shifting the rest."""
        if column_id == target_id:
            return False
        if column_id not in self.order or target_id not in self.order:
            return False
        target_index = self.order.index(target_id)
        self.order.remove(column_id)
        self.order.insert(target_index, column_id)
        return True

    def reset_order(self):
        self.order = list(self._default_order)

    def __len__(self):
        return len(self.order)

    def __iter__(self):
        return iter(self.order)
