from typing import Iterable, NamedTuple

import numpy as np
import pandas as pd

from cell_coercion import cell_text


class Cell(NamedTuple):
    row: int
    column: str


class MutationRecord(NamedTuple):
    row_index: int
    column_id: str
    new_value: object


class DataStore:
    """Single owner of the row data.

    Every mutation swaps in a new frame, so a frame or row handed out earlier
    keeps its values. ``version`` increases on each mutation that changed the
    frame; readers use it to tell whether what they computed is still current.
    """

    def __init__(self, rows=None, column_ids=None):
        self._frame = pd.DataFrame()
        self._original = pd.DataFrame()
        self.version = 0
        if rows is not None:
            self.set_dataset(rows, column_ids)

    # ---------- reads ----------
    @property
    def frame(self) -> pd.DataFrame:
        return self._frame

    @property
    def original(self) -> pd.DataFrame:
        return self._original

    @property
    def column_ids(self) -> list[str]:
        return [str(c) for c in self._frame.columns]

    @property
    def row_count(self) -> int:
        return len(self._frame)

    def __len__(self):
        return len(self._frame)

    def has_cell(self, row: int, column: str) -> bool:
        return 0 <= row < len(self._frame) and column in self._frame.columns

    def value(self, row: int, column: str, default=None):
        if not self.has_cell(row, column):
            return default
        return self._frame.iat[row, self._frame.columns.get_loc(column)]

    def row(self, index: int) -> dict | None:
        if not 0 <= index < len(self._frame):
            return None
        return self._frame.iloc[index].to_dict()

    # ---------- writes ----------
    def set_dataset(self, rows, column_ids=None):
        if isinstance(rows, pd.DataFrame):
            frame = rows.copy(deep=True)
            if column_ids is not None:
                frame = frame.reindex(columns=list(column_ids))
        else:
            rows = list(rows)
            if column_ids is None:
                column_ids = []
                for record in rows:
                    for key in record:
                        if key not in column_ids:
                            column_ids.append(key)
            frame = pd.DataFrame.from_records(rows, columns=list(column_ids))
        frame = frame.astype(object)
        frame = frame.where(frame.notna(), "")
        frame = frame.reset_index(drop=True)
        frame.columns = [str(c) for c in frame.columns]

        self._frame = frame
        self._original = frame.copy(deep=True)
        self.version += 1

    def update_cell(self, row_index: int, column_id: str, value) -> bool:
        return self.bulk_update([MutationRecord(row_index, column_id, value)]) == 1

    def update_row(self, row_index: int, values: dict) -> int:
        return self.bulk_update(
            MutationRecord(row_index, col, val) for col, val in values.items()
        )

    def bulk_update(self, records: Iterable) -> int:
        """Apply records in order as one step; stale or unknown cells are skipped."""
        staged = []
        for record in records:
            row_index, column_id, new_value = record
            if not isinstance(row_index, (int, np.integer)):
                continue
            row_index = int(row_index)
            if not self.has_cell(row_index, column_id):
                continue
            staged.append((row_index, self._frame.columns.get_loc(column_id), new_value))
        if not staged:
            return 0

        # only the touched columns are copied; the rest are shared with the old frame
        columns = {}
        for r, c, new_value in staged:
            if c not in columns:
                columns[c] = self._frame.iloc[:, c].to_numpy(dtype=object, copy=True)
            columns[c][r] = new_value
        frame = self._frame.copy(deep=False)
        for c, values in columns.items():
            frame[frame.columns[c]] = pd.Series(values, index=frame.index, dtype=object)
        self._frame = frame
        self.version += 1
        return len(staged)

    # ---------- original snapshot ----------
    def changed_cells(self) -> list[Cell]:
        if self._frame.shape != self._original.shape:
            return []
        current = self._frame.map(cell_text)
        before = self._original.map(cell_text)
        diff = current.ne(before)
        cells = []
        for r, c in zip(*diff.to_numpy().nonzero()):
            cells.append(Cell(int(r), str(self._frame.columns[c])))
        return cells

    def revert(self) -> int:
        changed = len(self.changed_cells())
        if changed:
            self._frame = self._original.copy(deep=True)
            self.version += 1
        return changed
