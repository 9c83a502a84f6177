import math
from dataclasses import dataclass, field
from typing import Callable, Optional

import numpy as np
import pandas as pd

from cell_coercion import cell_text, fold_case
from fuzzy_matcher import match

FUZZY_THRESHOLD_MIN = 0.3
FUZZY_THRESHOLD_MAX = 0.95
DEFAULT_CHUNK_PERCENT = 1.0


@dataclass
class SearchOptions:
    query: str = ""
    replacement: str = ""
    case_sensitive: bool = False
    fuzzy: bool = False
    fuzzy_threshold: float = 0.6
    column_scope: tuple = field(default_factory=tuple)

    def __post_init__(self):
        self.query = "" if self.query is None else str(self.query)
        self.replacement = "" if self.replacement is None else str(self.replacement)
        self.fuzzy_threshold = max(
            FUZZY_THRESHOLD_MIN, min(FUZZY_THRESHOLD_MAX, float(self.fuzzy_threshold))
        )
        self.column_scope = tuple(self.column_scope or ())


@dataclass(frozen=True)
class SearchResult:
    row_index: int
    column_id: str
    match_index: int
    matched_text: str
    score: float
    exact: bool


def resolve_columns(frame_columns, column_scope=(), order=None) -> list[str]:
    """Columns a search or replace visits, in visiting order.

    An empty scope means every column, in display order when one is given.
    """
    present = [str(c) for c in frame_columns]
    known = set(present)
    if column_scope:
        source = column_scope
    elif order:
        source = list(order) + [c for c in present if c not in set(order)]
    else:
        source = present
    seen = set()
    columns = []
    for col in source:
        if col in known and col not in seen:
            seen.add(col)
            columns.append(col)
    return columns


def exact_offsets(values: pd.Series, query: str, case_sensitive: bool) -> np.ndarray:
    """First match offset per value, -1 where the query does not occur."""
    texts = values.map(cell_text).astype(object)
    needle = query
    if not case_sensitive:
        texts = texts.map(fold_case).astype(object)
        needle = fold_case(query)
    if texts.empty:
        return np.empty(0, dtype=np.int64)
    return texts.str.find(needle).to_numpy(dtype=np.int64)


def scan_rows(frame: pd.DataFrame, start: int, stop: int, columns, options) -> list:
    """Match rows [start, stop) of frame, in row-then-column order.

    Rows and columns no longer in the frame are skipped.
    """
    stop = min(stop, len(frame))
    if start >= stop:
        return []
    columns = [c for c in columns if c in frame.columns]
    block = frame.iloc[start:stop]

    if options.fuzzy:
        results = []
        for offset, values in enumerate(block[columns].itertuples(index=False, name=None)):
            for col, value in zip(columns, values):
                hit = match(
                    cell_text(value),
                    options.query,
                    options.fuzzy_threshold,
                    options.case_sensitive,
                )
                if hit is not None:
                    results.append(
                        SearchResult(
                            row_index=start + offset,
                            column_id=col,
                            match_index=hit.match_index,
                            matched_text=hit.matched_text,
                            score=hit.score,
                            exact=hit.exact,
                        )
                    )
        return results

    hits = []
    for col_pos, col in enumerate(columns):
        values = block[col]
        offsets = exact_offsets(values, options.query, options.case_sensitive)
        for local in np.flatnonzero(offsets >= 0):
            idx = int(offsets[local])
            text = cell_text(values.iat[local])
            hits.append(
                (
                    start + int(local),
                    col_pos,
                    SearchResult(
                        row_index=start + int(local),
                        column_id=col,
                        match_index=idx,
                        matched_text=text[idx : idx + len(options.query)],
                        score=1.0,
                        exact=True,
                    ),
                )
            )
    hits.sort(key=lambda h: (h[0], h[1]))
    return [h[2] for h in hits]


class SearchJob:
    """One scan over the store, advanced a chunk at a time by ``step()``."""

    def __init__(self, store, options, columns, generation=0, chunk_percent=DEFAULT_CHUNK_PERCENT):
        self.store = store
        self.options = options
        self.columns = list(columns)
        self.generation = generation
        self.dataset_version = store.version
        self.total_rows = store.row_count
        self.chunk_rows = max(1, math.ceil(self.total_rows * chunk_percent / 100.0))
        self.next_row = 0
        self.results: list[SearchResult] = []
        self.progress = 0
        self.done = False
        self.cancelled = False

    def cancel(self):
        self.cancelled = True

    def step(self) -> bool:
        """Scan the next chunk; False once the job is finished or cancelled."""
        if self.done or self.cancelled:
            return False
        if not self.columns or self.total_rows == 0:
            self._finish()
            return False

        start = self.next_row
        stop = min(self.total_rows, start + self.chunk_rows)
        # the frame is read fresh each chunk; stale rows simply do not match
        self.results.extend(
            scan_rows(self.store.frame, start, stop, self.columns, self.options)
        )
        self.next_row = stop
        if stop >= self.total_rows:
            self._finish()
            return False
        self.progress = max(self.progress, min(99, stop * 100 // self.total_rows))
        return True

    def _finish(self):
        if self.options.fuzzy:
            self.results.sort(key=lambda r: -r.score)
        self.progress = 100
        self.done = True


class SearchOrchestrator:
    """Runs at most one search at a time and publishes its progress and results.

    The host calls ``pump()`` from its event loop; each call scans one chunk.
    Starting a new search, or ``supersede()``, bumps the generation so an
    older job can never publish over a newer one.
    """

    def __init__(
        self,
        store,
        chunk_percent: float = DEFAULT_CHUNK_PERCENT,
        on_progress: Optional[Callable[[int], None]] = None,
        on_done: Optional[Callable[[list], None]] = None,
    ):
        self.store = store
        self.chunk_percent = chunk_percent
        self.on_progress = on_progress
        self.on_done = on_done
        self.generation = 0
        self.progress = 0
        self._job: Optional[SearchJob] = None
        self._results: list[SearchResult] = []
        self._results_version = None

    @property
    def searching(self) -> bool:
        return self._job is not None

    @property
    def job(self) -> Optional[SearchJob]:
        return self._job

    @property
    def results(self) -> list[SearchResult]:
        if self._results_version != self.store.version:
            return []
        return list(self._results)

    def start(self, options: SearchOptions, order=None) -> Optional[SearchJob]:
        self.supersede()
        if not options.query:
            return None
        columns = resolve_columns(self.store.frame.columns, options.column_scope, order)
        self._job = SearchJob(
            self.store,
            options,
            columns,
            generation=self.generation,
            chunk_percent=self.chunk_percent,
        )
        return self._job

    def supersede(self):
        """Abandon any in-flight search and clear published results."""
        self.generation += 1
        if self._job is not None:
            self._job.cancel()
        self._job = None
        self._results = []
        self._results_version = None
        self._set_progress(0, force=True)

    def pump(self) -> bool:
        """Advance the current search by one chunk; True while more remain."""
        job = self._job
        if job is None:
            return False
        if job.step():
            self._set_progress(job.progress)
            return True
        self._job = None
        if job.done and job.generation == self.generation:
            self._publish(job)
        return False

    def run_until_done(self) -> list[SearchResult]:
        while self.pump():
            pass
        return self.results

    def _publish(self, job: SearchJob):
        self._results = list(job.results)
        self._results_version = job.dataset_version
        self._set_progress(100)
        if self.on_done is not None:
            self.on_done(self.results)

    def _set_progress(self, value: int, force=False):
        if not force and value <= self.progress:
            return
        self.progress = value
        if self.on_progress is not None:
            self.on_progress(value)
