from typing import Callable, Optional

import bulk_edit
import clipboard
from column_layout import ColumnLayout
from config_paths import default_config
from data_store import DataStore
from errors import ClipboardError, DatasetFileError, InputError
from file_type_handler import FileTypeHandler, ingest_records, to_csv_text
from replace_engine import plan_replacements
from row_window import Viewport
from search_orchestrator import SearchOptions, SearchOrchestrator
from selection_model import SelectionModel


def _plural(n: int, word: str) -> str:
    return f"{n} {word}{'' if n == 1 else 's'}"


class EditorSession:
    """Handle tying the store, layout, selection, search and viewport together.

    Hosts talk to the data only through this object. Every path that mutates
    the store also supersedes the running search, so published results always
    describe the current data.
    """

    def __init__(
        self,
        set_status_cb: Optional[Callable[[str, float], None]] = None,
        config: Optional[dict] = None,
        history=None,
        viewport_height: float = 700,
    ):
        self.config = config if config is not None else default_config()
        self._set_status = set_status_cb or (lambda *_args, **_kwargs: None)
        self.history = history

        self.store = DataStore()
        self.layout = ColumnLayout()
        self.selection = SelectionModel(self.layout)
        self.search = SearchOrchestrator(
            self.store,
            chunk_percent=self.config.get("SEARCH_CHUNK_PERCENT", 1.0),
            on_done=self._on_search_done,
        )
        self.viewport = Viewport(
            total_rows=0,
            viewport_height=viewport_height,
            row_height=self.config.get("ROW_HEIGHT", 35),
            overscan=self.config.get("OVERSCAN", 10),
        )
        self.file_handler: Optional[FileTypeHandler] = None
        self.last_options: Optional[SearchOptions] = None

    # ---------- loading / saving ----------
    def load_records(self, records, columns=None) -> bool:
        try:
            frame, descriptors = ingest_records(records, columns)
        except InputError as exc:
            self._set_status(str(exc), 3)
            return False
        self._install(frame, descriptors)
        return True

    def load_file(self, path: str) -> bool:
        try:
            handler = FileTypeHandler(path)
            frame, descriptors = handler.load()
        except (InputError, DatasetFileError) as exc:
            self._set_status(str(exc), 3)
            return False
        self.file_handler = handler
        self._install(frame, descriptors)
        self._set_status(
            f"Loaded {_plural(len(frame), 'row')} x {_plural(len(descriptors), 'column')}",
            2,
        )
        return True

    def _install(self, frame, descriptors):
        self.search.supersede()
        self.store.set_dataset(frame, [d.id for d in descriptors])
        self.layout.set_columns(descriptors)
        self.selection.clear_selection()
        self.viewport.update_total_rows(self.store.row_count)
        self.viewport.scroll_to(0)

    def export_csv(self) -> str:
        return to_csv_text(self.store.frame, self.layout.order)

    def save_file(self, path: Optional[str] = None) -> bool:
        try:
            handler = FileTypeHandler(path) if path else self.file_handler
            if handler is None:
                self._set_status("No file to save to", 3)
                return False
            handler.save(self.store.frame, self.layout.order)
        except DatasetFileError as exc:
            self._set_status(str(exc), 3)
            return False
        self._set_status(f"Saved {handler.path}", 2)
        return True

    # ---------- editing ----------
    def _apply(self, records) -> int:
        records = list(records)
        if not records:
            return 0
        self.search.supersede()
        return self.store.bulk_update(records)

    def edit_cell(self, row: int, column: str, value) -> bool:
        if not self.store.has_cell(row, column):
            return False
        self.search.supersede()
        return self.store.update_cell(row, column, value)

    def bulk_edit(self, text: str, mode: str = "replace") -> int:
        try:
            records = bulk_edit.plan_bulk_edit(
                self.store, self.selection.sorted_cells(), text, mode
            )
        except InputError as exc:
            self._set_status(str(exc), 3)
            return 0
        changed = self._apply(records)
        if changed:
            self.selection.clear_selection()
        self._set_status(f"Updated {_plural(changed, 'cell')}", 2)
        return changed

    def revert(self) -> int:
        self.search.supersede()
        reverted = self.store.revert()
        self._set_status(f"Reverted {_plural(reverted, 'cell')}", 2)
        return reverted

    # ---------- search / replace ----------
    def find(self, options: SearchOptions) -> bool:
        """Start a search; results arrive as the host pumps the session."""
        self.last_options = options
        job = self.search.start(options, order=self.layout.order)
        if job is None:
            self._set_status("", 0)
            return False
        if self.history is not None:
            self.history.record(options.query)
        self._set_status("Searching...", 600)
        return True

    def pump(self) -> bool:
        return self.search.pump()

    def _on_search_done(self, results):
        exact = sum(1 for r in results if r.exact)
        msg = f"Found {len(results)} match(es)"
        if self.last_options is not None and self.last_options.fuzzy and exact < len(results):
            msg += f" ({exact} exact, {len(results) - exact} fuzzy)"
        self._set_status(msg, 3)

    def replace_all(self, options: SearchOptions) -> int:
        try:
            records = plan_replacements(self.store.frame, options, order=self.layout.order)
        except InputError as exc:
            self._set_status(str(exc), 3)
            return 0
        # published results are cleared before the store changes
        self.search.supersede()
        count = self.store.bulk_update(records) if records else 0
        self._set_status(f"Replaced {count} occurrence(s)", 3)
        return count

    def jump_to_result(self, index: int):
        results = self.search.results
        if not 0 <= index < len(results):
            return None
        hit = results[index]
        self.selection.select_cell(hit.row_index, hit.column_id)
        self.viewport.ensure_row_visible(hit.row_index)
        return hit

    # ---------- selection ----------
    def select_cell(self, row: int, column: str, is_multi=False, is_range=False):
        self.selection.select_cell(row, column, is_multi=is_multi, is_range=is_range)

    def begin_drag(self, row: int, column: str, is_multi=False):
        self.selection.begin_drag(row, column, is_multi=is_multi)

    def drag_over(self, row: int, column: str):
        self.selection.drag_over(row, column)

    def end_drag(self):
        self.selection.end_drag()

    def clear_selection(self):
        self.selection.clear_selection()

    # ---------- clipboard ----------
    def paste_into_selection(self) -> int:
        if not len(self.selection):
            self._set_status("No cells selected", 2)
            return 0
        try:
            text = clipboard.read_clipboard(self.config.get("CLIPBOARD_PASTE_COMMAND"))
        except ClipboardError as exc:
            self._set_status(f"Paste failed: {exc}", 3)
            return 0
        records = bulk_edit.plan_bulk_edit(
            self.store, self.selection.sorted_cells(), text, "replace"
        )
        changed = self._apply(records)
        self._set_status(f"Pasted into {_plural(changed, 'cell')}", 2)
        return changed

    def copy_selection(self) -> bool:
        bounds = self.selection.bounds()
        if bounds is None:
            self._set_status("No cells selected", 2)
            return False
        data = clipboard.selection_to_tsv(self.store, self.layout, bounds)
        try:
            clipboard.write_clipboard(data, self.config.get("CLIPBOARD_INTERFACE_COMMAND"))
        except ClipboardError as exc:
            self._set_status(f"Copy failed: {exc}", 3)
            return False
        self._set_status("Selection copied", 2)
        return True

    # ---------- viewport ----------
    def visible_window(self):
        self.viewport.update_total_rows(self.store.row_count)
        return self.viewport.window()

    def scroll_to(self, offset: float):
        self.viewport.scroll_to(offset)
        return self.visible_window()

    def resize(self, viewport_height: float):
        self.viewport.resize(viewport_height)
        return self.visible_window()
