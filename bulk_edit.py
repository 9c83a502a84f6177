from cell_coercion import cell_text
from data_store import MutationRecord
from errors import InputError

MODES = ("replace", "append", "prepend")


def _future_value(current, text: str, mode: str) -> str:
    if mode == "append":
        return cell_text(current) + text
    if mode == "prepend":
        return text + cell_text(current)
    return text


def plan_bulk_edit(store, cells, text: str, mode: str = "replace") -> list[MutationRecord]:
    if mode not in MODES:
        raise InputError(f"Unknown edit mode '{mode}' (use {', '.join(MODES)})")
    text = "" if text is None else str(text)
    records = []
    for row, column in cells:
        if not store.has_cell(row, column):
            continue
        current = store.value(row, column)
        records.append(MutationRecord(row, column, _future_value(current, text, mode)))
    return records


def preview(store, cells, text: str, mode: str = "replace", limit: int = 5):
    """First few (cell, current, future) triples an edit would produce."""
    out = []
    for record in plan_bulk_edit(store, cells, text, mode)[:limit]:
        current = cell_text(store.value(record.row_index, record.column_id))
        out.append(((record.row_index, record.column_id), current, record.new_value))
    return out
