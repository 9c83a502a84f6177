import pandas as pd

from cell_coercion import cell_text, fold_case
from data_store import MutationRecord
from errors import InputError
from fuzzy_matcher import cell_match
from search_orchestrator import resolve_columns


def replace_in_cell(text: str, hit, options) -> str:
    """New text for one matched cell.

    Exact matches replace every occurrence, also in fuzzy mode; a fuzzy
    match replaces only its best window.
    """
    if not hit.exact:
        start = hit.match_index
        return text[:start] + options.replacement + text[start + len(hit.matched_text) :]
    if options.case_sensitive:
        return text.replace(options.query, options.replacement)

    # folded text has the same length as text, so its offsets apply to both
    haystack = fold_case(text)
    needle = fold_case(options.query)
    parts = []
    pos = 0
    idx = haystack.find(needle)
    while idx >= 0:
        parts.append(text[pos:idx])
        parts.append(options.replacement)
        pos = idx + len(needle)
        idx = haystack.find(needle, pos)
    parts.append(text[pos:])
    return "".join(parts)


def plan_replacements(frame: pd.DataFrame, options, order=None) -> list[MutationRecord]:
    if not options.query:
        raise InputError("Please enter a search term")

    records = []
    columns = resolve_columns(frame.columns, options.column_scope, order)
    if not columns:
        return records
    for row_index, values in enumerate(frame[columns].itertuples(index=False, name=None)):
        for col, value in zip(columns, values):
            text = cell_text(value)
            hit = cell_match(
                text,
                options.query,
                fuzzy=options.fuzzy,
                threshold=options.fuzzy_threshold,
                case_sensitive=options.case_sensitive,
            )
            if hit is None:
                continue
            records.append(MutationRecord(row_index, col, replace_in_cell(text, hit, options)))
    return records


def replace_all(store, options, order=None) -> int:
    """Replace every match in one bulk update; returns the number of cells changed."""
    records = plan_replacements(store.frame, options, order)
    if not records:
        return 0
    return store.bulk_update(records)
