import os
import subprocess
import tempfile
from types import SimpleNamespace
from unittest.mock import patch

from data_store import Cell
from editor_session import EditorSession
from search_orchestrator import SearchOptions


def _session(records=None, columns=None):
    messages = []
    session = EditorSession(lambda msg, *_: messages.append(msg))
    session.load_records(
        records
        or [
            {"name": "Jon", "age": 30, "city": "NYC"},
            {"name": "John", "age": 41, "city": "LA"},
            {"name": "Ann", "age": 25, "city": "Oslo"},
        ],
        columns,
    )
    session.config["CLIPBOARD_PASTE_COMMAND"] = ["fake-paste"]
    session.config["CLIPBOARD_INTERFACE_COMMAND"] = ["fake-clip"]
    return session, messages


def test_load_rejects_empty_dataset_without_state_change():
    session, messages = _session()
    assert session.load_records([]) is False
    assert messages[-1] == "Dataset is empty"
    assert session.store.row_count == 3


def test_find_reports_exact_and_fuzzy_counts():
    session, messages = _session()
    assert session.find(SearchOptions(query="Jon", fuzzy=True))
    assert messages[-1] == "Searching..."
    while session.pump():
        pass
    assert len(session.search.results) == 2
    assert messages[-1] == "Found 2 match(es) (1 exact, 1 fuzzy)"


def test_edit_invalidates_results_and_in_flight_search():
    session, _ = _session([{"t": "needle"} for _ in range(300)])
    session.find(SearchOptions(query="needle"))
    session.pump()
    assert session.search.searching

    assert session.edit_cell(0, "t", "hay")
    assert not session.search.searching
    assert session.search.results == []
    assert session.search.progress == 0


def test_replace_all_counts_and_clears_results():
    session, messages = _session()
    session.find(SearchOptions(query="Jon"))
    while session.pump():
        pass
    assert session.search.results

    count = session.replace_all(SearchOptions(query="Jon", replacement="Jonathan"))
    assert count == 1
    assert session.store.value(0, "name") == "Jonathan"
    assert session.search.results == []
    assert messages[-1] == "Replaced 1 occurrence(s)"


def test_replace_all_with_empty_query_reports_and_keeps_results():
    session, messages = _session()
    session.find(SearchOptions(query="Jon"))
    while session.pump():
        pass
    assert session.replace_all(SearchOptions(query="")) == 0
    assert messages[-1] == "Please enter a search term"
    assert session.search.results


def test_bulk_edit_on_range_selection():
    session, _ = _session()
    session.select_cell(0, "name")
    session.select_cell(1, "age", is_range=True)
    assert session.bulk_edit("?", "append") == 4
    assert session.store.row(0) == {"name": "Jon?", "age": "30?", "city": "NYC"}
    assert session.store.row(1) == {"name": "John?", "age": "41?", "city": "LA"}
    assert len(session.selection) == 0


def test_paste_applies_same_text_to_every_selected_cell():
    session, messages = _session()
    session.select_cell(0, "city")
    session.select_cell(2, "name", is_multi=True)
    session.selection.add_cell_to_selection(99, "city")

    result = SimpleNamespace(stdout="pasted", returncode=0)
    with patch("subprocess.run", return_value=result) as run:
        assert session.paste_into_selection() == 2
        assert run.call_args.args[0] == ["fake-paste"]
        assert run.call_args.kwargs.get("text") is True

    assert session.store.value(0, "city") == "pasted"
    assert session.store.value(2, "name") == "pasted"
    assert session.store.row_count == 3
    assert messages[-1] == "Pasted into 2 cells"


def test_paste_denied_is_reported_and_changes_nothing():
    session, messages = _session()
    session.select_cell(0, "city")
    version = session.store.version
    denied = subprocess.CalledProcessError(1, ["fake-paste"], stderr="permission denied")
    with patch("subprocess.run", side_effect=denied):
        assert session.paste_into_selection() == 0
    assert session.store.version == version
    assert messages[-1].startswith("Paste failed")
    assert "permission denied" in messages[-1]


def test_copy_selection_sends_tsv_of_bounding_block():
    session, _ = _session()
    session.select_cell(0, "age")
    session.select_cell(1, "city", is_range=True)
    with patch("subprocess.run") as run:
        assert session.copy_selection()
        call = run.call_args_list[0]
        assert call.args[0] == ["fake-clip"]
        assert call.kwargs.get("input") == "age\tcity\n30\tNYC\n41\tLA\n"


def test_jump_to_result_selects_and_scrolls():
    records = [{"t": "hay"} for _ in range(500)]
    records[400] = {"t": "needle"}
    session, _ = _session(records)
    session.resize(350)
    session.find(SearchOptions(query="needle"))
    while session.pump():
        pass
    hit = session.jump_to_result(0)
    assert hit.row_index == 400
    assert session.selection.cells == {Cell(400, "t")}
    window = session.visible_window()
    assert window.start_index <= 400 <= window.end_index


def test_export_uses_display_order_and_revert_restores():
    session, _ = _session()
    session.layout.move("city", "name")
    session.edit_cell(2, "city", "Bergen")
    assert session.export_csv().splitlines()[0] == "city,name,age"
    assert "Bergen,Ann,25" in session.export_csv()
    assert session.revert() == 1
    assert session.store.value(2, "city") == "Oslo"


def test_load_and_save_file_round_trip():
    with tempfile.TemporaryDirectory() as tmp:
        src = os.path.join(tmp, "in.csv")
        with open(src, "w", encoding="utf-8") as f:
            f.write('name,city\nJon,"New York, NY"\n')
        session, messages = _session()
        assert session.load_file(src)
        assert messages[-1] == "Loaded 1 row x 2 columns"
        session.edit_cell(0, "name", "Jo")
        out = os.path.join(tmp, "out.csv")
        assert session.save_file(out)
        with open(out, encoding="utf-8") as f:
            assert f.read() == 'name,city\nJo,"New York, NY"\n'
