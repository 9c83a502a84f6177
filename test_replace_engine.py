import pytest

from data_store import DataStore
from errors import InputError
from replace_engine import plan_replacements, replace_all
from search_orchestrator import SearchOptions


def _people():
    return DataStore(
        [{"name": "Jon", "city": "NYC"}, {"name": "John", "city": "LA"}],
        ["name", "city"],
    )


def test_exact_case_insensitive_scenario():
    store = _people()
    count = replace_all(
        store,
        SearchOptions(query="Jon", replacement="Jonathan", fuzzy=False, case_sensitive=False),
    )
    assert count == 1
    assert store.value(0, "name") == "Jonathan"
    assert store.value(1, "name") == "John"


def test_case_insensitive_replaces_every_occurrence_literally():
    store = DataStore([{"t": "A.b a.B x.b"}], ["t"])
    count = replace_all(store, SearchOptions(query="a.b", replacement=r"\1$&"))
    assert count == 1
    assert store.value(0, "t") == r"\1$& \1$& x.b"


def test_case_sensitive_replaces_only_exact_case():
    store = DataStore([{"t": "cat Cat cat"}, {"t": "CAT"}], ["t"])
    count = replace_all(
        store, SearchOptions(query="cat", replacement="dog", case_sensitive=True)
    )
    assert count == 1
    assert store.value(0, "t") == "dog Cat dog"
    assert store.value(1, "t") == "CAT"


def test_fuzzy_replaces_only_best_window():
    store = DataStore([{"t": "say helo to helo"}], ["t"])
    count = replace_all(
        store,
        SearchOptions(query="hello", replacement="hi", fuzzy=True, fuzzy_threshold=0.7),
    )
    assert count == 1
    assert store.value(0, "t") == "say hi to helo"


def test_fuzzy_mode_exact_hit_replaces_all_occurrences():
    store = DataStore([{"t": "Jon and jon"}], ["t"])
    replace_all(store, SearchOptions(query="jon", replacement="X", fuzzy=True))
    assert store.value(0, "t") == "X and X"


def test_column_scope_is_honoured():
    store = DataStore([{"a": "x", "b": "x"}], ["a", "b"])
    assert replace_all(store, SearchOptions(query="x", replacement="y", column_scope=("a",))) == 1
    assert store.row(0) == {"a": "y", "b": "x"}


def test_replace_is_one_bulk_step():
    store = DataStore([{"t": "a"}, {"t": "a"}, {"t": "b"}], ["t"])
    version = store.version
    assert replace_all(store, SearchOptions(query="a", replacement="z")) == 2
    assert store.version == version + 1


def test_numbers_are_replaced_as_text():
    store = DataStore([{"n": 1200}], ["n"])
    replace_all(store, SearchOptions(query="12", replacement="99"))
    assert store.value(0, "n") == "9900"


def test_empty_query_is_rejected_before_any_change():
    store = _people()
    version = store.version
    with pytest.raises(InputError):
        replace_all(store, SearchOptions(query="", replacement="x"))
    assert store.version == version


def test_plan_without_matches_is_empty():
    assert plan_replacements(_people().frame, SearchOptions(query="zzz")) == []


def test_replace_leaves_surrounding_non_ascii_text_intact():
    store = DataStore([{"t": "İİ helo"}, {"t": "İ JON jon"}], ["t"])
    count = replace_all(
        store,
        SearchOptions(query="hello", replacement="hi", fuzzy=True, fuzzy_threshold=0.7),
    )
    assert count == 1
    assert store.value(0, "t") == "İİ hi"

    replace_all(store, SearchOptions(query="jon", replacement="X"))
    assert store.value(1, "t") == "İ X X"
