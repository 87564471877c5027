from trackbox.tracking.sample_store import TimeSampleStore
from trackbox.tracking.types import BBox


def _store(*times):
    store = TimeSampleStore()
    for t in times:
        store.insert(t, BBox(t, t, 1, 1, 0))
    return store


def test_keys_stay_sorted_regardless_of_insert_order():
    store = _store(3.0, 1.0, 2.0)
    assert store.keys() == (1.0, 2.0, 3.0)
    assert [t for t, _ in store.items()] == [1.0, 2.0, 3.0]


def test_insert_overwrites_existing_key():
    store = _store(1.0)
    store.insert(1.0, BBox(9, 9, 9, 9, 9))
    assert len(store) == 1
    assert store.get(1.0) == BBox(9, 9, 9, 9, 9)


def test_remove_missing_key_is_noop():
    store = _store(1.0)
    assert store.remove(5.0) is False
    assert store.remove(1.0) is True
    assert len(store) == 0


def test_bracket_inside_range():
    store = _store(1.0, 2.0, 4.0)
    left, right = store.bracket(3.0)
    assert left[0] == 2.0
    assert right[0] == 4.0


def test_bracket_exact_hit_returns_same_sample_both_sides():
    store = _store(1.0, 2.0)
    left, right = store.bracket(2.0)
    assert left == right == (2.0, store.get(2.0))


def test_bracket_outside_range_and_empty():
    store = _store(1.0, 2.0)
    assert store.bracket(0.5)[0] is None
    assert store.bracket(5.0)[1] is None
    assert TimeSampleStore().bracket(1.0) == (None, None)
    assert TimeSampleStore().first() is None


def test_clear_empties_store():
    store = _store(1.0, 2.0)
    store.clear()
    assert len(store) == 0
    assert store.last() is None
