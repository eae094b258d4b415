"""Unit tests for core/stream.py"""

from mddata.core.stream import EventStream


def _stream(entries):
    s = EventStream()
    for text, level in entries:
        s.add_at(text, level)
    return s


def test_add_uses_current_level():
    """add() writes at the cursor moved by inc/dec/set_level."""
    s = EventStream()
    s.add("a")
    s.inc()
    s.add("b")
    s.set_level(3)
    s.add("c")
    s.dec()
    s.add("d")
    assert list(s) == [("a", 0), ("b", 1), ("c", 3), ("d", 2)]


def test_dec_never_below_zero():
    """dec() at level 0 keeps the level at 0."""
    s = EventStream()
    s.dec()
    s.add("x")
    assert s.level == 0
    assert s.item(0) == ("x", 0)


def test_item_out_of_range():
    """item() returns ('', -1) for indexes outside the stream."""
    s = _stream([("a", 0)])
    assert s.item(1) == ("", -1)
    assert s.item(-1) == ("", -1)


def test_add_at_tracks_max_level():
    """add_at() raises max_level without moving the cursor."""
    s = EventStream()
    s.add_at("deep", 4)
    assert s.max_level == 4
    assert s.level == 0


def test_delete_last_removes_tail_only():
    """delete_last() drops the most recent entry; on an empty stream it is a no-op."""
    s = _stream([("a", 0), ("b", 1)])
    s.delete_last()
    assert list(s) == [("a", 0)]
    s.delete_last()
    s.delete_last()
    assert len(s) == 0


def test_tree_attaches_by_level():
    """Each entry becomes a child of the latest entry one level up."""
    root = _stream([("a", 0), ("b", 1), ("c", 1), ("d", 0)]).tree()
    assert root.text is None
    assert [n.text for n in root.children] == ["a", "d"]
    assert [n.text for n in root.children[0].children] == ["b", "c"]


def test_tree_skipped_level_attaches_to_nearest():
    """An entry whose parent level is missing attaches to the nearest shallower entry."""
    root = _stream([("a", 0), ("x", 2), ("y", 1), ("z", 2)]).tree()
    a = root.children[0]
    assert [n.text for n in a.children] == ["x", "y"]
    assert [n.text for n in a.children[1].children] == ["z"]


def test_tree_to_list():
    """to_list() gives leaves as strings and inner nodes as single-key dicts."""
    root = _stream([("!h", 0), ("1", 1), ("A", 1)]).tree()
    assert root.to_list() == [{"!h": ["1", "A"]}]


def test_text_indents_by_level():
    """text() indents two spaces per level."""
    assert _stream([("a", 0), ("b", 1)]).text() == "a\n  b\n"
