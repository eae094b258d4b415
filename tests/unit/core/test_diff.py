"""Unit tests for core/utils/diff.py"""

from mddata.core.utils.diff import compare_structure


def test_identical_trees():
    """A tree matches itself."""
    tree = {"a": {"b": {}}, "c": {}}
    assert compare_structure(tree, tree) == (True, "")


def test_missing_parent_hides_children():
    """Only the missing parent is reported, not its descendants."""
    assert compare_structure({"a": {"b": {}}}, {"c": {}}) == (False, "missing: a\n")


def test_several_missing():
    """Every missing path gets its own line."""
    ok, report = compare_structure({"a": {"x": {}, "y": {}}}, {"a": {}})
    assert not ok
    assert report == "missing: a.x\nmissing: a.y\n"


def test_underscore_and_leaf_keys_ignored():
    """_text, _type and table lists are not structure."""
    ref = {"_title": "T", "a": {"_text": "hi", "col": ["1"]}}
    assert compare_structure(ref, {"a": {}}) == (True, "")


def test_target_leaf_does_not_satisfy_header():
    """A non-dict value under the same key does not count as the header."""
    assert compare_structure({"a": {}}, {"a": ["1"]}) == (False, "missing: a\n")
