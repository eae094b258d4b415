"""Unit tests for core/extract/data.py"""

import pytest

from mddata.core.extract.data import extract_data, table_data
from mddata.core.extract.sections import build_parts_index
from mddata.core.parse import parse_text


def _data(text, /, **kwargs):
    return extract_data(parse_text(text), **kwargs)


def test_headers_nest_by_level():
    """Each header nests under the most recent shallower header."""
    assert _data("# A\n## B\n### C\n## D\n# E") == {
        "a": {"b": {"c": {}}, "d": {}},
        "e": {},
    }


def test_skipped_level_nests_under_nearest():
    """A header nests under the nearest shallower header even across skipped levels."""
    assert _data("# A\n### C\n## B") == {"a": {"c": {}, "b": {}}}


def test_unkeyed_header_adds_no_level():
    """Children and text of a header with an empty key go to its parent."""
    assert _data("# A\n## !!!\nnote\n### C") == {"a": {"_text": "note", "c": {}}}


def test_unkeyed_header_matches_part_path():
    """The data path of a header equals its part path."""
    blocks = parse_text("# A\n## !!!\n### C")
    assert "a.c" in build_parts_index(blocks)
    assert extract_data(blocks)["a"]["c"] == {}


def test_title_and_type():
    """The title goes to _title and type tags to _type."""
    assert _data("! Doc\n# Setup {!howto}") == {"_title": "Doc", "setup": {"_type": "howto"}}


def test_text_folds_into_enclosing_header():
    """Paragraphs are joined under _text of the enclosing header."""
    assert _data("intro\n# A\ntext1\n\ntext2") == {
        "_text": "intro",
        "a": {"_text": "text1\ntext2"},
    }


def test_text_excluded():
    """text=False leaves paragraphs out."""
    assert _data("intro\n# A\ntext1", text=False) == {"a": {}}


def test_duplicate_key_last_wins():
    """A repeated header key replaces the earlier subtree."""
    assert _data("# A\nfirst\n# A\nsecond") == {"a": {"_text": "second"}}


def test_table_header_row_data():
    """A header row table maps each column key to its values."""
    assert _data("| a | b |\n|---|---|\n| 1 | 2 |\n| 8 | 9 |") == {"a": ["1", "8"], "b": ["2", "9"]}


def test_table_header_column_data():
    """A header column table maps each row key to the rest of the row."""
    assert _data("|| k | 1 | 2 |") == {"k": ["1", "2"]}


def test_table_both_headers_data():
    """With both headers, the corner cell is the root key over rows and columns."""
    text = "|| x | a | b |\n|---|---|---|\n|| one | 1 | 2 |\n|| two | 3 | 4 |"
    assert _data(text) == {"x": {"one": {"a": "1", "b": "2"}, "two": {"a": "3", "b": "4"}}}


def test_plain_table_has_no_data():
    """A table without headers adds nothing."""
    assert _data("| a | b |\n| 1 | 2 |") == {}


def test_table_under_header():
    """Table keys are merged into the enclosing header."""
    assert _data("# Prices\n| a |\n|---|\n| 1 |") == {"prices": {"a": ["1"]}}


def test_tables_excluded():
    """tables=False leaves tables out."""
    assert _data("# P\n|| k | 1 |", tables=False) == {"p": {}}


def test_data_block_yaml():
    """Data blocks are parsed as YAML into _data."""
    assert _data("# A\n{\nx: 1\ny: [a, b]\n}") == {"a": {"_data": {"x": 1, "y": ["a", "b"]}}}


def test_data_block_invalid_yaml_kept_as_text():
    """A data block that is not YAML stays a string."""
    assert _data("{\na: [\n}") == {"_data": "a: ["}


def test_table_data_direct():
    """table_data returns None for tables without headers."""
    (table,) = parse_text("| a |")
    assert table_data(table) is None


@pytest.mark.parametrize("text", [
    "# A\n## B\n# C\n### D\n## E",
    "## X\n# Y\n#### Z\n## W",
])
def test_every_header_path_exists(text):
    """Every header appears in the tree under the keys of its ancestors."""
    data = _data(text, text=False)
    stack = []
    for block in parse_text(text):
        while stack and stack[-1][0] >= block.level:
            stack.pop()
        stack.append((block.level, block.key))
        node = data
        for _, key in stack:
            node = node[key]
        assert isinstance(node, dict)
