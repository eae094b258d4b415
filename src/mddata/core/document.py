"""Document: parsed blocks plus HTML, data, part and stream views"""

import logging
import threading
from pathlib import Path
from typing import Any, Optional, Sequence

from mddata.core.export import render_html
from mddata.core.extract.data import extract_data
from mddata.core.extract.sections import build_parts_index, section_end
from mddata.core.models import (
    Block, Code, Command, DataBlock, Header, Inline, ListBlock, Paragraph, Table,
)
from mddata.core.parse import parse_text, read_source
from mddata.core.stream import EventStream, Node
from mddata.core.utils.diff import compare_structure
from mddata.core.utils.slug import MAX_KEY_LENGTH


logger = logging.getLogger(__name__)


def _emit_inline(stream: EventStream, content: Inline, level: int) -> None:
    for segment in content:
        if isinstance(segment, str):
            stream.add_at(segment, level)
            continue
        stream.add_at("!esc", level)
        stream.add_at(segment.name, level + 1)
        for arg in segment.args:
            stream.add_at(arg, level + 2)


def _emit(stream: EventStream, block: Block, level: int) -> None:
    """Flatten one block into stream entries starting at `level`."""
    inner = level + 1
    if isinstance(block, Header):
        stream.add_at("!h", level)
        stream.add_at(str(block.level), inner)
        stream.add_at(block.text, inner)
        stream.add_at("#" + block.key, inner)
        stream.add_at("!" + block.type, inner)
    elif isinstance(block, Paragraph):
        stream.add_at("!q" if block.quote else "!p", level)
        _emit_inline(stream, block.content, inner)
    elif isinstance(block, ListBlock):
        stream.add_at("!ol" if block.ordered else "!ul", level)
        for item in block.items:
            stream.add_at("!li", inner)
            stream.add_at(str(item.level), inner + 1)
            stream.add_at(item.text, inner + 1)
            stream.add_at(item.key, inner + 1)
    elif isinstance(block, Table):
        stream.add_at("!tb", level)
        for row in block.rows:
            stream.add_at("!tr", inner)
            for cell in row:
                stream.add_at(cell.text, inner + 1)
                if cell.key is not None:
                    stream.add_at(cell.key, inner + 2)
        if block.hrow:
            stream.add_at("!hrow", inner)
        if block.hcol:
            stream.add_at("!hcol", inner)
    elif isinstance(block, Code):
        stream.add_at("!pre", level)
        stream.add_at(block.lang, inner)
        for line in block.lines:
            stream.add_at(line, inner)
    elif isinstance(block, DataBlock):
        stream.add_at("!g", level)
        stream.add_at(block.raw, inner)
    elif isinstance(block, Command):
        stream.add_at("!x", level)
        stream.add_at(block.name, inner)
        for arg in block.args:
            stream.add_at(arg, inner)


class Document:
    """An immutable parsed document.

    Built once from text; every view (html, data, part, stream) reads the
    same block tuple. Parts returned by part() hold the parent's block
    objects, not copies.
    """

    def __init__(self, blocks: Sequence[Block] = ()):
        self._blocks: tuple[Block, ...] = tuple(blocks)
        self._parts: Optional[dict[str, tuple[int, int]]] = None
        self._parts_lock = threading.Lock()

    @classmethod
    def from_text(cls, text: str, max_key_length: int = MAX_KEY_LENGTH) -> "Document":
        return cls(parse_text(text, max_key_length))

    @classmethod
    def from_file(cls, path: Path, max_key_length: int = MAX_KEY_LENGTH) -> "Document":
        """Load and parse a file; raises DocumentLoadError if it cannot be read."""
        logger.info("Loading document %s", path)
        return cls.from_text(read_source(path), max_key_length)

    @property
    def blocks(self) -> tuple[Block, ...]:
        return self._blocks

    def __len__(self) -> int:
        return len(self._blocks)

    def __repr__(self) -> str:
        return f"Document({len(self._blocks)} blocks)"

    @property
    def is_empty(self) -> bool:
        return not self._blocks

    def html(self, url_base: str = "", numbered: bool = False) -> str:
        return render_html(self._blocks, url_base=url_base, numbered=numbered)

    def data(self, text: bool = True, tables: bool = True) -> dict[str, Any]:
        return extract_data(self._blocks, text=text, tables=tables)

    def parts(self) -> dict[str, tuple[int, int]]:
        """Dotted header path -> (block position, header level), built once."""
        if self._parts is None:
            with self._parts_lock:
                if self._parts is None:
                    self._parts = build_parts_index(self._blocks)
        return self._parts

    def part(self, path: str) -> "Document":
        """Return the section at a dotted (or slash separated) header path.

        The section runs from its header up to the next header of the same
        or a shallower level. An unknown path gives an empty Document.
        """
        key = path.strip().strip("/.").replace("/", ".")
        found = self.parts().get(key)
        if found is None:
            logger.debug("No section %r", path)
            return Document()
        start, level = found
        return Document(self._blocks[start:section_end(self._blocks, start, level)])

    def get(self, path: str) -> Any:
        """Navigate by path segments: '_' selects the data tree, anything else a part.

        'a/b' -> part('a.b'); '_' -> data(); '_/a/x' -> data()['a']['x'].
        Returns None when a data path does not exist.
        """
        segments = [s for s in path.replace(".", "/").split("/") if s]
        if not segments:
            return self
        if segments[0] != "_":
            return self.part(".".join(segments))
        node: Any = self.data()
        for seg in segments[1:]:
            if not isinstance(node, dict) or seg not in node:
                return None
            node = node[seg]
        return node

    def check_structure(self, reference: "Document") -> tuple[bool, str]:
        """Verify every header of reference exists here with the same nesting."""
        return compare_structure(
            reference.data(text=False, tables=False),
            self.data(text=False, tables=False),
        )

    def stream(self) -> EventStream:
        """Flatten blocks into the leveled event stream."""
        stream = EventStream()
        for block in self._blocks:
            _emit(stream, block, 0)
        return stream

    def tree(self) -> Node:
        return self.stream().tree()
