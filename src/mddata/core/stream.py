"""Flat leveled event stream and its tree materialization"""

from dataclasses import dataclass, field
from typing import Iterator, Optional


@dataclass
class Node:
    """A tree node rebuilt from stream levels. The root has text None."""
    text: Optional[str]
    children: list["Node"] = field(default_factory=list)

    def to_list(self) -> list:
        """Return a JSON-ready form: leaves are strings, others {text: [children]}."""
        out = []
        for c in self.children:
            out.append({c.text: c.to_list()} if c.children else c.text)
        return out


class EventStream:
    """Append-only sequence of (text, level) entries.

    The current level is a cursor moved with inc/dec/set_level; add() writes
    at the cursor, add_at() at an explicit level. Entries are never changed
    in place; delete_last() only drops the tail.
    """

    def __init__(self) -> None:
        self._items: list[str] = []
        self._levels: list[int] = []
        self._current = 0
        self.max_level = 0

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[tuple[str, int]]:
        return iter(zip(self._items, self._levels))

    @property
    def level(self) -> int:
        return self._current

    def item(self, i: int) -> tuple[str, int]:
        """Return (text, level) at i, or ('', -1) when i is out of range."""
        if i < 0 or i >= len(self._items):
            return "", -1
        return self._items[i], self._levels[i]

    def add(self, text: str) -> None:
        self._items.append(text)
        self._levels.append(self._current)

    def add_at(self, text: str, level: int) -> None:
        self._items.append(text)
        self._levels.append(level)
        self.max_level = max(self.max_level, level)

    def delete_last(self) -> None:
        if self._items:
            self._items.pop()
            self._levels.pop()

    def set_level(self, level: int) -> None:
        self._current = max(level, 0)
        self.max_level = max(self.max_level, self._current)

    def inc(self) -> None:
        self._current += 1
        self.max_level = max(self.max_level, self._current)

    def dec(self) -> None:
        if self._current > 0:
            self._current -= 1

    def tree(self) -> Node:
        """Attach each entry at level L to the latest entry at level L-1."""
        root = Node(None)
        stack: list[tuple[int, Node]] = [(-1, root)]
        for text, level in self:
            while stack[-1][0] >= level:
                stack.pop()
            node = Node(text)
            stack[-1][1].children.append(node)
            stack.append((level, node))
        return root

    def text(self) -> str:
        """Indented listing, two spaces per level."""
        return "".join(f"{'  ' * level}{text}\n" for text, level in self)
