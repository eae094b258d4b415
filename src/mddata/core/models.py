"""Typed block variants produced by the scanner and read by the projections"""

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class Escape:
    """Inline escape: \\name(arg, ...). An empty name is the bare \\( ) form."""
    name: str
    args: tuple[str, ...] = ()

    def source(self) -> str:
        """Return the escape written back in source form."""
        s = "\\" + self.name
        if self.args or not self.name:
            quoted = [f'"{a}"' if ("," in a or ")" in a) else a for a in self.args]
            s += "(" + ", ".join(quoted) + ")"
        return s


Inline = tuple[Union[str, Escape], ...]


def plain_text(content: Inline) -> str:
    """Flatten inline segments back to text (escapes in source form)."""
    return "".join(s if isinstance(s, str) else s.source() for s in content)


@dataclass(frozen=True)
class Paragraph:
    content: Inline
    quote: bool = False

    @property
    def text(self) -> str:
        return plain_text(self.content)


@dataclass(frozen=True)
class Header:
    """A header line. Level 0 is the document title, 1-6 are # to ######."""
    level: int
    text: str
    key: str
    type: str = ""
    content: Inline = ()


@dataclass(frozen=True)
class ListItem:
    level: int                      # 1 for top-level items
    text: str
    key: str


@dataclass(frozen=True)
class ListBlock:
    items: tuple[ListItem, ...]
    ordered: bool = False


@dataclass(frozen=True)
class Cell:
    text: str
    key: str | None = None          # set only on header cells


@dataclass(frozen=True)
class Table:
    rows: tuple[tuple[Cell, ...], ...]
    hrow: bool = False              # first row supplies keys
    hcol: bool = False              # first column supplies keys

    @property
    def css_class(self) -> str | None:
        if self.hrow and self.hcol:
            return "hboth"
        if self.hcol:
            return "hcol"
        if self.hrow:
            return "hrow"
        return None


@dataclass(frozen=True)
class Code:
    lang: str
    lines: tuple[str, ...] = ()


@dataclass(frozen=True)
class DataBlock:
    raw: str


@dataclass(frozen=True)
class Command:
    name: str
    args: tuple[str, ...] = field(default=())


Block = Union[Paragraph, Header, ListBlock, Table, Code, DataBlock, Command]
