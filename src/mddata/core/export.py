"""Output projections: HTML rendering of blocks and serialization of data trees"""

import html
import json
from typing import Any, Iterable

import yaml

from mddata.core.inline import format_inline, render_inline, task_marker
from mddata.core.models import (
    Block, Code, Command, Header, ListBlock, ListItem, Paragraph, Table,
)


MAX_HEADER_DEPTH = 10


class HeaderTrail:
    """Most recent key and running number per header level (1-10)."""

    def __init__(self) -> None:
        self.keys = [''] * MAX_HEADER_DEPTH
        self.counters = [0] * MAX_HEADER_DEPTH

    def push(self, level: int, key: str) -> tuple[list[str], str]:
        """Record a header; return (key path, number like '2.1.')."""
        i = level - 1
        self.keys[i] = key
        self.counters[i] += 1
        for j in range(i + 1, MAX_HEADER_DEPTH):
            self.keys[j] = ''
            self.counters[j] = 0
        path = [k for k in self.keys[:i + 1] if k]
        number = ''.join(f"{n}." for n in self.counters[:i + 1] if n)
        return path, number


def _header_html(h: Header, trail: HeaderTrail, url_base: str, numbered: bool) -> str:
    text = render_inline(h.content)
    if h.level == 0:
        return f"<div class='title'>{text}</div>\n"

    tag = f"h{min(h.level, 6)}"
    if h.level > MAX_HEADER_DEPTH:
        return f"<{tag}>{text}</{tag}>\n"

    path, number = trail.push(h.level, h.key)
    if numbered:
        text = f"{number} {text}"
    if not h.key:
        return f"<{tag}>{text}</{tag}>\n"
    if url_base:
        text = f"<a href='{url_base.rstrip('/')}/{'/'.join(path)}'>{text}</a>"
    return f'<{tag} id="{".".join(path)}">{text}</{tag}>\n'


def _list_html(items: tuple[ListItem, ...], ordered: bool) -> str:
    tag = 'ol' if ordered else 'ul'
    out: list[str] = []

    def render(i: int, level: int) -> int:
        out.append(f"<{tag}>\n")
        while i < len(items) and items[i].level >= level:
            item = items[i]
            if item.level > level:
                # deeper item with no parent item at this level
                out.append("<li>\n")
                i = render(i, level + 1)
                out.append("</li>\n")
                continue

            text, task = task_marker(item.text)
            text = format_inline(text)
            attr = " class='tasklist'" if task else ""
            i += 1
            if i < len(items) and items[i].level > level:
                out.append(f"<li{attr}>{text}\n")
                i = render(i, level + 1)
                out.append("</li>\n")
            else:
                out.append(f"<li{attr}>{text}</li>\n")
        out.append(f"</{tag}>\n")
        return i

    render(0, 1)
    return "".join(out)


def _table_html(table: Table) -> str:
    cls = table.css_class
    out = [f"<table class='{cls}'>\n" if cls else "<table>\n"]
    for r, row in enumerate(table.rows):
        out.append("<tr>")
        for c, cell in enumerate(row):
            tag = 'th' if (table.hrow and r == 0) or (table.hcol and c == 0) else 'td'
            out.append(f"<{tag}>{format_inline(cell.text)}</{tag}>")
        out.append("</tr>\n")
    out.append("</table>\n")
    return "".join(out)


def _code_html(code: Code) -> str:
    body = "".join(html.escape(line, quote=False) + "\n" for line in code.lines)
    return f"<pre class='{html.escape(code.lang)}'>\n{body}</pre>\n"


def _paragraph_html(p: Paragraph) -> str:
    if p.quote:
        return f"<blockquote><p>{render_inline(p.content)}</p></blockquote>\n"
    return f"<p>{render_inline(p.content)}</p>\n"


def render_html(blocks: Iterable[Block], url_base: str = "", numbered: bool = False) -> str:
    """Render blocks to HTML in one forward pass.

    Header anchors are the dotted path of header keys (the same path part()
    accepts). Numbering starts with numbered=True or at a '.nh' command.
    Data blocks and other commands produce no output.
    """
    trail = HeaderTrail()
    parts: list[str] = []
    for block in blocks:
        if isinstance(block, Header):
            parts.append(_header_html(block, trail, url_base, numbered))
        elif isinstance(block, Paragraph):
            parts.append(_paragraph_html(block))
        elif isinstance(block, ListBlock):
            parts.append(_list_html(block.items, block.ordered))
        elif isinstance(block, Table):
            parts.append(_table_html(block))
        elif isinstance(block, Code):
            parts.append(_code_html(block))
        elif isinstance(block, Command) and block.name == 'nh':
            numbered = True
    return "".join(parts)


def dump_data(data: Any, fmt: str = 'json') -> str:
    """Serialize a data tree as JSON or YAML."""
    if fmt == 'yaml':
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
