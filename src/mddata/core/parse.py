"""File discovery, source loading, and the line-oriented block scanner"""

import logging
import re
from pathlib import Path
from typing import Callable, Iterator, Optional

from mddata.core.escape import split_escapes
from mddata.core.models import (
    Block, Cell, Code, Command, DataBlock, Header, ListBlock, ListItem, Paragraph, Table,
)
from mddata.core.utils.slug import MAX_KEY_LENGTH, get_key, get_type
from mddata.csv.read import split as csv_split
from mddata.exceptions import DocumentLoadError


logger = logging.getLogger(__name__)

MD_EXTENSIONS = {'.md'}

# A paragraph ends before a line starting with any of these (see _starts_block).
BLOCK_CHARS = frozenset('#!.>-+|`{')

HEADER_RE = re.compile(r'^(#+)?(!)?[ \t]+(.*)$')
COMMAND_RE = re.compile(r'^\.([A-Za-z]\w*)(.*)$')

HMODES: dict[str, tuple[bool, bool]] = {
    '':      (True, False),
    'h':     (True, False),
    'hrow':  (True, False),
    'v':     (False, True),
    'hcol':  (False, True),
    'hv':    (True, True),
    'hboth': (True, True),
}
KNOWN_COMMANDS = {'csv', 'nh'}


def discover_files(path: Path) -> list[Path]:
    """Return sorted .md files under path, or [path] if a single file."""
    if path.is_file():
        return [path] if path.suffix in MD_EXTENSIONS else []
    return sorted(p for p in path.rglob('*') if p.suffix in MD_EXTENSIONS)


def read_source(path: Path) -> str:
    """Read a document source as UTF-8 text."""
    try:
        return Path(path).read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentLoadError(f"Cannot read {path}: {e}") from e


def _starts_block(line: str) -> bool:
    """True when line opens a new block. '!' counts only as a title line."""
    if line[0] == '!':
        m = HEADER_RE.match(line)
        return bool(m and m.group(2))
    return line[0] in BLOCK_CHARS


def _is_separator(body: str) -> bool:
    return '---' in body and set(body.strip()) <= set('-:| \t')


class Scanner:
    """Consumes source lines and yields typed blocks, one dispatch per block.

    Dispatch is on the first character of the next non-blank line. Every
    handler consumes at least that line, so scanning always terminates.
    """

    def __init__(self, text: str, max_key_length: int = MAX_KEY_LENGTH):
        self.lines = text.replace('\r\n', '\n').replace('\r', '\n').split('\n')
        self.pos = 0
        self.max_key_length = max_key_length
        self._dispatch: dict[str, Callable[[], Optional[Block]]] = {
            '#': self._header,
            '!': self._header,
            '.': self._command,
            '>': self._quote,
            '-': lambda: self._list('-'),
            '+': lambda: self._list('+'),
            '|': self._table,
            '`': self._code,
            '{': self._data,
        }

    def _key(self, text: str) -> tuple[str, str]:
        return get_key(text, self.max_key_length)

    def _at_end(self) -> bool:
        return self.pos >= len(self.lines)

    def blocks(self) -> Iterator[Block]:
        while not self._at_end():
            line = self.lines[self.pos]
            if not line.strip():
                self.pos += 1
                continue
            start = self.pos
            block = self._dispatch.get(line[0], self._paragraph)()
            if self.pos == start:
                self.pos += 1
            if block is not None:
                yield block

    def _paragraph_lines(self, accept: Callable[[str], bool] = lambda line: False) -> list[str]:
        """Take the current line, then every following line until a blank or block line."""
        lines = [self.lines[self.pos]]
        self.pos += 1
        while not self._at_end():
            line = self.lines[self.pos]
            if not line.strip():
                break
            if _starts_block(line) and not accept(line):
                break
            lines.append(line)
            self.pos += 1
        return lines

    def _paragraph(self) -> Optional[Paragraph]:
        text = '\n'.join(line.strip() for line in self._paragraph_lines()).strip()
        if not text:
            return None
        return Paragraph(split_escapes(text))

    def _quote(self) -> Optional[Paragraph]:
        lines = self._paragraph_lines(accept=lambda line: line[0] == '>')
        text = '\n'.join(line[1:].strip() if line[0] == '>' else line.strip() for line in lines)
        text = text.strip()
        if not text:
            return None
        return Paragraph(split_escapes(text), quote=True)

    def _header(self) -> Optional[Block]:
        line = self.lines[self.pos]
        m = HEADER_RE.match(line)
        if not m or not (m.group(1) or m.group(2)):
            logger.debug("Line %d is not a header, read as text: %r", self.pos + 1, line)
            return self._paragraph()
        self.pos += 1

        level = 0 if m.group(2) else len(m.group(1))
        typ, text = get_type(m.group(3).strip())
        key, text = self._key(text)
        return Header(level=level, text=text, key=key, type=typ, content=split_escapes(text))

    def _command(self) -> Optional[Block]:
        line = self.lines[self.pos].strip()
        m = COMMAND_RE.match(line)
        if not m:
            return self._paragraph()
        self.pos += 1

        name, args = m.group(1), tuple(m.group(2).split())
        if name == 'csv':
            return self._csv_table(args[0] if args else '')
        if name not in KNOWN_COMMANDS:
            logger.debug("Unknown command .%s on line %d", name, self.pos)
        return Command(name, args)

    def _list(self, marker: str) -> Optional[ListBlock]:
        items: list[ListItem] = []
        indents: list[int] = []

        while not self._at_end():
            line = self.lines[self.pos].expandtabs(4)
            stripped = line.lstrip(' ')
            if not stripped.startswith(marker):
                break
            self.pos += 1

            indent = len(line) - len(stripped)
            while indents and indent < indents[-1]:
                indents.pop()
            if not indents or indent > indents[-1]:
                indents.append(indent)

            key, text = self._key(stripped[len(marker):])
            if text:
                items.append(ListItem(level=len(indents), text=text, key=key))

        if not items:
            return None
        return ListBlock(tuple(items), ordered=marker == '+')

    def _table(self) -> Optional[Table]:
        rows: list[list[str]] = []
        hrow = hcol = False
        first = True

        while not self._at_end() and self.lines[self.pos].startswith('|'):
            body = self.lines[self.pos].strip()[1:]
            self.pos += 1
            if body.startswith('|'):
                body = body[1:]
                hcol = hcol or first
            first = False

            if _is_separator(body):
                if len(rows) == 1:
                    hrow = True
                continue
            body = body.strip()
            if body.endswith('|'):
                body = body[:-1]
            if not body.strip():
                continue
            rows.append([c.strip() for c in body.split('|')])

        if not rows:
            return None
        return self._make_table(rows, hrow, hcol)

    def _csv_table(self, hmode: str) -> Optional[Table]:
        if hmode not in HMODES:
            logger.debug("Unknown csv header mode %r, using hrow", hmode)
        hrow, hcol = HMODES.get(hmode, HMODES[''])

        rows: list[list[str]] = []
        while not self._at_end():
            line = self.lines[self.pos].strip()
            if not line:
                break
            self.pos += 1
            if line.startswith('#'):
                continue
            rows.append(csv_split(line))

        if not rows:
            return None
        return self._make_table(rows, hrow, hcol)

    def _row_key_cell(self, text: str) -> Cell:
        """First-column cell in header-column mode. '_x' keeps 'x' verbatim as key."""
        if not text:
            return Cell('_', '_')
        if text.startswith('_') and len(text) > 1:
            return Cell(text[1:], text[1:])
        key, text = self._key(text)
        return Cell(text, key or text)

    def _make_table(self, rows: list[list[str]], hrow: bool, hcol: bool) -> Table:
        out = []
        for r, row in enumerate(rows):
            cells = []
            for c, text in enumerate(row):
                if hcol and c == 0:
                    cells.append(self._row_key_cell(text))
                elif hrow and r == 0:
                    key, text = self._key(text)
                    cells.append(Cell(text, key or text))
                else:
                    cells.append(Cell(text))
            out.append(tuple(cells))
        return Table(tuple(out), hrow=hrow, hcol=hcol)

    def _code(self) -> Code:
        lang = self.lines[self.pos].lstrip('`').strip() or 'code'
        self.pos += 1
        body = []
        while not self._at_end():
            line = self.lines[self.pos]
            self.pos += 1
            if line.startswith('`'):
                break
            body.append(line)
        return Code(lang, tuple(body))

    def _data(self) -> DataBlock:
        opening = self.lines[self.pos].strip()
        self.pos += 1
        if len(opening) > 1 and opening.endswith('}'):
            return DataBlock(opening[1:-1].strip())

        body = []
        while not self._at_end():
            line = self.lines[self.pos]
            self.pos += 1
            if line.strip() == '}':
                break
            body.append(line)
        return DataBlock('\n'.join(body))


def parse_text(text: str, max_key_length: int = MAX_KEY_LENGTH) -> tuple[Block, ...]:
    """Scan text into a tuple of typed blocks."""
    return tuple(Scanner(text, max_key_length).blocks())
