"""Quote-aware CSV field splitting and record reading"""

import logging
from pathlib import Path

from mddata.exceptions import DocumentLoadError


logger = logging.getLogger(__name__)


def _unquote(field: str) -> str:
    field = field.strip()
    if len(field) >= 2 and field[0] == '"' and field[-1] == '"':
        return field[1:-1]
    return field


def split(line: str) -> list[str]:
    """Split line on ',' outside double quotes.

    Fields are stripped and one layer of surrounding quotes is removed.
    A quote preceded by a backslash does not close a quoted span.

    >>> split('a, "b, c", d')
    ['a', 'b, c', 'd']
    """
    fields = []
    start = 0
    quoted = False
    for i, c in enumerate(line):
        if c == '"':
            if not quoted:
                quoted = True
            elif line[i - 1] != '\\':
                quoted = False
        elif c == ',' and not quoted:
            fields.append(_unquote(line[start:i]))
            start = i + 1
    fields.append(_unquote(line[start:]))
    return fields


def read_string(text: str) -> list[dict[str, str]]:
    """Read CSV text into records keyed by the first (header) line.

    Blank lines and lines starting with '#' are skipped. Empty values are
    left out of each record.
    """
    rows = [split(line) for line in text.splitlines() if line.strip() and not line.startswith('#')]
    if not rows:
        return []

    keys = rows[0]
    records = []
    for row in rows[1:]:
        if len(row) > len(keys):
            logger.debug("CSV row has %d fields, header has %d; extra fields dropped", len(row), len(keys))
        records.append({k: v for k, v in zip(keys, row) if v})
    return records


def read_file(path: Path) -> list[dict[str, str]]:
    """Read a CSV file into records (see read_string)."""
    try:
        text = Path(path).read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentLoadError(f"Cannot read {path}: {e}") from e
    return read_string(text)
