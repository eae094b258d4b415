"""Data projection: headers and tables as a nested key/value tree"""

import logging
from typing import Any, Iterable, Optional

import yaml

from mddata.core.models import Block, DataBlock, Header, Paragraph, Table


logger = logging.getLogger(__name__)


#  | a | b |          a: [1, 8]
#  |---|---|   -->    b: [2, 9]
#  | 1 | 2 |
#  | 8 | 9 |
def table_data(table: Table) -> Optional[dict[str, Any]]:
    """Return the keyed form of a table, or None when it has no header row or column."""
    rows = table.rows
    if not rows or not (table.hrow or table.hcol):
        return None

    if table.hrow and not table.hcol:
        header = rows[0]
        out: dict[str, Any] = {cell.key: [] for cell in header}
        for row in rows[1:]:
            for cell, head in zip(row, header):
                out[head.key].append(cell.text)
        return out

    if table.hcol and not table.hrow:
        return {row[0].key: [cell.text for cell in row[1:]] for row in rows}

    # cell (0, 0) is the root key; row and column keys below it
    header = rows[0]
    body = {
        row[0].key: {head.key: cell.text for head, cell in zip(header[1:], row[1:])}
        for row in rows[1:]
    }
    return {header[0].key: body}


def _parse_data_block(raw: str) -> Any:
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError as e:
        logger.debug("Data block is not valid YAML, kept as text: %s", e)
        return raw


def extract_data(blocks: Iterable[Block], text: bool = True, tables: bool = True) -> dict[str, Any]:
    """Build the data tree of a document.

    Each header becomes a key nested under the most recent shallower header;
    a header with an empty key adds no level of its own.
    A type tag is stored under '_type', the title under '_title'. With
    text=True paragraphs are joined under '_text' of the enclosing header.
    Duplicate keys at the same place: last one wins.
    """
    root: dict[str, Any] = {}
    stack: list[tuple[int, dict[str, Any]]] = [(0, root)]

    for block in blocks:
        current = stack[-1][1]

        if isinstance(block, Header):
            if block.level == 0:
                root['_title'] = block.text
                continue
            while stack[-1][0] >= block.level:
                stack.pop()
            parent = stack[-1][1]
            if not block.key:
                # unkeyed header: children and text go to the parent
                stack.append((block.level, parent))
                continue
            node: dict[str, Any] = {}
            if block.type:
                node['_type'] = block.type
            parent[block.key] = node
            stack.append((block.level, node))

        elif isinstance(block, Paragraph):
            if text:
                current['_text'] = f"{current['_text']}\n{block.text}" if '_text' in current else block.text

        elif isinstance(block, Table):
            if tables:
                keyed = table_data(block)
                if keyed:
                    current.update(keyed)

        elif isinstance(block, DataBlock):
            current['_data'] = _parse_data_block(block.raw)

    return root
