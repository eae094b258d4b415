"""Typed records: instances inherit fields from the type records they name

The first record list holds instances; all lists (instances included) are
indexed by their 'name' field. An instance with a 'type' field receives every
field of that type record it does not set itself, resolved recursively,
except 'name' and 'type'. 'tags' are concatenated instead of replaced.
A type chain that loops back on itself raises TypeCycleError.
"""

import logging
from pathlib import Path
from typing import Iterable

from mddata.csv.read import read_file
from mddata.exceptions import TypeCycleError, UnknownTypeError


logger = logging.getLogger(__name__)

Record = dict[str, str]


def _resolve(name: str, index: dict[str, Record], cache: dict[str, Record], visiting: list[str]) -> Record:
    """Return the fully inherited fields of the type record `name`."""
    if name in cache:
        return cache[name]
    if name in visiting:
        chain = " -> ".join(visiting[visiting.index(name):] + [name])
        raise TypeCycleError(f"Circular type chain: {chain}")
    if name not in index:
        raise UnknownTypeError(f"Type not found: {name}")

    visiting.append(name)
    record = index[name]
    fields: Record = {}
    if record.get("type"):
        fields.update(_resolve(record["type"], index, cache, visiting))
    for k, v in record.items():
        if k == "name" or k == "type":
            continue
        if k == "tags" and fields.get("tags"):
            fields[k] = f"{v} {fields['tags']}"
        else:
            fields[k] = v
    visiting.pop()

    cache[name] = fields
    return fields


def typed(record_lists: Iterable[list[Record]]) -> dict[str, Record]:
    """Resolve type inheritance; returns instances (first list) keyed by name."""
    lists = list(record_lists)
    if not lists or not lists[0]:
        return {}

    index: dict[str, Record] = {}
    for records in lists:
        for record in records:
            if record.get("name"):
                index[record["name"]] = record

    cache: dict[str, Record] = {}
    out: dict[str, Record] = {}
    for item in lists[0]:
        result = dict(item)
        if item.get("type"):
            inherited = _resolve(item["type"], index, cache, [item.get("name", "")])
            for k, v in inherited.items():
                if k == "tags" and result.get("tags"):
                    result[k] = f"{result['tags']} {v}"
                else:
                    result.setdefault(k, v)
        out[item.get("name", "")] = result
    logger.debug("Resolved %d typed records", len(out))
    return out


def typed_files(paths: Iterable[Path]) -> dict[str, Record]:
    """Read CSV files and resolve types; the first file lists the instances."""
    return typed(read_file(p) for p in paths)
