"""Slash-path resolution over plain directories, documents and data files

A path walks directories from a root. When a segment names a file, the
remaining segments navigate inside it: '.md' files into a Document (see
Document.get), '.yaml'/'.yml'/'.json' files into their data tree. The '.md'
extension may be omitted. A segment with no matching entry follows a
'_name' entry in the same directory, if there is one, and is recorded as
parameter 'name'.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from mddata.core.document import Document
from mddata.exceptions import DocumentLoadError


logger = logging.getLogger(__name__)

DATA_EXTENSIONS = {'.yaml', '.yml', '.json'}


@dataclass
class Resolved:
    kind: str                       # dir, file, document, data
    path: Path
    value: Any = None
    params: dict[str, str] = field(default_factory=dict)


def _wildcard(directory: Path) -> Path | None:
    for p in sorted(directory.iterdir()):
        if p.name.startswith('_') and len(p.name) > 1:
            return p
    return None


def _inside(path: Path, root: Path) -> bool:
    return path.resolve().is_relative_to(root)


def _step(current: Path, segment: str, params: dict[str, str], root: Path) -> Path | None:
    """Next entry for segment, or None; entries outside root are never returned."""
    candidate = current / segment
    if not candidate.exists() and candidate.with_name(segment + '.md').is_file():
        candidate = candidate.with_name(segment + '.md')
    if candidate.exists():
        if not _inside(candidate, root):
            logger.debug("Rejected %s, outside %s", candidate, root)
            return None
        return candidate
    wild = _wildcard(current)
    if wild is not None and _inside(wild, root):
        params[wild.stem[1:]] = segment
        return wild
    return None


def _load_data(path: Path) -> Any:
    try:
        text = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentLoadError(f"Cannot read {path}: {e}") from e
    try:
        if path.suffix == '.json':
            return json.loads(text)
        return yaml.safe_load(text)
    except (ValueError, yaml.YAMLError) as e:
        raise DocumentLoadError(f"Invalid data file {path}: {e}") from e


def _navigate(data: Any, segments: list[str]) -> Any:
    for seg in segments:
        if isinstance(data, dict) and seg in data:
            data = data[seg]
        elif isinstance(data, list) and seg.isdigit() and int(seg) < len(data):
            data = data[int(seg)]
        else:
            return None
    return data


def resolve(root: Path, path: str) -> Resolved | None:
    """Resolve a slash path under root; None when nothing matches."""
    segments = [s for s in path.split('/') if s]
    params: dict[str, str] = {}
    current = Path(root)
    top = current.resolve()
    rest: list[str] = []

    for i, segment in enumerate(segments):
        nxt = _step(current, segment, params, top)
        if nxt is None:
            logger.debug("No entry for %r under %s", segment, current)
            return None
        current = nxt
        if current.is_file():
            rest = segments[i + 1:]
            break

    if current.is_dir():
        return Resolved('dir', current, sorted(p.name for p in current.iterdir()), params)
    if current.suffix == '.md':
        doc = Document.from_file(current)
        value = doc.get('/'.join(rest)) if rest else doc
        kind = 'document' if isinstance(value, Document) else 'data'
        return Resolved(kind, current, value, params)
    if current.suffix in DATA_EXTENSIONS:
        return Resolved('data', current, _navigate(_load_data(current), rest), params)
    return Resolved('file', current, current.read_bytes(), params)
