"""Pipeline step functions: render documents to HTML plus data sidecars"""

import logging
from pathlib import Path

from mddata.config import Settings
from mddata.core.document import Document
from mddata.core.export import dump_data
from mddata.core.parse import discover_files
from mddata.core.utils.slug import slugify


logger = logging.getLogger(__name__)


def write_doc(doc: Document, rel_path: Path, output_dir: Path, settings: Settings) -> tuple[Path, Path]:
    """Write HTML + data sidecar for a single document.

    Output path mirrors the source directory structure:
      output_dir / rel_path.parent / slug(stem).{html|json|yaml}
    The sidecar is YAML when output_format is 'yaml', JSON otherwise.

    Returns (html_path, data_path).
    """
    dest_dir = output_dir / rel_path.parent
    dest_dir.mkdir(parents=True, exist_ok=True)
    stem = slugify(rel_path.stem) or rel_path.stem
    fmt = 'yaml' if settings.output_format == 'yaml' else 'json'

    html_path = dest_dir / f"{stem}.html"
    data_path = dest_dir / f"{stem}.{fmt}"
    html_path.write_text(doc.html(url_base=settings.url_base, numbered=settings.numbered), encoding='utf-8')
    data_path.write_text(dump_data(doc.data(text=settings.include_text), fmt), encoding='utf-8')
    return html_path, data_path


def run_render(path: str, output_dir: Path, settings: Settings) -> list[tuple[Path, Path]]:
    """Render every .md file under path. Returns (source_path, html_path) pairs."""
    source = Path(path)
    if not source.exists():
        raise RuntimeError(f"Path not found: {path}")
    base = source.parent if source.is_file() else source

    results = []
    for p in discover_files(source):
        try:
            doc = Document.from_file(p, settings.max_key_length)
            html_path, _ = write_doc(doc, p.relative_to(base), output_dir, settings)
        except Exception as e:
            raise RuntimeError(f"Failed to render {p}: {e}") from e
        logger.info("Rendered %s -> %s", p, html_path)
        results.append((p, html_path))
    return results
