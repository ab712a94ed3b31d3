"""
File Discovery and Loading

Turns files on disk into text plus the File/Document records that
describe them.

Functions:
    discover_files: Recursive walk, stable sorted order
    is_eligible: Extension allow-list check
    load_text: UTF-8 read, or page text for PDFs (pypdf)
    build_records: FileRecord + DocumentRecord for a loaded file
"""

from __future__ import annotations

import mimetypes
import uuid
from datetime import datetime, timezone
from pathlib import Path

from docgraph_kg.errors import UnsupportedContentError
from docgraph_kg.types import DocumentRecord, FileRecord


def discover_files(root: Path) -> list[Path]:
    """
    Collect every regular file under root, recursively.

    The order is sorted so progress fractions are stable within a run.
    """
    return sorted(p for p in root.rglob("*") if p.is_file())


def file_extension(path: Path) -> str:
    """Lowercase extension without the dot ("" when there is none)."""
    return path.suffix.lower().lstrip(".")


def is_eligible(path: Path, allowed_extensions: tuple[str, ...]) -> bool:
    return file_extension(path) in allowed_extensions


def load_text(path: Path) -> str:
    """
    Read a file as text.

    PDFs are converted page by page with pypdf, pages joined by a blank
    line so the paragraph chunker sees page boundaries.

    Raises:
        UnsupportedContentError: Non-UTF-8 bytes or unreadable PDF
    """
    if file_extension(path) == "pdf":
        return _load_pdf_text(path)

    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise UnsupportedContentError(f"{path} is not valid UTF-8: {e}") from e
    except OSError as e:
        raise UnsupportedContentError(f"Cannot read {path}: {e}") from e


def _load_pdf_text(path: Path) -> str:
    from pypdf import PdfReader
    from pypdf.errors import PdfReadError

    try:
        reader = PdfReader(path)
        pages = [page.extract_text() or "" for page in reader.pages]
    except (PdfReadError, OSError, ValueError) as e:
        raise UnsupportedContentError(f"PDF text extraction failed for {path}: {e}") from e

    return "\n\n".join(text for text in pages if text.strip())


def build_records(path: Path, *, language: str) -> tuple[FileRecord, DocumentRecord]:
    """
    Build the in-memory File and Document records for a file.

    The FileRecord id is the path and the DocumentRecord id is derived
    from it, so re-ingesting a file overwrites both instead of adding nodes.
    """
    stat = path.stat()
    path_str = str(path)
    mime_type, _ = mimetypes.guess_type(path_str)

    file_record = FileRecord(
        id=path_str,
        path=path_str,
        filename=path.name,
        size_bytes=stat.st_size,
        modified_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).isoformat(),
        mime_type=mime_type,
    )
    document = DocumentRecord(
        id=document_id(path_str),
        title=path.name,
        doc_type="file",
        language=language,
        source=file_record.id,
    )
    return file_record, document


def document_id(file_id: str) -> str:
    """Stable document id for a file path."""
    return str(uuid.uuid5(uuid.NAMESPACE_URL, f"docgraph:document:{file_id}"))


def chunk_id(doc_id: str, index: int) -> str:
    """Stable chunk id for a chunk position within a document."""
    return str(uuid.uuid5(uuid.NAMESPACE_URL, f"docgraph:chunk:{doc_id}:{index}"))
