"""
Ingestion Orchestrator

Walks a directory and turns each eligible file into graph records.

Per file, strictly one file at a time:
    1. Eligibility by extension (others are skipped, not errors)
    2. Load text (UTF-8 or PDF page text); unreadable files are skipped
    3. Build File + Document records in memory
    4. Chunk; no chunks means nothing to ingest (skipped)
    5. Embed all chunks in one call; count mismatch fails the file
    6. Extract entities/relations chunk by chunk (malformed output -> empty)
    7. Reconcile and write everything in one graph transaction

A failing file is logged, counted as skipped and reported in the status
message. It never aborts the run.

Example:
    >>> orchestrator = IngestionOrchestrator(store, embeddings, llm, config=config)
    >>> summary = await orchestrator.ingest("./docs")
    >>> print(summary)
    Summary: 3 files scanned, 2 ingested, 1 skipped. 7 chunks, 12 entities and 5 relations created.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from docgraph_kg.config import KGConfig
from docgraph_kg.errors import (
    ExtractionMismatchError,
    InvalidInputError,
    UnsupportedContentError,
)
from docgraph_kg.ingestion.chunking import split_paragraphs
from docgraph_kg.ingestion.extraction import extract_from_chunk
from docgraph_kg.ingestion.loading import (
    build_records,
    chunk_id,
    discover_files,
    file_extension,
    is_eligible,
    load_text,
)
from docgraph_kg.ingestion.reconciliation import reconcile
from docgraph_kg.status import StatusTracker
from docgraph_kg.types import ChunkRecord, ExtractionResult, FileGraph, IngestionSummary
from docgraph_kg.utils.token_count import count_text_tokens

if TYPE_CHECKING:
    from docgraph_kg.providers.base import EmbeddingProvider, LLMProvider
    from docgraph_kg.storage.base import GraphStore

logger = logging.getLogger(__name__)


@dataclass
class _FileOutcome:
    """Counts for one successfully written file."""

    chunks: int
    entities: int
    relations: int


class IngestionOrchestrator:
    """
    Runs directory ingestion against a graph store.

    Args:
        store: Graph store receiving one transaction per file
        embeddings: Embedding provider (one batch call per file)
        llm: LLM provider used for extraction
        status: Status tracker to report progress into
        config: Chunk size, extensions, language and timeout
    """

    def __init__(
        self,
        store: "GraphStore",
        embeddings: "EmbeddingProvider",
        llm: "LLMProvider",
        *,
        status: StatusTracker | None = None,
        config: KGConfig | None = None,
    ) -> None:
        self._store = store
        self._embeddings = embeddings
        self._llm = llm
        self._status = status or StatusTracker()
        self._config = config or KGConfig()

    @property
    def status(self) -> StatusTracker:
        return self._status

    async def ingest(self, root: str | Path) -> IngestionSummary:
        """
        Ingest every file under ``root``.

        Returns:
            IngestionSummary with files_scanned == files_ingested + files_skipped

        Raises:
            InvalidInputError: If root does not exist or is not a directory
        """
        root = Path(root)
        if not root.is_dir():
            raise InvalidInputError(f"Not a directory: {root}")

        files = discover_files(root)
        total = len(files)
        summary = IngestionSummary()
        start = time.perf_counter()

        logger.info(f"Ingesting {total} files from {root}")
        self._status.update(progress=0.0)

        for i, path in enumerate(files, start=1):
            summary.files_scanned += 1
            self._status.update(
                message=f"[{i}/{total}] Processing: {path.name}...",
                progress=i / total,
            )

            try:
                outcome = await self._ingest_file(path)
            except Exception as e:
                summary.files_skipped += 1
                logger.error(f"Failed to ingest {path}: {e}")
                self._status.update(message=f"ERROR in {path}: {e}")
                continue

            if outcome is None:
                summary.files_skipped += 1
                self._status.update(message=f"[{i}/{total}] Skipped: {path.name}")
                continue

            summary.files_ingested += 1
            summary.chunks_created += outcome.chunks
            summary.entities_created += outcome.entities
            summary.relations_created += outcome.relations

        elapsed = time.perf_counter() - start
        logger.info(f"{summary} ({elapsed:.1f}s)")
        return summary

    async def _ingest_file(self, path: Path) -> _FileOutcome | None:
        """
        Process and write one file.

        Returns:
            Counts for the file, or None if it was soft-skipped

        Raises:
            ExtractionMismatchError: Embedding count differs from chunk count
            GraphWriteError: The file's transaction failed
            asyncio.TimeoutError: A model call exceeded the timeout
        """
        config = self._config

        if not is_eligible(path, config.allowed_extensions):
            logger.info(f"Skipping {path}: unsupported extension '{file_extension(path)}'")
            return None

        try:
            text = load_text(path)
        except UnsupportedContentError as e:
            logger.warning(f"Skipping {path}: {e}")
            return None

        file_record, document = build_records(path, language=config.document_language)

        segments = split_paragraphs(text, config.chunk_max_chars)
        if not segments:
            logger.warning(f"Skipping {path}: no text to ingest")
            return None

        embeddings = await asyncio.wait_for(
            self._embeddings.embed(segments),
            timeout=config.request_timeout_seconds,
        )
        if len(embeddings) != len(segments):
            raise ExtractionMismatchError(
                f"Embedding count mismatch for {path}: "
                f"got {len(embeddings)} embeddings for {len(segments)} chunks"
            )

        chunks = [
            ChunkRecord(
                id=chunk_id(document.id, index),
                document_id=document.id,
                index=index,
                text=segment,
                embedding=list(vector),
                token_count=count_text_tokens(segment, config.embedding_model),
            )
            for index, (segment, vector) in enumerate(zip(segments, embeddings))
        ]

        extractions: list[tuple[str, ExtractionResult]] = []
        for j, chunk in enumerate(chunks, start=1):
            self._status.update(
                message=f"File '{path.name}': extracting knowledge from chunk {j}/{len(chunks)}..."
            )
            result = await extract_from_chunk(
                chunk.text,
                self._llm,
                timeout=config.request_timeout_seconds,
            )
            extractions.append((chunk.id, result))

        knowledge = reconcile(extractions)
        graph = FileGraph(file=file_record, document=document, chunks=chunks, knowledge=knowledge)
        await self._store.write_file_graph(graph)

        logger.info(
            f"Ingested {path}: {len(chunks)} chunks, "
            f"{len(knowledge.entities)} entities, {len(knowledge.relations)} relations"
        )
        return _FileOutcome(
            chunks=len(chunks),
            entities=len(knowledge.entities),
            relations=len(knowledge.relations),
        )
