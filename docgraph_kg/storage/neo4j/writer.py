"""
File Graph Writer

Writes one file's records inside an already-open transaction.

Write order (later steps MATCH nodes created by earlier ones):
    1. File - No dependencies
    2. Document - Linked from File
    3. Chunks - Linked from Document, chained with NEXT_CHUNK in index order
    4. Entities - Label set on create only
    5. Mentions - Chunk -> Entity
    6. Relations - Entity -> Entity, one edge per (subject, predicate, object)

Every statement is a MERGE keyed by id, so replaying the same FileGraph
leaves the graph unchanged.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from docgraph_kg.storage.neo4j import queries
from docgraph_kg.types import EntityRecord

if TYPE_CHECKING:
    from neo4j import AsyncManagedTransaction

    from docgraph_kg.types import FileGraph

logger = logging.getLogger(__name__)


class FileGraphWriter:
    """
    Runs the ordered upsert statements for a FileGraph.

    Usage:
        writer = FileGraphWriter()
        await session.execute_write(writer.write, graph)
    """

    async def write(self, tx: "AsyncManagedTransaction", graph: "FileGraph") -> None:
        """
        Write a file's records in dependency order.

        Raises:
            Exception: Whatever the driver raises; the caller's transaction
                rolls back and nothing from this file is committed.
        """
        steps_done: list[str] = []
        try:
            await self._write_file(tx, graph)
            steps_done.append("file")

            await self._write_document(tx, graph)
            steps_done.append("document")

            await self._write_chunks(tx, graph)
            steps_done.append("chunks")

            knowledge = graph.knowledge
            if knowledge.entities:
                await tx.run(
                    queries.MERGE_ENTITIES,
                    entities=[
                        EntityRecord(id=entity_id, label=label).model_dump()
                        for entity_id, label in knowledge.entities.items()
                    ],
                )
            steps_done.append("entities")

            if knowledge.mentions:
                await tx.run(
                    queries.MERGE_MENTIONS,
                    mentions=[
                        {"chunk_id": chunk_id, "entity_id": entity_id}
                        for chunk_id, entity_id in knowledge.mentions
                    ],
                )
            steps_done.append("mentions")

            if knowledge.relations:
                await tx.run(
                    queries.MERGE_RELATIONS,
                    relations=[
                        {"subject": s, "predicate": p, "object": o}
                        for s, p, o in knowledge.relations
                    ],
                )
            steps_done.append("relations")

        except Exception as e:
            logger.error(
                f"Graph write failed for {graph.file.id} after steps "
                f"{steps_done or ['none']}. Error: {e}"
            )
            raise

    async def _write_file(self, tx: "AsyncManagedTransaction", graph: "FileGraph") -> None:
        await tx.run(queries.MERGE_FILE, **graph.file.model_dump())

    async def _write_document(self, tx: "AsyncManagedTransaction", graph: "FileGraph") -> None:
        document = graph.document
        await tx.run(
            queries.MERGE_DOCUMENT,
            id=document.id,
            file_id=graph.file.id,
            title=document.title,
            doc_type=document.doc_type,
            language=document.language,
        )

    async def _write_chunks(self, tx: "AsyncManagedTransaction", graph: "FileGraph") -> None:
        """Upsert chunks in index order, linking each to its predecessor."""
        await tx.run(
            queries.PRUNE_STALE_CHUNKS,
            document_id=graph.document.id,
            chunk_count=len(graph.chunks),
        )

        previous_id: str | None = None
        for chunk in sorted(graph.chunks, key=lambda c: c.index):
            await tx.run(
                queries.MERGE_CHUNK,
                id=chunk.id,
                document_id=graph.document.id,
                index=chunk.index,
                text=chunk.text,
                embedding=chunk.embedding,
                token_count=chunk.token_count,
            )
            if previous_id is not None:
                await tx.run(queries.LINK_NEXT_CHUNK, previous_id=previous_id, id=chunk.id)
            previous_id = chunk.id
