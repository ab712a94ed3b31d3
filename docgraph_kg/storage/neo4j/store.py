"""
Neo4j Graph Store

GraphStore implementation on the official async Neo4j driver.

    - Writes: one managed write transaction per file (FileGraphWriter)
    - Vector search: db.index.vector.queryNodes over :Chunk(embedding)
    - Traversal: one-hop entity expansion around retrieved chunks

The driver is created lazily on first use. Managed transactions may be
retried by the driver on transient errors; every write is an idempotent
MERGE so a retry cannot duplicate anything.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from neo4j import AsyncGraphDatabase
from neo4j.exceptions import DriverError, Neo4jError

from docgraph_kg.errors import GraphReadError, GraphWriteError
from docgraph_kg.storage.base import GraphStore
from docgraph_kg.storage.neo4j import queries
from docgraph_kg.storage.neo4j.writer import FileGraphWriter
from docgraph_kg.types import (
    EntityInfo,
    GraphContext,
    GraphEdge,
    GraphNode,
    GraphSnapshot,
    RetrievedChunk,
)

if TYPE_CHECKING:
    from neo4j import AsyncDriver, AsyncManagedTransaction

    from docgraph_kg.types import FileGraph, QueryRecord

logger = logging.getLogger(__name__)


class Neo4jGraphStore(GraphStore):
    """
    Neo4j-backed graph store.

    Args:
        uri: Bolt URI, e.g. "bolt://localhost:7687"
        user: Database user
        password: Database password
        database: Database name for every session
        vector_index_name: Name of the chunk embedding index
        dimensions: Embedding vector size for the index
    """

    def __init__(
        self,
        uri: str,
        user: str,
        password: str | None,
        *,
        database: str = "neo4j",
        vector_index_name: str = "chunkEmbeddingIndex",
        dimensions: int = 1536,
    ) -> None:
        self._uri = uri
        self._auth = (user, password or "")
        self._database = database
        self._vector_index_name = vector_index_name
        self._dimensions = dimensions
        self._driver: AsyncDriver | None = None
        self._writer = FileGraphWriter()
        self._initialized = False

    @property
    def uri(self) -> str:
        return self._uri

    def _get_driver(self) -> "AsyncDriver":
        """Lazy driver initialization."""
        if self._driver is None:
            self._driver = AsyncGraphDatabase.driver(self._uri, auth=self._auth)
            logger.info(f"Neo4j driver created: {self._uri}")
        return self._driver

    async def initialize(self) -> None:
        if self._initialized:
            return
        await self.ensure_schema()
        await self.ensure_vector_index()
        self._initialized = True

    async def close(self) -> None:
        if self._driver is not None:
            await self._driver.close()
            self._driver = None
        self._initialized = False

    # -------------------------------------------------------------------------
    # Session helpers
    # -------------------------------------------------------------------------

    async def _read(self, query: str, **params: Any) -> list[dict[str, Any]]:
        """Run a read query in a managed transaction and return plain dicts."""

        async def _run(tx: "AsyncManagedTransaction") -> list[dict[str, Any]]:
            result = await tx.run(query, **params)
            return [record.data() async for record in result]

        try:
            async with self._get_driver().session(database=self._database) as session:
                return await session.execute_read(_run)
        except (Neo4jError, DriverError) as e:
            raise GraphReadError(f"Graph read failed: {e}") from e

    async def _write(self, query: str, **params: Any) -> None:
        async def _run(tx: "AsyncManagedTransaction") -> None:
            result = await tx.run(query, **params)
            await result.consume()

        try:
            async with self._get_driver().session(database=self._database) as session:
                await session.execute_write(_run)
        except (Neo4jError, DriverError) as e:
            raise GraphWriteError(f"Graph write failed: {e}") from e

    # -------------------------------------------------------------------------
    # Schema
    # -------------------------------------------------------------------------

    async def ensure_schema(self) -> None:
        for label in queries.CONSTRAINT_LABELS:
            await self._write(queries.unique_id_constraint(label))
        logger.info("Uniqueness constraints ensured")

    async def ensure_vector_index(self) -> None:
        existing = {row["name"] for row in await self._read(queries.SHOW_VECTOR_INDEXES)}
        if self._vector_index_name in existing:
            logger.debug(f"Vector index {self._vector_index_name} already exists")
            return

        await self._write(
            queries.create_vector_index(self._vector_index_name, self._dimensions)
        )
        logger.info(
            f"Created vector index {self._vector_index_name} "
            f"({self._dimensions} dims, cosine)"
        )

    async def ping(self) -> bool:
        rows = await self._read(queries.PING)
        return bool(rows) and rows[0].get("ok") == 1

    # -------------------------------------------------------------------------
    # Write Operations
    # -------------------------------------------------------------------------

    async def write_file_graph(self, graph: "FileGraph") -> None:
        try:
            async with self._get_driver().session(database=self._database) as session:
                await session.execute_write(self._writer.write, graph)
        except (Neo4jError, DriverError) as e:
            raise GraphWriteError(f"Transaction for {graph.file.id} failed: {e}") from e

    async def log_query(
        self,
        query: "QueryRecord",
        matches: list[RetrievedChunk],
    ) -> None:
        await self._write(
            queries.LOG_QUERY,
            id=query.id,
            question=query.question,
            created_at=query.created_at,
            matches=[{"chunk_id": m.id, "score": m.score} for m in matches],
        )

    # -------------------------------------------------------------------------
    # Read Operations
    # -------------------------------------------------------------------------

    async def search_chunks(
        self,
        embedding: list[float],
        limit: int,
    ) -> list[RetrievedChunk]:
        rows = await self._read(
            queries.SEARCH_CHUNKS,
            index_name=self._vector_index_name,
            limit=limit,
            embedding=embedding,
        )
        return [
            RetrievedChunk(id=row["id"], score=row["score"], text=row["text"] or "")
            for row in rows
        ]

    async def expand_entities(self, chunk_ids: list[str]) -> GraphContext:
        if not chunk_ids:
            return GraphContext()

        rows = await self._read(queries.EXPAND_ENTITIES, chunk_ids=chunk_ids)

        entities: set[str] = set()
        relations: dict[tuple[str, str, str], None] = {}
        for row in rows:
            entities.add(row["entity"])
            if row["target"] is not None and row["predicate"] is not None:
                relations[(row["entity"], row["predicate"], row["target"])] = None

        return GraphContext(entities=sorted(entities), relations=list(relations))

    async def list_entities(self) -> list[EntityInfo]:
        rows = await self._read(queries.LIST_ENTITIES)
        return [EntityInfo(id=row["id"], label=row["label"]) for row in rows]

    async def graph_snapshot(self, limit: int = 50) -> GraphSnapshot:
        rows = await self._read(queries.GRAPH_SNAPSHOT, limit=limit)
        return snapshot_from_rows(rows)


def snapshot_from_rows(rows: list[dict[str, Any]]) -> GraphSnapshot:
    """Build a snapshot with nodes unique by id, in first-seen order."""
    nodes: dict[str, GraphNode] = {}
    edges: list[GraphEdge] = []

    for row in rows:
        for key in ("source", "target"):
            node_id = row[key]
            if node_id not in nodes:
                nodes[node_id] = GraphNode(id=node_id, label=node_id, group=row[f"{key}_label"])
        edges.append(
            GraphEdge(source=row["source"], target=row["target"], predicate=row["predicate"])
        )

    return GraphSnapshot(nodes=list(nodes.values()), edges=edges)
