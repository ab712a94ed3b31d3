"""
Abstract Graph Store Interface

Defines the contract the ingestion pipeline and the retrieval engine need
from a property-graph database.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from docgraph_kg.types import (
        EntityInfo,
        FileGraph,
        GraphContext,
        GraphSnapshot,
        QueryRecord,
        RetrievedChunk,
    )


class GraphStore(ABC):
    """
    Abstract interface for graph stores.

    Lifecycle:
        store = Neo4jGraphStore(uri, user, password)
        await store.initialize()
        # ... operations ...
        await store.close()

    Or using context manager:
        async with Neo4jGraphStore(uri, user, password) as store:
            await store.write_file_graph(graph)
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Connect and create constraints and the vector index."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close connections and release resources."""
        ...

    async def __aenter__(self) -> "GraphStore":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Schema
    # -------------------------------------------------------------------------

    @abstractmethod
    async def ensure_schema(self) -> None:
        """Create uniqueness constraints on node ids. Idempotent."""
        ...

    @abstractmethod
    async def ensure_vector_index(self) -> None:
        """Create the chunk embedding vector index if missing. Idempotent."""
        ...

    @abstractmethod
    async def ping(self) -> bool:
        """Round-trip a trivial query."""
        ...

    # -------------------------------------------------------------------------
    # Write Operations
    # -------------------------------------------------------------------------

    @abstractmethod
    async def write_file_graph(self, graph: "FileGraph") -> None:
        """
        Write everything for one file in a single transaction.

        Either the whole file is visible afterwards or none of it is.

        Raises:
            GraphWriteError: If the transaction fails or cannot commit
        """
        ...

    @abstractmethod
    async def log_query(
        self,
        query: "QueryRecord",
        matches: list["RetrievedChunk"],
    ) -> None:
        """Record a question and a scored edge to each matched chunk."""
        ...

    # -------------------------------------------------------------------------
    # Read Operations
    # -------------------------------------------------------------------------

    @abstractmethod
    async def search_chunks(
        self,
        embedding: list[float],
        limit: int,
    ) -> list["RetrievedChunk"]:
        """Top-k chunks by vector similarity, highest score first."""
        ...

    @abstractmethod
    async def expand_entities(self, chunk_ids: list[str]) -> "GraphContext":
        """
        Entities mentioned by the chunks and relations among exactly them.

        Relations with an endpoint outside the mentioned set are excluded.
        """
        ...

    @abstractmethod
    async def list_entities(self) -> list["EntityInfo"]:
        """All entities, ordered by id."""
        ...

    @abstractmethod
    async def graph_snapshot(self, limit: int = 50) -> "GraphSnapshot":
        """Up to ``limit`` entity-to-entity relations with their endpoints."""
        ...
