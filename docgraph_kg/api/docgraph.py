"""
DocGraph - Primary Entry Point

The DocGraph class connects to a Neo4j database and provides methods for
directory ingestion, question answering and browsing the extracted
knowledge.

Example:
    >>> graph = DocGraph()
    >>> summary = await graph.run_ingestion("./docs")
    >>> print(summary)
    >>> result = await graph.query("Who maintains the parser?")
    >>> print(result.answer)

    # As an async context manager
    >>> async with DocGraph(KGConfig.from_file("docgraph.toml")) as graph:
    ...     print(await graph.entities())
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any
from urllib.parse import urlparse

from docgraph_kg.errors import DocGraphError
from docgraph_kg.status import StatusTracker

if TYPE_CHECKING:
    from docgraph_kg.config.settings import KGConfig
    from docgraph_kg.ingestion import IngestionOrchestrator
    from docgraph_kg.providers.base import EmbeddingProvider, LLMProvider
    from docgraph_kg.query import RetrievalEngine
    from docgraph_kg.storage.base import GraphStore
    from docgraph_kg.types import AnswerResult, EntityInfo, GraphSnapshot, IngestionSummary

logger = logging.getLogger(__name__)

NEO4J_BROWSER_PORT = 7474


class DocGraph:
    """
    Document knowledge graph backed by Neo4j.

    Args:
        config: Optional configuration. Uses defaults + environment if not provided.
        store: Graph store to use instead of building a Neo4jGraphStore.
        llm: LLM provider to use instead of the configured one.
        embeddings: Embedding provider to use instead of the configured one.
        status: Status tracker shared with other callers (one is created if None).
    """

    def __init__(
        self,
        config: "KGConfig | None" = None,
        *,
        store: "GraphStore | None" = None,
        llm: "LLMProvider | None" = None,
        embeddings: "EmbeddingProvider | None" = None,
        status: StatusTracker | None = None,
    ) -> None:
        """Initialize; nothing connects until first use."""
        # Lazy import to avoid circular imports
        if config is None:
            from docgraph_kg.config import KGConfig
            config = KGConfig()
        self._config = config

        self._store = store
        self._llm = llm
        self._embeddings = embeddings
        self._status = status or StatusTracker()

        # Lazy-initialized components
        self._orchestrator: "IngestionOrchestrator | None" = None
        self._engine: "RetrievalEngine | None" = None
        self._initialized = False

    async def _ensure_initialized(self) -> None:
        """Lazy initialization of store and providers on first use."""
        if self._initialized:
            return

        if self._store is None:
            self._store = self._create_store()
        await self._store.initialize()

        if self._llm is None:
            self._llm = self._create_llm_provider()
        if self._embeddings is None:
            self._embeddings = self._create_embedding_provider()

        self._initialized = True

    def _create_store(self) -> "GraphStore":
        """Create the Neo4j graph store from config."""
        from docgraph_kg.storage.neo4j import Neo4jGraphStore

        return Neo4jGraphStore(
            self._config.neo4j_uri,
            self._config.neo4j_user,
            self._config.neo4j_password,
            database=self._config.neo4j_database,
            vector_index_name=self._config.vector_index_name,
            dimensions=self._config.embedding_dimensions,
        )

    def _create_llm_provider(self) -> "LLMProvider":
        """Create LLM provider based on config."""
        provider = self._config.llm_provider.lower()

        if provider == "openai":
            from docgraph_kg.providers.llm.openai import OpenAILLMProvider
            return OpenAILLMProvider(
                api_key=self._config.openai_api_key,
                model=self._config.llm_model,
            )
        elif provider == "gemini":
            raise NotImplementedError("Gemini provider not yet implemented")
        elif provider == "ollama":
            raise NotImplementedError("Ollama provider not yet implemented")
        else:
            raise ValueError(f"Unknown LLM provider: {provider}")

    def _create_embedding_provider(self) -> "EmbeddingProvider":
        """Create embedding provider based on config."""
        provider = self._config.embedding_provider.lower()

        if provider == "openai":
            from docgraph_kg.providers.embedding.openai import OpenAIEmbeddingProvider
            return OpenAIEmbeddingProvider(
                api_key=self._config.openai_api_key,
                model=self._config.embedding_model,
                dimensions=self._config.embedding_dimensions,
            )
        elif provider in ("gemini", "ollama"):
            raise NotImplementedError(f"{provider} embeddings not yet implemented")
        else:
            raise ValueError(f"Unknown embedding provider: {provider}")

    def _get_orchestrator(self) -> "IngestionOrchestrator":
        assert self._store is not None
        assert self._llm is not None
        assert self._embeddings is not None

        if self._orchestrator is None:
            from docgraph_kg.ingestion import IngestionOrchestrator

            self._orchestrator = IngestionOrchestrator(
                self._store,
                self._embeddings,
                self._llm,
                status=self._status,
                config=self._config,
            )
        return self._orchestrator

    def _get_engine(self) -> "RetrievalEngine":
        assert self._store is not None
        assert self._llm is not None
        assert self._embeddings is not None

        # Cache engine for reuse
        if self._engine is None:
            from docgraph_kg.query import RetrievalEngine

            self._engine = RetrievalEngine(
                self._store,
                self._embeddings,
                self._llm,
                self._config,
            )
        return self._engine

    # === Lifecycle ===

    async def __aenter__(self) -> "DocGraph":
        """Async context manager entry."""
        await self._ensure_initialized()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        """Release all resources."""
        if self._store is not None:
            await self._store.close()
        self._orchestrator = None
        self._engine = None
        self._initialized = False

    # === Properties ===

    @property
    def config(self) -> "KGConfig":
        """Current configuration."""
        return self._config

    @property
    def status(self) -> StatusTracker:
        """Process-wide ingestion status."""
        return self._status

    @property
    def browser_url(self) -> str:
        """Neo4j Browser URL derived from the Bolt URI (http, port 7474)."""
        host = urlparse(self._config.neo4j_uri).hostname or "localhost"
        return f"http://{host}:{NEO4J_BROWSER_PORT}"

    # === Setup ===

    async def init(self) -> None:
        """Create constraints and the vector index (idempotent)."""
        await self._ensure_initialized()

    async def health(self) -> dict[str, str]:
        """
        Check connectivity to the graph store.

        Returns:
            {"status": "ok", "browser_url": ...} or
            {"status": "error", "detail": ..., "browser_url": ...}
        """
        try:
            await self._ensure_initialized()
            assert self._store is not None
            reachable = await self._store.ping()
        except DocGraphError as e:
            logger.warning(f"Health check failed: {e}")
            return {"status": "error", "detail": str(e), "browser_url": self.browser_url}
        if not reachable:
            logger.warning("Health check failed: ping returned no result")
            return {
                "status": "error",
                "detail": "Ping returned no result",
                "browser_url": self.browser_url,
            }
        return {"status": "ok", "browser_url": self.browser_url}

    # === Ingestion ===

    async def ingest(self, root: str | Path) -> "IngestionSummary":
        """
        Ingest a directory without taking the busy gate.

        Use run_ingestion() when other callers may start runs concurrently.
        """
        await self._ensure_initialized()
        return await self._get_orchestrator().ingest(root)

    async def run_ingestion(self, root: str | Path) -> "IngestionSummary":
        """
        Busy-gated ingestion run.

        Marks the status busy, ingests, then releases it with a completion
        or failure message and progress reset to 0. The gate is released
        even when the run is cancelled.

        Raises:
            IngestionBusyError: If another run is in progress
            InvalidInputError: If root is not a directory
        """
        self._status.try_acquire("Starting indexing...")
        message = "Indexing failed: cancelled"
        try:
            summary = await self.ingest(root)
            message = f"Indexing complete! {summary}"
            return summary
        except Exception as e:
            message = f"Indexing failed: {e}"
            raise
        finally:
            self._status.release(message)

    # === Query ===

    async def query(self, question: str, *, top_k: int | None = None) -> "AnswerResult":
        """
        Answer a question from the ingested documents.

        Args:
            question: Natural language question
            top_k: Chunks to retrieve (config default if None)

        Returns:
            AnswerResult with answer text and key entities

        Raises:
            RetrievalError: If embedding, search or completion fails
        """
        await self._ensure_initialized()
        return await self._get_engine().answer(question, top_k=top_k)

    # === Browsing ===

    async def entities(self) -> list["EntityInfo"]:
        """All entities ordered by id."""
        await self._ensure_initialized()
        assert self._store is not None
        return await self._store.list_entities()

    async def graph(self, limit: int = 50) -> "GraphSnapshot":
        """Sample of entity relations as nodes and edges."""
        await self._ensure_initialized()
        assert self._store is not None
        return await self._store.graph_snapshot(limit=limit)
