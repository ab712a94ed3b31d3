"""
Graph-Augmented Retrieval Engine

Answers a question from vector-retrieved chunks plus the entity graph
around them.

Phases (sequential for one question):
    1. Embed: question -> vector
    2. Search: top-k chunks from the vector index (none -> fixed answer)
    3. Expand: entities mentioned by those chunks, relations among exactly them
    4. Log: Query node + scored MATCHED_CHUNK edges (audit only)
    5. Complete: LLM answer from question + composed context

Embedding, search, expansion and completion failures raise RetrievalError
and no partial answer is returned. A failed audit write is logged and
ignored.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from docgraph_kg.config import KGConfig
from docgraph_kg.errors import GraphReadError, GraphWriteError, RetrievalError
from docgraph_kg.query.context_builder import ContextBuilder
from docgraph_kg.query.synthesizer import NO_INFORMATION_ANSWER, Synthesizer
from docgraph_kg.types import AnswerResult, QueryRecord, RetrievedChunk

if TYPE_CHECKING:
    from docgraph_kg.providers.base import EmbeddingProvider, LLMProvider
    from docgraph_kg.storage.base import GraphStore

logger = logging.getLogger(__name__)


def _elapsed_ms(start: int) -> int:
    return (time.perf_counter_ns() - start) // 1_000_000


class RetrievalEngine:
    """
    Retrieval engine over a graph store.

    Args:
        store: Graph store with vector index and traversal
        embeddings: Embedding provider for the question
        llm: LLM provider for the answer
        config: top-k default and per-call timeout
    """

    def __init__(
        self,
        store: "GraphStore",
        embeddings: "EmbeddingProvider",
        llm: "LLMProvider",
        config: KGConfig | None = None,
    ) -> None:
        self.store = store
        self.embeddings = embeddings
        self.config = config or KGConfig()

        self.context_builder = ContextBuilder()
        self.synthesizer = Synthesizer(llm, timeout=self.config.request_timeout_seconds)

    async def answer(self, question: str, top_k: int | None = None) -> AnswerResult:
        """
        Answer a question.

        Args:
            question: Natural-language question
            top_k: Chunks to retrieve (config default if None)

        Returns:
            AnswerResult with the completion text and the key entities

        Raises:
            RetrievalError: If embedding, search, expansion or completion fails
        """
        limit = top_k if top_k is not None else self.config.query_top_k
        timing: dict[str, int] = {}

        # Phase 1: Embed
        start = time.perf_counter_ns()
        try:
            embedding = await asyncio.wait_for(
                self.embeddings.embed_single(question),
                timeout=self.config.request_timeout_seconds,
            )
        except Exception as e:
            raise RetrievalError(f"Embedding the question failed: {e}") from e
        timing["embed"] = _elapsed_ms(start)
        logger.info(f"Embed: {timing['embed']}ms")

        # Phase 2: Vector search
        start = time.perf_counter_ns()
        try:
            chunks = await self.store.search_chunks(embedding, limit)
        except GraphReadError as e:
            raise RetrievalError(f"Vector search failed: {e}") from e
        timing["search"] = _elapsed_ms(start)
        logger.info(f"Search: {len(chunks)} chunks, {timing['search']}ms")

        if not chunks:
            return AnswerResult(answer=NO_INFORMATION_ANSWER, key_entities=[], timing=timing)

        # Phase 3: Graph expansion
        start = time.perf_counter_ns()
        try:
            graph = await self.store.expand_entities([chunk.id for chunk in chunks])
        except GraphReadError as e:
            raise RetrievalError(f"Graph expansion failed: {e}") from e
        timing["expand"] = _elapsed_ms(start)
        logger.info(
            f"Expansion: {len(graph.entities)} entities, "
            f"{len(graph.relations)} relations, {timing['expand']}ms"
        )

        context = self.context_builder.build(chunks, graph)

        # Phase 4: Audit log
        start = time.perf_counter_ns()
        await self._log_query(question, chunks)
        timing["log"] = _elapsed_ms(start)

        # Phase 5: Completion
        start = time.perf_counter_ns()
        try:
            answer = await self.synthesizer.synthesize(question, context)
        except Exception as e:
            raise RetrievalError(f"Answer generation failed: {e}") from e
        timing["complete"] = _elapsed_ms(start)
        logger.info(f"Completion: {timing['complete']}ms")

        return AnswerResult(answer=answer, key_entities=graph.entities, timing=timing)

    async def _log_query(self, question: str, chunks: list[RetrievedChunk]) -> None:
        record = QueryRecord(
            id=str(uuid.uuid4()),
            question=question,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        try:
            await self.store.log_query(record, chunks)
        except GraphWriteError as e:
            logger.warning(f"Query audit write failed, answering anyway: {e}")
