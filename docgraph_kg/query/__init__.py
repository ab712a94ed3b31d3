"""
Graph-Augmented Retrieval

Question answering over chunk vectors plus the entity graph.

Modules:
    engine: RetrievalEngine orchestrator
    context_builder: Context assembly and relation canonicalization
    synthesizer: Answer generation

Pipeline Phases:
    1. Embed the question
    2. Vector search for the top-k chunks
    3. One-hop expansion to entities and relations among them
    4. Audit log of the question and its matches
    5. Synthesis from the composed context

Example:
    >>> from docgraph_kg.query import RetrievalEngine
    >>> engine = RetrievalEngine(store, embeddings, llm, config)
    >>> result = await engine.answer("Which team owns the billing service?")
    >>> print(result.answer, result.key_entities)
"""

from docgraph_kg.query.context_builder import ContextBuilder
from docgraph_kg.query.engine import RetrievalEngine
from docgraph_kg.query.synthesizer import NO_INFORMATION_ANSWER, Synthesizer

__all__ = [
    "RetrievalEngine",
    "ContextBuilder",
    "Synthesizer",
    "NO_INFORMATION_ANSWER",
]
