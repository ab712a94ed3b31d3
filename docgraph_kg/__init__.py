"""
DocGraph - Document Knowledge Graph on Neo4j

Ingests a directory of documents into a Neo4j knowledge graph (files,
documents, chunks with embeddings, extracted entities and relations) and
answers questions with vector search plus graph expansion.

Example:
    >>> from docgraph_kg import DocGraph
    >>> graph = DocGraph()
    >>> summary = await graph.run_ingestion("./docs")
    >>> result = await graph.query("What does the billing service depend on?")
    >>> print(result.answer)

Main Classes:
    DocGraph: Primary entry point for all operations
    KGConfig: Configuration management
    StatusTracker: Live ingestion status
"""

__version__ = "0.1.0"

# Public API - lazy imports to avoid loading optional dependencies
def __getattr__(name: str):
    """Lazy import public API components."""

    if name == "DocGraph":
        from docgraph_kg.api.docgraph import DocGraph
        return DocGraph

    if name == "KGConfig":
        from docgraph_kg.config.settings import KGConfig
        return KGConfig

    if name == "StatusTracker":
        from docgraph_kg.status import StatusTracker
        return StatusTracker

    # Types
    if name in ("IngestionSummary", "AnswerResult", "EntityInfo", "GraphSnapshot"):
        from docgraph_kg import types
        return getattr(types, name)

    raise AttributeError(f"module 'docgraph_kg' has no attribute {name!r}")


__all__ = [
    # Main classes
    "DocGraph",
    "KGConfig",
    "StatusTracker",

    # Types
    "IngestionSummary",
    "AnswerResult",
    "EntityInfo",
    "GraphSnapshot",

    # Version
    "__version__",
]
