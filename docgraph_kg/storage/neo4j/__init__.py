"""
Neo4j Storage

Modules:
    queries: Cypher statements
    writer: Ordered per-file upsert inside one transaction
    store: Neo4jGraphStore (async driver, vector search, traversal)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from docgraph_kg.storage.neo4j.store import Neo4jGraphStore
    from docgraph_kg.storage.neo4j.writer import FileGraphWriter


def __getattr__(name: str):
    """Lazy import so the writer and queries load without the driver."""
    if name == "Neo4jGraphStore":
        from docgraph_kg.storage.neo4j.store import Neo4jGraphStore
        return Neo4jGraphStore
    if name == "FileGraphWriter":
        from docgraph_kg.storage.neo4j.writer import FileGraphWriter
        return FileGraphWriter
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["Neo4jGraphStore", "FileGraphWriter"]
