"""
Graph Storage

Property-graph storage for files, documents, chunks and extracted knowledge.

Modules:
    base: Abstract GraphStore interface
    neo4j/: Neo4j implementation (async driver, vector index)

Graph Layout:
    (:File)-[:HAS_DOCUMENT]->(:Document)-[:HAS_CHUNK]->(:Chunk)
    (:Chunk)-[:NEXT_CHUNK]->(:Chunk)
    (:Chunk)-[:MENTIONS]->(:Entity)-[:RELATED_TO {type}]->(:Entity)
    (:Query)-[:MATCHED_CHUNK {score}]->(:Chunk)

Design Principles:
    - One transaction per ingested file
    - Every write is a MERGE keyed by a stable id (idempotent re-ingestion)
    - Cosine vector index over chunk embeddings
"""

from docgraph_kg.storage.base import GraphStore

__all__ = ["GraphStore"]
