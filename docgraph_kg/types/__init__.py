"""
Type Definitions

Pydantic models for all data structures.

Storage Models (written to the graph store):
    - FileRecord, DocumentRecord, ChunkRecord - Source document content
    - EntityRecord - Entities extracted from documents
    - QueryRecord - Audit trail of questions
    - FileGraph - Per-file write payload

Extraction Models (used during ingestion pipeline):
    - ExtractedEntity, ExtractedRelation, ExtractionResult - Raw extraction output
    - ReconciledKnowledge - Per-file deduplicated knowledge

Result Models:
    - IngestionSummary, AnswerResult, StatusSnapshot - API response types
    - RetrievedChunk, GraphContext - Retrieval internals
    - EntityInfo, GraphNode, GraphEdge, GraphSnapshot - Browsing reads
"""

# Extraction Models
from docgraph_kg.types.extraction import (
    ExtractedEntity,
    ExtractedRelation,
    ExtractionResult,
    ReconciledKnowledge,
)

# Storage Models
from docgraph_kg.types.records import (
    ChunkRecord,
    DocumentRecord,
    EntityRecord,
    FileGraph,
    FileRecord,
    QueryRecord,
)

# Result Models
from docgraph_kg.types.results import (
    AnswerResult,
    EntityInfo,
    GraphContext,
    GraphEdge,
    GraphNode,
    GraphSnapshot,
    IngestionSummary,
    RetrievedChunk,
    StatusSnapshot,
)

__all__ = [
    # Storage Models
    "FileRecord",
    "DocumentRecord",
    "ChunkRecord",
    "EntityRecord",
    "QueryRecord",
    "FileGraph",
    # Extraction Models
    "ExtractedEntity",
    "ExtractedRelation",
    "ExtractionResult",
    "ReconciledKnowledge",
    # Result Models
    "IngestionSummary",
    "AnswerResult",
    "StatusSnapshot",
    "RetrievedChunk",
    "GraphContext",
    "EntityInfo",
    "GraphNode",
    "GraphEdge",
    "GraphSnapshot",
]
