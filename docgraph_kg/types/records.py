"""
Graph Record Types

Nodes written to the graph store during ingestion and retrieval.

Storage Models:
    - FileRecord: A file on disk, keyed by its path
    - DocumentRecord: The parsed document owned by a file
    - ChunkRecord: A paragraph-aligned text segment with its embedding
    - EntityRecord: A graph-global entity, keyed by its surface form
    - QueryRecord: Audit trail of one question

Write Payload:
    - FileGraph: Everything written for one file in a single transaction
"""

from pydantic import BaseModel, Field

from docgraph_kg.types.extraction import ReconciledKnowledge


class FileRecord(BaseModel):
    """
    A file on disk.

    Attributes:
        id: Filesystem path (unique; re-ingestion overwrites)
        path: Filesystem path
        filename: Final path component
        size_bytes: File size in bytes
        modified_at: Last modification time (RFC 3339)
        mime_type: Guessed MIME type, if any
    """

    id: str
    path: str
    filename: str
    size_bytes: int
    modified_at: str
    mime_type: str | None = None


class DocumentRecord(BaseModel):
    """
    A parsed document. Exactly one per successfully loaded file.

    Attributes:
        id: Generated unique token
        title: Document title (the filename)
        doc_type: Document kind, always "file" for directory ingestion
        language: Language tag
        source: Id of the owning FileRecord
    """

    id: str
    title: str
    doc_type: str = "file"
    language: str
    source: str


class ChunkRecord(BaseModel):
    """
    A text segment of a document, unit of embedding and retrieval.

    Chunks of one document form a chain ordered by ``index``.
    """

    id: str
    document_id: str
    index: int
    text: str
    embedding: list[float] = Field(default_factory=list)
    token_count: int = 0


class EntityRecord(BaseModel):
    """A graph-global entity. ``id`` is the dedup key; ``label`` is fixed at creation."""

    id: str
    label: str


class QueryRecord(BaseModel):
    """One retrieval call, linked to the chunks it matched."""

    id: str
    question: str
    created_at: str


class FileGraph(BaseModel):
    """
    Complete write payload for one file.

    Written by the graph store in one transaction: file, document, chunk
    chain, entities, mentions, relations.
    """

    file: FileRecord
    document: DocumentRecord
    chunks: list[ChunkRecord]
    knowledge: ReconciledKnowledge = Field(default_factory=ReconciledKnowledge)
