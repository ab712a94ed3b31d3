"""
Result Types

Types returned by ingestion, retrieval and the browsing reads.

API Result Models:
    - IngestionSummary: Aggregate counts for one ingestion run
    - AnswerResult: Answer text plus key entities
    - StatusSnapshot: Point-in-time copy of the ingestion status

Store Read Models:
    - RetrievedChunk: One vector search hit
    - GraphContext: Entities and relations around retrieved chunks
    - EntityInfo, GraphNode, GraphEdge, GraphSnapshot: Browsing reads
"""

from pydantic import BaseModel, Field

# -----------------------------------------------------------------------------
# API Result Models
# -----------------------------------------------------------------------------


class IngestionSummary(BaseModel):
    """
    Result of one ingestion run. Not persisted.

    Invariant: files_scanned == files_ingested + files_skipped.
    """

    files_scanned: int = 0
    files_ingested: int = 0
    files_skipped: int = 0
    chunks_created: int = 0
    entities_created: int = 0
    relations_created: int = 0

    def __str__(self) -> str:
        return (
            f"Summary: {self.files_scanned} files scanned, "
            f"{self.files_ingested} ingested, {self.files_skipped} skipped. "
            f"{self.chunks_created} chunks, {self.entities_created} entities "
            f"and {self.relations_created} relations created."
        )


class AnswerResult(BaseModel):
    """
    Answer to a question.

    Attributes:
        answer: Completion text, returned verbatim
        key_entities: Entities mentioned by the retrieved chunks
        timing: Milliseconds per phase (embed, search, expand, log, complete)
    """

    answer: str
    key_entities: list[str] = Field(default_factory=list)
    timing: dict[str, int] = Field(default_factory=dict)

    @property
    def total_time_ms(self) -> int:
        """Total query time in milliseconds."""
        return sum(self.timing.values())


class StatusSnapshot(BaseModel):
    """Consistent copy of the process-wide ingestion status."""

    is_busy: bool = False
    message: str = "Idle"
    progress: float = Field(default=0.0, ge=0.0, le=1.0)


# -----------------------------------------------------------------------------
# Store Read Models
# -----------------------------------------------------------------------------


class RetrievedChunk(BaseModel):
    """A chunk returned by vector search, highest score first."""

    id: str
    score: float
    text: str


class GraphContext(BaseModel):
    """
    One-hop expansion around a set of retrieved chunks.

    Attributes:
        entities: Ids of entities mentioned by the chunks, sorted
        relations: (subject, predicate, object) edges with both ends in ``entities``
    """

    entities: list[str] = Field(default_factory=list)
    relations: list[tuple[str, str, str]] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.entities


class EntityInfo(BaseModel):
    id: str
    label: str | None = None


class GraphNode(BaseModel):
    """Node of a graph snapshot. ``group`` is the entity category."""

    id: str
    label: str
    group: str | None = None


class GraphEdge(BaseModel):
    source: str
    target: str
    predicate: str


class GraphSnapshot(BaseModel):
    """Sample of entity-to-entity relations with their endpoint nodes."""

    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)
