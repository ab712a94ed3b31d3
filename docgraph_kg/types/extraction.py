"""
Extraction Types

Structured output of the entity/relation extraction step and its
per-file reconciliation.

Extraction Models (validated from model JSON):
    - ExtractedEntity: {"id": ..., "label": ...}
    - ExtractedRelation: {"subject": ..., "predicate": ..., "object": ...}
    - ExtractionResult: entities + relations found in one chunk

Reconciliation Models:
    - ReconciledKnowledge: deduplicated entities, relations and mentions for one file
"""

from pydantic import BaseModel, Field


class ExtractedEntity(BaseModel):
    """An entity mentioned in a chunk."""

    id: str = Field(..., description="Entity name exactly as it should be stored")
    label: str = Field(
        ..., description="Category: Person, Organization, Concept or Technology"
    )


class ExtractedRelation(BaseModel):
    """A subject-predicate-object triple between two extracted entities."""

    subject: str = Field(..., description="Id of the subject entity")
    predicate: str = Field(..., description="Relation type in UPPER_CASE")
    object: str = Field(..., description="Id of the object entity")


class ExtractionResult(BaseModel):
    """
    Result of extracting knowledge from a single chunk.

    Empty when the model output could not be parsed.
    """

    entities: list[ExtractedEntity] = Field(
        default_factory=list, description="Entities mentioned in the chunk"
    )
    relations: list[ExtractedRelation] = Field(
        default_factory=list, description="Relations between the entities"
    )


class ReconciledKnowledge(BaseModel):
    """
    Knowledge extracted from all chunks of one file, deduplicated.

    Attributes:
        entities: entity id -> label (last label seen in the file wins)
        relations: unique (subject, predicate, object) triples, first-seen order
        mentions: unique (chunk id, entity id) pairs, first-seen order
    """

    entities: dict[str, str] = Field(default_factory=dict)
    relations: list[tuple[str, str, str]] = Field(default_factory=list)
    mentions: list[tuple[str, str]] = Field(default_factory=list)
