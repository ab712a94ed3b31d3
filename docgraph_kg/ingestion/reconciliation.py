"""
Per-File Knowledge Reconciliation

Merges the extraction results of every chunk in one file into a single
deduplicated set before the graph write.

    - Entities: id -> label map. A later label for the same id in the same
      file replaces the earlier one. Labels already stored in the graph are
      never changed (the graph write sets label on create only).
    - Relations: unique (subject, predicate, object) triples.
    - Mentions: unique (chunk id, entity id) pairs.

Names are cleaned and predicates normalized to UPPER_SNAKE_CASE so that
trivially different spellings collapse. Nothing here reads the graph.
"""

from __future__ import annotations

from collections.abc import Iterable

from docgraph_kg.types import ExtractionResult, ReconciledKnowledge
from docgraph_kg.utils.text import clean_entity_name, normalize_relationship_type


def reconcile(extractions: Iterable[tuple[str, ExtractionResult]]) -> ReconciledKnowledge:
    """
    Reconcile per-chunk extraction results for one file.

    Args:
        extractions: (chunk id, extraction result) pairs in chunk order

    Returns:
        ReconciledKnowledge ready for the graph write
    """
    entities: dict[str, str] = {}
    relations: dict[tuple[str, str, str], None] = {}
    mentions: dict[tuple[str, str], None] = {}

    for chunk_id, result in extractions:
        for entity in result.entities:
            entity_id = clean_entity_name(entity.id)
            if not entity_id:
                continue
            entities[entity_id] = entity.label.strip() or "Concept"
            mentions[(chunk_id, entity_id)] = None

        for relation in result.relations:
            subject = clean_entity_name(relation.subject)
            obj = clean_entity_name(relation.object)
            if not subject or not obj:
                continue
            predicate = normalize_relationship_type(relation.predicate)
            relations[(subject, predicate, obj)] = None

    return ReconciledKnowledge(
        entities=entities,
        relations=list(relations),
        mentions=list(mentions),
    )
