"""
LLM-Based Extraction

Single-pass extraction of entities and relations from chunks.

Modules:
    extractor: Prompt and structured-output LLM call

Entity Labels:
    - Person
    - Organization
    - Concept
    - Technology

Malformed model output is replaced by an empty result for that chunk.
"""

from docgraph_kg.ingestion.extraction.extractor import extract_from_chunk

__all__ = ["extract_from_chunk"]
