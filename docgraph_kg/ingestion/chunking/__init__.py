"""
Document Chunking

Splits loaded document text into paragraph-aligned chunks, the unit of
embedding and retrieval.

Modules:
    paragraphs: Greedy paragraph packing under a soft character bound
"""

from docgraph_kg.ingestion.chunking.paragraphs import split_paragraphs

__all__ = ["split_paragraphs"]
