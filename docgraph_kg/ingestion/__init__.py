"""
Ingestion Pipeline

Directory-to-graph processing, one file and one transaction at a time.

Phases (per file):
    Loading: extension allow-list, UTF-8 / PDF text, File + Document records
    Chunking: paragraph-aligned segments under a soft size bound
    Embedding: one batch call per file
    Extraction: per-chunk LLM JSON extraction with empty fallback
    Reconciliation: per-file dedup of entities, relations and mentions
    Write: ordered MERGE statements in one graph transaction

Modules:
    orchestrator: IngestionOrchestrator.ingest(root)
    loading: File discovery and text loading
    chunking/: Paragraph chunker
    extraction/: LLM-based entity/relation extraction
    reconciliation: Per-file knowledge dedup
"""

from docgraph_kg.ingestion.orchestrator import IngestionOrchestrator
from docgraph_kg.ingestion.reconciliation import reconcile

__all__ = ["IngestionOrchestrator", "reconcile"]
