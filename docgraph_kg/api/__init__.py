"""
Public API Layer

This module contains the user-facing API class.

Modules:
    docgraph: DocGraph class - main entry point

Design Principles:
    - Single entry point (DocGraph) for ingestion, query and browsing
    - Async-first
    - Lazy initialization - don't connect until needed
    - Context manager support for resource cleanup
"""

from docgraph_kg.api.docgraph import DocGraph

__all__ = ["DocGraph"]
