"""
Error Taxonomy

Exceptions raised by the ingestion pipeline and the retrieval engine.

Per-file errors (UnsupportedContentError, ExtractionMismatchError,
GraphWriteError) are caught by the orchestrator at the file boundary and
only show up in the summary counts and status message. RetrievalError
propagates to the caller of DocGraph.query(); store read failures
(GraphReadError) are wrapped in it by the retrieval engine.
"""


class DocGraphError(Exception):
    """Base class for all docgraph_kg exceptions."""


class InvalidInputError(DocGraphError, ValueError):
    """Raised when the ingestion root is missing or not a directory."""


class UnsupportedContentError(DocGraphError):
    """Raised when a file cannot be turned into text (extension, encoding, PDF)."""


class ExtractionMismatchError(DocGraphError):
    """Raised when the embedding count differs from the chunk count."""


class GraphWriteError(DocGraphError):
    """Raised when a graph transaction fails to run, commit or roll back."""


class GraphReadError(DocGraphError):
    """Raised when a graph read query (search, traversal, browsing) fails."""


class RetrievalError(DocGraphError):
    """Raised when embedding, vector search or completion fails for a question."""


class IngestionBusyError(DocGraphError):
    """Raised when an ingestion run is requested while another one is active."""
