"""
KGConfig - Configuration Management

Sensible defaults with full override capability.

Example:
    >>> # Use defaults (reads from environment)
    >>> graph = DocGraph()

    >>> # Explicit configuration
    >>> config = KGConfig(
    ...     neo4j_uri="bolt://graph.internal:7687",
    ...     llm_model="gpt-4o",
    ... )
    >>> graph = DocGraph(config=config)

    >>> # From config file
    >>> config = KGConfig.from_file("./docgraph.toml")

Environment Variables:
    NEO4J_URI - Bolt URI of the graph database
    NEO4J_USER - Database user
    NEO4J_PASSWORD - Database password
    NEO4J_DATABASE - Database name
    DOCGRAPH_LLM_PROVIDER - LLM provider name (LLM_PROVIDER also accepted)
    DOCGRAPH_LLM_MODEL - Model for extraction/answers (LLM_CHAT_MODEL also accepted)
    DOCGRAPH_EMBEDDING_PROVIDER - Embedding provider name
    DOCGRAPH_EMBEDDING_MODEL - Embedding model (LLM_EMBEDDING_MODEL also accepted)
    DOCGRAPH_EMBEDDING_DIMENSIONS - Vector size (derived from the embedding model when unset)
    DOCGRAPH_CHUNK_MAX_CHARS - Maximum characters per chunk
    DOCGRAPH_DOCUMENT_LANGUAGE - Language tag stored on documents
    DOCGRAPH_QUERY_TOP_K - Chunks retrieved per question
    DOCGRAPH_REQUEST_TIMEOUT - Seconds allowed per model call
    OPENAI_API_KEY - OpenAI API key (standard name)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, cast

from docgraph_kg.providers.embedding.openai import MODEL_DIMENSIONS

# TOML support: tomllib is built-in for Python 3.11+, use tomli for 3.10
try:
    import tomllib

    def _load_toml(path: Path) -> dict[str, Any]:
        with open(path, "rb") as f:
            return cast(dict[str, Any], tomllib.load(f))

except ImportError:
    import tomli

    def _load_toml(path: Path) -> dict[str, Any]:
        with open(path, "rb") as f:
            return cast(dict[str, Any], tomli.load(f))


DEFAULT_EXTENSIONS: tuple[str, ...] = (
    "txt",
    "md",
    "rs",
    "toml",
    "log",
    "html",
    "css",
    "js",
    "pdf",
)


class KGConfig:
    """Configuration for DocGraph."""

    # === Graph Store ===

    neo4j_uri: str = "bolt://localhost:7687"
    """Bolt URI of the Neo4j server"""

    neo4j_user: str = "neo4j"
    neo4j_password: str | None = None

    neo4j_database: str = "neo4j"
    """Database name used for every session"""

    vector_index_name: str = "chunkEmbeddingIndex"
    """Name of the cosine vector index over :Chunk(embedding)"""

    # === LLM Configuration ===

    llm_provider: str = "openai"
    """LLM provider: only "openai" is implemented"""

    llm_model: str = "gpt-4o-mini"
    """Model for entity extraction and answer synthesis"""

    # === Embedding Configuration ===

    embedding_provider: str = "openai"
    embedding_model: str = "text-embedding-3-small"

    embedding_dimensions: int = 1536
    """Vector index dimensions; derived from embedding_model unless set explicitly"""

    # === API Keys ===

    openai_api_key: str | None = None

    # === Ingestion Configuration ===

    chunk_max_chars: int = 1200
    """Soft upper bound on chunk size; a longer paragraph stays whole"""

    allowed_extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    """File extensions (lowercase, no dot) eligible for ingestion"""

    document_language: str = "en"
    """Language tag written on every Document node"""

    # === Query Configuration ===

    query_top_k: int = 5
    """Chunks retrieved from the vector index per question"""

    request_timeout_seconds: float = 60.0
    """Timeout for each embedding, extraction and completion call"""

    def __init__(self, **kwargs: Any) -> None:
        """
        Initialize configuration.

        Args:
            **kwargs: Override any configuration option
        """
        # Load from environment first
        dimensions_set = self._load_from_env()

        # Apply explicit overrides
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
            else:
                raise ValueError(f"Unknown configuration option: {key}")

        if not dimensions_set and "embedding_dimensions" not in kwargs:
            self.embedding_dimensions = MODEL_DIMENSIONS.get(
                self.embedding_model, self.embedding_dimensions
            )

        self.allowed_extensions = tuple(
            ext.lower().lstrip(".") for ext in self.allowed_extensions
        )

    def _load_from_env(self) -> bool:
        """
        Load configuration from environment variables.

        Returns:
            True if the embedding dimensions were set explicitly
        """
        self.openai_api_key = os.getenv("OPENAI_API_KEY")

        if uri := os.getenv("NEO4J_URI"):
            self.neo4j_uri = uri
        if user := os.getenv("NEO4J_USER"):
            self.neo4j_user = user
        if password := os.getenv("NEO4J_PASSWORD"):
            self.neo4j_password = password
        if database := os.getenv("NEO4J_DATABASE"):
            self.neo4j_database = database

        if provider := os.getenv("DOCGRAPH_LLM_PROVIDER") or os.getenv("LLM_PROVIDER"):
            self.llm_provider = provider
        if model := os.getenv("DOCGRAPH_LLM_MODEL") or os.getenv("LLM_CHAT_MODEL"):
            self.llm_model = model
        if provider := os.getenv("DOCGRAPH_EMBEDDING_PROVIDER"):
            self.embedding_provider = provider
        if model := os.getenv("DOCGRAPH_EMBEDDING_MODEL") or os.getenv("LLM_EMBEDDING_MODEL"):
            self.embedding_model = model
        if dimensions := os.getenv("DOCGRAPH_EMBEDDING_DIMENSIONS"):
            self.embedding_dimensions = int(dimensions)

        if max_chars := os.getenv("DOCGRAPH_CHUNK_MAX_CHARS"):
            self.chunk_max_chars = int(max_chars)
        if language := os.getenv("DOCGRAPH_DOCUMENT_LANGUAGE"):
            self.document_language = language
        if top_k := os.getenv("DOCGRAPH_QUERY_TOP_K"):
            self.query_top_k = int(top_k)
        if timeout := os.getenv("DOCGRAPH_REQUEST_TIMEOUT"):
            self.request_timeout_seconds = float(timeout)

        return bool(dimensions)

    @classmethod
    def from_file(cls, path: str | Path) -> "KGConfig":
        """
        Load configuration from TOML file.

        Nested sections are flattened with a section prefix.

        Example TOML:
            [neo4j]
            uri = "bolt://localhost:7687"
            user = "neo4j"

            [llm]
            model = "gpt-4o-mini"

            [ingestion]
            chunk_max_chars = 1200

        Args:
            path: Path to TOML configuration file

        Returns:
            KGConfig instance with values from file

        Raises:
            FileNotFoundError: If config file doesn't exist
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        data = _load_toml(path)

        flat_config: dict[str, Any] = {}

        # Map section names to config key prefixes
        section_mapping = {
            "neo4j": "neo4j_",
            "llm": "llm_",
            "embedding": "embedding_",
            "api_keys": "",  # api_keys.openai -> openai_api_key
            "ingestion": "",
            "query": "",
        }

        for section, prefix in section_mapping.items():
            if section in data:
                for key, value in data[section].items():
                    if section == "api_keys":
                        flat_config[f"{key}_api_key"] = value
                    elif section == "neo4j" and key == "vector_index_name":
                        flat_config[key] = value
                    else:
                        flat_config[f"{prefix}{key}"] = value

        # Also support flat top-level keys
        for key, value in data.items():
            if key not in section_mapping and not isinstance(value, dict):
                flat_config[key] = value

        if "allowed_extensions" in flat_config:
            flat_config["allowed_extensions"] = tuple(flat_config["allowed_extensions"])

        return cls(**flat_config)

    @classmethod
    def from_env(cls) -> "KGConfig":
        """Load configuration from environment variables only."""
        return cls()

    def to_file(self, path: str | Path) -> None:
        """
        Save configuration to TOML file.

        The Neo4j password and API keys are never written.

        Args:
            path: Path to write TOML configuration file
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        sections: dict[str, dict[str, Any]] = {
            "neo4j": {
                "uri": self.neo4j_uri,
                "user": self.neo4j_user,
                "database": self.neo4j_database,
                "vector_index_name": self.vector_index_name,
            },
            "llm": {
                "provider": self.llm_provider,
                "model": self.llm_model,
            },
            "embedding": {
                "provider": self.embedding_provider,
                "model": self.embedding_model,
                "dimensions": self.embedding_dimensions,
            },
            "ingestion": {
                "chunk_max_chars": self.chunk_max_chars,
                "allowed_extensions": list(self.allowed_extensions),
                "document_language": self.document_language,
            },
            "query": {
                "query_top_k": self.query_top_k,
                "request_timeout_seconds": self.request_timeout_seconds,
            },
        }

        # Build TOML string manually (avoids extra dependency)
        lines = ["# DocGraph Configuration", ""]

        for section_name, section_values in sections.items():
            lines.append(f"[{section_name}]")
            for key, value in section_values.items():
                if isinstance(value, str):
                    lines.append(f'{key} = "{value}"')
                elif isinstance(value, bool):
                    lines.append(f"{key} = {str(value).lower()}")
                elif isinstance(value, (int, float)):
                    lines.append(f"{key} = {value}")
                elif isinstance(value, list):
                    items = ", ".join(f'"{v}"' for v in value)
                    lines.append(f"{key} = [{items}]")
            lines.append("")

        lines.extend([
            "# Secrets should be set via environment variables:",
            "# NEO4J_PASSWORD, OPENAI_API_KEY",
            "",
        ])

        path.write_text("\n".join(lines))

    def with_overrides(self, **kwargs: Any) -> "KGConfig":
        """Return new config with specified overrides."""
        new_config = KGConfig.__new__(KGConfig)
        for key in dir(self):
            if not key.startswith("_") and not callable(getattr(self, key)):
                setattr(new_config, key, getattr(self, key))
        for key, value in kwargs.items():
            setattr(new_config, key, value)
        if "embedding_model" in kwargs and "embedding_dimensions" not in kwargs:
            new_config.embedding_dimensions = MODEL_DIMENSIONS.get(
                new_config.embedding_model, new_config.embedding_dimensions
            )
        return new_config
