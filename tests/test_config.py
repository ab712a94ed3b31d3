"""Tests for KGConfig loading."""

import pytest

from docgraph_kg.config import KGConfig

ENV_VARS = [
    "NEO4J_URI",
    "NEO4J_USER",
    "NEO4J_PASSWORD",
    "NEO4J_DATABASE",
    "OPENAI_API_KEY",
    "DOCGRAPH_LLM_PROVIDER",
    "LLM_PROVIDER",
    "DOCGRAPH_LLM_MODEL",
    "LLM_CHAT_MODEL",
    "DOCGRAPH_EMBEDDING_PROVIDER",
    "DOCGRAPH_EMBEDDING_MODEL",
    "LLM_EMBEDDING_MODEL",
    "DOCGRAPH_EMBEDDING_DIMENSIONS",
    "DOCGRAPH_CHUNK_MAX_CHARS",
    "DOCGRAPH_DOCUMENT_LANGUAGE",
    "DOCGRAPH_QUERY_TOP_K",
    "DOCGRAPH_REQUEST_TIMEOUT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    """Test default values."""

    def test_defaults(self):
        """Defaults match a local Neo4j and OpenAI setup."""
        config = KGConfig()
        assert config.neo4j_uri == "bolt://localhost:7687"
        assert config.neo4j_database == "neo4j"
        assert config.vector_index_name == "chunkEmbeddingIndex"
        assert config.embedding_dimensions == 1536
        assert config.chunk_max_chars == 1200
        assert config.query_top_k == 5
        assert "pdf" in config.allowed_extensions
        assert "png" not in config.allowed_extensions

    def test_unknown_option(self):
        """Misspelled options are rejected."""
        with pytest.raises(ValueError, match="Unknown configuration option"):
            KGConfig(chunk_size=10)

    def test_extensions_normalized(self):
        """Extensions are lowercased and lose their dot."""
        config = KGConfig(allowed_extensions=(".TXT", "Md"))
        assert config.allowed_extensions == ("txt", "md")


class TestEnvironment:
    """Test environment overrides."""

    def test_neo4j_env(self, monkeypatch):
        """NEO4J_* variables configure the connection."""
        monkeypatch.setenv("NEO4J_URI", "bolt://graph:7687")
        monkeypatch.setenv("NEO4J_USER", "reader")
        monkeypatch.setenv("NEO4J_PASSWORD", "pw")

        config = KGConfig()

        assert config.neo4j_uri == "bolt://graph:7687"
        assert config.neo4j_user == "reader"
        assert config.neo4j_password == "pw"

    def test_model_fallback_names(self, monkeypatch):
        """LLM_CHAT_MODEL and LLM_EMBEDDING_MODEL are accepted."""
        monkeypatch.setenv("LLM_CHAT_MODEL", "gpt-4o")
        monkeypatch.setenv("LLM_EMBEDDING_MODEL", "text-embedding-3-large")

        config = KGConfig()

        assert config.llm_model == "gpt-4o"
        assert config.embedding_model == "text-embedding-3-large"

    def test_prefixed_name_wins(self, monkeypatch):
        """DOCGRAPH_LLM_MODEL takes precedence over LLM_CHAT_MODEL."""
        monkeypatch.setenv("LLM_CHAT_MODEL", "gpt-4o")
        monkeypatch.setenv("DOCGRAPH_LLM_MODEL", "gpt-4.1")
        assert KGConfig().llm_model == "gpt-4.1"

    def test_numeric_env(self, monkeypatch):
        """Numeric settings are parsed."""
        monkeypatch.setenv("DOCGRAPH_CHUNK_MAX_CHARS", "800")
        monkeypatch.setenv("DOCGRAPH_QUERY_TOP_K", "3")
        monkeypatch.setenv("DOCGRAPH_REQUEST_TIMEOUT", "12.5")

        config = KGConfig()

        assert config.chunk_max_chars == 800
        assert config.query_top_k == 3
        assert config.request_timeout_seconds == 12.5

    def test_explicit_beats_env(self, monkeypatch):
        """Keyword arguments override the environment."""
        monkeypatch.setenv("NEO4J_URI", "bolt://graph:7687")
        assert KGConfig(neo4j_uri="bolt://other:7687").neo4j_uri == "bolt://other:7687"


class TestConfigFile:
    """Test TOML loading and saving."""

    def test_from_file(self, tmp_path):
        """Sections flatten onto config attributes."""
        path = tmp_path / "docgraph.toml"
        path.write_text(
            '[neo4j]\n'
            'uri = "bolt://db:7687"\n'
            'vector_index_name = "docs"\n'
            '[llm]\n'
            'model = "gpt-4o"\n'
            '[api_keys]\n'
            'openai = "sk-test"\n'
            '[ingestion]\n'
            'chunk_max_chars = 600\n'
            'allowed_extensions = ["txt", "md"]\n'
            '[query]\n'
            'query_top_k = 9\n'
        )

        config = KGConfig.from_file(path)

        assert config.neo4j_uri == "bolt://db:7687"
        assert config.vector_index_name == "docs"
        assert config.llm_model == "gpt-4o"
        assert config.openai_api_key == "sk-test"
        assert config.chunk_max_chars == 600
        assert config.allowed_extensions == ("txt", "md")
        assert config.query_top_k == 9

    def test_missing_file(self, tmp_path):
        """A missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            KGConfig.from_file(tmp_path / "missing.toml")

    def test_round_trip_without_secrets(self, tmp_path):
        """Saved settings load back; secrets are never written."""
        path = tmp_path / "out.toml"
        original = KGConfig(
            neo4j_password="hunter2",
            openai_api_key="sk-secret",
            chunk_max_chars=900,
            request_timeout_seconds=30.0,
        )

        original.to_file(path)
        loaded = KGConfig.from_file(path)

        text = path.read_text()
        assert "hunter2" not in text
        assert "sk-secret" not in text
        assert loaded.chunk_max_chars == 900
        assert loaded.request_timeout_seconds == 30.0
        assert loaded.vector_index_name == original.vector_index_name
        assert loaded.neo4j_password is None

    def test_with_overrides(self):
        """with_overrides returns a modified copy."""
        base = KGConfig()
        changed = base.with_overrides(query_top_k=2)
        assert changed.query_top_k == 2
        assert base.query_top_k == 5

    def test_from_env(self, monkeypatch):
        """from_env reads only the environment."""
        monkeypatch.setenv("DOCGRAPH_DOCUMENT_LANGUAGE", "fr")
        assert KGConfig.from_env().document_language == "fr"


class TestEmbeddingDimensions:
    """Test vector size derivation from the embedding model."""

    def test_large_model_from_env(self, monkeypatch):
        """text-embedding-3-large in the environment sizes the index at 3072."""
        monkeypatch.setenv("DOCGRAPH_EMBEDDING_MODEL", "text-embedding-3-large")
        assert KGConfig().embedding_dimensions == 3072

    def test_large_model_from_kwargs(self):
        """The model keyword alone sets the dimensions."""
        config = KGConfig(embedding_model="text-embedding-3-large")
        assert config.embedding_dimensions == 3072

    def test_explicit_dimensions_win(self, monkeypatch):
        """Explicit dimensions are kept whatever the model."""
        monkeypatch.setenv("DOCGRAPH_EMBEDDING_MODEL", "text-embedding-3-large")
        assert KGConfig(embedding_dimensions=256).embedding_dimensions == 256

    def test_dimensions_env(self, monkeypatch):
        """DOCGRAPH_EMBEDDING_DIMENSIONS overrides the model size."""
        monkeypatch.setenv("DOCGRAPH_EMBEDDING_MODEL", "text-embedding-3-large")
        monkeypatch.setenv("DOCGRAPH_EMBEDDING_DIMENSIONS", "1024")
        assert KGConfig().embedding_dimensions == 1024

    def test_unknown_model_keeps_default(self):
        """Models without a known size keep 1536."""
        assert KGConfig(embedding_model="custom-embedder").embedding_dimensions == 1536

    def test_file_dimensions_win(self, tmp_path):
        """[embedding] dimensions in a file is explicit."""
        path = tmp_path / "docgraph.toml"
        path.write_text(
            '[embedding]\n'
            'model = "text-embedding-3-large"\n'
            'dimensions = 512\n'
        )
        assert KGConfig.from_file(path).embedding_dimensions == 512

    def test_override_model(self):
        """with_overrides re-derives the size for a new model."""
        changed = KGConfig().with_overrides(embedding_model="text-embedding-3-large")
        assert changed.embedding_dimensions == 3072
