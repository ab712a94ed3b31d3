"""Tests for the directory ingestion orchestrator."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from langchain_core.exceptions import OutputParserException

from docgraph_kg.config.settings import KGConfig
from docgraph_kg.errors import GraphWriteError, InvalidInputError
from docgraph_kg.ingestion import IngestionOrchestrator
from docgraph_kg.status import StatusTracker
from docgraph_kg.types import ExtractionResult, FileGraph

EXTRACTION_REPLY = ExtractionResult.model_validate({
    "entities": [
        {"id": "Ada Lovelace", "label": "Person"},
        {"id": "Analytical Engine", "label": "Technology"},
    ],
    "relations": [
        {"subject": "Ada Lovelace", "predicate": "WROTE_ABOUT", "object": "Analytical Engine"},
    ],
})

FIFTY_WORDS = " ".join(f"word{i}" for i in range(50))


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def offline_token_count():
    """Keep tiktoken from fetching encodings during tests."""
    with patch(
        "docgraph_kg.ingestion.orchestrator.count_text_tokens",
        lambda text, model: len(text) // 4,
    ):
        yield


@pytest.fixture
def mock_llm() -> MagicMock:
    """Create a mock LLM provider."""
    llm = MagicMock()
    llm.generate_structured = AsyncMock(return_value=EXTRACTION_REPLY)
    llm.model_name = "test-model"
    return llm


@pytest.fixture
def mock_embeddings() -> MagicMock:
    """Create a mock embedding provider returning one vector per text."""
    embeddings = MagicMock()
    embeddings.embed = AsyncMock(side_effect=lambda texts: [[0.1] * 8 for _ in texts])
    embeddings.dimensions = 8
    return embeddings


@pytest.fixture
def mock_store() -> MagicMock:
    """Create a mock graph store."""
    store = MagicMock()
    store.write_file_graph = AsyncMock()
    return store


@pytest.fixture
def config() -> KGConfig:
    return KGConfig(chunk_max_chars=1200, request_timeout_seconds=5.0)


@pytest.fixture
def orchestrator(mock_store, mock_embeddings, mock_llm, config) -> IngestionOrchestrator:
    return IngestionOrchestrator(
        mock_store,
        mock_embeddings,
        mock_llm,
        status=StatusTracker(),
        config=config,
    )


def _written_graphs(store: MagicMock) -> list[FileGraph]:
    return [c.args[0] for c in store.write_file_graph.call_args_list]


# -----------------------------------------------------------------------------
# Tests
# -----------------------------------------------------------------------------


class TestIngestSingleFile:
    """Test the happy path for one text file."""

    @pytest.mark.asyncio
    async def test_fifty_word_file(self, orchestrator, mock_store, tmp_path):
        """A short text file becomes one chunk, one document and its entities."""
        (tmp_path / "notes.txt").write_text(FIFTY_WORDS)

        summary = await orchestrator.ingest(tmp_path)

        assert summary.files_scanned == 1
        assert summary.files_ingested == 1
        assert summary.files_skipped == 0
        assert summary.chunks_created == 1
        assert summary.entities_created == 2
        assert summary.relations_created == 1

        [graph] = _written_graphs(mock_store)
        assert graph.file.filename == "notes.txt"
        assert graph.document.title == "notes.txt"
        assert len(graph.chunks) == 1
        assert graph.chunks[0].text == FIFTY_WORDS
        assert graph.chunks[0].document_id == graph.document.id

    @pytest.mark.asyncio
    async def test_chunk_records(self, orchestrator, mock_store, tmp_path):
        """Chunks carry index order, embeddings and token counts."""
        (tmp_path / "long.md").write_text("\n\n".join(["x" * 800, "y" * 800, "z" * 800]))

        summary = await orchestrator.ingest(tmp_path)

        [graph] = _written_graphs(mock_store)
        assert summary.chunks_created == 3
        assert [c.index for c in graph.chunks] == [0, 1, 2]
        assert all(len(c.embedding) == 8 for c in graph.chunks)
        assert graph.chunks[0].token_count == 200

    @pytest.mark.asyncio
    async def test_mentions_per_chunk(self, orchestrator, mock_store, tmp_path):
        """Each chunk mentions the entities extracted from it."""
        (tmp_path / "two.txt").write_text("a" * 1000 + "\n\n" + "b" * 1000)

        await orchestrator.ingest(tmp_path)

        [graph] = _written_graphs(mock_store)
        chunk_ids = {c.id for c in graph.chunks}
        assert {chunk for chunk, _ in graph.knowledge.mentions} == chunk_ids
        assert len(graph.knowledge.mentions) == 4

    @pytest.mark.asyncio
    async def test_reingest_same_ids(self, orchestrator, mock_store, tmp_path):
        """Re-ingesting an unchanged file writes the same node ids."""
        (tmp_path / "notes.txt").write_text(FIFTY_WORDS)

        await orchestrator.ingest(tmp_path)
        await orchestrator.ingest(tmp_path)

        first, second = _written_graphs(mock_store)
        assert first.document.id == second.document.id
        assert [c.id for c in first.chunks] == [c.id for c in second.chunks]


class TestSkips:
    """Test files that are skipped rather than ingested."""

    @pytest.mark.asyncio
    async def test_unsupported_extension(self, orchestrator, mock_store, mock_embeddings, tmp_path):
        """A PNG is skipped with no embedding call and no write."""
        (tmp_path / "image.png").write_bytes(b"\x89PNG\r\n\x1a\n")

        summary = await orchestrator.ingest(tmp_path)

        assert summary.files_scanned == 1
        assert summary.files_ingested == 0
        assert summary.files_skipped == 1
        mock_embeddings.embed.assert_not_called()
        mock_store.write_file_graph.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_utf8(self, orchestrator, mock_store, tmp_path):
        """Non-UTF-8 text files are skipped."""
        (tmp_path / "latin1.txt").write_bytes(b"caf\xe9 \xff")

        summary = await orchestrator.ingest(tmp_path)

        assert summary.files_skipped == 1
        mock_store.write_file_graph.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_file(self, orchestrator, mock_store, tmp_path):
        """A file with no text produces no chunks and is skipped."""
        (tmp_path / "empty.txt").write_text("   \n\n ")

        summary = await orchestrator.ingest(tmp_path)

        assert summary.files_skipped == 1
        assert summary.chunks_created == 0
        mock_store.write_file_graph.assert_not_called()

    @pytest.mark.asyncio
    async def test_embedding_count_mismatch(self, orchestrator, mock_store, mock_embeddings, tmp_path):
        """Fewer embeddings than chunks fails the file without writing."""
        mock_embeddings.embed = AsyncMock(return_value=[])
        (tmp_path / "notes.txt").write_text(FIFTY_WORDS)

        summary = await orchestrator.ingest(tmp_path)

        assert summary.files_skipped == 1
        mock_store.write_file_graph.assert_not_called()
        assert orchestrator.status.snapshot().message.startswith("ERROR in ")

    @pytest.mark.asyncio
    async def test_write_failure_does_not_abort_run(self, orchestrator, mock_store, tmp_path):
        """A failed transaction skips that file and the run continues."""
        mock_store.write_file_graph = AsyncMock(
            side_effect=[GraphWriteError("commit failed"), None]
        )
        (tmp_path / "a.txt").write_text("first file")
        (tmp_path / "b.txt").write_text("second file")

        summary = await orchestrator.ingest(tmp_path)

        assert summary.files_scanned == 2
        assert summary.files_ingested == 1
        assert summary.files_skipped == 1
        assert mock_store.write_file_graph.await_count == 2

    @pytest.mark.asyncio
    async def test_write_failure_status_message(self, orchestrator, mock_store, tmp_path):
        """The status message names the failing file."""
        mock_store.write_file_graph = AsyncMock(side_effect=GraphWriteError("commit failed"))
        path = tmp_path / "a.txt"
        path.write_text("some text")

        await orchestrator.ingest(tmp_path)

        assert orchestrator.status.snapshot().message == f"ERROR in {path}: commit failed"


class TestExtractionHandling:
    """Test model output handling during ingestion."""

    @pytest.mark.asyncio
    async def test_malformed_extraction_still_ingests(self, orchestrator, mock_store, mock_llm, tmp_path):
        """Garbage model output gives a file with chunks but no entities."""
        mock_llm.generate_structured = AsyncMock(
            side_effect=OutputParserException("I cannot do that.")
        )
        (tmp_path / "notes.txt").write_text(FIFTY_WORDS)

        summary = await orchestrator.ingest(tmp_path)

        assert summary.files_ingested == 1
        assert summary.chunks_created == 1
        assert summary.entities_created == 0
        [graph] = _written_graphs(mock_store)
        assert graph.knowledge.entities == {}

    @pytest.mark.asyncio
    async def test_one_extraction_per_chunk(self, orchestrator, mock_llm, tmp_path):
        """The LLM is called once for every chunk."""
        (tmp_path / "long.txt").write_text("\n\n".join(["p" * 900] * 3))

        await orchestrator.ingest(tmp_path)

        assert mock_llm.generate_structured.await_count == 3


class TestRunBehaviour:
    """Test run-level behaviour."""

    @pytest.mark.asyncio
    async def test_invalid_root(self, orchestrator, tmp_path):
        """A missing directory raises InvalidInputError."""
        with pytest.raises(InvalidInputError):
            await orchestrator.ingest(tmp_path / "missing")

    @pytest.mark.asyncio
    async def test_file_as_root(self, orchestrator, tmp_path):
        """A file is not a valid root."""
        path = tmp_path / "a.txt"
        path.write_text("x")
        with pytest.raises(InvalidInputError):
            await orchestrator.ingest(path)

    @pytest.mark.asyncio
    async def test_empty_directory(self, orchestrator, tmp_path):
        """An empty directory gives an all-zero summary."""
        summary = await orchestrator.ingest(tmp_path)
        assert summary.files_scanned == 0
        assert str(summary).startswith("Summary: 0 files scanned")

    @pytest.mark.asyncio
    async def test_summary_counts_add_up(self, orchestrator, tmp_path):
        """files_scanned == files_ingested + files_skipped."""
        (tmp_path / "a.txt").write_text("alpha")
        (tmp_path / "b.png").write_bytes(b"\x89PNG")
        (tmp_path / "c.md").write_text("")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "d.rs").write_text("fn main() {}")

        summary = await orchestrator.ingest(tmp_path)

        assert summary.files_scanned == 4
        assert summary.files_ingested == 2
        assert summary.files_scanned == summary.files_ingested + summary.files_skipped

    @pytest.mark.asyncio
    async def test_progress_messages(self, orchestrator, tmp_path):
        """Status moves through per-file and per-chunk messages."""
        (tmp_path / "a.txt").write_text("alpha")
        (tmp_path / "b.png").write_bytes(b"\x89PNG")

        seen = []
        orchestrator.status.subscribe(lambda s: seen.append((s.message, s.progress)))

        await orchestrator.ingest(tmp_path)

        messages = [m for m, _ in seen]
        assert "[1/2] Processing: a.txt..." in messages
        assert "File 'a.txt': extracting knowledge from chunk 1/1..." in messages
        assert "[2/2] Processing: b.png..." in messages
        assert messages[-1] == "[2/2] Skipped: b.png"
        assert (("[1/2] Processing: a.txt...", 0.5)) in seen
        assert all(0.0 <= p <= 1.0 for _, p in seen)
