"""Tests for Neo4jGraphStore read parsing and error wrapping."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from neo4j.exceptions import ServiceUnavailable

from docgraph_kg.errors import GraphReadError, GraphWriteError
from docgraph_kg.storage.neo4j import queries
from docgraph_kg.storage.neo4j.store import Neo4jGraphStore, snapshot_from_rows
from docgraph_kg.types import ChunkRecord, DocumentRecord, FileGraph, FileRecord


@pytest.fixture
def store() -> Neo4jGraphStore:
    return Neo4jGraphStore(
        "bolt://localhost:7687",
        "neo4j",
        "secret",
        vector_index_name="chunkEmbeddingIndex",
        dimensions=8,
    )


@pytest.fixture
def unreachable_driver() -> MagicMock:
    """Driver whose sessions fail as if the server were down."""
    driver = MagicMock()
    driver.session.side_effect = ServiceUnavailable("connection refused")
    driver.close = AsyncMock()
    return driver


class TestSnapshotFromRows:
    """Test graph snapshot assembly."""

    def test_nodes_unique(self):
        """A node shared by several edges appears once."""
        rows = [
            {"source": "Ada", "source_label": "Person", "target": "Engine",
             "target_label": "Technology", "predicate": "DESIGNED"},
            {"source": "Ada", "source_label": "Person", "target": "Babbage",
             "target_label": "Person", "predicate": "WORKED_WITH"},
        ]

        snapshot = snapshot_from_rows(rows)

        assert [n.id for n in snapshot.nodes] == ["Ada", "Engine", "Babbage"]
        assert [e.predicate for e in snapshot.edges] == ["DESIGNED", "WORKED_WITH"]

    def test_node_group_is_label(self):
        """Node display label is the id; the category goes into group."""
        rows = [{"source": "Ada", "source_label": "Person", "target": "Engine",
                 "target_label": None, "predicate": "DESIGNED"}]

        nodes = {n.id: n for n in snapshot_from_rows(rows).nodes}

        assert nodes["Ada"].label == "Ada"
        assert nodes["Ada"].group == "Person"
        assert nodes["Engine"].group is None

    def test_empty(self):
        """No relations gives an empty snapshot."""
        snapshot = snapshot_from_rows([])
        assert snapshot.nodes == []
        assert snapshot.edges == []


class TestReads:
    """Test row parsing for the read operations."""

    @pytest.mark.asyncio
    async def test_expand_entities_empty_ids(self, store):
        """No chunk ids means no query and an empty context."""
        with patch.object(Neo4jGraphStore, "_read") as read:
            context = await store.expand_entities([])

        read.assert_not_called()
        assert context.entities == []
        assert context.relations == []

    @pytest.mark.asyncio
    async def test_expand_entities_rows(self, store):
        """Entities are sorted and relations deduplicated."""
        rows = [
            {"entity": "Y", "predicate": None, "target": None},
            {"entity": "X", "predicate": "LINKS", "target": "Y"},
            {"entity": "X", "predicate": "LINKS", "target": "Y"},
            {"entity": "Y", "predicate": "LINKS", "target": "X"},
        ]
        with patch.object(Neo4jGraphStore, "_read", AsyncMock(return_value=rows)) as read:
            context = await store.expand_entities(["c1", "c2"])

        assert read.call_args.args[0] == queries.EXPAND_ENTITIES
        assert read.call_args.kwargs["chunk_ids"] == ["c1", "c2"]
        assert context.entities == ["X", "Y"]
        assert context.relations == [("X", "LINKS", "Y"), ("Y", "LINKS", "X")]

    @pytest.mark.asyncio
    async def test_search_chunks(self, store):
        """Vector hits map to RetrievedChunk with the configured index."""
        rows = [
            {"id": "c1", "text": "alpha", "score": 0.91},
            {"id": "c2", "text": None, "score": 0.52},
        ]
        with patch.object(Neo4jGraphStore, "_read", AsyncMock(return_value=rows)) as read:
            chunks = await store.search_chunks([0.1] * 8, 2)

        assert read.call_args.kwargs["index_name"] == "chunkEmbeddingIndex"
        assert read.call_args.kwargs["limit"] == 2
        assert [c.id for c in chunks] == ["c1", "c2"]
        assert chunks[1].text == ""

    @pytest.mark.asyncio
    async def test_list_entities(self, store):
        """Entities keep the query's id order."""
        rows = [{"id": "Ada", "label": "Person"}, {"id": "Rust", "label": None}]
        with patch.object(Neo4jGraphStore, "_read", AsyncMock(return_value=rows)):
            entities = await store.list_entities()

        assert [(e.id, e.label) for e in entities] == [("Ada", "Person"), ("Rust", None)]

    @pytest.mark.asyncio
    async def test_ping(self, store):
        """Ping is true when the server answers RETURN 1."""
        with patch.object(Neo4jGraphStore, "_read", AsyncMock(return_value=[{"ok": 1}])):
            assert await store.ping() is True


class TestSchema:
    """Test constraint and index creation."""

    @pytest.mark.asyncio
    async def test_initialize_creates_constraints_and_index(self, store):
        """Every label gets a constraint and a missing index is created."""
        with patch.object(Neo4jGraphStore, "_read", AsyncMock(return_value=[])), \
                patch.object(Neo4jGraphStore, "_write", AsyncMock()) as write:
            await store.initialize()
            await store.initialize()

        statements = [c.args[0] for c in write.call_args_list]
        assert len(statements) == len(queries.CONSTRAINT_LABELS) + 1
        assert statements[-1] == queries.create_vector_index("chunkEmbeddingIndex", 8)

    @pytest.mark.asyncio
    async def test_existing_index_not_recreated(self, store):
        """An index with the configured name is left alone."""
        existing = [{"name": "chunkEmbeddingIndex"}]
        with patch.object(Neo4jGraphStore, "_read", AsyncMock(return_value=existing)), \
                patch.object(Neo4jGraphStore, "_write", AsyncMock()) as write:
            await store.ensure_vector_index()

        write.assert_not_called()


class TestErrorWrapping:
    """Test driver failures surface as docgraph errors."""

    @pytest.mark.asyncio
    async def test_read_failure(self, store, unreachable_driver):
        """Read failures raise GraphReadError."""
        store._driver = unreachable_driver
        with pytest.raises(GraphReadError):
            await store.list_entities()

    @pytest.mark.asyncio
    async def test_write_failure(self, store, unreachable_driver):
        """A failed file transaction raises GraphWriteError."""
        store._driver = unreachable_driver
        graph = FileGraph(
            file=FileRecord(id="/a.txt", path="/a.txt", filename="a.txt",
                            size_bytes=1, modified_at="2026-01-01T00:00:00+00:00"),
            document=DocumentRecord(id="d1", title="a.txt", language="en", source="/a.txt"),
            chunks=[ChunkRecord(id="c1", document_id="d1", index=0, text="a")],
        )
        with pytest.raises(GraphWriteError, match="/a.txt"):
            await store.write_file_graph(graph)

    @pytest.mark.asyncio
    async def test_close_releases_driver(self, store, unreachable_driver):
        """Closing drops the driver."""
        store._driver = unreachable_driver
        await store.close()

        unreachable_driver.close.assert_awaited_once()
        assert store._driver is None
