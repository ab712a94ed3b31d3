"""
Cypher Statements

All statements sent to Neo4j, parameterized. Node ids are the merge keys.

Schema:
    (:File)-[:HAS_DOCUMENT]->(:Document)-[:HAS_CHUNK]->(:Chunk)
    (:Chunk)-[:NEXT_CHUNK]->(:Chunk)
    (:Chunk)-[:MENTIONS]->(:Entity)
    (:Entity)-[:RELATED_TO {type}]->(:Entity)
    (:Query)-[:MATCHED_CHUNK {score}]->(:Chunk)
"""

# -----------------------------------------------------------------------------
# Schema
# -----------------------------------------------------------------------------

CONSTRAINT_LABELS = ("File", "Document", "Chunk", "Query", "Entity")


def unique_id_constraint(label: str) -> str:
    """Uniqueness constraint on ``id`` for a node label."""
    return (
        f"CREATE CONSTRAINT {label.lower()}_id_unique IF NOT EXISTS "
        f"FOR (n:{label}) REQUIRE n.id IS UNIQUE"
    )


SHOW_VECTOR_INDEXES = "SHOW VECTOR INDEXES YIELD name RETURN name"


def create_vector_index(index_name: str, dimensions: int) -> str:
    """Cosine vector index over :Chunk(embedding). Names cannot be parameters."""
    return (
        f"CREATE VECTOR INDEX `{index_name}` IF NOT EXISTS "
        f"FOR (c:Chunk) ON (c.embedding) "
        f"OPTIONS {{indexConfig: {{"
        f"`vector.dimensions`: {int(dimensions)}, "
        f"`vector.similarity_function`: 'cosine'}}}}"
    )


PING = "RETURN 1 AS ok"

# -----------------------------------------------------------------------------
# Per-file write (run in this order inside one transaction)
# -----------------------------------------------------------------------------

MERGE_FILE = """
MERGE (f:File {id: $id})
SET f.path = $path,
    f.filename = $filename,
    f.sizeBytes = $size_bytes,
    f.modifiedAt = datetime($modified_at),
    f.mimeType = $mime_type
"""

MERGE_DOCUMENT = """
MATCH (f:File {id: $file_id})
MERGE (d:Document {id: $id})
SET d.title = $title,
    d.docType = $doc_type,
    d.language = $language,
    d.source = $file_id
MERGE (f)-[:HAS_DOCUMENT]->(d)
"""

# Chunks past the new end of a shorter re-ingested document
PRUNE_STALE_CHUNKS = """
MATCH (d:Document {id: $document_id})-[:HAS_CHUNK]->(c:Chunk)
WHERE c.index >= $chunk_count
DETACH DELETE c
"""

MERGE_CHUNK = """
MATCH (d:Document {id: $document_id})
MERGE (c:Chunk {id: $id})
SET c.documentId = $document_id,
    c.index = $index,
    c.text = $text,
    c.embedding = $embedding,
    c.tokenCount = $token_count
MERGE (d)-[:HAS_CHUNK]->(c)
WITH c
OPTIONAL MATCH (c)-[m:MENTIONS]->(:Entity)
DELETE m
"""

LINK_NEXT_CHUNK = """
MATCH (prev:Chunk {id: $previous_id})
MATCH (next:Chunk {id: $id})
MERGE (prev)-[:NEXT_CHUNK]->(next)
"""

# Label is set on create only: the first writer's label wins
MERGE_ENTITIES = """
UNWIND $entities AS entity
MERGE (e:Entity {id: entity.id})
ON CREATE SET e.label = entity.label
"""

MERGE_MENTIONS = """
UNWIND $mentions AS mention
MATCH (c:Chunk {id: mention.chunk_id})
MATCH (e:Entity {id: mention.entity_id})
MERGE (c)-[:MENTIONS]->(e)
"""

MERGE_RELATIONS = """
UNWIND $relations AS rel
MATCH (s:Entity {id: rel.subject})
MATCH (o:Entity {id: rel.object})
MERGE (s)-[:RELATED_TO {type: rel.predicate}]->(o)
"""

# -----------------------------------------------------------------------------
# Retrieval
# -----------------------------------------------------------------------------

SEARCH_CHUNKS = """
CALL db.index.vector.queryNodes($index_name, $limit, $embedding)
YIELD node, score
RETURN node.id AS id, node.text AS text, score
ORDER BY score DESC
"""

EXPAND_ENTITIES = """
MATCH (c:Chunk)-[:MENTIONS]->(e:Entity)
WHERE c.id IN $chunk_ids
WITH collect(DISTINCT e) AS entities
UNWIND entities AS a
OPTIONAL MATCH (a)-[r:RELATED_TO]->(b:Entity)
WHERE b IN entities
RETURN a.id AS entity, r.type AS predicate, b.id AS target
"""

LOG_QUERY = """
MERGE (q:Query {id: $id})
SET q.question = $question,
    q.createdAt = datetime($created_at)
WITH q
UNWIND $matches AS m
MATCH (c:Chunk {id: m.chunk_id})
MERGE (q)-[r:MATCHED_CHUNK]->(c)
SET r.score = m.score
"""

# -----------------------------------------------------------------------------
# Browsing
# -----------------------------------------------------------------------------

LIST_ENTITIES = """
MATCH (e:Entity)
RETURN e.id AS id, e.label AS label
ORDER BY e.id
"""

GRAPH_SNAPSHOT = """
MATCH (a:Entity)-[r:RELATED_TO]->(b:Entity)
RETURN a.id AS source, a.label AS source_label,
       b.id AS target, b.label AS target_label,
       r.type AS predicate
LIMIT $limit
"""
