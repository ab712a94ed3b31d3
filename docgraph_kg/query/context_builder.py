"""
Context Builder

Assembles retrieved chunks and their graph neighbourhood into the context
text handed to the synthesizer.

Responsibilities:
    - Deduplicate chunks by id (keep highest score), order by score
    - Join chunk texts as the document block
    - Render mentioned entities and the relations among them as the graph block
    - Show each relation once, endpoints in lexicographic order, whatever
      direction it was extracted in
"""

from __future__ import annotations

from docgraph_kg.types import GraphContext, RetrievedChunk

CHUNK_SEPARATOR = "\n\n---\n\n"


class ContextBuilder:
    """
    Builds the composite context for one question.

    The graph block is appended only when the chunks mention entities.
    """

    def build(self, chunks: list[RetrievedChunk], graph: GraphContext) -> str:
        """
        Build the full context text.

        Args:
            chunks: Vector search hits
            graph: Entities and relations around those chunks

        Returns:
            Document block, plus a graph-knowledge section if non-empty
        """
        document_block = self.render_chunks(chunks)
        graph_block = self.render_graph(graph)

        if not graph_block:
            return document_block

        return (
            f"**Document Information:**\n{document_block}\n\n"
            f"**Relevant Graph Knowledge:**\n{graph_block}"
        )

    def render_chunks(self, chunks: list[RetrievedChunk]) -> str:
        return CHUNK_SEPARATOR.join(chunk.text for chunk in self._dedupe_chunks(chunks))

    def render_graph(self, graph: GraphContext) -> str:
        """
        Render entities and relations.

        Returns:
            "" when no entities were found
        """
        if graph.is_empty:
            return ""

        lines = [f"Key concepts identified: {', '.join(graph.entities)}."]

        relation_lines = self._canonical_relations(graph.relations)
        if relation_lines:
            lines.append("Relations found between them:")
            lines.extend(relation_lines)

        return "\n".join(lines)

    def _canonical_relations(self, relations: list[tuple[str, str, str]]) -> list[str]:
        """One line per relation, smaller endpoint first, sorted."""
        seen: set[tuple[str, str, str]] = set()
        for subject, predicate, obj in relations:
            first, second = sorted((subject, obj))
            seen.add((first, predicate, second))

        return [f"- {first} {predicate} {second}" for first, predicate, second in sorted(seen)]

    def _dedupe_chunks(self, chunks: list[RetrievedChunk]) -> list[RetrievedChunk]:
        """
        Deduplicate chunks by id, keeping highest score.

        Returns chunks sorted by score (descending).
        """
        by_id: dict[str, RetrievedChunk] = {}
        for chunk in chunks:
            existing = by_id.get(chunk.id)
            if existing is None or chunk.score > existing.score:
                by_id[chunk.id] = chunk

        # Sort by score descending
        return sorted(by_id.values(), key=lambda c: c.score, reverse=True)
