"""
Structured Entity/Relation Extractor

Asks the LLM for the entities and relations in one chunk via structured
output, with ExtractionResult as the schema.

Model output is untrusted: a reply that cannot be parsed into the schema
becomes an empty ExtractionResult rather than an error. Transport
failures and timeouts still propagate to the caller.

Example:
    >>> from docgraph_kg.providers.llm import OpenAILLMProvider
    >>> llm = OpenAILLMProvider()
    >>> result = await extract_from_chunk("Ada Lovelace worked with Babbage.", llm)
    >>> print([e.id for e in result.entities])
    ['Ada Lovelace', 'Charles Babbage']
"""

import asyncio
import logging
from typing import TYPE_CHECKING

from langchain_core.exceptions import OutputParserException
from pydantic import ValidationError

from docgraph_kg.types import ExtractionResult

if TYPE_CHECKING:
    from docgraph_kg.providers.base import LLMProvider

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Prompts
# -----------------------------------------------------------------------------

_EXTRACTION_SYSTEM_PROMPT = """\
You are an expert at building knowledge graphs from documents.

## Your Task
Read the text and return the entities it mentions and the relations between them.

## Entity Labels
- **Person**: Named individuals
- **Organization**: Companies, institutions, teams, public bodies
- **Concept**: Ideas, methods, topics, events
- **Technology**: Languages, frameworks, tools, products, protocols

## Rules
- Entity ids are the names exactly as they should appear in the graph
- Use clean names only, no parenthetical descriptions
- Relation predicates are UPPER_CASE verbs such as WORKS_AT, USES, PART_OF
- Relations may only reference ids from your entity list
- Return empty lists when the text mentions nothing worth extracting"""

_EXTRACTION_USER_TEMPLATE = """\
TEXT:

{content}

Extract the entities and relations from this text."""


# -----------------------------------------------------------------------------
# Core Extraction Function
# -----------------------------------------------------------------------------


async def extract_from_chunk(
    text: str,
    llm: "LLMProvider",
    *,
    timeout: float | None = None,
) -> ExtractionResult:
    """
    Extract entities and relations from a single chunk of text.

    Args:
        text: Chunk text
        llm: LLM provider for generation
        timeout: Seconds allowed for the LLM call (None = no limit)

    Returns:
        ExtractionResult, empty if the reply could not be parsed

    Raises:
        asyncio.TimeoutError: If the LLM call exceeds ``timeout``
    """
    prompt = _EXTRACTION_USER_TEMPLATE.format(content=text)

    try:
        return await asyncio.wait_for(
            llm.generate_structured(
                prompt,
                ExtractionResult,
                system=_EXTRACTION_SYSTEM_PROMPT,
            ),
            timeout=timeout,
        )
    except (OutputParserException, ValidationError) as e:
        logger.warning(f"Discarding malformed extraction output: {e}")
        return ExtractionResult()
