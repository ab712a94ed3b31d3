"""
Synthesizer

Generates the final answer from the question and the assembled context.

The model is told to answer only from the context and to say so when the
context does not contain the answer. Its reply is returned verbatim.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from docgraph_kg.providers.base import LLMProvider

logger = logging.getLogger(__name__)


NO_INFORMATION_ANSWER = (
    "I could not find relevant information in the documents to answer your question."
)

ANSWER_SYSTEM_PROMPT = """You are an assistant answering questions about a collection of documents.

PRINCIPLES:
1. Answer ONLY from the provided context - do not use external knowledge
2. If the context does not contain the answer, say that you don't know
3. Use the graph knowledge to connect facts across documents
4. Be clear and concise"""


class Synthesizer:
    """
    Completion client: question + context -> answer text.

    Args:
        llm_provider: LLM provider for generation
        timeout: Seconds allowed for the completion call (None = no limit)
    """

    def __init__(
        self,
        llm_provider: "LLMProvider",
        *,
        timeout: float | None = None,
    ) -> None:
        self.llm = llm_provider
        self._timeout = timeout

    async def synthesize(self, question: str, context: str) -> str:
        """
        Answer a question from context.

        Raises:
            asyncio.TimeoutError: If the call exceeds the timeout
            Exception: Provider errors propagate unchanged
        """
        prompt = f"""CONTEXT:
{context}

QUESTION: {question}"""

        answer = await asyncio.wait_for(
            self.llm.generate(prompt, system=ANSWER_SYSTEM_PROMPT),
            timeout=self._timeout,
        )
        logger.debug(f"Synthesized answer ({len(answer)} chars)")
        return answer
