"""
LLM and Embedding Providers

Provider-agnostic interfaces for the model collaborators of the pipeline.

Modules:
    base: Abstract provider interfaces
    llm/: LLM provider implementations
    embedding/: Embedding provider implementations

Supported LLM Providers:
    - OpenAI (gpt-4o-mini, gpt-4o) via LangChain, for extraction and answers

Supported Embedding Providers:
    - OpenAI (text-embedding-3-small) via LangChain

Design:
    - All providers implement abstract interfaces (LLMProvider, EmbeddingProvider)
    - Lazy import to avoid loading LangChain until a provider is built
    - Extraction parses JSON from plain generate() output

Example:
    >>> from docgraph_kg.providers import LLMProvider, EmbeddingProvider
    >>> from docgraph_kg.providers.llm import OpenAILLMProvider
    >>> from docgraph_kg.providers.embedding import OpenAIEmbeddingProvider
"""

from docgraph_kg.providers.base import EmbeddingProvider, LLMProvider

__all__ = ["LLMProvider", "EmbeddingProvider"]
