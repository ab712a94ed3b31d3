"""
Token counting for chunk metadata.

Uses tiktoken and a conservative character heuristic when the encoding
cannot be loaded (tiktoken fetches encodings on first use).
"""

from __future__ import annotations

import logging
from functools import lru_cache

import tiktoken

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "cl100k_base"


@lru_cache(maxsize=8)
def _get_encoding(model: str) -> tiktoken.Encoding | None:
    """Resolve the encoding for a model, or None if it cannot be loaded."""
    try:
        try:
            return tiktoken.encoding_for_model(model)
        except KeyError:
            return tiktoken.get_encoding(DEFAULT_ENCODING)
    except (OSError, ValueError) as e:
        logger.warning(f"tiktoken encoding unavailable for {model}: {e}")
        return None


def count_text_tokens(text: str, model: str = "gpt-4o-mini") -> int:
    """
    Count tokens for plain text.

    Falls back to a char-based heuristic when the tokenizer is unavailable.
    """
    if not text:
        return 0

    encoding = _get_encoding(model)
    if encoding is not None:
        return len(encoding.encode(text))

    # Simple fallback: ~4 chars/token
    return max(1, (len(text) + 3) // 4)
