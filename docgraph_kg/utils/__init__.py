"""
Utility Functions

Helper functions used throughout the package.

Modules:
    text: Text processing and normalization
    token_count: Tokenizer-based token counts
"""

from docgraph_kg.utils.text import (
    clean_entity_name,
    normalize_relationship_type,
)
from docgraph_kg.utils.token_count import count_text_tokens

__all__ = [
    "clean_entity_name",
    "normalize_relationship_type",
    "count_text_tokens",
]
