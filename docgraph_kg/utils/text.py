"""
Text Processing Utilities

Functions for text normalization and transformation.
"""

from __future__ import annotations

import re


def normalize_relationship_type(description: str) -> str:
    """
    Normalize a free-form relationship description to UPPER_SNAKE_CASE.

    Args:
        description: e.g., "works at" or "WORKS_AT"

    Returns:
        Normalized type e.g., "WORKS_AT"
    """
    # Remove parentheses and contents
    text = re.sub(r"\([^)]*\)", "", description)
    # Replace non-alphanumeric with spaces
    text = re.sub(r"[^a-zA-Z0-9\s]", " ", text)
    # Split, uppercase, limit to 8 words
    words = text.upper().split()[:8]
    return "_".join(words) if words else "RELATED_TO"


def clean_entity_name(name: str) -> str:
    """
    Clean an entity name: collapse whitespace and trim.

    The result is the entity's id, so two spellings that differ only in
    spacing collapse to one node.
    """
    return re.sub(r"\s+", " ", name).strip()
