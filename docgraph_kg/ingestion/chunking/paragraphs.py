"""
Paragraph Chunker

Greedy paragraph packing with a soft character bound.

Algorithm:
    1. Split text on blank lines ("\\n\\n") and trim each paragraph
    2. Append paragraphs to the current chunk, joined by a blank line
    3. Start a new chunk when the next paragraph would push the current one
       past max_chars

A single paragraph longer than max_chars becomes its own chunk, untruncated.
"""

PARAGRAPH_SEPARATOR = "\n\n"


def split_paragraphs(text: str, max_chars: int = 1200) -> list[str]:
    """
    Split text into paragraph-aligned chunks of at most ~max_chars.

    Args:
        text: Raw document text
        max_chars: Soft upper bound on chunk length

    Returns:
        Non-empty chunks in input order. Empty or whitespace-only input
        yields an empty list.
    """
    chunks: list[str] = []
    current = ""

    for raw in text.split(PARAGRAPH_SEPARATOR):
        paragraph = raw.strip()
        if not paragraph:
            continue

        if current and len(current) + len(paragraph) + len(PARAGRAPH_SEPARATOR) > max_chars:
            chunks.append(current)
            current = ""

        if current:
            current += PARAGRAPH_SEPARATOR
        current += paragraph

    if current:
        chunks.append(current)

    return chunks
