"""Split extracted document text into bounded, sentence-aligned chunks."""

from typing import List
from docqa.config import DEFAULT_CHUNK_SIZE
from docqa.errors import InvalidArgumentError
from docqa.models.chunk import Chunk


def chunk_text(document: str, max_chunk_size: int = DEFAULT_CHUNK_SIZE) -> List[str]:
    """
    Split text into chunks of at most max_chunk_size characters.

    Each window is cut after the last period it contains so sentences stay
    whole. A window without a usable period is cut at its boundary instead.

    Args:
        document: Full document text.
        max_chunk_size: Window size in characters.

    Returns:
        Trimmed, non-empty chunks covering the document left to right.
    """
    if max_chunk_size <= 0:
        raise InvalidArgumentError("max_chunk_size must be positive.")
    if not document:
        return []

    chunks: List[str] = []
    start = 0
    while start < len(document):
        end = min(start + max_chunk_size, len(document))
        # A period at the window start would yield an empty chunk.
        last_period = document.rfind(".", start, end)
        if last_period > start:
            segment = document[start:last_period + 1]
            start = last_period + 1
        else:
            segment = document[start:end]
            start = end
        segment = segment.strip()
        if segment:
            chunks.append(segment)
    return chunks


def chunk_document(
    document: str,
    max_chunk_size: int = DEFAULT_CHUNK_SIZE,
    start_ordinal: int = 0,
) -> List[Chunk]:
    """
    Chunk text and number the pieces.

    Args:
        document: Full document text.
        max_chunk_size: Window size in characters.
        start_ordinal: Ordinal given to the first chunk, so several blocks
            can be numbered as one sequence.

    Returns:
        List of Chunk with consecutive ordinals.
    """
    return [
        Chunk(text=text, ordinal=start_ordinal + offset)
        for offset, text in enumerate(chunk_text(document, max_chunk_size))
    ]
