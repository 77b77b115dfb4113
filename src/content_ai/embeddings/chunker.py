"""
Fixed-window text chunking.

Text is cut into windows of `size` characters, each starting `size - overlap`
characters after the previous one, until a window reaches the end of the
text. The last window may be shorter. Windows
overlap by exactly `overlap` characters except possibly at the final
boundary, and removing the leading `overlap` characters of every window after
the first gives back the original text.
"""

from __future__ import annotations

from typing import List, Sequence

DEFAULT_CHUNK_SIZE = 500
DEFAULT_CHUNK_OVERLAP = 50


def _check_window(size: int, overlap: int) -> None:
    if size <= 0:
        raise ValueError(f"chunk size must be positive, got {size}")
    if overlap < 0 or overlap >= size:
        raise ValueError(f"overlap must satisfy 0 <= overlap < size, got {overlap} (size {size})")


def chunk_text(
    text: str,
    size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> List[str]:
    """
    Split `text` into overlapping windows.

    >>> [len(c) for c in chunk_text("x" * 120, size=50, overlap=10)]
    [50, 50, 40]
    """
    _check_window(size, overlap)

    step = size - overlap
    chunks: List[str] = []
    offset = 0
    while offset < len(text):
        end = min(offset + size, len(text))
        chunks.append(text[offset:end])
        if end == len(text):
            # a further window would lie entirely inside this one
            break
        offset += step
    return chunks


def merge_chunks(chunks: Sequence[str], overlap: int = DEFAULT_CHUNK_OVERLAP) -> str:
    """
    Rebuild the original text from windows produced by `chunk_text`.
    """
    if not chunks:
        return ""
    return chunks[0] + "".join(chunk[overlap:] for chunk in chunks[1:])
