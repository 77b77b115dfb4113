import math

import pytest

from content_ai.embeddings.chunker import chunk_text, merge_chunks


def expected_count(length, size, overlap):
    if length == 0:
        return 0
    return max(1, math.ceil(max(length - overlap, 0) / (size - overlap)))


def test_example_offsets():
    text = "".join(chr(ord("a") + i % 26) for i in range(120))
    chunks = chunk_text(text, size=50, overlap=10)

    assert chunks == [text[0:50], text[40:90], text[80:120]]
    assert len(chunks[-1]) == 40


def test_empty_text_has_no_chunks():
    assert chunk_text("") == []


def test_short_text_is_one_chunk():
    assert chunk_text("hello") == ["hello"]


def test_defaults_are_500_and_50():
    chunks = chunk_text("x" * 1000)
    assert [len(c) for c in chunks] == [500, 500, 100]


@pytest.mark.parametrize("length", [1, 9, 10, 11, 49, 50, 51, 90, 91, 130, 1234])
@pytest.mark.parametrize("size,overlap", [(50, 10), (7, 0), (5, 4)])
def test_count_and_reconstruction(length, size, overlap):
    text = "".join(str(i % 10) for i in range(length))
    chunks = chunk_text(text, size=size, overlap=overlap)

    assert len(chunks) == expected_count(length, size, overlap)
    assert merge_chunks(chunks, overlap) == text
    assert all(len(c) <= size for c in chunks)
    if overlap:
        for prev, nxt in zip(chunks, chunks[1:]):
            assert prev[-overlap:] == nxt[:overlap]


def test_overlap_must_be_smaller_than_size():
    with pytest.raises(ValueError):
        chunk_text("abc", size=10, overlap=10)
    with pytest.raises(ValueError):
        chunk_text("abc", size=0, overlap=0)
    with pytest.raises(ValueError):
        chunk_text("abc", size=10, overlap=-1)
