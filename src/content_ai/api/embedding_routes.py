"""
Embeddings Routes

This module exposes the endpoint invoked by the content-table trigger (or
directly) to regenerate the embeddings of one content record.

Workflow
--------
1. Delete any existing embeddings for the record.
2. Chunk the record body into overlapping windows.
3. Embed each window and store it, in chunk order.

The response is 200 with the chunk count, or 400 with the error message if
any step fails. Chunks stored before a failure are kept.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from .models import (
    GenerateEmbeddingsRequest,
    GenerateEmbeddingsResponse,
    EmbeddingErrorResponse,
)
from .dependencies import get_embedding_generator
from ..embeddings.generator import EmbeddingGenerator

logger = logging.getLogger("content_ai.api.embeddings")

router = APIRouter(tags=["embeddings"])


@router.post(
    "/generate-embeddings",
    summary="Regenerate the embeddings of a content record",
    response_model=GenerateEmbeddingsResponse,
    responses={status.HTTP_400_BAD_REQUEST: {"model": EmbeddingErrorResponse}},
)
async def generate_embeddings(
    req: GenerateEmbeddingsRequest,
    generator: Annotated[EmbeddingGenerator, Depends(get_embedding_generator)],
):
    try:
        count = await generator.generate(req.record)
    except Exception as exc:
        logger.exception("Embedding generation failed for record %s", req.record.id)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": str(exc) or exc.__class__.__name__},
        )

    return GenerateEmbeddingsResponse(message=f"Generated {count} embeddings.")
