from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_async_session, EmbeddingStore, TaskStore, ContentRepository
from ..embeddings.embedder import Embedder
from ..embeddings.generator import EmbeddingGenerator
from ..llm.client import LLMClient
from ..tasks.dispatcher import TaskDispatcher
from ..tasks.operations import ContentOperations


@lru_cache
def get_llm_client() -> LLMClient:
    return LLMClient()


@lru_cache
def get_embedder() -> Embedder:
    return Embedder()


def get_embedding_generator(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    embedder: Annotated[Embedder, Depends(get_embedder)],
) -> EmbeddingGenerator:
    return EmbeddingGenerator(EmbeddingStore(session), embedder)


def get_task_dispatcher(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    llm: Annotated[LLMClient, Depends(get_llm_client)],
) -> TaskDispatcher:
    operations = ContentOperations(ContentRepository(session), llm)
    return TaskDispatcher(TaskStore(session), operations)
