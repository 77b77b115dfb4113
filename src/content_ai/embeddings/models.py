"""
Embedding Data Models

This module defines the content record shape accepted by the embedding
pipeline. The record usually comes straight from a database change event, so
any columns beyond the ones used here are kept but ignored.
"""

from __future__ import annotations

from typing import Optional, Union
from pydantic import BaseModel, Field, ConfigDict, field_validator


class SourceRecord(BaseModel):
    """
    A content record whose body is to be embedded.
    """

    id: str = Field(
        ...,
        min_length=1,
        description="Identifier of the content record.",
    )

    org_id: str = Field(
        ...,
        min_length=1,
        description="Owning organization; copied onto every chunk row.",
    )

    body: str = Field(
        default="",
        description="Text to chunk and embed.",
    )

    title: Optional[str] = None

    model_config = ConfigDict(
        extra="allow",
        frozen=True,
    )

    @field_validator("id", "org_id", mode="before")
    @classmethod
    def _stringify_identifier(cls, v: Union[str, int]) -> Union[str, int]:
        # database rows may carry integer or uuid keys
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @field_validator("body", mode="before")
    @classmethod
    def _null_body_is_empty(cls, v: Optional[str]) -> str:
        return "" if v is None else v
