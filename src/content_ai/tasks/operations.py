"""
Content Analysis Operations

The five operations a task can run. Each reads records from a content table,
asks the chat completion API about them, and returns a JSON-serializable
result.

Failure policy
--------------
- analyze_articles / extract_insights send one combined prompt; any fetch,
  API or parse error propagates and fails the task.
- generate_summaries / categorize_content / sentiment_analysis call the API
  once per record; a failing record yields an error-tagged entry and the
  other records proceed.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence

from .models import TaskParameters
from .pipeline import (
    BatchAnalysis,
    CompletionClient,
    Record,
    build_messages,
    first_text,
    fold_records,
    parse_json_reply,
    record_id,
    record_title,
    utc_timestamp,
)
from ..config import settings
from ..core.errors import CompletionParseError, TaskValidationError
from .. import prompts

logger = logging.getLogger("content_ai.tasks.operations")


class RecordSource(Protocol):
    async def fetch_filtered(
        self,
        table_name: str,
        equals: Optional[Dict[str, Any]] = None,
        published_from: Optional[str] = None,
        published_to: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        ...

    async def fetch_by_ids(self, table_name: str, record_ids: Sequence[Any]) -> List[Dict[str, Any]]:
        ...


DEFAULT_ARTICLES_TABLE = "articles"

ARTICLE_ANALYSIS = BatchAnalysis(
    system_prompt=prompts.ANALYZE_ARTICLES_SYSTEM_PROMPT,
    prompt_template=prompts.ANALYZE_ARTICLES_PROMPT,
    content_fields=("body", "lead"),
    count_key="articles_analyzed",
    result_key="analysis",
    empty_message="No articles found for analysis",
)

INSIGHT_EXTRACTION = BatchAnalysis(
    system_prompt=prompts.EXTRACT_INSIGHTS_SYSTEM_PROMPT,
    prompt_template=prompts.EXTRACT_INSIGHTS_PROMPT,
    content_fields=("description", "body"),
    count_key="records_analyzed",
    result_key="insights",
    empty_message="No records found for insight extraction",
)

_CATEGORY_LOOKUP = {name.lower(): name for name in prompts.CONTENT_CATEGORIES}


def normalize_category(reply: str) -> str:
    """
    Map a completion reply onto one of the known categories, else "Other".
    """
    cleaned = reply.strip().strip("\"'.`*").strip()
    if cleaned.lower().startswith("category:"):
        cleaned = cleaned.split(":", 1)[1].strip()
    return _CATEGORY_LOOKUP.get(cleaned.lower(), "Other")


def require_record_ids(params: TaskParameters, purpose: str) -> List[Any]:
    if not params.record_ids:
        raise TaskValidationError(f"record_ids is required for {purpose}")
    return list(params.record_ids)


def _title_and_body(record: Record) -> str:
    return f"{record_title(record, '')} {first_text(record, 'description', 'body')}".strip()


class ContentOperations:
    """
    Implementations of the task operations over a record source and a
    completion client.
    """

    def __init__(self, records: RecordSource, llm: CompletionClient) -> None:
        self.records = records
        self.llm = llm

    def _table(self, params: TaskParameters, default: Optional[str] = None) -> str:
        return params.table_name or default or settings.default_content_table

    # ------------------------------------------------------------------
    # Whole-batch operations
    # ------------------------------------------------------------------

    async def analyze_articles(self, params: TaskParameters) -> Dict[str, Any]:
        filters = params.filters
        equals = {"status": filters["status"]} if filters.get("status") else None
        articles = await self.records.fetch_filtered(
            self._table(params, DEFAULT_ARTICLES_TABLE),
            equals=equals,
            published_from=filters.get("date_from"),
            published_to=filters.get("date_to"),
            limit=filters.get("limit"),
        )
        return await ARTICLE_ANALYSIS.run(articles, self.llm)

    async def extract_insights(self, params: TaskParameters) -> Dict[str, Any]:
        filters = params.filters
        equals = {
            name: filters[name]
            for name in ("category", "featured")
            if filters.get(name)
        }
        records = await self.records.fetch_filtered(
            self._table(params),
            equals=equals or None,
            limit=filters.get("limit"),
        )
        return await INSIGHT_EXTRACTION.run(records, self.llm)

    # ------------------------------------------------------------------
    # Per-record operations
    # ------------------------------------------------------------------

    async def generate_summaries(self, params: TaskParameters) -> Dict[str, Any]:
        record_ids = require_record_ids(params, "summary generation")
        records = await self.records.fetch_by_ids(self._table(params), record_ids)

        async def summarize(record: Record) -> Dict[str, Any]:
            content = first_text(record, "body", "description", "content")
            if not content:
                return {
                    "id": record_id(record),
                    "summary": "No content available for summarization",
                    "error": "Empty content",
                }
            summary = await self.llm.chat(
                build_messages(
                    prompts.SUMMARY_SYSTEM_PROMPT,
                    prompts.SUMMARY_PROMPT.format(content=content),
                )
            )
            return {
                "id": record_id(record),
                "title": record_title(record, "Untitled"),
                "summary": summary.strip(),
                "word_count": len(content.split()),
            }

        def failed(record: Record, exc: Exception) -> Dict[str, Any]:
            return {
                "id": record_id(record),
                "summary": "Failed to generate summary",
                "error": str(exc),
            }

        summaries = await fold_records(records, summarize, failed)
        return {
            "summaries": summaries,
            "total_processed": len(records),
            "timestamp": utc_timestamp(),
        }

    async def categorize_content(self, params: TaskParameters) -> Dict[str, Any]:
        record_ids = require_record_ids(params, "categorization")
        records = await self.records.fetch_by_ids(self._table(params), record_ids)

        async def categorize(record: Record) -> Dict[str, Any]:
            reply = await self.llm.chat(
                build_messages(
                    prompts.CATEGORIZE_SYSTEM_PROMPT,
                    prompts.CATEGORIZE_PROMPT.format(content=_title_and_body(record)),
                )
            )
            category = normalize_category(reply)
            if category == "Other" and reply.strip().lower() != "other":
                logger.info("Unrecognized category %r for record %s", reply, record_id(record))
            return {
                "id": record_id(record),
                "title": record_title(record),
                "suggested_category": category,
                "confidence": "high",
            }

        def failed(record: Record, exc: Exception) -> Dict[str, Any]:
            return {
                "id": record_id(record),
                "title": record_title(record),
                "suggested_category": "Other",
                "error": str(exc),
            }

        categories = await fold_records(records, categorize, failed)
        return {
            "categories": categories,
            "total_processed": len(records),
            "timestamp": utc_timestamp(),
        }

    async def sentiment_analysis(self, params: TaskParameters) -> Dict[str, Any]:
        record_ids = require_record_ids(params, "sentiment analysis")
        records = await self.records.fetch_by_ids(self._table(params), record_ids)

        async def analyze(record: Record) -> Dict[str, Any]:
            reply = await self.llm.chat(
                build_messages(
                    prompts.SENTIMENT_SYSTEM_PROMPT,
                    prompts.SENTIMENT_PROMPT.format(content=_title_and_body(record)),
                )
            )
            parsed = parse_json_reply(reply)
            if not isinstance(parsed, dict):
                raise CompletionParseError("Sentiment reply is not a JSON object")
            return {
                "id": record_id(record),
                "title": record_title(record),
                "sentiment": parsed.get("sentiment"),
                "confidence": parsed.get("confidence"),
                "reasoning": parsed.get("reasoning"),
            }

        def failed(record: Record, exc: Exception) -> Dict[str, Any]:
            return {
                "id": record_id(record),
                "title": record_title(record),
                "sentiment": "neutral",
                "confidence": 0,
                "error": str(exc),
            }

        sentiments = await fold_records(records, analyze, failed)
        return {
            "sentiments": sentiments,
            "total_processed": len(records),
            "timestamp": utc_timestamp(),
        }
