"""
Analysis Pipeline

Shared building blocks of the content-analysis operations:

- `BatchAnalysis` describes a whole-batch operation: fetched records are
  rendered into one prompt, sent in a single completion call, and the JSON
  reply becomes the result. Any failure fails the operation.
- `fold_records` runs a per-record handler over an ordered list of records
  and turns each failure into an error entry for that record only.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Protocol, Sequence

from ..core.errors import CompletionParseError

logger = logging.getLogger("content_ai.tasks.pipeline")

Record = Mapping[str, Any]

_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class CompletionClient(Protocol):
    async def chat(
        self,
        messages: List[Dict[str, str]],
        temperature: float | None = None,
    ) -> str:
        ...


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------

def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def first_text(record: Record, *fields: str) -> str:
    """Return the first non-empty string among `fields`, or ""."""
    for name in fields:
        value = record.get(name)
        if value:
            return str(value)
    return ""


def record_id(record: Record) -> Any:
    """Record identifier in a JSON-serializable form (uuid keys become str)."""
    value = record.get("id")
    if value is None or isinstance(value, (int, str)):
        return value
    return str(value)


def record_title(record: Record, default: str | None = None) -> str | None:
    return first_text(record, "title", "name") or default


def build_messages(system_prompt: str, user_prompt: str) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]


def parse_json_reply(reply: str) -> Any:
    """
    Parse a completion that is expected to be JSON.

    Markdown code fences around the JSON are tolerated.

    Raises
    ------
    CompletionParseError
        If the reply is not valid JSON.
    """
    text = reply.strip()
    fenced = _FENCE_PATTERN.match(text)
    if fenced:
        text = fenced.group(1)
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise CompletionParseError(f"Completion is not valid JSON: {exc.msg}") from exc


# ---------------------------------------------------------------------
# Whole-batch analyses
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class BatchAnalysis:
    """
    One fetch -> template -> call -> parse operation over a record batch.
    """
    system_prompt: str
    prompt_template: str
    content_fields: Sequence[str]
    count_key: str
    result_key: str
    empty_message: str

    def render_record(self, record: Record) -> str:
        title = record_title(record, "")
        return f"Title: {title}\nContent: {first_text(record, *self.content_fields)}\n---"

    def render_prompt(self, records: Sequence[Record]) -> str:
        content = "\n".join(self.render_record(r) for r in records)
        return self.prompt_template.format(content=content)

    async def run(self, records: Sequence[Record], llm: CompletionClient) -> Dict[str, Any]:
        if not records:
            return {"message": self.empty_message}

        reply = await llm.chat(build_messages(self.system_prompt, self.render_prompt(records)))
        return {
            self.count_key: len(records),
            self.result_key: parse_json_reply(reply),
            "timestamp": utc_timestamp(),
        }


# ---------------------------------------------------------------------
# Per-record analyses
# ---------------------------------------------------------------------

RecordHandler = Callable[[Record], Awaitable[Dict[str, Any]]]
ErrorEntry = Callable[[Record, Exception], Dict[str, Any]]


async def fold_records(
    records: Sequence[Record],
    handle: RecordHandler,
    on_error: ErrorEntry,
) -> List[Dict[str, Any]]:
    """
    Apply `handle` to each record in order.

    A record whose handler raises is replaced by `on_error(record, exc)`;
    the remaining records are still processed.
    """
    entries: List[Dict[str, Any]] = []
    for record in records:
        try:
            entries.append(await handle(record))
        except Exception as exc:
            logger.warning("Record %s failed: %s", record.get("id"), exc)
            entries.append(on_error(record, exc))
    return entries
