"""Normalization of the DataForSEO task envelope."""

from typing import Any, Dict

from pydantic import ValidationError

from seowise.exceptions import SeoWiseError
from seowise.models import ParsedResponse, ParsedTask
from seowise.schemas import RawEnvelope, RawResult, RawTask

TASK_ERROR_THRESHOLD = 40000


def _parse_task(task: RawTask) -> ParsedTask:
    # Task failures arrive with HTTP 200; the status code is the only signal.
    if task.status_code >= TASK_ERROR_THRESHOLD:
        raise SeoWiseError(
            f"Task error {task.status_code}: {task.status_message}",
            status_code=task.status_code,
            response_body=task.model_dump(),
        )

    first = RawResult.model_validate(task.result[0]) if task.result else RawResult()
    total_count = first.total_count if first.total_count is not None else len(first.items)

    return ParsedTask(
        status_code=task.status_code,
        status_message=task.status_message,
        cost=task.cost,
        items=first.items,
        total_count=total_count,
        result=task.result,
        result_count=task.result_count,
    )


def parse_response(raw: Dict[str, Any]) -> ParsedResponse:
    """Parse a raw response envelope.

    Args:
        raw: Decoded JSON body of an API response.

    Returns:
        The parsed response. Task items are never None.

    Raises:
        SeoWiseError: If the envelope is malformed or any task failed.
    """
    if not isinstance(raw, dict) or not isinstance(raw.get("tasks"), list):
        raise SeoWiseError(
            "Invalid API response: missing tasks array",
            response_body=raw,
        )

    try:
        envelope = RawEnvelope.model_validate(raw)
        tasks = [_parse_task(task) for task in envelope.tasks]
    except ValidationError as e:
        raise SeoWiseError(
            f"Invalid API response: {e.error_count()} malformed field(s)",
            response_body=raw,
        ) from e

    return ParsedResponse(tasks=tasks, cost=envelope.cost, version=envelope.version)
