# analyzer.py
import logging
import re
from dataclasses import dataclass
from typing import Sequence

import orjson
from pydantic import ValidationError

from .models import ReportPayload
from .prompts import build_prompt
from .regulations import RegulationId

logger = logging.getLogger(__name__)

# Opening fence may carry a language tag (json, javascript, ...).
FENCE_RE = re.compile(r"```[\w.+-]*[ \t]*\n?(.*?)```", flags=re.DOTALL)


# ---------- Parse result ----------
@dataclass(frozen=True)
class ParseSuccess:
    payload: ReportPayload


@dataclass(frozen=True)
class ParseFailure:
    reason: str


ParseResult = ParseSuccess | ParseFailure


# ---------- JSON parsing (strict) ----------
def _strip_fence(raw: str) -> str:
    """Return the interior of the first fenced code block, or the whole text."""
    m = FENCE_RE.search(raw)
    return (m.group(1) if m else raw).strip()


def parse_llm_report(raw: str) -> ParseResult:
    """
    1) Unwrap one optional ``` fence, whatever its language tag
    2) Decode with orjson
    3) Validate the report shape with pydantic
    No repair and no partial acceptance: anything else is a ParseFailure.
    """
    if raw is not None and not isinstance(raw, str):
        return ParseFailure(f"Expected response text, got {type(raw).__name__}.")
    body = _strip_fence(raw or "")
    if not body:
        return ParseFailure("Empty response from scoring backend.")
    try:
        data = orjson.loads(body)
    except orjson.JSONDecodeError as e:
        return ParseFailure(f"Response is not valid JSON: {e}")
    if not isinstance(data, dict):
        return ParseFailure(f"Expected a JSON object, got {type(data).__name__}.")
    try:
        return ParseSuccess(ReportPayload.model_validate(data))
    except ValidationError as e:
        return ParseFailure(f"Response does not match the report schema: {e}")


# ---------- Public entrypoint ----------
def analyze_document(client, document_text: str, regulations: Sequence[RegulationId]) -> ParseResult:
    """
    Build the prompt, call the scoring backend once and parse its answer.
    RequestFailed from the client propagates to the caller.
    """
    prompt = build_prompt(document_text, regulations)
    raw = client.analyze(prompt)
    result = parse_llm_report(raw)
    if isinstance(result, ParseFailure):
        logger.warning("Could not parse scoring response: %s", result.reason)
    return result
