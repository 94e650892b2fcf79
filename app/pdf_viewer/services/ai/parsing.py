"""
Recovery of JSON payloads from free-form model output.

Models often wrap the requested JSON in markdown fences or surround it with
commentary; these helpers locate the first JSON object and validate it into
the result models.
"""

import logging

from pydantic import ValidationError

from ...models import Classification, Extraction
from .exceptions import AIServiceError

logger = logging.getLogger(__name__)


def _find_fenced_body(text: str) -> str:
    """Return the contents of the first code fence, or the whole text if there is none."""
    start = text.find("```json")
    if start != -1:
        start += len("```json")
    else:
        start = text.find("```")
        if start != -1:
            start += len("```")

    if start == -1:
        return text

    end = text.find("```", start)
    if end == -1:
        # Unclosed fence: everything after the opening marker
        return text[start:]
    return text[start:end]


def extract_json(text: str) -> str:
    """
    Extract the first JSON object from a model response.

    Looks inside a ```json (or plain ```) code block when present, then
    returns the span from the first ``{`` to its matching ``}``. Braces inside
    JSON strings are ignored while matching. If the object is never closed
    the span runs to the end of the text; if there is no ``{`` at all the
    candidate text is returned unchanged.

    Args:
        text: Raw response text from the model.

    Returns:
        The best candidate JSON text.
    """
    body = _find_fenced_body(text)

    brace_start = body.find("{")
    if brace_start == -1:
        return body

    depth = 0
    in_string = False
    escaped = False
    for i in range(brace_start, len(body)):
        char = body[i]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return body[brace_start : i + 1]

    return body[brace_start:]


def parse_classification_response(response_text: str) -> Classification:
    """
    Parse a classification reply.

    Raises:
        AIServiceError: If no valid classification object can be recovered.
    """
    json_text = extract_json(response_text)
    try:
        return Classification.model_validate_json(json_text)
    except ValidationError as e:
        logger.error("Failed to parse classification response: %s", response_text[:500])
        raise AIServiceError(f"failed to parse classification response: {e}") from e


def parse_extraction_response(response_text: str) -> Extraction:
    """
    Parse an extraction reply.

    Raises:
        AIServiceError: If no valid extraction object can be recovered.
    """
    json_text = extract_json(response_text)
    try:
        return Extraction.model_validate_json(json_text)
    except ValidationError as e:
        logger.error("Failed to parse extraction response: %s", response_text[:500])
        raise AIServiceError(f"failed to parse extraction response: {e}") from e
