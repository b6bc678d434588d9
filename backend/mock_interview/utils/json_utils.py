"""
JSON helpers for model responses.

Chat models often wrap the requested JSON in prose or code fences; these
helpers pull the object out and parse it.
"""
import json
import re
from typing import Any, Dict

from mock_interview.utils.logger import setup_logger

logger = setup_logger("json_utils")

JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")


def extract_json_object(text: str) -> Dict[str, Any]:
    """Extract and parse the outermost JSON object embedded in `text`.

    Args:
        text: Raw model response

    Returns:
        Parsed JSON object

    Raises:
        ValueError: If no JSON object is found or it does not parse to a dict
    """
    match = JSON_OBJECT_PATTERN.search(text or "")
    if not match:
        raise ValueError("No JSON object found in model response")

    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        logger.warning(f"[PARSE] JSON parsing failed: {e}")
        raise ValueError(f"Malformed JSON in model response: {e}") from e

    if not isinstance(parsed, dict):
        raise ValueError("Model response JSON is not an object")
    return parsed
