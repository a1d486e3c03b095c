"""
Response Normalizer

Turns raw model text into structured data. Exactly one leading and one trailing
markdown fence are stripped before parsing. Anything that does not parse to a JSON
object becomes the fallback document, so callers never see a parse error.
"""

import copy
import json
from typing import Any, Dict

from ..prompts.shared_prompts import STRUCTURAL_FAILURE_MESSAGE
from ..utils.text_utils import strip_code_fences


FALLBACK_DOCUMENT = {
    "error": True,
    "nodes": [],
    "graph": [],
    "claims": {
        "user_claims": [],
        "system_inferences": [STRUCTURAL_FAILURE_MESSAGE],
        "assumptions": []
    }
}


def fallback_document() -> Dict[str, Any]:
    """A fresh copy of the degenerate result used whenever generation or parsing fails"""
    return copy.deepcopy(FALLBACK_DOCUMENT)


def is_fallback(data: Any) -> bool:
    return isinstance(data, dict) and data.get("error") is True


def normalize_response(raw_text: str, logger=None) -> Dict[str, Any]:
    """
    Parse raw model output into a JSON object

    Empty output counts as a failure rather than an empty object, so a blank
    response can never replace a facility slice with nothing.

    Args:
        raw_text: Text returned by the generation client
        logger: Optional debug logger for parse failures

    Returns:
        The parsed object unchanged, or the fallback document
    """
    cleaned = strip_code_fences(raw_text or "")
    if not cleaned:
        if logger:
            logger.log_warning("Empty generation response, using fallback document", "response_normalizer")
        return fallback_document()

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        if logger:
            logger.log_warning(f"Unparseable generation response ({e.msg} at char {e.pos}), using fallback document", "response_normalizer")
        return fallback_document()

    if not isinstance(parsed, dict):
        if logger:
            logger.log_warning(f"Generation response is a JSON {type(parsed).__name__}, not an object; using fallback document", "response_normalizer")
        return fallback_document()
    return parsed
