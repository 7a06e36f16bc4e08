"""Helpers for reading JSON out of model replies.

Model output is untrusted: it may wrap the JSON in prose or code fences,
or return objects where strings were requested.
"""

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


def extract_json_object(response_text: str) -> dict[str, Any] | None:
    """Extract the outermost JSON object from a model reply.

    Args:
        response_text: Raw model reply

    Returns:
        The parsed object, or None if no JSON object could be parsed
    """
    if not response_text:
        return None

    json_start = response_text.find("{")
    json_end = response_text.rfind("}") + 1
    if json_start < 0 or json_end <= json_start:
        return None

    try:
        data = json.loads(response_text[json_start:json_end])
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse model JSON: {e}")
        return None

    return data if isinstance(data, dict) else None


def normalize_strings(items: Any) -> list[str]:
    """Normalize a model-supplied list to non-empty strings.

    Objects are reduced to a common text-bearing key, or to the join of
    their string values.

    Args:
        items: Value that should be a list of strings

    Returns:
        List of stripped, non-empty strings
    """
    if not isinstance(items, list):
        return []

    result = []
    for item in items:
        if isinstance(item, str):
            value = item
        elif isinstance(item, dict):
            for key in ["name", "text", "value", "description"]:
                if isinstance(item.get(key), str):
                    value = item[key]
                    break
            else:
                value = " ".join(v for v in item.values() if isinstance(v, str))
        elif isinstance(item, (int, float)) and not isinstance(item, bool):
            value = str(item)
        else:
            continue

        value = value.strip()
        if value:
            result.append(value)
    return result


__all__ = ["extract_json_object", "normalize_strings"]
