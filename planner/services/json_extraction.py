"""Recovery of the course array from a model reply."""

import json
from typing import Any, Dict, List

_decoder = json.JSONDecoder()


class JsonExtractionError(ValueError):
    pass


def extract_first_json_array(text: str) -> List[Dict[str, Any]]:
    """
    Return the first JSON array of objects embedded in a model reply.

    Replies wrap the array in markdown fences or prose, and the prose may hold
    bracketed text of its own ("see [1]"), so each "[" is decoded in turn until
    one yields a list whose items are all objects. An empty array is accepted.
    """
    if not text:
        raise JsonExtractionError("empty model reply")

    reason = "no '[' in model reply"
    start = text.find("[")
    while start >= 0:
        try:
            value, _ = _decoder.raw_decode(text, start)
        except json.JSONDecodeError as e:
            reason = f"invalid JSON array at offset {start}: {e.msg}"
        else:
            if all(isinstance(item, dict) for item in value):
                return value
            reason = f"array at offset {start} does not hold course objects"
        start = text.find("[", start + 1)

    raise JsonExtractionError(reason)
