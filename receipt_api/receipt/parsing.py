import json

from receipt_api.errors import ExtractionError, ParseError


def _reject_constant(name: str):
    # NaN / Infinity are accepted by Python's decoder but are not JSON
    raise ValueError(f"{name} is not a valid JSON value")


_decoder = json.JSONDecoder(parse_constant=_reject_constant)


def _top_level_starts(text: str):
    """Yield positions of ``{`` that are not nested inside another brace pair."""
    depth = 0
    for i, ch in enumerate(text):
        if ch == "{":
            if depth == 0:
                yield i
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1


def extract_json_object(text: str) -> dict:
    """Return the first JSON object embedded in free-form model output.

    Candidates are the outermost ``{`` positions, tried left to right, so
    prose or markdown fences around the object are ignored, as are unrelated
    braces after it. A malformed object never falls back to one of its own
    nested objects. Raises ``ExtractionError`` when the text has no ``{...}``
    span at all and ``ParseError`` when every candidate fails to decode.
    """
    text = text or ""
    start = text.find("{")
    if start == -1 or text.rfind("}") < start:
        raise ExtractionError("No JSON found in model response")

    errors = []
    for pos in _top_level_starts(text):
        try:
            value, _ = _decoder.raw_decode(text, pos)
        except ValueError as e:
            errors.append(e)
            continue
        return value

    first = errors[0]
    detail = first.msg if isinstance(first, json.JSONDecodeError) else str(first)
    raise ParseError(f"Invalid JSON in model response: {detail}")
