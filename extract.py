import json, re, logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

OK = "ok"
NOT_FOUND = "not_found"
MALFORMED = "malformed"

FENCE_OPEN = re.compile(r"^\s*```(?:json)?\s*", re.IGNORECASE)
FENCE_CLOSE = re.compile(r"\s*```\s*\Z", re.IGNORECASE)


@dataclass
class Extraction:
    status: str
    value: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == OK


def _reject_constant(name: str):
    # JSON.parse has no NaN/Infinity
    raise ValueError(f"invalid constant {name}")


def _loads(text: str):
    return json.loads(text, parse_constant=_reject_constant)


def _trim(text: str) -> str:
    # a leading BOM counts as whitespace, as in JS trim()
    return text.strip().lstrip("\ufeff").strip()


def strip_fences(text: str) -> str:
    """Drop a leading ```/```json marker and a trailing ``` marker."""
    text = FENCE_OPEN.sub("", _trim(text), count=1)
    text = FENCE_CLOSE.sub("", text, count=1)
    return _trim(text)


def _balanced_candidate(text: str, start: int) -> str | None:
    depth = 0
    in_string = False
    prev = ""
    for i in range(start, len(text)):
        ch = text[i]
        # a quote right after a backslash stays inside the string; "\\" is not special-cased
        if ch == '"' and prev != "\\":
            in_string = not in_string
        if not in_string:
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
            if depth == 0:
                return text[start:i + 1]
        prev = ch
    return None


def extract(text) -> Extraction:
    """Recover the first JSON object embedded in model output.

    Code fences and surrounding prose are tolerated. Only the first balanced
    ``{...}`` region is tried; when it does not parse, the whole cleaned text is
    parsed instead and later objects are never looked at.
    """
    if not text or not isinstance(text, str):
        return Extraction(NOT_FOUND)

    text = strip_fences(text)

    start = text.find("{")
    if start == -1:
        try:
            return Extraction(OK, _loads(text))
        except ValueError as e:
            logger.debug("no JSON object in response: %s", e)
            return Extraction(NOT_FOUND, error=str(e))

    error = None
    candidate = _balanced_candidate(text, start)
    if candidate is not None:
        try:
            return Extraction(OK, _loads(candidate))
        except ValueError as e:
            error = str(e)

    try:
        return Extraction(OK, _loads(text))
    except ValueError as e:
        logger.debug("malformed JSON in response: %s", error or e)
        return Extraction(MALFORMED, error=error or str(e))


def extract_json(text):
    """Parsed JSON value from ``text`` or None."""
    result = extract(text)
    return result.value if result.ok else None
