"""Extract and repair the JSON object embedded in free-form model output.

Each repair pass is a plain ``str -> str`` function. Every pass matches JSON
string literals first and hands them back untouched, so text inside strings
(times like "9:00 AM", commas in descriptions) is never rewritten and clean
JSON passes through unchanged.
"""

import json
import logging
import re
from collections.abc import Callable, Iterator
from typing import Any

from backend.app.config import MAX_PARSE_ATTEMPTS
from backend.app.models.result import Err, FailureReason, Ok, StageResult

logger = logging.getLogger(__name__)

_STRING = r'"(?:\\.|[^"\\])*"'

_TRAILING_COMMA = re.compile(rf"{_STRING}|,(\s*[}}\]])")
_UNQUOTED_KEY = re.compile(rf"{_STRING}|([{{,]\s*)([A-Za-z_$][\w$-]*)(\s*:)")
_UNQUOTED_VALUE = re.compile(
    rf'{_STRING}|(:\s*)([^\s"{{\[\d\-,}}\]][^,}}\]\n"]*?)(\s*)(?=[,}}\]\n])'
)
_JSON_LITERALS = frozenset({"true", "false", "null"})

_GREEDY_OBJECT = re.compile(r"\{[\s\S]*\}")
_LAZY_OBJECT = re.compile(r"\{[\s\S]*?\}")


def strip_trailing_commas(text: str) -> str:
    """Drop commas that directly precede ``}`` or ``]``."""

    def repl(m: re.Match[str]) -> str:
        return m.group(1) if m.group(1) is not None else m.group(0)

    return _TRAILING_COMMA.sub(repl, text)


def quote_unquoted_keys(text: str) -> str:
    """Quote bare identifiers used as object keys: ``{a: 1}`` -> ``{"a": 1}``."""

    def repl(m: re.Match[str]) -> str:
        if m.group(2) is None:
            return m.group(0)
        return f'{m.group(1)}"{m.group(2)}"{m.group(3)}'

    return _UNQUOTED_KEY.sub(repl, text)


def quote_unquoted_values(text: str) -> str:
    """Quote bare scalar values: ``{"a": hello world}`` -> ``{"a": "hello world"}``.

    Numbers, objects, arrays and the literals true/false/null are left alone.
    """

    def repl(m: re.Match[str]) -> str:
        value = m.group(2)
        if value is None or value in _JSON_LITERALS:
            return m.group(0)
        return f"{m.group(1)}{json.dumps(value, ensure_ascii=False)}{m.group(3)}"

    return _UNQUOTED_VALUE.sub(repl, text)


REPAIR_PASSES: tuple[Callable[[str], str], ...] = (
    strip_trailing_commas,
    quote_unquoted_keys,
    quote_unquoted_values,
)


def repair_json_text(text: str) -> str:
    """Run every repair pass in order."""
    for repair in REPAIR_PASSES:
        text = repair(text)
    return text


def candidate_spans(text: str) -> Iterator[str]:
    """Yield spans that may hold the JSON object.

    First the greedy span from the first ``{`` to the last ``}``, then each
    non-greedy ``{...}`` span in order of appearance.
    """
    greedy = _GREEDY_OBJECT.search(text)
    if greedy is None:
        return
    yield greedy.group(0)
    for lazy in _LAZY_OBJECT.finditer(text):
        yield lazy.group(0)


def parse_model_json(
    text: str, max_attempts: int = MAX_PARSE_ATTEMPTS
) -> StageResult[dict[str, Any]]:
    """Extract one JSON object from model output.

    Returns ``Ok(dict)`` on success and ``Err(MALFORMED_RESPONSE)`` once no
    candidate span parses within ``max_attempts``. Never raises.
    """
    attempts = 0
    last_error = "no JSON object found in response"
    for span in candidate_spans(text or ""):
        if attempts >= max_attempts:
            break
        attempts += 1
        try:
            parsed = json.loads(repair_json_text(span))
        except json.JSONDecodeError as e:
            last_error = f"attempt {attempts}: {e}"
            logger.info(f"JSON parse attempt {attempts} failed: {e}")
            continue
        if not isinstance(parsed, dict):
            last_error = f"attempt {attempts}: expected an object, got {type(parsed).__name__}"
            continue
        return Ok(parsed)

    logger.warning(f"Failed to parse model output after {attempts} attempt(s): {last_error}")
    return Err(FailureReason.MALFORMED_RESPONSE, last_error)
