"""Strict parsing of model output into clause fields.

The model is asked for bare JSON but regularly wraps it in prose or code fences.
`extract_json_objects` scans for top-level objects with the stdlib decoder, and
`parse_clause_payload` validates one object field by field. Both return plain
values / tagged results instead of raising, so the caller's fallback is an
explicit branch.
"""
from __future__ import annotations
import json
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Union
from legallens.utils.types import normalize_category, normalize_risk_level, string_list

_DECODER = json.JSONDecoder()


@dataclass(frozen=True)
class ParsedClause:
    category: str
    explanation: str
    risk_level: str
    risk_details: Optional[str]
    key_points: Tuple[str, ...]
    risks: Tuple[str, ...]


@dataclass(frozen=True)
class ParseFailure:
    reason: str


ParseResult = Union[ParsedClause, ParseFailure]


def _span_end(raw: str, start: int) -> int:
    """Index just past the brace that closes the `{` at `start` (string-aware); len(raw) if it never closes."""
    depth = 0
    in_string = False
    escaped = False
    for pos in range(start, len(raw)):
        ch = raw[pos]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return pos + 1
    return len(raw)


def extract_json_objects(raw: str, limit: Optional[int] = None) -> List[dict]:
    """Return top-level JSON objects found in `raw`, in order of appearance.

    A malformed candidate is skipped as a whole, so objects nested inside it are
    never reported as top-level ones.
    """
    found: List[dict] = []
    idx = raw.find("{") if raw else -1
    while idx != -1:
        try:
            obj, end = _DECODER.raw_decode(raw, idx)
        except json.JSONDecodeError:
            idx = raw.find("{", _span_end(raw, idx))
            continue
        if isinstance(obj, dict):
            found.append(obj)
            if limit and len(found) >= limit:
                break
        idx = raw.find("{", end)
    return found


def parse_clause_payload(payload: Any) -> ParseResult:
    if not isinstance(payload, dict):
        return ParseFailure("response is not a JSON object")
    category = normalize_category(payload.get("category"))
    if category is None:
        return ParseFailure("missing category")
    meaning = payload.get("simpleMeaning")
    if not isinstance(meaning, str) or not meaning.strip():
        return ParseFailure("missing simpleMeaning")
    details = payload.get("riskExplanation")
    return ParsedClause(
        category=category,
        explanation=meaning.strip(),
        risk_level=normalize_risk_level(payload.get("riskLevel")),
        risk_details=details.strip() if isinstance(details, str) and details.strip() else None,
        key_points=string_list(payload.get("keyPoints")),
        risks=string_list(payload.get("risks")),
    )


def parse_clause_response(raw: str) -> ParseResult:
    objects = extract_json_objects(raw or "", limit=1)
    if not objects:
        return ParseFailure("no JSON object in response")
    return parse_clause_payload(objects[0])


def parse_batch_response(raw: str, expected: int) -> List[ParseResult]:
    """One result per expected section; a count mismatch fails every position."""
    objects = extract_json_objects(raw or "")
    if len(objects) != expected:
        failure = ParseFailure(f"expected {expected} JSON objects, got {len(objects)}")
        return [failure] * expected
    return [parse_clause_payload(o) for o in objects]
