import json
import re
from typing import Any, List, Optional, Tuple

from app.analysis.models import SEVERITIES, PlagiarismIssue, SubScore


PARSE_ERROR_MESSAGE = "Parsing error: the completion response was not valid JSON."


def clamp_score(value, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    try:
        return max(0, min(100, int(round(float(value)))))
    except (TypeError, ValueError, OverflowError):
        return default


def as_text(value, default: str = "") -> str:
    if value is None:
        return default
    if isinstance(value, (dict, list)):
        return default
    text = str(value).strip()
    return text or default


def as_text_list(value) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    items = []
    for item in value:
        text = as_text(item)
        if text:
            items.append(text)
    return items


def as_optional_int(value) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def as_sub_score(value, default: int = 0) -> SubScore:
    # Accept both {"score": 80, "details": "..."} and a bare number.
    if isinstance(value, dict):
        return SubScore(
            score=clamp_score(value.get("score"), default),
            details=as_text(value.get("details") or value.get("summary")),
        )
    return SubScore(score=clamp_score(value, default))


def as_severity(value) -> str:
    text = as_text(value).lower()
    return text if text in SEVERITIES else "info"


def _line_range(item: dict) -> Tuple[Optional[int], Optional[int]]:
    raw = item.get("lineRange", item.get("line_range"))
    if isinstance(raw, (list, tuple)) and raw:
        start = as_optional_int(raw[0])
        end = as_optional_int(raw[1]) if len(raw) > 1 else start
        return start, end
    return as_optional_int(item.get("line")), as_optional_int(item.get("endLine", item.get("end_line")))


def as_issues(value) -> List[PlagiarismIssue]:
    if not isinstance(value, list):
        return []
    issues = []
    for item in value:
        if not isinstance(item, dict):
            continue
        description = as_text(item.get("description"))
        if not description:
            continue
        issues.append(PlagiarismIssue(
            description=description,
            severity=as_severity(item.get("severity")),
            line_range=_line_range(item),
            possible_source=as_text(item.get("possibleSource", item.get("possible_source"))),
        ))
    return issues


def extract_json_dict(text: str) -> dict | None:
    text = (text or "").strip()
    if not text:
        return None

    try:
        parsed = json.loads(text)
        return parsed if isinstance(parsed, dict) else None
    except ValueError:
        pass

    fenced = re.search(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```", text, re.IGNORECASE)
    if fenced:
        try:
            parsed = json.loads(fenced.group(1))
            return parsed if isinstance(parsed, dict) else None
        except ValueError:
            pass

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end != -1 and end > start:
        try:
            parsed = json.loads(text[start:end + 1])
            return parsed if isinstance(parsed, dict) else None
        except ValueError:
            return None

    return None


def pick(data: dict, *keys: str) -> Any:
    """Return the first present key; the model answers in camelCase or snake_case."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None
