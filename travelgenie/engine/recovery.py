"""Recovery of a plan tree from the generator's raw text.

Generated text is cut at an arbitrary token boundary, not at a
structural one. Recovery therefore runs escalating tiers, each one
trading completeness for validity:

1. direct parse (after stripping markdown fences), then a lenient
   parse with trailing commas removed
2. cut after the last whole day, i.e. the last day whose
   ``daily_budget_breakdown`` object is complete
3. cut after the last whole event (last complete ``category`` pair),
   then close that day with a zeroed budget breakdown
4. cut at the last closing brace anywhere and close what is still open

Every candidate is parsed before escalating. All scanning is aware of
JSON string literals, so braces inside text values are ignored.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from ..diagnostics import DiagnosticRecorder
from ..domain.errors import RecoveryError
from ..domain.models import RawPlan, RecoveryTier

logger = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r"^\s*```[a-zA-Z]*[ \t]*\r?\n?")
_FENCE_CLOSE = re.compile(r"\r?\n?```\s*$")
_BUDGET_KEY = re.compile(r'"daily_budget_breakdown"\s*:\s*\{')
_CATEGORY_PAIR = re.compile(r'"category"\s*:\s*"(?:[^"\\]|\\.)*"')
_DAYS_MARKER = re.compile(r'"days"\s*:\s*\[')
_DAY_HEADER = re.compile(r'"day_number"\s*:')

ZERO_BUDGET = {
    "activities": "$0",
    "meals": "$0",
    "transportation": "$0",
    "total": "$0",
}

_CLOSER = {"{": "}", "[": "]"}


@dataclass(frozen=True)
class _Candidate:
    tier: RecoveryTier
    text: str
    details: Dict[str, Any] = field(default_factory=dict)


def strip_fences(text: str) -> str:
    """Remove a leading/trailing markdown code fence and surrounding space."""
    cleaned = text.strip()
    cleaned = _FENCE_OPEN.sub("", cleaned, count=1)
    cleaned = _FENCE_CLOSE.sub("", cleaned, count=1)
    return cleaned.strip()


def _structural(text: str, start: int = 0) -> Iterator[Tuple[int, str]]:
    """Yield (index, char) for every character outside string literals.

    ``start`` must not fall inside a string literal.
    """
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
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
            continue
        yield index, char


def _open_stack(text: str) -> List[Tuple[str, int]]:
    """Return the still-open brackets of ``text`` as (char, index) pairs."""
    stack: List[Tuple[str, int]] = []
    for index, char in _structural(text):
        if char in "{[":
            stack.append((char, index))
        elif char in "}]" and stack:
            stack.pop()
    return stack


def _closers(stack: List[Tuple[str, int]]) -> str:
    return "".join(_CLOSER[char] for char, _ in reversed(stack))


def _matching_close(text: str, open_index: int) -> Optional[int]:
    """Index of the brace closing the one at ``open_index``, if present."""
    depth = 0
    for index, char in _structural(text, open_index):
        if char in "{[":
            depth += 1
        elif char in "}]":
            depth -= 1
            if depth == 0:
                return index
    return None


def _enclosing_close(text: str, start: int) -> Optional[int]:
    """First closing brace after ``start`` not matched by an opening one."""
    depth = 0
    for index, char in _structural(text, start):
        if char in "{[":
            depth += 1
        elif char == "]":
            depth -= 1
        elif char == "}":
            if depth == 0:
                return index
            depth -= 1
    return None


def _strip_trailing_comma(text: str) -> str:
    return text.rstrip().rstrip(",").rstrip()


def remove_trailing_commas(text: str) -> str:
    """Drop commas directly followed by a closing brace or bracket."""
    out: List[str] = []
    last = 0
    for index, char in _structural(text):
        if char != ",":
            continue
        rest = text[index + 1 :].lstrip()
        if rest[:1] in ("}", "]"):
            out.append(text[last:index])
            last = index + 1
    out.append(text[last:])
    return "".join(out)


def _looks_truncated(text: str) -> bool:
    return not text.endswith("}") or bool(_open_stack(text))


def _cut_at_last_brace(text: str) -> Optional[str]:
    last = text.rfind("}")
    return text[: last + 1] if last >= 0 else None


def _whole_days(text: str) -> Optional[_Candidate]:
    """Keep everything up to the end of the last day with a complete budget."""
    budget_ends = [
        end
        for match in _BUDGET_KEY.finditer(text)
        if (end := _matching_close(text, match.end() - 1)) is not None
    ]
    if not budget_ends:
        return None

    last_budget = budget_ends[-1]
    day_close = _enclosing_close(text, last_budget + 1)
    truncated = text[: (day_close if day_close is not None else last_budget) + 1]

    if not _DAYS_MARKER.search(truncated):
        fallback = _cut_at_last_brace(text)
        if fallback is None:
            return None
        return _Candidate(RecoveryTier.WHOLE_DAYS, fallback, {"days_marker": False})

    body = _strip_trailing_comma(truncated)
    return _Candidate(
        RecoveryTier.WHOLE_DAYS,
        body + _closers(_open_stack(body)),
        {
            "days_marker": True,
            "complete_days": len(_DAY_HEADER.findall(body)),
            "dropped_chars": len(text) - len(truncated),
        },
    )


def _whole_events(text: str) -> Optional[_Candidate]:
    """Keep the events seen so far and close their day with a zero budget."""
    for pair in reversed(list(_CATEGORY_PAIR.finditer(text))):
        event_close = _enclosing_close(text, pair.end())
        if event_close is None:
            continue

        headers = [h for h in _DAY_HEADER.finditer(text, 0, pair.start())]
        if not headers:
            return None
        header_at = headers[-1].start()

        body = text[: event_close + 1]
        stack = _open_stack(body)
        day_level = None
        for level, (char, index) in enumerate(stack):
            if char == "{" and index < header_at:
                day_level = level
        if day_level is None:
            return None

        closed = (
            body
            + _closers(stack[day_level + 1 :])
            + ', "daily_budget_breakdown": '
            + json.dumps(ZERO_BUDGET)
            + _closers(stack[: day_level + 1])
        )
        return _Candidate(
            RecoveryTier.WHOLE_EVENTS,
            closed,
            {"day_headers": len(headers), "dropped_chars": len(text) - len(body)},
        )
    return None


def _last_brace(text: str) -> Optional[_Candidate]:
    """Cut at the last closing brace and close whatever is still open."""
    cut = _cut_at_last_brace(text)
    if cut is None:
        return None
    body = _strip_trailing_comma(cut)
    return _Candidate(RecoveryTier.LAST_BRACE, body + _closers(_open_stack(body)))


_TRUNCATION_TIERS: Tuple[Callable[[str], Optional[_Candidate]], ...] = (
    _whole_days,
    _whole_events,
    _last_brace,
)


def _parse(text: str) -> Tuple[bool, Any]:
    try:
        return True, json.loads(text)
    except json.JSONDecodeError:
        return False, None


def recover(raw_text: str) -> RawPlan:
    """Recover a plan tree from possibly fenced, possibly truncated text.

    Args:
        raw_text: The generator's output, expected to hold one JSON object.

    Returns:
        RawPlan with the parsed object and the tier that produced it.

    Raises:
        RecoveryError: If no tier yields a parseable JSON object.
    """
    recorder = DiagnosticRecorder("recovery", logger)
    text = strip_fences(raw_text or "")

    candidates: List[_Candidate] = [_Candidate(RecoveryTier.DIRECT, text)]

    # Prose before the object ("Here is your plan: {...")
    first_brace = text.find("{")
    if first_brace > 0:
        text = text[first_brace:]
    lenient = remove_trailing_commas(text)
    if lenient != candidates[0].text:
        candidates.append(_Candidate(RecoveryTier.LENIENT, lenient))

    for candidate in candidates:
        ok, data = _parse(candidate.text)
        if ok:
            return _accept(raw_text, candidate, data, recorder)

    last_attempt = candidates[-1].text
    if text and _looks_truncated(text):
        recorder.info("Payload looks truncated, trying recovery tiers", length=len(text))
        for tier in _TRUNCATION_TIERS:
            candidate = tier(text)
            if candidate is None:
                continue
            for attempt in dict.fromkeys((candidate.text, remove_trailing_commas(candidate.text))):
                last_attempt = attempt
                ok, data = _parse(attempt)
                if ok:
                    return _accept(raw_text, _Candidate(candidate.tier, attempt, candidate.details), data, recorder)
            recorder.debug("Recovery tier produced unparseable text", tier=candidate.tier.value)

    logger.error(
        "Plan payload is unparseable after all recovery tiers",
        extra={"raw_length": len(raw_text or ""), "cleaned_length": len(last_attempt)},
    )
    raise RecoveryError(
        "Failed to recover a valid itinerary from the generated text",
        raw_text=raw_text or "",
        cleaned_text=last_attempt,
    )


def _accept(raw_text: str, candidate: _Candidate, data: Any, recorder: DiagnosticRecorder) -> RawPlan:
    if not isinstance(data, dict):
        raise RecoveryError(
            f"Generated payload is a JSON {type(data).__name__}, not an object",
            raw_text=raw_text,
            cleaned_text=candidate.text,
        )
    if candidate.tier in (RecoveryTier.DIRECT, RecoveryTier.LENIENT):
        recorder.debug("Plan parsed", tier=candidate.tier.value)
    else:
        recorder.warning(
            "Plan recovered from truncated payload",
            tier=candidate.tier.value,
            **candidate.details,
        )
    return RawPlan(
        data=data,
        tier=candidate.tier,
        cleaned_text=candidate.text,
        diagnostics=recorder.collected(),
    )
