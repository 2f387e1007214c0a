from __future__ import annotations

import logging
import re

from app.core.errors import MalformedResponseError

from .models import ChangeItem, EnhancementResult

logger = logging.getLogger(__name__)

_CHANGE_FIELDS = ("item", "description", "reason")
_FIELD_LINE_RE = re.compile(r"^[\s\-*•]*(item|description|reason)\s*:(.*)$", re.IGNORECASE)
# A separator is a line made only of dashes, or dashes trailing a line right
# before the next "item:". Other inline "---" is a LaTeX em dash.
_SEPARATOR_RE = re.compile(
    r"^\s*-{3,}\s*$|[ \t]+-{3,}[ \t]*\n(?=[ \t\-*•]*item\s*:)",
    re.MULTILINE | re.IGNORECASE,
)
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")
_FENCE_RE = re.compile(r"^\s*```[\w-]*\s*\n(.*?)\n?\s*```\s*$", re.DOTALL)

_tag_patterns: dict[str, re.Pattern[str]] = {}


def _tag_pattern(tag: str) -> re.Pattern[str]:
    pattern = _tag_patterns.get(tag)
    if pattern is None:
        pattern = re.compile(
            rf"<\s*{tag}\s*>(.*?)<\s*/\s*{tag}\s*>",
            re.IGNORECASE | re.DOTALL,
        )
        _tag_patterns[tag] = pattern
    return pattern


def extract_tag(tag: str, text: str) -> str | None:
    """Return the stripped body of the first ``<tag>...</tag>`` span, or None."""
    match = _tag_pattern(tag).search(text)
    if not match:
        return None
    return match.group(1).strip()


def _strip_code_fence(text: str) -> str:
    match = _FENCE_RE.match(text)
    return match.group(1) if match else text


def _parse_score(raw: str | None) -> int:
    if raw is None:
        logger.warning("match_score_missing defaulting=0")
        return 0
    match = _LEADING_INT_RE.match(raw)
    if not match:
        logger.warning("match_score_unparsable raw=%r defaulting=0", raw[:40])
        return 0
    value = int(match.group(1))
    if not 0 <= value <= 100:
        logger.warning("match_score_out_of_range value=%s", value)
    return max(0, min(100, value))


def _parse_change_chunk(chunk: str) -> ChangeItem | None:
    fields: dict[str, str] = {}
    for line in chunk.splitlines():
        match = _FIELD_LINE_RE.match(line)
        if not match:
            continue
        name = match.group(1).lower()
        if name in fields:
            logger.info("change_item_field_discarded field=%s", name)
            continue
        fields[name] = match.group(2).strip()
    if not all(fields.get(name) for name in _CHANGE_FIELDS):
        return None
    return ChangeItem(**{name: fields[name] for name in _CHANGE_FIELDS})


def parse_change_items(span: str | None) -> list[ChangeItem]:
    """Split a ``---`` separated list; chunks missing any field are dropped."""
    if not span:
        return []
    items: list[ChangeItem] = []
    dropped = 0
    for chunk in _SEPARATOR_RE.split(span):
        if not chunk.strip():
            continue
        parsed = _parse_change_chunk(chunk)
        if parsed is None:
            dropped += 1
            continue
        items.append(parsed)
    if dropped:
        logger.info("change_items_dropped count=%s kept=%s", dropped, len(items))
    return items


def parse_enhancement_reply(text: str) -> EnhancementResult:
    """Turn a marker-delimited model reply into an ``EnhancementResult``.

    Only a missing ``<analysis>`` block is fatal. Every other field is
    extracted on its own and degrades to an empty value (score 0, empty
    lists) so one malformed field does not discard the whole reply. The
    change lists are searched anywhere inside ``<analysis>``, which covers
    both the nested ``<summary_of_changes>`` layout and lists emitted
    directly under ``<analysis>``.
    """
    body = _strip_code_fence((text or "").strip())

    rewritten = extract_tag("rewritten_resume", body) or ""

    analysis = extract_tag("analysis", body)
    if analysis is None:
        raise MalformedResponseError("missing analysis section")

    scope = extract_tag("summary_of_changes", analysis)
    if scope is None:
        scope = analysis
    enhanced_span = extract_tag("enhanced_parts", scope)
    if enhanced_span is None and scope is not analysis:
        enhanced_span = extract_tag("enhanced_parts", analysis)
    removed_span = extract_tag("removed_parts", scope)
    if removed_span is None and scope is not analysis:
        removed_span = extract_tag("removed_parts", analysis)

    return EnhancementResult(
        rewritten_resume=rewritten,
        match_score=_parse_score(extract_tag("match_score", analysis)),
        match_score_explanation=extract_tag("match_score_explanation", analysis) or "",
        enhanced_parts=parse_change_items(enhanced_span),
        removed_parts=parse_change_items(removed_span),
    )


def _render_items(items: list[ChangeItem]) -> str:
    return "\n---\n".join(
        f"item: {entry.item}\ndescription: {entry.description}\nreason: {entry.reason}"
        for entry in items
    )


def render_enhancement_reply(result: EnhancementResult) -> str:
    """Serialize a result back into the canonical marker grammar."""
    return (
        f"<rewritten_resume>\n{result.rewritten_resume}\n</rewritten_resume>\n"
        "<analysis>\n"
        f"<match_score>{result.match_score}</match_score>\n"
        f"<match_score_explanation>{result.match_score_explanation}</match_score_explanation>\n"
        "<summary_of_changes>\n"
        f"<enhanced_parts>\n{_render_items(result.enhanced_parts)}\n</enhanced_parts>\n"
        f"<removed_parts>\n{_render_items(result.removed_parts)}\n</removed_parts>\n"
        "</summary_of_changes>\n"
        "</analysis>\n"
    )
