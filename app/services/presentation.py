from __future__ import annotations

from app.parsing.models import EnhancementResult
from app.schemas.enhance import ChangeSummaryView, EnhancementView


def to_view(result: EnhancementResult) -> EnhancementView:
    """Map a parsed result onto the state the editor page renders."""
    return EnhancementView(
        latex=result.rewritten_resume,
        match_score=result.match_score,
        match_score_explanation=result.match_score_explanation,
        summary=ChangeSummaryView(
            enhanced_parts=list(result.enhanced_parts),
            removed_parts=list(result.removed_parts),
        ),
        has_changes=bool(result.enhanced_parts or result.removed_parts),
    )
