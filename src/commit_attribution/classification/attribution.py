"""PR-level attribution: signal classification and aggregation.

``map_signal`` resolves one signal to a tool/bot identity; ``aggregate``
folds many count-bearing signals into an ``AttributionSummary``. Both are
pure and never raise on dirty input: signals that cannot be attributed, or
that carry a non-positive or non-finite commit count, are left out.
"""

from __future__ import annotations

import math
import time
from numbers import Real
from typing import Iterable, Optional

from .models import (
    LANE_AI,
    LANE_AUTOMATION,
    AggregateInput,
    AttributionMatch,
    AttributionSignal,
    AttributionSummary,
    BreakdownItem,
)
from .registry import (
    AI_ASSISTED_PATTERNS,
    AUTOMATION_PATTERNS,
    FIXED_CLASSIFICATION_MATCH,
    UNKNOWN_AI_MATCH,
    UNKNOWN_AUTOMATION_MATCH,
    PatternRule,
    find_pattern_match,
)
from .taxonomy import Classification


def build_haystack(signal: AttributionSignal) -> str:
    """Join login, branch, body and labels (empty parts skipped) with newlines."""
    parts = [signal.login, signal.branch, signal.body, *signal.labels]
    return "\n".join(part for part in parts if part)


def _refine(
    signal: AttributionSignal,
    patterns: tuple[PatternRule, ...],
    lane: str,
    fallback: AttributionMatch,
) -> AttributionMatch:
    rule = find_pattern_match(build_haystack(signal), patterns)
    if rule is None:
        return fallback
    return AttributionMatch(rule.key, rule.label, lane)  # type: ignore[arg-type]


def map_signal(signal: AttributionSignal) -> Optional[AttributionMatch]:
    """Resolve *signal* to a specific tool or bot identity.

    Returns ``None`` for human signals and for unrecognised classifications.
    Generic ``ai-assisted`` / ``other-bot`` signals that match no pattern
    resolve to the lane's "unknown" bucket.
    """
    classification = signal.classification
    if classification == Classification.HUMAN.value:
        return None

    fixed = FIXED_CLASSIFICATION_MATCH.get(classification)
    if fixed is not None:
        return fixed

    if classification == Classification.AI_ASSISTED.value:
        return _refine(signal, AI_ASSISTED_PATTERNS, LANE_AI, UNKNOWN_AI_MATCH)

    if classification == Classification.OTHER_BOT.value:
        return _refine(signal, AUTOMATION_PATTERNS, LANE_AUTOMATION, UNKNOWN_AUTOMATION_MATCH)

    return None


def _breakdown_order(entry: BreakdownItem) -> tuple:
    # Case-insensitive label order first; key keeps equal labels deterministic.
    return (-entry.commits, entry.label.casefold(), entry.label, entry.key)


def is_valid_commit_count(value: object) -> bool:
    """True for positive, finite real numbers (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return math.isfinite(value) and value > 0


def aggregate(
    inputs: Iterable[AggregateInput], computed_at: Optional[int] = None
) -> AttributionSummary:
    """Fold count-bearing signals into totals and a sorted breakdown.

    Args:
        inputs: Signals with their ``commit_count``.
        computed_at: Epoch milliseconds stamped on the result. Defaults to now.

    Returns:
        Summary whose breakdown is sorted by commits descending, then label
        ascending, so the result does not depend on input order.
    """
    if computed_at is None:
        computed_at = int(time.time() * 1000)

    total = 0
    ai = 0
    automation = 0
    by_key: dict[str, BreakdownItem] = {}

    for item in inputs:
        count = item.commit_count
        if not is_valid_commit_count(count):
            continue
        match = map_signal(item)
        if match is None:
            continue

        total += count
        if match.lane == LANE_AI:
            ai += count
        else:
            automation += count

        entry = by_key.get(match.key)
        if entry is None:
            by_key[match.key] = BreakdownItem(match.key, match.label, match.lane, count)
        else:
            entry.commits += count

    breakdown = sorted(by_key.values(), key=_breakdown_order)

    return AttributionSummary(
        total_commits=total,
        ai_commits=ai,
        automation_commits=automation,
        breakdown=breakdown,
        computed_at=computed_at,
    )
