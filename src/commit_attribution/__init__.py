"""
Commit Attribution - who (or what) wrote the commits

Classifies commits and pull requests as human, AI-assisted or automated,
aggregates the results per tool and bot, and keeps weekly and daily
statistics per repository and across all synced repositories.
"""

__version__ = "0.1.0"

from .classification import (
    AttributionSignal,
    AttributionSummary,
    Classification,
    aggregate,
    classify_commit,
    map_signal,
)
from .persistence import StatsDB, recompute_global_stats
from .ranks import get_rank
from .temporal import week_label, week_start

__all__ = [
    "Classification",
    "AttributionSignal",
    "AttributionSummary",
    "map_signal",  # PR signal -> tool/bot identity
    "aggregate",  # signals -> summary
    "classify_commit",
    "week_start",
    "week_label",
    "get_rank",
    "StatsDB",
    "recompute_global_stats",
]
