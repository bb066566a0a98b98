"""Commit classification: taxonomy, pattern registry, attribution and detectors."""

from .attribution import aggregate, build_haystack, map_signal
from .breakdown import BreakdownCommit, DetailedBreakdowns, build_detailed_breakdowns
from .detector import ClassificationResult, CommitPayload, classify_commit
from .models import (
    AggregateInput,
    AttributionMatch,
    AttributionSignal,
    AttributionSummary,
    BreakdownItem,
)
from .pr_classifier import PullRequest, Reclassification, classify_pr_author, plan_reclassifications
from .taxonomy import Category, Classification, can_reclassify, parse_classification

__all__ = [
    "Classification",
    "Category",
    "parse_classification",
    "can_reclassify",
    "AttributionSignal",
    "AggregateInput",
    "AttributionMatch",
    "AttributionSummary",
    "BreakdownItem",
    "map_signal",
    "aggregate",
    "build_haystack",
    "CommitPayload",
    "ClassificationResult",
    "classify_commit",
    "PullRequest",
    "Reclassification",
    "classify_pr_author",
    "plan_reclassifications",
    "BreakdownCommit",
    "DetailedBreakdowns",
    "build_detailed_breakdowns",
]
