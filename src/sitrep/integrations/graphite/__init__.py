"""Graphite (gt) branch and stack reconstruction."""

from sitrep.integrations.graphite.parsing import (
    build_stacks,
    map_pr_state,
    parse_gt_log_json,
    parse_gt_state_text,
)
from sitrep.integrations.graphite.types import (
    GraphiteBranch,
    GraphiteData,
    GraphiteState,
    PrStatus,
)

__all__ = [
    "GraphiteBranch",
    "GraphiteData",
    "GraphiteState",
    "PrStatus",
    "build_stacks",
    "map_pr_state",
    "parse_gt_log_json",
    "parse_gt_state_text",
]
