"""Reconstruct Graphite branch stacks from gt output.

Two input modes:
- Structured: decoded `gt log --json` entries carrying parent links, PR
  metadata and flags. Produces a parent -> children forest partitioned into
  stacks by breadth-first traversal from each root.
- Text: free-form `gt state` output. Only branch names, the current branch
  and restack/submit hints can be recovered; all branches form one flat stack.

Both modes are pure functions over already-captured output.
"""

import logging
import re
from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sitrep.integrations.graphite.types import GraphiteBranch, GraphiteState, PrStatus

logger = logging.getLogger(__name__)

CURRENT_MARKERS = frozenset({"◉", "●"})
OTHER_MARKERS = frozenset({"○", "◐"})

_BRANCH_LINE_PATTERN = re.compile(
    "([" + "".join(sorted(CURRENT_MARKERS | OTHER_MARKERS)) + r"])\s+(\S+)"
)


@dataclass(frozen=True)
class _Entry:
    """One gt log entry before children are linked."""

    name: str
    parent: str | None
    is_current: bool
    needs_restack: bool
    needs_submit: bool
    pr_number: int | None
    pr_status: PrStatus | None
    pr_url: str | None
    commit_count: int


def map_pr_state(state: object, is_draft: object) -> PrStatus | None:
    """Map a gt PR state and draft flag onto a PrStatus.

    Returns None when there is no state. Unknown states are reported as open.
    """
    if not isinstance(state, str) or not state:
        return None
    if is_draft:
        return "draft"

    normalized = state.lower()
    if normalized == "merged":
        return "merged"
    if normalized == "closed":
        return "closed"
    return "open"


def _optional_str(value: object) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def _optional_int(value: object) -> int | None:
    # bool is an int subclass; a True PR number is not a PR number
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def _commit_count(entry: Mapping[str, Any]) -> int:
    count = _optional_int(entry.get("commitCount"))
    if count:
        return max(count, 0)
    commits = entry.get("commits")
    if isinstance(commits, list):
        return len(commits)
    return 0


def _parse_entry(raw: object) -> _Entry | None:
    if not isinstance(raw, Mapping):
        logger.debug("Skipping non-object gt log entry: %r", raw)
        return None

    name = _optional_str(raw.get("branch")) or _optional_str(raw.get("name"))
    if name is None:
        logger.debug("Skipping gt log entry without a branch name: %r", raw)
        return None

    parent = _optional_str(raw.get("parent"))
    if parent == name:
        # A self-parent would hide the branch from every root traversal
        parent = None

    pr = raw.get("pr")
    if not isinstance(pr, Mapping):
        pr = {}

    return _Entry(
        name=name,
        parent=parent,
        is_current=bool(raw.get("isCurrent") or raw.get("current")),
        needs_restack=bool(raw.get("needsRestack")),
        needs_submit=bool(raw.get("needsSubmit")),
        pr_number=_optional_int(pr.get("number")),
        pr_status=map_pr_state(pr.get("state"), pr.get("isDraft")),
        pr_url=_optional_str(pr.get("url")),
        commit_count=_commit_count(raw),
    )


def _is_root(branch: GraphiteBranch, branches: Mapping[str, GraphiteBranch], trunk: str) -> bool:
    return branch.parent is None or branch.parent == trunk or branch.parent not in branches


def _traverse(
    seed: str,
    branches: Mapping[str, GraphiteBranch],
    visited: set[str],
    roots: set[str],
) -> list[str]:
    stack: list[str] = []
    queue = deque([seed])
    while queue:
        name = queue.popleft()
        branch = branches.get(name)
        if branch is None or name in visited:
            continue
        visited.add(name)
        stack.append(name)
        # Children of a trunk entry are roots of their own stacks
        queue.extend(child for child in branch.children if child not in roots)
    return stack


def build_stacks(branches: Mapping[str, GraphiteBranch], trunk: str) -> list[list[str]]:
    """Partition a branch forest into stacks.

    Each root (no parent, parent is trunk, or parent unknown) seeds a
    breadth-first traversal over children. A global visited set guarantees
    every branch lands in exactly one stack; the first root to reach a
    branch keeps it. Stacks come out in root order, each root first. When the
    trunk itself is in the branch set it forms its own stack; traversal does
    not descend from it into branches that are roots.

    Branches no root can reach only exist when parent links form a cycle.
    They are swept into additional stacks in mapping order so the result
    still partitions the whole branch set.

    Args:
        branches: Branch name -> branch, in discovery order
        trunk: Trunk branch name

    Returns:
        List of stacks, each an ordered list of branch names
    """
    stacks: list[list[str]] = []
    visited: set[str] = set()

    roots = [name for name, branch in branches.items() if _is_root(branch, branches, trunk)]
    root_set = set(roots)
    for root in roots:
        if root in visited:
            continue
        stack = _traverse(root, branches, visited, root_set)
        if stack:
            stacks.append(stack)

    for name in branches:
        if name in visited:
            continue
        logger.debug("Branch %s is unreachable from any root (parent cycle)", name)
        stacks.append(_traverse(name, branches, visited, root_set))

    return stacks


def parse_gt_log_json(data: object, *, trunk: str) -> GraphiteState:
    """Reconstruct stacks from decoded `gt log --json` output.

    Args:
        data: Decoded JSON; anything but a list is treated as no branches
        trunk: Trunk branch name, also the current-branch sentinel when no
            entry is marked current

    Returns:
        GraphiteState with linked children and stacks
    """
    raw_entries = data if isinstance(data, list) else []

    entries: dict[str, _Entry] = {}
    for raw in raw_entries:
        entry = _parse_entry(raw)
        if entry is None:
            continue
        if entry.name in entries:
            logger.debug("Duplicate gt log entry for %s; keeping the later one", entry.name)
        entries[entry.name] = entry

    # Only the first entry marked current keeps the flag
    current_name = next((entry.name for entry in entries.values() if entry.is_current), None)

    children: dict[str, list[str]] = {name: [] for name in entries}
    for entry in entries.values():
        if entry.parent is not None and entry.parent in children:
            children[entry.parent].append(entry.name)

    branches = {
        name: GraphiteBranch(
            name=name,
            parent=entry.parent,
            children=children[name],
            is_current=name == current_name,
            needs_restack=entry.needs_restack,
            needs_submit=entry.needs_submit,
            pr_number=entry.pr_number,
            pr_status=entry.pr_status,
            pr_url=entry.pr_url,
            commit_count=entry.commit_count,
        )
        for name, entry in entries.items()
    }

    return GraphiteState(
        current_branch=current_name if current_name is not None else trunk,
        trunk=trunk,
        branches=list(branches.values()),
        stacks=build_stacks(branches, trunk),
    )


def parse_gt_state_text(text: str, *, trunk: str) -> GraphiteState:
    """Recover branches from free-form `gt state` / `gt log` text.

    A branch line contains a node glyph followed by whitespace and the branch
    name. Filled glyphs (◉ ●) mark the current branch; only the first such
    line counts, so at most one branch is current. needs_restack and
    needs_submit are set when "restack" / "submit" appears anywhere on the
    line, so a branch name or PR title containing those words also sets them.

    Parent links, PR metadata and commit counts are not recoverable from
    text; every recognized branch goes into a single stack in line order.
    """
    branches: list[GraphiteBranch] = []
    seen: set[str] = set()
    current_branch: str | None = None

    for line in text.splitlines():
        if not line.strip():
            continue
        match = _BRANCH_LINE_PATTERN.search(line)
        if match is None:
            continue

        marker, name = match.group(1), match.group(2)
        if name in seen:
            continue
        seen.add(name)

        is_current = marker in CURRENT_MARKERS and current_branch is None
        if is_current:
            current_branch = name

        branches.append(
            GraphiteBranch(
                name=name,
                is_current=is_current,
                needs_restack="restack" in line,
                needs_submit="submit" in line,
            )
        )

    return GraphiteState(
        current_branch=current_branch if current_branch is not None else trunk,
        trunk=trunk,
        branches=branches,
        stacks=[[branch.name for branch in branches]] if branches else [],
    )
