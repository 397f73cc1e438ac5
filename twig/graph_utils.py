from pathlib import Path
from collections import deque
from typing import Iterator
import logging

from .errors import NoSplitPoint
from .commit_helpers import first_parent, get_commit_info
from .models import CommitInfo

logger = logging.getLogger(__name__)

def ancestors(twig_root: Path, commit_hash: str) -> set[str]:
    """Every commit reachable from commit_hash through any parent, itself included."""
    seen = {commit_hash}
    queue = deque([commit_hash])
    while queue:
        commit_info = get_commit_info(twig_root, queue.popleft())
        for parent_hash in commit_info.parentCommits:
            if parent_hash not in seen:
                seen.add(parent_hash)
                queue.append(parent_hash)
    logger.debug(f"{commit_hash[:12]} has {len(seen)} ancestors")
    return seen

def first_parent_history(twig_root: Path, commit_hash: str) -> Iterator[CommitInfo]:
    current: str | None = commit_hash
    while current is not None:
        commit_info = get_commit_info(twig_root, current)
        yield commit_info
        current = first_parent(commit_info)

def _expand(twig_root: Path, frontier: list[str], seen: dict[str, int]) -> list[str]:
    discovered = []
    for commit_hash in frontier:
        for parent_hash in get_commit_info(twig_root, commit_hash).parentCommits:
            if parent_hash not in seen:
                seen[parent_hash] = len(seen)
                discovered.append(parent_hash)
    return discovered

def find_split_point(twig_root: Path, current_hash: str, other_hash: str) -> str:
    """Return the split point (latest common ancestor) of two commits.

    Both heads are walked outward one hop per round over every parent. The
    first commit seen from both sides wins; when a round produces several,
    the one discovered earliest from the current side is chosen, then the
    lowest id.
    """
    current_seen = {current_hash: 0}
    other_seen = {other_hash: 0}
    current_frontier = [current_hash]
    other_frontier = [other_hash]
    new_commits = [current_hash, other_hash]
    while True:
        common = {h for h in new_commits if h in current_seen and h in other_seen}
        if common:
            split = min(common, key=lambda h: (current_seen[h], h))
            logger.debug(f"split point of {current_hash[:12]} and {other_hash[:12]} is {split[:12]}")
            return split
        if not current_frontier and not other_frontier:
            raise NoSplitPoint()
        current_frontier = _expand(twig_root, current_frontier, current_seen)
        other_frontier = _expand(twig_root, other_frontier, other_seen)
        new_commits = current_frontier + other_frontier
