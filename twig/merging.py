from pathlib import Path
import logging
import time
from typing import Literal, TypeAlias
from pydantic import BaseModel, Field
from .errors import (
    BranchIsAncestor,
    DirtyWorkingState,
    NoChangesToCommit,
    NoSuchBranch,
    SelfMerge,
    UntrackedFileWouldBeOverwritten,
)
from .branching import update_branch_head
from .checkout import checkout_commit, checkout_commit_file, untracked_in_the_way
from .commit_helpers import create_commit, get_commit_info
from .file_helpers import get_blob, put_blob, write_working_file
from .graph_utils import ancestors, find_split_point
from .models import CommitInfo, RepoState
from .staging_helpers import stage_remove

logger = logging.getLogger(__name__)

FileAction: TypeAlias = Literal["take_other", "remove", "conflict"]

class MergeResult(BaseModel):
    status: Literal["merged", "fast_forwarded"]
    commit: str
    conflicts: list[str] = Field(default_factory=list)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)

def conflict_content(current: bytes | None, other: bytes | None) -> bytes:
    return b"<<<<<<< HEAD\n" + (current or b"") + b"=======\n" + (other or b"") + b">>>>>>>\n"

def classify_file(current: str | None, other: str | None, split: str | None) -> FileAction | None:
    """Decide what a three-way merge does with one path, given its blob hash on each side.

    None means the current side is kept as is.
    """
    if split is None and current is None and other is not None:
        return "take_other"
    if current == split and other != split:
        return "take_other" if other is not None else "remove"
    if other == split:
        return None
    if current == other:
        return None
    return "conflict"

def plan_merge(current_files: dict[str, str], other_files: dict[str, str], split_files: dict[str, str]) -> dict[str, FileAction]:
    plan = {}
    for path in sorted(current_files.keys() | other_files.keys() | split_files.keys()):
        action = classify_file(current_files.get(path), other_files.get(path), split_files.get(path))
        if action is not None:
            plan[path] = action
    return plan

def _fast_forward(twig_root: Path, state: RepoState, other_hash: str) -> MergeResult:
    checkout_commit(twig_root, state, other_hash)
    update_branch_head(state, state.branches.current, other_hash)
    return MergeResult(status="fast_forwarded", commit=other_hash)

def _apply_plan(twig_root: Path, state: RepoState, plan: dict[str, FileAction],
                current_commit: CommitInfo, other_commit: CommitInfo) -> list[str]:
    conflicts = []
    # removals first so a removed file never blocks a directory that is written
    for path, action in sorted(plan.items(), key=lambda item: item[1] != "remove"):
        if action == "take_other":
            checkout_commit_file(twig_root, other_commit, path)
            state.staging.stage_addition(path, other_commit.files[path])
        elif action == "remove":
            stage_remove(twig_root, state.staging, path, current_commit)
        else:
            current_hash = current_commit.files.get(path)
            other_hash = other_commit.files.get(path)
            content = conflict_content(
                get_blob(twig_root, current_hash) if current_hash else None,
                get_blob(twig_root, other_hash) if other_hash else None,
            )
            write_working_file(twig_root, path, content)
            state.staging.stage_addition(path, put_blob(twig_root, content))
            conflicts.append(path)
    return conflicts

def merge_branch(twig_root: Path, state: RepoState, branch_name: str, timestamp: int | None = None) -> MergeResult:
    if not state.staging.is_empty():
        raise DirtyWorkingState()
    if branch_name == state.branches.current:
        raise SelfMerge()
    if branch_name not in state.branches:
        raise NoSuchBranch()

    current_branch = state.branches.current
    current_hash = state.branches.current_head()
    other_hash = state.branches.head(branch_name)
    if current_hash == other_hash or other_hash in ancestors(twig_root, current_hash):
        raise BranchIsAncestor()
    if current_hash in ancestors(twig_root, other_hash):
        logger.info(f"fast-forwarding '{current_branch}' to {other_hash[:12]}")
        return _fast_forward(twig_root, state, other_hash)

    split_hash = find_split_point(twig_root, current_hash, other_hash)
    current_commit = get_commit_info(twig_root, current_hash)
    other_commit = get_commit_info(twig_root, other_hash)
    split_commit = get_commit_info(twig_root, split_hash)

    plan = plan_merge(current_commit.files, other_commit.files, split_commit.files)
    if not plan:
        raise NoChangesToCommit()
    written = [path for path, action in plan.items() if action != "remove"]
    removed = [path for path, action in plan.items() if action == "remove"]
    if untracked_in_the_way(twig_root, written, current_commit, state.staging, removed):
        raise UntrackedFileWouldBeOverwritten()

    conflicts = _apply_plan(twig_root, state, plan, current_commit, other_commit)
    merge_commit = create_commit(
        twig_root,
        [current_hash, other_hash],
        f"Merged {branch_name} into {current_branch}.",
        int(time.time()) if timestamp is None else timestamp,
        state.staging.snapshot(current_commit.files),
    )
    update_branch_head(state, current_branch, merge_commit.hash)
    state.staging.clear()
    if conflicts:
        logger.warning(f"merge of '{branch_name}' left conflicts in {len(conflicts)} files")
    return MergeResult(status="merged", commit=merge_commit.hash, conflicts=conflicts)
