from pathlib import Path
import logging
from .errors import AlreadyOnBranch, FileNotInCommit, UntrackedFileWouldBeOverwritten
from .branching import update_branch_head
from .commit_helpers import get_commit_info, resolve_commit
from .file_helpers import (
    delete_working_file,
    get_blob,
    list_working_files,
    write_working_file,
)
from .models import CommitInfo, RepoState, StagingArea

logger = logging.getLogger(__name__)

def is_tracked(path: str, head_commit: CommitInfo, staging: StagingArea) -> bool:
    return path in head_commit.files or path in staging.added or path in staging.removed

def parent_dirs(path: str) -> list[str]:
    parts = path.split("/")
    return ["/".join(parts[:i]) for i in range(1, len(parts))]

def untracked_in_the_way(twig_root: Path, paths, head_commit: CommitInfo, staging: StagingArea, deleted=()) -> list[str]:
    """Working-tree entries that would be clobbered, or would block a write, if paths were written.

    That is an untracked file at one of the paths, a surviving file standing where
    a path needs a directory, or a surviving directory standing where a path needs
    a file. Files in deleted are removed before anything is written.
    """
    paths = set(paths)
    deleted = set(deleted)
    needed_dirs = {parent for path in paths for parent in parent_dirs(path)}
    in_the_way = []
    for name in list_working_files(twig_root):
        if name in deleted:
            continue
        if name in paths:
            if not is_tracked(name, head_commit, staging):
                in_the_way.append(name)
        elif name in needed_dirs or any(parent in paths for parent in parent_dirs(name)):
            in_the_way.append(name)
    # directories holding no surviving files, which deletion will not prune
    deleted_dirs = {parent for path in deleted for parent in parent_dirs(path)}
    for path in sorted(paths):
        if (twig_root / path).is_dir() and path not in deleted_dirs and path not in in_the_way:
            in_the_way.append(path)
    return in_the_way

def checkout_commit_file(twig_root: Path, commit_info: CommitInfo, path: str) -> None:
    if path not in commit_info.files:
        raise FileNotInCommit()
    write_working_file(twig_root, path, get_blob(twig_root, commit_info.files[path]))

def checkout_commit(twig_root: Path, state: RepoState, target_hash: str) -> CommitInfo:
    """Replace the working tree with the snapshot of target_hash.

    Fails before touching any file if an untracked file would be overwritten.
    Clears the staging area; moving branch pointers is left to the caller.
    """
    old_commit = get_commit_info(twig_root, state.branches.current_head())
    target = get_commit_info(twig_root, target_hash)
    deleted = [path for path in old_commit.files if path not in target.files]
    if untracked_in_the_way(twig_root, target.files, old_commit, state.staging, deleted):
        raise UntrackedFileWouldBeOverwritten()

    for path in deleted:
        delete_working_file(twig_root, path)
    for path in target.files:
        checkout_commit_file(twig_root, target, path)
    state.staging.clear()
    logger.debug(f"checked out {target.hash[:12]} ({len(target.files)} files)")
    return target

def checkout_branch(twig_root: Path, state: RepoState, branch_name: str) -> None:
    target_hash = state.branches.head(branch_name)
    if branch_name == state.branches.current:
        raise AlreadyOnBranch()
    checkout_commit(twig_root, state, target_hash)
    state.branches.switch_to(branch_name)
    logger.info(f"switched to branch '{branch_name}'")

def reset(twig_root: Path, state: RepoState, id_or_prefix: str) -> CommitInfo:
    target = resolve_commit(twig_root, id_or_prefix)
    checkout_commit(twig_root, state, target.hash)
    update_branch_head(state, state.branches.current, target.hash)
    return target
