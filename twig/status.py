from pathlib import Path
from pydantic import BaseModel
from .commit_helpers import get_commit_info
from .file_helpers import get_file_hash, list_working_files
from .models import RepoState

class StatusReport(BaseModel):
    current_branch: str
    branches: list[str]
    staged: list[str]
    removed: list[str]
    modified: list[str]
    deleted: list[str]
    untracked: list[str]

def collect_status(twig_root: Path, state: RepoState) -> StatusReport:
    head = get_commit_info(twig_root, state.branches.current_head())
    staging = state.staging
    working = {path: get_file_hash(twig_root / path) for path in list_working_files(twig_root)}

    modified, deleted = [], []
    for path, staged_hash in staging.added.items():
        if path not in working:
            deleted.append(path)
        elif working[path] != staged_hash:
            modified.append(path)
    for path, tracked_hash in head.files.items():
        if path in staging.added or path in staging.removed:
            continue
        if path not in working:
            deleted.append(path)
        elif working[path] != tracked_hash:
            modified.append(path)

    untracked = [
        path for path in working
        if path not in staging.added and (path not in head.files or path in staging.removed)
    ]
    return StatusReport(
        current_branch=state.branches.current,
        branches=state.branches.names(),
        staged=sorted(staging.added),
        removed=sorted(staging.removed),
        modified=sorted(modified),
        deleted=sorted(deleted),
        untracked=sorted(untracked),
    )
