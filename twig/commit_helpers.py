import json
from pathlib import Path
import hashlib
import logging
import string
from pydantic import ValidationError
from .errors import AmbiguousCommitId, MalformedCommit, NoSuchCommit, TwigError
from .models import CommitInfo

logger = logging.getLogger(__name__)

def get_commits_dir(twig_root: Path) -> Path:
    return twig_root / ".twig" / "commits"

def get_commit_path(twig_root: Path, commit_hash: str) -> Path:
    return get_commits_dir(twig_root) / f"{commit_hash}.json"

def compute_commit_hash(parents: list[str], message: str, timestamp: int, files: dict[str, str]) -> str:
    """Hash the full logical content of a commit.

    Parents, message, timestamp and the file snapshot all feed the digest, so
    equal content always yields the same id and any change yields a new one.
    """
    payload = json.dumps(
        {
            "parentCommits": list(parents),
            "commitMessage": message,
            "timestamp": timestamp,
            "files": files,
        },
        sort_keys=True,
        separators=(",", ":"),
    )
    return hashlib.sha256(payload.encode()).hexdigest()

def create_commit(twig_root: Path, parents: list[str], message: str, timestamp: int, files: dict[str, str]) -> CommitInfo:
    if len(parents) > 2:
        raise MalformedCommit()
    commit_hash = compute_commit_hash(parents, message, timestamp, files)
    info = CommitInfo(
        hash=commit_hash,
        commitMessage=message,
        timestamp=timestamp,
        parentCommits=list(parents),
        files=dict(files),
    )
    update_commit_info(twig_root, info)
    return info

def update_commit_info(twig_root: Path, info: CommitInfo) -> None:
    commit_path = get_commit_path(twig_root, info.hash)
    if commit_path.exists():
        return
    tmp_path = commit_path.with_name(f"{info.hash}.tmp")
    tmp_path.write_text(info.model_dump_json(indent=4))
    tmp_path.replace(commit_path)
    logger.debug(f"wrote commit {info.hash[:12]} with {len(info.files)} files")

def get_commit_info(twig_root: Path, commit_hash: str) -> CommitInfo:
    commit_path = get_commit_path(twig_root, commit_hash)
    if not commit_path.exists():
        raise NoSuchCommit()
    try:
        return CommitInfo.model_validate_json(commit_path.read_text())
    except ValidationError as e:
        raise TwigError(f"Commit {commit_hash} is corrupt: {e}") from e

def all_commit_hashes(twig_root: Path) -> list[str]:
    return sorted(path.stem for path in get_commits_dir(twig_root).glob("*.json"))

def all_commits(twig_root: Path) -> list[CommitInfo]:
    return [get_commit_info(twig_root, commit_hash) for commit_hash in all_commit_hashes(twig_root)]

def resolve_commit(twig_root: Path, id_or_prefix: str) -> CommitInfo:
    if not id_or_prefix or not all(c in string.hexdigits for c in id_or_prefix):
        raise NoSuchCommit()
    id_or_prefix = id_or_prefix.lower()
    if get_commit_path(twig_root, id_or_prefix).exists():
        return get_commit_info(twig_root, id_or_prefix)
    matches = [h for h in all_commit_hashes(twig_root) if h.startswith(id_or_prefix)]
    if not matches:
        raise NoSuchCommit()
    if len(matches) > 1:
        raise AmbiguousCommitId(f"Commit id prefix '{id_or_prefix}' matches {len(matches)} commits.")
    return get_commit_info(twig_root, matches[0])

def first_parent(info: CommitInfo) -> str | None:
    return info.parentCommits[0] if info.parentCommits else None

def second_parent(info: CommitInfo) -> str | None:
    return info.parentCommits[1] if len(info.parentCommits) > 1 else None
