from pydantic import BaseModel, Field
from .errors import (
    BranchExists,
    CannotRemoveCurrentBranch,
    NoSuchBranch,
)

STATE_SCHEMA_VERSION = 1
DEFAULT_BRANCH = "master"

class CommitInfo(BaseModel):
    hash: str
    commitMessage: str
    timestamp: int
    parentCommits: list[str]
    files: dict[str, str]   # path -> blob hash

class Branch(BaseModel):
    name: str
    root: str   # commit the branch was created at
    head: str

class BranchTable(BaseModel):
    current: str
    branches: dict[str, Branch] = Field(default_factory=dict)

    def _get(self, name: str) -> Branch:
        if name not in self.branches:
            raise NoSuchBranch()
        return self.branches[name]

    def create(self, name: str, at_commit: str) -> Branch:
        if name in self.branches:
            raise BranchExists()
        branch = Branch(name=name, root=at_commit, head=at_commit)
        self.branches[name] = branch
        return branch

    def remove(self, name: str) -> None:
        self._get(name)
        if name == self.current:
            raise CannotRemoveCurrentBranch()
        del self.branches[name]

    def set_head(self, name: str, commit_hash: str) -> None:
        self._get(name).head = commit_hash

    def head(self, name: str) -> str:
        return self._get(name).head

    def switch_to(self, name: str) -> None:
        self._get(name)
        self.current = name

    def current_head(self) -> str:
        return self.head(self.current)

    def names(self) -> list[str]:
        return sorted(self.branches)

    def __contains__(self, name: str) -> bool:
        return name in self.branches

class StagingArea(BaseModel):
    added: dict[str, str] = Field(default_factory=dict)     # path -> blob hash of pending content
    removed: dict[str, str] = Field(default_factory=dict)   # path -> blob hash of last known content

    def is_empty(self) -> bool:
        return not self.added and not self.removed

    def clear(self) -> None:
        self.added.clear()
        self.removed.clear()

    def stage_addition(self, path: str, blob_hash: str) -> None:
        self.removed.pop(path, None)
        self.added[path] = blob_hash

    def stage_removal(self, path: str, blob_hash: str) -> None:
        self.added.pop(path, None)
        self.removed[path] = blob_hash

    def unstage(self, path: str) -> None:
        self.added.pop(path, None)
        self.removed.pop(path, None)

    def snapshot(self, parent_files: dict[str, str]) -> dict[str, str]:
        files = dict(parent_files)
        files.update(self.added)
        for path in self.removed:
            files.pop(path, None)
        return files

class RepoState(BaseModel):
    schemaVersion: int = STATE_SCHEMA_VERSION
    branches: BranchTable
    staging: StagingArea = Field(default_factory=StagingArea)
