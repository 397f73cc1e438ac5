import logging
from .models import Branch, RepoState

logger = logging.getLogger(__name__)

def create_branch(state: RepoState, branch_name: str) -> Branch:
    """Create a branch whose root and head are the current head commit."""
    branch = state.branches.create(branch_name, state.branches.current_head())
    logger.info(f"created branch '{branch_name}' at {branch.head[:12]}")
    return branch

def update_branch_head(state: RepoState, branch_name: str, new_commit_hash: str) -> None:
    state.branches.set_head(branch_name, new_commit_hash)
    logger.info(f"moved branch '{branch_name}' to {new_commit_hash[:12]}")

def delete_branch(state: RepoState, branch_name: str) -> None:
    # only the pointer goes away, its commits stay in the store
    state.branches.remove(branch_name)
    logger.info(f"deleted branch '{branch_name}'")
