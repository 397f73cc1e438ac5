from pathlib import Path
import logging
import os
import tempfile
from pydantic import ValidationError
from .commit_helpers import create_commit
from .errors import AlreadyInitialized, NotInitialized, TwigError, UnsupportedStateVersion
from .models import (
    DEFAULT_BRANCH,
    STATE_SCHEMA_VERSION,
    BranchTable,
    RepoState,
)

logger = logging.getLogger(__name__)

TWIG_DIR = ".twig"
INITIAL_COMMIT_MESSAGE = "initial commit"

def find_twig_root_dir(start: Path) -> Path | None:
    start = start.resolve()
    for directory in [start] + list(start.parents):
        if (directory / TWIG_DIR).is_dir():
            return directory
        if directory == Path.home():    # won't look past home directory
            return None
    return None

def require_twig_root(start: Path) -> Path:
    twig_root = find_twig_root_dir(start)
    if twig_root is None:
        raise NotInitialized()
    return twig_root

def get_state_path(twig_root: Path) -> Path:
    return twig_root / TWIG_DIR / "state.json"

def load_state(twig_root: Path) -> RepoState:
    state_path = get_state_path(twig_root)
    if not state_path.exists():
        raise NotInitialized("Repository state is missing.")
    try:
        state = RepoState.model_validate_json(state_path.read_text())
    except ValidationError as e:
        raise TwigError(f"Repository state is corrupt: {e}") from e
    if state.schemaVersion > STATE_SCHEMA_VERSION:
        raise UnsupportedStateVersion()
    return state

def save_state(twig_root: Path, state: RepoState) -> None:
    """Persist the whole state record, replacing the previous one atomically."""
    state_path = get_state_path(twig_root)
    state.schemaVersion = STATE_SCHEMA_VERSION
    fd, tmp_name = tempfile.mkstemp(dir=state_path.parent, prefix="state-", suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as f:
            f.write(state.model_dump_json(indent=4))
        os.replace(tmp_name, state_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.debug(f"saved state (branch '{state.branches.current}')")

def init_repository(directory: Path) -> Path:
    twig_root = directory.resolve()
    twig_dir = twig_root / TWIG_DIR
    if twig_dir.exists():
        raise AlreadyInitialized()
    twig_dir.mkdir(parents=True)
    (twig_dir / "commits").mkdir()
    (twig_dir / "objects").mkdir()
    initial = create_commit(twig_root, [], INITIAL_COMMIT_MESSAGE, 0, {})
    branches = BranchTable(current=DEFAULT_BRANCH)
    branches.create(DEFAULT_BRANCH, initial.hash)
    save_state(twig_root, RepoState(branches=branches))
    logger.info(f"initialized repository at {twig_dir}")
    return twig_root
