from pathlib import Path
import logging
from .errors import NothingToRemove
from .file_helpers import (
    delete_working_file,
    get_blob,
    hash_content,
    put_blob,
    read_working_file,
    write_working_file,
)
from .models import CommitInfo, StagingArea

logger = logging.getLogger(__name__)

def stage_add(twig_root: Path, staging: StagingArea, path: str, head_commit: CommitInfo) -> None:
    if path in staging.removed:
        # undo a pending rm by putting the captured content back
        write_working_file(twig_root, path, get_blob(twig_root, staging.removed.pop(path)))
        logger.debug(f"cancelled removal of {path}")
        return
    content = read_working_file(twig_root, path)
    if hash_content(content) == head_commit.files.get(path):
        staging.unstage(path)
        return
    staging.stage_addition(path, put_blob(twig_root, content))
    logger.debug(f"staged {path} for addition")

def stage_remove(twig_root: Path, staging: StagingArea, path: str, head_commit: CommitInfo) -> None:
    was_staged = staging.added.pop(path, None) is not None
    if path in head_commit.files:
        working_path = twig_root / path
        if working_path.is_file():
            last_known = put_blob(twig_root, working_path.read_bytes())
        else:
            last_known = head_commit.files[path]
        staging.stage_removal(path, last_known)
        delete_working_file(twig_root, path)
        logger.debug(f"staged {path} for removal")
    elif not was_staged:
        raise NothingToRemove()
