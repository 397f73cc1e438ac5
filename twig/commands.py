from datetime import datetime
from pathlib import Path
from typing import Callable
import time
from .errors import (
    EmptyCommitMessage,
    FileMissingInWorkingTree,
    IncorrectOperands,
    NoChangesToCommit,
    NoCommitWithMessage,
    TwigError,
)
from .repo_utils import (
    init_repository,
    load_state,
    require_twig_root,
    save_state,
)
from .commit_helpers import (
    all_commits,
    create_commit,
    get_commit_info,
    resolve_commit,
)
from .branching import (
    create_branch,
    delete_branch,
    update_branch_head,
)
from .staging_helpers import stage_add, stage_remove
from .checkout import checkout_branch, checkout_commit_file, reset as reset_to_commit
from .merging import merge_branch
from .graph_utils import first_parent_history
from .status import collect_status
from .models import CommitInfo

def map_command(command: str) -> Callable:
    commandsMap = {
        "init": init,
        "add": add,
        "commit": commit,
        "rm": rm,
        "log": log,
        "global-log": global_log,
        "find": find,
        "status": status,
        "checkout": checkout,
        "branch": branch,
        "rm-branch": rm_branch,
        "reset": reset,
        "merge": merge,
    }
    if command not in commandsMap:
        raise TwigError("No command with that name exists.")
    return commandsMap[command]

def repo_path(twig_root: Path, directory: Path, filepath: str) -> str:
    """Turn a path given on the command line into a repository-relative key."""
    absolute = (directory / filepath).resolve()
    try:
        relative = absolute.relative_to(twig_root)
    except ValueError:
        raise FileMissingInWorkingTree(f"{filepath} is outside the repository.")
    if not relative.parts or relative.parts[0] == ".twig":
        raise FileMissingInWorkingTree()
    return relative.as_posix()

def format_date(timestamp: int) -> str:
    when = datetime.fromtimestamp(timestamp).astimezone()
    return f"{when:%a %b} {when.day} {when:%H:%M:%S %Y %z}"

def format_commit(info: CommitInfo) -> str:
    lines = ["===", f"commit {info.hash}"]
    if len(info.parentCommits) == 2:
        lines.append(f"Merge: {info.parentCommits[0][:7]} {info.parentCommits[1][:7]}")
    lines.append(f"Date: {format_date(info.timestamp)}")
    lines.append(info.commitMessage)
    return "\n".join(lines) + "\n"

def init(args):
    twig_root = init_repository(Path(args.directory))
    print(f"Initialized empty twig repository in {twig_root / '.twig'}")

def add(args):
    directory = Path(args.directory)
    twig_root = require_twig_root(directory)
    state = load_state(twig_root)
    head = get_commit_info(twig_root, state.branches.current_head())
    stage_add(twig_root, state.staging, repo_path(twig_root, directory, args.filepath), head)
    save_state(twig_root, state)

def commit(args):
    twig_root = require_twig_root(Path(args.directory))
    if not args.message:
        raise EmptyCommitMessage()
    state = load_state(twig_root)
    if state.staging.is_empty():
        raise NoChangesToCommit()
    head = get_commit_info(twig_root, state.branches.current_head())
    new_commit = create_commit(
        twig_root,
        [head.hash],
        args.message,
        int(time.time()),
        state.staging.snapshot(head.files),
    )
    update_branch_head(state, state.branches.current, new_commit.hash)
    state.staging.clear()
    save_state(twig_root, state)

def rm(args):
    directory = Path(args.directory)
    twig_root = require_twig_root(directory)
    state = load_state(twig_root)
    head = get_commit_info(twig_root, state.branches.current_head())
    stage_remove(twig_root, state.staging, repo_path(twig_root, directory, args.filepath), head)
    save_state(twig_root, state)

def log(args):
    twig_root = require_twig_root(Path(args.directory))
    state = load_state(twig_root)
    for info in first_parent_history(twig_root, state.branches.current_head()):
        print(format_commit(info))

def global_log(args):
    twig_root = require_twig_root(Path(args.directory))
    for info in all_commits(twig_root):
        print(format_commit(info))

def find(args):
    twig_root = require_twig_root(Path(args.directory))
    matches = [info.hash for info in all_commits(twig_root) if info.commitMessage == args.message]
    if not matches:
        raise NoCommitWithMessage()
    for commit_hash in matches:
        print(commit_hash)

def status(args):
    twig_root = require_twig_root(Path(args.directory))
    report = collect_status(twig_root, load_state(twig_root))
    changes = [f"{p} (modified)" for p in report.modified] + [f"{p} (deleted)" for p in report.deleted]
    sections = {
        "Branches": [("*" if name == report.current_branch else "") + name for name in report.branches],
        "Staged Files": report.staged,
        "Removed Files": report.removed,
        "Modifications Not Staged For Commit": sorted(changes),
        "Untracked Files": report.untracked,
    }
    for title, entries in sections.items():
        print(f"=== {title} ===")
        for entry in entries:
            print(entry)
        print()

def checkout(args):
    directory = Path(args.directory)
    twig_root = require_twig_root(directory)
    state = load_state(twig_root)
    if args.paths is None:
        if args.name is None:
            raise IncorrectOperands()
        checkout_branch(twig_root, state, args.name)
        save_state(twig_root, state)
        return
    if len(args.paths) != 1:
        raise IncorrectOperands()
    if args.name is None:
        source = get_commit_info(twig_root, state.branches.current_head())
    else:
        source = resolve_commit(twig_root, args.name)
    # a single-file checkout leaves branches and staging untouched
    checkout_commit_file(twig_root, source, repo_path(twig_root, directory, args.paths[0]))

def branch(args):
    twig_root = require_twig_root(Path(args.directory))
    state = load_state(twig_root)
    create_branch(state, args.name)
    save_state(twig_root, state)

def rm_branch(args):
    twig_root = require_twig_root(Path(args.directory))
    state = load_state(twig_root)
    delete_branch(state, args.name)
    save_state(twig_root, state)

def reset(args):
    twig_root = require_twig_root(Path(args.directory))
    state = load_state(twig_root)
    reset_to_commit(twig_root, state, args.commit)
    save_state(twig_root, state)

def merge(args):
    twig_root = require_twig_root(Path(args.directory))
    state = load_state(twig_root)
    result = merge_branch(twig_root, state, args.name)
    save_state(twig_root, state)
    if result.status == "fast_forwarded":
        print("Current branch fast-forwarded.")
    elif result.has_conflicts:
        print("Encountered a merge conflict.")
