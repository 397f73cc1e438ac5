import sys
import logging
from pathlib import Path

import argparse
from twig.commands import map_command
from twig.errors import TwigError

def subcommand_index(argv: list[str]) -> int | None:
    takes_value = False
    for index, token in enumerate(argv):
        if takes_value:
            takes_value = False
        elif token in ("-C", "--directory"):
            takes_value = True
        elif not token.startswith("-"):
            return index
    return None

def split_path_operands(argv: list[str]) -> tuple[list[str], list[str] | None]:
    # for checkout, everything after a bare "--" is a file operand (checkout [<commit>] -- <file>)
    if "--" not in argv:
        return argv, None
    index = argv.index("--")
    command = subcommand_index(argv[:index])
    if command is None or argv[command] != "checkout":
        return argv, None
    return argv[:index], argv[index + 1:]

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="twig", description="Twig CLI")
    parser.add_argument("-C", "--directory", default=str(Path.cwd()), help="Run as if twig was started in this directory")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # init command
    subparsers.add_parser("init", help="Initialize a new twig repository")

    # add command
    add_parser = subparsers.add_parser("add", help="Stage a file for the next commit")
    add_parser.add_argument("filepath", help="File to add")

    # commit command
    commit_parser = subparsers.add_parser("commit", help="Commit staged changes")
    commit_parser.add_argument("message", nargs="?", default="", help="Commit message")

    # rm command
    rm_parser = subparsers.add_parser("rm", help="Unstage a file or stage it for removal")
    rm_parser.add_argument("filepath", help="File to remove")

    # log commands
    subparsers.add_parser("log", help="Show the history of the current branch")
    subparsers.add_parser("global-log", help="Show every commit ever made")

    # find command
    find_parser = subparsers.add_parser("find", help="Print ids of commits with the given message")
    find_parser.add_argument("message", help="Commit message to look for")

    # status command
    subparsers.add_parser("status", help="Show the status of the repository")

    # checkout command
    checkout_parser = subparsers.add_parser(
        "checkout",
        help="Checkout a branch, or a file from a commit",
        usage="twig checkout <branch> | -- <file> | <commit> -- <file>",
    )
    checkout_parser.add_argument("name", nargs="?", help="Branch name, or commit id when followed by -- <file>")

    # branch commands
    branch_parser = subparsers.add_parser("branch", help="Create a new branch at the current commit")
    branch_parser.add_argument("name", help="Branch name")
    rm_branch_parser = subparsers.add_parser("rm-branch", help="Delete a branch pointer")
    rm_branch_parser.add_argument("name", help="Branch name")

    # reset command
    reset_parser = subparsers.add_parser("reset", help="Move the current branch to a commit")
    reset_parser.add_argument("commit", help="Commit id or unique prefix")

    # merge command
    merge_parser = subparsers.add_parser("merge", help="Merge a branch into the current branch")
    merge_parser.add_argument("name", help="Branch name to merge from")
    return parser

def main(argv: list[str] | None = None) -> int:
    argv, paths = split_path_operands(sys.argv[1:] if argv is None else argv)
    args = build_parser().parse_args(argv)
    args.paths = paths
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        map_command(args.command)(args)
    except TwigError as e:
        print(e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
