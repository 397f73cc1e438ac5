class TwigError(Exception):
    """Base error for every twig command failure; the message is shown to the user."""

    default_message = "twig command failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class NotInitialized(TwigError):
    default_message = "Not in an initialized twig directory."

class AlreadyInitialized(TwigError):
    default_message = "A twig version-control system already exists in the current directory."

class ObjectNotFound(TwigError):
    default_message = "No object with that hash exists."

class NoSuchCommit(TwigError):
    default_message = "No commit with that id exists."

class AmbiguousCommitId(TwigError):
    default_message = "Commit id prefix is ambiguous."

class MalformedCommit(TwigError):
    default_message = "A commit may have at most two parents."

class FileNotInCommit(TwigError):
    default_message = "File does not exist in that commit."

class FileMissingInWorkingTree(TwigError):
    default_message = "File does not exist."

class NoChangesToCommit(TwigError):
    default_message = "No changes added to the commit."

class EmptyCommitMessage(TwigError):
    default_message = "Please enter a commit message."

class NothingToRemove(TwigError):
    default_message = "No reason to remove the file."

class NoSuchBranch(TwigError):
    default_message = "A branch with that name does not exist."

class BranchExists(TwigError):
    default_message = "A branch with that name already exists."

class CannotRemoveCurrentBranch(TwigError):
    default_message = "Cannot remove the current branch."

class AlreadyOnBranch(TwigError):
    default_message = "No need to checkout the current branch."

class SelfMerge(TwigError):
    default_message = "Cannot merge a branch with itself."

class DirtyWorkingState(TwigError):
    default_message = "You have uncommitted changes."

class BranchIsAncestor(TwigError):
    default_message = "Given branch is an ancestor of the current branch."

class NoSplitPoint(TwigError):
    default_message = "Could not find split point."

class UntrackedFileWouldBeOverwritten(TwigError):
    default_message = "There is an untracked file in the way; delete it, or add and commit it first."

class NoCommitWithMessage(TwigError):
    default_message = "Found no commit with that message."

class IncorrectOperands(TwigError):
    default_message = "Incorrect operands."

class UnsupportedStateVersion(TwigError):
    default_message = "Repository state was written by a newer version of twig."
