"""Tests for three-way merge."""

import pytest

from conftest import make_commit
from twig.checkout import reset
from twig.commit_helpers import get_commit_info
from twig.errors import (
    BranchIsAncestor,
    DirtyWorkingState,
    NoChangesToCommit,
    NoSuchBranch,
    SelfMerge,
    UntrackedFileWouldBeOverwritten,
)
from twig.file_helpers import get_blob, hash_content
from twig.merging import classify_file, conflict_content, merge_branch, plan_merge


def branch_off(repo, state, split_files, current_files, other_files):
    """Build split -> current (master) and split -> other (dev), with master checked out."""
    split = make_commit(repo, [state.branches.current_head()], "split", split_files)
    current = make_commit(repo, [split.hash], "current", current_files, timestamp=2)
    other = make_commit(repo, [split.hash], "other", other_files, timestamp=3)
    state.branches.create("dev", split.hash)
    state.branches.set_head("dev", other.hash)
    reset(repo, state, current.hash)
    return split, current, other


class TestConflictContent:
    def test_layout(self):
        assert conflict_content(b"a\n", b"b\n") == b"<<<<<<< HEAD\na\n=======\nb\n>>>>>>>\n"

    def test_missing_side(self):
        assert conflict_content(None, b"b\n") == b"<<<<<<< HEAD\n=======\nb\n>>>>>>>\n"
        assert conflict_content(b"a\n", None) == b"<<<<<<< HEAD\na\n=======\n>>>>>>>\n"


class TestClassify:
    @pytest.mark.parametrize(
        "current, other, split, expected",
        [
            (None, "o", None, "take_other"),
            ("s", "o", "s", "take_other"),
            ("s", None, "s", "remove"),
            ("c", "s", "s", None),
            (None, "s", "s", None),
            ("c", None, None, None),
            ("x", "x", "s", None),
            (None, None, "s", None),
            ("c", "o", "s", "conflict"),
            ("c", "o", None, "conflict"),
            (None, "o", "s", "conflict"),
            ("c", None, "s", "conflict"),
        ],
    )
    def test_rules(self, current, other, split, expected):
        assert classify_file(current, other, split) == expected

    def test_plan_covers_union(self):
        plan = plan_merge({"a": "1", "c": "x"}, {"b": "2", "c": "y"}, {"c": "z", "d": "4"})
        assert plan == {"b": "take_other", "c": "conflict"}


class TestMergePreflight:
    def test_dirty(self, repo, state):
        state.branches.create("dev", state.branches.current_head())
        state.staging.stage_addition("f", "h")
        with pytest.raises(DirtyWorkingState):
            merge_branch(repo, state, "dev")

    def test_self_merge(self, repo, state):
        with pytest.raises(SelfMerge):
            merge_branch(repo, state, "master")

    def test_unknown_branch(self, repo, state):
        with pytest.raises(NoSuchBranch):
            merge_branch(repo, state, "nope")

    def test_same_head(self, repo, state):
        state.branches.create("dev", state.branches.current_head())
        with pytest.raises(BranchIsAncestor):
            merge_branch(repo, state, "dev")

    def test_other_behind(self, repo, state):
        state.branches.create("dev", state.branches.current_head())
        ahead = make_commit(repo, [state.branches.current_head()], "ahead", {"f": b"f"})
        reset(repo, state, ahead.hash)
        with pytest.raises(BranchIsAncestor):
            merge_branch(repo, state, "dev")
        assert state.branches.current_head() == ahead.hash

    def test_fast_forward(self, repo, state):
        state.branches.create("dev", state.branches.current_head())
        ahead = make_commit(repo, [state.branches.current_head()], "ahead", {"f": b"f\n"})
        state.branches.set_head("dev", ahead.hash)
        result = merge_branch(repo, state, "dev")
        assert result.status == "fast_forwarded"
        assert result.commit == ahead.hash
        assert state.branches.current == "master"
        assert state.branches.current_head() == ahead.hash
        assert (repo / "f").read_bytes() == b"f\n"

    def test_fast_forward_through_merge_parent(self, repo, state):
        root = state.branches.current_head()
        side = make_commit(repo, [root], "side", {"s": b"s"})
        state.branches.create("dev", root)
        merged = make_commit(repo, [side.hash, root], "merge", {"s": b"s"}, timestamp=2)
        state.branches.set_head("dev", merged.hash)
        assert merge_branch(repo, state, "dev").status == "fast_forwarded"


class TestThreeWayMerge:
    SPLIT = {
        "same": b"s\n", "mod_other": b"s\n", "mod_cur": b"s\n", "del_other": b"s\n",
        "conflict": b"s\n", "del_cur_mod_other": b"s\n", "both_same": b"s\n",
    }
    CURRENT = {
        "same": b"s\n", "mod_other": b"s\n", "mod_cur": b"c\n", "del_other": b"s\n",
        "conflict": b"c\n", "both_same": b"x\n", "added_cur": b"c\n",
    }
    OTHER = {
        "same": b"s\n", "mod_other": b"o\n", "mod_cur": b"s\n",
        "conflict": b"o\n", "del_cur_mod_other": b"o\n", "both_same": b"x\n", "added_other": b"o\n",
    }

    def test_merge_commit(self, repo, state):
        _, current, other = branch_off(repo, state, self.SPLIT, self.CURRENT, self.OTHER)
        result = merge_branch(repo, state, "dev", timestamp=10)

        assert result.status == "merged"
        assert result.conflicts == ["conflict", "del_cur_mod_other"]
        merge = get_commit_info(repo, result.commit)
        assert merge.parentCommits == [current.hash, other.hash]
        assert merge.commitMessage == "Merged dev into master."
        assert state.branches.current_head() == merge.hash
        assert state.branches.head("dev") == other.hash
        assert state.staging.is_empty()

        expected = {
            "same": b"s\n",
            "mod_other": b"o\n",
            "mod_cur": b"c\n",
            "conflict": b"<<<<<<< HEAD\nc\n=======\no\n>>>>>>>\n",
            "del_cur_mod_other": b"<<<<<<< HEAD\n=======\no\n>>>>>>>\n",
            "both_same": b"x\n",
            "added_cur": b"c\n",
            "added_other": b"o\n",
        }
        assert {path: get_blob(repo, h) for path, h in merge.files.items()} == expected
        for path, content in expected.items():
            assert (repo / path).read_bytes() == content
        assert not (repo / "del_other").exists()

    def test_untracked_file_aborts_before_mutation(self, repo, state):
        split, current, other = branch_off(
            repo, state, {"a": b"a\n"}, {"a": b"a\n"}, {"a": b"o\n", "new": b"theirs\n"}
        )
        (repo / "new").write_bytes(b"mine\n")
        with pytest.raises(UntrackedFileWouldBeOverwritten):
            merge_branch(repo, state, "dev")
        assert (repo / "new").read_bytes() == b"mine\n"
        assert (repo / "a").read_bytes() == b"a\n"
        assert state.branches.current_head() == current.hash
        assert state.staging.is_empty()

    def test_untracked_file_not_in_the_way(self, repo, state):
        branch_off(repo, state, {"a": b"a\n"}, {"a": b"a\n", "b": b"b\n"}, {"a": b"o\n"})
        (repo / "scratch").write_bytes(b"mine\n")
        result = merge_branch(repo, state, "dev")
        assert not result.has_conflicts
        assert (repo / "scratch").read_bytes() == b"mine\n"
        assert (repo / "a").read_bytes() == b"o\n"

    def test_nothing_to_merge(self, repo, state):
        _, current, _ = branch_off(repo, state, {"a": b"a\n"}, {"a": b"x\n"}, {"a": b"x\n"})
        with pytest.raises(NoChangesToCommit):
            merge_branch(repo, state, "dev")
        assert state.branches.current_head() == current.hash

    def test_conflict_blob_is_stored(self, repo, state):
        branch_off(repo, state, {"f": b"base\n"}, {"f": b"a\n"}, {"f": b"b\n"})
        result = merge_branch(repo, state, "dev")
        merge = get_commit_info(repo, result.commit)
        assert merge.files["f"] == hash_content(b"<<<<<<< HEAD\na\n=======\nb\n>>>>>>>\n")


class TestMergePathCollisions:
    def test_untracked_file_where_directory_is_needed(self, repo, state):
        _, current, _ = branch_off(
            repo, state, {"a": b"a\n"}, {"a": b"a\n", "b": b"b\n"}, {"a": b"a\n", "d/e.txt": b"e\n"}
        )
        (repo / "d").write_bytes(b"mine\n")
        with pytest.raises(UntrackedFileWouldBeOverwritten):
            merge_branch(repo, state, "dev")
        assert (repo / "d").read_bytes() == b"mine\n"
        assert state.branches.current_head() == current.hash
        assert state.staging.is_empty()

    def test_removed_directory_makes_room_for_file(self, repo, state):
        branch_off(
            repo, state, {"d/e.txt": b"e\n"}, {"d/e.txt": b"e\n", "c": b"c\n"}, {"d": b"d\n"}
        )
        result = merge_branch(repo, state, "dev")
        merge = get_commit_info(repo, result.commit)
        assert set(merge.files) == {"c", "d"}
        assert (repo / "d").read_bytes() == b"d\n"
