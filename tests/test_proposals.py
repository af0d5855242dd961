"""End-to-end tests for proposal listing and creation."""

import pytest
from pathlib import Path

from rfcs.git import (
    BranchExistsError,
    CheckoutConflictError,
    NoMainBranchError,
    create_and_switch_to_branch,
)
from rfcs.proposals import create_proposal, list_proposals, plan_branch_name


class TestCreateProposal:
    """Test the create-a-proposal flow."""

    def test_first_proposal(self, git_repo):
        """An unnumbered repository starts at 001 and HEAD follows the branch."""
        branch_name = create_proposal(git_repo, "First idea")

        assert branch_name == "001-First-idea"
        assert git_repo.active_branch.name == "001-First-idea"
        assert not git_repo.head.is_detached

    def test_numbers_after_files_and_branches(self, git_repo, commit_file):
        """Files and stale branches both push the number up."""
        commit_file(git_repo, "003-x.md", "x")
        commit_file(git_repo, "007-y.txt", "y")
        git_repo.create_head("010-stale")

        assert create_proposal(git_repo, "Next one") == "011-Next-one"

    def test_untracked_files_count(self, git_repo):
        """Proposal files in the working tree count before they are committed."""
        (Path(git_repo.working_tree_dir) / "020-draft.md").write_text("draft")

        assert create_proposal(git_repo, "After draft") == "021-After-draft"

    def test_undecodable_packed_branch(self, git_repo, write_packed_ref):
        """A packed branch name that is not UTF-8 does not stop proposal creation."""
        write_packed_ref(git_repo, b"\xff-060")

        assert create_proposal(git_repo, "Next") == "001-Next"
        assert git_repo.active_branch.name == "001-Next"

    def test_consecutive_proposals(self, git_repo):
        """A second proposal sees the first one's branch."""
        create_proposal(git_repo, "One")
        assert create_proposal(git_repo, "Two") == "002-Two"

    def test_punctuation_only_title(self, git_repo):
        """A title that slugifies to nothing still yields a usable branch."""
        branch_name = create_proposal(git_repo, "???")

        assert branch_name == "001-"
        assert git_repo.active_branch.name == "001-"

    def test_title_punctuation_removed(self, git_repo):
        """Only , . ? ! are dropped from titles."""
        assert create_proposal(git_repo, "Why not, really?") == "001-Why-not-really"

    def test_no_main_branch_propagates(self, git_repo):
        """Main line errors reach the caller unchanged."""
        git_repo.git.branch("-m", "main", "trunk")

        with pytest.raises(NoMainBranchError):
            create_proposal(git_repo, "Orphan")

    def test_conflict_then_retry(self, git_repo, commit_file):
        """After a blocked checkout, the same proposal cannot silently be recreated."""
        commit_file(git_repo, "notes.txt", "base\n")
        git_repo.create_head("wip").checkout()
        commit_file(git_repo, "notes.txt", "wip\n")
        (Path(git_repo.working_tree_dir) / "notes.txt").write_text("dirty\n")

        with pytest.raises(CheckoutConflictError):
            create_proposal(git_repo, "Blocked")
        assert "001-Blocked" in git_repo.heads

        git_repo.git.checkout("--", "notes.txt")
        with pytest.raises(BranchExistsError):
            create_and_switch_to_branch(git_repo, "001-Blocked")

        assert create_proposal(git_repo, "Blocked") == "002-Blocked"


class TestPlanBranchName:
    """Test branch name planning without side effects."""

    def test_plan_does_not_create(self, git_repo):
        """Planning leaves the repository untouched."""
        assert plan_branch_name(git_repo, "Add metrics") == "001-Add-metrics"
        assert "001-Add-metrics" not in git_repo.heads
        assert git_repo.active_branch.name == "main"


class TestListProposals:
    """Test proposal listing."""

    def test_lists_with_numbers(self, git_repo, commit_file):
        """Each listed proposal carries its number."""
        commit_file(git_repo, "003-x.md", "x")
        commit_file(git_repo, "notes.txt", "not a proposal")

        proposals = list_proposals(git_repo)

        assert len(proposals) == 1
        assert proposals[0].number == 3
        assert proposals[0].path.endswith("003-x.md")

    def test_empty_repository(self, git_repo):
        """README alone is not a proposal."""
        assert list_proposals(git_repo) == []
