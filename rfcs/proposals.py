"""Proposal operations composed from scanning, numbering and branching."""

from __future__ import annotations

import logging
from pathlib import Path

from git import Repo

from rfcs.git import RepositoryError, create_and_switch_to_branch, list_branches
from rfcs.numbering import extract_proposal_number, next_proposal_number, proposal_branch_name
from rfcs.scanner import find_proposal_files
from rfcs.schemas import ProposalFile

logger = logging.getLogger(__name__)


def _proposal_root(repo: Repo) -> Path:
    if repo.working_tree_dir is None:
        raise RepositoryError(f"Git repository at {repo.git_dir} has no working tree")
    return Path(repo.working_tree_dir)


def list_proposals(repo: Repo) -> list[ProposalFile]:
    """List the proposal documents in the repository's working tree."""
    return [
        ProposalFile(path=str(path), number=extract_proposal_number(path.name))
        for path in find_proposal_files(_proposal_root(repo))
    ]


def plan_branch_name(repo: Repo, title: str) -> str:
    """Work out the branch name the next proposal titled title would get."""
    branches = list_branches(repo)
    files = find_proposal_files(_proposal_root(repo))
    number = next_proposal_number(branches, files)
    logger.debug(f"Next proposal number is {number} ({len(files)} files, {len(branches)} branches)")
    return proposal_branch_name(number, title)


def create_proposal(repo: Repo, title: str) -> str:
    """Start a new proposal: allocate its number and check out its branch.

    Args:
        repo: Proposal repository, owned by the caller for this call
        title: Human-readable proposal title

    Returns:
        Name of the created branch
    """
    branch_name = plan_branch_name(repo, title)
    logger.info(f"Branch will be named {branch_name}")
    create_and_switch_to_branch(repo, branch_name)
    return branch_name
