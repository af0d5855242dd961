"""Git operations on the proposal repository: branch listing and creation."""

from __future__ import annotations

import logging
from pathlib import Path

from git import Head, Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

logger = logging.getLogger(__name__)

# Branches tried, in order, as the main line new proposals start from
MAIN_BRANCH_NAMES = ("main", "master")

INVALID_BRANCH_NAME = "<invalid utf-8 branch name>"

# Local branch refs live under this prefix
HEADS_PREFIX = "refs/heads/"


class GitError(Exception):
    """Base class for failures of git operations on the proposal repository."""

    pass


class RepositoryError(GitError):
    """Raised when the repository cannot be opened or its branches enumerated."""

    pass


class NoMainBranchError(GitError):
    """Raised when neither a main nor a master branch exists."""

    pass


class BranchExistsError(GitError):
    """Raised when the branch to create is already present."""

    pass


class BranchCreationError(GitError):
    """Raised when creating or switching to a new branch fails."""

    pass


class CheckoutConflictError(BranchCreationError):
    """Raised when local changes block the checkout of the new branch."""

    pass


class HeadUpdateError(BranchCreationError):
    """Raised when HEAD cannot be pointed at the new branch."""

    pass


def _repo_path(repo: Repo) -> str:
    return repo.working_tree_dir or repo.git_dir


def open_repository(path: Path | str) -> Repo:
    """Open the git repository at path.

    Raises:
        RepositoryError: If path is missing or not a git repository
    """
    try:
        return Repo(path)
    except (InvalidGitRepositoryError, NoSuchPathError) as e:
        raise RepositoryError(f"Failed to open git repository at {path}") from e


def _branch_name(name: str) -> str:
    """Short branch name, or a placeholder when it is not valid UTF-8."""
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        return INVALID_BRANCH_NAME
    return name


def _head(repo: Repo, name: str) -> Head:
    return Head(repo, f"{HEADS_PREFIX}{name}")


def _branch_exists(repo: Repo, name: str) -> bool:
    """Check for a local branch via git, without parsing packed-refs ourselves."""
    try:
        repo.git.rev_parse("--verify", "--quiet", f"{HEADS_PREFIX}{name}^{{commit}}")
    except GitCommandError:
        return False
    return True


def _list_branches_with_git(repo: Repo) -> list[str]:
    """List local branches with git for-each-ref.

    Output is decoded with surrogateescape, so names that are not valid
    UTF-8 survive and are mapped to the placeholder.
    """
    try:
        output = repo.git.for_each_ref("--format=%(refname)", HEADS_PREFIX.rstrip("/"))
    except GitCommandError as e:
        raise RepositoryError(
            f"Failed listing local branches from git repository at {_repo_path(repo)}"
        ) from e

    return [
        _branch_name(ref[len(HEADS_PREFIX):])
        for ref in output.splitlines()
        if ref.startswith(HEADS_PREFIX)
    ]


def list_branches(repo: Repo) -> list[str]:
    """Return the short names of all local branches.

    Branches whose ref cannot be resolved are logged and skipped.

    Raises:
        RepositoryError: If the branches cannot be enumerated at all
    """
    try:
        heads = list(repo.heads)
    except UnicodeDecodeError:
        logger.warning(f"Undecodable packed refs in {_repo_path(repo)}, listing branches with git")
        return _list_branches_with_git(repo)
    except (GitCommandError, OSError) as e:
        raise RepositoryError(
            f"Failed listing local branches from git repository at {_repo_path(repo)}"
        ) from e

    branches = []
    for head in heads:
        if not head.is_valid():
            logger.warning(f"Skipping unresolvable branch {head.path} in {_repo_path(repo)}")
            continue
        branches.append(_branch_name(head.name))

    return branches


def find_main_branch(repo: Repo) -> Head:
    """Return the local main line branch, preferring main over master.

    Raises:
        NoMainBranchError: If neither branch exists
    """
    for name in MAIN_BRANCH_NAMES:
        if _branch_exists(repo, name):
            return _head(repo, name)

    raise NoMainBranchError(
        f"Neither 'main' nor 'master' are valid branches in the git repository at {_repo_path(repo)}"
    )


def create_and_switch_to_branch(repo: Repo, branch_name: str) -> Head:
    """Create branch_name from the main line and check it out.

    Works like ``git checkout -b branch_name main``, done in separate steps:
    create the branch ref, check out the main head's tree without overwriting
    local changes, then point HEAD at the new branch. A branch created before
    a later step fails is left in place.

    Args:
        repo: Repository to operate on
        branch_name: Name of the branch to create

    Returns:
        The newly created and checked out branch

    Raises:
        NoMainBranchError: If there is no main or master branch
        BranchExistsError: If branch_name already exists
        CheckoutConflictError: If local changes block the checkout
        HeadUpdateError: If HEAD cannot be set to the new branch
        BranchCreationError: If git refuses to create the branch
    """
    path = _repo_path(repo)
    main = find_main_branch(repo)
    main_sha = repo.git.rev_parse(f"{main.path}^{{commit}}")

    if _branch_exists(repo, branch_name):
        raise BranchExistsError(f"Branch '{branch_name}' already exists in {path}")

    try:
        repo.git.branch(branch_name, main_sha)
    except GitCommandError as e:
        raise BranchCreationError(
            f"Failed to create branch '{branch_name}' in {path}: {e.stderr.strip()}"
        ) from e
    branch = _head(repo, branch_name)
    logger.info(f"Created branch {branch_name} at {main_sha[:12]}")

    try:
        repo.git.checkout("--detach", main_sha)
    except GitCommandError as e:
        raise CheckoutConflictError(
            f"Error while checking out tree for branch '{branch_name}' in {path}: "
            f"{e.stderr.strip()}"
        ) from e

    try:
        repo.head.reference = branch
    except (OSError, ValueError, TypeError) as e:
        raise HeadUpdateError(f"Failed to point HEAD at branch '{branch_name}' in {path}: {e}") from e
    logger.info(f"Switched {path} to branch {branch_name}")

    return branch
