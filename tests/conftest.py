"""Pytest configuration and fixtures for rfcs tests."""

import pytest
from pathlib import Path

from git import Repo


def _init_repo(path: Path, branch: str = "main") -> Repo:
    """Create a git repository at path with one commit on branch."""
    path.mkdir(parents=True, exist_ok=True)
    repo = Repo.init(path)
    with repo.config_writer() as writer:
        writer.set_value("user", "name", "Test User")
        writer.set_value("user", "email", "test@example.com")

    (path / "README.md").write_text("# Proposals\n")
    repo.git.add("README.md")
    repo.git.commit("-m", "Initial commit")
    repo.git.branch("-M", branch)
    return repo


def _commit_file(repo: Repo, name: str, content: str) -> None:
    """Write a file in the working tree and commit it."""
    (Path(repo.working_tree_dir) / name).write_text(content)
    repo.git.add(name)
    repo.git.commit("-m", f"Update {name}")


def _write_packed_ref(repo: Repo, name: bytes) -> None:
    """Store a branch at HEAD in packed-refs, with a raw byte name."""
    sha = repo.git.rev_parse("HEAD").encode()
    (Path(repo.git_dir) / "packed-refs").write_bytes(
        b"# pack-refs with: peeled fully-peeled sorted \n" + sha + b" refs/heads/" + name + b"\n"
    )


@pytest.fixture
def make_repo(tmp_path: Path):
    """Factory for throwaway repositories, closed after the test."""
    repos: list[Repo] = []

    def factory(name: str = "proposals", branch: str = "main") -> Repo:
        repo = _init_repo(tmp_path / name, branch=branch)
        repos.append(repo)
        return repo

    yield factory
    for repo in repos:
        repo.close()


@pytest.fixture
def git_repo(make_repo) -> Repo:
    """A repository with a single commit on main."""
    return make_repo()


@pytest.fixture
def master_repo(make_repo) -> Repo:
    """A repository whose main line is called master."""
    return make_repo("legacy", branch="master")


@pytest.fixture
def commit_file():
    """Helper that writes and commits a file."""
    return _commit_file


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """Location for a throwaway config file."""
    return tmp_path / "config" / "config.json"


@pytest.fixture
def write_packed_ref():
    """Helper that adds a packed branch ref with a raw byte name."""
    return _write_packed_ref
