"""Locate the proposal repository: a configured checkout or a fresh clone."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from rfcs.schemas import GitSettings

logger = logging.getLogger(__name__)

# Directory name of the clone under the clone root
CLONE_DIRNAME = "rfcs"

NOT_CONFIGURED_MESSAGE = (
    "No local git repo configured, and no git URL given, can't do anything.\n"
    "To configure, run `rfcs configure git.url <git URL>`, "
    "or `rfcs configure git.repo /path/to/rfcs`."
)


class RepositoryUnavailableError(Exception):
    """Raised when no local proposal repository can be provided."""

    pass


def clone_repository(url: str, target: Path) -> Path:
    """Clone url into target with the git executable.

    Raises:
        RepositoryUnavailableError: If git cannot be run or the clone fails
    """
    logger.info(f"Cloning git repository from URL: '{url}'")
    target.parent.mkdir(parents=True, exist_ok=True)

    try:
        result = subprocess.run(
            ["git", "clone", url, str(target)],
            capture_output=True,
            text=True,
        )
    except OSError as e:
        logger.error(f"Error while trying to clone git repository: {e}")
        raise RepositoryUnavailableError(
            "Can't proceed any further without a repository present."
        ) from e

    if result.returncode != 0:
        logger.error(
            f"Error while cloning repository from URL {url}, "
            f"stderr: {result.stderr.strip()} stdout: {result.stdout.strip()}"
        )
        raise RepositoryUnavailableError(
            f"Cloning {url} failed, can't proceed any further without a repository present."
        )

    logger.info(f"Successfully cloned git repository to path '{target}'")
    return target


def ensure_local_repo(settings: GitSettings | None, clone_root: Path) -> Path:
    """Return the path of a local proposal repository.

    A configured local path is used as is. Otherwise the configured URL is
    cloned below clone_root, reusing an earlier clone if one is there.

    Args:
        settings: Git section of the configuration, if any
        clone_root: Directory that holds clones of the configured URL

    Returns:
        Path of the local repository

    Raises:
        RepositoryUnavailableError: If nothing is configured or cloning fails
    """
    if settings is not None and settings.repo is not None:
        return settings.repo

    if settings is None or settings.url is None:
        raise RepositoryUnavailableError(NOT_CONFIGURED_MESSAGE)

    target = clone_root / CLONE_DIRNAME
    if target.is_dir():
        logger.debug(f"Reusing existing clone at {target}")
        return target

    return clone_repository(settings.url, target)
