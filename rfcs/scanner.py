"""Document scanner for proposal files in a repository checkout."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from rfcs.numbering import PROPOSAL_NUMBER_PATTERN

logger = logging.getLogger(__name__)

# Extensions recognized as proposal documents (case-sensitive, no leading dot)
DOCUMENT_EXTENSIONS = {"txt", "md", "markdown", "rst", "adoc", "org"}

# Directories never descended into
DEFAULT_EXCLUDES = {".git"}


class ScanError(Exception):
    """Raised when the scan root itself cannot be read."""

    pass


def is_text_document(path: Path) -> bool:
    """Check if the file extension marks a recognized document type."""
    return path.suffix[1:] in DOCUMENT_EXTENSIONS


def has_proposal_number(path: Path) -> bool:
    """Check if the file name contains a run of at least three digits."""
    return PROPOSAL_NUMBER_PATTERN.search(path.name) is not None


def find_proposal_files(root: Path | str) -> list[Path]:
    """Recursively collect proposal documents under root.

    Unreadable entries below root are logged and skipped. Results are in
    walk order, which callers must not rely on.

    Args:
        root: Directory to scan

    Returns:
        Paths (joined onto root) of files that are proposal documents

    Raises:
        ScanError: If root does not exist or cannot be listed
    """
    root = Path(root)
    if not root.is_dir():
        raise ScanError(f"Proposal directory not found: {root}")

    def _on_error(error: OSError) -> None:
        if error.filename is not None and Path(error.filename) == root:
            raise ScanError(f"Cannot read proposal directory {root}: {error}") from error
        logger.warning(f"Skipping unreadable entry {error.filename}: {error.strerror}")

    matched: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        dirnames[:] = [d for d in dirnames if d not in DEFAULT_EXCLUDES]

        for filename in filenames:
            file_path = Path(dirpath) / filename
            if is_text_document(file_path) and has_proposal_number(file_path):
                logger.debug(f"Found proposal file: {file_path}")
                matched.append(file_path)

    return matched
