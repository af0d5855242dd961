"""Proposal number allocation and branch naming."""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path

# First run of three or more ASCII digits, in file names and branch names alike
PROPOSAL_NUMBER_PATTERN = re.compile(r"(?P<number>[0-9]{3,})")

# Characters dropped from titles when building a branch name
SLUG_REMOVED_CHARS = ",.?!"


def extract_proposal_number(text: str) -> int | None:
    """Return the proposal number embedded in text, or None if there is none."""
    match = PROPOSAL_NUMBER_PATTERN.search(text)
    if match is None:
        return None
    return int(match.group("number"))


def next_proposal_number(
    branches: Iterable[str],
    files: Iterable[Path | str],
) -> int:
    """Find the next free proposal number.

    Every local branch name and every proposal file name is searched with the
    same digit-run rule, so a branch created for proposal 007 occupies 7 before
    any file for it exists. Names without a digit run (``main``,
    ``README.md``) are ignored.

    Args:
        branches: Local branch names
        files: Paths of discovered proposal files

    Returns:
        One past the highest number seen, or 1 when nothing is numbered yet
    """
    candidates = [Path(f).name for f in files]
    candidates.extend(branches)

    numbers = [
        number
        for number in map(extract_proposal_number, candidates)
        if number is not None
    ]
    return max(numbers, default=0) + 1


def slugify(title: str) -> str:
    """Turn a title into a branch name fragment.

    Spaces become hyphens and ``, . ? !`` are removed. Everything else,
    including other punctuation and non-ASCII letters, is kept as is.
    """
    slug = title.replace(" ", "-")
    return slug.translate(str.maketrans("", "", SLUG_REMOVED_CHARS))


def proposal_branch_name(number: int, title: str) -> str:
    """Build the branch name for a proposal, e.g. ``007-Add-metrics``."""
    return f"{number:03d}-{slugify(title)}"
