"""rfcs - manage a git repository of numbered proposal documents.

Discovers proposal files, allocates the next free proposal number from file
names and local branch names, and creates the git branch for a new proposal.
"""

__version__ = "0.1.0"
