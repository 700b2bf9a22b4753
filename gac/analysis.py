"""Change classification: commit type, scope and line statistics.

Everything here is a pure function of its inputs so it can be tested
without a repository.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .git import ChangedFiles

# Commit types understood by the prompt builder and formatter
COMMIT_TYPES = {
    "feat": "new features",
    "fix": "bug fixes",
    "docs": "documentation changes",
    "style": "code formatting",
    "refactor": "refactoring",
    "test": "test related",
    "chore": "other miscellaneous",
}

COMMIT_TYPE_NAMES = list(COMMIT_TYPES)


@dataclass(frozen=True)
class ChangeStats:
    files_changed: int = 0
    additions: int = 0
    deletions: int = 0


@dataclass(frozen=True)
class ChangeAnalysis:
    """Classification of one pending change set."""

    type: str = "feat"
    scope: str = ""
    files: list[str] = field(default_factory=list)
    stats: ChangeStats = field(default_factory=ChangeStats)


def unique_files(changes: ChangedFiles) -> list[str]:
    """Staged, modified, created and deleted paths, de-duplicated in order."""
    seen: dict[str, None] = {}
    for group in (changes.staged, changes.modified, changes.created, changes.deleted):
        for path in group:
            seen.setdefault(path, None)
    return list(seen)


def count_diff_lines(diff: str) -> tuple[int, int]:
    """Count lines starting with ``+`` and ``-``.

    The ``+++``/``---`` file headers are counted too, so totals run one
    high per file header. Kept that way for compatibility with existing
    statistics.
    """
    additions = deletions = 0
    for line in diff.split("\n"):
        if line.startswith("+"):
            additions += 1
        elif line.startswith("-"):
            deletions += 1
    return additions, deletions


def infer_type(changes: ChangedFiles, files: Iterable[str]) -> str:
    # Both creations and deletions classify as feat.
    if changes.created:
        return "feat"
    if changes.deleted:
        return "feat"
    files = list(files)
    if any("test" in f for f in files):
        return "test"
    if any("doc" in f or "README" in f for f in files):
        return "docs"
    if any("config" in f or "package.json" in f for f in files):
        return "chore"
    return "feat"


def infer_scope(files: Iterable[str]) -> str:
    """Most common top-level directory among ``files``.

    Ties go to the directory seen first. Files at the repository root do
    not vote.
    """
    counts: dict[str, int] = {}
    for path in files:
        parts = path.split("/")
        if len(parts) > 1 and parts[0]:
            counts[parts[0]] = counts.get(parts[0], 0) + 1
    best = ""
    for candidate, count in counts.items():
        if not best or count > counts[best]:
            best = candidate
    return best


def classify(changes: ChangedFiles, diff: str) -> ChangeAnalysis:
    files = unique_files(changes)
    additions, deletions = count_diff_lines(diff or "")
    return ChangeAnalysis(
        type=infer_type(changes, files),
        scope=infer_scope(files),
        files=files,
        stats=ChangeStats(
            files_changed=len(files),
            additions=additions,
            deletions=deletions,
        ),
    )
