"""Git operations for gac."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from .exceptions import GitError

logger = logging.getLogger(__name__)

# Separates fields in `git log` output; never appears in subjects.
_FIELD_SEP = "\x1f"


@dataclass
class StatusEntry:
    """One record of ``git status --porcelain -z``."""

    index: str
    working_dir: str
    path: str
    orig_path: Optional[str] = None

    @property
    def code(self) -> str:
        return self.index + self.working_dir


@dataclass
class ChangedFiles:
    """Paths grouped by their status category."""

    staged: list[str] = field(default_factory=list)
    modified: list[str] = field(default_factory=list)
    created: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    renamed: list[str] = field(default_factory=list)
    not_added: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CommitInfo:
    hash: str
    message: str
    date: str


def parse_porcelain(output: str) -> list[StatusEntry]:
    """Parse ``git status --porcelain -z`` output into entries.

    Records are NUL-terminated and paths are written verbatim, so spaces,
    quotes and non-ASCII names need no unescaping. A rename or copy record
    is followed by one extra record holding the original path.
    """
    entries: list[StatusEntry] = []
    records = iter(output.split("\0"))
    for record in records:
        if len(record) < 4:
            continue
        index, working_dir, path = record[0], record[1], record[3:]
        orig_path = None
        if index in ("R", "C") or working_dir in ("R", "C"):
            orig_path = next(records, None) or None
        entries.append(StatusEntry(index, working_dir, path, orig_path))
    return entries


def group_changed_files(entries: list[StatusEntry]) -> ChangedFiles:
    """Sort status entries into staged/modified/created/deleted/renamed.

    A path can appear in more than one category (e.g. staged and created).
    Untracked paths only land in ``not_added``.
    """
    changes = ChangedFiles()
    for entry in entries:
        code = entry.code
        if code == "??":
            changes.not_added.append(entry.path)
            continue
        if code == "!!":
            continue
        if entry.index not in (" ", "?"):
            changes.staged.append(entry.path)
        if entry.index == "R":
            changes.renamed.append(entry.path)
        if entry.index == "A":
            changes.created.append(entry.path)
        if "D" in code:
            changes.deleted.append(entry.path)
        if "M" in code:
            changes.modified.append(entry.path)
    return changes


class GitRepo:
    """Reads working-copy state and creates commits."""

    def __init__(self, repo_path: Optional[Union[str, Path]] = None) -> None:
        self.repo_path = Path(repo_path or Path.cwd())

    def _run_git_command(self, args: list[str]) -> str:
        """Run a Git command and return its output."""
        try:
            result = subprocess.run(
                ["git"] + args,
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                check=True,
                encoding="utf-8",
                errors="replace",
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            cmd = " ".join(args)
            raise GitError(f"Git command failed: {cmd}\n{e.stderr}") from e
        except FileNotFoundError as exc:
            raise GitError("Git command not found. Please install Git.") from exc

    def is_repo(self) -> bool:
        """Check if the repository path is inside a Git work tree."""
        try:
            self._run_git_command(["rev-parse", "--git-dir"])
            return True
        except GitError:
            return False

    def has_head(self) -> bool:
        try:
            self._run_git_command(["rev-parse", "--verify", "--quiet", "HEAD"])
            return True
        except GitError:
            return False

    def get_staged_diff(self) -> str:
        """Get the diff of staged changes."""
        return self._run_git_command(["diff", "--cached"])

    def get_working_diff(self) -> str:
        """Get the diff of working directory changes."""
        return self._run_git_command(["diff"])

    def get_diff(self) -> str:
        """Staged diff when there is one, otherwise the working diff.

        The index wins because that is what a commit records.
        """
        staged = self.get_staged_diff()
        if staged.strip():
            return staged
        return self.get_working_diff()

    def list_status_entries(self) -> list[StatusEntry]:
        return parse_porcelain(
            self._run_git_command(["status", "--porcelain", "-z"])
        )

    def get_changed_files(self) -> ChangedFiles:
        return group_changed_files(self.list_status_entries())

    def has_pending_changes(self) -> bool:
        return bool(self.list_status_entries())

    def get_current_branch(self) -> str:
        return self._run_git_command(["rev-parse", "--abbrev-ref", "HEAD"]).strip()

    def get_recent_commits(self, count: int = 5) -> list[CommitInfo]:
        """Return the ``count`` most recent commits, newest first.

        A repository without any commit yet has no history, which is not an
        error.
        """
        if count <= 0 or not self.has_head():
            return []
        output = self._run_git_command(
            [
                "log",
                f"-{count}",
                f"--pretty=format:%h{_FIELD_SEP}%s{_FIELD_SEP}%aI",
            ]
        )
        commits: list[CommitInfo] = []
        for line in output.splitlines():
            parts = line.split(_FIELD_SEP)
            if len(parts) != 3:
                continue
            commits.append(CommitInfo(hash=parts[0], message=parts[1], date=parts[2]))
        return commits

    def stage_all(self) -> None:
        """Stage all changes (including new and deleted files)."""
        self._run_git_command(["add", "-A"])

    def commit(self, message: str) -> None:
        """Commit with ``message``, staging everything first if the index is empty."""
        entries = self.list_status_entries()
        changes = group_changed_files(entries)
        if not changes.staged and entries:
            logger.debug("Nothing staged; staging all %d change(s)", len(entries))
            self.stage_all()
        self._run_git_command(["commit", "-m", message])
