"""Core workflow logic for gac."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from .analysis import ChangeAnalysis, classify
from .config import Config
from .git import CommitInfo, GitRepo, StatusEntry, group_changed_files
from .providers import BaseDriver, get_driver

logger = logging.getLogger(__name__)

RECENT_COMMIT_COUNT = 5


@dataclass
class ChangeContext:
    """Everything a backend needs for one generation request."""

    diff: str
    analysis: ChangeAnalysis
    recent_commits: list[CommitInfo] = field(default_factory=list)


@dataclass
class StatusSummary:
    entries: list[StatusEntry]
    analysis: ChangeAnalysis
    branch: str = ""


class GitAutoCommitWorkflow:
    """Inspect pending changes and turn them into commit messages."""

    def __init__(
        self,
        config: Config,
        repo_path: Optional[str] = None,
        git_repo: Optional[GitRepo] = None,
        backend: Optional[BaseDriver] = None,
    ) -> None:
        self.config = config
        self.git_repo = git_repo or GitRepo(repo_path)
        self._backend = backend

    @property
    def backend(self) -> BaseDriver:
        # Created on first use so status/commit work without credentials.
        if self._backend is None:
            self._backend = get_driver(self.config)
        return self._backend

    def _ready(self) -> bool:
        if not self.git_repo.is_repo():
            logger.info("Not a Git repository: %s", self.git_repo.repo_path)
            return False
        if not self.git_repo.has_pending_changes():
            logger.info("No pending changes in %s", self.git_repo.repo_path)
            return False
        return True

    def analyze(self) -> ChangeContext:
        """Collect diff, classification and recent history once."""
        diff = self.git_repo.get_diff()
        analysis = classify(self.git_repo.get_changed_files(), diff)
        recent = self.git_repo.get_recent_commits(RECENT_COMMIT_COUNT)
        logger.debug(
            "analysis type=%s scope=%s files=%d +%d -%d",
            analysis.type,
            analysis.scope or "-",
            analysis.stats.files_changed,
            analysis.stats.additions,
            analysis.stats.deletions,
        )
        return ChangeContext(diff=diff, analysis=analysis, recent_commits=recent)

    def generate_one(self) -> Optional[str]:
        """Return one commit message, or None when there is nothing to commit."""
        if not self._ready():
            return None
        ctx = self.analyze()
        return self.backend.generate(ctx.diff, ctx.analysis, ctx.recent_commits)

    def generate_many(self, count: int = 3) -> list[str]:
        """Return up to ``count`` distinct candidates; empty when nothing to commit."""
        if not self._ready():
            return []
        ctx = self.analyze()
        return self.backend.generate_multiple(
            ctx.diff, ctx.analysis, ctx.recent_commits, count
        )

    def validate_backend(self) -> bool:
        return self.backend.validate()

    def commit(self, message: str) -> None:
        self.git_repo.commit(message)

    def status_summary(self) -> Optional[StatusSummary]:
        if not self.git_repo.is_repo():
            return None
        entries = self.git_repo.list_status_entries()
        diff = self.git_repo.get_diff()
        analysis = classify(group_changed_files(entries), diff)
        branch = self.git_repo.get_current_branch() if self.git_repo.has_head() else ""
        return StatusSummary(entries=entries, analysis=analysis, branch=branch)
