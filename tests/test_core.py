from gac.analysis import ChangeAnalysis
from gac.core import GitAutoCommitWorkflow
from gac.git import ChangedFiles, CommitInfo, StatusEntry

DIFF = """diff --git a/src/app.py b/src/app.py
--- a/src/app.py
+++ b/src/app.py
@@ -1,2 +1,3 @@
 import os
-print('a')
+print('b')
+print('c')
"""


class FakeRepo:
    def __init__(self, *, is_repo=True, entries=None, diff=DIFF, head=True):
        self.repo_path = "/tmp/fake"
        self._is_repo = is_repo
        self._entries = entries if entries is not None else [
            StatusEntry(" ", "M", "src/app.py")
        ]
        self._diff = diff
        self._head = head
        self.committed = []
        self.calls = {"get_diff": 0, "get_recent_commits": 0}

    def is_repo(self):
        return self._is_repo

    def has_head(self):
        return self._head

    def has_pending_changes(self):
        return bool(self._entries)

    def list_status_entries(self):
        return list(self._entries)

    def get_changed_files(self):
        return ChangedFiles(modified=[e.path for e in self._entries])

    def get_diff(self):
        self.calls["get_diff"] += 1
        return self._diff

    def get_current_branch(self):
        return "main"

    def get_recent_commits(self, count=5):
        self.calls["get_recent_commits"] += 1
        return [CommitInfo("abc1234", "fix: earlier", "2024-01-01T00:00:00+00:00")]

    def commit(self, message):
        self.committed.append(message)


class RecordingBackend:
    def __init__(self, replies=("fix(src): update output",)):
        self.replies = list(replies)
        self.generate_calls = []
        self.multiple_calls = []

    def generate(self, diff, analysis, recent_commits=()):
        self.generate_calls.append((diff, analysis, list(recent_commits)))
        return self.replies[0]

    def generate_multiple(self, diff, analysis, recent_commits=(), count=3):
        self.multiple_calls.append((diff, analysis, list(recent_commits), count))
        return self.replies[:count]

    def validate(self):
        return True


def _workflow(dashscope_config, repo=None, backend=None):
    return GitAutoCommitWorkflow(
        dashscope_config,
        git_repo=repo or FakeRepo(),
        backend=backend or RecordingBackend(),
    )


def test_generate_one_passes_context_to_backend(dashscope_config):
    repo = FakeRepo()
    backend = RecordingBackend()
    wf = _workflow(dashscope_config, repo, backend)

    assert wf.generate_one() == "fix(src): update output"
    diff, analysis, recent = backend.generate_calls[0]
    assert diff == DIFF
    assert isinstance(analysis, ChangeAnalysis)
    assert analysis.type == "feat"
    assert analysis.scope == "src"
    assert analysis.stats.additions == 3
    assert analysis.stats.deletions == 2
    assert recent[0].message == "fix: earlier"
    assert repo.calls == {"get_diff": 1, "get_recent_commits": 1}


def test_generate_many_delegates_with_count(dashscope_config):
    backend = RecordingBackend(replies=["feat: a", "feat: b", "feat: c"])
    wf = _workflow(dashscope_config, backend=backend)

    assert wf.generate_many(2) == ["feat: a", "feat: b"]
    assert backend.multiple_calls[0][3] == 2
    assert backend.generate_calls == []


def test_no_changes_skips_backend(dashscope_config):
    backend = RecordingBackend()
    wf = _workflow(dashscope_config, FakeRepo(entries=[]), backend)

    assert wf.generate_one() is None
    assert wf.generate_many() == []
    assert backend.generate_calls == []
    assert backend.multiple_calls == []


def test_not_a_repo(dashscope_config):
    backend = RecordingBackend()
    wf = _workflow(dashscope_config, FakeRepo(is_repo=False), backend)

    assert wf.generate_one() is None
    assert wf.generate_many() == []
    assert wf.status_summary() is None
    assert backend.generate_calls == []


def test_backend_created_lazily(monkeypatch, dashscope_config):
    created = []

    def fake_get_driver(config):
        created.append(config)
        return RecordingBackend()

    monkeypatch.setattr("gac.core.get_driver", fake_get_driver)
    wf = GitAutoCommitWorkflow(dashscope_config, git_repo=FakeRepo())

    wf.commit("chore: tidy")
    assert created == []

    assert wf.validate_backend() is True
    assert created == [dashscope_config]


def test_commit_delegates_to_repo(dashscope_config):
    repo = FakeRepo()
    wf = _workflow(dashscope_config, repo)
    wf.commit("feat: ship it")
    assert repo.committed == ["feat: ship it"]


def test_status_summary(dashscope_config):
    entries = [StatusEntry(" ", "M", "src/app.py"), StatusEntry("?", "?", "notes.md")]
    wf = _workflow(dashscope_config, FakeRepo(entries=entries))

    summary = wf.status_summary()

    assert summary.branch == "main"
    assert [e.path for e in summary.entries] == ["src/app.py", "notes.md"]
    assert summary.analysis.files == ["src/app.py"]
    assert summary.analysis.type == "feat"


def test_status_summary_without_head(dashscope_config):
    wf = _workflow(dashscope_config, FakeRepo(head=False))
    assert wf.status_summary().branch == ""
