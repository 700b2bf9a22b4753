import itertools

from gac.analysis import (
    ChangeStats,
    classify,
    count_diff_lines,
    infer_scope,
    unique_files,
)
from gac.git import ChangedFiles


def test_created_file_with_additions_scenario():
    # Given one created file and ten added lines
    changes = ChangedFiles(created=["src/a.js"])
    diff = "\n".join(f"+line {i}" for i in range(10))

    # When
    analysis = classify(changes, diff)

    # Then
    assert analysis.type == "feat"
    assert analysis.scope == "src"
    assert analysis.files == ["src/a.js"]
    assert analysis.stats == ChangeStats(files_changed=1, additions=10, deletions=0)


def test_count_includes_file_headers():
    diff = "\n".join(
        [
            "diff --git a/x b/x",
            "--- a/x",
            "+++ b/x",
            "@@ -1,2 +1,2 @@",
            "-old",
            "+new",
            " context",
        ]
    )
    assert count_diff_lines(diff) == (2, 2)


def test_count_empty_diff():
    assert count_diff_lines("") == (0, 0)
    assert classify(ChangedFiles(), "").stats == ChangeStats()


def test_files_are_deduplicated_across_groups():
    changes = ChangedFiles(
        staged=["a.py", "lib/b.py"],
        modified=["a.py"],
        created=["lib/b.py"],
        deleted=["c.py"],
    )
    assert unique_files(changes) == ["a.py", "lib/b.py", "c.py"]
    assert classify(changes, "").stats.files_changed == 3


def test_renamed_and_untracked_do_not_count_as_files():
    changes = ChangedFiles(renamed=["new.py"], not_added=["tmp.txt"])
    assert classify(changes, "").files == []


def test_deletion_classifies_as_feat():
    changes = ChangedFiles(deleted=["tests/test_old.py"])
    assert classify(changes, "").type == "feat"


def test_type_priority_order():
    assert classify(ChangedFiles(modified=["tests/test_x.py", "README.md"]), "").type == "test"
    assert classify(ChangedFiles(modified=["docs/guide.md", "config.yml"]), "").type == "docs"
    assert classify(ChangedFiles(modified=["README.md"]), "").type == "docs"
    assert classify(ChangedFiles(modified=["app/config.py"]), "").type == "chore"
    assert classify(ChangedFiles(modified=["package.json"]), "").type == "chore"
    assert classify(ChangedFiles(modified=["app/main.py"]), "").type == "feat"


def test_type_is_order_independent():
    created = ["pkg/new.py"]
    modified = ["tests/test_a.py", "docs/x.md", "setup/config.ini"]
    deleted = ["old/gone.py"]
    expected = classify(
        ChangedFiles(created=created, modified=modified, deleted=deleted), ""
    ).type
    for perm in itertools.permutations(modified):
        changes = ChangedFiles(
            created=list(reversed(created)), modified=list(perm), deleted=deleted
        )
        assert classify(changes, "").type == expected

    modified_only = ["tests/t.py", "docs/readme.md", "src/config.py"]
    types = {
        classify(ChangedFiles(modified=list(p)), "").type
        for p in itertools.permutations(modified_only)
    }
    assert types == {"test"}


def test_scope_most_frequent_directory():
    files = ["src/a.py", "lib/b.py", "src/c.py", "top.py"]
    assert infer_scope(files) == "src"


def test_scope_tie_goes_to_first_seen():
    assert infer_scope(["web/a.js", "api/b.py"]) == "web"
    assert infer_scope(["api/b.py", "web/a.js"]) == "api"


def test_scope_empty_without_directories():
    assert infer_scope(["a.py", "b.py"]) == ""
    assert infer_scope([]) == ""
