from pathlib import Path

import pytest

git = pytest.importorskip("git", reason="GitPython needs a git executable")

from vaultdiff.base import VaultDiffError
from vaultdiff.git_provider import GitDiffProvider, open_repository
from vaultdiff.model import ChangedFile
from vaultdiff.reconstruct import first_content_line, reconstruct


@pytest.fixture
def repo(tmp_path):
    repo = git.Repo.init(tmp_path)
    with repo.config_writer() as cw:
        cw.set_value("user", "name", "Test User")
        cw.set_value("user", "email", "test@example.com")
        cw.set_value("commit", "gpgsign", "false")
    yield repo
    repo.close()


def write(repo, name, content):
    path = Path(repo.working_tree_dir) / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding='utf-8')


def commit(repo, files, message="commit"):
    for name, content in files.items():
        write(repo, name, content)
    repo.index.add(list(files))
    repo.index.commit(message)


def numbered(count, changed=None):
    return ''.join(
        ("changed\n" if i == changed else f"line{i}\n") for i in range(1, count + 1)
    )


def test_changed_files_in_git_order(repo):
    commit(repo, {"b.txt": "b\n", "a.txt": "a\n", "dir/c.txt": "c\n"})
    write(repo, "dir/c.txt", "C\n")
    write(repo, "b.txt", "B\n")
    write(repo, "a.txt", "A\n")

    files = GitDiffProvider(repo).changed_files(())

    assert files == [ChangedFile("a.txt"), ChangedFile("b.txt"), ChangedFile("dir/c.txt")]


def test_changed_files_between_revisions(repo):
    commit(repo, {"a.txt": "a\n", "b.txt": "b\n"})
    commit(repo, {"b.txt": "B\n"})
    write(repo, "a.txt", "uncommitted\n")

    files = GitDiffProvider(repo).changed_files(("HEAD~1", "HEAD"))

    assert files == [ChangedFile("b.txt")]


def test_path_scope_is_relative_to_cwd(repo, monkeypatch):
    commit(repo, {"a.txt": "a\n", "sub/b.txt": "b\n"})
    write(repo, "a.txt", "A\n")
    write(repo, "sub/b.txt", "B\n")
    monkeypatch.chdir(Path(repo.working_tree_dir) / "sub")

    files = GitDiffProvider(repo).changed_files((), ".")

    assert files == [ChangedFile("sub/b.txt")]


def test_file_diff_is_the_git_diff(repo):
    commit(repo, {"a.txt": numbered(20)})
    write(repo, "a.txt", numbered(20, changed=15))

    raw = GitDiffProvider(repo).file_diff((), ChangedFile("a.txt"))

    assert raw.startswith("diff --git a/a.txt b/a.txt\n")
    assert raw.endswith("\n")
    assert "@@ -12,7 +12,7 @@" in raw
    assert first_content_line(raw) == "line12\n"


def test_full_context_diff_covers_the_whole_file(repo):
    commit(repo, {"a.txt": numbered(20)})
    write(repo, "a.txt", numbered(20, changed=15))

    raw = GitDiffProvider(repo).file_diff((), ChangedFile("a.txt"), full_context=True)
    old, new = reconstruct(raw)

    assert first_content_line(raw) == "line1\n"
    assert old.text == numbered(20)
    assert new.text == numbered(20, changed=15)


def test_file_diff_matches_the_path_literally(repo):
    commit(repo, {"a[1].txt": "x\n", "a1.txt": "y\n"})
    write(repo, "a[1].txt", "X\n")
    write(repo, "a1.txt", "Y\n")

    raw = GitDiffProvider(repo).file_diff((), ChangedFile("a[1].txt"))

    assert raw.count("diff --git") == 1
    assert raw.startswith("diff --git a/a[1].txt b/a[1].txt\n")
    assert "a1.txt" not in raw


def test_colored_file_diff(repo):
    commit(repo, {"a.txt": "a\n"})
    write(repo, "a.txt", "b\n")

    provider = GitDiffProvider(repo)
    assert '\x1b[' in provider.file_diff((), ChangedFile("a.txt"), color=True)
    assert '\x1b[' not in provider.file_diff((), ChangedFile("a.txt"), color=False)


def test_bad_revision_is_fatal(repo):
    commit(repo, {"a.txt": "a\n"})
    with pytest.raises(VaultDiffError, match="git diff failed"):
        GitDiffProvider(repo).changed_files(("no-such-revision",))


@pytest.mark.parametrize("section, option, value, is_tty, expected", [
    ("color", "diff", "false", True, False),
    ("color", "diff", "always", False, True),
    ("color", "diff", "auto", True, True),
    ("color", "diff", "auto", False, False),
])
def test_color_default(repo, section, option, value, is_tty, expected):
    with repo.config_writer() as cw:
        cw.set_value(section, option, value)
    assert GitDiffProvider(repo).color_default(is_tty) is expected


def test_open_repository_searches_parents(repo):
    commit(repo, {"deep/dir/a.txt": "a\n"})
    found = open_repository(Path(repo.working_tree_dir) / "deep" / "dir")
    try:
        assert Path(found.working_tree_dir) == Path(repo.working_tree_dir)
    finally:
        found.close()


def test_open_repository_outside_a_repo(tmp_path):
    with pytest.raises(VaultDiffError, match="not inside a git repository"):
        open_repository(tmp_path / "missing")
