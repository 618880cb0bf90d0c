"""Tests for reading mailmap sources out of real git repositories."""

import os
import shutil
import subprocess

import pytest

from git_mailmap.errors import RepositoryAccessError
from git_mailmap.gitutils import GitRepository
from git_mailmap.mailmap import Mailmap

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git not found")

GIT_ENV = {
    "GIT_AUTHOR_NAME": "Test",
    "GIT_AUTHOR_EMAIL": "test@example.com",
    "GIT_COMMITTER_NAME": "Test",
    "GIT_COMMITTER_EMAIL": "test@example.com",
    "GIT_CONFIG_NOSYSTEM": "1",
}


def git(repo, *args):
    env = dict(os.environ, **GIT_ENV)
    env["HOME"] = str(repo)
    return subprocess.check_output(["git"] + list(args), cwd=str(repo), env=env)


@pytest.fixture
def worktree(tmp_path, monkeypatch):
    repo = tmp_path / "repo"
    repo.mkdir()
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    git(repo, "init", "-q")
    return repo


def test_repository_without_mailmap(worktree):
    repo = GitRepository(str(worktree))
    assert repo.has_worktree()
    assert repo.read_worktree_mailmap() is None
    assert repo.get_config("mailmap.blob") is None
    assert len(Mailmap.from_repository(repo)) == 0


def test_worktree_mailmap(worktree):
    (worktree / ".mailmap").write_bytes(b"Jane Doe <jane@new.com> <jane@old.com>\n")
    subdir = worktree / "sub"
    subdir.mkdir()
    mailmap = Mailmap.from_repository(GitRepository(str(subdir)))
    assert mailmap.resolve("jd", "jane@old.com") == ("Jane Doe", "jane@new.com")


def test_configured_blob_and_file(worktree):
    (worktree / ".mailmap").write_bytes(b"From Worktree <a@x.com>\n")
    (worktree / "blobmap").write_bytes(b"From Blob <a@x.com>\nBlob B <b@x.com>\n")
    git(worktree, "add", "blobmap")
    git(worktree, "commit", "-q", "-m", "Add blobmap")
    (worktree / "filemap").write_bytes(b"From File <a@x.com>\n")
    git(worktree, "config", "mailmap.blob", "HEAD:blobmap")
    git(worktree, "config", "mailmap.file", "filemap")

    mailmap = Mailmap.from_repository(GitRepository(str(worktree)))
    assert mailmap.resolve("x", "a@x.com") == ("From File", "a@x.com")
    assert mailmap.resolve("x", "b@x.com") == ("Blob B", "b@x.com")


def test_missing_configured_sources_are_skipped(worktree):
    git(worktree, "config", "mailmap.blob", "HEAD:nothing-here")
    git(worktree, "config", "mailmap.file", "nothing-here")
    repo = GitRepository(str(worktree))
    assert repo.read_blob("HEAD:nothing-here") is None
    assert repo.read_file("nothing-here") is None
    assert len(Mailmap.from_repository(repo)) == 0


def test_configured_blob_that_is_not_a_blob_is_skipped(worktree):
    (worktree / "file").write_bytes(b"content\n")
    git(worktree, "add", "file")
    git(worktree, "commit", "-q", "-m", "Add file")
    repo = GitRepository(str(worktree))
    assert repo.read_blob("HEAD") is None
    assert repo.read_blob("HEAD^{tree}") is None
    assert repo.read_blob("HEAD:file") == b"content\n"
    git(worktree, "config", "mailmap.blob", "HEAD")
    assert len(Mailmap.from_repository(repo)) == 0


def test_latin1_worktree_mailmap_is_skipped(worktree):
    (worktree / ".mailmap").write_bytes(b"Ren\xe9 <rene@x.com>\n")
    (worktree / "filemap").write_bytes(b"Jane <jane@x.com>\n")
    git(worktree, "config", "mailmap.file", "filemap")
    mailmap = Mailmap.from_repository(GitRepository(str(worktree)))
    assert len(mailmap) == 1
    assert mailmap.resolve("J", "jane@x.com") == ("Jane", "jane@x.com")


def test_bare_repository_reads_head_mailmap(worktree, tmp_path):
    (worktree / ".mailmap").write_bytes(b"Jane Doe <jane@x.com>\n")
    git(worktree, "add", ".mailmap")
    git(worktree, "commit", "-q", "-m", "Add mailmap")
    bare = tmp_path / "bare.git"
    git(tmp_path, "clone", "-q", "--bare", str(worktree), str(bare))

    repo = GitRepository(str(bare))
    assert not repo.has_worktree()
    assert repo.read_worktree_mailmap() is None
    mailmap = Mailmap.from_repository(repo)
    assert mailmap.resolve("jd", "jane@x.com") == ("Jane Doe", "jane@x.com")


def test_not_a_repository(tmp_path, monkeypatch):
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    with pytest.raises(RepositoryAccessError):
        Mailmap.from_repository(GitRepository(str(tmp_path)))
