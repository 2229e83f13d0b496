import os
import shutil
import stat
import subprocess
import sys
from pathlib import Path

import pytest

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
requires_posix = pytest.mark.skipif(sys.platform == "win32", reason="uses a shell script generator")


def git(*args, cwd):
    return subprocess.run(
        ["git", *args],
        cwd=cwd,
        check=True,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    ).stdout.strip()


def commit_count(repo: Path, ref: str = "HEAD") -> int:
    return int(git("rev-list", "--count", ref, cwd=repo))


@pytest.fixture
def remote_repo(tmp_path):
    """A bare repository standing in for the hosting provider."""
    remote = tmp_path / "remote.git"
    remote.mkdir()
    git("init", "--bare", cwd=remote)
    return remote


@pytest.fixture
def blog(tmp_path, remote_repo):
    """A blog project whose public/ is a clone-like repo pushing to remote_repo.

    The generator is a shell script at bin/fake-hugo that renders every
    content/*.md file into public/ and records each invocation in calls.log.
    """
    project = tmp_path / "blog"
    (project / "content" / "posts").mkdir(parents=True)
    (project / "content" / "posts" / "hello.md").write_text(
        "---\ntitle: Hello\ncategories: [intro]\n---\n\nFirst post.\n", encoding="utf-8"
    )

    script = project / "bin" / "fake-hugo"
    script.parent.mkdir()
    script.write_text(
        "#!/bin/sh\n"
        'echo "$@" >> calls.log\n'
        "mkdir -p public\n"
        "for f in content/posts/*.md; do\n"
        '  cp "$f" "public/$(basename "$f" .md).html"\n'
        "done\n",
        encoding="utf-8",
    )
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    (project / "blogship.yaml").write_text("generator: ./bin/fake-hugo\n", encoding="utf-8")

    public = project / "public"
    public.mkdir()
    git("init", cwd=public)
    git("symbolic-ref", "HEAD", "refs/heads/master", cwd=public)
    git("config", "user.name", "Blog Author", cwd=public)
    git("config", "user.email", "author@example.com", cwd=public)
    git("config", "commit.gpgsign", "false", cwd=public)
    git("remote", "add", "origin", os.fspath(remote_repo), cwd=public)
    return project
