"""Publish stage for Blogship.

The output tree is its own git repository, checked out on the hosting branch
and configured with a remote. Publishing stages everything the generator
wrote, commits it with a timestamped message when anything changed and pushes
the branch to the remote.

Key objects:
- Publisher: Runs the git steps against the output tree.
- PublishResult: What a publish did.
- format_timestamp / commit_message: Commit message rendering.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from .executable_utils import find_executable
from .process import CommandError, ExecutableNotFoundError, check_command, run_command
from .settings import Settings

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S+0000"


class PublishError(Exception):
    """Raised when the output tree cannot be published.

    Attributes:
        output_dir: The output tree.
        message: Human-readable error message.
    """

    def __init__(self, output_dir: Path, message: str):
        self.output_dir = output_dir
        self.message = message
        super().__init__(f"{output_dir}: {message}")


@dataclass(frozen=True)
class PublishResult:
    """Outcome of a publish.

    Attributes:
        committed: Whether a new commit was created.
        message: The commit message, or None when nothing was staged.
        remote: Remote that was pushed to.
        branch: Branch that was pushed.
        published_at: Time stamped into the commit message.
    """

    committed: bool
    message: str | None
    remote: str
    branch: str
    published_at: datetime


def format_timestamp(moment: datetime) -> str:
    """Render a moment as ``YYYY-MM-DDTHH:MM:SS+0000`` in UTC.

    Naive datetimes are taken to be UTC already.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def commit_message(template: str, moment: datetime) -> str:
    """Fill the {timestamp} placeholder of a commit message template.

    >>> commit_message("Rebuild site ({timestamp})", datetime(2013, 11, 19, 14, 32, 5))
    'Rebuild site (2013-11-19T14:32:05+0000)'
    """
    return template.replace("{timestamp}", format_timestamp(moment))


class Publisher:
    """Commits and pushes the output tree.

    Attributes:
        output_dir: The output tree (a git working tree of its own).
        settings: Pipeline settings.
        project_root: Base for a relative git path and the bin/ lookup;
            defaults to the output tree's parent.
    """

    def __init__(
        self, output_dir: Path, settings: Settings, project_root: Path | None = None
    ):
        self.output_dir = output_dir
        self.settings = settings
        self.project_root = project_root if project_root is not None else output_dir.parent

    def publish(self, now: datetime | None = None) -> PublishResult:
        """Stage, commit when needed, and push the output tree.

        The commit step is skipped when nothing is staged, so publishing an
        unchanged tree twice creates no empty commit. The push always runs,
        which also retries a push that failed on an earlier run.

        Args:
            now: Time for the commit message, normally captured when the
                deploy started; defaults to the current UTC time.

        Returns:
            PublishResult describing the publish.

        Raises:
            PublishError: If the output tree is missing or not a repository.
            CommandError: If a git step exits non-zero.
        """
        published_at = now or datetime.now(timezone.utc)
        self._check_output_tree()

        self._git("add", "--all", ".")
        message = None
        if self.has_staged_changes():
            message = commit_message(self.settings.message, published_at)
            self._git("commit", "-m", message)
        self._git("push", self.settings.remote, self.settings.branch)

        return PublishResult(
            committed=message is not None,
            message=message,
            remote=self.settings.remote,
            branch=self.settings.branch,
            published_at=published_at,
        )

    def has_staged_changes(self) -> bool:
        """Return True when the index differs from HEAD.

        Raises:
            CommandError: If git reports an error instead of a diff status.
        """
        cmd = self._git_command("diff", "--cached", "--quiet")
        returncode = run_command(cmd, self.output_dir)
        if returncode not in (0, 1):
            raise CommandError(cmd, returncode)
        return returncode == 1

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _check_output_tree(self) -> None:
        if not self.output_dir.is_dir():
            raise PublishError(self.output_dir, "output directory does not exist; build the site first")
        # .git is a directory for a clone and a file for worktrees and submodules.
        if not (self.output_dir / ".git").exists():
            raise PublishError(self.output_dir, "output directory is not a git repository")

    def _git_command(self, *args: str) -> list[str]:
        executable = find_executable(self.settings.git, self.project_root)
        if executable is None:
            raise ExecutableNotFoundError([self.settings.git, *args])
        return [executable, *args]

    def _git(self, *args: str) -> None:
        check_command(self._git_command(*args), self.output_dir)
