"""Generate and Serve stages for Blogship.

The static-site generator is an external collaborator. It is invoked from the
project root and reads its own configuration file and content directory, so
the only arguments passed are the ones configured in blogship.yaml.

Key classes:
- Generator: Runs the generator for a build or in preview-server mode.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from .executable_utils import find_executable
from .process import CommandError, ExecutableNotFoundError, run_command
from .settings import Settings

# Exit status reported by shells for a process stopped by SIGINT.
INTERRUPTED = 130


class Generator:
    """Wrapper around the external static-site generator.

    Attributes:
        project_root: Root directory of the blog (the content tree).
        settings: Pipeline settings.
    """

    def __init__(self, project_root: Path, settings: Settings):
        self.project_root = project_root
        self.settings = settings

    @property
    def output_dir(self) -> Path:
        return self.settings.output_path(self.project_root)

    def command(self, *args: str) -> list[str]:
        """Return the generator command line for the given arguments.

        Raises:
            ExecutableNotFoundError: If the generator cannot be located.
        """
        executable = find_executable(self.settings.generator, self.project_root)
        if executable is None:
            raise ExecutableNotFoundError([self.settings.generator, *args])
        return [executable, *args]

    def build(self) -> None:
        """Regenerate the output tree.

        Raises:
            CommandError: If the generator exits non-zero.
        """
        cmd = self.command(*self.settings.generator_args)
        returncode = run_command(cmd, self.project_root)
        if returncode != 0:
            raise CommandError(cmd, returncode)

    def serve(self, extra_args: Sequence[str] = ()) -> int:
        """Run the generator's preview server in the foreground.

        Blocks until the server exits or the operator interrupts it.

        Args:
            extra_args: Additional arguments appended after the configured
                server arguments (e.g. ``--buildDrafts``).

        Returns:
            The server's exit code, or 130 when interrupted.
        """
        cmd = self.command(*self.settings.server_args, *extra_args)
        try:
            return run_command(cmd, self.project_root)
        except KeyboardInterrupt:
            return INTERRUPTED
