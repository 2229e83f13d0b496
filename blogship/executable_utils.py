"""Executable discovery utilities for Blogship.

This module locates the external tools the pipeline drives: the static-site
generator and git. Tools are looked up in the system PATH first, then in a
project-local bin/ directory, which is where a pinned generator binary is
usually dropped next to a blog's sources.

Functions:
    find_executable: Locate an executable in PATH or the project's bin/.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path


def find_executable(name: str, project_root: Path | None = None) -> str | None:
    """Find an executable in PATH or the project's bin/ directory.

    Names that contain a path separator (``./tools/hugo``, ``/opt/hugo/hugo``)
    are treated as paths: relative ones are resolved against the project root
    and the returned path is always absolute, so it stays valid whatever
    working directory the command runs in.

    Args:
        name: Name or path of the executable to find (e.g., 'hugo', 'git').
        project_root: Optional project root used for relative paths and the
            local bin/ lookup.

    Returns:
        Full path to the executable if found, None otherwise.

    Examples:
        >>> find_executable('git')  # System PATH lookup
        '/usr/bin/git'

        >>> find_executable('hugo', Path('/my/blog'))  # With local lookup
        '/my/blog/bin/hugo'
    """
    if os.sep in name or (os.altsep and os.altsep in name):
        candidate = Path(name)
        if not candidate.is_absolute() and project_root is not None:
            candidate = project_root / candidate
        if candidate.is_file() and os.access(candidate, os.X_OK):
            return str(candidate.absolute())
        return None

    found = shutil.which(name)
    if found:
        return found

    if project_root is not None:
        local = project_root / "bin" / name
        if local.is_file() and os.access(local, os.X_OK):
            return str(local.absolute())

    return None
