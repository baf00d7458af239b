# File: src/mstair/xprobe/base/git_helpers.py
"""
Git Helpers Module

Locates the working tree that contains a source file, so dumped paths can be
shown relative to the repository they belong to.
"""

from __future__ import annotations

import os
from functools import cache
from pathlib import Path


# GitPython probes for a git executable at import time; a missing binary must
# only disable the repository lookup, not the import.
os.environ.setdefault("GIT_PYTHON_REFRESH", "quiet")

import git  # noqa: E402
import git.exc  # noqa: E402


__all__ = [
    "git_repo",
    "git_repo_basedir",
]


def git_repo(start_dir: Path | str = ".") -> git.Repo:
    """
    Locate and return the Git repository containing the specified directory.

    :param start_dir: The directory to start searching from. Defaults to the current directory.
    :raise InvalidGitRepositoryError: If the directory is not inside a Git repository.
    :returns: The Git repository object representing the found repository.
    """
    return _git_repo_cache_impl(start=str(start_dir))


@cache
def _git_repo_cache_impl(*, start: str) -> git.Repo:
    return git.Repo(start, search_parent_directories=True)


def git_repo_basedir(start: str | Path = ".") -> str | None:
    """
    Return the working tree root for the specified file or directory, or None.

    Unlike `git_repo()`, a path outside any repository (or a bare repository, or a
    host without a git executable) is not an error here: the answer is None.

    :param start: The directory or file path to start the search from, default is ".".
    :returns: The repository base path with forward slashes, or None.

    Usage:
        REPO_BASE = git_repo_basedir(__file__)
    """
    return _git_repo_basedir_cache_impl(start=str(start))


@cache
def _git_repo_basedir_cache_impl(*, start: str) -> str | None:
    start_path = Path(start or ".").resolve()
    if not start_path.is_dir():
        start_path = start_path.parent
    if not start_path.is_dir():
        return None
    try:
        repo: git.Repo = git_repo(start_path.as_posix())
        tree_dir = repo.working_tree_dir
    except (git.exc.GitError, OSError, ValueError):
        return None
    if tree_dir is None:
        return None
    return str(Path(tree_dir).resolve()).replace("\\", "/")


# End of file: src/mstair/xprobe/base/git_helpers.py
