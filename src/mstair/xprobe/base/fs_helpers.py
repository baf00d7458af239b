# File: src/mstair/xprobe/base/fs_helpers.py
"""
File System Helpers
"""

from __future__ import annotations

import logging
import tokenize
from collections.abc import Iterator
from itertools import islice
from pathlib import Path
from typing import IO, TypeAlias

import dotenv


__all__ = [
    "StrPath",
    "fs_iter_source_lines",
    "fs_load_dotenv",
    "fs_read_source_lines",
    "fs_safe_relpath",
]

StrPath: TypeAlias = str | Path


def fs_safe_relpath(path: StrPath, root: StrPath) -> str:
    """Return a path with '..' segments, or fallback on the full path, instead of raising"""
    p: Path = Path(path).resolve()
    r: Path = Path(root).resolve()
    try:
        return p.relative_to(r, walk_up=True).as_posix()
    except ValueError:
        return p.as_posix()


def fs_iter_source_lines(path: StrPath, *, start: int = 1, stop: int | None = None) -> Iterator[str]:
    """
    Yield the 1-based lines `start..stop` (inclusive) of a Python source file.

    The encoding is detected the way the interpreter detects it (BOM or PEP 263
    cookie). Reading stops once `stop` is reached, so a short window of a large
    file costs only the lines up to the window end. The file is closed when the
    iterator is exhausted or discarded.

    :param path: The source file to read.
    :param start: First line to yield, 1-based.
    :param stop: Last line to yield, or None to read to the end of the file.
    :raises OSError: If the file cannot be opened.
    :raises SyntaxError: If the encoding cookie is invalid.
    """
    first = max(start, 1) - 1
    with tokenize.open(path) as f:
        yield from islice(f, first, stop)


def fs_read_source_lines(path: StrPath, *, start: int = 1, stop: int | None = None) -> list[str]:
    """Eager version of `fs_iter_source_lines`; the file is closed before returning."""
    return list(fs_iter_source_lines(path, start=start, stop=stop))


def fs_load_dotenv(
    *,
    logger: logging.Logger | None = None,
    dotenv_path: StrPath | None = None,
    stream: IO[str] | None = None,
    verbose: bool = False,
    override: bool = False,
    interpolate: bool = True,
    encoding: str | None = "utf-8",
) -> bool:
    """
    Parse a .env file and then load all the variables found as environment variables.

    :param logger: Logger to use for warnings and info messages, if supplied verbose is enabled.
    :param dotenv_path: Absolute or relative path to .env file.
    :param stream: Text stream (such as `io.StringIO`) with .env content, used if `dotenv_path` is `None`.
    :param verbose: Whether to output a warning the .env file is missing.
    :param override: Whether to override the environment variables with the variables from the `.env` file.
    :param interpolate: Whether to interpolate environment variables in the .env file.
    :return: True if at least one environment variable is set else False

    If both `dotenv_path` and `stream` are `None`, `find_dotenv()` is searched from
    the current working directory.
    """
    if logger is not None and bool(logger):
        dotenv.main.logger = logger
        verbose = True
    if dotenv_path is None and stream is None:
        dotenv_path = dotenv.find_dotenv(usecwd=True) or None
        if dotenv_path is None:
            return False
    return dotenv.load_dotenv(
        dotenv_path=dotenv_path,
        stream=stream,
        verbose=verbose,
        override=override,
        interpolate=interpolate,
        encoding=encoding,
    )


# End of file: src/mstair/xprobe/base/fs_helpers.py
