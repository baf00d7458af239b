# File: src/mstair/xprobe/test_path_resolver.py
"""
Tests for display path shortening and editor links.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from mstair.xprobe import path_resolver
from mstair.xprobe.base import git_helpers
from mstair.xprobe.path_resolver import FileLink, file_link, shorten_path
from mstair.xprobe.settings import XProbeSettings


@pytest.fixture
def no_git(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(git_helpers, "git_repo_basedir", lambda start=".": None)


def test_app_root_label(no_git: None) -> None:
    settings = XProbeSettings(app_root_dirs={"": "<EMPTY>", "/srv/app": "<APP>", "/srv": "<SRV>"})
    assert shorten_path("/srv/app/jobs/run.py", settings) == "<APP>/jobs/run.py"
    assert shorten_path("/srv/other.py", settings) == "<SRV>/other.py"


def test_backslashes_are_normalized(no_git: None) -> None:
    settings = XProbeSettings(app_root_dirs={"C:\\work\\app": "<APP>"})
    assert shorten_path("C:\\work\\app\\main.py", settings) == "<APP>/main.py"


def test_git_working_tree(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    repo = (tmp_path / "shop").resolve()
    source = repo / "src" / "cart.py"
    source.parent.mkdir(parents=True)
    source.write_text("x = 1\n", encoding="utf-8")
    monkeypatch.setattr(git_helpers, "git_repo_basedir", lambda start=".": repo.as_posix())
    assert shorten_path(source.as_posix(), XProbeSettings()) == "<shop>/src/cart.py"


def test_pseudo_files_skip_git(monkeypatch: pytest.MonkeyPatch) -> None:
    def fail(start: str = ".") -> str:
        raise AssertionError("git lookup for a pseudo file")

    monkeypatch.setattr(git_helpers, "git_repo_basedir", fail)
    assert shorten_path("<stdin>", XProbeSettings()) == "<stdin>"


class TestCommonPrefix:
    def test_shared_prefix_is_elided(self) -> None:
        assert path_resolver._shorten_by_common_prefix("/a/b/x/m.py", anchor="/a/b/c") == ".../x/m.py"

    def test_nothing_shared(self) -> None:
        assert path_resolver._shorten_by_common_prefix("rel/m.py", anchor="/a") == "rel/m.py"

    def test_file_name_is_always_kept(self) -> None:
        assert path_resolver._shorten_by_common_prefix("/a/b", anchor="/a/b") == ".../b"

    def test_fallback_is_relative_to_package(self, no_git: None) -> None:
        sibling = Path(path_resolver.PACKAGE_DIR).parent / "other" / "m.py"
        assert shorten_path(sibling.as_posix(), XProbeSettings()) == ".../other/m.py"


class TestFileLink:
    def test_without_format(self, no_git: None) -> None:
        settings = XProbeSettings(app_root_dirs={"/srv/app": "<APP>"})
        assert file_link("/srv/app/m.py", 7, settings) == FileLink(None, "<APP>/m.py:7")

    def test_with_format(self, no_git: None) -> None:
        settings = XProbeSettings(
            app_root_dirs={"/srv/app": "<APP>"}, file_link_format="vscode://file/%f:%l"
        )
        link = file_link("/srv/app/m.py", 7, settings)
        assert link.url == "vscode://file//srv/app/m.py:7"
        assert link.label == "<APP>/m.py:7"

    def test_without_line(self, no_git: None) -> None:
        settings = XProbeSettings(app_root_dirs={"/srv/app": "<APP>"}, file_link_format="x:%f")
        assert file_link("/srv/app/m.py", None, settings) == FileLink(None, "<APP>/m.py")


# End of file: src/mstair/xprobe/test_path_resolver.py
