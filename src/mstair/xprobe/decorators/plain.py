# File: src/mstair/xprobe/decorators/plain.py
"""
Text output for terminals, logs and plain HTML pages.

One decorator class serves three modes:

- Mode.WHITESPACE: indented plain text, nothing else;
- Mode.CLI: the same text, colored with colorama on interactive terminals;
- Mode.PLAIN: the same text HTML-escaped inside ``<pre>``, with editor links.
"""

from __future__ import annotations

import html
from collections.abc import Sequence
from typing import TYPE_CHECKING, Final

from colorama import Fore, Style

import mstair.xprobe.base.config as cfg
from mstair.xprobe.decorators.base import caller_label, frame_link, node_summary, step_link
from mstair.xprobe.path_resolver import FileLink
from mstair.xprobe.settings import Mode, XProbeSettings
from mstair.xprobe.value_tree import ValueParser


if TYPE_CHECKING:
    from mstair.xprobe.call_site import CallSite
    from mstair.xprobe.frames import Frame
    from mstair.xprobe.trace_normalizer import NormalizedStep
    from mstair.xprobe.value_tree import ValueNode


__all__ = ["PlainDecorator"]

INDENT: Final[str] = "    "

CLI_COLORS: Final[dict[str, str]] = {
    "name": Fore.CYAN,
    "type": Fore.BLUE,
    "value": Fore.GREEN,
    "note": Fore.RED,
    "location": Style.DIM,
    "function": Fore.YELLOW,
}

_PLAIN_STYLE: Final[str] = (
    "<style>"
    ".xprobe-plain{background:#f8f8f8;color:#222;padding:4px 8px;font:12px monospace}"
    ".xprobe-plain a{color:inherit}"
    "</style>"
)


class PlainDecorator:
    """
    Render dumps as indented text.

    :param mode: WHITESPACE, CLI or PLAIN.
    :param settings: Supplies path shortening, link format and footer switches.
    """

    mode: Mode
    settings: XProbeSettings

    def __init__(self, mode: Mode, settings: XProbeSettings) -> None:
        if mode is Mode.RICH:
            raise ValueError("PlainDecorator does not render Mode.RICH")
        self.mode = mode
        self.settings = settings
        self._parser = ValueParser(settings)

    @property
    def colored(self) -> bool:
        return self.mode is Mode.CLI and self.settings.cli_colors and cfg.in_desktop_mode()

    def init(self) -> str:
        return _PLAIN_STYLE if self.mode is Mode.PLAIN else ""

    def wrap_start(self, call_site: CallSite | None) -> str:
        return '<pre class="xprobe-plain">' if self.mode is Mode.PLAIN else ""

    def decorate(self, node: ValueNode) -> str:
        return "".join(self._node_lines(node, base_depth=0))

    def decorate_trace(self, steps: Sequence[NormalizedStep]) -> str:
        out: list[str] = []
        for number, step in enumerate(steps, start=1):
            link = step_link(step, self.settings)
            location = self._link(link) if link else self._text("<unknown>")
            head = f"{number}. {self._paint(location, 'location')}"
            if step.is_marker:
                out.append(head + "\n")
                continue
            out.append(f"{head} {self._paint(self._text(step.function + '()'), 'function')}\n")
            for name, value in (step.args or {}).items():
                self._parser.reset()
                out.extend(self._node_lines(self._parser.parse(value, name), base_depth=1))
        return "".join(out)

    def wrap_end(
        self,
        call_site: CallSite | None,
        mini_trace: Sequence[Frame],
        previous_caller: Frame | None,
    ) -> str:
        footer = ""
        if self.settings.display_called_from and call_site is not None:
            link = frame_link(call_site.frame, self.settings)
            if link is not None:
                footer = f"Called from {self._paint(self._link(link), 'location')}"
                if previous_caller is not None:
                    footer += f" [{self._text(caller_label(previous_caller))}]"
                footer += "\n"
            for frame in mini_trace:
                frame_loc = frame_link(frame, self.settings)
                if frame_loc is None:
                    continue
                footer += f"{INDENT}{self._paint(self._link(frame_loc), 'location')}"
                footer += f" [{self._text(caller_label(frame))}]\n"
        if self.mode is Mode.PLAIN:
            footer += "</pre>"
        return footer

    # ---------- internals ----------

    def _node_lines(self, node: ValueNode, base_depth: int) -> list[str]:
        lines: list[str] = []
        for depth, item in node.walk(base_depth):
            pieces = [self._paint(self._text(text), role) for role, text in node_summary(item)]
            lines.append(INDENT * depth + " ".join(pieces) + "\n")
        return lines

    def _text(self, text: str) -> str:
        return html.escape(text, quote=False) if self.mode is Mode.PLAIN else text

    def _link(self, link: FileLink) -> str:
        if self.mode is Mode.PLAIN and link.url:
            return f'<a href="{html.escape(link.url)}">{html.escape(link.label, quote=False)}</a>'
        return self._text(link.label)

    def _paint(self, text: str, role: str) -> str:
        if not self.colored:
            return text
        return f"{CLI_COLORS.get(role, '')}{text}{Style.RESET_ALL}"


# End of file: src/mstair/xprobe/decorators/plain.py
