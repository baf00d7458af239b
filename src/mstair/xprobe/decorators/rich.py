# File: src/mstair/xprobe/decorators/rich.py
"""
Collapsible HTML output for notebooks and browsers.

Values render as nested ``<details>`` elements; backtrace steps carry their
source window and arguments. The stylesheet is emitted once, by `init()`.
"""

from __future__ import annotations

import html
from collections.abc import Sequence
from typing import TYPE_CHECKING, Final

from mstair.xprobe.decorators.base import caller_label, frame_link, node_summary, step_link
from mstair.xprobe.path_resolver import FileLink
from mstair.xprobe.settings import XProbeSettings
from mstair.xprobe.source_snippet import SourceSnippet
from mstair.xprobe.value_tree import ValueParser


if TYPE_CHECKING:
    from mstair.xprobe.call_site import CallSite
    from mstair.xprobe.frames import Frame
    from mstair.xprobe.trace_normalizer import NormalizedStep
    from mstair.xprobe.value_tree import ValueNode


__all__ = ["RICH_STYLESHEET", "RichDecorator"]

RICH_STYLESHEET: Final[str] = """<style>
.xprobe{font:12px/1.4 monospace;margin:6px 0;color:#1d1e1e}
.xprobe details,.xprobe .xprobe-leaf{background:#e0eaef;border:1px solid #b6cedb;margin:2px 0 2px 12px;padding:2px 6px}
.xprobe summary{cursor:pointer}
.xprobe dfn{font-style:normal;font-weight:bold}
.xprobe var{font-style:normal;color:#0092db}
.xprobe .xprobe-note{color:#c00}
.xprobe .xprobe-source{border-collapse:collapse;margin:4px 0;background:#f5f5f5}
.xprobe .xprobe-source td{padding:0 6px;white-space:pre}
.xprobe .xprobe-source .xprobe-highlight{background:#cfc}
.xprobe footer{color:#666;margin:4px 0 0 12px}
.xprobe footer ol{margin:0}
</style>
"""

_ROLE_TAGS: Final[dict[str, tuple[str, str]]] = {
    "name": ("<dfn>", "</dfn>"),
    "type": ("<var>", "</var>"),
    "value": ("<code>", "</code>"),
    "note": ('<span class="xprobe-note">', "</span>"),
}


class RichDecorator:
    """Render dumps as collapsible HTML."""

    settings: XProbeSettings

    def __init__(self, settings: XProbeSettings) -> None:
        self.settings = settings
        self._parser = ValueParser(settings)

    def init(self) -> str:
        return RICH_STYLESHEET

    def wrap_start(self, call_site: CallSite | None) -> str:
        return '<div class="xprobe">'

    def decorate(self, node: ValueNode) -> str:
        return self._node_html(node)

    def decorate_trace(self, steps: Sequence[NormalizedStep]) -> str:
        items: list[str] = []
        for step in steps:
            link = step_link(step, self.settings)
            location = self._link(link) if link else "&lt;unknown&gt;"
            if step.is_marker:
                items.append(f"<li>{location}</li>")
                continue
            body = self._source_html(step.source) if step.source else ""
            for name, value in (step.args or {}).items():
                self._parser.reset()
                body += self._node_html(self._parser.parse(value, name))
            head = f"<b>{html.escape(step.function)}()</b> {location}"
            if not body:
                items.append(f"<li>{head}</li>")
                continue
            items.append(
                f"<li><details{self._open_attr()}><summary>{head}</summary>{body}</details></li>"
            )
        return '<ol class="xprobe-trace">' + "".join(items) + "</ol>"

    def wrap_end(
        self,
        call_site: CallSite | None,
        mini_trace: Sequence[Frame],
        previous_caller: Frame | None,
    ) -> str:
        if not self.settings.display_called_from or call_site is None:
            return "</div>"
        footer = ""
        link = frame_link(call_site.frame, self.settings)
        if link is not None:
            footer = f"Called from {self._link(link)}"
            if previous_caller is not None:
                footer += f" [{html.escape(caller_label(previous_caller))}]"
        trace_items = []
        for frame in mini_trace:
            frame_loc = frame_link(frame, self.settings)
            if frame_loc is not None:
                label = html.escape(caller_label(frame))
                trace_items.append(f"<li>{self._link(frame_loc)} [{label}]</li>")
        if trace_items:
            footer += "<ol>" + "".join(trace_items) + "</ol>"
        return f"<footer>{footer}</footer></div>" if footer else "</div>"

    # ---------- internals ----------

    def _open_attr(self) -> str:
        return " open" if self.settings.expanded_by_default else ""

    def _summary_html(self, node: ValueNode) -> str:
        pieces = []
        for role, text in node_summary(node):
            start, end = _ROLE_TAGS[role]
            pieces.append(f"{start}{html.escape(text, quote=False)}{end}")
        return " ".join(pieces)

    def _node_html(self, node: ValueNode) -> str:
        if not node.is_expandable:
            return f'<div class="xprobe-leaf">{self._summary_html(node)}</div>'
        children = "".join(self._node_html(child) for child in node.children)
        return (
            f"<details{self._open_attr()}>"
            f"<summary>{self._summary_html(node)}</summary>{children}</details>"
        )

    def _source_html(self, snippet: SourceSnippet) -> str:
        rows = []
        for row in snippet.rows():
            css = ' class="xprobe-highlight"' if row.highlighted else ""
            rows.append(
                f"<tr{css}><td>{row.number:>{snippet.number_width}}</td>"
                f"<td>{html.escape(row.text, quote=False)}</td></tr>"
            )
        return '<table class="xprobe-source">' + "".join(rows) + "</table>"

    def _link(self, link: FileLink) -> str:
        label = html.escape(link.label, quote=False)
        if link.url:
            return f'<a href="{html.escape(link.url)}">{label}</a>'
        return label


# End of file: src/mstair/xprobe/decorators/rich.py
