from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Iterable, List, Literal

import ipywidgets as w

from dsc2asc.models.results import ConversionResult


Level = Literal["info", "warning", "error"]

_COLORS = {"error": "#b00020", "warning": "#b26a00", "info": "#222222"}


@dataclass
class _Entry:
    level: Level
    message: str
    count: int = 1


class HtmlLog:
    """
    Notebook log view rendered into a single HTML widget.

    - severity coloring: warnings in orange, errors in red
    - consecutive identical messages are coalesced (shown as xN)
    - bounded history (oldest entries dropped beyond max_entries)
    """

    def __init__(self, *, title: str | None = None, height_px: int = 160, max_entries: int = 500) -> None:
        self._entries: List[_Entry] = []
        self._height_px = int(height_px)
        self._max_entries = int(max_entries)
        self.widget = w.HTML()
        if title:
            self.panel = w.VBox([w.HTML(f"<b>{html.escape(str(title))}</b>"), self.widget])
        else:
            self.panel = self.widget
        self.clear()

    @property
    def messages(self) -> List[str]:
        return [e.message for e in self._entries]

    def clear(self) -> None:
        self._entries.clear()
        self._render()

    def info(self, message: str) -> None:
        self._add("info", message)

    def warning(self, message: str) -> None:
        self._add("warning", message)

    def error(self, message: str) -> None:
        self._add("error", message)

    def extend(self, messages: Iterable[str], level: Level = "warning") -> None:
        for m in messages:
            self._add(level, m)

    def report(self, result: ConversionResult) -> None:
        """Log the outcome of one conversion run."""
        self.extend(result.warnings, "warning")
        for f in result.failures:
            self.error(f"Interval {f.interval_index + 1} ({f.name}): {f.message}")
        self.info(f"Done: {result.n_converted} of {result.n_convertible} converted (eligible {result.n_eligible})")

    def _add(self, level: Level, message: str) -> None:
        msg = "" if message is None else str(message)
        if self._entries and self._entries[-1].level == level and self._entries[-1].message == msg:
            self._entries[-1].count += 1
        else:
            self._entries.append(_Entry(level=level, message=msg))
            if len(self._entries) > self._max_entries:
                self._entries = self._entries[-self._max_entries :]
        self._render()

    def _render(self) -> None:
        rows = []
        for e in self._entries:
            suffix = f" (x{e.count})" if e.count > 1 else ""
            rows.append(
                f"<div style='color:{_COLORS[e.level]}; white-space:pre-wrap; font-family:monospace;'>"
                f"{html.escape(e.message + suffix)}</div>"
            )
        inner = "".join(rows) if rows else "<div style='color:#666;'>Log is empty.</div>"
        self.widget.value = (
            f"<div style='border:1px solid #ddd; padding:8px; height:{self._height_px}px; "
            f"overflow-y:auto; background:#fff;'>{inner}</div>"
        )
