"""Where wrestler writes: endpoint results to stdout, diagnostics to stderr.

Endpoint results (decoded JSON, raw text, status names, envelopes) are the
only thing that ever reaches stdout, so ``wrestler call ... | jq`` works.
Request traces, status-code reports and errors go to stderr.

The library itself only produces diagnostics: the default response handler
reports non-success status codes through :func:`error` and the dispatcher
traces each request through :func:`debug`. Embedding applications can
install their own :class:`OutputManager` with :func:`set_output`, e.g. a
quiet one, or a verbose one to see every request.

Rendering follows the resolved :class:`OutputFormat`. ``AUTO`` picks Rich
on an interactive terminal with colour enabled and plain text otherwise;
``NO_COLOR`` (any value), ``TERM=dumb`` and ``--no-color`` disable colour.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """How endpoint results are rendered on stdout."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


# Diagnostic levels: (rich style, plain-text prefix, hidden by --quiet).
_LEVELS: dict[str, tuple[str, str, bool]] = {
    "info": ("", "", True),
    "success": ("green", "", True),
    "hint": ("dim", "→ ", True),
    "error": ("bold red", "", False),
    "debug": ("dim", "[debug] ", False),
}


class OutputManager:
    """Renders endpoint results and diagnostics for one process.

    Args:
        format: Result format; ``AUTO`` is resolved once, here.
        no_color: Never emit colour or Rich markup.
        quiet: Hide informational diagnostics. Errors still show.
        verbose: Show debug diagnostics such as request traces.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            rich_ok = _is_tty() and not self._no_color
            format = OutputFormat.RICH if rich_ok else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)
        self._renderers: dict[OutputFormat, Callable[[Any], None]] = {
            OutputFormat.JSON: self._render_json,
            OutputFormat.PLAIN: self._render_plain,
            OutputFormat.RICH: self._render_rich,
        }

    @property
    def format(self) -> OutputFormat:
        return self._format

    # ------------------------------------------------------------------ #
    # Results (stdout)
    # ------------------------------------------------------------------ #

    def format_response(self, data: Any) -> None:
        """Render one endpoint result.

        Models such as an unprocessed
        :class:`~wrestler.models.ResponseEnvelope` are dumped to plain data
        first, so every handler's output can be printed.
        """
        if isinstance(data, BaseModel):
            data = data.model_dump(mode="json")
        self._renderers[self._format](data)

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Render rows as JSON records, tab-separated lines or a Rich table."""
        if self._format == OutputFormat.JSON:
            self._render_json([dict(zip(headers, row)) for row in rows])
            return
        if self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
            return
        table = Table(*headers, title=title, header_style="bold cyan")
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    def _render_json(self, data: Any) -> None:
        if isinstance(data, str):
            # Raw JSON text (a body the handler passed through) is re-indented.
            try:
                data = json.loads(data)
            except ValueError:
                self.print_data(data)
                return
        self.print_data(_dump(data))

    def _render_plain(self, data: Any) -> None:
        if isinstance(data, dict):
            lines = [f"{key}\t{value}" for key, value in data.items()]
        elif isinstance(data, list):
            lines = [
                "\t".join(str(v) for v in item.values()) if isinstance(item, dict) else str(item)
                for item in data
            ]
        else:
            lines = [str(data)]
        for line in lines:
            self.print_data(line)

    def _render_rich(self, data: Any) -> None:
        if isinstance(data, (dict, list)):
            self._stdout.print(Syntax(_dump(data), "json", theme="monokai", word_wrap=True))
        else:
            self._stdout.print(str(data), markup=False)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        self._diagnose("info", message)

    def success(self, message: str) -> None:
        self._diagnose("success", message)

    def suggest(self, message: str) -> None:
        """Show a next-step hint, e.g. the command that fixes a missing profile."""
        self._diagnose("hint", message)

    def error(self, message: str) -> None:
        """Report a failure or a non-success status code. Never hidden."""
        self._diagnose("error", message)

    def debug(self, message: str) -> None:
        """Trace detail, shown only in verbose mode."""
        if self._verbose:
            self._diagnose("debug", message)

    def _diagnose(self, level: str, message: str) -> None:
        style, prefix, quietable = _LEVELS[level]
        if quietable and self._quiet:
            return
        text = f"{prefix}{message}"
        if self._no_color:
            print(text, file=sys.stderr, flush=True)
        elif style:
            self._stderr.print(f"[{style}]{escape(text)}[/{style}]")
        else:
            self._stderr.print(text, markup=False)


def _dump(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Process-wide manager
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager; the next call creates a fresh default."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_table(
    headers: list[str],
    rows: list[list[str]],
    title: Optional[str] = None,
) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
