"""
Keyspace Console Interface
===========================

Rich-powered console abstraction giving every Keyspace command the same
look: a title panel, section rules, severity-coloured messages and
styled tables.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from typing import Any, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme

_KEYSPACE_THEME = Theme(
    {
        "keyspace.title": "bold bright_cyan",
        "keyspace.section": "bold bright_magenta",
        "keyspace.success": "bold green",
        "keyspace.warning": "bold yellow",
        "keyspace.error": "bold red",
        "keyspace.info": "bold bright_blue",
        "keyspace.dim": "dim white",
    }
)


class KeyspaceConsole:
    """Unified console interface for Keyspace output.

    Usage::

        con = KeyspaceConsole()
        con.title()
        con.section("Passphrase Analysis")
        con.success("Report written")

    Args:
        quiet:  Suppress all output (useful in library / test mode).
        record: Enable Rich recording for text / HTML export.
        width:  Fixed console width; ``None`` auto-detects.
    """

    def __init__(
        self,
        *,
        quiet: bool = False,
        record: bool = False,
        width: int | None = None,
    ) -> None:
        self._console = Console(
            theme=_KEYSPACE_THEME,
            quiet=quiet,
            record=record,
            highlight=False,
            width=width,
        )

    @property
    def rich(self) -> Console:
        """Direct access to the underlying Rich Console instance."""
        return self._console

    # ------------------------------------------------------------------ #
    #  Headers
    # ------------------------------------------------------------------ #

    def title(self, version: str = "1.0.0") -> None:
        """Display the Keyspace title panel."""
        self._console.print(
            Panel(
                "[keyspace.title]Keyspace[/keyspace.title]  "
                "[keyspace.dim]passphrase brute-force cost estimator  "
                f"v{version}[/keyspace.dim]",
                border_style="bright_cyan",
                expand=False,
            )
        )

    def section(self, title: str) -> None:
        """Print a section rule."""
        self._console.rule(f"  {title}  ", style="keyspace.section", characters="─")
        self._console.print()

    # ------------------------------------------------------------------ #
    #  Message helpers
    # ------------------------------------------------------------------ #

    def success(self, message: str) -> None:
        self._console.print(
            f"[keyspace.success][✔] SUCCESS:[/keyspace.success] {message}"
        )

    def warning(self, message: str) -> None:
        self._console.print(
            f"[keyspace.warning][⚠] WARNING:[/keyspace.warning] {message}"
        )

    def error(self, message: str) -> None:
        self._console.print(
            f"[keyspace.error][✘] ERROR:[/keyspace.error] {message}"
        )

    def info(self, message: str) -> None:
        self._console.print(
            f"[keyspace.info][ℹ] INFO:[/keyspace.info] {message}"
        )

    # ------------------------------------------------------------------ #
    #  Tables
    # ------------------------------------------------------------------ #

    def table(
        self,
        title: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        *,
        caption: str | None = None,
        styles: Sequence[str] | None = None,
    ) -> None:
        """Render a styled Rich table.

        Args:
            title:    Table title.
            columns:  Column header labels.
            rows:     Row tuples; each cell is stringified.
            caption:  Optional footer caption.
            styles:   Optional per-column Rich style strings.
        """
        tbl = Table(
            title=title,
            caption=caption,
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_lines=True,
            padding=(0, 1),
        )
        for idx, col_name in enumerate(columns):
            style = styles[idx] if styles and idx < len(styles) else ""
            tbl.add_column(col_name, style=style)

        for row in rows:
            tbl.add_row(*(str(cell) for cell in row))

        self._console.print(tbl)

    # ------------------------------------------------------------------ #
    #  Utility
    # ------------------------------------------------------------------ #

    def print(self, *args: Any, **kwargs: Any) -> None:
        """Proxy to :meth:`rich.console.Console.print`."""
        self._console.print(*args, **kwargs)

    def blank(self, count: int = 1) -> None:
        for _ in range(count):
            self._console.print()

    def export_text(self) -> str:
        """Export recorded console output as plain text (requires ``record=True``)."""
        return self._console.export_text()
