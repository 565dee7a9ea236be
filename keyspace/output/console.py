"""
Keyspace Console Output
========================

Rich-based formatters for analysis results: a details table, the pool
coverage table, and crack time estimates at one or more attack speeds.
"""

from __future__ import annotations

from typing import Optional, Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from shared.console import KeyspaceConsole
from keyspace.core.models import (
    AnalysisResult,
    CharacterPool,
    format_count,
    format_duration,
)

# Entropy bands (bits) used only to colour the entropy meter
_ENTROPY_BANDS: list[tuple[float, str]] = [
    (28.0, "bold red"),
    (36.0, "dark_orange"),
    (60.0, "yellow"),
    (128.0, "green"),
]


class KeyspaceConsoleOutput:
    """Console formatters for Keyspace results.

    Usage::

        output = KeyspaceConsoleOutput(KeyspaceConsole())
        output.display_result(result, alternate_rates=[1e6, 1e9])
    """

    def __init__(self, console: Optional[KeyspaceConsole] = None) -> None:
        self.console = console or KeyspaceConsole()
        self._rich = self.console.rich

    # ------------------------------------------------------------------ #
    #  Single result
    # ------------------------------------------------------------------ #

    def display_result(
        self,
        result: AnalysisResult,
        configured_pools: Sequence[CharacterPool] = (),
        alternate_rates: Sequence[float] = (),
    ) -> None:
        """Display a full analysis of one passphrase.

        Args:
            result: Result to display.
            configured_pools: Pools the analyzer was configured with; used
                to mark which of them the passphrase covers.
            alternate_rates: Extra attack speeds to estimate crack time for.
        """
        self.console.section("Passphrase Analysis")
        self._rich.print(Panel(self._entropy_meter(result), title="Entropy", border_style="cyan"))

        tbl = Table(
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_lines=True,
        )
        tbl.add_column("Property", style="bold")
        tbl.add_column("Value")

        tbl.add_row("Length", str(result.passphrase_length))
        tbl.add_row("Allowed Characters", str(result.total_allowed_characters_count))
        tbl.add_row("Effective Pool Size", str(result.effective_pool_size))
        tbl.add_row("Bits per Character", _fmt_bits(result.bits_of_entropy_per_character))
        tbl.add_row("Bits of Entropy", _fmt_bits(result.bits_of_entropy))
        tbl.add_row("Search Space", format_count(result.search_space_size))
        self._rich.print(tbl)

        if configured_pools:
            self.display_pools(configured_pools, used=result.pools_used)

        crack_tbl = Table(
            title="Crack Time Estimates",
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_lines=True,
        )
        crack_tbl.add_column("Speed", justify="right")
        crack_tbl.add_column("Seconds", justify="right")
        crack_tbl.add_column("Estimated Time", justify="right")

        crack_tbl.add_row(
            f"{result.guesses_per_second:.0e} g/s (default)",
            f"{result.time_taken:.3e}",
            format_duration(result.time_taken),
        )
        for rate in alternate_rates:
            seconds = result.time_taken_at(rate)
            crack_tbl.add_row(
                f"{rate:.0e} g/s",
                f"{seconds:.3e}",
                format_duration(seconds),
            )
        self._rich.print(crack_tbl)

        if not result.entropy_defined:
            self.console.warning(
                "None of the configured pools covers this passphrase; "
                "entropy is undefined."
            )

    def display_pools(
        self,
        pools: Sequence[CharacterPool],
        used: Sequence[CharacterPool] = (),
    ) -> None:
        """Display pools with their sizes, marking the ones in *used*."""
        used_set = set(used)
        tbl = Table(
            title="Character Pools",
            border_style="bright_cyan",
            header_style="bold bright_magenta",
        )
        tbl.add_column("Pool", style="bold")
        tbl.add_column("Size", justify="right")
        tbl.add_column("Characters")
        if used:
            tbl.add_column("Used", justify="center")

        for pool in pools:
            row = [Text(pool.label), str(pool.character_count), Text(repr(pool.characters))]
            if used:
                row.append("[green]✔[/green]" if pool in used_set else "[dim]-[/dim]")
            tbl.add_row(*row)
        self._rich.print(tbl)

    # ------------------------------------------------------------------ #
    #  Batch results
    # ------------------------------------------------------------------ #

    def display_batch(
        self,
        labels: Sequence[str],
        results: Sequence[Optional[AnalysisResult]],
    ) -> None:
        """Display one summary row per analysed passphrase.

        Args:
            labels: Row labels (e.g. line numbers); passphrases themselves
                are not echoed.
            results: Results aligned with *labels*.
        """
        self.console.section("Batch Analysis")
        tbl = Table(
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_lines=True,
        )
        tbl.add_column("#", style="dim", justify="right")
        tbl.add_column("Length", justify="right")
        tbl.add_column("Pool", justify="right")
        tbl.add_column("Bits", justify="right")
        tbl.add_column("Search Space", justify="right")
        tbl.add_column("Crack Time", justify="right")

        for label, result in zip(labels, results):
            if result is None:
                tbl.add_row(label, "0", "-", "-", "-", "-")
                continue
            tbl.add_row(
                label,
                str(result.passphrase_length),
                str(result.effective_pool_size),
                _fmt_bits(result.bits_of_entropy),
                format_count(result.search_space_size),
                format_duration(result.time_taken),
            )
        self._rich.print(tbl)

    # ------------------------------------------------------------------ #
    #  Helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _entropy_meter(result: AnalysisResult, width: int = 40) -> Text:
        """Bar of entropy bits, full at 128 bits."""
        meter = Text()
        meter.append("Entropy: ", style="bold")
        if result.bits_of_entropy is None:
            meter.append("undefined", style="bold red")
            return meter

        bits = result.bits_of_entropy
        style = "bold bright_green"
        for limit, band_style in _ENTROPY_BANDS:
            if bits < limit:
                style = band_style
                break

        filled = max(0, min(width, int(bits / 128.0 * width)))
        meter.append(f"{bits:.2f} bits  ")
        meter.append("[", style="dim")
        meter.append("█" * filled, style=style)
        meter.append("░" * (width - filled), style="dim")
        meter.append("]", style="dim")
        return meter


def _fmt_bits(bits: Optional[float]) -> str:
    return "undefined" if bits is None else f"{bits:.5f}"
