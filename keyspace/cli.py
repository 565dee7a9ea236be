"""
Keyspace CLI
=============

Click-based command-line interface for the Keyspace passphrase analyzer.

Usage::

    python -m keyspace analyze "correct horse battery staple"
    python -m keyspace analyze --pool lowercase --pool space --rate 1e6
    python -m keyspace -o json batch passphrases.txt --workers 8
    python -m keyspace pools

References:
    - Click Documentation. https://click.palletsprojects.com/
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Optional, Sequence, TextIO

import click

from shared.config import ConfigError, KeyspaceConfig
from shared.console import KeyspaceConsole

from keyspace import __version__
from keyspace.core.engine import KeyspaceEngine
from keyspace.core.models import BUILTIN_POOLS, AnalysisResult, CharacterPool
from keyspace.output.console import KeyspaceConsoleOutput
from keyspace.output.report import KeyspaceReportGenerator

_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


# ===================================================================== #
#  CLI Group
# ===================================================================== #

@click.group()
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to a Keyspace configuration file (TOML).",
)
@click.option(
    "--output", "-o",
    type=click.Choice(["console", "json"]),
    default=None,
    help="Output format (defaults to the configured format).",
)
@click.option(
    "--output-file", "-f",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the JSON report to this file instead of stdout.",
)
@click.option(
    "--quiet", "-q",
    is_flag=True,
    default=False,
    help="Suppress the title panel and log output.",
)
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Override the configured log level.",
)
@click.version_option(__version__, prog_name="keyspace")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[str],
    output: Optional[str],
    output_file: Optional[str],
    quiet: bool,
    log_level: Optional[str],
) -> None:
    """Keyspace -- passphrase brute-force cost estimator.

    Computes the effective character pool, bits of entropy, search space
    and crack time of a passphrase under a uniform-random attacker model.
    """
    ctx.ensure_object(dict)

    try:
        keyspace_config = KeyspaceConfig.load(config)
    except ConfigError as exc:
        raise click.BadParameter(str(exc), param_hint="'--config'") from exc
    if log_level:
        keyspace_config.global_settings.log_level = log_level.upper()

    output_format = output or keyspace_config.global_settings.output_format
    ctx.obj["config"] = keyspace_config
    ctx.obj["output_format"] = output_format
    ctx.obj["output_file"] = output_file

    # JSON on stdout must not be interleaved with console decoration
    console = KeyspaceConsole(quiet=output_format == "json" and not output_file)
    ctx.obj["console"] = console
    ctx.obj["engine"] = KeyspaceEngine(keyspace_config, console_logging=not quiet)
    ctx.obj["display"] = KeyspaceConsoleOutput(console)
    ctx.obj["reporter"] = KeyspaceReportGenerator()

    if not quiet and output_format == "console":
        console.title(version=__version__)


def _pool_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the ``--pool`` / ``--custom`` options shared by commands."""
    func = click.option(
        "--custom",
        "custom_text",
        default=None,
        help="Extra custom pool made of the distinct characters of TEXT.",
    )(func)
    func = click.option(
        "--pool", "-p",
        "pool_names",
        multiple=True,
        help="Allowed pool (uppercase, lowercase, numbers, symbols, space). "
             "Repeatable; defaults to the configured pools.",
    )(func)
    return func


def _resolve_pools(
    pool_names: Sequence[str], custom_text: Optional[str]
) -> Optional[list[CharacterPool]]:
    """Pools selected on the command line, or ``None`` for the configured ones."""
    if not pool_names and custom_text is None:
        return None
    try:
        pools = [CharacterPool.from_name(name) for name in pool_names]
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="'--pool'") from exc
    if custom_text is not None:
        pools.append(CharacterPool.custom(custom_text))
    return pools


def _emit_json(
    ctx: click.Context,
    results: Sequence[Optional[AnalysisResult]],
    include_passphrases: bool,
    alternate_rates: Sequence[float] = (),
) -> None:
    """Write results as JSON to ``--output-file`` or stdout."""
    reporter: KeyspaceReportGenerator = ctx.obj["reporter"]
    output_file = ctx.obj["output_file"]
    if output_file:
        path = reporter.generate_json(
            results,
            Path(output_file),
            include_passphrases=include_passphrases,
            alternate_rates=alternate_rates,
        )
        ctx.obj["console"].success(f"JSON report saved to: {path}")
    else:
        report = reporter.build(
            results,
            include_passphrases=include_passphrases,
            alternate_rates=alternate_rates,
        )
        click.echo(json.dumps(report, indent=2, ensure_ascii=False, default=str))


# ===================================================================== #
#  Subcommands
# ===================================================================== #

@cli.command()
@click.argument("passphrase", required=False)
@_pool_options
@click.option(
    "--rate", "-r",
    "rates",
    type=click.FloatRange(min=0, min_open=True),
    multiple=True,
    help="Additional attack speed (guesses/second) to estimate crack time for. "
         "Repeatable.",
)
@click.option(
    "--show-passphrase",
    is_flag=True,
    default=False,
    help="Include the passphrase itself in JSON output.",
)
@click.pass_context
def analyze(
    ctx: click.Context,
    passphrase: Optional[str],
    pool_names: tuple[str, ...],
    custom_text: Optional[str],
    rates: tuple[float, ...],
    show_passphrase: bool,
) -> None:
    """Analyse a single passphrase.

    When PASSPHRASE is omitted it is read from a hidden prompt, which keeps
    it out of the shell history.
    """
    engine: KeyspaceEngine = ctx.obj["engine"]
    display: KeyspaceConsoleOutput = ctx.obj["display"]

    if passphrase is None:
        passphrase = click.prompt(
            "Passphrase", hide_input=True, default="", show_default=False, err=True
        )

    pools = _resolve_pools(pool_names, custom_text)
    try:
        analyzer = engine.analyzer_for(pools)
    except ConfigError as exc:
        raise click.UsageError(str(exc)) from exc

    result = engine.analyze(passphrase, analyzer.pools)
    if result is None:
        ctx.obj["console"].warning("Empty passphrase: nothing to analyse.")
        ctx.exit(1)

    if ctx.obj["output_format"] == "json":
        _emit_json(ctx, [result], show_passphrase, rates)
    else:
        display.display_result(
            result,
            configured_pools=sorted(analyzer.pools, key=lambda p: p.label),
            alternate_rates=rates,
        )


@cli.command()
@click.argument("file", type=click.File("r", encoding="utf-8"))
@_pool_options
@click.option(
    "--workers", "-w",
    type=click.IntRange(min=1),
    default=None,
    help="Worker threads (defaults to global.max_workers).",
)
@click.option(
    "--show-passphrase",
    is_flag=True,
    default=False,
    help="Include the passphrases themselves in JSON output.",
)
@click.pass_context
def batch(
    ctx: click.Context,
    file: TextIO,
    pool_names: tuple[str, ...],
    custom_text: Optional[str],
    workers: Optional[int],
    show_passphrase: bool,
) -> None:
    """Analyse every line of FILE as a passphrase ("-" reads stdin).

    Blank lines are skipped; rows are labelled with their line number.
    """
    engine: KeyspaceEngine = ctx.obj["engine"]
    display: KeyspaceConsoleOutput = ctx.obj["display"]

    numbered = [
        (lineno, line.rstrip("\r\n"))
        for lineno, line in enumerate(file, start=1)
        if line.rstrip("\r\n")
    ]
    if not numbered:
        ctx.obj["console"].warning("No passphrases found in input.")
        ctx.exit(1)

    pools = _resolve_pools(pool_names, custom_text)
    try:
        results = engine.analyze_batch(
            [text for _, text in numbered], pools, max_workers=workers
        )
    except ConfigError as exc:
        raise click.UsageError(str(exc)) from exc

    if ctx.obj["output_format"] == "json":
        _emit_json(ctx, results, show_passphrase)
    else:
        display.display_batch([str(lineno) for lineno, _ in numbered], results)


@cli.command()
@click.pass_context
def pools(ctx: click.Context) -> None:
    """List the built-in character pools."""
    if ctx.obj["output_format"] == "json":
        click.echo(json.dumps(
            [
                {
                    "name": pool.kind.value,
                    "size": pool.character_count,
                    "characters": pool.characters,
                }
                for pool in BUILTIN_POOLS
            ],
            indent=2,
            ensure_ascii=False,
        ))
    else:
        display: KeyspaceConsoleOutput = ctx.obj["display"]
        display.display_pools(BUILTIN_POOLS)


# ===================================================================== #
#  Entry Point
# ===================================================================== #

def main() -> None:
    """Main entry point for the Keyspace CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
