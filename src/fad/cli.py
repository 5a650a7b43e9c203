"""CLI entrypoint for fad."""

from __future__ import annotations

import json
import os
import time
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError

from fad.age import Age, AgeParseError, parse_age
from fad.candidates import CandidatePool
from fad.config import Settings, SettingsError, SettingsStore
from fad.fs.filtering import IgnoreRuleError, IgnoreRules
from fad.fs.gate import ConcurrencyGate
from fad.fs.scanner import ScanOptions, Scanner
from fad.fs.types import VALID_CODES_TEXT
from fad.paths import settings_path
from fad.render import candidate_lines, stats_line
from fad.runtime_logging import get_runtime_logger
from fad.sysexits import EX_OK, EX_OSFILE, EX_USAGE
from fad.version import RELEASE_DATE, __version__


class FadUsageError(click.UsageError):
    exit_code = EX_USAGE


class AgeParamType(click.ParamType):
    name = "age"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> Age:
        if isinstance(value, Age):
            return value
        try:
            return parse_age(str(value).strip())
        except AgeParseError as exc:
            self.fail(str(exc), param, ctx)


AGE = AgeParamType()

COMMA_HELP = "comma-string; prefix with '+' to append to the defaults"


@click.group(invoke_without_command=True, context_settings={"help_option_names": ["-h", "--help"]})
@click.pass_context
def main(ctx: click.Context) -> None:
    """fad: find the most recently active directories."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(scan)


@main.command()
@click.argument("paths", nargs=-1, type=click.Path(readable=False))
@click.option("--age", "max_age", type=AGE, help="Print paths no older than value (e.g. 90s, 2h, 3D, 4W, 5Y)")
@click.option("--count", "max_count", type=click.IntRange(min=1), help="Maximum paths to print")
@click.option("--depth", "max_depth", type=click.IntRange(min=0), help="Maximum depth below each path (0 is unlimited)")
@click.option("--scanners", "max_scanners", type=click.IntRange(min=1), help="Directories to scan concurrently")
@click.option("--ibases", "ignore_bases", help=f"Ignore paths matching 'basename' ({COMMA_HELP})")
@click.option("--icontains", "ignore_contains", help=f"Ignore paths containing case-insensitive string ({COMMA_HELP})")
@click.option("--iregexes", "ignore_regexes", help=f"Ignore paths matching regexes ({COMMA_HELP})")
@click.option("--iglobs", "ignore_globs", help=f"Ignore paths matching gitignore-style globs ({COMMA_HELP})")
@click.option("--itypes", "ignore_types", help=f"Ignore file system types: {VALID_CODES_TEXT} ({COMMA_HELP})")
@click.option("--pdirname/--no-pdirname", "print_dirname", default=None, help="Print just the dirname of paths")
@click.option("--pignored/--no-pignored", "print_ignored", default=None, help="Print paths ignored by filters")
@click.option("--pstats/--no-pstats", "print_stats", default=None, help="Print summary statistics")
@click.option("-q", "--quiet/--no-quiet", "suppress_errors", default=None, help="Suppress file-system access errors")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Settings file to use instead of the user default",
)
@click.pass_context
def scan(ctx: click.Context, paths: tuple[str, ...], config_path: Path | None, **overrides: Any) -> None:
    """Scan PATHS (default '.') and print the most recently active directories."""
    baseline = time.time()
    started = time.monotonic()

    settings = _load_settings(config_path)
    if isinstance(overrides.get("max_age"), Age):
        overrides["max_age"] = overrides["max_age"].text
    try:
        settings = settings.merged(overrides)
    except ValidationError as exc:
        raise FadUsageError(_first_error(exc), ctx=ctx) from exc

    try:
        rules = IgnoreRules.compile(settings)
    except IgnoreRuleError as exc:
        raise FadUsageError(str(exc), ctx=ctx) from exc

    gate = ConcurrencyGate(settings.max_scanners)
    scanner = Scanner(
        pool=CandidatePool(settings.max_count, settings.age_limit()),
        gate=gate,
        rules=rules,
        options=ScanOptions(
            max_depth=settings.max_depth,
            suppress_errors=settings.suppress_errors,
            print_ignored=settings.print_ignored,
        ),
        baseline=baseline,
    )
    pool, stats = scanner.run(list(paths) or ["."])

    for line in candidate_lines(pool, dirname_only=settings.print_dirname):
        # Paths go out as the bytes the file system returned.
        click.echo(os.fsencode(line))
    if settings.print_stats:
        click.echo(
            stats_line(stats, found=len(pool), gate=gate, elapsed_s=time.monotonic() - started)
        )

    ctx.exit(EX_OSFILE if stats.errors > 0 else EX_OK)


@main.group()
def config() -> None:
    """Inspect or change the user default settings."""


@config.command("show")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path))
def config_show(config_path: Path | None) -> None:
    """Print the effective default settings as JSON."""
    settings = _load_settings(config_path)
    click.echo(json.dumps(settings.model_dump(mode="json"), indent=2, sort_keys=True))


@config.command("set")
@click.argument("key")
@click.argument("value")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path))
def config_set(key: str, value: str, config_path: Path | None) -> None:
    """Validate and persist one default setting."""
    store = SettingsStore(config_path)
    try:
        store.update(key, value)
    except KeyError as exc:
        raise click.ClickException(f"Unknown setting '{key}'") from exc
    except SettingsError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"{key} = {value} ({store.path})")


@main.command("settings-path")
def settings_path_command() -> None:
    """Print settings file path."""
    click.echo(str(settings_path()))


@main.command()
def about() -> None:
    """Show version and project summary."""
    payload = {
        "name": "fad",
        "version": __version__,
        "release": RELEASE_DATE,
        "description": "Find the most recently active directories",
    }
    click.echo(json.dumps(payload, indent=2))


def _load_settings(config_path: Path | None) -> Settings:
    store = SettingsStore(config_path)
    try:
        return store.load()
    except SettingsError as exc:
        # A broken settings file only costs the user their defaults.
        get_runtime_logger().settings_invalid(store.path, message=str(exc))
        click.echo(f"Warning: {exc}", err=True)
        return Settings()


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    error = errors[0]
    location = ".".join(str(item) for item in error["loc"])
    return f"{location}: {error['msg']}"


if __name__ == "__main__":
    main()
