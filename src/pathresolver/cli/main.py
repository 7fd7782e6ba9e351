"""CLI entry point for pathresolver.

A thin debugging shell around ``PathResolver``: resolve an input the same way
a library caller would, or inspect a package's combined import/export map.
"""

import asyncio
import json
import os
from typing import NoReturn, Optional, Tuple

import typer
from rich.console import Console
from rich.table import Table

from .. import __version__
from ..core.config import ConfigError, ConfigManager
from ..core.config_schema import HostKind, ResolverConfig, SelfReferencePolicy
from ..resolver import PathResolver
from ..resolver.errors import ResolverError
from ..resolver.filesystem import LocalFileSystem
from ..resolver.package import PackageContext, load_manifest
from ..util.error import format_error
from ..util.log import Log, LogFormat, LogLevel

app = typer.Typer(
    name="pathresolver",
    help="Resolve paths and package specifiers to files and directories",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        console.print(f"pathresolver {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Minimum log level (DEBUG, INFO, WARN, ERROR)",
    ),
    print_logs: bool = typer.Option(
        False,
        "--print-logs",
        help="Print logs to stderr",
    ),
):
    """Resolve paths and package specifiers to files and directories."""
    try:
        level = LogLevel.parse(log_level) if log_level else None
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--log-level")
    Log.configure(level=level, format=LogFormat.KV, console=print_logs, file=False)
    ctx.obj = {"log_level": level}


def _fail(error: BaseException) -> NoReturn:
    err_console.print(format_error(error) or str(error), markup=False, highlight=False)
    raise typer.Exit(code=1)


def _load_config(ctx: typer.Context) -> ResolverConfig:
    try:
        config = ConfigManager.load(os.getcwd())
    except ConfigError as e:
        _fail(e)

    # --log-level beats the configured level
    level = (ctx.obj or {}).get("log_level")
    if level is None and config.logging.level:
        level = LogLevel.parse(config.logging.level)
    format = LogFormat.parse(config.logging.format) if config.logging.format else None
    Log.configure(level=level, format=format)
    return config


@app.command()
def resolve(
    ctx: typer.Context,
    value: str = typer.Argument(..., help="Absolute path, ./relative path or package specifier"),
    base: Optional[str] = typer.Option(
        None,
        "--base",
        "-b",
        help="Base directory for ./ and ../ inputs (default: current directory)",
    ),
    self_reference: Optional[SelfReferencePolicy] = typer.Option(
        None,
        "--self-reference",
        help="Self-reference policy",
    ),
    host: Optional[HostKind] = typer.Option(
        None,
        "--host",
        help="Host resolution fallback",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print a JSON object"),
):
    """Resolve VALUE and print whether it is a file or a directory."""
    config = _load_config(ctx)

    updates = {"base_path": base or config.base_path or os.getcwd()}
    if self_reference is not None:
        updates["self_reference"] = self_reference
    if host is not None:
        updates["host"] = host
    resolver = PathResolver.from_config(config.model_copy(update=updates))

    def on_file(path: str) -> Tuple[str, str]:
        return "file", path

    def on_directory(path: str) -> Tuple[str, str]:
        return "directory", path

    try:
        kind, path = asyncio.run(resolver.resolve(value, on_file, on_directory))
    except ResolverError as e:
        _fail(e)

    if as_json:
        typer.echo(json.dumps({"input": value, "kind": kind, "path": path}, ensure_ascii=False))
    else:
        typer.echo(f"{kind} {path}")


@app.command()
def exports(
    ctx: typer.Context,
    manifest: Optional[str] = typer.Option(
        None,
        "--manifest",
        "-m",
        help="Path to package.json (default: configured package or ./package.json)",
    ),
    name: Optional[str] = typer.Option(
        None,
        "--name",
        "-n",
        help="Package name (default: the manifest's name)",
    ),
):
    """Show the combined import/export map of a package."""
    config = _load_config(ctx)

    if manifest is None:
        manifest = config.package.manifest if config.package else os.path.join(os.getcwd(), "package.json")
    manifest = os.path.abspath(manifest)

    try:
        parsed = asyncio.run(load_manifest(LocalFileSystem(), manifest))
    except ResolverError as e:
        _fail(e)

    package_name = name or parsed.name or (config.package.name if config.package else None)
    if not package_name:
        err_console.print("Package has no name; pass --name")
        raise typer.Exit(code=1)

    context = PackageContext(name=package_name, manifest=manifest)
    table = Table(title=f"{package_name} ({context.directory})")
    table.add_column("Specifier", style="cyan")
    table.add_column("Key")
    table.add_column("Target", style="green")
    for key, target in parsed.combined_map().items():
        rendered = target if isinstance(target, str) else json.dumps(target)
        table.add_row(package_name + key[1:], key, rendered)
    console.print(table)


if __name__ == "__main__":
    app()
