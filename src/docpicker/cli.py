"""Command line interface for docpicker."""

from __future__ import annotations

import difflib
import logging
from pathlib import Path
from typing import Any

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table

from docpicker.config import (
    ConfigError,
    ConfigManager,
    DocPickerConfig,
    flatten_for_env,
    resolve_with_precedence,
)
from docpicker.resolution import CacheDirectoryError, DocumentResolver, ResolutionRecord

console = Console()
err_console = Console(stderr=True)


def _configure_logging(level: str) -> None:
    """Route log records to stderr through rich at the configured level."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Indicates whether JSON mode is active.
        original: Original exception for chaining when not using JSON.

    Raises:
        SystemExit: When emitting JSON output to terminate the command.
        click.ClickException: For non-JSON flows to surface the error.
    """
    if json_output:
        console.print_json(data={"error": {"code": code, "message": message}})
        raise SystemExit(1)

    raise click.ClickException(message) from original


def _render_record(reference: str, record: ResolutionRecord) -> Table:
    table = Table(title=reference, show_header=True, header_style="bold")
    table.add_column("Field")
    table.add_column("Value")
    for key in ("localUri", "fileName", "fileSize", "mimeType"):
        value = record.to_payload().get(key)
        table.add_row(key, "[dim]-[/dim]" if value is None else str(value))
    return table


def _config_lines(manager: ConfigManager) -> list[str]:
    """Return config file lines without the volatile timestamp comment."""
    return [
        line for line in manager.read_text().splitlines() if not line.startswith("# Last updated:")
    ]


def _assign_nested(target: dict[str, Any], path: list[str], value: Any) -> None:
    """Assign a nested value within a dictionary for a dotted path.

    Raises:
        ConfigError: If a non-mapping value is encountered along the path.
    """
    node = target
    for segment in path[:-1]:
        existing = node.get(segment)
        if existing is None:
            existing = {}
            node[segment] = existing
        elif not isinstance(existing, dict):
            raise ConfigError(
                f"Cannot assign into '{segment}' because it is not a mapping in the config file."
            )
        node = existing
    node[path[-1]] = value


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="docpicker")
def cli() -> None:
    """docpicker turns picked document references into local copies with metadata."""


@cli.command()
@click.argument("reference")
@click.option(
    "--cache-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Override the cache directory for this run.",
)
@click.option("--json", "json_output", is_flag=True, help="Emit the record as JSON.")
def resolve(reference: str, cache_dir: Path | None, json_output: bool) -> None:
    """Resolve REFERENCE (path, URL or content handle) into a cached copy.

    Args:
        reference: Opaque reference handed over by a document chooser.
        cache_dir: Optional cache directory override.
        json_output: Whether to print JSON instead of a table.
    """
    cli_overrides: dict[str, Any] = {}
    if cache_dir is not None:
        cli_overrides["cache.directory"] = str(cache_dir)

    try:
        config = ConfigManager().load(cli_overrides=cli_overrides)
        _configure_logging(config.logging.level)
        with DocumentResolver.from_config(config) as resolver:
            record = resolver.resolve(reference)
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_output, original=exc)
        return
    except CacheDirectoryError as exc:
        _handle_cli_error(str(exc), code="cache_error", json_output=json_output, original=exc)
        return

    if json_output:
        console.print_json(data=record.to_payload())
        return

    console.print(_render_record(reference, record))
    if record.local_uri is None:
        console.print("[yellow]No local copy could be created.[/yellow]")


@cli.group()
def config() -> None:
    """Manage docpicker configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
@click.option(
    "--as-env", is_flag=True, help="Print the settings as DOCPICKER__ environment variables."
)
def config_view(no_env: bool, as_env: bool) -> None:
    """Display the effective configuration after applying precedence rules.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    manager = ConfigManager()
    try:
        loaded = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    if as_env:
        for key, value in flatten_for_env(loaded).items():
            click.echo(f"{key}={value}")
        return

    yaml_text = yaml.safe_dump(loaded.model_dump(mode="json"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY.

    Raises:
        click.ClickException: If parsing, assignment, or validation fails.
    """
    manager = ConfigManager()
    manager.ensure_exists()

    before = _config_lines(manager)
    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException("KEY must specify a dotted path such as 'cache.prefix'.")

    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    try:
        file_data = manager.load_file_overrides()
        _assign_nested(file_data, segments, parsed_value)
        resolve_with_precedence(defaults=DocPickerConfig(), file_overrides=file_data)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(file_data)
    after = _config_lines(manager)

    diff = list(
        difflib.unified_diff(
            before,
            after,
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
    )

    if not diff:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


@config.command("edit")
def config_edit() -> None:
    """Open the configuration file in an interactive editor session.

    Raises:
        click.ClickException: If edited content is invalid or cannot be saved.
    """
    manager = ConfigManager()
    manager.ensure_exists()

    original = manager.read_text()
    edited = click.edit(original, extension=".yaml")

    if edited is None:
        console.print("[yellow]Edit cancelled; no changes applied.[/yellow]")
        return

    if edited == original:
        console.print("[yellow]No changes detected.[/yellow]")
        return

    try:
        parsed = yaml.safe_load(edited) or {}
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Invalid YAML: {exc}") from exc

    if not isinstance(parsed, dict):
        raise click.ClickException("Configuration file must contain a top-level mapping.")

    try:
        resolve_with_precedence(defaults=DocPickerConfig(), file_overrides=parsed)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(parsed)
    console.print("[green]Configuration updated successfully.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
