"""Command-line interface for plugdex."""

import json
import logging
from pathlib import Path
from typing import Any

import click
from rich.logging import RichHandler
from rich.markup import escape

from plugdex import __version__
from plugdex.artifacts.base import Artifact, ArtifactKind, Event
from plugdex.config.init import ensure_plugdex_dir, scaffold_pack
from plugdex.config.loader import (
    get_home_config_path,
    get_local_config_path,
    load_config,
    resolve_sources,
    save_config,
)
from plugdex.config.schema import PlugdexConfig
from plugdex.console import console, err_console
from plugdex.errors import InvocationError, SourceNotFound
from plugdex.facade import ExtensionHost
from plugdex.hooks.dispatcher import summarize_outcomes
from plugdex.registry.snapshot import Snapshot

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    """Route plugdex logs through rich on stderr; DEBUG when verbose, else WARNING."""
    pkg_logger = logging.getLogger("plugdex")
    pkg_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in pkg_logger.handlers):
        pkg_logger.addHandler(RichHandler(console=err_console, show_path=False))


def version_callback(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    """Print version and exit."""
    if not value or ctx.resilient_parsing:
        return
    console.print(f"plugdex [bold cyan]{__version__}[/bold cyan]")
    ctx.exit()


def _parse_kind(
    _ctx: click.Context, _param: click.Parameter, value: str | None
) -> ArtifactKind | None:
    if value is None:
        return None
    try:
        return ArtifactKind.parse(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from None


def _parse_assignments(
    _ctx: click.Context, _param: click.Parameter, values: tuple[str, ...]
) -> dict[str, str]:
    """Turn repeated key=value options into a dict, keeping order."""
    result: dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected key=value, got '{item}'")
        result[key.strip()] = value
    return result


def _load_host(ctx: click.Context) -> ExtensionHost:
    """Build a host and load the sources selected by options and config."""
    sources: tuple[str, ...] = ctx.obj["sources"]
    config = load_config()
    host = ExtensionHost(config=config)
    paths = resolve_sources(config, sources)
    if not paths:
        paths = [Path.cwd()]
    logger.debug("Loading sources: %s", ", ".join(str(p) for p in paths))
    try:
        host.load(paths)
    except SourceNotFound as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise SystemExit(1) from None
    return host


def _warn_load_errors(snapshot: Snapshot) -> None:
    if snapshot.errors:
        console.print(
            f"[dim yellow]{len(snapshot.errors)} file(s) failed to load; "
            "run 'plugdex validate' for details[/dim yellow]"
        )


def _print_artifact_line(artifact: Artifact, verbose: bool) -> None:
    console.print(f"  [cyan]{escape(artifact.name)}[/cyan]")
    if verbose:
        console.print(f"    {escape(artifact.description)}")
        if artifact.arguments:
            args = ", ".join(
                f"{a.name}{'' if a.required else '?'}" for a in artifact.arguments
            )
            console.print(f"    [dim]Arguments: {escape(args)}[/dim]")
        if artifact.events:
            events = ", ".join(sorted(e.value for e in artifact.events))
            console.print(f"    [dim]Events: {events}[/dim]")
        console.print()


@click.group(invoke_without_command=True)
@click.option(
    "--version",
    is_flag=True,
    callback=version_callback,
    expose_value=False,
    is_eager=True,
    help="Show version and exit.",
)
@click.option(
    "--source",
    "-s",
    "sources",
    multiple=True,
    type=click.Path(file_okay=False, path_type=str),
    help="Pack directory to load (repeatable; later overrides earlier).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, sources: tuple[str, ...], verbose: bool) -> None:
    """Plugdex - registry and dispatcher for assistant extension packs."""
    _configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["sources"] = sources
    if ctx.invoked_subcommand is None:
        console.print("[bold]plugdex[/bold] - commands, skills, agents and hooks")
        console.print("\nRun [cyan]plugdex --help[/cyan] for available commands.")


@main.command("list")
@click.argument("kind", required=False, callback=_parse_kind)
@click.option("--verbose", "-v", "details", is_flag=True, help="Show details.")
@click.option("--json", "as_json", is_flag=True, help="Output JSON.")
@click.pass_context
def list_artifacts(
    ctx: click.Context, kind: ArtifactKind | None, details: bool, as_json: bool
) -> None:
    """List artifacts, optionally of a single KIND."""
    host = _load_host(ctx)
    kinds = [kind] if kind is not None else list(ArtifactKind)

    if as_json:
        data = {k.dirname: [a.to_dict() for a in host.list(k)] for k in kinds}
        click.echo(json.dumps(data, indent=2))
        return

    if not len(host.snapshot):
        console.print("[yellow]No artifacts found.[/yellow]")
        console.print("[dim]Run 'plugdex init' to create a pack in ./.plugdex/pack/[/dim]")
        _warn_load_errors(host.snapshot)
        return

    for k in kinds:
        artifacts = host.list(k)
        if not artifacts:
            continue
        console.print(f"[bold]{k.dirname.capitalize()} ({len(artifacts)}):[/bold]")
        for artifact in artifacts:
            _print_artifact_line(artifact, details)
        console.print()

    _warn_load_errors(host.snapshot)


@main.command()
@click.argument("kind", callback=_parse_kind)
@click.argument("name")
@click.pass_context
def show(ctx: click.Context, kind: ArtifactKind, name: str) -> None:
    """Show metadata and body of one artifact."""
    host = _load_host(ctx)
    try:
        artifact = host.resolve(kind, name)
    except InvocationError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        console.print(f"[dim]Run 'plugdex list {kind.value}' to see what is available.[/dim]")
        raise SystemExit(1) from None

    for key, value in artifact.to_dict().items():
        if isinstance(value, list):
            value = ", ".join(
                v["name"] if isinstance(v, dict) else str(v) for v in value
            )
        console.print(f"[bold]{key}:[/bold] {escape(str(value))}", soft_wrap=True)
    console.print()
    console.print(artifact.body, markup=False, highlight=False)


@main.command()
@click.argument("kind", callback=_parse_kind)
@click.argument("name")
@click.option(
    "--arg",
    "-a",
    "arguments",
    multiple=True,
    callback=_parse_assignments,
    help="Argument as key=value (repeatable).",
)
@click.option("--json", "as_json", is_flag=True, help="Output JSON.")
@click.pass_context
def invoke(
    ctx: click.Context,
    kind: ArtifactKind,
    name: str,
    arguments: dict[str, str],
    as_json: bool,
) -> None:
    """Bind arguments to a command or skill and print the payload."""
    host = _load_host(ctx)
    try:
        payload = host.invoke(kind, name, arguments)
    except InvocationError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise SystemExit(1) from None

    if as_json:
        click.echo(json.dumps(payload.to_dict(), indent=2, default=str))
        return
    console.print(payload.render(), markup=False, highlight=False)


@main.command()
@click.argument("event")
@click.option("--payload", "payload_json", default=None, help="Event payload as JSON.")
@click.option("--tool", "tool_name", default=None, help="Tool name for tool events.")
@click.option("--strict", is_flag=True, help="Exit 1 if any hook fails or blocks.")
@click.option("--json", "as_json", is_flag=True, help="Output JSON.")
@click.pass_context
def fire(
    ctx: click.Context,
    event: str,
    payload_json: str | None,
    tool_name: str | None,
    strict: bool,
    as_json: bool,
) -> None:
    """Fire a lifecycle EVENT and report each hook's outcome."""
    try:
        parsed_event = Event.parse(event)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="EVENT") from None

    payload: dict[str, Any] = {}
    if payload_json:
        try:
            loaded = json.loads(payload_json)
        except json.JSONDecodeError as e:
            raise click.BadParameter(f"invalid JSON: {e}", param_hint="--payload") from None
        if not isinstance(loaded, dict):
            raise click.BadParameter("must be a JSON object", param_hint="--payload")
        payload = loaded
    if tool_name:
        payload["tool_name"] = tool_name

    host = _load_host(ctx)
    outcomes = host.fire(parsed_event, payload)

    if as_json:
        click.echo(json.dumps([o.to_dict() for o in outcomes], indent=2, default=str))
    elif not outcomes:
        console.print(f"[dim]No hooks subscribed to {parsed_event.value}.[/dim]")
    else:
        for outcome in outcomes:
            if not outcome.ok:
                status = "[red]✗[/red]"
                detail = f" [red]{escape(str(outcome.error))}[/red]"
            elif outcome.blocked:
                status = "[yellow]■[/yellow]"
                detail = " [yellow]blocked[/yellow]"
            else:
                status = "[green]✓[/green]"
                detail = ""
            console.print(f"  {status} [cyan]{escape(outcome.hook)}[/cyan]{detail}", soft_wrap=True)
        ok_count, failed = summarize_outcomes(outcomes)
        console.print(f"\n{ok_count}/{len(outcomes)} hooks succeeded")

    if strict and any(not o.ok or o.blocked for o in outcomes):
        raise SystemExit(1)


@main.command()
@click.pass_context
def validate(ctx: click.Context) -> None:
    """Load all sources and report invalid or overridden artifacts."""
    host = _load_host(ctx)
    snapshot = host.snapshot

    console.print("[bold]Sources:[/bold]")
    for source in host.sources:
        console.print(f"  {escape(str(source))}", soft_wrap=True)
    console.print()

    for duplicate in snapshot.warnings:
        console.print(f"[yellow]⚠[/yellow] {escape(str(duplicate))}", soft_wrap=True)
    for error in snapshot.errors:
        console.print(f"[red]✗[/red] {escape(str(error))}", soft_wrap=True)

    counts = ", ".join(f"{len(host.list(k))} {k.dirname}" for k in ArtifactKind)
    if snapshot.ok:
        console.print(f"\n[bold green]All artifacts valid[/bold green] ({counts})")
    else:
        console.print(
            f"\n[bold red]{len(snapshot.errors)} error(s)[/bold red] ({counts})"
        )
        raise SystemExit(1)


@main.command()
@click.option(
    "--global",
    "global_config",
    is_flag=True,
    help="Create the global config and pack in ~/.plugdex/.",
)
@click.option("--force", is_flag=True, help="Overwrite an existing config file.")
def init(global_config: bool, force: bool) -> None:
    """Create a config file and an empty pack."""
    if global_config:
        path = get_home_config_path()
    else:
        ensure_plugdex_dir()
        path = get_local_config_path()

    if path.exists() and not force:
        console.print(f"[yellow]Config already exists at {escape(str(path))}[/yellow]")
        console.print("[dim]Use --force to overwrite.[/dim]")
    else:
        save_config(PlugdexConfig(on_duplicate="override"), path)
        console.print(f"[green]Configuration saved to {escape(str(path))}[/green]")

    created = scaffold_pack(local=not global_config)
    if created:
        console.print(f"[green]Created {len(created)} pack directories[/green]")
