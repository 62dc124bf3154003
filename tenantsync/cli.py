"""Click-based CLI for tenantsync - tenant configuration from version control."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console as RichConsole
from rich.logging import RichHandler

from tenantsync import __version__
from tenantsync.config import (
    ensure_config_exists,
    get_config_path,
    load_config,
    validate_config_file,
)
from tenantsync.config.schema import TenantSyncConfig
from tenantsync.core.classifier import PathClassifier
from tenantsync.engine import TenantSync
from tenantsync.errors import TenantSyncError
from tenantsync.output import Console, create_console
from tenantsync.providers.base import SourceRef

console = Console()


def _setup_logging(verbose: bool) -> None:
    """Route library logging through Rich on stderr, keeping stdout for results."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=RichConsole(stderr=True, no_color=console.rich.no_color), show_path=False)],
        force=True,
    )


def _load(ctx: click.Context) -> TenantSyncConfig:
    """Load configuration or exit with an error."""
    config_path: Optional[Path] = ctx.obj.get("config_path")
    try:
        config = load_config(config_path)
    except FileNotFoundError as e:
        console.print_error(str(e))
        sys.exit(1)
    except ValidationError as e:
        console.print_error(f"Invalid configuration: {e}")
        sys.exit(1)

    _apply_output(ctx, config)
    return config


def _apply_output(ctx: click.Context, config: TenantSyncConfig) -> None:
    """Rebuild the console from the output section; --verbose wins over the file."""
    global console
    verbose = bool(ctx.obj.get("verbose") or config.output.verbose)
    console = create_console(verbose=verbose, colored=config.output.colored)
    if verbose:
        _setup_logging(verbose)


@click.group()
@click.version_option(version=__version__, prog_name="tenantsync")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Configuration file (default: $TENANTSYNC_CONFIG or ~/.config/tenantsync/config.yaml)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output and debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], verbose: bool) -> None:
    """tenantsync - tenant configuration from version control.

    Detects whether a commit touches tenant configuration and
    materializes the configuration tree into a deployable bundle.

    \b
    Providers:
      tfvc  Team Foundation Version Control ($/Project/tenant)
      git   Azure DevOps Git repository (/tenant)
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose
    console.verbose = verbose
    if verbose:
        _setup_logging(verbose)


@cli.command()
@click.argument("commit")
@click.option("--repo", "repo_ref", default=None, help="Repository name or id (git provider)")
@click.pass_context
def check(ctx: click.Context, commit: str, repo_ref: Optional[str]) -> None:
    """Check whether COMMIT changes tenant configuration.

    COMMIT is a changeset number (tfvc) or commit SHA (git).
    """
    config = _load(ctx)

    async def run() -> bool:
        async with TenantSync(config) as engine:
            return await engine.has_changes(commit, repo_ref)

    try:
        changed = asyncio.run(run())
    except TenantSyncError as e:
        console.print_error(e.message)
        sys.exit(1)

    console.print_change_check(commit, changed)


@cli.command()
@click.option("--project", "-p", default="", help="Azure DevOps project the items live in")
@click.option("--changeset", "-c", "changeset_id", default=None, help="Changeset or commit to read (default: latest)")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Write the bundle as JSON")
@click.option("--json", "as_json", is_flag=True, help="Print the bundle as JSON")
@click.pass_context
def fetch(
    ctx: click.Context,
    project: str,
    changeset_id: Optional[str],
    output: Optional[Path],
    as_json: bool,
) -> None:
    """Materialize the tenant configuration tree.

    Walks the configured project path, fetches every relevant file
    and shows the resulting bundle.
    """
    config = _load(ctx)
    ref = SourceRef(project=project, changeset_id=changeset_id)
    if not as_json:
        console.print_info(f"Reading tenant configuration below {config.project_path}")

    async def run():
        async with TenantSync(config) as engine:
            return await engine.get_changes(ref)

    try:
        bundle = asyncio.run(run())
    except TenantSyncError as e:
        console.print_error(e.message)
        sys.exit(1)

    if output is not None:
        output.write_text(bundle.to_json() + "\n", encoding="utf-8")
        console.print_success(f"Wrote bundle to {output}")
        console.print_bundle_summary(bundle)
        return

    if as_json:
        click.echo(bundle.to_json())
        return

    console.print_bundle(bundle)


@cli.command()
@click.argument("paths", nargs=-1, required=True)
@click.option("--project-path", default=None, help="Project root (default: from configuration)")
@click.pass_context
def classify(ctx: click.Context, paths: tuple[str, ...], project_path: Optional[str]) -> None:
    """Show how PATHS are classified (no provider access).

    \b
    Example:
        tenantsync classify --project-path '$/Project/tenant' '$/Project/tenant/rules/rule1.js'
    """
    if project_path is None:
        project_path = _load(ctx).project_path

    classifier = PathClassifier(project_path)
    console.print_classifications((path, classifier.classify(path)) for path in paths)


# ============================================================================
# Configuration Commands
# ============================================================================


@cli.group()
def config() -> None:
    """Configuration file management."""
    pass


@config.command("init")
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing configuration")
@click.pass_context
def config_init(ctx: click.Context, force: bool) -> None:
    """Create a default configuration file."""
    path, created = ensure_config_exists(ctx.obj.get("config_path"), force=force)
    if created:
        console.print_success(f"Created configuration: {path}")
    else:
        console.print_warning(f"Configuration already exists: {path} (use --force to overwrite)")


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show the effective configuration."""
    config = _load(ctx)
    path = ctx.obj.get("config_path") or get_config_path()
    console.print_config_summary(str(path), config.provider.type.value, config.project_path)
    if console.verbose:
        data = config.model_dump(mode="json", exclude={"provider": {"token", "password"}})
        console.print(data)


@config.command("validate")
@click.pass_context
def config_validate(ctx: click.Context) -> None:
    """Validate the configuration file."""
    valid, errors = validate_config_file(ctx.obj.get("config_path"))
    if valid:
        console.print_success("Configuration is valid")
        return

    for error in errors:
        console.print_error(error)
    sys.exit(1)


@config.command("path")
@click.pass_context
def config_path_cmd(ctx: click.Context) -> None:
    """Print the configuration file path."""
    click.echo(str(ctx.obj.get("config_path") or get_config_path()))


def main() -> None:
    """Console script entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
