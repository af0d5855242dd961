"""CLI for rfcs - numbered proposal documents in a git repository."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click
from git import Repo

from rfcs import __version__
from rfcs.config import (
    ConfigError,
    default_config_path,
    load_config,
    set_config_value,
    write_config,
)
from rfcs.git import GitError, open_repository
from rfcs.repository import RepositoryUnavailableError, ensure_local_repo
from rfcs.scanner import ScanError
from rfcs.schemas import Config, ConfigKey

# Errors reported to the user as a failed command
USER_ERRORS = (ConfigError, GitError, RepositoryUnavailableError, ScanError)


def _config_path(ctx: click.Context) -> Path:
    return ctx.obj["config_path"]


def _load(ctx: click.Context) -> Config:
    try:
        return load_config(_config_path(ctx))
    except ConfigError as e:
        raise click.ClickException(str(e)) from e


def _open_repo(ctx: click.Context) -> Repo:
    config = _load(ctx)
    try:
        path = ensure_local_repo(config.git, clone_root=_config_path(ctx).parent)
        return open_repository(path)
    except USER_ERRORS as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.version_option(version=__version__, prog_name="rfcs")
@click.option(
    "--config", "-c",
    "config_path",
    envvar="RFCS_CONFIG",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file to use (defaults to ~/.config/rfcs/config.json)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """rfcs - manage numbered proposal documents kept in git.

    Lists proposal files and starts new proposals on their own branch.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path or default_config_path()


@main.command("list")
@click.option(
    "--raw",
    is_flag=True,
    help="Output raw JSON instead of one path per line",
)
@click.pass_context
def list_command(ctx: click.Context, raw: bool) -> None:
    """List the proposal documents in the repository."""
    from rfcs.proposals import list_proposals

    repo = _open_repo(ctx)
    try:
        with repo:
            proposals = list_proposals(repo)
    except USER_ERRORS as e:
        raise click.ClickException(str(e)) from e

    if raw:
        click.echo(json.dumps([p.model_dump() for p in proposals], indent=2))
        return

    for proposal in proposals:
        click.echo(proposal.path)


@main.command()
@click.argument("title")
@click.pass_context
def create(ctx: click.Context, title: str) -> None:
    """Start a new proposal on a freshly numbered branch.

    \b
    Example:
        rfcs create "Add metrics"    # creates and checks out 007-Add-metrics
    """
    from rfcs.git import create_and_switch_to_branch
    from rfcs.proposals import plan_branch_name

    repo = _open_repo(ctx)
    try:
        with repo:
            branch_name = plan_branch_name(repo, title)
            click.echo(f"Branch will be named {branch_name}")
            create_and_switch_to_branch(repo, branch_name)
    except USER_ERRORS as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Created and checked out git branch {branch_name}")


@main.command()
@click.argument("key", type=click.Choice([k.value for k in ConfigKey]))
@click.argument("value")
@click.pass_context
def configure(ctx: click.Context, key: str, value: str) -> None:
    """Set a configuration value.

    \b
    Example:
        rfcs configure git.repo ~/src/rfcs
        rfcs configure git.url https://example.com/org/rfcs.git
    """
    config = _load(ctx)
    click.echo(f"Setting key {key} to value {value}")
    try:
        config = set_config_value(config, key, value)
        write_config(config, _config_path(ctx))
    except (ConfigError, OSError) as e:
        raise click.ClickException(str(e)) from e

    click.echo("Wrote config.")


@main.command("dump-info")
@click.pass_context
def dump_info(ctx: click.Context) -> None:
    """Show where the configuration lives and what it contains."""
    config = _load(ctx)
    git = config.git

    click.echo(f"Configuration location: {_config_path(ctx)}")
    click.echo(f"git.repo: {git.repo if git else None}")
    click.echo(f"git.url: {git.url if git else None}")


if __name__ == "__main__":
    main()
