"""Command-line interface for autotagger."""

from __future__ import annotations

import sys
from typing import NoReturn

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from autotagger import __version__
from autotagger.config import ExitConfig, load_config
from autotagger.errors import AutotaggerError, ConfigError, SkipRelease

# Load environment variables from .env file
load_dotenv()

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="autotagger")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output (only results)")
@click.pass_context
def main(ctx: click.Context, verbose: bool, quiet: bool) -> None:
    """autotagger - Tag merged pull requests with the next patch version."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


def _exit(code: int, message: str | None = None) -> NoReturn:
    if message:
        console.print(message)
    sys.exit(code)


@main.command()
@click.pass_context
def run(ctx: click.Context) -> None:
    """Tag the merge commit of a merged pull request.

    Meant to run as a GitHub Action on pull_request events. Only the patch
    version is incremented; tag major and minor releases by hand.

    \b
    Environment variables:
        NO_EX_CONFIG     disables the EX_CONFIG (78) returns, returning success instead
        NEVER_FAIL       in cases where the bot should fail, it will return EX_CONFIG instead
        FILE_REGEXP      only tag when changes since the last tag include files that
                         match this regex (default: .*)
        TAG_PREFIX       prefix your tag with this. Great for Go modules in a subdir!
        BUILD_METADATA   tag as vX.Y.Z+YYYY-MM-DD.<sha> (ignores FILE_REGEXP and TAG_PREFIX)
    """
    from autotagger.tagger import run_release

    verbose = ctx.obj.get("verbose", False)
    quiet = ctx.obj.get("quiet", False)

    try:
        cfg = load_config()
    except ConfigError as e:
        fallback = ExitConfig.from_env().codes
        _exit(fallback.failure, f"[red]Configuration error:[/red] {escape(str(e))}")

    codes = cfg.exit_codes

    try:
        result = run_release(cfg, verbose=verbose)
    except SkipRelease as e:
        _exit(codes.no_op, escape(e.reason))
    except AutotaggerError as e:
        _exit(codes.failure, f"[red]Error:[/red] {escape(str(e))}")

    if quiet:
        console.print(result.version, markup=False, highlight=False)
    else:
        console.print("Done")


@main.command(name="next")
@click.argument("version")
@click.option("--prefix", "-p", default="", help="Prefix for the new tag name")
@click.option(
    "--ref",
    default=None,
    help="Commit sha; emits vX.Y.Z+YYYY-MM-DD.<sha> build metadata (ignores --prefix)",
)
def next_command(version: str, prefix: str, ref: str | None) -> None:
    """Print the version that would follow VERSION."""
    from autotagger.versioning import (
        InvalidVersionError,
        SemanticVersion,
        next_build_version,
        next_version,
    )

    try:
        last = SemanticVersion.parse(version)
    except InvalidVersionError as e:
        _exit(1, f"[red]Error:[/red] {escape(str(e))}")

    result = next_build_version(last, ref) if ref else next_version(last, prefix)
    console.print(result, markup=False, highlight=False)


@main.command()
@click.argument("repository")
@click.option("--prefix", "-p", default=None, help="Only consider tags with this prefix")
@click.pass_context
def latest(ctx: click.Context, repository: str, prefix: str | None) -> None:
    """Print the latest released version of REPOSITORY (owner/name)."""
    from autotagger.github import GitHubClient
    from autotagger.versioning import resolve_last_version

    verbose = ctx.obj.get("verbose", False)

    owner, _, name = repository.partition("/")
    if not owner or not name:
        _exit(1, "[red]Error:[/red] repository must look like owner/name")

    try:
        cfg = load_config()
        if prefix is None:
            prefix = cfg.tagging.tag_prefix
        with GitHubClient(
            owner=owner,
            repo=name,
            token=cfg.github.token,
            base_url=cfg.github.api_url,
            timeout=cfg.github.timeout,
        ) as client:
            last = resolve_last_version(client, prefix, verbose=verbose)
    except AutotaggerError as e:
        _exit(1, f"[red]Error:[/red] {escape(str(e))}")

    console.print(str(last), markup=False, highlight=False)


@main.group()
def config() -> None:
    """Manage autotagger configuration."""
    pass


@config.command(name="show")
def config_show() -> None:
    """Show current configuration."""
    from autotagger.config import find_config_file

    try:
        cfg = load_config()
    except ConfigError as e:
        _exit(1, f"[red]Configuration error:[/red] {escape(str(e))}")

    config_file = find_config_file()

    console.print("[bold]Current Configuration[/bold]")
    console.print()

    if config_file:
        console.print(f"[dim]Config file:[/dim] {config_file}")
    else:
        console.print("[dim]Config file:[/dim] (none - using environment and defaults)")
    console.print()

    # Tagging
    console.print("[bold]Tagging:[/bold]")
    console.print(f"  Tag prefix: {escape(cfg.tagging.tag_prefix) or '(none)'}")
    console.print(f"  File regexp: {escape(cfg.tagging.file_regexp)}")
    console.print(f"  Build metadata: {cfg.tagging.build_metadata}")
    console.print()

    # Exit codes
    codes = cfg.exit_codes
    console.print("[bold]Exit codes:[/bold]")
    console.print(f"  No-op: {codes.no_op}")
    console.print(f"  Failure: {codes.failure}")
    console.print()

    # GitHub
    console.print("[bold]GitHub:[/bold]")
    console.print(f"  API URL: {cfg.github.api_url}")
    console.print(f"  Token: {'(set)' if cfg.github.token else '(from GITHUB_TOKEN env)'}")


@config.command(name="path")
def config_path() -> None:
    """Show configuration file paths."""
    from autotagger.config import find_config_file, get_config_paths

    console.print("[bold]Configuration paths (in priority order):[/bold]")
    config_file = find_config_file()

    for path in get_config_paths():
        if path.exists():
            if path == config_file:
                console.print(f"  [green]{path}[/green] (active)")
            else:
                console.print(f"  {path} (exists)")
        else:
            console.print(f"  [dim]{path}[/dim]")


@config.command(name="init")
@click.option("--force", is_flag=True, help="Overwrite existing config file")
@click.option("--prefix", "-p", default="", help="Tag prefix to write")
def config_init(force: bool, prefix: str) -> None:
    """Create a default autotagger.ini in the current directory."""
    from pathlib import Path

    from autotagger.config import save_default_config

    config_path = Path.cwd() / "autotagger.ini"

    if config_path.exists() and not force:
        console.print(f"[yellow]Config file already exists:[/yellow] {config_path}")
        console.print("Use --force to overwrite.")
        sys.exit(1)

    save_default_config(config_path, tag_prefix=prefix)
    console.print(f"[green]Created config file:[/green] {config_path}")


if __name__ == "__main__":
    main()
