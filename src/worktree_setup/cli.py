"""CLI entry point for worktree-setup."""

from typing import Optional

import click
from rich.console import Console

from worktree_setup.config import Config, load_config
from worktree_setup.core.hooks import HookInstaller
from worktree_setup.core.setup import WorktreeSetup
from worktree_setup.exceptions import WorktreeSetupError
from worktree_setup.logging_config import setup_logging
from worktree_setup.models.setup_result import SetupResult, SkipReason

console = Console()
err_console = Console(stderr=True)

FAILURE_REASONS = {SkipReason.COPY_FAILED, SkipReason.SPAWN_FAILED}


def get_config(ctx: click.Context) -> Config:
    """Get the Config loaded by the top-level group."""
    return ctx.obj["config"]


def print_setup_result(result: SetupResult, verbose: bool) -> None:
    """Report a setup result the way the hook should: quiet unless asked."""
    if result.performed:
        if not verbose:
            return
        console.print("[bold green]Worktree setup completed successfully[/bold green]")
        if result.copied_files:
            console.print(f"  Copied: {', '.join(result.copied_files)}")
        if result.ran_commands:
            console.print(
                f"  Ran: {len(result.ran_commands)} command(s) in background"
                f" (pid {result.pid})"
            )
        return

    if result.skipped_reason in FAILURE_REASONS:
        err_console.print(f"[red]Worktree setup failed:[/red] {result.detail}")
    elif verbose:
        reason = result.detail or result.skipped_reason.value
        console.print(f"[yellow]Worktree setup skipped:[/yellow] {reason}")


@click.group(invoke_without_command=True)
@click.version_option(package_name="worktree-setup")
@click.option("-v", "--verbose", is_flag=True, help="Print what setup did or why it skipped.")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    help="Path to a worktree-setup TOML config file.",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, debug: bool, config_path: Optional[str]) -> None:
    """Set up a newly created linked git worktree.

    Without a subcommand, copies missing files from the primary worktree and
    starts the setup commands listed under "worktreeSetup" in its
    package.json. This is what the post-checkout hook runs.

    Example:
        worktree-setup init
        worktree-setup --verbose
    """
    setup_logging(verbose=verbose, debug=debug)
    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config(config_path)
    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug

    if ctx.invoked_subcommand is not None:
        return

    try:
        result = WorktreeSetup(get_config(ctx)).run(verbose=verbose)
    except (WorktreeSetupError, OSError) as e:
        raise click.ClickException(f"Worktree setup error: {e}") from e

    print_setup_result(result, verbose)


@main.command("init")
@click.option("-f", "--force", is_flag=True, help="Overwrite an existing post-checkout hook.")
@click.option("-v", "--verbose", is_flag=True, help="Print what was configured.")
@click.pass_context
def init_command(ctx: click.Context, force: bool, verbose: bool) -> None:
    """Install the post-checkout hook and ignore the setup log.

    Example:
        worktree-setup init
        worktree-setup init --force
    """
    verbose = verbose or ctx.obj["verbose"]
    if verbose:
        setup_logging(verbose=True, debug=ctx.obj["debug"])

    try:
        result = HookInstaller(get_config(ctx)).install(force=force)
    except WorktreeSetupError as e:
        raise click.ClickException(str(e)) from e

    if result.performed:
        if verbose:
            console.print("[bold green]worktree-setup init completed[/bold green]")
            console.print(f"  Hook: {result.hook_path}")
        return

    reason = result.skipped_reason or "Initialization failed"
    err_console.print(f"[yellow]worktree-setup init skipped:[/yellow] {reason}")
    ctx.exit(1)
