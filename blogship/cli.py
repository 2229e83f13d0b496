"""Command-line interface for Blogship.

This module defines the CLI commands using Click framework.
Each command runs one target of the pipeline's task graph and exits with the
exit code of the first external tool that failed.

Commands:
- build: Regenerate the output tree with the static-site generator.
- serve: Run the generator's preview server in the foreground.
- deploy: Build, then commit and push the output tree to the hosting branch.
- all: Alias for build; also what runs when no command is given.
"""

from __future__ import annotations

from pathlib import Path

import click

from . import __version__
from .generator import INTERRUPTED, Generator
from .publish import PublishError, PublishResult, Publisher
from .settings import ConfigError, load_settings
from .tasks import Task, TaskGraphError, default_graph


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="blogship")
@click.option("--generator", help="Generator executable (overrides blogship.yaml)")
@click.option(
    "--output-dir",
    help="Output tree relative to the project root (overrides blogship.yaml)",
)
@click.pass_context
def cli(ctx: click.Context, generator: str | None, output_dir: str | None):
    """Build a static blog and publish it to its hosting branch."""
    ctx.ensure_object(dict)
    ctx.obj["overrides"] = {"generator": generator, "output_dir": output_dir}
    if ctx.invoked_subcommand is None:
        _run_target(ctx, "all")


@cli.command()
@click.pass_context
def build(ctx: click.Context):
    """Regenerate the output tree."""
    _run_target(ctx, "build")


@cli.command("all")
@click.pass_context
def all_(ctx: click.Context):
    """Alias for build."""
    _run_target(ctx, "all")


@cli.command(context_settings={"ignore_unknown_options": True})
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def serve(ctx: click.Context, args: tuple[str, ...]):
    """Run the generator's preview server.

    ARGS are passed to the generator after its server arguments.
    """
    _run_target(ctx, "serve", serve_args=args)


@cli.command()
@click.option("--remote", help="Remote to push to (overrides blogship.yaml)")
@click.option("--branch", help="Hosting branch to push (overrides blogship.yaml)")
@click.option(
    "--message",
    help="Commit message template containing {timestamp} (overrides blogship.yaml)",
)
@click.pass_context
def deploy(
    ctx: click.Context,
    remote: str | None,
    branch: str | None,
    message: str | None,
):
    """Build, then commit and push the output tree."""
    ctx.obj["overrides"].update(remote=remote, branch=branch, message=message)
    _run_target(ctx, "deploy")


def main():
    """Entry point for the CLI application."""
    cli()


def _run_target(ctx: click.Context, target: str, serve_args: tuple[str, ...] = ()) -> None:
    """Run a task graph target and exit with the first failing tool's status."""
    project_root = Path.cwd()
    try:
        settings = load_settings(project_root, ctx.obj["overrides"])
    except ConfigError as exc:
        raise click.ClickException(f"Invalid setting {exc}") from None

    generator = Generator(project_root, settings)
    publisher = Publisher(generator.output_dir, settings, project_root)
    graph = default_graph(
        generator, publisher, serve_args=serve_args, on_publish=_report_publish
    )

    try:
        result = graph.run(target, on_start=_announce)
    except (PublishError, TaskGraphError) as exc:
        raise click.ClickException(str(exc)) from None

    if result.ok:
        if target != "serve":
            click.echo(click.style(f"{target} finished", fg="green"), err=True)
        return
    if result.failed == "serve" and result.returncode == INTERRUPTED:
        click.echo("Interrupted.", err=True)
    else:
        click.echo(
            click.style(f"{result.failed} failed:", fg="red", bold=True), err=True
        )
        click.echo(click.style(f"  {result.error}", fg="yellow"), err=True)
    raise SystemExit(result.returncode) from None


def _announce(task: Task) -> None:
    if task.action is None:
        return
    label = click.style(f"==> {task.name}", fg="cyan", bold=True)
    click.echo(f"{label}: {task.description}", err=True)


def _report_publish(result: PublishResult) -> None:
    if result.committed:
        click.echo(f"Committed: {result.message}", err=True)
    else:
        click.echo("Nothing to commit; pushing existing history.", err=True)
    click.echo(f"Pushed to {result.remote}/{result.branch}", err=True)
