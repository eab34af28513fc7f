"""sqlbench CLI entrypoint: drive a headless workbench from the terminal."""

from __future__ import annotations

import asyncio
from pathlib import Path

import click

from sqlbench.shared.cli import CLIContext, common_cli_options, handle_cli_errors, pass_cli_context

from . import render
from .controller import Workbench
from .page import Event
from .types import Failure

OUTPUT_FORMAT_CHOICES = ("html", "table")


@click.group(help="Compose and run SQL against local data files.")
@common_cli_options
@handle_cli_errors
def cli(cli_ctx: CLIContext) -> None:
    """Primary Click group for sqlbench commands."""
    cli_ctx.logger.debug(f"sqlbench workspace: {cli_ctx.config.workspace.root}")


@cli.command("run")
@click.argument("query", type=str, required=False)
@click.option(
    "--file",
    "script_path",
    type=str,
    help="Load a listed script (path as shown by `sqlbench files`) before running.",
)
@click.option(
    "--format",
    "output_format",
    default="table",
    show_default=True,
    type=click.Choice(OUTPUT_FORMAT_CHOICES),
)
@pass_cli_context
@handle_cli_errors
def run_query(
    cli_ctx: CLIContext,
    query: str | None,
    script_path: str | None,
    output_format: str,
) -> None:
    """Submit QUERY (or the loaded script, or the default query)."""
    workbench = Workbench.from_config(cli_ctx.config, logger=cli_ctx.logger)
    result = asyncio.run(_submit(workbench, query=query, script_path=script_path))
    if isinstance(result, Failure):
        raise click.ClickException(result.message)
    render.render_results(
        workbench.page.results.markup,
        output_format=output_format,
        logger=cli_ctx.logger,
    )


@cli.command("files")
@pass_cli_context
@handle_cli_errors
def list_files(cli_ctx: CLIContext) -> None:
    """List the SQL scripts under the workspace root."""
    workbench = Workbench.from_config(cli_ctx.config, logger=cli_ctx.logger)
    asyncio.run(workbench.start())
    render.render_scripts(workbench.browser.entries)


@cli.command("snapshot")
@click.argument("query", type=str, required=False)
@click.option("--file", "script_path", type=str, help="Load a listed script before running.")
@click.option("--output", type=click.Path(path_type=Path, dir_okay=False), help="Write the page here (default stdout).")
@click.option("--no-run", is_flag=True, help="Render the page without submitting a query.")
@pass_cli_context
@handle_cli_errors
def snapshot(
    cli_ctx: CLIContext,
    query: str | None,
    script_path: str | None,
    output: Path | None,
    no_run: bool,
) -> None:
    """Render the full workbench page, error modals included."""
    workbench = Workbench.from_config(cli_ctx.config, logger=cli_ctx.logger)
    if no_run:
        asyncio.run(workbench.start())
    else:
        asyncio.run(_submit(workbench, query=query, script_path=script_path))

    document = workbench.page.render()
    if output is None:
        click.echo(document)
        return
    output.write_text(document + "\n", encoding="utf-8")
    cli_ctx.logger.success(f"Wrote {output}")


async def _submit(workbench: Workbench, *, query: str | None, script_path: str | None):
    """Start the workbench, prepare the editor, and submit through the form."""
    await workbench.start()
    if script_path:
        await workbench.open(script_path)
    if query:
        workbench.editor.set_text(query)
    event = Event("submit")
    tasks = workbench.page.form.dispatch(event)
    results = await asyncio.gather(*tasks)
    await workbench.page.settle()
    return results[-1] if results else None
