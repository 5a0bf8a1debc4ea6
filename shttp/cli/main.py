from __future__ import annotations

import click
import rich_click

from shttp import __version__

from .context import CLIContext
from .logging import configure_logging, restore_logging


@click.group(
    name="shttp",
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
    cls=rich_click.RichGroup,
)
@click.option(
    "--output",
    type=click.Choice(["table", "json"]),
    default="table",
)
@click.option("--json-output", "json_flag", is_flag=True, help="Alias for --output json.")
@click.option("--quiet", is_flag=True, help="Suppress non-essential stderr output.")
@click.option("-v", "verbose", count=True, help="Increase verbosity (-v, -vv).")
@click.version_option(version=__version__, prog_name="shttp")
@click.pass_context
def cli(
    click_ctx: click.Context,
    *,
    output: str,
    json_flag: bool,
    quiet: bool,
    verbose: int,
) -> None:
    if click_ctx.invoked_subcommand is None:
        # No args: show help; no network calls.
        click.echo(click_ctx.get_help())
        raise click.exceptions.Exit(0)

    click_ctx.obj = CLIContext(
        output="json" if json_flag else output,  # type: ignore[arg-type]
        quiet=quiet,
        verbosity=verbose,
    )

    previous_logging = configure_logging(verbosity=verbose)
    click_ctx.call_on_close(lambda: restore_logging(previous_logging))


# Register commands
from .commands.request_cmds import get_cmd as _get_cmd  # noqa: E402
from .commands.request_cmds import post_cmd as _post_cmd  # noqa: E402
from .commands.request_cmds import request_cmd as _request_cmd  # noqa: E402
from .commands.version_cmd import version_cmd as _version_cmd  # noqa: E402

cli.add_command(_version_cmd)
cli.add_command(_request_cmd)
cli.add_command(_get_cmd)
cli.add_command(_post_cmd)


def main() -> None:
    cli()
