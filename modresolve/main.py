"""modresolve command line entry point."""

import click

from .commands import logs_cmd
from .commands import resolve_cmd
from .commands import settings
from .logging_setup import LOG_LEVEL_ENV
from .logging_setup import LOG_PATH_ENV
from .logging_setup import init_json_logging


@click.group(invoke_without_command=True)
@click.version_option(package_name="modresolve")
@click.option("--log-file", envvar=LOG_PATH_ENV, default=None, help="Write JSONL logs to this file")
@click.option(
    "--log-level",
    envvar=LOG_LEVEL_ENV,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level for the JSONL log",
)
@click.pass_context
def cli(ctx: click.Context, log_file: str | None, log_level: str | None):
    """Resolve module ids to files the way node_modules-aware tooling does."""
    if log_file:
        init_json_logging(log_file, log_level)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit()


cli.add_command(resolve_cmd)
cli.add_command(settings)
cli.add_command(logs_cmd)


def main():
    cli()


if __name__ == "__main__":
    main()
