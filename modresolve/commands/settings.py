"""`modresolve settings` - inspect and change resolver defaults."""

from __future__ import annotations

import click
import yaml
from pydantic import ValidationError
from rich.table import Table

from ..console import console
from ..settings import ResolverSettings
from ..settings import SettingsManager
from ..utils.error_format import escape_markup

SCOPE_LABELS = {
    "local": "local (.modresolve/settings.local.yaml)",
    "project": "project (.modresolve/settings.yaml)",
    "user": "global (~/.modresolve/settings.yaml)",
}


@click.group(invoke_without_command=True)
@click.pass_context
def settings(ctx: click.Context):
    """Manage resolver settings."""
    if ctx.invoked_subcommand is None:
        click.echo("\n" + ctx.get_help())
        ctx.exit()


@settings.command("show")
def settings_show():
    """Show the effective resolver settings."""
    try:
        resolver_settings = SettingsManager().get_resolver_settings()
    except ValidationError as e:
        console.print(f"[red]Error:[/red] invalid resolver settings\n{escape_markup(e)}")
        raise SystemExit(1)

    table = Table(title="Resolver Settings", show_header=True, header_style="bold cyan")
    table.add_column("Setting", style="green")
    table.add_column("Value")

    for key, value in resolver_settings.model_dump().items():
        table.add_row(key, escape_markup("(engine default)" if value is None else value))

    console.print(table)


@settings.command("set")
@click.argument("key", type=click.Choice(sorted(ResolverSettings.model_fields)))
@click.argument("value")
@click.option("--local", "scope_flag", flag_value="local", help="Set locally (just you)")
@click.option("--project", "scope_flag", flag_value="project", help="Set for project (team)")
@click.option("--global", "scope_flag", flag_value="user", help="Set globally (all projects)")
def settings_set(key: str, value: str, scope_flag: str | None):
    """Set a resolver setting. VALUE is parsed as YAML (e.g. "[.ts, .js]")."""
    scope = scope_flag or "project"
    parsed = yaml.safe_load(value)

    try:
        SettingsManager().set_resolver_value(key, parsed, scope=scope)
    except (ValidationError, ValueError) as e:
        console.print(f"[red]Error:[/red] {escape_markup(e)}")
        raise SystemExit(1)

    console.print(f"[green]✓ Set resolver.{key}[/green]")
    console.print(f"  Value: {escape_markup(parsed)}")
    console.print(f"  Scope: {SCOPE_LABELS[scope]}")
