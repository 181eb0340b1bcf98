"""`modresolve resolve` - resolve a module id from a file on disk."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError
from rich.table import Table

from ..console import console
from ..console import error_console
from ..errors import ModuleResolutionError
from ..models import NO_PACKAGE_FILTER
from ..models import ResolveModuleIdResults
from ..module_resolution import resolve_module_id
from ..settings import SettingsManager
from ..utils.error_format import escape_markup
from ..utils.error_format import format_error_message


def _render_results(results: ResolveModuleIdResults) -> None:
    table = Table(title=f"Resolved {escape_markup(results.module_id)}", show_header=True, header_style="bold cyan")
    table.add_column("Field", style="green")
    table.add_column("Value")

    table.add_row("Resolved path", escape_markup(results.resolved_path))
    table.add_row("Package", escape_markup(f"{results.pkg_data['name']}@{results.pkg_data['version']}"))
    table.add_row("Package dir", escape_markup(results.pkg_dir_path or "(core module)"))
    if "main" in results.pkg_data:
        table.add_row("Main", escape_markup(results.pkg_data["main"]))

    console.print(table)


@click.command("resolve")
@click.argument("module_id")
@click.option(
    "--from",
    "containing_file",
    required=True,
    type=click.Path(dir_okay=False),
    help="File the module id is written in",
)
@click.option("--ext", "exts", multiple=True, help="Extension to try, in order (repeatable)")
@click.option("--no-package-filter", is_flag=True, help="Use manifests exactly as written")
@click.option("--realpath", "use_realpath", is_flag=True, help="Canonicalize symlinks in resolved paths")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
def resolve_cmd(
    module_id: str,
    containing_file: str,
    exts: tuple[str, ...],
    no_package_filter: bool,
    use_realpath: bool,
    as_json: bool,
):
    """Resolve MODULE_ID as imported from the --from file."""
    try:
        resolver_settings = SettingsManager().get_resolver_settings()
    except ValidationError as e:
        error_console.print(f"[red]Error:[/red] invalid resolver settings\n{escape_markup(e)}")
        sys.exit(1)

    overrides: dict[str, Any] = {}
    if exts:
        overrides["exts"] = list(exts)
    if no_package_filter:
        overrides["package_filter"] = NO_PACKAGE_FILTER
    if use_realpath:
        overrides["preserve_symlinks"] = False

    opts = resolver_settings.to_options(module_id, str(Path(containing_file).absolute()), **overrides)

    try:
        results = asyncio.run(resolve_module_id(opts))
    except (ModuleResolutionError, OSError) as e:
        error_console.print(f"[red]Error:[/red] {escape_markup(format_error_message(e))}")
        sys.exit(1)

    if as_json:
        click.echo(results.model_dump_json(indent=2))
        return

    _render_results(results)
