"""`modresolve logs` - tail the JSONL log."""

import os
import time
from pathlib import Path

import click

from ..logging_setup import DEFAULT_PATH
from ..logging_setup import LOG_PATH_ENV


@click.command("logs")
@click.option("--path", default=None, help="Path to JSONL log file")
@click.option("--follow/--no-follow", default=False, help="Tail the log")
@click.option("--filter", "filter_text", default=None, help="Substring to filter lines")
def logs_cmd(path: str | None, follow: bool, filter_text: str | None):
    """Print or tail the JSONL log."""
    p = Path(path or os.environ.get(LOG_PATH_ENV, DEFAULT_PATH))
    if not p.exists():
        click.echo(f"No log file at {p}")
        return

    with p.open("r", encoding="utf-8") as f:
        if not follow:
            for line in f:
                if filter_text and filter_text not in line:
                    continue
                click.echo(line.rstrip())
            return

        f.seek(0, 2)
        while True:
            line = f.readline()
            if not line:
                time.sleep(0.25)
                continue
            if filter_text and filter_text not in line:
                continue
            click.echo(line.rstrip())
