#!/usr/bin/env python3
"""
Main CLI Application for komodo-deploy

This module contains the main Typer app and entry point for the komodo-deploy CLI.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import sys

import typer
from rich.markup import escape
from rich.traceback import install

try:
    from typing import Annotated  # Python 3.9+
except ImportError:
    from typing_extensions import Annotated  # Python 3.8

from komodo_deploy import __version__

from .commands import run
from .constants import ExitCode
from .utils import console

install(show_locals=False)

app = typer.Typer(
    name="komodo-deploy",
    help="🚀 komodo-deploy - Deploy Komodo stacks and run procedures from CI",
    rich_markup_mode="rich",
    add_completion=False,
    no_args_is_help=True,
)
app.command()(run)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[
        bool, typer.Option("--version", help="Show version and exit")
    ] = False,
) -> None:
    """
    🚀 komodo-deploy

    Deploys Komodo stacks or runs Komodo procedures, polls them to completion
    and reports update statuses as a GitHub Actions output and job summary.
    """
    if version:
        console.print(
            f"🚀 [bold cyan]komodo-deploy[/bold cyan] version [green]{__version__}[/green]"
        )
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        ctx.exit()


def cli_main() -> None:
    """Entry point of the ``komodo-deploy`` console script."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n🛑 [yellow]Deployment cancelled[/yellow]")
        sys.exit(ExitCode.FAILURE)
    except Exception as e:
        console.print(f"💥 [bold red]Unexpected error: {escape(str(e))}[/bold red]")
        console.print_exception()
        sys.exit(ExitCode.FAILURE)


if __name__ == "__main__":
    cli_main()
