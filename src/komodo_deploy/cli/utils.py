#!/usr/bin/env python3
"""
Utility functions for komodo-deploy CLI

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import logging
from typing import Dict

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from komodo_deploy.core.errors import ErrorHandler, set_error_handler


# Initialize Rich console
console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Setup Rich logging configuration and unified error handler."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Setup rich logging handler
    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_path=verbose,
        markup=False,
        rich_tracebacks=True,
    )

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[rich_handler],
        force=True,
    )

    # Requests logs every connection at DEBUG, keep it quiet unless verbose
    logging.getLogger("urllib3").setLevel(log_level if verbose else logging.WARNING)

    # Setup unified error handler
    error_handler = ErrorHandler(console=console, verbose=verbose)
    set_error_handler(error_handler)


def display_updates_table(status_map: Dict[str, str], title: str) -> None:
    """Display the update id -> status mapping as a table."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Index", justify="right", style="dim")
    table.add_column("Update ID", style="cyan")
    table.add_column("Status", style="bold")

    for index, (update_id, status) in enumerate(status_map.items(), start=1):
        if status == "Complete":
            status_display = "✅ Complete"
        else:
            status_display = f"⚠️  {escape(str(status))}"
        table.add_row(str(index), escape(update_id), status_display)

    # Show empty state if no results
    if not status_map:
        table.add_row("1", "ℹ️ No updates", "")

    console.print(table)
