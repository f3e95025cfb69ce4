#!/usr/bin/env python3
"""
Run command for komodo-deploy CLI

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

from typing import Optional

import typer

try:
    from typing import Annotated  # Python 3.9+
except ImportError:
    from typing_extensions import Annotated  # Python 3.8

from komodo_deploy.core.actions import ActionsRuntime
from komodo_deploy.core.constants import (
    DEFAULT_POLL_INTERVAL,
    DEFAULT_REQUEST_TIMEOUT,
    INPUT_API_KEY,
    INPUT_API_SECRET,
    INPUT_DRY_RUN,
    INPUT_KIND,
    INPUT_KOMODO_URL,
    INPUT_PATTERNS,
)
from komodo_deploy.core.errors import KomodoDeployError, create_error_context, handle_error
from komodo_deploy.orchestration.run_orchestrator import RunOrchestrator

from ..constants import ExitCode
from ..utils import console, display_updates_table, setup_logging


def run(
    kind: Annotated[
        Optional[str],
        typer.Option("--kind", "-k", help="Operation kind: stack or procedure"),
    ] = None,
    patterns: Annotated[
        Optional[str],
        typer.Option(
            "--patterns", "-p", help='JSON array of target names, e.g. \'["my-stack"]\''
        ),
    ] = None,
    komodo_url: Annotated[
        Optional[str],
        typer.Option("--komodo-url", help="Komodo core URL (falls back to KOMODO_URL)"),
    ] = None,
    api_key: Annotated[
        Optional[str],
        typer.Option("--api-key", help="Komodo API key (falls back to KOMODO_API_KEY)"),
    ] = None,
    api_secret: Annotated[
        Optional[str],
        typer.Option(
            "--api-secret", help="Komodo API secret (falls back to KOMODO_API_SECRET)"
        ),
    ] = None,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Resolve inputs without deploying")
    ] = False,
    poll_interval: Annotated[
        float,
        typer.Option("--poll-interval", help="Seconds between update status polls"),
    ] = DEFAULT_POLL_INTERVAL,
    poll_timeout: Annotated[
        Optional[float],
        typer.Option(
            "--poll-timeout",
            help="Maximum seconds to wait for one update (default: wait forever)",
        ),
    ] = None,
    request_timeout: Annotated[
        float,
        typer.Option("--request-timeout", help="HTTP request timeout in seconds"),
    ] = DEFAULT_REQUEST_TIMEOUT,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable verbose logging")
    ] = False,
) -> None:
    """
    🚀 Deploy Komodo stacks or run procedures, one target at a time.

    Options override the matching action inputs (INPUT_* variables).
    """
    setup_logging(verbose)

    if poll_interval < 0 or request_timeout <= 0:
        console.print(
            "❌ [red]--poll-interval must be >= 0 and --request-timeout > 0[/red]"
        )
        raise typer.Exit(ExitCode.FAILURE)

    runtime = ActionsRuntime(
        overrides={
            INPUT_KIND: kind,
            INPUT_PATTERNS: patterns,
            INPUT_KOMODO_URL: komodo_url,
            INPUT_API_KEY: api_key,
            INPUT_API_SECRET: api_secret,
            INPUT_DRY_RUN: "true" if dry_run else None,
        }
    )
    context = create_error_context(operation="run", phase="run", component="run_command")

    try:
        orchestrator = RunOrchestrator(
            runtime,
            poll_interval=poll_interval,
            poll_timeout=poll_timeout,
            request_timeout=request_timeout,
            console=console,
        )
        status_map = orchestrator.execute()

    except KeyboardInterrupt:
        console.print("\n🛑 [yellow]Run cancelled by user[/yellow]")
        runtime.set_failed("Run cancelled by user")
        raise typer.Exit(ExitCode.FAILURE)

    except KomodoDeployError as e:
        runtime.set_failed(e.message)
        handle_error(e, context=e.context or context, show_traceback=verbose)
        raise typer.Exit(ExitCode.FAILURE)

    except Exception as e:
        runtime.set_failed(str(e))
        handle_error(e, context=context, show_traceback=verbose)
        raise typer.Exit(ExitCode.FAILURE)

    if orchestrator.inputs is not None and orchestrator.inputs.dry_run:
        console.print("🧪 [bold yellow]Dry run finished, nothing was deployed[/bold yellow]")
    else:
        display_updates_table(status_map, "Komodo Updates")
        console.print("🎉 [bold green]All targets processed successfully![/bold green]")
    raise typer.Exit(ExitCode.SUCCESS)
