#!/usr/bin/env python3
"""
Run Orchestrator - Coordinates one deployment run.

Workflow:
1. Resolve inputs (kind, targets, dry-run, Komodo connection)
2. Dispatch one Komodo operation per target, sequentially
3. Normalize results into an update id -> status mapping
4. Report the mapping as a step output and job summary

Errors are not caught here; the caller is the single error boundary.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.panel import Panel

from komodo_deploy.core.actions import ActionsRuntime
from komodo_deploy.core.constants import (
    DEFAULT_POLL_INTERVAL,
    DEFAULT_REQUEST_TIMEOUT,
    NOTHING_TO_UPDATE,
    OUTPUT_UPDATES,
)
from komodo_deploy.core.komodo import KomodoClient
from komodo_deploy.orchestration.dispatcher import execute_one
from komodo_deploy.orchestration.inputs import ActionInputs, resolve_inputs
from komodo_deploy.reporting.summary import report
from komodo_deploy.reporting.updates import build_status_map

logger = logging.getLogger(__name__)

ClientFactory = Callable[[ActionInputs], Any]


class RunOrchestrator:
    """
    Orchestrates a deployment run.

    Responsibilities:
    - Resolve inputs through the Actions runtime
    - Short-circuit dry runs before any client is created
    - Deploy/run each target in order, one at a time
    - Aggregate and report results
    """

    def __init__(
        self,
        runtime: ActionsRuntime,
        client_factory: Optional[ClientFactory] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        poll_timeout: Optional[float] = None,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        console: Optional[RichConsole] = None,
    ):
        """
        Initialize run orchestrator.

        Args:
            runtime: Actions runtime used for inputs, outputs and summary
            client_factory: Builds the Komodo client from resolved inputs
            poll_interval: Seconds between update polls
            poll_timeout: Maximum seconds to wait per update, None to wait forever
            request_timeout: Per-request HTTP timeout in seconds
            console: Rich console for the configuration panel
        """
        self.runtime = runtime
        self.client_factory = client_factory or self._default_client
        self.poll_interval = poll_interval
        self.poll_timeout = poll_timeout
        self.request_timeout = request_timeout
        self.rich_console = console or RichConsole()
        self.inputs: Optional[ActionInputs] = None

    def _default_client(self, inputs: ActionInputs) -> KomodoClient:
        return KomodoClient(
            inputs.url,
            inputs.api_key,
            inputs.api_secret,
            poll_interval=self.poll_interval,
            poll_timeout=self.poll_timeout,
            request_timeout=self.request_timeout,
        )

    def _show_configuration(self, inputs: ActionInputs) -> None:
        self.rich_console.print(
            Panel(
                f"🚀 [bold cyan]Komodo {escape(inputs.kind)} run[/bold cyan]\n"
                f"Targets: [yellow]{escape(', '.join(inputs.targets) or 'none')}[/yellow]\n"
                f"Komodo: [yellow]{escape(inputs.url or 'not configured')}[/yellow]\n"
                f"Dry run: [yellow]{inputs.dry_run}[/yellow]",
                title="Run Configuration",
                border_style="green",
            )
        )

    def execute(self) -> Dict[str, Any]:
        """
        Execute the run.

        An empty target list emits the "nothing to update" output but does
        not stop the run; the (empty) mapping reported at the end replaces it.

        Returns:
            The update id -> status mapping that was reported ({} on dry run)
        """
        inputs = resolve_inputs(self.runtime.get_input, self.runtime.env)
        self.inputs = inputs

        if not inputs.targets:
            self.runtime.set_output(OUTPUT_UPDATES, NOTHING_TO_UPDATE)

        self._show_configuration(inputs)
        logger.info(f"Kind: {inputs.kind}")
        logger.info(f"Targets: {', '.join(inputs.targets)}")

        if inputs.dry_run:
            logger.info("🧪 Dry-run enabled, nothing will be deployed")
            self.runtime.set_output(OUTPUT_UPDATES, {})
            return {}

        inputs.require_credentials()
        client = self.client_factory(inputs)

        results: List[Any] = []
        try:
            for name in inputs.targets:
                logger.info(f"🚀 {inputs.kind} → {name}")
                results.append(execute_one(client, inputs.kind, name))
        finally:
            client.close()

        status_map = build_status_map(results)
        report(self.runtime, status_map)
        return status_map
