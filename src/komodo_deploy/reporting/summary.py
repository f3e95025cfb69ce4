#!/usr/bin/env python3
"""
Job summary rendering for deployment results.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import logging
from typing import Dict

from komodo_deploy.core.constants import OUTPUT_UPDATES
from komodo_deploy.core.actions import ActionsRuntime

logger = logging.getLogger(__name__)

SUMMARY_TITLE = "### 📝 Komodo Deployment Summary"


def render_summary(status_map: Dict[str, str]) -> str:
    """Render the status mapping as a Markdown table."""
    lines = [
        SUMMARY_TITLE,
        "",
        "| Update ID | Status |",
        "|-----------|--------|",
    ]
    for update_id, status in status_map.items():
        lines.append(f"| {update_id} | {status} |")
    return "\n".join(lines) + "\n"


def write_step_summary(runtime: ActionsRuntime, status_map: Dict[str, str]) -> bool:
    """
    Append the summary table to the job summary.

    Returns:
        False if the runner has no summary file configured
    """
    if not runtime.summary_path():
        logger.debug("No job summary file configured, skipping summary")
        return False
    runtime.append_summary(render_summary(status_map))
    return True


def report(runtime: ActionsRuntime, status_map: Dict[str, str]) -> None:
    """Emit the updates output and append the job summary."""
    runtime.set_output(OUTPUT_UPDATES, status_map)
    write_step_summary(runtime, status_map)
