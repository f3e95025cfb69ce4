#!/usr/bin/env python3
"""
CLI Package for komodo-deploy

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

from .app import app, cli_main
from .constants import ExitCode
from .utils import (
    console,
    setup_logging,
    display_updates_table,
)

__all__ = [
    "app",
    "cli_main",
    "ExitCode",
    "console",
    "setup_logging",
    "display_updates_table",
]
