#!/usr/bin/env python3
"""
CLI Commands Package for komodo-deploy

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

from .run import run

__all__ = ["run"]
