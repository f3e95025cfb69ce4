"""
komodo-deploy: deploy Komodo stacks and run procedures from CI.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

__version__ = "1.0.0"
