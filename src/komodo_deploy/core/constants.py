#!/usr/bin/env python3
"""
Constants shared by the komodo-deploy packages

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

# Action inputs (names as declared in action.yml)
INPUT_KIND = "kind"
INPUT_PATTERNS = "patterns"
INPUT_DRY_RUN = "dry-run"
INPUT_KOMODO_URL = "komodo-url"
INPUT_API_KEY = "api-key"
INPUT_API_SECRET = "api-secret"

# Environment fallbacks for connection settings
ENV_KOMODO_URL = "KOMODO_URL"
ENV_KOMODO_API_KEY = "KOMODO_API_KEY"
ENV_KOMODO_API_SECRET = "KOMODO_API_SECRET"

# Action outputs
OUTPUT_UPDATES = "updates"
NOTHING_TO_UPDATE = "Nothing to update here"

MISSING_CREDENTIALS_MESSAGE = (
    "Komodo URL / API key / API secret must be provided either via input or env"
)

# Client defaults
DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_REQUEST_TIMEOUT = 30.0
