"""
Pytest configuration and shared fixtures for komodo-deploy tests.

Provides Actions runner environments backed by temporary output and summary
files, and a mock Komodo client.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

from unittest.mock import MagicMock

import pytest

from komodo_deploy.core.errors import set_error_handler
from tests.fixtures.utils import make_input_env, make_update


# ============================================================================
# Actions Runner Fixtures
# ============================================================================

@pytest.fixture
def output_file(tmp_path):
    """Empty GITHUB_OUTPUT file."""
    path = tmp_path / "github_output"
    path.touch()
    return path


@pytest.fixture
def summary_file(tmp_path):
    """Empty GITHUB_STEP_SUMMARY file."""
    path = tmp_path / "summary.md"
    path.touch()
    return path


@pytest.fixture
def actions_env(output_file, summary_file):
    """Runner environment with default inputs and output/summary sinks."""
    env = make_input_env()
    env["GITHUB_OUTPUT"] = str(output_file)
    env["GITHUB_STEP_SUMMARY"] = str(summary_file)
    return env


# ============================================================================
# Komodo Client Fixtures
# ============================================================================

@pytest.fixture
def mock_client():
    """Komodo client whose execute_and_poll returns one completed update."""
    client = MagicMock()
    client.execute_and_poll.return_value = [make_update("123test")]
    return client


@pytest.fixture(autouse=True)
def reset_error_handler():
    """Do not leak the process-wide error handler between tests."""
    yield
    set_error_handler(None)
