"""Utility functions for tests.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

# built-in modules
import typing
from unittest.mock import MagicMock

KOMODO_URL = "https://komodo.example.com"
API_KEY = "fake-key"
API_SECRET = "fake-secret"


def make_update(oid: str, status: str = "Complete", operation: str = "DeployStack") -> dict:
    """Build a Komodo Update document as the API returns it."""
    return {
        "_id": {"$oid": oid},
        "status": status,
        "operation": operation,
        "start_ts": 0,
        "success": True,
        "operator": "test",
        "target": {"type": "Stack", "id": "123"},
        "logs": [],
    }


def make_batch_err(name: str, error: str = "not found") -> dict:
    """Build an Err item of a batch execution response."""
    return {"status": "Err", "data": {"name": name, "error": {"error": error, "trace": []}}}


def make_input_env(
    kind: str = "stack",
    patterns: str = '["test-stack"]',
    dry_run: str = "false",
    komodo_url: str = KOMODO_URL,
    api_key: str = API_KEY,
    api_secret: str = API_SECRET,
) -> typing.Dict[str, str]:
    """Environment as the Actions runner sets it for the action inputs."""
    return {
        "INPUT_KIND": kind,
        "INPUT_PATTERNS": patterns,
        "INPUT_DRY-RUN": dry_run,
        "INPUT_KOMODO-URL": komodo_url,
        "INPUT_API-KEY": api_key,
        "INPUT_API-SECRET": api_secret,
    }


def read_outputs(path) -> typing.List[typing.Tuple[str, str]]:
    """Parse a GITHUB_OUTPUT file into (name, value) pairs, in write order."""
    outputs = []
    with open(path, encoding="utf-8") as f:
        lines = f.read().splitlines()

    index = 0
    while index < len(lines):
        name, delimiter = lines[index].split("<<", 1)
        index += 1
        value_lines = []
        while lines[index] != delimiter:
            value_lines.append(lines[index])
            index += 1
        index += 1
        outputs.append((name, "\n".join(value_lines)))
    return outputs


def make_response(status_code: int = 200, json_body=None, text: str = "") -> MagicMock:
    """Mock requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.reason = "OK" if response.ok else "Error"
    response.text = text
    if json_body is None:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = json_body
    return response
