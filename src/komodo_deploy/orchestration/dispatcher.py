#!/usr/bin/env python3
"""
Dispatcher - maps an operation kind to the Komodo execution request.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

from enum import Enum
from typing import Any, Dict, Tuple

from komodo_deploy.core.errors import UnsupportedKindError
from komodo_deploy.core.komodo import ExecutionResult


class OperationKind(str, Enum):
    """Supported operation kinds."""

    STACK = "stack"
    PROCEDURE = "procedure"


# kind -> (Komodo execute request, params key)
_REQUESTS: Dict[OperationKind, Tuple[str, str]] = {
    OperationKind.STACK: ("DeployStack", "stack"),
    OperationKind.PROCEDURE: ("RunProcedure", "procedure"),
}


def execute_one(client: Any, kind: str, name: str) -> ExecutionResult:
    """
    Run the operation for one target and wait for it to complete.

    Args:
        client: Object exposing ``execute_and_poll(request_type, params)``
        kind: Operation kind (``stack`` or ``procedure``)
        name: Target name

    Returns:
        The polled Update, or a list of batch results

    Raises:
        UnsupportedKindError: If kind is not supported
    """
    try:
        operation = OperationKind(kind)
    except ValueError:
        raise UnsupportedKindError(kind)

    request_type, param = _REQUESTS[operation]
    return client.execute_and_poll(request_type, {param: name})
