"""
Orchestration layer for komodo-deploy runs.

Architecture:
- inputs: resolves action inputs and Komodo connection settings
- dispatcher: maps an operation kind to one Komodo execution
- RunOrchestrator: runs the targets in order and reports the results
"""

from .dispatcher import OperationKind, execute_one
from .inputs import ActionInputs, resolve_inputs, resolve_setting
from .run_orchestrator import RunOrchestrator

__all__ = [
    "OperationKind",
    "execute_one",
    "ActionInputs",
    "resolve_inputs",
    "resolve_setting",
    "RunOrchestrator",
]
