#!/usr/bin/env python3
"""
Input resolution for a deployment run.

Reads the action inputs, parses the target list and resolves the Komodo
connection settings, preferring explicit inputs over environment variables.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import json
from dataclasses import dataclass, field
from typing import Callable, List, Mapping, Optional

from komodo_deploy.core.constants import (
    ENV_KOMODO_API_KEY,
    ENV_KOMODO_API_SECRET,
    ENV_KOMODO_URL,
    INPUT_API_KEY,
    INPUT_API_SECRET,
    INPUT_DRY_RUN,
    INPUT_KIND,
    INPUT_KOMODO_URL,
    INPUT_PATTERNS,
    MISSING_CREDENTIALS_MESSAGE,
)
from komodo_deploy.core.errors import ConfigurationError, ValidationError

InputGetter = Callable[..., str]


@dataclass
class ActionInputs:
    """Resolved inputs of one run."""

    kind: str
    targets: List[str] = field(default_factory=list)
    dry_run: bool = False
    url: Optional[str] = None
    api_key: Optional[str] = None
    api_secret: Optional[str] = None

    @property
    def has_credentials(self) -> bool:
        return bool(self.url and self.api_key and self.api_secret)

    def require_credentials(self) -> None:
        """
        Raises:
            ConfigurationError: If any connection setting is missing
        """
        if not self.has_credentials:
            raise ConfigurationError(
                MISSING_CREDENTIALS_MESSAGE,
                suggestions=[
                    f"Set the {INPUT_KOMODO_URL}, {INPUT_API_KEY} and {INPUT_API_SECRET} inputs",
                    f"Or export {ENV_KOMODO_URL}, {ENV_KOMODO_API_KEY} and {ENV_KOMODO_API_SECRET}",
                ],
            )


def resolve_setting(
    explicit: Optional[str], env: Mapping[str, str], name: str
) -> Optional[str]:
    """Return the explicit value if non-empty, else ``env[name]`` if non-empty."""
    if explicit:
        return explicit
    return env.get(name) or None


def parse_targets(raw_patterns: str) -> List[str]:
    """
    Parse the JSON-encoded list of target names.

    Raises:
        ValidationError: If the value is not a JSON array of strings
    """
    try:
        patterns = json.loads(raw_patterns)
    except json.JSONDecodeError as e:
        raise ValidationError(
            f"Invalid JSON in {INPUT_PATTERNS}: {e}",
            suggestions=['Provide a JSON array, e.g. ["my-stack", "other-stack"]'],
            cause=e,
        )

    if not isinstance(patterns, list):
        raise ValidationError(
            f"{INPUT_PATTERNS} must be a JSON array, got {type(patterns).__name__}"
        )

    for index, name in enumerate(patterns):
        if not isinstance(name, str):
            raise ValidationError(
                f"{INPUT_PATTERNS}[{index}] must be a string, got {type(name).__name__}"
            )

    return patterns


def resolve_inputs(get_input: InputGetter, env: Mapping[str, str]) -> ActionInputs:
    """
    Resolve all run inputs.

    Credentials are resolved but not checked here; a dry run does not need
    them.

    Args:
        get_input: Callable ``(name, required=False) -> str`` reading action inputs
        env: Read-only environment snapshot used for fallbacks

    Returns:
        ActionInputs
    """
    kind = get_input(INPUT_KIND, required=True)
    targets = parse_targets(get_input(INPUT_PATTERNS, required=True))
    dry_run = get_input(INPUT_DRY_RUN) == "true"

    return ActionInputs(
        kind=kind,
        targets=targets,
        dry_run=dry_run,
        url=resolve_setting(get_input(INPUT_KOMODO_URL), env, ENV_KOMODO_URL),
        api_key=resolve_setting(get_input(INPUT_API_KEY), env, ENV_KOMODO_API_KEY),
        api_secret=resolve_setting(
            get_input(INPUT_API_SECRET), env, ENV_KOMODO_API_SECRET
        ),
    )
