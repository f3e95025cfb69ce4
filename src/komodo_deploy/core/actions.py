#!/usr/bin/env python3
"""Module to talk to the GitHub Actions runner.

This module provides a class that reads action inputs, sets step outputs,
reports failures through workflow commands and appends to the job summary.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""
# built-in modules
import json
import os
import typing
import uuid
# third-party modules
from rich.console import Console as RichConsole
# project modules
from komodo_deploy.core.errors import ValidationError


def escape_data(value: str) -> str:
    """Escape a workflow command payload."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    """Escape a workflow command property value."""
    return (
        escape_data(value).replace(":", "%3A").replace(",", "%2C")
    )


def to_command_value(value: typing.Any) -> str:
    """Serialize a value the way the Actions toolkit does.

    Strings pass through, ``None`` becomes the empty string and anything
    else is compact JSON.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


class ActionsRuntime:
    """Class to exchange data with the Actions runner.

    Attributes:
        env (typing.Mapping[str, str]): Read-only environment snapshot.
        overrides (typing.Dict[str, str]): Input values given on the command line.
        failed (bool): Whether set_failed was called.
        outputs (typing.Dict[str, str]): Every output set during the run, last value wins.
    """
    def __init__(
            self,
            env: typing.Optional[typing.Mapping[str, str]] = None,
            overrides: typing.Optional[typing.Dict[str, typing.Optional[str]]] = None,
            console: typing.Optional[RichConsole] = None,
        ) -> None:
        """Constructor of the ActionsRuntime class.

        Args:
            env: Environment snapshot, defaults to a copy of os.environ.
            overrides: Input values that take precedence over INPUT_* variables.
            console: Rich console used for workflow commands.
        """
        self.env = dict(os.environ) if env is None else env
        self.overrides = {
            name: value for name, value in (overrides or {}).items() if value is not None
        }
        self.console = console or RichConsole(highlight=False, soft_wrap=True, emoji=False)
        self.failed = False
        self.outputs: typing.Dict[str, str] = {}

    @staticmethod
    def input_env_name(name: str) -> str:
        """Environment variable the runner uses for an input."""
        return f"INPUT_{name.replace(' ', '_').upper()}"

    def get_input(self, name: str, required: bool = False) -> str:
        """Get an action input, trimmed.

        Args:
            name: Input name as declared in action.yml.
            required: Whether an empty value is an error.

        Returns:
            str: The input value, or an empty string.

        Raises:
            ValidationError: If the input is required and empty.
        """
        if name in self.overrides:
            value = str(self.overrides[name])
        else:
            value = self.env.get(self.input_env_name(name), "")
        if required and not value:
            raise ValidationError(f"Input required and not supplied: {name}")
        return value.strip()

    def _issue(self, command: str, message: str = "") -> None:
        self.console.print(f"::{command}::{escape_data(message)}", markup=False)

    def _issue_file_command(self, variable: str, payload: str) -> bool:
        path = self.env.get(variable)
        if not path:
            return False
        with open(path, "a", encoding="utf-8") as f:
            f.write(payload)
        return True

    def set_output(self, name: str, value: typing.Any) -> None:
        """Set a step output.

        Uses the GITHUB_OUTPUT file when the runner provides one, and the
        legacy set-output command otherwise.
        """
        serialized = to_command_value(value)
        self.outputs[name] = serialized

        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        if delimiter in name or delimiter in serialized:
            raise ValidationError(
                f"Unexpected input: value should not contain the delimiter {delimiter}"
            )
        payload = f"{name}<<{delimiter}{os.linesep}{serialized}{os.linesep}{delimiter}{os.linesep}"
        if not self._issue_file_command("GITHUB_OUTPUT", payload):
            self.console.print("")
            self.console.print(
                f"::set-output name={escape_property(name)}::{escape_data(serialized)}",
                markup=False,
            )

    def set_failed(self, message: str) -> None:
        """Mark the step as failed and emit an error annotation."""
        self.failed = True
        self._issue("error", message)

    def summary_path(self) -> typing.Optional[str]:
        """Path of the job summary file, if the runner exposes one."""
        return self.env.get("GITHUB_STEP_SUMMARY") or None

    def append_summary(self, markdown: str) -> bool:
        """Append markdown to the job summary.

        Returns:
            bool: False when no summary sink is configured.
        """
        return self._issue_file_command("GITHUB_STEP_SUMMARY", markdown)
