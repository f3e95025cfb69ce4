"""
Run orchestrator unit tests.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import io
from unittest.mock import MagicMock, call

import pytest
from rich.console import Console

from komodo_deploy.core.actions import ActionsRuntime
from komodo_deploy.core.constants import MISSING_CREDENTIALS_MESSAGE
from komodo_deploy.core.errors import (
    ConfigurationError,
    RemoteOperationError,
    UnsupportedKindError,
    ValidationError,
)
from komodo_deploy.core.komodo import KomodoClient
from komodo_deploy.orchestration.inputs import ActionInputs
from komodo_deploy.orchestration.run_orchestrator import RunOrchestrator
from tests.fixtures.utils import make_batch_err, make_update, read_outputs


def make_orchestrator(env, client):
    runtime = ActionsRuntime(env=env, console=MagicMock(spec=Console))
    factory = MagicMock(return_value=client)
    orchestrator = RunOrchestrator(runtime, client_factory=factory, console=MagicMock(spec=Console))
    return orchestrator, factory


@pytest.mark.unit
class TestRunOrchestratorExecute:
    """Happy paths."""

    def test_sets_updates_output(self, actions_env, mock_client, output_file, summary_file):
        orchestrator, factory = make_orchestrator(actions_env, mock_client)

        status_map = orchestrator.execute()

        assert status_map == {"123test": "Complete"}
        assert read_outputs(output_file) == [("updates", '{"123test":"Complete"}')]
        assert "| 123test | Complete |" in summary_file.read_text(encoding="utf-8")
        factory.assert_called_once_with(orchestrator.inputs)

    def test_two_stacks_in_order(self, actions_env, output_file, summary_file):
        actions_env["INPUT_PATTERNS"] = '["a", "b"]'
        client = MagicMock()
        client.execute_and_poll.side_effect = [make_update("id1"), make_update("id2")]
        orchestrator, _ = make_orchestrator(actions_env, client)

        assert orchestrator.execute() == {"id1": "Complete", "id2": "Complete"}

        assert client.execute_and_poll.call_args_list == [
            call("DeployStack", {"stack": "a"}),
            call("DeployStack", {"stack": "b"}),
        ]
        summary = summary_file.read_text(encoding="utf-8")
        assert summary.index("| id1 | Complete |") < summary.index("| id2 | Complete |")

    def test_calls_are_sequential(self, actions_env):
        actions_env["INPUT_PATTERNS"] = '["a", "b", "c"]'
        events = []

        def execute_and_poll(request_type, params):
            name = params["stack"]
            events.append(f"start {name}")
            events.append(f"end {name}")
            return make_update(f"id-{name}")

        client = MagicMock()
        client.execute_and_poll.side_effect = execute_and_poll
        orchestrator, _ = make_orchestrator(actions_env, client)

        orchestrator.execute()

        assert events == ["start a", "end a", "start b", "end b", "start c", "end c"]

    def test_procedures(self, actions_env, output_file):
        actions_env["INPUT_KIND"] = "procedure"
        actions_env["INPUT_PATTERNS"] = '["nightly"]'
        client = MagicMock()
        client.execute_and_poll.return_value = make_update("p1", operation="RunProcedure")
        orchestrator, _ = make_orchestrator(actions_env, client)

        orchestrator.execute()

        client.execute_and_poll.assert_called_once_with("RunProcedure", {"procedure": "nightly"})
        assert read_outputs(output_file) == [("updates", '{"p1":"Complete"}')]

    def test_error_records_are_not_reported(self, actions_env, output_file):
        client = MagicMock()
        client.execute_and_poll.return_value = [make_update("ok"), make_batch_err("bad")]
        orchestrator, _ = make_orchestrator(actions_env, client)

        assert orchestrator.execute() == {"ok": "Complete"}
        assert read_outputs(output_file) == [("updates", '{"ok":"Complete"}')]

    def test_credentials_from_env(self, actions_env, mock_client):
        for name in ("INPUT_KOMODO-URL", "INPUT_API-KEY", "INPUT_API-SECRET"):
            actions_env[name] = ""
        actions_env.update(
            KOMODO_URL="https://env.example.com",
            KOMODO_API_KEY="env-key",
            KOMODO_API_SECRET="env-secret",
        )
        orchestrator, factory = make_orchestrator(actions_env, mock_client)

        orchestrator.execute()

        inputs = factory.call_args.args[0]
        assert (inputs.url, inputs.api_key, inputs.api_secret) == (
            "https://env.example.com", "env-key", "env-secret",
        )

    def test_no_summary_sink(self, actions_env, mock_client, output_file):
        del actions_env["GITHUB_STEP_SUMMARY"]
        orchestrator, _ = make_orchestrator(actions_env, mock_client)

        assert orchestrator.execute() == {"123test": "Complete"}
        assert read_outputs(output_file) == [("updates", '{"123test":"Complete"}')]


@pytest.mark.unit
class TestDryRun:
    """Dry run short-circuits before any client exists."""

    def test_dry_run(self, actions_env, mock_client, output_file, summary_file):
        actions_env["INPUT_DRY-RUN"] = "true"
        orchestrator, factory = make_orchestrator(actions_env, mock_client)

        assert orchestrator.execute() == {}

        factory.assert_not_called()
        mock_client.execute_and_poll.assert_not_called()
        assert read_outputs(output_file) == [("updates", "{}")]
        assert summary_file.read_text() == ""

    def test_dry_run_without_credentials(self, actions_env, mock_client, output_file):
        actions_env["INPUT_DRY-RUN"] = "true"
        actions_env["INPUT_API-KEY"] = ""
        orchestrator, factory = make_orchestrator(actions_env, mock_client)

        assert orchestrator.execute() == {}
        factory.assert_not_called()


@pytest.mark.unit
class TestEmptyTargets:
    """An empty target list emits the sentinel, then the empty mapping."""

    def test_sentinel_then_empty_mapping(self, actions_env, mock_client, output_file, summary_file):
        actions_env["INPUT_PATTERNS"] = "[]"
        orchestrator, _ = make_orchestrator(actions_env, mock_client)

        assert orchestrator.execute() == {}

        assert read_outputs(output_file) == [
            ("updates", "Nothing to update here"),
            ("updates", "{}"),
        ]
        assert orchestrator.runtime.outputs["updates"] == "{}"
        mock_client.execute_and_poll.assert_not_called()
        assert "| Update ID | Status |" in summary_file.read_text(encoding="utf-8")

    def test_sentinel_then_dry_run(self, actions_env, mock_client, output_file):
        actions_env["INPUT_PATTERNS"] = "[]"
        actions_env["INPUT_DRY-RUN"] = "true"
        orchestrator, _ = make_orchestrator(actions_env, mock_client)

        orchestrator.execute()

        assert read_outputs(output_file) == [
            ("updates", "Nothing to update here"),
            ("updates", "{}"),
        ]


@pytest.mark.unit
class TestFailures:
    """Failures propagate to the caller without final output."""

    @pytest.mark.parametrize("missing", ["INPUT_KOMODO-URL", "INPUT_API-KEY", "INPUT_API-SECRET"])
    def test_missing_credentials(self, actions_env, mock_client, output_file, missing):
        actions_env[missing] = ""
        orchestrator, factory = make_orchestrator(actions_env, mock_client)

        with pytest.raises(ConfigurationError) as exc_info:
            orchestrator.execute()

        assert str(exc_info.value) == MISSING_CREDENTIALS_MESSAGE
        factory.assert_not_called()
        mock_client.execute_and_poll.assert_not_called()
        assert read_outputs(output_file) == []

    def test_remote_error_aborts_remaining_targets(self, actions_env, output_file, summary_file):
        actions_env["INPUT_PATTERNS"] = '["a", "b", "c"]'
        client = MagicMock()
        client.execute_and_poll.side_effect = [make_update("id1"), RemoteOperationError("boom")]
        orchestrator, _ = make_orchestrator(actions_env, client)

        with pytest.raises(RemoteOperationError, match="boom"):
            orchestrator.execute()

        assert client.execute_and_poll.call_count == 2
        assert read_outputs(output_file) == []
        assert summary_file.read_text() == ""

    def test_unsupported_kind(self, actions_env, mock_client, output_file):
        actions_env["INPUT_KIND"] = "service"
        orchestrator, _ = make_orchestrator(actions_env, mock_client)

        with pytest.raises(UnsupportedKindError, match="Unsupported kind: service"):
            orchestrator.execute()

        assert read_outputs(output_file) == []

    def test_unsupported_kind_with_no_targets_is_not_detected(self, actions_env, mock_client):
        actions_env["INPUT_KIND"] = "service"
        actions_env["INPUT_PATTERNS"] = "[]"
        orchestrator, _ = make_orchestrator(actions_env, mock_client)

        assert orchestrator.execute() == {}

    def test_malformed_patterns(self, actions_env, mock_client):
        actions_env["INPUT_PATTERNS"] = "{not json"
        orchestrator, factory = make_orchestrator(actions_env, mock_client)

        with pytest.raises(ValidationError, match="Invalid JSON"):
            orchestrator.execute()

        factory.assert_not_called()


@pytest.mark.unit
def test_default_client_uses_configured_timeouts(actions_env):
    runtime = ActionsRuntime(env=actions_env, console=MagicMock(spec=Console))
    orchestrator = RunOrchestrator(
        runtime, poll_interval=2.5, poll_timeout=60, request_timeout=10, console=MagicMock(spec=Console)
    )

    client = orchestrator.client_factory(
        ActionInputs(kind="stack", url="https://k/", api_key="key", api_secret="secret")
    )

    assert isinstance(client, KomodoClient)
    assert client.url == "https://k"
    assert (client.poll_interval, client.poll_timeout, client.request_timeout) == (2.5, 60, 10)


@pytest.mark.unit
class TestConsoleRendering:
    """Configuration panel rendered on a real console."""

    def make_rendering_orchestrator(self, env, client):
        runtime = ActionsRuntime(env=env, console=MagicMock(spec=Console))
        output = io.StringIO()
        console = Console(file=output, width=200, color_system=None)
        orchestrator = RunOrchestrator(
            runtime, client_factory=MagicMock(return_value=client), console=console
        )
        return orchestrator, output

    def test_bracketed_target_name_is_deployed(self, actions_env, mock_client, output_file):
        actions_env["INPUT_PATTERNS"] = '["web[/prod]", "[bold]api"]'
        orchestrator, output = self.make_rendering_orchestrator(actions_env, mock_client)

        orchestrator.execute()

        assert mock_client.execute_and_poll.call_args_list == [
            call("DeployStack", {"stack": "web[/prod]"}),
            call("DeployStack", {"stack": "[bold]api"}),
        ]
        assert "web[/prod], [bold]api" in output.getvalue()
        assert read_outputs(output_file) == [("updates", '{"123test":"Complete"}')]

    def test_bracketed_kind_is_reported_as_unsupported(self, actions_env, mock_client):
        actions_env["INPUT_KIND"] = "[/x]"
        orchestrator, output = self.make_rendering_orchestrator(actions_env, mock_client)

        with pytest.raises(UnsupportedKindError, match=r"Unsupported kind: \[/x\]"):
            orchestrator.execute()

        assert "Komodo [/x] run" in output.getvalue()


@pytest.mark.unit
class TestClientLifecycle:
    """The client is closed once dispatch ends."""

    def test_client_closed_after_run(self, actions_env, mock_client):
        orchestrator, _ = make_orchestrator(actions_env, mock_client)

        orchestrator.execute()

        mock_client.close.assert_called_once_with()

    def test_client_closed_after_failure(self, actions_env):
        client = MagicMock()
        client.execute_and_poll.side_effect = RemoteOperationError("boom")
        orchestrator, _ = make_orchestrator(actions_env, client)

        with pytest.raises(RemoteOperationError):
            orchestrator.execute()

        client.close.assert_called_once_with()

    def test_no_client_on_dry_run(self, actions_env, mock_client):
        actions_env["INPUT_DRY-RUN"] = "true"
        orchestrator, _ = make_orchestrator(actions_env, mock_client)

        orchestrator.execute()

        mock_client.close.assert_not_called()
