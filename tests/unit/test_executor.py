"""Unit tests for ActionExecutor."""

import asyncio
import os

import pytest
from pydantic import BaseModel

from action_runner.actions import ActionRegistry, create_template_action
from action_runner.config import ConfigReader
from action_runner.errors import (
    ActionInputInvalid,
    ActionNotFound,
    InvalidInstanceId,
    WorkingDirectoryUnavailable,
)
from action_runner.scaffolder import ActionExecutor, ExecutionRequest


class TestLoadActions:
    """Test registry population."""

    def test_load_actions(self, executor, action_loader):
        """Test loading registers every loader action."""
        executor.load_actions()

        assert [a.id for a in executor.registry.list()] == ["echo", "temp-dirs"]
        action_loader.assert_called_once()

    def test_load_actions_twice_is_idempotent(self, executor, action_loader):
        """Test loading twice keeps the same actions."""
        executor.load_actions()
        executor.load_actions()

        assert len(executor.registry.list()) == 2
        action_loader.assert_called_once()

    def test_loader_receives_collaborators(self, config, mock_catalog_client, mock_url_reader, action_loader):
        """Test the loader is given the catalog client, reader and config."""
        executor = ActionExecutor(
            config=config,
            catalog_client=mock_catalog_client,
            url_reader=mock_url_reader,
            action_loader=action_loader,
        )

        executor.load_actions()

        action_loader.assert_called_once_with(
            catalog_client=mock_catalog_client, reader=mock_url_reader, config=config
        )

    def test_builtin_actions_by_default(self, config, mock_catalog_client, mock_url_reader):
        """Test the default loader provides the built-in actions."""
        executor = ActionExecutor(
            config=config, catalog_client=mock_catalog_client, url_reader=mock_url_reader
        )

        executor.load_actions()

        assert {a.id for a in executor.registry.list()} == {
            "debug:log",
            "debug:wait",
            "fs:delete",
            "fs:rename",
            "fetch:plain:file",
            "catalog:fetch",
        }

    async def test_lazy_load_on_first_execution(self, executor, action_loader):
        """Test the registry is populated on first use."""
        assert executor.registry.list() == []

        await executor.execute_action(ExecutionRequest(action_id="echo", input={"value": 1}))

        assert len(executor.registry.list()) == 2
        action_loader.assert_called_once()

    async def test_concurrent_lazy_load_runs_once(self, executor, action_loader):
        """Test overlapping executions load the registry only once."""
        requests = [
            ExecutionRequest(action_id="echo", input={"value": i}) for i in range(10)
        ]

        results = await asyncio.gather(*(executor.execute_action(r) for r in requests))

        assert results == [{"value": i} for i in range(10)]
        action_loader.assert_called_once()
        assert len(executor.registry.list()) == 2

    async def test_preloaded_registry_skips_loader(self, config, echo_action, action_loader):
        """Test an injected, populated registry is used as is."""
        registry = ActionRegistry()
        registry.register(echo_action)
        executor = ActionExecutor(config=config, registry=registry, action_loader=action_loader)

        result = await executor.execute_action(ExecutionRequest(action_id="echo", input={"value": 3}))

        assert result == {"value": 3}
        action_loader.assert_not_called()


class TestExecuteAction:
    """Test single action execution."""

    async def test_echo_scenario(self, executor, working_directory):
        """Test the echo action returns its input and keeps the workspace."""
        result = await executor.execute_action(
            ExecutionRequest(action_id="echo", instance_id="abc", input={"value": 42})
        )

        assert result == {"value": 42}
        assert (working_directory / "abc").is_dir()

    async def test_missing_action_creates_no_workspace(self, executor, working_directory):
        """Test an unknown action fails before touching the filesystem."""
        with pytest.raises(ActionNotFound):
            await executor.execute_action(
                ExecutionRequest(action_id="missing-action", instance_id=None, input={})
            )

        assert list(working_directory.iterdir()) == []

    async def test_get_action(self, executor):
        """Test looking up actions through the executor."""
        executor.load_actions()

        assert executor.get_action("echo").id == "echo"
        with pytest.raises(ActionNotFound):
            executor.get_action("missing-action")

    async def test_outputs_exact(self, config, registry):
        """Test outputs contain exactly what the handler recorded."""

        async def handler(ctx):
            ctx.output("x", 1)
            ctx.output("y", "z")

        registry.register(create_template_action(id="two-outputs", handler=handler))
        executor = ActionExecutor(config=config, registry=registry)

        result = await executor.execute_action(ExecutionRequest(action_id="two-outputs"))

        assert result == {"x": 1, "y": "z"}

    async def test_no_outputs_returns_empty_mapping(self, config, registry):
        """Test a handler without outputs yields an empty mapping."""

        async def handler(ctx):
            await asyncio.sleep(0)

        registry.register(create_template_action(id="silent", handler=handler))
        executor = ActionExecutor(config=config, registry=registry)

        result = await executor.execute_action(ExecutionRequest(action_id="silent"))

        assert result == {}

    async def test_temporary_directories_are_distinct_and_kept(self, executor, working_directory):
        """Test temporary directories live under the workspace and survive the call."""
        result = await executor.execute(
            ExecutionRequest(action_id="temp-dirs", instance_id="run-1")
        )

        first, second = result.outputs["first"], result.outputs["second"]
        workspace = str(working_directory / "run-1")

        assert first != second
        assert result.workspace_path == workspace
        assert result.temporary_directories == [first, second]
        assert os.path.dirname(first) == workspace
        assert os.path.dirname(second) == workspace
        assert os.path.isdir(first) and os.path.isdir(second)

    async def test_remove_temporary_directories(self, executor):
        """Test callers can remove temporary directories after the run."""
        result = await executor.execute(ExecutionRequest(action_id="temp-dirs"))

        await executor.remove_temporary_directories(result)

        assert not any(os.path.exists(p) for p in result.temporary_directories)
        assert os.path.isdir(result.workspace_path)

    async def test_generated_workspaces_differ(self, executor, working_directory):
        """Test executions without an instance ID get separate workspaces."""
        first = await executor.execute(ExecutionRequest(action_id="echo"))
        second = await executor.execute(ExecutionRequest(action_id="echo"))

        assert first.workspace_path != second.workspace_path
        assert len(list(working_directory.iterdir())) == 2

    async def test_same_instance_id_reuses_workspace(self, executor):
        """Test repeating an instance ID maps to the same workspace."""
        first = await executor.execute(ExecutionRequest(action_id="echo", instance_id="abc"))
        second = await executor.execute(ExecutionRequest(action_id="echo", instance_id="abc"))

        assert first.workspace_path == second.workspace_path

    async def test_handler_sees_workspace_on_disk(self, config, registry):
        """Test the workspace exists when the handler runs."""

        async def handler(ctx):
            ctx.output("exists", os.path.isdir(ctx.workspace_path))

        registry.register(create_template_action(id="check", handler=handler))
        executor = ActionExecutor(config=config, registry=registry)

        assert await executor.execute_action(ExecutionRequest(action_id="check")) == {"exists": True}

    async def test_handler_writes_to_log_stream(self, config, registry):
        """Test handlers can write to the shared log stream."""

        async def handler(ctx):
            ctx.log_stream.write("hello\n")

        registry.register(create_template_action(id="log", handler=handler))
        executor = ActionExecutor(config=config, registry=registry)

        await executor.execute_action(ExecutionRequest(action_id="log"))

        assert list(executor.log_stream.lines) == ["hello"]


class TestExecuteActionFailures:
    """Test failure propagation."""

    async def test_missing_working_directory(self, registry, echo_action, tmp_path):
        """Test a missing configured working directory fails the call."""
        registry.register(echo_action)
        missing = tmp_path / "missing"
        executor = ActionExecutor(
            config=ConfigReader({"backend": {"workingDirectory": str(missing)}}),
            registry=registry,
        )

        with pytest.raises(WorkingDirectoryUnavailable):
            await executor.execute_action(ExecutionRequest(action_id="echo", instance_id="abc"))

        assert not missing.exists()

    async def test_handler_error_propagates_unchanged(self, config, registry):
        """Test handler errors reach the caller as-is with no partial output."""
        error = RuntimeError("boom")

        async def handler(ctx):
            ctx.output("partial", True)
            raise error

        registry.register(create_template_action(id="fails", handler=handler))
        executor = ActionExecutor(config=config, registry=registry)

        with pytest.raises(RuntimeError) as exc_info:
            await executor.execute_action(ExecutionRequest(action_id="fails"))

        assert exc_info.value is error

    async def test_invalid_instance_id(self, executor, working_directory):
        """Test instance IDs escaping the root are rejected."""
        with pytest.raises(InvalidInstanceId):
            await executor.execute_action(
                ExecutionRequest(action_id="echo", instance_id="../outside")
            )

        assert list(working_directory.iterdir()) == []

    async def test_input_schema_validation(self, config, registry, working_directory):
        """Test input is validated against the declared schema before provisioning."""

        class Input(BaseModel):
            value: int

        async def handler(ctx):
            ctx.output("value", ctx.input["value"])

        registry.register(
            create_template_action(id="typed", handler=handler, input_schema=Input)
        )
        executor = ActionExecutor(config=config, registry=registry)

        with pytest.raises(ActionInputInvalid) as exc_info:
            await executor.execute_action(
                ExecutionRequest(action_id="typed", instance_id="abc", input={"value": "nope"})
            )

        assert exc_info.value.action_id == "typed"
        assert exc_info.value.errors[0]["loc"] == ("value",)
        assert not (working_directory / "abc").exists()

        result = await executor.execute_action(
            ExecutionRequest(action_id="typed", input={"value": 7})
        )
        assert result == {"value": 7}
