"""Pytest configuration and fixtures for action runner tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from action_runner.actions import ActionContext, ActionRegistry, create_template_action
from action_runner.config import ConfigReader, RunnerSettings
from action_runner.scaffolder import ActionExecutor
from action_runner.utils.catalog import CatalogClient
from action_runner.utils.url_reader import UrlReader


async def echo_handler(ctx: ActionContext) -> None:
    ctx.output("value", ctx.input.get("value"))


async def temp_dirs_handler(ctx: ActionContext) -> None:
    first = await ctx.create_temporary_directory()
    second = await ctx.create_temporary_directory()
    ctx.output("first", first)
    ctx.output("second", second)


@pytest.fixture
def runner_settings():
    """Provide test runner settings."""
    return RunnerSettings(
        log_level="DEBUG",
        action_execution_timeout=30,
        server_port=9999,
        metrics_enabled=False,
    )


@pytest.fixture
def working_directory(tmp_path):
    """Provide an existing, writable working directory."""
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def config(working_directory):
    """Provide configuration pointing at the test working directory."""
    return ConfigReader({"backend": {"workingDirectory": str(working_directory)}})


@pytest.fixture
def echo_action():
    """Provide an action that copies ``input.value`` into its output."""
    return create_template_action(id="echo", handler=echo_handler, description="Echo input")


@pytest.fixture
def temp_dirs_action():
    """Provide an action that creates two temporary directories."""
    return create_template_action(id="temp-dirs", handler=temp_dirs_handler)


@pytest.fixture
def action_loader(echo_action, temp_dirs_action):
    """Provide a loader returning the test actions and counting its calls."""
    return MagicMock(return_value=[echo_action, temp_dirs_action])


@pytest.fixture
def registry():
    """Provide an empty ActionRegistry."""
    return ActionRegistry()


@pytest.fixture
def executor(config, registry, action_loader):
    """Provide an ActionExecutor backed by the test actions."""
    return ActionExecutor(config=config, registry=registry, action_loader=action_loader)


@pytest.fixture
def mock_catalog_client():
    """Provide a mocked catalog client."""
    client = MagicMock(spec=CatalogClient)
    client.get_entity_by_ref = AsyncMock(return_value=None)
    client.close = AsyncMock()
    return client


@pytest.fixture
def mock_url_reader():
    """Provide a mocked URL reader."""
    reader = MagicMock(spec=UrlReader)
    reader.read_url = AsyncMock(return_value=b"")
    reader.close = AsyncMock()
    return reader
