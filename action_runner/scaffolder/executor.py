"""Single template action execution."""

import asyncio
import time
from typing import Any, Callable, Dict, List, Optional, Sequence, TextIO

import structlog
from pydantic import ValidationError

from ..actions.base import ExecutionState, JsonValue, TemplateAction
from ..actions.builtin import create_builtin_actions
from ..actions.registry import ActionRegistry
from ..config import ConfigReader
from ..errors import ActionInputInvalid
from ..metrics import ACTION_DURATION, ACTIONS_EXECUTED, REGISTERED_ACTIONS
from ..utils.catalog import CatalogClient
from ..utils.logging import LogStream
from ..utils.url_reader import UrlReader
from .context import build_action_context
from .models import ExecutionRequest, ExecutionResult
from .workspace import WorkspaceProvisioner


logger = structlog.get_logger(__name__)

ActionLoader = Callable[..., Sequence[TemplateAction]]


class ActionExecutor:
    """Executes one registered template action at a time.

    The registry is populated from ``action_loader`` on first use. Temporary
    directories created by a handler are left in place when the execution
    finishes; callers that run several actions against the same workspace
    remove them through :meth:`remove_temporary_directories` once they are
    no longer needed.
    """

    def __init__(
        self,
        config: ConfigReader,
        catalog_client: Optional[CatalogClient] = None,
        url_reader: Optional[UrlReader] = None,
        registry: Optional[ActionRegistry] = None,
        action_loader: Optional[ActionLoader] = None,
        provisioner: Optional[WorkspaceProvisioner] = None,
        log_stream: Optional[TextIO] = None,
    ) -> None:
        """Initialize the action executor.

        Args:
            config: Configuration lookup
            catalog_client: Catalog client handed to catalog actions
            url_reader: URL reader handed to fetch actions
            registry: Action registry; a new empty one if omitted
            action_loader: Callable returning the actions to register,
                ``create_builtin_actions`` by default
            provisioner: Workspace provisioner
            log_stream: Stream exposed to handlers as ``ctx.log_stream``
        """
        self.config = config
        self.catalog_client = catalog_client
        self.url_reader = url_reader
        self.registry = registry if registry is not None else ActionRegistry()
        self.action_loader: ActionLoader = action_loader or create_builtin_actions
        self.provisioner = provisioner or WorkspaceProvisioner()
        self.log_stream: TextIO = log_stream or LogStream()
        self._load_lock = asyncio.Lock()
        self._loaded_actions: Optional[List[TemplateAction]] = None

    def load_actions(self) -> None:
        """Register every action provided by the action loader.

        The loader runs once; later calls register the same action objects
        again, which leaves the registry unchanged.
        """
        if self._loaded_actions is None:
            self._loaded_actions = list(
                self.action_loader(
                    catalog_client=self.catalog_client,
                    reader=self.url_reader,
                    config=self.config,
                )
            )
        self.registry.register_all(self._loaded_actions)
        REGISTERED_ACTIONS.set(len(self.registry))

        logger.info("Loaded template actions", count=len(self.registry))

    async def ensure_actions_loaded(self) -> None:
        """Populate the registry exactly once if it is still empty."""
        if self.registry.list():
            return

        async with self._load_lock:
            if not self.registry.list():
                self.load_actions()

    def get_action(self, action_id: str) -> TemplateAction:
        """Get a registered action.

        Raises:
            ActionNotFound: If no action is registered under ``action_id``
        """
        return self.registry.get(action_id)

    async def list_actions(self) -> List[Dict[str, Any]]:
        """Describe all registered actions, loading them first if needed."""
        await self.ensure_actions_loaded()
        return [action.describe() for action in self.registry.list()]

    def _validate_input(self, action: TemplateAction, request: ExecutionRequest) -> None:
        if action.input_schema is None:
            return
        try:
            action.input_schema.model_validate(request.input)
        except ValidationError as e:
            raise ActionInputInvalid(
                action.id, e.errors(include_url=False, include_context=False)
            ) from e

    async def execute(self, request: ExecutionRequest) -> ExecutionResult:
        """Execute a template action and report its workspace details.

        Args:
            request: Action ID, optional instance ID and input payload

        Returns:
            Outputs, workspace path and temporary directories of the run

        Raises:
            ActionNotFound: If the action is not registered
            ActionInputInvalid: If the input does not match the action schema
            InvalidInstanceId: If the instance ID cannot name a directory
            WorkingDirectoryUnavailable: If the configured working directory
                cannot be used
            Exception: Whatever the action handler raises
        """
        await self.ensure_actions_loaded()

        action = self.get_action(request.action_id)
        self._validate_input(action, request)

        working_directory = await self.provisioner.resolve_root_directory(self.config)
        workspace_path = self.provisioner.derive_workspace_path(
            working_directory, request.instance_id
        )
        await self.provisioner.create_workspace(workspace_path)

        state = ExecutionState()
        action_logger = logger.bind(action=action.id, workspace=workspace_path)
        ctx = build_action_context(
            request,
            workspace_path,
            action_logger,
            self.log_stream,
            state,
            self.provisioner,
        )

        action_logger.info("Executing template action", instance_id=request.instance_id)

        start_time = time.time()
        try:
            await action.handler(ctx)
        except Exception as e:
            ACTIONS_EXECUTED.labels(action=action.id, status="failed").inc()
            action_logger.error(
                "Template action failed",
                error=str(e),
                error_type=type(e).__name__,
                execution_time=time.time() - start_time,
            )
            raise
        finally:
            ACTION_DURATION.labels(action=action.id).observe(time.time() - start_time)

        ACTIONS_EXECUTED.labels(action=action.id, status="success").inc()
        action_logger.info(
            "Template action completed",
            outputs=list(state.outputs.keys()),
            temporary_directories=len(state.temporary_directories),
            execution_time=time.time() - start_time,
        )

        return ExecutionResult(
            action_id=action.id,
            workspace_path=workspace_path,
            outputs=state.outputs,
            temporary_directories=state.temporary_directories,
        )

    async def execute_action(self, request: ExecutionRequest) -> Dict[str, JsonValue]:
        """Execute a template action and return its outputs."""
        result = await self.execute(request)
        return result.outputs

    async def remove_temporary_directories(self, result: ExecutionResult) -> None:
        """Remove the temporary directories created during ``result``'s run."""
        await self.provisioner.remove_temporary_directories(result.temporary_directories)
