"""HTTP surface for health checks and action execution."""

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog
from aiohttp import web
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from . import __version__
from .errors import (
    ActionInputInvalid,
    ActionNotFound,
    InvalidInstanceId,
    WorkingDirectoryUnavailable,
)
from .scaffolder import ActionExecutor, ExecutionRequest


logger = structlog.get_logger(__name__)

EXECUTOR_KEY = web.AppKey("executor", ActionExecutor)


class ActionServer:
    """HTTP server exposing the action executor."""

    def __init__(
        self,
        executor: Optional[ActionExecutor] = None,
        host: str = "0.0.0.0",
        port: int = 8080,
        execution_timeout: float = 300,
        metrics_enabled: bool = True,
    ) -> None:
        """Initialize the action server.

        Args:
            executor: Executor that runs requested actions
            host: Interface to bind to
            port: Port to listen on
            execution_timeout: Seconds a single action may run
            metrics_enabled: Serve Prometheus metrics on /metrics
        """
        self.host = host
        self.port = port
        self.execution_timeout = execution_timeout
        self.app = web.Application()
        self.runner: Optional[web.AppRunner] = None
        self.site: Optional[web.TCPSite] = None
        self._startup_time = datetime.now(timezone.utc)

        if executor is not None:
            self.app[EXECUTOR_KEY] = executor

        # Setup routes
        self.app.router.add_get('/healthz', self._health_handler)
        self.app.router.add_get('/readyz', self._readiness_handler)
        if metrics_enabled:
            self.app.router.add_get('/metrics', self._metrics_handler)
        self.app.router.add_get('/api/actions', self._list_actions_handler)
        self.app.router.add_get('/api/actions/{action_id}', self._get_action_handler)
        self.app.router.add_post('/api/actions/{action_id}/execute', self._execute_handler)

        logger.info("Initialized ActionServer", host=host, port=port)

    @property
    def executor(self) -> Optional[ActionExecutor]:
        return self.app.get(EXECUTOR_KEY)

    async def start(self) -> None:
        """Start the HTTP server."""
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()

        self.site = web.TCPSite(self.runner, self.host, self.port)
        await self.site.start()

        logger.info("Action server started", host=self.host, port=self.port)

    async def stop(self) -> None:
        """Stop the HTTP server."""
        if self.site:
            await self.site.stop()
            self.site = None

        if self.runner:
            await self.runner.cleanup()
            self.runner = None

        logger.info("Action server stopped")

    @staticmethod
    def _error(status: int, name: str, message: str, **details: Any) -> web.Response:
        body: Dict[str, Any] = {"error": {"name": name, "message": message}}
        if details:
            body["error"].update(details)
        return web.json_response(body, status=status)

    async def _health_handler(self, request: web.Request) -> web.Response:
        """Handle health check requests."""
        health_data = {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime_seconds": (datetime.now(timezone.utc) - self._startup_time).total_seconds(),
            "version": __version__
        }

        return web.json_response(health_data)

    async def _readiness_handler(self, request: web.Request) -> web.Response:
        """Handle readiness check requests."""
        ready = self.executor is not None
        checks = {"executor": "available" if ready else "not_available"}

        response_data = {
            "status": "ready" if ready else "not_ready",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "checks": checks
        }

        return web.json_response(response_data, status=200 if ready else 503)

    async def _metrics_handler(self, request: web.Request) -> web.Response:
        """Handle Prometheus metrics exposition."""
        return web.Response(
            body=generate_latest(),
            headers={"Content-Type": CONTENT_TYPE_LATEST},
        )

    def _require_executor(self) -> ActionExecutor:
        executor = self.executor
        if executor is None:
            raise web.HTTPServiceUnavailable(reason="Executor not available")
        return executor

    async def _list_actions_handler(self, request: web.Request) -> web.Response:
        """List registered actions."""
        executor = self._require_executor()
        actions = await executor.list_actions()
        return web.json_response(actions)

    async def _get_action_handler(self, request: web.Request) -> web.Response:
        """Describe a single action."""
        executor = self._require_executor()
        action_id = request.match_info["action_id"]

        await executor.ensure_actions_loaded()
        try:
            action = executor.get_action(action_id)
        except ActionNotFound as e:
            return self._error(404, "NotFoundError", str(e))

        return web.json_response(action.describe())

    async def _execute_handler(self, request: web.Request) -> web.Response:
        """Execute an action and return its output."""
        executor = self._require_executor()
        action_id = request.match_info["action_id"]

        try:
            body = await request.json()
        except ValueError:
            return self._error(400, "InputError", "Request body must be valid JSON")

        if not isinstance(body, dict):
            return self._error(400, "InputError", "Request body must be a JSON object")

        action_input = body.get("input", {})
        instance_id = body.get("instanceId")
        if not isinstance(action_input, dict):
            return self._error(400, "InputError", "'input' must be a JSON object")
        if instance_id is not None and not isinstance(instance_id, str):
            return self._error(400, "InputError", "'instanceId' must be a string")

        execution_request = ExecutionRequest(
            action_id=action_id, input=action_input, instance_id=instance_id
        )

        try:
            output = await asyncio.wait_for(
                executor.execute_action(execution_request),
                timeout=self.execution_timeout,
            )
        except ActionNotFound as e:
            return self._error(404, "NotFoundError", str(e))
        except ActionInputInvalid as e:
            return self._error(400, "InputError", str(e), errors=e.errors)
        except InvalidInstanceId as e:
            return self._error(400, "InputError", str(e))
        except WorkingDirectoryUnavailable as e:
            return self._error(500, type(e).__name__, str(e))
        except asyncio.TimeoutError:
            logger.error(
                "Action execution timed out",
                action=action_id,
                timeout=self.execution_timeout,
            )
            return self._error(
                504, "TimeoutError", f"Action '{action_id}' timed out after {self.execution_timeout}s"
            )
        except Exception as e:
            logger.error(
                "Action execution failed",
                action=action_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return self._error(500, type(e).__name__, str(e))

        return web.json_response({"output": output})
