"""Built-in actions for debugging templates."""

import asyncio
import os
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from ..base import ActionContext, TemplateAction, create_template_action

MAX_WAIT_SECONDS = 600


class DebugLogInput(BaseModel):
    """Input of ``debug:log``."""

    message: Optional[str] = Field(default=None, description="Message to output")
    list_workspace: Union[bool, str] = Field(
        default=False,
        alias="listWorkspace",
        description="List all files in the workspace; 'with-contents' also prints file contents",
    )


class DebugWaitInput(BaseModel):
    """Input of ``debug:wait``."""

    minutes: float = Field(default=0, ge=0)
    seconds: float = Field(default=0, ge=0)
    milliseconds: float = Field(default=0, ge=0)


def _walk_workspace(workspace_path: str) -> List[str]:
    files = []
    for root, _dirs, names in os.walk(workspace_path):
        for name in names:
            files.append(os.path.relpath(os.path.join(root, name), workspace_path))
    return sorted(files)


def _read_text(path: str) -> str:
    with open(path, encoding="utf-8", errors="replace") as f:
        return f.read()


def create_debug_log_action() -> TemplateAction:
    """Create the ``debug:log`` action."""

    async def handler(ctx: ActionContext) -> None:
        params = DebugLogInput.model_validate(ctx.input)
        ctx.logger.info("Debug log action", input=ctx.input)

        if params.message:
            ctx.log_stream.write(params.message + "\n")

        if params.list_workspace:
            files = await asyncio.to_thread(_walk_workspace, ctx.workspace_path)
            if params.list_workspace == "with-contents":
                for name in files:
                    content = await asyncio.to_thread(
                        _read_text, os.path.join(ctx.workspace_path, name)
                    )
                    ctx.log_stream.write(f"{name}:\n\n{content}\n")
            else:
                ctx.log_stream.write("Workspace:\n" + "\n".join(f"  - {f}" for f in files) + "\n")

    return create_template_action(
        id="debug:log",
        handler=handler,
        description="Writes a message into the log and/or lists all files in the workspace.",
        input_schema=DebugLogInput,
    )


def create_wait_action(max_wait_seconds: float = MAX_WAIT_SECONDS) -> TemplateAction:
    """Create the ``debug:wait`` action."""

    async def handler(ctx: ActionContext) -> None:
        params = DebugWaitInput.model_validate(ctx.input)
        delay = params.minutes * 60 + params.seconds + params.milliseconds / 1000

        if delay > max_wait_seconds:
            raise ValueError(
                f"Waiting duration is longer than the maximum threshold of {max_wait_seconds} seconds"
            )

        ctx.logger.info("Waiting", seconds=delay)
        await asyncio.sleep(delay)

    return create_template_action(
        id="debug:wait",
        handler=handler,
        description="Waits for a certain period of time.",
        input_schema=DebugWaitInput,
    )
