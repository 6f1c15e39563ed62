"""Built-in action for fetching remote files into the workspace."""

import asyncio
import os

from pydantic import BaseModel, Field, field_validator

from ...utils.paths import resolve_safe_child_path
from ...utils.url_reader import UrlReader
from ..base import ActionContext, TemplateAction, create_template_action


class FetchPlainFileInput(BaseModel):
    """Input of ``fetch:plain:file``."""

    url: str = Field(description="Absolute URL of the file to fetch")
    target_path: str = Field(
        alias="targetPath",
        description="Target path within the workspace to write the file to",
    )

    @field_validator("target_path")
    @classmethod
    def _names_a_file(cls, value: str) -> str:
        if os.path.normpath(value) == ".":
            raise ValueError("targetPath must name a file within the workspace, not the workspace itself")
        return value


def _write_file(path: str, content: bytes) -> None:
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(content)


def create_fetch_plain_file_action(reader: UrlReader) -> TemplateAction:
    """Create the ``fetch:plain:file`` action.

    Args:
        reader: URL reader used to download the file
    """

    async def handler(ctx: ActionContext) -> None:
        params = FetchPlainFileInput.model_validate(ctx.input)
        target = resolve_safe_child_path(ctx.workspace_path, params.target_path)

        ctx.logger.info("Fetching plain content", url=params.url, target_path=params.target_path)

        content = await reader.read_url(params.url)
        await asyncio.to_thread(_write_file, target, content)

        ctx.logger.info("Fetched plain content", target=target, size=len(content))

    return create_template_action(
        id="fetch:plain:file",
        handler=handler,
        description="Downloads single file and places it in the workspace.",
        input_schema=FetchPlainFileInput,
    )
