"""Built-in action for fetching entities from the catalog."""

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from ...utils.catalog import CatalogClient
from ..base import ActionContext, TemplateAction, create_template_action


class CatalogFetchInput(BaseModel):
    """Input of ``catalog:fetch``."""

    entity_ref: Optional[str] = Field(default=None, alias="entityRef")
    entity_refs: Optional[List[str]] = Field(default=None, alias="entityRefs")
    optional: bool = Field(
        default=False,
        description="Allow the entity or entities to not exist in the catalog",
    )
    default_kind: Optional[str] = Field(default=None, alias="defaultKind")
    default_namespace: str = Field(default="default", alias="defaultNamespace")

    @model_validator(mode="after")
    def _one_ref_form(self) -> "CatalogFetchInput":
        if (self.entity_ref is None) == (self.entity_refs is None):
            raise ValueError("Exactly one of entityRef or entityRefs must be provided")
        return self


def create_fetch_catalog_entity_action(catalog_client: CatalogClient) -> TemplateAction:
    """Create the ``catalog:fetch`` action.

    Args:
        catalog_client: Client used to look up entities
    """

    async def handler(ctx: ActionContext) -> None:
        params = CatalogFetchInput.model_validate(ctx.input)

        if params.entity_ref is not None:
            ctx.logger.info("Fetching entity from catalog", entity_ref=params.entity_ref)
            entity = await catalog_client.get_entity_by_ref(
                params.entity_ref, params.default_kind, params.default_namespace
            )
            if entity is None and not params.optional:
                raise LookupError(f"Entity {params.entity_ref} not found")
            ctx.output("entity", entity)
            return

        entities = []
        for ref in params.entity_refs or []:
            entity = await catalog_client.get_entity_by_ref(
                ref, params.default_kind, params.default_namespace
            )
            if entity is None and not params.optional:
                raise LookupError(f"Entity {ref} not found")
            entities.append(entity)

        ctx.logger.info("Fetched entities from catalog", count=len(entities))
        ctx.output("entities", entities)

    return create_template_action(
        id="catalog:fetch",
        handler=handler,
        description="Returns entity or entities from the catalog by entity reference(s)",
        input_schema=CatalogFetchInput,
    )
