"""Cross-object search tool built on the SOSL query builder."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from sfsearch.utils.config import DEFAULT_RETURN_FIELDS, config
from sfsearch.utils.logging.framework import log_operation
from sfsearch.utils.platform.salesforce import SOSLQueryBuilder

from .base import BaseSalesforceTool


class SalesforceSOSL(BaseSalesforceTool):
    """Cross-object search using Salesforce Object Search Language (SOSL)."""
    name: str = "salesforce_sosl"
    description: str = "Search across MULTIPLE object types simultaneously - use ONLY when you don't know which object contains the data"

    class Input(BaseModel):
        search_term: str = Field(description="Text to search for across objects")
        object_types: Optional[List[str]] = Field(
            None,
            description="Objects to search in (defaults to Account, Contact, Lead, Opportunity, Case)"
        )
        scope: Optional[str] = Field(
            None,
            description="ALL_FIELDS, NAME_FIELDS, EMAIL_FIELDS, PHONE_FIELDS or SIDEBAR_FIELDS"
        )
        fields_per_object: Optional[Dict[str, List[str]]] = Field(
            None,
            description="Specific fields to return per object type"
        )
        conditions_per_object: Optional[Dict[str, str]] = Field(
            None,
            description="WHERE clause per object type, e.g. {'Account': \"Industry = 'Energy'\"}"
        )
        limit_per_object: Optional[int] = Field(None, description="Max results per object type")

    args_schema: type = Input  # pyright: ignore[reportIncompatibleVariableOverride]

    def _execute(self, **kwargs) -> Any:
        search_term = kwargs['search_term']
        object_types = kwargs.get('object_types') or config.default_object_types
        scope = kwargs.get('scope') or config.default_search_scope
        fields_per_object = kwargs.get('fields_per_object') or {}
        conditions_per_object = kwargs.get('conditions_per_object') or {}
        limit_per_object = kwargs.get('limit_per_object')
        if limit_per_object is None:
            limit_per_object = config.default_limit_per_object

        builder = SOSLQueryBuilder(self.sf)
        builder.set_search_scope(scope)
        builder.set_search_objects(object_types)

        for object_type in builder.get_search_objects():
            builder.set_fields_for_object(object_type, DEFAULT_RETURN_FIELDS.get(object_type, []))
            builder.set_limit_for_object(object_type, limit_per_object)

        # Unregistered names raise UnknownObjectError
        for object_type, fields in fields_per_object.items():
            builder.set_fields_for_object(object_type, fields)
        for object_type, condition in conditions_per_object.items():
            builder.set_condition_for_object(object_type, condition)

        sosl = builder.build(search_term)
        with log_operation("salesforce", "sosl_search", tool_name=self.name, search_term=search_term):
            if not builder.find(search_term):
                raise builder.get_failure()

        return {
            "search_term": search_term,
            "query": sosl,
            "scope": builder.get_search_scope().value,
            "total_results": builder.total_results,
            "results_by_type": {
                object_type: list(records)
                for object_type, records in builder.get_results().items()
            }
        }
