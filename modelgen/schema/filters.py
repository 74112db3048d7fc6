"""Filter parameters of list operations."""
import logging
from typing import List, Optional

from modelgen.introspection.schema_provider import SchemaProvider
from .models import FilterParam
from .naming import default_description, sanitize
from .types import AttrKind, SemanticType, base_kind, validator_type
from .walker import SchemaWalker

logger = logging.getLogger(__name__)

# Pagination, ordering and field selection are not filters
IGNORED_QUERY_PARAMS = frozenset({"page", "page_size", "o", "field"})


def extract_filter_params(
    provider: SchemaProvider,
    operation_id: Optional[str],
    resource_name: str = "",
) -> List[FilterParam]:
    """
    Collect scalar query parameters of a list operation

    Args:
        provider: Schema provider
        operation_id: List operation id (missing operations yield no filters)
        resource_name: Used for default descriptions

    Returns:
        Filter parameters sorted by name
    """
    if not operation_id or not provider.has_operation(operation_id):
        return []

    walker = SchemaWalker(provider)
    params = []

    for param in provider.get_parameters(operation_id):
        if param.get("in") != "query":
            continue
        name = param.get("name", "")
        if not name or name in IGNORED_QUERY_PARAMS:
            continue

        schema, _ = provider.resolve(param.get("schema"))
        if schema is None:
            continue

        semantic_type = walker.schema_type(schema)
        if semantic_type in (SemanticType.ARRAY, SemanticType.OBJECT):
            logger.debug(f"Skipping non-scalar filter {name} of {operation_id}")
            continue

        kind: AttrKind = base_kind(semantic_type)
        params.append(FilterParam(
            name=name,
            type=validator_type(kind),
            description=sanitize(param.get("description") or ""),
            enum=[str(v) for v in schema.get("enum") or []],
        ))

    params.sort(key=lambda p: p.name)

    if resource_name:
        for param in params:
            param.description = default_description(param.name, resource_name, param.description)

    return params
