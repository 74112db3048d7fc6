"""
Field Merging - Combines input and output field lists into one model.

Both merges key fields by name and return name-ordered lists, nested
properties and list items included. Inputs are never mutated.
"""

import logging
from typing import Dict, List

from modelgen.schema.models import FieldDescriptor, sort_by_name
from modelgen.schema.types import AttrKind, SemanticType

logger = logging.getLogger(__name__)

# Fields every order must carry: (name, description)
ORDER_REQUIRED_FIELDS = (
    ("project", "Project URL"),
    ("offering", "Offering URL"),
)


def merge_fields(primary: List[FieldDescriptor], secondary: List[FieldDescriptor]) -> List[FieldDescriptor]:
    """
    Merge two field lists, primary taking precedence

    Rules for a field present in both lists:
    - Type, Required and description come from primary
    - ReadOnly if either side is read-only, unless primary marks a path parameter
    - ServerComputed if either side is server-computed
    - Nested properties present on both sides are merged recursively

    Args:
        primary: Usually the create-input fields
        secondary: Usually the response fields

    Returns:
        Merged fields sorted by name at every level
    """
    merged: Dict[str, FieldDescriptor] = {f.name: f.clone() for f in primary}

    for field in secondary:
        existing = merged.get(field.name)
        if existing is None:
            merged[field.name] = field.clone()
            continue

        if existing.is_path_param:
            existing.read_only = False
        elif field.read_only:
            existing.read_only = True

        if field.server_computed:
            existing.server_computed = True

        if existing.properties and field.properties:
            existing.properties = merge_fields(existing.properties, field.properties)

        if _item_properties(existing) and _item_properties(field):
            existing.item_schema.properties = merge_fields(
                existing.item_schema.properties, field.item_schema.properties
            )

    return sort_by_name(list(merged.values()))


def merge_order_fields(input_fields: List[FieldDescriptor], output_fields: List[FieldDescriptor]) -> List[FieldDescriptor]:
    """
    Merge order input (offering attributes) with the resource output

    Output-only fields become read-only. A field present in both becomes
    server-computed unless the input requires it. `project` and `offering`
    are always present, required and writable.

    Usage:
    ```python
    fields = merge_order_fields(create_fields, response_fields)
    ```
    """
    merged = _merge_order_recursive(input_fields, output_fields)
    by_name = {f.name: f for f in merged}

    for name, description in ORDER_REQUIRED_FIELDS:
        field = by_name.get(name)
        if field is None:
            field = FieldDescriptor(name=name, type=SemanticType.STRING, description=description)
            merged.append(field)
            by_name[name] = field
        field.required = True
        field.read_only = False
        field.server_computed = False

    return sort_by_name(merged)


def _merge_order_recursive(input_fields: List[FieldDescriptor], output_fields: List[FieldDescriptor]) -> List[FieldDescriptor]:
    merged: Dict[str, FieldDescriptor] = {f.name: f.clone() for f in input_fields}

    for field in output_fields:
        existing = merged.get(field.name)
        if existing is None:
            output_only = field.clone()
            output_only.read_only = True
            output_only.required = False
            merged[field.name] = output_only
            continue

        if not existing.required:
            existing.server_computed = True

        if not existing.description and field.description:
            existing.description = field.description

        if existing.has_object_items() and field.has_object_items():
            existing.item_schema.properties = _merge_order_recursive(
                existing.item_schema.properties, field.item_schema.properties
            )
        elif existing.kind == AttrKind.OBJECT and field.kind == AttrKind.OBJECT:
            existing.properties = _merge_order_recursive(existing.properties, field.properties)

    return sort_by_name(list(merged.values()))


def _item_properties(field: FieldDescriptor) -> List[FieldDescriptor]:
    return field.item_schema.properties if field.item_schema is not None else []
