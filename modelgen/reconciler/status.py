"""
Field status derivation for reconciled models.

These passes run after merging and update the model's own descriptors in
place; the model fields are already clones owned by the pipeline.
"""

import logging
from typing import Dict, Iterable, List, Optional, Set

from modelgen.schema.models import FieldDescriptor
from modelgen.schema.naming import default_description
from modelgen.schema.policy import PolicyTable

logger = logging.getLogger(__name__)


def derive_force_new(fields: List[FieldDescriptor], updatable: Iterable[str]) -> None:
    """
    Mark writable top-level fields that cannot be updated in place

    Args:
        fields: Model fields
        updatable: Names accepted by the update operation or an update action
    """
    updatable = set(updatable)
    for field in fields:
        if not field.read_only and field.name not in updatable:
            field.force_new = True


def derive_server_computed(fields: List[FieldDescriptor], create_fields: List[FieldDescriptor]) -> None:
    """
    Decide which fields the server fills in

    A field is server-computed when it is read-only or the create input does
    not accept it. Server-computed fields are never required and keep their
    prior state when unknown. Nested objects and lists of objects are
    processed against the matching nested create input.
    """
    create_by_name: Dict[str, FieldDescriptor] = {f.name: f for f in create_fields}

    for field in fields:
        create_field = create_by_name.get(field.name)

        if field.read_only or create_field is None:
            field.server_computed = True

        if field.server_computed:
            field.required = False
            field.use_state_for_unknown = True
        elif field.read_only:
            field.use_state_for_unknown = True

        if field.properties:
            derive_server_computed(field.properties, create_field.properties if create_field else [])
        elif field.has_object_items():
            nested_create = []
            if create_field is not None and create_field.item_schema is not None:
                nested_create = create_field.item_schema.properties
            derive_server_computed(field.item_schema.properties, nested_create)


def apply_schema_skip(
    fields: List[FieldDescriptor],
    policy: PolicyTable,
    input_names: Optional[Set[str]] = None,
    path_prefix: str = "",
) -> None:
    """
    Mark excluded fields that structural needs kept in the model

    Such fields stay in the model for the API client but are left out of
    the emitted schema unless they are part of the create input.
    """
    input_names = input_names or set()

    for field in fields:
        full_path = f"{path_prefix}.{field.name}" if path_prefix else field.name
        if policy.is_excluded(field.name, full_path) and field.name not in input_names:
            logger.debug(f"Schema skip for {full_path}")
            field.schema_skip = True

        if field.properties:
            apply_schema_skip(field.properties, policy, input_names, full_path)
        if field.item_schema is not None and field.item_schema.properties:
            apply_schema_skip(field.item_schema.properties, policy, input_names, full_path)


def mark_data_source(fields: List[FieldDescriptor]) -> List[FieldDescriptor]:
    """Return clones of `fields` flagged as read-only data-source attributes"""
    marked = []
    for field in fields:
        clone = field.clone()
        _mark_data_source_in_place(clone)
        marked.append(clone)
    return marked


def _mark_data_source_in_place(field: FieldDescriptor) -> None:
    field.is_data_source = True
    field.read_only = True
    field.required = False
    for nested in field.properties:
        _mark_data_source_in_place(nested)
    if field.item_schema is not None:
        _mark_data_source_in_place(field.item_schema)


def fill_descriptions(fields: List[FieldDescriptor], resource_name: str) -> None:
    """Give every field without a meaningful description a default one"""
    for field in fields:
        field.description = default_description(field.name, resource_name, field.description)
        if field.properties:
            fill_descriptions(field.properties, resource_name)
        if field.item_schema is not None and field.item_schema.properties:
            fill_descriptions(field.item_schema.properties, resource_name)
