"""
Struct Deduplicator - Names nested object shapes once per run.

Structurally identical nested objects share one name; different shapes
that want the same name get a numeric suffix (Name, Name2, Name3, ...).
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from modelgen.schema.models import FieldDescriptor
from modelgen.schema.naming import to_title
from modelgen.schema.types import AttrKind

logger = logging.getLogger(__name__)


@dataclass
class NameRegistry:
    """
    Accumulates fingerprint <-> name assignments across resources

    One registry is shared by every resource of a generation run so that
    the same shape gets the same name everywhere.
    """

    by_fingerprint: Dict[str, str] = field(default_factory=dict)
    by_name: Dict[str, str] = field(default_factory=dict)

    def register(self, fingerprint_value: str, candidate: str) -> str:
        """Return the name for a shape, registering it on first sight"""
        name = self.by_fingerprint.get(fingerprint_value)
        if name is not None:
            return name

        name = resolve_unique_name(candidate, fingerprint_value, self.by_name)
        if name != candidate:
            logger.debug(f"Struct name {candidate} taken by another shape, using {name}")
        self.by_fingerprint[fingerprint_value] = name
        self.by_name[name] = fingerprint_value
        return name

    def __len__(self) -> int:
        return len(self.by_name)


def fingerprint(struct: FieldDescriptor) -> str:
    """
    Structural hash of a nested object

    Sorted `name:resolved-type:nested-ref` of its direct children, so two
    objects match only when every child matches, nested refs included.
    """
    parts = sorted(
        f"{child.name}:{child.resolved_type()}:{_child_ref(child)}"
        for child in struct.properties
    )
    return "|".join(parts)


def resolve_unique_name(candidate: str, fingerprint_value: str, by_name: Dict[str, str]) -> str:
    """First of candidate, candidate2, candidate3, ... that is free or already holds this shape"""
    name = candidate
    counter = 2
    while name in by_name and by_name[name] != fingerprint_value:
        name = f"{candidate}{counter}"
        counter += 1
    return name


def assign_type_refs(fields: List[FieldDescriptor], registry: NameRegistry, prefix: str = "") -> None:
    """
    Assign attr_type_ref to every nested object, children first

    Args:
        fields: Name-sorted fields (assignment order decides suffixes)
        registry: Run-wide name registry
        prefix: TitleCased path of the enclosing fields
    """
    for f in fields:
        nested_prefix = prefix + to_title(f.name)

        if f.kind == AttrKind.OBJECT:
            assign_type_refs(f.properties, registry, nested_prefix)
            f.attr_type_ref = registry.register(fingerprint(f), f.ref_name or nested_prefix)

        elif f.has_object_items():
            item = f.item_schema
            assign_type_refs(item.properties, registry, nested_prefix)
            item.attr_type_ref = registry.register(fingerprint(item), item.ref_name or nested_prefix)


def collect_unique_structs(*field_lists: List[FieldDescriptor]) -> List[FieldDescriptor]:
    """
    Collect one descriptor per distinct attr_type_ref

    Returns:
        Nested object descriptors sorted by attr_type_ref
    """
    seen: Dict[str, FieldDescriptor] = {}

    def traverse(fields: List[FieldDescriptor]) -> None:
        for f in fields:
            if f.kind == AttrKind.OBJECT:
                struct = f
            elif f.has_object_items():
                struct = f.item_schema
            else:
                continue

            key = struct.attr_type_ref or struct.ref_name
            if not key:
                traverse(struct.properties)
                continue
            if key in seen:
                continue

            struct.attr_type_ref = key
            seen[key] = struct
            traverse(struct.properties)

    for fields in field_lists:
        traverse(fields)

    return [seen[key] for key in sorted(seen)]


def _child_ref(child: FieldDescriptor) -> str:
    if child.attr_type_ref:
        return child.attr_type_ref
    if child.item_schema is not None:
        return child.item_schema.attr_type_ref
    return ""
