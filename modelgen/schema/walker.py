"""
Schema Walker - Extracts field descriptors from OpenAPI schema nodes.

Supports:
- Primitive types, string enums, numeric bounds and patterns
- Nested objects and arrays of objects (depth-limited)
- Typed maps (additionalProperties)
- allOf flattening, oneOf/anyOf type fallback
- $ref resolution through the SchemaProvider
"""

import logging
from typing import Any, Dict, List, Optional, Set, Tuple

from modelgen.introspection.schema_provider import SchemaProvider
from .models import FieldDescriptor
from .naming import sanitize
from .overrides import coerce_field_type, coerce_map_value_type
from .policy import PolicyTable
from .types import AttrKind, SemanticType

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 3
DEFAULT_IDENTIFIER_FIELD = "uuid"

_SCALAR_TYPES = (SemanticType.INTEGER, SemanticType.BOOLEAN, SemanticType.NUMBER)
_COMPOSITIONS = ("oneOf", "anyOf", "allOf")


class SchemaWalker:
    """
    Turns schema nodes into name-ordered lists of FieldDescriptor

    Usage:
    ```python
    walker = SchemaWalker(provider, PolicyTable.build(excluded=["url"]))
    fields = walker.extract(provider.get_schema("Project"), skip_root_identifier=True)
    ```
    """

    def __init__(
        self,
        provider: SchemaProvider,
        policy: Optional[PolicyTable] = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        identifier_field: str = DEFAULT_IDENTIFIER_FIELD,
    ):
        """
        Initialize SchemaWalker

        Args:
            provider: Source of schema nodes and $ref resolution
            policy: Exclusion / set / override rules
            max_depth: Deepest nesting level that is still extracted
            identifier_field: Root field that can be suppressed
        """
        self.provider = provider
        self.policy = policy or PolicyTable()
        self.max_depth = max_depth
        self.identifier_field = identifier_field.lower()

    def extract(self, node: Optional[Dict[str, Any]], skip_root_identifier: bool = False) -> List[FieldDescriptor]:
        """Extract the fields of a root schema node"""
        return self.walk(node, skip_root_identifier=skip_root_identifier)

    def walk(
        self,
        node: Optional[Dict[str, Any]],
        skip_root_identifier: bool = False,
        depth: int = 0,
        path_prefix: str = "",
    ) -> List[FieldDescriptor]:
        """
        Extract fields of one schema node

        Args:
            node: Schema node (may be a $ref)
            skip_root_identifier: Drop the identifier field at depth 0
            depth: Current nesting level
            path_prefix: Dotted path of the parent field

        Returns:
            Fields sorted by name; empty for a missing node or depth > max_depth
        """
        if node is None or depth > self.max_depth:
            return []

        schema, _ = self.provider.resolve(node)
        if schema is None:
            return []

        properties, required = self._collect_properties(schema)
        fields = []

        for name in sorted(properties):
            if depth == 0 and skip_root_identifier and name.lower() == self.identifier_field:
                continue

            full_path = f"{path_prefix}.{name}" if path_prefix else name
            if self.policy.is_excluded(name, full_path):
                logger.debug(f"Excluded field {full_path}")
                continue

            field = self._build_field(name, properties[name], name in required, full_path, depth)
            if field is not None:
                fields.append(field)

        return fields

    def _collect_properties(self, schema: Dict[str, Any]) -> Tuple[Dict[str, Any], Set[str]]:
        """Own properties plus allOf siblings; the first declaration of a name wins"""
        properties = dict(schema.get("properties") or {})
        required = set(schema.get("required") or [])

        for sub_node in schema.get("allOf") or []:
            sub_schema, _ = self.provider.resolve(sub_node)
            if sub_schema is None:
                continue
            for name, prop in (sub_schema.get("properties") or {}).items():
                properties.setdefault(name, prop)
            required.update(sub_schema.get("required") or [])

        return properties, required

    def _build_field(
        self,
        name: str,
        node: Any,
        required: bool,
        full_path: str,
        depth: int,
    ) -> Optional[FieldDescriptor]:
        """Build the descriptor for one property, or None if it cannot be represented"""
        prop, ref_name = self.provider.resolve(node)
        if prop is None:
            return None

        declared_type = self.schema_type(prop)
        semantic_type = coerce_field_type(name, declared_type)
        pattern = prop.get("pattern")
        if semantic_type != declared_type:
            logger.debug(f"Coerced {full_path} from {declared_type.value} to {semantic_type.value}")
            pattern = None

        field = FieldDescriptor(
            name=name,
            type=semantic_type,
            format=prop.get("format"),
            description=sanitize(prop.get("description") or ""),
            required=required,
            read_only=bool(prop.get("readOnly", False)),
            ref_name=ref_name,
            minimum=_as_number(prop.get("minimum")),
            maximum=_as_number(prop.get("maximum")),
            pattern=pattern,
            has_default="default" in prop,
        )
        self._apply_override(field, full_path)

        if semantic_type == SemanticType.STRING:
            field.enum = self._string_enum(prop)
            return field

        if semantic_type in _SCALAR_TYPES:
            return field

        if semantic_type == SemanticType.ARRAY:
            return self._build_array(field, prop, full_path, depth)

        if semantic_type == SemanticType.OBJECT:
            return self._build_object(field, node, prop, full_path, depth)

        logger.debug(f"Skipping untyped field {full_path}")
        return None

    def _build_array(
        self,
        field: FieldDescriptor,
        prop: Dict[str, Any],
        full_path: str,
        depth: int,
    ) -> Optional[FieldDescriptor]:
        items_node = prop.get("items")
        items, item_ref_name = self.provider.resolve(items_node)
        if items is None:
            return None

        field.item_type = self.schema_type(items)
        field.item_ref_name = item_ref_name
        field.kind = AttrKind.SET if self.policy.is_set_field(field.name) else AttrKind.LIST

        if field.item_type != SemanticType.OBJECT:
            return field

        # One representative element shape for the whole array
        nested = self.walk(items_node, depth=depth + 1, path_prefix=full_path)
        if not nested:
            return None

        field.item_schema = FieldDescriptor(
            name="",
            type=SemanticType.OBJECT,
            properties=nested,
            ref_name=item_ref_name,
        )
        return field

    def _build_object(
        self,
        field: FieldDescriptor,
        node: Any,
        prop: Dict[str, Any],
        full_path: str,
        depth: int,
    ) -> FieldDescriptor:
        nested = self.walk(node, depth=depth + 1, path_prefix=full_path)
        if nested:
            field.properties = nested
            return field

        # No fixed property set: represent as a map
        field.kind = AttrKind.MAP
        field.item_type = SemanticType.STRING

        additional = prop.get("additionalProperties")
        if isinstance(additional, dict) and additional:
            value_schema, _ = self.provider.resolve(additional)
            value_type = self.schema_type(value_schema) if value_schema is not None else SemanticType.UNKNOWN
            if value_type not in (SemanticType.UNKNOWN, SemanticType.OBJECT, SemanticType.ARRAY):
                field.item_type = coerce_map_value_type(field.name, value_type)

        return field

    def _apply_override(self, field: FieldDescriptor, full_path: str) -> None:
        override = self.policy.override_for(full_path)
        if override is None:
            return

        if override.computed:
            field.server_computed = True
            field.use_state_for_unknown = True
        if override.optional:
            field.required = False
        if override.required:
            field.required = True
        if override.force_new:
            field.force_new = True

    def _string_enum(self, prop: Dict[str, Any]) -> List[str]:
        """String enum literals of a node, or of its first composed alternative"""
        values = prop.get("enum")
        if values is None:
            for key in _COMPOSITIONS:
                alternatives = prop.get(key) or []
                if alternatives:
                    alt, _ = self.provider.resolve(alternatives[0])
                    values = (alt or {}).get("enum")
                    break
        return [v for v in values or [] if isinstance(v, str)]

    def schema_type(self, schema: Optional[Dict[str, Any]], _hops: int = 0) -> SemanticType:
        """Declared type of a node, falling back to its first oneOf/anyOf/allOf alternative"""
        if schema is None or _hops > self.max_depth + 1:
            return SemanticType.UNKNOWN

        declared = schema.get("type")
        if isinstance(declared, list):
            declared = next((t for t in declared if t != "null"), None)
        if declared:
            return SemanticType.coerce(declared)

        for key in _COMPOSITIONS:
            alternatives = schema.get(key) or []
            if alternatives:
                alt, _ = self.provider.resolve(alternatives[0])
                return self.schema_type(alt, _hops + 1)

        if schema.get("properties"):
            return SemanticType.OBJECT

        return SemanticType.UNKNOWN


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)
