"""Models describing extracted fields and reconciled resources."""
import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .types import AttrKind, SemanticType, TypeMeta, base_kind, resolve


@dataclass
class FieldDescriptor:
    """Canonical description of one schema field plus generation metadata"""

    name: str
    type: SemanticType = SemanticType.STRING
    kind: Optional[AttrKind] = None  # defaults to the base kind of `type`
    format: Optional[str] = None
    description: str = ""

    # Role flags
    required: bool = False
    read_only: bool = False
    server_computed: bool = False
    force_new: bool = False
    use_state_for_unknown: bool = False
    is_path_param: bool = False
    is_data_source: bool = False
    schema_skip: bool = False

    # Complex types
    enum: List[str] = field(default_factory=list)
    item_type: Optional[SemanticType] = None  # array items / map values
    item_schema: Optional["FieldDescriptor"] = None  # arrays of objects
    properties: List["FieldDescriptor"] = field(default_factory=list)  # objects

    # Validation
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    pattern: Optional[str] = None
    has_default: bool = False

    # Naming
    ref_name: str = ""
    item_ref_name: str = ""
    attr_type_ref: str = ""

    def __post_init__(self):
        self.type = SemanticType.coerce(self.type)
        if self.item_type is not None:
            self.item_type = SemanticType.coerce(self.item_type)
        if self.kind is None:
            self.kind = base_kind(self.type)

    @property
    def type_meta(self) -> TypeMeta:
        return resolve(self.type, self.item_type, self.format, self.kind)

    def is_object(self) -> bool:
        """Check if field is a single nested object"""
        return self.kind == AttrKind.OBJECT

    def has_object_items(self) -> bool:
        """Check if field is a list/set of nested objects"""
        return self.kind in (AttrKind.LIST, AttrKind.SET) and self.item_schema is not None

    def resolved_type(self) -> str:
        """Kind plus element type, e.g. "list[int64]" """
        if self.kind in (AttrKind.LIST, AttrKind.SET, AttrKind.MAP):
            return f"{self.kind.value}[{self.type_meta.element_kind.value}]"
        return self.kind.value

    def clone(self) -> "FieldDescriptor":
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation"""
        return {
            "name": self.name,
            "type": self.type.value,
            "kind": self.kind.value,
            "format": self.format,
            "description": self.description,
            "required": self.required,
            "read_only": self.read_only,
            "server_computed": self.server_computed,
            "force_new": self.force_new,
            "use_state_for_unknown": self.use_state_for_unknown,
            "is_path_param": self.is_path_param,
            "is_data_source": self.is_data_source,
            "schema_skip": self.schema_skip,
            "enum": list(self.enum),
            "item_type": self.item_type.value if self.item_type is not None else None,
            "item_schema": self.item_schema.to_dict() if self.item_schema else None,
            "properties": [p.to_dict() for p in self.properties],
            "minimum": self.minimum,
            "maximum": self.maximum,
            "pattern": self.pattern,
            "has_default": self.has_default,
            "ref_name": self.ref_name,
            "item_ref_name": self.item_ref_name,
            "attr_type_ref": self.attr_type_ref,
            "type_meta": self.type_meta.to_dict(),
        }


def sort_by_name(fields: List[FieldDescriptor]) -> List[FieldDescriptor]:
    return sorted(fields, key=lambda f: f.name)


@dataclass
class FilterParam:
    """Query parameter usable to filter a list operation"""

    name: str
    type: str  # String, Int64, Bool, Float64
    description: str = ""
    enum: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "description": self.description,
            "enum": list(self.enum),
        }


@dataclass
class UpdateAction:
    """Update action with its resolved API path"""

    name: str
    operation: str
    param: str = ""
    compare_key: str = ""
    path: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "operation": self.operation,
            "param": self.param,
            "compare_key": self.compare_key,
            "path": self.path,
        }


@dataclass
class ResourceModel:
    """Reconciled model for one resource or data source"""

    name: str
    service: str
    clean_name: str
    plugin: str = "standard"
    operations: Dict[str, str] = field(default_factory=dict)
    api_paths: Dict[str, str] = field(default_factory=dict)
    create_fields: List[FieldDescriptor] = field(default_factory=list)
    update_fields: List[FieldDescriptor] = field(default_factory=list)
    response_fields: List[FieldDescriptor] = field(default_factory=list)
    model_fields: List[FieldDescriptor] = field(default_factory=list)
    update_actions: List[UpdateAction] = field(default_factory=list)
    standalone_actions: List[UpdateAction] = field(default_factory=list)
    filter_params: List[FilterParam] = field(default_factory=list)
    termination_attributes: List[Dict[str, str]] = field(default_factory=list)
    nested_structs: List[FieldDescriptor] = field(default_factory=list)
    is_order: bool = False
    is_link: bool = False
    is_data_source_only: bool = False
    skip_polling: bool = False

    def get_field(self, name: str) -> Optional[FieldDescriptor]:
        """Return a model field by name"""
        for f in self.model_fields:
            if f.name == name:
                return f
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation"""
        return {
            "name": self.name,
            "service": self.service,
            "clean_name": self.clean_name,
            "plugin": self.plugin,
            "operations": dict(self.operations),
            "api_paths": dict(self.api_paths),
            "is_order": self.is_order,
            "is_link": self.is_link,
            "is_data_source_only": self.is_data_source_only,
            "skip_polling": self.skip_polling,
            "create_fields": [f.to_dict() for f in self.create_fields],
            "update_fields": [f.to_dict() for f in self.update_fields],
            "response_fields": [f.to_dict() for f in self.response_fields],
            "model_fields": [f.to_dict() for f in self.model_fields],
            "update_actions": [a.to_dict() for a in self.update_actions],
            "standalone_actions": [a.to_dict() for a in self.standalone_actions],
            "filter_params": [p.to_dict() for p in self.filter_params],
            "termination_attributes": list(self.termination_attributes),
            "nested_structs": [s.attr_type_ref for s in self.nested_structs],
        }
