"""
Type Resolver - Maps OpenAPI semantic types to generation metadata

Pure functions only: the same (semantic type, item type, format, kind)
always resolves to the same TypeMeta.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Optional, Union


class SemanticType(str, Enum):
    """OpenAPI value types understood by the walker"""
    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    NUMBER = "number"
    ARRAY = "array"
    OBJECT = "object"
    UNKNOWN = ""

    @classmethod
    def coerce(cls, value: Union[str, "SemanticType", None]) -> "SemanticType":
        """Convert a raw schema type string, falling back to UNKNOWN"""
        if isinstance(value, cls):
            return value
        try:
            return cls(value or "")
        except ValueError:
            return cls.UNKNOWN


class AttrKind(str, Enum):
    """Attribute kinds handed to the emitter"""
    STRING = "string"
    INT64 = "int64"
    BOOL = "bool"
    FLOAT64 = "float64"
    LIST = "list"
    SET = "set"
    MAP = "map"
    OBJECT = "object"

    @property
    def is_collection(self) -> bool:
        return self in (AttrKind.LIST, AttrKind.SET, AttrKind.MAP)


DATE_TIME_FORMAT = "date-time"

_BASE_KINDS = {
    SemanticType.STRING: AttrKind.STRING,
    SemanticType.INTEGER: AttrKind.INT64,
    SemanticType.BOOLEAN: AttrKind.BOOL,
    SemanticType.NUMBER: AttrKind.FLOAT64,
    SemanticType.ARRAY: AttrKind.LIST,
    SemanticType.OBJECT: AttrKind.OBJECT,
}

# kind -> (schema attribute, value type, plan modifier, from-api converter, to-api method)
_SCALARS = {
    AttrKind.STRING: ("StringAttribute", "StringType", "String", "StringPointerValue", "ValueStringPointer"),
    AttrKind.INT64: ("Int64Attribute", "Int64Type", "Int64", "Int64PointerValue", "ValueInt64Pointer"),
    AttrKind.BOOL: ("BoolAttribute", "BoolType", "Bool", "BoolPointerValue", "ValueBoolPointer"),
    AttrKind.FLOAT64: ("Float64Attribute", "Float64Type", "Float64", "Float64PointerValue", "ValueFloat64Pointer"),
}

_VALIDATOR_TYPES = {
    AttrKind.INT64: "Int64",
    AttrKind.BOOL: "Bool",
    AttrKind.FLOAT64: "Float64",
}


@dataclass(frozen=True)
class TypeMeta:
    """Pre-resolved type information so the emitter never branches on types"""
    attr_kind: AttrKind
    schema_attribute: str
    validator_type: str
    element_kind: Optional[AttrKind] = None
    value_type: str = ""
    element_type: str = ""
    plan_modifier: str = ""
    from_api: Optional[str] = None
    to_api: Optional[str] = None
    is_nested: bool = False
    is_complex: bool = False
    is_date_time: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation"""
        data = asdict(self)
        data["attr_kind"] = self.attr_kind.value
        data["element_kind"] = self.element_kind.value if self.element_kind else None
        return data


def base_kind(semantic_type: Union[str, SemanticType, None]) -> AttrKind:
    """Default attribute kind for a semantic type (unknown types become strings)"""
    return _BASE_KINDS.get(SemanticType.coerce(semantic_type), AttrKind.STRING)


def element_kind(item_type: Union[str, SemanticType, None]) -> AttrKind:
    """Element kind of a collection, given the item's semantic type"""
    item = SemanticType.coerce(item_type)
    if item == SemanticType.OBJECT:
        return AttrKind.OBJECT
    if item == SemanticType.ARRAY:
        return AttrKind.STRING
    return base_kind(item)


def validator_type(kind: AttrKind) -> str:
    return _VALIDATOR_TYPES.get(kind, "String")


def resolve(
    semantic_type: Union[str, SemanticType, None],
    item_type: Union[str, SemanticType, None] = None,
    fmt: Optional[str] = None,
    kind: Optional[AttrKind] = None,
) -> TypeMeta:
    """
    Resolve generation metadata for a field

    Args:
        semantic_type: OpenAPI type of the field
        item_type: OpenAPI type of array items / map values
        fmt: OpenAPI format (e.g. "date-time")
        kind: Already-decided representation (SET for unordered arrays,
            MAP for open objects); defaults to the semantic type's base kind

    Returns:
        TypeMeta for the field
    """
    kind = kind or base_kind(semantic_type)

    if kind in _SCALARS:
        schema_attribute, value_type, plan_modifier, from_api, to_api = _SCALARS[kind]
        is_date_time = kind == AttrKind.STRING and fmt == DATE_TIME_FORMAT
        if is_date_time:
            # Needs a value carrying both the raw text and the parsed time
            from_api = None
        return TypeMeta(
            attr_kind=kind,
            schema_attribute=schema_attribute,
            validator_type=validator_type(kind),
            value_type=value_type,
            plan_modifier=plan_modifier,
            from_api=from_api,
            to_api=to_api,
            is_date_time=is_date_time,
        )

    if kind in (AttrKind.LIST, AttrKind.SET):
        prefix = "List" if kind == AttrKind.LIST else "Set"
        elem = element_kind(item_type)
        if elem == AttrKind.OBJECT:
            return TypeMeta(
                attr_kind=kind,
                schema_attribute=f"{prefix}NestedAttribute",
                validator_type=validator_type(kind),
                element_kind=elem,
                plan_modifier=prefix,
                is_nested=True,
                is_complex=True,
            )
        return TypeMeta(
            attr_kind=kind,
            schema_attribute=f"{prefix}Attribute",
            validator_type=validator_type(kind),
            element_kind=elem,
            element_type=_SCALARS[elem][1],
            plan_modifier=prefix,
            is_complex=True,
        )

    if kind == AttrKind.MAP:
        elem = element_kind(item_type)
        if elem == AttrKind.OBJECT:
            elem = AttrKind.STRING
        return TypeMeta(
            attr_kind=kind,
            schema_attribute="MapAttribute",
            validator_type=validator_type(kind),
            element_kind=elem,
            element_type=_SCALARS[elem][1],
            plan_modifier="Map",
            is_complex=True,
        )

    return TypeMeta(
        attr_kind=AttrKind.OBJECT,
        schema_attribute="SingleNestedAttribute",
        validator_type=validator_type(kind),
        plan_modifier="Object",
        is_nested=True,
        is_complex=True,
    )
