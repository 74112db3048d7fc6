"""
Known schema/payload type mismatches

The published schema declares these fields with a type the API does not
actually return. Not verified against live payloads beyond the fields
listed here.
"""

from typing import Optional

from .types import SemanticType

# Declared as strings, returned as numbers
NUMERIC_STRING_FIELDS = frozenset({"total", "tax", "tax_current", "current"})

# Maps declared with number values, returned with string values
STRING_VALUED_MAP_FIELDS = frozenset({"prices", "switch_price"})


def coerce_field_type(name: str, semantic_type: SemanticType) -> SemanticType:
    """Return the type the API actually uses for a field"""
    if name in NUMERIC_STRING_FIELDS and semantic_type == SemanticType.STRING:
        return SemanticType.NUMBER
    return semantic_type


def coerce_map_value_type(name: str, value_type: Optional[SemanticType]) -> Optional[SemanticType]:
    """Return the value type the API actually uses for a map field"""
    if name in STRING_VALUED_MAP_FIELDS and value_type == SemanticType.NUMBER:
        return SemanticType.STRING
    return value_type
