"""
Field descriptors, type resolution and schema walking
"""

from .filters import extract_filter_params
from .models import FieldDescriptor, FilterParam, ResourceModel, UpdateAction, sort_by_name
from .policy import FieldOverride, PolicyTable
from .types import AttrKind, SemanticType, TypeMeta, base_kind, resolve
from .walker import SchemaWalker

__all__ = [
    "AttrKind",
    "FieldDescriptor",
    "FieldOverride",
    "FilterParam",
    "PolicyTable",
    "ResourceModel",
    "SchemaWalker",
    "SemanticType",
    "TypeMeta",
    "UpdateAction",
    "base_kind",
    "extract_filter_params",
    "resolve",
    "sort_by_name",
]
