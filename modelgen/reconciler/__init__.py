"""
Reconciliation of input and output fields into resource models
"""

from .merging import ORDER_REQUIRED_FIELDS, merge_fields, merge_order_fields
from .status import (
    apply_schema_skip,
    derive_force_new,
    derive_server_computed,
    fill_descriptions,
    mark_data_source,
)

__all__ = [
    "ORDER_REQUIRED_FIELDS",
    "apply_schema_skip",
    "derive_force_new",
    "derive_server_computed",
    "fill_descriptions",
    "mark_data_source",
    "merge_fields",
    "merge_order_fields",
]
