"""
Resource Model Builders

Turns configured resources into reconciled ResourceModels:
- Standard and order field extraction
- Path parameters, update actions and filters
- Status derivation and nested type naming
"""

from .model_builder import ModelBuilder
from .resource_builder import (
    ORDER_COMMON_FIELDS,
    BaseBuilder,
    LinkBuilder,
    OrderBuilder,
    StandardBuilder,
    get_builder,
)

__all__ = [
    "BaseBuilder",
    "LinkBuilder",
    "ModelBuilder",
    "ORDER_COMMON_FIELDS",
    "OrderBuilder",
    "StandardBuilder",
    "get_builder",
]
