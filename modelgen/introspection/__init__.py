"""
OpenAPI document loading and read-only schema access
"""

from .document_loader import DocumentLoader
from .schema_provider import Operation, SchemaProvider

__all__ = [
    "DocumentLoader",
    "Operation",
    "SchemaProvider",
]
