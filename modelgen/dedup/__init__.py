"""
Nested struct naming and deduplication
"""

from .registry import (
    NameRegistry,
    assign_type_refs,
    collect_unique_structs,
    fingerprint,
    resolve_unique_name,
)

__all__ = [
    "NameRegistry",
    "assign_type_refs",
    "collect_unique_structs",
    "fingerprint",
    "resolve_unique_name",
]
