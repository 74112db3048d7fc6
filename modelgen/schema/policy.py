"""Field policy table - exclusions, set representation and per-path overrides."""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Set


@dataclass
class FieldOverride:
    """Per-path adjustments applied while walking a schema"""

    set: bool = False
    computed: bool = False
    optional: bool = False
    required: bool = False
    force_new: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "FieldOverride":
        data = data or {}
        return cls(
            set=bool(data.get("set", False)),
            computed=bool(data.get("computed", False)),
            optional=bool(data.get("optional", False)),
            required=bool(data.get("required", False)),
            force_new=bool(data.get("force_new", False)),
        )


@dataclass
class PolicyTable:
    """
    Field-level rules consumed by the walker and the reconciler

    Usage:
    ```python
    policy = PolicyTable.build(excluded=["customer.url"], set_fields=["tags"])
    policy.is_excluded("url", "customer.url")  # True
    policy.is_set_field("tags")  # True
    ```
    """

    excluded_fields: Set[str] = field(default_factory=set)
    set_fields: Set[str] = field(default_factory=set)
    field_overrides: Dict[str, FieldOverride] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        excluded: Optional[Iterable[str]] = None,
        set_fields: Optional[Iterable[str]] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "PolicyTable":
        """Build a policy table from plain configuration values"""
        return cls(
            excluded_fields=set(excluded or []),
            set_fields=set(set_fields or []),
            field_overrides={
                path: value if isinstance(value, FieldOverride) else FieldOverride.from_dict(value)
                for path, value in (overrides or {}).items()
            },
        )

    def is_excluded(self, name: str, path: Optional[str] = None) -> bool:
        """Check if a field is excluded by bare name or dotted path"""
        if name in self.excluded_fields:
            return True
        return bool(path) and path in self.excluded_fields

    def is_set_field(self, name: str) -> bool:
        """Check if an array field should use the unordered representation"""
        override = self.field_overrides.get(name)
        if override is not None:
            return override.set
        return name in self.set_fields

    def override_for(self, path: str) -> Optional[FieldOverride]:
        return self.field_overrides.get(path)
