"""Generator configuration."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from modelgen.errors import ConfigError
from modelgen.schema.policy import PolicyTable

PLUGINS = ("standard", "order", "link")
DEFAULT_CONFIG_PATH = "config.yaml"
DEFAULT_OUTPUT_DIR = "./output/model"


@dataclass
class UpdateActionConfig:
    """Dedicated update endpoint for one attribute."""

    name: str
    operation: str
    param: str = ""
    compare_key: str = ""

    @classmethod
    def from_dict(cls, name: str, data: Optional[Dict[str, Any]]) -> "UpdateActionConfig":
        data = data or {}
        return cls(
            name=name,
            operation=data.get("operation", ""),
            param=data.get("param", ""),
            compare_key=data.get("compare_key", ""),
        )


@dataclass
class ParameterConfig:
    """Extra named parameter, e.g. a termination attribute."""

    name: str
    type: str = "string"

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "type": self.type}


@dataclass
class CreateOperationConfig:
    """Create operation that differs from `<base>_create`."""

    operation_id: str = ""
    path_params: Dict[str, str] = field(default_factory=dict)


@dataclass
class LinkEndpointConfig:
    """One side of a link resource."""

    param: str = ""
    retrieve_op: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["LinkEndpointConfig"]:
        if not data:
            return None
        return cls(param=data.get("param", ""), retrieve_op=data.get("retrieve_op", ""))


@dataclass
class ResourceConfig:
    """One managed resource."""

    name: str
    base_operation_id: str
    plugin: str = "standard"
    offering_type: str = ""
    update_actions: List[UpdateActionConfig] = field(default_factory=list)
    actions: List[str] = field(default_factory=list)
    termination_attributes: List[ParameterConfig] = field(default_factory=list)
    create_operation: Optional[CreateOperationConfig] = None
    skip_operations: List[str] = field(default_factory=list)

    # Link resources
    link_op: str = ""
    unlink_op: str = ""
    source: Optional[LinkEndpointConfig] = None
    target: Optional[LinkEndpointConfig] = None
    link_params: List[ParameterConfig] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResourceConfig":
        create_operation = data.get("create_operation")
        link_op = data.get("link_op", "")
        return cls(
            name=data.get("name", ""),
            base_operation_id=data.get("base_operation_id", ""),
            plugin=data.get("plugin") or ("link" if link_op else "standard"),
            offering_type=data.get("offering_type", ""),
            update_actions=[
                UpdateActionConfig.from_dict(name, action)
                for name, action in (data.get("update_actions") or {}).items()
            ],
            actions=list(data.get("actions") or []),
            termination_attributes=[
                ParameterConfig(name=p.get("name", ""), type=p.get("type", "string"))
                for p in data.get("termination_attributes") or []
            ],
            create_operation=CreateOperationConfig(
                operation_id=create_operation.get("operation_id", ""),
                path_params=dict(create_operation.get("path_params") or {}),
            ) if create_operation else None,
            skip_operations=list(data.get("skip_operations") or []),
            link_op=link_op,
            unlink_op=data.get("unlink_op", ""),
            source=LinkEndpointConfig.from_dict(data.get("source")),
            target=LinkEndpointConfig.from_dict(data.get("target")),
            link_params=[
                ParameterConfig(name=p.get("name", ""), type=p.get("type", "string"))
                for p in data.get("link_params") or []
            ],
        )

    def operations_to_check(self) -> Dict[str, str]:
        """
        Operations that must exist in the document, keyed by role

        Order resources have no create/destroy of their own; link resources
        are checked only on their link, unlink and source lookup operations.
        Roles named in `skip_operations` are left out.
        """
        ops = self.operation_ids()
        if self.plugin == "link":
            checks = {"link": self.link_op, "unlink": self.unlink_op}
            if self.source and self.source.retrieve_op:
                checks["source_retrieve"] = self.source.retrieve_op
        else:
            checks = {key: ops[key] for key in ("list", "retrieve", "partial_update")}
            if self.plugin != "order":
                checks["create"] = ops["create"]
                checks["destroy"] = ops["destroy"]

        return {role: op for role, op in checks.items() if role not in self.skip_operations}

    def operation_ids(self) -> Dict[str, str]:
        """Operation ids derived from the base operation id."""
        base = self.base_operation_id
        ids = {
            "list": f"{base}_list",
            "create": f"{base}_create",
            "retrieve": f"{base}_retrieve",
            "partial_update": f"{base}_partial_update",
            "destroy": f"{base}_destroy",
        }
        if self.create_operation and self.create_operation.operation_id:
            ids["create"] = self.create_operation.operation_id
        return ids


@dataclass
class DataSourceConfig:
    """One read-only data source."""

    name: str
    base_operation_id: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DataSourceConfig":
        return cls(name=data.get("name", ""), base_operation_id=data.get("base_operation_id", ""))

    def operation_ids(self) -> Dict[str, str]:
        """Operation ids derived from the base operation id."""
        return {
            "list": f"{self.base_operation_id}_list",
            "retrieve": f"{self.base_operation_id}_retrieve",
        }


@dataclass
class GeneratorSettings:
    """The `generator:` section."""

    openapi_schema: str = ""
    output_dir: str = DEFAULT_OUTPUT_DIR
    provider_name: str = ""
    max_depth: int = 3
    identifier_field: str = "uuid"
    excluded_fields: List[str] = field(default_factory=list)
    set_fields: List[str] = field(default_factory=list)
    field_overrides: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "GeneratorSettings":
        data = data or {}
        return cls(
            openapi_schema=data.get("openapi_schema", ""),
            output_dir=data.get("output_dir") or DEFAULT_OUTPUT_DIR,
            provider_name=data.get("provider_name", ""),
            max_depth=int(data.get("max_depth", 3)),
            identifier_field=data.get("identifier_field") or "uuid",
            excluded_fields=list(data.get("excluded_fields") or []),
            set_fields=list(data.get("set_fields") or []),
            field_overrides=dict(data.get("field_overrides") or {}),
        )


@dataclass
class AppConfig:
    """Application configuration."""

    generator: GeneratorSettings = field(default_factory=GeneratorSettings)
    resources: List[ResourceConfig] = field(default_factory=list)
    data_sources: List[DataSourceConfig] = field(default_factory=list)
    api_token: str = ""
    log_level: str = "INFO"
    base_dir: str = "."  # directory of the config file

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "AppConfig":
        data = data or {}
        return cls(
            generator=GeneratorSettings.from_dict(data.get("generator")),
            resources=[ResourceConfig.from_dict(r) for r in data.get("resources") or []],
            data_sources=[DataSourceConfig.from_dict(d) for d in data.get("data_sources") or []],
        )

    @classmethod
    def from_yaml(cls, path: str) -> "AppConfig":
        """
        Load configuration from a YAML file

        Raises:
            ConfigError: If the file is missing or not valid YAML
        """
        config_path = Path(path)
        if not config_path.is_file():
            raise ConfigError(f"Config file not found: {path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}", {"error": str(e)}) from e

        if data is not None and not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")

        config = cls.from_dict(data)
        config.base_dir = str(config_path.parent)
        return config

    @classmethod
    def from_env(cls, path: Optional[str] = None) -> "AppConfig":
        """Load the YAML file named by MODELGEN_CONFIG (or `path`) and apply environment overrides."""
        config = cls.from_yaml(path or os.getenv("MODELGEN_CONFIG", DEFAULT_CONFIG_PATH))

        output_dir = os.getenv("MODELGEN_OUTPUT_DIR")
        if output_dir:
            config.generator.output_dir = output_dir
        config.api_token = os.getenv("MODELGEN_API_TOKEN", "")
        config.log_level = os.getenv("MODELGEN_LOG_LEVEL", "INFO").upper()

        return config

    def validate(self) -> None:
        """
        Check required settings and name uniqueness

        Raises:
            ConfigError: On the first problem found
        """
        if not self.generator.openapi_schema:
            raise ConfigError("openapi_schema is required")
        if not self.generator.provider_name:
            raise ConfigError("provider_name is required")
        if self.generator.max_depth < 1:
            raise ConfigError(f"max_depth must be at least 1, got {self.generator.max_depth}")

        resource_names = set()
        for resource in self.resources:
            if not resource.name:
                raise ConfigError("resource name cannot be empty")
            if not resource.base_operation_id:
                raise ConfigError(f"resource {resource.name}: base_operation_id cannot be empty")
            if resource.name in resource_names:
                raise ConfigError(f"duplicate resource name: {resource.name}")
            if resource.plugin not in PLUGINS:
                raise ConfigError(
                    f"resource {resource.name}: unknown plugin {resource.plugin}",
                    {"allowed": list(PLUGINS)},
                )
            if resource.plugin == "order" and not resource.offering_type:
                raise ConfigError(f"resource {resource.name}: offering_type is required for order resources")
            if resource.plugin == "link" and not resource.link_op:
                raise ConfigError(f"resource {resource.name}: link_op is required for link resources")
            resource_names.add(resource.name)

        data_source_names = set()
        for data_source in self.data_sources:
            if not data_source.name:
                raise ConfigError("data source name cannot be empty")
            if not data_source.base_operation_id:
                raise ConfigError(f"data source {data_source.name}: base_operation_id cannot be empty")
            if data_source.name in data_source_names:
                raise ConfigError(f"duplicate data source name: {data_source.name}")
            data_source_names.add(data_source.name)

    def validate_operations(self, provider: Any) -> None:
        """
        Check that every operation the configuration relies on exists

        Args:
            provider: SchemaProvider of the loaded document

        Raises:
            ConfigError: Naming the first resource or data source with a missing operation
        """
        for resource in self.resources:
            for role, operation_id in resource.operations_to_check().items():
                if not provider.has_operation(operation_id):
                    raise ConfigError(
                        f"resource {resource.name}: operation not found: {operation_id}",
                        {"role": role},
                    )

        for data_source in self.data_sources:
            operation_id = data_source.operation_ids()["list"]
            if not provider.has_operation(operation_id):
                raise ConfigError(
                    f"data source {data_source.name}: operation not found: {operation_id}",
                    {"role": "list"},
                )

    def schema_source(self) -> str:
        """OpenAPI document location; relative paths are taken from the config file directory."""
        source = self.generator.openapi_schema
        if source.startswith(("http://", "https://")) or Path(source).is_absolute():
            return source
        return str(Path(self.base_dir) / source)

    def policy(self) -> PolicyTable:
        """Field policy built from the generator settings."""
        return PolicyTable.build(
            excluded=self.generator.excluded_fields,
            set_fields=self.generator.set_fields,
            overrides=self.generator.field_overrides,
        )

    def get_resource(self, name: str) -> Optional[ResourceConfig]:
        for resource in self.resources:
            if resource.name == name:
                return resource
        return None

    def get_data_source(self, name: str) -> Optional[DataSourceConfig]:
        for data_source in self.data_sources:
            if data_source.name == name:
                return data_source
        return None
