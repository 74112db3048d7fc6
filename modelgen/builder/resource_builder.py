"""
Resource Builders - Extract create/update/response fields per resource kind

Kinds:
- standard: create body + retrieve response, merged field by field
- order: offering attributes schema + retrieve response, merged as an order
- link: link action body + relation retrieve response, no in-place update
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from modelgen.errors import SchemaNotFoundError
from modelgen.introspection.schema_provider import SchemaProvider
from modelgen.reconciler.merging import merge_fields, merge_order_fields
from modelgen.schema.models import FieldDescriptor
from modelgen.schema.types import AttrKind, DATE_TIME_FORMAT, SemanticType
from modelgen.schema.walker import SchemaWalker

logger = logging.getLogger(__name__)

# Fields accepted by every order, whatever the offering
ORDER_COMMON_FIELDS = (
    FieldDescriptor(name="offering", type=SemanticType.STRING, description="Offering URL", required=True),
    FieldDescriptor(name="project", type=SemanticType.STRING, description="Project URL", required=True),
    FieldDescriptor(name="plan", type=SemanticType.STRING, description="Plan URL"),
    FieldDescriptor(
        name="limits",
        type=SemanticType.OBJECT,
        kind=AttrKind.MAP,
        item_type=SemanticType.NUMBER,
        description="Resource limits",
    ),
    FieldDescriptor(
        name="start_date",
        type=SemanticType.STRING,
        format=DATE_TIME_FORMAT,
        description="Order start date",
    ),
    FieldDescriptor(
        name="end_date",
        type=SemanticType.STRING,
        format=DATE_TIME_FORMAT,
        description="Order end date",
    ),
)


def parameter_field(name: str, type_name: str, description: str, required: bool = False) -> FieldDescriptor:
    """
    Descriptor for a configured extra parameter

    An object parameter has no declared properties, so it becomes a map of
    strings like any other property-less object.
    """
    semantic_type = SemanticType.coerce(type_name)
    if semantic_type == SemanticType.UNKNOWN:
        semantic_type = SemanticType.STRING

    field = FieldDescriptor(name=name, type=semantic_type, description=description, required=required)
    if semantic_type == SemanticType.OBJECT:
        field.kind = AttrKind.MAP
        field.item_type = SemanticType.STRING
    elif semantic_type == SemanticType.ARRAY:
        field.item_type = SemanticType.STRING
    return field


class BaseBuilder:
    """
    Shared field extraction for one configured resource

    Args:
        provider: Schema provider for the loaded document
        resource: ResourceConfig of the resource
        walker: Walker configured with the run's policy
    """

    plugin = "standard"

    def __init__(self, provider: SchemaProvider, resource: Any, walker: SchemaWalker):
        self.provider = provider
        self.resource = resource
        self.walker = walker
        self.ops: Dict[str, str] = resource.operation_ids()

    def build_create_fields(self) -> List[FieldDescriptor]:
        raise NotImplementedError

    def build_update_fields(self) -> List[FieldDescriptor]:
        """Fields of the partial update body; none when there is no update"""
        return self._request_fields(self.ops["partial_update"], required=False)

    def build_response_fields(self) -> List[FieldDescriptor]:
        """
        Fields of the retrieve response

        Raises:
            SchemaNotFoundError: If the retrieve operation has no JSON response
        """
        schema = self.provider.get_operation_response_schema(self.ops["retrieve"])
        return self.walker.extract(schema, skip_root_identifier=True)

    def build_model_fields(
        self,
        create_fields: List[FieldDescriptor],
        response_fields: List[FieldDescriptor],
    ) -> List[FieldDescriptor]:
        return merge_fields(create_fields, response_fields)

    def get_api_paths(self) -> Dict[str, str]:
        """API paths of the resource's operations that exist in the document"""
        paths = {}
        for key, op_key in (("Base", "list"), ("Create", "create"), ("Retrieve", "retrieve"),
                            ("Update", "partial_update"), ("Delete", "destroy")):
            operation = self.provider.find_operation(self.ops[op_key])
            if operation is not None:
                paths[key] = operation.path

        create_operation = self.resource.create_operation
        if create_operation and create_operation.operation_id and "Create" in paths:
            paths["CreateOperationID"] = create_operation.operation_id
            for param, source in create_operation.path_params.items():
                paths[f"CreatePathParam_{param}"] = source

        return paths

    def _request_fields(self, operation_id: str, required: bool) -> List[FieldDescriptor]:
        try:
            schema = self.provider.get_operation_request_schema(operation_id)
        except SchemaNotFoundError as e:
            if required:
                raise
            logger.debug(f"{self.resource.name}: {e.message}")
            return []
        return self.walker.extract(schema, skip_root_identifier=True)


class StandardBuilder(BaseBuilder):
    """Resource created by posting its own body"""

    def build_create_fields(self) -> List[FieldDescriptor]:
        fields = self._request_fields(self.ops["create"], required=False)
        if not fields:
            logger.warning(f"{self.resource.name}: no create body found for {self.ops['create']}")
        return fields


class OrderBuilder(BaseBuilder):
    """Resource created through a marketplace order"""

    plugin = "order"

    @property
    def offering_schema_name(self) -> str:
        return self.resource.offering_type.replace(".", "") + "CreateOrderAttributes"

    def build_create_fields(self) -> List[FieldDescriptor]:
        """
        Offering attributes plus the common order fields

        Raises:
            SchemaNotFoundError: If the offering attributes schema is absent
        """
        schema = self.provider.get_schema(self.offering_schema_name)
        fields = self.walker.extract(schema, skip_root_identifier=True)
        names = {f.name for f in fields}
        fields.extend(f.clone() for f in ORDER_COMMON_FIELDS if f.name not in names)
        return fields

    def build_model_fields(
        self,
        create_fields: List[FieldDescriptor],
        response_fields: List[FieldDescriptor],
    ) -> List[FieldDescriptor]:
        model_fields = merge_order_fields(create_fields, response_fields)
        names = {f.name for f in model_fields}

        for attribute in self.resource.termination_attributes:
            if attribute.name in names:
                continue
            model_fields.append(parameter_field(attribute.name, attribute.type, "Termination attribute"))
            names.add(attribute.name)

        return model_fields


class LinkBuilder(BaseBuilder):
    """
    Relation between two existing resources, created by a link action

    The relation cannot be updated in place: every writable field forces
    replacement, and source/target are always required.
    """

    plugin = "link"

    def __init__(self, provider: SchemaProvider, resource: Any, walker: SchemaWalker):
        super().__init__(provider, resource, walker)
        self.ops["link"] = resource.link_op
        self.ops["unlink"] = resource.unlink_op

    def _endpoint_params(self) -> List[Tuple[str, str]]:
        params = []
        for endpoint, description in ((self.resource.source, "Source resource UUID"),
                                      (self.resource.target, "Target resource UUID")):
            if endpoint is not None and endpoint.param:
                params.append((endpoint.param, description))
        return params

    def build_create_fields(self) -> List[FieldDescriptor]:
        """Link action body plus source, target and extra link parameters"""
        fields = self._request_fields(self.resource.link_op, required=False)
        names = {f.name for f in fields}

        for param, description in self._endpoint_params():
            if param not in names:
                fields.append(FieldDescriptor(
                    name=param,
                    type=SemanticType.STRING,
                    description=description,
                    required=True,
                ))
                names.add(param)

        for param in self.resource.link_params:
            if param.name not in names:
                fields.append(parameter_field(param.name, param.type, "Link parameter"))
                names.add(param.name)

        return fields

    def build_update_fields(self) -> List[FieldDescriptor]:
        return []

    def build_response_fields(self) -> List[FieldDescriptor]:
        """Retrieve response, tolerated if absent; source and target become required and writable"""
        try:
            schema = self.provider.get_operation_response_schema(self.ops["retrieve"])
        except SchemaNotFoundError as e:
            logger.debug(f"{self.resource.name}: {e.message}")
            return []

        fields = self.walker.extract(schema, skip_root_identifier=True)
        endpoint_names = {param for param, _ in self._endpoint_params()}
        for field in fields:
            if field.name in endpoint_names:
                field.required = True
                field.read_only = False
                field.force_new = True
        return fields

    def get_api_paths(self) -> Dict[str, str]:
        paths = {}
        operations = [("Base", self.ops["list"]), ("Retrieve", self.ops["retrieve"]),
                      ("Link", self.resource.link_op), ("Unlink", self.resource.unlink_op)]
        if self.resource.source is not None and self.resource.source.retrieve_op:
            operations.append(("SourceRetrieve", self.resource.source.retrieve_op))

        for key, operation_id in operations:
            operation = self.provider.find_operation(operation_id)
            if operation is not None:
                paths[key] = operation.path
        return paths


BUILDERS = {
    StandardBuilder.plugin: StandardBuilder,
    OrderBuilder.plugin: OrderBuilder,
    LinkBuilder.plugin: LinkBuilder,
}


def get_builder(provider: SchemaProvider, resource: Any, walker: Optional[SchemaWalker] = None) -> BaseBuilder:
    """
    Create the builder for a resource's plugin

    Raises:
        ValueError: If the plugin is unknown
    """
    builder_class = BUILDERS.get(resource.plugin or "standard")
    if builder_class is None:
        raise ValueError(f"Unknown plugin: {resource.plugin}")
    return builder_class(provider, resource, walker or SchemaWalker(provider))
