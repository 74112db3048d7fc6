"""
Model Builder - Runs the full field pipeline for configured resources

Pipeline per resource:
1. Builder extracts create / update / response fields
2. Update actions, standalone actions and filter parameters
3. Model merge, path parameters, descriptions
4. ForceNew and ServerComputed derivation
5. Sorting, schema skip, nested struct naming
"""

import logging
from typing import Any, Dict, List, Optional, Set, Tuple

from modelgen.dedup.registry import NameRegistry, assign_type_refs, collect_unique_structs
from modelgen.errors import ModelGenError, ResourceGenerationError, SchemaNotFoundError
from modelgen.introspection.schema_provider import SchemaProvider
from modelgen.reconciler.status import (
    apply_schema_skip,
    derive_force_new,
    derive_server_computed,
    fill_descriptions,
    mark_data_source,
)
from modelgen.schema.filters import extract_filter_params
from modelgen.schema.models import FieldDescriptor, ResourceModel, UpdateAction, sort_by_name
from modelgen.schema.naming import humanize, split_resource_name
from modelgen.schema.types import SemanticType
from modelgen.schema.walker import SchemaWalker
from .resource_builder import get_builder

logger = logging.getLogger(__name__)

# Response fields that mean the resource is provisioned asynchronously
POLLING_FIELDS = ("state", "status")


class ModelBuilder:
    """
    Builds ResourceModels for every configured resource and data source

    Usage:
    ```python
    builder = ModelBuilder(app_config, provider)
    models, registry = builder.build_all()
    for model in models:
        print(f"{model.name}: {len(model.model_fields)} fields")
    ```
    """

    def __init__(self, config: Any, provider: SchemaProvider):
        """
        Initialize ModelBuilder

        Args:
            config: AppConfig with generator settings, resources and data sources
            provider: Schema provider for the loaded document
        """
        self.config = config
        self.provider = provider
        self.policy = config.policy()
        self.walker = SchemaWalker(
            provider,
            self.policy,
            max_depth=config.generator.max_depth,
            identifier_field=config.generator.identifier_field,
        )

    def build_all(self, registry: Optional[NameRegistry] = None) -> Tuple[List[ResourceModel], NameRegistry]:
        """
        Build all resources, then all data sources, in configuration order

        Returns:
            (models, shared name registry)

        Raises:
            ResourceGenerationError: If any resource or data source fails
        """
        registry = registry if registry is not None else NameRegistry()
        models = []

        for resource in self.config.resources:
            models.append(self._guarded(resource.name, self.build_resource, resource, registry))

        for data_source in self.config.data_sources:
            models.append(self._guarded(data_source.name, self.build_data_source, data_source, registry))

        logger.info(f"Built {len(models)} models with {len(registry)} nested types")
        return models, registry

    def _guarded(self, name: str, build, definition: Any, registry: NameRegistry) -> ResourceModel:
        try:
            return build(definition, registry)
        except ResourceGenerationError:
            raise
        except (ModelGenError, ValueError) as e:
            raise ResourceGenerationError(name, e) from e

    def build_resource(self, resource: Any, registry: NameRegistry) -> ResourceModel:
        """
        Build the model of one resource

        Args:
            resource: ResourceConfig
            registry: Shared nested type registry

        Returns:
            ResourceModel

        Raises:
            SchemaNotFoundError: If the retrieve response (or an order's offering schema) is absent
        """
        builder = get_builder(self.provider, resource, self.walker)
        ops = builder.ops
        label = humanize(resource.name)

        create_fields = builder.build_create_fields()
        update_fields = builder.build_update_fields()
        response_fields = builder.build_response_fields()

        update_actions = self._update_actions(resource)
        standalone_actions = self._standalone_actions(resource)
        filter_params = extract_filter_params(self.provider, ops["list"], label)

        model_fields = builder.build_model_fields(create_fields, response_fields)
        create_fields = self._apply_path_params(resource, model_fields, create_fields)

        fill_descriptions(model_fields, label)

        updatable: Set[str] = {f.name for f in update_fields}
        updatable.update(a.param for a in update_actions if a.param)
        derive_force_new(model_fields, updatable)
        derive_server_computed(model_fields, create_fields)

        # Response fields carry the reconciled flags of the model
        by_name = {f.name: f for f in model_fields}
        response_fields = [by_name[f.name].clone() if f.name in by_name else f for f in response_fields]

        create_fields = sort_by_name(create_fields)
        update_fields = sort_by_name(update_fields)
        response_fields = sort_by_name(response_fields)
        model_fields = sort_by_name(model_fields)

        skip_polling = not any(f.name in POLLING_FIELDS for f in response_fields)

        input_names = {f.name for f in create_fields}
        apply_schema_skip(model_fields, self.policy, input_names)
        apply_schema_skip(response_fields, self.policy, input_names)

        assign_type_refs(model_fields, registry)
        assign_type_refs(response_fields, registry)

        service, clean_name = split_resource_name(resource.name)
        model = ResourceModel(
            name=resource.name,
            service=service,
            clean_name=clean_name,
            plugin=builder.plugin,
            operations=dict(ops),
            api_paths=builder.get_api_paths(),
            create_fields=create_fields,
            update_fields=update_fields,
            response_fields=response_fields,
            model_fields=model_fields,
            update_actions=update_actions,
            standalone_actions=standalone_actions,
            filter_params=filter_params,
            termination_attributes=[a.to_dict() for a in resource.termination_attributes],
            nested_structs=collect_unique_structs(model_fields),
            is_order=builder.plugin == "order",
            is_link=builder.plugin == "link",
            skip_polling=skip_polling,
        )

        logger.info(f"Built resource {resource.name}: {len(model_fields)} fields, {len(model.nested_structs)} nested types")
        return model

    def build_data_source(self, data_source: Any, registry: NameRegistry) -> ResourceModel:
        """
        Build the model of a data-source-only definition

        Fields come from the retrieve response, or from the items of the list
        response when there is no retrieve operation.
        """
        ops = data_source.operation_ids()
        label = humanize(data_source.name)

        response_fields = self._data_source_fields(ops)
        fill_descriptions(response_fields, label)
        filter_params = extract_filter_params(self.provider, ops["list"], label)

        response_fields = sort_by_name(mark_data_source(response_fields))
        model_fields = [f.clone() for f in response_fields]

        apply_schema_skip(model_fields, self.policy)
        apply_schema_skip(response_fields, self.policy)

        assign_type_refs(model_fields, registry)
        assign_type_refs(response_fields, registry)

        api_paths = {}
        for key, op_key in (("Base", "list"), ("Retrieve", "retrieve")):
            operation = self.provider.find_operation(ops[op_key])
            if operation is not None:
                api_paths[key] = operation.path

        service, clean_name = split_resource_name(data_source.name)
        model = ResourceModel(
            name=data_source.name,
            service=service,
            clean_name=clean_name,
            operations=dict(ops),
            api_paths=api_paths,
            response_fields=response_fields,
            model_fields=model_fields,
            filter_params=filter_params,
            nested_structs=collect_unique_structs(model_fields),
            is_data_source_only=True,
        )

        logger.info(f"Built data source {data_source.name}: {len(model_fields)} fields")
        return model

    def _data_source_fields(self, ops: Dict[str, str]) -> List[FieldDescriptor]:
        try:
            schema = self.provider.get_operation_response_schema(ops["retrieve"])
            return self.walker.extract(schema, skip_root_identifier=True)
        except SchemaNotFoundError as e:
            logger.debug(f"No retrieve response, trying list: {e.message}")

        try:
            schema = self.provider.get_operation_response_schema(ops["list"])
        except SchemaNotFoundError as e:
            logger.warning(f"No response schema for data source: {e.message}")
            return []

        resolved, _ = self.provider.resolve(schema)
        if resolved is None or self.walker.schema_type(resolved) != SemanticType.ARRAY or "items" not in resolved:
            logger.warning(f"List response of {ops['list']} is not an array")
            return []

        return self.walker.extract(resolved["items"], skip_root_identifier=True)

    def _update_actions(self, resource: Any) -> List[UpdateAction]:
        actions = []
        for action in sorted(resource.update_actions, key=lambda a: a.name):
            actions.append(UpdateAction(
                name=action.name,
                operation=action.operation,
                param=action.param,
                compare_key=action.compare_key or action.param,
                path=self._operation_path(action.operation),
            ))
        return actions

    def _standalone_actions(self, resource: Any) -> List[UpdateAction]:
        actions = []
        for name in resource.actions:
            operation_id = f"{resource.base_operation_id}_{name}"
            actions.append(UpdateAction(name=name, operation=operation_id, path=self._operation_path(operation_id)))
        return actions

    def _operation_path(self, operation_id: str) -> str:
        operation = self.provider.find_operation(operation_id)
        return operation.path if operation is not None else ""

    def _apply_path_params(
        self,
        resource: Any,
        model_fields: List[FieldDescriptor],
        create_fields: List[FieldDescriptor],
    ) -> List[FieldDescriptor]:
        """Force create path parameters into the model and the create input"""
        if not resource.create_operation or not resource.create_operation.path_params:
            return create_fields

        # path_params maps URL parameter -> model field
        path_params = list(resource.create_operation.path_params.values())
        model_by_name = {f.name: f for f in model_fields}
        create_names = {f.name for f in create_fields}
        create_fields = list(create_fields)

        for name in path_params:
            field = model_by_name.get(name)
            if field is None:
                field = FieldDescriptor(name=name, type=SemanticType.STRING, description="Required path parameter")
                model_fields.append(field)
                model_by_name[name] = field
            field.required = True
            field.read_only = False
            field.is_path_param = True

            if name not in create_names:
                create_fields.append(FieldDescriptor(
                    name=name,
                    type=SemanticType.STRING,
                    description="Required path parameter",
                    required=True,
                    is_path_param=True,
                ))
                create_names.add(name)

        return create_fields
