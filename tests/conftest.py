"""
Shared fixtures: a small OpenAPI document with standard, order,
data-source and link style endpoints.
"""

import copy

import pytest

from config import AppConfig
from modelgen.introspection.schema_provider import SchemaProvider


def ref(name):
    return {"$ref": f"#/components/schemas/{name}"}


def json_body(schema):
    return {"required": True, "content": {"application/json": {"schema": schema}}}


def json_response(schema, description="OK"):
    return {"description": description, "content": {"application/json": {"schema": schema}}}


UUID_PATH_PARAM = {"name": "uuid", "in": "path", "required": True, "schema": {"type": "string", "format": "uuid"}}

OPENAPI_SPEC = {
    "openapi": "3.0.3",
    "info": {"title": "Waldur API", "version": "7.0.0"},
    "paths": {
        "/api/projects/": {
            "get": {
                "operationId": "projects_list",
                "parameters": [
                    {"name": "name", "in": "query", "schema": {"type": "string"}},
                    {"name": "customer_uuid", "in": "query", "schema": {"type": "string", "format": "uuid"}},
                    {"name": "is_removed", "in": "query", "schema": {"type": "boolean"}},
                    {
                        "name": "backend_type",
                        "in": "query",
                        "description": "Backend type",
                        "schema": {"type": "string", "enum": ["a", "b"]},
                    },
                    {"name": "state", "in": "query", "schema": {"type": "array", "items": {"type": "string"}}},
                    {"name": "page", "in": "query", "schema": {"type": "integer"}},
                    {"name": "page_size", "in": "query", "schema": {"type": "integer"}},
                    {"name": "o", "in": "query", "schema": {"type": "string"}},
                    {"name": "field", "in": "query", "schema": {"type": "array", "items": {"type": "string"}}},
                    {"name": "X-Request-Id", "in": "header", "schema": {"type": "string"}},
                ],
                "responses": {"200": json_response({"type": "array", "items": ref("Project")})},
            },
            "post": {
                "operationId": "projects_create",
                "requestBody": json_body(ref("ProjectRequest")),
                "responses": {"201": json_response(ref("Project"), "Created")},
            },
        },
        "/api/projects/{uuid}/": {
            "parameters": [UUID_PATH_PARAM],
            "get": {
                "operationId": "projects_retrieve",
                "responses": {"200": json_response(ref("Project"))},
            },
            "patch": {
                "operationId": "projects_partial_update",
                "requestBody": json_body(ref("PatchedProjectRequest")),
                "responses": {"200": json_response(ref("Project"))},
            },
            "delete": {
                "operationId": "projects_destroy",
                "responses": {"204": {"description": "No response body"}},
            },
        },
        "/api/openstack-instances/": {
            "get": {
                "operationId": "openstack_instances_list",
                "responses": {"200": json_response({"type": "array", "items": ref("Instance")})},
            },
        },
        "/api/openstack-instances/{uuid}/": {
            "parameters": [UUID_PATH_PARAM],
            "get": {
                "operationId": "openstack_instances_retrieve",
                "responses": {"200": json_response(ref("Instance"))},
            },
            "patch": {
                "operationId": "openstack_instances_partial_update",
                "requestBody": json_body(ref("PatchedInstanceRequest")),
                "responses": {"200": json_response(ref("Instance"))},
            },
            "delete": {
                "operationId": "openstack_instances_destroy",
                "responses": {"204": {"description": "No response body"}},
            },
        },
        "/api/openstack-instances/{uuid}/update_ports/": {
            "post": {
                "operationId": "openstack_instances_update_ports",
                "requestBody": json_body(ref("InstancePortsUpdateRequest")),
                "responses": {"200": {"description": "No response body"}},
            },
        },
        "/api/openstack-instances/{uuid}/start/": {
            "post": {
                "operationId": "openstack_instances_start",
                "responses": {"202": {"description": "No response body"}},
            },
        },
        "/api/openstack-tenants/{uuid}/create_security_group/": {
            "post": {
                "operationId": "openstack_tenants_create_security_group",
                "requestBody": json_body(ref("SecurityGroupRequest")),
                "responses": {"201": json_response(ref("SecurityGroup"), "Created")},
            },
        },
        "/api/openstack-security-groups/": {
            "get": {
                "operationId": "openstack_security_groups_list",
                "responses": {"200": json_response({"type": "array", "items": ref("SecurityGroup")})},
            },
        },
        "/api/openstack-security-groups/{uuid}/": {
            "get": {
                "operationId": "openstack_security_groups_retrieve",
                "responses": {"200": json_response(ref("SecurityGroup"))},
            },
            "patch": {
                "operationId": "openstack_security_groups_partial_update",
                "requestBody": json_body(ref("PatchedSecurityGroupRequest")),
                "responses": {"200": json_response(ref("SecurityGroup"))},
            },
            "delete": {
                "operationId": "openstack_security_groups_destroy",
                "responses": {"204": {"description": "No response body"}},
            },
        },
        "/api/customers/": {
            "get": {
                "operationId": "customers_list",
                "responses": {"200": json_response({"type": "array", "items": ref("Customer")})},
            },
        },
    },
    "components": {
        "schemas": {
            "Project": {
                "type": "object",
                "properties": {
                    "url": {"type": "string", "format": "uri", "readOnly": True},
                    "uuid": {"type": "string", "format": "uuid", "readOnly": True},
                    "name": {"type": "string", "maxLength": 500},
                    "description": {"type": "string"},
                    "customer": {"type": "string", "format": "uri"},
                    "customer_name": {"type": "string", "readOnly": True},
                    "created": {"type": "string", "format": "date-time", "readOnly": True},
                    "marketplace_resource_uuid": {"type": "string", "readOnly": True},
                    "backend_id": {"type": "string"},
                },
                "required": ["name", "customer"],
            },
            "ProjectRequest": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "description": {"type": "string"},
                    "customer": {"type": "string", "format": "uri"},
                    "backend_id": {"type": "string"},
                },
                "required": ["name", "customer"],
            },
            "PatchedProjectRequest": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "description": {"type": "string"},
                    "backend_id": {"type": "string"},
                },
            },
            "Instance": {
                "type": "object",
                "properties": {
                    "url": {"type": "string", "format": "uri", "readOnly": True},
                    "uuid": {"type": "string", "format": "uuid", "readOnly": True},
                    "name": {"type": "string"},
                    "description": {"type": "string", "description": "Instance description"},
                    "state": {"type": "string", "readOnly": True, "enum": ["OK", "Erred", "Creating"]},
                    "flavor_name": {"type": "string", "readOnly": True},
                    "ports": {"type": "array", "items": ref("InstancePort")},
                    "security_groups": {"type": "array", "items": ref("SecurityGroupRef")},
                    "floating_ips": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "url": {"type": "string", "format": "uri"},
                                "address": {"type": "string", "readOnly": True},
                            },
                        },
                    },
                    "tags": {"type": "array", "items": {"type": "string"}},
                    "metadata": {"type": "object", "additionalProperties": {"type": "string"}},
                    "created": {"type": "string", "format": "date-time", "readOnly": True},
                    "marketplace_resource_uuid": {"type": "string", "readOnly": True},
                    "project": {"type": "string", "format": "uri"},
                    "offering": {"type": "string", "format": "uri"},
                    "total": {"type": "string", "pattern": "^-?\\d{0,10}(?:\\.\\d{0,10})?$", "readOnly": True},
                },
            },
            "InstancePort": {
                "type": "object",
                "properties": {
                    "fixed_ips": {"type": "array", "items": ref("FixedIp")},
                    "subnet": {"type": "string", "format": "uri"},
                    "mac_address": {"type": "string", "readOnly": True},
                },
            },
            "FixedIp": {
                "type": "object",
                "properties": {
                    "ip_address": {"type": "string"},
                    "subnet_id": {"type": "string"},
                },
            },
            "SecurityGroupRef": {
                "type": "object",
                "properties": {
                    "url": {"type": "string", "format": "uri"},
                    "name": {"type": "string", "readOnly": True},
                },
            },
            "OpenStackInstanceCreateOrderAttributes": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "description": {"type": "string"},
                    "flavor": {"type": "string", "format": "uri"},
                    "image": {"type": "string", "format": "uri"},
                    "ports": {"type": "array", "items": ref("InstancePort")},
                    "security_groups": {"type": "array", "items": ref("SecurityGroupRef")},
                    "system_volume_size": {"type": "integer", "minimum": 1024},
                },
                "required": ["name", "flavor", "image", "ports"],
            },
            "PatchedInstanceRequest": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "description": {"type": "string"},
                },
            },
            "InstancePortsUpdateRequest": {
                "type": "object",
                "properties": {
                    "ports": {"type": "array", "items": ref("InstancePort")},
                },
                "required": ["ports"],
            },
            "SecurityGroupRule": {
                "type": "object",
                "properties": {
                    "id": {"type": "integer", "readOnly": True},
                    "protocol": {"type": "string", "enum": ["tcp", "udp", "icmp", "", None]},
                    "from_port": {"type": "integer", "minimum": -1, "maximum": 65535},
                    "to_port": {"type": "integer", "minimum": -1, "maximum": 65535},
                    "cidr": {"type": "string"},
                },
            },
            "SecurityGroupRequest": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "description": {"type": "string"},
                    "rules": {"type": "array", "items": ref("SecurityGroupRule")},
                },
                "required": ["name"],
            },
            "SecurityGroup": {
                "type": "object",
                "properties": {
                    "url": {"type": "string", "format": "uri", "readOnly": True},
                    "uuid": {"type": "string", "format": "uuid", "readOnly": True},
                    "name": {"type": "string"},
                    "description": {"type": "string"},
                    "tenant": {"type": "string", "format": "uri", "readOnly": True},
                    "tenant_name": {"type": "string", "readOnly": True},
                    "rules": {"type": "array", "items": ref("SecurityGroupRule")},
                    "state": {"type": "string", "readOnly": True, "enum": ["OK", "Erred"]},
                },
            },
            "PatchedSecurityGroupRequest": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "description": {"type": "string"},
                },
            },
            "Customer": {
                "type": "object",
                "properties": {
                    "url": {"type": "string", "format": "uri", "readOnly": True},
                    "uuid": {"type": "string", "format": "uuid", "readOnly": True},
                    "name": {"type": "string"},
                    "abbreviation": {"type": "string"},
                    "email": {"type": "string", "format": "email"},
                    "is_service_provider": {"type": "boolean", "readOnly": True},
                    "created": {"type": "string", "format": "date-time", "readOnly": True},
                },
            },
        }
    },
}


# Project membership: a relation between a project and a user
LINK_PATHS = {
    "/api/projects/{uuid}/add_user/": {
        "parameters": [UUID_PATH_PARAM],
        "post": {
            "operationId": "projects_add_user",
            "requestBody": json_body(ref("UserRoleCreateRequest")),
            "responses": {"201": json_response(ref("UserRoleCreateRequest"), "Created")},
        },
    },
    "/api/projects/{uuid}/delete_user/": {
        "parameters": [UUID_PATH_PARAM],
        "post": {
            "operationId": "projects_delete_user",
            "requestBody": json_body(ref("UserRoleDeleteRequest")),
            "responses": {"200": {"description": "No response body"}},
        },
    },
    "/api/project-permissions/": {
        "get": {
            "operationId": "project_permissions_list",
            "responses": {"200": json_response({"type": "array", "items": ref("ProjectPermission")})},
        },
    },
    "/api/project-permissions/{uuid}/": {
        "parameters": [UUID_PATH_PARAM],
        "get": {
            "operationId": "project_permissions_retrieve",
            "responses": {"200": json_response(ref("ProjectPermission"))},
        },
    },
}

LINK_SCHEMAS = {
    "UserRoleCreateRequest": {
        "type": "object",
        "properties": {
            "role": {"type": "string"},
            "user": {"type": "string", "format": "uri"},
            "expiration_time": {"type": "string", "format": "date-time"},
        },
        "required": ["role", "user"],
    },
    "UserRoleDeleteRequest": {
        "type": "object",
        "properties": {
            "role": {"type": "string"},
            "user": {"type": "string", "format": "uri"},
        },
        "required": ["role", "user"],
    },
    "ProjectPermission": {
        "type": "object",
        "properties": {
            "url": {"type": "string", "format": "uri", "readOnly": True},
            "uuid": {"type": "string", "format": "uuid", "readOnly": True},
            "role": {"type": "string"},
            "user": {"type": "string", "format": "uri", "readOnly": True},
            "project": {"type": "string", "format": "uri", "readOnly": True},
            "expiration_time": {"type": "string", "format": "date-time"},
        },
    },
}

LINK_RESOURCE = {
    "name": "structure_project_permission",
    "base_operation_id": "project_permissions",
    "link_op": "projects_add_user",
    "unlink_op": "projects_delete_user",
    "source": {"param": "project", "retrieve_op": "projects_retrieve"},
    "target": {"param": "user"},
    "link_params": [{"name": "notify", "type": "boolean"}],
}

CONFIG_DATA = {
    "generator": {
        "openapi_schema": "openapi.yaml",
        "provider_name": "waldur",
        "excluded_fields": ["marketplace_resource_uuid"],
        "set_fields": ["security_groups"],
    },
    "resources": [
        {"name": "structure_project", "base_operation_id": "projects"},
        {
            "name": "openstack_instance",
            "base_operation_id": "openstack_instances",
            "plugin": "order",
            "offering_type": "OpenStack.Instance",
            "update_actions": {
                "update_ports": {"param": "ports", "operation": "openstack_instances_update_ports"},
            },
            "actions": ["start"],
            "termination_attributes": [{"name": "delete_volumes", "type": "boolean"}],
        },
        {
            "name": "openstack_security_group",
            "base_operation_id": "openstack_security_groups",
            "create_operation": {
                "operation_id": "openstack_tenants_create_security_group",
                "path_params": {"uuid": "tenant"},
            },
        },
    ],
    "data_sources": [
        {"name": "structure_customer", "base_operation_id": "customers"},
    ],
}


@pytest.fixture
def openapi_spec():
    """A fresh copy of the sample OpenAPI document"""
    return copy.deepcopy(OPENAPI_SPEC)


@pytest.fixture
def provider(openapi_spec):
    return SchemaProvider(openapi_spec)


@pytest.fixture
def config_data():
    return copy.deepcopy(CONFIG_DATA)


@pytest.fixture
def app_config(config_data):
    return AppConfig.from_dict(config_data)


@pytest.fixture
def link_spec(openapi_spec):
    """The sample document extended with project membership endpoints"""
    openapi_spec["paths"].update(copy.deepcopy(LINK_PATHS))
    openapi_spec["components"]["schemas"].update(copy.deepcopy(LINK_SCHEMAS))
    return openapi_spec


@pytest.fixture
def link_config_data(config_data):
    config_data["resources"].append(copy.deepcopy(LINK_RESOURCE))
    return config_data
