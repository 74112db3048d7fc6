"""
Schema Provider - Read-only access to a loaded OpenAPI document.

Supports:
- Operation lookup by operationId
- Named component schemas
- Request/response body schemas (application/json)
- $ref resolution (local JSON pointers)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from modelgen.errors import SchemaNotFoundError

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")
JSON_CONTENT = "application/json"
SUCCESS_CODES = ("200", "201", "204")

# Upper bound on chained references ($ref -> $ref -> ...)
MAX_REF_HOPS = 32


@dataclass
class Operation:
    """An operation located in the document"""
    operation_id: str
    path: str
    method: str  # "GET", "POST", ...
    spec: Dict[str, Any] = field(default_factory=dict)
    path_parameters: List[Dict[str, Any]] = field(default_factory=list)


class SchemaProvider:
    """
    Serves schema nodes out of a parsed OpenAPI document

    The document is treated as an immutable snapshot: nothing here writes
    to it, and returned nodes must not be modified by callers.

    Usage:
    ```python
    provider = SchemaProvider(spec)
    schema = provider.get_operation_response_schema("projects_retrieve")
    node, ref_name = provider.resolve(schema)
    ```
    """

    def __init__(self, spec: Dict[str, Any]):
        """
        Initialize provider

        Args:
            spec: OpenAPI document (parsed from JSON/YAML)
        """
        self.spec = spec or {}
        self._operations: Dict[str, Operation] = {}
        self._index_operations()

    @property
    def title(self) -> str:
        return self.spec.get("info", {}).get("title", "Unknown API")

    @property
    def version(self) -> str:
        return str(self.spec.get("info", {}).get("version", ""))

    @property
    def operation_count(self) -> int:
        return len(self._operations)

    def _index_operations(self) -> None:
        """Index operations by operationId, first occurrence in path order wins"""
        paths = self.spec.get("paths") or {}
        for path in sorted(paths):
            path_item = paths[path] or {}
            shared_params = path_item.get("parameters") or []
            for method in HTTP_METHODS:
                operation = path_item.get(method)
                if not isinstance(operation, dict):
                    continue
                operation_id = operation.get("operationId")
                if not operation_id:
                    continue
                if operation_id in self._operations:
                    logger.warning(f"Duplicate operationId {operation_id} at {method.upper()} {path}, ignoring")
                    continue
                self._operations[operation_id] = Operation(
                    operation_id=operation_id,
                    path=path,
                    method=method.upper(),
                    spec=operation,
                    path_parameters=list(shared_params),
                )

        logger.debug(f"Indexed {len(self._operations)} operations")

    def has_operation(self, operation_id: str) -> bool:
        return operation_id in self._operations

    def get_operation(self, operation_id: str) -> Operation:
        """
        Get an operation by its operationId

        Raises:
            SchemaNotFoundError: If no operation has this id
        """
        operation = self._operations.get(operation_id)
        if operation is None:
            raise SchemaNotFoundError(operation_id, f"Operation not found: {operation_id}")
        return operation

    def find_operation(self, operation_id: str) -> Optional[Operation]:
        return self._operations.get(operation_id)

    def get_schema(self, name: str) -> Dict[str, Any]:
        """
        Get a named schema from components/schemas

        Raises:
            SchemaNotFoundError: If the schema is not declared
        """
        schemas = (self.spec.get("components") or {}).get("schemas") or {}
        if name not in schemas:
            raise SchemaNotFoundError(name)
        return {"$ref": f"#/components/schemas/{name}"}

    def get_operation_request_schema(self, operation_id: str) -> Dict[str, Any]:
        """
        Get the application/json request body schema of an operation

        Raises:
            SchemaNotFoundError: If the operation or its JSON body is absent
        """
        operation = self.get_operation(operation_id)
        body, _ = self.resolve(operation.spec.get("requestBody"))
        if not body:
            raise SchemaNotFoundError(operation_id, f"Operation {operation_id} has no request body")

        schema = ((body.get("content") or {}).get(JSON_CONTENT) or {}).get("schema")
        if schema is None:
            raise SchemaNotFoundError(
                operation_id, f"Operation {operation_id} has no {JSON_CONTENT} request body"
            )
        return schema

    def get_operation_response_schema(self, operation_id: str) -> Dict[str, Any]:
        """
        Get the first success (200/201/204) application/json response schema

        Raises:
            SchemaNotFoundError: If the operation or a JSON success response is absent
        """
        operation = self.get_operation(operation_id)
        responses = operation.spec.get("responses") or {}

        for code in SUCCESS_CODES:
            # YAML loads unquoted status codes as integers
            response = responses.get(code, responses.get(int(code)))
            response, _ = self.resolve(response)
            if not response:
                continue
            schema = ((response.get("content") or {}).get(JSON_CONTENT) or {}).get("schema")
            if schema is not None:
                return schema

        raise SchemaNotFoundError(
            operation_id,
            f"Operation {operation_id} has no success response with {JSON_CONTENT} content",
        )

    def get_parameters(self, operation_id: str) -> List[Dict[str, Any]]:
        """Resolved parameters of an operation (path-level ones first)"""
        operation = self.get_operation(operation_id)
        params = []
        for raw in operation.path_parameters + list(operation.spec.get("parameters") or []):
            param, _ = self.resolve(raw)
            if param:
                params.append(param)
        return params

    def resolve(self, node: Optional[Dict[str, Any]]) -> Tuple[Optional[Dict[str, Any]], str]:
        """
        Follow a $ref chain

        Returns:
            (resolved node or None, name of the first reference or "")
        """
        if not isinstance(node, dict):
            return None, ""

        ref_name = ""
        seen = set()
        while "$ref" in node:
            ref = node["$ref"]
            if not ref_name:
                ref_name = ref.rsplit("/", 1)[-1]
            if ref in seen or len(seen) >= MAX_REF_HOPS:
                logger.warning(f"Circular reference detected: {ref}")
                return None, ref_name
            seen.add(ref)

            target = self._lookup_pointer(ref)
            if target is None:
                logger.debug(f"Unresolvable reference {ref}")
                return None, ref_name
            node = target

        return node, ref_name

    def _lookup_pointer(self, ref: str) -> Optional[Dict[str, Any]]:
        """Resolve a local JSON pointer such as #/components/schemas/Project"""
        if not ref.startswith("#/"):
            return None

        obj: Any = self.spec
        for token in ref[2:].split("/"):
            key = token.replace("~1", "/").replace("~0", "~")
            if isinstance(obj, dict) and key in obj:
                obj = obj[key]
            else:
                return None

        return obj if isinstance(obj, dict) else None
