"""
provider-modelgen - canonical resource models from OpenAPI documents

Pipeline:
- SchemaWalker: schema node → field descriptors
- FieldReconciler: create/update/response field sets → one Model
- StructDeduplicator: stable names for nested shapes
"""

__version__ = "0.1.0"
