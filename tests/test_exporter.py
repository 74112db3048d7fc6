"""
Unit tests for JsonExporter
"""

import json

import pytest

from modelgen.builder.model_builder import ModelBuilder
from modelgen.exporter.json_exporter import JsonExporter


@pytest.fixture
def run(app_config, provider):
    return ModelBuilder(app_config, provider).build_all()


class TestJsonExporter:
    """Tests for the exported document"""

    def test_metadata(self, run):
        models, registry = run

        document = JsonExporter(provider_name="waldur", source="openapi.yaml").build_document(models, registry)
        metadata = document["metadata"]

        assert metadata["provider"] == "waldur"
        assert metadata["openapi_schema"] == "openapi.yaml"
        assert metadata["resources"] == 3
        assert metadata["data_sources"] == 1
        assert metadata["nested_types"] == len(registry)
        assert "created_at" in metadata

    def test_nested_types_unique_and_sorted(self, run):
        models, registry = run

        document = JsonExporter().build_document(models, registry)
        names = [t["name"] for t in document["nested_types"]]

        assert names == sorted(set(names))
        assert "InstancePort" in names
        assert "SecurityGroupRule" in names

    def test_export_writes_file(self, run, tmp_path):
        models, registry = run
        output_file = tmp_path / "out" / "models.json"

        path = JsonExporter(provider_name="waldur").export(output_file, models, registry)

        data = json.loads(path.read_text())
        assert [m["name"] for m in data["models"]] == [
            "structure_project", "openstack_instance", "openstack_security_group", "structure_customer",
        ]
        instance = data["models"][1]
        assert instance["is_order"] is True
        assert instance["nested_structs"] == ["FixedIp", "FloatingIps", "InstancePort", "SecurityGroupRef"]

    def test_field_documents_carry_type_meta(self, run):
        models, registry = run

        document = JsonExporter().build_document(models, registry)
        project = document["models"][0]
        created = next(f for f in project["model_fields"] if f["name"] == "created")

        assert created["type_meta"]["is_date_time"] is True
        assert created["server_computed"] is True
