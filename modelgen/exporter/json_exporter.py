"""JSON exporter."""
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

from modelgen.dedup.registry import NameRegistry, collect_unique_structs
from modelgen.schema.models import ResourceModel

logger = logging.getLogger(__name__)


class JsonExporter:
    """Export resource models and the shared nested type registry to JSON."""

    def __init__(self, provider_name: str = "", source: str = ""):
        self.provider_name = provider_name
        self.source = source

    def build_document(self, models: List[ResourceModel], registry: NameRegistry) -> Dict[str, Any]:
        """Assemble the exported document."""
        structs = collect_unique_structs(*[m.model_fields for m in models])

        return {
            "metadata": {
                "created_at": datetime.now().isoformat(),
                "provider": self.provider_name,
                "openapi_schema": self.source,
                "resources": sum(1 for m in models if not m.is_data_source_only),
                "data_sources": sum(1 for m in models if m.is_data_source_only),
                "nested_types": len(registry),
            },
            "models": [m.to_dict() for m in models],
            "nested_types": [
                {
                    "name": s.attr_type_ref,
                    "fields": [p.to_dict() for p in s.properties],
                }
                for s in structs
            ],
        }

    def export(self, output_file: Path, models: List[ResourceModel], registry: NameRegistry) -> Path:
        """Export to JSON file."""
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        data = self.build_document(models, registry)
        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, default=str)

        logger.info(f"Exported {len(models)} models to {output_file}")
        return output_file
