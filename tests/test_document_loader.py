"""
Unit tests for DocumentLoader

Tests:
- Local JSON and YAML documents
- Remote documents over a mocked requests session
- File cache and bearer authentication
- Error reporting
"""

import json
from unittest.mock import Mock, patch

import pytest
import requests
import yaml

from modelgen.errors import DocumentLoadError
from modelgen.introspection.document_loader import DocumentLoader


@pytest.fixture
def mock_response(openapi_spec):
    response = Mock()
    response.text = json.dumps(openapi_spec)
    response.headers = {"Content-Type": "application/json"}
    response.raise_for_status.return_value = None
    return response


# ============================================================================
# TEST: local files
# ============================================================================


class TestLocalDocuments:
    """Tests for loading documents from disk"""

    def test_load_json_file(self, tmp_path, openapi_spec):
        path = tmp_path / "openapi.json"
        path.write_text(json.dumps(openapi_spec))

        spec = DocumentLoader(str(path)).load()

        assert spec["info"]["title"] == "Waldur API"

    def test_load_yaml_file(self, tmp_path, openapi_spec):
        path = tmp_path / "openapi.yaml"
        path.write_text(yaml.safe_dump(openapi_spec))

        provider = DocumentLoader(str(path)).load_provider()

        assert provider.has_operation("projects_list")

    def test_missing_file(self, tmp_path):
        with pytest.raises(DocumentLoadError, match="not found"):
            DocumentLoader(str(tmp_path / "absent.yaml")).load()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("paths: [unclosed\n")

        with pytest.raises(DocumentLoadError) as exc_info:
            DocumentLoader(str(path)).load()

        assert exc_info.value.source == str(path)

    def test_not_an_openapi_document(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(DocumentLoadError, match="Not an OpenAPI document"):
            DocumentLoader(str(path)).load()


# ============================================================================
# TEST: remote documents
# ============================================================================


class TestRemoteDocuments:
    """Tests for loading documents over HTTP"""

    @patch("requests.Session.get")
    def test_fetch_success(self, mock_get, mock_response, tmp_path):
        mock_get.return_value = mock_response

        loader = DocumentLoader("https://waldur.example.com/api/schema/", cache_dir=tmp_path)
        spec = loader.load()

        assert spec["info"]["version"] == "7.0.0"
        mock_get.assert_called_once_with("https://waldur.example.com/api/schema/", timeout=30)

    @patch("requests.Session.get")
    def test_yaml_response(self, mock_get, mock_response, openapi_spec, tmp_path):
        mock_response.text = yaml.safe_dump(openapi_spec)
        mock_response.headers = {"Content-Type": "application/vnd.oai.openapi"}
        mock_get.return_value = mock_response

        spec = DocumentLoader("https://waldur.example.com/api/schema/", cache_dir=tmp_path).load()

        assert "paths" in spec

    @patch("requests.Session.get")
    def test_file_cache_reused(self, mock_get, mock_response, tmp_path):
        mock_get.return_value = mock_response
        url = "https://waldur.example.com/api/schema/"

        DocumentLoader(url, cache_dir=tmp_path).load()
        DocumentLoader(url, cache_dir=tmp_path).load()

        assert mock_get.call_count == 1
        assert len(list(tmp_path.glob("schema_*.json"))) == 1

    @patch("requests.Session.get")
    def test_force_refresh_bypasses_cache(self, mock_get, mock_response, tmp_path):
        mock_get.return_value = mock_response
        loader = DocumentLoader("https://waldur.example.com/api/schema/", cache_dir=tmp_path)

        loader.load()
        loader.load(force_refresh=True)

        assert mock_get.call_count == 2

    @patch("requests.Session.get")
    def test_cache_disabled(self, mock_get, mock_response, tmp_path):
        mock_get.return_value = mock_response
        loader = DocumentLoader("https://waldur.example.com/api/schema/", cache_dir=tmp_path, use_cache=False)

        loader.load()
        loader.load()

        assert mock_get.call_count == 2
        assert list(tmp_path.iterdir()) == []

    def test_bearer_token_header(self, tmp_path):
        loader = DocumentLoader("https://waldur.example.com/api/schema/", token="secret", cache_dir=tmp_path)

        assert loader.session.headers["Authorization"] == "Bearer secret"

    @patch("requests.Session.get")
    def test_http_error(self, mock_get, tmp_path):
        mock_get.side_effect = requests.exceptions.ConnectionError("connection refused")

        with pytest.raises(DocumentLoadError) as exc_info:
            DocumentLoader("https://waldur.example.com/api/schema/", cache_dir=tmp_path).load()

        assert "connection refused" in str(exc_info.value)
