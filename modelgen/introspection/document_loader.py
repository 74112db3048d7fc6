"""
Document Loader - Loads OpenAPI documents from disk or over HTTP.

Features:
- JSON and YAML documents (by extension, falling back to content sniffing)
- Remote documents fetched through a requests session
- Optional bearer token authentication
- File cache for remote documents with 1-hour TTL
"""

import hashlib
import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

import requests
import yaml

from modelgen.errors import DocumentLoadError
from .schema_provider import SchemaProvider

logger = logging.getLogger(__name__)


class DocumentLoader:
    """
    Loads an OpenAPI document and wraps it in a SchemaProvider

    Usage:
    ```python
    loader = DocumentLoader("https://api.example.com/api/schema/", token="...")
    provider = loader.load_provider()
    print(f"Indexed {provider.operation_count} operations")
    ```
    """

    # Cache TTL in seconds (1 hour)
    CACHE_TTL = 3600

    def __init__(
        self,
        source: str,
        token: Optional[str] = None,
        timeout: int = 30,
        cache_dir: Optional[Path] = None,
        use_cache: bool = True,
    ):
        """
        Initialize DocumentLoader

        Args:
            source: File path or http(s) URL of the document
            token: Bearer token sent with remote requests
            timeout: HTTP request timeout in seconds
            cache_dir: Directory for caching remote documents
            use_cache: Disable to always fetch remote documents
        """
        self.source = str(source)
        self.timeout = timeout
        self.cache_dir = Path(cache_dir) if cache_dir else Path(".cache/schemas")
        self.use_cache = use_cache

        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/json, application/yaml"})
        if token:
            self.session.headers.update({"Authorization": f"Bearer {token}"})

    @property
    def is_remote(self) -> bool:
        return self.source.startswith(("http://", "https://"))

    def load(self, force_refresh: bool = False) -> Dict[str, Any]:
        """
        Load the raw document

        Args:
            force_refresh: Bypass the file cache for remote documents

        Returns:
            Parsed document

        Raises:
            DocumentLoadError: If the document cannot be read or parsed
        """
        if self.is_remote:
            spec = self._load_remote(force_refresh)
        else:
            spec = self._load_file()

        if not isinstance(spec, dict) or "paths" not in spec:
            raise DocumentLoadError(self.source, f"Not an OpenAPI document: {self.source}")

        logger.info(f"Loaded OpenAPI document {spec.get('info', {}).get('title', '')} from {self.source}")
        return spec

    def load_provider(self, force_refresh: bool = False) -> SchemaProvider:
        """Load the document and return a SchemaProvider over it"""
        return SchemaProvider(self.load(force_refresh))

    def _load_file(self) -> Dict[str, Any]:
        path = Path(self.source)
        if not path.is_file():
            raise DocumentLoadError(self.source, f"OpenAPI document not found: {self.source}")

        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise DocumentLoadError(self.source, details={"error": str(e)}) from e

        return self._parse(text, path.suffix.lower())

    def _load_remote(self, force_refresh: bool) -> Dict[str, Any]:
        if self.use_cache and not force_refresh:
            cached = self._try_load_file_cache()
            if cached is not None:
                logger.info("Loaded document from file cache")
                return cached

        try:
            logger.debug(f"Fetching OpenAPI document: {self.source}")
            response = self.session.get(self.source, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise DocumentLoadError(self.source, details={"error": str(e)}) from e

        content_type = response.headers.get("Content-Type", "")
        suffix = ".json" if "json" in content_type else ""
        spec = self._parse(response.text, suffix)

        if self.use_cache:
            self._save_file_cache(spec)
        return spec

    def _parse(self, text: str, suffix: str) -> Dict[str, Any]:
        """Parse JSON or YAML; YAML is tried for anything not known to be JSON"""
        try:
            if suffix == ".json":
                return json.loads(text)
            return yaml.safe_load(text)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise DocumentLoadError(
                self.source, f"Invalid document syntax in {self.source}", {"error": str(e)}
            ) from e

    def _try_load_file_cache(self) -> Optional[Dict[str, Any]]:
        """Try to load a cached document from file"""
        cache_file = self._get_cache_file_path()
        if not cache_file.exists():
            return None

        if time.time() - cache_file.stat().st_mtime > self.CACHE_TTL:
            logger.debug(f"Cache file expired: {cache_file}")
            return None

        try:
            with open(cache_file, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Error loading cache file: {e}")
            return None

    def _save_file_cache(self, spec: Dict[str, Any]) -> None:
        """Save a document to the file cache"""
        cache_file = self._get_cache_file_path()
        try:
            cache_file.parent.mkdir(parents=True, exist_ok=True)
            with open(cache_file, "w", encoding="utf-8") as f:
                json.dump(spec, f)
            logger.debug(f"Saved document to cache file: {cache_file}")
        except OSError as e:
            logger.warning(f"Error saving cache file: {e}")

    def _get_cache_file_path(self) -> Path:
        """Get cache file path based on the source URL"""
        url_hash = hashlib.md5(self.source.encode()).hexdigest()[:8]
        return self.cache_dir / f"schema_{url_hash}.json"
