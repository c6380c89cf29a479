"""
Properties Store

Durable key-value storage for the sign-up binding, scoped to one form.
Two implementations share the same interface:
- InMemoryPropertiesStore: lost on restart, used for local runs and tests
- JsonFilePropertiesStore: persisted to a JSON file keyed by form ID
"""

from typing import Dict, Optional, Protocol
import json
import logging
import os
import tempfile

logger = logging.getLogger(__name__)


class PropertiesStore(Protocol):
    """Key-value repository the configuration depends on."""

    def get(self, key: str) -> Optional[str]:
        ...

    def get_all(self) -> Dict[str, str]:
        ...

    def set_many(self, values: Dict[str, str]) -> None:
        ...

    def delete_all(self) -> None:
        ...


class InMemoryPropertiesStore:
    """Properties held in a plain dict."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._properties: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._properties.get(key)

    def get_all(self) -> Dict[str, str]:
        return dict(self._properties)

    def set_many(self, values: Dict[str, str]) -> None:
        self._properties.update(values)

    def delete_all(self) -> None:
        self._properties.clear()


class JsonFilePropertiesStore:
    """
    Properties persisted in a JSON file.

    The file maps namespace -> {key: value} so several forms can share one
    file without seeing each other's properties.

    Args:
        path: Location of the JSON file (created on first write)
        namespace: Scope of this store, normally the form ID
    """

    def __init__(self, path: str, namespace: str):
        self.path = path
        self.namespace = namespace

    def _load(self) -> Dict[str, Dict[str, str]]:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            content = f.read()
        if not content.strip():
            return {}
        return json.loads(content)

    def _dump(self, data: Dict[str, Dict[str, str]]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        # Replace atomically
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
            os.replace(tmp_path, self.path)
        except Exception:
            os.unlink(tmp_path)
            raise

    def get(self, key: str) -> Optional[str]:
        return self._load().get(self.namespace, {}).get(key)

    def get_all(self) -> Dict[str, str]:
        return dict(self._load().get(self.namespace, {}))

    def set_many(self, values: Dict[str, str]) -> None:
        data = self._load()
        data.setdefault(self.namespace, {}).update(values)
        self._dump(data)

    def delete_all(self) -> None:
        data = self._load()
        if data.pop(self.namespace, None) is not None:
            self._dump(data)
        logger.info(f"Deleted all properties for namespace {self.namespace}")
