"""
Named Configuration Store

Saves and loads Parameters under user-chosen names. All configurations live
in one JSON object stored under a single key of a JSON document, so the file
can share space with other settings.

The store belongs to the caller, not to the engine: a failed load or save
raises PersistenceError and never touches engine state.
"""

import json
import os
import tempfile
from typing import Any, Dict, Mapping, Optional, Union

from nq_config import Parameters
from nq_constants import StorageConstants
from nq_exceptions import PersistenceError
from nq_logging import get_logger


class ConfigStore:
    """JSON-file backed mapping of name -> Parameters."""

    def __init__(self, path: str = StorageConstants.DEFAULT_STORE_FILE,
                 storage_key: str = StorageConstants.STORAGE_KEY):
        """
        Args:
            path: JSON document holding the store
            storage_key: Top-level key the configurations are kept under
        """
        self.path = path
        self.storage_key = storage_key
        self.logger = get_logger()

    def _read_document(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Failed to read configuration store: {e}",
                                   path=self.path, operation="load") from e

        if not isinstance(document, dict):
            raise PersistenceError("Configuration store is not a JSON object",
                                   path=self.path, operation="load")
        return document

    def _read_configs(self) -> Dict[str, Any]:
        configs = self._read_document().get(self.storage_key, {})
        if not isinstance(configs, dict):
            raise PersistenceError(f"'{self.storage_key}' is not a JSON object",
                                   path=self.path, operation="load")
        return configs

    def _write_configs(self, configs: Dict[str, Any]):
        document = self._read_document()
        document[self.storage_key] = configs

        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(dir=directory, suffix='.tmp')
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(document, f, indent=2)
            os.replace(temp_path, self.path)
        except OSError as e:
            raise PersistenceError(f"Failed to save configuration store: {e}",
                                   path=self.path, operation="save") from e

    def save_config(self, name: str, params: Union[Parameters, Mapping[str, Any]]) -> Parameters:
        """
        Store parameters under ``name``, replacing any previous entry.

        Returns:
            The validated Parameters that were written
        """
        if not name or not name.strip():
            raise PersistenceError("Configuration name cannot be empty",
                                   path=self.path, operation="save")

        if not isinstance(params, Parameters):
            params = Parameters.from_raw(params)

        configs = self._read_configs()
        configs[name.strip()] = params.to_dict()
        self._write_configs(configs)
        self.logger.info("Configuration saved", name=name.strip(), path=self.path)
        return params

    def load_config(self, name: str) -> Optional[Parameters]:
        """Parameters stored under ``name`` (sanitized and clamped), or None."""
        raw = self._read_configs().get(name)
        if raw is None:
            return None
        if not isinstance(raw, dict):
            raise PersistenceError(f"Configuration '{name}' is not a JSON object",
                                   path=self.path, operation="load")
        return Parameters.from_raw(raw)

    def get_saved_configs(self) -> Dict[str, Parameters]:
        """Every stored configuration, keyed by name. Malformed entries are skipped."""
        result = {}
        for name, raw in self._read_configs().items():
            if isinstance(raw, dict):
                result[name] = Parameters.from_raw(raw)
            else:
                self.logger.warning("Skipping malformed configuration", name=name)
        return result

    def delete_config(self, name: str) -> bool:
        configs = self._read_configs()
        if name not in configs:
            return False
        del configs[name]
        self._write_configs(configs)
        return True
