"""
JSON Store - Durable key-value document

Module: persistence.json_store
Date: 2026-10-17
Version: 0.1.0-alpha

CHANGELOG:
[2026-10-17 v0.1.0-alpha] Initial implementation
  - Key-value document stored as a single JSON object
  - get / set / remove of several keys in one atomic write
  - Automatic directory creation
  - Atomic writes with 0600 permissions

ARCHITECTURE:
JSONStore is the on-disk counterpart of browser localStorage:
  - Values are plain strings (callers serialize structured values)
  - A missing file reads as an empty document
  - Writes go to a temp file which is then renamed over the target,
    so a reader never observes a half-written document
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, Optional


class JSONStoreError(Exception):
    """Base JSON store error"""
    pass


class JSONStoreIOError(JSONStoreError):
    """File I/O error"""
    pass


class JSONStoreFormatError(JSONStoreError):
    """Document is not a JSON object of strings"""
    pass


class JSONStore:
    """
    Key-value persistence backed by one JSON file.

    Handles:
    - Lazy file creation (nothing is written until the first set)
    - Atomic writes (temp file + rename)
    - Multi-key updates in a single write
    """

    def __init__(self, file_path: str):
        """
        Initialize JSON store

        Args:
            file_path: Path to JSON file
        """
        self.logger = logging.getLogger("persistence.json_store")
        self.file_path = Path(file_path)

    def load(self) -> Dict[str, str]:
        """
        Load the whole document

        Returns:
            Mapping of keys to string values (empty if file is missing)

        Raises:
            JSONStoreIOError: If file cannot be read
            JSONStoreFormatError: If content is not a JSON object
        """
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as e:
            raise JSONStoreFormatError(f"Invalid JSON in {self.file_path}: {e}")
        except OSError as e:
            raise JSONStoreIOError(f"Failed to read {self.file_path}: {e}")

        if not isinstance(data, dict):
            raise JSONStoreFormatError(
                f"Expected a JSON object in {self.file_path}, got {type(data).__name__}"
            )
        return data

    def get(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None"""
        value = self.load().get(key)
        if value is not None and not isinstance(value, str):
            raise JSONStoreFormatError(f"Value of '{key}' is not a string")
        return value

    def update(
        self,
        values: Optional[Dict[str, str]] = None,
        remove: Iterable[str] = (),
    ) -> None:
        """
        Set and remove several keys in one atomic write

        Args:
            values: Keys to set (overwriting prior values)
            remove: Keys to delete (missing keys are ignored)

        Raises:
            JSONStoreIOError: If the write fails
            JSONStoreFormatError: If the existing document is unreadable
        """
        try:
            data = self.load()
        except JSONStoreFormatError:
            # A corrupt document is replaced rather than merged
            self.logger.warning(f"Discarding unreadable document {self.file_path}")
            data = {}

        for key in remove:
            data.pop(key, None)
        if values:
            data.update(values)

        self._write_atomic(data)

    def set(self, key: str, value: str) -> None:
        """Set a single key"""
        self.update({key: value})

    def remove(self, *keys: str) -> None:
        """Remove keys (missing keys are ignored)"""
        self.update(remove=keys)

    def _write_atomic(self, data: Dict[str, str]) -> None:
        """
        Atomic write: write to temp file, then rename

        Args:
            data: Data to write

        Raises:
            JSONStoreIOError: If write fails
        """
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            temp_path = self.file_path.with_suffix(".tmp")

            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)

            temp_path.replace(self.file_path)

            # rw-------
            self.file_path.chmod(0o600)

        except OSError as e:
            raise JSONStoreIOError(f"Failed to write {self.file_path}: {e}")


# ============================================================================
# Unit Tests
# ============================================================================

if __name__ == "__main__":
    import os
    import unittest
    import tempfile
    import shutil

    class TestJSONStore(unittest.TestCase):
        """Test suite for JSONStore"""

        def setUp(self):
            """Setup before each test"""
            self.test_dir = tempfile.mkdtemp()
            self.store_path = os.path.join(self.test_dir, "nested", "session.json")

        def tearDown(self):
            """Cleanup after each test"""
            if os.path.exists(self.test_dir):
                shutil.rmtree(self.test_dir)

        def test_missing_file_reads_empty(self):
            """Test missing document reads as empty"""
            store = JSONStore(self.store_path)
            self.assertEqual(store.load(), {})
            self.assertFalse(os.path.exists(self.store_path))

        def test_update_sets_and_removes(self):
            """Test multi-key update in one write"""
            store = JSONStore(self.store_path)
            store.update({"a": "1", "b": "2"})
            store.update({"c": "3"}, remove=("a",))
            self.assertEqual(store.load(), {"b": "2", "c": "3"})

        def test_file_permissions(self):
            """Test file has restrictive permissions"""
            store = JSONStore(self.store_path)
            store.set("key", "value")
            mode = os.stat(self.store_path).st_mode & 0o777
            self.assertEqual(mode, 0o600)

        def test_invalid_json_raises_error(self):
            """Test invalid JSON raises error"""
            os.makedirs(os.path.dirname(self.store_path))
            with open(self.store_path, "w") as f:
                f.write("{invalid json}")

            store = JSONStore(self.store_path)
            with self.assertRaises(JSONStoreFormatError):
                store.load()

    unittest.main()
