"""Directory of per-instrument JSON records."""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from technicals.errors import MalformedInputError

METADATA_FILE = "metadata.json"


class JsonRecordStore:
    """Read and whole-record rewrite `<KEY>.json` files under one directory."""

    def __init__(self, data_dir: str, excluded_files: Iterable[str] = ()) -> None:
        self.data_dir = Path(data_dir)
        self.excluded_files = frozenset(excluded_files)

    def exists(self) -> bool:
        return self.data_dir.is_dir()

    def list_keys(self) -> list[str]:
        if not self.exists():
            return []
        return sorted(
            path.stem
            for path in self.data_dir.glob("*.json")
            if path.is_file() and path.name not in self.excluded_files
        )

    def path_for(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def load(self, key: str) -> dict[str, Any]:
        path = self.path_for(key)
        try:
            with path.open("r", encoding="utf-8") as handle:
                record = json.load(handle)
        except json.JSONDecodeError as exc:
            raise MalformedInputError(f"{path.name}: invalid JSON ({exc})") from exc
        except UnicodeDecodeError as exc:
            raise MalformedInputError(f"{path.name}: not UTF-8 text") from exc
        if not isinstance(record, dict):
            raise MalformedInputError(f"{path.name}: record must be a JSON object")
        return record

    def has(self, key: str) -> bool:
        return self.path_for(key).is_file()

    def save(self, key: str, record: dict[str, Any]) -> None:
        self._write_json(self.path_for(key), record)

    def write_metadata(self, metadata: dict[str, Any]) -> None:
        self._write_json(self.data_dir / METADATA_FILE, metadata)

    def _write_json(self, path: Path, payload: dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        text = json.dumps(payload, indent=2, ensure_ascii=False)
        descriptor, temp_name = tempfile.mkstemp(
            prefix=f".{path.stem}.", suffix=".tmp", dir=path.parent
        )
        try:
            with os.fdopen(descriptor, "w", encoding="utf-8") as handle:
                handle.write(text)
                handle.write("\n")
            os.replace(temp_name, path)
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise
