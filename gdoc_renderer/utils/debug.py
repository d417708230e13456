"""Helpers to persist intermediate representations for debugging."""
from __future__ import annotations

import json
from dataclasses import fields, is_dataclass
from pathlib import Path
from typing import Any

from gdoc_renderer.model.document_model import Document


class DebugDumper:
    """Writes decoded documents onto disk for inspection."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def dump(self, document: Document, name: str) -> Path:
        """Persist the decoded document model as ``<name>.json``."""
        self.directory.mkdir(parents=True, exist_ok=True)
        payload = self._serialize(document)
        if is_dataclass(document):
            payload = {"kind": type(document).__name__, **payload}
        path = self.directory / f"{name}.json"
        path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        return path

    def _serialize(self, value: Any) -> Any:
        if is_dataclass(value) and not isinstance(value, type):
            values = {f.name: getattr(value, f.name) for f in fields(value)}
            return {k: self._serialize(v) for k, v in values.items() if v is not None}
        if isinstance(value, dict):
            return {k: self._serialize(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [self._serialize_item(v) for v in value]
        return value

    def _serialize_item(self, value: Any) -> Any:
        # Union members are tagged with their variant name
        if is_dataclass(value) and not isinstance(value, type):
            return {"kind": type(value).__name__, **self._serialize(value)}
        return self._serialize(value)
