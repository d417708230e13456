"""Load Docs API documents serialized as JSON files."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Union

from gdoc_renderer.model.document_model import Document
from gdoc_renderer.parser.document_parser import DocumentParser
from gdoc_renderer.utils.errors import DocumentDecodeError
from gdoc_renderer.utils.logger import get_logger

LOGGER = get_logger(__name__)


def load_document(path: Union[str, Path]) -> Document:
    """Read and decode a document JSON file."""
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentDecodeError(f"Cannot read document {path}") from exc

    LOGGER.debug("Loaded %d bytes from %s", len(raw), path.name)
    return parse_document(raw, source=path.name)


def parse_document(raw: Union[str, bytes], source: str = "<string>") -> Document:
    """Decode a JSON string into a ``Document``."""
    try:
        payload: Any = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DocumentDecodeError(f"{source}: invalid JSON: {exc}") from exc
    return DocumentParser(payload).parse()
