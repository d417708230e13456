"""Runtime configuration for the publish pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml

from gdoc_renderer.utils.errors import GdocRendererError

DEFAULT_CONCURRENCY = 4


class ConfigError(GdocRendererError):
    """The configuration file is missing or invalid."""


@dataclass(frozen=True)
class RendererConfig:
    """Read-only settings shared by every render task."""

    output_dir: Path = Path("content")
    concurrency: int = DEFAULT_CONCURRENCY
    log_level: str = "INFO"
    url_to_slug: Mapping[str, str] = field(default_factory=dict)
    default_author: Optional[str] = None


def load_config(path: Path) -> RendererConfig:
    """Read a YAML config file. Relative paths are resolved against its directory."""
    try:
        with open(path, encoding="utf-8") as handle:
            raw = yaml.safe_load(handle) or {}
    except OSError as exc:
        raise ConfigError(f"Failed to open {path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")

    return config_from_mapping(raw, base_dir=Path(path).parent)


def config_from_mapping(raw: Mapping[str, object], base_dir: Path = Path(".")) -> RendererConfig:
    known = {"output_dir", "concurrency", "log_level", "url_to_slug", "default_author"}
    unknown = set(raw) - known
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")

    url_to_slug: Dict[str, str] = {}
    for url, slug in dict(raw.get("url_to_slug") or {}).items():
        url_to_slug[str(url)] = _normalize_slug(str(slug))

    try:
        concurrency = int(raw.get("concurrency", DEFAULT_CONCURRENCY))  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid concurrency: {raw.get('concurrency')!r}") from exc
    if concurrency < 1:
        raise ConfigError("concurrency must be at least 1")

    return RendererConfig(
        output_dir=base_dir / Path(str(raw.get("output_dir", "content"))),
        concurrency=concurrency,
        log_level=str(raw.get("log_level", "INFO")).upper(),
        url_to_slug=url_to_slug,
        default_author=raw.get("default_author"),  # type: ignore[arg-type]
    )


def _normalize_slug(slug: str) -> str:
    # Slugs are URL paths: leading '/', no trailing '/'
    slug = slug.rstrip("/")
    if not slug.startswith("/"):
        slug = "/" + slug
    return slug
