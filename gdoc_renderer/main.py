"""Entry-point for the document rendering pipeline."""
from __future__ import annotations

import argparse
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import yaml

from gdoc_renderer.model.document_model import Document, FrontMatter
from gdoc_renderer.parser.document_loader import load_document
from gdoc_renderer.renderer.html_renderer import render
from gdoc_renderer.renderer.html_writer import ImageResolver
from gdoc_renderer.renderer.serializer import parse_html, stable_inner_html
from gdoc_renderer.renderer.tweaks import extract_title_and_summary, import_img_elts, remove_head, rewrite_links
from gdoc_renderer.utils.config import RendererConfig, load_config
from gdoc_renderer.utils.debug import DebugDumper
from gdoc_renderer.utils.errors import GdocRendererError
from gdoc_renderer.utils.logger import get_logger, set_level

LOGGER = get_logger(__name__)


@dataclass
class Page:
    """A published page: front matter plus stable HTML content."""

    front_matter: FrontMatter
    content: str


def publish_document(
    document: Document,
    config: RendererConfig,
    *,
    slug: Optional[str] = None,
    image_resolver: Optional[ImageResolver] = None,
) -> Page:
    """Render a document and run the DOM passes that produce the final page.

    Images are resolved on the DOM, before the banner is picked from the preamble.
    """
    html = render(document)

    front_matter = FrontMatter(title=document.title or "", slug=slug, author=config.default_author)
    dom = parse_html(html)
    remove_head(dom)
    rewrite_links(dom, config.url_to_slug)
    if image_resolver is not None:
        resolved = import_img_elts(dom, image_resolver, document.document_id)
        LOGGER.debug("Resolved %d image(s) of %s", resolved, slug or document.document_id)
    extract_title_and_summary(dom, front_matter, allow_remote_banner=image_resolver is None)

    body = dom.find("body")
    if body is None:
        raise GdocRendererError("Rendered page has no <body>")
    return Page(front_matter=front_matter, content=stable_inner_html(body))


def publish_file(
    path: Path,
    config: RendererConfig,
    *,
    image_resolver: Optional[ImageResolver] = None,
    debug_dir: Optional[Path] = None,
) -> Page:
    """Load a document JSON file and publish it. The file stem is the page slug."""
    document = load_document(path)
    if debug_dir is not None:
        DebugDumper(debug_dir).dump(document, path.stem)
    return publish_document(document, config, slug=path.stem, image_resolver=image_resolver)


def render_many(
    paths: Sequence[Path],
    config: RendererConfig,
    *,
    image_resolver: Optional[ImageResolver] = None,
    debug_dir: Optional[Path] = None,
) -> Dict[Path, Union[Page, GdocRendererError]]:
    """Publish documents concurrently, one result or error per document.

    A failing document is logged and reported in the result; it does not stop
    the others. The resolver may be called from several threads at once.
    """
    results: Dict[Path, Union[Page, GdocRendererError]] = {}
    with ThreadPoolExecutor(max_workers=config.concurrency) as pool:
        futures = {
            path: pool.submit(publish_file, path, config, image_resolver=image_resolver, debug_dir=debug_dir)
            for path in paths
        }
        for path, future in futures.items():
            try:
                results[path] = future.result()
            except GdocRendererError as exc:
                LOGGER.error("Failed to render %s: %s", path.name, exc)
                results[path] = exc
    return results


def write_page(page: Page, output_dir: Path) -> Path:
    """Write ``page`` as an HTML file with a YAML front matter header."""
    output_dir.mkdir(parents=True, exist_ok=True)
    name = page.front_matter.slug or "index"
    path = output_dir / f"{name}.html"
    front_matter = yaml.safe_dump(page.front_matter.to_dict(), sort_keys=False, allow_unicode=True)
    path.write_text(f"---\n{front_matter}---\n{page.content}", encoding="utf-8")
    return path


def main(argv: Optional[List[str]] = None) -> int:
    """Render document JSON files into site pages. Returns the process exit code."""
    parser = argparse.ArgumentParser(description="Render Docs API JSON documents into HTML pages")
    parser.add_argument("documents", nargs="+", help="Document JSON files")
    parser.add_argument("--config", help="Path to a YAML config file")
    parser.add_argument("--output", help="Directory to write generated pages (overrides the config)")
    parser.add_argument("--debug", action="store_true", help="Dump decoded documents as JSON next to the pages")
    args = parser.parse_args(argv)

    config = load_config(Path(args.config)) if args.config else RendererConfig()
    set_level(config.log_level)

    output_dir = Path(args.output) if args.output else config.output_dir
    debug_dir = output_dir / "debug" if args.debug else None

    paths = [Path(p).resolve() for p in args.documents]
    results = render_many(paths, config, debug_dir=debug_dir)

    failures = 0
    for path, result in results.items():
        if isinstance(result, GdocRendererError):
            failures += 1
            continue
        written = write_page(result, output_dir)
        LOGGER.info("Rendered %s into %s", path.name, written)

    if failures:
        LOGGER.warning("%d of %d document(s) failed", failures, len(results))
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
