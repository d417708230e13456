"""Passes over the re-parsed DOM of a rendered page, run before serialization."""
from __future__ import annotations

import hashlib
import re
from typing import List, Mapping, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup
from bs4.element import PageElement, Tag

from gdoc_renderer.model.document_model import FrontMatter
from gdoc_renderer.renderer.html_writer import ImageReference, ImageResolver
from gdoc_renderer.utils.errors import GdocRendererError, TweakError
from gdoc_renderer.utils.logger import get_logger
from gdoc_renderer.utils.text_normalizer import collapse_whitespace

LOGGER = get_logger(__name__)

# Links copied from a signed-in browser contain the account index
DOC_USER_RE = re.compile(r"/document/u/[0-9]+/")


def remove_head(dom: BeautifulSoup) -> None:
    for head in dom.find_all("head"):
        head.decompose()


def translate_url(url: str, url_to_slug: Mapping[str, str]) -> Optional[str]:
    """Return the site path of a document URL, or ``None`` if it is not a site page."""
    base, hash_sign, fragment = url.partition("#")
    base = DOC_USER_RE.sub("/document/", base)
    slug = url_to_slug.get(base)
    if slug is None:
        return None
    return slug + hash_sign + fragment


def link_target(host: str) -> str:
    """Stable window name for external links, one per host."""
    return hashlib.sha1(host.encode("utf-8")).hexdigest()[:16].upper()


def rewrite_links(dom: BeautifulSoup, url_to_slug: Mapping[str, str]) -> None:
    """Point links to other site documents at their slug; open external links in a per-host window."""
    for anchor in dom.find_all("a", href=True):
        href = anchor["href"]
        new_href = translate_url(href, url_to_slug)
        if new_href is not None:
            LOGGER.debug("Rewriting link %s -> %s", href, new_href)
            anchor["href"] = href = new_href

        if href.startswith(("http://", "https://")):
            host = urlparse(href).hostname
            if host:
                anchor["target"] = link_target(host)


def import_img_elts(dom: BeautifulSoup, resolver: ImageResolver, doc_id: Optional[str] = None) -> int:
    """Replace the ``src`` of every ``<img>`` with the resolver's result.

    A resolver failure is raised as ``TweakError``.

    Returns the number of images resolved.
    """
    count = 0
    for img in dom.find_all("img"):
        src = img.get("src")
        image_id = img.get("id")
        if not src:
            raise TweakError("<img> tag with no 'src' attribute")
        if not image_id:
            raise TweakError(f"<img> tag with no 'id' attribute (src={src})")
        try:
            img["src"] = resolver(ImageReference(image_id=image_id, url=src, doc_id=doc_id))
        except GdocRendererError:
            raise
        except Exception as exc:
            raise TweakError(f"Cannot resolve image {image_id} ({src}): {exc}") from exc
        count += 1
    return count


def extract_title_and_summary(dom: BeautifulSoup, front_matter: FrontMatter, allow_remote_banner: bool = False) -> None:
    """Move the page heading and its preamble into the front matter.

    - the text of the first ``<h1>`` becomes the title
    - the text of the elements preceding it becomes the summary
    - the last image found in those elements becomes the banner, so a
      title image placed right above the heading wins over earlier ones

    The ``<h1>`` and everything before it are removed from the page. Image
    URLs must have been resolved beforehand so that the banner is usable,
    unless ``allow_remote_banner`` is set.
    """
    h1 = dom.find("h1")
    if h1 is None:
        return

    front_matter.title = collapse_whitespace(" ".join(h1.strings))
    preamble: List[PageElement] = list(h1.previous_siblings)
    preamble.reverse()

    summary_parts: List[str] = []
    banner: Optional[str] = None
    for sibling in preamble:
        if not isinstance(sibling, Tag):
            continue
        summary_parts.append(" ".join(sibling.strings))
        img = sibling if sibling.name == "img" else sibling.find("img")
        if img is not None and img.get("src"):
            url = img["src"]
            if url.startswith("http") and not allow_remote_banner:
                raise TweakError(f"Banner image url hasn't been resolved: {url}")
            banner = url

    summary = collapse_whitespace(" ".join(summary_parts))
    if summary:
        front_matter.summary = summary
    if banner is not None:
        front_matter.banner = banner

    for sibling in preamble:
        sibling.extract()
    h1.decompose()
