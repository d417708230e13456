"""A DOM serializer that produces a stable output.

BeautifulSoup keeps attributes in a dict, so their order depends on how the
tree was built and edited (parsing, tweak passes, insertion order). The
formatter below sorts attributes by name before each start tag is written,
making the output byte-for-byte reproducible. Everything else (escaping,
void elements, script and style content) is left to bs4's own writer.

Comments holding an unexpanded shortcode (``<!--{{< name >}}-->``) are written
as their bare text so that the site generator sees the shortcode.
"""
from __future__ import annotations

import copy
from typing import Iterable, Optional, Tuple, TypeVar

from bs4 import BeautifulSoup
from bs4.dammit import EntitySubstitution
from bs4.element import Comment, PreformattedString, Tag
from bs4.formatter import HTMLFormatter

SHORTCODE_COMMENT_PREFIX = "{{<"

DEFAULT_PARSER = "html.parser"

TreeT = TypeVar("TreeT", bound=Tag)


def parse_html(markup: str) -> BeautifulSoup:
    """Parse rendered markup into a mutable DOM."""
    return BeautifulSoup(markup, DEFAULT_PARSER)


class ShortcodeText(PreformattedString):
    """Shortcode comment text, written verbatim and followed by a newline."""

    PREFIX = ""
    SUFFIX = "\n"


class StableHtmlFormatter(HTMLFormatter):
    """HTML formatter writing attributes in name order.

    Text and attribute values only get the substitutions needed for valid
    markup (``&``, ``<``, ``>``); void elements have no closing slash.
    """

    def __init__(self) -> None:
        super().__init__(
            entity_substitution=EntitySubstitution.substitute_xml,
            void_element_close_prefix="",
            empty_attributes_are_booleans=False,
        )

    def attributes(self, tag: Tag) -> Iterable[Tuple[str, Optional[str]]]:
        if not tag.attrs:
            return []
        return sorted(tag.attrs.items(), key=lambda item: item[0])


STABLE_FORMATTER = StableHtmlFormatter()


def _unwrap_shortcodes(tree: TreeT) -> TreeT:
    shortcodes = [
        node
        for node in tree.descendants
        if isinstance(node, Comment) and node.startswith(SHORTCODE_COMMENT_PREFIX)
    ]
    for node in shortcodes:
        node.replace_with(ShortcodeText(str(node)))
    return tree


def stable_html(dom: Tag) -> str:
    """Serialize ``dom`` (a ``BeautifulSoup`` or any tag) with attributes sorted by name.

    The tree is copied first; ``dom`` itself is not modified.
    """
    return _unwrap_shortcodes(copy.copy(dom)).decode(formatter=STABLE_FORMATTER)


def stable_inner_html(element: Tag) -> str:
    """Serialize the children of ``element`` (e.g. the page ``<body>``)."""
    return _unwrap_shortcodes(copy.copy(element)).decode_contents(formatter=STABLE_FORMATTER)
