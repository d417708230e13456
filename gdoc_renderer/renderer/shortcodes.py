"""Directives embedded in paragraph text.

Two syntaxes are recognized when they make up a whole paragraph:

- shortcodes, ``{{ name args }}`` or ``{{< name args >}}``. The reserved
  ``html`` command inserts its arguments as raw markup; any other command is
  kept as a ``<!--{{< name args >}}-->`` comment for the site generator.
- inline attribute lists, ``{: #id .class other-class key="value" }``, which
  open a ``<div>`` carrying those attributes, and ``{::}`` which closes it.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from gdoc_renderer.renderer.html_writer import HtmlConsumer
from gdoc_renderer.utils.errors import AttributeListSyntaxError
from gdoc_renderer.utils.text_normalizer import normalize_quotes

SHORTCODE_OPEN = "{{"
SHORTCODE_CLOSE = "}}"
ATTRIBUTE_LIST_OPEN = "{:"
HTML_COMMAND = "html"

_ATTRIBUTE_TOKEN = re.compile(
    r"""\s*(?:
        (?P<key>[A-Za-z_][\w:.-]*)=(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\s"']+))
        |(?P<word>[^\s"'=]+)
    )\s*""",
    re.VERBOSE,
)


@dataclass
class InlineAttributes:
    id: Optional[str] = None
    classes: List[str] = field(default_factory=list)
    attrs: Dict[str, str] = field(default_factory=dict)

    def html_attrs(self) -> Dict[str, str]:
        """Attributes other than ``class``, sorted by name."""
        merged = dict(self.attrs)
        if self.id is not None:
            merged["id"] = self.id
        return dict(sorted(merged.items()))


@dataclass(frozen=True)
class Shortcode:
    name: str
    args: str = ""

    def to_hugo(self) -> str:
        if self.args:
            return f"{{{{< {self.name} {self.args} >}}}}"
        return f"{{{{< {self.name} >}}}}"


def is_directive(text: str) -> bool:
    """Tell whether a paragraph's whole text is a shortcode or an attribute list."""
    text = text.strip()
    if text.startswith(SHORTCODE_OPEN) and text.endswith(SHORTCODE_CLOSE):
        return True
    return text.startswith(ATTRIBUTE_LIST_OPEN)


def is_attribute_list(text: str) -> bool:
    return text.strip().startswith(ATTRIBUTE_LIST_OPEN)


def parse_attribute_list(text: str) -> Optional[InlineAttributes]:
    """Parse ``{: ... }``. Returns ``None`` for the ``{::}`` end marker."""
    text = normalize_quotes(text.strip())
    if not text.startswith(ATTRIBUTE_LIST_OPEN):
        raise AttributeListSyntaxError(f"Not an attribute list: {text!r}")

    end = text.find("}", len(ATTRIBUTE_LIST_OPEN))
    if end < 0:
        raise AttributeListSyntaxError(f"Unterminated attribute list: {text!r}")
    trailing = text[end + 1:].strip()
    if trailing:
        raise AttributeListSyntaxError(f"Unexpected text after attribute list: {trailing!r}")

    body = text[len(ATTRIBUTE_LIST_OPEN):end].strip()
    if body == ":":
        return None
    if body.endswith(":"):
        # "{: foo :}" spelling
        body = body[:-1].rstrip()

    attributes = InlineAttributes()
    pos = 0
    while pos < len(body):
        match = _ATTRIBUTE_TOKEN.match(body, pos)
        if match is None or match.end() == pos:
            raise AttributeListSyntaxError(f"Malformed attribute list near {body[pos:]!r} in {text!r}")
        pos = match.end()

        if match.group("key"):
            value = next(v for v in (match.group("dq"), match.group("sq"), match.group("bare")) if v is not None)
            key = match.group("key")
            if key == "class":
                attributes.classes.extend(value.split())
            elif key == "id":
                attributes.id = value
            else:
                attributes.attrs[key] = value
            continue

        word = match.group("word")
        if word.startswith("#"):
            attributes.id = word[1:]
        elif word.startswith("."):
            attributes.classes.append(word[1:])
        else:
            attributes.classes.append(word)

    attributes.attrs = dict(sorted(attributes.attrs.items()))
    return attributes


def parse_shortcodes(text: str) -> List[Shortcode]:
    """Split text on ``{{`` and parse each directive. Text before the first one is ignored."""
    shortcodes = []
    for segment in text.split(SHORTCODE_OPEN)[1:]:
        segment = normalize_quotes(segment).strip()
        if segment.endswith(SHORTCODE_CLOSE):
            segment = segment[:-len(SHORTCODE_CLOSE)].rstrip()
        if segment.startswith("<"):
            segment = segment[1:].lstrip()
            if segment.endswith(">"):
                segment = segment[:-1].rstrip()
        name, _, args = segment.partition(" ")
        shortcodes.append(Shortcode(name=name, args=args.strip()))
    return shortcodes


def write_shortcode(out: HtmlConsumer, text: str) -> None:
    """Emit the shortcodes found in ``text`` into ``out``."""
    for shortcode in parse_shortcodes(text):
        if shortcode.name == HTML_COMMAND:
            out.raw(shortcode.args)
        else:
            out.comment(shortcode.to_hugo())
        out.newline()


def write_attribute_list(out: HtmlConsumer, text: str) -> None:
    """Open a ``<div>`` for ``{: ... }`` or close it for ``{::}``."""
    attributes = parse_attribute_list(text)
    if attributes is None:
        out.end_element("div")
    else:
        out.start_element("div", attributes.classes, None, attributes.html_attrs())
    out.newline()
