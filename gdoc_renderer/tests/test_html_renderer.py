"""Test cases for paragraph, list and directive rendering."""

import unittest
from html.parser import HTMLParser

from gdoc_renderer.renderer.html_renderer import HtmlRenderer, render
from gdoc_renderer.renderer.html_writer import VOID_ELEMENTS
from gdoc_renderer.tests.doc_builders import body_of, build, paragraph, text_paragraph, text_run
from gdoc_renderer.utils.errors import (
    AttributeListSyntaxError,
    DanglingReferenceError,
    MarkupError,
    UnsupportedElementError,
)


class _TagBalanceChecker(HTMLParser):
    """Collects nesting errors of rendered markup."""

    def __init__(self):
        super().__init__()
        self.stack = []
        self.errors = []

    def handle_starttag(self, tag, attrs):
        if tag not in VOID_ELEMENTS:
            self.stack.append(tag)

    def handle_endtag(self, tag):
        if not self.stack or self.stack[-1] != tag:
            self.errors.append(f"unexpected </{tag}> with stack {self.stack}")
            return
        self.stack.pop()


def _body(*content, **kwargs):
    return body_of(render(build(*content, **kwargs)))


class PageStructureTest(unittest.TestCase):
    """Test the page skeleton."""

    def test_full_page(self):
        """Test head, title and body layout."""
        html = render(build(text_paragraph("Hello"), title="T"))
        self.assertEqual(
            html,
            "<html>\n<head>\n<title>T</title>\n</head>\n<body>\n<p>Hello</p>\n</body>\n</html>\n",
        )

    def test_title_is_optional(self):
        """A document without title has an empty head."""
        html = render(build(text_paragraph("Hello"), title=None))
        self.assertTrue(html.startswith("<html>\n<head>\n</head>\n<body>\n"))

    def test_renderer_is_reusable(self):
        """Rendering twice gives the same output."""
        renderer = HtmlRenderer()
        document = build(text_paragraph("a", bullet_level=0))
        self.assertEqual(renderer.render(document), renderer.render(document))

    def test_tag_balance(self):
        """Rendered markup nests properly for a mixed document."""
        html = render(
            build(
                text_paragraph("intro", indent=18),
                text_paragraph("one", bullet_level=0),
                text_paragraph("two", bullet_level=2),
                text_paragraph("{: .note }"),
                text_paragraph("three", bullet_level=1),
                text_paragraph("{::}"),
                text_paragraph("Heading", named_style="HEADING_2"),
                paragraph(text_run("bold", bold=True, link={"url": "https://example.com"})),
            )
        )
        checker = _TagBalanceChecker()
        checker.feed(html)
        checker.close()
        self.assertEqual(checker.errors, [])
        self.assertEqual(checker.stack, [])


class ParagraphTest(unittest.TestCase):
    """Test paragraph tags and attributes."""

    def test_headings(self):
        """Heading styles map to h1-h4 and carry their heading id."""
        body = _body(
            text_paragraph("One", named_style="HEADING_1", heading_id="h.one"),
            text_paragraph("Four", named_style="HEADING_4"),
        )
        self.assertEqual(body, '<h1 id="h.one">One</h1>\n<h4>Four</h4>\n')

    def test_other_named_styles_become_classes(self):
        """Test TITLE and NORMAL_TEXT."""
        body = _body(
            text_paragraph("Doc", named_style="TITLE"),
            text_paragraph("Text", named_style="NORMAL_TEXT"),
            text_paragraph("Small", named_style="HEADING_5"),
        )
        self.assertEqual(body, '<p class="TITLE">Doc</p>\n<p>Text</p>\n<p class="HEADING_5">Small</p>\n')

    def test_alignment(self):
        """Test text-align values."""
        test_cases = [
            ("START", '<p style="text-align:start;">x</p>\n'),
            ("CENTER", '<p style="text-align:center;">x</p>\n'),
            ("END", '<p style="text-align:end;">x</p>\n'),
            ("JUSTIFIED", "<p>x</p>\n"),
        ]
        for alignment, expected in test_cases:
            self.assertEqual(_body(text_paragraph("x", alignment=alignment)), expected, alignment)

    def test_empty_paragraph(self):
        """A paragraph holding only its newline renders as an empty element."""
        self.assertEqual(_body(text_paragraph("")), "<p></p>\n")

    def test_other_elements(self):
        """Test rules, page breaks, people and footnote references."""
        body = _body(
            paragraph({"horizontalRule": {}}, text_run("\n")),
            paragraph({"pageBreak": {}}, text_run("after\n")),
            paragraph({"person": {"personProperties": {"name": "Ada Lovelace"}}}),
            paragraph(
                text_run("Text"),
                {"footnoteReference": {"footnoteId": "kix.fn1", "footnoteNumber": "1"}},
            ),
        )
        self.assertEqual(body, "<p><hr>\n</p>\n<p>after</p>\n<p>Ada Lovelace</p>\n<p>Text</p>\n")

    def test_table_of_contents(self):
        """The contents block is wrapped in a classed div."""
        body = _body({"tableOfContents": {"content": [text_paragraph("Intro")]}})
        self.assertEqual(body, '<div class="table-of-contents">\n<p>Intro</p>\n</div>\n')

    def test_section_break_is_skipped(self):
        """Section breaks produce no output."""
        body = _body({"sectionBreak": {"sectionStyle": {"sectionType": "CONTINUOUS"}}}, text_paragraph("x"))
        self.assertEqual(body, "<p>x</p>\n")


class ListTest(unittest.TestCase):
    """Test list nesting from bullets and indentation."""

    def test_nesting_levels(self):
        """Levels 0, 1, 1, 0 open and close nested lists."""
        body = _body(
            text_paragraph("a", bullet_level=0),
            text_paragraph("b", bullet_level=1),
            text_paragraph("c", bullet_level=1),
            text_paragraph("d", bullet_level=0),
        )
        self.assertEqual(
            body,
            "<ul>\n<li>a</li>\n<ul>\n<li>b</li>\n<li>c</li>\n</ul>\n<li>d</li>\n</ul>\n",
        )

    def test_skipped_level(self):
        """Jumping two levels opens two lists."""
        body = _body(text_paragraph("deep", bullet_level=1))
        self.assertEqual(body, "<ul>\n<ul>\n<li>deep</li>\n</ul>\n</ul>\n")

    def test_list_closed_by_plain_paragraph(self):
        """A plain paragraph closes the open lists."""
        body = _body(text_paragraph("a", bullet_level=0), text_paragraph("after"))
        self.assertEqual(body, "<ul>\n<li>a</li>\n</ul>\n<p>after</p>\n")

    def test_aligned_paragraph_stays_in_list(self):
        """A plain paragraph indented like the last item continues the list."""
        body = _body(
            text_paragraph("item", bullet_level=0, indent=36),
            text_paragraph("continued", indent=36),
            text_paragraph("outside", indent=18),
        )
        self.assertEqual(
            body,
            "<ul>\n<li>item</li>\n<p>continued</p>\n</ul>\n<p>outside</p>\n",
        )

    def test_heading_in_list_is_item(self):
        """A bulleted heading renders as a list item."""
        body = _body(text_paragraph("H", bullet_level=0, named_style="HEADING_2"))
        self.assertEqual(body, "<ul>\n<li>H</li>\n</ul>\n")


class DirectiveTest(unittest.TestCase):
    """Test shortcode and attribute list paragraphs."""

    def test_html_shortcode(self):
        """The html command replaces the paragraph by raw markup."""
        body = _body(
            text_paragraph("{{ html <div class='bar'> }}"),
            text_paragraph("inside"),
            text_paragraph("{{ html </div> }}"),
        )
        self.assertEqual(body, "<div class='bar'>\n<p>inside</p>\n</div>\n")

    def test_other_shortcode(self):
        """Other commands are kept as comments for the site generator."""
        body = _body(text_paragraph('{{ youtube id="xyz" }}'))
        self.assertEqual(body, '<!--{{< youtube id="xyz" >}}-->\n')

    def test_shortcode_closes_lists(self):
        """A directive ends the current list."""
        body = _body(text_paragraph("a", bullet_level=0), text_paragraph("{{ youtube x }}"))
        self.assertEqual(body, "<ul>\n<li>a</li>\n</ul>\n<!--{{< youtube x >}}-->\n")

    def test_inline_shortcode_is_text(self):
        """Braces inside ordinary text are left alone."""
        body = _body(text_paragraph("see {{ this }} here"))
        self.assertEqual(body, "<p>see {{ this }} here</p>\n")

    def test_attribute_list_block(self):
        """Attribute lists wrap the following paragraphs in a div."""
        body = _body(
            text_paragraph('{: .note #box data-x="1" }'),
            text_paragraph("x"),
            text_paragraph("{::}"),
        )
        self.assertEqual(body, '<div class="note" data-x="1" id="box">\n<p>x</p>\n</div>\n')

    def test_unterminated_attribute_list(self):
        """A malformed attribute list aborts the render."""
        with self.assertRaises(AttributeListSyntaxError):
            render(build(text_paragraph("{: .note")))

    def test_unclosed_attribute_list(self):
        """An attribute list block must be closed before the end of the document."""
        with self.assertRaises(MarkupError):
            render(build(text_paragraph("{: .note }"), text_paragraph("x")))


class UnsupportedContentTest(unittest.TestCase):
    """Test content the renderer refuses."""

    def test_unsupported_paragraph_elements(self):
        """Test each refused paragraph element."""
        test_cases = [
            ({"autoText": {"type": "PAGE_NUMBER"}}, "AutoText"),
            ({"columnBreak": {}}, "ColumnBreak"),
            ({"equation": {}}, "Equation"),
            ({"richLink": {"richLinkProperties": {"uri": "https://x"}}}, "RichLink"),
        ]
        for element, kind in test_cases:
            with self.assertRaises(UnsupportedElementError, msg=kind) as ctx:
                render(build(paragraph(element)))
            self.assertEqual(ctx.exception.kind, kind)

    def test_dangling_inline_object(self):
        """A reference to a missing inline object fails."""
        with self.assertRaises(DanglingReferenceError) as ctx:
            render(build(paragraph({"inlineObjectElement": {"inlineObjectId": "kix.missing"}})))
        self.assertEqual(ctx.exception.object_id, "kix.missing")


if __name__ == '__main__':
    unittest.main()
