"""
Text normalization utilities for document content.

Handles typographic quotes substituted by the word processor and whitespace
cleanup of text extracted from the rendered DOM.
"""

import re

# The word processor replaces straight quotes as the author types
SMART_QUOTES = {
    '\u201c': '"',      # Left double quotation mark
    '\u201d': '"',      # Right double quotation mark
    '\u2018': "'",      # Left single quotation mark
    '\u2019': "'",      # Right single quotation mark
}

_QUOTES_TABLE = str.maketrans(SMART_QUOTES)

# Regex for collapsing runs of whitespace, including non-breaking spaces
WHITESPACE_PATTERN = re.compile(r'[\s\u00a0]+')


def normalize_quotes(text: str) -> str:
    """Replace typographic quotes with their ASCII counterparts."""
    if not text:
        return text
    return text.translate(_QUOTES_TABLE)


def collapse_whitespace(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    return WHITESPACE_PATTERN.sub(' ', text).strip()
