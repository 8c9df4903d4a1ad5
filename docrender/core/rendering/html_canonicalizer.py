"""
HTML Canonicalizer
==================

Guarantees the markup handed to the PDF backends is a complete XHTML document.
"""

import re

XML_PROLOG = '<?xml version="1.0" encoding="UTF-8"?>'
XHTML_DOCTYPE = (
    '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.0 Transitional//EN" \n'
    ' "http://www.w3.org/TR/xhtml1/DTD/xhtml1-transitional.dtd">\n'
)
XHTML_NAMESPACE = "http://www.w3.org/1999/xhtml"
CONTENT_TYPE_META = '<meta http-equiv="Content-Type" content="text/html; charset=UTF-8" />'

_DOCTYPE_RE = re.compile(r"<!doctype", re.IGNORECASE)
# Byte order mark, whitespace, XML prolog and comments allowed before the doctype
_DOCUMENT_PREAMBLE_RE = re.compile(
    r"\A(?:\ufeff|\s+|<\?xml[^>]*\?>|<!--.*?-->)*", re.IGNORECASE | re.DOTALL
)


def has_doctype(markup: str) -> bool:
    """True if the markup starts with a doctype, ignoring a BOM, the XML prolog and comments."""
    head = markup[_DOCUMENT_PREAMBLE_RE.match(markup).end():]
    return head.lower().startswith("<!doctype")


def count_doctypes(markup: str) -> int:
    """Number of doctype declarations in the markup."""
    return len(_DOCTYPE_RE.findall(markup))


def ensure_xhtml(markup: str) -> str:
    """
    Wrap bare markup in a minimal XHTML document.

    Markup that already starts with a doctype is returned unchanged and
    the caller stays responsible for its well-formedness. Applying the
    function to its own output is a no-op.
    """
    if has_doctype(markup):
        return markup

    return "".join(
        [
            XML_PROLOG,
            XHTML_DOCTYPE,
            f'<html xmlns="{XHTML_NAMESPACE}">\n',
            f"<head>{CONTENT_TYPE_META}</head>",
            "<body>",
            markup,
            "</body></html>",
        ]
    )
