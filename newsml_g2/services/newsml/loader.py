"""Turns raw NewsML-G2 bytes into an lxml document."""

from __future__ import annotations

from lxml import etree

UTF8_BOM = b"\xef\xbb\xbf"


class DocumentLoadError(ValueError):
    """Raised when a file is not well-formed XML."""


def _make_parser() -> etree.XMLParser:
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        huge_tree=False,
    )


def load_document(content: bytes | str) -> etree._ElementTree:
    """Parse XML content; raises DocumentLoadError for empty or malformed input.

    Whitespace-only text is kept: in mixed content it separates words.
    """
    if isinstance(content, str):
        content = content.encode("utf-8")
    data = content.lstrip()
    if data.startswith(UTF8_BOM):
        data = data[len(UTF8_BOM):].lstrip()
    if not data:
        raise DocumentLoadError("empty document")
    try:
        root = etree.fromstring(data, parser=_make_parser())
    except etree.XMLSyntaxError as exc:
        raise DocumentLoadError(f"malformed XML: {exc}") from exc
    return root.getroottree()
