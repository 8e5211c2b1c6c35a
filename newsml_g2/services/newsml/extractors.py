"""Field extraction routines shared by the NewsML-G2 dialect parsers.

Every extractor takes the document (or an isolated fragment) plus the
namespace binding and returns a safe default when the expected structure
is missing. None of them raise on well-formed input.
"""

from __future__ import annotations

import copy
import hashlib
from datetime import timezone
from typing import List, Optional, Tuple, Union

from dateutil import parser as dtparser
from lxml import etree

from newsml_g2.services.newsml.models import MediaRef, NewsMLNamespace, Topic

Document = Union[etree._Element, etree._ElementTree]

NEWS_ITEM = "//nar:newsItem"
RIGHTS_HOLDER = "//nar:rightsInfo/nar:copyrightHolder/nar:name"
RIGHTS_NOTICE = "//nar:rightsInfo/nar:copyrightNotice"
HEADLINE_BY_ROLE = "//nar:headline[@role=$role]"
VERSION_CREATED = "//nar:versionCreated"
MEDIATOPIC_SUBJECTS = '//nar:subject[@type="cpnat:abstract" and contains(@qcode, "medtop:")]'
LOCATION_SUBJECTS = '//nar:subject[@type="cpnat:geoArea" and @why="why:direct"]'

TITLE_ROLE = "apahltype:title"
SUBTITLE_ROLE = "apahltype:subtitle"
DEFAULT_VERSION = "1"


def root_of(document: Document) -> etree._Element:
    if isinstance(document, etree._ElementTree):
        return document.getroot()
    return document


def query(document: Document, ns: NewsMLNamespace, path: str, **variables: str) -> list:
    """Evaluate an XPath against the document with the namespace bound."""
    result = root_of(document).xpath(path, namespaces=ns.map, **variables)
    return result if isinstance(result, list) else []


def first(document: Document, ns: NewsMLNamespace, path: str, **variables: str):
    nodes = query(document, ns, path, **variables)
    return nodes[0] if nodes else None


def node_text(node: Optional[etree._Element]) -> str:
    """Concatenated text of an element and its descendants."""
    if node is None:
        return ""
    return str(node.xpath("string()"))


def text_at(document: Document, ns: NewsMLNamespace, path: str, **variables: str) -> str:
    return node_text(first(document, ns, path, **variables))


def attr_at(document: Document, ns: NewsMLNamespace, path: str, name: str) -> str:
    node = first(document, ns, path)
    if node is None:
        return ""
    return node.get(name) or ""


def isolate(element: etree._Element) -> etree._Element:
    """Copy an element into its own document so ``//`` queries stay inside it."""
    return copy.deepcopy(element)


def content_digest(document: Document) -> str:
    """Stable SHA-1 over the canonical serialization of the document."""
    canonical = etree.tostring(root_of(document), method="c14n")
    return hashlib.sha1(canonical).hexdigest()


def parse_datetime(value: str) -> Optional[int]:
    """Parse a date-time string into unix epoch seconds; None if unparsable.

    Values without an offset are read as UTC.
    """
    value = (value or "").strip()
    if not value:
        return None
    try:
        parsed = dtparser.parse(value)
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp())


def get_guid(document: Document, ns: NewsMLNamespace) -> str:
    return attr_at(document, ns, NEWS_ITEM, "guid")


def get_version(document: Document, ns: NewsMLNamespace) -> str:
    return attr_at(document, ns, NEWS_ITEM, "version") or DEFAULT_VERSION


def get_copyright_holder(document: Document, ns: NewsMLNamespace) -> str:
    return text_at(document, ns, RIGHTS_HOLDER)


def get_copyright_notice(document: Document, ns: NewsMLNamespace) -> str:
    return text_at(document, ns, RIGHTS_NOTICE)


def get_titles(document: Document, ns: NewsMLNamespace) -> Tuple[str, str]:
    """Title and subtitle picked by their headline role."""
    title = text_at(document, ns, HEADLINE_BY_ROLE, role=TITLE_ROLE)
    subtitle = text_at(document, ns, HEADLINE_BY_ROLE, role=SUBTITLE_ROLE)
    return title, subtitle


def get_timestamp(document: Document, ns: NewsMLNamespace) -> Optional[int]:
    return parse_datetime(text_at(document, ns, VERSION_CREATED))


def _subjects(document: Document, ns: NewsMLNamespace, path: str) -> Tuple[Topic, ...]:
    return tuple(
        Topic(name=node_text(node), qcode=node.get("qcode") or "")
        for node in query(document, ns, path)
    )


def get_mediatopics(document: Document, ns: NewsMLNamespace) -> Tuple[Topic, ...]:
    return _subjects(document, ns, MEDIATOPIC_SUBJECTS)


def get_locations(document: Document, ns: NewsMLNamespace) -> Tuple[Topic, ...]:
    return _subjects(document, ns, LOCATION_SUBJECTS)


def get_item_class(item: etree._Element, ns: NewsMLNamespace) -> str:
    nodes = item.xpath(".//nar:itemClass", namespaces=ns.map)
    return (nodes[0].get("qcode") or "") if nodes else ""


def get_remote_content(item: etree._Element, ns: NewsMLNamespace) -> List[MediaRef]:
    return [
        MediaRef(href=node.get("href"))
        for node in item.xpath(".//nar:remoteContent", namespaces=ns.map)
        if node.get("href")
    ]
