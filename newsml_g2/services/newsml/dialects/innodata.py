"""Parser for the Innodata NewsML-G2 dialect.

Innodata ships single news items without an ``itemSet`` and keeps most of
its payload in a ``description`` element with ``inline`` citations.
Version and creation time are read the same way as for APA; everything
else has its own rules here.
"""

from __future__ import annotations

from typing import Optional, Tuple
from urllib.parse import urlsplit

from lxml import etree

from newsml_g2.services.newsml import extractors
from newsml_g2.services.newsml.cleaner import nl2br, strip_tags
from newsml_g2.services.newsml.extractors import Document
from newsml_g2.services.newsml.models import ArticleRecord, NewsMLNamespace, Topic

STANDARD_ITEM = "//nar:newsItem[@standard=$standard]"
ITEM_META = "//nar:itemMeta"
HEADLINES = "//nar:headline"
TITLES = "//nar:title"
DESCRIPTION = "//nar:description"
DESCRIPTION_INLINE = "//nar:description/nar:inline"
INFO_SOURCE = "//nar:infoSource"
INFO_SOURCE_NAME = "//nar:infoSource/nar:name"
ANY_NAME = "//nar:name"
DATELINE = "//nar:dateline"

# first match wins
SOURCE_URI_CANDIDATES = (
    (DESCRIPTION_INLINE, "uri"),
    (INFO_SOURCE, "uri"),
    (DESCRIPTION, "creatoruri"),
)


def get_guid(document: Document, ns: NewsMLNamespace) -> str:
    """``itemMeta/@id`` or, when missing, a digest of the whole document."""
    return extractors.attr_at(document, ns, ITEM_META, "id") or extractors.content_digest(document)


def get_titles(document: Document, ns: NewsMLNamespace) -> Tuple[str, str]:
    headlines = extractors.query(document, ns, HEADLINES)
    title = extractors.node_text(headlines[0]) if headlines else ""
    subtitle = extractors.node_text(headlines[1]) if len(headlines) > 1 else ""
    return title, subtitle


def get_mediatopics(document: Document, ns: NewsMLNamespace) -> Tuple[Topic, ...]:
    # Innodata provides at most one topic and no qcode for it.
    name = extractors.text_at(document, ns, TITLES)
    return (Topic(name=name, qcode=""),) if name else ()


def get_publish_date(document: Document, ns: NewsMLNamespace) -> Optional[int]:
    return extractors.parse_datetime(extractors.text_at(document, ns, DATELINE))


def get_content(document: Document, ns: NewsMLNamespace) -> str:
    """Description text with ``inline`` citations turned into anchors.

    Works on a copy, the caller's document is left untouched.
    """
    description = extractors.first(document, ns, DESCRIPTION)
    if description is None:
        return ""
    description = extractors.isolate(description)
    for inline in description.xpath("nar:inline", namespaces=ns.map):
        inline.tag = "a"
        uri = inline.attrib.pop("uri", None)
        if uri:
            inline.set("href", uri)

    markup = etree.tostring(description, method="c14n").decode("utf-8")
    text = strip_tags(markup).strip()
    return nl2br(text) if text else ""


def get_source_uri(document: Document, ns: NewsMLNamespace) -> str:
    for path, attribute in SOURCE_URI_CANDIDATES:
        value = extractors.attr_at(document, ns, path, attribute)
        if value:
            return value
    return ""


def get_source(document: Document, ns: NewsMLNamespace) -> str:
    name = extractors.text_at(document, ns, INFO_SOURCE_NAME) or extractors.text_at(
        document, ns, ANY_NAME
    )
    if name:
        return name
    uri = get_source_uri(document, ns)
    if uri:
        return urlsplit(uri).hostname or ""
    return ""


class InnodataParser:
    """Parser for Innodata news items.

    Detection only looks at the item's ``standard`` attribute. Innodata
    feeds do not carry their provider literal on the item, so it is not
    part of the check.
    """

    name = "innodata"

    def __init__(
        self,
        namespace: Optional[NewsMLNamespace] = None,
        provider: str = "innodata.com",
        standard: str = "NewsML-G2",
    ) -> None:
        self.ns = namespace or NewsMLNamespace()
        self.provider = provider
        self.standard = standard

    @classmethod
    def from_settings(cls, settings) -> "InnodataParser":
        return cls(
            NewsMLNamespace.from_settings(settings),
            settings.innodata_provider,
            settings.innodata_standard,
        )

    def can_parse(self, document: Document) -> bool:
        item = extractors.first(document, self.ns, STANDARD_ITEM, standard=self.standard)
        return item is not None

    def parse(self, document: Document) -> ArticleRecord:
        ns = self.ns
        title, subtitle = get_titles(document, ns)
        return ArticleRecord(
            guid=get_guid(document, ns),
            version=extractors.get_version(document, ns),
            timestamp=extractors.get_timestamp(document, ns),
            publish_date=get_publish_date(document, ns),
            title=title,
            subtitle=subtitle,
            copyright_holder=self.provider,
            mediatopics=get_mediatopics(document, ns),
            content=get_content(document, ns),
            source=get_source(document, ns),
            source_uri=get_source_uri(document, ns),
        )
