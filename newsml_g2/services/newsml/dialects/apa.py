"""Parser for the APA/OTS NewsML-G2 dialect."""

from __future__ import annotations

from dataclasses import replace
from typing import List, Optional

from lxml import etree

from newsml_g2.services.newsml import extractors
from newsml_g2.services.newsml.cleaner import collapse_whitespace, wrap_text
from newsml_g2.services.newsml.extractors import Document
from newsml_g2.services.newsml.models import ArticleRecord, MediaRef, NewsMLNamespace

PROVIDER = "//nar:newsMessage/nar:itemSet/nar:newsItem/nar:itemMeta/nar:provider[@qcode=$qcode]"
ITEM_SET = "//nar:newsMessage/nar:itemSet"
BODY = '//*[local-name()="body"]'

PICTURE_CLASS = "ninat:picture"
TEXT_CLASS = "ninat:text"


def extract_body_content(document: Document, ns: NewsMLNamespace) -> str:
    """Rebuild the body as bare ``<p>``/``<pre>`` blocks in document order.

    Paragraph text is whitespace-collapsed; preformatted text is kept as is.
    Every other element only contributes text through its block parent.
    """
    body = extractors.first(document, ns, BODY)
    if body is None:
        return ""
    parts: List[str] = []
    for element in body.iter(etree.Element):
        tag = etree.QName(element).localname
        if tag == "p":
            parts.append(wrap_text("p", collapse_whitespace(extractors.node_text(element))))
        elif tag == "pre":
            parts.append(wrap_text("pre", extractors.node_text(element)))
    return "".join(parts)


class APAParser:
    """Baseline NewsML-G2 parser for APA/OTS news messages.

    A message carries an ``itemSet`` of picture and text items. Pictures
    contribute their remote references; each text item is read in isolation
    and the last one in the set supplies every text field.
    """

    name = "apa"

    def __init__(
        self, namespace: Optional[NewsMLNamespace] = None, provider_qcode: str = "nprov:apa"
    ) -> None:
        self.ns = namespace or NewsMLNamespace()
        self.provider_qcode = provider_qcode

    @classmethod
    def from_settings(cls, settings) -> "APAParser":
        return cls(NewsMLNamespace.from_settings(settings), settings.apa_provider_qcode)

    def can_parse(self, document: Document) -> bool:
        return extractors.first(document, self.ns, PROVIDER, qcode=self.provider_qcode) is not None

    def parse(self, document: Document) -> ArticleRecord:
        text_record: Optional[ArticleRecord] = None
        multimedia: List[MediaRef] = []

        item_set = extractors.first(document, self.ns, ITEM_SET)
        if item_set is not None:
            for item in item_set.iterchildren(etree.Element):
                item_class = extractors.get_item_class(item, self.ns)
                if item_class == PICTURE_CLASS:
                    multimedia.extend(extractors.get_remote_content(item, self.ns))
                elif item_class == TEXT_CLASS:
                    text_record = self.parse_text_item(extractors.isolate(item))

        record = text_record or ArticleRecord(guid="")
        if not record.guid:
            record = replace(record, guid=extractors.content_digest(document))
        return replace(record, multimedia=tuple(multimedia))

    def parse_text_item(self, fragment: etree._Element) -> ArticleRecord:
        ns = self.ns
        title, subtitle = extractors.get_titles(fragment, ns)
        return ArticleRecord(
            guid=extractors.get_guid(fragment, ns),
            version=extractors.get_version(fragment, ns),
            timestamp=extractors.get_timestamp(fragment, ns),
            title=title,
            subtitle=subtitle,
            copyright_holder=extractors.get_copyright_holder(fragment, ns),
            copyright_notice=extractors.get_copyright_notice(fragment, ns),
            mediatopics=extractors.get_mediatopics(fragment, ns),
            locations=extractors.get_locations(fragment, ns),
            content=extract_body_content(fragment, ns),
        )
