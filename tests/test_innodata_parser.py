from pathlib import Path

from lxml import etree

from newsml_g2.services.newsml.dialects.innodata import InnodataParser
from newsml_g2.services.newsml.loader import load_document
from newsml_g2.services.newsml.models import Topic

FIXTURES = Path(__file__).parent / "fixtures"

NS = "http://iptc.org/std/nar/2006-10-01/"


def load_fixture(name: str):
    return load_document((FIXTURES / name).read_bytes())


def innodata_item(content_meta: str, attrs: str = "") -> bytes:
    return (
        f'<newsItem xmlns="{NS}" standard="NewsML-G2" {attrs}>'
        f"<contentMeta>{content_meta}</contentMeta></newsItem>"
    ).encode("utf-8")


def test_can_parse_by_standard() -> None:
    assert InnodataParser().can_parse(load_fixture("innodata_item.xml"))


def test_can_parse_ignores_provider_literal() -> None:
    assert InnodataParser().can_parse(load_fixture("innodata_minimal.xml"))


def test_can_parse_rejects_other_standard() -> None:
    assert not InnodataParser().can_parse(load_fixture("unsupported.xml"))


def test_parse_full_item() -> None:
    record = InnodataParser().parse(load_fixture("innodata_item.xml"))
    assert record.guid == "innodata-20210504-0042"
    assert record.version == "2"
    assert record.title == "Central bank holds rates"
    assert record.subtitle == "Decision was widely expected"
    assert record.copyright_holder == "innodata.com"
    assert record.copyright_notice == ""
    assert record.timestamp == 1620115200
    assert record.publish_date == 1620113400
    assert record.effective_date == 1620113400
    assert record.mediatopics == (Topic(name="Economy", qcode=""),)
    assert record.locations == ()
    assert record.multimedia == ()


def test_parse_source_attribution() -> None:
    record = InnodataParser().parse(load_fixture("innodata_item.xml"))
    assert record.source_uri == "https://www.example-wire.com/story/1"
    assert record.source == "Example Wire"


def test_content_rewrites_inline_as_anchor() -> None:
    record = InnodataParser().parse(load_fixture("innodata_item.xml"))
    assert record.content == (
        "Rates unchanged at 0.5 percent.<br />\n"
        'See <a href="https://www.example-wire.com/story/1">the full story</a> for details.'
    )


def test_content_rewrite_leaves_document_untouched() -> None:
    document = load_fixture("innodata_item.xml")
    before = etree.tostring(document)
    first = InnodataParser().parse(document)
    assert etree.tostring(document) == before
    assert InnodataParser().parse(document) == first


def test_inline_rewrite_strips_other_tags() -> None:
    document = load_document(
        innodata_item('<description>a <inline uri="http://x/">t</inline> and <b>b</b></description>')
    )
    record = InnodataParser().parse(document)
    assert record.content == 'a <a href="http://x/">t</a> and b'
    assert record.source_uri == "http://x/"
    assert record.source == "x"


def test_guid_falls_back_to_stable_digest() -> None:
    content = (FIXTURES / "innodata_minimal.xml").read_bytes()
    first = InnodataParser().parse(load_document(content))
    second = InnodataParser().parse(load_document(content))
    assert len(first.guid) == 40
    assert first.guid == second.guid

    changed = content.replace(b"Plain text", b"Other text")
    assert InnodataParser().parse(load_document(changed)).guid != first.guid


def test_source_falls_back_to_creator_host() -> None:
    record = InnodataParser().parse(load_fixture("innodata_minimal.xml"))
    assert record.source_uri == "https://Creator.example.org/profile"
    assert record.source == "creator.example.org"
    assert record.title == "Only headline"
    assert record.subtitle == ""
    assert record.content == "Plain text"
    assert record.mediatopics == ()


def test_info_source_uri_preferred_over_creator() -> None:
    document = load_document(
        innodata_item(
            '<infoSource uri="https://wire.example.com/"/>'
            '<description creatoruri="https://creator.example.org/">x</description>'
        )
    )
    record = InnodataParser().parse(document)
    assert record.source_uri == "https://wire.example.com/"
    assert record.source == "wire.example.com"


def test_generic_name_used_when_info_source_has_none() -> None:
    document = load_document(
        innodata_item('<creator><name>Jane Reporter</name></creator><infoSource uri="https://w.example/"/>')
    )
    assert InnodataParser().parse(document).source == "Jane Reporter"


def test_unparsable_dateline_is_empty() -> None:
    document = load_document(innodata_item("<dateline>VIENNA, somewhere</dateline>"))
    record = InnodataParser().parse(document)
    assert record.publish_date is None
    assert record.content == ""
    assert record.source == ""


def test_adjacent_inline_anchors_keep_their_separator() -> None:
    document = load_document(
        innodata_item(
            '<description><inline uri="http://a/">one</inline> '
            '<inline uri="http://b/">two</inline></description>'
        )
    )
    assert InnodataParser().parse(document).content == (
        '<a href="http://a/">one</a> <a href="http://b/">two</a>'
    )
