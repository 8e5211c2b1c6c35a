import json
from dataclasses import asdict
from pathlib import Path

import httpx
import pytest

from newsml_g2.services.mediatopics import vocabulary
from newsml_g2.services.mediatopics.vocabulary import (
    MediaTopicError,
    build_tree,
    label_topics,
    load_vocabulary,
    parse_vocabulary,
    resolve_language,
)
from newsml_g2.services.newsml.models import Topic

FIXTURES = Path(__file__).parent / "fixtures"


def load_payload() -> dict:
    return json.loads((FIXTURES / "mediatopics_sample.json").read_text(encoding="utf-8"))


def test_resolve_language_falls_back_to_english() -> None:
    supported = ["en", "de", "fr", "es", "ar"]
    assert resolve_language("de_AT", supported) == "de"
    assert resolve_language("fr-FR", supported) == "fr"
    assert resolve_language("it_IT", supported) == "en"
    assert resolve_language("", supported) == "en"


def test_parse_vocabulary_terms() -> None:
    terms = parse_vocabulary(load_payload(), "en")
    assert [term.qcode for term in terms] == ["medtop:01000000", "medtop:20000002", "medtop:20000003"]
    arts = terms[1]
    assert arts.name == "arts and entertainment"
    assert arts.definition == "All forms of arts and entertainment"
    assert arts.broader_qcodes == ("medtop:01000000",)
    # no label in the requested language: first available one is used
    assert terms[2].name == "Animation"
    assert terms[2].definition == ""


def test_parse_vocabulary_prefers_requested_language() -> None:
    terms = parse_vocabulary(load_payload(), "de")
    assert terms[1].name == "Kunst und Unterhaltung"


def test_build_tree_uses_first_known_broader() -> None:
    tree = build_tree(parse_vocabulary(load_payload(), "en"))
    assert tree == {"medtop:20000002": "medtop:01000000", "medtop:20000003": "medtop:20000002"}


def test_label_topics_fills_only_missing_names() -> None:
    terms = parse_vocabulary(load_payload(), "en")
    topics = (Topic(name="", qcode="medtop:20000002"), Topic(name="Mine", qcode="medtop:01000000"))
    assert label_topics(topics, terms) == (
        Topic(name="arts and entertainment", qcode="medtop:20000002"),
        Topic(name="Mine", qcode="medtop:01000000"),
    )


def test_fetch_vocabulary_wraps_http_errors(monkeypatch) -> None:
    def fake_get(url: str, **kwargs) -> httpx.Response:
        return httpx.Response(500, request=httpx.Request("GET", url))

    monkeypatch.setattr(vocabulary.httpx, "get", fake_get)
    with pytest.raises(MediaTopicError):
        vocabulary.fetch_vocabulary("https://cv.example.org/mediatopic/", "en")


def test_fetch_vocabulary_decodes_payload(monkeypatch) -> None:
    def fake_get(url: str, **kwargs) -> httpx.Response:
        assert kwargs["params"] == {"format": "json", "lang": "en"}
        return httpx.Response(200, json=load_payload(), request=httpx.Request("GET", url))

    monkeypatch.setattr(vocabulary.httpx, "get", fake_get)
    terms = vocabulary.fetch_vocabulary("https://cv.example.org/mediatopic/", "en")
    assert len(terms) == 3


def test_load_vocabulary_reads_saved_terms(tmp_path: Path) -> None:
    assert load_vocabulary(tmp_path / "missing.json") == []

    terms = parse_vocabulary(load_payload(), "en")
    saved = tmp_path / "mediatopics.json"
    saved.write_text(
        json.dumps({"language": "en", "terms": [asdict(term) for term in terms]}), encoding="utf-8"
    )
    assert load_vocabulary(saved) == terms


def test_load_vocabulary_rejects_broken_file(tmp_path: Path) -> None:
    saved = tmp_path / "mediatopics.json"
    saved.write_text("{not json", encoding="utf-8")
    with pytest.raises(MediaTopicError):
        load_vocabulary(saved)
