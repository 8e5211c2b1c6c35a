import json
import shutil
import sys
from pathlib import Path

from newsml_g2.services.mediatopics.vocabulary import MediaTopicTerm
from newsml_g2.services.newsml.ingest import ImportResult
from newsml_g2.services.newsml.models import ArticleRecord, Topic
from newsml_g2.services.newsml.storage import record_path
from scripts import import_newsml

FIXTURES = Path(__file__).parent / "fixtures"


def run_import(monkeypatch, source: Path, out: Path) -> int:
    monkeypatch.setattr(
        sys, "argv", ["import_newsml.py", "--source", str(source), "--out", str(out)]
    )
    return import_newsml.main()


def test_import_writes_records_and_filelist(tmp_path: Path, monkeypatch) -> None:
    source = tmp_path / "incoming"
    source.mkdir()
    for name in ("apa_message.xml", "innodata_item.xml", "unsupported.xml"):
        shutil.copy(FIXTURES / name, source / name)
    out = tmp_path / "out"

    assert run_import(monkeypatch, source, out) == 0
    assert len(list((out / "parsed").glob("*.json"))) == 2
    assert json.loads((out / "filelist.json").read_text(encoding="utf-8")) == [
        "apa_message.xml",
        "innodata_item.xml",
    ]
    report = json.loads((out / "import_report.json").read_text(encoding="utf-8"))
    assert report["stats"]["unsupported"] == 1
    assert report["unsupported_files"] == ["unsupported.xml"]

    assert run_import(monkeypatch, source, out) == 0
    report = json.loads((out / "import_report.json").read_text(encoding="utf-8"))
    assert report["stats"]["skipped"] == 2
    assert report["stats"]["parsed"] == 0


def test_store_records_labels_topics_from_vocabulary(tmp_path: Path) -> None:
    record = ArticleRecord(
        guid="urn:test:labelled",
        mediatopics=(Topic(name="", qcode="medtop:20000002"),),
        filename="labelled.xml",
    )
    terms = [MediaTopicTerm(qcode="medtop:20000002", name="arts and entertainment")]

    written, imported = import_newsml.store_records(ImportResult(records=[record]), tmp_path, terms)
    assert (written, imported) == (1, ["labelled.xml"])
    stored = json.loads(record_path(record, tmp_path).read_text(encoding="utf-8"))
    assert stored["mediatopics"] == [{"name": "arts and entertainment", "qcode": "medtop:20000002"}]


def test_import_survives_corrupt_stored_record(tmp_path: Path, monkeypatch) -> None:
    source = tmp_path / "incoming"
    source.mkdir()
    shutil.copy(FIXTURES / "innodata_item.xml", source / "innodata_item.xml")
    out = tmp_path / "out"
    record = ArticleRecord(guid="innodata-20210504-0042")
    path = record_path(record, out)
    path.parent.mkdir(parents=True)
    path.write_text("", encoding="utf-8")

    assert run_import(monkeypatch, source, out) == 0
    assert json.loads(path.read_text(encoding="utf-8"))["version"] == "2"
    assert json.loads((out / "filelist.json").read_text(encoding="utf-8")) == ["innodata_item.xml"]
