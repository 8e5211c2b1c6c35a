"""Batch driver: load, dispatch and parse every file a source provides."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, TypedDict

import requests  # type: ignore[import-untyped]

from newsml_g2.services.newsml.chooser import ParserChooser
from newsml_g2.services.newsml.loader import DocumentLoadError, load_document
from newsml_g2.services.newsml.models import ArticleRecord
from newsml_g2.services.newsml.sources import SourceFile

logger = logging.getLogger(__name__)


class FailedFile(TypedDict):
    name: str
    error: str


class ImportStats(TypedDict):
    parsed: int
    skipped: int
    unsupported: int
    errors: int
    failed_files: list[FailedFile]


def empty_stats() -> ImportStats:
    return {"parsed": 0, "skipped": 0, "unsupported": 0, "errors": 0, "failed_files": []}


@dataclass
class ImportResult:
    records: List[ArticleRecord] = field(default_factory=list)
    stats: ImportStats = field(default_factory=empty_stats)
    unsupported_files: List[str] = field(default_factory=list)


def parse_file(content: bytes, chooser: ParserChooser) -> ArticleRecord | None:
    """Load and parse one file; None when no dialect recognises it.

    Raises DocumentLoadError when the content is not well-formed XML.
    """
    document = load_document(content)
    parser = chooser.choose_parser(document)
    if parser is None:
        return None
    return parser.parse(document)


def ingest_files(
    files: Iterable[SourceFile],
    chooser: ParserChooser,
    *,
    seen: Iterable[str] = (),
    force: bool = False,
) -> ImportResult:
    """Parse every new file; a bad file is recorded and the batch goes on."""
    already = set(seen)
    result = ImportResult()
    stats = result.stats

    for source_file in files:
        name = source_file.name
        if name in already and not force:
            stats["skipped"] += 1
            continue
        already.add(name)

        try:
            content = source_file.read()
        except (requests.RequestException, OSError) as exc:
            logger.warning("[NewsML_G2] could not read %s: %s", name, exc)
            stats["errors"] += 1
            stats["failed_files"].append({"name": name, "error": str(exc)})
            continue

        try:
            record = parse_file(content, chooser)
        except DocumentLoadError as exc:
            logger.warning("[NewsML_G2] %s is not well-formed XML: %s", name, exc)
            stats["errors"] += 1
            stats["failed_files"].append({"name": name, "error": str(exc)})
            continue

        if record is None:
            logger.warning("[NewsML_G2] %s is unsupported, no appropriate parser found.", name)
            stats["unsupported"] += 1
            result.unsupported_files.append(name)
            continue

        logger.info("[NewsML_G2] parsed %s guid=%s version=%s", name, record.guid, record.version)
        result.records.append(record.with_filename(name))
        stats["parsed"] += 1

    return result
