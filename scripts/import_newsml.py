"""CLI runner for importing NewsML-G2 files."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from newsml_g2.config import get_settings
from newsml_g2.services.mediatopics.vocabulary import (
    VOCABULARY_FILE,
    MediaTopicError,
    MediaTopicTerm,
    label_topics,
    load_vocabulary,
)
from newsml_g2.services.newsml.chooser import ParserChooser, default_parsers
from newsml_g2.services.newsml.ingest import ImportResult, ingest_files
from newsml_g2.services.newsml.sources import open_source
from newsml_g2.services.newsml.storage import load_filelist, save_filelist, save_record


def parse_args() -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Import NewsML-G2 files (APA/OTS, Innodata).")
    parser.add_argument(
        "--source",
        default=settings.import_source,
        help="Directory or HTTP(S) URL holding the XML files.",
    )
    parser.add_argument(
        "--out",
        default=str(settings.import_output_dir),
        help="Output directory root (parsed records, file list, report).",
    )
    parser.add_argument(
        "--rss",
        action="store_true",
        default=settings.import_use_rss,
        help="Treat an HTTP source as an RSS feed listing the files.",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Re-import files that are already in the file list.",
    )
    return parser.parse_args()


def store_records(
    result: ImportResult, out_dir: Path, terms: Sequence[MediaTopicTerm] = ()
) -> tuple[int, list[str]]:
    """Save parsed records; returns the number written and the names to remember.

    Topic names missing from a record are filled in from the vocabulary terms.
    """
    written = 0
    imported: list[str] = []
    for record in result.records:
        if terms:
            record = replace(record, mediatopics=label_topics(record.mediatopics, terms))
        if save_record(record, out_dir):
            written += 1
        imported.append(record.filename)
    return written, imported


def main() -> int:
    settings = get_settings()
    args = parse_args()
    logging.basicConfig(
        level=settings.log_level.upper(), format="%(levelname)s %(name)s: %(message)s"
    )
    if not args.source:
        print("[warn] No source given, set NEWSML_SOURCE or pass --source.")
        return 1

    out_dir = Path(args.out)
    seen = load_filelist(out_dir)
    try:
        terms = load_vocabulary(out_dir / VOCABULARY_FILE)
    except MediaTopicError as exc:
        print(f"[warn] Ignoring saved media topics: {exc}")
        terms = []
    source = open_source(
        args.source,
        use_rss=args.rss,
        rate_limit=settings.fetch_rate_limit_seconds,
        user_agent=settings.fetch_user_agent,
    )
    print(f"[info] Importing from {args.source} (known files: {len(seen)})")

    chooser = ParserChooser(default_parsers(settings))
    result = ingest_files(source, chooser, seen=seen, force=args.force)
    written, imported = store_records(result, out_dir, terms)
    save_filelist(out_dir, [*seen, *imported])

    stats = result.stats
    print(
        "[summary] parsed={parsed}, skipped={skipped}, unsupported={unsupported}, "
        "errors={errors}".format(**stats)
        + f", written={written}"
    )
    report = {
        "stats": stats,
        "written": written,
        "unsupported_files": result.unsupported_files,
    }
    (out_dir / "import_report.json").write_text(
        json.dumps(report, ensure_ascii=False, indent=2), encoding="utf-8"
    )
    return 0


if __name__ == "__main__":  # pragma: no cover - manual execution
    raise SystemExit(main())
