"""Download the IPTC media topic vocabulary with its topic tree."""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict
from pathlib import Path

from newsml_g2.config import get_settings
from newsml_g2.services.mediatopics.vocabulary import (
    VOCABULARY_FILE,
    MediaTopicError,
    build_tree,
    fetch_vocabulary,
    resolve_language,
)


def parse_args() -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Fetch IPTC media topics.")
    parser.add_argument("--lang", default=settings.mediatopic_language)
    parser.add_argument("--out", default=str(settings.import_output_dir / VOCABULARY_FILE))
    return parser.parse_args()


def main() -> int:
    settings = get_settings()
    args = parse_args()
    language = resolve_language(args.lang, settings.supported_languages)
    try:
        terms = fetch_vocabulary(settings.mediatopic_url, language)
    except MediaTopicError as exc:
        print(f"[warn] Could not fetch media topics: {exc}")
        return 1

    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "language": language,
        "terms": [asdict(term) for term in terms],
        "parents": build_tree(terms),
    }
    out_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    print(f"[info] saved {len(terms)} media topics ({language}) to {out_path}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
