"""JSON storage for parsed articles and the list of imported files."""

from __future__ import annotations

import hashlib
import json
import re
from pathlib import Path
from typing import Iterable

from newsml_g2.services.newsml.models import ArticleRecord

FILELIST_NAME = "filelist.json"


def slug_from_guid(guid: str) -> str:
    slug = re.sub(r"[^a-zA-Z0-9_-]+", "-", guid).strip("-")[:80]
    digest = hashlib.sha1(guid.encode("utf-8")).hexdigest()[:10]
    return f"{slug or 'article'}-{digest}"


def is_newer_version(incoming: str, existing: str) -> bool:
    """True unless the stored version is strictly newer than the incoming one."""
    if incoming.isdigit() and existing.isdigit():
        return int(incoming) >= int(existing)
    return incoming >= existing


def record_path(record: ArticleRecord, out_dir: Path) -> Path:
    return out_dir / "parsed" / f"{slug_from_guid(record.guid)}.json"


def record_payload(record: ArticleRecord) -> dict:
    """Stored form of a record: its fields plus the post date and location meta."""
    payload = record.to_dict()
    payload["effective_date"] = record.effective_date
    payload["location_names"] = record.location_names()
    return payload


def _stored_version(path: Path) -> str | None:
    try:
        stored = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        return None
    if not isinstance(stored, dict):
        return None
    return str(stored.get("version", "1"))


def save_record(record: ArticleRecord, out_dir: Path) -> bool:
    """Upsert the record keyed by guid. Returns False if a newer version is already stored.

    An unreadable stored file is overwritten.
    """
    path = record_path(record, out_dir)
    if path.exists():
        existing = _stored_version(path)
        if existing is not None and not is_newer_version(record.version, existing):
            return False
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = record_payload(record)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    return True


def load_filelist(out_dir: Path) -> list[str]:
    path = out_dir / FILELIST_NAME
    if not path.exists():
        return []
    try:
        names = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        return []
    return list(dict.fromkeys(str(name) for name in names))


def save_filelist(out_dir: Path, names: Iterable[str]) -> Path:
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / FILELIST_NAME
    unique = list(dict.fromkeys(names))
    path.write_text(json.dumps(unique, ensure_ascii=False, indent=2), encoding="utf-8")
    return path
