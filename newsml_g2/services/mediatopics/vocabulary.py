"""IPTC media topic vocabulary used to label and arrange article topics."""

from __future__ import annotations

from dataclasses import dataclass, replace
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple

import httpx

from newsml_g2.services.newsml.models import Topic

QCODE_PREFIX = "medtop:"
FALLBACK_LANGUAGE = "en"
VOCABULARY_FILE = "mediatopics.json"


class MediaTopicError(Exception):
    """Raised when the vocabulary cannot be fetched or decoded."""


@dataclass(frozen=True)
class MediaTopicTerm:
    qcode: str
    name: str
    definition: str = ""
    modified: str = ""
    broader_qcodes: Tuple[str, ...] = ()


def resolve_language(locale: str, supported: Sequence[str]) -> str:
    """Two-letter language of a locale if the vocabulary has it, else English."""
    language = (locale or "").replace("_", "-").split("-")[0].lower()
    return language if language in supported else FALLBACK_LANGUAGE


def to_qcode(reference: str) -> str:
    """``medtop:`` qcode for either a qcode or a vocabulary URI."""
    if reference.startswith(QCODE_PREFIX):
        return reference
    return QCODE_PREFIX + reference.rstrip("/").rsplit("/", 1)[-1]


def _localized(values: Any, language: str) -> str:
    if isinstance(values, str):
        return values
    if not isinstance(values, Mapping) or not values:
        return ""
    for key, value in values.items():
        if key.lower() == language or key.lower().startswith(language + "-"):
            return str(value)
    return str(next(iter(values.values())))


def parse_vocabulary(payload: Mapping[str, Any], language: str) -> List[MediaTopicTerm]:
    terms: List[MediaTopicTerm] = []
    for concept in payload.get("conceptSet") or []:
        if not isinstance(concept, Mapping):
            continue
        reference = concept.get("qcode") or concept.get("uri") or ""
        if not reference:
            continue
        terms.append(
            MediaTopicTerm(
                qcode=to_qcode(str(reference)),
                name=_localized(concept.get("prefLabel"), language),
                definition=_localized(concept.get("definition"), language),
                modified=str(concept.get("modified") or ""),
                broader_qcodes=tuple(to_qcode(str(ref)) for ref in concept.get("broader") or []),
            )
        )
    return terms


def fetch_vocabulary(url: str, language: str, timeout_s: float = 30.0) -> List[MediaTopicTerm]:
    """Download the vocabulary in one language."""
    try:
        response = httpx.get(
            url,
            params={"format": "json", "lang": language},
            timeout=timeout_s,
            follow_redirects=True,
        )
        response.raise_for_status()
        payload = response.json()
    except httpx.RequestError as exc:
        raise MediaTopicError(f"connection error: {exc}") from exc
    except httpx.HTTPStatusError as exc:
        raise MediaTopicError(f"vocabulary returned {exc.response.status_code}") from exc
    except ValueError as exc:
        raise MediaTopicError(f"vocabulary is not valid JSON: {exc}") from exc
    if not isinstance(payload, Mapping):
        raise MediaTopicError("vocabulary payload is not an object")
    return parse_vocabulary(payload, language)


def load_vocabulary(path: Path) -> List[MediaTopicTerm]:
    """Terms from a file written by the media topic fetcher; empty if there is none."""
    if not path.exists():
        return []
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise MediaTopicError(f"saved vocabulary is not valid JSON: {exc}") from exc
    if not isinstance(payload, Mapping):
        raise MediaTopicError("saved vocabulary is not an object")
    terms: List[MediaTopicTerm] = []
    for term in payload.get("terms") or []:
        terms.append(
            MediaTopicTerm(
                qcode=str(term.get("qcode") or ""),
                name=str(term.get("name") or ""),
                definition=str(term.get("definition") or ""),
                modified=str(term.get("modified") or ""),
                broader_qcodes=tuple(term.get("broader_qcodes") or ()),
            )
        )
    return terms


def build_tree(terms: Iterable[MediaTopicTerm]) -> Dict[str, str]:
    """Map each qcode to its parent (first broader topic known to the vocabulary)."""
    terms = list(terms)
    known = {term.qcode for term in terms}
    tree: Dict[str, str] = {}
    for term in terms:
        parents = [qcode for qcode in term.broader_qcodes if qcode in known]
        if parents:
            tree[term.qcode] = parents[0]
    return tree


def label_topics(topics: Iterable[Topic], terms: Iterable[MediaTopicTerm]) -> Tuple[Topic, ...]:
    """Fill in missing topic names from the vocabulary; qcodes are never changed."""
    names = {term.qcode: term.name for term in terms}
    labelled: List[Topic] = []
    for topic in topics:
        if not topic.name and topic.qcode in names:
            topic = replace(topic, name=names[topic.qcode])
        labelled.append(topic)
    return tuple(labelled)
