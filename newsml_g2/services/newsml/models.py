"""Typed models for normalized NewsML-G2 articles."""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class NewsMLNamespace:
    """Namespace binding every path query is evaluated against.

    Queries address elements through the fixed ``nar`` alias; only the URI
    it resolves to is configurable.
    """

    uri: str = "http://iptc.org/std/nar/2006-10-01/"

    alias = "nar"

    @classmethod
    def from_settings(cls, settings: Any) -> "NewsMLNamespace":
        return cls(uri=settings.newsml_namespace)

    @property
    def map(self) -> Dict[str, str]:
        return {self.alias: self.uri}


@dataclass(frozen=True)
class Topic:
    name: str
    qcode: str = ""


@dataclass(frozen=True)
class MediaRef:
    href: str


@dataclass(frozen=True)
class ArticleRecord:
    """Vendor-neutral article produced by exactly one dialect parser."""

    guid: str
    version: str = "1"
    timestamp: Optional[int] = None
    publish_date: Optional[int] = None
    title: str = ""
    subtitle: str = ""
    copyright_holder: str = ""
    copyright_notice: str = ""
    mediatopics: Tuple[Topic, ...] = ()
    locations: Tuple[Topic, ...] = ()
    content: str = ""
    multimedia: Tuple[MediaRef, ...] = ()
    source: str = ""
    source_uri: str = ""
    filename: str = ""

    def with_filename(self, filename: str) -> "ArticleRecord":
        return replace(self, filename=filename)

    @property
    def effective_date(self) -> Optional[int]:
        """Publication date if the dialect carries one, otherwise the creation time."""
        return self.publish_date or self.timestamp

    def location_names(self) -> str:
        return ", ".join(loc.name for loc in self.locations)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key in ("mediatopics", "locations", "multimedia"):
            data[key] = list(data[key])
        return data
