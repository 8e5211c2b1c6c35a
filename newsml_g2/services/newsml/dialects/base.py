"""Interface shared by the dialect parsers."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from newsml_g2.services.newsml.extractors import Document
from newsml_g2.services.newsml.models import ArticleRecord


@runtime_checkable
class DialectParser(Protocol):
    """A parser that recognises one provider's NewsML-G2 shape.

    Implementations keep no state between calls; ``parse`` builds a fresh
    record every time.
    """

    name: str

    def can_parse(self, document: Document) -> bool:
        ...

    def parse(self, document: Document) -> ArticleRecord:
        ...
