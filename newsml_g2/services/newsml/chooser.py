"""Picks the dialect parser for a loaded NewsML-G2 document."""

from __future__ import annotations

from typing import List, Optional, Sequence

from newsml_g2.config import Settings, get_settings
from newsml_g2.services.newsml.dialects.apa import APAParser
from newsml_g2.services.newsml.dialects.base import DialectParser
from newsml_g2.services.newsml.dialects.innodata import InnodataParser
from newsml_g2.services.newsml.extractors import Document


def default_parsers(settings: Optional[Settings] = None) -> List[DialectParser]:
    """Registered dialects, most specific detector first.

    Innodata accepts any ``NewsML-G2`` news item, so APA (matched on its
    provider qcode) has to be asked before it.
    """
    settings = settings or get_settings()
    return [APAParser.from_settings(settings), InnodataParser.from_settings(settings)]


class ParserChooser:
    def __init__(self, parsers: Optional[Sequence[DialectParser]] = None) -> None:
        self.parsers = tuple(parsers) if parsers is not None else tuple(default_parsers())

    def choose_parser(self, document: Document) -> Optional[DialectParser]:
        """Return the first parser that accepts the document, or None."""
        for parser in self.parsers:
            if parser.can_parse(document):
                return parser
        return None
