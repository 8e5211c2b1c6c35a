"""File sources feeding NewsML-G2 documents into the importer."""

from __future__ import annotations

import logging
import time
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator
from urllib.parse import urljoin, urlsplit

import requests  # type: ignore[import-untyped]
from bs4 import BeautifulSoup

DEFAULT_RETRIES = 3
BACKOFF_SECONDS = [0.5, 1.0, 2.0]
REQUEST_TIMEOUT = 20.0
RETRY_STATUSES = {429, 500, 502, 503, 504}

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceFile:
    """A named file whose bytes are only read when the importer asks for them."""

    name: str
    read: Callable[[], bytes]


@dataclass
class FetchContext:
    session: requests.Session
    rate_limit_seconds: float
    user_agent: str
    last_request_ts: float = 0.0

    def wait_for_rate_limit(self) -> None:
        now = time.time()
        elapsed = now - self.last_request_ts
        if elapsed < self.rate_limit_seconds:
            time.sleep(self.rate_limit_seconds - elapsed)

    def update_timestamp(self) -> None:
        self.last_request_ts = time.time()


def polite_get(ctx: FetchContext, url: str) -> requests.Response:
    """GET with rate limit, retries, and backoff on 429/5xx."""
    headers = {"User-Agent": ctx.user_agent}
    for attempt in range(DEFAULT_RETRIES):
        ctx.wait_for_rate_limit()
        try:
            resp = ctx.session.get(url, headers=headers, timeout=REQUEST_TIMEOUT)
            ctx.update_timestamp()
        except requests.RequestException:
            if attempt == DEFAULT_RETRIES - 1:
                raise
            time.sleep(BACKOFF_SECONDS[min(attempt, len(BACKOFF_SECONDS) - 1)])
            continue

        if resp.status_code in RETRY_STATUSES:
            if attempt == DEFAULT_RETRIES - 1:
                resp.raise_for_status()
            time.sleep(BACKOFF_SECONDS[min(attempt, len(BACKOFF_SECONDS) - 1)])
            continue
        resp.raise_for_status()
        return resp
    return resp  # pragma: no cover - logically unreachable


def filename_from_url(url: str) -> str:
    path = urlsplit(url).path
    return path.rstrip("/").rsplit("/", 1)[-1] or url


def parse_index(html: str, base_url: str) -> list[str]:
    """Absolute URLs of the ``.xml`` files linked from a directory listing."""
    soup = BeautifulSoup(html, "lxml")
    urls: list[str] = []
    for a in soup.find_all("a", href=True):
        link = urljoin(base_url, str(a.get("href", "")))
        if urlsplit(link).path.lower().endswith(".xml") and link not in urls:
            urls.append(link)
    return urls


def parse_feed(xml: str) -> list[str]:
    """Item links of an RSS feed that lists the files to import."""
    soup = BeautifulSoup(xml, "xml")
    links: list[str] = []
    for item in soup.find_all("item"):
        link = item.find("link")
        text = link.get_text(strip=True) if link else ""
        if text:
            links.append(text)
    return links


class DirectorySource:
    """XML files in a local folder, one sub-folder level deep, and in zip archives."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def __iter__(self) -> Iterator[SourceFile]:
        for file in sorted(self.path.iterdir()):
            suffix = file.suffix.lower()
            if file.is_dir():
                for nested in sorted(file.glob("*.xml")):
                    yield SourceFile(name=nested.name, read=nested.read_bytes)
            elif suffix == ".xml":
                yield SourceFile(name=file.name, read=file.read_bytes)
            elif suffix == ".zip":
                yield from self._archive_members(file)

    @staticmethod
    def _archive_members(archive: Path) -> Iterator[SourceFile]:
        try:
            with zipfile.ZipFile(archive) as zf:
                members = [m for m in zf.namelist() if m.lower().endswith(".xml")]
        except zipfile.BadZipFile as exc:
            logger.warning("[NewsML_G2] skipping unreadable archive %s: %s", archive.name, exc)
            return

        # sub-folders inside the archive are flattened to their file names
        for member in sorted(members):
            def read(member: str = member) -> bytes:
                with zipfile.ZipFile(archive) as zf:
                    return zf.read(member)

            yield SourceFile(name=member.rsplit("/", 1)[-1], read=read)


class HttpSource:
    """Files listed by an HTTP directory index or by an RSS feed."""

    def __init__(
        self,
        base_url: str,
        *,
        use_rss: bool = False,
        rate_limit: float = 0.5,
        user_agent: str = "newsml-g2-import/0.1",
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url
        self.use_rss = use_rss
        self.ctx = FetchContext(
            session=session or requests.Session(),
            rate_limit_seconds=rate_limit,
            user_agent=user_agent,
        )

    def file_urls(self) -> list[str]:
        resp = polite_get(self.ctx, self.base_url)
        if self.use_rss:
            return [urljoin(self.base_url, link) for link in parse_feed(resp.text)]
        return parse_index(resp.text, self.base_url)

    def __iter__(self) -> Iterator[SourceFile]:
        for url in self.file_urls():
            yield SourceFile(name=filename_from_url(url), read=self._reader(url))

    def _reader(self, url: str) -> Callable[[], bytes]:
        def read() -> bytes:
            return polite_get(self.ctx, url).content

        return read


def open_source(
    location: str | Path,
    *,
    use_rss: bool = False,
    rate_limit: float = 0.5,
    user_agent: str = "newsml-g2-import/0.1",
) -> DirectorySource | HttpSource:
    """HTTP(S) locations become an HttpSource, anything else a DirectorySource."""
    text = str(location)
    if urlsplit(text).scheme in {"http", "https"}:
        return HttpSource(text, use_rss=use_rss, rate_limit=rate_limit, user_agent=user_agent)
    return DirectorySource(Path(text))
