"""
CelesTrak supplemental GP data client

Scrapes the supplemental index page for the per-constellation TLE file links
and downloads each file.

The index lists one source per `td.center` cell of the striped catalog table;
the first link in a cell is the TLE file, its text the constellation name.
"""

import logging
import re
from dataclasses import dataclass, replace
from html.parser import HTMLParser
from pathlib import Path
from typing import List, Optional, Tuple, Union
from urllib.parse import urljoin

import requests

from satledger.core.errors import CatalogError, SourceReadFailure

logger = logging.getLogger(__name__)

CATALOG_TABLE_CLASSES = {"center", "outline", "striped"}


@dataclass(frozen=True)
class CatalogSource:
    """A named TLE source: constellation name, where it came from, and the local copy."""
    name: str
    url: Optional[str] = None
    path: Optional[Path] = None


class _CatalogTableParser(HTMLParser):
    """Collects (text, href) of the first link in each `table.center.outline.striped > tbody td.center`."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.links: List[Tuple[str, str]] = []
        self._in_table = False
        self._in_tbody = False
        self._in_cell = False
        self._cell_done = False
        self._href: Optional[str] = None
        self._text: List[str] = []

    def handle_starttag(self, tag, attrs):
        attrs = dict(attrs)
        classes = set((attrs.get("class") or "").split())

        if tag == "table" and CATALOG_TABLE_CLASSES <= classes:
            self._in_table = True
        elif tag == "tbody" and self._in_table:
            self._in_tbody = True
        elif tag == "td" and self._in_tbody and "center" in classes:
            self._in_cell = True
            self._cell_done = False
        elif tag == "a" and self._in_cell and not self._cell_done and attrs.get("href"):
            self._href = attrs["href"]
            self._text = []

    def handle_data(self, data):
        if self._href is not None:
            self._text.append(data)

    def handle_endtag(self, tag):
        if tag == "a" and self._href is not None:
            self.links.append(("".join(self._text).strip(), self._href))
            self._href = None
            self._cell_done = True
        elif tag == "td":
            self._in_cell = False
        elif tag == "tbody":
            self._in_tbody = False
        elif tag == "table":
            self._in_table = False


def parse_catalog_html(html: str, base_url: str) -> List[CatalogSource]:
    parser = _CatalogTableParser()
    parser.feed(html)
    parser.close()

    sources = []
    for name, href in parser.links:
        if not name:
            logger.warning(f"Skipping unnamed catalog link {href!r}")
            continue
        sources.append(CatalogSource(name=name, url=urljoin(base_url, href)))
    return sources


def fetch_catalog(url: str, timeout: float = 60.0) -> List[CatalogSource]:
    """
    Fetch the supplemental index page and list its TLE sources.

    Raises:
        CatalogError: If the page cannot be fetched.
    """
    logger.info(f"Visiting {url}...")
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise CatalogError(f"Failed to fetch catalog from {url}: {e}") from e

    return parse_catalog_html(response.text, url)


def safe_filename(name: str) -> str:
    return re.sub(r"[^\w.-]+", "_", name).strip("._") or "source"


def download_source(
    source: CatalogSource,
    directory: Union[str, Path],
    timeout: float = 60.0,
    index: Optional[int] = None,
) -> CatalogSource:
    """
    Download a source's TLE file into `directory` as `<name>.txt`, or as
    `<index>_<name>.txt` when `index` is given (distinct names can share a
    sanitised `<name>`).

    Returns a copy of the source with `path` set.

    Raises:
        SourceReadFailure: On any network or filesystem error.
    """
    if not source.url:
        raise SourceReadFailure(f"No URL for {source.name!r}")

    try:
        response = requests.get(source.url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise SourceReadFailure(f"Failed to download {source.url}: {e}") from e

    filename = f"{safe_filename(source.name)}.txt"
    if index is not None:
        filename = f"{index:03d}_{filename}"
    path = Path(directory) / filename
    try:
        path.write_bytes(response.content)
    except OSError as e:
        raise SourceReadFailure(f"Could not write {path}: {e}") from e

    logger.debug(f"Downloaded {source.name!r} ({len(response.content)} bytes) to {path}")
    return replace(source, path=path)
