"""
Search engine definitions and query extraction.

An engine matches when the URL host equals one of its domains or is a
subdomain of it. Domains ending in "." (e.g. ``google.``) match any
country TLD. The query text is the URL-decoded value of the engine's
query parameter, taken from the query string or, failing that, the
fragment (Google instant search puts it there).

The default list can be replaced by a YAML file:

    engines:
      - name: Google
        domains: [google.]
        param: q
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple
from urllib.parse import parse_qs, urlsplit

import yaml

from core.logging import get_logger

from ...exceptions import ConfigurationError

LOGGER = get_logger("extractors.analysis.search_queries.engines")


@dataclass(frozen=True)
class SearchEngine:
    """One search engine: display name, host domains and query parameter."""
    name: str
    domains: Tuple[str, ...]
    param: str

    def matches_host(self, host: str) -> bool:
        host = host.lower()
        for domain in self.domains:
            if domain.endswith("."):
                # TLD wildcard: google. matches google.com, www.google.co.uk
                if host.startswith(domain) or f".{domain}" in host:
                    return True
            elif host == domain or host.endswith(f".{domain}"):
                return True
        return False


DEFAULT_ENGINES: Tuple[SearchEngine, ...] = (
    SearchEngine("Google", ("google.",), "q"),
    SearchEngine("Bing", ("bing.com",), "q"),
    SearchEngine("Yahoo", ("search.yahoo.com",), "p"),
    SearchEngine("DuckDuckGo", ("duckduckgo.com",), "q"),
    SearchEngine("Baidu", ("baidu.com",), "wd"),
    SearchEngine("Yandex", ("yandex.",), "text"),
    SearchEngine("Ask", ("ask.com",), "q"),
)


def load_engines(path: Optional[Path]) -> List[SearchEngine]:
    """
    Load engine definitions from YAML, or return the defaults when path is None.

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    if path is None:
        return list(DEFAULT_ENGINES)

    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Cannot read search engine file {path}: {exc}") from exc

    entries = data.get("engines") if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise ConfigurationError(f"{path}: expected an 'engines' list")

    engines: List[SearchEngine] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ConfigurationError(f"{path}: engine #{index} is not a mapping")
        name = entry.get("name")
        domains = entry.get("domains")
        param = entry.get("param")
        if isinstance(domains, str):
            domains = [domains]
        if not name or not param or not domains:
            raise ConfigurationError(f"{path}: engine #{index} needs name, domains and param")
        engines.append(SearchEngine(str(name), tuple(str(d).lower() for d in domains), str(param)))

    LOGGER.info("Loaded %d search engine definition(s) from %s", len(engines), path)
    return engines


def extract_search_query(url: str, engines: Sequence[SearchEngine]) -> Optional[Tuple[SearchEngine, str, str]]:
    """
    Return (engine, host, query text) when the URL is a search, else None.

    Example:
        >>> engine, host, text = extract_search_query(
        ...     "https://www.google.com/search?q=forensic+tools", DEFAULT_ENGINES)
        >>> engine.name, host, text
        ('Google', 'www.google.com', 'forensic tools')
    """
    try:
        parts = urlsplit(url)
        host = parts.hostname
    except ValueError:
        return None
    if not host:
        return None

    for engine in engines:
        if not engine.matches_host(host):
            continue
        for component in (parts.query, parts.fragment):
            values = parse_qs(component).get(engine.param)
            if values and values[0].strip():
                return engine, host, values[0].strip()
        return None
    return None
