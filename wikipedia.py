import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests
from bs4 import BeautifulSoup

import config
from models import RetrievedContext

logger = logging.getLogger(__name__)

HEADERS = {
    "User-Agent": "StudyMaterialAPI/1.0 (Educational Project)",
    "Accept": "application/json",
}

SEARCH_TIMEOUT = 8


def _page_url(title: str) -> str:
    return f"https://en.wikipedia.org/wiki/{quote(title.replace(' ', '_'))}"


def _html_to_text(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    return soup.get_text(" ", strip=True)


class WikipediaRetriever:
    """
    Fetches descriptive text about a topic from Wikipedia.

    Lookup order: full plain-text extract by title, then the top search hit's
    extract, then the REST page summary. Every network or HTTP error is folded
    into a miss, so fetch() never raises.
    """

    def __init__(
        self,
        api_url: str = config.WIKIPEDIA_API_URL,
        summary_url: str = config.WIKIPEDIA_SUMMARY_URL,
        timeout: float = config.WIKIPEDIA_TIMEOUT_SECONDS,
    ) -> None:
        self.api_url = api_url
        self.summary_url = summary_url
        self.timeout = timeout

    def _get_json(self, url: str, params: Optional[dict] = None, timeout: Optional[float] = None) -> Dict[str, Any]:
        resp = requests.get(url, params=params, headers=HEADERS, timeout=timeout or self.timeout)
        resp.raise_for_status()
        return resp.json()

    def _fetch_extract(self, title: str) -> Optional[RetrievedContext]:
        params = {
            "action": "query",
            "prop": "extracts",
            "titles": title,
            "explaintext": 1,
            "exsectionformat": "wiki",
            "exlimit": 1,
            "redirects": 1,
            "format": "json",
        }
        data = self._get_json(self.api_url, params)
        pages = (data.get("query") or {}).get("pages") or {}
        for page in pages.values():
            extract = (page.get("extract") or "").strip()
            if extract:
                page_title = page.get("title") or title
                return RetrievedContext(extract=extract, title=page_title, source_url=_page_url(page_title))
        return None

    def _search(self, topic: str) -> Optional[str]:
        params = {
            "action": "query",
            "list": "search",
            "srsearch": topic,
            "srlimit": 1,
            "srnamespace": 0,
            "format": "json",
        }
        data = self._get_json(self.api_url, params, timeout=min(self.timeout, SEARCH_TIMEOUT))
        hits = (data.get("query") or {}).get("search") or []
        if not hits:
            return None
        logger.info("Wikipedia search found %r for query %r", hits[0]["title"], topic)
        return hits[0]["title"]

    def _fetch_summary(self, title: str) -> Optional[RetrievedContext]:
        url = self.summary_url + quote(title.replace(" ", "_"), safe="")
        data = self._get_json(url, timeout=min(self.timeout, SEARCH_TIMEOUT))
        extract = (data.get("extract") or "").strip()
        if not extract and data.get("extract_html"):
            extract = _html_to_text(data["extract_html"])
        if not extract:
            return None
        page_title = data.get("title") or title
        page = ((data.get("content_urls") or {}).get("desktop") or {}).get("page")
        return RetrievedContext(extract=extract, title=page_title, source_url=page or _page_url(page_title))

    def fetch(self, topic: str) -> Optional[RetrievedContext]:
        topic = (topic or "").strip()
        if not topic:
            logger.warning("Wikipedia lookup skipped: empty topic")
            return None

        title = topic
        reasons = []

        try:
            context = self._fetch_extract(title)
            if context:
                return context
            reasons.append("no extract for title")
        except (requests.RequestException, ValueError) as e:
            reasons.append(f"extract: {type(e).__name__}: {e}")

        try:
            found = self._search(topic)
            if found:
                title = found
                context = self._fetch_extract(title)
                if context:
                    return context
                reasons.append(f"no extract for search hit {found!r}")
            else:
                reasons.append("no search results")
        except (requests.RequestException, ValueError, KeyError) as e:
            reasons.append(f"search: {type(e).__name__}: {e}")

        try:
            context = self._fetch_summary(title)
            if context:
                logger.info("Wikipedia summary fallback succeeded for %r", title)
                return context
            reasons.append("empty page summary")
        except (requests.RequestException, ValueError) as e:
            reasons.append(f"summary: {type(e).__name__}: {e}")

        logger.warning("No Wikipedia context for %r (%s)", topic, "; ".join(reasons))
        return None
