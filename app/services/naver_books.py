import logging
import re
from datetime import date
from typing import Any, Dict, List, Optional

import httpx

from app.core.config import get_settings

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]*>")

# 네이버 API의 정렬값. relevance는 sim의 별칭으로 받는다.
SORT_ALIASES = {"sim": "sim", "relevance": "sim", "date": "date"}


def strip_markup(text: Optional[str]) -> str:
    # 검색어 강조용 <b> 태그 등 제거
    if not text:
        return ""
    return _TAG_RE.sub("", text)


def first_isbn(raw: Optional[str]) -> str:
    # "8932917248 9788932917245" 처럼 여러 개가 오면 첫 번째만 사용
    if not raw:
        return ""
    parts = raw.split()
    return parts[0] if parts else ""


def parse_pubdate(raw: Optional[str]) -> Optional[date]:
    if not raw:
        return None
    raw = raw.strip()
    m = re.fullmatch(r"(\d{4})(\d{2})(\d{2})", raw)
    if m:
        raw = f"{m.group(1)}-{m.group(2)}-{m.group(3)}"
    try:
        return date.fromisoformat(raw)
    except ValueError:
        return None


def map_item_to_book_fields(item: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "title": strip_markup(item.get("title")),
        "link": item.get("link"),
        "image": item.get("image"),
        "author": item.get("author"),
        "publisher": item.get("publisher"),
        "pub_date": parse_pubdate(item.get("pubdate")),
        "isbn": first_isbn(item.get("isbn")),
        "description": strip_markup(item.get("description")),
        "price": item.get("price"),
        "discount": item.get("discount"),
    }


class NaverBooksClient:
    def __init__(
        self,
        client_id: Optional[str],
        client_secret: Optional[str],
        base_url: str = "https://openapi.naver.com/v1/search",
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _request(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        headers = {
            "X-Naver-Client-Id": self.client_id or "",
            "X-Naver-Client-Secret": self.client_secret or "",
        }
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            r = client.get(f"{self.base_url}/{path}", params=params, headers=headers)
            r.raise_for_status()
            return r.json()

    def search(self, query: str, display: int = 10, start: int = 1, sort: str = "sim") -> Dict[str, Any]:
        return self._request(
            "book.json",
            {"query": query, "display": display, "start": start, "sort": sort},
        )

    def search_by_isbn(self, isbn: str) -> List[Dict[str, Any]]:
        data = self._request(
            "book_adv.json",
            {"d_isbn": isbn, "display": 1, "start": 1, "sort": "sim"},
        )
        return data.get("items") or []


def import_by_isbn(client: NaverBooksClient, isbn: str) -> Optional[Dict[str, Any]]:
    """ISBN 정확 일치 검색 후 첫 결과를 로컬 Book 형태로 변환. 결과가 없으면 None."""
    items = client.search_by_isbn(isbn)
    if not items:
        logger.info("No catalog match for ISBN %s", isbn)
        return None
    return map_item_to_book_fields(items[0])


def search_by_query(
    client: NaverBooksClient,
    query: str,
    display: int = 10,
    start: int = 1,
    sort: str = "sim",
) -> Dict[str, Any]:
    data = client.search(query, display=display, start=start, sort=SORT_ALIASES.get(sort, sort))
    return {
        "total": data.get("total", 0),
        "start": data.get("start", start),
        "display": data.get("display", display),
        "items": [map_item_to_book_fields(item) for item in data.get("items") or []],
    }


def get_catalog_client() -> NaverBooksClient:
    settings = get_settings()
    return NaverBooksClient(
        settings.naver_api_client_id,
        settings.naver_api_client_secret,
        base_url=settings.naver_api_base_url,
        timeout=settings.naver_timeout_seconds,
    )
