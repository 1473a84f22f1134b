"""Remote collection fetching: page-number and cursor pagination over the Bee API."""

from __future__ import annotations
import json
from typing import Optional, Dict, Any, List

import requests

from . import audit
from .audit import AuditSink, NullAuditLog
from .config import DEFAULT_BASE_URL, SyncConfig
from .errors import ConfigurationError, FormatError, NetworkError

# ── Constants ────────────────────────────────────────────────────────────────
API_VERSION      = "v1"
PAGE_LIMIT       = 10
MAX_PAGES        = 1000
AUDIT_BODY_CHARS = 2000

CONVERSATIONS_ENDPOINT = "me/conversations"
LIFELOGS_ENDPOINT      = "lifelogs"


def _truncate(text: str, limit: int=AUDIT_BODY_CHARS) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + f"\n... ({len(text) - limit} more characters)"

def _require_int(meta: Dict[str,Any], key: str) -> int:
    value = meta.get(key)
    # bool is an int subclass; a JSON true/false is not a page number
    if not isinstance(value, int) or isinstance(value, bool):
        raise FormatError(f"Invalid response format: meta.{key} missing or not an integer")
    return value

def _next_cursor(data: Dict[str,Any], collection: str) -> Optional[str]:
    # an absent meta block means there is nothing further to fetch
    meta = data.get("meta", {})
    if meta is None:
        return None
    if not isinstance(meta, dict):
        raise FormatError("Invalid response format: expected 'meta' object")
    section = meta.get(collection)
    if section is None:
        return None
    if not isinstance(section, dict):
        raise FormatError(f"Invalid response format: expected 'meta.{collection}' object")
    cursor = section.get("nextCursor")
    if cursor is not None and not isinstance(cursor, str):
        raise FormatError(f"Invalid response format: 'meta.{collection}.nextCursor' must be a string or null")
    return cursor

# ── HTTP & Pagination ────────────────────────────────────────────────────────
class ApiClient:
    def __init__(self, api_key: str, base_url: str=DEFAULT_BASE_URL,
                 audit_sink: Optional[AuditSink]=None, session: Optional[requests.Session]=None):
        if not api_key:
            raise ConfigurationError("Missing API key")
        self.key = api_key
        self.base_url = base_url.rstrip("/")
        self.audit = audit_sink or NullAuditLog()
        self.session = session or requests.Session()

    def request(self, endpoint: str, params: Dict[str,Any]) -> Dict[str,Any]:
        url = f"{self.base_url}/{API_VERSION}/{endpoint.lstrip('/')}"
        headers = {
            "X-API-Key": self.key,
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        audit.info(self.audit, f"GET {url} params={json.dumps(params, sort_keys=True)}")
        try:
            resp = self.session.get(url, headers=headers, params=params)
            resp.raise_for_status()
        except requests.RequestException as e:
            status = getattr(e.response, "status_code", None)
            body = ""
            if e.response is not None:
                body = "\n" + _truncate(e.response.text or "")
            audit.error(self.audit, f"GET {url} failed (status {status}): {e}{body}")
            raise NetworkError(str(e), status_code=status) from e

        try:
            data = resp.json()
        except ValueError as e:
            audit.error(self.audit, f"GET {url} returned {resp.status_code} with a non-JSON body:\n{_truncate(resp.text or '')}")
            raise FormatError("Invalid response format: body is not JSON") from e
        if not isinstance(data, dict):
            audit.error(self.audit, f"GET {url} returned {resp.status_code} with a non-object body")
            raise FormatError("Invalid response format: expected a JSON object")

        audit.info(self.audit, f"Response {resp.status_code} from {url}:\n```json\n{_truncate(json.dumps(data, indent=2))}\n```")
        return data

    def fetch_pages(self, endpoint: str, limit: int=PAGE_LIMIT, max_pages: int=MAX_PAGES) -> List[Dict[str,Any]]:
        """
        Page-number pagination: ``{data: [...], meta: {currentPage, totalPages}}``.

        Requests page 1, 2, ... until the server reports ``currentPage >= totalPages``.
        The echoed page number has to advance on every response; a server that
        repeats a stale page is treated as a format error rather than looped on.
        """
        records: List[Dict[str,Any]] = []
        page = 1
        last_page: Optional[int] = None
        for _ in range(max_pages):
            data = self.request(endpoint, {"page": page, "limit": limit})
            items = data.get("data")
            meta = data.get("meta")
            if not isinstance(items, list) or not isinstance(meta, dict):
                raise FormatError("Invalid response format: expected 'data' list and 'meta' object")
            current = _require_int(meta, "currentPage")
            total = _require_int(meta, "totalPages")
            if last_page is not None and current <= last_page:
                raise FormatError(f"Pagination did not advance (page {current} after {last_page})")
            last_page = current
            records.extend(items)
            if current >= total:
                return records
            page = current + 1
        raise FormatError(f"Pagination exceeded {max_pages} pages")

    def fetch_cursor(self, endpoint: str, collection: str, params: Optional[Dict[str,Any]]=None,
                     limit: int=PAGE_LIMIT, max_pages: int=MAX_PAGES) -> List[Dict[str,Any]]:
        """
        Cursor pagination: ``{data: {<collection>: [...]}, meta: {<collection>: {nextCursor}}}``.

        One request per cursor value, starting with no cursor, until the server
        returns a null (or empty) ``nextCursor``.
        """
        base = dict(params or {})
        base["limit"] = limit
        records: List[Dict[str,Any]] = []
        cursor: Optional[str] = None
        seen = set()
        for _ in range(max_pages):
            page_params = dict(base)
            if cursor:
                page_params["cursor"] = cursor
            data = self.request(endpoint, page_params)
            body = data.get("data")
            items = body.get(collection) if isinstance(body, dict) else None
            if not isinstance(items, list):
                raise FormatError(f"Invalid response format: expected 'data.{collection}' list")
            records.extend(items)
            cursor = _next_cursor(data, collection)
            if not cursor:
                return records
            if cursor in seen:
                raise FormatError(f"Cursor '{cursor}' was returned twice")
            seen.add(cursor)
        raise FormatError(f"Pagination exceeded {max_pages} pages")


def fetch_all(config: SyncConfig, kind: str, audit_sink: Optional[AuditSink]=None,
              session: Optional[requests.Session]=None, start: Optional[str]=None) -> List[Dict[str,Any]]:
    """
    Fetch every record of ``kind`` ("conversations" or "lifelogs").

    Raises ConfigurationError before any network activity when no API key is set;
    NetworkError / FormatError abort the whole fetch with no partial result.
    """
    if not config.api_key:
        raise ConfigurationError("Missing API key")
    client = ApiClient(config.api_key, config.base_url, audit_sink, session)
    if kind == "conversations":
        return client.fetch_pages(CONVERSATIONS_ENDPOINT)
    if kind == "lifelogs":
        params: Dict[str,Any] = {"direction": "asc"}
        if start:
            params["start"] = start
        return client.fetch_cursor(LIFELOGS_ENDPOINT, "lifelogs", params)
    raise ValueError(f"Unknown record kind: {kind}")
