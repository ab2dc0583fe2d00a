from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional

import requests

from . import config


log = logging.getLogger(__name__)


class SheetFetchError(RuntimeError):
    def __init__(self, url: str, status_code: int, reason: str = ""):
        self.url = url
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"Failed to fetch CSV: {status_code} {reason}".rstrip())


@dataclass
class SheetsConfig:
    export_url: str = config.EXPORT_URL_TEMPLATE
    user_agent: str = config.USER_AGENT
    timeout: Optional[float] = config.FETCH_TIMEOUT

    def url_for(self, remote_id: str, tab_id: str) -> str:
        return self.export_url.format(remote_id=remote_id, tab_id=tab_id)


def build_session(cfg: SheetsConfig) -> requests.Session:
    s = requests.Session()
    s.headers.update(
        {
            "User-Agent": cfg.user_agent,
            "Accept": "text/csv,text/plain,*/*",
        }
    )
    return s


def export_url(cfg: SheetsConfig, remote_id: str, tab_id: str) -> str:
    return cfg.url_for(remote_id, tab_id)


def fetch_csv(session: requests.Session, cfg: SheetsConfig, remote_id: str, tab_id: str) -> str:
    """Download one tab as CSV text. No retry; non-2xx raises SheetFetchError."""
    url = export_url(cfg, remote_id, tab_id)
    log.debug(f"fetch_csv: GET {url}")
    resp = session.get(url, allow_redirects=True, timeout=cfg.timeout)
    if not resp.ok:
        raise SheetFetchError(url, resp.status_code, resp.reason or "")
    # Sheets exports are UTF-8 but often arrive without a charset.
    resp.encoding = "utf-8"
    text = resp.text
    log.debug(f"fetch_csv: {len(text)} chars from tab {tab_id}")
    return text
