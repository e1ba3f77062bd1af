"""Bounded-concurrency liveness checks for hyperlink URLs.

This module provides the UrlChecker class. URLs are deduplicated
case-insensitively before anything is sent, so each distinct URL gets exactly
one GET no matter how many links share it. Probes run on a thread pool capped
at MAX_WORKERS; results are written back to every Link in the URL's group from
the coordinating thread as each probe completes.

A URL is live only when the response status is exactly 200. Redirects, error
statuses, timeouts, DNS and TLS failures all mark the URL broken. There are no
retries.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Dict, List, Optional

import requests
from requests.exceptions import (
    ConnectionError,
    RequestException,
    SSLError,
    Timeout,
    TooManyRedirects,
)

from src.vsdx_package.models import Link

from .errors import NetworkFailure
from .models import ProbeResult

logger = logging.getLogger(__name__)

# Maximum parallel probes
MAX_WORKERS = 8

# Per-probe timeout in seconds
DEFAULT_TIMEOUT = 15.0

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:128.0) "
    "Gecko/20100101 Firefox/128.0"
)

HTTP_OK = 200


def url_key(url: str) -> str:
    """Case-insensitive identity of a URL string."""
    return url.casefold()


def build_url_index(links: List[Link]) -> Dict[str, List[Link]]:
    """Group links by case-insensitive URL, in first-seen order.

    The index is built once before probing starts and is only read while
    probes are in flight.
    """
    index: Dict[str, List[Link]] = {}
    for link in links:
        index.setdefault(url_key(link.url), []).append(link)
    return index


class UrlChecker:
    """Probes distinct URLs in parallel and flags broken links.

    Example:
        >>> checker = UrlChecker(max_workers=8, timeout=15)
        >>> results = checker.check(extraction.links)
        >>> [r.url for r in results if not r.live]
        ['http://gone.example/']
    """

    def __init__(
        self,
        max_workers: int = MAX_WORKERS,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        follow_redirects: bool = False,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ):
        """Initialize the checker.

        Args:
            max_workers: Maximum number of probes in flight at once
            timeout: Connect and read timeout for each probe, in seconds
            user_agent: Browser User-Agent sent with every probe
            follow_redirects: Follow redirects instead of treating them as broken
            session_factory: Creates one HTTP session per worker thread
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")

        self.max_workers = max_workers
        self.timeout = timeout
        self.user_agent = user_agent
        self.follow_redirects = follow_redirects
        self._session_factory = session_factory
        self._local = threading.local()
        self._sessions: List[requests.Session] = []
        self._sessions_lock = threading.Lock()

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Encoding": "gzip, deflate",
        }

    def check(
        self,
        links: List[Link],
        on_result: Optional[Callable[[ProbeResult], None]] = None,
    ) -> List[ProbeResult]:
        """Probe every distinct URL once and set ``broken`` on all links.

        Args:
            links: Links to check; their ``broken`` flags are updated
            on_result: Optional callback run after each probe (progress display)

        Returns:
            ProbeResult per distinct URL, in first-seen order
        """
        index = build_url_index(links)
        if not index:
            return []

        logger.info(f"Processing unique hyperlinks ({len(index)}) with {self.max_workers} worker(s)")
        results: Dict[str, ProbeResult] = {}

        try:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = {
                    executor.submit(self.probe, group[0].url): key
                    for key, group in index.items()
                }

                for future in as_completed(futures):
                    key = futures[future]
                    group = index[key]
                    result = future.result()
                    result.link_count = len(group)

                    for link in group:
                        link.broken = not result.live

                    if result.live:
                        logger.debug(f"  ✓ {result.url}")
                    else:
                        logger.warning(f"Broken: {result.url} ({result.reason})")

                    results[key] = result
                    if on_result:
                        on_result(result)
        finally:
            self._close_sessions()

        broken = sum(1 for result in results.values() if not result.live)
        logger.info(f"Link check complete: {len(results)} URL(s) probed, {broken} broken")
        return [results[key] for key in index]

    def probe(self, url: str) -> ProbeResult:
        """Send one GET for a URL and classify the outcome.

        Never raises: every failure becomes a broken ProbeResult.
        """
        try:
            status_code = self._fetch_status(url)
            if status_code != HTTP_OK:
                raise NetworkFailure(url, f"HTTP {status_code}", status_code)
        except NetworkFailure as e:
            return ProbeResult(url=url, live=False, status_code=e.status_code, reason=e.reason)
        except Exception as e:
            logger.debug(f"Unexpected error probing {url}: {e!r}")
            return ProbeResult(url=url, live=False, reason=str(e) or type(e).__name__)

        return ProbeResult(url=url, live=True, status_code=status_code)

    def _fetch_status(self, url: str) -> int:
        session = self._thread_session()
        try:
            response = session.get(
                url,
                headers=self.headers,
                timeout=self.timeout,
                allow_redirects=self.follow_redirects,
                stream=True,
            )
        except Timeout:
            raise NetworkFailure(url, f"timed out after {self.timeout}s")
        except SSLError as e:
            raise NetworkFailure(url, f"TLS error: {e}")
        except ConnectionError as e:
            raise NetworkFailure(url, f"connection failed: {e}")
        except TooManyRedirects:
            raise NetworkFailure(url, "too many redirects")
        except RequestException as e:
            raise NetworkFailure(url, str(e) or type(e).__name__)

        try:
            return response.status_code
        finally:
            response.close()

    def _thread_session(self) -> requests.Session:
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._session_factory()
            self._local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session

    def _close_sessions(self) -> None:
        with self._sessions_lock:
            for session in self._sessions:
                session.close()
            self._sessions = []
        self._local = threading.local()
