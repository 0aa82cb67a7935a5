"""
Stage 2: Search Provider
========================
Issues one query against the Exa search API and returns ranked candidate
documents (url, title, text snippet).

The client raises on provider failure; SearchStage is the fail-open wrapper
the orchestrator uses, turning any provider error into zero candidates.
Authentication failures are the exception: they propagate so the lane fails.
"""

import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Dict, Any

import requests

from ..models.schemas import SearchCandidate
from ..config.settings import SEARCH_CONFIG
from ..errors import SearchAuthError, SearchProviderError

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS = {429, 500, 502, 503, 504}


@dataclass
class BackoffPolicy:
    max_attempts: int = 2
    base_delay_ms: int = 250
    max_delay_ms: int = 4000

    def delay_seconds(self, attempt: int) -> float:
        # exponential backoff with jitter
        delay = min(self.max_delay_ms, self.base_delay_ms * (2 ** (attempt - 1)))
        delay = delay * (0.8 + 0.4 * random.random())
        return delay / 1000.0


class ExaSearchClient:
    """
    Thin client for the Exa /search endpoint.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        config: Optional[Dict[str, Any]] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = {**SEARCH_CONFIG, **(config or {})}
        self.api_key = api_key if api_key is not None else self.config.get("api_key")
        self.session = session or requests.Session()
        self.policy = BackoffPolicy(
            max_attempts=max(1, int(self.config["max_attempts"])),
            base_delay_ms=self.config["base_delay_ms"],
            max_delay_ms=self.config["max_delay_ms"],
        )
        self._sleep = sleep

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def search(self, query: str) -> List[SearchCandidate]:
        """
        Run one query.

        Raises:
            SearchAuthError: credentials rejected (401/403)
            SearchProviderError: any other failure after retries
        """
        if not self.configured:
            logger.warning("No EXA_API_KEY configured, returning no results for %r", query)
            return []

        attempt = 0
        while True:
            attempt += 1
            try:
                return self._search_once(query)
            except SearchAuthError:
                raise
            except SearchProviderError as e:
                retryable = e.status_code is None or e.status_code in _RETRYABLE_STATUS
                if not retryable or attempt >= self.policy.max_attempts:
                    raise
                delay = self.policy.delay_seconds(attempt)
                logger.info(
                    "Exa search attempt %d/%d failed (%s), retrying in %.2fs",
                    attempt, self.policy.max_attempts, e, delay,
                )
                self._sleep(delay)

    def _search_once(self, query: str) -> List[SearchCandidate]:
        payload = {
            "query": query,
            "type": self.config["search_type"],
            "numResults": self.config["num_results"],
            "includeDomains": list(self.config["include_domains"]),
            "contents": {"text": {"maxCharacters": self.config["max_characters"]}},
        }
        try:
            response = self.session.post(
                f"{self.config['base_url'].rstrip('/')}/search",
                json=payload,
                headers={"Content-Type": "application/json", "x-api-key": self.api_key},
                timeout=self.config["timeout_seconds"],
            )
        except requests.Timeout as e:
            raise SearchProviderError(f"Exa search timed out: {e}") from e
        except requests.RequestException as e:
            raise SearchProviderError(f"Exa request failed: {e}") from e

        if response.status_code in (401, 403):
            raise SearchAuthError(
                f"Exa rejected credentials (HTTP {response.status_code})",
                status_code=response.status_code,
            )
        if not response.ok:
            raise SearchProviderError(
                f"Exa API error: HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise SearchProviderError(f"Exa returned invalid JSON: {e}") from e

        return self._parse_results(data)

    def _parse_results(self, data: Dict[str, Any]) -> List[SearchCandidate]:
        candidates = []
        for item in (data or {}).get("results") or []:
            url = item.get("url")
            if not url:
                continue
            candidates.append(SearchCandidate(
                url=url,
                title=item.get("title"),
                text=item.get("text"),
            ))
        return candidates[: self.config["num_results"]]


class SearchStage:
    """
    Stage 2: Fail-open search for one query.
    """

    def __init__(self, client: Optional[ExaSearchClient] = None):
        self.client = client or ExaSearchClient()
        self.failures = 0

    def process(self, query: str) -> List[SearchCandidate]:
        """
        Fetch candidates for a query.

        Provider failures are logged and count as zero candidates.
        SearchAuthError is re-raised.
        """
        try:
            return list(self.client.search(query))
        except SearchAuthError:
            raise
        except SearchProviderError as e:
            self.failures += 1
            logger.error("Search failed for %r: %s", query, e)
            return []
        except Exception as e:
            self.failures += 1
            logger.exception("Unexpected search error for %r: %s", query, e)
            return []
