"""
Paginated fetch of the upstream message listing.

Pages are requested in fixed-size batches. Each page gets a small retry
budget for transient failures, and once at least one page has landed a later
failure ends pagination with whatever was gathered instead of failing the
whole fetch.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

import httpx
from pydantic import ValidationError
from tenacity import AsyncRetrying, retry_if_result, stop_after_attempt, wait_fixed

from aurora_qa.core.config import settings
from aurora_qa.exceptions import ConfigurationError, FetchError
from aurora_qa.schemas import FetchBatch, MessageItem

logger = logging.getLogger(__name__)


class PageStatus(str, Enum):
    """Outcome class of a single page request."""
    OK = "ok"
    CLIENT_ERROR = "client_error"  # 4xx
    SERVER_ERROR = "server_error"  # 5xx
    TRANSPORT_ERROR = "transport_error"  # network, timeout, bad payload


@dataclass
class PageResult:
    """Result of requesting one page, after retries."""
    status: PageStatus
    skip: int
    items: List[MessageItem] = field(default_factory=list)
    raw_count: int = 0
    total: int = 0
    status_code: Optional[int] = None
    error: Optional[str] = None
    attempts: int = 1

    @property
    def ok(self) -> bool:
        return self.status is PageStatus.OK

    @property
    def retryable(self) -> bool:
        return self.status in (PageStatus.SERVER_ERROR, PageStatus.TRANSPORT_ERROR)


@dataclass
class FetchResult:
    """Messages gathered by a full pagination run."""
    messages: List[MessageItem]
    partial: bool = False
    pages: int = 0
    stop_reason: Optional[str] = None


class MessageFetcher:
    """Fetches every message from the upstream API, one batch at a time."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        batch_size: Optional[int] = None,
        max_retries: Optional[int] = None,
        retry_delay: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.timeout = settings.EXTERNAL_API_TIMEOUT if timeout is None else timeout
        self.batch_size = batch_size or settings.FETCH_BATCH_SIZE
        self.max_retries = max(1, max_retries or settings.FETCH_MAX_RETRIES)
        self.retry_delay = settings.FETCH_RETRY_DELAY if retry_delay is None else retry_delay
        self.transport = transport

    @property
    def url(self) -> str:
        if self.base_url:
            url = f"{self.base_url.rstrip('/')}{settings.EXTERNAL_API_ENDPOINT}"
        else:
            url = settings.messages_url

        try:
            httpx.URL(url)
        except httpx.InvalidURL as e:
            raise ConfigurationError(f"Invalid upstream URL '{url}': {e}")
        return url

    async def fetch_all(self) -> FetchResult:
        """
        Walk the listing until a short or empty page, or the reported total.

        Returns:
            FetchResult, flagged partial when a later page failed

        Raises:
            ConfigurationError: If no base URL is configured
            FetchError: If no page could be fetched at all
        """
        url = self.url
        messages: List[MessageItem] = []
        pages = 0
        skip = 0

        async with httpx.AsyncClient(follow_redirects=True, transport=self.transport) as client:
            while True:
                page = await self.fetch_page(client, url, skip)

                if not page.ok:
                    if pages == 0:
                        logger.error(
                            f"[Fetch] First page failed after {page.attempts} attempt(s): {page.error}"
                        )
                        raise FetchError(f"Failed to fetch messages: {page.error}")

                    if not messages:
                        logger.error(
                            f"[Fetch] Page at skip={skip} failed ({page.error}) with no usable messages gathered"
                        )
                        raise FetchError(f"Failed to fetch messages: {page.error}")

                    if page.status is PageStatus.CLIENT_ERROR:
                        logger.info(
                            f"[Fetch] Page at skip={skip} returned {page.status_code}; treating as end of data"
                        )
                    else:
                        logger.warning(
                            f"[Fetch] Page at skip={skip} failed ({page.error}); "
                            f"keeping {len(messages)} messages from {pages} page(s)"
                        )
                    return FetchResult(messages, partial=True, pages=pages, stop_reason=page.error)

                pages += 1
                messages.extend(page.items)

                if page.raw_count < self.batch_size:
                    break

                skip += self.batch_size
                if page.total > 0 and skip >= page.total:
                    break

        logger.info(f"[Fetch] Loaded {len(messages)} messages in {pages} page(s)")
        return FetchResult(messages, partial=False, pages=pages)

    async def fetch_page(self, client: httpx.AsyncClient, url: str, skip: int) -> PageResult:
        """Request one page, retrying transient failures with a fixed delay."""
        attempts = 0

        async def attempt_page() -> PageResult:
            nonlocal attempts
            attempts += 1
            page = await self._request_page(client, url, skip)
            page.attempts = attempts
            return page

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_fixed(self.retry_delay),
            retry=retry_if_result(lambda page: page.retryable),
            before_sleep=self._log_retry,
            retry_error_callback=lambda state: state.outcome.result(),
            reraise=True,
        )
        return await retrying(attempt_page)

    def _log_retry(self, retry_state) -> None:
        page = retry_state.outcome.result()
        logger.warning(
            f"[Fetch] skip={page.skip} attempt {retry_state.attempt_number}/{self.max_retries} "
            f"failed: {page.error}; retrying in {self.retry_delay}s"
        )

    async def _request_page(self, client: httpx.AsyncClient, url: str, skip: int) -> PageResult:
        logger.debug(f"[Fetch] GET {url} skip={skip} limit={self.batch_size}")
        try:
            response = await client.get(
                url,
                params={"skip": skip, "limit": self.batch_size},
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except httpx.TimeoutException as e:
            return PageResult(PageStatus.TRANSPORT_ERROR, skip, error=f"Request timed out: {e}")
        except httpx.HTTPError as e:
            return PageResult(PageStatus.TRANSPORT_ERROR, skip, error=f"Request failed: {e}")

        if response.status_code >= 500:
            return PageResult(
                PageStatus.SERVER_ERROR, skip,
                status_code=response.status_code,
                error=f"Upstream returned {response.status_code}",
            )
        if response.status_code >= 400:
            return PageResult(
                PageStatus.CLIENT_ERROR, skip,
                status_code=response.status_code,
                error=f"Upstream returned {response.status_code}",
            )

        try:
            batch = FetchBatch.model_validate(response.json())
        except ValueError as e:
            return PageResult(
                PageStatus.TRANSPORT_ERROR, skip,
                status_code=response.status_code,
                error=f"Malformed payload: {e}",
            )

        return PageResult(
            PageStatus.OK, skip,
            items=self._parse_items(batch.items),
            raw_count=len(batch.items),
            total=batch.total or 0,
            status_code=response.status_code,
        )

    def _parse_items(self, raw_items: list) -> List[MessageItem]:
        items = []
        for raw in raw_items:
            try:
                items.append(MessageItem.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"[Fetch] Skipping malformed message: {e.errors()[:1]}")
        return items
