"""
Shared fixtures: message factories, a fake paginated upstream and a fake fetcher.
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from aurora_qa.schemas import MessageItem
from aurora_qa.services import get_qa_service
from aurora_qa.services.fetcher import FetchResult, MessageFetcher

BASE_URL = "http://upstream.test"


def make_message(idx, user_name="Vikram Desai", message="Hello there", user_id=None):
    return MessageItem(
        id=f"msg-{idx}",
        user_id=user_id or f"user-{user_name.lower().replace(' ', '-')}",
        user_name=user_name,
        timestamp=f"2025-01-{(idx % 28) + 1:02d}T10:00:00Z",
        message=message,
    )


class FakeUpstream:
    """
    Serves ``items`` as the /messages/ listing.

    ``failures`` maps a skip offset to a list of outcomes (an HTTP status code
    or an exception instance) consumed one per request; once the list is
    empty the page is served normally.
    """

    def __init__(self, items, failures=None, report_total=True):
        self.items = [i.model_dump() if isinstance(i, MessageItem) else i for i in items]
        self.failures = {k: list(v) for k, v in (failures or {}).items()}
        self.report_total = report_total
        self.calls = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        skip = int(request.url.params["skip"])
        limit = int(request.url.params["limit"])
        self.calls.append(skip)

        pending = self.failures.get(skip)
        if pending:
            outcome = pending.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return httpx.Response(outcome, json={"detail": "nope"})

        return httpx.Response(
            200,
            json={
                "total": len(self.items) if self.report_total else 0,
                "items": self.items[skip:skip + limit],
            },
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def fetcher(self, batch_size=2, max_retries=3) -> MessageFetcher:
        return MessageFetcher(
            base_url=BASE_URL,
            timeout=1,
            batch_size=batch_size,
            max_retries=max_retries,
            retry_delay=0,
            transport=self.transport,
        )


class FakeFetcher:
    """Stand-in for MessageFetcher that counts calls and can be held open."""

    def __init__(self, messages=(), partial=False, error=None, gate=None):
        self.messages = list(messages)
        self.partial = partial
        self.error = error
        self.gate = gate
        self.calls = 0

    async def fetch_all(self) -> FetchResult:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return FetchResult(list(self.messages), partial=self.partial, pages=1)


@pytest.fixture
def message_factory():
    return make_message


@pytest.fixture
def upstream_factory():
    return FakeUpstream


@pytest.fixture
def fake_fetcher_factory():
    return FakeFetcher


@pytest.fixture
def client_for():
    """Build a TestClient whose routes use the given QAService."""
    from main import app

    def _build(service):
        app.dependency_overrides[get_qa_service] = lambda: service
        return TestClient(app)

    yield _build
    app.dependency_overrides.clear()
