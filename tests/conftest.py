"""
Test configuration and fixtures for the RentPay API tests.
"""

import json
from typing import Callable, Dict, List
from unittest.mock import AsyncMock

import httpx
import pytest
from faker import Faker
from fastapi.testclient import TestClient

from rentpay.config import Settings
from rentpay.identity import StaticIdentityResolver
from rentpay.main import create_app
from rentpay.processor import ProcessorClient
from rentpay.repositories import InMemoryAccountDirectory, InMemoryPaymentLedger

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_BASE_URL = "https://processor.test"

fake = Faker()


@pytest.fixture
def caller_id() -> str:
    return f"user_{fake.uuid4()[:8]}"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        environment="development",
        processor_base_url=TEST_BASE_URL,
        processor_secret_key="sk_test_secret",
        storage_backend="memory",
        auth_mode="static",
        static_user_id="user_123",
    )


@pytest.fixture
def directory() -> InMemoryAccountDirectory:
    return InMemoryAccountDirectory()


@pytest.fixture
def ledger() -> InMemoryPaymentLedger:
    return InMemoryPaymentLedger()


@pytest.fixture
def mock_processor():
    """Processor client double; succeeds with id px_1 by default."""
    processor = AsyncMock(spec=ProcessorClient)
    processor.has_credentials = True
    processor.get_account.return_value = {"id": "acm_test123"}
    processor.create_payment_request.return_value = {"id": "px_1", "status": "succeeded"}
    return processor


class RecordingTransport:
    """httpx.MockTransport wrapper that records requests and replays a handler."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.handler = handler
        self.requests: List[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def json_bodies(self) -> List[Dict]:
        return [json.loads(r.content) for r in self.requests if r.content]


@pytest.fixture
def processor_responses():
    """Mutable route table for the fake processor: (method, path) -> response."""
    return {
        ("POST", "/payments/v1/payment-requests"): httpx.Response(200, json={"id": "px_1"}),
    }


@pytest.fixture
def recording_transport(processor_responses) -> RecordingTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        response = processor_responses.get((request.method, request.url.path))
        if response is None:
            return httpx.Response(404, json={"message": "Not found"})
        if isinstance(response, Exception):
            raise response
        return response

    return RecordingTransport(handler)


@pytest.fixture
def processor(recording_transport) -> ProcessorClient:
    return ProcessorClient(
        base_url=TEST_BASE_URL,
        secret_key="sk_test_secret",
        timeout=5.0,
        transport=recording_transport.transport,
    )


@pytest.fixture
def app(settings, processor):
    return create_app(settings, processor=processor)


@pytest.fixture
def client(app):
    """Create test client."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def anonymous_client(settings, processor):
    """Client whose requests carry no caller identity."""
    app = create_app(settings, processor=processor, identity_resolver=StaticIdentityResolver(None))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """Setup test environment variables."""
    monkeypatch.setenv("TESTING", "true")
    monkeypatch.setenv("DATABASE_URL", TEST_DATABASE_URL)
