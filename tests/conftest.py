import httpx
import pytest
from fastapi.testclient import TestClient

from investor_intake.config import Settings, get_settings
from investor_intake.main import app
from investor_intake.routers.submissions import get_dispatcher
from investor_intake.services.telegram_service import SubmissionDispatcher


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def jane_upi():
    return {
        "name": "Jane Doe",
        "email": "jane@x.com",
        "country": "india",
        "paymentMethod": "upi",
        "upiId": "jane@upi",
        "agreedToTerms": True,
    }


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        telegram_bot_token="123:secret-token",
        telegram_chat_id="-1001",
    )


class FakeTelegram:
    """Records outbound requests and answers with a canned response"""

    def __init__(self, status_code=200, error=None):
        self.status_code = status_code
        self.error = error
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.status_code >= 400:
            return httpx.Response(self.status_code, json={"ok": False, "description": "Bad Request: chat not found"})
        return httpx.Response(self.status_code, json={"ok": True, "result": {"message_id": 1}})

    @property
    def transport(self):
        return httpx.MockTransport(self)


@pytest.fixture
def fake_telegram():
    return FakeTelegram


@pytest.fixture
def make_client(settings):
    def _make(fake, client_settings=None):
        effective = client_settings or settings
        app.dependency_overrides[get_settings] = lambda: effective
        app.dependency_overrides[get_dispatcher] = lambda: SubmissionDispatcher(effective, transport=fake.transport)
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()
